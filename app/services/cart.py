"""
In-memory cart aggregation.

A Cart accumulates line items, merging an incoming line into an existing one
when both reference the same menu item with an identical option set. Totals
are derived on every read, so they are always consistent with the lines.

Option sets are compared by value in the order the producer gives them:
callers must build SelectedOptions in a canonical order (see
SelectedOptions.canonical) or equal selections may fail to merge.
"""

import json
from dataclasses import dataclass, field, asdict
from decimal import Decimal
from uuid import uuid4

from app.core.exceptions import ValidationException


@dataclass(frozen=True)
class SelectedModifier:
    """Options chosen within one modifier group"""

    group_id: int
    group_name: str
    option_ids: tuple[int, ...] = ()
    option_labels: tuple[str, ...] = ()
    price_modifier: Decimal = Decimal("0")


@dataclass(frozen=True)
class SelectedOptions:
    size: str | None = None
    milk: str | None = None
    sweetener: str | None = None
    flavor: str | None = None
    extras: tuple[str, ...] = ()
    modifiers: tuple[SelectedModifier, ...] = ()

    @classmethod
    def canonical(
        cls,
        size: str | None = None,
        milk: str | None = None,
        sweetener: str | None = None,
        flavor: str | None = None,
        extras: list[str] | tuple[str, ...] = (),
        modifiers: list[SelectedModifier] | tuple[SelectedModifier, ...] = (),
    ) -> "SelectedOptions":
        """Build an option set with extras and modifiers in a stable order."""
        ordered_modifiers = []
        for modifier in sorted(modifiers, key=lambda m: m.group_id):
            pairs = sorted(zip(modifier.option_ids, modifier.option_labels))
            ordered_modifiers.append(
                SelectedModifier(
                    group_id=modifier.group_id,
                    group_name=modifier.group_name,
                    option_ids=tuple(option_id for option_id, _ in pairs),
                    option_labels=tuple(label for _, label in pairs),
                    price_modifier=modifier.price_modifier,
                )
            )
        return cls(
            size=size,
            milk=milk,
            sweetener=sweetener,
            flavor=flavor,
            extras=tuple(sorted(extras)),
            modifiers=tuple(ordered_modifiers),
        )

    @property
    def price_modifier(self) -> Decimal:
        return sum((m.price_modifier for m in self.modifiers), Decimal("0"))

    def serialize(self) -> str:
        """Serialized form used to decide whether two lines merge."""
        return json.dumps(asdict(self), default=str)


@dataclass
class CartLineItem:
    """
    One merged selection of a menu item plus its option set.

    unit_price is fixed when the line is first inserted; later merges only
    change quantity.
    """

    menu_item_id: int
    menu_item_name: str
    unit_price: Decimal
    quantity: int = 1
    options: SelectedOptions = field(default_factory=SelectedOptions)
    id: str = field(default_factory=lambda: uuid4().hex)

    @property
    def total_price(self) -> Decimal:
        return self.unit_price * self.quantity

    def matches(self, other: "CartLineItem") -> bool:
        return (
            self.menu_item_id == other.menu_item_id
            and self.options.serialize() == other.options.serialize()
        )


def unit_price_for(base_price: Decimal, options: SelectedOptions) -> Decimal:
    """Base (or size variant) price plus all option price modifiers."""
    return Decimal(base_price) + options.price_modifier


class Cart:
    """Reducer over add / update / remove / clear events"""

    def __init__(self):
        self.items: list[CartLineItem] = []

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_price(self) -> Decimal:
        return sum((item.total_price for item in self.items), Decimal("0"))

    def get(self, line_id: str) -> CartLineItem | None:
        return next((item for item in self.items if item.id == line_id), None)

    def add_item(self, line: CartLineItem) -> CartLineItem:
        """
        Add a line, merging into an existing line with the same item and options.

        Returns:
            The line that now holds the quantity (existing or newly appended)

        Raises:
            ValidationException: If quantity is not a positive integer
        """
        if line.quantity <= 0:
            raise ValidationException("Quantity must be a positive integer")

        for existing in self.items:
            if existing.matches(line):
                existing.quantity += line.quantity
                return existing

        self.items.append(line)
        return line

    def update_quantity(self, line_id: str, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line."""
        if quantity <= 0:
            self.remove_item(line_id)
            return

        line = self.get(line_id)
        if line is not None:
            line.quantity = quantity

    def remove_item(self, line_id: str) -> None:
        """Remove a line; unknown ids are ignored."""
        self.items = [item for item in self.items if item.id != line_id]

    def clear(self) -> None:
        self.items = []
