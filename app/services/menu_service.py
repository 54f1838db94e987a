"""Public, host-resolved menu reads and order submission."""

import logging
from datetime import datetime, UTC
from decimal import Decimal

from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import NotFoundException, ValidationException
from app.models.menu_item import MenuItem
from app.models.modifier_group import ModifierGroup, ModifierType
from app.models.tenant import Tenant
from app.repositories.category_repository import CategoryRepository
from app.repositories.menu_item_repository import MenuItemRepository
from app.repositories.promotion_repository import PromotionRepository
from app.schemas.order_schemas import OrderLineInput, OrderRequest, ModifierSelection
from app.services.cart import Cart, CartLineItem, SelectedModifier, SelectedOptions, unit_price_for
from app.services.order_notifier import OrderNotifier, format_order_message

logger = logging.getLogger(__name__)


def _public_item(item: MenuItem) -> dict:
    return {
        "id": item.id,
        "name": item.name,
        "description": item.description,
        "price": float(item.price),
        "image_url": item.image_url,
        "tags": item.tags or [],
        "portion": item.portion,
        "variants": item.variants or [],
        "modifier_groups": [group for group in item.modifier_groups if group.is_active],
    }


def _public_category(category, items: list[MenuItem]) -> dict:
    return {
        "id": category.id,
        "name": category.name,
        "icon": category.icon,
        "items": [_public_item(item) for item in items if item.is_available],
    }


class MenuService:
    """
    Read side of the public menu for one resolved restaurant.

    The tenant always comes from the resolver, never from the client.
    """

    def __init__(self, db: Session, tenant: Tenant):
        self.db = db
        self.tenant = tenant
        self.category_repo = CategoryRepository(db, tenant.id)
        self.item_repo = MenuItemRepository(db, tenant.id)
        self.promotion_repo = PromotionRepository(db, tenant.id)

    def get_menu(self) -> list[dict]:
        """Active categories with their available items, in display order"""
        return [
            _public_category(category, category.items)
            for category in self.category_repo.list_active_with_items()
        ]

    def get_category(self, category_id: int) -> dict:
        """
        Raises:
            NotFoundException: If the category is missing, inactive or another restaurant's
        """
        category = self.category_repo.get_by_id(category_id)
        if not category or not category.is_active:
            raise NotFoundException("Category not found")
        return _public_category(category, self.item_repo.list_by_category(category.id))

    def list_promotions(self, now: datetime | None = None):
        return self.promotion_repo.list_visible(now or datetime.now(UTC))

    def _select_modifiers(
        self, item: MenuItem, selections: list[ModifierSelection]
    ) -> list[SelectedModifier]:
        """
        Validate modifier choices against the item's active groups.

        Raises:
            ValidationException: On unknown groups/options or violated selection bounds
        """
        groups: dict[int, ModifierGroup] = {
            group.id: group for group in item.modifier_groups if group.is_active
        }
        chosen: dict[int, list[int]] = {}
        for selection in selections:
            if selection.group_id not in groups:
                raise ValidationException(f"Invalid modifier group for {item.name}")
            chosen.setdefault(selection.group_id, []).extend(selection.option_ids)

        selected = []
        for group in groups.values():
            option_ids = list(dict.fromkeys(chosen.get(group.id, [])))
            minimum = max(group.min_selections, 1 if group.required else 0)
            maximum = group.max_selections
            if maximum is None and group.type != ModifierType.MULTIPLE:
                maximum = 1

            if len(option_ids) < minimum:
                raise ValidationException(f"{group.name} is required for {item.name}")
            if maximum is not None and len(option_ids) > maximum:
                raise ValidationException(
                    f"At most {maximum} selection(s) allowed for {group.name}"
                )
            if not option_ids:
                continue

            options = {option.id: option for option in group.options}
            unknown = [option_id for option_id in option_ids if option_id not in options]
            if unknown:
                raise ValidationException(f"Invalid option for {group.name}")

            picked = [options[option_id] for option_id in option_ids]
            selected.append(
                SelectedModifier(
                    group_id=group.id,
                    group_name=group.name,
                    option_ids=tuple(option.id for option in picked),
                    option_labels=tuple(option.label for option in picked),
                    price_modifier=sum(
                        (Decimal(option.price_modifier) for option in picked), Decimal("0")
                    ),
                )
            )
        return selected

    def _build_line(self, line: OrderLineInput) -> CartLineItem:
        item = self.item_repo.get_available(line.menu_item_id)
        if not item:
            raise ValidationException(f"Menu item {line.menu_item_id} is not available")

        base_price = Decimal(item.price)
        if line.size is not None:
            variant_price = item.variant_price(line.size)
            if variant_price is None:
                raise ValidationException(f"Size '{line.size}' is not offered for {item.name}")
            base_price = variant_price

        options = SelectedOptions.canonical(
            size=line.size,
            milk=line.milk,
            sweetener=line.sweetener,
            flavor=line.flavor,
            extras=line.extras,
            modifiers=self._select_modifiers(item, line.modifiers),
        )
        return CartLineItem(
            menu_item_id=item.id,
            menu_item_name=item.name,
            unit_price=unit_price_for(base_price, options),
            quantity=line.quantity,
            options=options,
        )

    def build_cart(self, order: OrderRequest) -> Cart:
        """Price every line from the menu and merge identical selections"""
        cart = Cart()
        for line in order.items:
            cart.add_item(self._build_line(line))
        return cart

    def submit_order(self, order: OrderRequest, notifier: OrderNotifier) -> Cart:
        """
        Build the cart and relay it to the restaurant.

        Raises:
            ValidationException: If any line is invalid
            UpstreamServiceException: If the relay fails
        """
        cart = self.build_cart(order)
        message = format_order_message(
            restaurant_name=self.tenant.restaurant_name,
            table_number=order.table_number,
            cart=cart,
            currency=settings.STRIPE_CURRENCY,
            submitted_at=datetime.now(UTC),
        )
        notifier.send(message)
        logger.info(
            "Order for table %s sent for tenant %s (%s items)",
            order.table_number,
            self.tenant.id,
            cart.total_items,
        )
        return cart
