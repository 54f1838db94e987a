import pytest
from decimal import Decimal

from app.core.exceptions import ValidationException
from app.services.cart import (
    Cart,
    CartLineItem,
    SelectedModifier,
    SelectedOptions,
    unit_price_for,
)


def latte_line(quantity=1, size="medium", extras=()):
    return CartLineItem(
        menu_item_id=1,
        menu_item_name="Latte",
        unit_price=Decimal("55.00"),
        quantity=quantity,
        options=SelectedOptions.canonical(size=size, milk="oat", extras=list(extras)),
    )


class TestAddItem:
    """Tests for Cart.add_item merge behavior"""

    def test_identical_selection_merges_quantity(self):
        """Same item and options produce one line with summed quantity"""
        cart = Cart()
        cart.add_item(latte_line(quantity=1))
        cart.add_item(latte_line(quantity=2))

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3
        assert cart.total_items == 3
        assert cart.total_price == Decimal("165.00")

    def test_different_size_keeps_separate_lines(self):
        cart = Cart()
        cart.add_item(latte_line(size="medium"))
        cart.add_item(latte_line(size="large"))

        assert len(cart.items) == 2
        assert cart.total_items == 2

    def test_extras_order_does_not_prevent_merge(self):
        """Canonical option sets compare equal regardless of input order"""
        cart = Cart()
        cart.add_item(latte_line(extras=["vanilla", "extra shot"]))
        cart.add_item(latte_line(extras=["extra shot", "vanilla"]))

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    def test_merge_keeps_first_unit_price(self):
        cart = Cart()
        first = cart.add_item(latte_line())
        later = latte_line()
        later.unit_price = Decimal("99.00")
        merged = cart.add_item(later)

        assert merged is first
        assert merged.unit_price == Decimal("55.00")

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_rejected(self, quantity):
        cart = Cart()
        with pytest.raises(ValidationException) as exc_info:
            cart.add_item(latte_line(quantity=quantity))
        assert "positive" in str(exc_info.value)
        assert cart.items == []


class TestUpdateAndRemove:
    """Tests for quantity updates, removal and clearing"""

    def test_update_quantity(self):
        cart = Cart()
        line = cart.add_item(latte_line())
        cart.update_quantity(line.id, 4)

        assert cart.items[0].quantity == 4
        assert cart.total_price == Decimal("220.00")

    def test_update_to_zero_removes_line(self):
        cart = Cart()
        line = cart.add_item(latte_line())
        cart.add_item(latte_line(size="large"))
        cart.update_quantity(line.id, 0)

        assert len(cart.items) == 1
        assert cart.items[0].options.size == "large"

    def test_remove_unknown_line_is_noop(self):
        cart = Cart()
        cart.add_item(latte_line())
        cart.remove_item("does-not-exist")

        assert len(cart.items) == 1

    def test_clear(self):
        cart = Cart()
        cart.add_item(latte_line())
        cart.clear()

        assert cart.items == []
        assert cart.total_items == 0
        assert cart.total_price == Decimal("0")


class TestPricing:
    """Tests for unit price computation from option modifiers"""

    def test_modifiers_add_to_base_price(self):
        options = SelectedOptions.canonical(
            modifiers=[
                SelectedModifier(
                    group_id=2,
                    group_name="Extras",
                    option_ids=(5, 4),
                    option_labels=("Vanilla", "Extra shot"),
                    price_modifier=Decimal("20.00"),
                ),
                SelectedModifier(
                    group_id=1,
                    group_name="Milk",
                    option_ids=(2,),
                    option_labels=("Oat",),
                    price_modifier=Decimal("10.00"),
                ),
            ]
        )

        assert unit_price_for(Decimal("65.00"), options) == Decimal("95.00")
        # Groups and options are sorted by id
        assert [m.group_id for m in options.modifiers] == [1, 2]
        assert options.modifiers[1].option_labels == ("Extra shot", "Vanilla")
