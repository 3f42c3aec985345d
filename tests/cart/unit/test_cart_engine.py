"""
Unit Tests: Cart Engine Operations

Tests for services/cart.py covering the pure cart operations:
- add_line() - identity rule (plain lines merge, customized lines never merge)
- set_quantity() / remove_line() / clear()
- unit_price() / price_line() / cart_total() / item_count()
- round_amount() / format_amount()
- reconcile() / from_records() against a catalog snapshot

Run with:
    pytest tests/cart/unit/test_cart_engine.py -v
"""

from decimal import Decimal
from itertools import permutations

import pytest

from enums.currency import Currency
from models.cart import (
    Cart, CartLine, ChosenOption, Customization, MultiSelect, SingleSelect, StoredCartLineDTO, StoredCustomizationDTO
)
from models.catalog_snapshot import CatalogSnapshotDTO
from models.customization import CategoryCustomizationDTO, CustomizationCategoryDTO, CustomizationOptionDTO
from models.menu_item import CatalogItemDTO
from services.cart import CartService


def make_item(item_id: int = 1, name: str = "Margherita Pizza", price: str = "299",
              category: str = "Italian") -> CatalogItemDTO:
    return CatalogItemDTO(id=item_id, name=name, price=Decimal(price), image="🍕",
                          category=category, rating=4.8, popular=True)


def toppings(*names: str, price: str = "20") -> Customization:
    return Customization(selections={
        "extra_toppings": MultiSelect(options=tuple(ChosenOption(name=n, price_adjustment=Decimal(price))
                                                    for n in names))
    })


def italian_customizations(active_toppings=("cheese", "olives", "mushrooms")) -> tuple[CategoryCustomizationDTO, ...]:
    spice = CategoryCustomizationDTO(
        id=1, menu_category="Italian", max_selections=1, sort_order=0,
        customization_category=CustomizationCategoryDTO(id=1, name="spice_level", display_name="Spice Level"),
        options=(
            CustomizationOptionDTO(id=1, category_id=1, name="mild", display_name="Mild"),
            CustomizationOptionDTO(id=2, category_id=1, name="hot", display_name="Hot",
                                   price_adjustment=Decimal("5")),
        )
    )
    extra = CategoryCustomizationDTO(
        id=2, menu_category="Italian", max_selections=3, sort_order=1,
        customization_category=CustomizationCategoryDTO(id=2, name="extra_toppings", display_name="Extra Toppings"),
        options=tuple(
            CustomizationOptionDTO(id=10 + i, category_id=2, name=name, display_name=name.title(),
                                   price_adjustment=Decimal("25"))
            for i, name in enumerate(active_toppings)
        )
    )
    return spice, extra


class TestAddLine:
    """Test add_line() identity rule."""

    def test_plain_item_added_twice_merges_into_one_line(self):
        """Plain item added with 2 then 1 -> one line with quantity 3."""
        item = make_item()
        cart = CartService.add_line(Cart(), item, 2)
        cart = CartService.add_line(cart, item, 1)

        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 3
        assert cart.lines[0].item_id == 1

    def test_customized_item_added_twice_creates_two_lines(self):
        """Identical customizations still produce distinct lines."""
        item = make_item()
        cart = CartService.add_line(Cart(), item, 1, toppings("cheese"))
        cart = CartService.add_line(cart, item, 1, toppings("cheese"))

        assert len(cart.lines) == 2
        assert cart.lines[0].line_id != cart.lines[1].line_id
        assert all(line.quantity == 1 for line in cart.lines)

    def test_plain_add_does_not_merge_into_customized_line(self):
        item = make_item()
        cart = CartService.add_line(Cart(), item, 1, toppings("cheese"))
        cart = CartService.add_line(cart, item, 2)

        assert len(cart.lines) == 2
        assert cart.lines[1].customization is None
        assert cart.lines[1].quantity == 2

    def test_empty_customization_counts_as_plain(self):
        item = make_item()
        empty = Customization(selections={"extra_toppings": MultiSelect()}, special_instructions="   ")
        cart = CartService.add_line(Cart(), item, 1)
        cart = CartService.add_line(cart, item, 1, empty)

        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 2

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_invalid_quantity_is_noop(self, quantity):
        cart = CartService.add_line(Cart(), make_item(), 1)
        result = CartService.add_line(cart, make_item(), quantity)

        assert result is cart

    def test_input_cart_is_not_mutated(self):
        item = make_item()
        original = CartService.add_line(Cart(), item, 1)
        CartService.add_line(original, item, 5)
        CartService.add_line(original, make_item(2, "Chicken Burger", "199", "Burgers"), 1)

        assert len(original.lines) == 1
        assert original.lines[0].quantity == 1


class TestQuantityAndRemoval:
    """Test set_quantity(), remove_line() and clear()."""

    @pytest.fixture
    def cart(self):
        cart = CartService.add_line(Cart(), make_item(1), 2)
        cart = CartService.add_line(cart, make_item(2, "Chicken Burger", "199", "Burgers"), 1)
        return CartService.add_line(cart, make_item(1), 1, toppings("olives"))

    def test_set_quantity_updates_only_target_line(self, cart):
        target = cart.lines[2]
        result = CartService.set_quantity(cart, target.line_id, 4)

        assert result.lines[2].quantity == 4
        assert result.lines[0].quantity == 2
        assert result.lines[1].quantity == 1
        assert result.lines[2].customization == target.customization

    def test_set_quantity_zero_equals_remove(self, cart):
        line_id = cart.lines[0].line_id

        assert CartService.set_quantity(cart, line_id, 0) == CartService.remove_line(cart, line_id)

    def test_remove_line_keeps_other_lines_of_same_item(self, cart):
        result = CartService.remove_line(cart, cart.lines[0].line_id)

        assert [line.item_id for line in result.lines] == [2, 1]
        assert result.lines[1].is_customized

    def test_unknown_line_id_leaves_cart_unchanged(self, cart):
        assert CartService.set_quantity(cart, "missing", 3) is cart
        assert CartService.remove_line(cart, "missing") is cart

    def test_clear_returns_empty_cart(self):
        assert CartService.clear().is_empty()


class TestPricing:
    """Test line pricing and totals."""

    def test_multi_select_toppings_priced_per_unit(self):
        """Item 299 with two +20 toppings, quantity 2 -> 678."""
        cart = CartService.add_line(Cart(), make_item(price="299"), 2, toppings("cheese", "olives"))
        line = cart.lines[0]

        assert CartService.unit_price(line) == Decimal("339")
        assert CartService.price_line(line) == Decimal("678")
        assert CartService.cart_total(cart) == Decimal("678")

    def test_single_select_adds_one_surcharge(self):
        customization = Customization(selections={
            "spice_level": SingleSelect(option=ChosenOption(name="hot", price_adjustment=Decimal("15")))
        })
        line = CartLine(item=make_item(price="199"), quantity=3, customization=customization)

        assert CartService.price_line(line) == Decimal("642")

    def test_negative_adjustment_reduces_price(self):
        line = CartLine(item=make_item(price="249"), quantity=1, customization=toppings("no_cheese", price="-10"))

        assert CartService.unit_price(line) == Decimal("239")

    def test_total_is_independent_of_line_order(self):
        lines = (
            CartLine(item=make_item(1, price="299"), quantity=2, customization=toppings("cheese")),
            CartLine(item=make_item(2, "Chicken Burger", "199.50", "Burgers"), quantity=3),
            CartLine(item=make_item(5, "Chocolate Cake", "129.99", "Desserts"), quantity=1),
        )
        totals = {CartService.cart_total(Cart(lines=order)) for order in permutations(lines)}

        assert totals == {Decimal("1366.49")}

    def test_item_count_sums_duplicate_item_lines(self):
        cart = CartService.add_line(Cart(), make_item(), 2, toppings("cheese"))
        cart = CartService.add_line(cart, make_item(), 3, toppings("cheese"))
        cart = CartService.add_line(cart, make_item(2, "Chicken Burger", "199", "Burgers"), 1)

        assert CartService.item_count(cart) == 6

    def test_empty_cart_totals(self):
        assert CartService.cart_total(Cart()) == Decimal("0")
        assert CartService.item_count(Cart()) == 0

    def test_round_amount_half_up_to_minor_unit(self):
        assert CartService.round_amount(Decimal("10.005"), Currency.INR) == Decimal("10.01")
        assert CartService.round_amount(Decimal("10.004"), Currency.USD) == Decimal("10.00")

    def test_format_amount_uses_currency_symbol(self):
        assert CartService.format_amount(Decimal("678"), Currency.INR) == "₹678.00"
        assert CartService.format_amount(Decimal("5.5"), Currency.EUR) == "€5.50"


class TestReconcile:
    """Test reconcile() and from_records() against catalog snapshots."""

    def test_drops_lines_whose_item_left_the_catalog(self):
        pizza, burger = make_item(1), make_item(2, "Chicken Burger", "199", "Burgers")
        cart = CartService.add_line(Cart(), pizza, 1)
        cart = CartService.add_line(cart, burger, 2)
        snapshot = CatalogSnapshotDTO(items={2: burger}, customizations={"Burgers": ()})

        result = CartService.reconcile(cart, snapshot)

        assert len(result.lines) == 1
        assert result.lines[0] == cart.lines[1]

    def test_refreshes_item_fields_and_keeps_line_identity(self):
        cart = CartService.add_line(Cart(), make_item(1, price="299"), 2)
        repriced = make_item(1, name="Margherita Pizza (Large)", price="349")
        snapshot = CatalogSnapshotDTO(items={1: repriced}, customizations={"Italian": ()})

        result = CartService.reconcile(cart, snapshot)

        assert result.lines[0].line_id == cart.lines[0].line_id
        assert result.lines[0].quantity == 2
        assert result.lines[0].item.name == "Margherita Pizza (Large)"
        assert CartService.cart_total(result) == Decimal("698")

    def test_reprices_options_and_removes_inactive_ones(self):
        cart = CartService.add_line(Cart(), make_item(1, price="299"), 1, toppings("cheese", "olives"))
        snapshot = CatalogSnapshotDTO(
            items={1: make_item(1, price="299")},
            customizations={"Italian": italian_customizations(active_toppings=("cheese", "mushrooms"))}
        )

        result = CartService.reconcile(cart, snapshot)
        selection = result.lines[0].customization.selections["extra_toppings"]

        assert [option.name for option in selection.chosen] == ["cheese"]
        assert CartService.unit_price(result.lines[0]) == Decimal("324")

    def test_customized_line_dropped_when_customizations_unavailable(self):
        cart = CartService.add_line(Cart(), make_item(1), 1, toppings("cheese"))
        cart = CartService.add_line(cart, make_item(1), 2)
        snapshot = CatalogSnapshotDTO(items={1: make_item(1)})

        result = CartService.reconcile(cart, snapshot)

        assert len(result.lines) == 1
        assert not result.lines[0].is_customized
        assert result.lines[0].quantity == 2

    def test_from_records_restores_priced_customization(self):
        records = [StoredCartLineDTO.model_validate({
            "lineId": "line-1",
            "itemId": 1,
            "quantity": 2,
            "customization": {
                "selections": {"spice_level": "hot", "extra_toppings": ["cheese", "olives"]},
                "specialInstructions": "Well done"
            }
        })]
        snapshot = CatalogSnapshotDTO(items={1: make_item(1, price="299")},
                                      customizations={"Italian": italian_customizations()})

        cart = CartService.from_records(records, snapshot)
        line = cart.lines[0]

        assert line.line_id == "line-1"
        assert line.customization.special_instructions == "Well done"
        assert isinstance(line.customization.selections["spice_level"], SingleSelect)
        # 299 + 5 (hot) + 25 + 25
        assert CartService.price_line(line) == Decimal("708")

    def test_from_records_keeps_at_most_max_selections(self):
        records = [StoredCartLineDTO(item_id=1, quantity=1, customization=StoredCustomizationDTO(
            selections={"extra_toppings": ["cheese", "olives", "mushrooms", "jalapenos"]}
        ))]
        snapshot = CatalogSnapshotDTO(
            items={1: make_item(1, price="299")},
            customizations={"Italian": italian_customizations(
                active_toppings=("cheese", "olives", "mushrooms", "jalapenos")
            )}
        )

        line = CartService.from_records(records, snapshot).lines[0]
        selection = line.customization.selections["extra_toppings"]

        assert [option.name for option in selection.chosen] == ["cheese", "olives", "mushrooms"]
        assert CartService.unit_price(line) == Decimal("374")

    def test_from_records_single_select_stored_as_list_keeps_first_option(self):
        records = [StoredCartLineDTO(item_id=1, quantity=1, customization=StoredCustomizationDTO(
            selections={"spice_level": ["hot", "mild"]}
        ))]
        snapshot = CatalogSnapshotDTO(items={1: make_item(1, price="299")},
                                      customizations={"Italian": italian_customizations()})

        line = CartService.from_records(records, snapshot).lines[0]
        selection = line.customization.selections["spice_level"]

        assert isinstance(selection, SingleSelect)
        assert selection.option.name == "hot"
        assert CartService.unit_price(line) == Decimal("304")

    def test_from_records_assigns_missing_line_ids(self):
        records = [StoredCartLineDTO(item_id=1, quantity=1), StoredCartLineDTO(item_id=1, quantity=1)]
        snapshot = CatalogSnapshotDTO(items={1: make_item(1)}, customizations={"Italian": ()})

        cart = CartService.from_records(records, snapshot)

        assert all(line.line_id for line in cart.lines)
        assert cart.lines[0].line_id != cart.lines[1].line_id

    def test_to_records_round_trips_through_persisted_shape(self):
        cart = CartService.add_line(Cart(), make_item(1), 1, toppings("cheese"))
        record = CartService.to_records(cart)[0].model_dump(mode="json", by_alias=True, exclude_none=True)

        assert record == {
            "lineId": cart.lines[0].line_id,
            "itemId": 1,
            "quantity": 1,
            "customization": {"selections": {"extra_toppings": ["cheese"]}}
        }
