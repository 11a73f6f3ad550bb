# Overview: Pytest coverage for cart editing and pricing.

import pytest

from quickpos.services.cart_service import (
    CartEntry,
    UnknownProduct,
    add_to_cart,
    parse_cart,
    price_cart,
    remove_from_cart,
    to_order_items,
)
from quickpos.validation import ValidationError


class TestCartEditing:
    def test_add_appends_new_entry(self, soap):
        cart = add_to_cart([], soap)
        assert cart == [CartEntry("PRD_SOAP01", None, 1)]

    def test_add_increments_existing_entry(self, soap):
        cart = add_to_cart(add_to_cart([], soap), soap)
        assert cart == [CartEntry("PRD_SOAP01", None, 2)]

    def test_variations_are_separate_entries(self, tshirt):
        medium, xl = tshirt.variations
        cart = add_to_cart([], tshirt, medium)
        cart = add_to_cart(cart, tshirt, xl)
        cart = add_to_cart(cart, tshirt, medium)
        assert cart == [
            CartEntry("PRD_TSHIRT", "M", 2),
            CartEntry("PRD_TSHIRT", "XL", 1),
        ]

    def test_add_does_not_mutate_input(self, soap):
        original = [CartEntry("PRD_SOAP01", None, 1)]
        add_to_cart(original, soap)
        assert original == [CartEntry("PRD_SOAP01", None, 1)]

    def test_remove_decrements(self):
        cart = remove_from_cart([CartEntry("PRD_SOAP01", None, 3)], "PRD_SOAP01")
        assert cart == [CartEntry("PRD_SOAP01", None, 2)]

    def test_remove_drops_entry_at_zero(self):
        cart = [CartEntry("PRD_SOAP01", None, 1), CartEntry("PRD_RICE01", None, 2)]
        assert remove_from_cart(cart, "PRD_SOAP01") == [CartEntry("PRD_RICE01", None, 2)]

    def test_remove_unknown_entry_is_noop(self):
        cart = [CartEntry("PRD_SOAP01", None, 1)]
        assert remove_from_cart(cart, "PRD_SOAP01", "XL") == cart

    @pytest.mark.parametrize("existing", [
        [],
        [CartEntry("PRD_SOAP01", None, 2)],
        [CartEntry("PRD_RICE01", None, 1), CartEntry("PRD_SOAP01", None, 5)],
    ])
    def test_remove_undoes_add(self, soap, existing):
        assert remove_from_cart(add_to_cart(existing, soap), soap.id) == existing


class TestPriceCart:
    def test_lines_and_total(self, soap, rice):
        cart = [CartEntry("PRD_SOAP01", None, 13), CartEntry("PRD_RICE01", None, 2)]
        priced = price_cart(cart, [soap, rice])

        soap_line, rice_line = priced.lines
        assert soap_line.total_price == 1070
        # cost tiers (1, 60), (10, 500): 500 + 3 * 60
        assert soap_line.total_cost == 680
        assert soap_line.applied_tier_discount is True
        assert soap_line.name == "Savon"

        assert rice_line.total_price == 300
        assert rice_line.total_cost == 220
        assert rice_line.applied_tier_discount is False

        assert priced.total == 1370
        assert priced.total_cost == 900
        assert priced.item_count == 15

    def test_discount_flag_below_smallest_lot(self, soap):
        priced = price_cart([CartEntry("PRD_SOAP01", None, 2)], [soap])
        assert priced.lines[0].applied_tier_discount is False
        assert priced.total == 200

    def test_unknown_product_is_rejected(self, soap):
        with pytest.raises(UnknownProduct) as exc_info:
            price_cart([CartEntry("PRD_GHOST1", None, 1)], [soap])
        assert exc_info.value.details == {"product_id": "PRD_GHOST1"}

    @pytest.mark.parametrize("label", [None, "XXL"])
    def test_variation_product_needs_a_known_variation(self, tshirt, label):
        with pytest.raises(UnknownProduct) as exc_info:
            price_cart([CartEntry("PRD_TSHIRT", label, 1)], [tshirt])
        assert exc_info.value.details == {"product_id": "PRD_TSHIRT", "variation_label": label}

    def test_variation_line_is_priced(self, tshirt):
        priced = price_cart([CartEntry("PRD_TSHIRT", "XL", 2)], [tshirt])
        assert priced.total == 5000
        assert priced.lines[0].entry.variation_label == "XL"

    def test_empty_cart(self, soap):
        priced = price_cart([], [soap])
        assert priced.total == 0
        assert priced.lines == ()

    def test_order_items_hold_line_totals(self, soap):
        priced = price_cart([CartEntry("PRD_SOAP01", None, 3)], [soap])
        (item,) = to_order_items(priced)
        assert item.price == 270
        assert item.cost_price == 180
        assert item.quantity == 3
        assert item.product_id == "PRD_SOAP01"


class TestParseCart:
    def test_merges_duplicate_pairs(self):
        cart = parse_cart([
            {"productId": "PRD_SOAP01", "quantity": 2},
            {"productId": "PRD_SOAP01", "quantity": "3"},
            {"productId": "PRD_TSHIRT", "variationLabel": "M"},
        ])
        assert cart == [
            CartEntry("PRD_SOAP01", None, 5),
            CartEntry("PRD_TSHIRT", "M", 1),
        ]

    @pytest.mark.parametrize("raw", [
        "not-a-list",
        [{"quantity": 1}],
        [{"productId": "PRD_SOAP01", "quantity": 0}],
        [{"productId": "PRD_SOAP01", "quantity": 1.5}],
        ["PRD_SOAP01"],
    ])
    def test_rejects_malformed_items(self, raw):
        with pytest.raises(ValidationError):
            parse_cart(raw)
