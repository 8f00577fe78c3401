from storefront.models import CartItem, SelectedCustomization, SelectedCustomizationField
from storefront.services.cart_identity import (
    CUSTOMIZATIONS_MARKER, VARIANTS_MARKER, compute_cart_item_id, compute_customization_total, line_total,
    resolve_original_price, round_money,
)


def _custom(customization_id="flocking", **fields):
    return SelectedCustomization(
        customization_id=customization_id,
        fields=[SelectedCustomizationField(field_id=k, value=v) for k, v in fields.items()],
        total_price=15,
    )


class TestComputeCartItemId:
    def test_plain_sku(self):
        assert compute_cart_item_id("P") == "P"
        assert compute_cart_item_id("P", {}, []) == "P"

    def test_deterministic(self):
        first = compute_cart_item_id("Q", {"Size": "M"}, [_custom(name="A")])
        second = compute_cart_item_id("Q", {"Size": "M"}, [_custom(name="A")])
        assert first == second

    def test_attribute_order_does_not_matter(self):
        assert compute_cart_item_id("J", {"Kit": "Home", "Size": "M"}) == compute_cart_item_id(
            "J", {"Size": "M", "Kit": "Home"}
        )

    def test_customization_order_does_not_matter(self):
        a, b = _custom("a", x="1"), _custom("b", y="2")
        assert compute_cart_item_id("J", None, [a, b]) == compute_cart_item_id("J", None, [b, a])

    def test_markers(self):
        cart_item_id = compute_cart_item_id("Q", {"Size": "M"}, [_custom(name="A")])
        assert cart_item_id.startswith("Q" + VARIANTS_MARKER)
        assert CUSTOMIZATIONS_MARKER in cart_item_id
        assert "=" not in cart_item_id

    def test_any_difference_changes_id(self):
        base = compute_cart_item_id("Q", {"Size": "M"}, [_custom(name="A")])
        variations = [
            compute_cart_item_id("Q2", {"Size": "M"}, [_custom(name="A")]),
            compute_cart_item_id("Q", {"Size": "S"}, [_custom(name="A")]),
            compute_cart_item_id("Q", {"Size": "M"}, [_custom(name="B")]),
            compute_cart_item_id("Q", {"Size": "M"}, [_custom("other", name="A")]),
            compute_cart_item_id("Q", {"Size": "M"}),
        ]
        assert len({base, *variations}) == len(variations) + 1

    def test_values_containing_delimiters_do_not_collide(self):
        assert compute_cart_item_id("X", {"a": "x|y"}) != compute_cart_item_id("X", {"a": "x", "|y": ""})
        assert compute_cart_item_id("X", {"a": "b:c"}) != compute_cart_item_id("X", {"a:b": "c"})

    def test_preset_and_custom_input_differ(self):
        preset = SelectedCustomization(customization_id="f", fields=[
            SelectedCustomizationField(field_id="player", value="a-5", preset_id="a-5"),
        ])
        custom = SelectedCustomization(customization_id="f", fields=[
            SelectedCustomizationField(field_id="player", value="a-5", custom_input=True),
        ])
        assert compute_cart_item_id("S", None, [preset]) != compute_cart_item_id("S", None, [custom])


class TestPricing:
    def test_customization_total(self):
        assert compute_customization_total(None) == 0
        assert compute_customization_total([_custom(), _custom("b")]) == 30

    def test_round_money(self):
        assert round_money(0.1 + 0.2) == 0.3

    def test_line_total_prefers_final_price(self):
        item = CartItem(sku="P", name="P", unit_price=8, original_price=10, quantity=3, cart_item_id="P")
        assert line_total(item) == 24
        item.final_price = 23
        assert line_total(item) == 69


class TestOriginalPrice:
    def test_special_price_shows_base_price(self, product_p):
        assert resolve_original_price(product_p) == 10

    def test_without_special_price_equals_resolved(self, product_q):
        assert resolve_original_price(product_q, {"Size": "M"}) == 22

    def test_conditional_price_has_no_discount_badge(self, jersey):
        assert resolve_original_price(jersey, {"Kit": "Home", "Size": "Kids"}) == 45

    def test_variant_with_special_price(self, jersey):
        assert resolve_original_price(jersey, {"Kit": "Away", "Size": "M"}) == 80
