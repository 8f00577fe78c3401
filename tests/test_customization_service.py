import pytest

from storefront.models import CustomizationField
from storefront.services import resolver
from storefront.services.customization_service import (
    CUSTOM_INPUT, build_selected_customization, is_field_active, select_customizations, validate_field_value,
)
from storefront.services.cart_identity import compute_cart_item_id


def _customization(product, customization_id, selection=None):
    return next(c for c in resolver.resolve_customizations(product, selection) if c.id == customization_id)


class TestValidateFieldValue:
    """Field-level validation returns an error message or None."""

    def test_required_text(self):
        field = CustomizationField.model_validate({"id": "name", "validation": {"required": True}})
        assert validate_field_value(field, "") is not None
        assert validate_field_value(field, "   ") is not None
        assert validate_field_value(field, "Lee") is None

    def test_optional_empty_is_fine(self):
        field = CustomizationField.model_validate({"id": "note", "validation": {"maxLength": 3}})
        assert validate_field_value(field, None) is None

    def test_text_length_and_pattern(self):
        field = CustomizationField.model_validate(
            {"id": "name", "validation": {"minLength": 2, "maxLength": 4, "pattern": "[A-Z]+"}}
        )
        assert validate_field_value(field, "A") is not None
        assert validate_field_value(field, "ABCDE") is not None
        assert validate_field_value(field, "ab") is not None
        assert validate_field_value(field, "AB") is None

    @pytest.mark.parametrize("value,ok", [(1, True), ("42", True), (0, False), (100, False), ("x", False), (True, False)])
    def test_number_bounds(self, value, ok):
        field = CustomizationField.model_validate(
            {"id": "number", "inputType": "number", "validation": {"min": 1, "max": 99}}
        )
        assert (validate_field_value(field, value) is None) is ok

    def test_select_must_be_known_option(self):
        field = CustomizationField.model_validate(
            {"id": "font", "inputType": "select", "options": [{"value": "serif"}, {"value": "sans"}]}
        )
        assert validate_field_value(field, "serif") is None
        assert validate_field_value(field, "comic") is not None

    def test_required_toggle_must_be_on(self):
        field = CustomizationField.model_validate({"id": "ok", "inputType": "toggle", "validation": {"required": True}})
        assert validate_field_value(field, False) is not None
        assert validate_field_value(field, True) is None


class TestIsFieldActive:
    def test_custom_only_dependency(self, flocking_product):
        name = flocking_product.customizations[0].get_field("name")
        assert is_field_active(name, {"player": CUSTOM_INPUT})
        assert not is_field_active(name, {"player": "a-5"})
        assert not is_field_active(name, {})

    def test_values_dependency(self):
        field = CustomizationField.model_validate({"id": "colour", "dependsOn": {"fieldId": "style", "values": ["print"]}})
        assert is_field_active(field, {"style": "print"})
        assert not is_field_active(field, {"style": "stitch"})


class TestBuildSelectedCustomization:
    def test_preset_uses_preset_price(self, flocking_product):
        flocking = _customization(flocking_product, "flocking")
        selected = build_selected_customization(flocking, {"player": "a-5"})

        assert selected is not None
        assert selected.total_price == 15
        player = selected.fields[0]
        assert player.field_id == "player"
        assert player.preset_id == "a-5"
        assert player.custom_input is False

    def test_custom_input_uses_custom_price(self, flocking_product):
        flocking = _customization(flocking_product, "flocking")
        selected = build_selected_customization(flocking, {"player": CUSTOM_INPUT, "name": "LEE", "number": 10})

        assert selected is not None
        assert selected.total_price == 17
        assert [f.field_id for f in selected.fields] == ["player", "name", "number"]
        # Цільові поля оплачені через customInputPrice
        assert [f.additional_price for f in selected.fields] == [17, 0, 0]

    def test_preset_and_custom_get_different_ids(self, flocking_product):
        flocking = _customization(flocking_product, "flocking")
        preset = build_selected_customization(flocking, {"player": "a-5"})
        custom = build_selected_customization(flocking, {"player": CUSTOM_INPUT, "name": "A", "number": 5})

        assert compute_cart_item_id("SHIRT", None, [preset]) != compute_cart_item_id("SHIRT", None, [custom])

    def test_custom_input_missing_required_field(self, flocking_product):
        flocking = _customization(flocking_product, "flocking")
        assert build_selected_customization(flocking, {"player": CUSTOM_INPUT, "number": 10}) is None

    def test_custom_input_invalid_number(self, flocking_product):
        flocking = _customization(flocking_product, "flocking")
        assert build_selected_customization(flocking, {"player": CUSTOM_INPUT, "name": "LEE", "number": 120}) is None

    def test_unknown_preset(self, flocking_product):
        flocking = _customization(flocking_product, "flocking")
        assert build_selected_customization(flocking, {"player": "zz-0"}) is None

    def test_nothing_selected_is_rejected(self, flocking_product):
        flocking = _customization(flocking_product, "flocking")
        assert build_selected_customization(flocking, {}) is None

    def test_toggle_falls_back_to_base_price(self, jersey):
        patch = _customization(jersey, "patch", {"Kit": "Home", "Size": "M"})
        selected = build_selected_customization(patch, {"badge": True})
        assert selected.total_price == 8

    def test_toggle_off_is_nothing_selected(self, jersey):
        patch = _customization(jersey, "patch", {"Kit": "Home", "Size": "M"})
        assert build_selected_customization(patch, {"badge": False}) is None

    def test_customization_without_fields(self, jersey):
        gift = _customization(jersey, "gift")
        selected = build_selected_customization(gift, {})
        assert selected.total_price == 3
        assert selected.fields == []

    def test_select_option_price(self):
        from storefront.models import CustomizationType

        customization = CustomizationType.model_validate({
            "id": "print", "name": "Print", "fields": [{
                "id": "font", "inputType": "select", "additionalPrice": 1,
                "options": [{"value": "serif", "price": 4}, {"value": "sans"}],
            }],
        })
        assert build_selected_customization(customization, {"font": "serif"}).total_price == 4
        assert build_selected_customization(customization, {"font": "sans"}).total_price == 1


class TestSelectCustomizations:
    def test_uses_variant_patched_price(self, jersey):
        result = select_customizations(
            jersey, {"Kit": "Home", "Size": "Kids"},
            {"flocking": {"player": CUSTOM_INPUT, "name": "KID", "number": 7}},
        )
        assert result[0].total_price == 12

    def test_unavailable_customization(self, jersey):
        assert select_customizations(jersey, {"Kit": "Away", "Size": "M"}, {"patch": {"badge": True}}) is None

    def test_disabled_customization(self, jersey):
        assert select_customizations(jersey, {"Kit": "Home", "Size": "M"}, {"hidden": {}}) is None

    def test_one_invalid_rejects_all(self, jersey):
        requested = {"gift": {}, "flocking": {"player": "nope"}}
        assert select_customizations(jersey, {"Kit": "Home", "Size": "M"}, requested) is None

    def test_empty_request(self, jersey):
        assert select_customizations(jersey, {"Kit": "Home", "Size": "M"}, {}) == []
