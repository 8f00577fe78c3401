# storefront/services/customization_service.py
import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from storefront.models import (
    Product, CustomizationType, CustomizationField, CustomizationInputType,
    FieldValue, SelectedCustomization, SelectedCustomizationField,
)
from storefront.services import resolver

logger = logging.getLogger(__name__)

# Значення preset-поля, яке означає "ввести вручну" замість готового набору
CUSTOM_INPUT = "custom"


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


# --- Валідація (повертає текст помилки або None) ---

def validate_field_value(field: CustomizationField, value: Any) -> str | None:
    rules = field.validation
    if _is_empty(value) or (field.input_type == CustomizationInputType.TOGGLE and value is False):
        return f"Поле '{field.id}' обов'язкове." if rules.required else None

    if field.input_type == CustomizationInputType.NUMBER:
        if isinstance(value, bool): return f"Поле '{field.id}' має бути числом."
        try:
            number = float(value)
        except (TypeError, ValueError):
            return f"Поле '{field.id}' має бути числом."
        if rules.min is not None and number < rules.min: return f"Поле '{field.id}': мінімум {rules.min}."
        if rules.max is not None and number > rules.max: return f"Поле '{field.id}': максимум {rules.max}."
        return None

    if field.input_type == CustomizationInputType.TOGGLE:
        return None if isinstance(value, bool) else f"Поле '{field.id}' має бути так/ні."

    if field.input_type == CustomizationInputType.SELECT:
        allowed = {o.value for o in field.options}
        if allowed and str(value) not in allowed: return f"Поле '{field.id}': недопустимий варіант '{value}'."
        return None

    text = str(value)
    if rules.min_length is not None and len(text) < rules.min_length:
        return f"Поле '{field.id}': мінімум {rules.min_length} символів."
    if rules.max_length is not None and len(text) > rules.max_length:
        return f"Поле '{field.id}': максимум {rules.max_length} символів."
    if rules.pattern and not re.fullmatch(rules.pattern, text):
        return f"Поле '{field.id}' має неправильний формат."
    return None


def is_field_active(field: CustomizationField, values: Mapping[str, Any]) -> bool:
    """Перевіряє `dependsOn`: поле показується лише коли залежність виконана."""
    dependency = field.depends_on
    if dependency is None:
        return True
    current = values.get(dependency.field_id)
    if dependency.custom_only:
        return current == CUSTOM_INPUT
    if dependency.values is not None:
        return not _is_empty(current) and str(current) in dependency.values
    return not _is_empty(current) and current is not False


def _field_price(field: CustomizationField, value: FieldValue) -> float:
    if field.input_type == CustomizationInputType.SELECT:
        option = next((o for o in field.options if o.value == str(value)), None)
        if option and option.price is not None: return option.price
        return field.additional_price
    if field.input_type == CustomizationInputType.TOGGLE:
        return field.additional_price if value is True else 0
    return field.additional_price


# --- Побудова вибору ---

def build_selected_customization(
    customization: CustomizationType, values: Mapping[str, Any]
) -> Optional[SelectedCustomization]:
    """
    Перетворює введені покупцем значення на зафіксований `SelectedCustomization`.

    Preset-поле приймає id набору (ціна набору, набір заповнює `targetFields`)
    або CUSTOM_INPUT (ціна `customInputPrice`, цільові поля вводяться вручну).
    Цільові поля окремо не тарифікуються. Повертає None, якщо ввід некоректний.
    """
    values = dict(values)
    errors: List[str] = []
    preset_fields: Dict[str, SelectedCustomizationField] = {}
    filled_by_preset: Dict[str, FieldValue] = {}
    governed: set = set()

    # 1. Спершу preset-поля: вони визначають значення цільових полів
    for field in customization.fields:
        if field.input_type != CustomizationInputType.PRESET or not is_field_active(field, values):
            continue
        choice = values.get(field.id)
        if _is_empty(choice):
            if field.validation.required: errors.append(f"Поле '{field.id}' обов'язкове.")
            continue
        if choice == CUSTOM_INPUT:
            if not field.allow_custom_input:
                errors.append(f"Поле '{field.id}' не дозволяє ручний ввід."); continue
            preset_fields[field.id] = SelectedCustomizationField(
                field_id=field.id, value=CUSTOM_INPUT, custom_input=True,
                additional_price=field.custom_input_price or 0,
            )
        else:
            preset = field.get_preset(str(choice))
            if preset is None:
                errors.append(f"Поле '{field.id}': невідомий набір '{choice}'."); continue
            for target in field.target_fields:
                if target in preset.values: filled_by_preset[target] = preset.values[target]
            preset_fields[field.id] = SelectedCustomizationField(
                field_id=field.id, value=preset.id, preset_id=preset.id, additional_price=preset.price,
            )
        governed.update(field.target_fields)

    values.update(filled_by_preset)

    # 2. Всі поля в порядку каталогу
    selected: List[SelectedCustomizationField] = []
    for field in customization.fields:
        if field.id in preset_fields:
            selected.append(preset_fields[field.id]); continue
        if field.input_type == CustomizationInputType.PRESET or not is_field_active(field, values):
            continue
        value = values.get(field.id)
        if field.id not in filled_by_preset:
            error = validate_field_value(field, value)
            if error: errors.append(error); continue
        if _is_empty(value) or value is False:
            continue
        price = 0 if field.id in governed else _field_price(field, value)
        selected.append(SelectedCustomizationField(field_id=field.id, value=value, additional_price=price))

    if errors:
        logger.warning(f"Кастомізація '{customization.id}' відхилена: {'; '.join(errors)}")
        return None
    if customization.fields and not selected:
        logger.warning(f"Кастомізація '{customization.id}': не вибрано жодного поля.")
        return None

    total = round(sum(f.additional_price for f in selected), 2)
    if not total and customization.base_price:
        total = customization.base_price
    return SelectedCustomization(
        customization_id=customization.id, name=customization.name, fields=selected, total_price=total,
    )


def select_customizations(
    product: Product, selection: Mapping[str, str] | None, requested: Mapping[str, Mapping[str, Any]]
) -> Optional[List[SelectedCustomization]]:
    """
    Будує вибір для кількох кастомізацій товару одразу.
    Ціни беруться з версії, що вже врахувала патчі вибраного варіанта.
    """
    available = {c.id: c for c in resolver.resolve_customizations(product, selection)}
    result: List[SelectedCustomization] = []
    for customization_id, values in requested.items():
        customization = available.get(customization_id)
        if customization is None:
            logger.warning(f"Товар {product.sku}: кастомізація '{customization_id}' недоступна для {dict(selection or {})}")
            return None
        built = build_selected_customization(customization, values)
        if built is None:
            return None
        result.append(built)
    return result
