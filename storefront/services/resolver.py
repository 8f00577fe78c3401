# storefront/services/resolver.py
# Чисті функції: (товар, вибрані атрибути, кастомізації) -> SKU / залишок / ціна / фото.
# Жодних побічних ефектів, каталог ніколи не змінюється на місці.
from typing import Dict, List, Mapping, Optional, Tuple

from storefront.models import (
    Product, VariantCombination, CustomizationType, CustomizationField,
    CustomizationFieldOverride, VariantCustomizationOverride,
)


Selection = Mapping[str, str]

PRICE_SOURCE_CONDITIONAL = "conditional"
PRICE_SOURCE_SPECIAL = "special"
PRICE_SOURCE_BASE = "base"

_FIELD_OVERRIDE_KEYS = ("presets", "custom_input_price", "options", "additional_price")


# --- Предикати збігу ---

def rule_matches(when: Mapping[str, str], selection: Selection | None) -> bool:
    """Усі пари ключ-значення правила мають точно збігатися з вибором. Без шаблонів."""
    selection = selection or {}
    return all(key in selection and selection[key] == value for key, value in when.items())


def find_variant(product: Product, selection: Selection | None) -> Optional[VariantCombination]:
    """
    Перший варіант (в порядку списку), у якого кожен вибраний атрибут має те саме значення.
    Порожній вибір не вказує на жоден варіант.
    """
    if not product.has_variants or not product.variants or not selection:
        return None
    return next(
        (v for v in product.variants
         if all(v.attributes.get(key) == value for key, value in selection.items())),
        None
    )


def is_complete_selection(product: Product, selection: Selection | None) -> bool:
    if not product.has_variants: return True
    selection = selection or {}
    return all(name in selection for name in product.attribute_names)


# --- Залишок, SKU, ціна, фото ---

def resolve_stock(product: Product, selection: Selection | None = None) -> int:
    if product.has_variants:
        variant = find_variant(product, selection)
        return variant.stock_level if variant else 0
    return product.stock_level


def resolve_sku(product: Product, selection: Selection | None = None) -> str:
    variant = find_variant(product, selection)
    return variant.sku if variant else product.sku


def resolve_price_details(product: Product, selection: Selection | None = None) -> Tuple[float, str]:
    """Повертає (ціна, джерело), джерело: conditional / special / base."""
    for rule in product.conditional_prices or []:
        if rule_matches(rule.when, selection):
            price = rule.special_price if rule.special_price is not None else rule.price
            return price, PRICE_SOURCE_CONDITIONAL

    if product.special_price is not None:
        price, source = product.special_price, PRICE_SOURCE_SPECIAL
    else:
        price, source = product.price, PRICE_SOURCE_BASE
    if product.has_variants:
        variant = find_variant(product, selection)
        if variant and variant.additional_price:
            price += variant.additional_price
    return price, source


def resolve_price(product: Product, selection: Selection | None = None) -> float:
    return resolve_price_details(product, selection)[0]


def resolve_images(product: Product, selection: Selection | None = None) -> List[str]:
    for rule in product.conditional_images or []:
        if rule_matches(rule.when, selection):
            return list(rule.image_urls)
    variant = find_variant(product, selection)
    if variant and variant.image_urls:
        return list(variant.image_urls)
    return list(product.image_urls)


# --- Кастомізації ---

def merge_field(field: CustomizationField, override: CustomizationFieldOverride | None) -> CustomizationField:
    """Накладає розріджений патч варіанта на копію поля; незадані ключі лишаються як є."""
    if override is None:
        return field
    update = {key: getattr(override, key) for key in _FIELD_OVERRIDE_KEYS if getattr(override, key) is not None}
    return field.model_copy(update=update) if update else field


def merge_customization(
    customization: CustomizationType, override: VariantCustomizationOverride | None
) -> CustomizationType:
    if override is None or not override.fields:
        return customization
    fields = [merge_field(f, override.fields.get(f.id)) for f in customization.fields]
    return customization.model_copy(update={"fields": fields})


def is_available_for_selection(customization: CustomizationType, selection: Selection | None) -> bool:
    """Без обмежень - доступна завжди; інакше достатньо виконати будь-яке одне обмеження."""
    if not customization.available_for_variants:
        return True
    selection = selection or {}
    return any(
        c.attribute_name in selection and selection[c.attribute_name] in c.values
        for c in customization.available_for_variants
    )


def resolve_customizations(product: Product, selection: Selection | None = None) -> List[CustomizationType]:
    variant = find_variant(product, selection)
    overrides: Dict[str, VariantCustomizationOverride] = (variant.customization_overrides or {}) if variant else {}

    resolved: List[CustomizationType] = []
    for customization in product.customizations:
        if not customization.enabled:
            continue
        if not is_available_for_selection(customization, selection):
            continue
        override = overrides.get(customization.id)
        if override is not None and override.enabled is False:
            continue
        resolved.append(merge_customization(customization, override))
    # sorted() стабільний: однаковий sortOrder зберігає порядок каталогу
    return sorted(resolved, key=lambda c: c.sort_order)


# --- Допомога для вибору варіанта в UI ---

def available_values(
    product: Product, selection: Selection | None, attribute: str, in_stock_only: bool = False
) -> List[str]:
    """
    Які значення атрибута `attribute` ще ведуть хоча б до одного варіанта
    з урахуванням інших вибраних атрибутів. Порядок - як у каталозі.
    """
    if not product.has_variants or not product.variants:
        return []
    others = {k: v for k, v in (selection or {}).items() if k != attribute}
    candidates = [
        v for v in product.variants
        if all(v.attributes.get(k) == value for k, value in others.items())
        and (not in_stock_only or v.stock_level > 0)
    ]
    reachable = {v.attributes.get(attribute) for v in candidates}
    declared = next((a.values for a in product.variant_attributes or [] if a.name == attribute), [])
    return [value for value in declared if value in reachable]
