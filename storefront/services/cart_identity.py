# storefront/services/cart_identity.py
import base64
import json
from typing import Any, Iterable, List, Mapping, Optional

from storefront.models import CartItem, Product, SelectedCustomization
from storefront.services import resolver

VARIANTS_MARKER = "#v:"
CUSTOMIZATIONS_MARKER = "#c:"


def round_money(amount: float) -> float:
    return round(amount, 2)


def _encode(payload: Any) -> str:
    # Кодуємо весь канонічний рядок цілком, а не сирі значення через роздільник
    canonical = json.dumps(payload, ensure_ascii=False, separators=(',', ':'))
    return base64.urlsafe_b64encode(canonical.encode('utf-8')).decode('ascii').rstrip('=')


def _canonical_customizations(selected: Iterable[SelectedCustomization]) -> List[Any]:
    return [
        [c.customization_id, [
            [f.field_id, f.value, f.preset_id, f.custom_input]
            for f in sorted(c.fields, key=lambda f: f.field_id)
        ]]
        for c in sorted(selected, key=lambda c: c.customization_id)
    ]


def compute_cart_item_id(
    sku: str,
    selected_variants: Optional[Mapping[str, str]] = None,
    selected_customizations: Optional[Iterable[SelectedCustomization]] = None,
) -> str:
    """
    Детермінований ідентифікатор позиції кошика: SKU + вибрані атрибути + кастомізації.
    Однакова конфігурація завжди дає той самий id, будь-яка відмінність - інший.
    """
    cart_item_id = sku
    if selected_variants:
        pairs = [[key, selected_variants[key]] for key in sorted(selected_variants)]
        cart_item_id += VARIANTS_MARKER + _encode(pairs)
    customizations = list(selected_customizations or [])
    if customizations:
        cart_item_id += CUSTOMIZATIONS_MARKER + _encode(_canonical_customizations(customizations))
    return cart_item_id


def compute_customization_total(selected: Optional[Iterable[SelectedCustomization]]) -> float:
    return round_money(sum(c.total_price for c in selected or []))


def resolve_original_price(product: Product, selection: Optional[Mapping[str, str]] = None) -> float:
    """Ціна "до знижки" для відображення."""
    price, source = resolver.resolve_price_details(product, selection)
    if source == resolver.PRICE_SOURCE_CONDITIONAL:
        return price # Умовна ціна - без бейджа знижки
    if product.special_price is not None:
        return product.price
    return price


def line_total(item: CartItem) -> float:
    return round_money(item.effective_price * item.quantity)
