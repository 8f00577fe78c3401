# storefront/services/cart_service.py
import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from storefront.config_reader import config
from storefront.models import CartItem, Product, SelectedCustomization
from storefront.services import cart_identity, resolver
from storefront.services.persister import Persister

if TYPE_CHECKING:
    from storefront.services.product_repository import ProductRepository

logger = logging.getLogger(__name__)

_cart_items_adapter = TypeAdapter(List[CartItem])


class CartLedger:
    """
    Впорядкований кошик, ключ позиції - `cartItemId`.
    Ліміт залишку перевіряється при кожному виклику заново (оптимістично, без резервування).
    """

    def __init__(
        self,
        persister: Persister | None = None,
        repository: Optional["ProductRepository"] = None,
        storage_key: str | None = None,
        ttl_minutes: int | None = None,
    ):
        self.persister = persister
        self.repository = repository # якщо задано, звіряємо з останнім знімком каталогу
        self.storage_key = storage_key or config.cart_storage_key
        self.ttl_minutes = ttl_minutes if ttl_minutes is not None else config.cart_ttl_minutes
        self._items: List[CartItem] = []

    # --- Читання ---

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def total_price(self) -> float:
        """Σ (finalPrice ?? unitPrice) * quantity, округлено один раз."""
        return cart_identity.round_money(sum(item.effective_price * item.quantity for item in self._items))

    def get_item(self, cart_item_id: str) -> Optional[CartItem]:
        return next((item for item in self._items if item.cart_item_id == cart_item_id), None)

    # --- Приватні функції ---

    def _current_product(self, product: Product) -> Product:
        if self.repository is None: return product
        latest = self.repository.get_product(product.sku)
        return latest if latest is not None and latest.sku == product.sku else product

    def _resolve_line(
        self, product: Product, selection: Mapping[str, str], customizations: Sequence[SelectedCustomization]
    ) -> tuple[str, str, int]:
        sku = resolver.resolve_sku(product, selection)
        cart_item_id = cart_identity.compute_cart_item_id(sku, selection, customizations)
        return sku, cart_item_id, resolver.resolve_stock(product, selection)

    # --- Публічні функції ---

    def can_add(
        self,
        product: Product,
        selection: Mapping[str, str] | None = None,
        customizations: Sequence[SelectedCustomization] | None = None,
    ) -> bool:
        product = self._current_product(product)
        selection = dict(selection or {})
        if not resolver.is_complete_selection(product, selection):
            return False
        _, cart_item_id, stock = self._resolve_line(product, selection, customizations or [])
        existing = self.get_item(cart_item_id)
        return (existing.quantity if existing else 0) + 1 <= stock

    def add(
        self,
        product: Product,
        selection: Mapping[str, str] | None = None,
        customizations: Sequence[SelectedCustomization] | None = None,
    ) -> bool:
        product = self._current_product(product)
        selection = dict(selection or {})
        customizations = list(customizations or [])
        if not self.can_add(product, selection, customizations):
            logger.warning(f"Кошик: не можна додати {product.sku} {selection} - немає в наявності або вибір неповний.")
            return False

        sku, cart_item_id, stock = self._resolve_line(product, selection, customizations)
        existing = self.get_item(cart_item_id)
        if existing:
            existing.quantity += 1
            existing.stock_level = stock
        else:
            self._items.append(self._build_item(product, selection, customizations, sku, cart_item_id, stock))
        self.save()
        logger.info(f"Кошик: додано {sku} ({cart_item_id}).")
        return True

    def _build_item(
        self, product: Product, selection: Dict[str, str], customizations: List[SelectedCustomization],
        sku: str, cart_item_id: str, stock: int,
    ) -> CartItem:
        unit_price = resolver.resolve_price(product, selection)
        images = resolver.resolve_images(product, selection)
        customization_total = cart_identity.compute_customization_total(customizations) if customizations else None
        return CartItem(
            sku=sku, name=product.name, unit_price=unit_price,
            original_price=cart_identity.resolve_original_price(product, selection),
            quantity=1, image_url=images[0] if images else "", stock_level=stock,
            selected_variants=selection or None, cart_item_id=cart_item_id,
            selected_customizations=customizations or None,
            customization_total_price=customization_total,
            final_price=cart_identity.round_money(unit_price + customization_total) if customization_total else None,
        )

    def remove(self, cart_item_id: str):
        original_len = len(self._items)
        self._items = [item for item in self._items if item.cart_item_id != cart_item_id]
        if len(self._items) < original_len:
            self.save(); logger.info(f"Кошик: видалено {cart_item_id}.")

    def set_quantity(self, cart_item_id: str, quantity: int) -> bool:
        item = self.get_item(cart_item_id)
        if item is None or quantity <= 0 or quantity > item.stock_level:
            logger.warning(f"Кошик: к-сть {quantity} для {cart_item_id} відхилено.")
            return False
        item.quantity = quantity
        self.save()
        return True

    def clear(self):
        self._items = []
        self.save()
        logger.info("Кошик очищено.")

    # --- Збереження ---

    def to_json(self) -> Dict[str, Any]:
        return {"items": [item.to_json() for item in self._items], "lastModified": datetime.now().isoformat()}

    def save(self):
        if self.persister is None: return
        self.persister.save(self.storage_key, self.to_json())

    def load(self) -> int:
        """Відновлює кошик зі сховища. Відсутні, пошкоджені чи застарілі дані - порожній кошик."""
        self._items = []
        if self.persister is None: return 0
        cart_data = self.persister.load(self.storage_key)
        if not cart_data: return 0
        if isinstance(cart_data, list): # Старий формат: просто список позицій
            cart_data = {"items": cart_data}
        if not isinstance(cart_data, dict):
            logger.warning("Кошик у сховищі має неочікуваний формат. Починаю з порожнього.")
            return 0
        if self.ttl_minutes and self._is_expired(cart_data.get("lastModified")):
            logger.info("Кошик застарів. Видаляю.")
            self.save()
            return 0
        try:
            self._items = _cart_items_adapter.validate_python(cart_data.get("items") or [])
        except ValidationError as e:
            logger.error(f"Помилка парсингу кошика: {e.error_count()} помилок. Починаю з порожнього.")
            self._items = []
        return len(self._items)

    def _is_expired(self, last_modified_str: str | None) -> bool:
        if not last_modified_str: return True
        try:
            last_modified = datetime.fromisoformat(last_modified_str)
        except ValueError:
            return True
        return datetime.now() - last_modified > timedelta(minutes=self.ttl_minutes)
