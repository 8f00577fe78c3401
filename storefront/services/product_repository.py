# storefront/services/product_repository.py
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from storefront.config_reader import config
from storefront.exceptions import SourceUnavailableError
from storefront.models import CustomizationType, Product
from storefront.services import resolver
from storefront.services.persister import Persister
from storefront.services.product_source import ProductSource

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load products"


@dataclass(frozen=True)
class CatalogSnapshot:
    """Незмінний знімок каталогу. Замінюється лише цілком."""
    version: int = 0
    products: Tuple[Product, ...] = ()
    loaded_at: Optional[datetime] = None
    _index: Dict[str, Product] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def build(cls, products: List[Product], version: int, loaded_at: datetime | None = None) -> 'CatalogSnapshot':
        index: Dict[str, Product] = {}
        for product in products:
            index.setdefault(product.sku.strip().lower(), product)
        for product in products:
            for variant in product.variants or []:
                index.setdefault(variant.sku.strip().lower(), product)
        return cls(version=version, products=tuple(products), loaded_at=loaded_at or datetime.now(), _index=index)

    def get(self, sku: str) -> Optional[Product]:
        return self._index.get(sku.strip().lower()) if sku else None


def parse_products(raw_products: List[Any]) -> List[Product]:
    """Валідує товари по одному; некоректні пропускаються з попередженням."""
    products: List[Product] = []; skipped = 0
    for raw in raw_products:
        if isinstance(raw, Product):
            products.append(raw); continue
        try:
            products.append(Product.model_validate(raw))
        except ValidationError as e:
            skipped += 1
            sku = raw.get('sku', '?') if isinstance(raw, dict) else '?'
            logger.warning(f"Пропущено товар {sku}: {e.error_count()} помилок валідації")
    if skipped: logger.warning(f"Пропущено {skipped} некоректних товарів.")
    return products


class ProductRepository:
    def __init__(self, source: ProductSource, persister: Persister | None = None, storage_key: str | None = None):
        self.source = source
        self.persister = persister
        self.storage_key = storage_key or config.products_storage_key
        self.is_loading = False
        self.error: str | None = None
        self._lock = threading.Lock()
        self._snapshot = CatalogSnapshot()
        self._rehydrate()

    # --- Знімок ---

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    @property
    def products(self) -> List[Product]:
        return list(self._snapshot.products)

    def _swap(self, products: List[Product]) -> CatalogSnapshot:
        with self._lock:
            self._snapshot = CatalogSnapshot.build(products, version=self._snapshot.version + 1)
            snapshot = self._snapshot
        self._persist(snapshot)
        return snapshot

    def _persist(self, snapshot: CatalogSnapshot):
        if self.persister is None: return
        self.persister.save(self.storage_key, [p.to_json() for p in snapshot.products])

    def _rehydrate(self):
        if self.persister is None: return
        saved = self.persister.load(self.storage_key)
        if not saved: return
        if not isinstance(saved, list):
            logger.warning(f"Збережений каталог '{self.storage_key}' має неочікуваний формат. Ігнорую.")
            return
        products = parse_products(saved)
        self._snapshot = CatalogSnapshot.build(products, version=1)
        logger.info(f"Каталог відновлено зі сховища: {len(products)} товарів.")

    # --- Завантаження ---

    async def load_products(self, force: bool = False) -> bool:
        """
        Завантажує каталог, якщо він порожній (або force=True).
        Помилка джерела не чіпає попередній знімок, лише виставляє `error`.
        """
        if self._snapshot.products and not force:
            return True
        self.is_loading = True; self.error = None
        try:
            raw_products = await self.source.fetch()
        except Exception as e:
            self.error = LOAD_ERROR_MESSAGE
            logger.error(f"Помилка завантаження каталогу: {e}", exc_info=not isinstance(e, SourceUnavailableError))
            return False
        finally:
            self.is_loading = False
        if not isinstance(raw_products, list):
            self.error = LOAD_ERROR_MESSAGE
            logger.error(f"Джерело каталогу повернуло {type(raw_products).__name__} замість списку. Лишаю старий знімок.")
            return False
        products = parse_products(raw_products)
        if raw_products and not products:
            self.error = LOAD_ERROR_MESSAGE
            logger.error(f"Жоден із {len(raw_products)} товарів не пройшов валідацію. Лишаю старий знімок.")
            return False
        snapshot = self._swap(products)
        logger.info(f"Каталог оновлено (версія {snapshot.version}): {len(products)} товарів.")
        return True

    async def refresh(self) -> bool:
        return await self.load_products(force=True)

    # --- Пошук ---

    def get_product(self, sku: str) -> Optional[Product]:
        return self._snapshot.get(sku)

    def search_products(self, query: str) -> List[Product]:
        snapshot = self._snapshot
        exact_match = snapshot.get(query)
        if exact_match: return [exact_match]
        query_lower = query.lower().strip()
        return [p for p in snapshot.products if query_lower in p.name.lower() or query_lower in p.sku.lower()]

    # --- Запити з урахуванням варіантів ---

    def get_stock(self, sku: str, selection: Mapping[str, str] | None = None) -> int:
        product = self.get_product(sku)
        return resolver.resolve_stock(product, selection) if product else 0

    def get_sku(self, sku: str, selection: Mapping[str, str] | None = None) -> str:
        product = self.get_product(sku)
        return resolver.resolve_sku(product, selection) if product else sku

    def get_price(self, sku: str, selection: Mapping[str, str] | None = None) -> float | None:
        product = self.get_product(sku)
        return resolver.resolve_price(product, selection) if product else None

    def get_images(self, sku: str, selection: Mapping[str, str] | None = None) -> List[str]:
        product = self.get_product(sku)
        return resolver.resolve_images(product, selection) if product else []

    def get_customizations(self, sku: str, selection: Mapping[str, str] | None = None) -> List[CustomizationType]:
        product = self.get_product(sku)
        return resolver.resolve_customizations(product, selection) if product else []

    # --- Залишки ---

    def update_stock_level(self, sku: str, quantity: int, selection: Mapping[str, str] | None = None) -> bool:
        """Списує `quantity` з товару або з відповідного варіанта (copy-on-write)."""
        with self._lock:
            snapshot = self._snapshot
            product = snapshot.get(sku)
            if product is None:
                logger.warning(f"Списання залишку: товар {sku} не знайдено.")
                return False
            if product.has_variants:
                variant = next((v for v in product.variants or [] if v.sku.lower() == sku.strip().lower()), None)
                if variant is None:
                    variant = resolver.find_variant(product, selection)
                if variant is None:
                    logger.warning(f"Списання залишку: варіант {sku} {dict(selection or {})} не знайдено.")
                    return False
                new_variant = variant.model_copy(update={"stock_level": max(variant.stock_level - quantity, 0)})
                variants = [new_variant if v is variant else v for v in product.variants]
                new_product = product.model_copy(update={"variants": variants})
            else:
                new_product = product.model_copy(update={"stock_level": max(product.stock_level - quantity, 0)})
            products = [new_product if p is product else p for p in snapshot.products]
            self._snapshot = CatalogSnapshot.build(products, version=snapshot.version + 1)
            snapshot = self._snapshot
        self._persist(snapshot)
        logger.info(f"Залишок {sku} зменшено на {quantity}.")
        return True
