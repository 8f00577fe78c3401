# storefront/app.py
import logging
from typing import Optional

from storefront.api_models import AddItemRequest, CreateOrderRequest, RemoveItemRequest, UpdateItemRequest
from storefront.config_reader import config
from storefront.models import OrderConfirmation
from storefront.services import customization_service, resolver
from storefront.services.cart_service import CartLedger
from storefront.services.order_service import CheckoutService, OrderSink, get_order_sink
from storefront.services.persister import JsonFilePersister, Persister
from storefront.services.product_repository import ProductRepository
from storefront.services.product_source import ProductSource, get_product_source

logger = logging.getLogger(__name__)


class Storefront:
    """Зв'язує каталог, кошик та оформлення в одне ціле."""

    def __init__(self, repository: ProductRepository, ledger: CartLedger, checkout: CheckoutService):
        self.repository = repository
        self.ledger = ledger
        self.checkout = checkout

    @classmethod
    def build(
        cls,
        persister: Optional[Persister] = None,
        source: Optional[ProductSource] = None,
        sink: Optional[OrderSink] = None,
    ) -> 'Storefront':
        persister = persister if persister is not None else JsonFilePersister(config.data_dir)
        repository = ProductRepository(source or get_product_source(), persister)
        ledger = CartLedger(persister, repository=repository)
        checkout = CheckoutService(ledger, sink or get_order_sink(), repository=repository)
        return cls(repository, ledger, checkout)

    async def start(self) -> bool:
        restored = self.ledger.load()
        if restored: logger.info(f"Кошик відновлено: {restored} позицій.")
        return await self.repository.load_products()

    # --- Кошик ---

    def add_item(self, request: AddItemRequest) -> bool:
        product = self.repository.get_product(request.sku)
        if product is None:
            logger.warning(f"Кошик: не знайдено SKU {request.sku}")
            return False
        customizations = []
        if request.customizations:
            customizations = customization_service.select_customizations(
                product, request.selected_variants, request.customizations
            )
            if customizations is None:
                return False
        return self.ledger.add(product, request.selected_variants, customizations)

    def update_item(self, request: UpdateItemRequest) -> bool:
        return self.ledger.set_quantity(request.cart_item_id, request.quantity)

    def remove_item(self, request: RemoveItemRequest):
        self.ledger.remove(request.cart_item_id)

    # --- Оформлення ---

    async def create_order(self, request: CreateOrderRequest) -> OrderConfirmation | None:
        if request.note: logger.info(f"Примітка до замовлення: {request.note}")
        return await self.checkout.place_order(request.customer_data, request.payment_method)

    def describe_catalog(self) -> str:
        lines = []
        for product in self.repository.products:
            if product.has_variants:
                prices = [resolver.resolve_price(product, v.attributes) for v in product.variants or []]
                stock = sum(v.stock_level for v in product.variants or [])
                price_text = f"{min(prices):.2f}-{max(prices):.2f}" if prices else "-"
            else:
                price_text = f"{resolver.resolve_price(product):.2f}"
                stock = product.stock_level
            lines.append(f"{product.sku:<18} {product.name:<24} {price_text:>12}  stock: {stock}")
        return "\n".join(lines)
