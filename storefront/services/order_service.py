# storefront/services/order_service.py
import asyncio
import logging
import random
import string
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol

import aiohttp
from pydantic import ValidationError

from storefront.config_reader import config
from storefront.exceptions import OrderSubmissionError
from storefront.models import CustomerData, OrderConfirmation, OrderLine, OrderSubmission, PaymentMethod
from storefront.services import cart_identity, customer_service
from storefront.services.cart_service import CartLedger

if TYPE_CHECKING:
    from storefront.services.product_repository import ProductRepository

logger = logging.getLogger(__name__)

PAYMENT_DISPLAY_NAMES: Dict[PaymentMethod, str] = {
    PaymentMethod.pay_now: "Pay now", PaymentMethod.pay_in_store: "Pay in store",
}


# --- Формування замовлення ---

def assemble_order(ledger: CartLedger, customer: CustomerData, payment_method: PaymentMethod) -> OrderSubmission | None:
    """Серіалізує вміст кошика та дані клієнта у payload замовлення. Порожній кошик - None."""
    items = ledger.items
    if not items:
        return None
    lines = [
        OrderLine(
            sku=item.sku, cart_item_id=item.cart_item_id, name=item.name, quantity=item.quantity,
            unit_price=item.unit_price, final_price=item.final_price,
            selected_variants=item.selected_variants, selected_customizations=item.selected_customizations,
        )
        for item in items
    ]
    return OrderSubmission(items=lines, customer=customer, payment_method=payment_method, total_price=ledger.total_price)


def generate_order_number() -> str:
    suffix = ''.join(random.choices(string.ascii_uppercase + string.digits, k=9))
    return f"ORD-{suffix}"


def format_order_summary(order: OrderSubmission, order_number: str | None = None) -> str:
    items_text = ""
    for i, line in enumerate(order.items, 1):
        price = line.final_price if line.final_price is not None else line.unit_price
        items_text += f"  {i}. {line.name} (SKU: {line.sku})\n"
        if line.selected_variants:
            variants = ", ".join(f"{k}: {v}" for k, v in line.selected_variants.items())
            items_text += f"     Variant: {variants}\n"
        for customization in line.selected_customizations or []:
            values = ", ".join(f"{f.field_id}={f.value}" for f in customization.fields)
            items_text += f"     + {customization.name} ({values}): {customization.total_price:.2f}\n"
        items_text += (
            f"     Qty: {line.quantity} x {price:.2f}\n"
            f"     Sum: {cart_identity.round_money(price * line.quantity):.2f}\n"
        )

    customer = order.customer; address = customer.address
    city_line = f"{address.zip} {address.city}".strip()
    address_line = ", ".join(filter(None, [address.street, city_line, address.country]))
    summary = f"""
========================================
ORDER: {order_number or 'N/A'}
DATE: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}
========================================

CUSTOMER:
  Name: {customer.full_name or 'N/A'}
  Email: {customer.email or 'N/A'}
  Phone: {customer.phone or 'N/A'}
  Address: {address_line or 'N/A'}

PAYMENT:
  {PAYMENT_DISPLAY_NAMES.get(order.payment_method, order.payment_method.value)}

ITEMS:
{items_text}
========================================
TOTAL: {order.total_price:.2f}
========================================
"""
    return summary.strip()


# --- Сервіси замовлень (зовнішні) ---

class OrderSink(Protocol):
    async def create_order(self, order: OrderSubmission) -> OrderConfirmation: ...


class MockOrderSink:
    def __init__(self, delay: float | None = None):
        self.delay = config.mock_api_delay if delay is None else delay
        self.orders: list[OrderSubmission] = []

    async def create_order(self, order: OrderSubmission) -> OrderConfirmation:
        if self.delay: await asyncio.sleep(self.delay)
        self.orders.append(order)
        return OrderConfirmation(order_number=generate_order_number())


class HttpOrderSink:
    def __init__(self, base_url: str | None = None, timeout: int | None = None):
        self.base_url = (base_url or config.api_base_url).rstrip('/')
        self.timeout = timeout or config.request_timeout

    async def create_order(self, order: OrderSubmission) -> OrderConfirmation:
        url = f"{self.base_url}/orders"
        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
                async with session.post(url, json=order.to_json()) as response:
                    response.raise_for_status()
                    data: Any = await response.json()
        except asyncio.TimeoutError as e:
            raise OrderSubmissionError("Таймаут створення замовлення") from e
        except aiohttp.ClientError as e:
            raise OrderSubmissionError(f"Помилка створення замовлення: {e}") from e
        except ValueError as e: # тіло відповіді - не JSON
            raise OrderSubmissionError("Неочікувана відповідь сервісу замовлень") from e
        try:
            return OrderConfirmation.model_validate(data)
        except ValidationError as e:
            raise OrderSubmissionError(f"Неочікувана відповідь сервісу замовлень: {data!r}") from e


def get_order_sink() -> OrderSink:
    return MockOrderSink() if config.use_mock_api else HttpOrderSink()


class CheckoutService:
    """Оформлення: payload -> сервіс замовлень -> списання залишків -> очищення кошика."""

    def __init__(self, ledger: CartLedger, sink: OrderSink, repository: Optional["ProductRepository"] = None):
        self.ledger = ledger
        self.sink = sink
        self.repository = repository
        self.last_error: str | None = None

    async def place_order(self, customer: CustomerData, payment_method: PaymentMethod) -> OrderConfirmation | None:
        self.last_error = None
        invalid_fields = customer_service.validate_customer(customer)
        if invalid_fields:
            self.last_error = "Invalid customer data"
            logger.warning(f"Оформлення: некоректні дані клієнта: {', '.join(invalid_fields)}")
            return None
        order = assemble_order(self.ledger, customer, payment_method)
        if order is None:
            self.last_error = "Cart is empty"
            logger.warning("Оформлення: кошик порожній.")
            return None
        try:
            confirmation = await self.sink.create_order(order)
        except OrderSubmissionError as e:
            self.last_error = "Failed to create order"
            logger.error(f"Оформлення не вдалося: {e}")
            return None

        # Залишки списуються лише після підтвердженого замовлення
        if self.repository is not None:
            for line in order.items:
                self.repository.update_stock_level(line.sku, line.quantity, line.selected_variants)
        self.ledger.clear()
        logger.info(f"Замовлення {confirmation.order_number} створено: {len(order.items)} позицій, сума {order.total_price}.")
        logger.debug(format_order_summary(order, confirmation.order_number))
        return confirmation
