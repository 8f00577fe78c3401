# storefront/models/order.py
import enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .cart import SelectedCustomization


class PaymentMethod(str, enum.Enum):
    pay_now = "pay_now"           # Онлайн-оплата
    pay_in_store = "pay_in_store" # Оплата при отриманні в магазині


class Address(BaseModel):
    street: str = ""
    city: str = ""
    zip: str = ""
    country: str = "CH"


class CustomerData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    email: str = ""
    phone: str = ""
    address: Address = Field(default_factory=Address)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class OrderLine(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    sku: str
    cart_item_id: str = Field(..., alias="cartItemId")
    name: str
    quantity: int
    unit_price: float = Field(..., alias="unitPrice")
    final_price: Optional[float] = Field(None, alias="finalPrice")
    selected_variants: Optional[Dict[str, str]] = Field(None, alias="selectedVariants")
    selected_customizations: Optional[List[SelectedCustomization]] = Field(None, alias="selectedCustomizations")


class OrderSubmission(BaseModel):
    """Те, що відправляється у зовнішній сервіс замовлень."""
    model_config = ConfigDict(populate_by_name=True)
    items: List[OrderLine]
    customer: CustomerData
    payment_method: PaymentMethod = Field(..., alias="paymentMethod")
    total_price: float = Field(..., alias="totalPrice")

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class OrderConfirmation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    order_number: str = Field(..., alias="orderNumber")
