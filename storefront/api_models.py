# storefront/api_models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional

from storefront.models import CustomerData, PaymentMethod

# --- Запити до кошика ---

class AddItemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    sku: str
    selected_variants: Dict[str, str] = Field(default_factory=dict, alias="selectedVariants")
    # id кастомізації -> {id поля: значення}
    customizations: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

class UpdateItemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    cart_item_id: str = Field(..., alias="cartItemId")
    quantity: int

class RemoveItemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    cart_item_id: str = Field(..., alias="cartItemId")

# --- Оформлення ---

class CreateOrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    customer_data: CustomerData = Field(..., alias="customerData")
    payment_method: PaymentMethod = Field(PaymentMethod.pay_now, alias="paymentMethod")
    note: Optional[str] = None
