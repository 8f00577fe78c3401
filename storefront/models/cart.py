# storefront/models/cart.py
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .product import FieldValue


class SelectedCustomizationField(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    field_id: str = Field(..., alias="fieldId")
    value: Optional[FieldValue] = None
    preset_id: Optional[str] = Field(None, alias="presetId")
    custom_input: bool = Field(False, alias="customInput")
    additional_price: float = Field(0, alias="additionalPrice")


class SelectedCustomization(BaseModel):
    """Вибір покупця; ціна рахується один раз при виборі і далі не змінюється."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)
    customization_id: str = Field(..., alias="customizationId")
    name: str = ""
    fields: List[SelectedCustomizationField] = Field(default_factory=list)
    total_price: float = Field(0, alias="totalPrice")


class CartItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    sku: str
    name: str
    unit_price: float = Field(..., alias="unitPrice")
    original_price: float = Field(..., alias="originalPrice")
    quantity: int = Field(1, ge=1)
    image_url: str = Field("", alias="imageUrl")
    stock_level: int = Field(0, ge=0, alias="stockLevel")
    selected_variants: Optional[Dict[str, str]] = Field(None, alias="selectedVariants")
    cart_item_id: str = Field(..., alias="cartItemId")
    selected_customizations: Optional[List[SelectedCustomization]] = Field(None, alias="selectedCustomizations")
    customization_total_price: Optional[float] = Field(None, alias="customizationTotalPrice")
    final_price: Optional[float] = Field(None, alias="finalPrice")

    @property
    def effective_price(self) -> float:
        return self.final_price if self.final_price is not None else self.unit_price

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
