# storefront/models/product.py
from enum import Enum
from typing import Any, Dict, List, Optional, Union
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

# Значення поля кастомізації: текст, число або перемикач
FieldValue = Union[str, int, float, bool]


class CatalogModel(BaseModel):
    """Базова модель каталогу: camelCase у JSON, незмінна після створення."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class VariantAttribute(CatalogModel):
    name: str
    values: List[str] = Field(default_factory=list)


class ConditionalPrice(CatalogModel):
    when: Dict[str, str]
    price: float
    special_price: Optional[float] = Field(None, alias="specialPrice")


class ConditionalImages(CatalogModel):
    when: Dict[str, str]
    image_urls: List[str] = Field(default_factory=list, alias="imageUrls")


# --- Кастомізації (напр. флок на джерсі) ---

class CustomizationInputType(str, Enum):
    TEXT = 'text'
    NUMBER = 'number'
    SELECT = 'select'
    TOGGLE = 'toggle'
    PRESET = 'preset'


class FieldValidation(CatalogModel):
    required: bool = False
    min: Optional[float] = None
    max: Optional[float] = None
    min_length: Optional[int] = Field(None, alias="minLength")
    max_length: Optional[int] = Field(None, alias="maxLength")
    pattern: Optional[str] = None


class FieldOption(CatalogModel):
    value: str
    label: Optional[str] = None
    price: Optional[float] = None


class CustomizationPreset(CatalogModel):
    id: str
    name: str
    values: Dict[str, FieldValue] = Field(default_factory=dict)
    price: float = 0


class FieldDependency(CatalogModel):
    """Поле видиме лише коли поле `field_id` має одне з `values` (або в режимі ручного вводу)."""
    field_id: str = Field(..., alias="fieldId")
    values: Optional[List[str]] = None
    custom_only: bool = Field(False, alias="customOnly")


class CustomizationField(CatalogModel):
    id: str
    label: Optional[str] = None
    input_type: CustomizationInputType = Field(CustomizationInputType.TEXT, alias="inputType")
    validation: FieldValidation = Field(default_factory=FieldValidation)
    options: List[FieldOption] = Field(default_factory=list)
    presets: List[CustomizationPreset] = Field(default_factory=list)
    allow_custom_input: bool = Field(False, alias="allowCustomInput")
    custom_input_price: Optional[float] = Field(None, alias="customInputPrice")
    target_fields: List[str] = Field(default_factory=list, alias="targetFields")
    additional_price: float = Field(0, alias="additionalPrice")
    depends_on: Optional[FieldDependency] = Field(None, alias="dependsOn")

    def get_preset(self, preset_id: str) -> Optional[CustomizationPreset]:
        return next((p for p in self.presets if p.id == preset_id), None)


class VariantConstraint(CatalogModel):
    attribute_name: str = Field(..., alias="attributeName")
    values: List[str] = Field(default_factory=list)


class CustomizationType(CatalogModel):
    id: str
    name: str
    description: Optional[str] = None
    enabled: bool = True
    sort_order: int = Field(0, alias="sortOrder")
    fields: List[CustomizationField] = Field(default_factory=list)
    available_for_variants: Optional[List[VariantConstraint]] = Field(None, alias="availableForVariants")
    base_price: Optional[float] = Field(None, alias="basePrice")

    def get_field(self, field_id: str) -> Optional[CustomizationField]:
        return next((f for f in self.fields if f.id == field_id), None)


class CustomizationConfig(CatalogModel):
    customizations: List[CustomizationType] = Field(default_factory=list)


class CustomizationFieldOverride(CatalogModel):
    """Розріджений патч поля: задані лише ті ключі, що перекриваються."""
    presets: Optional[List[CustomizationPreset]] = None
    custom_input_price: Optional[float] = Field(None, alias="customInputPrice")
    options: Optional[List[FieldOption]] = None
    additional_price: Optional[float] = Field(None, alias="additionalPrice")


class VariantCustomizationOverride(CatalogModel):
    enabled: Optional[bool] = None
    fields: Dict[str, CustomizationFieldOverride] = Field(default_factory=dict)


# --- Товар та його варіанти ---

class VariantCombination(CatalogModel):
    attributes: Dict[str, str]
    sku: str
    stock_level: int = Field(0, ge=0, alias="stockLevel")
    image_urls: Optional[List[str]] = Field(None, alias="imageUrls")
    additional_price: Optional[float] = Field(None, alias="additionalPrice")
    customization_overrides: Optional[Dict[str, VariantCustomizationOverride]] = Field(
        None, alias="customizationOverrides"
    )


class Product(CatalogModel):
    sku: str
    name: str
    description: str = ""
    price: float = Field(..., validation_alias=AliasChoices("price", "basePrice"), serialization_alias="price")
    special_price: Optional[float] = Field(None, alias="specialPrice")
    image_urls: List[str] = Field(default_factory=list, alias="imageUrls")
    stock_level: int = Field(
        0, ge=0, validation_alias=AliasChoices("stockLevel", "baseStockLevel", "stock_level"),
        serialization_alias="stockLevel",
    )
    has_variants: bool = Field(False, alias="hasVariants")
    variant_attributes: Optional[List[VariantAttribute]] = Field(None, alias="variantAttributes")
    variants: Optional[List[VariantCombination]] = None
    conditional_prices: Optional[List[ConditionalPrice]] = Field(None, alias="conditionalPrices")
    conditional_images: Optional[List[ConditionalImages]] = Field(None, alias="conditionalImages")
    customization_config: Optional[CustomizationConfig] = Field(None, alias="customizationConfig")

    @model_validator(mode="before")
    @classmethod
    def _lift_single_image(cls, data: Any) -> Any:
        # Старий формат каталогу: один `imageUrl` замість списку
        if isinstance(data, dict) and data.get("imageUrl") and not data.get("imageUrls") and not data.get("image_urls"):
            data = {**data, "imageUrls": [data["imageUrl"]]}
        return data

    @model_validator(mode="after")
    def _check_variants(self) -> 'Product':
        if not self.has_variants:
            return self
        if not self.variants:
            raise ValueError(f"Товар {self.sku}: hasVariants=true, але варіантів немає")
        attribute_names = {a.name for a in self.variant_attributes or []}
        seen_skus = set()
        for variant in self.variants:
            unknown = set(variant.attributes) - attribute_names
            if unknown:
                raise ValueError(f"Товар {self.sku}: варіант {variant.sku} має невідомі атрибути {sorted(unknown)}")
            missing = attribute_names - set(variant.attributes)
            if missing:
                raise ValueError(f"Товар {self.sku}: варіанту {variant.sku} бракує атрибутів {sorted(missing)}")
            if variant.sku in seen_skus:
                raise ValueError(f"Товар {self.sku}: дубльований SKU варіанта {variant.sku}")
            seen_skus.add(variant.sku)
        return self

    @property
    def customizations(self) -> List[CustomizationType]:
        return self.customization_config.customizations if self.customization_config else []

    @property
    def attribute_names(self) -> List[str]:
        return [a.name for a in self.variant_attributes or []]
