# storefront/models/__init__.py
from .product import (
    FieldValue, CatalogModel, Product, VariantAttribute, VariantCombination,
    ConditionalPrice, ConditionalImages, CustomizationConfig, CustomizationType,
    CustomizationField, CustomizationInputType, CustomizationPreset, FieldOption,
    FieldValidation, FieldDependency, VariantConstraint,
    VariantCustomizationOverride, CustomizationFieldOverride,
)
from .cart import CartItem, SelectedCustomization, SelectedCustomizationField
from .order import Address, CustomerData, PaymentMethod, OrderLine, OrderSubmission, OrderConfirmation

__all__ = [
    "FieldValue", "CatalogModel", "Product", "VariantAttribute", "VariantCombination",
    "ConditionalPrice", "ConditionalImages", "CustomizationConfig", "CustomizationType",
    "CustomizationField", "CustomizationInputType", "CustomizationPreset", "FieldOption",
    "FieldValidation", "FieldDependency", "VariantConstraint",
    "VariantCustomizationOverride", "CustomizationFieldOverride",
    "CartItem", "SelectedCustomization", "SelectedCustomizationField",
    "Address", "CustomerData", "PaymentMethod", "OrderLine", "OrderSubmission", "OrderConfirmation",
]
