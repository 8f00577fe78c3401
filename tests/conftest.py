"""Shared fixtures: small catalogs covering plain, variant and customizable products."""

import pytest

from storefront.models import Product
from storefront.services.persister import MemoryPersister

FLOCKING = {
    "id": "flocking",
    "name": "Flocking",
    "sortOrder": 1,
    "fields": [
        {
            "id": "player",
            "inputType": "preset",
            "allowCustomInput": True,
            "customInputPrice": 17,
            "targetFields": ["name", "number"],
            "presets": [
                {"id": "a-5", "name": "A 5", "values": {"name": "A", "number": 5}, "price": 15},
                {"id": "b-9", "name": "B 9", "values": {"name": "B", "number": 9}, "price": 15},
            ],
        },
        {
            "id": "name",
            "inputType": "text",
            "validation": {"required": True, "maxLength": 10},
            "dependsOn": {"fieldId": "player", "customOnly": True},
        },
        {
            "id": "number",
            "inputType": "number",
            "validation": {"required": True, "min": 1, "max": 99},
            "dependsOn": {"fieldId": "player", "customOnly": True},
        },
    ],
}


@pytest.fixture
def product_p() -> Product:
    """No variants, price 10, special price 8, stock 2."""
    return Product.model_validate(
        {
            "sku": "P",
            "name": "Plain",
            "price": 10,
            "specialPrice": 8,
            "imageUrls": ["p.jpg"],
            "stockLevel": 2,
        }
    )


@pytest.fixture
def product_q() -> Product:
    """Size S/M, base price 20, M costs +2 and has one piece left."""
    return Product.model_validate(
        {
            "sku": "Q",
            "name": "Sized",
            "price": 20,
            "imageUrls": ["q.jpg"],
            "hasVariants": True,
            "variantAttributes": [{"name": "Size", "values": ["S", "M"]}],
            "variants": [
                {"attributes": {"Size": "S"}, "sku": "Q-S", "stockLevel": 3},
                {
                    "attributes": {"Size": "M"},
                    "sku": "Q-M",
                    "stockLevel": 1,
                    "additionalPrice": 2,
                    "imageUrls": ["q-m.jpg"],
                },
            ],
        }
    )


@pytest.fixture
def jersey() -> Product:
    """Two-attribute variant product with conditional rules and customizations."""
    return Product.model_validate(
        {
            "sku": "JERSEY",
            "name": "Jersey",
            "price": 80,
            "specialPrice": 70,
            "imageUrls": ["home.jpg"],
            "hasVariants": True,
            "variantAttributes": [
                {"name": "Kit", "values": ["Home", "Away"]},
                {"name": "Size", "values": ["M", "L", "Kids"]},
            ],
            "variants": [
                {"attributes": {"Kit": "Home", "Size": "M"}, "sku": "J-H-M", "stockLevel": 5},
                {"attributes": {"Kit": "Home", "Size": "L"}, "sku": "J-H-L", "stockLevel": 0},
                {
                    "attributes": {"Kit": "Away", "Size": "M"},
                    "sku": "J-A-M",
                    "stockLevel": 2,
                    "additionalPrice": 5,
                    "imageUrls": ["away.jpg"],
                },
                {
                    "attributes": {"Kit": "Home", "Size": "Kids"},
                    "sku": "J-H-K",
                    "stockLevel": 4,
                    "customizationOverrides": {
                        "flocking": {"fields": {"player": {"customInputPrice": 12}}},
                        "patch": {"enabled": False},
                    },
                },
            ],
            "conditionalPrices": [
                {"when": {"Size": "Kids"}, "price": 50, "specialPrice": 45},
                {"when": {"Kit": "Home", "Size": "Kids"}, "price": 1},
            ],
            "conditionalImages": [{"when": {"Kit": "Away", "Size": "M"}, "imageUrls": ["away-m-1.jpg", "away-m-2.jpg"]}],
            "customizationConfig": {
                "customizations": [
                    FLOCKING,
                    {
                        "id": "patch",
                        "name": "League patch",
                        "sortOrder": 1,
                        "basePrice": 8,
                        "availableForVariants": [{"attributeName": "Kit", "values": ["Home"]}],
                        "fields": [{"id": "badge", "inputType": "toggle"}],
                    },
                    {"id": "gift", "name": "Gift wrap", "sortOrder": 0, "basePrice": 3, "fields": []},
                    {"id": "hidden", "name": "Disabled", "enabled": False, "fields": []},
                ]
            },
        }
    )


@pytest.fixture
def flocking_product() -> Product:
    """Non-variant product offering the flocking customization."""
    return Product.model_validate(
        {
            "sku": "SHIRT",
            "name": "Shirt",
            "price": 60,
            "imageUrls": ["shirt.jpg"],
            "stockLevel": 10,
            "customizationConfig": {"customizations": [FLOCKING]},
        }
    )


@pytest.fixture
def persister() -> MemoryPersister:
    return MemoryPersister()
