# storefront/services/product_source.py
import asyncio
import copy
import logging
from typing import Any, Dict, List, Protocol

import aiohttp

from storefront.config_reader import config
from storefront.exceptions import SourceUnavailableError

logger = logging.getLogger(__name__)

_BURGER_IMAGE = "https://images.unsplash.com/photo-1568901346375-23c9450c58cd?ixlib=rb-1.2.1&auto=format&fit=crop&w=800&q=80"
_JERSEY_HOME = "https://images.example.com/jersey-home.jpg"
_JERSEY_AWAY = "https://images.example.com/jersey-away.jpg"
_JERSEY_KIDS = "https://images.example.com/jersey-kids.jpg"

MOCK_PRODUCTS: List[Dict[str, Any]] = [
    {
        "sku": "BIG-MAC", "name": "Big Mac", "price": 4.99,
        "description": "Two 100% pure beef patties and a slice of cheese, topped with lettuce, onions, pickles and our special sauce.",
        "imageUrl": _BURGER_IMAGE, "stockLevel": 10,
    },
    {
        "sku": "QUARTER-POUNDER", "name": "Quarter Pounder", "price": 5.49,
        "description": "A quarter pound of 100% pure beef, topped with cheese, onions, pickles, mustard and ketchup.",
        "imageUrl": _BURGER_IMAGE, "stockLevel": 8,
    },
    {
        "sku": "MCFLURRY", "name": "McFlurry", "price": 3.99,
        "description": "Creamy vanilla soft serve with your choice of mix-ins.",
        "imageUrl": _BURGER_IMAGE, "stockLevel": 0,
    },
    {
        "sku": "FRIES", "name": "French Fries", "price": 2.99, "specialPrice": 2.49,
        "description": "World famous fries, crispy and golden.",
        "imageUrl": _BURGER_IMAGE, "stockLevel": 15,
    },
    {
        "sku": "JERSEY-24", "name": "Home Jersey 24/25", "price": 89.9,
        "description": "Official club jersey. Optional name and number flocking.",
        "imageUrls": [_JERSEY_HOME], "stockLevel": 0, "hasVariants": True,
        "variantAttributes": [
            {"name": "Kit", "values": ["Home", "Away"]},
            {"name": "Size", "values": ["S", "M", "L", "XL", "Kids"]},
        ],
        "variants": [
            {"attributes": {"Kit": "Home", "Size": "S"}, "sku": "JERSEY-24-H-S", "stockLevel": 4},
            {"attributes": {"Kit": "Home", "Size": "M"}, "sku": "JERSEY-24-H-M", "stockLevel": 6},
            {"attributes": {"Kit": "Home", "Size": "L"}, "sku": "JERSEY-24-H-L", "stockLevel": 2},
            {"attributes": {"Kit": "Home", "Size": "XL"}, "sku": "JERSEY-24-H-XL", "stockLevel": 1, "additionalPrice": 5},
            {"attributes": {"Kit": "Away", "Size": "M"}, "sku": "JERSEY-24-A-M", "stockLevel": 3,
             "imageUrls": [_JERSEY_AWAY]},
            {"attributes": {"Kit": "Away", "Size": "L"}, "sku": "JERSEY-24-A-L", "stockLevel": 0,
             "imageUrls": [_JERSEY_AWAY]},
            {"attributes": {"Kit": "Home", "Size": "Kids"}, "sku": "JERSEY-24-H-KIDS", "stockLevel": 5,
             "customizationOverrides": {
                 "flocking": {"fields": {"player": {
                     "presets": [{"id": "muster-10", "name": "MUSTER 10", "values": {"name": "MUSTER", "number": 10}, "price": 10}],
                     "customInputPrice": 12,
                 }}},
                 "patch": {"enabled": False},
             }},
        ],
        "conditionalPrices": [{"when": {"Size": "Kids"}, "price": 69.9, "specialPrice": 59.9}],
        "conditionalImages": [{"when": {"Size": "Kids"}, "imageUrls": [_JERSEY_KIDS]}],
        "customizationConfig": {"customizations": [
            {
                "id": "flocking", "name": "Flocking", "sortOrder": 1,
                "fields": [
                    {"id": "player", "label": "Player", "inputType": "preset", "allowCustomInput": True,
                     "customInputPrice": 17, "targetFields": ["name", "number"],
                     "presets": [
                         {"id": "muster-10", "name": "MUSTER 10", "values": {"name": "MUSTER", "number": 10}, "price": 15},
                         {"id": "keller-7", "name": "KELLER 7", "values": {"name": "KELLER", "number": 7}, "price": 15},
                     ]},
                    {"id": "name", "label": "Name", "inputType": "text",
                     "validation": {"required": True, "maxLength": 12, "pattern": "[A-Za-zÄÖÜäöü .'-]+"},
                     "dependsOn": {"fieldId": "player", "customOnly": True}},
                    {"id": "number", "label": "Number", "inputType": "number",
                     "validation": {"required": True, "min": 1, "max": 99},
                     "dependsOn": {"fieldId": "player", "customOnly": True}},
                ],
            },
            {
                "id": "patch", "name": "League patch", "sortOrder": 2, "basePrice": 8,
                "availableForVariants": [{"attributeName": "Kit", "values": ["Home"]}],
                "fields": [{"id": "badge", "inputType": "toggle", "additionalPrice": 0}],
            },
            {
                "id": "gift", "name": "Gift wrap", "sortOrder": 0, "basePrice": 3, "fields": [],
            },
        ]},
    },
]


class ProductSource(Protocol):
    async def fetch(self) -> List[Dict[str, Any]]: ...


class MockProductSource:
    """Імітує API каталогу із затримкою."""

    def __init__(self, products: List[Dict[str, Any]] | None = None, delay: float | None = None):
        self.products = products if products is not None else MOCK_PRODUCTS
        self.delay = config.mock_api_delay if delay is None else delay

    async def fetch(self) -> List[Dict[str, Any]]:
        if self.delay: await asyncio.sleep(self.delay)
        return copy.deepcopy(self.products)


class HttpProductSource:
    def __init__(self, base_url: str | None = None, timeout: int | None = None):
        self.base_url = (base_url or config.api_base_url).rstrip('/')
        self.timeout = timeout or config.request_timeout

    async def fetch(self) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/products"
        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
                async with session.get(url) as response:
                    response.raise_for_status()
                    data = await response.json()
        except asyncio.TimeoutError as e:
            raise SourceUnavailableError(f"Таймаут завантаження каталогу з {url}") from e
        except aiohttp.ClientError as e:
            raise SourceUnavailableError(f"Помилка завантаження каталогу з {url}: {e}") from e
        if not isinstance(data, list):
            raise SourceUnavailableError(f"Неочікувана відповідь каталогу: {type(data).__name__}")
        return data


def get_product_source() -> ProductSource:
    if config.use_mock_api:
        logger.info("Використовується мок-API каталогу.")
        return MockProductSource()
    return HttpProductSource()
