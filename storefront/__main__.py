# storefront/__main__.py
import asyncio
import logging

from storefront.app import Storefront
from storefront.config_reader import setup_logging

logger = logging.getLogger("storefront")


async def main():
    setup_logging()
    storefront = Storefront.build()
    if not await storefront.start():
        logger.error(f"Каталог недоступний: {storefront.repository.error}")
        return
    print(storefront.describe_catalog())
    logger.info(f"Кошик: {storefront.ledger.total_items} шт., сума {storefront.ledger.total_price:.2f}")


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
