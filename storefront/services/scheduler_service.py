# storefront/services/scheduler_service.py
import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from storefront.config_reader import config
from storefront.services.product_repository import ProductRepository

logger = logging.getLogger(__name__)

CATALOG_REFRESH_JOB_ID = 'catalog_refresh'


async def refresh_catalog_job(repository: ProductRepository):
    """Фонове оновлення: fetch, потім атомарна заміна знімка. Помилка лишає старий каталог."""
    if repository.is_loading:
        logger.info("Планувальник: каталог вже завантажується. Пропускаю.")
        return
    if not await repository.refresh():
        logger.warning(f"Планувальник: оновлення каталогу не вдалося ({repository.error}), працюємо зі старим знімком.")


def create_scheduler(repository: ProductRepository, minutes: int | None = None) -> AsyncIOScheduler:
    scheduler = AsyncIOScheduler(timezone=config.scheduler_timezone)
    scheduler.add_job(
        refresh_catalog_job, 'interval', minutes=minutes or config.catalog_refresh_minutes,
        args=(repository,), id=CATALOG_REFRESH_JOB_ID, misfire_grace_time=60, max_instances=1,
    )
    return scheduler


def start_catalog_scheduler(repository: ProductRepository, minutes: int | None = None) -> AsyncIOScheduler:
    """Запускає планувальник оновлення каталогу. Потребує запущеного event loop."""
    scheduler = create_scheduler(repository, minutes)
    scheduler.start()
    logger.info("✅ Планувальник оновлення каталогу запущено.")
    return scheduler
