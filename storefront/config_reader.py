# storefront/config_reader.py
import logging
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'


class Settings(BaseSettings):
    """
    Клас для читання та валідації всіх змінних середовища.
    Автоматично перетворює рядки на потрібні типи (int, bool, etc.).
    """
    # --- API каталогу та замовлень ---
    api_base_url: str = "http://localhost:3000"
    use_mock_api: bool = True
    mock_api_delay: float = 0.5 # Імітація затримки мок-API (секунди)
    request_timeout: int = 60

    # --- Збереження стану ---
    data_dir: str = "./data"
    products_storage_key: str = "products"
    cart_storage_key: str = "cart"
    cart_ttl_minutes: Optional[int] = None # None = кошик не застаріває

    # --- Фонове оновлення каталогу ---
    catalog_refresh_minutes: int = 5
    scheduler_timezone: str = "Europe/Zurich"

    # --- Логування ---
    log_level: str = "INFO"

    # Конфігурація для Pydantic: вказуємо, що треба читати файл .env
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def setup_logging(level: str | None = None):
    logging.basicConfig(level=(level or config.log_level).upper(), format=LOG_FORMAT)


# Створюємо єдиний екземпляр конфігурації, який будемо імпортувати
try:
    config = Settings()
except ValidationError as e:
    logger.error(f"❌ Помилка завантаження конфігурації: {e}")
    raise
