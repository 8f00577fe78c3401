# storefront/exceptions.py


class StorefrontError(Exception):
    """Базовий виняток вітрини."""


class SourceUnavailableError(StorefrontError):
    """Не вдалося отримати каталог від джерела товарів."""


class OrderSubmissionError(StorefrontError):
    """Сервіс замовлень відхилив або не прийняв замовлення."""
