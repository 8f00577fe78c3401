# storefront/services/persister.py
# Просте key-value сховище JSON ("products", "cart").
import json
import logging
from pathlib import Path
from typing import Any, Dict, Protocol

logger = logging.getLogger(__name__)


class Persister(Protocol):
    def load(self, key: str) -> Any | None: ...
    def save(self, key: str, data: Any) -> None: ...


class MemoryPersister:
    """Для тестів і для роботи без диска. Зберігає копію JSON, а не живі об'єкти."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def load(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def save(self, key: str, data: Any) -> None:
        self._data[key] = json.dumps(data, ensure_ascii=False)


class JsonFilePersister:
    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _get_filepath(self, key: str) -> Path: return self.directory / f"{key}.json"

    def load(self, key: str) -> Any | None:
        filepath = self._get_filepath(key)
        if not filepath.exists(): return None
        try:
            with open(filepath, 'r', encoding='utf-8') as f: return json.load(f)
        except (json.JSONDecodeError, ValueError, OSError) as e:
            logger.error(f"Помилка читання/парсингу '{key}' ({filepath}): {e}")
            return None

    def save(self, key: str, data: Any) -> None:
        filepath = self._get_filepath(key)
        tmp_path = filepath.with_suffix('.json.tmp')
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f: json.dump(data, f, ensure_ascii=False, indent=4)
            tmp_path.replace(filepath)
        except OSError as e:
            logger.error(f"Помилка запису '{key}' ({filepath}): {e}")
