import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Key-value file could not be read or written."""


class JsonKeyValueStore:
    """Small key-value store kept as one JSON object on disk."""

    def __init__(self, path: str):
        """Initialize store.

        Args:
            path: JSON file path; parent directories are created on demand
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            raise StorageError(f"Failed to read {self.path}: {e}")
        if not isinstance(data, dict):
            raise StorageError(f"Failed to read {self.path}: top-level value is not an object")
        return data

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        try:
            data = self._load()
        except StorageError as e:
            logger.warning(f"Overwriting unreadable store: {e}")
            data = {}
        data[key] = value

        tmp_path = self.path.with_suffix(self.path.suffix + '.tmp')
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except IOError as e:
            raise StorageError(f"Failed to write {self.path}: {e}")

        logger.debug(f"Stored key {key!r} in {self.path}")
