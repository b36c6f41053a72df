# SPDX-License-Identifier: GPL-3.0-only
# SPDX-FileCopyrightText: Copyright (c) 2025 Andrew Wyatt (Fewtarius)

"""
Update Cache Storage

The cache of fetched manifests lives in a key-value store scoped by the
script's name. Losing the cache only costs an extra request, so writes are
best-effort: failures are reported through the return value, never raised.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional

import pydantic

from .schemas import StorageData

logger = logging.getLogger(__name__)

STORAGE_KEY_PREFIX = "scriptUpdater"


# =============================================================================
# KEY-VALUE STORES
# =============================================================================

class KeyValueStore(ABC):
    """Interface for the persistent key-value store holding the cache."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    def set(self, key: str, value: Any) -> bool:
        """Store a JSON-compatible value. Returns False if the write failed."""


class MemoryStore(KeyValueStore):
    """In-process store, useful for embedding and tests."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> bool:
        self._data[key] = value
        return True


class JsonFileStore(KeyValueStore):
    """
    Key-value store backed by a single JSON object file.

    Thread-safe. Writes go to a temporary file which then replaces the
    store file, so a crash never leaves a half-written store behind.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = Lock()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to read store %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring store %s: top-level value is not an object", self.path)
            return {}
        return data

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: Any) -> bool:
        with self._lock:
            data = self._read()
            data[key] = value
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                temp_path = self.path.with_suffix(".tmp")
                with open(temp_path, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                temp_path.replace(self.path)
            except (OSError, TypeError, ValueError) as e:
                logger.error("Failed to write store %s: %s", self.path, e)
                return False
            return True


# =============================================================================
# UPDATE CACHE
# =============================================================================

class UpdateCache:
    """Reads and writes the StorageData record of one script."""

    def __init__(self, store: KeyValueStore, script_name: str):
        self.store = store
        self.key = f"{STORAGE_KEY_PREFIX}.{script_name}"

    def get(self) -> Optional[StorageData]:
        """Return the persisted record, or None if nothing usable is stored."""
        record = self.store.get(self.key)
        if record is None:
            return None
        try:
            return StorageData.from_record(record)
        except pydantic.ValidationError as e:
            logger.warning("Discarding corrupt update cache %s: %s", self.key, e)
            return None

    def load(self) -> StorageData:
        """Return the persisted record, or an empty one that is always stale."""
        cached = self.get()
        if cached is None:
            return StorageData(last_checked=0, versions=[])
        return cached

    def save(self, data: StorageData) -> bool:
        """Persist the record. Returns False instead of raising on failure."""
        try:
            return bool(self.store.set(self.key, data.to_record()))
        except Exception as e:
            logger.warning("Update cache write for %s raised: %s", self.key, e)
            return False
