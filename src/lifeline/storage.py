"""
Persistence collaborator.

An opaque key-value store with get/set/remove. The navigator mirrors its
state here but never depends on it: SafeStore swallows every failure so
the in-memory state stays the authority.

Stored keys:
    NAV_KEY  -> JSON text {"current": id | null, "history": [id, ...]}
    LANG_KEY -> language string
"""
from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """String key -> string value storage."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...


class MemoryStore(KeyValueStore):
    """In-process store, gone when the process ends."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """
    Local device storage backed by one JSON file.

    The file is re-read on every call and rewritten on every change;
    the stored data is a handful of short strings.
    """

    def __init__(self, path: str):
        self.path = path

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            return {}
        return data

    def _write(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class SafeStore(KeyValueStore):
    """
    Wraps a store so that no failure escapes.

    Storage may be full, disabled or missing; the caller carries on in
    memory. A None inner store behaves as an always-empty store.
    """

    def __init__(self, store: Optional[KeyValueStore] = None):
        self.store = store

    def get(self, key: str) -> Optional[str]:
        if self.store is None:
            return None
        try:
            return self.store.get(key)
        except Exception as e:
            logger.debug("Storage read of %r failed: %s", key, e)
            return None

    def set(self, key: str, value: str) -> None:
        if self.store is None:
            return
        try:
            self.store.set(key, value)
        except Exception as e:
            logger.debug("Storage write of %r failed: %s", key, e)

    def remove(self, key: str) -> None:
        if self.store is None:
            return
        try:
            self.store.remove(key)
        except Exception as e:
            logger.debug("Storage remove of %r failed: %s", key, e)
