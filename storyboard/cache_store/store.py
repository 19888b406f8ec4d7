"""Key-value stores for cached frame media, prompts, and project snapshots.

- Purpose: give the editor layer a small get/set/remove repository it can be handed at construction.
- Assumptions: a single process owns a store at a time; values are plain strings.
- Side effects: JsonFileStore rewrites its backing file on every mutation.
"""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Minimal string repository consumed by the shot editor."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove(self, key: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def keys(self) -> List[str]:
        raise NotImplementedError

    def remove_prefixed(self, prefixes: Iterable[str]) -> List[str]:
        """Remove every key starting with one of ``prefixes`` and return the removed keys."""

        prefixes = tuple(prefixes)
        removed = [key for key in self.keys() if key.startswith(prefixes)]
        for key in removed:
            self.remove(key)
        return removed


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)


class JsonFileStore(KeyValueStore):
    """Persist the cache as a single JSON object on disk.

    A missing file is an empty store. A file that cannot be decoded is logged and
    treated as empty; the next write replaces it.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._data = self._read()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
            if not text.strip():
                return {}
            payload = json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable cache file %s: %s", self.path, exc)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Ignoring cache file %s: root must be an object", self.path)
            return {}
        return {str(key): value for key, value in payload.items() if isinstance(value, str)}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2, ensure_ascii=False), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        logger.debug("Cached %s in %s", key, self.path)
        self._write()

    def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._write()

    def keys(self) -> List[str]:
        return list(self._data)
