"""Key-value repositories backing the shot editor's media and prompt cache."""
from __future__ import annotations

from .keys import FRAME_TYPES, concept_image_key, frame_key
from .store import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "FRAME_TYPES",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "concept_image_key",
    "frame_key",
]
