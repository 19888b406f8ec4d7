"""Shot editor service.

- Purpose: resolve a frame's effective prompt, image, and video through an injected cache repository.
- Assumptions: the store is owned by the caller; the prompt compiler never sees it.
- Side effects: writes and removes cache keys on the injected store.
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional

from storyboard.cache_store.keys import (
    CONCEPT_IMAGE_PREFIXES,
    CURRENT_PROJECT_KEY,
    PROJECT_PREFIXES,
    concept_image_key,
    frame_key,
)
from storyboard.cache_store.store import KeyValueStore
from storyboard.prompt_builder import compiler
from storyboard.prompt_builder.models import Library

from .models import BlockFrame, Frame, ProjectDocument, ProjectError, Scene

logger = logging.getLogger(__name__)


class ShotEditor:
    """Per-frame editing operations backed by a key-value cache."""

    def __init__(self, store: KeyValueStore, legacy_fallback: bool = True) -> None:
        self.store = store
        self.legacy_fallback = legacy_fallback

    def _cached(self, key: str) -> Optional[str]:
        value = self.store.get(key)
        return value if value else None

    def _save(self, key: str, value: str) -> bool:
        if not value or not value.strip():
            return False
        self.store.set(key, value)
        return True

    def save_frame_value(self, kind: str, scene_id: str, frame_type: str, value: str) -> bool:
        """Cache a frame image, video, or prompt; blank values are ignored."""

        return self._save(frame_key(kind, scene_id, frame_type), value)

    def assemble_prompt(self, frame: Frame, library: Library) -> str:
        """Assemble a frame's prompt, falling back to its legacy text on failure."""

        fallback = frame.legacy_prompt if self.legacy_fallback else ""
        if not isinstance(frame, BlockFrame):
            return fallback
        try:
            return compiler.generate_block_prompt(library, frame.prompt_block)
        except Exception as exc:
            logger.warning("Prompt assembly failed; using fallback text: %s", exc)
            return fallback

    def prompt_for(self, scene: Scene, frame_type: str, library: Library) -> str:
        cached = self._cached(frame_key("prompt", scene.scene_id, frame_type))
        if cached:
            return cached
        frame = scene.frame(frame_type)
        if frame is None:
            return ""
        return self.assemble_prompt(frame, library)

    def save_prompt(self, scene: Scene, frame_type: str, prompt: str) -> bool:
        return self.save_frame_value("prompt", scene.scene_id, frame_type, prompt)

    def reset_prompt(self, scene: Scene, frame_type: str) -> None:
        """Drop an edited prompt so the assembled prompt shows again."""

        self.store.remove(frame_key("prompt", scene.scene_id, frame_type))

    def image_url_for(self, scene: Scene, frame_type: str) -> str:
        cached = self._cached(frame_key("image", scene.scene_id, frame_type))
        if cached:
            return cached
        frame = scene.frame(frame_type)
        return (frame.image_url if frame else None) or ""

    def save_image_url(self, scene: Scene, frame_type: str, url: str) -> bool:
        return self.save_frame_value("image", scene.scene_id, frame_type, url)

    def video_url_for(self, scene: Scene, frame_type: str) -> str:
        cached = self._cached(frame_key("video", scene.scene_id, frame_type))
        if cached:
            return cached
        frame = scene.frame(frame_type)
        return (frame.video_url if frame else None) or ""

    def save_video_url(self, scene: Scene, frame_type: str, url: str) -> bool:
        return self.save_frame_value("video", scene.scene_id, frame_type, url)

    def concept_image_for(self, kind: str, asset_id: str) -> str:
        return self._cached(concept_image_key(kind, asset_id)) or ""

    def save_concept_image(self, kind: str, asset_id: str, url: str) -> bool:
        return self._save(concept_image_key(kind, asset_id), url)

    def remove_concept_image(self, kind: str, asset_id: str) -> None:
        self.store.remove(concept_image_key(kind, asset_id))

    def save_project(self, document: ProjectDocument) -> None:
        self.store.set(CURRENT_PROJECT_KEY, json.dumps(document.raw, ensure_ascii=False))

    def load_project(self) -> Optional[ProjectDocument]:
        """Restore the last saved document; an unreadable snapshot is discarded."""

        text = self.store.get(CURRENT_PROJECT_KEY)
        if not text:
            return None
        try:
            return ProjectDocument.from_dict(json.loads(text))
        except (json.JSONDecodeError, ProjectError) as exc:
            logger.warning("Discarding unreadable saved project: %s", exc)
            self.store.remove(CURRENT_PROJECT_KEY)
            return None

    def clear_project(self) -> List[str]:
        """Remove cached frame media, edited prompts, and the saved document."""

        removed = self.store.remove_prefixed(PROJECT_PREFIXES)
        if self.store.get(CURRENT_PROJECT_KEY) is not None:
            self.store.remove(CURRENT_PROJECT_KEY)
            removed.append(CURRENT_PROJECT_KEY)
        return removed

    def clear_visual_concepts(self) -> List[str]:
        return self.store.remove_prefixed(CONCEPT_IMAGE_PREFIXES)

    def full_reset(self) -> List[str]:
        return self.clear_project() + self.clear_visual_concepts()
