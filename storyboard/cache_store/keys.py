"""Cache key scheme shared with caches written by earlier editor builds."""
from __future__ import annotations

from typing import Dict, Tuple

FRAME_TYPES: Tuple[str, ...] = ("start", "middle", "end")

FRAME_IMAGE_PREFIX = "frame_image_"
FRAME_VIDEO_PREFIX = "frame_video_"
FRAME_PROMPT_PREFIX = "frame_prompt_"
CURRENT_PROJECT_KEY = "currentProject"

FRAME_PREFIXES: Dict[str, str] = {
    "image": FRAME_IMAGE_PREFIX,
    "video": FRAME_VIDEO_PREFIX,
    "prompt": FRAME_PROMPT_PREFIX,
}

CONCEPT_PREFIXES: Dict[str, str] = {
    "character": "character_image_",
    "prop": "keyprop_image_",
    "location": "location_image_",
}

PROJECT_PREFIXES: Tuple[str, ...] = (FRAME_IMAGE_PREFIX, FRAME_PROMPT_PREFIX, FRAME_VIDEO_PREFIX)
CONCEPT_IMAGE_PREFIXES: Tuple[str, ...] = tuple(CONCEPT_PREFIXES.values())


def validate_frame_type(frame_type: str) -> str:
    if frame_type not in FRAME_TYPES:
        raise ValueError(f"frame type must be one of {list(FRAME_TYPES)}; received {frame_type!r}")
    return frame_type


def frame_key(kind: str, scene_id: str, frame_type: str) -> str:
    """Return the cache key for a frame's image, video, or prompt."""

    prefix = FRAME_PREFIXES.get(kind)
    if prefix is None:
        raise ValueError(f"frame cache kind must be one of {sorted(FRAME_PREFIXES)}; received {kind!r}")
    return f"{prefix}{scene_id}_{validate_frame_type(frame_type)}"


def concept_image_key(kind: str, asset_id: str) -> str:
    """Return the cache key for a library asset's concept image."""

    prefix = CONCEPT_PREFIXES.get(kind)
    if prefix is None:
        raise ValueError(f"concept kind must be one of {sorted(CONCEPT_PREFIXES)}; received {kind!r}")
    return f"{prefix}{asset_id}"
