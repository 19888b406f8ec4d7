"""Project bundle export.

Folds cached prompts and media URLs back into a copy of the loaded document and
writes it as a timestamped JSON file.
"""

from __future__ import annotations

import json
import logging
import re
from copy import deepcopy
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from storyboard.cache_store.keys import FRAME_TYPES

from .editor import ShotEditor
from .models import ProjectDocument

logger = logging.getLogger(__name__)


_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


def safe_title(title: str) -> str:
    """Make a project title usable as a single filename component."""

    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", title).strip(" .")
    return cleaned or "project"


def bundle_filename(document: ProjectDocument, now: Optional[datetime] = None) -> str:
    timestamp = (now or datetime.now()).strftime("%Y-%m-%dT%H-%M-%S")
    return f"{safe_title(document.project.title)}_{timestamp}.json"


def compile_project_prompts(document: ProjectDocument, editor: ShotEditor) -> List[Dict[str, object]]:
    """Return the effective prompt of every frame, in scene order."""

    rows: List[Dict[str, object]] = []
    for scene in document.scenes:
        for frame_type in FRAME_TYPES:
            frame = scene.frame(frame_type)
            if frame is None:
                continue
            rows.append(
                {
                    "scene_id": scene.scene_id,
                    "scene": scene.number,
                    "frame": frame_type,
                    "kind": frame.kind,
                    "prompt": editor.prompt_for(scene, frame_type, document.library),
                }
            )
    return rows


def build_export_payload(document: ProjectDocument, editor: ShotEditor) -> Dict[str, Any]:
    """Return a deep copy of the raw document with effective frame values applied."""

    payload = deepcopy(document.raw)
    raw_scenes = payload.get("scenes")
    if not isinstance(raw_scenes, list):
        return payload

    for scene, raw_scene in zip(document.scenes, raw_scenes):
        if not scene.frames_key or not isinstance(raw_scene, dict):
            continue
        raw_frames = raw_scene.get(scene.frames_key)
        if not isinstance(raw_frames, Mapping):
            continue
        for frame_type in scene.frames:
            raw_frame = raw_frames.get(frame_type)
            if not isinstance(raw_frame, dict):
                continue
            values = {
                "prompt": editor.prompt_for(scene, frame_type, document.library),
                "imageUrl": editor.image_url_for(scene, frame_type),
                "videoUrl": editor.video_url_for(scene, frame_type),
            }
            for key, value in values.items():
                if value:
                    raw_frame[key] = value
    return payload


def export_bundle(
    document: ProjectDocument,
    editor: ShotEditor,
    out_dir: Path,
    now: Optional[datetime] = None,
) -> Path:
    """Write the updated project bundle and return its path."""

    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    destination = out_dir / bundle_filename(document, now)
    payload = build_export_payload(document, editor)
    destination.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Exported project bundle to %s", destination)
    return destination
