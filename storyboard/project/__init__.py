"""Project documents, the shot editor, and bundle export."""
from __future__ import annotations

from .editor import ShotEditor
from .loader import load_project, parse_project_text
from .models import BlockFrame, LegacyFrame, ProjectDocument, ProjectError, Scene, parse_frame

__all__ = [
    "BlockFrame",
    "LegacyFrame",
    "ProjectDocument",
    "ProjectError",
    "Scene",
    "ShotEditor",
    "load_project",
    "parse_frame",
    "parse_project_text",
]
