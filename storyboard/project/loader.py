"""Load project documents from JSON text or files."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Union

from .models import ProjectDocument, ProjectError

logger = logging.getLogger(__name__)


def parse_project_text(text: str) -> ProjectDocument:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ProjectError(f"Project JSON could not be parsed: {exc}") from exc
    return ProjectDocument.from_dict(payload)


def load_project(path: Union[str, Path]) -> ProjectDocument:
    """Read a project document from disk."""

    source = Path(path)
    if not source.exists():
        raise ProjectError(f"Project file not found: {source}")
    document = parse_project_text(source.read_text(encoding="utf-8"))
    logger.info("Loaded project %r with %d scene(s) from %s", document.project.title, len(document.scenes), source)
    return document
