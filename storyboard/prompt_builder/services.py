"""Service wrappers for the Prompt Builder module.

- Purpose: compile every frame of a project through the shot editor and persist prompt bundles for downstream tools.
- Assumptions: callers hand in a loaded ProjectDocument and a ShotEditor bound to their cache store.
- Side effects: writes compiled prompt bundles and timestamps to disk when published.
"""

from datetime import datetime, timezone
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from storyboard.path_utils import get_prompt_bundle_path
from storyboard.project.editor import ShotEditor
from storyboard.project.export import compile_project_prompts
from storyboard.project.models import ProjectDocument

from . import compiler
from .models import Library, PromptBlock

logger = logging.getLogger(__name__)


class PromptCompilerService:
    """Facade to compile prompt blocks and whole projects into prompt rows."""

    def __init__(self, editor: Optional[ShotEditor] = None) -> None:
        self.editor = editor

    def compile_block(self, library: Library, prompt_block: PromptBlock) -> str:
        return compiler.generate_block_prompt(library, prompt_block)

    def compile_project(
        self,
        document: ProjectDocument,
        scene_id: Optional[str] = None,
        frame_type: Optional[str] = None,
    ) -> List[Dict[str, object]]:
        if self.editor is None:
            raise ValueError("compile_project needs a ShotEditor")
        rows = compile_project_prompts(document, self.editor)
        if scene_id:
            rows = [row for row in rows if row["scene_id"] == scene_id]
        if frame_type:
            rows = [row for row in rows if row["frame"] == frame_type]
        return rows


class UIIntegrationHooks:
    """Hooks for UI layers to coordinate prompt compilation and delivery.

    When prompts are published the compiled rows are written to disk so generation
    tools can ingest the latest prompts without additional RPC plumbing.
    """

    def __init__(self, bundle_path: Optional[Path] = None) -> None:
        self.bundle_path = Path(bundle_path) if bundle_path else get_prompt_bundle_path()

    def preflight_project(self, document: ProjectDocument) -> Optional[str]:
        """Validate a project before compilation.

        Returns a string message when the project is rejected; otherwise returns ``None``.
        """

        if not document.scenes:
            return "The project has no scenes to compile."
        if not any(scene.frames for scene in document.scenes):
            return "No scene defines start/middle/end frames."
        return None

    def publish_prompts(self, document: ProjectDocument, rows: List[Dict[str, object]]) -> Dict:
        """Persist compiled prompts for consumption by generation tools."""

        payload = {
            "project": document.project.title,
            "prompts": rows,
            "prompt_text": "\n".join(str(row["prompt"]) for row in rows if row["prompt"]),
        }
        return self._write_bundle(payload)

    def _write_bundle(self, payload: Dict) -> Dict:
        """Write the prompt bundle to disk."""

        bundle_dir = self.bundle_path.parent
        bundle_dir.mkdir(parents=True, exist_ok=True)

        enriched_payload = {
            **payload,
            "compiled_at": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "bundle_path": str(self.bundle_path),
        }
        self.bundle_path.write_text(json.dumps(enriched_payload, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Published %d prompt(s) to %s", len(payload.get("prompts", [])), self.bundle_path)
        return enriched_payload
