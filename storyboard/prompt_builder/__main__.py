"""CLI entrypoint for Prompt Builder.

- Purpose: compile prompts for a project (or a single prompt block) and optionally publish a prompt bundle.
- Assumptions: project, library, and block files are UTF-8 JSON; cache and bundle paths come from configuration.
- Side effects: with ``--publish`` the compiled prompts are written to the prompt bundle path.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable

from storyboard.cache_store.keys import FRAME_TYPES
from storyboard.cache_store.store import JsonFileStore
from storyboard.config_service.config_service import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    configure_logging,
    load_config,
    resolve_paths,
)
from storyboard.project.editor import ShotEditor
from storyboard.project.loader import load_project
from storyboard.project.models import ProjectError

from .fields import describe_catalog
from .models import Library, PromptBlock
from .services import PromptCompilerService, UIIntegrationHooks

logger = logging.getLogger(__name__)


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"File not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON: {exc}") from exc


def _load_library(path: Path) -> Library:
    payload = _load_json(path)
    # Accept a bare library or a whole project document.
    if isinstance(payload, dict) and isinstance(payload.get("definitions"), dict):
        payload = payload["definitions"].get("library")
    return Library.from_dict(payload)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compile storyboard prompt blocks into prompts")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to the JSON/YAML config file")
    parser.add_argument("--project", type=Path, help="Path to a project JSON document")
    parser.add_argument("--scene", help="Only compile frames of this scene id")
    parser.add_argument("--frame", choices=FRAME_TYPES, help="Only compile this frame type")
    parser.add_argument("--library", type=Path, help="Path to a library JSON file (or a project document)")
    parser.add_argument("--block", type=Path, help="Path to a prompt block JSON file")
    parser.add_argument("--fields", action="store_true", help="List the semantic field catalog with labels")
    parser.add_argument("--locale", help="Label locale for --fields (en or ko)")
    parser.add_argument("--cache-file", dest="cache_file", type=Path, help="Override the frame cache file")
    parser.add_argument("--publish", action="store_true", help="Write compiled project prompts to the bundle path")
    return parser


def main(argv: Iterable[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        loaded = load_config(args.config)
    except ConfigError as exc:
        raise SystemExit(str(exc)) from exc
    configure_logging(loaded.data)
    for note in loaded.warnings:
        logger.warning(note)

    if args.fields:
        locale = args.locale or loaded.data["prompt"]["locale"]
        print(json.dumps(describe_catalog(locale), indent=2, ensure_ascii=False))
        return

    if args.block:
        if not args.library:
            parser.error("--block requires --library")
        try:
            library = _load_library(args.library)
            prompt_block = PromptBlock.from_dict(_load_json(args.block))
        except ValueError as exc:
            raise SystemExit(str(exc)) from exc
        print(PromptCompilerService().compile_block(library, prompt_block))
        return

    if not args.project:
        parser.error("one of --project, --block, or --fields is required")

    paths = resolve_paths(loaded.data)
    store = JsonFileStore(args.cache_file or paths["cache_file"])
    editor = ShotEditor(store, legacy_fallback=loaded.data["prompt"]["legacy_fallback"])

    try:
        document = load_project(args.project)
    except ProjectError as exc:
        raise SystemExit(str(exc)) from exc

    hooks = UIIntegrationHooks(bundle_path=paths["prompt_bundle"])
    preflight_error = hooks.preflight_project(document)
    if preflight_error:
        raise SystemExit(preflight_error)

    rows = PromptCompilerService(editor).compile_project(document, scene_id=args.scene, frame_type=args.frame)
    if args.publish:
        hooks.publish_prompts(document, rows)
    print(json.dumps(rows, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
