"""CLI for project bundles and the frame cache."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from storyboard.cache_store.keys import FRAME_TYPES
from storyboard.cache_store.store import JsonFileStore
from storyboard.config_service.config_service import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    configure_logging,
    load_config,
    resolve_paths,
)

from .editor import ShotEditor
from .export import export_bundle
from .loader import load_project
from .models import ProjectError


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Storyboard project tools")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to the JSON/YAML config file")
    parser.add_argument("--cache-file", dest="cache_file", type=Path, help="Override the frame cache file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Write the project with cached prompts and media folded in")
    export_parser.add_argument("--project", type=Path, required=True, help="Path to the project JSON document")
    export_parser.add_argument("--out", type=Path, help="Directory for the exported bundle")

    clear_parser = subparsers.add_parser("clear", help="Clear cached data")
    clear_parser.add_argument("scope", choices=["project", "concepts", "all"])

    media_parser = subparsers.add_parser("set-media", help="Cache a frame's image, video, or edited prompt")
    media_parser.add_argument("--scene", required=True, help="Scene id")
    media_parser.add_argument("--frame", required=True, choices=FRAME_TYPES)
    group = media_parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--image", help="Image URL")
    group.add_argument("--video", help="Video URL")
    group.add_argument("--prompt", help="Edited prompt text")

    concept_parser = subparsers.add_parser("set-concept", help="Cache a concept image for a library asset")
    concept_parser.add_argument("kind", choices=["character", "location", "prop"])
    concept_parser.add_argument("asset_id")
    concept_parser.add_argument("url")
    return parser


def command_export(args: argparse.Namespace, editor: ShotEditor, out_dir: Path) -> int:
    document = load_project(args.project)
    destination = export_bundle(document, editor, args.out or out_dir)
    print(json.dumps({"exported": str(destination)}, indent=2))
    return 0


def command_clear(args: argparse.Namespace, editor: ShotEditor) -> int:
    if args.scope == "project":
        removed = editor.clear_project()
    elif args.scope == "concepts":
        removed = editor.clear_visual_concepts()
    else:
        removed = editor.full_reset()
    print(json.dumps({"removed": removed}, indent=2))
    return 0


def command_set_media(args: argparse.Namespace, editor: ShotEditor) -> int:
    # Frame media keys only need the scene id, so no project document is loaded here.
    if args.image is not None:
        kind, value = "image", args.image
    elif args.video is not None:
        kind, value = "video", args.video
    else:
        kind, value = "prompt", args.prompt
    saved = editor.save_frame_value(kind, args.scene, args.frame, value)
    print(json.dumps({"saved": saved, "kind": kind, "scene": args.scene, "frame": args.frame}, indent=2))
    return 0 if saved else 1


def command_set_concept(args: argparse.Namespace, editor: ShotEditor) -> int:
    saved = editor.save_concept_image(args.kind, args.asset_id, args.url)
    print(json.dumps({"saved": saved, "kind": args.kind, "id": args.asset_id}, indent=2))
    return 0 if saved else 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        loaded = load_config(args.config)
        configure_logging(loaded.data)
        paths = resolve_paths(loaded.data)
        editor = ShotEditor(
            JsonFileStore(args.cache_file or paths["cache_file"]),
            legacy_fallback=loaded.data["prompt"]["legacy_fallback"],
        )
        if args.command == "export":
            return command_export(args, editor, paths["export_dir"])
        if args.command == "clear":
            return command_clear(args, editor)
        if args.command == "set-media":
            return command_set_media(args, editor)
        if args.command == "set-concept":
            return command_set_concept(args, editor)
    except (ConfigError, ProjectError, OSError) as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
