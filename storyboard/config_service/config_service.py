#!/usr/bin/env python3
"""Configuration service for Storyboard Prompt Studio.

Loads and saves a single JSON/YAML configuration file with validation,
migrations, and env-style exports for shell consumers.
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from storyboard.path_utils import get_cache_file, get_export_dir, get_prompt_bundle_path, get_state_path


class ConfigError(Exception):
    pass


def _import_yaml():  # pragma: no cover - import guard
    try:
        import yaml  # type: ignore
    except ImportError as exc:
        raise ConfigError(
            "PyYAML is required to load YAML configuration files. "
            "Install it with `pip install -e .` (or `pip install PyYAML`) and rerun the command."
        ) from exc
    return yaml


yaml = _import_yaml()

DEFAULT_CONFIG_PATH = str(get_state_path())
CURRENT_VERSION = 2
DEFAULT_ENV_PREFIX = "STORYBOARD_"


DEFAULT_CONFIG: Dict[str, Any] = {
    "version": CURRENT_VERSION,
    "paths": {
        "cache_file": "",
        "export_dir": "",
        "prompt_bundle": "",
    },
    "prompt": {
        "locale": "en",
        "legacy_fallback": True,
    },
    "logging": {
        "level": "WARNING",
    },
}

# Map deprecated env-style keys to their new home
DEPRECATED_FIELD_MAP = {
    "cache_file": "paths.cache_file",
    "export_dir": "paths.export_dir",
    "prompt_bundle": "paths.prompt_bundle",
    "prompt_bundle_path": "paths.prompt_bundle",
    "log_level": "logging.level",
}

ALLOWED_LOCALES = {"en", "ko"}
ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class LoadedConfig:
    data: Dict[str, Any]
    warnings: List[str]
    migrated: bool


def ensure_config_root(path: str) -> None:
    root = os.path.dirname(path)
    if root and not os.path.exists(root):
        os.makedirs(root, exist_ok=True)


def coerce_value(value: Any) -> Any:
    if isinstance(value, str):
        lower = value.strip().lower()
        if lower in {"true", "yes", "on"}:
            return True
        if lower in {"false", "no", "off"}:
            return False
    return value


def deep_get(data: Dict[str, Any], path: str) -> Any:
    current: Any = data
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def deep_set(data: Dict[str, Any], path: str, value: Any) -> None:
    current = data
    parts = path.split(".")
    for key in parts[:-1]:
        if key not in current or not isinstance(current[key], dict):
            current[key] = {}
        current = current[key]
    current[parts[-1]] = value


def parse_env_style(text: str) -> Dict[str, Any]:
    parsed: Dict[str, Any] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        parsed[key.strip()] = coerce_value(value.strip())
    return parsed


def load_raw_config(path: str) -> Tuple[Dict[str, Any], List[str]]:
    warnings: List[str] = []
    if not os.path.exists(path):
        return deepcopy(DEFAULT_CONFIG), warnings

    with open(path, "r", encoding="utf-8") as f:
        text = f.read()

    stripped = text.lstrip()
    if not stripped:
        return deepcopy(DEFAULT_CONFIG), warnings

    if stripped.startswith("{") or stripped.startswith("["):
        data = json.loads(text)
    elif stripped[0] in {"-", ":"} or ":" in stripped.splitlines()[0]:
        data = yaml.safe_load(text) or {}
    else:
        parsed = parse_env_style(text)
        data = {"version": 0, **parsed}
        warnings.append("Loaded legacy env-style configuration; it will be migrated to structured YAML/JSON.")
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be an object/dictionary.")
    return data, warnings


def migrate_v0_to_v1(data: Dict[str, Any], warnings: List[str]) -> Dict[str, Any]:
    migrated = deepcopy(DEFAULT_CONFIG)
    del migrated["prompt"]
    for key, value in data.items():
        if key == "version":
            continue
        target = DEPRECATED_FIELD_MAP.get(key)
        if not target:
            warnings.append(f"Deprecated or unknown field '{key}' preserved under legacy namespace.")
            migrated.setdefault("legacy", {})[key] = value
            continue
        deep_set(migrated, target, value)
    migrated["version"] = 1
    return migrated


def migrate_v1_to_v2(data: Dict[str, Any], warnings: List[str]) -> Dict[str, Any]:
    data = deepcopy(data)
    data.setdefault("prompt", {})
    data["prompt"].setdefault("locale", DEFAULT_CONFIG["prompt"]["locale"])
    data["prompt"].setdefault("legacy_fallback", DEFAULT_CONFIG["prompt"]["legacy_fallback"])
    data["version"] = 2
    return data


MIGRATIONS = {
    0: migrate_v0_to_v1,
    1: migrate_v1_to_v2,
}


def validate(config: Dict[str, Any], warnings: List[str]) -> Dict[str, Any]:
    for section in ("paths", "prompt", "logging"):
        if not isinstance(config.get(section), dict):
            config[section] = deepcopy(DEFAULT_CONFIG[section])

    locale = deep_get(config, "prompt.locale")
    if locale not in ALLOWED_LOCALES:
        if locale is not None:
            warnings.append(f"Invalid prompt.locale '{locale}' replaced with 'en'. Allowed: {sorted(ALLOWED_LOCALES)}")
        deep_set(config, "prompt.locale", "en")

    level = deep_get(config, "logging.level")
    normalized_level = str(level).upper() if level is not None else None
    if normalized_level not in ALLOWED_LOG_LEVELS:
        if level is not None:
            warnings.append(
                f"Invalid logging.level '{level}' replaced with 'WARNING'. Allowed: {sorted(ALLOWED_LOG_LEVELS)}"
            )
        normalized_level = "WARNING"
    deep_set(config, "logging.level", normalized_level)

    fallback = deep_get(config, "prompt.legacy_fallback")
    if fallback is None:
        deep_set(config, "prompt.legacy_fallback", True)
    elif not isinstance(fallback, bool):
        warnings.append(f"Field prompt.legacy_fallback expected boolean; coerced from '{fallback}'.")
        deep_set(config, "prompt.legacy_fallback", coerce_value(str(fallback)) is True)

    for key in ("cache_file", "export_dir", "prompt_bundle"):
        value = deep_get(config, f"paths.{key}")
        if value is None:
            deep_set(config, f"paths.{key}", "")
        elif not isinstance(value, str):
            warnings.append(f"Field paths.{key} expected string; coerced from '{value}'.")
            deep_set(config, f"paths.{key}", str(value))

    return config


def migrate(data: Dict[str, Any], warnings: List[str]) -> Tuple[Dict[str, Any], bool]:
    migrated = False
    version = data.get("version", 0)
    while version < CURRENT_VERSION:
        migrate_fn = MIGRATIONS.get(version)
        if not migrate_fn:
            raise ConfigError(f"No migration path from version {version}")
        data = migrate_fn(data, warnings)
        version = data.get("version", version + 1)
        migrated = True
    return data, migrated


def save_config(data: Dict[str, Any], path: str) -> None:
    ensure_config_root(path)
    ext = os.path.splitext(path)[1].lower()
    if ext in {".yaml", ".yml"}:
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
    else:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)


def resolve_paths(config: Dict[str, Any]) -> Dict[str, Path]:
    """Return effective paths, falling back to platform defaults for blank entries."""

    def pick(key: str, default: Path) -> Path:
        value = deep_get(config, f"paths.{key}")
        return Path(value).expanduser() if value else default

    return {
        "cache_file": pick("cache_file", get_cache_file()),
        "export_dir": pick("export_dir", get_export_dir()),
        "prompt_bundle": pick("prompt_bundle", get_prompt_bundle_path()),
    }


def configure_logging(config: Dict[str, Any]) -> None:
    level = deep_get(config, "logging.level") or "WARNING"
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.WARNING), format="[%(levelname)s] %(name)s: %(message)s")


def flatten_for_env(config: Dict[str, Any]) -> Dict[str, Any]:
    paths = resolve_paths(config)
    flattened = {
        "cache_file": str(paths["cache_file"]),
        "export_dir": str(paths["export_dir"]),
        "prompt_bundle": str(paths["prompt_bundle"]),
        "prompt_locale": deep_get(config, "prompt.locale"),
        "legacy_fallback": deep_get(config, "prompt.legacy_fallback"),
        "log_level": deep_get(config, "logging.level"),
        "config_version": config.get("version", CURRENT_VERSION),
    }
    return {k: v for k, v in flattened.items() if v is not None}


def apply_overrides(config: Dict[str, Any], overrides: List[str]) -> None:
    for override in overrides:
        if "=" not in override:
            raise ConfigError(f"Override '{override}' must use key=value format")
        key, raw_value = override.split("=", 1)
        deep_set(config, key.strip(), coerce_value(raw_value.strip()))


def apply_env_overrides(config: Dict[str, Any], prefix: str, warnings: List[str]) -> None:
    if not prefix:
        return
    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue
        path = key[len(prefix) :].lower()
        # Only double-underscore keys address config fields; the rest are path_utils overrides.
        if "__" not in path:
            continue
        path = path.replace("__", ".")
        warnings.append(f"Environment override {key} applied to {path}")
        deep_set(config, path, coerce_value(value))


def load_config(path: str, env_prefix: str = DEFAULT_ENV_PREFIX, overrides: List[str] | None = None) -> LoadedConfig:
    raw, warnings = load_raw_config(path)
    migrated_config, migrated = migrate(raw, warnings)
    apply_env_overrides(migrated_config, env_prefix, warnings)
    if overrides:
        apply_overrides(migrated_config, overrides)
    validated = validate(migrated_config, warnings)
    return LoadedConfig(validated, warnings, migrated)


def export_env(config: Dict[str, Any]) -> str:
    lines = []
    for key, value in flatten_for_env(config).items():
        if isinstance(value, bool):
            value = "true" if value else "false"
        lines.append(f"{key}={value}")
    return "\n".join(lines)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Storyboard configuration service")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to the JSON/YAML config file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Export configuration")
    export_parser.add_argument("--format", choices=["json", "env"], default="env")
    export_parser.add_argument("--env-prefix", default=DEFAULT_ENV_PREFIX, help="Environment variable prefix for overrides")
    export_parser.add_argument("--set", dest="overrides", action="append", default=[], help="Override key=value pairs")

    save_parser = subparsers.add_parser("save", help="Persist configuration changes")
    save_parser.add_argument("--set", dest="overrides", action="append", default=[], help="Updated key=value pairs")

    subparsers.add_parser("migrate", help="Migrate config file to the latest version")
    return parser


def command_export(args: argparse.Namespace) -> int:
    loaded = load_config(args.config, args.env_prefix, args.overrides)
    if loaded.migrated:
        save_config(loaded.data, args.config)
    if args.format == "json":
        json.dump(loaded.data, sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        sys.stdout.write(export_env(loaded.data) + "\n")
    for note in loaded.warnings:
        print(f"[warn] {note}", file=sys.stderr)
    return 0


def command_save(args: argparse.Namespace) -> int:
    loaded = load_config(args.config, env_prefix="", overrides=args.overrides)
    save_config(loaded.data, args.config)
    for note in loaded.warnings:
        print(f"[warn] {note}", file=sys.stderr)
    return 0


def command_migrate(args: argparse.Namespace) -> int:
    raw, warnings = load_raw_config(args.config)
    migrated, did_migrate = migrate(raw, warnings)
    validated = validate(migrated, warnings)
    if did_migrate:
        save_config(validated, args.config)
    for note in warnings:
        print(f"[warn] {note}", file=sys.stderr)
    print(json.dumps({"migrated": did_migrate, "version": validated.get("version")}, indent=2))
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "export":
            return command_export(args)
        if args.command == "save":
            return command_save(args)
        if args.command == "migrate":
            return command_migrate(args)
    except ConfigError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
