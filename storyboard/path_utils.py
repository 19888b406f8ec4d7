"""Platform-aware path utilities for Storyboard Prompt Studio.

Provides a single source of truth for config, cache, export, and bundle
paths so Windows entry points can map to APPDATA/LOCALAPPDATA while
Unix-like platforms continue to use XDG-style defaults.
"""
from __future__ import annotations

import os
import platform
from pathlib import Path


def _is_windows() -> bool:
    return platform.system().lower().startswith("windows")


def get_config_root() -> Path:
    """Return the base configuration directory.

    Environment overrides (STORYBOARD_CONFIG_DIR) take precedence. On Windows we
    align with %APPDATA%\\Storyboard\\config; otherwise ~/.config/storyboard is used.
    """

    override = os.environ.get("STORYBOARD_CONFIG_DIR")
    if override:
        return Path(override).expanduser()

    if _is_windows():
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / "Storyboard" / "config"

    return Path.home() / ".config" / "storyboard"


def get_state_path() -> Path:
    """Return the editor configuration file path."""

    override = os.environ.get("STORYBOARD_CONFIG_FILE")
    if override:
        return Path(override).expanduser()
    return get_config_root() / "config.yaml"


def get_cache_root() -> Path:
    """Return the directory holding cached frame media and prompt bundles."""

    override = os.environ.get("STORYBOARD_CACHE_DIR")
    if override:
        return Path(override).expanduser()

    if _is_windows():
        local_appdata = os.environ.get("LOCALAPPDATA")
        if local_appdata:
            return Path(local_appdata) / "Storyboard" / "cache"

    return Path.home() / ".cache" / "storyboard"


def get_cache_file() -> Path:
    """Return the key-value cache file used by the shot editor."""

    override = os.environ.get("STORYBOARD_CACHE_FILE")
    if override:
        return Path(override).expanduser()
    return get_cache_root() / "frame_cache.json"


def get_prompt_bundle_path() -> Path:
    """Return the path compiled prompt bundles are published to."""

    override = os.environ.get("PROMPT_BUNDLE_PATH")
    if override:
        return Path(override).expanduser()
    return get_cache_root() / "prompt_builder" / "prompt_bundle.json"


def get_export_dir() -> Path:
    """Return the default directory for exported project bundles."""

    override = os.environ.get("STORYBOARD_EXPORT_DIR")
    if override:
        return Path(override).expanduser()
    return Path.cwd()
