"""
Storyboard Prompt Studio - storyboard package.

This package contains:
- prompt_builder: semantic field catalog, prompt-block assembler and label formatter.
- project: project document models, shot editor and bundle export.
- cache_store: key-value repositories backing the per-frame media cache.
- config_service: JSON/YAML configuration with migrations and overrides.
"""
