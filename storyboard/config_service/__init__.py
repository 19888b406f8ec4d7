"""Configuration service package; see ``config_service.py`` for the CLI."""
