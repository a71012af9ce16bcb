"""Data directory config (read from settings). Read-only; no business logic."""

from indexconf.config.settings import get_settings


def get_directories_config() -> dict:
    """Return data directory parameters from settings for use by resources."""
    s = get_settings()
    return {
        "data_directory": s.data_directory,
    }
