"""Configuration loading for Parley.

Configuration is loaded from TOML files with environment variable overrides.

Usage:
    from parley.config import get_settings

    settings = get_settings()
    cap = settings.threads.max_messages
"""

from functools import lru_cache

from parley.config.settings import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    The TOML layers are read when the instance is built, so the result is
    cached for the lifetime of the process. Call `reload_settings()` to pick
    up edited files.
    """
    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
