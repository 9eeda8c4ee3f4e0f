"""Configuration module for tokenlens.

Usage:
    from tokenlens.config import get_settings

    settings = get_settings()  # Cached singleton
    print(settings.ave_base_url)
"""

from tokenlens.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
