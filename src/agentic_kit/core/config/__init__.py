"""Centralized configuration for agentic-kit.

Quick start::

    from agentic_kit.core.config import get_settings

    settings = get_settings()
    print(settings.agentic_path)   # /home/me/devel/agentic
    print(settings.link_mode)      # LinkMode.SYMLINK
"""

from .settings import KitSettings, LinkMode, clear_settings_cache, get_settings

__all__ = [
    "KitSettings",
    "LinkMode",
    "clear_settings_cache",
    "get_settings",
]
