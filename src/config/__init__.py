"""Configuration module. Exports Settings, load_config and the site profile registry."""

from src.config.loader import load_config
from src.config.settings import Settings
from src.config.site_profiles import ALL_FESTIVALS, BUILTIN_PROFILES, build_registry, resolve_targets

__all__ = [
    "ALL_FESTIVALS",
    "BUILTIN_PROFILES",
    "Settings",
    "build_registry",
    "load_config",
    "resolve_targets",
]
