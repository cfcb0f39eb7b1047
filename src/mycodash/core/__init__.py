"""Core infrastructure modules."""

from .global_paths import GlobalPath

__all__ = ["GlobalPath"]

# Config is exported separately to avoid circular imports
# To use: from mycodash.core.config import ConfigManager
