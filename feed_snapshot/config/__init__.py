"""Configuration: runtime settings and workflow input resolution."""

from .settings import ActionInputs, Settings, settings
from .resolver import resolve_config

__all__ = ["ActionInputs", "Settings", "settings", "resolve_config"]
