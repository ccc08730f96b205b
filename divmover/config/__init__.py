"""Configuration namespace for divmover."""

from __future__ import annotations

from .app import AppConfig
from .base import BaseConfig, load_config
from .repository import RepositoryConfig
from .utils import resolve_env_reference, resolve_path

__all__ = [
    "BaseConfig",
    "AppConfig",
    "load_config",
    "RepositoryConfig",
    "resolve_env_reference",
    "resolve_path",
]
