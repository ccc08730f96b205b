"""Shared pydantic base model and TOML loader for configuration files."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ConfigDict

ConfigT = TypeVar("ConfigT", bound="BaseConfig")


class BaseConfig(BaseModel):
    """Base class for every configuration model; unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid", frozen=True)


def load_config(model: type[ConfigT], path: Path) -> ConfigT:
    """Read ``path`` as TOML and validate it against ``model``."""

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with path.open("rb") as handle:
        data = tomllib.load(handle)
    return model.model_validate(data)


__all__ = ["BaseConfig", "load_config"]
