"""Configuration models describing repository connections."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator

from divmover.config.base import BaseConfig
from divmover.config.utils import resolve_env_reference


class RepositoryConfig(BaseConfig):
    """Connection settings for a single repository instance."""

    id: str = Field(..., min_length=1, description="Repository identifier used on the command line")
    backend: Literal["local", "http"] = Field(
        "local",
        description="Repository client: a local JSON Lines directory or an HTTP API",
    )
    path: Path | None = Field(
        None,
        description="Directory holding <dataset>.jsonl files (local backend)",
    )
    base_url: str | None = Field(None, description="API base URL (http backend)")
    token: str | None = Field(
        None,
        description="Bearer token or 'env:VAR_NAME' reference (http backend)",
    )
    timeout: float = Field(30.0, gt=0, description="HTTP request timeout in seconds")
    page_size: int = Field(200, ge=1, description="Records requested per search page (http backend)")

    @model_validator(mode="after")
    def _validate_backend(self) -> "RepositoryConfig":
        if self.backend == "local":
            if self.path is None:
                raise ValueError("Local repository requires 'path'.")
        elif self.backend == "http":
            if not self.base_url:
                raise ValueError("HTTP repository requires 'base_url'.")
        return self

    @property
    def token_secret(self) -> str | None:
        """Return the resolved token, expanding any ``env:VAR`` reference."""

        return resolve_env_reference(self.token)


__all__ = ["RepositoryConfig"]
