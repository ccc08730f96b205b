"""Application-level configuration models."""

from __future__ import annotations

from pydantic import Field, model_validator

from divmover.config.base import BaseConfig
from divmover.config.repository import RepositoryConfig


class AppConfig(BaseConfig):
    """Top-level runtime configuration for move_division."""

    dataset: str = Field("archive", min_length=1, description="Dataset searched for records")
    division_field: str = Field(
        "divisions",
        min_length=1,
        description="Multi-valued record field holding division identifiers",
    )
    views_command: str = Field(
        "generate_views",
        description="Command operators must run afterwards to rebuild browse views",
    )
    repositories: list[RepositoryConfig] = Field(
        default_factory=list,
        description="Repositories reachable by identifier",
    )

    @model_validator(mode="after")
    def _validate_unique_ids(self) -> "AppConfig":
        seen: set[str] = set()
        for repository in self.repositories:
            if repository.id in seen:
                raise ValueError(f"Duplicate repository id '{repository.id}'.")
            seen.add(repository.id)
        return self

    def repository(self, repository_id: str) -> RepositoryConfig | None:
        """Look up a repository by identifier."""

        return next((repo for repo in self.repositories if repo.id == repository_id), None)


__all__ = ["AppConfig"]
