"""Shared helpers for CLI tests."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path

from loguru import logger
from pytest import MonkeyPatch

from divmover.config import AppConfig, RepositoryConfig


@contextmanager
def logger_to_stderr(level: str = "INFO"):
    """Temporarily route Loguru output to stderr for assertion."""

    handler_id = logger.add(sys.stderr, level=level)
    try:
        yield
    finally:
        logger.remove(handler_id)


def make_app_config(repo_root: Path, *, repository_id: str = "repo1") -> AppConfig:
    """Construct an in-memory AppConfig pointing at a local repository directory."""

    return AppConfig(
        dataset="archive",
        division_field="divisions",
        views_command="generate_views",
        repositories=[
            RepositoryConfig(id=repository_id, backend="local", path=repo_root),
        ],
    )


def patch_load_config(monkeypatch: MonkeyPatch, config: AppConfig) -> None:
    """Force the CLI to return the provided config instead of reading from disk."""

    def _fake_load_config(model: object, path: Path) -> AppConfig:
        if model is not AppConfig:
            raise AssertionError("Unexpected config model request")
        return config

    monkeypatch.setattr("divmover.cli.load_config", _fake_load_config)
