"""Resolve repository identifiers into open sessions."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from divmover.config import AppConfig, RepositoryConfig, resolve_path
from divmover.exceptions import SessionError

from .base import Session
from .http import HttpSession
from .local import LocalSession


def create_session(
    repository: RepositoryConfig,
    *,
    noise: int = 1,
    base_dir: Path | None = None,
) -> Session:
    """Instantiate the correct client based on configuration.

    Raises :class:`SessionError` when the repository cannot be reached.
    """

    if repository.backend == "local":
        path = repository.path
        if path is None:  # Defensive, should already be validated
            raise SessionError("Local repository requires a path.")
        root = resolve_path(path, base_dir) if base_dir is not None else path
        return LocalSession(repository.id, root, noise=noise)

    try:
        token = repository.token_secret
    except EnvironmentError as exc:
        raise SessionError(str(exc)) from exc
    return HttpSession(
        repository.id,
        repository.base_url or "",
        token=token,
        timeout=repository.timeout,
        page_size=repository.page_size,
        noise=noise,
    )


def open_session(
    config: AppConfig,
    repository_id: str,
    *,
    noise: int = 1,
    base_dir: Path | None = None,
) -> Session | None:
    """Open a session for ``repository_id`` or return ``None`` when it does not resolve."""

    repository = config.repository(repository_id)
    if repository is None:
        logger.warning("Repository {} is not configured", repository_id)
        return None

    try:
        return create_session(repository, noise=noise, base_dir=base_dir)
    except SessionError as exc:
        logger.warning("Session for {} failed: {}", repository_id, exc)
        return None


__all__ = ["create_session", "open_session"]
