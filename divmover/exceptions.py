"""Exceptions raised by divmover."""

from __future__ import annotations


class DivmoverError(RuntimeError):
    """Base class for divmover failures."""


class SessionError(DivmoverError):
    """Raised when a repository session cannot be established."""


class RepositoryError(DivmoverError):
    """Raised by repository clients when a search or commit fails."""


class RecordNotFoundError(RepositoryError):
    """Raised when committing a record the repository no longer holds."""


__all__ = [
    "DivmoverError",
    "SessionError",
    "RepositoryError",
    "RecordNotFoundError",
]
