"""Division migration helpers."""

from __future__ import annotations

from .divisions import DivisionMover, DivisionOutcome, MoveReport

__all__ = [
    "DivisionMover",
    "DivisionOutcome",
    "MoveReport",
]
