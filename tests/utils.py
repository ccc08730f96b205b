"""Helpers for building on-disk repositories in tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def write_dataset(root: Path, rows: list[dict[str, Any]], *, name: str = "archive") -> Path:
    """Write ``rows`` as ``<root>/<name>.jsonl`` and return the file path."""

    root.mkdir(parents=True, exist_ok=True)
    path = root / f"{name}.jsonl"
    path.write_text(
        "".join(json.dumps(row) + "\n" for row in rows),
        encoding="utf-8",
    )
    return path


def read_dataset(root: Path, *, name: str = "archive") -> dict[str, dict[str, Any]]:
    """Load a dataset file keyed by record id."""

    path = root / f"{name}.jsonl"
    rows = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]
    return {str(row["id"]): row for row in rows}


def sample_rows() -> list[dict[str, Any]]:
    """Three prints in division A, one of them also filed under C."""

    return [
        {"id": 1, "title": "Tidal flats", "divisions": ["A"]},
        {"id": 2, "title": "Salt marsh", "divisions": ["A", "C"]},
        {"id": 3, "title": "Estuaries", "divisions": ["A"]},
        {"id": 4, "title": "Dune systems", "divisions": ["C"]},
        {"id": 5, "title": "Kelp forests", "divisions": []},
    ]
