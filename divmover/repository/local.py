"""File-backed repository storing each dataset as a JSON Lines file."""

from __future__ import annotations

import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Iterator, Sequence

from loguru import logger

from divmover.exceptions import RecordNotFoundError, RepositoryError, SessionError

from .base import Dataset, Record, ResultSet, SearchFilter, Session, filters_match


class LocalRecord(Record):
    """A record read from a dataset file; changes are staged until commit."""

    def __init__(self, dataset: "LocalDataset", data: dict[str, Any]) -> None:
        self._dataset = dataset
        self._data = data
        self._raw_id = data["id"]
        self._changes: dict[str, Any] = {}

    @property
    def id(self) -> str:
        return str(self._raw_id)

    def get_field(self, name: str) -> Any:
        if name in self._changes:
            return self._changes[name]
        return self._data.get(name)

    def set_field(self, name: str, value: Any) -> None:
        if name == "id":
            raise RepositoryError("Record identifiers are immutable")
        self._changes[name] = copy.deepcopy(value)

    def commit(self) -> None:
        if not self._changes:
            return
        self._dataset.write_record(self._raw_id, self._changes)
        self._data.update(self._changes)
        self._changes = {}


class LocalResultSet(ResultSet):
    """Snapshot of the records that matched a search."""

    def __init__(self, dataset: "LocalDataset", rows: list[dict[str, Any]]) -> None:
        self._dataset = dataset
        self._rows = rows

    def count(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Record]:
        for row in self._rows:
            yield LocalRecord(self._dataset, row)


class LocalDataset(Dataset):
    """Dataset backed by ``<root>/<name>.jsonl``."""

    def __init__(self, session: "LocalSession", name: str) -> None:
        super().__init__(name)
        self.session = session
        self.path = session.root / f"{name}.jsonl"

    def _read_rows(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []

        rows: list[dict[str, Any]] = []
        with self.path.open("r", encoding="utf-8") as handle:
            for line_no, line in enumerate(handle, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    row = json.loads(line)
                except json.JSONDecodeError as exc:
                    raise RepositoryError(f"{self.path}:{line_no}: invalid JSON: {exc.msg}") from exc
                if not isinstance(row, dict) or "id" not in row:
                    raise RepositoryError(f"{self.path}:{line_no}: record without an 'id'")
                rows.append(row)
        return rows

    def _write_rows(self, rows: list[dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                for row in rows:
                    handle.write(json.dumps(row, ensure_ascii=False))
                    handle.write("\n")
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def search(self, filters: Sequence[SearchFilter], *, satisfy_all: bool = True) -> ResultSet:
        rows = [
            row
            for row in self._read_rows()
            if filters_match(filters, row.get, satisfy_all=satisfy_all)
        ]
        if self.session.noise > 1:
            logger.debug("Search on {}/{} matched {} records", self.session.repository_id, self.name, len(rows))
        return LocalResultSet(self, rows)

    def write_record(self, record_id: Any, changes: dict[str, Any]) -> None:
        """Apply ``changes`` to the record whose stored id equals ``record_id`` and rewrite the file."""

        rows = self._read_rows()
        for row in rows:
            if row["id"] == record_id:
                row.update(changes)
                break
        else:
            raise RecordNotFoundError(f"Record {record_id} not found in {self.path}")

        self._write_rows(rows)
        if self.session.noise > 1:
            logger.debug("Committed record {} in {}/{}", record_id, self.session.repository_id, self.name)


class LocalSession(Session):
    """Session over a directory of JSON Lines datasets."""

    def __init__(self, repository_id: str, root: Path, *, noise: int = 1) -> None:
        super().__init__(repository_id, noise=noise)
        if not root.is_dir():
            raise SessionError(f"Repository directory not found: {root}")
        self.root = root
        if noise > 0:
            logger.info("Opened local repository {} at {}", repository_id, root)

    def dataset(self, name: str) -> LocalDataset:
        return LocalDataset(self, name)


__all__ = ["LocalSession", "LocalDataset", "LocalResultSet", "LocalRecord"]
