"""Abstract repository contract used by the division mover."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Sequence

from divmover.exceptions import RepositoryError


@dataclass(frozen=True, slots=True)
class SearchFilter:
    """Exact-match condition on a single record field.

    Multi-valued fields match when ``value`` is one of their elements.
    """

    field: str
    value: Any
    match: str = "EX"

    def matches(self, record_value: Any) -> bool:
        if isinstance(record_value, (list, tuple, set)):
            return self.value in record_value
        return record_value == self.value


class Record(ABC):
    """A persisted repository entity with mutable fields."""

    @property
    @abstractmethod
    def id(self) -> str:
        """Stable identifier of the record."""

    @abstractmethod
    def get_field(self, name: str) -> Any:
        """Return the current value of ``name`` (``None`` when unset)."""

    @abstractmethod
    def set_field(self, name: str, value: Any) -> None:
        """Stage a new value for ``name``; nothing is persisted until :meth:`commit`."""

    @abstractmethod
    def commit(self) -> None:
        """Persist staged changes."""


class ResultSet(ABC):
    """Records matching a query."""

    @abstractmethod
    def count(self) -> int:
        """Number of matching records."""

    @abstractmethod
    def __iter__(self) -> Iterator[Record]:
        """Iterate over the matching records."""

    def for_each(self, fn: Callable[[Record], None]) -> None:
        """Apply ``fn`` to every record of the set."""

        for record in self:
            fn(record)


class Dataset(ABC):
    """A named collection of records inside a repository."""

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def search(self, filters: Sequence[SearchFilter], *, satisfy_all: bool = True) -> ResultSet:
        """Return the records matching ``filters``.

        ``satisfy_all`` combines filters with AND semantics; otherwise any
        single filter is enough.
        """


class Session(ABC):
    """Handle to one repository instance."""

    def __init__(self, repository_id: str, *, noise: int = 1) -> None:
        self.repository_id = repository_id
        self.noise = noise

    @abstractmethod
    def dataset(self, name: str) -> Dataset:
        """Return the dataset called ``name``."""

    def close(self) -> None:
        """Release resources held by the session."""


def search(dataset: Dataset, filters: Sequence[SearchFilter], satisfy_all: bool = True) -> ResultSet:
    """Run a search against ``dataset``."""

    return dataset.search(filters, satisfy_all=satisfy_all)


def filters_match(
    filters: Sequence[SearchFilter],
    get_value: Callable[[str], Any],
    *,
    satisfy_all: bool,
) -> bool:
    """Evaluate ``filters`` against a record exposed through ``get_value``."""

    for search_filter in filters:
        if search_filter.match != "EX":
            raise RepositoryError(f"Unsupported match type '{search_filter.match}'")
    if not filters:
        return True
    results = (f.matches(get_value(f.field)) for f in filters)
    return all(results) if satisfy_all else any(results)


__all__ = [
    "SearchFilter",
    "Record",
    "ResultSet",
    "Dataset",
    "Session",
    "search",
    "filters_match",
]
