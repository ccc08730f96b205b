"""Repository client speaking a small JSON REST API over HTTP."""

from __future__ import annotations

import copy
from typing import Any, Iterator, Sequence
from urllib.parse import quote

import requests
from loguru import logger

from divmover.exceptions import RepositoryError, SessionError

from .base import Dataset, Record, ResultSet, SearchFilter, Session


class HttpRecord(Record):
    """A record returned by the search endpoint."""

    def __init__(self, dataset: "HttpDataset", data: dict[str, Any]) -> None:
        if "id" not in data:
            raise RepositoryError("Search response contained a record without an 'id'")
        self._dataset = dataset
        self._data = data
        self._changes: dict[str, Any] = {}

    @property
    def id(self) -> str:
        return str(self._data["id"])

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
        self._dataset.patch_record(self.id, self._changes)
        self._data.update(self._changes)
        self._changes = {}


class HttpResultSet(ResultSet):
    """Paged search result.

    All pages are fetched on first access, so records moved out of the
    searched division while iterating do not shift later pages.
    """

    def __init__(
        self,
        dataset: "HttpDataset",
        filters: Sequence[SearchFilter],
        *,
        satisfy_all: bool,
    ) -> None:
        self._dataset = dataset
        self._filters = list(filters)
        self._satisfy_all = satisfy_all
        self._rows: list[dict[str, Any]] | None = None

    def _load(self) -> list[dict[str, Any]]:
        if self._rows is None:
            self._rows = self._dataset.fetch_all(self._filters, satisfy_all=self._satisfy_all)
        return self._rows

    def count(self) -> int:
        return len(self._load())

    def __iter__(self) -> Iterator[Record]:
        for row in self._load():
            yield HttpRecord(self._dataset, row)


class HttpDataset(Dataset):
    """Dataset exposed under ``{base_url}/datasets/{name}``."""

    def __init__(self, session: "HttpSession", name: str) -> None:
        super().__init__(name)
        self.session = session
        self.url = f"{session.base_url}/datasets/{quote(name, safe='')}"

    def search(self, filters: Sequence[SearchFilter], *, satisfy_all: bool = True) -> ResultSet:
        return HttpResultSet(self, filters, satisfy_all=satisfy_all)

    def fetch_all(self, filters: Sequence[SearchFilter], *, satisfy_all: bool) -> list[dict[str, Any]]:
        """Collect every page of a search."""

        payload: dict[str, Any] = {
            "filters": [
                {"field": f.field, "value": f.value, "match": f.match} for f in filters
            ],
            "satisfy_all": satisfy_all,
            "limit": self.session.page_size,
        }
        rows: list[dict[str, Any]] = []
        while True:
            data = self.session.request("POST", f"{self.url}/search", json={**payload, "offset": len(rows)})
            page = data.get("records") or []
            total = int(data.get("total", len(rows) + len(page)))
            rows.extend(page)
            if not page or len(rows) >= total:
                break

        if self.session.noise > 1:
            logger.debug("Search on {}/{} matched {} records", self.session.repository_id, self.name, len(rows))
        return rows

    def patch_record(self, record_id: str, changes: dict[str, Any]) -> None:
        self.session.request("PATCH", f"{self.url}/records/{quote(record_id, safe='')}", json=changes)
        if self.session.noise > 1:
            logger.debug("Committed record {} in {}/{}", record_id, self.session.repository_id, self.name)


class HttpSession(Session):
    """Session against a remote repository API."""

    def __init__(
        self,
        repository_id: str,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 30.0,
        page_size: int = 200,
        noise: int = 1,
        http: requests.Session | None = None,
    ) -> None:
        super().__init__(repository_id, noise=noise)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.page_size = page_size
        self.http = http or requests.Session()
        self.http.headers.update({"Accept": "application/json", "User-Agent": "divmover/0.1"})
        if token:
            self.http.headers["Authorization"] = f"Bearer {token}"

        try:
            response = self.http.get(f"{self.base_url}/", timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            self.http.close()
            raise SessionError(f"Cannot reach repository {repository_id} at {self.base_url}: {exc}") from exc

        if noise > 0:
            logger.info("Opened HTTP repository {} at {}", repository_id, self.base_url)

    def request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        """Send a request and decode the JSON body; HTTP errors propagate."""

        response = self.http.request(method, url, timeout=self.timeout, **kwargs)
        response.raise_for_status()
        if not response.content:
            return {}
        return response.json()

    def dataset(self, name: str) -> HttpDataset:
        return HttpDataset(self, name)

    def close(self) -> None:
        self.http.close()


__all__ = ["HttpSession", "HttpDataset", "HttpResultSet", "HttpRecord"]
