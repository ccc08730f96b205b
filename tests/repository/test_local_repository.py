from __future__ import annotations

import json
from pathlib import Path

import pytest

from divmover.exceptions import RecordNotFoundError, RepositoryError, SessionError
from divmover.repository import LocalSession, SearchFilter, search
from tests.utils import read_dataset, sample_rows, write_dataset


@pytest.fixture()
def session(tmp_path: Path) -> LocalSession:
    write_dataset(tmp_path, sample_rows())
    return LocalSession("repo1", tmp_path, noise=0)


def test_open_requires_existing_directory(tmp_path: Path) -> None:
    with pytest.raises(SessionError, match="not found"):
        LocalSession("repo1", tmp_path / "missing")


def test_search_matches_multi_valued_field(session: LocalSession) -> None:
    results = search(session.dataset("archive"), [SearchFilter("divisions", "A")])

    assert results.count() == 3
    assert sorted(record.id for record in results) == ["1", "2", "3"]


def test_search_is_exact_match(session: LocalSession) -> None:
    results = session.dataset("archive").search([SearchFilter("divisions", "a")])

    assert results.count() == 0


def test_search_matches_scalar_field(session: LocalSession) -> None:
    results = session.dataset("archive").search([SearchFilter("title", "Estuaries")])

    assert [record.id for record in results] == ["3"]


def test_satisfy_all_and_any(session: LocalSession) -> None:
    dataset = session.dataset("archive")
    filters = [SearchFilter("divisions", "A"), SearchFilter("divisions", "C")]

    assert [r.id for r in dataset.search(filters, satisfy_all=True)] == ["2"]
    assert sorted(r.id for r in dataset.search(filters, satisfy_all=False)) == ["1", "2", "3", "4"]


def test_unsupported_match_type(session: LocalSession) -> None:
    with pytest.raises(RepositoryError, match="Unsupported match type"):
        session.dataset("archive").search([SearchFilter("divisions", "A", match="IN")])


def test_missing_dataset_is_empty(session: LocalSession) -> None:
    assert session.dataset("inbox").search([SearchFilter("divisions", "A")]).count() == 0


def test_commit_persists_only_the_record(session: LocalSession, tmp_path: Path) -> None:
    results = session.dataset("archive").search([SearchFilter("divisions", "C")])
    record = next(iter(results))
    assert record.id == "2"

    record.set_field("divisions", ["B"])
    assert record.get_field("divisions") == ["B"]
    assert read_dataset(tmp_path)["2"]["divisions"] == ["A", "C"]

    record.commit()

    stored = read_dataset(tmp_path)
    assert stored["2"] == {"id": 2, "title": "Salt marsh", "divisions": ["B"]}
    assert stored["4"]["divisions"] == ["C"]
    assert list(stored) == ["1", "2", "3", "4", "5"]
    assert not list(tmp_path.glob("*.tmp"))


def test_set_value_is_copied(session: LocalSession, tmp_path: Path) -> None:
    record = next(iter(session.dataset("archive").search([SearchFilter("divisions", "A")])))
    value = ["B"]
    record.set_field("divisions", value)
    value.append("X")
    record.commit()

    assert read_dataset(tmp_path)[record.id]["divisions"] == ["B"]


def test_result_set_is_a_snapshot(session: LocalSession, tmp_path: Path) -> None:
    results = session.dataset("archive").search([SearchFilter("divisions", "A")])
    seen: list[str] = []

    def _move(record) -> None:
        seen.append(record.id)
        record.set_field("divisions", ["B"])
        record.commit()

    results.for_each(_move)

    assert seen == ["1", "2", "3"]
    assert all(read_dataset(tmp_path)[rid]["divisions"] == ["B"] for rid in seen)


def test_commit_of_vanished_record(session: LocalSession, tmp_path: Path) -> None:
    record = next(iter(session.dataset("archive").search([SearchFilter("divisions", "A")])))
    write_dataset(tmp_path, [])
    record.set_field("divisions", ["B"])

    with pytest.raises(RecordNotFoundError):
        record.commit()


def test_identifier_is_immutable(session: LocalSession) -> None:
    record = next(iter(session.dataset("archive").search([])))

    with pytest.raises(RepositoryError):
        record.set_field("id", 99)


def test_invalid_line_is_reported(tmp_path: Path) -> None:
    (tmp_path / "archive.jsonl").write_text('{"id": 1}\nnot json\n', encoding="utf-8")
    session = LocalSession("repo1", tmp_path, noise=0)

    with pytest.raises(RepositoryError, match="archive.jsonl:2"):
        session.dataset("archive").search([SearchFilter("divisions", "A")])


def test_commit_matches_identifier_type(tmp_path: Path) -> None:
    write_dataset(
        tmp_path,
        [
            {"id": 1, "divisions": ["C"]},
            {"id": "1", "divisions": ["A"]},
        ],
    )
    session = LocalSession("repo1", tmp_path, noise=0)
    record = next(iter(session.dataset("archive").search([SearchFilter("divisions", "A")])))

    record.set_field("divisions", ["B"])
    record.commit()

    rows = [json.loads(line) for line in (tmp_path / "archive.jsonl").read_text(encoding="utf-8").splitlines()]
    assert rows == [
        {"id": 1, "divisions": ["C"]},
        {"id": "1", "divisions": ["B"]},
    ]
