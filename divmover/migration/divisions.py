"""Move every record of one or more divisions into a destination division."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Literal, Sequence

import typer
from loguru import logger

from divmover.repository import Record, SearchFilter, Session, search

__all__ = ["DivisionMover", "DivisionOutcome", "MoveReport", "SEPARATOR"]

SEPARATOR = "=" * 72

OutcomeStatus = Literal["moved", "declined", "dry_run"]


def _confirm(text: str) -> bool:
    # default=None makes click re-prompt until it reads y/yes/n/no
    return typer.confirm(text, default=None)


@dataclass(slots=True)
class DivisionOutcome:
    """What happened to a single source division."""

    source: str
    matched: int
    status: OutcomeStatus

    @property
    def moved(self) -> int:
        return self.matched if self.status == "moved" else 0


@dataclass(slots=True)
class MoveReport:
    """Summary of a division move run."""

    repository_id: str
    destination: str
    dry_run: bool = False
    outcomes: list[DivisionOutcome] = field(default_factory=list)

    @property
    def total_moved(self) -> int:
        return sum(outcome.moved for outcome in self.outcomes)

    @property
    def total_matched(self) -> int:
        return sum(outcome.matched for outcome in self.outcomes)

    def as_dict(self) -> dict[str, object]:
        return {
            "repository_id": self.repository_id,
            "destination": self.destination,
            "dry_run": self.dry_run,
            "total_moved": self.total_moved,
            "divisions": [
                {"source": o.source, "matched": o.matched, "status": o.status, "moved": o.moved}
                for o in self.outcomes
            ],
        }


class DivisionMover:
    """Rewrites the division field of every record found under the source divisions."""

    def __init__(
        self,
        session: Session,
        *,
        dataset: str = "archive",
        division_field: str = "divisions",
        views_command: str = "generate_views",
        confirm: Callable[[str], bool] | None = None,
        echo: Callable[..., None] | None = None,
    ) -> None:
        self.session = session
        self.dataset = session.dataset(dataset)
        self.division_field = division_field
        self.views_command = views_command
        self._confirm = confirm or _confirm
        self._echo = echo or typer.echo

    def run(
        self,
        sources: Sequence[str],
        destination: str,
        *,
        quiet: bool = False,
        force: bool = False,
        dry_run: bool = False,
    ) -> MoveReport:
        report = MoveReport(
            repository_id=self.session.repository_id,
            destination=destination,
            dry_run=dry_run,
        )

        for source in sources:
            outcome = self.move_division(source, destination, quiet=quiet, force=force, dry_run=dry_run)
            report.outcomes.append(outcome)

        if not quiet:
            self._print_summary(report)
        return report

    def move_division(
        self,
        source: str,
        destination: str,
        *,
        quiet: bool = False,
        force: bool = False,
        dry_run: bool = False,
    ) -> DivisionOutcome:
        """Move the records of a single source division."""

        results = search(
            self.dataset,
            [SearchFilter(self.division_field, source)],
            satisfy_all=True,
        )
        count = results.count()
        logger.debug("Division {} holds {} records", source, count)

        if dry_run:
            self._echo(f"Would move {count} prints from {source} to {destination}.")
            return DivisionOutcome(source=source, matched=count, status="dry_run")

        if not force and not self._confirm(f"Move {count} prints from {source} to {destination}?"):
            logger.debug("Skipped division {}", source)
            return DivisionOutcome(source=source, matched=count, status="declined")

        if not quiet:
            self._echo(f"Moving {count} prints from {source}...", nl=False)

        def _rewrite(record: Record) -> None:
            record.set_field(self.division_field, [destination])
            record.commit()

        results.for_each(_rewrite)

        if not quiet:
            self._echo(" done.")
        return DivisionOutcome(source=source, matched=count, status="moved")

    def _print_summary(self, report: MoveReport) -> None:
        if report.dry_run:
            self._echo(f"Would move {report.total_matched} prints.")
            return

        self._echo(f"Moved {report.total_moved} prints.")
        self._echo(SEPARATOR)
        self._echo("Browse views are not updated by this tool. Regenerate them with:")
        self._echo(f"    {self.views_command} {report.repository_id}")
        self._echo(SEPARATOR)
