"""Command line interface for the division mover."""

from __future__ import annotations

import os
import sys
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path

import typer
from loguru import logger
from pydantic import ValidationError

from .config import AppConfig, load_config
from .migration import DivisionMover
from .repository import open_session

PROG_NAME = "move_division"
USAGE = f"Usage: {PROG_NAME} [OPTIONS] REPOSITORY_ID SOURCE_DIVISION... DESTINATION_DIVISION"
CONFIG_ENV_VAR = "DIVMOVER_CONFIG"

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_SESSION = 2

# typer may dispatch to its own vendored click, so resolve the class it raises
_UsageError = next(cls for cls in typer.BadParameter.__mro__ if cls.__name__ == "UsageError")

_LOG_LEVELS = {0: "WARNING", 1: "INFO"}
_log_sink_id = 0  # loguru's default stderr sink


@dataclass(slots=True)
class MoveArguments:
    """Positional arguments split into their roles."""

    repository_id: str
    sources: tuple[str, ...]
    destination: str

    @classmethod
    def parse(cls, values: list[str]) -> "MoveArguments | None":
        if len(values) < 3:
            return None
        return cls(repository_id=values[0], sources=tuple(values[1:-1]), destination=values[-1])


app = typer.Typer(
    help="Move every record of the source divisions into the destination division.",
    add_completion=False,
)


def _default_config_path() -> Path:
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.cwd() / "config" / "repositories.toml"


def _exit(code: int) -> None:
    raise typer.Exit(code)


def _usage_error(message: str) -> None:
    logger.error(message)
    typer.echo(USAGE)
    _exit(EXIT_USAGE)


def _load_app_config(path: Path) -> AppConfig | None:
    try:
        return load_config(AppConfig, path)
    except FileNotFoundError as exc:
        logger.error("{}", exc)
    except ValidationError as exc:
        logger.error("Invalid configuration {}: {}", path, exc)
    except ValueError as exc:
        logger.error("Cannot parse configuration {}: {}", path, exc)
    except OSError as exc:
        logger.error("Cannot read configuration {}: {}", path, exc)
    return None


def _noise_level(quiet: int, verbose: int) -> int:
    if quiet:
        return 0
    return 1 + verbose


def _configure_logging(noise: int) -> None:
    """Replace the stderr sink with one sized to the noise level."""

    global _log_sink_id
    with suppress(ValueError):
        logger.remove(_log_sink_id)
    # look up sys.stderr per message so redirected streams are honoured
    _log_sink_id = logger.add(lambda message: sys.stderr.write(message), level=_LOG_LEVELS.get(noise, "DEBUG"))


@app.command(help="Move records from SOURCE_DIVISION(s) to DESTINATION_DIVISION")
def move_division(
    arguments: list[str] | None = typer.Argument(
        None,
        metavar="REPOSITORY_ID SOURCE_DIVISION... DESTINATION_DIVISION",
        show_default=False,
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help=f"Path to the TOML configuration file (defaults to ${CONFIG_ENV_VAR} or ./config/repositories.toml)",
    ),
    quiet: int = typer.Option(0, "--quiet", "-q", count=True, help="Suppress progress and summary output"),
    force: int = typer.Option(0, "--force", "-f", count=True, help="Do not ask for confirmation"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Log more detail (repeatable)"),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Report how many records would move without prompting or writing",
    ),
) -> None:
    noise = _noise_level(quiet, verbose)
    _configure_logging(noise)

    parsed = MoveArguments.parse(list(arguments or []))
    if parsed is None:
        _usage_error("Expected a repository id, at least one source division and a destination division")
        return

    config_path = (config or _default_config_path()).resolve()
    app_config = _load_app_config(config_path)
    if app_config is None:
        _exit(EXIT_SESSION)
        return

    session = open_session(app_config, parsed.repository_id, noise=noise, base_dir=config_path.parent)
    if session is None:
        logger.error("Failed to load repository: {}", parsed.repository_id)
        _exit(EXIT_SESSION)
        return

    try:
        mover = DivisionMover(
            session,
            dataset=app_config.dataset,
            division_field=app_config.division_field,
            views_command=app_config.views_command,
        )
        report = mover.run(
            parsed.sources,
            parsed.destination,
            quiet=bool(quiet),
            force=bool(force),
            dry_run=dry_run,
        )
    finally:
        session.close()

    logger.debug("Division move finished: {}", report.as_dict())


def main(argv: list[str] | None = None) -> int:
    """Entry point compatible with setuptools console scripts."""

    try:
        result = app(args=argv, prog_name=PROG_NAME, standalone_mode=False)
    except _UsageError as exc:
        logger.error("{}", exc.format_message())
        typer.echo(USAGE)
        return EXIT_USAGE
    except typer.Abort:
        typer.echo("Aborted!", err=True)
        return EXIT_USAGE
    if isinstance(result, int):
        return result
    return EXIT_OK


def run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    run()
