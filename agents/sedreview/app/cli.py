"""Command line interface for the sediment review agent."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from .config import ReviewSettings, get_settings
from .logging import configure_logging, get_logger
from .pipeline import ReviewTables, run_review

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Review utilities for sediment sample exports.",
)
LOGGER = get_logger(__name__)

SUMMARY_FILENAME = "review_summary.json"


@app.callback()
def init() -> None:
    """Initialize application-wide services before command execution."""

    configure_logging()


def _override_settings(
    settings: ReviewSettings,
    *,
    qa_db: Optional[str] = None,
    include_uv: Optional[bool] = None,
    return_all_tables: Optional[bool] = None,
    artifacts_dir: Optional[Path] = None,
) -> ReviewSettings:
    """Return validated settings with command line overrides applied."""

    overrides = {
        "qa_db": qa_db,
        "include_uv": include_uv,
        "return_all_tables": return_all_tables,
        "artifacts_dir": artifacts_dir,
    }
    filtered = {key: value for key, value in overrides.items() if value is not None}
    if not filtered:
        return settings
    return ReviewSettings.model_validate({**settings.model_dump(), **filtered})


def write_artifacts(tables: ReviewTables, output_dir: Path, *, all_tables: bool) -> list[Path]:
    """Write the flag summary (and every bundle table when requested) as CSV files."""

    output_dir.mkdir(parents=True, exist_ok=True)
    frames = tables.tables() if all_tables else {"flagged_samples": tables.flagged_samples}

    written: list[Path] = []
    for name, frame in frames.items():
        path = output_dir / f"{name}.csv"
        path.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(path, index=False)
        written.append(path)

    summary_path = output_dir / SUMMARY_FILENAME
    with summary_path.open("w", encoding="utf-8") as fp:
        json.dump(tables.to_dict(), fp, indent=2, ensure_ascii=False, default=str)
    written.append(summary_path)
    return written


@app.command(help="Run every review check on a sample export and write the flag summary.")
def review(
    source: Path = typer.Option(
        ...,
        "--input",
        "-i",
        exists=True,
        dir_okay=False,
        readable=True,
        help="CSV or parquet export of sample results.",
    ),
    qa_db: Optional[str] = typer.Option(
        None, "--qa-db", help="Two-digit number of the QA/QC database."
    ),
    include_uv: Optional[bool] = typer.Option(
        None,
        "--include-uv/--no-include-uv",
        help="Compare sample discharge against the UV_FLOW column.",
    ),
    all_tables: Optional[bool] = typer.Option(
        None,
        "--all-tables/--summary-only",
        help="Write every intermediate table, not just the flag summary.",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for the artifacts. Defaults to the configured artifacts directory.",
    ),
) -> None:
    """Review a sample export and emit the flag summary artifacts."""

    try:
        settings = _override_settings(
            get_settings(),
            qa_db=qa_db,
            include_uv=include_uv,
            return_all_tables=all_tables,
            artifacts_dir=output_dir,
        )
    except ValidationError as exc:
        messages = "; ".join(error["msg"] for error in exc.errors())
        raise typer.BadParameter(messages) from exc
    configure_logging(settings.log_level)
    LOGGER.info("Starting review command", extra={"source": str(source)})

    tables = run_review(settings, source)
    written = write_artifacts(
        tables, settings.resolved_artifacts_dir, all_tables=settings.return_all_tables
    )
    LOGGER.info("Artifacts written", extra={"count": len(written)})
    LOGGER.info("Finished review command")

    flagged = len(tables.flagged_samples)
    typer.echo(f"{flagged} flagged samples")
    raise typer.Exit(code=0 if flagged == 0 else 1)


def main() -> None:
    """Entrypoint for ``python -m agents.sedreview.app``."""

    app()


if __name__ == "__main__":
    main()
