"""Run every review check on a sample table and aggregate the flags."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

import pandas as pd

from .checks import CheckRegistry, CheckResult, DataCheck, default_checks
from .checks.utils import dataframe_to_records
from .config import ReviewSettings
from .logging import get_logger
from .schemas import (
    CODE_COLUMNS,
    IDENTITY_COLUMNS,
    REQUIRED_COLUMNS,
    SAMPLE_COLUMNS,
    SORT_COLUMNS,
    require_columns,
)
from .sites import find_box_coefficients, find_outliers, flatten_uids, map_sites
from .summaries import (
    calc_conc_sand_fine,
    calc_summary_stats,
    count_methods_by_site,
    count_sample_status,
    find_provisional,
)

LOGGER = get_logger(__name__)

DataLoader = Callable[[Path], pd.DataFrame]

FLAG_MARKER = "flags present"
OUTLIER_COLUMN = "outliers"


@dataclass(slots=True)
class ReviewTables:
    """Flag summary together with every table it was built from."""

    flagged_samples: pd.DataFrame
    flag_summary: pd.DataFrame
    check_tables: dict[str, pd.DataFrame]
    methods_by_site: pd.DataFrame
    sample_status: pd.DataFrame
    box_coefficients: dict[Any, pd.DataFrame]
    outliers: dict[Any, pd.DataFrame]
    provisional: pd.DataFrame
    conc_sand_fine: pd.DataFrame
    summary_stats: pd.DataFrame
    check_columns: dict[str, str] = field(default_factory=dict)

    def tables(self) -> dict[str, pd.DataFrame]:
        """Return every table under a flat name; per-site tables are ``<name>/<site>``."""

        flat: dict[str, pd.DataFrame] = {"flagged_samples": self.flagged_samples}
        flat.update(self.check_tables)
        flat["methods_by_site"] = self.methods_by_site
        flat["sample_status"] = self.sample_status
        for site_no, frame in self.box_coefficients.items():
            flat[f"box_coefficients/{site_no}"] = frame
        for site_no, frame in self.outliers.items():
            flat[f"outliers/{site_no}"] = frame
        flat["provisional"] = self.provisional
        flat["conc_sand_fine"] = self.conc_sand_fine
        flat["summary_stats"] = self.summary_stats
        return flat

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON serialisable representation."""

        flags = self.flag_summary
        return {
            "flagged_count": int(len(self.flagged_samples)),
            "checks": [
                {
                    "name": name,
                    "column": column,
                    "flagged_samples": int(flags[column].sum()) if column in flags else 0,
                }
                for name, column in self.check_columns.items()
            ],
            "tables": {name: int(len(frame)) for name, frame in self.tables().items()},
            "flagged_samples": dataframe_to_records(self.flagged_samples),
        }


def load_samples(path: Path) -> pd.DataFrame:
    """Read a sample export from CSV or parquet."""

    suffix = path.suffix.lower()
    LOGGER.info("Loading samples", extra={"path": str(path)})
    if suffix == ".csv":
        frame = pd.read_csv(
            path,
            dtype={column: str for column in CODE_COLUMNS},
            parse_dates=["SAMPLE_START_DT"],
        )
    elif suffix in {".parquet", ".pq"}:
        frame = pd.read_parquet(path)
    else:
        raise ValueError(f"Unsupported sample file format: {path.suffix!r}")
    LOGGER.info("Loaded %s results", len(frame))
    return frame


def run_checks(data: pd.DataFrame, checks: Iterable[DataCheck]) -> list[CheckResult]:
    """Run the provided checks against ``data``."""

    results: list[CheckResult] = []
    for check in checks:
        LOGGER.debug("Running check", extra={"check": check.name})
        result = check.run(data)
        results.append(result)
        LOGGER.debug(
            "Check result",
            extra={"check": check.name, "flagged": len(result.flagged_uids)},
        )
    return results


def _flag_columns(results: Iterable[CheckResult]) -> list[str]:
    return [result.column for result in results] + [OUTLIER_COLUMN]


def summarise_flags(
    data: pd.DataFrame,
    results: Iterable[CheckResult],
    outlier_uids: Iterable[Any],
) -> pd.DataFrame:
    """Build the boolean flag summary: one row per flagged ``UID``.

    Membership is tested by ``UID`` for every check; parameter rows of the
    same sample are OR-reduced so each sample appears once.
    """

    results = list(results)
    flag_columns = _flag_columns(results)
    identity = data[IDENTITY_COLUMNS].drop_duplicates()

    keys = identity[["UID", "PARM_CD"]].drop_duplicates().copy()
    for result in results:
        keys[result.column] = keys["UID"].isin(result.flagged_uids)
    keys[OUTLIER_COLUMN] = keys["UID"].isin(pd.Index(outlier_uids))

    annotated = identity.merge(keys, on=["UID", "PARM_CD"], how="left")
    flagged = annotated[annotated[flag_columns].any(axis=1)]
    if flagged.empty:
        summary = pd.DataFrame(columns=SAMPLE_COLUMNS + flag_columns)
        return summary.astype({column: bool for column in flag_columns})

    aggregations = {column: "first" for column in SAMPLE_COLUMNS[1:]}
    aggregations.update({column: "any" for column in flag_columns})
    summary = flagged.groupby("UID", sort=False, dropna=False).agg(aggregations).reset_index()
    return sort_samples(summary[SAMPLE_COLUMNS + flag_columns])


def sort_samples(frame: pd.DataFrame) -> pd.DataFrame:
    """Stable sort by site number, then sample start time."""

    ordered = frame
    # Sort by the least significant key first; mergesort keeps earlier passes.
    for column in reversed(SORT_COLUMNS):
        ordered = ordered.sort_values(column, kind="mergesort")
    return ordered.reset_index(drop=True)


def render_flags(summary: pd.DataFrame, flag_columns: Iterable[str]) -> pd.DataFrame:
    """Replace boolean flags with the display marker (``True``) or an empty string."""

    rendered = summary.copy()
    for column in flag_columns:
        rendered[column] = [FLAG_MARKER if flag else "" for flag in summary[column]]
    return rendered


def review_samples(
    data: pd.DataFrame,
    qa_db: str = "02",
    include_uv: bool = False,
    *,
    checks: Mapping[str, DataCheck] | None = None,
    time_diff: float = 1.0,
) -> ReviewTables:
    """Run all review checks, counts, finds and calculations and bundle the results."""

    require_columns(data.columns, REQUIRED_COLUMNS, dataset="samples")
    registry: CheckRegistry = dict(
        checks if checks is not None else default_checks(qa_db=qa_db, include_uv=include_uv)
    )

    results = run_checks(data, registry.values())
    methods_by_site = count_methods_by_site(data)
    sample_status = count_sample_status(data, by_site=True)

    box_coefficients = map_sites(data, find_box_coefficients, time_diff=time_diff)
    outliers = map_sites(data, find_outliers)
    outlier_uids = flatten_uids(outliers)

    provisional = find_provisional(data)
    conc_sand_fine = calc_conc_sand_fine(data)
    summary_stats = calc_summary_stats(data)

    flag_summary = summarise_flags(data, results, outlier_uids)
    flagged_samples = render_flags(flag_summary, _flag_columns(results))
    LOGGER.info(
        "Review complete",
        extra={
            "samples": int(data["UID"].nunique()),
            "flagged": len(flagged_samples),
            "sites": len(outliers),
        },
    )

    return ReviewTables(
        flagged_samples=flagged_samples,
        flag_summary=flag_summary,
        check_tables={result.name: result.table for result in results},
        methods_by_site=methods_by_site,
        sample_status=sample_status,
        box_coefficients=box_coefficients,
        outliers=outliers,
        provisional=provisional,
        conc_sand_fine=conc_sand_fine,
        summary_stats=summary_stats,
        check_columns={result.name: result.column for result in results},
    )


def check_all(
    data: pd.DataFrame,
    qa_db: str = "02",
    include_uv: bool = False,
    return_all_tables: bool = False,
    *,
    checks: Mapping[str, DataCheck] | None = None,
    time_diff: float = 1.0,
) -> pd.DataFrame | ReviewTables:
    """Run all review checks on ``data``.

    Returns the rendered flag summary, or the full :class:`ReviewTables`
    bundle when ``return_all_tables`` is set. ``checks`` replaces the default
    roster built from ``qa_db`` and ``include_uv``.
    """

    tables = review_samples(data, qa_db, include_uv, checks=checks, time_diff=time_diff)
    if return_all_tables:
        return tables
    return tables.flagged_samples


def run_review(
    settings: ReviewSettings,
    source: Path,
    *,
    loader: DataLoader | None = None,
    checks: Mapping[str, DataCheck] | None = None,
) -> ReviewTables:
    """Load ``source`` and run the full review with the configured options."""

    data = (loader or load_samples)(source)
    return review_samples(
        data,
        qa_db=settings.qa_db,
        include_uv=settings.include_uv,
        checks=checks,
    )


__all__ = [
    "FLAG_MARKER",
    "OUTLIER_COLUMN",
    "ReviewTables",
    "check_all",
    "load_samples",
    "render_flags",
    "review_samples",
    "run_checks",
    "run_review",
    "sort_samples",
    "summarise_flags",
]
