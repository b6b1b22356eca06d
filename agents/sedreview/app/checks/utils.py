"""Utility helpers for check implementations."""

from __future__ import annotations

from typing import Any, Iterable

import pandas as pd

from ..schemas import SAMPLE_COLUMNS

_SAMPLE_ATTRIBUTES = ("DB_NO", "HYD_COND_CD", "HYD_EVENT_CD", "SAMPLE_CM_TX")


def dataframe_to_records(frame: pd.DataFrame, limit: int = 5) -> list[dict[str, Any]]:
    """Convert a dataframe slice into JSON-serialisable records."""

    serialisable = frame.head(limit).copy()
    for column in serialisable.select_dtypes(include=["datetime", "datetimetz"]).columns:
        series = serialisable[column]
        if series.dt.tz is None:
            series = series.dt.tz_localize("UTC")
        serialisable[column] = series.dt.tz_convert("UTC").dt.strftime("%Y-%m-%dT%H:%M:%SZ")
    serialisable = serialisable.astype(object)
    return serialisable.where(pd.notna(serialisable), None).to_dict(orient="records")


def sample_table(data: pd.DataFrame) -> pd.DataFrame:
    """Return one row per ``UID`` carrying the sample-level attributes."""

    columns = SAMPLE_COLUMNS + [col for col in _SAMPLE_ATTRIBUTES if col in data.columns]
    return data[columns].drop_duplicates(subset="UID").reset_index(drop=True)


def parameter_rows(data: pd.DataFrame, parm_cds: str | Iterable[str]) -> pd.DataFrame:
    """Return the result rows reporting any of ``parm_cds``."""

    codes = [parm_cds] if isinstance(parm_cds, str) else list(parm_cds)
    return data[data["PARM_CD"].isin(codes)]


def parameter_values(data: pd.DataFrame, parm_cd: str) -> pd.Series:
    """Return the first non-null numeric result of ``parm_cd`` for each ``UID``."""

    rows = parameter_rows(data, parm_cd)
    values = pd.to_numeric(rows["RESULT_VA"], errors="coerce")
    return values.groupby(rows["UID"], sort=False).first().dropna()


def _as_code(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def parameter_codes(data: pd.DataFrame, parm_cd: str) -> pd.Series:
    """Return coded parameter values (sampler type, method, ...) as strings per ``UID``."""

    values = parameter_values(data, parm_cd)
    return pd.Series([_as_code(v) for v in values], index=values.index, dtype=object)


def uids_reporting(data: pd.DataFrame, parm_cds: str | Iterable[str]) -> pd.Index:
    """Return the unique ``UID`` values that report any of ``parm_cds``."""

    return pd.Index(parameter_rows(data, parm_cds)["UID"].unique(), name="UID")


__all__ = [
    "dataframe_to_records",
    "parameter_codes",
    "parameter_rows",
    "parameter_values",
    "sample_table",
    "uids_reporting",
]
