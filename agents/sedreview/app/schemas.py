"""Canonical columns and parameter codes for sediment sample tables."""

from __future__ import annotations

from typing import Iterable

import pandas as pd


SAMPLE_COLUMNS: list[str] = [
    "UID",
    "RECORD_NO",
    "SITE_NO",
    "STATION_NM",
    "SAMPLE_START_DT",
    "MEDIUM_CD",
]
"""Columns that describe a sample independently of the reported parameter."""


PARAMETER_COLUMNS: list[str] = ["PARM_CD", "PARM_NM", "PARM_SEQ_GRP_CD", "DQI_CD"]
"""Columns that describe a single parameter result."""


IDENTITY_COLUMNS: list[str] = SAMPLE_COLUMNS + PARAMETER_COLUMNS
"""Projection used to build the flag summary."""


REQUIRED_COLUMNS: list[str] = IDENTITY_COLUMNS + ["RESULT_VA"]
"""Columns every review run reads."""


CODE_COLUMNS: tuple[str, ...] = (
    "UID",
    "RECORD_NO",
    "SITE_NO",
    "MEDIUM_CD",
    "PARM_CD",
    "PARM_SEQ_GRP_CD",
    "DQI_CD",
    "DB_NO",
    "HYD_COND_CD",
    "HYD_EVENT_CD",
)
"""Columns holding codes that must be read as text (leading zeros matter)."""


SORT_COLUMNS: list[str] = ["SITE_NO", "SAMPLE_START_DT"]


# Parameter codes
SSC = "80154"
PERCENT_FINES = "70331"
TSS = "00530"
DISCHARGE = "00060"
DISCHARGE_INSTANT = "00061"
SAMPLE_PURPOSE = "71999"
SAMPLER_TYPE = "84164"
SAMPLING_METHOD = "82398"
VERTICALS = "00063"
SEDIMENT_MASS = "91157"
BEDLOAD = "80225"
BEDLOAD_MASS = "91145"
BAG_SAMPLE_VOLUME = "72218"
BAG_SAMPLE_DURATION = "72217"
NOZZLE_VELOCITY = "72196"
NOZZLE_DIAMETER = "72220"

DISCHARGE_PARAMETERS: tuple[str, ...] = (DISCHARGE_INSTANT, DISCHARGE)
"""Discharge codes in order of preference."""
SEDIMENT_PARAMETERS: tuple[str, ...] = (SSC, BEDLOAD, BEDLOAD_MASS)
OUTLIER_PARAMETERS: tuple[str, ...] = (SSC, PERCENT_FINES, TSS, BEDLOAD)

# Sampling method codes
METHOD_EWI = "10"
METHOD_EDI = "15"
METHOD_EWT = "20"
CROSS_SECTION_METHODS: tuple[str, ...] = (METHOD_EWI, METHOD_EDI, METHOD_EWT)

PROVISIONAL_DQI: tuple[str, ...] = ("I", "S", "P")
"""Data-quality indicator codes for results still in review."""


def require_columns(
    columns: Iterable[str],
    required: Iterable[str],
    dataset: str | None = None,
) -> None:
    """Raise ``ValueError`` if any of ``required`` is absent from ``columns``."""

    missing = sorted(set(required).difference(columns))
    if missing:
        prefix = f"[{dataset}] " if dataset else ""
        raise ValueError(f"{prefix}Missing columns: {missing}")


def empty_frame(columns: Iterable[str]) -> pd.DataFrame:
    """Return an empty frame with the given column set."""

    return pd.DataFrame(columns=list(columns))


__all__ = [
    "SAMPLE_COLUMNS",
    "PARAMETER_COLUMNS",
    "IDENTITY_COLUMNS",
    "REQUIRED_COLUMNS",
    "CODE_COLUMNS",
    "SORT_COLUMNS",
    "CROSS_SECTION_METHODS",
    "DISCHARGE_PARAMETERS",
    "OUTLIER_PARAMETERS",
    "PROVISIONAL_DQI",
    "SEDIMENT_PARAMETERS",
    "empty_frame",
    "require_columns",
]
