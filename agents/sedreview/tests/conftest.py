from __future__ import annotations

from pathlib import Path
from typing import Any, Callable
import sys

import pandas as pd
import pytest

REPO_ROOT = Path(__file__).resolve().parents[3]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from agents.sedreview.app import schemas

COLUMNS: list[str] = schemas.IDENTITY_COLUMNS + [
    "RESULT_VA",
    "DB_NO",
    "HYD_COND_CD",
    "HYD_EVENT_CD",
    "SAMPLE_CM_TX",
    "RESULT_CM_TX",
]

PARAMETER_NAMES = {
    schemas.SSC: "Suspended sediment concentration, mg/L",
    schemas.PERCENT_FINES: "Suspended sediment, percent finer than 0.0625 mm",
    schemas.TSS: "Total suspended solids, mg/L",
    schemas.DISCHARGE_INSTANT: "Discharge, instantaneous, cfs",
    schemas.SAMPLER_TYPE: "Sampler type, code",
    schemas.SAMPLING_METHOD: "Sampling method, code",
    schemas.SAMPLE_PURPOSE: "Sample purpose, code",
    schemas.VERTICALS: "Number of sampling points",
    schemas.SEDIMENT_MASS: "Sediment mass, mg",
}

CLEAN_RESULTS: dict[str, float] = {
    schemas.SSC: 100.0,
    schemas.PERCENT_FINES: 40.0,
    schemas.DISCHARGE_INSTANT: 50.0,
    schemas.SAMPLER_TYPE: 3044,
    schemas.SAMPLING_METHOD: 10,
    schemas.SAMPLE_PURPOSE: 15,
    schemas.VERTICALS: 10,
    schemas.SEDIMENT_MASS: 5.0,
}
"""Results of a sample that passes every default check."""

_SAMPLE_DEFAULTS: dict[str, Any] = {
    "SITE_NO": "01",
    "STATION_NM": "Mill Creek at Bridge",
    "SAMPLE_START_DT": "2024-01-01 10:00",
    "MEDIUM_CD": "WS",
    "DB_NO": "01",
    "HYD_COND_CD": "9",
    "HYD_EVENT_CD": "9",
    "SAMPLE_CM_TX": None,
}


def build_samples(samples: list[dict[str, Any]]) -> pd.DataFrame:
    """Expand sample entries into a long-format table, one row per result.

    Each entry holds sample-level columns plus ``results`` (parameter code to
    value) and an optional ``dqi`` code applied to every result.
    """

    rows: list[dict[str, Any]] = []
    for index, entry in enumerate(samples):
        entry = dict(entry)
        results = entry.pop("results")
        dqi = entry.pop("dqi", "R")
        sample = {**_SAMPLE_DEFAULTS, "RECORD_NO": f"{index + 1:08d}", **entry}
        for parm_cd, value in results.items():
            rows.append(
                {
                    **sample,
                    "PARM_CD": parm_cd,
                    "PARM_NM": PARAMETER_NAMES.get(parm_cd, parm_cd),
                    "PARM_SEQ_GRP_CD": "SED",
                    "DQI_CD": dqi,
                    "RESULT_VA": value,
                    "RESULT_CM_TX": None,
                }
            )
    extra = [column for row in rows for column in row if column not in COLUMNS]
    frame = pd.DataFrame(rows, columns=COLUMNS + list(dict.fromkeys(extra)))
    frame["SAMPLE_START_DT"] = pd.to_datetime(frame["SAMPLE_START_DT"])
    return frame


@pytest.fixture()
def make_samples() -> Callable[[list[dict[str, Any]]], pd.DataFrame]:
    return build_samples


@pytest.fixture()
def clean_results() -> dict[str, float]:
    return dict(CLEAN_RESULTS)
