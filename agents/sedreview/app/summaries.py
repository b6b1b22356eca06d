"""Counts, listings and derived tables that accompany the flag summary."""

from __future__ import annotations

import pandas as pd

from .checks.utils import parameter_codes, parameter_values, sample_table
from .schemas import (
    IDENTITY_COLUMNS,
    PERCENT_FINES,
    PROVISIONAL_DQI,
    SAMPLE_COLUMNS,
    SAMPLER_TYPE,
    SAMPLING_METHOD,
    SSC,
    empty_frame,
)


def count_methods_by_site(data: pd.DataFrame) -> pd.DataFrame:
    """Count samples per site by sampling method and sampler type."""

    keys = ["SITE_NO", "STATION_NM", "SAMPLING_METHOD", "SAMPLER_TYPE"]
    samples = sample_table(data)
    if samples.empty:
        return empty_frame(keys + ["SAMPLE_COUNT"])

    samples["SAMPLING_METHOD"] = samples["UID"].map(parameter_codes(data, SAMPLING_METHOD))
    samples["SAMPLER_TYPE"] = samples["UID"].map(parameter_codes(data, SAMPLER_TYPE))
    return (
        samples.groupby(keys, dropna=False, sort=True)
        .size()
        .reset_index(name="SAMPLE_COUNT")
    )


def count_sample_status(data: pd.DataFrame, by_site: bool = True) -> pd.DataFrame:
    """Count results and samples per data-quality indicator code."""

    keys = ["SITE_NO", "STATION_NM", "DQI_CD"] if by_site else ["DQI_CD"]
    if data.empty:
        return empty_frame(keys + ["RESULT_COUNT", "SAMPLE_COUNT"])

    return (
        data.groupby(keys, dropna=False, sort=True)
        .agg(RESULT_COUNT=("UID", "size"), SAMPLE_COUNT=("UID", "nunique"))
        .reset_index()
    )


def find_provisional(data: pd.DataFrame) -> pd.DataFrame:
    """List results whose DQI code marks them as provisional or in review."""

    provisional = data.loc[data["DQI_CD"].isin(PROVISIONAL_DQI), IDENTITY_COLUMNS + ["RESULT_VA"]]
    provisional = provisional.sort_values("SAMPLE_START_DT", kind="mergesort")
    return provisional.sort_values("SITE_NO", kind="mergesort").reset_index(drop=True)


def calc_conc_sand_fine(data: pd.DataFrame) -> pd.DataFrame:
    """Split SSC into fines and sand concentrations using the percent finer than 0.0625 mm."""

    columns = SAMPLE_COLUMNS + ["SSC", "PERCENT_FINES", "FINES_CONC", "SAND_CONC"]
    samples = sample_table(data)
    samples["SSC"] = samples["UID"].map(parameter_values(data, SSC))
    samples["PERCENT_FINES"] = samples["UID"].map(parameter_values(data, PERCENT_FINES))
    samples = samples.dropna(subset=["SSC", "PERCENT_FINES"])
    if samples.empty:
        return empty_frame(columns)

    ssc = samples["SSC"].astype(float)
    fines = ssc * samples["PERCENT_FINES"].astype(float) / 100
    samples = samples.assign(FINES_CONC=fines, SAND_CONC=ssc - fines)
    return samples.reindex(columns=columns).reset_index(drop=True)


def calc_summary_stats(data: pd.DataFrame) -> pd.DataFrame:
    """Per site and parameter statistics of the numeric results."""

    keys = ["SITE_NO", "STATION_NM", "PARM_CD", "PARM_NM"]
    results = data.assign(RESULT_VA=pd.to_numeric(data["RESULT_VA"], errors="coerce"))
    results = results.dropna(subset=["RESULT_VA"])
    if results.empty:
        return empty_frame(
            keys + ["COUNT", "MIN", "MAX", "MEAN", "MEDIAN", "FIRST_SAMPLE_DT", "LAST_SAMPLE_DT"]
        )

    stats = results.groupby(keys, dropna=False, sort=True).agg(
        COUNT=("RESULT_VA", "size"),
        MIN=("RESULT_VA", "min"),
        MAX=("RESULT_VA", "max"),
        MEAN=("RESULT_VA", "mean"),
        MEDIAN=("RESULT_VA", "median"),
        FIRST_SAMPLE_DT=("SAMPLE_START_DT", "min"),
        LAST_SAMPLE_DT=("SAMPLE_START_DT", "max"),
    )
    return stats.reset_index()


__all__ = [
    "calc_conc_sand_fine",
    "calc_summary_stats",
    "count_methods_by_site",
    "count_sample_status",
    "find_provisional",
]
