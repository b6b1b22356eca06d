"""Per-site box coefficient and outlier finders."""

from __future__ import annotations

from typing import Any, Callable, Mapping

import pandas as pd

from .checks.utils import parameter_codes, parameter_values, sample_table
from .schemas import CROSS_SECTION_METHODS, OUTLIER_PARAMETERS, SAMPLING_METHOD, SSC, empty_frame

SiteFinder = Callable[..., pd.DataFrame]

BOX_COEFFICIENT_COLUMNS: list[str] = [
    "SITE_NO",
    "STATION_NM",
    "UID_XS",
    "SAMPLE_START_DT_XS",
    "SAMPLING_METHOD_XS",
    "SSC_XS",
    "UID_NXS",
    "SAMPLE_START_DT_NXS",
    "SAMPLING_METHOD_NXS",
    "SSC_NXS",
    "BOX_COEF",
]

OUTLIER_COLUMNS: list[str] = [
    "UID",
    "RECORD_NO",
    "SITE_NO",
    "STATION_NM",
    "SAMPLE_START_DT",
    "PARM_CD",
    "PARM_NM",
    "RESULT_VA",
    "LOWER_FENCE",
    "UPPER_FENCE",
]


def site_numbers(data: pd.DataFrame) -> list[Any]:
    """Return the distinct site numbers in order of first appearance."""

    return list(data["SITE_NO"].dropna().unique())


def map_sites(data: pd.DataFrame, finder: SiteFinder, **kwargs: Any) -> dict[Any, pd.DataFrame]:
    """Run ``finder`` once per site and key the results by site number."""

    return {site_no: finder(data, site_no, **kwargs) for site_no in site_numbers(data)}


def flatten_uids(site_results: Mapping[Any, pd.DataFrame]) -> pd.Index:
    """Combine the ``UID`` column of every per-site table into one index."""

    uids = [frame["UID"] for frame in site_results.values() if not frame.empty]
    if not uids:
        return pd.Index([], name="UID", dtype=object)
    return pd.Index(pd.concat(uids, ignore_index=True).unique(), name="UID")


def find_box_coefficients(
    data: pd.DataFrame, site_no: Any, time_diff: float = 1.0
) -> pd.DataFrame:
    """Pair cross-section and non cross-section SSC samples taken within ``time_diff`` hours.

    The box coefficient is the cross-section SSC divided by the paired
    non cross-section SSC.
    """

    site = data[data["SITE_NO"] == site_no]
    samples = sample_table(site)
    samples["SSC"] = samples["UID"].map(parameter_values(site, SSC))
    samples["SAMPLING_METHOD"] = samples["UID"].map(parameter_codes(site, SAMPLING_METHOD))
    samples = samples.dropna(subset=["SSC", "SAMPLING_METHOD"])
    if samples.empty:
        return empty_frame(BOX_COEFFICIENT_COLUMNS)

    samples = samples.assign(SAMPLE_START_DT=pd.to_datetime(samples["SAMPLE_START_DT"]))
    in_cross_section = samples["SAMPLING_METHOD"].isin(CROSS_SECTION_METHODS)
    columns = ["SITE_NO", "STATION_NM", "UID", "SAMPLE_START_DT", "SAMPLING_METHOD", "SSC"]
    pairs = samples.loc[in_cross_section, columns].merge(
        samples.loc[~in_cross_section, columns].drop(columns="STATION_NM"),
        on="SITE_NO",
        suffixes=("_XS", "_NXS"),
    )
    gap = (pairs["SAMPLE_START_DT_NXS"] - pairs["SAMPLE_START_DT_XS"]).abs()
    pairs = pairs[gap <= pd.Timedelta(hours=time_diff)]
    pairs = pairs.assign(BOX_COEF=pairs["SSC_XS"].astype(float) / pairs["SSC_NXS"].astype(float))
    return pairs.reindex(columns=BOX_COEFFICIENT_COLUMNS).reset_index(drop=True)


def find_outliers(data: pd.DataFrame, site_no: Any, multiplier: float = 1.5) -> pd.DataFrame:
    """Return sediment results outside the site's IQR fences for their parameter."""

    site = data[(data["SITE_NO"] == site_no) & data["PARM_CD"].isin(OUTLIER_PARAMETERS)]
    site = site.assign(RESULT_VA=pd.to_numeric(site["RESULT_VA"], errors="coerce"))
    site = site.dropna(subset=["RESULT_VA"])
    if site.empty:
        return empty_frame(OUTLIER_COLUMNS)

    results = site.groupby("PARM_CD", sort=False)["RESULT_VA"]
    q1 = results.transform(lambda values: values.quantile(0.25))
    q3 = results.transform(lambda values: values.quantile(0.75))
    iqr = q3 - q1
    site = site.assign(LOWER_FENCE=q1 - multiplier * iqr, UPPER_FENCE=q3 + multiplier * iqr)

    outliers = site[
        (site["RESULT_VA"] < site["LOWER_FENCE"]) | (site["RESULT_VA"] > site["UPPER_FENCE"])
    ]
    return outliers.reindex(columns=OUTLIER_COLUMNS).reset_index(drop=True)


__all__ = [
    "BOX_COEFFICIENT_COLUMNS",
    "OUTLIER_COLUMNS",
    "SiteFinder",
    "find_box_coefficients",
    "find_outliers",
    "flatten_uids",
    "map_sites",
    "site_numbers",
]
