from __future__ import annotations

import pandas as pd
import pytest

from agents.sedreview.app import schemas
from agents.sedreview.app.sites import (
    BOX_COEFFICIENT_COLUMNS,
    OUTLIER_COLUMNS,
    find_box_coefficients,
    find_outliers,
    flatten_uids,
    map_sites,
    site_numbers,
)


def _ssc_samples(site_no: str, values: list[float]) -> list[dict]:
    return [
        {
            "UID": f"{site_no}{index}",
            "SITE_NO": site_no,
            "SAMPLE_START_DT": f"2024-01-{index:02d} 10:00",
            "results": {schemas.SSC: value},
        }
        for index, value in enumerate(values, start=1)
    ]


def test_site_numbers_follow_first_appearance(make_samples) -> None:
    data = make_samples(
        _ssc_samples("B", [1.0]) + _ssc_samples("A", [1.0]) + _ssc_samples("B", [2.0])
    )

    assert site_numbers(data) == ["B", "A"]


def test_box_coefficients_pair_samples_within_time_window(make_samples) -> None:
    data = make_samples(
        [
            {
                "UID": "X1",
                "SAMPLE_START_DT": "2024-05-01 10:00",
                "results": {schemas.SSC: 120.0, schemas.SAMPLING_METHOD: 10},
            },
            {
                "UID": "P1",
                "SAMPLE_START_DT": "2024-05-01 10:30",
                "results": {schemas.SSC: 100.0, schemas.SAMPLING_METHOD: 30},
            },
            {
                "UID": "P2",
                "SAMPLE_START_DT": "2024-05-01 13:00",
                "results": {schemas.SSC: 60.0, schemas.SAMPLING_METHOD: 30},
            },
            {
                "UID": "Y1",
                "SITE_NO": "02",
                "SAMPLE_START_DT": "2024-05-01 10:15",
                "results": {schemas.SSC: 50.0, schemas.SAMPLING_METHOD: 30},
            },
        ]
    )

    pairs = find_box_coefficients(data, "01")
    wide = find_box_coefficients(data, "01", time_diff=4)

    assert list(pairs.columns) == BOX_COEFFICIENT_COLUMNS
    assert pairs[["UID_XS", "UID_NXS"]].values.tolist() == [["X1", "P1"]]
    assert pairs["BOX_COEF"].iloc[0] == pytest.approx(1.2)
    assert sorted(wide["UID_NXS"]) == ["P1", "P2"]
    assert find_box_coefficients(data, "02").empty


def test_outliers_use_iqr_fences_per_site(make_samples) -> None:
    data = make_samples(_ssc_samples("A", [10.0, 11.0, 12.0, 13.0, 500.0]))

    outliers = find_outliers(data, "A")

    assert list(outliers.columns) == OUTLIER_COLUMNS
    assert outliers["UID"].tolist() == ["A5"]
    assert outliers["UPPER_FENCE"].iloc[0] == pytest.approx(16.0)


def test_outliers_ignore_non_sediment_parameters(make_samples) -> None:
    data = make_samples(
        [
            {"UID": f"S{index}", "results": {schemas.DISCHARGE_INSTANT: value}}
            for index, value in enumerate([1.0, 2.0, 3.0, 4.0, 900.0])
        ]
    )

    assert find_outliers(data, "01").empty


def test_flattened_outliers_cover_every_site_regardless_of_order(make_samples) -> None:
    data = make_samples(
        _ssc_samples("A", [10.0, 11.0, 12.0, 13.0, 500.0])
        + _ssc_samples("B", [20.0, 21.0, 22.0, 23.0, 900.0])
    )

    outliers = map_sites(data, find_outliers)
    reversed_order = dict(reversed(list(outliers.items())))

    assert list(outliers) == ["A", "B"]
    assert set(flatten_uids(outliers)) == {"A5", "B5"}
    assert set(flatten_uids(reversed_order)) == {"A5", "B5"}


def test_flatten_handles_single_and_empty_site_maps(make_samples) -> None:
    data = make_samples(_ssc_samples("A", [10.0, 11.0, 12.0, 13.0, 500.0]))

    single = map_sites(data, find_outliers)

    assert list(single) == ["A"]
    assert flatten_uids(single).tolist() == ["A5"]
    assert flatten_uids({}).empty
    assert map_sites(make_samples([]), find_outliers) == {}


def test_map_sites_forwards_options(make_samples) -> None:
    data = make_samples(_ssc_samples("A", [1.0]))
    calls: list[tuple[str, float]] = []

    def finder(frame: pd.DataFrame, site_no: str, time_diff: float) -> pd.DataFrame:
        calls.append((site_no, time_diff))
        return frame

    map_sites(data, finder, time_diff=2.5)

    assert calls == [("A", 2.5)]
