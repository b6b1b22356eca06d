"""Bag sampler intake efficiency check."""

from __future__ import annotations

import math

import pandas as pd

from ..schemas import (
    BAG_SAMPLE_DURATION,
    BAG_SAMPLE_VOLUME,
    NOZZLE_DIAMETER,
    NOZZLE_VELOCITY,
    SAMPLE_COLUMNS,
    SAMPLER_TYPE,
)
from .base import CheckResult, DataCheck
from .utils import parameter_codes, parameter_values, sample_table

BAG_SAMPLERS: tuple[str, ...] = ("3055", "3056", "3057", "3058")

_IE_INPUTS = {
    "SAMPLE_VOLUME": BAG_SAMPLE_VOLUME,
    "SAMPLE_DURATION": BAG_SAMPLE_DURATION,
    "NOZZLE_VELOCITY": NOZZLE_VELOCITY,
    "NOZZLE_DIAMETER": NOZZLE_DIAMETER,
}

_CM_PER_FOOT = 30.48
_CM_PER_INCH = 2.54


def intake_efficiency(
    volume_ml: pd.Series,
    duration_s: pd.Series,
    velocity_fps: pd.Series,
    diameter_in: pd.Series,
) -> pd.Series:
    """Ratio of the collected volume to the volume a perfectly isokinetic nozzle would take in."""

    nozzle_area = math.pi * (diameter_in * _CM_PER_INCH / 2) ** 2
    expected = velocity_fps * _CM_PER_FOOT * duration_s * nozzle_area
    return volume_ml / expected


class BagIntakeEfficiencyCheck(DataCheck):
    """Flag bag-sampler samples with missing or out-of-range intake efficiency."""

    name = "bag_ie"
    column = "bag_ie_flags"
    _columns = SAMPLE_COLUMNS + ["SAMPLER_TYPE", *_IE_INPUTS, "INTAKE_EFFICIENCY", "flag"]

    def __init__(self, minimum: float = 0.75, maximum: float = 1.25) -> None:
        self.minimum = minimum
        self.maximum = maximum

    def run(self, data: pd.DataFrame) -> CheckResult:
        samplers = parameter_codes(data, SAMPLER_TYPE)
        bags = samplers[samplers.isin(BAG_SAMPLERS)]
        samples = sample_table(data)
        samples = samples[samples["UID"].isin(bags.index)].copy()
        if samples.empty:
            return CheckResult(self.name, self.column, samples.reindex(columns=self._columns))

        samples["SAMPLER_TYPE"] = samples["UID"].map(bags)
        for column, parm_cd in _IE_INPUTS.items():
            samples[column] = samples["UID"].map(parameter_values(data, parm_cd)).astype(float)
        samples["INTAKE_EFFICIENCY"] = intake_efficiency(
            samples["SAMPLE_VOLUME"],
            samples["SAMPLE_DURATION"],
            samples["NOZZLE_VELOCITY"],
            samples["NOZZLE_DIAMETER"],
        )

        missing = samples[list(_IE_INPUTS)].isna().any(axis=1)
        efficiency = samples["INTAKE_EFFICIENCY"]
        out_of_range = ~missing & ((efficiency < self.minimum) | (efficiency > self.maximum))
        samples["flag"] = None
        samples.loc[missing, "flag"] = "missing intake efficiency inputs"
        samples.loc[out_of_range, "flag"] = (
            f"intake efficiency outside {self.minimum}-{self.maximum}"
        )

        flagged = samples[samples["flag"].notna()]
        return CheckResult(
            self.name, self.column, flagged.reindex(columns=self._columns).reset_index(drop=True)
        )


def build_bag_ie_check() -> BagIntakeEfficiencyCheck:
    """Factory returning a bag intake efficiency check instance."""

    return BagIntakeEfficiencyCheck()


__all__ = ["BAG_SAMPLERS", "BagIntakeEfficiencyCheck", "build_bag_ie_check", "intake_efficiency"]
