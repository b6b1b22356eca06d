"""Sampler type versus sampling method check."""

from __future__ import annotations

import pandas as pd

from ..schemas import CROSS_SECTION_METHODS, SAMPLE_COLUMNS, SAMPLER_TYPE, SAMPLING_METHOD
from .base import CheckResult, DataCheck
from .utils import parameter_codes, sample_table

DEPTH_INTEGRATING_SAMPLERS = range(3001, 3100)


def is_depth_integrating(code: object) -> bool:
    """Return True for isokinetic depth-integrating sampler codes (3001-3099)."""

    if not isinstance(code, str) or not code.isdigit():
        return False
    return int(code) in DEPTH_INTEGRATING_SAMPLERS


class SamplerTypeCheck(DataCheck):
    """Cross-section methods require a depth-integrating sampler."""

    name = "sampler_type"
    column = "sampler_type_flags"
    _columns = SAMPLE_COLUMNS + ["SAMPLING_METHOD", "SAMPLER_TYPE", "flag"]

    def run(self, data: pd.DataFrame) -> CheckResult:
        samples = sample_table(data)
        samples["SAMPLING_METHOD"] = samples["UID"].map(parameter_codes(data, SAMPLING_METHOD))
        samples["SAMPLER_TYPE"] = samples["UID"].map(parameter_codes(data, SAMPLER_TYPE))

        cross_section = samples["SAMPLING_METHOD"].isin(CROSS_SECTION_METHODS)
        depth_integrating = samples["SAMPLER_TYPE"].map(is_depth_integrating).astype(bool)
        invalid = cross_section & samples["SAMPLER_TYPE"].notna() & ~depth_integrating

        flagged = samples[invalid].assign(
            flag="cross-section method with non depth-integrating sampler"
        )
        return CheckResult(
            self.name, self.column, flagged.reindex(columns=self._columns).reset_index(drop=True)
        )


def build_sampler_type_check() -> SamplerTypeCheck:
    """Factory returning a sampler type check instance."""

    return SamplerTypeCheck()


__all__ = [
    "DEPTH_INTEGRATING_SAMPLERS",
    "SamplerTypeCheck",
    "build_sampler_type_check",
    "is_depth_integrating",
]
