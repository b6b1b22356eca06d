"""Number of verticals check for equal-width and equal-discharge samples."""

from __future__ import annotations

import pandas as pd

from ..schemas import METHOD_EDI, METHOD_EWI, SAMPLE_COLUMNS, SAMPLING_METHOD, VERTICALS
from .base import CheckResult, DataCheck
from .utils import parameter_codes, parameter_values, sample_table


class VerticalsCheck(DataCheck):
    """EWI/EDI samples must report at least ``minimum`` verticals."""

    name = "verticals"
    column = "verticals_flags"
    _columns = SAMPLE_COLUMNS + ["SAMPLING_METHOD", "VERTICALS", "flag"]

    def __init__(self, minimum: int = 4) -> None:
        self.minimum = minimum

    def run(self, data: pd.DataFrame) -> CheckResult:
        samples = sample_table(data)
        samples["SAMPLING_METHOD"] = samples["UID"].map(parameter_codes(data, SAMPLING_METHOD))
        samples = samples[samples["SAMPLING_METHOD"].isin((METHOD_EWI, METHOD_EDI))].copy()
        if samples.empty:
            return CheckResult(self.name, self.column, samples.reindex(columns=self._columns))

        samples["VERTICALS"] = samples["UID"].map(parameter_values(data, VERTICALS)).astype(float)
        samples["flag"] = None
        samples.loc[samples["VERTICALS"].isna(), "flag"] = "missing number of verticals"
        samples.loc[samples["VERTICALS"] < self.minimum, "flag"] = (
            f"fewer than {self.minimum} verticals"
        )

        flagged = samples[samples["flag"].notna()]
        return CheckResult(
            self.name, self.column, flagged.reindex(columns=self._columns).reset_index(drop=True)
        )


def build_verticals_check() -> VerticalsCheck:
    """Factory returning a verticals check instance."""

    return VerticalsCheck()


__all__ = ["VerticalsCheck", "build_verticals_check"]
