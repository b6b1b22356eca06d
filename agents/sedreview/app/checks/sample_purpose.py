"""Sample purpose consistency check."""

from __future__ import annotations

import pandas as pd

from ..schemas import SAMPLE_COLUMNS, SAMPLE_PURPOSE
from .base import CheckResult, DataCheck
from .utils import parameter_codes, sample_table


class SamplePurposeCheck(DataCheck):
    """Flag samples whose purpose differs from the most common purpose at the site."""

    name = "sample_purpose"
    column = "sample_purpose_flags"
    _columns = SAMPLE_COLUMNS + ["SAMPLE_PURPOSE", "SITE_PURPOSE", "flag"]

    def run(self, data: pd.DataFrame) -> CheckResult:
        samples = sample_table(data)
        samples["SAMPLE_PURPOSE"] = samples["UID"].map(parameter_codes(data, SAMPLE_PURPOSE))
        known = samples.dropna(subset=["SAMPLE_PURPOSE"])
        if known.empty:
            return CheckResult(self.name, self.column, known.reindex(columns=self._columns))

        # Ties resolve to the smallest code.
        site_purpose = known.groupby("SITE_NO", sort=False)["SAMPLE_PURPOSE"].agg(
            lambda purposes: purposes.mode().iloc[0]
        )
        known = known.assign(SITE_PURPOSE=known["SITE_NO"].map(site_purpose))
        flagged = known[known["SAMPLE_PURPOSE"] != known["SITE_PURPOSE"]]
        flagged = flagged.assign(flag="sample purpose differs from site")

        return CheckResult(
            self.name, self.column, flagged.reindex(columns=self._columns).reset_index(drop=True)
        )


def build_sample_purpose_check() -> SamplePurposeCheck:
    """Factory returning a sample purpose check instance."""

    return SamplePurposeCheck()


__all__ = ["SamplePurposeCheck", "build_sample_purpose_check"]
