"""TSS without SSC check."""

from __future__ import annotations

import pandas as pd

from ..schemas import SAMPLE_COLUMNS, SSC, TSS
from .base import CheckResult, DataCheck
from .utils import parameter_values, sample_table, uids_reporting


class TSSCheck(DataCheck):
    """Flag samples analysed for total suspended solids but not for SSC."""

    name = "tss"
    column = "tss_flags"
    _columns = SAMPLE_COLUMNS + ["TSS", "flag"]

    def run(self, data: pd.DataFrame) -> CheckResult:
        tss_only = uids_reporting(data, TSS).difference(uids_reporting(data, SSC))

        samples = sample_table(data)
        flagged = samples[samples["UID"].isin(tss_only)]
        flagged = flagged.assign(
            TSS=flagged["UID"].map(parameter_values(data, TSS)),
            flag="TSS reported without SSC",
        )
        return CheckResult(
            self.name, self.column, flagged.reindex(columns=self._columns).reset_index(drop=True)
        )


def build_tss_check() -> TSSCheck:
    """Factory returning a TSS check instance."""

    return TSSCheck()


__all__ = ["TSSCheck", "build_tss_check"]
