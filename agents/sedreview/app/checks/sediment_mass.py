"""Low sediment mass check."""

from __future__ import annotations

import pandas as pd

from ..schemas import SAMPLE_COLUMNS, SEDIMENT_MASS
from .base import CheckResult, DataCheck
from .utils import parameter_values, sample_table


class SedimentMassCheck(DataCheck):
    """Flag samples whose analysed sediment mass is below ``minimum`` milligrams."""

    name = "sediment_mass"
    column = "sediment_mass_flags"
    _columns = SAMPLE_COLUMNS + ["SEDIMENT_MASS", "flag"]

    def __init__(self, minimum: float = 2.0) -> None:
        self.minimum = minimum

    def run(self, data: pd.DataFrame) -> CheckResult:
        mass = parameter_values(data, SEDIMENT_MASS)
        low = mass[mass < self.minimum]

        samples = sample_table(data)
        flagged = samples[samples["UID"].isin(low.index)]
        flagged = flagged.assign(
            SEDIMENT_MASS=flagged["UID"].map(low),
            flag=f"sediment mass below {self.minimum:g} mg",
        )
        return CheckResult(
            self.name, self.column, flagged.reindex(columns=self._columns).reset_index(drop=True)
        )


def build_sediment_mass_check() -> SedimentMassCheck:
    """Factory returning a sediment mass check instance."""

    return SedimentMassCheck()


__all__ = ["SedimentMassCheck", "build_sediment_mass_check"]
