"""Missing discharge check for sediment samples."""

from __future__ import annotations

import pandas as pd

from ..schemas import DISCHARGE_PARAMETERS, SAMPLE_COLUMNS, SEDIMENT_PARAMETERS
from .base import CheckResult, DataCheck
from .utils import parameter_values, sample_table, uids_reporting


def sample_discharge(data: pd.DataFrame) -> pd.Series:
    """Return discharge per ``UID``, preferring instantaneous over daily mean values."""

    preferred, *fallbacks = DISCHARGE_PARAMETERS
    discharge = parameter_values(data, preferred)
    for parm_cd in fallbacks:
        discharge = discharge.combine_first(parameter_values(data, parm_cd))
    return discharge


class MissingDischargeCheck(DataCheck):
    """Flag sediment samples without discharge.

    With ``include_uv`` the table is expected to carry ``UV_FLOW`` and samples
    whose reported discharge strays from the unit-value flow by more than
    ``tolerance`` (relative) are flagged as well.
    """

    name = "missing_q"
    column = "q_flags"

    def __init__(self, include_uv: bool = False, tolerance: float = 0.10) -> None:
        self.include_uv = include_uv
        self.tolerance = tolerance

    @property
    def _columns(self) -> list[str]:
        extra = ["UV_FLOW"] if self.include_uv else []
        return SAMPLE_COLUMNS + ["Q", *extra, "flag"]

    def run(self, data: pd.DataFrame) -> CheckResult:
        samples = sample_table(data)
        samples = samples[samples["UID"].isin(uids_reporting(data, SEDIMENT_PARAMETERS))].copy()
        if self.include_uv:
            uv_flow = pd.to_numeric(data["UV_FLOW"], errors="coerce")
            uv_flow = uv_flow.groupby(data["UID"], sort=False).first()
        if samples.empty:
            return CheckResult(self.name, self.column, samples.reindex(columns=self._columns))

        samples["Q"] = samples["UID"].map(sample_discharge(data)).astype(float)
        samples["flag"] = None
        samples.loc[samples["Q"].isna(), "flag"] = "missing discharge"

        if self.include_uv:
            samples["UV_FLOW"] = samples["UID"].map(uv_flow).astype(float)
            difference = (samples["Q"] - samples["UV_FLOW"]).abs() / samples["UV_FLOW"].abs()
            differs = (
                samples["Q"].notna() & samples["UV_FLOW"].notna() & (difference > self.tolerance)
            )
            samples.loc[differs, "flag"] = (
                f"discharge differs from UV flow by more than {self.tolerance:.0%}"
            )

        flagged = samples[samples["flag"].notna()]
        return CheckResult(
            self.name, self.column, flagged.reindex(columns=self._columns).reset_index(drop=True)
        )


def build_missing_q_check(include_uv: bool = False) -> MissingDischargeCheck:
    """Factory returning the missing discharge check."""

    return MissingDischargeCheck(include_uv=include_uv)


__all__ = ["MissingDischargeCheck", "build_missing_q_check", "sample_discharge"]
