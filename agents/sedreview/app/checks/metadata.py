"""Sample coding and metadata completeness check."""

from __future__ import annotations

import pandas as pd

from ..schemas import (
    SAMPLE_COLUMNS,
    SAMPLE_PURPOSE,
    SAMPLER_TYPE,
    SAMPLING_METHOD,
    SEDIMENT_PARAMETERS,
)
from .base import CheckResult, DataCheck
from .utils import sample_table, uids_reporting

_REQUIRED_PARAMETERS = {
    "sampler type": SAMPLER_TYPE,
    "sampling method": SAMPLING_METHOD,
    "sample purpose": SAMPLE_PURPOSE,
}
_REQUIRED_CODES = {
    "hydrologic condition": "HYD_COND_CD",
    "hydrologic event": "HYD_EVENT_CD",
}


class MetadataCheck(DataCheck):
    """Ensure sediment samples carry the coding needed to interpret them."""

    name = "metadata"
    column = "metadata_flags"
    _columns = SAMPLE_COLUMNS + ["HYD_COND_CD", "HYD_EVENT_CD", "flag"]

    def run(self, data: pd.DataFrame) -> CheckResult:
        samples = sample_table(data)
        samples = samples[samples["UID"].isin(uids_reporting(data, SEDIMENT_PARAMETERS))]

        missing: dict[str, pd.Series] = {}
        for label, parm_cd in _REQUIRED_PARAMETERS.items():
            missing[label] = ~samples["UID"].isin(uids_reporting(data, parm_cd))
        for label, column in _REQUIRED_CODES.items():
            missing[label] = samples[column].isna()
        problems = pd.DataFrame(missing, index=samples.index, columns=list(missing))

        labels = list(problems.columns)
        flag = [
            ", ".join(f"missing {label}" for label, hit in zip(labels, row) if hit) or None
            for row in problems.itertuples(index=False, name=None)
        ]
        samples = samples.assign(flag=pd.Series(flag, index=samples.index, dtype=object))

        flagged = samples[samples["flag"].notna()]
        return CheckResult(
            self.name, self.column, flagged.reindex(columns=self._columns).reset_index(drop=True)
        )


def build_metadata_check() -> MetadataCheck:
    """Factory returning a metadata check instance."""

    return MetadataCheck()


__all__ = ["MetadataCheck", "build_metadata_check"]
