"""List sample/result comments and results reported without a value."""

from __future__ import annotations

import pandas as pd

from ..schemas import SAMPLE_COLUMNS
from .base import CheckResult, DataCheck


class CommentsNoResultCheck(DataCheck):
    """Collect every commented or value-less result.

    The full table is returned for review; only rows without a result value
    count as flags.
    """

    name = "comments_no_result"
    column = "no_result_flags"
    _columns = SAMPLE_COLUMNS + [
        "PARM_CD",
        "PARM_NM",
        "RESULT_VA",
        "SAMPLE_CM_TX",
        "RESULT_CM_TX",
        "flag",
    ]

    def run(self, data: pd.DataFrame) -> CheckResult:
        no_result = pd.to_numeric(data["RESULT_VA"], errors="coerce").isna()
        commented = data["SAMPLE_CM_TX"].notna() | data["RESULT_CM_TX"].notna()

        flag = pd.Series(None, index=data.index, dtype=object)
        flag[no_result] = "no result value"
        comments = data.assign(flag=flag)[commented | no_result]
        comments = comments.reindex(columns=self._columns).reset_index(drop=True)

        return CheckResult(
            self.name,
            self.column,
            table=comments,
            flags=comments[comments["flag"].notna()],
        )


def build_comments_check() -> CommentsNoResultCheck:
    """Factory returning the comments/no-result check."""

    return CommentsNoResultCheck()


__all__ = ["CommentsNoResultCheck", "build_comments_check"]
