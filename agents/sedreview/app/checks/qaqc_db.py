"""Sediment results stored in the QA/QC database."""

from __future__ import annotations

import pandas as pd

from ..schemas import SAMPLE_COLUMNS, SEDIMENT_PARAMETERS
from .base import CheckResult, DataCheck


class QAQCDatabaseCheck(DataCheck):
    """Flag SSC, bedload and bedload mass results held in the QA database ``qa_db``."""

    name = "qaqc_db"
    column = "qaqc_flags"
    _columns = SAMPLE_COLUMNS + ["DB_NO", "PARM_CD", "PARM_NM", "RESULT_VA", "flag"]

    def __init__(self, qa_db: str = "02") -> None:
        self.qa_db = qa_db

    def run(self, data: pd.DataFrame) -> CheckResult:
        in_qa_db = data["DB_NO"].astype(str) == self.qa_db
        flagged = data[in_qa_db & data["PARM_CD"].isin(SEDIMENT_PARAMETERS)]
        flagged = flagged.assign(flag=f"sediment result in QA database {self.qa_db}")
        return CheckResult(
            self.name, self.column, flagged.reindex(columns=self._columns).reset_index(drop=True)
        )


def build_qaqc_db_check(qa_db: str = "02") -> QAQCDatabaseCheck:
    """Factory returning the QA/QC database check."""

    return QAQCDatabaseCheck(qa_db=qa_db)


__all__ = ["QAQCDatabaseCheck", "build_qaqc_db_check"]
