"""Base utilities shared by all review checks."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import pandas as pd


class CheckStatus(str, Enum):
    """Standardized status levels for review checks."""

    OK = "OK"
    WARN = "WARN"


@dataclass(slots=True)
class CheckResult:
    """Outcome of a single check.

    ``table`` is the collaborator's full output and ``flags`` the subset of it
    that marks samples in the flag summary. Most checks return the same frame
    for both.
    """

    name: str
    column: str
    table: pd.DataFrame
    flags: pd.DataFrame | None = None

    def __post_init__(self) -> None:
        if self.flags is None:
            self.flags = self.table

    @property
    def flagged_uids(self) -> pd.Index:
        """Return the unique ``UID`` values flagged by the check."""

        return pd.Index(self.flags["UID"].unique(), name="UID")

    @property
    def status(self) -> CheckStatus:
        return CheckStatus.OK if self.flags.empty else CheckStatus.WARN


class DataCheck(Protocol):
    """Common protocol implemented by all checks."""

    name: str
    column: str

    def run(self, data: pd.DataFrame) -> CheckResult:
        """Review ``data`` and return the :class:`CheckResult`."""


__all__ = ["CheckStatus", "CheckResult", "DataCheck"]
