"""Collection of sample review checks."""

from __future__ import annotations

from .bag_ie import BagIntakeEfficiencyCheck, build_bag_ie_check
from .base import CheckResult, CheckStatus, DataCheck
from .comments import CommentsNoResultCheck, build_comments_check
from .metadata import MetadataCheck, build_metadata_check
from .missing_q import MissingDischargeCheck, build_missing_q_check
from .qaqc_db import QAQCDatabaseCheck, build_qaqc_db_check
from .sample_purpose import SamplePurposeCheck, build_sample_purpose_check
from .sampler_type import SamplerTypeCheck, build_sampler_type_check
from .sediment_mass import SedimentMassCheck, build_sediment_mass_check
from .tss import TSSCheck, build_tss_check
from .verticals import VerticalsCheck, build_verticals_check

CheckRegistry = dict[str, DataCheck]


def default_checks(qa_db: str = "02", include_uv: bool = False) -> CheckRegistry:
    """Return the default roster of review checks keyed by check name."""

    checks: list[DataCheck] = [
        build_bag_ie_check(),
        build_comments_check(),
        build_missing_q_check(include_uv=include_uv),
        build_metadata_check(),
        build_sample_purpose_check(),
        build_sampler_type_check(),
        build_sediment_mass_check(),
        build_tss_check(),
        build_verticals_check(),
        build_qaqc_db_check(qa_db=qa_db),
    ]
    return {check.name: check for check in checks}


__all__ = [
    "CheckRegistry",
    "CheckResult",
    "CheckStatus",
    "DataCheck",
    "BagIntakeEfficiencyCheck",
    "CommentsNoResultCheck",
    "MetadataCheck",
    "MissingDischargeCheck",
    "QAQCDatabaseCheck",
    "SamplePurposeCheck",
    "SamplerTypeCheck",
    "SedimentMassCheck",
    "TSSCheck",
    "VerticalsCheck",
    "default_checks",
]
