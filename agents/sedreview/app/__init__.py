"""Project-level review checks for sediment sample datasets."""

from .checks import default_checks
from .pipeline import ReviewTables, check_all, review_samples

__all__ = ["ReviewTables", "check_all", "default_checks", "review_samples"]
