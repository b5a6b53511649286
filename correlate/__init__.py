"""
Correlate package: aggregate contributors per category and reconcile their identities.
"""

from .aggregator import aggregate
from .policy import should_skip, DEFAULT_SKIPPED_USERS
from .reconciler import reconcile, apply_directory_mapping

__all__ = ["aggregate", "should_skip", "DEFAULT_SKIPPED_USERS", "reconcile", "apply_directory_mapping"]
