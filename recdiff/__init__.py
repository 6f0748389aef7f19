"""
recdiff — Path-qualified diffs of nested records
================================================

    compare({"a": 1, "b": 2}, {"a": 1, "b": 3})
        → [Change at b: 2 → 3]

    reconcile([{"id": 1, "v": "x"}], [{"id": 1, "v": "y"}])
        → changed: [ChangedPair(old={"id": 1, "v": "x"},
                                new={"id": 1, "v": "y"},
                                difference=[Change at v: 'x' → 'y'])]

recdiff walks two JSON-shaped values (records, lists, scalars) and
reports every difference with the path of record keys that leads to it.
Lists of records are not compared position by position: their elements
are paired up by an identity field such as "id", so a reordered list
with one edited record yields one targeted change instead of a wholesale
replacement.
"""

from recdiff.core import (
    # Types
    Change,
    ChangedPair,
    ReconcileResult,
    # List modes
    ListMode,
    ByIdentity,
    LengthOnly,
    BY_ID,
    LENGTH_ONLY,
    # Operations
    compare,
    reconcile,
    compare_strings,
    identical,
    same_key,
    identity_candidates,
)
from recdiff.formats import (
    clone, from_json, change_to_python, changes_to_python, result_to_python,
    format_path,
)
from recdiff.validation import MISSING, ValidationError, is_non_empty, require_non_empty

__version__ = "0.1.0"
__all__ = [
    "Change", "ChangedPair", "ReconcileResult",
    "ListMode", "ByIdentity", "LengthOnly", "BY_ID", "LENGTH_ONLY",
    "compare", "reconcile", "compare_strings", "identical", "same_key", "identity_candidates",
    "clone", "from_json", "change_to_python", "changes_to_python",
    "result_to_python", "format_path",
    "MISSING", "ValidationError", "is_non_empty", "require_non_empty",
]
