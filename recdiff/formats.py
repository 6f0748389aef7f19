"""
recdiff.formats — Moving values in and out of the diff engine.

    • clone: structural deep copy of an input tree
    • JSON text → plain Python values (snapshots to compare)
    • Change / ReconcileResult → plain dicts (for audit consumers)
    • Path rendering
"""

import copy
import json
from typing import Any, Iterable

from .validation import MISSING


# ═══════════════════════════════════════════════════════════════════
#  CLONING
# ═══════════════════════════════════════════════════════════════════

def clone(value: Any) -> Any:
    """
    Structural deep copy of `value`.

    Unlike a JSON round trip this keeps values that JSON cannot carry
    losslessly: NaN and infinities, datetimes, tuples, non-string keys,
    and the MISSING marker.
    """
    return copy.deepcopy(value)


# ═══════════════════════════════════════════════════════════════════
#  JSON SNAPSHOTS
# ═══════════════════════════════════════════════════════════════════

def from_json(text: str) -> Any:
    """Parse a JSON snapshot into plain Python values."""
    return json.loads(text)


# ═══════════════════════════════════════════════════════════════════
#  PLAIN VIEWS OF DIFF OUTPUT
# ═══════════════════════════════════════════════════════════════════

def change_to_python(change) -> dict:
    """
    Plain-dict view of a Change.

    A side that is MISSING is left out of the dict, so
    {"path": ["a"], "old": 1} reads as "field a went away".
    """
    out: dict = {"path": list(change.path)}
    if change.old is not MISSING:
        out["old"] = change.old
    if change.new is not MISSING:
        out["new"] = change.new
    return out


def changes_to_python(changes: Iterable) -> list[dict]:
    return [change_to_python(c) for c in changes]


def result_to_python(result) -> dict:
    """Plain-dict view of a ReconcileResult."""
    return {
        "removed": list(result.removed),
        "added": list(result.added),
        "changed": [
            {
                "old": pair.old,
                "new": pair.new,
                "difference": changes_to_python(pair.difference),
            }
            for pair in result.changed
        ],
    }


def format_path(path: tuple) -> str:
    """Render a change path as "a.b.c", or "(root)" when empty."""
    return ".".join(str(p) for p in path) or "(root)"
