"""
recdiff.core — Deep comparison and keyed list reconciliation
=============================================================

§1  WHAT IS COMPARED
────────────────────

A value is one of:

    record   any Mapping (dict, OrderedDict, ...)
    list     list or tuple
    scalar   everything else: None, bool, numbers, str, bytes, dates, ...

Inputs are plain, acyclic, JSON-shaped trees.  A record field that the
right operand does not carry reads as MISSING, which is distinct from
None.


§2  THE DEEP COMPARATOR
───────────────────────

compare(a, b, mode) walks `a` and reports every difference as a Change
{path, old, new}.  Dispatch is on the shape of both operands:

    record vs record   recurse into each key of `a`, in `a`'s order,
                       prefixing nested paths with the key.  Keys that
                       exist only in `b` are never visited.
    list vs list       LengthOnly    → one Change iff the lengths differ
                       ByIdentity    → reconcile(a, b), then flatten:
                                         changed pairs → their differences
                                         added elements → Change((), None, el)
                                         removed elements → nothing, unless
                                           report_removed is set
    anything else      one Change iff a and b are not strictly identical

Matched list elements are diffed in LengthOnly mode, so reconciliation
never goes deeper than one level of list-of-records.  The mode is one
value threaded through the recursion, never recomputed per level.

Output order is depth-first in `a`'s key order, so it is deterministic
for a given old value.


§3  STRICT IDENTITY
───────────────────

Scalars are identical when:
    • they are the same object
    • both are numbers (not bool) and compare equal    1 ≡ 1.0
                                                        (two distinct NaN
                                                        objects never are)
    • both are str and compare equal
    • otherwise, same type and equal

Records and lists are only identical to themselves (same object); their
structural equality is the job of the first two branches above.  A bool
is never identical to a number: True ≢ 1.


§4  THE ARRAY RECONCILER
────────────────────────

reconcile(old, new, identity) pairs list elements by an identity field:

    1. Clone both lists, so nothing the caller holds is touched.
    2. For each old element, in order, take the FIRST unconsumed new
       element with the same key (see same_key).  Consume it.
    3. Matched pair → compare(old, new, LENGTH_ONLY); a non-empty result
       is recorded as changed, an empty one is dropped.
    4. Unmatched old element → removed.
    5. Leftover new elements → added, in their original order.

Key lookup tries each candidate field in order (for a plain string
identity "ID" the candidates are "ID", "id").  Elements with none of the
candidates share the MISSING key and therefore match each other.

COMPLEXITY: O(len(old) × len(new)).  Each old element scans the
shrinking pool of unmatched new elements.  An index by key would change
which duplicate wins, so the scan is kept; pre-partition large lists
before calling.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Iterable, Optional, Union

import icu

from .formats import clone, format_path
from .logging import get_logger
from .validation import MISSING, ValidationError, require_non_empty

logger = get_logger("core")


# ═══════════════════════════════════════════════════════════════════
#  CHANGE RECORDS
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class Change:
    """
    One detected difference.

    path is the chain of record keys from the compared root down to the
    difference.  An empty path means the compared values themselves
    differ (or, inside a list, a whole element was added or removed).
    """
    path: tuple[Union[str, int], ...]
    old: Any
    new: Any

    def prefixed(self, key: Union[str, int]) -> "Change":
        """Same change, one level further down: `key` is prepended to the path."""
        return Change((key,) + self.path, self.old, self.new)

    def __repr__(self) -> str:
        return f"Change at {format_path(self.path)}: {self.old!r} → {self.new!r}"


@dataclass
class ChangedPair:
    """A matched pair of list elements whose contents differ."""
    old: Any
    new: Any
    difference: list[Change]


@dataclass
class ReconcileResult:
    """Outcome of reconciling two lists of records."""
    removed: list = field(default_factory=list)
    added: list = field(default_factory=list)
    changed: list[ChangedPair] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.removed or self.added or self.changed)

    def __repr__(self) -> str:
        return (
            f"ReconcileResult(removed={len(self.removed)}, "
            f"added={len(self.added)}, changed={len(self.changed)})"
        )


# ═══════════════════════════════════════════════════════════════════
#  LIST MODES
# ═══════════════════════════════════════════════════════════════════

class ListMode:
    """How list-vs-list comparisons are carried out.  Not instantiated directly."""
    __slots__ = ()


@dataclass(frozen=True, slots=True)
class ByIdentity(ListMode):
    """
    Reconcile lists of records by identity.

    fields is the ordered list of candidate key fields; the first one an
    element carries is its key.  A plain string expands to the string and
    its lowercase form.

    Examples:
        ByIdentity()                        # ("id",)
        ByIdentity("ID")                    # ("ID", "id")
        ByIdentity(("itemId", "id"))
        ByIdentity(report_removed=True)     # also report removed elements
    """
    fields: tuple[str, ...] = ("id",)
    report_removed: bool = False

    def __post_init__(self):
        object.__setattr__(self, "fields", identity_candidates(self.fields))


@dataclass(frozen=True, slots=True)
class LengthOnly(ListMode):
    """Compare list lengths only; elements are never inspected."""


def identity_candidates(identity: Union[str, Iterable[str]]) -> tuple[str, ...]:
    """
    Normalise an identity specification to an ordered tuple of field names.

    "Id"            → ("Id", "id")
    ("a", "b")      → ("a", "b")

    Raises ValidationError for an empty name or an empty list of names.
    """
    if isinstance(identity, str):
        require_non_empty(identity, "identity", check_string_empty=True)
        candidates: tuple = (identity, identity.lower())
    else:
        candidates = tuple(identity)
        require_non_empty(candidates, "identity", check_list_empty=True)
        for name in candidates:
            require_non_empty(name, "identity field", check_string_empty=True)
    return tuple(dict.fromkeys(candidates))


BY_ID = ByIdentity()
LENGTH_ONLY = LengthOnly()


def _resolve_mode(mode: Union[ListMode, bool, None]) -> ListMode:
    # bool is the older calling convention: True meant "lengths only"
    if mode is None:
        return BY_ID
    if isinstance(mode, bool):
        return LENGTH_ONLY if mode else BY_ID
    if isinstance(mode, ListMode):
        return mode
    raise TypeError(f"Unsupported list mode: {mode!r}")


# ═══════════════════════════════════════════════════════════════════
#  SHAPES AND IDENTITY
# ═══════════════════════════════════════════════════════════════════

def _is_record(value: Any) -> bool:
    return isinstance(value, Mapping)


def _is_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def identical(a: Any, b: Any) -> bool:
    """
    Strict identity between two values (see §3 of the module docstring).

    Never looks inside records or lists.
    """
    if a is b:
        return True

    if _is_record(a) or _is_record(b) or _is_list(a) or _is_list(b):
        return False

    # bool and MISSING are singletons; `a is b` already covered equality
    if isinstance(a, bool) or isinstance(b, bool):
        return False
    if a is MISSING or b is MISSING:
        return False

    if _is_number(a) and _is_number(b):
        return a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b

    return type(a) is type(b) and a == b


def same_key(a: Any, b: Any) -> bool:
    """
    Whether two identity values name the same element.

    Scalars use strict identity.  Record and list keys match by
    structure: same fields (or length) with the same strict rules all
    the way down, so {"k": 1} matches a copy of itself but not {"k": True}.
    """
    if _is_record(a) and _is_record(b):
        return a.keys() == b.keys() and all(same_key(a[k], b[k]) for k in a)
    if _is_list(a) and _is_list(b):
        return len(a) == len(b) and all(same_key(x, y) for x, y in zip(a, b))
    return identical(a, b)


# ═══════════════════════════════════════════════════════════════════
#  DEEP COMPARATOR
# ═══════════════════════════════════════════════════════════════════

def compare(a: Any, b: Any, mode: Union[ListMode, bool, None] = BY_ID) -> list[Change]:
    """
    Deep comparison of two values.

    Returns the list of Change records, empty when nothing differs.

    `mode` decides how two lists are compared: a ByIdentity (default
    BY_ID, keyed on "id") reconciles their records, LENGTH_ONLY only
    compares their sizes.  For compatibility `True` means LENGTH_ONLY and
    `False` means BY_ID.

    Only the keys of `a` are visited when comparing records:

        compare({"a": 1}, {})   → [Change(("a",), 1, MISSING)]
        compare({}, {"a": 1})   → []
    """
    return _compare(a, b, _resolve_mode(mode))


def _compare(a: Any, b: Any, mode: ListMode) -> list[Change]:
    if _is_record(a) and _is_record(b):
        changes: list[Change] = []
        for key, value in a.items():
            for change in _compare(value, b.get(key, MISSING), mode):
                changes.append(change.prefixed(key))
        return changes

    if _is_list(a) and _is_list(b):
        if isinstance(mode, LengthOnly):
            return _compare(len(a), len(b), mode)
        return _list_changes(a, b, mode)

    if identical(a, b):
        return []
    return [Change((), a, b)]


def _list_changes(a: list, b: list, mode: ByIdentity) -> list[Change]:
    """Flatten a reconciliation into Change records."""
    result = _reconcile(a, b, mode.fields)

    changes = [change for pair in result.changed for change in pair.difference]
    changes.extend(Change((), None, element) for element in result.added)
    if mode.report_removed:
        changes.extend(Change((), element, None) for element in result.removed)
    return changes


# ═══════════════════════════════════════════════════════════════════
#  ARRAY RECONCILER
# ═══════════════════════════════════════════════════════════════════

def reconcile(
    old_list: Optional[list],
    new_list: Optional[list],
    identity: Union[str, Iterable[str]] = "id",
) -> ReconcileResult:
    """
    Match the records of two lists by identity.

    Returns a ReconcileResult:
        removed   old elements with no partner in the new list
        added     new elements with no partner, in new-list order
        changed   ChangedPair(old, new, difference) for partners that differ

    Partners with no difference appear nowhere.  Duplicate keys are
    matched in old-list order, first free new element wins; an old
    element whose partner was already taken is reported as removed.

    `None` is accepted for either list and treated as empty.  Inputs are
    cloned first; the returned elements are the clones.

    Cost is quadratic in the list lengths (see §4 of the module
    docstring).
    """
    fields = identity_candidates(identity)
    return _reconcile(
        _as_list(old_list, "old_list"),
        _as_list(new_list, "new_list"),
        fields,
    )


def _as_list(value: Any, name: str) -> list:
    if value is None:
        return []
    if not _is_list(value):
        raise ValidationError(
            f'"{name}" must be a list, got {type(value).__name__!r}'
        )
    return value


def _identity_key(element: Any, fields: tuple[str, ...]) -> Any:
    if _is_record(element):
        for name in fields:
            if name in element:
                return element[name]
    return MISSING


def _reconcile(old: list, new: list, fields: tuple[str, ...]) -> ReconcileResult:
    old_items = list(clone(old))
    pool = list(clone(new))
    pool_keys = [_identity_key(element, fields) for element in pool]

    keyless = sum(
        1 for element, key in zip(pool, pool_keys)
        if key is MISSING and _is_record(element)
    )

    result = ReconcileResult()
    for item in old_items:
        key = _identity_key(item, fields)
        if key is MISSING and _is_record(item):
            keyless += 1

        index = next(
            (i for i, candidate in enumerate(pool_keys) if same_key(candidate, key)),
            None,
        )
        if index is None:
            result.removed.append(item)
            continue

        match = pool.pop(index)
        pool_keys.pop(index)

        difference = _compare(item, match, LENGTH_ONLY)
        if difference:
            result.changed.append(ChangedPair(item, match, difference))

    result.added = pool

    if keyless:
        logger.warning(
            "reconcile.missing_identity",
            fields=list(fields),
            records=keyless,
        )
    return result


# ═══════════════════════════════════════════════════════════════════
#  STRING ORDERING
# ═══════════════════════════════════════════════════════════════════

@lru_cache(maxsize=None)
def _collator(locale_name: str) -> "icu.Collator":
    if locale_name:
        return icu.Collator.createInstance(icu.Locale(locale_name))
    return icu.Collator.createInstance(icu.Locale.getRoot())


def compare_strings(string1: str, string2: str, locale_name: str = "") -> int:
    """
    Locale-aware ordering of two non-empty strings.

    Returns -1, 0 or 1 using ICU collation for `locale_name` ("" is the
    root collation: "a" < "B", "e" < "é" < "f").  The process locale is
    never consulted.  Raises ValidationError when either argument is
    None, empty, or not a string.

        compare_strings("ä", "z")          → -1
        compare_strings("ä", "z", "sv")    →  1   (Swedish sorts ä after z)
    """
    require_non_empty(string1, "string1", check_string_empty=True)
    require_non_empty(string2, "string2", check_string_empty=True)

    result = _collator(locale_name).compare(string1, string2)
    return (result > 0) - (result < 0)
