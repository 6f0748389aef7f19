"""
recdiff.validation — Emptiness predicates and argument guards.

The comparator and reconciler guard their arguments through these helpers.
They are deliberately small and shape-strict: an emptiness check that
assumes a list (or a string) fails loudly when handed anything else.
"""

from typing import Any


class ValidationError(ValueError):
    """A required argument was empty, or an emptiness check got the wrong shape."""


class _Missing:
    """Marker for an absent value (a field a record does not carry)."""
    __slots__ = ()

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    # Clones must keep the singleton, or identity checks break.
    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return (_Missing, ())


MISSING = _Missing()


def is_non_empty(
    value: Any,
    *,
    check_list_empty: bool = False,
    check_string_empty: bool = False,
) -> bool:
    """
    Return True if `value` counts as present.

    `None` and `MISSING` are always empty.  The optional checks tighten
    the test:

        check_list_empty    value must be a list/tuple; [] is empty
        check_string_empty  value must be a str; "" is empty

    When both are set only the list check runs.  A check applied to a
    value of the wrong shape raises ValidationError instead of
    returning False.
    """
    if value is None or value is MISSING:
        return False

    if check_list_empty:
        if not isinstance(value, (list, tuple)):
            raise ValidationError(
                f'The "check_list_empty" option was set, but the value is of '
                f'type {type(value).__name__!r}'
            )
        return len(value) > 0

    if check_string_empty:
        if not isinstance(value, str):
            raise ValidationError(
                f'The "check_string_empty" option was set, but the value is of '
                f'type {type(value).__name__!r}'
            )
        return value != ""

    return True


def require_non_empty(value: Any, name: str, **checks: bool) -> Any:
    """Raise ValidationError naming `name` unless `value` is non-empty."""
    if not is_non_empty(value, **checks):
        raise ValidationError(f'"{name}" cannot have a value of {value!r}')
    return value
