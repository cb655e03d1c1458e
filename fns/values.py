"""
fns - Runtime values

Numbers are Python floats, strings are str, booleans are bool and `none`
is None. Objects are ObjectValue instances: read-only, insertion-ordered
mappings whose equality is structural and kind-aware.
"""

import collections.abc
import math
from typing import Any, Dict, Iterator, Mapping


class ObjectValue(collections.abc.Mapping):
    """An fns object. No operator mutates its entries."""

    def __init__(self, entries: Mapping[str, Any] = None):
        self._entries: Dict[str, Any] = dict(entries or {})

    def __getitem__(self, key: str) -> Any:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ObjectValue):
            return NotImplemented
        return values_equal(self, other)

    __hash__ = None

    def __repr__(self):
        return f"ObjectValue({self._entries!r})"


def is_number(value: Any) -> bool:
    # bool is an int subclass but never an fns Number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def type_name(value: Any) -> str:
    if value is None:
        return "none"
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, ObjectValue):
        return "object"
    return type(value).__name__


def is_truthy(value: Any) -> bool:
    """`none`, `false`, `0` and `""` are falsy; everything else, `{}` included, is truthy."""
    if value is None or value is False:
        return False
    if is_number(value):
        return value != 0
    if isinstance(value, str):
        return value != ""
    return True


def values_equal(left: Any, right: Any) -> bool:
    """Structural equality. Values of different kinds are never equal."""
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if is_number(left) and is_number(right):
        # NaN (e.g. inf - inf) equals itself so `==` stays reflexive
        return left == right or (math.isnan(left) and math.isnan(right))
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    if isinstance(left, ObjectValue) and isinstance(right, ObjectValue):
        if len(left) != len(right):
            return False
        return all(key in right and values_equal(left[key], right[key]) for key in left)
    return False


def to_value(obj: Any) -> Any:
    """Convert a host Python value into an fns value."""
    if obj is None or isinstance(obj, (bool, str, ObjectValue)):
        return obj
    if is_number(obj):
        number = float(obj)
        if math.isnan(number):
            raise ValueError("NaN has no fns representation")
        return number
    if isinstance(obj, collections.abc.Mapping):
        entries = {}
        for key, value in obj.items():
            if not isinstance(key, str):
                raise TypeError(f"Object keys must be str, not {type(key).__name__}")
            entries[key] = to_value(value)
        return ObjectValue(entries)
    raise TypeError(f"Cannot convert {type(obj).__name__} to an fns value")
