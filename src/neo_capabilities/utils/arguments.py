"""Normalization helpers for "one name or many names" arguments."""

from typing import Any, Iterable, List


def as_list(value: Any) -> List[Any]:
    """Normalize a single value or an iterable of values to a list.

    Strings are treated as a single value. ``None`` becomes an empty list.
    """
    if value is None:
        return []
    if isinstance(value, (str, bytes)):
        return [value]
    if isinstance(value, Iterable):
        return list(value)
    return [value]


def unique(values: Iterable[Any]) -> List[Any]:
    """Drop duplicates while keeping first-seen order."""
    return list(dict.fromkeys(values))
