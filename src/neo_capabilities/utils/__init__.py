"""Utilities module for neo-capabilities."""

from .arguments import as_list, unique

__all__ = [
    "as_list",
    "unique",
]
