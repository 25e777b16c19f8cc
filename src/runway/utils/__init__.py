"""Utility functions for runway."""

from runway.utils.snapshot import to_plain

__all__ = [
    "to_plain",
]
