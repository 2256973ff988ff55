"""Helpers for integer-keyed mappings shown as ordered, paged lists."""

from __future__ import annotations

from typing import Mapping, TypeVar

V = TypeVar("V")


def sorted_int_map(mapping: Mapping[int, V]) -> dict[int, V]:
    """Return a dict with the same items, ordered by key."""
    return {key: mapping[key] for key in sorted(mapping)}


def int_map_with_offset(mapping: Mapping[int, V], offset: int) -> dict[int, V]:
    """Return the items after skipping the first ``offset`` keys in key order."""
    if offset < 0:
        raise ValueError(f"offset must not be negative: {offset}")
    keys = sorted(mapping)[offset:]
    return {key: mapping[key] for key in keys}