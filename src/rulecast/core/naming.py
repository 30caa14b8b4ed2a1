"""Property-name helpers shared by the engine and the parameter adapter."""

from __future__ import annotations

import re
from collections.abc import Iterable

from pydantic.alias_generators import to_camel

_SEPARATORS = re.compile(r"[_\-.\s]")


def to_lower_camel_case(name: str) -> str:
    """``user_name`` -> ``userName``; ``UserName`` -> ``userName``."""
    if not name:
        return name
    if "_" in name:
        name = to_camel(name)
    return name[0].lower() + name[1:]


def normalize_name(name: str, *, ignore_case: bool = True, ignore_separators: bool = False) -> str:
    if ignore_separators:
        name = _SEPARATORS.sub("", name)
    if ignore_case:
        name = name.casefold()
    return name


def names_match(
    left: str,
    right: str,
    *,
    ignore_case: bool = True,
    ignore_separators: bool = False,
) -> bool:
    """Compare two property names under the given relaxations."""
    if left == right:
        return True
    return normalize_name(
        left, ignore_case=ignore_case, ignore_separators=ignore_separators
    ) == normalize_name(right, ignore_case=ignore_case, ignore_separators=ignore_separators)


def find_matching_name(
    name: str,
    candidates: Iterable[str],
    *,
    ignore_case: bool = True,
    ignore_separators: bool = False,
) -> str | None:
    """Return the first candidate equal to ``name`` (exact match preferred)."""
    pool = list(candidates)
    if name in pool:
        return name
    for candidate in pool:
        if names_match(name, candidate, ignore_case=ignore_case, ignore_separators=ignore_separators):
            return candidate
    return None
