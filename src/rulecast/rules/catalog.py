"""Ordered, name-unique rule catalog.

Usage::

    catalog = RuleCatalog.build_default().override([my_pattern_rule])
    for rule in catalog:
        ...
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import overload

from rulecast.core.exceptions import RuleCatalogError
from rulecast.rules.defaults import build_default_rules
from rulecast.rules.models import SchemaRule


class RuleCatalog(Sequence[SchemaRule]):
    """Immutable ordered sequence of rules with unique names.

    Order is application order: every rule whose predicate matches a
    validator is applied, first to last.
    """

    def __init__(self, rules: Iterable[SchemaRule] = ()) -> None:
        items = tuple(rules)
        seen: set[str] = set()
        for rule in items:
            if rule.name in seen:
                raise RuleCatalogError(f"Duplicate rule name {rule.name!r} in catalog")
            seen.add(rule.name)
        self._rules = items

    @classmethod
    def build_default(cls) -> RuleCatalog:
        return cls(build_default_rules())

    def override(self, extra: Iterable[SchemaRule] | None) -> RuleCatalog:
        """Return a new catalog with ``extra`` merged in by name.

        A rule in ``extra`` replaces the base rule of the same name at its
        position; other ``extra`` rules are appended in their given order.
        When ``extra`` repeats a name, its last occurrence wins.
        """
        return override_rules(self, extra)

    def names(self) -> list[str]:
        return [rule.name for rule in self._rules]

    def get(self, name: str) -> SchemaRule | None:
        for rule in self._rules:
            if rule.name == name:
                return rule
        return None

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return any(rule.name == item for rule in self._rules)
        return item in self._rules

    @overload
    def __getitem__(self, index: int) -> SchemaRule: ...

    @overload
    def __getitem__(self, index: slice) -> RuleCatalog: ...

    def __getitem__(self, index: int | slice) -> SchemaRule | RuleCatalog:
        if isinstance(index, slice):
            return RuleCatalog(self._rules[index])
        return self._rules[index]

    def __iter__(self) -> Iterator[SchemaRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RuleCatalog):
            return NotImplemented
        return self._rules == other._rules

    def __hash__(self) -> int:
        return hash(self._rules)

    def __repr__(self) -> str:
        return f"RuleCatalog({self.names()})"


def override_rules(base: Iterable[SchemaRule], extra: Iterable[SchemaRule] | None) -> RuleCatalog:
    """Merge ``extra`` into ``base`` by rule name (same name replaces)."""
    overrides: dict[str, SchemaRule] = {}
    for rule in extra or ():
        overrides[rule.name] = rule

    merged: list[SchemaRule] = []
    for rule in base:
        merged.append(overrides.pop(rule.name, rule))
    merged.extend(overrides.values())
    return RuleCatalog(merged)
