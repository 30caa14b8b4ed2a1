"""Schema rules: named (predicate, mutation) pairs and the catalog holding them.

Custom rules override built-ins by name::

    from rulecast.rules import RuleCatalog, SchemaRule

    def _apply_upper(context):
        context.property_schema.pattern = "^[A-Z]+$"

    catalog = RuleCatalog.build_default().override(
        [SchemaRule("Pattern", lambda v: isinstance(v, RegularExpressionValidator), _apply_upper)]
    )
"""

from __future__ import annotations

from rulecast.rules.catalog import RuleCatalog, override_rules
from rulecast.rules.defaults import DEFAULT_RULE_NAMES, build_default_rules
from rulecast.rules.models import RuleContext, SchemaRule

__all__ = [
    "SchemaRule",
    "RuleContext",
    "RuleCatalog",
    "build_default_rules",
    "override_rules",
    "DEFAULT_RULE_NAMES",
]
