"""Built-in lint rules."""

from __future__ import annotations

import inspect

from .base import Rule
from .code_block_style import CodeBlockStyleRule
from .config import CodeBlockStyle, UnorderedListStyle
from .header_increment import HeaderIncrementRule
from .no_empty_links import NoEmptyLinksRule
from .no_reversed_links import NoReversedLinksRule
from .no_space_in_code import NoSpaceInCodeRule
from .ul_indent import UlIndentRule
from .ul_style import ConsistentUlStyleRule

RULES: dict[str, type[Rule]] = {
    cls.descriptor.name: cls
    for cls in (
        HeaderIncrementRule,
        ConsistentUlStyleRule,
        UlIndentRule,
        NoReversedLinksRule,
        NoSpaceInCodeRule,
        NoEmptyLinksRule,
        CodeBlockStyleRule,
    )
}


def get_rule_ids() -> list[str]:
    """Names of all built-in rules."""
    return sorted(RULES)


def default_rules() -> list[Rule]:
    """One default-configured instance of every built-in rule."""
    return [cls() for cls in RULES.values()]


def explain(name: str) -> str | None:
    """Markdown documentation for a rule, or None if no such rule exists."""
    cls = RULES.get(name.lower().strip())
    return inspect.getdoc(cls) if cls else None


__all__ = [
    "CodeBlockStyle",
    "CodeBlockStyleRule",
    "ConsistentUlStyleRule",
    "HeaderIncrementRule",
    "NoEmptyLinksRule",
    "NoReversedLinksRule",
    "NoSpaceInCodeRule",
    "RULES",
    "Rule",
    "UlIndentRule",
    "UnorderedListStyle",
    "default_rules",
    "explain",
    "get_rule_ids",
]
