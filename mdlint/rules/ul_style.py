from __future__ import annotations

from typing import TYPE_CHECKING

from ..engine.schema import RuleDescriptor
from ..models import ListItem
from .base import Rule
from .config import UnorderedListStyle

if TYPE_CHECKING:
    from ..document import Document
    from ..engine.reporter import ErrorReporter


def resolve_style(style: UnorderedListStyle, items: tuple[ListItem, ...]) -> UnorderedListStyle | None:
    """Concrete style to enforce; ``consistent`` adopts the first item's marker."""
    if style is not UnorderedListStyle.CONSISTENT:
        return style
    return UnorderedListStyle.from_marker(items[0].marker) if items else None


class ConsistentUlStyleRule(Rule):
    """# Unordered list style

    This rule is triggered when the symbols used for unordered list items do
    not match the configured style:

        * Item 1
        + Item 2
        - Item 3

    To fix this, use the configured symbol throughout the document:

        - Item 1
        - Item 2
        - Item 3

    `style` can name a symbol (`asterisk`, `plus`, `dash`) or simply require
    that usage be `consistent` within the document.

    Based on MD004.
    """

    descriptor = RuleDescriptor(
        name="ul-style",
        description="Unordered list style",
        tags=("bullet", "ul"),
    )
    defaults = {"style": UnorderedListStyle.DASH}

    def visit(self, document: Document, reporter: ErrorReporter) -> None:
        style: UnorderedListStyle = self.config["style"]
        items = document.unordered_list_items

        expected = resolve_style(style, items)
        if expected is None:
            return

        for item in items:
            actual = UnorderedListStyle.from_marker(item.marker)
            if actual is not expected:
                reporter.report_error(
                    item.start,
                    item.end,
                    f"Unordered list item expected in {expected.description} style but is "
                    f"{actual.description}. Configuration: style={style.description}.",
                )
