from __future__ import annotations

from typing import TYPE_CHECKING

from ..engine.schema import RuleDescriptor
from .base import Rule

if TYPE_CHECKING:
    from ..document import Document
    from ..engine.reporter import ErrorReporter


class UlIndentRule(Rule):
    """# Unordered list indentation

    This rule is triggered when list items are not indented by the configured
    number of spaces (`indent`, default 2):

        * List item
           * Nested list item indented by 3 spaces

    Corrected:

        * List item
          * Nested list item indented by 2 spaces

    Two spaces line nested content up with the parent's text when a single
    space follows the marker; four spaces match code block indentation and
    suit parsers that require it. Unordered lists nested inside ordered lists
    are not checked.

    Based on MD007.
    """

    descriptor = RuleDescriptor(
        name="ul-indent",
        description="Unordered list indentation",
        tags=("bullet", "ul", "indentation"),
    )
    defaults = {"indent": 2}

    def visit(self, document: Document, reporter: ErrorReporter) -> None:
        indent: int = self.config["indent"]

        for item in document.unordered_list_items:
            if item.nested_in_ordered:
                continue
            expected = item.level * indent
            if item.indent != expected:
                reporter.report_error(
                    item.start,
                    item.end,
                    f"{self.descriptor.description}: expected {expected} space(s) but found {item.indent}. "
                    f"Configuration: indent={indent}.",
                )
