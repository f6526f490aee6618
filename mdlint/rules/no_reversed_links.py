from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ..engine.schema import RuleDescriptor
from .base import Rule

if TYPE_CHECKING:
    from ..document import Document
    from ..engine.reporter import ErrorReporter

# Trailing "(...)" in the text just before the reference; nested parentheses are not handled
REVERSED_TEXT_PATTERN = re.compile(r"\([^)]+\)$")


class NoReversedLinksRule(Rule):
    """# Reversed link syntax

    This rule is triggered when text that appears to be a link has its `[]`
    and `()` swapped:

        (Incorrect link syntax)[http://www.example.com/]

    To fix this, swap the brackets around:

        [Correct link syntax](http://www.example.com/)

    Only reference-style brackets with no matching definition are checked.
    The violation starts at the parenthesized text when there is one, else at
    the brackets themselves.

    Based on MD011.
    """

    descriptor = RuleDescriptor(
        name="no-reversed-links",
        description="Reversed link syntax",
        tags=("links",),
    )

    message = "Link syntax reversed, change to '[Text](Url)'."

    def visit(self, document: Document, reporter: ErrorReporter) -> None:
        for link_ref in document.link_refs:
            if link_ref.is_resolved:
                continue

            start = link_ref.start
            previous = document.previous_sibling(link_ref)
            if previous is not None:
                match = REVERSED_TEXT_PATTERN.search(document.text_of(previous))
                if match:
                    start = previous.start + match.start()

            reporter.report_error(start, link_ref.end, self.message)
