from __future__ import annotations

from typing import TYPE_CHECKING

from ..engine.schema import RuleDescriptor
from .base import Rule

if TYPE_CHECKING:
    from ..document import Document
    from ..engine.reporter import ErrorReporter


class HeaderIncrementRule(Rule):
    """# Header levels should only increment by one level at a time

    This rule is triggered when you skip header levels in a markdown document:

        # Header 1

        ### Header 3

        We skipped out a 2nd level header in this document

    When using multiple header levels, nested headers should increase by only
    one level at a time:

        # Header 1

        ## Header 2

        ### Header 3

        #### Header 4

        ## Another Header 2

        ### Another Header 3

    Based on MD001.
    """

    descriptor = RuleDescriptor(
        name="header-increment",
        description="Header levels should only increment by one level at a time",
        tags=("headers",),
    )

    def visit(self, document: Document, reporter: ErrorReporter) -> None:
        previous: int | None = None
        for heading in document.headings:
            if previous is not None and heading.level > previous + 1:
                reporter.report_error(
                    heading.start,
                    heading.end,
                    f"Header level jumps from h{previous} to h{heading.level}; expected h{previous + 1} or lower.",
                )
            previous = heading.level
