from __future__ import annotations

from typing import TYPE_CHECKING

from ..engine.schema import RuleDescriptor
from .base import Rule

if TYPE_CHECKING:
    from ..document import Document
    from ..engine.reporter import ErrorReporter


class NoSpaceInCodeRule(Rule):
    """# Spaces inside code span elements

    This rule is triggered on code spans that have spaces right inside the
    backticks:

        ` some text `

        `some text `

        ` some text`

    To fix this, remove the spaces inside the code span markers:

        `some text`

    Based on MD038.
    """

    descriptor = RuleDescriptor(
        name="no-space-in-code",
        description="Spaces inside code span elements",
        tags=("whitespace", "code"),
    )

    def visit(self, document: Document, reporter: ErrorReporter) -> None:
        for code in document.inline_code:
            if code.text != code.text.strip():
                reporter.report_error(code.start, code.end, self.descriptor.description)
