from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ..engine.schema import RuleDescriptor
from ..models import Link, LinkRef
from .base import Rule

if TYPE_CHECKING:
    from ..document import Document
    from ..engine.reporter import ErrorReporter

EMPTY_LINK_PATTERN = re.compile(r"#?|<>")


class NoEmptyLinksRule(Rule):
    """# No empty links

    This rule is triggered when an empty link is encountered:

        [an empty link]()

    To fix the violation, provide a destination for the link:

        [a valid link](https://example.com/)

    Empty fragments trigger this rule:

        [an empty fragment](#)

    But non-empty fragments do not:

        [a valid fragment](#fragment)

    Reference links are checked against their definition; references with no
    matching definition are left alone.

    Based on MD042.
    """

    descriptor = RuleDescriptor(
        name="no-empty-links",
        description="No empty links",
        tags=("links",),
    )

    def visit(self, document: Document, reporter: ErrorReporter) -> None:
        for link in document.links:
            if isinstance(link, (Link, LinkRef)):
                url = link.destination
            else:
                url = None

            if url is not None and EMPTY_LINK_PATTERN.fullmatch(url.strip()):
                reporter.report_error(link.start, link.end, f"The link has no URL, '{document.text_of(link)}'.")
