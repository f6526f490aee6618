from __future__ import annotations

from typing import TYPE_CHECKING

from ..engine.schema import RuleDescriptor
from ..models import CodeBlock
from .base import Rule
from .config import CodeBlockStyle

if TYPE_CHECKING:
    from ..document import Document
    from ..engine.reporter import ErrorReporter


def block_style(block: CodeBlock) -> CodeBlockStyle:
    return CodeBlockStyle.FENCED if block.fenced else CodeBlockStyle.INDENTED


def resolve_style(style: CodeBlockStyle, blocks: tuple[CodeBlock, ...]) -> CodeBlockStyle | None:
    """Concrete style to enforce; ``consistent`` adopts the first block's style."""
    if style is not CodeBlockStyle.CONSISTENT:
        return style
    return block_style(blocks[0]) if blocks else None


class CodeBlockStyleRule(Rule):
    """# Code block style

    This rule is triggered when a different code block style is used than the
    configured one. With the default configuration it fires on:

        Some text.

            Code block

        Some more text.

    To fix this, use fenced code blocks:

        Some text.

        ```ruby
        Code block
        ```

        Some more text.

    The reverse holds when `style` is `indented`. With `style = "consistent"`
    the first code block in the document sets the style for the rest.

    Based on MD046.
    """

    descriptor = RuleDescriptor(
        name="code-block-style",
        description="Code block style",
        tags=("code",),
    )
    defaults = {"style": CodeBlockStyle.FENCED}

    def visit(self, document: Document, reporter: ErrorReporter) -> None:
        style: CodeBlockStyle = self.config["style"]
        blocks = document.code_blocks

        expected = resolve_style(style, blocks)
        if expected is None:
            return

        for block in blocks:
            actual = block_style(block)
            if actual is not expected:
                reporter.report_error(
                    block.start,
                    block.end,
                    f"Code block expected in {expected.description} style but is {actual.description}. "
                    f"Configuration: style={style.description}.",
                )
