"""Node types for parsed markdown documents.

Every node covers a half-open character range ``[start, end)`` of the
original source text. Nodes are frozen; a tree is never modified once built.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterator, Literal

HeadingStyle = Literal["atx", "setext"]


@dataclass(frozen=True)
class Node:
    """Base class for all tree nodes."""

    kind: ClassVar[str] = "node"

    start: int
    end: int
    children: tuple[Node, ...] = ()

    def walk(self) -> Iterator[Node]:
        """Yield this node and all descendants in document order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class Root(Node):
    kind: ClassVar[str] = "document"


@dataclass(frozen=True)
class Block(Node):
    """A block-level node without extra fields."""

    kind: ClassVar[str] = "block"


@dataclass(frozen=True)
class Paragraph(Block):
    kind: ClassVar[str] = "paragraph"


@dataclass(frozen=True)
class BlockQuote(Block):
    kind: ClassVar[str] = "blockquote"


@dataclass(frozen=True)
class HtmlBlock(Block):
    kind: ClassVar[str] = "html_block"


@dataclass(frozen=True)
class ThematicBreak(Block):
    kind: ClassVar[str] = "thematic_break"


@dataclass(frozen=True)
class Table(Block):
    kind: ClassVar[str] = "table"


@dataclass(frozen=True)
class Heading(Node):
    """An ATX (``# Title``) or setext (underlined) heading."""

    kind: ClassVar[str] = "heading"

    level: int = 1
    style: HeadingStyle = "atx"


@dataclass(frozen=True)
class ListBlock(Node):
    """A bullet or ordered list; its children are ``ListItem`` nodes."""

    kind: ClassVar[str] = "list"

    ordered: bool = False


@dataclass(frozen=True)
class ListItem(Node):
    """A single list item.

    ``level`` counts enclosing list items (0 for a top-level item) and
    ``indent`` is the column of the item marker, not counting blockquote
    prefixes. ``nested_in_ordered`` is set when any enclosing list is ordered.
    """

    kind: ClassVar[str] = "list_item"

    marker: str = "-"
    ordered: bool = False
    level: int = 0
    indent: int = 0
    nested_in_ordered: bool = False


@dataclass(frozen=True)
class CodeBlock(Node):
    """A fenced (``` or ~~~) or indented code block."""

    kind: ClassVar[str] = "code_block"

    fenced: bool = True
    fence: str = ""
    info: str = ""


@dataclass(frozen=True)
class ReferenceDefinition(Node):
    """A link reference definition, ``[label]: destination``."""

    kind: ClassVar[str] = "reference_definition"

    label: str = ""
    destination: str = ""


@dataclass(frozen=True)
class Text(Node):
    kind: ClassVar[str] = "text"

    text: str = ""


@dataclass(frozen=True)
class InlineCode(Node):
    """A code span. ``text`` is the raw text between the backtick runs."""

    kind: ClassVar[str] = "inline_code"

    text: str = ""
    fence: str = "`"


@dataclass(frozen=True)
class Link(Node):
    """An inline link, ``[text](destination)``; ``destination`` is raw source."""

    kind: ClassVar[str] = "link"

    text: str = ""
    destination: str = ""


@dataclass(frozen=True)
class Image(Node):
    kind: ClassVar[str] = "image"

    text: str = ""
    destination: str = ""


@dataclass(frozen=True)
class AutoLink(Node):
    kind: ClassVar[str] = "autolink"

    destination: str = ""


@dataclass(frozen=True)
class LinkRef(Node):
    """A reference-style link: ``[text][ref]``, ``[ref][]`` or ``[ref]``.

    ``destination`` is the resolved definition's destination, or ``None``
    when no definition matches ``reference``.
    """

    kind: ClassVar[str] = "link_ref"

    text: str = ""
    reference: str = ""
    destination: str | None = None

    @property
    def is_resolved(self) -> bool:
        return self.destination is not None


@dataclass(frozen=True)
class Inline(Node):
    """Container for the inline content of a paragraph, heading or table row."""

    kind: ClassVar[str] = "inline"


LINK_KINDS = (Link, LinkRef, ReferenceDefinition)
