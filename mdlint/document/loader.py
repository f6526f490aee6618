"""Read-only document view used by lint rules."""

from __future__ import annotations

import logging
import re
from bisect import bisect_right
from functools import cached_property
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, TypeVar

import frontmatter
from frontmatter.default_handlers import YAMLHandler

from ..errors import DocumentError
from ..models import (
    CodeBlock,
    Heading,
    InlineCode,
    LINK_KINDS,
    LinkRef,
    ListItem,
    Node,
    ReferenceDefinition,
    Root,
)
from .parser import LineIndex, parse_tree

FRONTMATTER_FENCE = re.compile(r"^-{3,}[ \t]*$", re.MULTILINE)

N = TypeVar("N", bound=Node)

logger = logging.getLogger(__name__)


class Document:
    """Immutable view over one source text and its parsed tree.

    Accessors are computed on first use and cached; each returns a tuple in
    document order, so repeated calls give equal results.
    """

    def __init__(
        self,
        source: str,
        root: Root,
        path: Path | None = None,
        metadata: Mapping[str, Any] | None = None,
    ):
        _validate(root, len(source))
        self.source = source
        self.root = root
        self.path = path
        self.metadata: Mapping[str, Any] = MappingProxyType(dict(metadata or {}))
        self._lines = LineIndex(source)

    @classmethod
    def parse(cls, text: str, path: Path | None = None) -> Document:
        """Parse markdown text into a Document.

        YAML frontmatter is exposed as ``metadata`` and blanked out before
        parsing so offsets still refer to the original text.
        """
        end, metadata = _split_frontmatter(text)
        body = re.sub(r"[^\r\n]", " ", text[:end]) + text[end:] if end else text
        return cls(text, parse_tree(body), path=path, metadata=metadata)

    def __repr__(self) -> str:
        name = self.path.name if self.path else "<string>"
        return f"Document({name!r}, {len(self.source)} chars)"

    # -- semantic accessors -----------------------------------------------

    def nodes(self, *types: type[N]) -> tuple[N, ...]:
        """All nodes of the given types, in document order."""
        return tuple(node for node in self.root.walk() if isinstance(node, types))  # type: ignore[misc]

    @cached_property
    def inline_code(self) -> tuple[InlineCode, ...]:
        return self.nodes(InlineCode)

    @cached_property
    def list_items(self) -> tuple[ListItem, ...]:
        return self.nodes(ListItem)

    @cached_property
    def unordered_list_items(self) -> tuple[ListItem, ...]:
        return tuple(item for item in self.list_items if not item.ordered)

    @cached_property
    def links(self) -> tuple[Node, ...]:
        """Direct links, link references and reference definitions."""
        return self.nodes(*LINK_KINDS)

    @cached_property
    def link_refs(self) -> tuple[LinkRef, ...]:
        return self.nodes(LinkRef)

    @cached_property
    def reference_definitions(self) -> tuple[ReferenceDefinition, ...]:
        return self.nodes(ReferenceDefinition)

    @cached_property
    def code_blocks(self) -> tuple[CodeBlock, ...]:
        return self.nodes(CodeBlock)

    @cached_property
    def headings(self) -> tuple[Heading, ...]:
        return self.nodes(Heading)

    @cached_property
    def _previous(self) -> dict[int, Node | None]:
        previous: dict[int, Node | None] = {}
        for node in self.root.walk():
            prior = None
            for child in node.children:
                previous[id(child)] = prior
                prior = child
        return previous

    def previous_sibling(self, node: Node) -> Node | None:
        """The sibling immediately before ``node``, or None if it is first."""
        return self._previous.get(id(node))

    def text_of(self, node: Node) -> str:
        """Source text covered by ``node``."""
        return self.source[node.start : node.end]

    # -- positions ---------------------------------------------------------

    def _line_of(self, offset: int) -> int:
        if not 0 <= offset <= len(self.source):
            raise ValueError(f"Offset {offset} outside document of length {len(self.source)}")
        return bisect_right(self._lines.starts, offset) - 1

    def position(self, offset: int) -> tuple[int, int]:
        """1-based (line, column) of a character offset."""
        line = self._line_of(offset)
        return line + 1, offset - self._lines.start(line) + 1

    def lsp_position(self, offset: int) -> tuple[int, int]:
        """0-based (line, character) of an offset, counting UTF-16 code units."""
        line = self._line_of(offset)
        prefix = self.source[self._lines.start(line) : offset]
        return line, len(prefix.encode("utf-16-le")) // 2


def _validate(root: Node, length: int) -> None:
    """Reject trees whose offsets do not fit the source text."""
    pending: list[tuple[Node, int, int]] = [(root, 0, length)]
    while pending:
        node, lo, hi = pending.pop()
        if not 0 <= node.start <= node.end <= length:
            raise DocumentError(
                f"{node.kind} node has offsets [{node.start}, {node.end}) outside text of length {length}"
            )
        if node.start < lo or node.end > hi:
            raise DocumentError(
                f"{node.kind} node [{node.start}, {node.end}) escapes its parent [{lo}, {hi})"
            )
        previous = None
        for child in node.children:
            if previous is not None and child.start < previous.start:
                raise DocumentError(
                    f"{child.kind} node at {child.start} is out of document order "
                    f"after {previous.kind} node at {previous.start}"
                )
            previous = child
        pending.extend((child, node.start, node.end) for child in node.children)


def _split_frontmatter(text: str) -> tuple[int, dict[str, Any]]:
    """Return the end offset of a leading YAML block and its parsed metadata.

    Only a block that loads as a YAML mapping counts as frontmatter; anything
    else (a thematic break followed by more markdown, say) is left as body text.
    """
    if not frontmatter.checks(text):
        return 0, {}

    fences = list(FRONTMATTER_FENCE.finditer(text))
    if len(fences) < 2 or fences[0].start() != 0:
        return 0, {}

    handler = YAMLHandler()
    try:
        fm, _ = handler.split(text)
        metadata = handler.load(fm)
    except Exception as e:
        logger.debug("Leading '---' block is not YAML frontmatter: %s", e)
        return 0, {}

    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        return 0, {}
    return fences[1].end(), metadata
