"""Build the node tree for a markdown text.

Block structure comes from markdown-it (CommonMark plus tables). markdown-it
only records line ranges, so every block's character offsets are recomputed
against the original text, and inline content is located by
:func:`mdlint.document.inline.scan_inline`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from functools import lru_cache
from typing import Any

from markdown_it import MarkdownIt
from markdown_it.common.utils import normalizeReference
from markdown_it.token import Token

from ..models import (
    Block,
    BlockQuote,
    CodeBlock,
    Heading,
    HtmlBlock,
    Inline,
    ListBlock,
    ListItem,
    Node,
    Paragraph,
    ReferenceDefinition,
    Root,
    Table,
    ThematicBreak,
)
from .inline import scan_inline

# markdown-it normalizes all three newline forms to "\n" before splitting lines
LINE_BREAK = re.compile(r"\r\n|\r|\n")
QUOTE_PREFIX = re.compile(r"(?:[ \t]{0,3}>[ ]?)*")
BULLET_MARKER = re.compile(r"[*+-]")
ORDERED_MARKER = re.compile(r"\d{1,9}[.)]")
REFERENCE_DEFINITION = re.compile(r"[ \t]*\[((?:[^\[\]\\]|\\.)+)\]:[ \t]*(<[^<>\n]*>|\S+)?")

# Tokens whose line ranges can never hold a reference definition
LEAF_BLOCKS = {"paragraph_open", "heading_open", "fence", "code_block", "html_block", "hr", "table_open"}
LIST_OPENERS = {"bullet_list_open", "ordered_list_open"}


@lru_cache(maxsize=1)
def _markdown_parser() -> MarkdownIt:
    md = MarkdownIt("commonmark")
    md.enable("table")
    return md


def parse_tree(text: str) -> Root:
    """Parse markdown text into a tree of offset-carrying nodes."""
    env: dict[str, Any] = {}
    tokens = _markdown_parser().parse(text, env)
    return _TreeBuilder(text, env.get("references", {})).build(tokens)


class LineIndex:
    """Start and end offsets of each source line (line terminators excluded)."""

    def __init__(self, text: str):
        self.text = text
        self.starts = [0]
        self.ends: list[int] = []
        for match in LINE_BREAK.finditer(text):
            self.ends.append(match.start())
            self.starts.append(match.end())
        self.ends.append(len(text))

    def __len__(self) -> int:
        return len(self.starts)

    def start(self, line: int) -> int:
        return self.starts[line] if line < len(self.starts) else len(self.text)

    def end(self, line: int) -> int:
        return self.ends[line] if line < len(self.ends) else len(self.text)

    def line(self, line: int) -> str:
        return self.text[self.start(line) : self.end(line)]


@dataclass
class _Frame:
    """An open container token while walking the token stream."""

    token: Token | None
    start: int
    line: int
    children: list[Node] = field(default_factory=list)
    content_col: int = 0
    item: dict[str, Any] = field(default_factory=dict)

    @property
    def type(self) -> str:
        return self.token.type if self.token is not None else "root"


class _TreeBuilder:
    def __init__(self, text: str, references: dict[str, Any]):
        self.text = text
        self.lines = LineIndex(text)
        self.references = references
        self.covered: set[int] = set()
        self.quoted: set[int] = set()
        self.destinations: dict[str, str] = {}

    def build(self, tokens: list[Token]) -> Root:
        for token in tokens:
            if token.map is None:
                continue
            lo, hi = token.map
            if token.type in LEAF_BLOCKS:
                self.covered.update(range(lo, hi))
            if token.type == "blockquote_open":
                self.quoted.update(range(lo, hi))

        definitions = self._find_definitions()

        stack = [_Frame(token=None, start=0, line=0)]
        for token in tokens:
            if token.nesting == 1:
                stack.append(self._open(token, stack))
            elif token.nesting == -1:
                frame = stack.pop()
                stack[-1].children.extend(self._close(frame, stack))
            else:
                stack[-1].children.extend(self._leaf(token, stack))

        root = Root(start=0, end=len(self.text), children=tuple(stack[0].children))
        for definition in definitions:
            root = _attach(root, definition)
        return root

    # -- offsets -------------------------------------------------------------

    def _quote_offset(self, line: int, raw: str) -> int:
        if line not in self.quoted:
            return 0
        match = QUOTE_PREFIX.match(raw)
        return match.end() if match else 0

    def _content_start(self, line: int, min_col: int = 0, strip_quote: bool = True) -> int:
        """Offset of the first non-blank character at or after ``min_col``."""
        raw = self.lines.line(line)
        offset = self._quote_offset(line, raw) if strip_quote else 0
        body = raw[offset:]
        col = min(min_col, len(body))
        while col < len(body) and body[col] in " \t":
            col += 1
        return self.lines.start(line) + offset + col

    def _is_blank(self, line: int) -> bool:
        raw = self.lines.line(line)
        return not raw[self._quote_offset(line, raw) :].strip()

    def _span_end(self, lo: int, hi: int) -> int:
        """End offset of lines ``[lo, hi)``, ignoring trailing blank lines and whitespace."""
        last = max(lo, min(hi, len(self.lines)) - 1)
        while last > lo and self._is_blank(last):
            last -= 1
        return self.lines.start(last) + len(self.lines.line(last).rstrip())

    @staticmethod
    def _min_col(stack: list[_Frame], line: int) -> int:
        for frame in reversed(stack):
            if frame.type == "list_item_open" and frame.line == line:
                return frame.content_col
        return 0

    # -- token handlers ------------------------------------------------------

    def _open(self, token: Token, stack: list[_Frame]) -> _Frame:
        parent = stack[-1]
        if token.map is None:
            return _Frame(token=token, start=parent.start, line=parent.line)

        line = token.map[0]
        min_col = self._min_col(stack, line)
        if token.type == "list_item_open":
            return self._open_item(token, stack, line, min_col)
        if token.type == "blockquote_open":
            start = self._content_start(line, min_col, strip_quote=False)
        else:
            start = self._content_start(line, min_col)
        return _Frame(token=token, start=start, line=line)

    def _open_item(self, token: Token, stack: list[_Frame], line: int, min_col: int) -> _Frame:
        raw = self.lines.line(line)
        offset = self._quote_offset(line, raw)
        body = raw[offset:]

        lists = [f for f in stack if f.type in LIST_OPENERS]
        ordered = bool(lists) and lists[-1].type == "ordered_list_open"

        pattern = ORDERED_MARKER if ordered else BULLET_MARKER
        match = pattern.search(body, min_col)
        if match:
            col, marker = match.start(), match.group()
        else:
            col, marker = len(body) - len(body.lstrip()), token.markup

        after = col + len(marker)
        rest = body[after:]
        spaces = len(rest) - len(rest.lstrip(" \t"))
        content_col = after + (spaces if 0 < spaces <= 4 else min(spaces, 1))

        return _Frame(
            token=token,
            start=self.lines.start(line) + offset + col,
            line=line,
            content_col=content_col,
            item={
                "marker": marker,
                "ordered": ordered,
                "level": sum(1 for f in stack if f.type == "list_item_open"),
                "indent": col,
                "nested_in_ordered": any(f.type == "ordered_list_open" for f in lists[:-1]),
            },
        )

    def _close(self, frame: _Frame, stack: list[_Frame]) -> tuple[Node, ...]:
        kind = frame.type
        children = tuple(frame.children)

        if kind in ("thead_open", "tbody_open"):
            return children
        if kind in ("th_open", "td_open"):
            return ()
        if kind == "tr_open":
            if frame.token is None or frame.token.map is None:
                return ()
            row = frame.token.map[0]
            start = self._content_start(row, self._min_col(stack, row))
            end = max(start, self._span_end(row, row + 1))
            return (Inline(start=start, end=end, children=scan_inline(self.text, start, end, self._resolve)),)

        token = frame.token
        if token is None:
            return children
        lo, hi = token.map if token.map is not None else (frame.line, frame.line + 1)
        start = frame.start
        end = max(start, self._span_end(lo, hi))
        if children:
            start = min(start, children[0].start)
            end = max(end, children[-1].end)

        if kind == "paragraph_open":
            return (Paragraph(start=start, end=end, children=children),)
        if kind == "heading_open":
            style = "setext" if token.markup in ("=", "-") else "atx"
            return (Heading(start=start, end=end, children=children, level=int(token.tag[1:]), style=style),)
        if kind == "blockquote_open":
            return (BlockQuote(start=start, end=end, children=children),)
        if kind in LIST_OPENERS:
            return (ListBlock(start=start, end=end, children=children, ordered=kind == "ordered_list_open"),)
        if kind == "list_item_open":
            return (ListItem(start=start, end=end, children=children, **frame.item),)
        if kind == "table_open":
            return (Table(start=start, end=end, children=children),)
        return (Block(start=start, end=end, children=children),)

    def _leaf(self, token: Token, stack: list[_Frame]) -> tuple[Node, ...]:
        if token.type == "inline":
            return self._inline(token, stack)
        if token.map is None:
            return ()

        lo, hi = token.map
        start = self._content_start(lo, self._min_col(stack, lo))
        end = max(start, self._span_end(lo, hi))

        if token.type == "fence":
            return (CodeBlock(start=start, end=end, fenced=True, fence=token.markup, info=token.info.strip()),)
        if token.type == "code_block":
            return (CodeBlock(start=start, end=end, fenced=False),)
        if token.type == "html_block":
            return (HtmlBlock(start=start, end=end),)
        if token.type == "hr":
            return (ThematicBreak(start=start, end=end),)
        return ()

    def _inline(self, token: Token, stack: list[_Frame]) -> tuple[Node, ...]:
        parent = stack[-1]
        if parent.token is None or parent.type in ("th_open", "td_open"):
            return ()
        if not token.content:
            return ()

        lo = token.map[0] if token.map is not None else parent.line
        if parent.type == "heading_open" and parent.token.markup.startswith("#"):
            after = parent.start + len(parent.token.markup)
            line_end = self.lines.end(lo)
            found = self.text.find(token.content, after, line_end)
            if found != -1:
                start, end = found, found + len(token.content)
            else:
                start, end = self._content_start(lo, after - self.lines.start(lo)), line_end
        else:
            start = parent.start
            end = self._span_end(lo, lo + token.content.count("\n") + 1)

        return scan_inline(self.text, start, max(start, end), self._resolve)

    # -- references ----------------------------------------------------------

    def _find_definitions(self) -> list[ReferenceDefinition]:
        definitions = []
        for line in range(len(self.lines)):
            if line in self.covered:
                continue
            raw = self.lines.line(line)
            match = REFERENCE_DEFINITION.match(raw, self._quote_offset(line, raw))
            if not match:
                continue
            key = normalizeReference(match.group(1))
            if key not in self.references:
                continue

            destination = match.group(2) or ""
            last = line
            if not destination and line + 1 < len(self.lines):
                following = self.lines.line(line + 1).split()
                if following:
                    destination = following[0]
                    last = line + 1

            self.destinations.setdefault(key, destination)
            definitions.append(
                ReferenceDefinition(
                    start=self.lines.start(line) + raw.index("[", match.start()),
                    end=self.lines.start(last) + len(self.lines.line(last).rstrip()),
                    label=match.group(1),
                    destination=destination,
                )
            )
        return definitions

    def _resolve(self, label: str) -> str | None:
        key = normalizeReference(label)
        if key in self.destinations:
            return self.destinations[key]
        reference = self.references.get(key)
        if reference is None:
            return None
        return str(reference.get("href", ""))


def _attach(node: Node, definition: ReferenceDefinition) -> Node:
    """Insert a definition under the innermost container that spans it."""
    for index, child in enumerate(node.children):
        if isinstance(child, (BlockQuote, ListBlock, ListItem)) and child.start <= definition.start < child.end:
            if definition.end > child.end:
                break
            children = list(node.children)
            children[index] = _attach(child, definition)
            return replace(node, children=tuple(children))
    children = sorted((*node.children, definition), key=lambda n: n.start)
    return replace(node, children=tuple(children))
