"""Locate inline constructs directly in the source text.

markdown-it's inline tokens carry no positions, so code spans, links,
images, autolinks and link references are found by scanning the raw source
of each inline region. The scanner follows CommonMark precedence where it
matters for offsets (code spans bind tighter than brackets, backslash escapes
are skipped) and otherwise stays a heuristic: emphasis and raw HTML are left
inside text runs.
"""

from __future__ import annotations

import re
from typing import Callable

from ..models import AutoLink, Image, InlineCode, Link, LinkRef, Node, Text

AUTOLINK_PATTERN = re.compile(
    r"<(?:[A-Za-z][A-Za-z0-9+.-]{1,31}:[^<>\s]*|[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[A-Za-z0-9.-]+)>"
)

Resolver = Callable[[str], "str | None"]


def scan_inline(source: str, start: int, end: int, resolve: Resolver) -> tuple[Node, ...]:
    """Scan ``source[start:end]`` into inline nodes in document order.

    Args:
        source: Full source text (offsets are absolute)
        start: Region start offset
        end: Region end offset (exclusive)
        resolve: Maps a reference label to its destination, or None if undefined

    Returns:
        Text, InlineCode, Link, Image, AutoLink and LinkRef nodes covering the region
    """
    return tuple(_InlineScanner(source, resolve).scan(start, end, links=True))


class _InlineScanner:
    def __init__(self, source: str, resolve: Resolver):
        self.source = source
        self.resolve = resolve

    def scan(self, start: int, end: int, links: bool) -> list[Node]:
        src = self.source
        nodes: list[Node] = []
        text_start = start
        i = start

        while i < end:
            ch = src[i]
            node: Node | None = None
            nxt = i + 1

            if ch == "\\":
                i = min(i + 2, end)
                continue
            if ch == "`":
                node, nxt = self._code_span(i, end)
            elif links and ch == "<":
                match = AUTOLINK_PATTERN.match(src, i, end)
                if match:
                    node = AutoLink(start=i, end=match.end(), destination=match.group()[1:-1])
                    nxt = match.end()
            elif links and (ch == "[" or (ch == "!" and i + 1 < end and src[i + 1] == "[")):
                node, nxt = self._bracket(i, end)

            if node is not None:
                if text_start < i:
                    nodes.append(Text(start=text_start, end=i, text=src[text_start:i]))
                nodes.append(node)
                text_start = nxt
            i = nxt

        if text_start < end:
            nodes.append(Text(start=text_start, end=end, text=src[text_start:end]))
        return nodes

    def _code_span(self, i: int, end: int) -> tuple[InlineCode | None, int]:
        """Match a backtick run at ``i`` with a closing run of equal length."""
        src = self.source
        j = i
        while j < end and src[j] == "`":
            j += 1
        width = j - i

        k = j
        while k < end:
            if src[k] != "`":
                k += 1
                continue
            run_end = k
            while run_end < end and src[run_end] == "`":
                run_end += 1
            if run_end - k == width:
                return InlineCode(start=i, end=run_end, text=src[j:k], fence="`" * width), run_end
            k = run_end

        return None, j

    def _match_bracket(self, i: int, end: int) -> int:
        """Index of the ``]`` closing the ``[`` at ``i``, or -1."""
        src = self.source
        depth = 0
        k = i
        while k < end:
            ch = src[k]
            if ch == "\\":
                k += 2
                continue
            if ch == "`":
                _, k = self._code_span(k, end)
                continue
            if ch == "[":
                depth += 1
            elif ch == "]":
                depth -= 1
                if depth == 0:
                    return k
            k += 1
        return -1

    def _match_paren(self, i: int, end: int) -> int:
        """Index of the ``)`` closing the ``(`` at ``i``, or -1."""
        src = self.source
        depth = 0
        k = i
        while k < end:
            ch = src[k]
            if ch == "\\":
                k += 2
                continue
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    return k
            k += 1
        return -1

    def _bracket(self, i: int, end: int) -> tuple[Node | None, int]:
        src = self.source
        image = src[i] == "!"
        open_ = i + 1 if image else i
        close = self._match_bracket(open_, end)
        if close == -1:
            return None, open_ + 1

        text = src[open_ + 1 : close]
        after = close + 1

        if after < end and src[after] == "(":
            paren = self._match_paren(after, end)
            if paren != -1:
                destination = _destination(src[after + 1 : paren])
                children = tuple(self.scan(open_ + 1, close, links=False))
                cls = Image if image else Link
                return cls(start=i, end=paren + 1, children=children, text=text, destination=destination), paren + 1

        reference = text
        node_end = after
        if after < end and src[after] == "[":
            label_close = self._match_bracket(after, end)
            if label_close != -1:
                label = src[after + 1 : label_close]
                if label.strip():
                    reference = label
                node_end = label_close + 1

        if not reference.strip():
            return None, node_end

        destination = self.resolve(reference)
        if image:
            if destination is None:
                return None, node_end
            return Image(start=i, end=node_end, text=text, destination=destination), node_end

        children = tuple(self.scan(open_ + 1, close, links=False))
        return (
            LinkRef(
                start=i,
                end=node_end,
                children=children,
                text=text,
                reference=reference,
                destination=destination,
            ),
            node_end,
        )


def _destination(inner: str) -> str:
    """Raw destination from the text between a link's parentheses (title dropped)."""
    stripped = inner.strip()
    if stripped.startswith("<"):
        close = stripped.find(">")
        return stripped[: close + 1] if close != -1 else stripped
    parts = stripped.split(None, 1)
    return parts[0] if parts else ""
