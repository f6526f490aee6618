"""Golden tests for all lint rules."""

from __future__ import annotations

import pytest

from mdlint.document import Document
from mdlint.engine import Engine, Violation
from mdlint.models import CodeBlock
from mdlint.rules import (
    CodeBlockStyle,
    CodeBlockStyleRule,
    ConsistentUlStyleRule,
    HeaderIncrementRule,
    NoEmptyLinksRule,
    NoReversedLinksRule,
    NoSpaceInCodeRule,
    Rule,
    UlIndentRule,
    UnorderedListStyle,
    explain,
    get_rule_ids,
)
from mdlint.rules.code_block_style import resolve_style


def _lint(text: str, rule: Rule) -> tuple[Violation, ...]:
    report = Engine([rule]).run(Document.parse(text))
    assert report.failures == ()
    return report.violations


# -- no-space-in-code ---------------------------------------------------------


def test_space_in_code_span():
    """Trailing space inside backticks is flagged over the whole span."""
    violations = _lint("`foo `", NoSpaceInCodeRule())

    assert len(violations) == 1
    assert (violations[0].start, violations[0].end) == (0, 6)
    assert violations[0].rule == "no-space-in-code"
    assert violations[0].message == "Spaces inside code span elements"


def test_only_padded_code_spans_are_flagged():
    violations = _lint("`ok` and ` lead`\n", NoSpaceInCodeRule())

    assert [(v.start, v.end) for v in violations] == [(9, 16)]


def test_code_span_inside_link_text():
    violations = _lint("[`x `](https://example.com)\n", NoSpaceInCodeRule())

    assert [(v.start, v.end) for v in violations] == [(1, 5)]


def test_fenced_code_is_not_a_code_span():
    assert _lint("```\n` x `\n```\n", NoSpaceInCodeRule()) == ()


# -- ul-indent ----------------------------------------------------------------


def test_ul_indent_flags_three_space_nesting():
    text = "- one\n   - two\n- three\n  - four\n"
    violations = _lint(text, UlIndentRule(lambda s: s.set("indent", 2)))

    assert len(violations) == 1
    assert violations[0].start == text.index("- two")
    assert violations[0].message == (
        "Unordered list indentation: expected 2 space(s) but found 3. Configuration: indent=2."
    )


def test_ul_indent_custom_width():
    text = "- a\n    - b\n"

    assert _lint(text, UlIndentRule(lambda s: s.set("indent", 4))) == ()
    assert len(_lint(text, UlIndentRule())) == 1


def test_ul_indent_skips_items_under_ordered_lists():
    assert _lint("1. one\n   - sub\n", UlIndentRule()) == ()


# -- ul-style -----------------------------------------------------------------


def test_ul_style_default_is_dash():
    violations = _lint("* a\n* b\n- c\n", ConsistentUlStyleRule())

    assert [v.start for v in violations] == [0, 4]
    assert violations[0].message == (
        "Unordered list item expected in Dash '-' style but is Asterisk '*'. Configuration: style=Dash '-'."
    )


def test_ul_style_consistent_uses_first_marker():
    violations = _lint("+ a\n- b\n* c\n", ConsistentUlStyleRule(lambda s: s.set("style", "consistent")))

    assert [v.start for v in violations] == [4, 8]
    assert "expected in Plus '+' style" in violations[0].message
    assert violations[0].message.endswith("Configuration: style=Consistent.")


def test_ul_style_explicit_style():
    rule = ConsistentUlStyleRule(lambda s: s.set("style", UnorderedListStyle.ASTERISK))

    assert [v.start for v in _lint("* a\n- b\n", rule)] == [4]


def test_ul_style_ignores_ordered_lists():
    assert _lint("1. a\n2. b\n", ConsistentUlStyleRule()) == ()


# -- code-block-style ---------------------------------------------------------


def test_consistent_code_block_style_flags_only_odd_one_out():
    """Three fenced blocks set the baseline; the indented one is flagged."""
    text = "```\na\n```\n\n~~~\nb\n~~~\n\n    indented\n\n```\nc\n```\n"
    violations = _lint(text, CodeBlockStyleRule(lambda s: s.set("style", "consistent")))

    assert len(violations) == 1
    start = text.index("indented")
    assert (violations[0].start, violations[0].end) == (start, start + len("indented"))
    assert violations[0].message == (
        "Code block expected in Fenced style but is Indented. Configuration: style=Consistent."
    )


def test_code_block_style_default_is_fenced():
    violations = _lint("    code\n", CodeBlockStyleRule())

    assert len(violations) == 1
    assert violations[0].message == "Code block expected in Fenced style but is Indented. Configuration: style=Fenced."


def test_code_block_style_indented():
    rule = CodeBlockStyleRule(lambda s: s.set("style", "indented"))

    assert len(_lint("```\nx\n```\n", rule)) == 1
    assert _lint("    x\n", rule) == ()


def test_code_block_style_resolution():
    fenced = CodeBlock(start=0, end=1, fenced=True)
    indented = CodeBlock(start=2, end=3, fenced=False)

    assert resolve_style(CodeBlockStyle.CONSISTENT, ()) is None
    assert resolve_style(CodeBlockStyle.CONSISTENT, (indented, fenced)) is CodeBlockStyle.INDENTED
    assert resolve_style(CodeBlockStyle.FENCED, ()) is CodeBlockStyle.FENCED


# -- no-empty-links -----------------------------------------------------------


def test_empty_link_flagged_section_link_allowed():
    violations = _lint("[empty]() and [ok](#section)\n", NoEmptyLinksRule())

    assert len(violations) == 1
    assert (violations[0].start, violations[0].end) == (0, 9)
    assert violations[0].message == "The link has no URL, '[empty]()'."


@pytest.mark.parametrize("text", ["[a](#)\n", "[a](<>)\n", "[a][r]\n\n[r]: #\n"])
def test_empty_link_forms(text: str):
    assert len(_lint(text, NoEmptyLinksRule())) == 1


def test_unresolved_reference_is_not_an_empty_link():
    assert _lint("[a][zz]\n", NoEmptyLinksRule()) == ()


# -- no-reversed-links --------------------------------------------------------


def test_reversed_link_anchored_at_parenthesis():
    violations = _lint("(reversed)[ref]\n", NoReversedLinksRule())

    assert len(violations) == 1
    assert (violations[0].start, violations[0].end) == (0, 15)
    assert violations[0].message == "Link syntax reversed, change to '[Text](Url)'."


def test_defined_reference_is_not_reversed():
    assert _lint("(a)[ref]\n\n[ref]: /x\n", NoReversedLinksRule()) == ()


def test_unresolved_reference_without_parenthesis():
    violations = _lint("see [note]\n", NoReversedLinksRule())

    assert [(v.start, v.end) for v in violations] == [(4, 10)]


def test_inline_link_is_not_reversed():
    assert _lint("[a](b)\n", NoReversedLinksRule()) == ()


# -- header-increment ---------------------------------------------------------


def test_header_increment():
    violations = _lint("# A\n\n### B\n", HeaderIncrementRule())

    assert len(violations) == 1
    assert (violations[0].start, violations[0].end) == (5, 10)
    assert violations[0].message == "Header level jumps from h1 to h3; expected h2 or lower."


def test_header_decrease_is_allowed():
    violations = _lint("# A\n## B\n### C\n# D\n### E\n", HeaderIncrementRule())

    assert len(violations) == 1
    assert "h1 to h3" in violations[0].message


# -- registry -----------------------------------------------------------------


def test_every_rule_is_documented():
    for name in get_rule_ids():
        assert explain(name)


def test_explain():
    assert explain("header-increment").startswith("# Header levels")
    assert explain(" UL-STYLE ") == explain("ul-style")
    assert explain("no-such-rule") is None
