"""
Convert lint reports to LSP diagnostics.

Offsets are turned into UTF-16 line/character positions as the protocol
requires.
"""

from __future__ import annotations

from lsprotocol import types as lsp

from ..document import Document
from ..engine import LintReport, Severity, Violation

SOURCE = "mdlint"

SEVERITY_MAP = {
    Severity.ERROR: lsp.DiagnosticSeverity.Error,
    Severity.WARNING: lsp.DiagnosticSeverity.Warning,
    Severity.INFO: lsp.DiagnosticSeverity.Information,
}


def _range(document: Document, start: int, end: int) -> lsp.Range:
    start_line, start_char = document.lsp_position(start)
    end_line, end_char = document.lsp_position(end)
    return lsp.Range(
        start=lsp.Position(line=start_line, character=start_char),
        end=lsp.Position(line=end_line, character=end_char),
    )


def to_diagnostic(document: Document, violation: Violation) -> lsp.Diagnostic:
    return lsp.Diagnostic(
        range=_range(document, violation.start, violation.end),
        message=violation.message,
        severity=SEVERITY_MAP[violation.severity],
        source=SOURCE,
        code=violation.rule,
        data={"rule": violation.rule},
    )


def to_diagnostics(document: Document, report: LintReport) -> list[lsp.Diagnostic]:
    """
    All diagnostics for one lint report.

    Rule failures are published as errors at the start of the document.
    """
    diagnostics = [to_diagnostic(document, v) for v in report.violations]
    for failure in report.failures:
        diagnostics.append(
            lsp.Diagnostic(
                range=_range(document, 0, 0),
                message=str(failure),
                severity=lsp.DiagnosticSeverity.Error,
                source=SOURCE,
                code=failure.rule,
                data={"rule": failure.rule, "failure": failure.error_type},
            )
        )
    return diagnostics
