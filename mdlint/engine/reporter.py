from __future__ import annotations

from ..errors import ReporterError
from .schema import Severity, Violation


class ErrorReporter:
    """Append-only sink for the violations of one rule execution.

    The engine creates a fresh reporter per rule, so every violation is
    attributed to exactly that rule and carries its configured severity.
    """

    def __init__(self, rule: str, severity: Severity, length: int):
        self.rule = rule
        self.severity = severity
        self.length = length
        self._violations: list[Violation] = []

    def report_error(self, start: int, end: int, message: str) -> None:
        """Record a violation over ``[start, end)``.

        Raises:
            ReporterError: If the range is inverted or outside the document
        """
        if start > end:
            raise ReporterError(f"Rule '{self.rule}' reported start {start} after end {end}")
        if start < 0 or end > self.length:
            raise ReporterError(
                f"Rule '{self.rule}' reported range [{start}, {end}) outside document of length {self.length}"
            )
        self._violations.append(
            Violation(rule=self.rule, severity=self.severity, start=start, end=end, message=message)
        )

    @property
    def violations(self) -> tuple[Violation, ...]:
        return tuple(self._violations)

    def __len__(self) -> int:
        return len(self._violations)
