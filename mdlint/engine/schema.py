from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from ..errors import ConfigurationError


class Severity(str, Enum):
    """How serious a violation is."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @classmethod
    def parse(cls, value: Severity | str) -> Severity:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if normalized in (member.value, member.name.lower()):
                    return member
        choices = ", ".join(m.value for m in cls)
        raise ConfigurationError(f"Invalid severity {value!r} (expected one of: {choices})")


SEVERITY_ORDER = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFO: 2}


@dataclass(frozen=True)
class RuleDescriptor:
    """Static identity of a rule; ``name`` is also its configuration key."""

    name: str
    description: str
    tags: tuple[str, ...] = ()
    severity: Severity = Severity.WARNING


@dataclass(frozen=True)
class RuleConfig:
    """Configuration snapshot for one rule. Built by ``RuleSetup``, never changed."""

    enabled: bool = True
    severity: Severity = Severity.WARNING
    params: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    includes: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()

    def __getitem__(self, name: str) -> Any:
        return self.params[name]


@dataclass(frozen=True)
class Violation:
    """A single lint finding over the half-open range ``[start, end)``."""

    rule: str
    severity: Severity
    start: int
    end: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule": self.rule,
            "severity": self.severity.value,
            "start": self.start,
            "end": self.end,
            "message": self.message,
        }


@dataclass(frozen=True)
class RuleFailure:
    """A rule that raised while visiting a document."""

    rule: str
    error_type: str
    message: str

    def __str__(self) -> str:
        return f"Rule '{self.rule}' failed: {self.error_type}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {"rule": self.rule, "error_type": self.error_type, "message": self.message}


@dataclass(frozen=True)
class LintReport:
    """Result of running an engine over one document."""

    violations: tuple[Violation, ...] = ()
    failures: tuple[RuleFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.violations and not self.failures

    def counts(self) -> dict[str, int]:
        counts = {s.value: 0 for s in Severity}
        for v in self.violations:
            counts[v.severity.value] += 1
        return counts
