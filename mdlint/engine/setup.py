"""Builder used by configuration closures to set up a rule.

A configuration closure receives a ``RuleSetup`` and assigns to it::

    UlIndentRule(lambda setup: setup.set("indent", 4).set("severity", "error"))

    def strict(setup: RuleSetup) -> None:
        setup.severity = Severity.ERROR
        setup["style"] = "consistent"

Repeated assignments are last-write-wins. Nothing is validated until
``build()``, which either returns an immutable ``RuleConfig`` or raises
``ConfigurationError`` naming every problem.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from ..errors import ConfigurationError
from .schema import RuleConfig, Severity

ConfigureFn = Callable[["RuleSetup"], None]


class RuleSetup:
    """Mutable builder for a single rule's ``RuleConfig``."""

    def __init__(self, rule: str, defaults: Mapping[str, Any], severity: Severity = Severity.WARNING):
        self.rule = rule
        self.enabled: Any = True
        self.severity: Any = severity
        self._defaults = dict(defaults)
        self._params: dict[str, Any] = {}
        self._includes: list[str] = []
        self._excludes: list[str] = []

    def set(self, name: str, value: Any) -> RuleSetup:
        """Assign a parameter (or ``enabled``/``severity``/``include``/``exclude``)."""
        if name == "enabled":
            self.enabled = value
        elif name == "severity":
            self.severity = value
        elif name in ("include", "includes"):
            self.include(*_patterns(name, value))
        elif name in ("exclude", "excludes"):
            self.exclude(*_patterns(name, value))
        else:
            self._params[name] = value
        return self

    __setitem__ = set

    def enable(self) -> RuleSetup:
        self.enabled = True
        return self

    def disable(self) -> RuleSetup:
        self.enabled = False
        return self

    def include(self, *patterns: str) -> RuleSetup:
        """Only run the rule on paths matching one of these glob patterns."""
        self._includes.extend(patterns)
        return self

    def exclude(self, *patterns: str) -> RuleSetup:
        """Skip paths matching any of these glob patterns."""
        self._excludes.extend(patterns)
        return self

    def build(self) -> RuleConfig:
        problems: list[str] = []

        if not isinstance(self.enabled, bool):
            problems.append(f"'enabled' must be a boolean, got {self.enabled!r}")

        severity = Severity.WARNING
        try:
            severity = Severity.parse(self.severity)
        except ConfigurationError as e:
            problems.append(str(e))

        for name in sorted(set(self._params) - set(self._defaults)):
            known = ", ".join(sorted(self._defaults)) or "none"
            problems.append(f"unknown parameter '{name}' (known: {known})")

        params: dict[str, Any] = {}
        for name, default in self._defaults.items():
            if name not in self._params:
                params[name] = default
                continue
            try:
                params[name] = _coerce(name, default, self._params[name])
            except ConfigurationError as e:
                problems.append(str(e))

        if problems:
            raise ConfigurationError(f"Invalid configuration for rule '{self.rule}': " + "; ".join(problems))

        return RuleConfig(
            enabled=self.enabled,
            severity=severity,
            params=MappingProxyType(params),
            includes=tuple(self._includes),
            excludes=tuple(self._excludes),
        )


def _patterns(name: str, value: Any) -> Iterable[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)) and all(isinstance(p, str) for p in value):
        return list(value)
    raise ConfigurationError(f"'{name}' must be a glob pattern or a list of patterns, got {value!r}")


def _coerce(name: str, default: Any, value: Any) -> Any:
    """Check ``value`` against the type of ``default``, converting enum names."""
    expected = type(default)

    if isinstance(default, Enum):
        if isinstance(value, expected):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower().replace("-", "_")
            for member in expected:
                if normalized in (member.name.lower(), str(member.value).lower()):
                    return member
        choices = ", ".join(m.name.lower() for m in expected)
        raise ConfigurationError(f"parameter '{name}' must be one of: {choices}; got {value!r}")

    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
    elif isinstance(default, int):
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif isinstance(value, expected):
        return value

    raise ConfigurationError(
        f"parameter '{name}' expects {expected.__name__}, got {type(value).__name__} {value!r}"
    )
