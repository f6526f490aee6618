from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Mapping

from ..errors import ConfigurationError
from .reporter import ErrorReporter
from .schema import LintReport, RuleFailure, Violation
from .setup import ConfigureFn

if TYPE_CHECKING:
    from ..document import Document
    from ..rules.base import Rule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleOutcome:
    """What one rule produced: its violations, or the failure that stopped it."""

    rule: str
    violations: tuple[Violation, ...] = ()
    failure: RuleFailure | None = None


def _execute(rule: Rule, document: Document) -> RuleOutcome:
    """Run a single rule with its own reporter, containing any exception."""
    reporter = ErrorReporter(rule.name, rule.config.severity, len(document.source))
    started = time.perf_counter()
    try:
        rule.visit(document, reporter)
    except Exception as e:
        logger.warning("Rule %s failed on %r: %s: %s", rule.name, document, type(e).__name__, e)
        logger.debug("Traceback for rule %s", rule.name, exc_info=True)
        return RuleOutcome(
            rule=rule.name,
            failure=RuleFailure(rule=rule.name, error_type=type(e).__name__, message=str(e)),
        )

    logger.debug(
        "Rule %s reported %d violation(s) in %.2fms",
        rule.name,
        len(reporter),
        (time.perf_counter() - started) * 1000,
    )
    return RuleOutcome(rule=rule.name, violations=reporter.violations)


class Engine:
    """Runs a configured set of rules over documents.

    Args:
        rules: Rule instances; names must be unique
        settings: Optional rule name -> configuration closure, layered on top
            of each rule's own configuration
        max_workers: Run rules on a thread pool of this size instead of sequentially

    Raises:
        ConfigurationError: On duplicate rule names, settings for unknown rules,
            or any invalid rule configuration
    """

    def __init__(
        self,
        rules: Iterable[Rule],
        settings: Mapping[str, ConfigureFn] | None = None,
        *,
        max_workers: int | None = None,
    ):
        by_name: dict[str, Rule] = {}
        for rule in rules:
            if rule.name in by_name:
                raise ConfigurationError(f"Duplicate rule name: {rule.name!r}")
            by_name[rule.name] = rule

        for name, configure in (settings or {}).items():
            if name not in by_name:
                known = ", ".join(sorted(by_name))
                raise ConfigurationError(f"Unknown rule in configuration: {name!r} (known: {known})")
            by_name[name] = by_name[name].with_config(configure)

        self.rules: Mapping[str, Rule] = MappingProxyType(by_name)
        self.max_workers = max_workers

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, tuple[Rule, ConfigureFn | None]],
        *,
        max_workers: int | None = None,
    ) -> Engine:
        """Build an engine from ``{name: (rule, configuration closure)}``."""
        rules = []
        for name, (rule, configure) in mapping.items():
            if name != rule.name:
                raise ConfigurationError(f"Rule registered as {name!r} is named {rule.name!r}")
            rules.append(rule.with_config(configure) if configure is not None else rule)
        return cls(rules, max_workers=max_workers)

    def active_rules(self, document: Document) -> list[Rule]:
        """Enabled rules whose include/exclude patterns accept the document path."""
        return [
            rule
            for rule in self.rules.values()
            if rule.config.enabled and rule.applies_to(document.path)
        ]

    def run(self, document: Document) -> LintReport:
        """Run every active rule and merge the results.

        Violations are de-duplicated and sorted by start offset, then rule
        name; end offset and message break any remaining ties. Rules that
        raise are reported as failures and never abort the scan.
        """
        rules = self.active_rules(document)

        if self.max_workers and len(rules) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                outcomes = list(pool.map(lambda rule: _execute(rule, document), rules))
        else:
            outcomes = [_execute(rule, document) for rule in rules]

        violations: set[Violation] = set()
        failures: list[RuleFailure] = []
        for outcome in outcomes:
            if outcome.failure is not None:
                failures.append(outcome.failure)
            else:
                violations.update(outcome.violations)

        return LintReport(
            violations=tuple(sorted(violations, key=lambda v: (v.start, v.rule, v.end, v.message))),
            failures=tuple(sorted(failures, key=lambda f: f.rule)),
        )
