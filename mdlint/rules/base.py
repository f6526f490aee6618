"""Base class for lint rules."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Mapping

from ..engine.schema import RuleConfig, RuleDescriptor
from ..engine.setup import ConfigureFn, RuleSetup

if TYPE_CHECKING:
    from ..document import Document
    from ..engine.reporter import ErrorReporter


class Rule(ABC):
    """A single, stateless check over a ``Document``.

    Subclasses declare a ``descriptor`` and the typed defaults of their
    parameters, and implement ``visit``. The configuration closure given to
    the constructor is applied on top of those defaults; the resulting
    ``RuleConfig`` is fixed for the life of the instance.
    """

    descriptor: ClassVar[RuleDescriptor]
    defaults: ClassVar[Mapping[str, Any]] = {}

    def __init__(self, config: ConfigureFn | None = None):
        self._configure: tuple[ConfigureFn, ...] = (config,) if config is not None else ()
        self.config: RuleConfig = self._build_config()

    @property
    def name(self) -> str:
        return self.descriptor.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}(enabled={self.config.enabled}, params={dict(self.config.params)})"

    def default_config(self, setup: RuleSetup) -> None:
        """Apply compiled-in settings before any caller configuration."""

    def _build_config(self) -> RuleConfig:
        setup = RuleSetup(self.name, self.defaults, self.descriptor.severity)
        self.default_config(setup)
        for configure in self._configure:
            configure(setup)
        return setup.build()

    def with_config(self, config: ConfigureFn) -> Rule:
        """Return a copy with ``config`` layered over the current configuration."""
        clone = copy.copy(self)
        clone._configure = (*self._configure, config)
        clone.config = clone._build_config()
        return clone

    def applies_to(self, path: Path | None) -> bool:
        """Check a document path against the include/exclude patterns."""
        if path is None:
            return True
        if self.config.includes and not any(path.match(p) for p in self.config.includes):
            return False
        return not any(path.match(p) for p in self.config.excludes)

    @abstractmethod
    def visit(self, document: Document, reporter: ErrorReporter) -> None:
        """Report every violation in ``document``. Must not modify it."""
