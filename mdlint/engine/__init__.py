"""Rule execution engine (rules as plug-ins, configuration as data)."""

from .engine import Engine, RuleOutcome
from .load import CONFIG_FILENAME, find_config, load_settings, settings_from_dict
from .reporter import ErrorReporter
from .schema import SEVERITY_ORDER, LintReport, RuleConfig, RuleDescriptor, RuleFailure, Severity, Violation
from .setup import ConfigureFn, RuleSetup

__all__ = [
    "CONFIG_FILENAME",
    "ConfigureFn",
    "Engine",
    "ErrorReporter",
    "LintReport",
    "RuleConfig",
    "RuleDescriptor",
    "RuleFailure",
    "RuleOutcome",
    "RuleSetup",
    "SEVERITY_ORDER",
    "Severity",
    "Violation",
    "find_config",
    "load_settings",
    "settings_from_dict",
]
