"""Exception types raised by mdlint."""


class MdlintError(Exception):
    """Base class for all mdlint errors."""


class ConfigurationError(MdlintError):
    """Invalid rule configuration: unknown rule or parameter, wrong type, bad file."""


class DocumentError(MdlintError):
    """A parsed tree that does not fit its source text."""


class ReporterError(MdlintError):
    """A rule reported an invalid offset range."""
