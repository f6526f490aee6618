"""mdlint - rule engine for markdown style checks."""

__version__ = "0.1.0"
