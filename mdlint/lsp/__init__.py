"""
LSP server for live markdown diagnostics.

This module provides:
- LSP server for editor integration
- Conversion of lint reports to LSP diagnostics
"""

from .server import create_server, lint_source, start_server

__all__ = ["create_server", "lint_source", "start_server"]
