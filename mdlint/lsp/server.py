"""
LSP server implementation for markdown linting.

Provides:
- Diagnostics on open, change and save
- Diagnostics cleared when a document is closed
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from .. import __version__
from ..document import Document
from ..engine import Engine
from ..errors import ConfigurationError, DocumentError
from .diagnostics import to_diagnostics

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = {".md", ".markdown"}


class MdlintLanguageServer(LanguageServer):
    """Language server for markdown files."""

    def __init__(self, config_path: Path | None = None):
        super().__init__(name="mdlint-lsp", version=__version__)
        self.config_path = config_path
        self._engine: Engine | None = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = self._build_engine(self.config_path)
        return self._engine

    def set_config_path(self, path: Path | None) -> None:
        """Use a different config file; the engine is rebuilt on next use."""
        self.config_path = path
        self._engine = None

    @staticmethod
    def _build_engine(config_path: Path | None) -> Engine:
        from ..commands.lint import build_engine
        from ..rules import default_rules

        try:
            if config_path is not None:
                return build_engine(config_path)
            return Engine(default_rules())
        except ConfigurationError as e:
            logger.warning(f"Invalid configuration {config_path}, using defaults: {e}")
            return Engine(default_rules())


def uri_to_path(uri: str) -> Path:
    """Convert a file URI to a Path."""
    parsed = urlparse(uri)
    # Handle Windows paths
    path = unquote(parsed.path)
    if path.startswith("/") and len(path) > 2 and path[2] == ":":
        path = path[1:]
    return Path(path)


def create_server(config_path: Path | None = None) -> MdlintLanguageServer:
    """Create and configure the LSP server."""
    server = MdlintLanguageServer(config_path)

    @server.feature(lsp.INITIALIZE)
    def initialize(params: lsp.InitializeParams) -> None:
        """Handle initialize - look up the config from the workspace root."""
        if server.config_path is None and params.root_uri:
            from ..engine import find_config

            server.set_config_path(find_config(uri_to_path(params.root_uri)))

    @server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
    def did_open(params: lsp.DidOpenTextDocumentParams) -> None:
        _validate_document(server, params.text_document.uri, params.text_document.text)

    @server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
    def did_change(params: lsp.DidChangeTextDocumentParams) -> None:
        uri = params.text_document.uri
        _validate_document(server, uri, server.workspace.get_text_document(uri).source)

    @server.feature(lsp.TEXT_DOCUMENT_DID_SAVE)
    def did_save(params: lsp.DidSaveTextDocumentParams) -> None:
        uri = params.text_document.uri
        _validate_document(server, uri, server.workspace.get_text_document(uri).source)

    @server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
    def did_close(params: lsp.DidCloseTextDocumentParams) -> None:
        _publish(server, params.text_document.uri, [])

    return server


def lint_source(engine: Engine, source: str, path: Path | None = None) -> list[lsp.Diagnostic]:
    """Lint one document's text and return its diagnostics.

    Raises:
        DocumentError: If the text cannot be turned into a document
    """
    document = Document.parse(source, path=path)
    return to_diagnostics(document, engine.run(document))


def _validate_document(server: MdlintLanguageServer, uri: str, content: str) -> None:
    """Run lint on document and publish diagnostics."""
    path = uri_to_path(uri)

    if path.suffix.lower() not in MARKDOWN_SUFFIXES:
        return

    try:
        diagnostics = lint_source(server.engine, content, path)
    except DocumentError as e:
        logger.warning(f"Cannot lint {path}: {e}")
        diagnostics = []

    _publish(server, uri, diagnostics)


def _publish(server: MdlintLanguageServer, uri: str, diagnostics: list[lsp.Diagnostic]) -> None:
    server.text_document_publish_diagnostics(
        lsp.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


def start_server(config_path: Path | None = None, transport: str = "stdio") -> None:
    """Start the LSP server.

    Args:
        config_path: TOML config file; when None it is looked up from the workspace root
        transport: Transport method ("stdio" or "tcp")
    """
    server = create_server(config_path)

    if transport == "stdio":
        server.start_io()
    else:
        # TCP transport for debugging
        server.start_tcp("localhost", 2087)
