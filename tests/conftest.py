"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from mdlint.document import Document
from mdlint.engine import Engine
from mdlint.rules import default_rules


@pytest.fixture
def fixtures_path() -> Path:
    """Directory holding the markdown fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_document(fixtures_path: Path) -> Document:
    """A document with at least one violation for every built-in rule."""
    path = fixtures_path / "sample.md"
    return Document.parse(path.read_text(encoding="utf-8"), path=path)


@pytest.fixture
def clean_document(fixtures_path: Path) -> Document:
    """A document no built-in rule complains about."""
    path = fixtures_path / "clean.md"
    return Document.parse(path.read_text(encoding="utf-8"), path=path)


@pytest.fixture
def engine() -> Engine:
    """Engine running every built-in rule with its defaults."""
    return Engine(default_rules())


@pytest.fixture
def wide_terminal(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep rich from wrapping output lines in assertions."""
    monkeypatch.setenv("COLUMNS", "200")
