from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ..errors import ConfigurationError
from .setup import ConfigureFn, RuleSetup

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".mdlint.toml"


def _read_toml(path: Path) -> dict[str, Any]:
    import tomllib

    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"{path}: {e}") from e


def load_settings(path: Path) -> dict[str, ConfigureFn]:
    """
    Load per-rule settings from TOML.

    Either a dedicated ``.mdlint.toml`` or a ``pyproject.toml`` with a
    ``[tool.mdlint]`` table. Each ``[rules.<name>]`` table becomes one
    configuration closure; a bare boolean (``no-empty-links = false``) is
    shorthand for ``enabled``. Values are checked when the engine is built.
    """
    data = _read_toml(path)
    if path.name == "pyproject.toml":
        data = data.get("tool", {}).get("mdlint", {})
    return settings_from_dict(data)


def settings_from_dict(data: dict[str, Any]) -> dict[str, ConfigureFn]:
    unknown = sorted(set(data) - {"rules"})
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {', '.join(unknown)} (rule settings go under [rules.<name>])"
        )

    rules = data.get("rules", {})
    if not isinstance(rules, dict):
        raise ConfigurationError("'rules' must be a table of rule names")

    settings: dict[str, ConfigureFn] = {}
    for name, table in rules.items():
        if isinstance(table, bool):
            table = {"enabled": table}
        if not isinstance(table, dict):
            raise ConfigurationError(f"Settings for rule '{name}' must be a table or a boolean")
        settings[name] = _configure_from_table(dict(table))
    return settings


def _configure_from_table(table: dict[str, Any]) -> ConfigureFn:
    def configure(setup: RuleSetup) -> None:
        for key, value in table.items():
            setup.set(key, value)

    return configure


def find_config(start: Path) -> Path | None:
    """Find the nearest ``.mdlint.toml`` or ``pyproject.toml`` with ``[tool.mdlint]``."""
    cur = start.resolve()
    if cur.is_file():
        cur = cur.parent
    for directory in (cur, *cur.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            logger.debug("Using config %s", candidate)
            return candidate
        pyproject = directory / "pyproject.toml"
        if pyproject.is_file() and _has_mdlint_table(pyproject):
            logger.debug("Using config %s", pyproject)
            return pyproject
    return None


def _has_mdlint_table(pyproject: Path) -> bool:
    try:
        data = _read_toml(pyproject)
    except ConfigurationError as e:
        logger.warning("Skipping unreadable %s", e)
        return False
    return "mdlint" in data.get("tool", {})
