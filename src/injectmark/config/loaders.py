# topmark:header:start
#
#   project      : InjectMark
#   file         : loaders.py
#   file_relpath : src/injectmark/config/loaders.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Load TOML configuration sources.

This module provides I/O helpers for reading InjectMark configuration from
on-disk TOML files (``injectmark.toml`` / ``pyproject.toml``) and typed getters
that validate individual values.

Parsing is done with `tomlkit` and returned as plain `dict` structures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from injectmark.config.logging import get_logger
from injectmark.constants import (
    DEFAULT_TOML_CONFIG_NAME,
    PYPROJECT_TOML_NAME,
    PYPROJECT_TOOL_SECTION,
)
from injectmark.errors import ConfigError

if TYPE_CHECKING:
    from pathlib import Path

    from injectmark.config.logging import InjectmarkLogger

TomlTable = dict[str, Any]

logger: InjectmarkLogger = get_logger(__name__)


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Args:
        path (Path): Path to a TOML document.

    Returns:
        TomlTable: The parsed TOML content.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
    except OSError as exc:
        raise ConfigError(f"cannot read config: {exc.strerror or exc}", path=path) from exc
    except TomlkitParseError as exc:
        raise ConfigError(f"invalid TOML: {exc}", path=path) from exc
    data_any: Any = doc.unwrap()
    return cast("TomlTable", data_any) if isinstance(data_any, dict) else {}


def extract_tool_section(data: TomlTable) -> TomlTable | None:
    """Return the ``[tool.injectmark]`` table of a parsed ``pyproject.toml``.

    Returns:
        TomlTable | None: The table, or None when the section is absent.
    """
    tool: Any = data.get("tool")
    if not isinstance(tool, dict):
        return None
    section: Any = cast("TomlTable", tool).get(PYPROJECT_TOOL_SECTION)
    return cast("TomlTable", section) if isinstance(section, dict) else None


def discover_config_files(start: Path) -> list[Path]:
    """Return config files found in ``start``, lowest precedence first.

    ``pyproject.toml`` is only returned when it carries a ``[tool.injectmark]``
    table; ``injectmark.toml`` always wins over it when both exist.

    Args:
        start (Path): Directory to inspect (usually the current working directory).

    Returns:
        list[Path]: Existing config files in merge order.
    """
    found: list[Path] = []
    pyproject: Path = start / PYPROJECT_TOML_NAME
    if pyproject.is_file():
        try:
            has_section = extract_tool_section(load_toml_dict(pyproject)) is not None
        except ConfigError as exc:
            # Discovery only: an unreadable pyproject.toml is skipped.
            logger.warning("Ignoring %s: %s", pyproject, exc)
            has_section = False
        if has_section:
            found.append(pyproject)
    local: Path = start / DEFAULT_TOML_CONFIG_NAME
    if local.is_file():
        found.append(local)
    logger.debug("Discovered config files in %s: %s", start, found)
    return found


# --- Checked getters -------------------------------------------------------


def get_bool_or_none(table: TomlTable, key: str, *, path: Path | None) -> bool | None:
    """Return ``table[key]`` as a bool, or None when absent.

    Raises:
        ConfigError: If the value is present but not a boolean.
    """
    value: Any = table.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    raise ConfigError(f"'{key}' must be a boolean, got {value!r}", path=path)


def get_positive_int_or_none(table: TomlTable, key: str, *, path: Path | None) -> int | None:
    """Return ``table[key]`` as a positive int, or None when absent.

    Raises:
        ConfigError: If the value is present but not an integer greater than zero.
    """
    value: Any = table.get(key)
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    raise ConfigError(f"'{key}' must be a positive integer, got {value!r}", path=path)


def get_string_or_none(table: TomlTable, key: str, *, path: Path | None) -> str | None:
    """Return ``table[key]`` as a non-empty string, or None when absent.

    Raises:
        ConfigError: If the value is present but not a non-empty string.
    """
    value: Any = table.get(key)
    if value is None:
        return None
    if isinstance(value, str) and value:
        return value
    raise ConfigError(f"'{key}' must be a non-empty string, got {value!r}", path=path)
