# topmark:header:start
#
#   project      : InjectMark
#   file         : sources.py
#   file_relpath : src/injectmark/sources.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Readers for the template and data sources.

Both sources are UTF-8 text files. The data source must hold a single JSON
object whose keys are placeholder identifiers.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from injectmark.config.logging import get_logger
from injectmark.errors import DataSourceError, SourceError

if TYPE_CHECKING:
    from injectmark.config.logging import InjectmarkLogger

logger: InjectmarkLogger = get_logger(__name__)


def _read_text(path: Path, error: type[SourceError]) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise error(f"not valid UTF-8 ({exc.reason} at byte {exc.start})", path=path) from exc
    except OSError as exc:
        raise error(exc.strerror or str(exc), path=path) from exc


def read_template(path: Path | str) -> str:
    """Read the template source.

    Args:
        path (Path | str): Template file.

    Returns:
        str: The template text.

    Raises:
        SourceError: If the file cannot be read or is not valid UTF-8.
    """
    path = Path(path)
    text: str = _read_text(path, SourceError)
    logger.debug("Read template %s (%d chars)", path, len(text))
    return text


def parse_data(text: str, *, path: Path) -> dict[str, Any]:
    """Parse the data source text into a flat mapping.

    Raises:
        DataSourceError: If ``text`` is not JSON or its top level is not an object.
    """
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataSourceError(
            f"invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})", path=path
        ) from exc
    if not isinstance(data, dict):
        raise DataSourceError(
            f"expected a JSON object, got {type(data).__name__}", path=path
        )
    return data


def read_data(path: Path | str) -> dict[str, Any]:
    """Read the data source.

    Args:
        path (Path | str): JSON file holding one object.

    Returns:
        dict[str, Any]: Identifier-to-value mapping.

    Raises:
        DataSourceError: If the file cannot be read, is not JSON, or is not an object.
    """
    path = Path(path)
    data: dict[str, Any] = parse_data(_read_text(path, DataSourceError), path=path)
    logger.debug("Read %d data value(s) from %s", len(data), path)
    return data
