# topmark:header:start
#
#   project      : InjectMark
#   file         : placeholders.py
#   file_relpath : src/injectmark/template/placeholders.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Placeholder scanning and substitution for ``{{identifier}}`` templates.

A span starts at ``{{`` and ends at the first of:

- the next ``}}`` (inclusive): the span is well-formed when its content is an
  identifier, malformed otherwise;
- the next ``{{`` (exclusive): the span is malformed (never closed);
- the end of the template: the span is malformed (never closed).

Identifiers follow Unicode identifier rules (``str.isidentifier``) and may also
contain ``$``. Every problem of a template is collected and raised together as
a single `TemplateError`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING

from injectmark.config.logging import get_logger
from injectmark.constants import PLACEHOLDER_ELLIPSIS, PLACEHOLDER_PREVIEW_WIDTH
from injectmark.errors import (
    MalformedPlaceholderError,
    PlaceholderError,
    TemplateError,
    UndefinedPlaceholderError,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from injectmark.config.logging import InjectmarkLogger

logger: InjectmarkLogger = get_logger(__name__)

OPEN: str = "{{"
CLOSE: str = "}}"


@dataclass(frozen=True, slots=True)
class PlaceholderSpan:
    """One ``{{...}}`` occurrence in a template.

    Attributes:
        start (int): Offset of the opening ``{{``.
        end (int): Offset just past the span.
        text (str): The span's source text, delimiters included.
        name (str | None): The identifier, or None when the span is malformed.
    """

    start: int
    end: int
    text: str
    name: str | None

    @property
    def malformed(self) -> bool:
        """Whether the span holds no valid identifier."""
        return self.name is None


def is_identifier(text: str) -> bool:
    """Return True if ``text`` is a placeholder identifier (``$`` allowed anywhere)."""
    return bool(text) and text.replace("$", "_").isidentifier()


def iter_placeholders(template: str) -> Iterator[PlaceholderSpan]:
    """Yield every placeholder span of ``template`` from left to right.

    Args:
        template (str): The template text.

    Yields:
        PlaceholderSpan: Well-formed and malformed spans in source order.
    """
    pos = 0
    while True:
        start: int = template.find(OPEN, pos)
        if start < 0:
            return
        body: int = start + len(OPEN)
        close: int = template.find(CLOSE, body)
        reopen: int = template.find(OPEN, body)
        name: str | None = None
        if close >= 0 and (reopen < 0 or close < reopen):
            end = close + len(CLOSE)
            content = template[body:close]
            if is_identifier(content):
                name = content
        elif reopen >= 0:
            end = reopen
        else:
            end = len(template)
        yield PlaceholderSpan(start=start, end=end, text=template[start:end], name=name)
        pos = end


def truncate_preview(text: str) -> str:
    """Return a short, single-line preview of a malformed span.

    The preview keeps at most `PLACEHOLDER_PREVIEW_WIDTH` characters of the first
    line and appends an ellipsis whenever anything was cut (extra characters or
    further lines).
    """
    first, newline, _rest = text.partition("\n")
    if len(first) > PLACEHOLDER_PREVIEW_WIDTH:
        return first[:PLACEHOLDER_PREVIEW_WIDTH] + PLACEHOLDER_ELLIPSIS
    if newline:
        return first + PLACEHOLDER_ELLIPSIS
    return first


def render_value(value: object) -> str:
    """Render a data value for substitution; non-strings are JSON-encoded."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def substitute_placeholders(
    template: str,
    data: Mapping[str, object],
    *,
    strict: bool = False,
) -> str:
    """Replace every ``{{identifier}}`` of ``template`` with its value from ``data``.

    Args:
        template (str): The template text.
        data (Mapping[str, object]): Flat identifier-to-value mapping (read-only).
        strict (bool): If True, identifiers missing from ``data`` are errors;
            otherwise they are replaced with the empty string.

    Returns:
        str: The substituted text.

    Raises:
        TemplateError: If any span is malformed, or (strict) undefined. The error
            lists every problem found in the template.
    """
    pieces: list[str] = []
    errors: list[PlaceholderError] = []
    last = 0
    for span in iter_placeholders(template):
        pieces.append(template[last : span.start])
        last = span.end
        if span.name is None:
            errors.append(MalformedPlaceholderError(truncate_preview(span.text), offset=span.start))
        elif span.name in data:
            pieces.append(render_value(data[span.name]))
        elif strict:
            errors.append(UndefinedPlaceholderError(span.name, offset=span.start))
        else:
            logger.warning("No data for %s at index %d; using empty string", span.text, span.start)
    pieces.append(template[last:])

    if errors:
        logger.debug("Template has %d placeholder error(s)", len(errors))
        raise TemplateError(errors)
    return "".join(pieces)
