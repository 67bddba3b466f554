# topmark:header:start
#
#   project      : InjectMark
#   file         : tokens.py
#   file_relpath : src/injectmark/html/tokens.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Structural events produced by `injectmark.html.tokenizer.Tokenizer`.

Every token carries the exact source bytes it was made from, so concatenating
``token.raw`` over a whole stream reproduces the input byte for byte.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class Text:
    """Passthrough bytes: character data, comments, doctype, raw text content."""

    raw: bytes


@dataclass(frozen=True, slots=True)
class StartTag:
    """An opening tag; ``name`` is lower-cased ASCII."""

    name: str
    raw: bytes


@dataclass(frozen=True, slots=True)
class EndTag:
    """A closing tag; ``name`` is lower-cased ASCII."""

    name: str
    raw: bytes


Token = Union[Text, StartTag, EndTag]
