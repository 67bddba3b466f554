# topmark:header:start
#
#   project      : InjectMark
#   file         : __init__.py
#   file_relpath : src/injectmark/html/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Streaming HTML rewriting: a forward-only tag tokenizer and the insertion state machine."""

from __future__ import annotations

from injectmark.html.insertion import FragmentInserter, InsertionMode, rewrite_bytes
from injectmark.html.tokenizer import Tokenizer
from injectmark.html.tokens import EndTag, StartTag, Text, Token

__all__ = [
    "EndTag",
    "FragmentInserter",
    "InsertionMode",
    "StartTag",
    "Text",
    "Token",
    "Tokenizer",
    "rewrite_bytes",
]
