# topmark:header:start
#
#   project      : InjectMark
#   file         : insertion.py
#   file_relpath : src/injectmark/html/insertion.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Insertion state machine placing the head and body fragments in a token stream.

The machine mirrors the first few HTML parser insertion modes, which is enough
to find the end of ``<head>`` and the start of ``<body>`` whether or not the
document spells out ``<html>``, ``<head>`` and ``<body>``:

- BEFORE_HTML, ``<html>``: emit the tag, go to BEFORE_HEAD. Any other start tag
  in BEFORE_HTML is handled as in BEFORE_HEAD.
- BEFORE_HEAD or IN_HEAD, start tag in `STAY_IN_HEAD`: emit the tag, go to IN_HEAD.
- BEFORE_HEAD or IN_HEAD, other start tag: emit head, then body and the tag
  (``<body>`` itself goes before the body fragment), go to DONE.
- AFTER_HEAD, start tag not in `STAY_IN_HEAD`: emit body and the tag (same
  ``<body>`` rule), go to DONE.
- ``</head>`` before AFTER_HEAD: emit head, then the end tag, go to AFTER_HEAD.
- DONE: every token passes through unchanged.

`FragmentInserter.finish` places whatever is still pending at end of stream
(head first), so each fragment lands exactly once per document.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from injectmark.html.tokenizer import Tokenizer
from injectmark.html.tokens import EndTag, StartTag

if TYPE_CHECKING:
    from injectmark.html.tokens import Token

# Start tags that keep the parser in (or move it into) the head.
STAY_IN_HEAD: frozenset[str] = frozenset(
    {
        "base",
        "basefont",
        "bgsound",
        "link",
        "meta",
        "title",
        "noscript",
        "noframes",
        "style",
        "script",
        "template",
        "head",
    }
)


class InsertionMode(Enum):
    """How much of the (possibly implied) document structure has been seen."""

    BEFORE_HTML = "before-html"
    BEFORE_HEAD = "before-head"
    IN_HEAD = "in-head"
    AFTER_HEAD = "after-head"
    DONE = "done"


class FragmentInserter:
    """Per-document state machine that rewrites a token stream.

    Create one instance per document: the mode is the only mutable state and it
    never goes back once `InsertionMode.DONE` is reached.

    Args:
        head (bytes): Fragment placed just before the end of ``<head>``.
        body (bytes): Fragment placed at the start of ``<body>``.

    Attributes:
        mode (InsertionMode): Current insertion mode.
        inserted_at_eof (bool): True when `finish` had to place pending fragments.
    """

    def __init__(self, head: bytes, body: bytes) -> None:
        self._head = head
        self._body = body
        self.mode: InsertionMode = InsertionMode.BEFORE_HTML
        self.inserted_at_eof: bool = False

    @property
    def done(self) -> bool:
        """Whether both fragments have been emitted."""
        return self.mode is InsertionMode.DONE

    def process(self, token: Token) -> bytes:
        """Return the bytes to emit for ``token`` (the token itself, maybe with fragments)."""
        if self.mode is InsertionMode.DONE:
            return token.raw
        if isinstance(token, StartTag):
            return self._start_tag(token)
        if isinstance(token, EndTag):
            return self._end_tag(token)
        return token.raw

    def finish(self) -> bytes:
        """Return the fragments still pending at end of stream (possibly nothing)."""
        if self.mode is InsertionMode.DONE:
            return b""
        pending = self._body if self.mode is InsertionMode.AFTER_HEAD else self._head + self._body
        self.mode = InsertionMode.DONE
        self.inserted_at_eof = True
        return pending

    def _start_tag(self, tag: StartTag) -> bytes:
        if self.mode is InsertionMode.BEFORE_HTML:
            if tag.name == "html":
                self.mode = InsertionMode.BEFORE_HEAD
                return tag.raw
            # No <html>: the tag is handled as if <html> had been implied.
            self.mode = InsertionMode.BEFORE_HEAD

        if tag.name in STAY_IN_HEAD:
            if self.mode is not InsertionMode.AFTER_HEAD:
                self.mode = InsertionMode.IN_HEAD
            return tag.raw

        parts: list[bytes] = []
        if self.mode is not InsertionMode.AFTER_HEAD:
            parts.append(self._head)
        if tag.name == "body":
            parts += [tag.raw, self._body]
        else:
            parts += [self._body, tag.raw]
        self.mode = InsertionMode.DONE
        return b"".join(parts)

    def _end_tag(self, tag: EndTag) -> bytes:
        if tag.name == "head" and self.mode is not InsertionMode.AFTER_HEAD:
            self.mode = InsertionMode.AFTER_HEAD
            return self._head + tag.raw
        return tag.raw


def rewrite_bytes(data: bytes, head: bytes, body: bytes) -> bytes:
    """Rewrite a whole in-memory document in one pass.

    Args:
        data (bytes): The source document.
        head (bytes): Head fragment.
        body (bytes): Body fragment.

    Returns:
        bytes: The document with both fragments inserted exactly once.
    """
    tokenizer = Tokenizer()
    inserter = FragmentInserter(head, body)
    out: list[bytes] = [inserter.process(token) for token in tokenizer.feed(data)]
    out.extend(inserter.process(token) for token in tokenizer.close())
    out.append(inserter.finish())
    return b"".join(out)
