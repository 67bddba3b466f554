# topmark:header:start
#
#   project      : InjectMark
#   file         : tokenizer.py
#   file_relpath : src/injectmark/html/tokenizer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Forward-only HTML tag tokenizer over byte chunks.

The tokenizer recognizes just enough of the HTML syntax to find start and end
tags reliably: comments, declarations (doctype), processing instructions and
bogus comments are passed through as `Text`, quoted attribute values may contain
``>``, and the content of raw text elements (``<script>``, ``<style>``, ...) is
never scanned for tags. Anything else is passthrough text.

Input is fed in arbitrary chunks with `Tokenizer.feed`; a token split across a
chunk boundary is held back until it is complete; while one is held back,
chunks without a ``>`` are queued rather than rescanned. `Tokenizer.close` flushes
whatever is left (an unterminated tag at end of input becomes text). Chunking only
affects how passthrough text is split into `Text` tokens: the tags found and the
concatenated bytes are the same for any chunking of the same input.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from injectmark.config.logging import get_logger
from injectmark.html.tokens import EndTag, StartTag, Text

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from injectmark.config.logging import InjectmarkLogger
    from injectmark.html.tokens import Token

logger: InjectmarkLogger = get_logger(__name__)

# Elements whose content is not markup (raw text and escapable raw text).
RAW_TEXT_ELEMENTS: frozenset[str] = frozenset(
    {"script", "style", "textarea", "title", "xmp", "iframe", "noembed", "noframes", "noscript"}
)
# Everything after <plaintext> is text.
PLAINTEXT_ELEMENT: str = "plaintext"

_GT = ord(">")
_EQ = ord("=")
_BANG = ord("!")
_QMARK = ord("?")
_SLASH = ord("/")
_DQUOTE = ord('"')
_SQUOTE = ord("'")
_WHITESPACE: frozenset[int] = frozenset(b"\t\n\f\r ")
_NAME_END: frozenset[int] = _WHITESPACE | {_SLASH, _GT}


def _is_ascii_alpha(byte: int) -> bool:
    return 0x41 <= byte <= 0x5A or 0x61 <= byte <= 0x7A


def _scan_attributes(buf: bytes, i: int) -> int:
    """Return the offset just past the ``>`` closing a tag, or -1 if not in ``buf``.

    Quotes only open a quoted value right after ``=`` (whitespace allowed in between).
    """
    n = len(buf)
    while i < n:
        byte = buf[i]
        if byte == _GT:
            return i + 1
        i += 1
        if byte != _EQ:
            continue
        while i < n and buf[i] in _WHITESPACE:
            i += 1
        if i >= n:
            return -1
        quote = buf[i]
        if quote in (_DQUOTE, _SQUOTE):
            close = buf.find(bytes((quote,)), i + 1)
            if close < 0:
                return -1
            i = close + 1
    return -1


class Tokenizer:
    """Incremental tag tokenizer.

    One instance tokenizes one stream; it must not be reused across files.
    """

    def __init__(self) -> None:
        self._buffer: bytes = b""
        # Chunks queued behind an incomplete token, not yet joined into _buffer.
        self._pending: list[bytes] = []
        # Leading bytes of a held-back token already searched for its terminator.
        self._searched: int = 0
        self._raw_end: re.Pattern[bytes] | None = None
        self._raw_holdback: int = 0
        self._plaintext: bool = False
        self._closed: bool = False

    def feed(self, data: bytes) -> list[Token]:
        """Consume ``data`` and return every token completed so far.

        Raises:
            RuntimeError: If called after `close`.
        """
        if self._closed:
            raise RuntimeError("Tokenizer.feed() called after close()")
        if self._waits_for_gt() and b">" not in data:
            self._pending.append(data)
            return []
        self._buffer = b"".join([self._buffer, *self._pending, data])
        self._pending.clear()
        return self._drain(final=False)

    def close(self) -> list[Token]:
        """Signal end of input and return the remaining tokens."""
        if self._closed:
            return []
        self._closed = True
        self._buffer = b"".join([self._buffer, *self._pending])
        self._pending.clear()
        tokens = self._drain(final=True)
        self._buffer = b""
        return tokens

    # --- internals ----------------------------------------------------------

    def _waits_for_gt(self) -> bool:
        """Whether the held-back bytes are markup that can only end at a ``>``.

        A lone ``<`` is excluded: the next byte may turn it into character data.
        """
        return self._raw_end is None and not self._plaintext and len(self._buffer) >= 2

    def _enter_raw_text(self, name: str) -> None:
        if name == PLAINTEXT_ELEMENT:
            self._plaintext = True
            return
        encoded = name.encode("ascii")
        self._raw_end = re.compile(rb"</" + re.escape(encoded) + rb"(?=[\t\n\f\r />])", re.I)
        # Enough to hold a partial "</name" plus the byte that must follow it.
        self._raw_holdback = len(encoded) + 3

    def _drain(self, *, final: bool) -> list[Token]:
        buf = self._buffer
        n = len(buf)
        pos = 0
        searched, self._searched = self._searched, 0
        out: list[Token] = []
        while pos < n:
            if self._plaintext:
                out.append(Text(buf[pos:]))
                pos = n
                break

            if self._raw_end is not None:
                match = self._raw_end.search(buf, pos)
                if match is None:
                    keep = n if final else max(pos, n - self._raw_holdback)
                    if keep > pos:
                        out.append(Text(buf[pos:keep]))
                        pos = keep
                    break
                if match.start() > pos:
                    out.append(Text(buf[pos : match.start()]))
                pos = match.start()
                self._raw_end = None
                continue

            lt = buf.find(b"<", pos)
            if lt < 0:
                out.append(Text(buf[pos:]))
                pos = n
                break
            if lt > pos:
                out.append(Text(buf[pos:lt]))
                pos = lt

            scanned = self._scan_markup(buf, pos, final=final, searched=searched if pos == 0 else 0)
            if scanned is None:
                self._searched = n - pos
                break
            token, pos = scanned
            out.append(token)
            if isinstance(token, StartTag) and (
                token.name in RAW_TEXT_ELEMENTS or token.name == PLAINTEXT_ELEMENT
            ):
                self._enter_raw_text(token.name)

        self._buffer = buf[pos:]
        if self._buffer and not final:
            logger.trace("Holding back %d byte(s) of an incomplete token", len(self._buffer))
        return out

    def _scan_markup(
        self, buf: bytes, lt: int, *, final: bool, searched: int = 0
    ) -> tuple[Token, int] | None:
        """Scan the markup starting with ``<`` at ``lt``.

        ``searched`` bytes from ``lt`` were scanned by an earlier, incomplete
        attempt; comment and declaration terminators are searched after them.

        Returns:
            tuple[Token, int] | None: The token and the offset after it, or None
            when more input is needed to decide.
        """
        n = len(buf)

        def incomplete() -> tuple[Token, int] | None:
            return (Text(buf[lt:]), n) if final else None

        if lt + 1 >= n:
            return incomplete()
        nxt = buf[lt + 1]

        if nxt == _BANG:
            if buf.startswith(b"<!--", lt):
                body = lt + 4
                if buf.startswith(b">", body):
                    return Text(buf[lt : body + 1]), body + 1
                if buf.startswith(b"->", body):
                    return Text(buf[lt : body + 2]), body + 2
                close = buf.find(b"-->", max(body, lt + searched - 2))
                if close < 0:
                    return incomplete()
                return Text(buf[lt : close + 3]), close + 3
            return self._scan_until_gt(buf, lt, max(lt + 2, lt + searched), final=final)

        if nxt == _QMARK:
            return self._scan_until_gt(buf, lt, max(lt + 2, lt + searched), final=final)

        if nxt == _SLASH:
            if lt + 2 >= n:
                return incomplete()
            first = buf[lt + 2]
            if _is_ascii_alpha(first):
                return self._scan_tag(buf, lt, lt + 2, end_tag=True, final=final)
            if first == _GT:
                return Text(buf[lt : lt + 3]), lt + 3
            return self._scan_until_gt(buf, lt, max(lt + 2, lt + searched), final=final)

        if _is_ascii_alpha(nxt):
            return self._scan_tag(buf, lt, lt + 1, end_tag=False, final=final)

        # A lone "<" is character data.
        return Text(buf[lt : lt + 1]), lt + 1

    @staticmethod
    def _scan_until_gt(
        buf: bytes, lt: int, start: int, *, final: bool
    ) -> tuple[Token, int] | None:
        close = buf.find(b">", start)
        if close < 0:
            return (Text(buf[lt:]), len(buf)) if final else None
        return Text(buf[lt : close + 1]), close + 1

    @staticmethod
    def _scan_tag(
        buf: bytes, lt: int, name_start: int, *, end_tag: bool, final: bool
    ) -> tuple[Token, int] | None:
        n = len(buf)
        i = name_start
        while i < n and buf[i] not in _NAME_END:
            i += 1
        end = _scan_attributes(buf, i) if i < n else -1
        if end < 0:
            return (Text(buf[lt:]), n) if final else None
        name = buf[name_start:i].lower().decode("utf-8", "replace")
        raw = buf[lt:end]
        if end_tag:
            return EndTag(name=name, raw=raw), end
        return StartTag(name=name, raw=raw), end


def iter_tokens(chunks: Iterable[bytes]) -> Iterator[Token]:
    """Tokenize an iterable of byte chunks.

    Yields:
        Token: Tokens in document order.
    """
    tokenizer = Tokenizer()
    for chunk in chunks:
        yield from tokenizer.feed(chunk)
    yield from tokenizer.close()
