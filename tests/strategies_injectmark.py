# topmark:header:start
#
#   project      : InjectMark
#   file         : strategies_injectmark.py
#   file_relpath : tests/strategies_injectmark.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

# pyright: strict

"""Hypothesis strategies for generating HTML-like documents and chunkings.

The documents are assembled from a small vocabulary of markup pieces (tags with
tricky attribute values, comments, doctypes, raw text elements, stray ``<``) so
property tests explore the tokenizer's edge cases without drowning in noise.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from hypothesis import strategies as st

Draw = Callable[[st.SearchStrategy[Any]], Any]

TAG_NAMES: tuple[str, ...] = (
    "html",
    "head",
    "body",
    "meta",
    "link",
    "title",
    "div",
    "p",
    "span",
    "img",
)

RAW_TEXT_NAMES: tuple[str, ...] = ("script", "style", "textarea", "title")

TEXT_ALPHABET = st.characters(
    blacklist_categories=("Cs",),
    blacklist_characters="<>",
)


@st.composite
def attribute(draw: Draw) -> str:
    """A single attribute: bare, unquoted, or quoted with ``>`` and the other quote inside."""
    name: str = draw(st.sampled_from(("id", "class", "data-x", "title", "content")))
    form: str = draw(st.sampled_from(("bare", "unquoted", "double", "single")))
    if form == "bare":
        return name
    if form == "unquoted":
        return f"{name}={draw(st.from_regex(r'[a-z0-9]{1,6}', fullmatch=True))}"
    value: str = draw(st.sampled_from(("a>b", "x", "it's", 'say "hi"', "", "</head>")))
    if form == "double":
        return f'{name}="{value.replace(chr(34), "")}"'
    return f"{name}='{value.replace(chr(39), '')}'"


@st.composite
def start_tag(draw: Draw) -> str:
    name: str = draw(st.sampled_from(TAG_NAMES))
    if draw(st.booleans()):
        name = name.upper()
    attrs: list[str] = draw(st.lists(attribute(), max_size=3))
    tail: str = draw(st.sampled_from(("", "/", " ")))
    return "<" + " ".join([name, *attrs]) + tail + ">"


@st.composite
def end_tag(draw: Draw) -> str:
    name: str = draw(st.sampled_from(TAG_NAMES))
    return f"</{name}>"


@st.composite
def raw_text_element(draw: Draw) -> str:
    """A raw text element whose content contains markup-looking text."""
    name: str = draw(st.sampled_from(RAW_TEXT_NAMES))
    inner: str = draw(st.sampled_from(("", "<p>", "a</b>c", "</head><body>", f"</{name}x>")))
    return f"<{name}>{inner}</{name}>"


def markup_piece() -> st.SearchStrategy[str]:
    """One piece of a document."""
    return st.one_of(
        start_tag(),
        end_tag(),
        raw_text_element(),
        st.text(TEXT_ALPHABET, max_size=12),
        st.sampled_from(
            (
                "<!DOCTYPE html>",
                "<!-- c -->",
                "<!-- <head> -->",
                "<!---->",
                "<?xml x?>",
                "<",
                "a < b",
                "</>",
                "<!>",
            )
        ),
    )


def html_documents(max_pieces: int = 20) -> st.SearchStrategy[str]:
    """Documents made of up to ``max_pieces`` markup pieces."""
    return st.lists(markup_piece(), max_size=max_pieces).map("".join)


@st.composite
def chunked(draw: Draw, data: bytes) -> list[bytes]:
    """Split ``data`` at random cut points (possibly empty chunks)."""
    cuts: list[int] = sorted(
        draw(st.lists(st.integers(min_value=0, max_value=len(data)), max_size=8))
    )
    bounds: list[int] = [0, *cuts, len(data)]
    return [data[a:b] for a, b in zip(bounds, bounds[1:])]
