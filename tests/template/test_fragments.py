# topmark:header:start
#
#   project      : InjectMark
#   file         : test_fragments.py
#   file_relpath : tests/template/test_fragments.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Unit tests for head/body fragment classification."""

from __future__ import annotations

import pytest

from injectmark.config.types import ClassificationRule
from injectmark.errors import TemplateError
from injectmark.template import resolve_template
from injectmark.template.fragments import FragmentPair, split_fragments
from tests.conftest import parametrize


def test_style_goes_to_head_div_to_body() -> None:
    """``<style>`` is head-bound and ``<div>`` is body-bound."""
    pair = split_fragments("<style>p{}</style><div>x</div>")
    assert pair == FragmentPair(head_html="<style>p{}</style>", body_html="<div>x</div>")


def test_relative_order_is_kept() -> None:
    """Each subset keeps the original order of its nodes."""
    pair = split_fragments('<title>a</title><p>1</p><meta name="b" content="c"><p>2</p>')
    assert pair.head_html == '<title>a</title><meta name="b" content="c">'
    assert pair.body_html == "<p>1</p><p>2</p>"


@parametrize(
    ("html", "head_bound"),
    [
        ("<base href=\"/\">", True),
        ("<title>t</title>", True),
        ("<style></style>", True),
        ("<meta charset=\"utf-8\">", True),
        ("<meta itemprop=\"name\" content=\"x\">", False),
        ("<link rel=\"icon\" href=\"/f.ico\">", True),
        ("<link rel=\"stylesheet\" href=\"a.css\">", False),
        ("<link rel=\"preload stylesheet\" href=\"a.css\">", False),
        ("<link rel=\"stylesheet icon\" href=\"a.css\">", True),
        ("<link itemprop=\"url\" href=\"/\">", False),
        ("<link href=\"/\">", False),
        ("<script src=\"a.js\"></script>", False),
        ("<noscript>n</noscript>", False),
        ("<template><p></p></template>", False),
        ("<div></div>", False),
    ],
)
def test_body_ok_rule(html: str, head_bound: bool) -> None:
    """The body-ok rule moves only elements that may not appear in ``<body>``."""
    pair = split_fragments(html, ClassificationRule.BODY_OK)
    assert (pair.head_html == html) is head_bound
    assert (pair.body_html == html) is not head_bound


@parametrize(
    ("html", "head_bound"),
    [
        ("<script src=\"a.js\"></script>", True),
        ("<noscript>n</noscript>", True),
        ("<link rel=\"stylesheet\" href=\"a.css\">", True),
        ("<meta itemprop=\"name\" content=\"x\">", True),
        ("<template></template>", True),
        ("<div></div>", False),
    ],
)
def test_metadata_rule(html: str, head_bound: bool) -> None:
    """The metadata rule moves every metadata element by name."""
    pair = split_fragments(html, ClassificationRule.METADATA)
    assert (pair.head_html == html) is head_bound


def test_text_and_comments_are_body_bound() -> None:
    """Non-element top-level nodes go to the body fragment."""
    pair = split_fragments("<!--c--><style></style>hello")
    assert pair.head_html == "<style></style>"
    assert pair.body_html == "<!--c-->hello"


def test_serialization_keeps_html_syntax() -> None:
    """Void elements have no ``/>`` and boolean attributes stay bare."""
    pair = split_fragments("<meta x><div hidden><img src=\"a.png\"></div>")
    assert pair.head_html == "<meta x>"
    assert pair.body_html == '<div hidden><img src="a.png"></div>'


def test_empty_template() -> None:
    """An empty template yields two empty fragments."""
    assert split_fragments("") == FragmentPair(head_html="", body_html="")


def test_encode() -> None:
    """Fragments are encoded once, as UTF-8."""
    assert FragmentPair("<title>é</title>", "<p>ü</p>").encode() == (
        "<title>é</title>".encode(),
        "<p>ü</p>".encode(),
    )


def test_resolve_template_end_to_end() -> None:
    """Substitution happens before classification."""
    pair = resolve_template(
        "<style>{{css}}</style><div>{{msg}}</div>", {"css": "p{}", "msg": "hi"}
    )
    assert pair == FragmentPair("<style>p{}</style>", "<div>hi</div>")


def test_resolve_template_uses_rule() -> None:
    """The classification rule is forwarded to the splitter."""
    pair = resolve_template(
        "<script>{{js}}</script>", {"js": "1"}, rule=ClassificationRule.METADATA
    )
    assert pair.head_html == "<script>1</script>"


def test_resolve_template_strict() -> None:
    """Strict mode is forwarded to substitution."""
    with pytest.raises(TemplateError):
        resolve_template("{{nope}}", {}, strict=True)
