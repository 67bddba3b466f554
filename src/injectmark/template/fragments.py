# topmark:header:start
#
#   project      : InjectMark
#   file         : fragments.py
#   file_relpath : src/injectmark/template/fragments.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Split a resolved template into head-bound and body-bound HTML fragments.

The resolved template is parsed as an HTML fragment with BeautifulSoup's
``html.parser`` tree builder, which keeps top-level nodes as they are (no
``<html>``/``<body>`` wrapper is synthesized). Each top-level node is classified
and the two subsets are re-serialized in their original relative order.

References:
    - https://html.spec.whatwg.org/multipage/dom.html#metadata-content-2
    - https://html.spec.whatwg.org/multipage/semantics.html#allowed-in-the-body
    - https://html.spec.whatwg.org/multipage/links.html#body-ok
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from injectmark.config.logging import get_logger
from injectmark.config.types import ClassificationRule

if TYPE_CHECKING:
    from bs4.element import PageElement

    from injectmark.config.logging import InjectmarkLogger

logger: InjectmarkLogger = get_logger(__name__)

# Element names treated as metadata by `ClassificationRule.METADATA`.
METADATA_ELEMENTS: frozenset[str] = frozenset(
    {"base", "link", "meta", "noscript", "script", "style", "template", "title"}
)

# Elements that may never appear in <body> (`ClassificationRule.BODY_OK`).
HEAD_ONLY_ELEMENTS: frozenset[str] = frozenset({"base", "style", "title"})

# `rel` keywords that make a <link> body-ok.
BODY_OK_REL: frozenset[str] = frozenset(
    {
        "dns-prefetch",
        "modulepreload",
        "pingback",
        "preconnect",
        "prefetch",
        "preload",
        "stylesheet",
    }
)

# Minimal escaping (&, <, >), HTML void elements without "/>", boolean attributes bare.
_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
    empty_attributes_are_booleans=True,
)


@dataclass(frozen=True, slots=True)
class FragmentPair:
    """The two insertion payloads, shared read-only by every file pipeline.

    Attributes:
        head_html (str): Fragment inserted at the end of ``<head>``.
        body_html (str): Fragment inserted at the start of ``<body>``.
    """

    head_html: str
    body_html: str

    def encode(self, encoding: str = "utf-8") -> tuple[bytes, bytes]:
        """Return ``(head, body)`` encoded for byte-level insertion."""
        return self.head_html.encode(encoding), self.body_html.encode(encoding)


def _rel_tokens(tag: Tag) -> list[str]:
    rel = tag.get("rel")
    if rel is None:
        return []
    if isinstance(rel, str):
        return rel.split()
    return [token for value in rel for token in value.split()]


def is_head_bound(node: PageElement, rule: ClassificationRule = ClassificationRule.BODY_OK) -> bool:
    """Return True if a top-level template node must be inserted into ``<head>``.

    Text, comments and other non-element nodes are always body-bound.

    Args:
        node (PageElement): A top-level node of the parsed template.
        rule (ClassificationRule): The classification rule to apply.

    Returns:
        bool: True for head-bound nodes.
    """
    if not isinstance(node, Tag):
        return False
    name: str = (node.name or "").lower()

    if rule is ClassificationRule.METADATA:
        return name in METADATA_ELEMENTS

    if name in HEAD_ONLY_ELEMENTS:
        return True
    if name == "meta":
        return not node.has_attr("itemprop")
    if name == "link":
        if node.has_attr("itemprop"):
            return False
        # Body-ok only if every rel keyword is; an empty rel list is body-ok.
        return any(token.lower() not in BODY_OK_REL for token in _rel_tokens(node))
    return False


def serialize_node(node: PageElement) -> str:
    """Serialize one parsed node back to HTML text."""
    if isinstance(node, Tag):
        return node.decode(formatter=_FORMATTER)
    if isinstance(node, NavigableString):
        return node.output_ready(formatter=_FORMATTER)
    return str(node)


def split_fragments(
    html: str,
    rule: ClassificationRule = ClassificationRule.BODY_OK,
) -> FragmentPair:
    """Split ``html`` into head-bound and body-bound fragments.

    Args:
        html (str): The resolved (placeholder-free) template.
        rule (ClassificationRule): The classification rule to apply.

    Returns:
        FragmentPair: Head-bound nodes and body-bound nodes, each serialized in
        original relative order.
    """
    soup = BeautifulSoup(html, "html.parser")
    head: list[str] = []
    body: list[str] = []
    for node in list(soup.contents):
        target = head if is_head_bound(node, rule) else body
        target.append(serialize_node(node))
    logger.debug(
        "Split template into %d head-bound and %d body-bound node(s) (rule=%s)",
        len(head),
        len(body),
        rule.value,
    )
    return FragmentPair(head_html="".join(head), body_html="".join(body))
