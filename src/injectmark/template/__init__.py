# topmark:header:start
#
#   project      : InjectMark
#   file         : __init__.py
#   file_relpath : src/injectmark/template/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Fragment resolution: placeholder substitution followed by head/body classification."""

from __future__ import annotations

from typing import TYPE_CHECKING

from injectmark.config.types import ClassificationRule
from injectmark.template.fragments import FragmentPair, split_fragments
from injectmark.template.placeholders import substitute_placeholders

if TYPE_CHECKING:
    from collections.abc import Mapping


def resolve_template(
    template: str,
    data: Mapping[str, object],
    *,
    strict: bool = False,
    rule: ClassificationRule = ClassificationRule.BODY_OK,
) -> FragmentPair:
    """Resolve ``template`` against ``data`` and split it into a `FragmentPair`.

    Args:
        template (str): Template text with ``{{identifier}}`` placeholders.
        data (Mapping[str, object]): Flat identifier-to-value mapping.
        strict (bool): If True, placeholders missing from ``data`` are errors.
        rule (ClassificationRule): Head/body classification rule.

    Returns:
        FragmentPair: The head-bound and body-bound HTML fragments.

    Raises:
        TemplateError: If the template has malformed (or, when strict, undefined)
            placeholders.
    """
    return split_fragments(substitute_placeholders(template, data, strict=strict), rule)


__all__ = [
    "FragmentPair",
    "resolve_template",
]
