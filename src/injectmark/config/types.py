# topmark:header:start
#
#   project      : InjectMark
#   file         : types.py
#   file_relpath : src/injectmark/config/types.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Enumerations shared by the configuration layer and the fragment resolver."""

from __future__ import annotations

from enum import Enum


class ClassificationRule(str, Enum):
    """Rule deciding whether a top-level template node goes to ``<head>`` or ``<body>``.

    Attributes:
        BODY_OK: Only elements that are not allowed in ``<body>`` are head-bound
            (``base``, ``style``, ``title``, ``meta`` without ``itemprop``, and
            ``link`` with a ``rel`` token outside the body-ok list).
        METADATA: Every metadata element name is head-bound, regardless of attributes.
    """

    BODY_OK = "body-ok"
    METADATA = "metadata"

    @classmethod
    def parse(cls, value: str) -> ClassificationRule:
        """Return the member whose value matches ``value`` (case-insensitive).

        Raises:
            ValueError: If ``value`` names no known rule.
        """
        needle = value.strip().lower()
        for member in cls:
            if member.value == needle:
                return member
        choices = ", ".join(m.value for m in cls)
        raise ValueError(f"unknown classification rule {value!r} (expected one of: {choices})")
