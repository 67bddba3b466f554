# topmark:header:start
#
#   project      : InjectMark
#   file         : __init__.py
#   file_relpath : src/injectmark/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration layer for InjectMark.

Public surface: the immutable `Config`, its `MutableConfig` builder, and the
`ClassificationRule` enumeration. TOML I/O lives in `injectmark.config.loaders`.
"""

from __future__ import annotations

from injectmark.config.model import Config, MutableConfig
from injectmark.config.types import ClassificationRule

__all__ = [
    "ClassificationRule",
    "Config",
    "MutableConfig",
]
