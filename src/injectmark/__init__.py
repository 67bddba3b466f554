# topmark:header:start
#
#   project      : InjectMark
#   file         : __init__.py
#   file_relpath : src/injectmark/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""InjectMark package.

InjectMark inserts a rendered HTML fragment (typically a "generated file, do not
edit" banner with its styles and scripts) into existing HTML files. It streams
each file through a small tag tokenizer and an insertion state machine instead
of re-serializing a DOM, and commits every rewrite atomically.
"""

from __future__ import annotations
