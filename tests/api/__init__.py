# topmark:header:start
#
#   project      : InjectMark
#   file         : __init__.py
#   file_relpath : tests/api/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end
