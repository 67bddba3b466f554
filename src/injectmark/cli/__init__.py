# topmark:header:start
#
#   project      : InjectMark
#   file         : __init__.py
#   file_relpath : src/injectmark/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click-based command line interface for InjectMark."""
