# topmark:header:start
#
#   project      : InjectMark
#   file         : __main__.py
#   file_relpath : src/injectmark/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running InjectMark via ``python -m injectmark``.

It delegates directly to :func:`injectmark.cli.main.cli`, so the module form and
the ``injectmark`` console script behave identically.

Examples:
    Insert a banner into every page of a built site::

        python -m injectmark banner.html banner.json site/*.html
"""

from __future__ import annotations

from injectmark.cli.main import cli

if __name__ == "__main__":
    cli()
