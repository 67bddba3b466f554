# topmark:header:start
#
#   project      : InjectMark
#   file         : errors.py
#   file_relpath : src/injectmark/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the InjectMark CLI.

Usage:
    Core exceptions (`injectmark.errors`) are translated into these at the CLI
    boundary; Click then prints them and exits with their ``exit_code``.

Styling:
    Exceptions prefer the project console if available (see `show()`); if no console
    is present in the Click context, they fall back to Click's default styling.
"""

from __future__ import annotations

from typing import IO, Any

import click

from injectmark.cli.exit_codes import ExitCode


class InjectmarkCliError(click.ClickException):
    """Base class for all InjectMark CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text (colorized later by `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:
        """Display the error using the project console if available.

        Multi-line messages (aggregated errors) are printed one line at a time.
        Falls back to Click's default error display when no console is present.
        """
        ctx = click.get_current_context(silent=True)
        console = None
        if ctx is not None and isinstance(getattr(ctx, "obj", None), dict):
            console = ctx.obj.get("console")
        if console is None:
            super().show(file)
            return
        for line in self.format_message().splitlines():
            console.error(console.styled(line, fg="bright_red"))


class InjectmarkUsageError(InjectmarkCliError):
    """Error for command-line invocation errors (invalid flags/args)."""

    exit_code = ExitCode.USAGE_ERROR


class InjectmarkConfigError(InjectmarkCliError):
    """Error for invalid configuration files."""

    exit_code = ExitCode.CONFIG_ERROR
