# topmark:header:start
#
#   project      : InjectMark
#   file         : options.py
#   file_relpath : src/injectmark/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Common CLI option utilities.

This module centralizes reusable options (verbosity, color, config sources)
and their resolution logic, so the command itself can stay thin.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from typing import Callable, ParamSpec, TypeVar

import click

from injectmark.cli.errors import InjectmarkUsageError
from injectmark.config.logging import get_logger

P = ParamSpec("P")
R = TypeVar("R")

logger = get_logger(__name__)


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Resolve program-output verbosity from the ``-v`` and ``-q`` counts.

    Args:
        verbose_count (int): Number of times ``-v`` was passed.
        quiet_count (int): Number of times ``-q`` was passed.

    Returns:
        int: ``0`` for the default summary, ``1`` or more for per-file details,
        ``-1`` when quiet (errors only).

    Raises:
        InjectmarkUsageError: If both flags are used together.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise InjectmarkUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")
    if quiet_count > 0:
        return -1
    return verbose_count


def common_verbose_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``-v/--verbose`` and ``-q/--quiet`` counting options to a command."""
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase output detail. Specify twice to also list config sources.",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Only print errors.",
    )(f)
    return f


class ColorMode(str, Enum):
    """User intent for colorized terminal output."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def resolve_color_mode(
    *,
    cli_mode: ColorMode | None,
    stdout_isatty: bool | None = None,
) -> bool:
    """Determine whether color output should be enabled.

    Decision precedence:
        1. ``--color=always`` / ``--color=never`` (``--no-color`` means never).
        2. ``FORCE_COLOR`` (set and not ``"0"``) enables, ``NO_COLOR`` disables.
        3. Otherwise, color only when stdout is a TTY.

    Args:
        cli_mode (ColorMode | None): Explicit color mode from the CLI.
        stdout_isatty (bool | None): TTY override; auto-detected when None.

    Returns:
        bool: True if ANSI color should be enabled.
    """
    if cli_mode == ColorMode.ALWAYS:
        return True
    if cli_mode == ColorMode.NEVER:
        return False
    force_color = os.getenv("FORCE_COLOR")
    if force_color and force_color != "0":
        return True
    if os.getenv("NO_COLOR") is not None:
        return False
    if stdout_isatty is None:
        try:
            stdout_isatty = sys.stdout.isatty()
        except (AttributeError, OSError, ValueError):
            stdout_isatty = False
    return bool(stdout_isatty)


def common_color_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--color`` (auto, always, never) and ``--no-color`` to a command."""
    f = click.option(
        "--color",
        "color_mode",
        type=click.Choice([m.value for m in ColorMode]),
        default=None,
        help="Color output: auto (default), always, or never.",
    )(f)
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output (equivalent to --color=never).",
    )(f)
    return f


def common_config_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--no-config`` and the repeatable ``--config`` to a command."""
    f = click.option(
        "--no-config",
        "no_config",
        is_flag=True,
        help="Ignore pyproject.toml and injectmark.toml in the working directory.",
    )(f)
    f = click.option(
        "--config",
        "config_paths",
        multiple=True,
        metavar="FILE",
        type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True),
        help="Additional config file(s) to load and merge (in order).",
    )(f)
    return f
