# topmark:header:start
#
#   project      : InjectMark
#   file         : conftest.py
#   file_relpath : tests/cli/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI test helpers for running InjectMark in a controlled working directory.

`run_cli_in()` changes the process working directory to the given `tmp_path`
before invoking the Click CLI, so relative paths and config discovery
(``pyproject.toml``, ``injectmark.toml``) are resolved against the test directory.
"""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING, Sequence

from click.testing import CliRunner, Result

from injectmark.cli.exit_codes import ExitCode
from injectmark.cli.main import cli

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path


def run_cli_in(tmp_path: Path, argv: str | Sequence[str] | None) -> Result:
    """Invoke the CLI with `tmp_path` as the working directory.

    Args:
        tmp_path (Path): Directory used as the CWD for the command invocation.
        argv (str | Sequence[str] | None): CLI argument vector.

    Returns:
        Result: The `click.testing.Result` produced by `click.testing.CliRunner.invoke`.
    """
    runner = CliRunner()
    cwd: str = os.getcwd()
    try:
        os.chdir(tmp_path)
        return runner.invoke(cli, argv)
    finally:
        os.chdir(cwd)


def run_cli(argv: str | Sequence[str] | None) -> Result:
    """Invoke the CLI without changing the working directory.

    Use this helper when the test does not depend on relative paths (e.g.
    ``--help`` / ``--version``) or when all provided paths are absolute.
    """
    runner = CliRunner()
    return runner.invoke(cli, argv)


def make_project(
    tmp_path: Path,
    *,
    template: str = "<style>{{css}}</style><div>{{msg}}</div>",
    data: Mapping[str, object] | str | None = None,
    pages: Mapping[str, str] | None = None,
) -> list[str]:
    """Create a template, a data file and some pages under ``tmp_path``.

    Returns:
        list[str]: The argv tail ``[template, data, *pages]`` (relative paths).
    """
    (tmp_path / "tpl.html").write_text(template, encoding="utf-8")
    if data is None:
        data = {"css": "p{}", "msg": "hello"}
    data_text: str = data if isinstance(data, str) else json.dumps(data)
    (tmp_path / "data.json").write_text(data_text, encoding="utf-8")
    if pages is None:
        pages = {"index.html": "<html><head></head><body><p>x</p></body></html>"}
    for name, content in pages.items():
        (tmp_path / name).write_bytes(content.encode("utf-8"))
    return ["tpl.html", "data.json", *pages]


def assert_SUCCESS(result: Result) -> None:
    """Assert that the command exited successfully (code 0)."""
    assert result.exit_code == ExitCode.SUCCESS, result.output


def assert_FAILURE(result: Result) -> None:
    """Assert that the command exited with FAILURE (code 1)."""
    assert result.exit_code == ExitCode.FAILURE, result.output


def assert_USAGE_ERROR(result: Result) -> None:
    """Assert that the command exited with USAGE_ERROR (code 64)."""
    assert result.exit_code == ExitCode.USAGE_ERROR, result.output


def assert_CONFIG_ERROR(result: Result) -> None:
    """Assert that the command exited with CONFIG_ERROR (code 78)."""
    assert result.exit_code == ExitCode.CONFIG_ERROR, result.output
