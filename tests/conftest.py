# topmark:header:start
#
#   project      : InjectMark
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the InjectMark test suite.

This file sets up global fixtures and customizes the logging configuration for test runs.

Notes:
    Tests should respect the immutable/mutable configuration split: build
    configs with `injectmark.config.MutableConfig`, then `freeze()` them into a
    `injectmark.config.Config` before handing them to the pipeline.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from injectmark.config import MutableConfig, logging
from injectmark.template.fragments import FragmentPair

if TYPE_CHECKING:
    from injectmark.config import Config

F = TypeVar("F", bound=Callable[..., object])

DecoratorType = Callable[[F], F]

HEAD_FRAGMENT = "<meta x>"
BODY_FRAGMENT = "<!--B-->"


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.integration`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_integration: DecoratorType[Any] = as_typed_mark(pytest.mark.integration)
mark_pipeline: DecoratorType[Any] = as_typed_mark(pytest.mark.pipeline)
mark_cli: DecoratorType[Any] = as_typed_mark(pytest.mark.cli)
mark_hypothesis_slow: DecoratorType[Any] = as_typed_mark(pytest.mark.hypothesis_slow)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`."""
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`."""
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_injectmark_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure InjectMark's runtime log level is not forced via env during tests.

    Args:
        monkeypatch (pytest.MonkeyPatch): Used to drop ``INJECTMARK_LOG_LEVEL``.
    """
    monkeypatch.delenv("INJECTMARK_LOG_LEVEL", raising=False)


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Set the log level to TRACE so diagnostics are captured during test execution.

    Args:
        config (pytest.Config): The pytest configuration object.
    """
    logging.setup_logging(level=logging.TRACE_LEVEL)


@pytest.fixture
def isolation(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test in an empty working directory (no config files to discover).

    Args:
        tmp_path (Path): The pytest-provided temporary directory for the test.
        monkeypatch (pytest.MonkeyPatch): Fixture to change the working directory.

    Returns:
        Path: The isolated working directory.
    """
    cwd: Path = tmp_path / "proj"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd


@pytest.fixture
def fragments() -> FragmentPair:
    """The fragment pair used throughout the insertion tests."""
    return FragmentPair(head_html=HEAD_FRAGMENT, body_html=BODY_FRAGMENT)


def make_config(**overrides: Any) -> Config:
    """Return a frozen `Config` built from defaults and overrides.

    Args:
        **overrides (Any): Field overrides applied to the mutable builder before freezing.

    Returns:
        Config: An immutable configuration snapshot for use in tests.
    """
    m: MutableConfig = MutableConfig.from_defaults()
    for k, v in overrides.items():
        setattr(m, k, v)
    return m.freeze()


def write_html(path: Path, text: str) -> Path:
    """Write ``text`` as UTF-8 bytes to ``path`` (no newline translation) and return it."""
    path.write_bytes(text.encode("utf-8"))
    return path
