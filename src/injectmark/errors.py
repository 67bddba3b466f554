# topmark:header:start
#
#   project      : InjectMark
#   file         : errors.py
#   file_relpath : src/injectmark/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions raised by the InjectMark core.

Two of these are aggregates: `TemplateError` bundles every placeholder problem
found in one template scan, and `BatchError` bundles every per-file failure of a
batch run. The CLI maps them onto exit codes in `injectmark.cli.errors`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


class InjectmarkError(Exception):
    """Base class for all InjectMark errors."""


class PlaceholderError(InjectmarkError):
    """A problem with one ``{{...}}`` span of a template.

    Attributes:
        offset (int): Character offset of the span's opening ``{{`` in the template.
    """

    def __init__(self, message: str, *, offset: int) -> None:
        super().__init__(message)
        self.offset = offset


class UndefinedPlaceholderError(PlaceholderError):
    """A well-formed placeholder names an identifier missing from the data set."""

    def __init__(self, name: str, *, offset: int) -> None:
        super().__init__(f"no data for {{{{{name}}}}} at index {offset}", offset=offset)
        self.name = name


class MalformedPlaceholderError(PlaceholderError):
    """A ``{{`` span that does not hold a valid identifier, or is never closed."""

    def __init__(self, preview: str, *, offset: int) -> None:
        super().__init__(f"bad placeholder at index {offset}: {preview}", offset=offset)
        self.preview = preview


class TemplateError(InjectmarkError):
    """Every placeholder problem found while resolving one template."""

    def __init__(self, errors: Sequence[PlaceholderError]) -> None:
        self.errors: tuple[PlaceholderError, ...] = tuple(errors)
        count = len(self.errors)
        super().__init__(f"{count} template error{'s' if count != 1 else ''}")

    def __str__(self) -> str:
        lines = [self.args[0]]
        lines.extend(f"  {err}" for err in self.errors)
        return "\n".join(lines)


class SourceError(InjectmarkError):
    """The template or data source could not be read or decoded."""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class DataSourceError(SourceError):
    """The data source is not a JSON object."""


class ConfigError(InjectmarkError):
    """A configuration file holds an invalid value."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(f"{path}: {message}" if path is not None else message)
        self.path = path


class FileCommitError(InjectmarkError):
    """Rewriting one target file failed; the original file is untouched.

    The underlying exception is available as ``cause`` and as ``__cause__``.
    """

    def __init__(self, path: Path, cause: BaseException) -> None:
        super().__init__(f"{path}: {cause}")
        self.path = path
        self.cause = cause


class BatchError(InjectmarkError):
    """One or more files of a batch failed; the others were committed."""

    def __init__(self, failures: Sequence[FileCommitError], *, total: int) -> None:
        self.failures: tuple[FileCommitError, ...] = tuple(failures)
        self.total = total
        super().__init__(f"{len(self.failures)} of {total} file(s) failed")

    @property
    def paths(self) -> list[Path]:
        """Paths of the failed files, in input order."""
        return [f.path for f in self.failures]

    def __str__(self) -> str:
        lines = [self.args[0]]
        lines.extend(f"  {failure}" for failure in self.failures)
        return "\n".join(lines)
