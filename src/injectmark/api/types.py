# topmark:header:start
#
#   project      : InjectMark
#   file         : types.py
#   file_relpath : src/injectmark/api/types.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Public result types of [`injectmark.api`][injectmark.api]."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from injectmark.pipeline.commit import CommitResult
    from injectmark.template.fragments import FragmentPair


@dataclass(frozen=True)
class RunResult:
    """Result of a successful insertion run.

    Attributes:
        fragments (FragmentPair): The fragments that were inserted.
        files (tuple[CommitResult, ...]): One result per rewritten file, in input order.
    """

    fragments: FragmentPair
    files: tuple[CommitResult, ...]

    @property
    def paths(self) -> list[Path]:
        """Rewritten files, in input order."""
        return [result.path for result in self.files]

    @property
    def appended(self) -> list[Path]:
        """Files without an insertion point, where the fragments were appended at the end."""
        return [result.path for result in self.files if result.inserted_at_eof]
