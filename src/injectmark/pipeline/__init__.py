# topmark:header:start
#
#   project      : InjectMark
#   file         : __init__.py
#   file_relpath : src/injectmark/pipeline/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""File commit pipeline and the batch coordinator running it over many files."""

from __future__ import annotations

from injectmark.pipeline.batch import commit_files, run_batch
from injectmark.pipeline.commit import CommitResult, commit_file

__all__ = [
    "CommitResult",
    "commit_file",
    "commit_files",
    "run_batch",
]
