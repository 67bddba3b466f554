# topmark:header:start
#
#   project      : InjectMark
#   file         : batch.py
#   file_relpath : src/injectmark/pipeline/batch.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Batch coordinator: one commit pipeline per file, run concurrently, failures aggregated.

Every pipeline is an asyncio task on the same event loop; the only object they
share is the immutable `FragmentPair`. The coordinator waits for every task to
settle, then either returns the per-file results or raises a `BatchError` that
lists each failed file. Files that succeeded stay committed.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

from injectmark.config.logging import get_logger
from injectmark.errors import BatchError, FileCommitError
from injectmark.pipeline.commit import CommitResult, commit_file

if TYPE_CHECKING:
    from collections.abc import Iterable

    from injectmark.config import Config
    from injectmark.config.logging import InjectmarkLogger
    from injectmark.template.fragments import FragmentPair

logger: InjectmarkLogger = get_logger(__name__)


def unique_paths(paths: Iterable[Path | str]) -> list[Path]:
    """Return ``paths`` as `Path` objects without duplicates, in first-seen order.

    Two entries are duplicates when they resolve to the same location; a file
    listed twice must not be rewritten by two concurrent pipelines. A path that
    cannot be resolved (symlink loop) is kept as given; its pipeline reports the
    failure.
    """
    seen: dict[Path, Path] = {}
    for entry in paths:
        path = Path(entry)
        try:
            key = path.resolve()
        except (OSError, RuntimeError) as exc:
            logger.debug("Cannot resolve %s: %s", path, exc)
            key = path.absolute()
        if key in seen:
            logger.info("Skipping duplicate path %s (same file as %s)", path, seen[key])
            continue
        seen[key] = path
    return list(seen.values())


async def commit_files(
    paths: Iterable[Path | str],
    fragments: FragmentPair,
    config: Config,
) -> list[CommitResult]:
    """Insert ``fragments`` into every file of ``paths`` concurrently.

    Args:
        paths (Iterable[Path | str]): Target files.
        fragments (FragmentPair): The resolved fragments, shared read-only.
        config (Config): Runtime configuration (``max_concurrency`` bounds the
            number of pipelines holding open files at once).

    Returns:
        list[CommitResult]: One result per distinct file, in input order.

    Raises:
        BatchError: If one or more files failed; lists every failure.
    """
    targets: list[Path] = unique_paths(paths)
    limit = asyncio.Semaphore(config.max_concurrency)

    async def run_one(path: Path) -> CommitResult:
        async with limit:
            return await commit_file(path, fragments, config)

    logger.info("Processing %d file(s)", len(targets))
    outcomes = await asyncio.gather(*(run_one(p) for p in targets), return_exceptions=True)

    results: list[CommitResult] = []
    failures: list[FileCommitError] = []
    for outcome in outcomes:
        if isinstance(outcome, FileCommitError):
            failures.append(outcome)
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results.append(outcome)

    logger.info("%d file(s) rewritten, %d failed", len(results), len(failures))
    if failures:
        raise BatchError(failures, total=len(targets))
    return results


def run_batch(
    paths: Iterable[Path | str],
    fragments: FragmentPair,
    config: Config,
) -> list[CommitResult]:
    """Synchronous wrapper around `commit_files` (runs its own event loop).

    Raises:
        BatchError: If one or more files failed.
    """
    return asyncio.run(commit_files(paths, fragments, config))
