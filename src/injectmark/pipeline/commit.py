# topmark:header:start
#
#   project      : InjectMark
#   file         : commit.py
#   file_relpath : src/injectmark/pipeline/commit.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Per-file commit pipeline: stream a file through the inserter into a temp file, then rename.

The temporary file is created next to the target (same directory, hence same
filesystem) so `os.replace` commits atomically. The original path is only ever
replaced by a complete rewrite; on any failure the temporary file is removed and
a `FileCommitError` naming the path is raised.

Blocking filesystem calls are awaited through `asyncio.to_thread`, so many
pipelines can overlap their I/O waits on one event loop while tokenizing stays
on the loop thread.
"""

from __future__ import annotations

import asyncio
import os
import shutil
import tempfile
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

from injectmark.config.logging import get_logger
from injectmark.errors import FileCommitError
from injectmark.html.insertion import FragmentInserter
from injectmark.html.tokenizer import Tokenizer

if TYPE_CHECKING:
    from collections.abc import Iterable

    from injectmark.config import Config
    from injectmark.config.logging import InjectmarkLogger
    from injectmark.html.tokens import Token
    from injectmark.template.fragments import FragmentPair

logger: InjectmarkLogger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CommitResult:
    """Outcome of one successful file rewrite.

    Attributes:
        path (Path): The rewritten file.
        bytes_read (int): Size of the original content.
        bytes_written (int): Size of the committed content.
        inserted_at_eof (bool): True when no insertion point was found in the
            stream and the fragments were appended at the end.
    """

    path: Path
    bytes_read: int
    bytes_written: int
    inserted_at_eof: bool


def _write_all(fd: int, data: bytes) -> None:
    view = memoryview(data)
    while view:
        written = os.write(fd, view)
        view = view[written:]


class FileJob:
    """A temporary sibling of ``path`` owned by one pipeline until commit or discard.

    Attributes:
        path (Path): The target file.
        temp_path (Path): The temporary file receiving the rewrite.
        fd (int | None): Open descriptor of ``temp_path``; None once closed.
    """

    def __init__(self, path: Path, temp_path: Path, fd: int) -> None:
        self.path = path
        self.temp_path = temp_path
        self.fd: int | None = fd
        self.committed = False

    @classmethod
    async def create(cls, path: Path, *, suffix: str) -> FileJob:
        """Create an exclusive temporary file next to ``path``.

        The temporary file's name is derived from the target's basename and it
        inherits the target's permission bits.
        """
        fd, name = await asyncio.to_thread(
            tempfile.mkstemp,
            prefix=f".{path.name}.",
            suffix=suffix,
            dir=path.parent,
        )
        job = cls(path, Path(name), fd)
        try:
            await asyncio.to_thread(shutil.copymode, path, job.temp_path)
        except BaseException:
            await job.discard()
            raise
        logger.trace("Created temporary file %s for %s", job.temp_path, path)
        return job

    async def write(self, data: bytes) -> None:
        """Append ``data`` to the temporary file."""
        if self.fd is None:
            raise RuntimeError(f"temporary file for {self.path} is closed")
        if data:
            await asyncio.to_thread(_write_all, self.fd, data)

    async def commit(self) -> None:
        """Flush the temporary file to disk and rename it over the target."""
        if self.fd is None:
            raise RuntimeError(f"temporary file for {self.path} is closed")
        fd, self.fd = self.fd, None
        try:
            await asyncio.to_thread(os.fsync, fd)
        finally:
            os.close(fd)
        await asyncio.to_thread(os.replace, self.temp_path, self.path)
        self.committed = True
        logger.debug("Committed %s", self.path)

    async def discard(self) -> None:
        """Close and remove the temporary file (no-op after a commit)."""
        if self.fd is not None:
            fd, self.fd = self.fd, None
            with suppress(OSError):
                os.close(fd)
        if not self.committed:
            with suppress(FileNotFoundError):
                await asyncio.to_thread(self.temp_path.unlink)
            logger.trace("Discarded temporary file %s", self.temp_path)


def _emit(inserter: FragmentInserter, tokens: Iterable[Token]) -> bytes:
    return b"".join([inserter.process(token) for token in tokens])


async def _stream(
    source: BinaryIO, job: FileJob, head: bytes, body: bytes, chunk_size: int
) -> CommitResult:
    # Fresh tokenizer and state machine per file; never shared across pipelines.
    tokenizer = Tokenizer()
    inserter = FragmentInserter(head, body)
    bytes_read = bytes_written = 0

    while True:
        chunk: bytes = await asyncio.to_thread(source.read, chunk_size)
        if not chunk:
            break
        bytes_read += len(chunk)
        out = _emit(inserter, tokenizer.feed(chunk))
        await job.write(out)
        bytes_written += len(out)

    out = _emit(inserter, tokenizer.close()) + inserter.finish()
    await job.write(out)
    bytes_written += len(out)

    await job.commit()
    return CommitResult(
        path=job.path,
        bytes_read=bytes_read,
        bytes_written=bytes_written,
        inserted_at_eof=inserter.inserted_at_eof,
    )


async def commit_file(path: Path | str, fragments: FragmentPair, config: Config) -> CommitResult:
    """Insert ``fragments`` into the file at ``path`` and commit the result atomically.

    Args:
        path (Path | str): Existing, readable and writable HTML file.
        fragments (FragmentPair): The resolved fragments (read-only).
        config (Config): Runtime configuration (chunk size, temp suffix).

    Returns:
        CommitResult: Byte counts and placement details for the rewrite.

    Raises:
        FileCommitError: If any step fails; the original file is left untouched
            and the temporary file removed. The cause is chained.
    """
    path = Path(path)
    head, body = fragments.encode()
    logger.debug("Rewriting %s", path)
    try:
        source: BinaryIO = await asyncio.to_thread(open, path, "rb")
        try:
            job = await FileJob.create(path, suffix=config.temp_suffix)
            try:
                return await _stream(source, job, head, body, config.chunk_size)
            finally:
                await job.discard()
        finally:
            source.close()
    except Exception as exc:
        logger.error("Failed to rewrite %s: %s", path, exc)
        raise FileCommitError(path, exc) from exc
