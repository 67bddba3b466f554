# topmark:header:start
#
#   project      : InjectMark
#   file         : test_batch.py
#   file_relpath : tests/pipeline/test_batch.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the batch coordinator."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from injectmark.constants import DEFAULT_MAX_CONCURRENCY
from injectmark.errors import BatchError, FileCommitError
from injectmark.pipeline import batch as batch_module
from injectmark.pipeline.batch import commit_files, run_batch, unique_paths
from injectmark.pipeline.commit import CommitResult
from tests.conftest import make_config, mark_pipeline, write_html

if TYPE_CHECKING:
    from injectmark.config import Config
    from injectmark.template.fragments import FragmentPair

PAGE = "<html><head></head><body>{n}</body></html>"


def expected(n: int) -> str:
    return f"<html><head><meta x></head><body><!--B-->{n}</body></html>"


@mark_pipeline
def test_all_files_rewritten_in_input_order(tmp_path: Path, fragments: FragmentPair) -> None:
    """Every file gets its own pipeline; results come back in input order."""
    pages = [write_html(tmp_path / f"p{n}.html", PAGE.format(n=n)) for n in range(5)]
    results = run_batch(pages, fragments, make_config())
    assert [r.path for r in results] == pages
    for n, page in enumerate(pages):
        assert page.read_text(encoding="utf-8") == expected(n)


@mark_pipeline
def test_failure_is_isolated(tmp_path: Path, fragments: FragmentPair) -> None:
    """Only the failing file is reported; the others are committed."""
    good_a = write_html(tmp_path / "a.html", PAGE.format(n=1))
    missing = tmp_path / "missing.html"
    good_b = write_html(tmp_path / "b.html", PAGE.format(n=2))

    with pytest.raises(BatchError) as excinfo:
        run_batch([good_a, missing, good_b], fragments, make_config())

    err = excinfo.value
    assert err.paths == [missing]
    assert err.total == 3
    assert isinstance(err.failures[0].cause, FileNotFoundError)
    assert str(err).splitlines()[0] == "1 of 3 file(s) failed"
    assert good_a.read_text(encoding="utf-8") == expected(1)
    assert good_b.read_text(encoding="utf-8") == expected(2)


@mark_pipeline
def test_every_failure_is_collected(tmp_path: Path, fragments: FragmentPair) -> None:
    """The batch waits for every pipeline and reports all failures."""
    missing = [tmp_path / "x.html", tmp_path / "y.html"]
    good = write_html(tmp_path / "ok.html", PAGE.format(n=0))
    with pytest.raises(BatchError) as excinfo:
        run_batch([missing[0], good, missing[1]], fragments, make_config())
    assert excinfo.value.paths == missing
    assert good.read_text(encoding="utf-8") == expected(0)


@mark_pipeline
def test_duplicate_paths_processed_once(
    tmp_path: Path, fragments: FragmentPair, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A file listed twice (even under another spelling) is rewritten once."""
    page = write_html(tmp_path / "index.html", PAGE.format(n=7))
    monkeypatch.chdir(tmp_path)
    results = run_batch([page, Path("index.html"), str(page)], fragments, make_config())
    assert len(results) == 1
    assert page.read_text(encoding="utf-8") == expected(7)


def test_unique_paths_keeps_first_spelling(tmp_path: Path) -> None:
    """Deduplication keeps the first occurrence as given."""
    a = tmp_path / "a.html"
    assert unique_paths([str(a), tmp_path / "." / "a.html", tmp_path / "b.html"]) == [
        a,
        tmp_path / "b.html",
    ]


def test_unresolvable_path_is_kept(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """A path whose resolution fails stays in the list instead of aborting deduplication."""
    resolve = Path.resolve

    def failing_resolve(self: Path, strict: bool = False) -> Path:
        if self.name == "loop.html":
            raise RuntimeError(f"Symlink loop from {self!s}")
        return resolve(self, strict=strict)

    monkeypatch.setattr(Path, "resolve", failing_resolve)
    loop = tmp_path / "loop.html"
    page = tmp_path / "a.html"
    assert unique_paths([loop, page, loop]) == [loop, page]


@mark_pipeline
def test_symlink_loop_fails_only_that_file(tmp_path: Path, fragments: FragmentPair) -> None:
    """A symlink loop in the file list is reported as that file's failure."""
    loop_a = tmp_path / "loop_a.html"
    loop_b = tmp_path / "loop_b.html"
    loop_a.symlink_to(loop_b)
    loop_b.symlink_to(loop_a)
    page = write_html(tmp_path / "a.html", PAGE.format(n=4))

    with pytest.raises(BatchError) as excinfo:
        run_batch([loop_a, page], fragments, make_config())

    assert excinfo.value.paths == [loop_a]
    assert isinstance(excinfo.value.failures[0].cause, OSError)
    assert page.read_text(encoding="utf-8") == expected(4)


def _track_concurrency(monkeypatch: pytest.MonkeyPatch) -> list[int]:
    """Replace the per-file pipeline with a stub recording the number of active calls."""
    active = 0
    peaks: list[int] = []

    async def fake_commit_file(path: Path, fragments: FragmentPair, config: Config) -> CommitResult:
        nonlocal active
        active += 1
        peaks.append(active)
        await asyncio.sleep(0.01)
        active -= 1
        return CommitResult(path=path, bytes_read=0, bytes_written=0, inserted_at_eof=True)

    monkeypatch.setattr(batch_module, "commit_file", fake_commit_file)
    return peaks


@mark_pipeline
def test_max_concurrency_bounds_open_pipelines(
    tmp_path: Path, fragments: FragmentPair, monkeypatch: pytest.MonkeyPatch
) -> None:
    """No more than ``max_concurrency`` pipelines run at the same time."""
    peaks = _track_concurrency(monkeypatch)
    paths = [tmp_path / f"{n}.html" for n in range(10)]
    results = run_batch(paths, fragments, make_config(max_concurrency=3))
    assert len(results) == 10
    assert max(peaks) == 3


@mark_pipeline
def test_bounded_by_default(
    tmp_path: Path, fragments: FragmentPair, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Without an explicit bound the default limit applies."""
    peaks = _track_concurrency(monkeypatch)
    paths = [tmp_path / f"{n}.html" for n in range(DEFAULT_MAX_CONCURRENCY + 36)]
    run_batch(paths, fragments, make_config())
    assert max(peaks) == DEFAULT_MAX_CONCURRENCY


@mark_pipeline
def test_more_files_than_descriptor_limit(tmp_path: Path, fragments: FragmentPair) -> None:
    """A batch larger than the open-file limit is rewritten with the default bound."""
    resource = pytest.importorskip("resource")
    soft, hard = resource.getrlimit(resource.RLIMIT_NOFILE)
    limit = 256
    if hard != resource.RLIM_INFINITY and hard < limit:
        pytest.skip(f"hard RLIMIT_NOFILE {hard} is below {limit}")
    pages = [write_html(tmp_path / f"p{n}.html", PAGE.format(n=n)) for n in range(400)]

    resource.setrlimit(resource.RLIMIT_NOFILE, (limit, hard))
    try:
        results = run_batch(pages, fragments, make_config())
    finally:
        resource.setrlimit(resource.RLIMIT_NOFILE, (soft, hard))

    assert len(results) == 400
    assert pages[399].read_text(encoding="utf-8") == expected(399)


@mark_pipeline
def test_unexpected_errors_propagate(
    tmp_path: Path, fragments: FragmentPair, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Only per-file commit errors are aggregated; anything else is re-raised."""

    async def broken(path: Path, fragments: FragmentPair, config: Config) -> CommitResult:
        raise RuntimeError("bug")

    monkeypatch.setattr(batch_module, "commit_file", broken)
    with pytest.raises(RuntimeError, match="bug"):
        run_batch([tmp_path / "a.html"], fragments, make_config())


@mark_pipeline
def test_commit_files_on_running_loop(tmp_path: Path, fragments: FragmentPair) -> None:
    """The coroutine form runs on a caller-provided event loop."""
    page = write_html(tmp_path / "a.html", PAGE.format(n=3))

    async def main() -> list[CommitResult]:
        return await commit_files([page], fragments, make_config())

    (result,) = asyncio.run(main())
    assert result.path == page
    assert page.read_text(encoding="utf-8") == expected(3)


def test_batch_error_lists_each_failure() -> None:
    """BatchError keeps every failure with its path, in order."""
    failures = [
        FileCommitError(Path("a.html"), OSError("disk")),
        FileCommitError(Path("b.html"), PermissionError("denied")),
    ]
    err = BatchError(failures, total=5)
    assert err.paths == [Path("a.html"), Path("b.html")]
    assert str(err).splitlines() == [
        "2 of 5 file(s) failed",
        "  a.html: disk",
        "  b.html: denied",
    ]
