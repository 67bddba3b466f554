# topmark:header:start
#
#   project      : InjectMark
#   file         : __init__.py
#   file_relpath : src/injectmark/api/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Public InjectMark API.

A small typed surface for running InjectMark without the CLI:

```python
from injectmark import api

run = api.insert("partials/analytics.html", "site.json", ["out/index.html"])
print(run.paths)
```

Configuration contract
----------------------
- ``config=None`` performs the same discovery as the CLI (``pyproject.toml`` and
  ``injectmark.toml`` in the working directory).
- A plain mapping uses the TOML key shape and is layered over the defaults.
- A frozen `Config` is used as is.

Errors are the core exceptions from `injectmark.errors`; nothing is printed.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from injectmark.api.runtime import ensure_config, load_fragments
from injectmark.api.types import RunResult
from injectmark.config.logging import get_logger
from injectmark.constants import INJECTMARK_VERSION
from injectmark.pipeline.batch import commit_files

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from injectmark.config import Config
    from injectmark.config.logging import InjectmarkLogger
    from injectmark.template.fragments import FragmentPair

logger: InjectmarkLogger = get_logger(__name__)

__all__: list[str] = [
    "RunResult",
    "insert",
    "insert_async",
    "resolve",
    "version",
]


def resolve(
    template: Path | str,
    data: Path | str,
    *,
    config: Mapping[str, Any] | Config | None = None,
) -> FragmentPair:
    """Resolve a template file against a data file without touching any target.

    Args:
        template (Path | str): Template file.
        data (Path | str): JSON data file.
        config (Mapping[str, Any] | Config | None): Configuration (see module docs).

    Returns:
        FragmentPair: The head-bound and body-bound fragments.

    Raises:
        SourceError: If a source cannot be read.
        TemplateError: If the template has placeholder errors.
    """
    return load_fragments(template, data, ensure_config(config))


async def insert_async(
    template: Path | str,
    data: Path | str,
    files: Iterable[Path | str],
    *,
    config: Mapping[str, Any] | Config | None = None,
) -> RunResult:
    """Resolve the template and insert it into every file, on the running event loop.

    Config discovery and source reads run in worker threads.

    Args:
        template (Path | str): Template file.
        data (Path | str): JSON data file.
        files (Iterable[Path | str]): Target HTML files, rewritten in place.
        config (Mapping[str, Any] | Config | None): Configuration (see module docs).

    Returns:
        RunResult: The fragments and one result per file.

    Raises:
        SourceError: If a source cannot be read.
        TemplateError: If the template has placeholder errors; no file is touched.
        BatchError: If one or more files failed; the others are committed.
    """
    cfg: Config = await asyncio.to_thread(ensure_config, config)
    fragments: FragmentPair = await asyncio.to_thread(load_fragments, template, data, cfg)
    results = await commit_files(files, fragments, cfg)
    return RunResult(fragments=fragments, files=tuple(results))


def insert(
    template: Path | str,
    data: Path | str,
    files: Iterable[Path | str],
    *,
    config: Mapping[str, Any] | Config | None = None,
) -> RunResult:
    """Synchronous variant of `insert_async` (runs its own event loop)."""
    return asyncio.run(insert_async(template, data, files, config=config))


def version() -> str:
    """Return the installed InjectMark version."""
    return INJECTMARK_VERSION
