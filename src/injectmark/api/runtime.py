# topmark:header:start
#
#   project      : InjectMark
#   file         : runtime.py
#   file_relpath : src/injectmark/api/runtime.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Runtime helpers behind the public API: config normalization and template loading."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from injectmark.config import Config, MutableConfig
from injectmark.config.logging import get_logger
from injectmark.sources import read_data, read_template
from injectmark.template import resolve_template

if TYPE_CHECKING:
    from collections.abc import Mapping

    from injectmark.config.logging import InjectmarkLogger
    from injectmark.template.fragments import FragmentPair

logger: InjectmarkLogger = get_logger(__name__)


def ensure_config(value: Mapping[str, Any] | MutableConfig | Config | None) -> Config:
    """Return a frozen `Config` from a mapping, a draft, or a frozen config.

    Args:
        value (Mapping[str, Any] | MutableConfig | Config | None): ``None`` runs
            config discovery in the working directory (as the CLI does); a mapping
            uses the TOML key shape (``{"strict": True, "chunk-size": 4096}``) on
            top of the runtime defaults.

    Returns:
        Config: The immutable runtime snapshot.

    Raises:
        ConfigError: If discovery finds an invalid file or the mapping holds an
            invalid value.
    """
    if value is None:
        return MutableConfig.load_merged().freeze()
    if isinstance(value, Config):
        return value
    if isinstance(value, MutableConfig):
        return value.freeze()
    draft: MutableConfig = MutableConfig.from_defaults().merge_with(
        MutableConfig.from_toml_dict(dict(value))
    )
    return draft.freeze()


def load_fragments(
    template_path: Path | str, data_path: Path | str, config: Config
) -> FragmentPair:
    """Read both sources and resolve them into a `FragmentPair`.

    Raises:
        SourceError: If a source cannot be read (`DataSourceError` for the data).
        TemplateError: If the template has placeholder errors.
    """
    template: str = read_template(template_path)
    data: dict[str, Any] = read_data(data_path)
    logger.debug("Resolving template %s with data %s", Path(template_path), Path(data_path))
    return resolve_template(
        template, data, strict=config.strict, rule=config.classification
    )
