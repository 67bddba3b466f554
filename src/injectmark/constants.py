# topmark:header:start
#
#   project      : InjectMark
#   file         : constants.py
#   file_relpath : src/injectmark/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""InjectMark Constants."""

from __future__ import annotations

from importlib.metadata import version as get_version

INJECTMARK_VERSION: str = get_version("injectmark")

# Environment variable consulted by `injectmark.config.logging.resolve_env_log_level`.
LOG_LEVEL_ENV_VAR: str = "INJECTMARK_LOG_LEVEL"

# Config discovery (current working directory only).
DEFAULT_TOML_CONFIG_NAME: str = "injectmark.toml"
PYPROJECT_TOML_NAME: str = "pyproject.toml"
PYPROJECT_TOOL_SECTION: str = "injectmark"

DEFAULT_CHUNK_SIZE: int = 64 * 1024
DEFAULT_TEMP_SUFFIX: str = ".injectmark-tmp"

# Pipelines holding open files at once (each holds the source and its temp file).
DEFAULT_MAX_CONCURRENCY: int = 64

# Preview length for malformed placeholder diagnostics (visible characters).
PLACEHOLDER_PREVIEW_WIDTH: int = 29
PLACEHOLDER_ELLIPSIS: str = "…"
