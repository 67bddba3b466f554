# topmark:header:start
#
#   project      : InjectMark
#   file         : model.py
#   file_relpath : src/injectmark/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration model and merge policy.

This module defines:
    - `Config`: an immutable runtime snapshot shared by every file pipeline.
    - `MutableConfig`: a mutable builder used while layering sources; it
      can be frozen into `Config` and thawed back for edits.

Layering (lowest to highest precedence):
    1. runtime defaults,
    2. ``pyproject.toml`` (``[tool.injectmark]``) then ``injectmark.toml`` in the
       working directory,
    3. explicit ``--config`` files in order,
    4. CLI arguments.

Fields set to ``None`` in a draft mean "inherit" during `MutableConfig.merge_with`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from injectmark.config.loaders import (
    discover_config_files,
    extract_tool_section,
    get_bool_or_none,
    get_positive_int_or_none,
    get_string_or_none,
    load_toml_dict,
)
from injectmark.config.logging import get_logger
from injectmark.config.types import ClassificationRule
from injectmark.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_TEMP_SUFFIX,
    PYPROJECT_TOML_NAME,
)
from injectmark.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from injectmark.config.loaders import TomlTable
    from injectmark.config.logging import InjectmarkLogger

# ArgsLike: generic mapping accepted by config loaders (works for CLI namespaces and API dicts).
ArgsLike = Mapping[str, Any]

logger: InjectmarkLogger = get_logger(__name__)

# TOML keys (kebab-case, as written by users)
KEY_STRICT = "strict"
KEY_CLASSIFICATION = "classification"
KEY_CHUNK_SIZE = "chunk-size"
KEY_MAX_CONCURRENCY = "max-concurrency"
KEY_TEMP_SUFFIX = "temp-suffix"

KNOWN_KEYS: frozenset[str] = frozenset(
    {KEY_STRICT, KEY_CLASSIFICATION, KEY_CHUNK_SIZE, KEY_MAX_CONCURRENCY, KEY_TEMP_SUFFIX}
)


# ------------------ Immutable runtime config ------------------


@dataclass(frozen=True, slots=True)
class Config:
    """Immutable runtime configuration for InjectMark.

    Attributes:
        strict (bool): Whether placeholders missing from the data set are errors.
        classification (ClassificationRule): Rule splitting template nodes into
            head-bound and body-bound fragments.
        chunk_size (int): Number of bytes requested per read of a target file.
        max_concurrency (int): Upper bound on simultaneously open file pipelines.
        temp_suffix (str): Suffix of the temporary sibling file written before commit.
        config_files (tuple[Path, ...]): Config sources that contributed, in merge order.
    """

    strict: bool
    classification: ClassificationRule
    chunk_size: int
    max_concurrency: int
    temp_suffix: str
    config_files: tuple[Path, ...]

    def thaw(self) -> MutableConfig:
        """Return a mutable copy of this config.

        Returns:
            MutableConfig: A draft holding the same values.
        """
        return MutableConfig(
            strict=self.strict,
            classification=self.classification,
            chunk_size=self.chunk_size,
            max_concurrency=self.max_concurrency,
            temp_suffix=self.temp_suffix,
            config_files=list(self.config_files),
        )

    def to_toml_dict(self) -> TomlTable:
        """Convert this config into a TOML-serializable dict (kebab-case keys)."""
        return {
            KEY_STRICT: self.strict,
            KEY_CLASSIFICATION: self.classification.value,
            KEY_CHUNK_SIZE: self.chunk_size,
            KEY_MAX_CONCURRENCY: self.max_concurrency,
            KEY_TEMP_SUFFIX: self.temp_suffix,
        }


# ------------------ Mutable builder ------------------


@dataclass
class MutableConfig:
    """Mutable configuration draft used while layering config sources.

    Every field is optional; `freeze` fills unset fields with runtime defaults.
    """

    strict: bool | None = None
    classification: ClassificationRule | None = None
    chunk_size: int | None = None
    max_concurrency: int | None = None
    temp_suffix: str | None = None
    config_files: list[Path] = field(default_factory=lambda: [])

    # ---------------------------- Build/freeze ----------------------------
    def freeze(self) -> Config:
        """Freeze this draft into an immutable `Config`, applying defaults."""
        return Config(
            strict=bool(self.strict),
            classification=self.classification or ClassificationRule.BODY_OK,
            chunk_size=self.chunk_size or DEFAULT_CHUNK_SIZE,
            max_concurrency=self.max_concurrency or DEFAULT_MAX_CONCURRENCY,
            temp_suffix=self.temp_suffix or DEFAULT_TEMP_SUFFIX,
            config_files=tuple(self.config_files),
        )

    # --------------------------- Loaders/parsers --------------------------
    @classmethod
    def from_defaults(cls) -> MutableConfig:
        """Return a draft holding InjectMark's runtime defaults.

        Returns:
            MutableConfig: Draft with every field set explicitly.
        """
        return cls(
            strict=False,
            classification=ClassificationRule.BODY_OK,
            chunk_size=DEFAULT_CHUNK_SIZE,
            max_concurrency=DEFAULT_MAX_CONCURRENCY,
            temp_suffix=DEFAULT_TEMP_SUFFIX,
        )

    @classmethod
    def from_toml_dict(cls, data: TomlTable, *, config_file: Path | None = None) -> MutableConfig:
        """Build a draft from a parsed TOML table.

        Unknown keys are logged and ignored; ill-typed values are errors.

        Args:
            data (TomlTable): The ``injectmark`` table (top-level keys).
            config_file (Path | None): Source file, used in error messages.

        Returns:
            MutableConfig: The parsed draft.

        Raises:
            ConfigError: If a known key holds an invalid value.
        """
        for key in sorted(set(data) - KNOWN_KEYS):
            logger.warning("Unknown config key '%s' in %s (ignored)", key, config_file or "<dict>")

        classification: ClassificationRule | None = None
        raw_rule: str | None = get_string_or_none(data, KEY_CLASSIFICATION, path=config_file)
        if raw_rule is not None:
            try:
                classification = ClassificationRule.parse(raw_rule)
            except ValueError as exc:
                raise ConfigError(str(exc), path=config_file) from exc

        return cls(
            strict=get_bool_or_none(data, KEY_STRICT, path=config_file),
            classification=classification,
            chunk_size=get_positive_int_or_none(data, KEY_CHUNK_SIZE, path=config_file),
            max_concurrency=get_positive_int_or_none(data, KEY_MAX_CONCURRENCY, path=config_file),
            temp_suffix=get_string_or_none(data, KEY_TEMP_SUFFIX, path=config_file),
            config_files=[config_file] if config_file is not None else [],
        )

    @classmethod
    def from_toml_file(cls, path: Path) -> MutableConfig:
        """Load configuration from a single TOML file.

        Supports both ``injectmark.toml`` (top-level keys) and ``pyproject.toml``
        (the ``[tool.injectmark]`` table).

        Args:
            path (Path): Path to the TOML file.

        Returns:
            MutableConfig: The parsed draft.

        Raises:
            ConfigError: If the file is unreadable, invalid, or lacks the tool section.
        """
        logger.debug("Creating MutableConfig from TOML config: %s", path)
        data: TomlTable = load_toml_dict(path)
        if path.name == PYPROJECT_TOML_NAME:
            section = extract_tool_section(data)
            if section is None:
                raise ConfigError("[tool.injectmark] section missing", path=path)
            data = section
        return cls.from_toml_dict(data, config_file=path)

    @classmethod
    def load_merged(
        cls,
        *,
        start: Path | None = None,
        no_config: bool = False,
        extra_config_files: Iterable[Path | str] | None = None,
    ) -> MutableConfig:
        """Return defaults merged with discovered and explicit config files.

        Args:
            start (Path | None): Directory for discovery (defaults to the CWD).
            no_config (bool): Skip discovery in ``start``; explicit files still apply.
            extra_config_files (Iterable[Path | str] | None): Explicit config files,
                applied after discovered ones in the given order.

        Returns:
            MutableConfig: The merged draft (CLI overrides not yet applied).
        """
        draft: MutableConfig = cls.from_defaults()
        if not no_config:
            for path in discover_config_files(start or Path.cwd()):
                draft = draft.merge_with(cls.from_toml_file(path))
        for extra in extra_config_files or ():
            draft = draft.merge_with(cls.from_toml_file(Path(extra)))
        logger.debug("Merged config: %s", draft)
        return draft

    # ------------------------------- Merging -------------------------------
    def merge_with(self, other: MutableConfig) -> MutableConfig:
        """Return a new draft where values set in ``other`` override this draft.

        Args:
            other (MutableConfig): The config whose explicitly set values win.

        Returns:
            MutableConfig: A new merged draft.
        """
        return MutableConfig(
            strict=other.strict if other.strict is not None else self.strict,
            classification=other.classification
            if other.classification is not None
            else self.classification,
            chunk_size=other.chunk_size if other.chunk_size is not None else self.chunk_size,
            max_concurrency=other.max_concurrency
            if other.max_concurrency is not None
            else self.max_concurrency,
            temp_suffix=other.temp_suffix if other.temp_suffix is not None else self.temp_suffix,
            config_files=self.config_files + other.config_files,
        )

    def apply_cli_args(self, args: ArgsLike) -> MutableConfig:
        """Update fields from an arguments mapping (CLI or API).

        Only keys present with a non-None value override this draft. Recognized
        keys: ``strict``, ``classification``, ``chunk_size``, ``max_concurrency``.

        Args:
            args (ArgsLike): Parsed arguments mapping.

        Returns:
            MutableConfig: This draft (mutated in place) for chaining.
        """
        if args.get("strict") is not None:
            self.strict = bool(args["strict"])
        rule: Any = args.get("classification")
        if rule is not None:
            if not isinstance(rule, ClassificationRule):
                rule = ClassificationRule.parse(str(rule))
            self.classification = rule
        if args.get("chunk_size") is not None:
            self.chunk_size = int(args["chunk_size"])
        if args.get("max_concurrency") is not None:
            self.max_concurrency = int(args["max_concurrency"])
        return self
