# topmark:header:start
#
#   project      : InjectMark
#   file         : main.py
#   file_relpath : src/injectmark/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""InjectMark command line entry point.

Usage:

    injectmark [OPTIONS] TEMPLATE DATA FILE...

Resolves TEMPLATE against the JSON object in DATA, then inserts the head-bound
part before the end of ``<head>`` and the body-bound part at the start of
``<body>`` of every FILE, rewriting each file atomically.

Examples:
  Insert an analytics snippet into two pages:

    $ injectmark partials/analytics.html site.json out/index.html out/about.html

  Fail on placeholders missing from the data and list every rewritten file:

    $ injectmark --strict -v head.html data.json public/*.html
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from injectmark.cli.cli_types import ArgsNamespace, EnumChoiceParam
from injectmark.cli.console import ClickConsole
from injectmark.cli.errors import InjectmarkCliError, InjectmarkConfigError
from injectmark.cli.exit_codes import ExitCode
from injectmark.cli.options import (
    ColorMode,
    common_color_options,
    common_config_options,
    common_verbose_options,
    resolve_color_mode,
    resolve_verbosity,
)
from injectmark.config import ClassificationRule, MutableConfig
from injectmark.config.logging import get_logger, resolve_env_log_level, setup_logging
from injectmark.constants import DEFAULT_MAX_CONCURRENCY, INJECTMARK_VERSION
from injectmark.errors import BatchError, ConfigError, SourceError, TemplateError
from injectmark.pipeline.batch import run_batch
from injectmark.sources import read_data, read_template
from injectmark.template import resolve_template

if TYPE_CHECKING:
    from injectmark.cli.console_api import ConsoleLike
    from injectmark.config import Config
    from injectmark.config.logging import InjectmarkLogger
    from injectmark.pipeline.commit import CommitResult
    from injectmark.template.fragments import FragmentPair

logger: InjectmarkLogger = get_logger(__name__)


class InjectmarkCommand(click.Command):
    """Click command reporting invocation errors with `ExitCode.USAGE_ERROR`."""

    def make_context(
        self,
        info_name: str | None,
        args: list[str],
        parent: click.Context | None = None,
        **extra: Any,
    ) -> click.Context:
        """Parse ``args``; Click usage errors exit with status 64 instead of 2."""
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as exc:
            exc.exit_code = ExitCode.USAGE_ERROR
            raise


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Initialize shared state (verbosity, logging, color, console) on the Click context.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` and ``color`` set.
        verbose (int): Count of ``-v`` flags.
        quiet (int): Count of ``-q`` flags.
        color_mode (ColorMode | None): Explicit color mode from ``--color`` (or ``None``).
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.obj = ctx.obj or {}

    level_env = resolve_env_log_level()
    ctx.obj["log_level"] = level_env
    setup_logging(level=level_env)

    effective_color_mode = ColorMode.NEVER if no_color else (color_mode or ColorMode.AUTO)
    enable_color = resolve_color_mode(cli_mode=effective_color_mode)
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color
    ctx.obj["console"] = ClickConsole(enable_color=enable_color)

    # Console must exist before this can raise, so the error is styled.
    ctx.obj["verbosity_level"] = resolve_verbosity(verbose, quiet)


def build_config(
    *,
    config_paths: tuple[str, ...],
    no_config: bool,
    args: ArgsNamespace,
) -> Config:
    """Merge discovered and explicit config files, then apply CLI overrides.

    Raises:
        InjectmarkConfigError: If a configuration file is invalid.
    """
    try:
        draft: MutableConfig = MutableConfig.load_merged(
            no_config=no_config,
            extra_config_files=[Path(p) for p in config_paths],
        )
    except ConfigError as exc:
        raise InjectmarkConfigError(str(exc)) from exc
    return draft.apply_cli_args(args).freeze()


def report_results(console: ConsoleLike, results: list[CommitResult], verbosity: int) -> None:
    """Print the verbose per-file report, end-of-file warnings and the summary line."""
    if verbosity < 0:
        return
    if verbosity > 0:
        for result in results:
            where = "appended at end" if result.inserted_at_eof else "inserted"
            console.print(
                f"  {result.path}: {where} ({result.bytes_read} -> {result.bytes_written} bytes)"
            )
    for result in results:
        if result.inserted_at_eof:
            console.warn(f"Warning: no insertion point in {result.path}; fragments appended at end")
    console.print(
        console.styled(f"Inserted fragments into {len(results)} file(s).", fg="green", bold=True)
    )


@click.command(
    name="injectmark",
    cls=InjectmarkCommand,
    context_settings={"help_option_names": ["-h", "--help"]},
    help=(
        "Insert the resolved TEMPLATE into every FILE: head-bound nodes before the end of "
        "<head>, the rest at the start of <body>. DATA is a JSON object of placeholder values."
    ),
)
@click.argument(
    "template",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.argument(
    "data",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(path_type=Path),
)
@click.option(
    "--strict/--no-strict",
    "strict",
    default=None,
    help="Treat placeholders missing from DATA as errors (default: from config, else off).",
)
@click.option(
    "--classification",
    "classification",
    type=EnumChoiceParam(ClassificationRule),
    default=None,
    help="Rule deciding which template nodes go into <head>.",
)
@click.option(
    "--max-concurrency",
    "max_concurrency",
    type=click.IntRange(min=1),
    default=None,
    help=f"Maximum number of files rewritten at once (default: {DEFAULT_MAX_CONCURRENCY}).",
)
@common_config_options
@common_verbose_options
@common_color_options
@click.version_option(INJECTMARK_VERSION, "--version", prog_name="injectmark")
@click.pass_context
def cli(
    ctx: click.Context,
    *,
    template: Path,
    data: Path,
    files: tuple[Path, ...],
    strict: bool | None,
    classification: ClassificationRule | None,
    max_concurrency: int | None,
    config_paths: tuple[str, ...],
    no_config: bool,
    verbose: int,
    quiet: int,
    color_mode: str | None,
    no_color: bool,
) -> None:
    """Entry point for the InjectMark CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        color_mode=ColorMode(color_mode) if color_mode else None,
        no_color=no_color,
    )
    console: ConsoleLike = ctx.obj["console"]
    verbosity: int = ctx.obj["verbosity_level"]

    args: ArgsNamespace = {
        "strict": strict,
        "classification": classification,
        "max_concurrency": max_concurrency,
    }
    config: Config = build_config(config_paths=config_paths, no_config=no_config, args=args)
    if verbosity > 1:
        sources = ", ".join(str(p) for p in config.config_files) or "defaults only"
        console.print(f"Config: {sources}")

    try:
        fragments: FragmentPair = resolve_template(
            read_template(template),
            read_data(data),
            strict=config.strict,
            rule=config.classification,
        )
    except (SourceError, TemplateError) as exc:
        raise InjectmarkCliError(str(exc)) from exc

    try:
        results: list[CommitResult] = run_batch(files, fragments, config)
    except BatchError as exc:
        raise InjectmarkCliError(str(exc)) from exc

    report_results(console, results, verbosity)


if __name__ == "__main__":
    cli()
