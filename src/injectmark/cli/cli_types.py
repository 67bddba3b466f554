# topmark:header:start
#
#   project      : InjectMark
#   file         : cli_types.py
#   file_relpath : src/injectmark/cli/cli_types.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Shared CLI parameter types for InjectMark.

Defines the `ArgsNamespace` TypedDict handed from the command to the config
layer, and `EnumChoiceParam`, a Click parameter type for string-valued enums.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Generic, NoReturn, Protocol, TypedDict, TypeVar, cast

import click

if TYPE_CHECKING:
    from collections.abc import Iterable

    from injectmark.config.types import ClassificationRule

    class ParamTypeBase(Protocol):
        """Typed base to avoid subclassing Any when Click lacks stubs."""

        name: str

else:
    ParamTypeBase = click.ParamType

E = TypeVar("E", bound=Enum)


class ArgsNamespace(TypedDict, total=False):
    """CLI overrides applied on top of the merged configuration.

    Attributes:
        strict (bool | None): ``--strict`` / ``--no-strict``; None if not given.
        classification (ClassificationRule | None): ``--classification``.
        max_concurrency (int | None): ``--max-concurrency``.
    """

    strict: bool | None
    classification: ClassificationRule | None
    max_concurrency: int | None


class EnumChoiceParam(ParamTypeBase, Generic[E]):
    """A Click parameter type that converts a string to a member of a given Enum."""

    enum_cls: type[E]
    name: str
    choices: list[str]

    def __init__(self, enum_cls: type[E]) -> None:
        self.enum_cls = enum_cls
        self.name = self.enum_cls.__name__.lower()
        self.choices = [cast("str", getattr(e, "value", str(e))) for e in self.enum_cls]

    def _fail_noreturn(
        self,
        message: str,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> NoReturn:
        raise click.BadParameter(message, param=param, ctx=ctx)

    def convert(
        self,
        value: str | E | None,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> E | None:
        """Convert a string (case-insensitive) to a member of the Enum."""
        if value is None or isinstance(value, self.enum_cls):
            return value
        lookup: dict[str, E] = {
            cast("str", getattr(choice, "value", str(choice))).lower(): choice
            for choice in cast("Iterable[E]", self.enum_cls)
        }
        key = str(value).lower()
        if key in lookup:
            return lookup[key]
        self._fail_noreturn(
            f"Invalid value '{value}'. Must be one of: {', '.join(self.choices)}",
            param,
            ctx,
        )

    def get_metavar(self, param: click.Parameter, ctx: click.Context | None = None) -> str:
        """Render the choices in the help text."""
        return f"[{'|'.join(self.choices)}]"
