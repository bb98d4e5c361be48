"""Macro protocol: whole-document transformations of a LogicalFile.

A macro is a class exposing two operations:

* ``invocation(**options)`` validates options once and returns an
  ``Invocation`` naming the macro and carrying its typed options.
* ``apply_macro(file, options)`` returns a (possibly) transformed file.

``apply_macros`` folds a list of invocations over a starting file,
dispatching each through an explicit name -> macro table.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, ClassVar, Mapping, NamedTuple, Sequence

from loguru import logger

from logical_file.errors import ConfigurationError

if TYPE_CHECKING:
    from logical_file.logical_file import LogicalFile


class Invocation(NamedTuple):
    """A macro name paired with its validated options."""

    macro: str
    options: Any


class Macro:
    """Base class for macros. Subclasses set ``name`` and ``options_type``.

    ``options_type`` must provide ``from_mapping(mapping)`` that raises
    ``ConfigurationError`` for missing or malformed options.
    """

    name: ClassVar[str]
    options_type: ClassVar[Any]

    @classmethod
    def invocation(cls, **options: Any) -> Invocation:
        return Invocation(cls.name, cls.options_type.from_mapping(options))

    @classmethod
    def apply_macro(cls, file: LogicalFile, options: Any) -> LogicalFile:
        if not isinstance(options, cls.options_type):
            if not isinstance(options, Mapping):
                raise ConfigurationError(
                    f"{cls.name}: options must be a mapping, got {type(options).__name__}"
                )
            options = cls.options_type.from_mapping(options)
        return cls.process(file, options)

    @classmethod
    def process(cls, file: LogicalFile, options: Any) -> LogicalFile:
        raise NotImplementedError


def builtin_macros() -> dict[str, type[Macro]]:
    """The dispatch table of macros shipped with the package."""
    from logical_file.include import Include
    from logical_file.line_comment import LineComment

    return {Include.name: Include, LineComment.name: LineComment}


def apply_macros(
    file: LogicalFile,
    invocations: Sequence[Invocation],
    macros: Mapping[str, type[Macro]] | None = None,
) -> LogicalFile:
    """Apply each invocation in turn, feeding each result to the next."""
    table = builtin_macros() if macros is None else macros
    for name, options in invocations:
        macro = table.get(name)
        if macro is None:
            raise ConfigurationError(
                f"unknown macro '{name}'",
                notes=[f"available macros: {', '.join(sorted(table))}"],
            )
        logger.debug("applying macro {}", name)
        file = macro.apply_macro(file, options)
    return file


# ── Helpers shared by macro implementations ───────────────────────


def blank_line(line: str) -> str:
    """Replace every character of *line* with a space."""
    return " " * len(line)


def require_pattern(macro: str, options: Mapping[str, Any], key: str = "pattern") -> re.Pattern:
    """Fetch *key* from *options* as a compiled regular expression."""
    if key not in options:
        raise ConfigurationError(f"{macro}: missing required option '{key}'")
    value = options[key]
    if isinstance(value, re.Pattern):
        return value
    if isinstance(value, str):
        try:
            return re.compile(value)
        except re.error as e:
            raise ConfigurationError(f"{macro}: invalid pattern {value!r}: {e}") from e
    raise ConfigurationError(
        f"{macro}: option '{key}' must be a regular expression, "
        f"got {type(value).__name__}"
    )
