"""Source loading and location tracking for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, NamedTuple

from loguru import logger

from logical_file.errors import SourceUnavailableError

Loader = Callable[[str], list[str]]


@dataclass(frozen=True)
class Span:
    """A range within a source file."""

    file: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __str__(self) -> str:
        return f"{self.file}:{self.start_line}:{self.start_col}"


class Location(NamedTuple):
    """A physical file and its 1-indexed local line number."""

    path: str
    line: int

    def __str__(self) -> str:
        return f"{self.path}:{self.line}"

    def span(self, start_col: int = 1, end_col: int = 1) -> Span:
        return Span(self.path, self.line, start_col, self.line, end_col)


def load_lines(source_path: str) -> list[str]:
    """Read *source_path* and split it into lines.

    Line terminators follow ``str.splitlines``; a trailing newline does not
    produce an extra empty line.
    """
    try:
        content = Path(source_path).read_text()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnavailableError(
            f"cannot read source '{source_path}': {e}", path=source_path,
        ) from e
    lines = content.splitlines()
    logger.debug("loaded {} ({} lines)", source_path, len(lines))
    return lines


class SourceFile:
    """A loaded source file with line access for diagnostics."""

    def __init__(self, path: str, loader: Loader = load_lines) -> None:
        self.path = path
        self.lines = loader(path)

    def line_at(self, n: int) -> str:
        """Return the 1-indexed line, or empty string if out of range."""
        if 1 <= n <= len(self.lines):
            return self.lines[n - 1]
        return ""

