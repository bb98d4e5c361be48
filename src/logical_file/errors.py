"""Error taxonomy and Rust-style colored diagnostic rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from logical_file.source import SourceFile, Span


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
    Severity.WARNING: "\033[1;33m",  # bold yellow
    Severity.NOTE: "\033[1;36m",     # bold cyan
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels and notes."""

    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with colors."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color
        self._file_cache: dict[str, SourceFile | None] = {}

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def _get_source_line(self, filename: str, line_num: int) -> str | None:
        """Load and cache source file, return the 1-indexed line."""
        from logical_file.source import SourceFile

        if filename not in self._file_cache:
            try:
                self._file_cache[filename] = SourceFile(filename)
            except SourceUnavailableError:
                self._file_cache[filename] = None
        source = self._file_cache[filename]
        if source is None or not 1 <= line_num <= len(source.lines):
            return None
        return source.line_at(line_num)

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        sev = diag.severity
        color = _COLORS[sev]

        # Header: error[L004]: message
        lines.append(
            f"{self._c(color)}{sev.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        for label in diag.labels:
            span = label.span
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {span}")
            gutter = f"{span.start_line:>4}"
            lines.append(f"  {self._c(_BLUE)}   |{self._c(_RESET)}")

            source_line = self._get_source_line(span.file, span.start_line)
            if source_line is not None:
                lines.append(
                    f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)} {source_line}"
                )
                if span.start_line == span.end_line:
                    caret_len = max(1, span.end_col - span.start_col + 1)
                    padding = " " * (span.start_col - 1)
                    lines.append(
                        f"  {self._c(_BLUE)}   |{self._c(_RESET)} "
                        f"{padding}{self._c(color)}{'^' * caret_len}{self._c(_RESET)}"
                    )

            if label.message:
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)}   "
                    f"{self._c(color)}{label.message}{self._c(_RESET)}"
                )

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)


class LogicalFileError(Exception):
    """Base class for every failure raised by the logical file core.

    An error may point at the physical location responsible for it, in
    which case it renders with a source excerpt.
    """

    code: ClassVar[str] = "L000"

    def __init__(
        self, message: str, *, span: Span | None = None, notes: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.span = span
        self.notes = notes or []

    def to_diagnostic(self) -> Diagnostic:
        labels = [DiagnosticLabel(self.span, "")] if self.span is not None else []
        return Diagnostic(
            severity=Severity.ERROR,
            code=self.code,
            message=self.message,
            labels=labels,
            notes=list(self.notes),
        )


class ConstructionError(LogicalFileError):
    """Line count does not match the declared range, or the range is empty."""

    code = "L001"


class RangeError(LogicalFileError):
    """A logical line or split point lies outside the valid range."""

    code = "L002"


class ConfigurationError(LogicalFileError):
    """A macro invocation or config file is missing options or malformed."""

    code = "L003"


class SourceUnavailableError(LogicalFileError):
    """A backing source could not be read."""

    code = "L004"

    def __init__(self, message: str, *, path: str, span: Span | None = None) -> None:
        super().__init__(message, span=span)
        self.path = path


class PartitionError(LogicalFileError):
    """An insertion point is not inside any section."""

    code = "L005"


class CyclicIncludeError(LogicalFileError):
    """A source includes itself, directly or through other sources."""

    code = "L006"
