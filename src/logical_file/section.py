"""Sections: contiguous runs of logical lines backed by one physical source.

In the simple case a ``Section`` represents the entire contents of a backing
file. A ``Section`` can however be split and moved, for example when another
section is inserted within its range. The ``offset`` is adjusted each time so
that a logical line number still converts to the right local line number in
the backing file::

    local_line = logical_line + offset

E.g. file 1 has 20 lines and file 2 has 10. Inserting file 2 at line 11
gives::

    lines  1..10 => file 1, lines  1..10   (offset 0)
    lines 11..20 => file 2, lines  1..10   (offset -10)
    lines 21..30 => file 1, lines 11..20   (offset -10)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, Iterator, Union

from logical_file.errors import ConstructionError, RangeError
from logical_file.source import Loader, Location, load_lines

LinePredicate = Union[Callable[[str], bool], re.Pattern, str]


@dataclass(frozen=True, order=True)
class LineRange:
    """Closed interval ``[first, last]`` of logical line numbers."""

    first: int
    last: int

    def __post_init__(self) -> None:
        if self.first > self.last:
            raise ConstructionError(f"empty line range {self.first}..{self.last}")

    def __contains__(self, lno: object) -> bool:
        return isinstance(lno, int) and self.first <= lno <= self.last

    def __len__(self) -> int:
        return self.last - self.first + 1

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.first, self.last + 1))

    def __str__(self) -> str:
        return f"{self.first}..{self.last}"

    def shift(self, by_lines: int) -> LineRange:
        return LineRange(self.first + by_lines, self.last + by_lines)


def _matcher(pred: LinePredicate) -> Callable[[str], bool]:
    if isinstance(pred, str):
        pred = re.compile(pred)
    if isinstance(pred, re.Pattern):
        return lambda line: pred.search(line) is not None
    return pred


@dataclass(frozen=True)
class Section:
    """Lines from *source_path* occupying the logical lines in *range*."""

    source_path: str
    range: LineRange
    lines: tuple[str, ...] = field(repr=False)
    offset: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.lines, tuple):
            object.__setattr__(self, "lines", tuple(self.lines))
        if len(self.lines) != len(self.range):
            raise ConstructionError(
                f"range {self.range} holds {len(self.range)} line(s) "
                f"but {len(self.lines)} were given for {self.source_path}"
            )
        if self.range.first + self.offset < 1:
            raise ConstructionError(
                f"offset {self.offset} maps line {self.range.first} of {self.source_path} "
                f"to local line {self.range.first + self.offset}"
            )

    @classmethod
    def load(cls, source_path: str, loader: Loader = load_lines) -> Section:
        """Create a section holding the whole of *source_path* at lines 1..N."""
        lines = loader(source_path)
        if not lines:
            raise ConstructionError(f"source '{source_path}' contains no lines")
        return cls(source_path, LineRange(1, len(lines)), tuple(lines))

    # ── Queries ───────────────────────────────────────────────────

    @property
    def first_line_number(self) -> int:
        return self.range.first

    @property
    def last_line_number(self) -> int:
        return self.range.last

    @property
    def size(self) -> int:
        return len(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def numbered_lines(self) -> Iterator[tuple[int, str]]:
        """Yield ``(logical_lno, line)`` pairs in order."""
        return zip(self.range, self.lines)

    def line(self, lno: int) -> str:
        """Return the line at logical line number *lno*."""
        self._check_contains(lno)
        return self.lines[lno - self.range.first]

    def line_matching(self, pred: LinePredicate) -> tuple[int, str] | None:
        """Return the first ``(lno, line)`` matching a predicate or regex."""
        match = _matcher(pred)
        for lno, line in self.numbered_lines():
            if match(line):
                return lno, line
        return None

    def lines_matching(self, pred: LinePredicate) -> list[tuple[int, str]]:
        """Return every ``(lno, line)`` matching a predicate or regex."""
        match = _matcher(pred)
        return [(lno, line) for lno, line in self.numbered_lines() if match(line)]

    def is_splittable(self) -> bool:
        return len(self.range) > 1

    def resolve_line(self, lno: int) -> Location:
        """Map logical line *lno* to its file and local line number."""
        if lno not in self.range:
            raise RangeError(
                f"cannot resolve logical line {lno} outside section range {self.range}"
            )
        return Location(self.source_path, lno + self.offset)

    # ── Transformations ───────────────────────────────────────────

    def update_line(self, lno: int, fun: Callable[[str], str]) -> Section:
        """Return a copy with line *lno* replaced by ``fun(old_line)``."""
        self._check_contains(lno)
        index = lno - self.range.first
        lines = self.lines[:index] + (fun(self.lines[index]),) + self.lines[index + 1 :]
        return replace(self, lines=lines)

    def split(self, at_line: int) -> tuple[Section, Section]:
        """Split into ``(pre, post)`` where *post* starts at *at_line*.

        The split point must be strictly inside the range: neither the first
        nor the last line, and never in a one-line section.
        """
        lo, hi = self.range.first, self.range.last
        if not self.is_splittable():
            raise RangeError(f"cannot split a section containing one line ({self.range})")
        if at_line not in self.range:
            raise RangeError(f"split point {at_line} outside section range {self.range}")
        if at_line == lo:
            raise RangeError(f"cannot set split point on first line ({at_line})")
        if at_line == hi:
            raise RangeError(f"cannot set split point on last line ({at_line})")

        index = at_line - lo
        pre = Section(self.source_path, LineRange(lo, at_line - 1), self.lines[:index], self.offset)
        post = Section(self.source_path, LineRange(at_line, hi), self.lines[index:], self.offset)
        return pre, post

    def shift(self, by_lines: int) -> Section:
        """Move the section *by_lines*, keeping each line's local number."""
        if by_lines == 0:
            return self
        return replace(self, range=self.range.shift(by_lines), offset=self.offset - by_lines)

    def _check_contains(self, lno: int) -> None:
        if lno not in self.range:
            raise RangeError(f"section ({self.range}) does not contain line {lno}")


def total_size(sections: Iterable[Section]) -> int:
    """Number of lines across *sections*."""
    return sum(section.size for section in sections)
