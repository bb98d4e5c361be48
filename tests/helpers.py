"""Shared test helpers for the logical file test suite."""

from __future__ import annotations

from logical_file.logical_file import LogicalFile
from logical_file.section import LineRange, Section

INCLUDE = r"^\s*%\((?P<file>.*)\)"
COMMENT = r"^\s*%%"


def make_section(path: str, first: int, lines: list[str], offset: int = 0) -> Section:
    """Build a section holding *lines* starting at logical line *first*."""
    return Section(path, LineRange(first, first + len(lines) - 1), tuple(lines), offset)


def assert_contiguous(file: LogicalFile) -> None:
    """Sections must cover 1..N in order with no gaps or overlaps."""
    expected = 1
    for section in file.sections_in_order():
        assert section.range.first == expected, (
            f"section {section.range} ({section.source_path}) should start at {expected}"
        )
        expected = section.range.last + 1
    assert expected - 1 == file.size == file.last_line_number()


def assert_round_trip(file: LogicalFile, rewritten: set[int] = frozenset()) -> None:
    """Every logical line resolves to the physical line it was read from."""
    cache: dict[str, list[str]] = {}
    for lno in range(1, file.size + 1):
        if lno in rewritten:
            continue
        path, local = file.resolve_line(lno)
        if path not in cache:
            with open(path) as f:
                cache[path] = f.read().splitlines()
        assert cache[path][local - 1] == file.line(lno), f"line {lno} -> {path}:{local}"
