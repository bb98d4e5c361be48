"""LogicalFile: one contiguous document assembled from many backing files.

A typical use is a compiler with ``#include`` style functionality. The
compiler works on the whole text, yet can translate any logical line number
back to the specific file and local line it came from, e.g. to pinpoint
where an error arose.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable, Sequence

from loguru import logger

from logical_file.errors import ConstructionError, PartitionError, RangeError
from logical_file.section import LineRange, Section, total_size
from logical_file.source import Loader, Location, load_lines

if TYPE_CHECKING:
    from logical_file.macro import Invocation


@dataclass(frozen=True)
class LogicalFile:
    """An ordered, gap-free sequence of sections covering lines ``1..N``.

    ``sections`` is kept sorted by first line. Every operation returns a new
    ``LogicalFile``; the receiver is never modified.
    """

    base_path: str | None
    sections: tuple[Section, ...]
    loader: Loader = field(default=load_lines, repr=False, compare=False)

    # ── Construction ──────────────────────────────────────────────

    @classmethod
    def read(
        cls,
        base_path: str | Path | None,
        source_path: str | Path,
        macros: Sequence[Invocation] = (),
        *,
        loader: Loader = load_lines,
    ) -> LogicalFile:
        """Load *source_path* (relative to *base_path*) and apply *macros*."""
        from logical_file.macro import apply_macros

        base = None if base_path is None else str(base_path)
        section = Section.load(join_path(base, source_path), loader)
        file = cls(base, (section,), loader)
        logger.debug("read {} ({} lines)", section.source_path, section.size)
        return apply_macros(file, macros)

    @classmethod
    def assemble(
        cls,
        base_path: str | Path | None,
        sections: Iterable[Section],
        *,
        loader: Loader = load_lines,
    ) -> LogicalFile:
        """Build a file from *sections*, which must not overlap."""
        ordered = sorted(sections, key=lambda s: s.range)
        for prev, curr in zip(ordered, ordered[1:]):
            if curr.range.first <= prev.range.last:
                raise ConstructionError(
                    f"section {curr.range} ({curr.source_path}) overlaps "
                    f"{prev.range} ({prev.source_path})"
                )
        base = None if base_path is None else str(base_path)
        return cls(base, tuple(ordered), loader)

    def with_sections(self, sections: Iterable[Section]) -> LogicalFile:
        """Reassemble with *sections*, keeping base path and loader."""
        return LogicalFile.assemble(self.base_path, sections, loader=self.loader)

    # ── Queries ───────────────────────────────────────────────────

    def sections_in_order(self) -> list[Section]:
        return list(self.sections)

    def section_including_line(self, lno: int) -> Section | None:
        """Return the section containing logical line *lno*, or None."""
        for section in self.sections:
            if lno in section.range:
                return section
        return None

    def line(self, lno: int) -> str:
        return self._owning_section(lno).line(lno)

    def lines(self) -> list[str]:
        """All lines in logical order."""
        return [line for section in self.sections for line in section.lines]

    @property
    def size(self) -> int:
        return total_size(self.sections)

    def __len__(self) -> int:
        return self.size

    def last_line_number(self) -> int:
        if not self.sections:
            return 0
        return self.sections[-1].range.last

    def contains_source(self, source_path: str | Path) -> bool:
        """True if at least one section is backed by *source_path*."""
        path = str(source_path)
        return any(section.source_path == path for section in self.sections)

    def resolve_line(self, lno: int) -> Location:
        """Translate logical line *lno* into ``(path, local_line)``."""
        return self._owning_section(lno).resolve_line(lno)

    def __str__(self) -> str:
        return "\n".join(self.lines())

    # ── Transformations ───────────────────────────────────────────

    def update_line(self, lno: int, fun: Callable[[str], str]) -> LogicalFile:
        """Replace line *lno* with ``fun(current_line)``."""
        target = self._owning_section(lno)
        updated = target.update_line(lno, fun)
        sections = tuple(updated if s is target else s for s in self.sections)
        return replace(self, sections=sections)

    def insert(self, source: str | Path | Section, at_line: int) -> LogicalFile:
        """Splice *source* in so that its first line becomes *at_line*.

        *source* is either a path relative to ``base_path`` or a ready-made
        section. The section containing *at_line* is split around it and
        everything after is shifted down, keeping the file contiguous.
        """
        if isinstance(source, Section):
            insert_section = source
        else:
            insert_section = Section.load(join_path(self.base_path, source), self.loader)

        before, target, after = partition_sections(self.sections, at_line)
        if target is None:
            raise PartitionError(
                f"unable to partition: line {at_line} is not in any source section"
            )

        pre, post = target.split(at_line)
        insert_section = insert_section.shift(pre.range.last - insert_section.range.first + 1)
        moved = [s.shift(insert_section.size) for s in [post, *after]]

        logger.debug(
            "inserted {} at line {} ({} lines)",
            insert_section.source_path, at_line, insert_section.size,
        )
        return self.with_sections([*before, pre, insert_section, *moved])

    def _owning_section(self, lno: int) -> Section:
        section = self.section_including_line(lno)
        if section is None:
            raise RangeError(
                f"line {lno} is outside the logical file (1..{self.last_line_number()})"
            )
        return section


# ── Utility functions ─────────────────────────────────────────────


def join_path(base_path: str | None, source_path: str | Path) -> str:
    if base_path is None:
        return str(source_path)
    return str(Path(base_path) / source_path)


def partition_sections(
    sections: Iterable[Section], at_line: int,
) -> tuple[list[Section], Section | None, list[Section]]:
    """Split *sections* around the one containing *at_line*.

    Returns ``(before, target, after)`` in logical order. When no section
    contains *at_line* all sections land in *before* and *target* is None.
    """
    ordered = sorted(sections, key=lambda s: s.range)
    for index, section in enumerate(ordered):
        if at_line in section.range:
            return ordered[:index], section, ordered[index + 1 :]
    return ordered, None, []


def sections_to_map(sections: Iterable[Section]) -> dict[LineRange, Section]:
    """Key *sections* by their range, in logical order."""
    mapping: dict[LineRange, Section] = {}
    for section in sorted(sections, key=lambda s: s.range):
        if section.range in mapping:
            raise ConstructionError(f"duplicate section range {section.range}")
        mapping[section.range] = section
    return mapping
