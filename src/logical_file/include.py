"""Include-file macro.

Lines matching the include pattern name another file (through the pattern's
``file`` named group, relative to the logical file's base path). The
directive line is blanked and the named file spliced in at that line.
Included files may include further files.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

from loguru import logger

from logical_file.errors import ConfigurationError, CyclicIncludeError, LogicalFileError
from logical_file.logical_file import LogicalFile, join_path
from logical_file.macro import Macro, blank_line, require_pattern


@dataclass(frozen=True)
class IncludeOptions:
    pattern: re.Pattern

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> IncludeOptions:
        pattern = require_pattern(Include.name, options)
        if "file" not in pattern.groupindex:
            raise ConfigurationError(
                f"{Include.name}: pattern {pattern.pattern!r} must capture 'file'",
                notes=["use a named group, e.g. %\\((?P<file>.*)\\)"],
            )
        return cls(pattern=pattern)


class Include(Macro):
    """Splice the file named by each include directive into the document."""

    name = "include"
    options_type = IncludeOptions

    @classmethod
    def process(cls, file: LogicalFile, options: IncludeOptions) -> LogicalFile:
        """Work section by section from line 1.

        When a section holds a directive, the line is blanked, the file is
        inserted and scanning restarts at the first line of that section,
        which may hold more directives (and now precedes the inserted
        lines). Otherwise scanning moves on to the next section. Included
        sections are scanned in turn, which is what makes inclusion nest.
        """
        pattern = options.pattern
        # source path -> every source on an include chain leading to it
        ancestors: dict[str, frozenset[str]] = {}
        cursor = 1

        while True:
            section = file.section_including_line(cursor)
            if section is None:
                return file
            found = section.line_matching(pattern)
            if found is None:
                cursor = section.last_line_number + 1
                continue

            lno, directive = found
            match = pattern.search(directive)
            target = (match.group("file") or "").strip()
            target_path = join_path(file.base_path, target)
            span = section.resolve_line(lno).span(match.start("file") + 1, match.end("file"))

            chain = ancestors.get(section.source_path, frozenset()) | {section.source_path}
            if target_path in chain:
                raise CyclicIncludeError(
                    f"cyclic include of '{target_path}'",
                    span=span,
                    notes=[f"'{target_path}' is already being included above '{section.source_path}'"],
                )

            try:
                file = file.update_line(lno, blank_line).insert(target, lno)
            except LogicalFileError as e:
                if e.span is None:
                    e.span = span
                raise

            logger.debug("included {} at line {} from {}", target_path, lno, section.source_path)
            ancestors[target_path] = ancestors.get(target_path, frozenset()) | chain
            cursor = section.first_line_number
