"""Single-line comment macro.

A line whose text matches the comment pattern has its whole content turned
into whitespace of equal length. The pattern is searched anywhere in the
line, so anchor it (``^\\s*%%``) to recognise comments only at the start;
a comment trailing an expression blanks the expression too.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

from logical_file.logical_file import LogicalFile
from logical_file.macro import Macro, blank_line, require_pattern


@dataclass(frozen=True)
class LineCommentOptions:
    pattern: re.Pattern

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> LineCommentOptions:
        return cls(pattern=require_pattern(LineComment.name, options))


class LineComment(Macro):
    """Blank every line matching ``pattern``, section by section."""

    name = "line_comment"
    options_type = LineCommentOptions

    @classmethod
    def process(cls, file: LogicalFile, options: LineCommentOptions) -> LogicalFile:
        processed = []
        for section in file.sections_in_order():
            for lno, _line in section.lines_matching(options.pattern):
                section = section.update_line(lno, blank_line)
            processed.append(section)
        return file.with_sections(processed)
