"""One file from many: logical files backed by multiple sources."""

from loguru import logger

from logical_file.errors import (
    ConfigurationError,
    ConstructionError,
    CyclicIncludeError,
    LogicalFileError,
    PartitionError,
    RangeError,
    SourceUnavailableError,
)
from logical_file.include import Include
from logical_file.line_comment import LineComment
from logical_file.logical_file import LogicalFile, partition_sections, sections_to_map
from logical_file.macro import Invocation, Macro, apply_macros
from logical_file.section import LineRange, Section, total_size
from logical_file.source import Location, load_lines

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ConstructionError",
    "CyclicIncludeError",
    "Include",
    "Invocation",
    "LineComment",
    "LineRange",
    "Location",
    "LogicalFile",
    "LogicalFileError",
    "Macro",
    "PartitionError",
    "RangeError",
    "Section",
    "SourceUnavailableError",
    "apply_macros",
    "load_lines",
    "partition_sections",
    "sections_to_map",
    "total_size",
]

logger.disable("logical_file")
