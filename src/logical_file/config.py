"""TOML config loading for logical_file.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from logical_file.errors import ConfigurationError
from logical_file.macro import Invocation, builtin_macros

CONFIG_NAME = "logical_file.toml"

DEFAULT_INCLUDE_PATTERN = r"^\s*%\((?P<file>.*)\)"
DEFAULT_COMMENT_PATTERN = r"^\s*%%"


def _default_macros() -> dict[str, dict[str, Any]]:
    return {
        "include": {"pattern": DEFAULT_INCLUDE_PATTERN},
        "line_comment": {"pattern": DEFAULT_COMMENT_PATTERN},
    }


@dataclass
class DocumentConfig:
    base_path: Path = field(default_factory=Path.cwd)
    macros: list[str] = field(default_factory=lambda: ["include", "line_comment"])


@dataclass
class LogicalFileConfig:
    document: DocumentConfig = field(default_factory=DocumentConfig)
    macros: dict[str, dict[str, Any]] = field(default_factory=_default_macros)

    def invocations(self) -> list[Invocation]:
        """Validated invocations for ``document.macros``, in order."""
        table = builtin_macros()
        result = []
        for name in self.document.macros:
            macro = table.get(name)
            if macro is None:
                raise ConfigurationError(
                    f"unknown macro '{name}'",
                    notes=[f"available macros: {', '.join(sorted(table))}"],
                )
            result.append(macro.invocation(**self.macros.get(name, {})))
        return result


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find logical_file.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def default_config(source_path: Path) -> LogicalFileConfig:
    """Config used when no file is found: built-in patterns, base at the source."""
    return LogicalFileConfig(document=DocumentConfig(base_path=source_path.resolve().parent))


def load_config(path: Path) -> LogicalFileConfig:
    """Parse a logical_file.toml file into a LogicalFileConfig."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"invalid {path.name}: {e}") from e

    config = LogicalFileConfig()
    config.document.base_path = path.resolve().parent

    if "document" in data:
        doc = data["document"]
        if not isinstance(doc, dict):
            raise ConfigurationError("[document] must be a table")
        base_path = doc.get("base_path", ".")
        macros = doc.get("macros", config.document.macros)
        if not isinstance(base_path, str):
            raise ConfigurationError("document.base_path must be a string")
        if not isinstance(macros, list) or not all(isinstance(m, str) for m in macros):
            raise ConfigurationError("document.macros must be a list of macro names")
        config.document = DocumentConfig(
            base_path=(path.resolve().parent / base_path).resolve(),
            macros=macros,
        )

    if "macros" in data:
        if not isinstance(data["macros"], dict):
            raise ConfigurationError("[macros] must be a table")
        for name, options in data["macros"].items():
            if not isinstance(options, dict):
                raise ConfigurationError(f"[macros.{name}] must be a table")
            config.macros[name] = {**config.macros.get(name, {}), **options}

    return config
