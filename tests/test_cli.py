"""Tests for the logical-file CLI, config, and error rendering."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from logical_file import __version__
from logical_file.cli import main
from logical_file.config import (
    DEFAULT_COMMENT_PATTERN,
    DEFAULT_INCLUDE_PATTERN,
    default_config,
    find_config,
    load_config,
)
from logical_file.errors import (
    ConfigurationError,
    Diagnostic,
    DiagnosticLabel,
    DiagnosticRenderer,
    SourceUnavailableError,
    Severity,
)
from logical_file.source import Location, SourceFile, Span, load_lines


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def tmp_project(tmp_path):
    """A project whose sources live under src/ and only includes files."""
    (tmp_path / "logical_file.toml").write_text(
        "[document]\n"
        'base_path = "src"\n'
        'macros = ["include"]\n'
        "\n"
        "[macros.include]\n"
        "pattern = '^#include \"(?P<file>[^\"]+)\"'\n"
    )
    src = tmp_path / "src"
    src.mkdir()
    (src / "main.c").write_text('int x;\n#include "defs.h"\n// tail\nint y;\n')
    (src / "defs.h").write_text("#define A 1\n#define B 2\n")
    return tmp_path


# --- CLI tests ---


class TestCLI:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "render" in result.output
        assert "resolve" in result.output
        assert "sections" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_render_with_defaults(self, runner, support):
        result = runner.invoke(main, ["render", str(Path(support) / "main.source")])
        assert result.exit_code == 0
        assert result.output.splitlines()[5:9] == ["alpha", "beta", "delta", "gamma"]
        assert result.output.splitlines()[-1] == "     "

    def test_render_line_numbers(self, runner, support):
        result = runner.invoke(main, ["render", "-n", str(Path(support) / "main.source")])
        assert result.exit_code == 0
        line7 = result.output.splitlines()[6]
        assert line7.startswith(" 7 ")
        assert "include.source:2 | beta" in line7

    def test_resolve(self, runner, support):
        result = runner.invoke(main, ["resolve", str(Path(support) / "main.source"), "7"])
        assert result.exit_code == 0
        assert result.output.strip().endswith("include.source:2")

    def test_resolve_out_of_range(self, runner, support):
        result = runner.invoke(main, ["resolve", str(Path(support) / "main.source"), "99"])
        assert result.exit_code == 1
        assert "outside the logical file" in result.output

    def test_sections(self, runner, support):
        result = runner.invoke(main, ["sections", str(Path(support) / "main.source")])
        assert result.exit_code == 0
        rows = result.output.splitlines()
        assert len(rows) == 3
        assert rows[0].startswith("1..5")
        assert rows[1].startswith("6..9") and rows[1].endswith("include.source")
        assert rows[2].startswith("10..15")

    def test_missing_include_renders_diagnostic(self, runner, support):
        result = runner.invoke(
            main, ["--no-color", "render", str(Path(support) / "missing.source")],
        )
        assert result.exit_code == 1
        assert "error[L004]" in result.output
        assert "missing.source:2:3" in result.output
        assert "%(nope.source)" in result.output
        assert "^^^^^^^^^^^" in result.output

    def test_cycle_renders_diagnostic(self, runner, support):
        result = runner.invoke(main, ["--no-color", "render", str(Path(support) / "self.source")])
        assert result.exit_code == 1
        assert "error[L006]" in result.output

    def test_project_config(self, runner, tmp_project):
        result = runner.invoke(main, ["render", str(tmp_project / "src" / "main.c")])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "int x;", "#define A 1", "#define B 2", " " * 17, "// tail", "int y;",
        ]

    def test_explicit_config(self, runner, tmp_project):
        config = tmp_project / "logical_file.toml"
        result = runner.invoke(
            main, ["--config", str(config), "sections", str(tmp_project / "src" / "main.c")],
        )
        assert result.exit_code == 0
        assert result.output.splitlines()[1].endswith("defs.h")

    def test_scalar_document_reports(self, runner, tmp_path):
        (tmp_path / "logical_file.toml").write_text("document = 3\n")
        (tmp_path / "doc.txt").write_text("a\nb\n")
        result = runner.invoke(main, ["--no-color", "render", str(tmp_path / "doc.txt")])
        assert result.exit_code == 1
        assert "error[L003]" in result.output

    def test_bad_config_reports(self, runner, tmp_path):
        (tmp_path / "logical_file.toml").write_text('[document]\nmacros = ["nope"]\n')
        (tmp_path / "doc.txt").write_text("a\nb\n")
        result = runner.invoke(main, ["--no-color", "render", str(tmp_path / "doc.txt")])
        assert result.exit_code == 1
        assert "error[L003]" in result.output
        assert "unknown macro 'nope'" in result.output


# --- Config tests ---


class TestConfig:
    def test_load_config(self, tmp_project):
        config = load_config(tmp_project / "logical_file.toml")
        assert config.document.base_path == (tmp_project / "src").resolve()
        assert config.document.macros == ["include"]
        assert config.macros["include"]["pattern"] == '^#include "(?P<file>[^"]+)"'

    def test_load_config_defaults(self, tmp_path):
        toml = tmp_path / "logical_file.toml"
        toml.write_text("[document]\n")
        config = load_config(toml)
        assert config.document.base_path == tmp_path.resolve()
        assert config.document.macros == ["include", "line_comment"]
        assert config.macros["include"]["pattern"] == DEFAULT_INCLUDE_PATTERN
        assert config.macros["line_comment"]["pattern"] == DEFAULT_COMMENT_PATTERN

    def test_invocations(self, tmp_project):
        invocations = load_config(tmp_project / "logical_file.toml").invocations()
        assert [i.macro for i in invocations] == ["include"]

    def test_default_config(self, tmp_path):
        config = default_config(tmp_path / "doc.txt")
        assert config.document.base_path == tmp_path.resolve()
        assert [i.macro for i in config.invocations()] == ["include", "line_comment"]

    def test_bad_pattern(self, tmp_path):
        toml = tmp_path / "logical_file.toml"
        toml.write_text("[macros.include]\npattern = '%(no-capture)'\n")
        with pytest.raises(ConfigurationError):
            load_config(toml).invocations()

    def test_document_not_a_table(self, tmp_path):
        toml = tmp_path / "logical_file.toml"
        toml.write_text("document = 3\n")
        with pytest.raises(ConfigurationError, match=r"\[document\] must be a table"):
            load_config(toml)

    def test_macros_not_a_table(self, tmp_path):
        toml = tmp_path / "logical_file.toml"
        toml.write_text('macros = "oops"\n')
        with pytest.raises(ConfigurationError, match=r"\[macros\] must be a table"):
            load_config(toml)

    def test_invalid_toml(self, tmp_path):
        toml = tmp_path / "logical_file.toml"
        toml.write_text("[document\n")
        with pytest.raises(ConfigurationError):
            load_config(toml)

    def test_find_config(self, tmp_project):
        found = find_config(tmp_project / "src")
        assert found == (tmp_project / "logical_file.toml").resolve()

    def test_find_config_not_found(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        with pytest.raises(FileNotFoundError, match="No logical_file.toml found"):
            find_config(empty)


# --- Error rendering tests ---


class TestDiagnostics:
    def test_render_error(self, tmp_path):
        src = tmp_path / "main.source"
        src.write_text("one\n%(gone.source)\n")
        span = Span(str(src), 2, 3, 2, 13)
        diag = Diagnostic(
            severity=Severity.ERROR,
            code="L004",
            message="cannot read source 'gone.source'",
            labels=[DiagnosticLabel(span=span, message="included here")],
            notes=["paths are relative to the base path"],
        )

        output = DiagnosticRenderer(color=False).render(diag)

        assert "error[L004]" in output
        assert f"{src}:2:3" in output
        assert "%(gone.source)" in output
        assert "  ^^^^^^^^^^^" in output
        assert "included here" in output
        assert "note: paths are relative" in output

    def test_render_unreadable_file(self):
        span = Span("nowhere.source", 5, 1, 5, 10)
        diag = Diagnostic(Severity.WARNING, "W001", "odd", [DiagnosticLabel(span, "")])
        output = DiagnosticRenderer(color=False).render(diag)
        assert "warning[W001]" in output
        assert "nowhere.source:5:1" in output
        assert "^" not in output

    def test_error_to_diagnostic(self):
        err = SourceUnavailableError("gone", path="x", span=Span("x", 1, 1, 1, 1))
        diag = err.to_diagnostic()
        assert diag.code == "L004"
        assert diag.severity == Severity.ERROR
        assert diag.labels[0].span.file == "x"

    def test_error_without_span(self):
        diag = ConfigurationError("bad", notes=["hint"]).to_diagnostic()
        assert diag.labels == []
        assert diag.notes == ["hint"]


# --- Source tests ---


class TestSource:
    def test_source_file(self, tmp_path):
        f = tmp_path / "test.source"
        f.write_text("line one\nline two\nline three\n")
        sf = SourceFile(str(f))
        assert sf.line_at(1) == "line one"
        assert sf.line_at(3) == "line three"
        assert sf.line_at(0) == ""
        assert sf.line_at(99) == ""

    def test_load_lines_terminators(self, tmp_path):
        f = tmp_path / "mixed.source"
        f.write_bytes(b"a\r\nb\rc\nd")
        assert load_lines(str(f)) == ["a", "b", "c", "d"]

    def test_load_lines_missing(self, tmp_path):
        with pytest.raises(SourceUnavailableError):
            load_lines(str(tmp_path / "absent"))

    def test_location_span(self):
        span = Location("file.source", 10).span(5, 20)
        assert span == Span("file.source", 10, 5, 10, 20)
        assert str(span) == "file.source:10:5"
