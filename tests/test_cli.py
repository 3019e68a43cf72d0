"""Tests for the piklisp CLI, config, and error rendering."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from piklisp.cli import main
from piklisp.config import find_config, load_config
from piklisp.errors import (
    Diagnostic,
    DiagnosticLabel,
    DiagnosticRenderer,
    ParseError,
    Severity,
    Suggestion,
)
from piklisp.source import SourceFile, Span


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def tmp_project(tmp_path):
    """Create a minimal piklisp project in a temp dir."""
    toml = tmp_path / "piklisp.toml"
    toml.write_text(
        '[package]\nname = "testproj"\nversion = "1.0.0"\n'
        '[check]\nextensions = [".plisp", ".pl"]\nfixture_dirs = ["srfi49", "classic"]\n'
        "[style]\ncolor = false\n"
    )
    srfi49 = tmp_path / "srfi49"
    srfi49.mkdir()
    (srfi49 / "main.plisp").write_text('func main ()\n\tfmt.Println "hi"\n')
    classic = tmp_path / "classic"
    classic.mkdir()
    (classic / "main.pl").write_text('(func main ()\n    (fmt.Println "hi"))\n')
    return tmp_path


# --- CLI tests ---


class TestCLI:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Piklisp" in result.output
        assert "check" in result.output
        assert "view" in result.output
        assert "format" in result.output
        assert "highlight" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_check_project(self, runner, tmp_project):
        result = runner.invoke(main, ["check", str(tmp_project)])
        assert result.exit_code == 0
        assert "parsed 1/1 files in" in result.output
        assert "srfi49" in result.output
        assert "classic" in result.output

    def test_check_project_from_subdirectory(self, runner, tmp_project):
        result = runner.invoke(main, ["check", str(tmp_project / "srfi49")])
        assert result.exit_code == 0
        assert result.output.count("parsed 1/1 files") == 2

    def test_check_reports_failures(self, runner, tmp_project):
        (tmp_project / "classic" / "broken.plisp").write_text('(print "oops)\n')
        result = runner.invoke(main, ["check", str(tmp_project)])
        assert result.exit_code == 1
        assert "error[E001]" in result.output
        assert "parsed 1/2 files in" in result.output
        assert "broken.plisp" in result.output
        # color = false in piklisp.toml
        assert "\033[" not in result.output

    def test_check_directory_without_config(self, runner, fixture_dir):
        result = runner.invoke(main, ["check", "--no-color", str(fixture_dir)])
        assert result.exit_code == 1
        assert "parsed 3/5 files in" in result.output
        assert "error[E010]" in result.output
        assert "\033[" not in result.output

    def test_check_empty_directory(self, runner, tmp_path):
        result = runner.invoke(main, ["check", str(tmp_path)])
        assert result.exit_code == 0
        assert "warning[W001]" in result.output
        assert "no source files found" in result.output

    def test_check_missing_fixture_dir(self, runner, tmp_project):
        (tmp_project / "classic" / "main.pl").unlink()
        (tmp_project / "classic").rmdir()
        result = runner.invoke(main, ["check", str(tmp_project)])
        assert result.exit_code == 1
        assert "fixture directory not found" in result.output

    def test_check_single_file(self, runner, tmp_project):
        f = tmp_project / "srfi49" / "main.plisp"
        result = runner.invoke(main, ["check", str(f)])
        assert result.exit_code == 0
        assert "parsed" in result.output

    def test_check_single_bad_file(self, runner, tmp_path):
        f = tmp_path / "bad.plisp"
        f.write_text("(c 'ab')\n")
        result = runner.invoke(main, ["check", "--no-color", str(f)])
        assert result.exit_code == 1
        assert "error[E002]" in result.output
        assert "malformed character literal" in result.output

    def test_view_command(self, runner, tmp_path):
        f = tmp_path / "main.plisp"
        f.write_text("define x 1\n")
        result = runner.invoke(main, ["view", str(f)])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["list (3)", "  define", "  x", "  1"]

    def test_format_command(self, runner, tmp_project):
        f = tmp_project / "srfi49" / "main.plisp"
        result = runner.invoke(main, ["format", str(f)])
        assert result.exit_code == 0
        assert result.output == '(func main () (fmt.Println "hi"))\n'

    def test_format_prints_each_form(self, runner, tmp_path):
        f = tmp_path / "main.plisp"
        f.write_text("(package main)\n(func main ()\n\t(print 1))\n")
        result = runner.invoke(main, ["format", str(f)])
        assert result.exit_code == 0
        assert result.output == "(package main)\n(func main () (print 1))\n"

    def test_format_indented_blocks(self, runner, tmp_path):
        f = tmp_path / "main.plisp"
        f.write_text("package main\nfunc main ()\n\tprint 1\n")
        result = runner.invoke(main, ["format", str(f)])
        assert result.exit_code == 0
        assert result.output == "(package main)\n(func main () (print 1))\n"

    def test_format_empty_file(self, runner, tmp_path):
        f = tmp_path / "empty.plisp"
        f.write_text("")
        result = runner.invoke(main, ["format", str(f)])
        assert result.exit_code == 0
        assert result.output == ""

    @pytest.mark.parametrize("command", ["view", "format"])
    def test_parse_error_honors_config_color(self, runner, tmp_project, command):
        f = tmp_project / "srfi49" / "bad.plisp"
        f.write_text("(a))\n")
        result = runner.invoke(main, [command, str(f)])
        assert result.exit_code == 1
        assert "error[E010]" in result.output
        assert "\033[" not in result.output

    def test_format_bad_file(self, runner, tmp_path):
        f = tmp_path / "bad.plisp"
        f.write_text("(a))\n")
        result = runner.invoke(main, ["format", str(f)])
        assert result.exit_code == 1
        assert "E010" in result.output

    def test_highlight_command(self, runner, tmp_project):
        f = tmp_project / "srfi49" / "main.plisp"
        result = runner.invoke(main, ["highlight", str(f)])
        assert result.exit_code == 0
        assert "func" in result.output
        assert "fmt.Println" in result.output


# --- Config tests ---


class TestConfig:
    def test_load_config(self, tmp_project):
        config = load_config(tmp_project / "piklisp.toml")
        assert config.package.name == "testproj"
        assert config.package.version == "1.0.0"
        assert config.check.extensions == [".plisp", ".pl"]
        assert config.check.fixture_dirs == ["srfi49", "classic"]
        assert config.style.color is False

    def test_load_config_defaults(self, tmp_path):
        toml = tmp_path / "piklisp.toml"
        toml.write_text("[package]\n")
        config = load_config(toml)
        assert config.package.name == "untitled"
        assert config.check.extensions == [".plisp"]
        assert config.check.fixture_dirs == []
        assert config.style.color is True

    def test_find_config(self, tmp_project):
        sub = tmp_project / "srfi49"
        found = find_config(sub)
        assert found == tmp_project / "piklisp.toml"

    def test_find_config_from_file(self, tmp_project):
        found = find_config(tmp_project / "srfi49" / "main.plisp")
        assert found == tmp_project / "piklisp.toml"

    def test_find_config_not_found(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        with pytest.raises(FileNotFoundError, match="No piklisp.toml found"):
            find_config(empty)


# --- Error rendering tests ---


class TestDiagnostics:
    def test_render_error(self):
        span = Span("main.plisp", 12, 19, 12, 24)
        diag = Diagnostic(
            severity=Severity.ERROR,
            code="E001",
            message="unterminated string literal",
            labels=[DiagnosticLabel(span=span, message="string starts here")],
            notes=['remaining input: "hello'],
            suggestions=[
                Suggestion(message="close the string", replacement='"hello"'),
            ],
        )

        renderer = DiagnosticRenderer(color=False)
        output = renderer.render(diag)

        assert "error[E001]" in output
        assert "unterminated string literal" in output
        assert "main.plisp:12:19" in output
        assert "string starts here" in output
        assert "note:" in output
        assert "help: close the string" in output
        assert 'try: "hello"' in output

    def test_render_color(self):
        diag = Diagnostic(Severity.WARNING, "W001", "something odd")
        output = DiagnosticRenderer(color=True).render(diag)
        assert "\033[1;33m" in output
        assert "warning[W001]" in output

    def test_render_reads_source_from_disk(self, tmp_path):
        f = tmp_path / "main.plisp"
        f.write_text("(a b)\n(c 'xy')\n")
        span = Span(str(f), 2, 4, 2, 4)
        diag = Diagnostic(Severity.ERROR, "E002", "malformed character literal",
                          labels=[DiagnosticLabel(span=span, message="")])
        output = DiagnosticRenderer(color=False).render(diag)
        assert "(c 'xy')" in output
        assert "   ^" in output

    def test_parse_error(self):
        diag = Diagnostic(Severity.ERROR, "E002", "malformed character literal")
        err = ParseError(diag, remainder="rest")
        assert err.code == "E002"
        assert err.span is None
        assert err.remainder == "rest"
        assert str(err) == "E002: malformed character literal"


# --- Source tests ---


class TestSource:
    def test_source_file(self, tmp_path):
        f = tmp_path / "test.plisp"
        f.write_text("line one\nline two\nline three\n")
        sf = SourceFile.load(f)
        assert sf.name == str(f)
        assert sf.line_at(1) == "line one"
        assert sf.line_at(3) == "line three"
        assert sf.line_at(0) is None
        assert sf.line_at(99) is None

    def test_source_file_normalizes_newlines(self, tmp_path):
        f = tmp_path / "test.plisp"
        f.write_bytes(b"a\r\n\tb\r\n")
        assert SourceFile.load(f).content == "a\n\tb\n"

    def test_lines_split_on_newline_only(self):
        sf = SourceFile("<test>", "a\x0cb\x1dc\nd\n")
        assert sf.line_at(1) == "a\x0cb\x1dc"
        assert sf.line_at(2) == "d"

    def test_span_str(self):
        span = Span("file.plisp", 10, 5, 10, 20)
        assert str(span) == "file.plisp:10:5"
