"""
Soulite Front End and CLI Test Suite
====================================

Tests for the SouliteFrontend facade and the soulc command.

Test Organization
-----------------
- TestDiagnosticCollector: Error collection and reporting
- TestFrontend: Programmatic parsing of strings and files
- TestSoulcCLI: The soulc command-line tool
"""

import pytest
from click.testing import CliRunner

from soulite import __version__
from soulite.cli.errors import ExitCode
from soulite.cli.soulc import main
from soulite.errors import (
    DiagnosticCollector,
    InvalidCharacterError,
    SouliteCompilationError,
    SourceLocation,
)
from soulite.frontend import FrontendOptions, SouliteFrontend


SAMPLE = """\
; sample program
$math:sqrt
.add|Int Int -> Int'a,b= a + b * 2
add(1 2)
"""


# =============================================================================
# Diagnostic Collector Tests
# =============================================================================

class TestDiagnosticCollector:
    """Tests for DiagnosticCollector."""

    def test_empty(self):
        """A fresh collector has no errors."""
        diagnostics = DiagnosticCollector()
        assert not diagnostics.has_errors()
        assert diagnostics.report() == "0 errors, 0 warnings"

    def test_same_error_recorded_once(self):
        """Adding one error object twice keeps a single entry."""
        diagnostics = DiagnosticCollector()
        error = InvalidCharacterError("?", SourceLocation("t.soul", 1, 1))
        diagnostics.add(error)
        diagnostics.add(error)
        assert diagnostics.error_count() == 1

    def test_report(self):
        """The report lists errors, warnings and a summary."""
        diagnostics = DiagnosticCollector()
        diagnostics.add(InvalidCharacterError("?", SourceLocation("t.soul", 2, 5)))
        diagnostics.add_warning("careful", SourceLocation("t.soul", 3, 1))
        assert diagnostics.report().splitlines() == [
            "t.soul:2:5: error: invalid token; hint: unexpected character '?'",
            "t.soul:3:1: warning: careful",
            "1 error, 1 warning",
        ]

    def test_should_stop(self):
        """should_stop becomes true at max_errors."""
        diagnostics = DiagnosticCollector(max_errors=1)
        assert not diagnostics.should_stop()
        diagnostics.add(InvalidCharacterError("?"))
        assert diagnostics.should_stop()

    def test_clear(self):
        """clear() empties the collector."""
        diagnostics = DiagnosticCollector()
        diagnostics.add(InvalidCharacterError("?"))
        diagnostics.add_warning("w")
        diagnostics.clear()
        assert diagnostics.error_count() == 0
        assert diagnostics.warning_count() == 0

    def test_raise_if_errors(self):
        """raise_if_errors raises only when errors exist."""
        diagnostics = DiagnosticCollector()
        diagnostics.raise_if_errors()
        diagnostics.add(InvalidCharacterError("?"))
        with pytest.raises(SouliteCompilationError):
            diagnostics.raise_if_errors()

    def test_message_without_location(self):
        """Errors without a location omit the position prefix."""
        assert str(InvalidCharacterError("?")) == (
            "error: invalid token; hint: unexpected character '?'"
        )


# =============================================================================
# Front End Tests
# =============================================================================

class TestFrontend:
    """Tests for SouliteFrontend."""

    def test_parse_source(self):
        """A clean source parses successfully."""
        result = SouliteFrontend().parse_source("'x = 5")
        assert result.success
        assert result.diagnostics == []
        assert result.program.to_text() == "() {\n\tlet x = 5\n}"
        assert result.token_count == 5

    def test_parse_source_with_errors(self):
        """Errors are returned rather than raised by default."""
        result = SouliteFrontend().parse_source('"abc\n.ok| = 1', "bad.soul")
        assert not result.success
        assert len(result.diagnostics) == 1
        assert str(result.diagnostics[0]).startswith("bad.soul:1:1: error:")
        assert [unit.name for unit in result.program.units] == ["ok"]

    def test_strict_mode(self):
        """strict=True raises an aggregate error."""
        frontend = SouliteFrontend(FrontendOptions(strict=True))
        with pytest.raises(SouliteCompilationError) as exc_info:
            frontend.parse_source(".f Int")
        assert "expected `|` in prototype" in str(exc_info.value)

    def test_skip_comments(self):
        """skip_comments drops comments before the parser sees them."""
        source = "; c\n1"
        plain = SouliteFrontend().parse_source(source)
        skipping = SouliteFrontend(FrontendOptions(skip_comments=True)).parse_source(source)
        assert plain.token_count == 3
        assert skipping.token_count == 2
        assert plain.program == skipping.program

    def test_max_errors(self):
        """max_errors bounds the number of reported errors."""
        frontend = SouliteFrontend(FrontendOptions(max_errors=1))
        result = frontend.parse_source(".a\n.b\n.c")
        assert len(result.diagnostics) == 1

    def test_consumer(self):
        """The consumer receives every unit."""
        seen = []
        SouliteFrontend().parse_source(SAMPLE, consumer=seen.append)
        assert [unit.to_text() for unit in seen] == [
            "math:sqrt",
            "add(Int a, Int b) -> Int {\n\t(a + (b * 2))\n}",
            "() {\n\tadd(1 2)\n}",
        ]

    def test_parse_file(self, tmp_path):
        """Files are read and located by path."""
        path = tmp_path / "sample.soul"
        path.write_text(SAMPLE)
        result = SouliteFrontend().parse_file(path)
        assert result.success
        assert result.filename == str(path)
        assert len(result.program.units) == 3

    def test_parse_missing_file(self, tmp_path):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            SouliteFrontend().parse_file(tmp_path / "missing.soul")


# =============================================================================
# CLI Tests
# =============================================================================

class TestSoulcCLI:
    """Tests for the soulc command."""

    @pytest.fixture
    def sample_file(self, tmp_path):
        path = tmp_path / "sample.soul"
        path.write_text(SAMPLE)
        return path

    def test_help(self):
        """--help describes the command."""
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Parse a Soulite source file" in result.output

    def test_version(self):
        """--version prints the package version."""
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_prints_units(self, sample_file):
        """Each parsed unit is printed in canonical form."""
        result = CliRunner().invoke(main, [str(sample_file)])
        assert result.exit_code == ExitCode.SUCCESS
        assert "math:sqrt" in result.output
        assert "add(Int a, Int b) -> Int {\n\t(a + (b * 2))\n}" in result.output
        assert "add(1 2)" in result.output

    def test_ast_dump(self, sample_file):
        """--ast prints the tree dump."""
        result = CliRunner().invoke(main, ["--ast", str(sample_file)])
        assert result.exit_code == ExitCode.SUCCESS
        assert "Function: add" in result.output
        assert "  Import: math" in result.output

    def test_token_dump(self, sample_file):
        """--tokens prints one token per line."""
        result = CliRunner().invoke(main, ["--tokens", str(sample_file)])
        assert result.exit_code == ExitCode.SUCCESS
        assert "Token(COMMENT, ' sample program', 1:1)" in result.output
        assert "Token(DOLLAR, '$', 2:1)" in result.output

    def test_token_dump_skip_comments(self, sample_file):
        """--skip-comments removes comment tokens from the dump."""
        result = CliRunner().invoke(main, ["--tokens", "--skip-comments", str(sample_file)])
        assert result.exit_code == ExitCode.SUCCESS
        assert "COMMENT" not in result.output

    def test_source_errors_exit_code(self, tmp_path):
        """A source with errors still prints good units and exits 1."""
        path = tmp_path / "bad.soul"
        path.write_text(".broken Int\n.ok| = 1\n")
        result = CliRunner().invoke(main, [str(path)])
        assert result.exit_code == ExitCode.SOURCE_ERROR
        assert "ok() {" in result.output

    def test_lexical_errors_in_token_dump(self, tmp_path):
        """--tokens exits 1 when the lexer reported errors."""
        path = tmp_path / "bad.soul"
        path.write_text("a ? b\n")
        result = CliRunner().invoke(main, ["--tokens", str(path)])
        assert result.exit_code == ExitCode.SOURCE_ERROR
        assert "Token(INVALID, 'invalid token', 1:3)" in result.output

    def test_ast_and_tokens_exclusive(self, sample_file):
        """--ast and --tokens together are a usage error."""
        result = CliRunner().invoke(main, ["--ast", "--tokens", str(sample_file)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "cannot be used together" in result.output

    def test_deep_nesting_exit_code(self, tmp_path):
        """Over-deep nesting is a source error, not an internal one."""
        path = tmp_path / "deep.soul"
        path.write_text("(" * 2000 + "1" + ")" * 2000 + "\n.ok| = 1\n")
        result = CliRunner().invoke(main, [str(path)])
        assert result.exit_code == ExitCode.SOURCE_ERROR
        assert "ok() {" in result.output

    def test_missing_file(self, tmp_path):
        """A missing input file is a usage error."""
        result = CliRunner().invoke(main, [str(tmp_path / "missing.soul")])
        assert result.exit_code == ExitCode.INVALID_ARGS
