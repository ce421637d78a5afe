"""
Soulite Front End
=================

This module provides the main programmatic interface of the package.
It runs the front-end pipeline on one source unit:

    Source → Character source → Lex → Parse → Program

Usage
-----
Command line:
    $ soulc main.soul

Programmatic:
    >>> from soulite import SouliteFrontend
    >>> result = SouliteFrontend().parse_source("'x = 5")
    >>> result.program.to_text()
    '() {\\n\\tlet x = 5\\n}'

Error Handling
--------------
Errors are collected rather than raised, so every independent problem in
a file is reported in one run. With ``FrontendOptions(strict=True)`` the
front end raises a SouliteCompilationError carrying the full report
instead of returning a partial program.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, TextIO, Union

from soulite.ast import Program, TopLevelUnit
from soulite.errors import DiagnosticCollector, SouliteSyntaxError
from soulite.lexer import Lexer
from soulite.parser import Parser
from soulite.source import CharacterSource


logger = logging.getLogger(__name__)


@dataclass
class FrontendOptions:
    """
    Front-end configuration options.

    Attributes:
        skip_comments: Drop comments in the lexer instead of passing
            COMMENT tokens to the parser
        max_errors: Stop parsing once this many errors were reported
        strict: Raise SouliteCompilationError if any error was reported
    """
    skip_comments: bool = False
    max_errors: int = 100
    strict: bool = False


@dataclass
class FrontendResult:
    """
    Result of parsing one source unit.

    Attributes:
        filename: Name of the parsed source
        program: Every successfully parsed top-level unit
        diagnostics: Errors reported while parsing
        token_count: Number of tokens the lexer produced
        success: True if no error was reported
    """
    filename: str
    program: Optional[Program] = None
    diagnostics: list[SouliteSyntaxError] = field(default_factory=list)
    token_count: int = 0
    success: bool = False


class SouliteFrontend:
    """
    Lexer and parser driver for Soulite sources.

    Example:
        frontend = SouliteFrontend(FrontendOptions(skip_comments=True))
        result = frontend.parse_file("main.soul")
        for unit in result.program.units:
            print(unit.to_text())

    Attributes:
        options: Front-end configuration options
    """

    def __init__(self, options: Optional[FrontendOptions] = None):
        self.options = options or FrontendOptions()

    def parse_source(
        self,
        source: Union[str, TextIO],
        filename: str = "<input>",
        consumer: Optional[Callable[[TopLevelUnit], None]] = None,
    ) -> FrontendResult:
        """
        Parse source text or a text stream.

        Args:
            source: Source string or readable text stream
            filename: Source filename for error messages
            consumer: Called with each top-level unit as it is parsed

        Returns:
            FrontendResult with the program and diagnostics

        Raises:
            SouliteCompilationError: In strict mode, if any error was reported
        """
        diagnostics = DiagnosticCollector(max_errors=self.options.max_errors)
        lexer = Lexer(
            CharacterSource(source, filename),
            diagnostics=diagnostics,
            skip_comments=self.options.skip_comments,
        )
        parser = Parser(lexer, consumer=consumer)

        logger.debug(f"Parsing {filename}")
        program = parser.parse()

        result = FrontendResult(
            filename=filename,
            program=program,
            diagnostics=list(diagnostics.errors),
            token_count=lexer.token_count,
            success=not diagnostics.has_errors(),
        )
        logger.debug(
            f"Parsed {filename}: {len(program.units)} units, "
            f"{lexer.token_count} tokens, {diagnostics.error_count()} errors"
        )

        if self.options.strict:
            diagnostics.raise_if_errors()

        return result

    def parse_file(
        self,
        filepath: Union[str, Path],
        consumer: Optional[Callable[[TopLevelUnit], None]] = None,
    ) -> FrontendResult:
        """
        Parse a source file.

        Args:
            filepath: Path to the .soul file
            consumer: Called with each top-level unit as it is parsed

        Returns:
            FrontendResult with the program and diagnostics

        Raises:
            FileNotFoundError: If the file does not exist
            SouliteCompilationError: In strict mode, if any error was reported
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        with path.open(encoding="utf-8") as stream:
            return self.parse_source(stream, str(path), consumer=consumer)
