"""
Soulite Error Hierarchy
=======================

This module defines the exception hierarchy for the Soulite front end.
All exceptions inherit from SouliteError, allowing callers to catch every
front-end error with a single except clause.

Exception Hierarchy
-------------------
SouliteError (base)
├── SouliteSyntaxError - lexer and parser errors
│   ├── LexicalError - bad character sequences
│   │   ├── InvalidCharacterError - character that starts no token
│   │   ├── InvalidNumberError - numeric literal with several periods
│   │   └── UnterminatedStringError - missing closing quote
│   └── ParseError - grammar violations
│       ├── MissingTokenError - required token not found
│       ├── UnexpectedTokenError - token cannot start an expression
│       └── NestingTooDeepError - expression nesting limit exceeded
└── SouliteCompilationError - aggregate report of several errors

Error Message Format
--------------------
Every error renders as a single line:

    filename:line:column: error: description; hint: suggestion

Lexical errors are not raised by the lexer. They are reported to a
DiagnosticCollector and carried by the INVALID token that replaces the bad
input, so the parser can surface them at the point the token is consumed.
"""

import logging
from dataclasses import dataclass
from typing import Optional, List


logger = logging.getLogger(__name__)


# =============================================================================
# Base Exception Class
# =============================================================================

class SouliteError(Exception):
    """
    Base exception for all Soulite front-end errors.

        try:
            program = parse_source(text, strict=True)
        except SouliteError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in a source file.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Syntax Errors (Lexer and Parser)
# =============================================================================

class SouliteSyntaxError(SouliteError):
    """
    Error in Soulite source text.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error as a single diagnostic line.

            main.soul:3:7: error: expected `=` in prototype
        """
        if self.location:
            text = f"{self.location}: error: {self.message}"
        else:
            text = f"error: {self.message}"

        if self.hint:
            text += f"; hint: {self.hint}"

        return text


class LexicalError(SouliteSyntaxError):
    """Base class for errors found while tokenizing."""
    pass


class InvalidCharacterError(LexicalError):
    """
    A character that cannot start any token.

    Example:
        a ? b    ; '?' is not part of the language
    """

    def __init__(self, char: str, location: Optional[SourceLocation] = None):
        self.char = char
        super().__init__(
            "invalid token",
            location=location,
            hint=f"unexpected character {char!r}",
        )


class InvalidNumberError(LexicalError):
    """
    Numeric literal containing more than one period.

    Example:
        1.2.3
    """

    def __init__(self, text: str, location: Optional[SourceLocation] = None):
        self.text = text
        super().__init__(
            "invalid number format",
            location=location,
            hint=f"'{text}' has more than one '.'",
        )


class UnterminatedStringError(LexicalError):
    """
    String literal not closed before the end of its line or of the input.

    Example:
        "hello
    """

    def __init__(self, location: Optional[SourceLocation] = None):
        super().__init__(
            "unterminated string literal",
            location=location,
            hint="add closing '\"' to complete the string",
        )


class ParseError(SouliteSyntaxError):
    """Base class for grammar violations found by the parser."""
    pass


class MissingTokenError(ParseError):
    """
    Required token is missing.

    Raised when a construct such as ')' or the '|' of a prototype is not
    found where the grammar requires it. The message names both the
    missing token and the construct being parsed:

        expected `|` in prototype
    """

    def __init__(
        self,
        expected: str,
        context: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        found: Optional[str] = None,
    ):
        self.expected = expected
        self.context = context
        self.found = found

        message = f"expected {expected}"
        if context:
            message += f" in {context}"

        super().__init__(
            message,
            location=location,
            hint=f"found {found}" if found else None,
        )


class UnexpectedTokenError(ParseError):
    """Token that cannot appear at this point of an expression."""

    def __init__(
        self,
        found: str,
        expected: Optional[str] = None,
        location: Optional[SourceLocation] = None,
    ):
        self.found = found
        self.expected = expected

        super().__init__(
            f"unexpected token {found}",
            location=location,
            hint=f"expected {expected}" if expected else None,
        )


class NestingTooDeepError(ParseError):
    """
    Expression nested beyond the parser's depth limit.

    Example:
        ((((((((... 1 ...))))))))
    """

    def __init__(self, limit: int, location: Optional[SourceLocation] = None):
        self.limit = limit
        super().__init__(
            "expression nested too deeply",
            location=location,
            hint=f"more than {limit} levels of nesting",
        )


class SouliteCompilationError(SouliteError):
    """
    Aggregate error carrying the report of every collected diagnostic.

    The message is already a formatted report from DiagnosticCollector
    and is passed through unchanged.
    """

    def __init__(self, report: str, errors: Optional[List[SouliteSyntaxError]] = None):
        self.errors = errors or []
        super().__init__(report)


# =============================================================================
# Diagnostic Collection (multi-error reporting)
# =============================================================================

class DiagnosticCollector:
    """
    Sink for diagnostics produced by the lexer and parser.

    Each error is logged once as it is reported and kept for a final
    report, so a single pass can surface every independent problem in a
    source file. Reporting never raises.

    Example:
        diagnostics = DiagnosticCollector()
        parser = Parser(Lexer(CharacterSource(text), diagnostics=diagnostics))
        program = parser.parse()

        if diagnostics.has_errors():
            print(diagnostics.report())
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the collector.

        Args:
            max_errors: Number of errors after which should_stop() is True
        """
        self.errors: List[SouliteSyntaxError] = []
        self.warnings: List[str] = []
        self.max_errors = max_errors

    def add(self, error: SouliteSyntaxError) -> None:
        """
        Record an error and log it.

        An error object that was already recorded is ignored; the parser
        re-raises the lexical error carried by an INVALID token and that
        must not count twice.
        """
        if any(existing is error for existing in self.errors):
            return
        self.errors.append(error)
        logger.error(str(error))

    def add_warning(self, message: str, location: Optional[SourceLocation] = None) -> None:
        """Record and log a warning message."""
        if location:
            message = f"{location}: warning: {message}"
        else:
            message = f"warning: {message}"
        self.warnings.append(message)
        logger.warning(message)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def should_stop(self) -> bool:
        """Return True if max_errors has been reached."""
        return len(self.errors) >= self.max_errors

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def warning_count(self) -> int:
        """Return the number of collected warnings."""
        return len(self.warnings)

    def messages(self) -> List[str]:
        """Return the one-line message of every collected error."""
        return [str(error) for error in self.errors]

    def report(self) -> str:
        """Format all errors and warnings for display."""
        lines = [str(error) for error in self.errors]
        lines.extend(self.warnings)

        error_word = "error" if len(self.errors) == 1 else "errors"
        warning_word = "warning" if len(self.warnings) == 1 else "warnings"
        lines.append(
            f"{len(self.errors)} {error_word}, {len(self.warnings)} {warning_word}"
        )

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors and warnings."""
        self.errors.clear()
        self.warnings.clear()

    def raise_if_errors(self) -> None:
        """Raise a SouliteCompilationError if any errors were collected."""
        if self.has_errors():
            raise SouliteCompilationError(self.report(), list(self.errors))
