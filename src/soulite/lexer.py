"""
Soulite Lexer (Tokenizer)
=========================

This module converts Soulite source text into tokens, one token per call
to ``Lexer.next_token()``. Characters are pulled from a CharacterSource on
demand; the lexer's only state between calls is the current unprocessed
character.

Token Categories
----------------
- Identifiers: lowercase initial, ``[a-z][a-zA-Z0-9]*``
- Types: uppercase initial, ``[A-Z][a-zA-Z0-9]*``
- Numbers: ``42`` (INT), ``3.14``, ``.5``, ``5.`` (FLOAT)
- Strings: ``"double quoted"`` (no escapes, must close on the same line)
- Comments: ``;`` to end of line
- Operators: longest match wins, e.g. ``<|=`` before ``<|`` before ``<``

Operator Tiers
--------------
Binary operator kinds carry ordinals in tiers of ten. The tier is the
binding strength used by the parser; operators in the same tier are left
associative.

| Tier | Operators                  |
|------|----------------------------|
| 0    | =                          |
| 10   | ..                         |
| 20   | && ||                      |
| 30   | & |                        |
| 40   | < > <= >= == !=            |
| 50   | << >> <| |>                |
| 60   | + -                        |
| 70   | * / %                      |
| 80   | **                         |
| 90   | .                          |

Every other kind has an ordinal above 90 and precedence -1.

Example Usage
-------------
>>> from soulite.lexer import Lexer
>>> for token in Lexer("foo(1 2.5)").tokenize():
...     print(token)
Token(IDENTIFIER, 'foo', 1:1)
Token(LPAREN, '(', 1:4)
Token(INT, 1, 1:5)
Token(FLOAT, 2.5, 1:7)
Token(RPAREN, ')', 1:10)
Token(EOF, 1:11)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, Union
import string

from soulite.errors import (
    DiagnosticCollector,
    InvalidCharacterError,
    InvalidNumberError,
    LexicalError,
    SourceLocation,
    UnterminatedStringError,
)
from soulite.source import CharacterSource


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token kinds of the Soulite language.

    Binary operator kinds have fixed ordinals grouped in tiers of ten;
    the remaining kinds follow from 91 upwards.
    """

    # === Binary Operators (ordinal // 10 * 10 is the tier) ===
    ASSIGN = 0              # =
    RANGE = 10              # ..
    AND = 20                # &&
    OR = 21                 # ||
    BIT_AND = 30            # &
    BIT_OR = 31             # |
    LT = 40                 # <
    GT = 41                 # >
    LE = 42                 # <=
    GE = 43                 # >=
    EQ = 44                 # ==
    NE = 45                 # !=
    SHL = 50                # <<
    SHR = 51                # >>
    SHLX = 52               # <|
    SHRX = 53               # |>
    PLUS = 60               # +
    MINUS = 61              # -
    STAR = 70               # *
    SLASH = 71              # /
    PERCENT = 72            # %
    EXP = 80                # **
    DOT = 90                # .

    # === Structural Tokens ===
    INVALID = auto()        # lexical error
    EOF = auto()            # end of input

    # === Punctuation and Unary Operators ===
    NOT = auto()            # !
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    LBRACKET = auto()       # [
    RBRACKET = auto()       # ]
    COMMA = auto()          # ,
    COLON = auto()          # :
    BIT_NOT = auto()        # ~
    INC = auto()            # ++
    DEC = auto()            # --
    XOR = auto()            # ^
    POUND = auto()          # #
    AT = auto()             # @
    DOLLAR = auto()         # $
    APOSTROPHE = auto()     # '
    ARROW = auto()          # ->

    # === Compound Assignment ===
    PLUS_ASSIGN = auto()    # +=
    MINUS_ASSIGN = auto()   # -=
    STAR_ASSIGN = auto()    # *=
    SLASH_ASSIGN = auto()   # /=
    PERCENT_ASSIGN = auto() # %=
    AND_ASSIGN = auto()     # &=
    OR_ASSIGN = auto()      # |=
    NOT_ASSIGN = auto()     # ~=
    XOR_ASSIGN = auto()     # ^=
    EXP_ASSIGN = auto()     # **=
    SHL_ASSIGN = auto()     # <<=
    SHLX_ASSIGN = auto()    # <|=

    # === Identifiers and Literals ===
    IDENTIFIER = auto()     # [a-z][a-zA-Z0-9]*
    TYPE = auto()           # [A-Z][a-zA-Z0-9]*
    COMMENT = auto()        # ; ...
    FLOAT = auto()          # [0-9]*.[0-9]*
    INT = auto()            # [0-9]+
    STRING = auto()         # "..."


# =============================================================================
# Operator Precedence
# =============================================================================

# Binding strength of each binary operator kind. Kept as an explicit table;
# the values agree with the tier encoded in each kind's ordinal.
BINARY_PRECEDENCE: dict[TokenType, int] = {
    TokenType.ASSIGN: 0,
    TokenType.RANGE: 10,
    TokenType.AND: 20,
    TokenType.OR: 20,
    TokenType.BIT_AND: 30,
    TokenType.BIT_OR: 30,
    TokenType.LT: 40,
    TokenType.GT: 40,
    TokenType.LE: 40,
    TokenType.GE: 40,
    TokenType.EQ: 40,
    TokenType.NE: 40,
    TokenType.SHL: 50,
    TokenType.SHR: 50,
    TokenType.SHLX: 50,
    TokenType.SHRX: 50,
    TokenType.PLUS: 60,
    TokenType.MINUS: 60,
    TokenType.STAR: 70,
    TokenType.SLASH: 70,
    TokenType.PERCENT: 70,
    TokenType.EXP: 80,
    TokenType.DOT: 90,
}


def precedence(token_type: TokenType) -> int:
    """Return the precedence tier of a binary operator kind, or -1."""
    return BINARY_PRECEDENCE.get(token_type, -1)


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token of Soulite source.

    Attributes:
        type: The TokenType classification
        value: Payload (identifier/type name, comment body, int, float,
            string body), the operator spelling for punctuation, or the
            LexicalError for INVALID tokens
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
        starts_line: True if no other token precedes this one on its line
    """
    type: TokenType
    value: Union[str, int, float, LexicalError, None]
    line: int
    column: int
    filename: str = "<input>"
    starts_line: bool = False

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is None:
            return f"Token({self.type.name}, {self.line}:{self.column})"
        if isinstance(self.value, (int, float)):
            return f"Token({self.type.name}, {self.value}, {self.line}:{self.column})"
        if isinstance(self.value, LexicalError):
            return f"Token({self.type.name}, {self.value.message!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def precedence(self) -> int:
        """Precedence tier if this is a binary operator, else -1."""
        return precedence(self.type)

    def describe(self) -> str:
        """Short human-readable form used in parser diagnostics."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.IDENTIFIER:
            return f"identifier '{self.value}'"
        if self.type == TokenType.TYPE:
            return f"type '{self.value}'"
        if self.type in (TokenType.INT, TokenType.FLOAT):
            return f"number {self.value}"
        if self.type == TokenType.STRING:
            return f'string "{self.value}"'
        if self.type == TokenType.COMMENT:
            return "comment"
        if self.type == TokenType.INVALID:
            return "invalid token"
        return f"`{self.value}`"


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes Soulite source code.

    Bad input never raises: the lexer reports a LexicalError to its
    DiagnosticCollector and returns an INVALID token carrying that error.

    Usage:
        lexer = Lexer(CharacterSource(text, "main.soul"))
        token = lexer.next_token()

    Attributes:
        filename: Name of the source (for error reporting)
        diagnostics: Sink for lexical errors
        skip_comments: If True, comments are consumed silently
        token_count: Number of tokens produced so far
    """

    # Characters that can start an identifier or type name
    IDENT_START = string.ascii_letters

    # Characters that can continue an identifier or type name
    IDENT_CHARS = string.ascii_letters + string.digits

    # Characters that end a line comment or an unclosed string
    LINE_ENDS = ("", "\n", "\r")

    # Punctuation returned as soon as it is seen
    SINGLE_TOKENS = {
        "(": TokenType.LPAREN,
        ")": TokenType.RPAREN,
        "{": TokenType.LBRACE,
        "}": TokenType.RBRACE,
        "[": TokenType.LBRACKET,
        "]": TokenType.RBRACKET,
        ",": TokenType.COMMA,
        ":": TokenType.COLON,
        "#": TokenType.POUND,
        "@": TokenType.AT,
        "$": TokenType.DOLLAR,
        "'": TokenType.APOSTROPHE,
    }

    def __init__(
        self,
        source: Union[CharacterSource, str],
        diagnostics: Optional[DiagnosticCollector] = None,
        skip_comments: bool = False,
        filename: str = "<input>",
    ):
        """
        Initialize the lexer.

        Args:
            source: A CharacterSource, or a string to wrap in one
            diagnostics: Sink for lexical errors (a private one if None)
            skip_comments: Consume comments instead of returning them
            filename: Name used when wrapping a string source
        """
        if isinstance(source, str):
            source = CharacterSource(source, filename)
        self._source = source
        self.filename = source.filename
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()
        self.skip_comments = skip_comments
        self.token_count = 0

        # Current unprocessed character and its position. A blank is
        # pending at start so the first call reads real input.
        self._char = " "
        self._line = 1
        self._column = 1
        self._at_line_start = True

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens until end of input.

        Yields:
            Tokens in source order, ending with a single EOF token
        """
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def next_token(self) -> Token:
        """Scan and return the next token."""
        while True:
            self._skip_whitespace()
            token = self._scan_token()
            self._at_line_start = False
            if token.type == TokenType.COMMENT and self.skip_comments:
                continue
            self.token_count += 1
            return token

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _advance(self) -> str:
        """Consume the current character and return the next one."""
        self._line = self._source.line
        self._column = self._source.column
        self._char = self._source.read()
        return self._char

    def _match(self, expected: str) -> bool:
        """
        Consume the current character if it matches expected.

        Returns:
            True if matched and consumed, False otherwise
        """
        if self._char == expected:
            self._advance()
            return True
        return False

    def _skip_whitespace(self) -> None:
        """Skip whitespace, noting line breaks."""
        while self._char and self._char.isspace():
            if self._char == "\n":
                self._at_line_start = True
            self._advance()

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(
        self,
        token_type: TokenType,
        value: Union[str, int, float, LexicalError, None],
        start_line: int,
        start_column: int,
    ) -> Token:
        """Create a token starting at the given position."""
        return Token(
            type=token_type,
            value=value,
            line=start_line,
            column=start_column,
            filename=self.filename,
            starts_line=self._at_line_start,
        )

    def _invalid(self, error: LexicalError, start_line: int, start_column: int) -> Token:
        """Report a lexical error and wrap it in an INVALID token."""
        self.diagnostics.add(error)
        return self._make_token(TokenType.INVALID, error, start_line, start_column)

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        """Scan the token starting at the current character."""
        start_line = self._line
        start_column = self._column
        char = self._char

        if char == "":
            return self._make_token(TokenType.EOF, None, start_line, start_column)

        if char == ";":
            return self._scan_comment(start_line, start_column)

        if char in self.IDENT_START:
            return self._scan_identifier(start_line, start_column)

        if char in string.digits:
            return self._scan_number("", start_line, start_column)

        if char == '"':
            return self._scan_string(start_line, start_column)

        return self._scan_operator(start_line, start_column)

    def _scan_comment(self, start_line: int, start_column: int) -> Token:
        """Scan a line comment; the body excludes ';' and the line break."""
        self._advance()  # consume ;

        chars = []
        while self._char not in self.LINE_ENDS:
            chars.append(self._char)
            self._advance()

        return self._make_token(TokenType.COMMENT, "".join(chars), start_line, start_column)

    def _scan_identifier(self, start_line: int, start_column: int) -> Token:
        """
        Scan an identifier or type name.

        The case of the first letter decides the kind: lowercase gives
        IDENTIFIER, uppercase gives TYPE.
        """
        token_type = TokenType.IDENTIFIER if self._char.islower() else TokenType.TYPE

        chars = []
        while self._char and self._char in self.IDENT_CHARS:
            chars.append(self._char)
            self._advance()

        return self._make_token(token_type, "".join(chars), start_line, start_column)

    def _scan_number(self, prefix: str, start_line: int, start_column: int) -> Token:
        """
        Scan a numeric literal.

        Digits and periods are accumulated together. One period makes a
        FLOAT, none an INT, and more than one is an invalid number.

        Args:
            prefix: Text already consumed (a leading "." when the number
                was started by a period followed by a digit)
        """
        chars = [prefix]
        while self._char and (self._char in string.digits or self._char == "."):
            chars.append(self._char)
            self._advance()

        text = "".join(chars)
        periods = text.count(".")

        if periods > 1:
            return self._invalid(
                InvalidNumberError(text, SourceLocation(self.filename, start_line, start_column)),
                start_line,
                start_column,
            )
        if periods == 1:
            return self._make_token(TokenType.FLOAT, float(text), start_line, start_column)
        return self._make_token(TokenType.INT, int(text), start_line, start_column)

    def _scan_string(self, start_line: int, start_column: int) -> Token:
        """
        Scan a double-quoted string literal.

        The body is taken verbatim. A line break or end of input before
        the closing quote is an error; the line break is left for the next
        token so scanning resumes on the following line.
        """
        self._advance()  # consume opening "

        chars = []
        while self._char not in self.LINE_ENDS and self._char != '"':
            chars.append(self._char)
            self._advance()

        if self._char == '"':
            self._advance()  # consume closing "
            return self._make_token(TokenType.STRING, "".join(chars), start_line, start_column)

        return self._invalid(
            UnterminatedStringError(SourceLocation(self.filename, start_line, start_column)),
            start_line,
            start_column,
        )

    def _scan_operator(self, start_line: int, start_column: int) -> Token:
        """
        Scan an operator or punctuation.

        Handles single, double and triple character operators, always
        preferring the longest spelling.
        """
        char = self._char
        self._advance()

        def make(token_type: TokenType, text: str) -> Token:
            return self._make_token(token_type, text, start_line, start_column)

        if char in self.SINGLE_TOKENS:
            return make(self.SINGLE_TOKENS[char], char)

        if char == "!":
            if self._match("="):
                return make(TokenType.NE, "!=")
            return make(TokenType.NOT, "!")

        if char == "-":
            if self._match("="):
                return make(TokenType.MINUS_ASSIGN, "-=")
            if self._match("-"):
                return make(TokenType.DEC, "--")
            if self._match(">"):
                return make(TokenType.ARROW, "->")
            return make(TokenType.MINUS, "-")

        if char == "+":
            if self._match("="):
                return make(TokenType.PLUS_ASSIGN, "+=")
            if self._match("+"):
                return make(TokenType.INC, "++")
            return make(TokenType.PLUS, "+")

        if char == "/":
            if self._match("="):
                return make(TokenType.SLASH_ASSIGN, "/=")
            return make(TokenType.SLASH, "/")

        if char == "*":
            if self._match("="):
                return make(TokenType.STAR_ASSIGN, "*=")
            if self._match("*"):
                if self._match("="):
                    return make(TokenType.EXP_ASSIGN, "**=")
                return make(TokenType.EXP, "**")
            return make(TokenType.STAR, "*")

        if char == "%":
            if self._match("="):
                return make(TokenType.PERCENT_ASSIGN, "%=")
            return make(TokenType.PERCENT, "%")

        if char == ".":
            if self._match("."):
                return make(TokenType.RANGE, "..")
            if self._char and self._char in string.digits:
                return self._scan_number(".", start_line, start_column)
            return make(TokenType.DOT, ".")

        if char == "&":
            if self._match("="):
                return make(TokenType.AND_ASSIGN, "&=")
            if self._match("&"):
                return make(TokenType.AND, "&&")
            return make(TokenType.BIT_AND, "&")

        if char == "|":
            if self._match("="):
                return make(TokenType.OR_ASSIGN, "|=")
            if self._match("|"):
                return make(TokenType.OR, "||")
            if self._match(">"):
                return make(TokenType.SHRX, "|>")
            return make(TokenType.BIT_OR, "|")

        if char == "~":
            if self._match("="):
                return make(TokenType.NOT_ASSIGN, "~=")
            return make(TokenType.BIT_NOT, "~")

        if char == "^":
            if self._match("="):
                return make(TokenType.XOR_ASSIGN, "^=")
            return make(TokenType.XOR, "^")

        if char == "<":
            if self._match("="):
                return make(TokenType.LE, "<=")
            if self._match("|"):
                if self._match("="):
                    return make(TokenType.SHLX_ASSIGN, "<|=")
                return make(TokenType.SHLX, "<|")
            if self._match("<"):
                if self._match("="):
                    return make(TokenType.SHL_ASSIGN, "<<=")
                return make(TokenType.SHL, "<<")
            return make(TokenType.LT, "<")

        if char == ">":
            if self._match("="):
                return make(TokenType.GE, ">=")
            if self._match(">"):
                return make(TokenType.SHR, ">>")
            return make(TokenType.GT, ">")

        if char == "=":
            if self._match("="):
                return make(TokenType.EQ, "==")
            return make(TokenType.ASSIGN, "=")

        # Unknown character
        return self._invalid(
            InvalidCharacterError(char, SourceLocation(self.filename, start_line, start_column)),
            start_line,
            start_column,
        )
