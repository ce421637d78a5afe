"""
Soulite Recursive Descent Parser
================================

This module builds the AST of a Soulite source file. Tokens are pulled
from the lexer one at a time; the parser looks at exactly one token ahead
and never backtracks. Statements and primary expressions are parsed by
recursive descent, chains of binary operators by precedence climbing.

Grammar (Simplified EBNF)
-------------------------
program     ::= (import | definition | expression)* EOF
import      ::= '$' IDENTIFIER (':' IDENTIFIER)?
definition  ::= '.' prototype expression
prototype   ::= IDENTIFIER '|' TYPE* ('->' TYPE)? (("'" | ',') IDENTIFIER)* '='
expression  ::= primary (BINOP primary)*
primary     ::= IDENTIFIER ('(' expression* ')')?
              | INT | FLOAT | STRING
              | ("'" | ',') IDENTIFIER ('=' expression)?
              | '(' expression ')'

The prototype must name one parameter per listed type. Call arguments are
written one after another with no separator: ``max(a b)``.

Error Recovery
--------------
Grammar violations raise a ParseError that unwinds the whole statement.
The top-level loop reports it and discards tokens until the next ``$``,
``.`` or end of input, so one bad statement does not stop the parse.

Example Usage
-------------
>>> from soulite.parser import parse_source
>>> program = parse_source("$math:sqrt\\n.sq|Int -> Int'x= x * x")
>>> print(program.to_text())
math:sqrt
sq(Int x) -> Int {
	(x * x)
}
"""

import logging
from typing import Callable, Optional, Union

from soulite.errors import (
    DiagnosticCollector,
    LexicalError,
    MissingTokenError,
    NestingTooDeepError,
    SourceLocation,
    SouliteSyntaxError,
    UnexpectedTokenError,
)
from soulite.lexer import Lexer, Token, TokenType, precedence
from soulite.source import CharacterSource
from soulite.ast import (
    Binary,
    BinaryOperator,
    Call,
    Expression,
    FunctionDef,
    Import,
    Literal,
    LiteralKind,
    Program,
    Prototype,
    TopLevelUnit,
    VarDecl,
    Variable,
)


logger = logging.getLogger(__name__)


# Token kinds of the binary operators and the AST operator each builds
BINARY_OPERATORS: dict[TokenType, BinaryOperator] = {
    TokenType.ASSIGN: BinaryOperator.ASSIGN,
    TokenType.RANGE: BinaryOperator.RANGE,
    TokenType.AND: BinaryOperator.AND,
    TokenType.OR: BinaryOperator.OR,
    TokenType.BIT_AND: BinaryOperator.BIT_AND,
    TokenType.BIT_OR: BinaryOperator.BIT_OR,
    TokenType.LT: BinaryOperator.LT,
    TokenType.GT: BinaryOperator.GT,
    TokenType.LE: BinaryOperator.LE,
    TokenType.GE: BinaryOperator.GE,
    TokenType.EQ: BinaryOperator.EQ,
    TokenType.NE: BinaryOperator.NE,
    TokenType.SHL: BinaryOperator.SHL,
    TokenType.SHR: BinaryOperator.SHR,
    TokenType.SHLX: BinaryOperator.SHLX,
    TokenType.SHRX: BinaryOperator.SHRX,
    TokenType.PLUS: BinaryOperator.PLUS,
    TokenType.MINUS: BinaryOperator.MINUS,
    TokenType.STAR: BinaryOperator.STAR,
    TokenType.SLASH: BinaryOperator.SLASH,
    TokenType.PERCENT: BinaryOperator.PERCENT,
    TokenType.EXP: BinaryOperator.EXP,
    TokenType.DOT: BinaryOperator.DOT,
}

# Tokens at which the top-level loop resumes after an error
SYNC_TOKENS = (TokenType.DOLLAR, TokenType.DOT, TokenType.EOF)


class Parser:
    """
    Recursive descent parser for Soulite.

    Attributes:
        lexer: Token supplier
        diagnostics: Sink shared with the lexer
        consumer: Optional callback receiving each parsed top-level unit
        current: The token under examination
    """

    # Deepest expression nesting accepted, kept well inside Python's
    # recursion limit
    MAX_NESTING_DEPTH = 100

    def __init__(
        self,
        lexer: Lexer,
        consumer: Optional[Callable[[TopLevelUnit], None]] = None,
    ):
        """
        Initialize the parser.

        Args:
            lexer: The lexer to pull tokens from
            consumer: Called with every Import and FunctionDef in source order
        """
        self.lexer = lexer
        self.diagnostics = lexer.diagnostics
        self.consumer = consumer
        self.current: Optional[Token] = None
        self._depth = 0

    def parse(self) -> Program:
        """
        Parse the whole input.

        Errors are reported to the diagnostics collector and the parse
        continues with the next statement.

        Returns:
            Program holding every successfully parsed unit
        """
        units: list[TopLevelUnit] = []
        self._advance()  # prime the first token

        while True:
            token_type = self.current.type

            if token_type == TokenType.EOF:
                logger.debug("Reached end of input")
                break

            if token_type == TokenType.COMMENT:
                self._advance()
                continue

            try:
                if token_type == TokenType.DOLLAR:
                    unit = self.parse_import()
                elif token_type == TokenType.DOT:
                    unit = self.parse_definition()
                else:
                    unit = self.parse_top_level_expression()
            except SouliteSyntaxError as e:
                self.diagnostics.add(e)
                if self.diagnostics.should_stop():
                    self.diagnostics.add_warning(
                        f"too many errors ({self.diagnostics.error_count()}), stopping"
                    )
                    break
                self._synchronize()
                continue

            units.append(unit)
            if self.consumer is not None:
                self.consumer(unit)

        return Program(units, location=SourceLocation(self.lexer.filename, 1, 1))

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _advance(self) -> Token:
        """Fetch the next token and make it current."""
        self.current = self.lexer.next_token()
        return self.current

    def _check(self, *types: TokenType) -> bool:
        """Check if the current token is one of the given types."""
        return self.current.type in types

    def _expect(
        self,
        token_type: TokenType,
        expected: str,
        context: Optional[str] = None,
    ) -> Token:
        """
        Require the current token to have the given type and consume it.

        Args:
            token_type: The required token type
            expected: How to name the token in the error message
            context: The construct being parsed, for the error message

        Returns:
            The consumed token

        Raises:
            MissingTokenError: If the current token has another type
        """
        token = self.current
        if token.type != token_type:
            self._raise_if_invalid(token)
            raise MissingTokenError(
                expected,
                context=context,
                location=token.location,
                found=token.describe(),
            )
        self._advance()
        return token

    def _raise_if_invalid(self, token: Token) -> None:
        """Surface the lexical error carried by an INVALID token."""
        if token.type == TokenType.INVALID and isinstance(token.value, LexicalError):
            raise token.value

    def _current_precedence(self) -> int:
        """
        Precedence tier of the current token, -1 if it is not a binary
        operator.

        A '.' that begins a line introduces the next definition and never
        continues the expression before it.
        """
        token = self.current
        if token.type == TokenType.DOT and token.starts_line:
            return -1
        return precedence(token.type)

    def _skip_comments(self) -> None:
        """Advance past any COMMENT tokens."""
        while self._check(TokenType.COMMENT):
            self._advance()

    def _synchronize(self) -> None:
        """Discard tokens until one that can start a new statement."""
        while not self._check(*SYNC_TOKENS):
            self._advance()

    # =========================================================================
    # Top-Level Constructs
    # =========================================================================

    def parse_import(self) -> Import:
        """
        Parse an import: ``$module`` or ``$module:name``.

        Only one level of nesting is read.
        """
        location = self.current.location
        self._expect(TokenType.DOLLAR, "`$`", "import")
        name_token = self._expect(TokenType.IDENTIFIER, "module name", "import")

        nested = []
        if self._check(TokenType.COLON):
            self._advance()  # consume ':'
            child = self._expect(TokenType.IDENTIFIER, "identifier after `:`", "import")
            nested.append(Import(child.value, location=child.location))

        node = Import(name_token.value, nested, location=location)
        logger.debug(f"Parsed import: ${node.to_text()}")
        return node

    def parse_definition(self) -> FunctionDef:
        """Parse a function definition: ``.`` prototype body."""
        location = self.current.location
        self._expect(TokenType.DOT, "`.`", "function definition")

        prototype = self.parse_prototype()
        body = self.parse_expression()

        node = FunctionDef(prototype, body, location=location)
        logger.debug(f"Parsed function: {node.to_text()}")
        return node

    def parse_top_level_expression(self) -> FunctionDef:
        """Parse a bare expression, wrapped as an anonymous function."""
        location = self.current.location
        body = self.parse_expression()

        logger.debug(f"Parsed top-level expression: {body.to_text()}")
        return FunctionDef(Prototype("", location=location), body, location=location)

    def parse_prototype(self) -> Prototype:
        """
        Parse a function prototype.

            name|Int Int -> Int'a,b=

        The parameter types come first, then one ``'`` or ``,`` marker and
        a name per type. The marker is accepted but not recorded. The
        trailing ``=`` opens the body and is consumed.
        """
        location = self.current.location
        name_token = self._expect(TokenType.IDENTIFIER, "function name", "prototype")
        self._expect(TokenType.BIT_OR, "`|`", "prototype")

        arg_types = []
        while self._check(TokenType.TYPE):
            arg_types.append(self.current.value)
            self._advance()

        return_type = None
        if self._check(TokenType.ARROW):
            self._advance()  # consume '->'
            return_type = self._expect(TokenType.TYPE, "return type", "prototype").value

        arg_names = []
        for _ in arg_types:
            if not self._check(TokenType.APOSTROPHE, TokenType.COMMA):
                self._raise_if_invalid(self.current)
                raise MissingTokenError(
                    "`'` or `,`",
                    context="argument list",
                    location=self.current.location,
                    found=self.current.describe(),
                )
            self._advance()  # consume ' or ,
            arg_names.append(
                self._expect(TokenType.IDENTIFIER, "argument name", "prototype").value
            )

        self._expect(TokenType.ASSIGN, "`=`", "prototype")

        return Prototype(
            name_token.value,
            arg_types,
            arg_names,
            return_type,
            location=location,
        )

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def parse_expression(self) -> Expression:
        """
        Parse a primary followed by any chain of binary operators.

        Raises:
            NestingTooDeepError: If expressions nest deeper than
                MAX_NESTING_DEPTH
        """
        self._depth += 1
        try:
            if self._depth > self.MAX_NESTING_DEPTH:
                raise NestingTooDeepError(
                    self.MAX_NESTING_DEPTH, location=self.current.location
                )
            lhs = self.parse_primary()
            return self._parse_binary_rhs(0, lhs)
        finally:
            self._depth -= 1

    def _parse_binary_rhs(self, min_precedence: int, lhs: Expression) -> Expression:
        """
        Precedence climbing over a chain of binary operators.

        Operators below min_precedence end the chain. When the operator
        after the right operand binds tighter than the current one, the
        right operand absorbs it first. Equal tiers associate to the left.
        """
        while True:
            token_precedence = self._current_precedence()
            if token_precedence < min_precedence:
                return lhs

            op_token = self.current
            self._advance()  # consume operator

            rhs = self.parse_primary()

            if token_precedence < self._current_precedence():
                rhs = self._parse_binary_rhs(token_precedence + 1, rhs)

            lhs = Binary(
                BINARY_OPERATORS[op_token.type],
                lhs,
                rhs,
                location=op_token.location,
            )

    def parse_primary(self) -> Expression:
        """Parse a primary expression."""
        self._skip_comments()

        token = self.current

        if token.type == TokenType.IDENTIFIER:
            return self._parse_identifier_expression()

        if token.type == TokenType.INT:
            self._advance()
            return Literal(LiteralKind.INT, token.value, location=token.location)

        if token.type == TokenType.FLOAT:
            self._advance()
            return Literal(LiteralKind.FLOAT, token.value, location=token.location)

        if token.type == TokenType.STRING:
            self._advance()
            return Literal(LiteralKind.STRING, token.value, location=token.location)

        if token.type == TokenType.APOSTROPHE:
            return self._parse_var_declaration(mutable=False)

        if token.type == TokenType.COMMA:
            return self._parse_var_declaration(mutable=True)

        if token.type == TokenType.LPAREN:
            self._advance()  # consume '('
            expr = self.parse_expression()
            self._skip_comments()
            self._expect(TokenType.RPAREN, "`)`", "parenthesized expression")
            return expr

        self._raise_if_invalid(token)
        raise UnexpectedTokenError(
            token.describe(),
            expected="expression",
            location=token.location,
        )

    def _parse_identifier_expression(self) -> Union[Variable, Call]:
        """Parse a variable reference or a call ``name(arg arg ...)``."""
        name_token = self.current
        self._advance()  # consume identifier

        if not self._check(TokenType.LPAREN):
            return Variable(name_token.value, location=name_token.location)

        self._advance()  # consume '('
        args = []
        while True:
            self._skip_comments()
            if self._check(TokenType.RPAREN):
                break
            if self._check(TokenType.EOF):
                raise MissingTokenError(
                    "`)`",
                    context="call arguments",
                    location=self.current.location,
                    found=self.current.describe(),
                )
            args.append(self.parse_expression())
        self._advance()  # consume ')'

        return Call(name_token.value, args, location=name_token.location)

    def _parse_var_declaration(self, mutable: bool) -> VarDecl:
        """Parse ``'name [= value]`` (immutable) or ``,name [= value]`` (mutable)."""
        location = self.current.location
        self._advance()  # consume ' or ,

        name_token = self._expect(
            TokenType.IDENTIFIER, "identifier after `'` or `,`", "declaration"
        )

        initializer = None
        if self._check(TokenType.ASSIGN):
            self._advance()  # consume '='
            initializer = self.parse_expression()

        return VarDecl(name_token.value, mutable, initializer, location=location)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(
    source: str,
    filename: str = "<input>",
    diagnostics: Optional[DiagnosticCollector] = None,
    consumer: Optional[Callable[[TopLevelUnit], None]] = None,
    strict: bool = False,
) -> Program:
    """
    Parse Soulite source code into a Program.

    Args:
        source: The source text
        filename: Source filename for error messages
        diagnostics: Collector receiving every error (a private one if None)
        consumer: Callback receiving each top-level unit
        strict: Raise instead of returning when any error was reported

    Returns:
        Program with every successfully parsed unit

    Raises:
        SouliteCompilationError: If strict and the source had errors
    """
    diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()
    lexer = Lexer(CharacterSource(source, filename), diagnostics=diagnostics)
    program = Parser(lexer, consumer=consumer).parse()
    if strict:
        diagnostics.raise_if_errors()
    return program
