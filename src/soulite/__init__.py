"""
Soulite Front End
=================

This package implements the front end of Soulite, a small
expression-oriented language with ``.soul`` source files. It provides:

- A lexer (tokenizer) with maximal-munch operators and tiered precedence
- A recursive descent parser producing an immutable AST
- Diagnostics that report every independent error in a single pass
- The ``soulc`` command-line tool

Pipeline
--------
    Source → Character source → Lexer → Parser → Program (AST)

Usage
-----
>>> from soulite import parse_source
>>> program = parse_source(".add|Int Int -> Int'a,b= a + b * 2")
>>> print(program.to_text())
add(Int a, Int b) -> Int {
	(a + (b * 2))
}

Language Summary
----------------
- Imports: ``$math`` or ``$math:sqrt``
- Definitions: ``.name|Type Type -> Ret'arg,arg= body``
- Declarations: ``'x = 1`` (immutable), ``,y = 2`` (mutable)
- Calls: ``max(a b)``, arguments have no separators
- Comments: ``;`` to end of line

Not supported:
- Type checking and name resolution
- Evaluation or code generation
"""

# =============================================================================
# Version Information
# =============================================================================

__version__ = "1.0.0"

# =============================================================================
# Public API Imports
# =============================================================================

from soulite.errors import (
    SouliteError,
    SouliteSyntaxError,
    SouliteCompilationError,
    LexicalError,
    ParseError,
    SourceLocation,
    DiagnosticCollector,
)
from soulite.source import CharacterSource
from soulite.lexer import Lexer, Token, TokenType, precedence
from soulite.ast import (
    Program,
    Import,
    FunctionDef,
    Prototype,
    Literal,
    LiteralKind,
    Variable,
    Binary,
    BinaryOperator,
    Call,
    VarDecl,
    ASTVisitor,
    ASTPrinter,
)
from soulite.parser import Parser, parse_source
from soulite.frontend import SouliteFrontend, FrontendOptions, FrontendResult

# =============================================================================
# Public API
# =============================================================================

__all__ = [
    # Version
    "__version__",
    # Front end
    "SouliteFrontend",
    "FrontendOptions",
    "FrontendResult",
    "parse_source",
    # Pipeline stages
    "CharacterSource",
    "Lexer",
    "Token",
    "TokenType",
    "precedence",
    "Parser",
    # AST
    "Program",
    "Import",
    "FunctionDef",
    "Prototype",
    "Literal",
    "LiteralKind",
    "Variable",
    "Binary",
    "BinaryOperator",
    "Call",
    "VarDecl",
    "ASTVisitor",
    "ASTPrinter",
    # Errors
    "SouliteError",
    "SouliteSyntaxError",
    "SouliteCompilationError",
    "LexicalError",
    "ParseError",
    "SourceLocation",
    "DiagnosticCollector",
]
