"""
soulc - Soulite Parser Command-Line Interface
=============================================

Parses a Soulite source file and prints every top-level unit in its
canonical text form. Errors are reported on stderr, one line each, and
parsing continues with the next statement.

Usage Examples
--------------
Print parsed units:
    $ soulc main.soul

Dump the AST tree:
    $ soulc --ast main.soul

Show the token stream:
    $ soulc --tokens main.soul

Exit Codes
----------
0 - Success
1 - The source had lexical or syntax errors
2 - Invalid arguments or missing file
3 - Internal error
"""

import logging
import sys
from pathlib import Path

import click

from soulite import __version__
from soulite.ast import ASTPrinter
from soulite.cli.errors import ExitCode, handle_cli_exception
from soulite.errors import DiagnosticCollector
from soulite.frontend import FrontendOptions, SouliteFrontend
from soulite.lexer import Lexer, TokenType
from soulite.source import CharacterSource


logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def dump_tokens(input_file: Path, skip_comments: bool) -> int:
    """Print one token per line; return the number of lexical errors."""
    diagnostics = DiagnosticCollector()
    with input_file.open(encoding="utf-8") as stream:
        lexer = Lexer(
            CharacterSource(stream, str(input_file)),
            diagnostics=diagnostics,
            skip_comments=skip_comments,
        )
        for token in lexer.tokenize():
            if token.type != TokenType.EOF:
                click.echo(repr(token))
    return diagnostics.error_count()


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the AST as an indented tree",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and exit (not with --ast)",
)
@click.option(
    "--skip-comments",
    is_flag=True,
    help="Drop comments in the lexer",
)
@click.option(
    "--max-errors",
    type=click.IntRange(min=1),
    default=100,
    show_default=True,
    help="Stop parsing after this many errors (ignored with --tokens)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="soulc")
def main(
    input_file: Path,
    ast: bool,
    tokens: bool,
    skip_comments: bool,
    max_errors: int,
    verbose: bool,
) -> None:
    """
    Parse a Soulite source file.

    INPUT_FILE is the source file (.soul) to parse.

    \b
    Examples:
        soulc main.soul            # Print each parsed unit
        soulc --ast main.soul      # Print the AST tree
        soulc --tokens main.soul   # Print the tokens
    """
    if ast and tokens:
        raise click.UsageError("--ast and --tokens cannot be used together")

    setup_logging(verbose)

    try:
        if tokens:
            error_count = dump_tokens(input_file, skip_comments)
            if error_count:
                sys.exit(ExitCode.SOURCE_ERROR)
            return

        options = FrontendOptions(skip_comments=skip_comments, max_errors=max_errors)
        logger.debug(f"Front-end options: {options}")
        result = SouliteFrontend(options).parse_file(input_file)

        if ast:
            click.echo(ASTPrinter().print(result.program))
        else:
            for unit in result.program.units:
                click.echo(unit.to_text())

        if verbose:
            click.echo(
                f"Parsed {len(result.program.units)} units "
                f"from {result.token_count} tokens",
                err=True,
            )

        if not result.success:
            count = len(result.diagnostics)
            click.echo(f"{count} error{'s' if count != 1 else ''} in {input_file}", err=True)
            sys.exit(ExitCode.SOURCE_ERROR)

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
