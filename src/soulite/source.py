"""
Character Source
================

The lexer reads its input one character at a time through a
CharacterSource. A source wraps either a string or a text stream (an open
file, ``sys.stdin``, ``io.StringIO``) and tracks the line and column of the
next character for error reporting.

End of input is signalled by the empty string and is idempotent: once the
underlying text is exhausted every further read returns ``""``.

Example:
    >>> source = CharacterSource("ab")
    >>> source.read(), source.read(), source.read(), source.read()
    ('a', 'b', '', '')
"""

from typing import TextIO, Union

from soulite.errors import SourceLocation


class CharacterSource:
    """
    Sequential character reader with position tracking.

    Attributes:
        filename: Name used in source locations
        line: Line of the next character to be read (1-indexed)
        column: Column of the next character to be read (1-indexed)
    """

    def __init__(self, text: Union[str, TextIO], filename: str = "<input>"):
        """
        Args:
            text: Source string or a readable text stream
            filename: Name of the source (for error messages)
        """
        self.filename = filename
        self.line = 1
        self.column = 1

        if isinstance(text, str):
            self._text = text
            self._stream = None
        else:
            self._text = None
            self._stream = text
        self._pos = 0
        self._exhausted = False

    def read(self) -> str:
        """Consume and return the next character, or "" at end of input."""
        if self._exhausted:
            return ""

        if self._stream is not None:
            char = self._stream.read(1)
        elif self._pos < len(self._text):
            char = self._text[self._pos]
            self._pos += 1
        else:
            char = ""

        if not char:
            self._exhausted = True
            return ""

        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        return char

    @property
    def at_end(self) -> bool:
        """True once a read has returned end of input."""
        return self._exhausted

    def location(self) -> SourceLocation:
        """Location of the next character to be read."""
        return SourceLocation(self.filename, self.line, self.column)
