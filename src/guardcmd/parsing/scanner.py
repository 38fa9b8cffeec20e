"""
Lexical layer of the guarded command parser.

SourceScanner wraps one immutable source string. It never stores a cursor:
every method receives a position and returns the position after what it read,
so callers backtrack simply by reusing an earlier position.
"""

from guardcmd.core.nodes import BareValue, QuotedValue, Value
from guardcmd.exceptions.core import (
    DSLSyntaxError,
    ErrorLevel,
    ExpectedValue,
    UnterminatedString,
)

SPACE = " "
QUOTE = '"'
ESCAPED_QUOTE = '\\"'


def is_bare_char(char: str) -> bool:
    """Check whether a character may appear in a bare value."""
    return char.isascii() and char.isalnum()


class SourceScanner:
    """Position-based reader over a single source string."""

    def __init__(self, source: str, error_level: ErrorLevel = ErrorLevel.USER):
        self.source = source
        self.length = len(source)
        self.error_level = error_level

    def error(
        self,
        error_class: type[DSLSyntaxError],
        index: int,
        expected: str | None = None,
        recoverable: bool = True,
    ) -> DSLSyntaxError:
        """Build an error of the given kind anchored at ``index``."""
        return error_class(
            self.source,
            index,
            expected=expected,
            error_level=self.error_level,
            recoverable=recoverable,
        )

    def skip_spaces(self, pos: int) -> int:
        """Return the first position at or after ``pos`` that is not a plain space."""
        while pos < self.length and self.source[pos] == SPACE:
            pos += 1
        return pos

    def at_end(self, pos: int) -> bool:
        """Check whether only spaces remain from ``pos``."""
        return self.skip_spaces(pos) >= self.length

    def peek_literal(self, pos: int, literal: str) -> int | None:
        """
        Match ``literal`` after optional spaces.

        Params:
            pos: Position to start from
            literal: Punctuation to match (e.g. "&&", ":")

        Returns:
            Position after the literal, or None when it is not present
        """
        pos = self.skip_spaces(pos)
        if self.source.startswith(literal, pos):
            return pos + len(literal)
        return None

    def read_value(self, pos: int) -> tuple[Value, int]:
        """
        Read one quoted or bare value after optional spaces.

        Params:
            pos: Position to start from

        Returns:
            The value and the position right after it

        Raises:
            UnterminatedString: If the input ends inside a quoted value
            ExpectedValue: If no value starts at the position
        """
        pos = self.skip_spaces(pos)
        if pos < self.length and self.source[pos] == QUOTE:
            return self._read_quoted(pos)

        end = pos
        while end < self.length and is_bare_char(self.source[end]):
            end += 1
        if end == pos:
            raise self.error(
                ExpectedValue, pos, expected="quoted string or alphanumeric value"
            )
        return BareValue(self.source[pos:end]), end

    def _read_quoted(self, start: int) -> tuple[QuotedValue, int]:
        chunks = []
        pos = start + 1
        while pos < self.length:
            if self.source.startswith(ESCAPED_QUOTE, pos):
                chunks.append(QUOTE)
                pos += len(ESCAPED_QUOTE)
                continue
            char = self.source[pos]
            if char == QUOTE:
                return QuotedValue("".join(chunks)), pos + 1
            chunks.append(char)
            pos += 1
        raise self.error(UnterminatedString, start, expected="closing '\"'")

    def byte_offset(self, index: int) -> int:
        """Convert a character index into a UTF-8 byte offset."""
        return len(self.source[:index].encode("utf-8"))
