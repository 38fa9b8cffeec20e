"""
Exception classes for guarded command DSL processing.

This module defines specific exception types for the different error conditions
that can occur while parsing a guarded command document. Every syntax error is
anchored to a position in the source text.
"""

from dataclasses import dataclass
from enum import Enum
from functools import cached_property


class ErrorLevel(Enum):
    """Error message detail level for end users vs developers."""

    USER = "user"  # Source line with a caret under the failure
    DEVELOPER = "developer"  # Adds character index and byte offset


@dataclass
class ErrorContext:
    """
    Context information for error messages.

    Captures where an error occurred in the parsed source so that the message can
    point at the offending character. Supports formatting at different detail
    levels for user-facing vs developer debugging.

    Params:
        source: The complete source text being parsed
        index: Character index of the failure within source
        offset: UTF-8 byte offset of the failure within source
    """

    source: str
    index: int
    offset: int

    @property
    def line(self) -> int:
        """1-based line number of the failure (newlines may appear in quoted values)."""
        return self.source.count("\n", 0, self.index) + 1

    @property
    def column(self) -> int:
        """1-based column of the failure within its line."""
        line_start = self.source.rfind("\n", 0, self.index) + 1
        return self.index - line_start + 1

    def format_location(self, error_level: ErrorLevel) -> str:
        """
        Format location information based on error level.

        Params:
            error_level: Whether to show USER or DEVELOPER level details

        Returns:
            Formatted location string with appropriate detail level
        """
        line_start = self.source.rfind("\n", 0, self.index) + 1
        line_end = self.source.find("\n", self.index)
        if line_end == -1:
            line_end = len(self.source)
        source_line = self.source[line_start:line_end]

        lines = [f"  at line {self.line}, column {self.column}"]
        if error_level == ErrorLevel.DEVELOPER:
            lines.append(f"  index {self.index}, byte offset {self.offset}")
        lines.append(f"  | {source_line}")
        lines.append(f"  | {' ' * (self.index - line_start)}^")
        return "\n".join(lines)


class GuardCmdDSLError(Exception):
    """Base exception for all guarded command DSL errors."""

    pass


class DSLSyntaxError(GuardCmdDSLError):
    """
    Base exception for malformed guarded command documents.

    Subclasses identify the kind of failure; all of them carry the position of the
    failure both as a character index and as a UTF-8 byte offset.
    """

    description = "Syntax error"

    def __init__(
        self,
        source: str,
        index: int,
        expected: str | None = None,
        error_level: ErrorLevel = ErrorLevel.USER,
        recoverable: bool = True,
    ):
        """
        Initialize the exception.

        Params:
            source: The complete source text being parsed
            index: Character index where the failure was detected
            expected: Description of what was expected at that position
            error_level: Level of detail to show in error message
            recoverable: Whether an enclosing alternative may still be attempted
        """
        self.source = source
        self.index = index
        self.expected = expected
        self.error_level = error_level
        self.recoverable = recoverable
        # offset, context and the message are computed on first access
        super().__init__(source, index)

    @cached_property
    def offset(self) -> int:
        """UTF-8 byte offset of the failure within the source."""
        return len(self.source[: self.index].encode("utf-8"))

    @cached_property
    def context(self) -> ErrorContext:
        return ErrorContext(source=self.source, index=self.index, offset=self.offset)

    def __str__(self) -> str:
        primary_error = f"{self.description} at offset {self.offset}"
        if self.expected:
            primary_error = f"{primary_error}: expected {self.expected}"
        return f"{primary_error}\n{self.context.format_location(self.error_level)}"

    @property
    def kind(self) -> str:
        """Name of the error kind (the exception class name)."""
        return type(self).__name__


class ExpectedValue(DSLSyntaxError):
    """Raised when neither a quoted string nor an alphanumeric run is found."""

    description = "Expected value"


class UnterminatedString(DSLSyntaxError):
    """Raised when the input ends inside a quoted value."""

    description = "Unterminated string"

    def __init__(self, source: str, index: int, **kwargs):
        # Only a value can start with '"', so no alternative can recover from this.
        kwargs["recoverable"] = False
        super().__init__(source, index, **kwargs)


class UnterminatedMacro(DSLSyntaxError):
    """Raised when a macro is not closed by '}'."""

    description = "Unterminated macro"


class UnterminatedFunctionCall(DSLSyntaxError):
    """Raised when a function call argument list is not closed by ')'."""

    description = "Unterminated function call"


class UnterminatedParenGroup(DSLSyntaxError):
    """Raised when a parenthesized sub-expression is not closed by ')'."""

    description = "Unterminated parenthesized group"


class ExpectedCommandExpr(DSLSyntaxError):
    """Raised when no macro, function call or equality matches."""

    description = "Expected command expression"


class ExpectedBracesBody(DSLSyntaxError):
    """Raised when neither a command nor a parenthesized expression matches."""

    description = "Expected command or parenthesized expression"


class TrailingInput(DSLSyntaxError):
    """Raised when characters remain after a complete document."""

    description = "Unexpected trailing input"


class NestingTooDeep(DSLSyntaxError):
    """Raised when parenthesized groups nest deeper than the configured limit."""

    description = "Nesting too deep"
