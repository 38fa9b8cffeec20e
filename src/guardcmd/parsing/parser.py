"""
Parser for guarded command documents.

This module turns DSL source text such as ``env=prod; deploy:run(fast) || {noop}``
into the immutable tree defined in guardcmd.core.nodes. The grammar is parsed by
recursive descent with ordered choice: speculative branches restore the integer
cursor on failure, while constructs that have seen their committing token
(``{``, ``(``, ``=``, ``&&``, ``||``) report their failures directly.
"""

import logging
from contextlib import contextmanager

from guardcmd.core.nodes import (
    And,
    BareModifier,
    Braces,
    Command,
    CommandExpr,
    Document,
    Equality,
    Expression,
    FunctionCall,
    Macro,
    Modifier,
)
from guardcmd.core.settings import ParserSettings
from guardcmd.exceptions.core import (
    DSLSyntaxError,
    ExpectedBracesBody,
    ExpectedCommandExpr,
    ExpectedValue,
    NestingTooDeep,
    TrailingInput,
    UnterminatedFunctionCall,
    UnterminatedMacro,
    UnterminatedParenGroup,
)
from guardcmd.parsing.scanner import SourceScanner

logger = logging.getLogger(__name__)

COMMAND_DELIMITER = ":"
BRACES_DELIMITER = ";"


@contextmanager
def committed():
    """Mark every syntax error raised inside the block as unrecoverable."""
    try:
        yield
    except DSLSyntaxError as error:
        error.recoverable = False
        raise


class _DocumentReader:
    """Readers for a single parse of one source string."""

    def __init__(self, scanner: SourceScanner, settings: ParserSettings):
        self.scanner = scanner
        self.settings = settings
        # Deepest dead end reached by a speculative branch, and what would
        # have let it continue there.
        self.furthest_index = 0
        self.furthest_expected: list[str] = []

    def record_dead_end(self, index: int, *expected: str) -> None:
        """Remember what a speculative branch needed at ``index``."""
        if index > self.furthest_index:
            self.furthest_index = index
            self.furthest_expected = []
        if index == self.furthest_index:
            for item in expected:
                if item not in self.furthest_expected:
                    self.furthest_expected.append(item)

    def describe_furthest(self) -> str:
        items = self.furthest_expected
        if len(items) == 1:
            return items[0]
        return f"{', '.join(items[:-1])} or {items[-1]}"

    def read_document(self) -> Document:
        leading, pos = self.read_modifier_prefix(0, BRACES_DELIMITER)
        root, pos = self.read_expression(pos, depth=0)
        end = self.scanner.skip_spaces(pos)
        if end < self.scanner.length:
            raise self.scanner.error(TrailingInput, end, expected="end of input")
        return Document(root=root, leading_modifiers=leading)

    def read_modifier(self, pos: int) -> tuple[Modifier, int]:
        """Read ``value`` or ``value=value``; '=' commits to the equality form."""
        key, pos = self.scanner.read_value(pos)
        after_equals = self.scanner.peek_literal(pos, "=")
        if after_equals is None:
            return BareModifier(key), pos
        with committed():
            value, pos = self.scanner.read_value(after_equals)
        return Equality(key=key, value=value), pos

    def read_modifier_prefix(
        self, pos: int, delimiter: str
    ) -> tuple[tuple[Modifier, ...], int]:
        """
        Read an optional ``modifier (',' modifier)* delimiter`` prefix.

        Params:
            pos: Position to start from
            delimiter: ":" for commands, ";" for braces and documents

        Returns:
            The modifiers and the position after the delimiter, or an empty tuple
            and the unchanged position when the prefix is absent
        """
        modifiers = []
        cursor = pos
        while True:
            try:
                modifier, cursor = self.read_modifier(cursor)
            except DSLSyntaxError as error:
                if not error.recoverable:
                    raise
                if modifiers:
                    self.record_dead_end(error.index, "value")
                return (), pos
            modifiers.append(modifier)
            after_comma = self.scanner.peek_literal(cursor, ",")
            if after_comma is None:
                break
            cursor = after_comma

        after_delimiter = self.scanner.peek_literal(cursor, delimiter)
        if after_delimiter is None:
            self.record_dead_end(
                self.scanner.skip_spaces(cursor), "','", f"'{delimiter}'"
            )
            return (), pos
        return tuple(modifiers), after_delimiter

    def read_command_expr(self, pos: int) -> tuple[CommandExpr, int]:
        """Read a macro, a function call or an equality, in that order."""
        start = self.scanner.skip_spaces(pos)

        after_brace = self.scanner.peek_literal(start, "{")
        if after_brace is not None:
            with committed():
                return self.read_macro(after_brace)

        call = self.try_function_call(start)
        if call is not None:
            return call

        try:
            key, pos = self.scanner.read_value(start)
        except DSLSyntaxError as error:
            if not error.recoverable:
                raise
            raise self._expected_command_expr(start) from error
        after_equals = self.scanner.peek_literal(pos, "=")
        if after_equals is None:
            self.record_dead_end(self.scanner.skip_spaces(pos), "'='")
            raise self._expected_command_expr(start)
        with committed():
            value, pos = self.scanner.read_value(after_equals)
        return Equality(key=key, value=value), pos

    def _expected_command_expr(self, start: int) -> DSLSyntaxError:
        """Report the deepest dead end past ``start``, or ``start`` itself."""
        if self.furthest_index > start:
            return self.scanner.error(
                ExpectedCommandExpr,
                self.furthest_index,
                expected=self.describe_furthest(),
            )
        return self.scanner.error(
            ExpectedCommandExpr, start, expected="macro, function call or equality"
        )

    def read_macro(self, pos: int) -> tuple[Macro, int]:
        """
        Read the values of a macro whose '{' has been consumed.

        Params:
            pos: Position right after '{'

        Returns:
            The macro and the position after its '}'

        Raises:
            ExpectedValue: If the macro is empty
            UnterminatedMacro: If anything but a value or '}' follows
        """
        tokens = []
        while True:
            after_close = self.scanner.peek_literal(pos, "}")
            if after_close is not None:
                if not tokens:
                    raise self.scanner.error(
                        ExpectedValue,
                        self.scanner.skip_spaces(pos),
                        expected="macro value",
                    )
                return Macro(tokens), after_close
            try:
                token, pos = self.scanner.read_value(pos)
            except DSLSyntaxError as error:
                if not error.recoverable:
                    raise
                raise self.scanner.error(
                    UnterminatedMacro,
                    self.scanner.skip_spaces(pos),
                    expected="value or '}'",
                ) from error
            tokens.append(token)

    def try_function_call(self, pos: int) -> tuple[FunctionCall, int] | None:
        """
        Speculatively read ``value+ '('``.

        Returns None, leaving the caller's position untouched, when the value run
        is not followed by '('. Once '(' is found the call is committed.
        """
        name_tokens = []
        cursor = pos
        while True:
            try:
                token, cursor = self.scanner.read_value(cursor)
            except DSLSyntaxError as error:
                if not error.recoverable:
                    raise
                break
            name_tokens.append(token)

        if not name_tokens:
            return None
        after_paren = self.scanner.peek_literal(cursor, "(")
        if after_paren is None:
            self.record_dead_end(self.scanner.skip_spaces(cursor), "'('")
            return None
        with committed():
            args, cursor = self.read_call_args(after_paren)
        return FunctionCall(name_tokens=name_tokens, args=args), cursor

    def read_call_args(self, pos: int) -> tuple[list[Modifier], int]:
        """
        Read ``(func_arg ',')* func_arg? ')'`` after the opening '('.

        Params:
            pos: Position right after '('

        Returns:
            The arguments in source order and the position after ')'

        Raises:
            UnterminatedFunctionCall: If the list is not closed by ')'
        """
        args = []
        while True:
            after_close = self.scanner.peek_literal(pos, ")")
            if after_close is not None:
                return args, after_close
            try:
                arg, pos = self.read_modifier(pos)
            except DSLSyntaxError as error:
                if not error.recoverable:
                    raise
                raise self.scanner.error(
                    UnterminatedFunctionCall,
                    self.scanner.skip_spaces(pos),
                    expected="argument or ')'",
                ) from error
            args.append(arg)

            after_comma = self.scanner.peek_literal(pos, ",")
            if after_comma is not None:
                pos = after_comma
                continue
            after_close = self.scanner.peek_literal(pos, ")")
            if after_close is None:
                raise self.scanner.error(
                    UnterminatedFunctionCall,
                    self.scanner.skip_spaces(pos),
                    expected="',' or ')'",
                )
            return args, after_close

    def read_command(self, pos: int) -> tuple[Command, int]:
        """
        Read ``(modifier (',' modifier)* ':')? cmd_expr``.

        Params:
            pos: Position to start from

        Returns:
            The command and the position after its expression

        Raises:
            ExpectedCommandExpr: If no command expression follows the optional prefix
        """
        modifiers, pos = self.read_modifier_prefix(pos, COMMAND_DELIMITER)
        expr, pos = self.read_command_expr(pos)
        return Command(expr=expr, modifiers=modifiers), pos

    def read_braces(self, pos: int, depth: int) -> tuple[Braces, int]:
        """
        Read an optionally guarded command or parenthesized expression.

        A modifier list ended by ':' directly in front of '(' guards the group the
        same way a list ended by ';' does.
        """
        modifiers, body_start = self.read_modifier_prefix(pos, BRACES_DELIMITER)
        body_start = self.scanner.skip_spaces(body_start)

        try:
            command, pos = self.read_command(body_start)
            return Braces(body=command, modifiers=modifiers), pos
        except DSLSyntaxError as error:
            if not error.recoverable:
                raise
            command_error = error

        after_paren = self.scanner.peek_literal(body_start, "(")
        if after_paren is None and not modifiers:
            colon_modifiers, after_colon = self.read_modifier_prefix(
                body_start, COMMAND_DELIMITER
            )
            if colon_modifiers:
                after_paren = self.scanner.peek_literal(after_colon, "(")
                if after_paren is not None:
                    modifiers = colon_modifiers

        if after_paren is None:
            if command_error.index > body_start:
                raise command_error
            raise self.scanner.error(
                ExpectedBracesBody, body_start, expected="command or '('"
            )

        if depth >= self.settings.max_depth:
            raise self.scanner.error(
                NestingTooDeep,
                after_paren - 1,
                expected=f"at most {self.settings.max_depth} nested groups",
                recoverable=False,
            )
        with committed():
            nested, pos = self.read_expression(after_paren, depth + 1)
            after_close = self.scanner.peek_literal(pos, ")")
            if after_close is None:
                raise self.scanner.error(
                    UnterminatedParenGroup,
                    self.scanner.skip_spaces(pos),
                    expected="')'",
                )
        return Braces(body=nested, modifiers=modifiers), after_close

    def read_and(self, pos: int, depth: int) -> tuple[And, int]:
        """
        Read braces joined by '&&'.

        Params:
            pos: Position to start from
            depth: Number of enclosing parenthesized groups

        Returns:
            The flat chain of terms and the position after the last one
        """
        braces, pos = self.read_braces(pos, depth)
        terms = [braces]
        while True:
            after_operator = self.scanner.peek_literal(pos, "&&")
            if after_operator is None:
                return And(terms), pos
            with committed():
                braces, pos = self.read_braces(after_operator, depth)
            terms.append(braces)

    def read_expression(self, pos: int, depth: int) -> tuple[Expression, int]:
        """
        Read '&&' chains joined by '||'.

        Params:
            pos: Position to start from
            depth: Number of enclosing parenthesized groups

        Returns:
            The expression and the position after its last chain
        """
        and_chain, pos = self.read_and(pos, depth)
        ors = [and_chain]
        while True:
            after_operator = self.scanner.peek_literal(pos, "||")
            if after_operator is None:
                return Expression(ors), pos
            with committed():
                and_chain, pos = self.read_and(after_operator, depth)
            ors.append(and_chain)


class DocumentParser:
    """
    Parser for guarded command documents.

    A parser holds only its settings, so one instance can parse any number of
    sources, including from several threads at once.
    """

    def __init__(self, settings: ParserSettings | None = None):
        self.settings = settings or ParserSettings()

    def parse(self, source: str) -> Document:
        """
        Parse a complete document.

        Params:
            source: DSL text; only the space character separates tokens

        Returns:
            The document tree

        Raises:
            DSLSyntaxError: A subclass identifying the first unrecoverable failure
        """
        logger.debug("Parsing guarded command document (%d chars)", len(source))
        scanner = SourceScanner(source, error_level=self.settings.error_level)
        try:
            document = _DocumentReader(scanner, self.settings).read_document()
        except DSLSyntaxError as error:
            logger.debug("Parse failed with %s at offset %d", error.kind, error.offset)
            raise
        logger.debug(
            "Parsed document with %d top-level alternative(s)", len(document.root.ors)
        )
        return document


def parse_document(source: str, settings: ParserSettings | None = None) -> Document:
    """
    Convenience function to parse a document string.

    Params:
        source: The DSL text to parse
        settings: Optional parser settings

    Returns:
        The document tree

    Raises:
        DSLSyntaxError: If the document is malformed
    """
    parser = DocumentParser(settings)
    return parser.parse(source)
