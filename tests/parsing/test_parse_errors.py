"""
Tests for position-anchored parse failures.

Every malformed document must raise exactly one typed error carrying the
byte offset where the failure was detected.
"""

from typing import NamedTuple
from unittest import mock

import pytest

from guardcmd.exceptions import core as exceptions_core
from guardcmd.exceptions.core import (
    DSLSyntaxError,
    ExpectedBracesBody,
    ExpectedCommandExpr,
    ExpectedValue,
    GuardCmdDSLError,
    NestingTooDeep,
    TrailingInput,
    UnterminatedFunctionCall,
    UnterminatedMacro,
    UnterminatedParenGroup,
    UnterminatedString,
)


class ErrorCase(NamedTuple):
    """Test case for a malformed document."""

    name: str
    source: str
    error_class: type
    offset: int


INVALID_DOCUMENTS = [
    ErrorCase("empty", "", ExpectedBracesBody, 0),
    ErrorCase("only_spaces", "   ", ExpectedBracesBody, 3),
    ErrorCase("bare_value", "a b", ExpectedCommandExpr, 3),
    ErrorCase("lone_delimiter", ";run()", ExpectedBracesBody, 0),
    ErrorCase("dangling_comma", "a,:f()", ExpectedCommandExpr, 2),
    ErrorCase("value_run", "a b c", ExpectedCommandExpr, 5),
    ErrorCase("unterminated_prefix", "m, n", ExpectedCommandExpr, 4),
    ErrorCase("missing_command_after_colon", "a:foo", ExpectedCommandExpr, 5),
    ErrorCase("trailing_word", "a:foo() extra", TrailingInput, 8),
    ErrorCase("single_ampersand", "a:x() & b:y()", TrailingInput, 6),
    ErrorCase("unclosed_call", "foo(", UnterminatedFunctionCall, 4),
    ErrorCase("missing_arg_comma", "f(a b)", UnterminatedFunctionCall, 4),
    ErrorCase("leading_arg_comma", "f(,)", UnterminatedFunctionCall, 2),
    ErrorCase("empty_arg_value", "f(a=)", ExpectedValue, 4),
    ErrorCase("empty_macro", "{}", ExpectedValue, 1),
    ErrorCase("guarded_empty_macro", "a:{}", ExpectedValue, 3),
    ErrorCase("unclosed_macro", "{a b", UnterminatedMacro, 4),
    ErrorCase("bad_macro_content", "{a (", UnterminatedMacro, 3),
    ErrorCase("lone_brace", "{", UnterminatedMacro, 1),
    ErrorCase("unclosed_group", "(a()", UnterminatedParenGroup, 4),
    ErrorCase("junk_in_group", "(a() b()", UnterminatedParenGroup, 5),
    ErrorCase("dangling_and", "a() &&", ExpectedBracesBody, 6),
    ErrorCase("dangling_or", "a() || ", ExpectedBracesBody, 7),
    ErrorCase("unterminated_string", '"abc', UnterminatedString, 0),
    ErrorCase("unterminated_arg_string", 'f("x)', UnterminatedString, 2),
    ErrorCase("empty_modifier_value", "a=", ExpectedValue, 2),
]


class TestErrorKinds:
    """Each malformed document fails with a specific error kind and offset."""

    @pytest.mark.parametrize(
        "case", INVALID_DOCUMENTS, ids=[case.name for case in INVALID_DOCUMENTS]
    )
    def test_error_kind_and_offset(self, parser, case):
        with pytest.raises(case.error_class) as exc_info:
            parser.parse(case.source)
        assert exc_info.value.offset == case.offset

    @pytest.mark.parametrize(
        "case", INVALID_DOCUMENTS, ids=[case.name for case in INVALID_DOCUMENTS]
    )
    def test_errors_share_base_classes(self, parser, case):
        with pytest.raises(DSLSyntaxError) as exc_info:
            parser.parse(case.source)
        assert isinstance(exc_info.value, GuardCmdDSLError)
        assert exc_info.value.kind == case.error_class.__name__


class TestErrorDetails:
    """Tests for the information carried by errors."""

    def test_trailing_input_points_at_extra_text(self, parser):
        source = "a:foo() extra"
        with pytest.raises(TrailingInput) as exc_info:
            parser.parse(source)
        error = exc_info.value
        assert source[error.index :] == "extra"
        assert error.expected == "end of input"
        assert error.source == source

    def test_offset_is_measured_in_bytes(self, parser):
        source = '"é"() x'
        with pytest.raises(TrailingInput) as exc_info:
            parser.parse(source)
        assert exc_info.value.index == 6
        assert exc_info.value.offset == 7

    def test_message_mentions_offset_and_expectation(self, parser):
        with pytest.raises(UnterminatedFunctionCall) as exc_info:
            parser.parse("foo(")
        message = str(exc_info.value)
        assert "offset 4" in message
        assert "expected" in message

    def test_deepest_failure_is_reported(self, parser):
        """The failure inside the guarded command beats the generic braces error."""
        with pytest.raises(ExpectedCommandExpr) as exc_info:
            parser.parse("x() && ci, os=linux: 42")
        assert exc_info.value.offset == 23

    def test_value_run_reports_where_paren_was_needed(self, parser):
        with pytest.raises(ExpectedCommandExpr) as exc_info:
            parser.parse("a b c")
        assert exc_info.value.offset == 5
        assert exc_info.value.expected == "'('"

    def test_unterminated_prefix_lists_every_delimiter(self, parser):
        with pytest.raises(ExpectedCommandExpr) as exc_info:
            parser.parse("m, n")
        assert exc_info.value.offset == 4
        assert exc_info.value.expected == "',', ';' or ':'"

    def test_guarded_value_lists_paren_and_equals(self, parser):
        with pytest.raises(ExpectedCommandExpr) as exc_info:
            parser.parse("a:foo")
        assert exc_info.value.expected == "'(' or '='"

    def test_equals_commits_to_equality(self, parser):
        with pytest.raises(ExpectedValue) as exc_info:
            parser.parse("os=:run()")
        assert exc_info.value.offset == 3

    def test_failed_parse_returns_nothing(self, parser):
        result = None
        with pytest.raises(DSLSyntaxError):
            result = parser.parse("a() ||")
        assert result is None


class TestNestingLimit:
    """Tests for the configurable nesting guard."""

    def test_within_limit(self, shallow_parser):
        document = shallow_parser.parse("((a()))")
        assert document.root.ors[0].terms[0].is_nested

    def test_beyond_limit(self, shallow_parser):
        with pytest.raises(NestingTooDeep) as exc_info:
            shallow_parser.parse("(((a())))")
        assert exc_info.value.offset == 2

    def test_default_limit_handles_pathological_input(self, parser):
        source = "(" * 500 + "a()" + ")" * 500
        with pytest.raises(NestingTooDeep) as exc_info:
            parser.parse(source)
        assert exc_info.value.offset == 64


class TestErrorCost:
    """Location details of an error are only computed when asked for."""

    def test_successful_parse_builds_no_error_context(self, parser):
        source = " && ".join(["a, b: c d()"] * 2000)
        with mock.patch.object(exceptions_core, "ErrorContext") as context_class:
            document = parser.parse(source)
        assert len(document.root.ors[0].terms) == 2000
        context_class.assert_not_called()

    def test_offset_is_computed_on_first_access(self, parser):
        with pytest.raises(TrailingInput) as exc_info:
            parser.parse('"é"() x')
        error = exc_info.value
        assert "offset" not in vars(error)
        assert error.offset == 7
        assert "offset" in vars(error)
