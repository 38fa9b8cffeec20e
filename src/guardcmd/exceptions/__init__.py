"""
Guarded command DSL exception classes.

This package provides all exception types used throughout the guardcmd
library for consistent error handling and reporting.
"""

from guardcmd.exceptions.core import (
    DSLSyntaxError,
    ErrorContext,
    ErrorLevel,
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

__all__ = [
    "GuardCmdDSLError",
    "DSLSyntaxError",
    "ErrorContext",
    "ErrorLevel",
    "ExpectedValue",
    "UnterminatedString",
    "UnterminatedMacro",
    "UnterminatedFunctionCall",
    "UnterminatedParenGroup",
    "ExpectedCommandExpr",
    "ExpectedBracesBody",
    "TrailingInput",
    "NestingTooDeep",
]
