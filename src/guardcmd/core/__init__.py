"""
Core guardcmd components.

This package provides the immutable syntax tree, parser settings and tree
traversal helpers.
"""

from guardcmd.core.nodes import (
    And,
    BareModifier,
    BareValue,
    Braces,
    Command,
    CommandExpr,
    Document,
    Equality,
    Expression,
    FunctionCall,
    Macro,
    Modifier,
    Node,
    QuotedValue,
    Value,
)
from guardcmd.core.settings import ParserSettings
from guardcmd.core.traversal import GuardedCommand, iter_commands, iter_values

__all__ = [
    "And",
    "BareModifier",
    "BareValue",
    "Braces",
    "Command",
    "CommandExpr",
    "Document",
    "Equality",
    "Expression",
    "FunctionCall",
    "Macro",
    "Modifier",
    "Node",
    "QuotedValue",
    "Value",
    "ParserSettings",
    "GuardedCommand",
    "iter_commands",
    "iter_values",
]
