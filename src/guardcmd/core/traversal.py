"""
Traversal helpers for parsed guarded command documents.

These helpers only walk the tree; guards are collected, never evaluated.
"""

from collections.abc import Iterator

from attrs import frozen

from guardcmd.core.nodes import (
    And,
    BareModifier,
    BareValue,
    Braces,
    Command,
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


@frozen
class GuardedCommand:
    """A command together with every modifier in scope for it, outermost first."""

    guards: tuple[Modifier, ...]
    command: Command


def iter_commands(document: Document) -> Iterator[GuardedCommand]:
    """
    Yield every command of a document in source order.

    Params:
        document: Parsed document to walk

    Returns:
        Iterator of GuardedCommand whose guards concatenate the document's leading
        modifiers, the modifiers of each enclosing Braces and the command's own
    """
    yield from _iter_expression(document.root, tuple(document.leading_modifiers))


def _iter_expression(
    expression: Expression, guards: tuple[Modifier, ...]
) -> Iterator[GuardedCommand]:
    for and_chain in expression.ors:
        for braces in and_chain.terms:
            scoped = guards + braces.modifiers
            if braces.is_nested:
                yield from _iter_expression(braces.body, scoped)
            else:
                yield GuardedCommand(
                    guards=scoped + braces.body.modifiers, command=braces.body
                )


def iter_values(node: Node) -> Iterator[Value]:
    """Yield every Value below ``node`` (any AST node) in source order."""
    if isinstance(node, (QuotedValue, BareValue)):
        yield node
    elif isinstance(node, Equality):
        yield node.key
        yield node.value
    elif isinstance(node, BareModifier):
        yield node.value
    elif isinstance(node, Macro):
        yield from node.tokens
    elif isinstance(node, FunctionCall):
        yield from node.name_tokens
        for arg in node.args:
            yield from iter_values(arg)
    elif isinstance(node, Command):
        for modifier in node.modifiers:
            yield from iter_values(modifier)
        yield from iter_values(node.expr)
    elif isinstance(node, Braces):
        for modifier in node.modifiers:
            yield from iter_values(modifier)
        yield from iter_values(node.body)
    elif isinstance(node, And):
        for braces in node.terms:
            yield from iter_values(braces)
    elif isinstance(node, Expression):
        for and_chain in node.ors:
            yield from iter_values(and_chain)
    elif isinstance(node, Document):
        for modifier in node.leading_modifiers:
            yield from iter_values(modifier)
        yield from iter_values(node.root)
    else:
        raise TypeError(f"Not a guardcmd AST node: {type(node).__name__}")
