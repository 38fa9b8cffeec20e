"""
Abstract syntax tree for guarded command documents.

All nodes are immutable and compare structurally. Rendering any node with
``str()`` produces its canonical source form, which parses back to an equal node.
"""

from attrs import field, frozen, validators


def _is_bare_text(instance, attribute, value: str) -> None:
    if not value or not (value.isascii() and value.isalnum()):
        raise ValueError(
            f"{attribute.name} must be a non-empty ASCII alphanumeric run, got {value!r}"
        )


def _join(nodes, separator: str) -> str:
    return separator.join(str(node) for node in nodes)


def _modifier_prefix(modifiers, delimiter: str) -> str:
    if not modifiers:
        return ""
    return f"{_join(modifiers, ', ')}{delimiter} "


@frozen
class QuotedValue:
    """Double-quoted value; ``text`` holds the content with ``\\"`` resolved."""

    text: str

    def __str__(self) -> str:
        escaped = self.text.replace('"', '\\"')
        return f'"{escaped}"'


@frozen
class BareValue:
    """Run of ASCII alphanumeric characters."""

    text: str = field(validator=_is_bare_text)

    def __str__(self) -> str:
        return self.text


Value = QuotedValue | BareValue


@frozen
class Equality:
    """``key=value`` pair, used as a modifier, a function argument or a command."""

    key: Value
    value: Value

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


@frozen
class BareModifier:
    """Modifier consisting of a single value."""

    value: Value

    def __str__(self) -> str:
        return str(self.value)


Modifier = Equality | BareModifier


@frozen
class Macro:
    """Brace-delimited sequence of values (``{a b c}``)."""

    tokens: tuple[Value, ...] = field(converter=tuple, validator=validators.min_len(1))

    def __str__(self) -> str:
        return f"{{{_join(self.tokens, ' ')}}}"


@frozen
class FunctionCall:
    """
    Function call with a multi-token callee.

    Every whitespace-separated value before ``(`` is kept in ``name_tokens``;
    arguments keep their source order.
    """

    name_tokens: tuple[Value, ...] = field(
        converter=tuple, validator=validators.min_len(1)
    )
    args: tuple[Modifier, ...] = field(converter=tuple, default=())

    @property
    def name(self) -> str:
        """Callee tokens joined by single spaces."""
        return " ".join(token.text for token in self.name_tokens)

    def __str__(self) -> str:
        return f"{_join(self.name_tokens, ' ')}({_join(self.args, ', ')})"


CommandExpr = Macro | FunctionCall | Equality


@frozen
class Command:
    """Command expression guarded by modifiers terminated with ``:``."""

    expr: CommandExpr
    modifiers: tuple[Modifier, ...] = field(converter=tuple, default=())

    def __str__(self) -> str:
        return f"{_modifier_prefix(self.modifiers, ':')}{self.expr}"


@frozen
class Braces:
    """
    Operand of ``&&``: a command or a parenthesized expression.

    ``body`` is either a ``Command`` or a nested ``Expression`` owned by this node.
    """

    body: "Command | Expression"
    modifiers: tuple[Modifier, ...] = field(converter=tuple, default=())

    @property
    def is_nested(self) -> bool:
        return isinstance(self.body, Expression)

    def __str__(self) -> str:
        if self.is_nested:
            # "m; (...)" at the start of a document would bind to the document.
            return f"{_modifier_prefix(self.modifiers, ':')}({self.body})"
        return f"{_modifier_prefix(self.modifiers, ';')}{self.body}"


@frozen
class And:
    """Braces joined by ``&&``."""

    terms: tuple[Braces, ...] = field(converter=tuple, validator=validators.min_len(1))

    def __str__(self) -> str:
        return _join(self.terms, " && ")


@frozen
class Expression:
    """And-chains joined by ``||``."""

    ors: tuple[And, ...] = field(converter=tuple, validator=validators.min_len(1))

    def __str__(self) -> str:
        return _join(self.ors, " || ")


@frozen
class Document:
    """Parse result: global modifiers terminated with ``;`` and the root expression."""

    root: Expression
    leading_modifiers: tuple[Modifier, ...] = field(converter=tuple, default=())

    def __str__(self) -> str:
        return f"{_modifier_prefix(self.leading_modifiers, ';')}{self.root}"


Node = (
    Value
    | Modifier
    | Macro
    | FunctionCall
    | Command
    | Braces
    | And
    | Expression
    | Document
)
