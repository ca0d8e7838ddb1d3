# Formula Builder
# Builds record store filter formulas from validated field references and escaped literals.
# Combinators only accept expression objects, so a raw string can never be spliced
# into a formula.

import re
from typing import Any

# Field names may contain letters, digits, spaces and a few punctuation marks,
# but never braces, quotes or backslashes.
FIELD_NAME_PATTERN = re.compile(r"^[A-Za-z0-9 _#()\-.&/]+$")


def escape_value(text: Any) -> str:
    """Escape backslashes and single quotes for use inside a quoted formula literal."""
    if text is None:
        return ""
    return str(text).replace("\\", "\\\\").replace("'", "\\'")


class Expr:
    """A formula expression node."""

    def render(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.render()!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Expr) and self.render() == other.render()

    def __hash__(self) -> int:
        return hash(self.render())


class Field(Expr):
    """Reference to a table field, e.g. {Customer Email}."""

    def __init__(self, name: str):
        if not isinstance(name, str) or not FIELD_NAME_PATTERN.match(name):
            raise ValueError(f"Invalid field name: {name!r}")
        self.name = name

    def render(self) -> str:
        return "{" + self.name + "}"


class Value(Expr):
    """A quoted, escaped string literal."""

    def __init__(self, text: Any):
        self.text = "" if text is None else str(text)

    def render(self) -> str:
        return "'" + escape_value(self.text) + "'"


class Call(Expr):
    """A whitelisted formula function applied to expression arguments."""

    FUNCTIONS = {"AND", "OR", "SEARCH", "LOWER", "ARRAYJOIN", "IS_AFTER"}

    def __init__(self, function: str, *args: Expr):
        if function not in self.FUNCTIONS:
            raise ValueError(f"Unsupported formula function: {function}")
        for arg in args:
            _require_expr(arg)
        self.function = function
        self.args = args

    def render(self) -> str:
        return f"{self.function}({', '.join(a.render() for a in self.args)})"


class Comparison(Expr):
    def __init__(self, left: Expr, right: Expr, operator: str = "="):
        _require_expr(left)
        _require_expr(right)
        self.left = left
        self.right = right
        self.operator = operator

    def render(self) -> str:
        return f"{self.left.render()} {self.operator} {self.right.render()}"


def _require_expr(arg: Any) -> None:
    if not isinstance(arg, Expr):
        raise TypeError(
            f"Formula arguments must be Field/Value expressions, got {type(arg).__name__}"
        )


def eq(left: Expr, right: Expr) -> Expr:
    return Comparison(left, right, "=")


def and_(*exprs: Expr) -> Expr:
    if len(exprs) == 1:
        _require_expr(exprs[0])
        return exprs[0]
    return Call("AND", *exprs)


def or_(*exprs: Expr) -> Expr:
    if len(exprs) == 1:
        _require_expr(exprs[0])
        return exprs[0]
    return Call("OR", *exprs)


def search(needle: Expr, haystack: Expr) -> Expr:
    return Call("SEARCH", needle, haystack)


def lower(expr: Expr) -> Expr:
    return Call("LOWER", expr)


def array_join(field: Field, separator: str = ",") -> Expr:
    return Call("ARRAYJOIN", field, Value(separator))


def is_after(field: Field, value: Value) -> Expr:
    return Call("IS_AFTER", field, value)
