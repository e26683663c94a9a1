"""Parsing helpers shared by the math tools.

Model-supplied math arrives in student notation (``2x``, ``x^2``, ``x²``,
``6 ÷ 3``); these helpers turn it into SymPy expressions and back.
"""

import functools
import math
import re
from collections.abc import Callable
from typing import Any

import sympy
from sympy.core.sympify import SympifyError
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    parse_expr,
    standard_transformations,
)
from sympy.polys.polyerrors import BasePolynomialError

from athena_tutor.exceptions import MathToolError

TRANSFORMATIONS = standard_transformations + (implicit_multiplication_application, convert_xor)

MAX_INPUT_LENGTH = 500
MAX_EXPONENT = 1000
MAX_RESULT_DIGITS = 5000

# parse_expr evaluates its input; only plain math notation is let through
_ALLOWED_INPUT = re.compile(r"^[\w\s+\-*/^().,]*$")
_ATTRIBUTE_ACCESS = re.compile(r"\.\s*[A-Za-z_]")

# Names visible to parsed text. Anything else becomes a Symbol, or an
# undefined Function when followed by "(".
_NAMESPACE_NAMES = (
    # emitted by the parser itself
    "Add",
    "Mul",
    "Pow",
    "Integer",
    "Float",
    "Rational",
    "Symbol",
    "Function",
    # constants
    "pi",
    "E",
    "I",
    "oo",
    # functions students write
    "sqrt",
    "cbrt",
    "root",
    "exp",
    "log",
    "ln",
    "sin",
    "cos",
    "tan",
    "cot",
    "sec",
    "csc",
    "asin",
    "acos",
    "atan",
    "sinh",
    "cosh",
    "tanh",
    "Abs",
)
NAMESPACE: dict[str, Any] = {name: getattr(sympy, name) for name in _NAMESPACE_NAMES}

_NOTATION = {
    "²": "^2",
    "³": "^3",
    "×": "*",
    "·": "*",
    "÷": "/",
    "−": "-",
    "π": "pi",
}

# Exceptions SymPy and bad model arguments raise for unusable input
PARSE_ERRORS = (
    SympifyError,
    SyntaxError,
    TypeError,
    ValueError,
    AttributeError,
    NotImplementedError,
    ZeroDivisionError,
    BasePolynomialError,
)


def normalize_notation(text: str) -> str:
    for symbol, replacement in _NOTATION.items():
        text = text.replace(symbol, replacement)
    return text.strip()


def parse_expression(text: str) -> sympy.Expr:
    """Parse a student-notation expression into SymPy.

    The text is first parsed unevaluated so powers too large to compute are
    refused before SymPy starts on them.

    Raises:
        MathToolError: If the input is empty, too long, contains anything
            other than math notation or describes a number too large to evaluate
    """
    if not isinstance(text, str) or not text.strip():
        raise MathToolError("Expression must be a non-empty string")
    if len(text) > MAX_INPUT_LENGTH:
        raise MathToolError(f"Expression is longer than {MAX_INPUT_LENGTH} characters")
    normalized = normalize_notation(text)
    if (
        "__" in normalized
        or not _ALLOWED_INPUT.match(normalized)
        or _ATTRIBUTE_ACCESS.search(normalized)
    ):
        raise MathToolError(f"Unsupported characters in expression: {text}")
    check_magnitude(_parse(normalized, evaluate=False))
    return _parse(normalized, evaluate=True)


def _parse(text: str, evaluate: bool) -> sympy.Expr:
    # eval() adds __builtins__ to the globals it is given, so pass a copy
    return parse_expr(
        text,
        transformations=TRANSFORMATIONS,
        global_dict=dict(NAMESPACE),
        evaluate=evaluate,
    )


def check_magnitude(expr: sympy.Expr) -> None:
    """Refuse numeric powers whose exact value would be too large to compute.

    Children are visited before their parents, so every exponent examined
    has itself already been bounded and is cheap to approximate.

    Raises:
        MathToolError: If an exponent exceeds MAX_EXPONENT or a power of
            numbers would have more than MAX_RESULT_DIGITS digits
    """
    for node in sympy.postorder_traversal(expr):
        if not isinstance(node, sympy.Pow) or not node.exp.is_number:
            continue
        exponent = abs(sympy.N(node.exp))
        if exponent > MAX_EXPONENT:
            raise MathToolError(f"Exponent too large to evaluate: {format_expr(node.exp)}")
        if not node.base.is_number:
            continue
        base = abs(sympy.N(node.base))
        if base.is_zero:
            continue
        # natural log of the result's magnitude
        if exponent * abs(sympy.log(base)) > MAX_RESULT_DIGITS * math.log(10):
            raise MathToolError("Number too large to evaluate")


def parse_equation(text: str) -> sympy.Expr:
    """Parse ``lhs = rhs`` into the zero form ``lhs - rhs``.

    Input without an ``=`` is taken to already equal zero.
    """
    if not isinstance(text, str):
        raise MathToolError("Equation must be a string")
    sides = text.split("=")
    if len(sides) == 1:
        return parse_expression(sides[0])
    if len(sides) != 2:
        raise MathToolError(f"Expected a single '=' in equation: {text}")
    lhs, rhs = sides
    return parse_expression(lhs) - parse_expression(rhs)


def parse_symbol(name: str) -> sympy.Symbol:
    if not isinstance(name, str) or not name.strip().isidentifier():
        raise MathToolError(f"Invalid variable name: {name}")
    return sympy.Symbol(name.strip())


def format_expr(expr: Any) -> str:
    """Render a SymPy result in the notation students type."""
    return str(expr).replace("**", "^")


def to_number(value: Any) -> int | float:
    """Convert a numeric SymPy value to a JSON number, preferring ints.

    Raises:
        MathToolError: If the value overflows a float
    """
    if isinstance(value, sympy.Integer):
        return int(value)
    number = float(value)
    if not math.isfinite(number):
        raise MathToolError("Result is too large to represent as a number")
    if number.is_integer() and abs(number) < 1e15:
        return int(number)
    return number


def math_tool(action: str) -> Callable:
    """Decorator turning parse and SymPy failures into MathToolError.

    MathToolError raised by the tool itself passes through unchanged; any
    other failure is reported as ``Failed to <action>: <reason>``.
    """

    def decorator(func: Callable[..., dict[str, Any]]) -> Callable[..., dict[str, Any]]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> dict[str, Any]:
            try:
                return func(*args, **kwargs)
            except MathToolError:
                raise
            except PARSE_ERRORS as exc:
                raise MathToolError(f"Failed to {action}: {exc}") from exc

        return wrapper

    return decorator
