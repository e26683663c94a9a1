"""Calculus tools: derivatives, integrals and limits."""

from typing import Any

import sympy

from athena_tutor.agents.tutor.tools.parsing import (
    format_expr,
    math_tool,
    parse_expression,
    parse_symbol,
    to_number,
)
from athena_tutor.exceptions import MathToolError


def _as_value(expr: sympy.Expr) -> int | float | str:
    if expr.is_number and expr.is_real and expr.is_finite:
        return to_number(expr)
    return format_expr(expr)


@math_tool("calculate derivative")
def calculate_derivative(expression: str, variable: str) -> dict[str, Any]:
    derivative = format_expr(sympy.diff(parse_expression(expression), parse_symbol(variable)))
    return {
        "derivative": derivative,
        "steps": [
            f"Expression: {expression}",
            f"Calculating derivative with respect to {variable}...",
            f"Derivative: {derivative}",
        ],
    }


@math_tool("calculate integral")
def calculate_integral(
    expression: str,
    variable: str,
    lower: float | None = None,
    upper: float | None = None,
) -> dict[str, Any]:
    """Indefinite integral, or definite when both bounds are given."""
    expr = parse_expression(expression)
    symbol = parse_symbol(variable)
    definite = lower is not None and upper is not None

    if definite:
        integral = sympy.integrate(expr, (symbol, sympy.nsimplify(lower), sympy.nsimplify(upper)))
        description = f"Calculating definite integral from {lower} to {upper}..."
    else:
        integral = sympy.integrate(expr, symbol)
        description = "Calculating indefinite integral..."

    if isinstance(integral, sympy.Integral):
        raise MathToolError(f"No closed form found for the integral of {expression}")

    result: dict[str, Any] = {"integral": format_expr(integral)}
    if definite and integral.is_number:
        result["value"] = _as_value(sympy.N(integral))
    result["steps"] = [
        f"Expression: {expression}",
        description,
        f"Integral: {result['integral']}",
    ]
    return result


@math_tool("calculate limit")
def calculate_limit(expression: str, variable: str, approaches: float) -> dict[str, Any]:
    limit = sympy.limit(
        parse_expression(expression),
        parse_symbol(variable),
        sympy.nsimplify(approaches),
    )
    value = _as_value(limit)
    return {
        "limit": value,
        "steps": [
            f"Expression: {expression}",
            f"Calculating limit as {variable} approaches {approaches}...",
            f"Limit: {value}",
        ],
    }
