"""Algebra tools: equation solving, factoring, expansion and simplification."""

import json
from typing import Any

import sympy

from athena_tutor.agents.tutor.tools.parsing import (
    format_expr,
    math_tool,
    parse_equation,
    parse_expression,
    parse_symbol,
    to_number,
)
from athena_tutor.exceptions import MathToolError


@math_tool("solve linear equation")
def solve_linear_equation(equation: str, variable: str) -> dict[str, Any]:
    symbol = parse_symbol(variable)
    solutions = sympy.solve(parse_equation(equation), symbol)
    if not solutions:
        raise MathToolError(f"No solution for {variable} in {equation}")

    solution = f"{variable} = {format_expr(solutions[0])}"
    return {
        "solution": solution,
        "steps": [
            f"Equation: {equation}",
            f"Solving for {variable}...",
            f"Solution: {solution}",
        ],
    }


@math_tool("solve quadratic equation")
def solve_quadratic_equation(equation: str, variable: str) -> dict[str, Any]:
    """Solve a quadratic, reporting the discriminant when it is a degree 2 polynomial."""
    symbol = parse_symbol(variable)
    expr = parse_equation(equation)
    solutions = [format_expr(s) for s in sympy.solve(expr, symbol)]
    if not solutions:
        raise MathToolError(f"No solution for {variable} in {equation}")

    result: dict[str, Any] = {"solutions": solutions}
    steps = [f"Equation: {equation}"]

    poly = sympy.Poly(sympy.expand(expr), symbol)
    if poly.degree() == 2:
        a, b, c = poly.all_coeffs()
        discriminant = sympy.simplify(b**2 - 4 * a * c)
        result["discriminant"] = (
            to_number(discriminant) if discriminant.is_number else format_expr(discriminant)
        )
        steps.append(f"a = {format_expr(a)}, b = {format_expr(b)}, c = {format_expr(c)}")
        steps.append(f"Discriminant b² - 4ac = {result['discriminant']}")

    steps.append(f"Solving quadratic equation for {variable}...")
    steps.append(f"Solutions: {', '.join(solutions)}")
    result["steps"] = steps
    return result


@math_tool("factor expression")
def factor_expression(expression: str) -> dict[str, Any]:
    factored = format_expr(sympy.factor(parse_expression(expression)))
    return {
        "factored": factored,
        "steps": [
            f"Expression: {expression}",
            "Factoring...",
            f"Factored form: {factored}",
        ],
    }


@math_tool("expand expression")
def expand_expression(expression: str) -> dict[str, Any]:
    expanded = format_expr(sympy.expand(parse_expression(expression)))
    return {
        "expanded": expanded,
        "steps": [
            f"Expression: {expression}",
            "Expanding...",
            f"Expanded form: {expanded}",
        ],
    }


@math_tool("simplify expression")
def simplify_expression(expression: str) -> dict[str, Any]:
    simplified = format_expr(sympy.simplify(parse_expression(expression)))
    return {
        "simplified": simplified,
        "steps": [
            f"Expression: {expression}",
            "Simplifying...",
            f"Simplified form: {simplified}",
        ],
    }


@math_tool("solve system of equations")
def solve_system_of_equations(equations: list[str], variables: list[str]) -> dict[str, Any]:
    if not equations or not variables:
        raise MathToolError("Must provide at least one equation and one variable")

    symbols = [parse_symbol(v) for v in variables]
    found = sympy.solve([parse_equation(eq) for eq in equations], symbols, dict=True)
    if not found:
        raise MathToolError("System has no solution")

    first = found[0]
    solutions = {
        name: format_expr(first[symbol])
        for name, symbol in zip(variables, symbols)
        if symbol in first
    }
    return {
        "solutions": solutions,
        "steps": [
            f"Equations: {', '.join(equations)}",
            f"Solving system for {', '.join(variables)}...",
            f"Solutions: {json.dumps(solutions)}",
        ],
    }
