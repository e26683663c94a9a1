"""Arithmetic tools: expression evaluation and percentages."""

from typing import Any

from athena_tutor.agents.tutor.tools.parsing import math_tool, parse_expression, to_number
from athena_tutor.exceptions import MathToolError


@math_tool("evaluate expression")
def evaluate_expression(expression: str) -> dict[str, Any]:
    value = parse_expression(expression).evalf()
    if not (value.is_number and value.is_real and value.is_finite):
        raise MathToolError("Expression could not be evaluated to a number")

    result = to_number(value)
    return {
        "result": result,
        "steps": [
            f"Expression: {expression}",
            "Evaluating...",
            f"Result: {result}",
        ],
    }


@math_tool("calculate percentage")
def calculate_percentage(
    whole: float,
    part: float | None = None,
    percent: float | None = None,
) -> dict[str, Any]:
    """Percentage from (part, whole), or part from (percent, whole)."""
    if part is not None:
        if not float(whole):
            raise MathToolError("whole must be non-zero to calculate a percentage")
        result = float(part) / float(whole) * 100
        steps = [
            f"Part: {part}, Whole: {whole}",
            "Percentage = (part / whole) × 100",
            f"Result: {result}%",
        ]
    elif percent is not None:
        result = float(percent) / 100 * float(whole)
        steps = [
            f"Percent: {percent}%, Whole: {whole}",
            "Part = (percent / 100) × whole",
            f"Result: {result}",
        ]
    else:
        raise MathToolError("Must provide either (part, whole) or (percent, whole)")

    return {"result": to_number(round(result, 2)), "steps": steps}
