"""Answer and step validation tools.

``validate_answer`` never raises: every failure is reported in the result so
the tutor can still respond to the student.
"""

import re
from typing import Any

import sympy

from athena_tutor.agents.tutor.tools.algebra import (
    solve_linear_equation,
    solve_quadratic_equation,
)
from athena_tutor.agents.tutor.tools.arithmetic import evaluate_expression
from athena_tutor.agents.tutor.tools.parsing import (
    PARSE_ERRORS,
    math_tool,
    parse_equation,
    parse_expression,
)
from athena_tutor.exceptions import MathToolError

TOLERANCE = 1e-4

_VARIABLE = re.compile(r"([a-z])", re.IGNORECASE)
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?|-?\.\d+")
_ASSIGNED_NUMBER = re.compile(r"[=:]\s*(-?\d+(?:\.\d+)?|-?\.\d+)")


def _normalize(answer: str) -> str:
    return re.sub(r"\s", "", answer).lower()


def _first_number(answer: str) -> float | None:
    """The number after ``=``/``:`` (``x = 4``), else the first number in the text."""
    match = _ASSIGNED_NUMBER.search(answer) or _NUMBER.search(answer)
    return float(match.group(1) if match.lastindex else match.group(0)) if match else None


def _all_numbers(answer: str) -> list[float]:
    return sorted(float(n) for n in _ASSIGNED_NUMBER.findall(answer) or _NUMBER.findall(answer))


def _close(a: float, b: float) -> bool:
    return abs(a - b) < TOLERANCE


def _guess_variable(problem: str) -> str:
    match = _VARIABLE.search(problem)
    return match.group(1) if match else "x"


def _check_rearrangement(problem: str, student_answer: str, variable: str, correct: str):
    """Compare a student's rearranged equation by solving it for the same variable."""
    try:
        student_solution = solve_linear_equation(student_answer, variable)["solution"]
    except MathToolError:
        return None

    correct_value = _first_number(correct)
    student_value = _first_number(student_solution)
    if correct_value is None or student_value is None:
        return None

    result: dict[str, Any] = {
        "is_correct": _close(correct_value, student_value),
        "correct_answer": correct,
    }
    if not result["is_correct"]:
        result["error"] = f"The rearrangement is not equivalent. Correct solution: {correct}"
    return result


@math_tool("validate answer")
def validate_answer(problem: str, student_answer: str, problem_type: str) -> dict[str, Any]:
    """Check a student's answer against the solved problem.

    Numeric answers are compared within a 1e-4 tolerance (all roots for
    quadratics); anything else falls back to normalized string comparison.
    """
    problem, student_answer = str(problem), str(student_answer)
    try:
        if problem_type in ("algebra", "linear_equation"):
            variable = _guess_variable(problem)
            correct_answer = solve_linear_equation(problem, variable)["solution"]
            if "=" in student_answer and student_answer != problem:
                rearranged = _check_rearrangement(problem, student_answer, variable, correct_answer)
                if rearranged is not None:
                    return rearranged
        elif problem_type in ("arithmetic", "expression"):
            correct_answer = str(evaluate_expression(problem)["result"])
        elif problem_type == "quadratic_equation":
            variable = _guess_variable(problem)
            correct_answer = ", ".join(solve_quadratic_equation(problem, variable)["solutions"])
        else:
            try:
                correct_answer = str(evaluate_expression(problem)["result"])
            except MathToolError:
                return {
                    "is_correct": False,
                    "correct_answer": "Unable to determine correct answer",
                    "error": "Problem type not supported for validation",
                }
    except MathToolError as exc:
        return {
            "is_correct": False,
            "correct_answer": "Error",
            "error": f"Validation failed: {exc}",
        }

    normalized_student = _normalize(student_answer)
    normalized_correct = _normalize(correct_answer)

    is_correct = False
    if problem_type == "quadratic_equation":
        student_roots = _all_numbers(normalized_student)
        correct_roots = _all_numbers(normalized_correct)
        is_correct = bool(correct_roots) and len(student_roots) == len(correct_roots) and all(
            _close(s, c) for s, c in zip(student_roots, correct_roots)
        )
    else:
        student_value = _first_number(normalized_student)
        correct_value = _first_number(normalized_correct)
        if student_value is not None and correct_value is not None:
            is_correct = _close(student_value, correct_value)

    if not is_correct:
        is_correct = (
            normalized_student == normalized_correct
            or normalized_correct in normalized_student
            or normalized_student in normalized_correct
        ) and bool(normalized_student)

    result: dict[str, Any] = {"is_correct": is_correct, "correct_answer": correct_answer}
    if not is_correct:
        result["error"] = (
            f"Answer does not match correct solution. Correct answer: {correct_answer}"
        )
    return result


def _equivalent(before: sympy.Expr, after: sympy.Expr, equations: bool) -> bool | None:
    """Whether two steps describe the same thing; None when that cannot be decided."""
    if not equations:
        return sympy.simplify(before - after) == 0

    symbols = sorted(before.free_symbols | after.free_symbols, key=str)
    if not symbols:
        return sympy.simplify(before) == 0 and sympy.simplify(after) == 0
    if len(symbols) == 1:
        (symbol,) = symbols
        return set(sympy.solve(before, symbol)) == set(sympy.solve(after, symbol))
    if after == 0:
        return None
    ratio = sympy.simplify(before / after)
    return bool(ratio.is_number and ratio != 0)


@math_tool("check step")
def check_step(previous_step: str, current_step: str, operation: str) -> dict[str, Any]:
    """Check that ``current_step`` follows from ``previous_step``.

    Equations are equivalent when they have the same solution set; expressions
    when their difference simplifies to zero. A step that cannot be checked is
    given the benefit of the doubt.
    """
    previous_step, current_step = str(previous_step), str(current_step)
    equations = "=" in previous_step and "=" in current_step
    parse = parse_equation if equations else parse_expression
    try:
        equivalent = _equivalent(parse(previous_step), parse(current_step), equations)
    except (MathToolError, *PARSE_ERRORS):
        equivalent = None

    if equivalent is None:
        return {"is_valid": True, "error": "Unable to validate step"}
    if equivalent:
        return {"is_valid": True, "next_hint": "Step is correct, continue"}
    return {
        "is_valid": False,
        "error": f"'{current_step}' does not follow from '{previous_step}' after {operation}",
        "next_hint": "Check your operation",
    }
