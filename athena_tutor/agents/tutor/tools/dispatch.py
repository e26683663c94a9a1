"""Math tool registry and dispatcher.

Maps the tool names the model may call to their handlers and runs them.
Handlers are synchronous SymPy code, so they run in a worker thread with a
time limit to keep a slow simplification from stalling the event loop.
"""

import asyncio
import json
from collections.abc import Callable
from enum import StrEnum
from time import monotonic
from typing import Any

from athena_tutor.agents.tutor.tools import algebra, arithmetic, calculus, geometry, validation
from athena_tutor.exceptions import MathToolError, UnknownToolError
from athena_tutor.platform.observability.logging import get_logger
from athena_tutor.platform.observability.metrics import ToolMetricsLabels, record_tool_call

logger = get_logger(__name__)

ToolResult = dict[str, Any]
ToolHandler = Callable[..., ToolResult]

DEFAULT_TIMEOUT_SECONDS = 10.0


class MathTool(StrEnum):
    SOLVE_LINEAR_EQUATION = "solve_linear_equation"
    SOLVE_QUADRATIC_EQUATION = "solve_quadratic_equation"
    FACTOR_EXPRESSION = "factor_expression"
    EXPAND_EXPRESSION = "expand_expression"
    SIMPLIFY_EXPRESSION = "simplify_expression"
    SOLVE_SYSTEM_OF_EQUATIONS = "solve_system_of_equations"
    CALCULATE_AREA = "calculate_area"
    CALCULATE_VOLUME = "calculate_volume"
    CALCULATE_PERIMETER = "calculate_perimeter"
    CALCULATE_SURFACE_AREA = "calculate_surface_area"
    SOLVE_PYTHAGOREAN_THEOREM = "solve_pythagorean_theorem"
    CALCULATE_DERIVATIVE = "calculate_derivative"
    CALCULATE_INTEGRAL = "calculate_integral"
    CALCULATE_LIMIT = "calculate_limit"
    EVALUATE_EXPRESSION = "evaluate_expression"
    CALCULATE_PERCENTAGE = "calculate_percentage"
    VALIDATE_ANSWER = "validate_answer"
    CHECK_STEP = "check_step"


TOOL_HANDLERS: dict[MathTool, ToolHandler] = {
    MathTool.SOLVE_LINEAR_EQUATION: algebra.solve_linear_equation,
    MathTool.SOLVE_QUADRATIC_EQUATION: algebra.solve_quadratic_equation,
    MathTool.FACTOR_EXPRESSION: algebra.factor_expression,
    MathTool.EXPAND_EXPRESSION: algebra.expand_expression,
    MathTool.SIMPLIFY_EXPRESSION: algebra.simplify_expression,
    MathTool.SOLVE_SYSTEM_OF_EQUATIONS: algebra.solve_system_of_equations,
    MathTool.CALCULATE_AREA: geometry.calculate_area,
    MathTool.CALCULATE_VOLUME: geometry.calculate_volume,
    MathTool.CALCULATE_PERIMETER: geometry.calculate_perimeter,
    MathTool.CALCULATE_SURFACE_AREA: geometry.calculate_surface_area,
    MathTool.SOLVE_PYTHAGOREAN_THEOREM: geometry.solve_pythagorean_theorem,
    MathTool.CALCULATE_DERIVATIVE: calculus.calculate_derivative,
    MathTool.CALCULATE_INTEGRAL: calculus.calculate_integral,
    MathTool.CALCULATE_LIMIT: calculus.calculate_limit,
    MathTool.EVALUATE_EXPRESSION: arithmetic.evaluate_expression,
    MathTool.CALCULATE_PERCENTAGE: arithmetic.calculate_percentage,
    MathTool.VALIDATE_ANSWER: validation.validate_answer,
    MathTool.CHECK_STEP: validation.check_step,
}


def _is_strict_json(result: ToolResult) -> bool:
    # browsers reject the Infinity and NaN literals json.dumps emits by default
    try:
        json.dumps(result, allow_nan=False)
    except ValueError:
        return False
    return True


class ToolDispatch:
    """Executes math tools by name.

    ``execute`` never raises: unknown names, bad arguments, handler failures
    and timeouts all resolve to an ``{"error": message}`` result.
    """

    def __init__(
        self,
        handlers: dict[MathTool, ToolHandler] | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self._handlers = handlers if handlers is not None else TOOL_HANDLERS
        self._timeout = timeout

    def resolve(self, name: str) -> ToolHandler:
        """Look up a handler.

        Raises:
            UnknownToolError: If ``name`` is not a registered math tool
        """
        try:
            return self._handlers[MathTool(name)]
        except (ValueError, KeyError) as exc:
            raise UnknownToolError(name) from exc

    async def execute(self, name: str, args: dict[str, Any]) -> ToolResult:
        start = monotonic()
        known = True
        try:
            handler = self.resolve(name)
            async with asyncio.timeout(self._timeout):
                result = await asyncio.to_thread(handler, **args)
        except UnknownToolError as exc:
            known = False
            result = {"error": str(exc)}
        except MathToolError as exc:
            result = {"error": str(exc)}
        except TimeoutError:
            result = {"error": f"{name} did not finish within {self._timeout:g} seconds"}
        except Exception as exc:
            logger.exception("math_tool_crashed", tool=name)
            result = {"error": f"{name} failed: {exc}"}
        if not _is_strict_json(result):
            result = {"error": f"{name} returned a number too large to represent"}

        failed = "error" in result
        record_tool_call(
            ToolMetricsLabels(tool_name=name if known else "unknown"),
            monotonic() - start,
            error=failed,
        )
        if failed:
            logger.info("math_tool_error", tool=name, error=result["error"])
        return result
