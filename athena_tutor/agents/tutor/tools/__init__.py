"""Math tools the tutor model can call while streaming a reply."""

from athena_tutor.agents.tutor.tools.dispatch import (
    TOOL_HANDLERS,
    MathTool,
    ToolDispatch,
    ToolResult,
)
from athena_tutor.agents.tutor.tools.schemas import MATH_TOOL_SCHEMAS

__all__ = [
    "MATH_TOOL_SCHEMAS",
    "TOOL_HANDLERS",
    "MathTool",
    "ToolDispatch",
    "ToolResult",
]
