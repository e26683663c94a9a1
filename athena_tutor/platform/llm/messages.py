"""Provider-agnostic streaming and conversation types.

The relay never touches provider SDK objects directly: every streamed chunk is
normalised into a :class:`StreamChunk` first, and conversation messages are
plain OpenAI-format dicts.
"""

from dataclasses import dataclass
from typing import Any

# OpenAI chat format: {"role": ..., "content": ..., optional tool fields}
ChatMessage = dict[str, Any]


@dataclass(frozen=True)
class StreamChunk:
    """One normalised chunk of a streaming chat completion.

    Only the first tool-call entry of a provider delta is carried; a round
    executes at most one tool call.

    Attributes:
        content: Assistant text delta, if any
        tool_call_index: Slot index of the tool-call fragment
        tool_call_id: Tool call identifier (usually only on the first fragment)
        function_name: Function name (usually only on the first fragment)
        arguments: Raw JSON argument fragment
        finish_reason: "stop", "tool_calls", "length", ... on the final chunk
    """

    content: str | None = None
    tool_call_index: int | None = None
    tool_call_id: str | None = None
    function_name: str | None = None
    arguments: str | None = None
    finish_reason: str | None = None

    @property
    def has_tool_call(self) -> bool:
        return (
            self.tool_call_index is not None
            or self.tool_call_id is not None
            or self.function_name is not None
            or self.arguments is not None
        )


@dataclass(frozen=True)
class ToolCall:
    """A tool call assembled from one round of streamed fragments.

    Attributes:
        id: Tool call identifier echoed back in the tool message
        name: Math tool name
        arguments: Raw concatenated argument string, as streamed
    """

    id: str
    name: str
    arguments: str

    def as_message_entry(self) -> dict[str, Any]:
        """Render as an entry of an assistant message's ``tool_calls`` list."""
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }
