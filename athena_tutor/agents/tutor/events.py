"""Events relayed to the chat client as Server-Sent Events."""

import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RelayEvent:
    """One SSE message of the chat stream.

    Attributes:
        event_type: "content", "tool_call", "error" or "done"
        data: The JSON object sent on the wire
    """

    event_type: str
    data: dict[str, Any]

    @classmethod
    def content(cls, delta: str) -> "RelayEvent":
        return cls("content", {"content": delta})

    @classmethod
    def tool_call(cls, name: str, args: dict[str, Any], result: dict[str, Any]) -> "RelayEvent":
        return cls("tool_call", {"tool_call": {"name": name, "args": args, "result": result}})

    @classmethod
    def error(cls, message: str) -> "RelayEvent":
        return cls("error", {"error": message})

    @classmethod
    def done(cls) -> "RelayEvent":
        return cls("done", {"done": True})

    def encode(self) -> str:
        return f"data: {json.dumps(self.data, allow_nan=False)}\n\n"
