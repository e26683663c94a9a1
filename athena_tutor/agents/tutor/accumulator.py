"""Per-round accumulation of streamed text and tool-call fragments.

Providers deliver a tool call as a series of fragments: the id and function
name usually arrive first, then the JSON arguments a few characters at a
time. :class:`ToolCallAccumulator` collects one round of them and
:func:`recover_arguments` turns the concatenated argument text into an object,
tolerating trailing noise after the JSON.
"""

import json
import uuid
from enum import StrEnum
from typing import Any

from athena_tutor.exceptions import ArgumentRecoveryError
from athena_tutor.platform.llm.messages import StreamChunk, ToolCall

TOOL_CALLS_FINISH_REASON = "tool_calls"


def _first_balanced_end(text: str) -> int | None:
    """Index where brace depth first returns to zero after going positive."""
    depth = 0
    opened = False
    for index, char in enumerate(text):
        if char == "{":
            depth += 1
            opened = True
        elif char == "}":
            depth -= 1
            if opened and depth == 0:
                return index
    return None


def recover_arguments(raw: str) -> dict[str, Any]:
    """Parse accumulated tool-call arguments into a JSON object.

    The text is trimmed, cut to the span between the first ``{`` and the last
    ``}``, then cut again at the end of the first balanced object so that
    anything a provider appends after it is dropped.

    Args:
        raw: Argument fragments concatenated in arrival order

    Returns:
        The parsed arguments

    Raises:
        ArgumentRecoveryError: If what remains is not a JSON object
    """
    text = raw.strip()

    first, last = text.find("{"), text.rfind("}")
    if first != -1 and last > first:
        text = text[first : last + 1]

    end = _first_balanced_end(text)
    if end is not None:
        text = text[: end + 1]

    try:
        value = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ArgumentRecoveryError(f"Invalid tool arguments: {exc}", raw=raw) from exc
    if not isinstance(value, dict):
        raise ArgumentRecoveryError("Tool arguments must be a JSON object", raw=raw)
    return value


class AccumulatorState(StrEnum):
    COLLECTING = "collecting"
    RECOVERING = "recovering"
    PARSED = "parsed"
    FAILED = "failed"


class ToolCallAccumulator:
    """Buffers for a single streaming round.

    Only the first tool-call slot seen is tracked; fragments for any other
    slot are ignored so at most one tool call runs per round. The id is
    kept from its first appearance, the function name and finish reason
    take their latest value, and argument fragments are concatenated.
    """

    def __init__(self):
        self.state = AccumulatorState.COLLECTING
        self.finish_reason: str | None = None
        self.tool_call_id: str | None = None
        self.function_name: str | None = None
        self.arguments: dict[str, Any] | None = None
        self.error: ArgumentRecoveryError | None = None
        self._content: list[str] = []
        self._argument_fragments: list[str] = []
        self._slot: int | None = None

    @property
    def content(self) -> str:
        return "".join(self._content)

    @property
    def raw_arguments(self) -> str:
        return "".join(self._argument_fragments)

    @property
    def has_tool_call(self) -> bool:
        """Whether the round ended asking for a tool with a name and arguments."""
        return (
            self.finish_reason == TOOL_CALLS_FINISH_REASON
            and bool(self.function_name)
            and bool(self.raw_arguments)
        )

    def _tracks(self, index: int | None) -> bool:
        if self._slot is None:
            self._slot = index if index is not None else 0
        return index is None or index == self._slot

    def feed(self, chunk: StreamChunk) -> str | None:
        """Record a chunk.

        Returns:
            The text delta to relay to the client, if the chunk carried one
        """
        if self.state is not AccumulatorState.COLLECTING:
            raise RuntimeError(f"Cannot feed chunks to an accumulator in state {self.state}")

        if chunk.content:
            self._content.append(chunk.content)

        if chunk.has_tool_call and self._tracks(chunk.tool_call_index):
            if chunk.tool_call_id and self.tool_call_id is None:
                self.tool_call_id = chunk.tool_call_id
            if chunk.function_name:
                self.function_name = chunk.function_name
            if chunk.arguments:
                self._argument_fragments.append(chunk.arguments)

        if chunk.finish_reason:
            self.finish_reason = chunk.finish_reason

        return chunk.content or None

    def finish(self) -> ToolCall | None:
        """Close the round and recover the tool call, if one was requested.

        Returns:
            The tool call with its raw argument string, or None when the
            round ended without one. Parsed arguments are on ``arguments``.

        Raises:
            ArgumentRecoveryError: If the arguments could not be recovered
        """
        if not self.has_tool_call:
            return None

        self.state = AccumulatorState.RECOVERING
        try:
            self.arguments = recover_arguments(self.raw_arguments)
        except ArgumentRecoveryError as exc:
            self.state = AccumulatorState.FAILED
            self.error = exc
            raise
        self.state = AccumulatorState.PARSED

        return ToolCall(
            id=self.tool_call_id or f"call_{uuid.uuid4().hex}",
            name=self.function_name or "",
            arguments=self.raw_arguments,
        )
