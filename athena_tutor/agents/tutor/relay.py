"""Streaming chat relay with math tool calls.

A relay drives at most two streaming rounds against the model provider:

1. Stream the reply, relaying every text delta as it arrives and collecting
   tool-call fragments on the side.
2. If the round ended with a tool call, recover its arguments, run the tool,
   relay ``{tool_call: {name, args, result}}`` and feed the call and its
   result back into the conversation for a second round. The second round
   may run one more tool but never starts a third.

Whatever happens, the stream ends with exactly one ``{done: true}``. Errors
after streaming has begun are reported in-band as ``{error: message}``.
"""

import json
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import aclosing
from typing import Any

from athena_tutor.agents.tutor.accumulator import ToolCallAccumulator
from athena_tutor.agents.tutor.events import RelayEvent
from athena_tutor.agents.tutor.tools import MATH_TOOL_SCHEMAS, ToolDispatch, ToolResult
from athena_tutor.exceptions import ArgumentRecoveryError
from athena_tutor.platform.llm.messages import ChatMessage, ToolCall
from athena_tutor.platform.llm.provider import ModelProvider
from athena_tutor.platform.observability.logging import get_logger
from athena_tutor.platform.observability.metrics import record_relay_round

logger = get_logger(__name__)

MAX_ROUNDS = 2

DisconnectCheck = Callable[[], Awaitable[bool]]


class ClientDisconnected(Exception):
    """Raised inside the relay when the client has gone away mid-stream."""


def assistant_tool_call_message(content: str, tool_call: ToolCall) -> ChatMessage:
    return {
        "role": "assistant",
        "content": content or None,
        "tool_calls": [tool_call.as_message_entry()],
    }


def tool_result_message(tool_call: ToolCall, result: ToolResult) -> ChatMessage:
    return {
        "role": "tool",
        "tool_call_id": tool_call.id,
        "content": json.dumps(result, allow_nan=False),
    }


class StreamRelay:
    """Relays one chat request from the model provider to the client.

    Args:
        provider: Streaming model backend
        dispatch: Math tool dispatcher
        model: Model identifier for every round of this request
        sampling: Fixed sampling parameters (temperature and penalties)
        tools: Tool catalog offered to the model each round, the math
            catalog when omitted
    """

    def __init__(
        self,
        provider: ModelProvider,
        dispatch: ToolDispatch,
        model: str,
        sampling: dict[str, Any],
        tools: list[dict[str, Any]] | None = None,
    ):
        self._provider = provider
        self._dispatch = dispatch
        self._model = model
        self._sampling = sampling
        self._tools = tools if tools is not None else MATH_TOOL_SCHEMAS

    async def run(
        self,
        conversation: list[ChatMessage],
        is_disconnected: DisconnectCheck | None = None,
    ) -> AsyncIterator[RelayEvent]:
        """Relay the conversation, yielding client events.

        Args:
            conversation: System prompt followed by the client's messages
            is_disconnected: Polled after every chunk; when it returns True the
                provider stream is closed and nothing further is emitted
        """
        try:
            messages = list(conversation)
            for round_number in range(1, MAX_ROUNDS + 1):
                if is_disconnected is not None and await is_disconnected():
                    raise ClientDisconnected

                accumulator = ToolCallAccumulator()
                async for event in self._stream_round(
                    messages, round_number, accumulator, is_disconnected
                ):
                    yield event

                try:
                    tool_call = accumulator.finish()
                except ArgumentRecoveryError as exc:
                    logger.warning(
                        "relay_tool_arguments_invalid",
                        round=round_number,
                        tool=accumulator.function_name,
                        error=str(exc),
                    )
                    yield RelayEvent.error(f"Function call error: {exc}")
                    break

                if tool_call is None:
                    break

                args = accumulator.arguments or {}
                result = await self._dispatch.execute(tool_call.name, args)
                logger.info(
                    "relay_tool_executed",
                    round=round_number,
                    tool=tool_call.name,
                    failed="error" in result,
                )
                yield RelayEvent.tool_call(tool_call.name, args, result)

                messages = [
                    *messages,
                    assistant_tool_call_message(accumulator.content, tool_call),
                    tool_result_message(tool_call, result),
                ]
        except ClientDisconnected:
            logger.info("relay_client_disconnected")
            return
        except Exception as exc:
            logger.exception("relay_failed", error=str(exc))
            yield RelayEvent.error(str(exc) or type(exc).__name__)

        yield RelayEvent.done()

    async def _stream_round(
        self,
        messages: list[ChatMessage],
        round_number: int,
        accumulator: ToolCallAccumulator,
        is_disconnected: DisconnectCheck | None,
    ) -> AsyncIterator[RelayEvent]:
        record_relay_round(round_number)
        logger.info(
            "relay_round_started",
            round=round_number,
            model=self._model,
            messages=len(messages),
        )

        chunks = 0
        stream = self._provider.stream_chat(self._model, messages, self._tools, **self._sampling)
        async with aclosing(stream):
            async for chunk in stream:
                chunks += 1
                delta = accumulator.feed(chunk)
                if delta:
                    yield RelayEvent.content(delta)
                if is_disconnected is not None and await is_disconnected():
                    raise ClientDisconnected

        logger.info(
            "relay_round_finished",
            round=round_number,
            chunks=chunks,
            finish_reason=accumulator.finish_reason,
            tool=accumulator.function_name,
        )
