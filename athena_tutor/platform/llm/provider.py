"""Model provider implementation using LiteLLM."""

from collections.abc import AsyncGenerator
from typing import Any, Protocol

import litellm

from athena_tutor.exceptions import ProviderConfigurationError
from athena_tutor.platform.llm.messages import ChatMessage, StreamChunk
from athena_tutor.platform.settings import ChatSettings, LitellmSettings


class ModelProvider(Protocol):
    """Protocol for the chat, vision and audio model backend."""

    def stream_chat(
        self,
        model: str,
        messages: list[ChatMessage],
        tools: list[dict[str, Any]] | None = None,
        **params: Any,
    ) -> AsyncGenerator[StreamChunk, None]:
        """Open a streaming chat completion.

        Closing the generator abandons the upstream stream.

        Yields:
            Normalised chunks in provider order
        """
        ...

    async def complete(
        self,
        model: str,
        messages: list[ChatMessage],
        max_tokens: int | None = None,
    ) -> str:
        """Run a non-streaming completion and return the assistant text."""
        ...

    async def transcribe(self, audio: bytes, filename: str) -> str:
        """Transcribe an audio clip to text."""
        ...

    async def speech(self, text: str, voice: str) -> bytes:
        """Synthesize speech, returning MP3 bytes."""
        ...


def chunk_from_provider(chunk: Any) -> StreamChunk:
    """Normalise a LiteLLM streaming chunk.

    Args:
        chunk: A ``ModelResponseStream`` (or OpenAI-shaped equivalent)

    Returns:
        StreamChunk with the text delta, the first tool-call fragment and the
        finish reason. Chunks without choices (usage-only) become empty chunks.
    """
    choices = getattr(chunk, "choices", None) or []
    if not choices:
        return StreamChunk()

    choice = choices[0]
    delta = getattr(choice, "delta", None)
    content = getattr(delta, "content", None) if delta is not None else None
    tool_calls = getattr(delta, "tool_calls", None) if delta is not None else None

    if not tool_calls:
        return StreamChunk(content=content or None, finish_reason=choice.finish_reason)

    fragment = tool_calls[0]
    function = getattr(fragment, "function", None)
    return StreamChunk(
        content=content or None,
        tool_call_index=getattr(fragment, "index", None),
        tool_call_id=getattr(fragment, "id", None),
        function_name=getattr(function, "name", None),
        arguments=getattr(function, "arguments", None),
        finish_reason=choice.finish_reason,
    )


class LiteLLMProvider:
    """ModelProvider backed by LiteLLM.

    Credentials are checked lazily so the service can boot without a key;
    every call fails with ProviderConfigurationError until one is configured.
    """

    def __init__(self, settings: LitellmSettings, chat: ChatSettings):
        self._api_key = settings.api_key
        self._api_base = settings.api_base
        self._transcription_model = chat.transcription_model
        self._speech_model = chat.speech_model

    def _credentials(self) -> dict[str, Any]:
        if not self._api_key:
            raise ProviderConfigurationError(
                "OPENAI_API_KEY is not configured (set LITELLM__API_KEY)"
            )
        credentials: dict[str, Any] = {"api_key": self._api_key}
        if self._api_base:
            credentials["api_base"] = self._api_base
        return credentials

    async def stream_chat(
        self,
        model: str,
        messages: list[ChatMessage],
        tools: list[dict[str, Any]] | None = None,
        **params: Any,
    ) -> AsyncGenerator[StreamChunk, None]:
        credentials = self._credentials()
        if tools:
            params["tools"] = tools
        response = await litellm.acompletion(
            model=model,
            messages=messages,
            stream=True,
            **credentials,
            **params,
        )
        async for chunk in response:
            yield chunk_from_provider(chunk)

    async def complete(
        self,
        model: str,
        messages: list[ChatMessage],
        max_tokens: int | None = None,
    ) -> str:
        credentials = self._credentials()
        if max_tokens is not None:
            credentials["max_tokens"] = max_tokens
        response = await litellm.acompletion(model=model, messages=messages, **credentials)
        return response.choices[0].message.content or ""

    async def transcribe(self, audio: bytes, filename: str) -> str:
        response = await litellm.atranscription(
            model=self._transcription_model,
            file=(filename, audio),
            **self._credentials(),
        )
        return response.text

    async def speech(self, text: str, voice: str) -> bytes:
        response = await litellm.aspeech(
            model=self._speech_model,
            input=text,
            voice=voice,
            **self._credentials(),
        )
        return response.content
