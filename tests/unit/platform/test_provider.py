"""Unit tests for the LiteLLM model provider and chunk normalisation."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from athena_tutor.exceptions import ProviderConfigurationError
from athena_tutor.platform.llm.messages import StreamChunk, ToolCall
from athena_tutor.platform.llm.provider import LiteLLMProvider, chunk_from_provider
from athena_tutor.platform.settings import ChatSettings, LitellmSettings


def stream_chunk(content=None, tool_calls=None, finish_reason=None):
    """An OpenAI-shaped streaming chunk."""
    delta = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(delta=delta, finish_reason=finish_reason)])


def tool_fragment(index=0, id=None, name=None, arguments=None):
    return SimpleNamespace(
        index=index,
        id=id,
        function=SimpleNamespace(name=name, arguments=arguments),
    )


async def replay(*chunks):
    for chunk in chunks:
        yield chunk


@pytest.fixture
def provider() -> LiteLLMProvider:
    return LiteLLMProvider(LitellmSettings(api_key="sk-test"), ChatSettings())


class TestChunkFromProvider:
    """Tests for chunk_from_provider."""

    def test_text_delta(self):
        """Text content is carried with no tool fields."""
        chunk = chunk_from_provider(stream_chunk(content="Hello"))

        assert chunk == StreamChunk(content="Hello")
        assert chunk.has_tool_call is False

    def test_tool_fragment(self):
        """The first tool-call entry is flattened onto the chunk."""
        chunk = chunk_from_provider(
            stream_chunk(tool_calls=[tool_fragment(id="call_1", name="check_step", arguments='{"a"')])
        )

        assert chunk.tool_call_index == 0
        assert chunk.tool_call_id == "call_1"
        assert chunk.function_name == "check_step"
        assert chunk.arguments == '{"a"'
        assert chunk.has_tool_call is True

    def test_only_first_tool_entry(self):
        """Further entries in the same delta are not carried."""
        chunk = chunk_from_provider(
            stream_chunk(
                tool_calls=[
                    tool_fragment(index=0, arguments="{"),
                    tool_fragment(index=1, arguments="[ignored]"),
                ]
            )
        )

        assert chunk.arguments == "{"

    def test_finish_reason(self):
        """The finish reason is preserved."""
        chunk = chunk_from_provider(stream_chunk(finish_reason="tool_calls"))

        assert chunk.finish_reason == "tool_calls"
        assert chunk.content is None

    def test_empty_content_is_none(self):
        """An empty string delta is normalised to None."""
        assert chunk_from_provider(stream_chunk(content="")).content is None

    def test_usage_only_chunk(self):
        """A chunk without choices becomes an empty chunk."""
        assert chunk_from_provider(SimpleNamespace(choices=[])) == StreamChunk()


class TestToolCall:
    """Tests for the assembled ToolCall."""

    def test_as_message_entry(self):
        """Renders as an OpenAI tool_calls entry with the raw argument string."""
        call = ToolCall(id="call_1", name="calculate_area", arguments='{"shape": "circle"}')

        assert call.as_message_entry() == {
            "id": "call_1",
            "type": "function",
            "function": {"name": "calculate_area", "arguments": '{"shape": "circle"}'},
        }


class TestLiteLLMProvider:
    """Tests for LiteLLMProvider."""

    async def test_stream_chat_normalises_chunks(self, provider):
        """Streamed chunks are normalised and request parameters forwarded."""
        acompletion = AsyncMock(
            return_value=replay(stream_chunk(content="Hi"), stream_chunk(finish_reason="stop"))
        )
        tools = [{"type": "function", "function": {"name": "check_step"}}]

        with patch("athena_tutor.platform.llm.provider.litellm.acompletion", acompletion):
            chunks = [
                chunk
                async for chunk in provider.stream_chat(
                    "gpt-4o-mini", [{"role": "user", "content": "hi"}], tools, temperature=0.8
                )
            ]

        assert chunks == [StreamChunk(content="Hi"), StreamChunk(finish_reason="stop")]
        kwargs = acompletion.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["stream"] is True
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["tools"] == tools
        assert kwargs["temperature"] == 0.8
        assert "api_base" not in kwargs

    async def test_stream_chat_without_key(self):
        """Streaming without a key fails before contacting the provider."""
        provider = LiteLLMProvider(LitellmSettings(), ChatSettings())
        acompletion = AsyncMock()

        with patch("athena_tutor.platform.llm.provider.litellm.acompletion", acompletion):
            with pytest.raises(ProviderConfigurationError, match="OPENAI_API_KEY"):
                async for _ in provider.stream_chat("gpt-4o-mini", []):
                    pass

        acompletion.assert_not_called()

    async def test_complete_returns_text(self):
        """Non-streaming completion returns the assistant text and forwards limits."""
        provider = LiteLLMProvider(
            LitellmSettings(api_key="sk-test", api_base="http://litellm:4000"), ChatSettings()
        )
        response = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content="Solve 2x = 4"))]
        )
        acompletion = AsyncMock(return_value=response)

        with patch("athena_tutor.platform.llm.provider.litellm.acompletion", acompletion):
            text = await provider.complete("gpt-4o", [], max_tokens=500)

        assert text == "Solve 2x = 4"
        kwargs = acompletion.call_args.kwargs
        assert kwargs["max_tokens"] == 500
        assert kwargs["api_base"] == "http://litellm:4000"
        assert "stream" not in kwargs

    async def test_transcribe(self, provider):
        """Audio is sent as a named file to the transcription model."""
        atranscription = AsyncMock(return_value=SimpleNamespace(text="two plus two"))

        with patch("athena_tutor.platform.llm.provider.litellm.atranscription", atranscription):
            text = await provider.transcribe(b"audio", filename="audio.webm")

        assert text == "two plus two"
        kwargs = atranscription.call_args.kwargs
        assert kwargs["model"] == "whisper-1"
        assert kwargs["file"] == ("audio.webm", b"audio")

    async def test_speech(self, provider):
        """Speech returns the raw audio bytes."""
        aspeech = AsyncMock(return_value=SimpleNamespace(content=b"mp3"))

        with patch("athena_tutor.platform.llm.provider.litellm.aspeech", aspeech):
            audio = await provider.speech("Well done", "nova")

        assert audio == b"mp3"
        kwargs = aspeech.call_args.kwargs
        assert kwargs["model"] == "tts-1"
        assert kwargs["voice"] == "nova"
        assert kwargs["input"] == "Well done"
