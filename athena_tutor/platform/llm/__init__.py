"""Model provider integration.

- ModelProvider protocol and the LiteLLM-backed implementation
- Normalised streaming chunk and tool call types
"""

from athena_tutor.platform.llm.messages import ChatMessage, StreamChunk, ToolCall
from athena_tutor.platform.llm.provider import (
    LiteLLMProvider,
    ModelProvider,
    chunk_from_provider,
)

__all__ = [
    "ChatMessage",
    "LiteLLMProvider",
    "ModelProvider",
    "StreamChunk",
    "ToolCall",
    "chunk_from_provider",
]
