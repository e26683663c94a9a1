"""Service infrastructure module.

This module provides the plumbing the tutor endpoints run on:
- Settings loaded from the environment
- Model provider integration (LiteLLM)
- FastAPI server configuration
- Logging, metrics and error reporting
"""

from athena_tutor.platform.llm import LiteLLMProvider, ModelProvider, StreamChunk, ToolCall
from athena_tutor.platform.settings import Settings

__all__ = [
    "LiteLLMProvider",
    "ModelProvider",
    "Settings",
    "StreamChunk",
    "ToolCall",
]
