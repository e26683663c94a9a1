"""Application settings and configuration.

This module provides Pydantic settings classes for application configuration,
loaded from environment variables with support for nested configuration.
"""

import logging

import pydantic_settings
from pydantic import BaseModel, Field, field_validator


class AppHTTPSettings(BaseModel):
    url: str = Field("")
    host: str = Field("0.0.0.0")
    port: int = Field(8000)
    log_level: str = Field("INFO")
    log_json: bool | None = Field(
        None, description="Override log format: True=JSON, False=console, None=auto"
    )

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v):
        v_upper = v.upper()
        if v_upper not in logging._nameToLevel:
            raise ValueError(f'invalid value "{v}"')
        return v_upper


class BugsnagSettings(BaseModel):
    api_key: str = Field("")
    release_stage: str = Field("local")

    @field_validator("release_stage")
    @classmethod
    def _validate_bugsnag_release_stage(cls, v):
        if v not in ["development", "production", "local"]:
            raise ValueError(f'invalid bugsnag release stage "{v}"')
        return v


class LitellmSettings(BaseModel):
    """Credentials for the model provider.

    Attributes:
        api_key: Provider API key. Left empty, the provider refuses to start a
            request and the error is reported to the caller.
        api_base: Optional base URL (e.g. a LiteLLM proxy)
    """

    api_key: str = Field("")
    api_base: str | None = None


class ChatSettings(BaseModel):
    """Model selection and sampling parameters for the tutor endpoints.

    Attributes:
        chat_model: Model used for text-only conversations
        vision_model: Model used when any message carries an image, and for
            problem extraction from images
        classifier_model: Model used for topic/difficulty classification
        transcription_model: Speech-to-text model
        speech_model: Text-to-speech model
        temperature: Sampling temperature for the chat relay
        frequency_penalty: Frequency penalty for the chat relay
        presence_penalty: Presence penalty for the chat relay
        history_window: Number of most recent client messages forwarded
        extraction_max_tokens: Output cap for image extraction
        tool_timeout_seconds: Time limit for a single math tool call
    """

    chat_model: str = Field("gpt-4o-mini")
    vision_model: str = Field("gpt-4o")
    classifier_model: str = Field("gpt-4o-mini")
    transcription_model: str = Field("whisper-1")
    speech_model: str = Field("tts-1")
    temperature: float = Field(0.8, ge=0.0, le=2.0)
    frequency_penalty: float = Field(0.5, ge=-2.0, le=2.0)
    presence_penalty: float = Field(0.3, ge=-2.0, le=2.0)
    history_window: int = Field(8, ge=1)
    extraction_max_tokens: int = Field(500, ge=1)
    tool_timeout_seconds: float = Field(10.0, gt=0)


class Settings(pydantic_settings.BaseSettings):
    model_config = pydantic_settings.SettingsConfigDict(env_nested_delimiter="__")

    app_http: AppHTTPSettings = AppHTTPSettings()
    bugsnag: BugsnagSettings = BugsnagSettings()

    # Model provider configuration
    litellm: LitellmSettings = LitellmSettings()

    # Tutor endpoint behaviour
    chat: ChatSettings = ChatSettings()
