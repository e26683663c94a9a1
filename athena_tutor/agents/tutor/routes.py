"""Tutor HTTP endpoints.

``/chat`` relays a streaming model reply as Server-Sent Events. The other
endpoints are single request/response helpers the client uses around a
conversation: reading a problem off a photo, classifying a problem for
progress tracking, and speech in and out.
"""

import base64
import binascii
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from athena_tutor.agents.tutor.classification import parse_topic_reply
from athena_tutor.agents.tutor.prompt import (
    PROBLEM_EXTRACTION_INSTRUCTION,
    PROBLEM_EXTRACTION_PROMPT,
    TOPIC_CLASSIFICATION_PROMPT,
    build_system_prompt,
)
from athena_tutor.agents.tutor.relay import StreamRelay
from athena_tutor.agents.tutor.tools import ToolDispatch
from athena_tutor.platform.llm.messages import ChatMessage
from athena_tutor.platform.llm.provider import ModelProvider
from athena_tutor.platform.observability.logging import get_logger
from athena_tutor.platform.server.dependencies.provider import get_dispatch, get_provider
from athena_tutor.platform.server.dependencies.settings import get_settings
from athena_tutor.platform.settings import ChatSettings, Settings

logger = get_logger(__name__)

tutor_router = APIRouter(tags=["tutor"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

SSE_HEADERS = {
    **CORS_HEADERS,
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable proxy buffering
}

SPEECH_VOICES = ("alloy", "echo", "fable", "onyx", "nova", "shimmer")

TUTOR_PATHS = ("/chat", "/extract-problem", "/extract-topic", "/transcribe", "/speech")


# =============================================================================
# Payloads
# =============================================================================


class IncomingMessage(BaseModel):
    """A prior turn as sent by the client; content may be vision content parts."""

    role: str
    content: str | list[dict[str, Any]] | None = None


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    messages: list[IncomingMessage] = Field(min_length=1)
    problem: str | None = None
    problem_context: str | None = Field(None, alias="problemContext")


class ExtractProblemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(min_length=1, alias="imageUrl")


class ExtractTopicRequest(BaseModel):
    problem: str = Field(min_length=1)


class TranscribeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    audio_data: str = Field(min_length=1, alias="audioData")
    audio_format: str = Field("webm", alias="audioFormat", pattern=r"^[a-z0-9]+$")


class SpeechRequest(BaseModel):
    text: str = Field(min_length=1, max_length=4096)
    voice: str = "alloy"


# =============================================================================
# Helpers
# =============================================================================


def plain_error(message: str, status_code: int = 400) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=status_code, headers=CORS_HEADERS)


def json_response(payload: dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(payload, status_code=status_code, headers=CORS_HEADERS)


async def read_json(request: Request) -> Any:
    """Request body as JSON, or None when it is missing or malformed."""
    try:
        return await request.json()
    except ValueError:
        return None


def has_image(messages: list[IncomingMessage]) -> bool:
    return any(
        isinstance(message.content, list)
        and any(part.get("type") == "image_url" for part in message.content)
        for message in messages
    )


def build_conversation(payload: ChatRequest, chat: ChatSettings) -> list[ChatMessage]:
    """System prompt followed by the most recent client messages."""
    system = build_system_prompt(payload.problem, payload.problem_context)
    recent = payload.messages[-chat.history_window :]
    return [
        {"role": "system", "content": system},
        *(message.model_dump() for message in recent),
    ]


def select_model(payload: ChatRequest, chat: ChatSettings) -> str:
    return chat.vision_model if has_image(payload.messages) else chat.chat_model


def _register_method_guards(path: str) -> None:
    async def preflight() -> Response:
        return Response(status_code=204, headers=CORS_HEADERS)

    async def method_not_allowed() -> Response:
        return plain_error("Method Not Allowed", status_code=405)

    tutor_router.add_api_route(
        path, preflight, methods=["OPTIONS"], include_in_schema=False
    )
    tutor_router.add_api_route(
        path,
        method_not_allowed,
        methods=["GET", "PUT", "PATCH", "DELETE"],
        include_in_schema=False,
    )


for _path in TUTOR_PATHS:
    _register_method_guards(_path)


# =============================================================================
# Endpoints
# =============================================================================


@tutor_router.post("/chat")
async def chat_handler(
    request: Request,
    settings: Settings = Depends(get_settings),
    provider: ModelProvider = Depends(get_provider),
    dispatch: ToolDispatch = Depends(get_dispatch),
):
    """Stream a tutor reply as Server-Sent Events.

    Each event is ``data: <json>`` with one of ``{content}``, ``{tool_call}``,
    ``{error}`` or the final ``{done: true}``. Invalid requests are rejected
    with a plain 400 before any event is sent.
    """
    try:
        payload = ChatRequest.model_validate(await read_json(request))
    except ValidationError:
        return plain_error("Invalid request: messages array required")

    chat = settings.chat
    relay = StreamRelay(
        provider,
        dispatch,
        model=select_model(payload, chat),
        sampling={
            "temperature": chat.temperature,
            "frequency_penalty": chat.frequency_penalty,
            "presence_penalty": chat.presence_penalty,
        },
    )
    conversation = build_conversation(payload, chat)

    async def stream_generator():
        async for event in relay.run(conversation, is_disconnected=request.is_disconnected):
            yield event.encode()

    return StreamingResponse(
        stream_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@tutor_router.post("/extract-problem")
async def extract_problem_handler(
    request: Request,
    settings: Settings = Depends(get_settings),
    provider: ModelProvider = Depends(get_provider),
):
    """Read the math problem off an image. Returns ``{problem}``."""
    try:
        payload = ExtractProblemRequest.model_validate(await read_json(request))
    except ValidationError:
        return plain_error("Invalid request: imageUrl required")

    messages: list[ChatMessage] = [
        {"role": "system", "content": PROBLEM_EXTRACTION_PROMPT},
        {
            "role": "user",
            "content": [
                {"type": "image_url", "image_url": {"url": payload.image_url}},
                {"type": "text", "text": PROBLEM_EXTRACTION_INSTRUCTION},
            ],
        },
    ]
    try:
        reply = await provider.complete(
            settings.chat.vision_model,
            messages,
            max_tokens=settings.chat.extraction_max_tokens,
        )
    except Exception as exc:
        logger.exception("problem_extraction_failed")
        return json_response({"error": str(exc)}, status_code=500)

    problem = reply.strip()
    if not problem:
        return plain_error("Could not extract problem from image")

    logger.info("problem_extracted", length=len(problem))
    return json_response({"problem": problem})


@tutor_router.post("/extract-topic")
async def extract_topic_handler(
    request: Request,
    settings: Settings = Depends(get_settings),
    provider: ModelProvider = Depends(get_provider),
):
    """Classify a problem. Returns ``{topic, subTopic?, difficulty}``.

    An unusable model reply yields ``{topic: "unknown", difficulty: "medium"}``.
    """
    try:
        payload = ExtractTopicRequest.model_validate(await read_json(request))
    except ValidationError:
        return json_response({"error": "Invalid request: problem required"}, status_code=400)

    messages: list[ChatMessage] = [
        {"role": "system", "content": TOPIC_CLASSIFICATION_PROMPT},
        {"role": "user", "content": payload.problem},
    ]
    try:
        reply = await provider.complete(settings.chat.classifier_model, messages)
    except Exception as exc:
        logger.exception("topic_extraction_failed")
        return json_response({"error": str(exc)}, status_code=500)

    metadata = parse_topic_reply(reply)
    logger.info("topic_extracted", topic=metadata.topic, difficulty=metadata.difficulty)
    return json_response(metadata.model_dump(by_alias=True, exclude_none=True))


@tutor_router.post("/transcribe")
async def transcribe_handler(
    request: Request,
    provider: ModelProvider = Depends(get_provider),
):
    """Transcribe base64 audio. Returns ``{text}``."""
    try:
        payload = TranscribeRequest.model_validate(await read_json(request))
        audio = base64.b64decode(payload.audio_data, validate=True)
    except (ValidationError, binascii.Error):
        return json_response(
            {"error": "Invalid request: base64 audioData required"}, status_code=400
        )

    try:
        text = await provider.transcribe(audio, filename=f"audio.{payload.audio_format}")
    except Exception as exc:
        logger.exception("transcription_failed", audio_format=payload.audio_format)
        return json_response({"error": str(exc)}, status_code=500)

    return json_response({"text": text})


@tutor_router.post("/speech")
async def speech_handler(
    request: Request,
    provider: ModelProvider = Depends(get_provider),
):
    """Synthesize speech. Returns ``{audio}`` as base64 MP3."""
    try:
        payload = SpeechRequest.model_validate(await read_json(request))
    except ValidationError:
        return json_response({"error": "Invalid request: text required"}, status_code=400)
    if payload.voice not in SPEECH_VOICES:
        return json_response(
            {"error": f"Invalid voice: {payload.voice}. Use one of {', '.join(SPEECH_VOICES)}"},
            status_code=400,
        )

    try:
        audio = await provider.speech(payload.text, payload.voice)
    except Exception as exc:
        logger.exception("speech_failed", voice=payload.voice)
        return json_response({"error": str(exc)}, status_code=500)

    return json_response({"audio": base64.b64encode(audio).decode("ascii")})
