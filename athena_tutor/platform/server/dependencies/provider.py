"""Model provider and tool dispatch dependencies for FastAPI routes."""

from fastapi import Request

from athena_tutor.platform.llm.provider import ModelProvider


def get_provider(request: Request) -> ModelProvider:
    """Get the model provider created in the application lifespan."""
    return request.app.state.provider


def get_dispatch(request: Request):
    """Get the math tool dispatcher stored on the application state."""
    return request.app.state.dispatch
