"""Socratic math tutor: streaming chat relay, math tools and helper endpoints."""

from athena_tutor.agents.tutor.relay import StreamRelay
from athena_tutor.agents.tutor.routes import tutor_router

__all__ = [
    "StreamRelay",
    "tutor_router",
]
