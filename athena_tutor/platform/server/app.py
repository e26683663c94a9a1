"""FastAPI application factory and server configuration.

This module creates and configures the FastAPI application with all middleware,
routes, and lifecycle management.
"""

import asyncio
import logging
import os
import signal
from contextlib import asynccontextmanager

from fastapi import FastAPI

from athena_tutor.agents.tutor.routes import tutor_router
from athena_tutor.agents.tutor.tools import ToolDispatch
from athena_tutor.platform.llm.provider import LiteLLMProvider
from athena_tutor.platform.observability import errors as bugsnag
from athena_tutor.platform.observability.logging import configure_logging
from athena_tutor.platform.observability.metrics import prometheus_middleware
from athena_tutor.platform.server.health import HealthCheck
from athena_tutor.platform.server.middlewares import CorrelationIdMiddleware
from athena_tutor.platform.server.routes import root as root_router
from athena_tutor.platform.settings import Settings

logger = logging.getLogger(__name__)

# Seconds to keep serving in-flight chat streams after a shutdown signal
DRAIN_SECONDS = 20


def lifespan_closure(settings: Settings):
    @asynccontextmanager
    async def lifespan(app):
        """
        Initialize the singletons shared by every request: error reporting,
        logging, the model provider and the math tool dispatcher.
        """
        if settings.bugsnag.release_stage in ["production", "development"]:
            signal_handler = SignalHandler(app)
            signal_handler.register_signal_handler()
        await bugsnag.initialize_bugsnag(settings.bugsnag)

        # Configure structured logging (JSON in prod/dev, console in local)
        if settings.app_http.log_json is not None:
            json_output = settings.app_http.log_json
        else:
            json_output = settings.bugsnag.release_stage != "local"
        configure_logging(settings.app_http.log_level, json_output=json_output)

        app.state.settings = settings
        app.state.provider = LiteLLMProvider(settings.litellm, settings.chat)
        app.state.dispatch = ToolDispatch(timeout=settings.chat.tool_timeout_seconds)

        if not settings.litellm.api_key:
            logger.warning("No model provider API key configured; chat requests will fail")

        HealthCheck.enable()
        yield
        HealthCheck.disable()

    return lifespan


def create_app(settings: Settings):
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings instance

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(lifespan=lifespan_closure(settings))
    app.add_middleware(CorrelationIdMiddleware)
    app.middleware("http")(prometheus_middleware)

    # Platform routes (health, info, metrics)
    app.include_router(root_router)

    # Tutor routes (chat relay and helper endpoints)
    app.include_router(tutor_router)

    return app


class SignalHandler:
    def __init__(self, app: FastAPI):
        self.app = app

    async def handle_exit(self):
        """
        Fail health checks, then give in-flight chat streams time to finish
        before stopping. FastAPI shutdown hooks run only after the server has
        stopped accepting requests, which leaves no room to drain.
        """
        HealthCheck.disable()
        for remaining in range(DRAIN_SECONDS, 0, -1):
            logger.info("Shutting down in %ds...", remaining)
            await asyncio.sleep(1)

        os.kill(os.getpid(), signal.SIGUSR1)

    def signal_handler(self):
        asyncio.create_task(self.handle_exit())

    def register_signal_handler(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in [signal.SIGINT, signal.SIGTERM]:
            loop.add_signal_handler(sig, self.signal_handler)
