"""athena-tutor - Socratic math tutoring backend with streaming tool-calling chat."""

from .platform.server.app import create_app
from .platform.settings import Settings


def app():
    """Create the FastAPI application instance."""
    settings = Settings()
    return create_app(settings)
