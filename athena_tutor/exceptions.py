"""Exception hierarchy for the tutor service.

Errors raised while relaying a chat stream never change the HTTP status once
streaming has begun; the relay reports them in-band as ``{"error": ...}``
events. Tool errors are narrower still: the dispatcher turns them into a
tool result so the model can react to them.
"""


class TutorError(Exception):
    """Base exception for all tutor service errors."""


class ArgumentRecoveryError(TutorError):
    """Raised when streamed tool-call arguments cannot be parsed as a JSON object."""

    def __init__(self, message: str, raw: str | None = None):
        self.raw = raw
        super().__init__(message)


class UnknownToolError(TutorError):
    """Raised when the model asks for a tool that is not in the catalog."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown math tool: {name}")


class MathToolError(TutorError):
    """Raised by a math tool handler for invalid input or unsupported cases."""


class ProviderConfigurationError(TutorError):
    """Raised when the model provider is missing required configuration."""
