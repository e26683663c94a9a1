"""Service-wide constants."""

SERVICE_NAME = "athena-tutor"
