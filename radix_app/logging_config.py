"""Logging configuration for the radix converter API."""

from common.logging_config import configure_structlog, get_logger

# Configure structlog for the converter API
configure_structlog("radix-api")

__all__ = ["get_logger"]
