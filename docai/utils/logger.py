"""Centralized logging setup for the document AI service.

Provides a structured logging configuration with consistent formatting
across all modules, and keeps chatty client-library loggers quiet.
"""

import logging
import sys

# Google client libraries log every token refresh and gRPC channel event.
_NOISY_LOGGERS: tuple[str, ...] = ("google.auth", "google.api_core", "grpc", "urllib3")


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with a standard format.

    Third-party client loggers are capped at WARNING unless ``level``
    is DEBUG.

    Args:
        level: Logging level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()

    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
    root.setLevel(numeric_level)

    library_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger instance.

    Args:
        name: Logger name, typically ``__name__`` of the calling module.

    Returns:
        Configured logger instance.
    """
    return logging.getLogger(name)
