"""Configuration package — settings, logging, and exceptions."""

from config.exceptions import (
    NovelWriterError,
    ValidationError,
    InvalidConfigError,
    StorageError,
    DocumentNotFoundError,
    GenerationError,
    GenerationParseError,
    SessionError,
    NoActiveDocumentError,
)
from config.logging_config import setup_logging
from config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "NovelWriterError",
    "ValidationError",
    "InvalidConfigError",
    "StorageError",
    "DocumentNotFoundError",
    "GenerationError",
    "GenerationParseError",
    "SessionError",
    "NoActiveDocumentError",
]
