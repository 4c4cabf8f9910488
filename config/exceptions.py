"""Custom exception hierarchy for the novel editor core."""

from typing import Optional


class NovelWriterError(Exception):
    """Base exception for all novel editor errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# ---- Validation Errors ----

class ValidationError(NovelWriterError):
    """An external document is malformed or incomplete."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, details)
        self.field = field


class InvalidConfigError(ValidationError):
    """Configuration value is invalid."""


# ---- Storage Errors ----

class StorageError(NovelWriterError):
    """Durable key-value storage could not be read or written."""


class DocumentNotFoundError(StorageError):
    """No stored document exists for the requested id."""

    def __init__(self, novel_id: str):
        super().__init__(f"No saved project with id '{novel_id}'", {"novel_id": novel_id})
        self.novel_id = novel_id


# ---- Generation Errors ----

class GenerationError(NovelWriterError):
    """The generative-text service failed or timed out."""


class GenerationParseError(GenerationError):
    """Failed to parse a structured response from the generative service."""

    def __init__(self, message: str = "Failed to parse model response", raw_response: str = ""):
        details = {"raw_response": raw_response[:200]} if raw_response else {}
        super().__init__(message, details)
        self.raw_response = raw_response


# ---- Session Errors ----

class SessionError(NovelWriterError):
    """Invalid use of an editing session."""


class NoActiveDocumentError(SessionError):
    """The operation needs an open document but none is loaded."""

    def __init__(self, operation: str):
        super().__init__(f"No open project for '{operation}'", {"operation": operation})
        self.operation = operation
