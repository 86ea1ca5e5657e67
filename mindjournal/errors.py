"""
Application error taxonomy.

Each error carries the HTTP status it maps to; main.py turns them into the
unified ``{"error": ..., "details": ...}`` body.
"""
from typing import Any, Optional


class JournalAppError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(JournalAppError):
    """Client input failed validation (e.g. empty entry content)."""

    status_code = 400
    default_message = "Validation failed"


class AuthenticationError(JournalAppError):
    status_code = 401
    default_message = "You are not logged in! Please log in to get access."


class NotFoundError(JournalAppError):
    """Missing resource, or one owned by somebody else. Callers can't tell which."""

    status_code = 404
    default_message = "Journal entry not found"


class ConflictError(JournalAppError):
    status_code = 409
    default_message = "Resource already exists"


class PersistenceError(JournalAppError):
    """The database was unreachable or rejected the write."""

    status_code = 500
    default_message = "Failed to save journal entry"


class UpstreamAIError(JournalAppError):
    """Raised inside the AI adapters only; always converted to a fallback value."""

    status_code = 502
    default_message = "AI provider request failed"
