"""Exception classes with structured context"""

from datetime import datetime
from typing import Any


class QaraError(Exception):
    """Base exception with context and a user-facing message"""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        user_message: str | None = None,
    ):
        """
        Initialize exception with context.

        Args:
            message: Technical error message for logs
            details: Additional context (dict for structured logging)
            user_message: User-friendly error message
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.user_message = user_message or message
        self.timestamp = datetime.now()

    def __str__(self) -> str:
        parts = [self.message]

        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({details_str})")

        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "user_message": self.user_message,
            "timestamp": self.timestamp.isoformat(),
        }


class NoRouteError(QaraError):
    """Raised by the runtime when no skill matches the input"""

    def __init__(self, input_text: str):
        super().__init__(
            message=f'No skill found for: "{input_text}". Try "qara list" to see available skills.',
            user_message="No skill found for that request.",
        )
        self.input_text = input_text

    def __str__(self) -> str:
        return self.message


class LLMError(QaraError):
    """Language-model call errors"""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ):
        if status_code == 429:
            user_message = "API rate limit exceeded. Please try again in a moment."
        elif status_code == 401:
            user_message = "API authentication failed. Please check your API key."
        elif status_code == 503:
            user_message = "Service temporarily unavailable. Please try again."
        else:
            user_message = "An error occurred while calling the LLM API."

        super().__init__(message=message, details=details or {}, user_message=user_message)
        self.status_code = status_code


class ConfigurationError(QaraError):
    """Configuration and wiring errors"""

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value

        super().__init__(
            message=message,
            details=details,
            user_message=f"Configuration error: {message}",
        )
        self.field = field
        self.value = value
