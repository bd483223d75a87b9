from __future__ import annotations

from typing import Any, Literal

AIErrorType = Literal["rate_limit", "network", "timeout", "config", "malformed", "unknown"]

VALIDATION_ERROR = "VALIDATION_ERROR"
PARSE_ERROR = "PARSE_ERROR"
AI_ERROR = "AI_ERROR"

ERROR_MESSAGES: dict[str, str] = {
    VALIDATION_ERROR: "Invalid input. Please check your data and try again.",
    PARSE_ERROR: "We could not read the generated suggestions. Please try again.",
    AI_ERROR: "An unexpected error occurred. Please try again.",
}

AI_ERROR_MESSAGES: dict[str, str] = {
    "rate_limit": "The AI service is busy. Please wait a moment and try again.",
    "network": "Analysis service temporarily unavailable. Please check your connection and try again.",
    "timeout": "Analysis is taking longer than expected. Please try again.",
    "config": "Analysis service configuration error",
    "malformed": "Unexpected response from analysis service",
    "unknown": "An unexpected error occurred. Please try again.",
}


def user_message_for(error_type: str) -> str:
    return AI_ERROR_MESSAGES.get(error_type, AI_ERROR_MESSAGES["unknown"])


class EngineError(RuntimeError):
    """Base error; ``message`` is always a fixed, user-safe string."""

    code: str = AI_ERROR

    def __init__(self, message: str | None = None, *, detail: str | None = None):
        self.message = message or ERROR_MESSAGES.get(self.code, ERROR_MESSAGES[AI_ERROR])
        # Internal context for logs only; never shown to end users.
        self.detail = detail
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class InputValidationError(EngineError):
    code = VALIDATION_ERROR


class OutputParseError(EngineError):
    code = PARSE_ERROR


class AIInvocationError(EngineError):
    code = AI_ERROR

    def __init__(self, error_type: AIErrorType, original_error: BaseException | None = None):
        super().__init__(user_message_for(error_type))
        self.type: AIErrorType = error_type
        self.retryable = False
        self.original_error = original_error

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "type": self.type,
            "message": self.message,
            "retryable": self.retryable,
        }
