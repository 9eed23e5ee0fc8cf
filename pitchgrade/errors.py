"""Error taxonomy shared by capture, analysis, and history storage."""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """User-facing error categories."""

    PERMISSION_DENIED = "permission_denied"
    CAPTURE = "capture"
    NETWORK = "network"
    AUTHENTICATION = "authentication"
    RATE_LIMITED = "rate_limited"
    API_ERROR = "api_error"
    MALFORMED_RESPONSE = "malformed_response"
    EMPTY_INPUT = "empty_input"
    STORAGE = "storage"


class PitchGradeError(Exception):
    """Base class for every recoverable PitchGrade failure."""

    kind: ErrorKind = ErrorKind.API_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PermissionDeniedError(PitchGradeError):
    kind = ErrorKind.PERMISSION_DENIED


class CaptureError(PitchGradeError):
    kind = ErrorKind.CAPTURE


class EmptyPitchTextError(PitchGradeError):
    kind = ErrorKind.EMPTY_INPUT

    def __init__(self, message: str = "There is no pitch text to analyze.") -> None:
        super().__init__(message)


class AnalysisServiceError(PitchGradeError):
    """A failed call to the chat-completion endpoint."""


class NetworkError(AnalysisServiceError):
    kind = ErrorKind.NETWORK


class AuthenticationError(AnalysisServiceError):
    kind = ErrorKind.AUTHENTICATION

    def __init__(
        self, message: str = "Invalid API key. Please check your OpenAI API key."
    ) -> None:
        super().__init__(message)


class RateLimitError(AnalysisServiceError):
    kind = ErrorKind.RATE_LIMITED

    def __init__(self, message: str = "Rate limit exceeded. Please try again later.") -> None:
        super().__init__(message)


class APIError(AnalysisServiceError):
    kind = ErrorKind.API_ERROR

    def __init__(self, status_code: int, message: str | None = None) -> None:
        super().__init__(message or f"OpenAI API error: {status_code}")
        self.status_code = status_code


class MalformedResponseError(AnalysisServiceError):
    kind = ErrorKind.MALFORMED_RESPONSE


class HistoryStoreError(PitchGradeError):
    kind = ErrorKind.STORAGE
