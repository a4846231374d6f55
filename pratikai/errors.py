"""
Domain errors raised by the conversation pipeline.

Each error carries the HTTP status it maps to; the handlers registered in
pratikai.main render them as {"message": ...}.
"""

from fastapi import status


class PratikAIError(Exception):
    """Base class for client-facing errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An internal error occurred."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationRequired(PratikAIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class AdminRequired(PratikAIError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Admin access required"


class NotFound(PratikAIError):
    """Resource is missing or owned by someone else; callers cannot tell which."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Session not found"


class InsufficientCredits(PratikAIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Insufficient credits"


class InvalidInput(PratikAIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class GenerationUnavailable(PratikAIError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "AI servisi şu anda kullanılamıyor. Lütfen daha sonra tekrar deneyin."


class Internal(PratikAIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
