"""Custom exceptions for question-bank API errors."""


class QuizAPIError(Exception):
    """Base exception for question-bank API errors."""
    pass


class AuthenticationError(QuizAPIError):
    """Missing or rejected API key."""
    pass


class NetworkError(QuizAPIError):
    """Network connectivity issues or timeout."""
    pass


class InvalidResponseError(QuizAPIError):
    """API returned a non-success status or an unexpected response format."""
    pass
