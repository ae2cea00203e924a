"""Exceptions raised by the quiz session engine."""


class QuizError(Exception):
    """Base exception for quiz engine errors."""
    pass


class NoQuestionsAvailableError(QuizError):
    """The question source returned no questions for the request."""
    pass
