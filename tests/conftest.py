"""Общие фикстуры для тестов квиз-бота."""
import pytest
from unittest.mock import AsyncMock

import aiohttp

from quiz_bot.core.session_store import QuizSessionStore
from quiz_bot.quiz_api.client import QuizAPIClient
from quiz_bot.quiz_api.models import AnswerOptions, CorrectAnswers, Question
from quiz_bot.services.quiz_session import QuizSessionService


def _build_question(
    question_id: int = 1,
    correct_slot: str = "answer_b",
    correct_answer: str = None,
    explanation: str = None,
    with_flags: bool = True,
    text: str = None,
) -> Question:
    flags = CorrectAnswers()
    if with_flags:
        flags = CorrectAnswers(**{
            f"{slot}_correct": "true" if slot == correct_slot else "false"
            for slot in ("answer_a", "answer_b", "answer_c", "answer_d")
        })
    return Question(
        id=question_id,
        question=text or f"Question number {question_id}?",
        answers=AnswerOptions(
            answer_a="Alpha",
            answer_b="Bravo",
            answer_c="Charlie",
            answer_d="Delta",
        ),
        correct_answers=flags,
        correct_answer=correct_answer,
        explanation=explanation,
        category="Linux",
        difficulty="Easy",
    )


@pytest.fixture
def make_question():
    """Фабрика вопросов; по умолчанию правильный ответ — answer_b."""
    return _build_question


@pytest.fixture
def sample_questions():
    """Пять вопросов, везде правильный ответ B."""
    return [
        _build_question(question_id=i, explanation=f"Because of reason {i}.")
        for i in range(1, 6)
    ]


@pytest.fixture
def sample_categories():
    return {
        name: name
        for name in ("Linux", "DevOps", "Docker", "SQL", "CMS", "Code",
                     "HTML", "CSS", "JavaScript", "Programming", "Bash", "Kubernetes")
    }


@pytest.fixture
def quiz_api(sample_questions, sample_categories):
    """Мок QuizAPIClient, отдающий sample_questions."""
    client = AsyncMock(spec=QuizAPIClient)
    client.fetch_questions.return_value = list(sample_questions)
    client.fetch_categories.return_value = dict(sample_categories)
    return client


@pytest.fixture
def store():
    return QuizSessionStore()


@pytest.fixture
def service(quiz_api, store):
    return QuizSessionService(quiz_api, store)


class _UnreachableSession:
    """aiohttp session stand-in whose every request fails to connect."""

    closed = False

    def __init__(self):
        self.calls = 0

    def get(self, url, params=None, headers=None):
        self.calls += 1
        raise aiohttp.ClientConnectionError("connection refused")


@pytest.fixture
def failing_quiz_api():
    """Настоящий QuizAPIClient поверх всегда падающей сети."""
    return QuizAPIClient(api_key="test-key", session=_UnreachableSession())
