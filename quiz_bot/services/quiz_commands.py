"""Conversational quiz operations: each returns a ready-to-send reply."""
import logging
from dataclasses import dataclass
from typing import Optional

from quiz_bot.core.exceptions import NoQuestionsAvailableError
from quiz_bot.core.models import QuizStartRequest
from quiz_bot.quiz_api.fallback import FALLBACK_CATEGORIES
from quiz_bot.quiz_api.models import SLOT_KEYS, SLOT_LETTERS, Question
from quiz_bot.utils.user_locks import UserLocks

from .quiz_formatter import (
    INVALID_ANSWER_TEXT,
    NO_ACTIVE_QUIZ_TEXT,
    NO_QUIZ_STATUS_TEXT,
    NO_QUIZ_TO_END_TEXT,
    format_answer_feedback,
    format_categories,
    format_completion,
    format_next_question,
    format_quiz_ended,
    format_quiz_started,
    format_status,
)
from .quiz_session import MAX_QUESTIONS, MIN_QUESTIONS, QuizSessionService, clamp_question_count

logger = logging.getLogger(__name__)

_LETTER_TO_SLOT = dict(zip(SLOT_LETTERS, SLOT_KEYS))


@dataclass(frozen=True)
class QuizReply:
    """Rendered reply plus the question the user should answer next, if any."""
    text: str
    question: Optional[Question] = None


def letter_to_slot(answer: str) -> Optional[str]:
    """'b' / ' B ' → 'answer_b'; anything else → None."""
    return _LETTER_TO_SLOT.get((answer or "").strip().upper())


class QuizCommands:
    """
    Front-end boundary of the quiz engine.

    Never raises: every failure becomes a friendly reply. Each user's turn
    (submit + advance + complete) runs under that user's lock.
    """

    def __init__(
        self,
        service: QuizSessionService,
        default_count: int = 5,
        min_count: int = MIN_QUESTIONS,
        max_count: int = MAX_QUESTIONS,
        categories_limit: int = 10,
    ):
        self.service = service
        self.default_count = default_count
        self.min_count = min_count
        self.max_count = max_count
        self.categories_limit = categories_limit
        self._turn_locks = UserLocks()

    async def has_active_quiz(self, user_id: str) -> bool:
        session = await self.service.get_active_session(user_id)
        return session is not None and not session.is_completed

    async def start_quiz(
        self,
        user_id: str,
        category: Optional[str] = None,
        difficulty: Optional[str] = None,
        question_count: Optional[int] = None,
    ) -> QuizReply:
        count = self.default_count if question_count is None else question_count
        request = QuizStartRequest(
            category=category or None,
            difficulty=difficulty or None,
            limit=clamp_question_count(count, self.min_count, self.max_count),
        )

        async with self._turn_locks.hold(user_id):
            try:
                session = await self.service.start_quiz(user_id, request)
                question = await self.service.get_current_question(user_id)
            except NoQuestionsAvailableError:
                return QuizReply("Sorry, I couldn't start the quiz. No questions are available right now.")
            except Exception:
                logger.exception("Error starting quiz for user %s", user_id)
                return QuizReply("Sorry, I encountered an error while starting the quiz. Please try again later.")

        if question is None:
            return QuizReply("Sorry, I couldn't start the quiz. No questions are available right now.")
        return QuizReply(format_quiz_started(session, question), question)

    async def submit_answer(self, user_id: str, answer: str) -> QuizReply:
        slot = letter_to_slot(answer)
        if slot is None:
            return QuizReply(INVALID_ANSWER_TEXT)

        async with self._turn_locks.hold(user_id):
            try:
                return await self._submit_answer(user_id, slot)
            except Exception:
                logger.exception("Error submitting answer for user %s", user_id)
                return QuizReply("Sorry, I encountered an error while processing your answer. Please try again.")

    async def _submit_answer(self, user_id: str, slot: str) -> QuizReply:
        session = await self.service.get_active_session(user_id)
        if session is None:
            return QuizReply(NO_ACTIVE_QUIZ_TEXT)

        question = await self.service.get_current_question(user_id)
        if question is None:
            return QuizReply("❌ No current question found. The quiz might have ended.")

        if not await self.service.submit_answer(user_id, slot):
            return QuizReply("❌ Error submitting your answer. Please try again.")

        session = await self.service.get_active_session(user_id)
        is_correct = bool(session and session.answers and session.answers[-1].is_correct)
        feedback = format_answer_feedback(is_correct, question.explanation)

        next_question = await self.service.get_next_question(user_id)
        if next_question is None:
            result = await self.service.complete_quiz(user_id)
            if result is None:
                return QuizReply(feedback + "\n\n\U0001f389 Quiz completed! Great job!")
            return QuizReply(feedback + "\n\n" + format_completion(result))

        session = await self.service.get_active_session(user_id)
        return QuizReply(feedback + "\n\n" + format_next_question(session, next_question), next_question)

    async def get_status(self, user_id: str) -> QuizReply:
        try:
            session = await self.service.get_active_session(user_id)
            if session is None:
                return QuizReply(NO_QUIZ_STATUS_TEXT)

            question = await self.service.get_current_question(user_id)
            if question is None:
                return QuizReply("\U0001f389 Quiz completed! Start a new quiz anytime!")
            return QuizReply(format_status(session, question), question)
        except Exception:
            logger.exception("Error getting quiz status for user %s", user_id)
            return QuizReply("Sorry, I encountered an error while checking your quiz status.")

    async def end_quiz(self, user_id: str) -> QuizReply:
        async with self._turn_locks.hold(user_id):
            try:
                session = await self.service.get_active_session(user_id)
                if session is None:
                    return QuizReply(NO_QUIZ_TO_END_TEXT)

                if await self.service.end_quiz(user_id):
                    return QuizReply(format_quiz_ended(session.score, session.total_questions))
                return QuizReply("❌ Error ending the quiz. Please try again.")
            except Exception:
                logger.exception("Error ending quiz for user %s", user_id)
                return QuizReply("Sorry, I encountered an error while ending the quiz.")

    async def list_categories(self) -> QuizReply:
        try:
            categories = await self.service.get_available_categories()
        except Exception:
            logger.exception("Error getting available categories")
            categories = dict(FALLBACK_CATEGORIES)
        return QuizReply(format_categories(categories, self.categories_limit))
