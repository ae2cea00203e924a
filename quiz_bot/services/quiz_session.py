"""Quiz session engine: start, answer, advance, complete."""
import dataclasses
import enum
import logging
from datetime import datetime, timezone
from typing import Dict, NamedTuple, Optional, Tuple

from quiz_bot.core.exceptions import NoQuestionsAvailableError
from quiz_bot.core.models import AnswerRecord, QuizResult, QuizSession, QuizStartRequest
from quiz_bot.core.session_store import QuizSessionStore
from quiz_bot.quiz_api.client import QuizAPIClient
from quiz_bot.quiz_api.models import Question
from quiz_bot.utils.user_locks import UserLocks

logger = logging.getLogger(__name__)

# Slot treated as correct when a question carries no correctness data at all.
# Kept for compatibility with the upstream demo data; pending product review.
DEFAULT_CORRECT_SLOT = "answer_a"

# (lower bound in percent, grade), checked top-down
GRADE_THRESHOLDS: Tuple[Tuple[int, str], ...] = (
    (90, "A+"),
    (80, "A"),
    (70, "B"),
    (60, "C"),
    (50, "D"),
)
FAILING_GRADE = "F"
NO_GRADE = "N/A"

MIN_QUESTIONS = 1
MAX_QUESTIONS = 20


class CorrectnessSource(enum.Enum):
    PER_SLOT = "per_slot"     # correct_answers["{slot}_correct"]
    DIRECT = "direct"         # correct_answer == slot
    DEFAULT = "default"       # nothing usable, DEFAULT_CORRECT_SLOT wins


class Verdict(NamedTuple):
    is_correct: bool
    source: CorrectnessSource


def resolve_correctness(question: Question, selected_slot: str) -> Verdict:
    """
    Decide whether `selected_slot` is correct, in priority order:
    per-slot flag, then the single correct-slot reference, then the default.
    """
    flag = question.correct_answers.flag_for(selected_slot)
    if flag is not None:
        return Verdict(flag.lower() == "true", CorrectnessSource.PER_SLOT)

    if question.correct_answer:
        return Verdict(
            selected_slot.lower() == question.correct_answer.lower(),
            CorrectnessSource.DIRECT,
        )

    return Verdict(selected_slot.lower() == DEFAULT_CORRECT_SLOT, CorrectnessSource.DEFAULT)


def calculate_percentage(score: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return score * 100 / total


def calculate_grade(score: int, total: int) -> str:
    if total <= 0:
        return NO_GRADE
    # Integer comparison: no float rounding at the boundaries
    for lower_bound, grade in GRADE_THRESHOLDS:
        if score * 100 >= lower_bound * total:
            return grade
    return FAILING_GRADE


def clamp_question_count(count: int, minimum: int = MIN_QUESTIONS, maximum: int = MAX_QUESTIONS) -> int:
    return min(max(count, minimum), maximum)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuizSessionService:
    """
    Session engine. Holds no sessions itself: every operation reads the
    store, mutates, and writes back or removes.

    Operations for one user are serialized with a per-user asyncio.Lock;
    different users never wait on each other.
    """

    def __init__(
        self,
        quiz_api: QuizAPIClient,
        store: QuizSessionStore,
        min_questions: int = MIN_QUESTIONS,
        max_questions: int = MAX_QUESTIONS,
    ):
        self._quiz_api = quiz_api
        self._store = store
        self._locks = UserLocks()
        self.min_questions = min_questions
        self.max_questions = max_questions

    async def start_quiz(self, user_id: str, request: QuizStartRequest) -> QuizSession:
        """
        Start a new quiz, replacing any previous session of the user.

        Raises:
            NoQuestionsAvailableError: question source returned nothing
        """
        async with self._locks.hold(user_id):
            self._end_quiz(user_id)

            limit = clamp_question_count(request.limit, self.min_questions, self.max_questions)
            if limit != request.limit:
                request = dataclasses.replace(request, limit=limit)

            logger.info(
                "Starting quiz for user %s: category=%s, difficulty=%s, limit=%d",
                user_id, request.category or "Any", request.difficulty or "Mixed", request.limit,
            )

            questions = await self._quiz_api.fetch_questions(request)
            if not questions:
                logger.error("No questions available for user %s, request %s", user_id, request)
                raise NoQuestionsAvailableError("No questions available for the specified criteria")

            session = QuizSession(
                user_id=user_id,
                questions=tuple(questions),
                total_questions=len(questions),
                category=request.category,
                difficulty=request.difficulty,
                start_time=_utcnow(),
            )
            self._store.set(user_id, session)

            logger.info(
                "Quiz session %s started for user %s with %d questions",
                session.session_id, user_id, session.total_questions,
            )
            return session

    async def get_active_session(self, user_id: str) -> Optional[QuizSession]:
        return self._store.get(user_id)

    async def get_current_question(self, user_id: str) -> Optional[Question]:
        async with self._locks.hold(user_id):
            return self._current_question(self._store.get(user_id))

    async def submit_answer(self, user_id: str, selected_slot: str) -> bool:
        """
        Record an answer for the current question.

        Returns:
            True if the answer was recorded (correct or not),
            False if there is no active, unfinished session
        """
        async with self._locks.hold(user_id):
            session = self._store.get(user_id)
            question = self._current_question(session)
            if question is None:
                logger.warning("No active quiz question for user %s", user_id)
                return False

            verdict = resolve_correctness(question, selected_slot)
            if verdict.source is CorrectnessSource.DEFAULT:
                logger.warning(
                    "Could not determine correct answer for question %d (correct_answers: %s); "
                    "defaulting to %s",
                    question.id, ", ".join(question.correct_answers.keys()) or "none", DEFAULT_CORRECT_SLOT,
                )

            record = AnswerRecord(
                question_id=question.id,
                selected_answer=selected_slot,
                is_correct=verdict.is_correct,
                answered_at=_utcnow(),
            )

            def _record(s: QuizSession) -> None:
                s.answers.append(record)
                if record.is_correct:
                    s.score += 1

            self._store.update(user_id, _record)

            logger.info(
                "Answer for user %s, question %d: %s -> %s (via %s), score %d/%d",
                user_id, question.id, selected_slot, "correct" if verdict.is_correct else "incorrect",
                verdict.source.value, session.score, session.total_questions,
            )
            return True

    async def get_next_question(self, user_id: str) -> Optional[Question]:
        """
        Advance to the next question.

        Returns None when there is no active session or when the questions are
        exhausted; in the latter case the session is marked completed.
        """
        async with self._locks.hold(user_id):
            session = self._store.get(user_id)
            if session is None or session.is_completed:
                return None

            def _advance(s: QuizSession) -> None:
                s.current_question_index += 1
                if s.current_question_index >= len(s.questions):
                    s.is_completed = True
                    s.end_time = _utcnow()

            self._store.update(user_id, _advance)

            if session.is_completed:
                logger.info("User %s answered all %d questions", user_id, session.total_questions)
                return None
            return session.questions[session.current_question_index]

    async def complete_quiz(self, user_id: str) -> Optional[QuizResult]:
        """Finalize the session into a QuizResult and remove it from the store."""
        async with self._locks.hold(user_id):
            session = self._store.get(user_id)
            if session is None:
                return None

            def _finish(s: QuizSession) -> None:
                s.is_completed = True
                if s.end_time is None:
                    s.end_time = _utcnow()

            self._store.update(user_id, _finish)

            result = QuizResult(
                session_id=session.session_id,
                final_score=session.score,
                total_questions=session.total_questions,
                percentage=calculate_percentage(session.score, session.total_questions),
                duration=session.end_time - session.start_time,
                grade=calculate_grade(session.score, session.total_questions),
                answers=list(session.answers),
            )

            self._store.remove(user_id)

            logger.info(
                "Quiz completed for user %s: %d/%d (%.1f%%), grade %s",
                user_id, result.final_score, result.total_questions, result.percentage, result.grade,
            )
            return result

    async def end_quiz(self, user_id: str) -> bool:
        async with self._locks.hold(user_id):
            return self._end_quiz(user_id)

    async def get_available_categories(self) -> Dict[str, str]:
        return await self._quiz_api.fetch_categories()

    def _end_quiz(self, user_id: str) -> bool:
        # Caller holds the user's lock
        removed = self._store.remove(user_id)
        logger.info("Quiz session ended for user %s, was active: %s", user_id, removed)
        return removed

    @staticmethod
    def _current_question(session: Optional[QuizSession]) -> Optional[Question]:
        if session is None or session.is_completed:
            return None
        if session.current_question_index >= len(session.questions):
            return None
        return session.questions[session.current_question_index]
