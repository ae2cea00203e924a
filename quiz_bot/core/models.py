"""Quiz session data models."""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from quiz_bot.quiz_api.models import Question


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class QuizStartRequest:
    """Filter for fetching a batch of questions."""
    category: Optional[str] = None
    difficulty: Optional[str] = None
    limit: int = 5
    tags: Optional[str] = None


@dataclass(frozen=True)
class AnswerRecord:
    """One submitted answer."""
    question_id: int
    selected_answer: str        # slot key, e.g. "answer_b"
    is_correct: bool
    answered_at: datetime = field(default_factory=_utcnow)


@dataclass
class QuizSession:
    """Live state of one user's quiz."""
    user_id: str
    questions: Tuple[Question, ...]
    total_questions: int
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    current_question_index: int = 0
    score: int = 0
    start_time: datetime = field(default_factory=_utcnow)
    end_time: Optional[datetime] = None
    answers: List[AnswerRecord] = field(default_factory=list)
    category: Optional[str] = None      # as requested, display only
    difficulty: Optional[str] = None    # as requested, display only
    is_completed: bool = False


@dataclass(frozen=True)
class QuizResult:
    """Final summary returned once when a quiz is completed."""
    session_id: str
    final_score: int
    total_questions: int
    percentage: float
    duration: timedelta
    grade: str
    answers: List[AnswerRecord]
