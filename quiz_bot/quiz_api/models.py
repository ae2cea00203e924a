"""Data models for question-bank API responses."""
import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import InvalidResponseError

logger = logging.getLogger(__name__)

# Answer slots in display order: A, B, C, D
SLOT_KEYS: Tuple[str, ...] = ("answer_a", "answer_b", "answer_c", "answer_d")
SLOT_LETTERS: Tuple[str, ...] = ("A", "B", "C", "D")


@dataclass(frozen=True)
class AnswerOptions:
    """Up to four answer texts; an unused slot is None."""
    answer_a: Optional[str] = None
    answer_b: Optional[str] = None
    answer_c: Optional[str] = None
    answer_d: Optional[str] = None

    def get(self, slot: str) -> Optional[str]:
        if slot not in SLOT_KEYS:
            return None
        return getattr(self, slot)

    def available(self) -> List[Tuple[str, str]]:
        """(slot, text) pairs for every slot that carries an answer."""
        return [(slot, self.get(slot)) for slot in SLOT_KEYS if self.get(slot)]


@dataclass(frozen=True)
class CorrectAnswers:
    """Per-slot correctness flags as sent upstream ("true"/"false")."""
    answer_a_correct: Optional[str] = None
    answer_b_correct: Optional[str] = None
    answer_c_correct: Optional[str] = None
    answer_d_correct: Optional[str] = None

    def flag_for(self, slot: str) -> Optional[str]:
        """Raw flag for `slot`, or None when the slot has no flag."""
        key = f"{slot}_correct"
        if key not in _CORRECT_KEYS:
            return None
        return getattr(self, key)

    def is_empty(self) -> bool:
        return all(getattr(self, key) is None for key in _CORRECT_KEYS)

    def keys(self) -> List[str]:
        return [key for key in _CORRECT_KEYS if getattr(self, key) is not None]


_CORRECT_KEYS = tuple(f.name for f in fields(CorrectAnswers))


@dataclass(frozen=True)
class Question:
    """Single trivia question."""
    id: int
    question: str
    answers: AnswerOptions
    correct_answers: CorrectAnswers = CorrectAnswers()
    correct_answer: Optional[str] = None   # single slot reference, e.g. "answer_b"
    multiple_correct_answers: bool = False
    description: Optional[str] = None
    explanation: Optional[str] = None
    tip: Optional[str] = None              # hint
    category: Optional[str] = None
    difficulty: Optional[str] = None
    tags: Tuple[str, ...] = ()


# ============================================================================
# CONVERTERS: raw JSON payloads → our dataclasses
# ============================================================================

def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _tag_names(raw_tags: Any) -> Tuple[str, ...]:
    """Tags arrive as [{"name": "..."}] or as plain strings."""
    if not isinstance(raw_tags, list):
        return ()
    names = []
    for tag in raw_tags:
        if isinstance(tag, dict):
            name = _optional_str(tag.get("name"))
        else:
            name = _optional_str(tag)
        if name:
            names.append(name)
    return tuple(names)


def answers_from_payload(raw: Any) -> AnswerOptions:
    """Keep answer_a..answer_d; extra upstream slots (answer_e, answer_f) are dropped."""
    if not isinstance(raw, dict):
        return AnswerOptions()
    return AnswerOptions(**{slot: _optional_str(raw.get(slot)) for slot in SLOT_KEYS})


def correct_answers_from_payload(raw: Any) -> CorrectAnswers:
    if not isinstance(raw, dict):
        return CorrectAnswers()
    return CorrectAnswers(**{key: _optional_str(raw.get(key)) for key in _CORRECT_KEYS})


def question_from_payload(payload: Any) -> Question:
    """
    Конвертирует один элемент ответа /questions в наш Question.

    Raises:
        InvalidResponseError: элемент не объект, нет целого id или текста вопроса
    """
    if not isinstance(payload, dict):
        raise InvalidResponseError(f"Question item is not an object: {payload!r}")

    question_id = payload.get("id")
    if isinstance(question_id, bool) or not isinstance(question_id, int):
        raise InvalidResponseError(f"Question item has no integer id: {question_id!r}")

    text = payload.get("question")
    if not isinstance(text, str) or not text.strip():
        raise InvalidResponseError(f"Question {question_id} has no text")

    multiple = str(payload.get("multiple_correct_answers") or "false").strip().lower() == "true"

    return Question(
        id=question_id,
        question=text.strip(),
        answers=answers_from_payload(payload.get("answers")),
        correct_answers=correct_answers_from_payload(payload.get("correct_answers")),
        correct_answer=_optional_str(payload.get("correct_answer")),
        multiple_correct_answers=multiple,
        description=_optional_str(payload.get("description")),
        explanation=_optional_str(payload.get("explanation")),
        tip=_optional_str(payload.get("tip")),
        category=_optional_str(payload.get("category")),
        difficulty=_optional_str(payload.get("difficulty")),
        tags=_tag_names(payload.get("tags")),
    )


def questions_from_payload(payload: Any) -> List[Question]:
    """
    Конвертирует весь ответ /questions.

    Вопросы без единого варианта ответа пропускаются. Пустой массив — валидный
    (пустой) ответ; если же пропущены все элементы, ответ считается битым.

    Raises:
        InvalidResponseError: ответ не массив или содержит некорректный элемент
    """
    if not isinstance(payload, list):
        raise InvalidResponseError(f"Expected a JSON array, got {type(payload).__name__}")

    questions = []
    for item in payload:
        question = question_from_payload(item)
        if not question.answers.available():
            logger.warning("Skipping question %d without answer options", question.id)
            continue
        questions.append(question)

    if payload and not questions:
        raise InvalidResponseError("No usable questions in response")

    return questions


def categories_from_payload(payload: Any) -> Dict[str, str]:
    """
    /categories отдаёт либо объект name → label, либо список {"id", "name"}.

    Raises:
        InvalidResponseError: любой другой формат
    """
    if isinstance(payload, dict):
        return {str(name): str(label) for name, label in payload.items()}

    if isinstance(payload, list):
        categories = {}
        for item in payload:
            if not isinstance(item, dict) or not _optional_str(item.get("name")):
                raise InvalidResponseError(f"Unexpected category item: {item!r}")
            name = _optional_str(item.get("name"))
            label = _optional_str(item.get("id")) or name
            categories[name] = label
        return categories

    raise InvalidResponseError(f"Unexpected categories payload: {type(payload).__name__}")
