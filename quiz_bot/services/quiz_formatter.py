"""Telegram-HTML rendering of quiz replies."""
import html
from datetime import timedelta
from typing import Dict, Optional

from quiz_bot.core.models import QuizResult, QuizSession
from quiz_bot.quiz_api.models import SLOT_KEYS, SLOT_LETTERS, Question

ANSWER_PROMPT = "\U0001f4a1 Type your answer (A, B, C, or D) to continue!"
INVALID_ANSWER_TEXT = "❌ Please answer A, B, C, or D."
NO_ACTIVE_QUIZ_TEXT = "❌ No active quiz found. Start a new quiz with /quiz!"
NO_QUIZ_STATUS_TEXT = "\U0001f4dd No active quiz. Start a new quiz with /quiz!"
NO_QUIZ_TO_END_TEXT = "\U0001f4dd No active quiz to end."
DEFAULT_CATEGORIES_TEXT = "\U0001f4da <b>Available Categories:</b> General Knowledge, Programming, Web Development"

# (lower bound in percent, emoji, encouragement), checked top-down
_COMPLETION_BANDS = (
    (90, "\U0001f3c6", "Outstanding! You're a quiz master! \U0001f31f"),
    (80, "\U0001f947", "Excellent work! Great knowledge! \U0001f44f"),
    (70, "\U0001f948", "Good job! You did well! \U0001f44d"),
    (60, "\U0001f949", "Not bad! Keep learning! \U0001f4d6"),
)
_LOW_BAND = ("\U0001f4da", "Keep practicing! You'll get better! \U0001f4aa")


def format_answer_options(question: Question) -> str:
    """One line per non-empty slot: '<b>A.</b> text'."""
    lines = []
    for slot, letter in zip(SLOT_KEYS, SLOT_LETTERS):
        text = question.answers.get(slot)
        if text:
            lines.append(f"<b>{letter}.</b> {html.escape(text)}")
    return "\n".join(lines)


def format_question(question: Question, number: int, total: int) -> str:
    parts = [f"<b>Question {number}/{total}:</b>\n{html.escape(question.question)}"]
    if question.description:
        parts.append(f"<i>{html.escape(question.description)}</i>")
    parts.append(format_answer_options(question))
    parts.append(ANSWER_PROMPT)
    return "\n\n".join(parts)


def format_quiz_started(session: QuizSession, question: Question) -> str:
    category = f" in {html.escape(session.category)}" if session.category else ""
    difficulty = f" ({html.escape(session.difficulty)} level)" if session.difficulty else ""
    return (
        f"\U0001f3af <b>Quiz Started!</b>{category}{difficulty}\n\n"
        f"\U0001f4ca <b>Questions:</b> {session.total_questions} | "
        f"<b>Score:</b> 0/{session.total_questions}\n\n"
        + format_question(question, 1, session.total_questions)
    )


def format_answer_feedback(is_correct: bool, explanation: Optional[str] = None) -> str:
    text = "✅ <b>Correct!</b>" if is_correct else "❌ <b>Incorrect</b>"
    if explanation:
        text += f"\n\U0001f4a1 {html.escape(explanation)}"
    return text


def format_next_question(session: QuizSession, question: Question) -> str:
    number = session.current_question_index + 1
    return (
        f"\U0001f4ca <b>Score:</b> {session.score}/{session.total_questions}\n\n"
        + format_question(question, number, session.total_questions)
    )


def format_status(session: QuizSession, question: Question) -> str:
    number = session.current_question_index + 1
    category = f" ({html.escape(session.category)})" if session.category else ""
    return (
        f"\U0001f3af <b>Active Quiz{category}</b>\n\n"
        f"\U0001f4ca <b>Score:</b> {session.score}/{session.total_questions} | "
        f"<b>Progress:</b> {number}/{session.total_questions}\n\n"
        + format_question(question, number, session.total_questions)
    )


def format_duration(duration: timedelta) -> str:
    minutes, seconds = divmod(max(int(duration.total_seconds()), 0), 60)
    return f"{minutes}m {seconds}s"


def format_completion(result: QuizResult) -> str:
    emoji, encouragement = _LOW_BAND
    for lower_bound, band_emoji, band_text in _COMPLETION_BANDS:
        if result.percentage >= lower_bound:
            emoji, encouragement = band_emoji, band_text
            break

    return (
        f"{emoji} <b>Quiz Complete!</b>\n\n"
        f"\U0001f4ca <b>Final Score:</b> {result.final_score}/{result.total_questions} "
        f"({result.percentage:.1f}%)\n"
        f"\U0001f3af <b>Grade:</b> {result.grade}\n"
        f"⏱️ <b>Time:</b> {format_duration(result.duration)}\n\n"
        f"{encouragement}\n\n"
        "\U0001f680 Ready for another challenge? Send /quiz to play again!"
    )


def format_quiz_ended(score: int, total: int) -> str:
    return (
        f"\U0001f6d1 Quiz ended. Final score: {score}/{total}\n"
        "Start a new quiz anytime with /quiz!"
    )


def format_categories(categories: Dict[str, str], limit: int = 10) -> str:
    if not categories:
        return DEFAULT_CATEGORIES_TEXT
    names = ", ".join(html.escape(name) for name in list(categories)[:limit])
    return (
        f"\U0001f4da <b>Available Quiz Categories:</b>\n{names}\n\n"
        "\U0001f4a1 Start a quiz with /quiz [category], e.g. <code>/quiz JavaScript</code>"
    )
