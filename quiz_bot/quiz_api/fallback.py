"""Built-in questions and categories used when the question bank is unavailable."""
from typing import Dict, Tuple

from .models import AnswerOptions, CorrectAnswers, Question


def _flags(correct_slot: str) -> CorrectAnswers:
    return CorrectAnswers(**{
        f"{slot}_correct": "true" if slot == correct_slot else "false"
        for slot in ("answer_a", "answer_b", "answer_c", "answer_d")
    })


FALLBACK_QUESTIONS: Tuple[Question, ...] = (
    Question(
        id=1,
        question="What does HTML stand for?",
        answers=AnswerOptions(
            answer_a="HyperText Markup Language",
            answer_b="High Tech Modern Language",
            answer_c="Home Tool Markup Language",
            answer_d="Hyperlink and Text Markup Language",
        ),
        correct_answers=_flags("answer_a"),
        category="HTML",
        difficulty="Easy",
        explanation=(
            "HTML stands for HyperText Markup Language, which is the standard "
            "markup language for creating web pages."
        ),
    ),
    Question(
        id=2,
        question="Which of the following is NOT a programming language?",
        answers=AnswerOptions(
            answer_a="Python",
            answer_b="JavaScript",
            answer_c="HTML",
            answer_d="Java",
        ),
        correct_answers=_flags("answer_c"),
        category="Programming",
        difficulty="Easy",
        explanation=(
            "HTML is a markup language, not a programming language. "
            "It's used for structuring web content."
        ),
    ),
    Question(
        id=3,
        question="What does CSS stand for?",
        answers=AnswerOptions(
            answer_a="Computer Style Sheets",
            answer_b="Cascading Style Sheets",
            answer_c="Creative Style Sheets",
            answer_d="Colorful Style Sheets",
        ),
        correct_answers=_flags("answer_b"),
        category="CSS",
        difficulty="Easy",
        explanation="CSS stands for Cascading Style Sheets, used for styling HTML elements.",
    ),
)

FALLBACK_CATEGORIES: Dict[str, str] = {
    name: name
    for name in (
        "Linux", "DevOps", "Docker", "SQL", "CMS",
        "Code", "HTML", "CSS", "JavaScript", "Programming",
    )
}
