from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton

from quiz_bot.quiz_api.models import SLOT_KEYS, SLOT_LETTERS, Question


def answer_keyboard(question: Question) -> InlineKeyboardMarkup:
    """One button per available answer slot plus an 'End quiz' button."""
    row = [
        InlineKeyboardButton(text=letter, callback_data=f"ans:{letter}")
        for slot, letter in zip(SLOT_KEYS, SLOT_LETTERS)
        if question.answers.get(slot)
    ]
    return InlineKeyboardMarkup(inline_keyboard=[
        row,
        [InlineKeyboardButton(text="\U0001f6d1 End quiz", callback_data="quiz:stop")],
    ])
