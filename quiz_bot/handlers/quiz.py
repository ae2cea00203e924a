"""Quiz handlers: /quiz, /status, /stop, /categories and A-D answers."""
import logging
from typing import Optional, Tuple

from aiogram import Router, F
from aiogram.filters import Command, CommandObject
from aiogram.types import Message, CallbackQuery

from quiz_bot.keyboards.quiz_kb import answer_keyboard
from quiz_bot.services.quiz_commands import QuizCommands, QuizReply

logger = logging.getLogger(__name__)

router = Router()

_DIFFICULTIES = {"easy": "Easy", "medium": "Medium", "hard": "Hard"}

NO_QUIZ_HINT = "\U0001f4dd No active quiz. Send /quiz to start one, or /help for all commands."


def parse_quiz_arguments(args: Optional[str]) -> Tuple[Optional[str], Optional[str], Optional[int]]:
    """
    Разбирает аргументы /quiz: '[категория...] [easy|medium|hard] [число]'.

    Returns:
        (category, difficulty, count); отсутствующие части — None
    """
    category_words = []
    difficulty = None
    count = None

    for token in (args or "").split():
        lowered = token.lower()
        if lowered in _DIFFICULTIES and difficulty is None:
            difficulty = _DIFFICULTIES[lowered]
        elif token.isdigit() and count is None:
            count = int(token)
        else:
            category_words.append(token)

    category = " ".join(category_words) or None
    return category, difficulty, count


async def _send_reply(message: Message, reply: QuizReply):
    markup = answer_keyboard(reply.question) if reply.question else None
    await message.answer(reply.text, parse_mode="HTML", reply_markup=markup)


def _user_id(event) -> str:
    return str(event.from_user.id)


@router.message(Command("quiz"))
async def cmd_quiz(message: Message, command: CommandObject, quiz_commands: QuizCommands):
    category, difficulty, count = parse_quiz_arguments(command.args)
    reply = await quiz_commands.start_quiz(_user_id(message), category, difficulty, count)
    await _send_reply(message, reply)


@router.message(Command("status"))
async def cmd_status(message: Message, quiz_commands: QuizCommands):
    reply = await quiz_commands.get_status(_user_id(message))
    await _send_reply(message, reply)


@router.message(Command("stop", "endquiz"))
async def cmd_stop(message: Message, quiz_commands: QuizCommands):
    reply = await quiz_commands.end_quiz(_user_id(message))
    await _send_reply(message, reply)


@router.message(Command("categories"))
async def cmd_categories(message: Message, quiz_commands: QuizCommands):
    reply = await quiz_commands.list_categories()
    await _send_reply(message, reply)


@router.callback_query(F.data.startswith("ans:"))
async def answer_via_button(callback: CallbackQuery, quiz_commands: QuizCommands):
    letter = callback.data.split(":", 1)[1]
    await callback.answer()
    reply = await quiz_commands.submit_answer(_user_id(callback), letter)
    await _send_reply(callback.message, reply)


@router.callback_query(F.data == "quiz:stop")
async def stop_via_button(callback: CallbackQuery, quiz_commands: QuizCommands):
    await callback.answer()
    reply = await quiz_commands.end_quiz(_user_id(callback))
    await _send_reply(callback.message, reply)


@router.message(F.text, ~F.text.startswith("/"))
async def answer_via_text(message: Message, quiz_commands: QuizCommands):
    """Plain text while a quiz is running is an answer attempt."""
    user_id = _user_id(message)
    if not await quiz_commands.has_active_quiz(user_id):
        await message.answer(NO_QUIZ_HINT)
        return

    reply = await quiz_commands.submit_answer(user_id, message.text)
    await _send_reply(message, reply)
