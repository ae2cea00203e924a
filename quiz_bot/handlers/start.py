"""Handlers for /start and /help."""
from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

router = Router()

WELCOME_TEXT = (
    "\U0001f44b Hi! I'm Quiz Bot — let's test your tech knowledge.\n\n"
    "<b>Commands:</b>\n"
    "/quiz [category] [easy|medium|hard] [count] — start a quiz\n"
    "/status — current question and score\n"
    "/stop — end the current quiz\n"
    "/categories — list quiz categories\n\n"
    "Answer with the buttons or just type A, B, C or D."
)


@router.message(CommandStart())
async def cmd_start(message: Message):
    await message.answer(WELCOME_TEXT, parse_mode="HTML")


@router.message(Command("help"))
async def cmd_help(message: Message):
    await message.answer(WELCOME_TEXT, parse_mode="HTML")
