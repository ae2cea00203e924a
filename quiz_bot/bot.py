"""Main entry point for Quiz Bot."""
import asyncio
import logging
import sys

from aiogram import Bot, Dispatcher
from aiogram.types import BotCommand

from quiz_bot.config import settings
from quiz_bot.core.session_store import QuizSessionStore
from quiz_bot.handlers import start, quiz
from quiz_bot.quiz_api.client import QuizAPIClient
from quiz_bot.services.quiz_commands import QuizCommands
from quiz_bot.services.quiz_session import QuizSessionService


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


def build_quiz_commands(quiz_api: QuizAPIClient) -> QuizCommands:
    """Wire store → engine → commands; one instance of each per process."""
    service = QuizSessionService(
        quiz_api,
        QuizSessionStore(),
        min_questions=settings.QUIZ_MIN_QUESTIONS,
        max_questions=settings.QUIZ_MAX_QUESTIONS,
    )
    return QuizCommands(
        service,
        default_count=settings.QUIZ_DEFAULT_QUESTION_COUNT,
        min_count=settings.QUIZ_MIN_QUESTIONS,
        max_count=settings.QUIZ_MAX_QUESTIONS,
        categories_limit=settings.CATEGORIES_DISPLAY_LIMIT,
    )


async def main():
    """Main function to start the bot."""
    if not settings.BOT_TOKEN:
        logger.error("BOT_TOKEN is not set. Create a .env file or export BOT_TOKEN")
        sys.exit(1)

    logger.info("Starting Quiz Bot...")
    if not settings.QUIZ_API_KEY:
        logger.warning("QUIZ_API_KEY is not set — the question bank will likely reject requests")

    quiz_api = QuizAPIClient(
        base_url=settings.QUIZ_API_BASE_URL,
        api_key=settings.QUIZ_API_KEY,
        timeout=settings.QUIZ_API_TIMEOUT,
    )

    bot = Bot(token=settings.BOT_TOKEN)
    dp = Dispatcher(quiz_commands=build_quiz_commands(quiz_api))

    # Register routers (quiz last: it has the catch-all text handler)
    dp.include_router(start.router)
    dp.include_router(quiz.router)

    await bot.set_my_commands([
        BotCommand(command="quiz", description="Start a quiz"),
        BotCommand(command="status", description="Current question and score"),
        BotCommand(command="stop", description="End the current quiz"),
        BotCommand(command="categories", description="List quiz categories"),
        BotCommand(command="help", description="How to play"),
    ])

    logger.info("Bot handlers registered successfully")

    try:
        logger.info("Starting bot polling...")
        await dp.start_polling(
            bot,
            allowed_updates=dp.resolve_used_update_types()
        )
    except Exception as e:
        logger.error(f"Error during polling: {e}")
        raise
    finally:
        await quiz_api.close()
        await bot.session.close()
        logger.info("Bot stopped")


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
