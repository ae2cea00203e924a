"""Configuration settings using pydantic-settings."""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Telegram Bot
    BOT_TOKEN: str = Field(default="", description="Telegram Bot API token")

    # Question bank API
    QUIZ_API_BASE_URL: str = Field(
        default="https://quizapi.io/api/v1",
        description="Base URL of the question bank"
    )
    QUIZ_API_KEY: str = Field(default="", description="API key sent as X-Api-Key")
    QUIZ_API_TIMEOUT: float = Field(default=10.0, description="Question bank request timeout in seconds")

    # Quiz
    QUIZ_DEFAULT_QUESTION_COUNT: int = Field(default=5, description="Questions per quiz when not specified")
    QUIZ_MIN_QUESTIONS: int = Field(default=1, description="Lower bound for the question count")
    QUIZ_MAX_QUESTIONS: int = Field(default=20, description="Upper bound for the question count")
    CATEGORIES_DISPLAY_LIMIT: int = Field(default=10, description="Max categories shown by /categories")

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    class Config:
        """Pydantic config."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


# Global settings instance
settings = Settings()
