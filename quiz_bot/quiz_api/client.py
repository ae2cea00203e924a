"""Async client for the question-bank API (quizapi.io compatible)."""
import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from quiz_bot.core.models import QuizStartRequest

from .exceptions import (
    AuthenticationError, InvalidResponseError, NetworkError, QuizAPIError
)
from .fallback import FALLBACK_CATEGORIES, FALLBACK_QUESTIONS
from .models import Question, categories_from_payload, questions_from_payload

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://quizapi.io/api/v1"
DEFAULT_TIMEOUT = 10.0


def build_query_params(request: QuizStartRequest) -> Dict[str, str]:
    """Query parameters for /questions; empty filters are left out entirely."""
    params: Dict[str, str] = {}
    if request.category:
        params["category"] = request.category
    if request.difficulty:
        params["difficulty"] = request.difficulty
    if request.limit > 0:
        params["limit"] = str(request.limit)
    if request.tags:
        params["tags"] = request.tags
    return params


class QuizAPIClient:
    """
    Question source. Never raises on upstream problems: any failure is logged
    and the built-in fallback data is returned instead. Nothing is cached.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Args:
            base_url: Base URL of the question bank
            api_key: Sent as X-Api-Key when set
            timeout: Default per-request deadline in seconds
            session: Shared aiohttp session; created lazily when not given
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._headers = {"Accept": "application/json"}
        if api_key:
            self._headers["X-Api-Key"] = api_key
        self._session = session
        self._owns_session = session is None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def _get_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """
        GET {base_url}{path} and decode the JSON body.

        Raises:
            AuthenticationError: 401/403
            InvalidResponseError: any other non-2xx status or a non-JSON body
            NetworkError: connection failure
        """
        url = f"{self.base_url}{path}"
        try:
            async with self._get_session().get(url, params=params, headers=self._headers) as response:
                if response.status in (401, 403):
                    raise AuthenticationError(f"Question bank rejected the API key (HTTP {response.status})")
                if not 200 <= response.status < 300:
                    raise InvalidResponseError(f"Question bank returned HTTP {response.status}")
                try:
                    return await response.json(content_type=None)
                except (aiohttp.ContentTypeError, ValueError) as e:
                    raise InvalidResponseError(f"Malformed JSON from question bank: {e}")
        except aiohttp.ClientError as e:
            raise NetworkError(f"Question bank unreachable: {e}")

    async def _request(self, path: str, params: Optional[Dict[str, str]], timeout: Optional[float]) -> Any:
        deadline = self.timeout if timeout is None else timeout
        try:
            return await asyncio.wait_for(self._get_json(path, params), timeout=deadline)
        except asyncio.TimeoutError:
            raise NetworkError(f"Question bank did not answer within {deadline}s")

    async def fetch_questions(
        self, request: QuizStartRequest, timeout: Optional[float] = None
    ) -> List[Question]:
        """
        Получить пачку вопросов по фильтру.

        Args:
            request: фильтр category/difficulty/limit/tags
            timeout: дедлайн этого вызова; по умолчанию таймаут клиента

        Returns:
            Список вопросов, либо FALLBACK_QUESTIONS при любой ошибке
        """
        params = build_query_params(request)
        logger.info("Fetching quiz questions: /questions %s", params)

        try:
            payload = await self._request("/questions", params, timeout)
            questions = questions_from_payload(payload)
        except AuthenticationError as e:
            logger.error("%s; check QUIZ_API_KEY. Using fallback questions", e)
            return list(FALLBACK_QUESTIONS)
        except QuizAPIError as e:
            logger.warning("Quiz API request failed: %s. Using fallback questions", e)
            return list(FALLBACK_QUESTIONS)

        logger.debug("Quiz API returned %d questions", len(questions))
        return questions

    async def fetch_categories(self, timeout: Optional[float] = None) -> Dict[str, str]:
        """Category name → label; FALLBACK_CATEGORIES on any error."""
        try:
            payload = await self._request("/categories", None, timeout)
            return categories_from_payload(payload)
        except AuthenticationError as e:
            logger.error("%s; check QUIZ_API_KEY. Using fallback categories", e)
        except QuizAPIError as e:
            logger.warning("Categories request failed: %s. Using fallback categories", e)
        return dict(FALLBACK_CATEGORIES)

    async def close(self):
        """Закрыть aiohttp-сессию, если клиент создал её сам."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
