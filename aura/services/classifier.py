"""
Lesson Classifier - обёртка над LLM (Anthropic / OpenAI).
Относит учебный материал к одному домену и ставит множитель сложности.

AICODE-NOTE: Для движка начисления классификатор - "чёрный ящик".
Ответ всегда нормализуется: неизвестный домен -> General, множитель в [1.0, 1.5].
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any

from anthropic import (
    APIConnectionError as AnthropicAPIConnectionError,
)
from anthropic import (
    APIError as AnthropicAPIError,
)
from anthropic import (
    AsyncAnthropic,
)
from anthropic import (
    RateLimitError as AnthropicRateLimitError,
)
from openai import APIConnectionError, APIError, AsyncOpenAI, RateLimitError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from aura.config import config
from aura.core.domain.domains import Domain, lesson_domain
from aura.core.domain.lesson_rules import MIN_MULTIPLIER, clamp_multiplier

logger = logging.getLogger(__name__)

# Сколько символов материала отправляем модели
MAX_CONTENT_CHARS = 20000


CLASSIFY_SYSTEM_PROMPT = """You classify study material for a ranking system.

1. Pick exactly one domain:
   - "STEM" (Science, Tech, Engineering, Math)
   - "Humanities" (History, Philosophy, Social Studies)
   - "Arts" (Design, Music, Fine Arts)
   - "Business" (Finance, Economics, Management)
   - "Language" (Linguistics, Literature)
   - "General" (Everything else)
2. Assign "difficultyMultiplier" between 1.0 and 1.5 by cognitive load:
   - STEM / complex logic: 1.3 - 1.5
   - Business / advanced humanities: 1.1 - 1.3
   - General / intro / arts: 1.0 - 1.2

JSON only (NO markdown, NO ```):
{"domain": "...", "difficultyMultiplier": 1.0}"""

CLASSIFY_PROMPT = """TITLE: {title}
SOURCE MATERIAL: "{content}"
"""


@dataclass(frozen=True)
class Classification:
    """Домен и множитель сложности урока."""

    domain: Domain
    difficulty_multiplier: float


DEFAULT_CLASSIFICATION = Classification(Domain.GENERAL, MIN_MULTIPLIER)


def extract_json(text: str) -> str:
    """Вырезать JSON объект из ответа модели (от первой { до последней })."""
    if not text:
        return "{}"
    first, last = text.find("{"), text.rfind("}")
    if first == -1 or last == -1 or first >= last:
        return text.strip()
    return text[first : last + 1]


def parse_classification(text: str) -> Classification:
    """
    Разобрать и нормализовать ответ классификатора.

    Битый JSON -> DEFAULT_CLASSIFICATION.
    """
    try:
        data = json.loads(extract_json(text))
    except json.JSONDecodeError:
        logger.error(f"Failed to parse classifier response: {text!r}")
        return DEFAULT_CLASSIFICATION

    if not isinstance(data, dict):
        return DEFAULT_CLASSIFICATION

    multiplier = data.get("difficultyMultiplier")
    try:
        multiplier = clamp_multiplier(multiplier)
    except (TypeError, ValueError):
        multiplier = MIN_MULTIPLIER

    return Classification(
        domain=lesson_domain(data.get("domain")),
        difficulty_multiplier=multiplier,
    )


class LessonClassifier:
    def __init__(self, provider: str | None = None, client: Any = None):
        """
        Инициализация клиента в зависимости от config.AI_PROVIDER.

        Providers:
        - "anthropic" (default)
        - "openai"

        Готовый client можно передать напрямую (тесты, свой transport).
        """
        self.provider = (provider or config.AI_PROVIDER).lower()

        if self.provider == "anthropic":
            self.model = config.ANTHROPIC_MODEL
            if client is None:
                if not config.ANTHROPIC_KEY:
                    raise ValueError("ANTHROPIC_KEY required for AI_PROVIDER=anthropic")
                client = AsyncAnthropic(
                    api_key=config.ANTHROPIC_KEY.get_secret_value(),
                    timeout=60.0,
                )
        else:
            self.provider = "openai"
            self.model = config.OPENAI_MODEL
            if client is None:
                if not config.OPENAI_KEY:
                    raise ValueError("OPENAI_KEY required for AI_PROVIDER=openai")
                client = AsyncOpenAI(
                    api_key=config.OPENAI_KEY.get_secret_value(),
                    timeout=60.0,
                )
        self.client = client

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        retry=retry_if_exception_type(
            (
                APIError,
                APIConnectionError,
                RateLimitError,
                AnthropicAPIError,
                AnthropicAPIConnectionError,
                AnthropicRateLimitError,
                ConnectionError,
            )
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
    async def _make_request(self, system: str, prompt: str) -> str:
        """
        Запрос к API с ретраями.

        AICODE-NOTE: Claude требует max_tokens и system отдельно от messages.
        """
        start_time = time.time()
        try:
            if self.provider == "anthropic":
                response = await self.client.messages.create(
                    model=self.model,
                    max_tokens=200,
                    system=system,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=0,
                )
                text = response.content[0].text
            else:
                response = await self.client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": system},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=0,
                )
                text = response.choices[0].message.content or ""
            latency = time.time() - start_time
            logger.info(f"Classifier request OK ({self.provider}). Latency: {latency:.2f}s")
            return text
        except Exception as e:
            logger.error(f"Classifier request failed ({self.provider}): {e}")
            raise

    async def classify(self, title: str, content: str) -> Classification:
        """
        Классифицировать материал урока.

        При ошибке API после всех ретраев возвращает General / 1.0.
        """
        prompt = CLASSIFY_PROMPT.format(title=title, content=content[:MAX_CONTENT_CHARS])
        try:
            response = await self._make_request(CLASSIFY_SYSTEM_PROMPT, prompt)
        except Exception:
            logger.error("All classifier retries failed. Using default classification.")
            return DEFAULT_CLASSIFICATION

        return parse_classification(response)


_classifier: LessonClassifier | None = None


def get_classifier() -> LessonClassifier:
    """Ленивый singleton (ключи API проверяются при первом использовании)."""
    global _classifier
    if _classifier is None:
        _classifier = LessonClassifier()
    return _classifier
