"""Moonshot (Kimi) chat-completions translator."""

import re
import time
from typing import Optional, Tuple

import requests
import structlog
from cachetools import TTLCache

from graded_reader.core.errors import TranslationError
from graded_reader.metrics import metrics

from .base import TranslationRequest, TranslationResponse, Translator
from .glossary import GlossaryTranslator

logger = structlog.get_logger(__name__)

SYSTEM_PROMPT = (
    "你是一个专业的中英文翻译助手，专门为中文学习者提供准确、自然的翻译服务。请保持原文的语调和风格。"
)
_ANSWER_PREFIX = re.compile(r"^\s*(翻译|Translation)[：:]", re.MULTILINE)


def build_prompt(request: TranslationRequest) -> str:
    """Build the user prompt for a language pair."""
    if request.from_language == "zh" and request.to_language == "en":
        return f"请将以下中文文本翻译成英文，保持原文的意思和语调：\n\n{request.text}"
    if request.from_language == "en" and request.to_language == "zh":
        return f"请将以下英文文本翻译成中文，保持原文的意思和语调：\n\n{request.text}"
    return (
        f"请将以下文本从{request.from_language}翻译成{request.to_language}：\n\n{request.text}"
    )


def clean_translation(text: str) -> str:
    """Drop "翻译：" / "Translation:" prefixes the model sometimes adds."""
    return _ANSWER_PREFIX.sub("", text).strip()


class KimiTranslator(Translator):
    """Translates through the Moonshot chat-completions API.

    Without an ``sk-`` API key every request goes to the offline
    glossary translator instead. Responses are cached per text and
    language pair.
    """

    name = "kimi"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.moonshot.cn/v1",
        model: str = "moonshot-v1-8k",
        timeout: float = 30.0,
        cache_ttl: int = 3600,
        cache_size: int = 256,
        session: Optional[requests.Session] = None,
        fallback: Optional[Translator] = None,
    ):
        """Initialize the translator.

        Args:
            api_key: Moonshot API key
            base_url: API base URL
            model: Chat model name
            timeout: Request timeout in seconds
            cache_ttl: Seconds a cached translation stays valid
            cache_size: Maximum number of cached translations
            session: Optional requests session, mainly for tests
            fallback: Translator used when no usable key is configured
        """
        self.api_key = api_key or ""
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.session = session or requests.Session()
        self.fallback = fallback or GlossaryTranslator()
        self._cache: TTLCache = TTLCache(maxsize=cache_size, ttl=cache_ttl)
        self.request_counter = metrics.get_metric("translation_requests_total")

    @property
    def enabled(self) -> bool:
        return self.api_key.startswith("sk-")

    def translate(self, request: TranslationRequest) -> TranslationResponse:
        if not self.enabled:
            return self.fallback.translate(request)

        key: Tuple[str, str, str] = (request.text, request.from_language, request.to_language)
        cached = self._cache.get(key)
        if cached is not None:
            self.request_counter.labels(backend=self.name, status="cached").inc()
            return cached

        response = self._call_api(request)
        self._cache[key] = response
        return response

    def _call_api(self, request: TranslationRequest) -> TranslationResponse:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(request)},
            ],
            "temperature": 0.3,
            "max_tokens": 2000,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        start_time = time.time()
        try:
            response = self.session.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            self.request_counter.labels(backend=self.name, status="error").inc()
            logger.error("translation_request_failed", error=str(e))
            raise TranslationError(f"Kimi API error: {e}") from e

        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content") or ""
        self.request_counter.labels(backend=self.name, status="success").inc()
        logger.info(
            "translation_completed",
            backend=self.name,
            length=len(request.text),
            duration=round(time.time() - start_time, 3),
        )
        return TranslationResponse(
            translated_text=clean_translation(content),
            original_text=request.text,
            from_language=request.from_language,
            to_language=request.to_language,
            confidence=0.9,
        )
