"""Offline glossary translator."""

import re
from typing import Dict

import structlog

from .base import KNOWN_TITLES, TranslationRequest, TranslationResponse, Translator

logger = structlog.get_logger(__name__)

ZH_EN_GLOSSARY: Dict[str, str] = {
    "人工智能": "artificial intelligence",
    "机器学习": "machine learning",
    "深度学习": "deep learning",
    "技术": "technology",
    "发展": "development",
    "创新": "innovation",
    "应用": "application",
    "系统": "system",
    "服务": "service",
    "产品": "product",
    "用户": "user",
    "数据": "data",
    "算法": "algorithm",
    "模型": "model",
    "平台": "platform",
    "公司": "company",
    "市场": "market",
    "行业": "industry",
    "未来": "future",
    "智能": "intelligent",
    "自动": "automatic",
    "效率": "efficiency",
    "体验": "experience",
    "功能": "function",
    "特性": "feature",
    "性能": "performance",
    "质量": "quality",
    "安全": "security",
    "隐私": "privacy",
}

EN_ZH_GLOSSARY: Dict[str, str] = {english: chinese for chinese, english in ZH_EN_GLOSSARY.items()}


class GlossaryTranslator(Translator):
    """Word-for-word translation from a fixed glossary.

    Used in development and whenever no API key is configured. Whole known
    headlines translate exactly; other text has glossary terms replaced in
    place, and text with no known term is returned with a marker prefix.
    """

    name = "glossary"

    def translate(self, request: TranslationRequest) -> TranslationResponse:
        text = request.text
        confidence = 0.85

        if request.from_language == "zh" and request.to_language == "en":
            translated = self._chinese_to_english(text)
        elif request.from_language == "en" and request.to_language == "zh":
            translated = self._english_to_chinese(text)
        else:
            translated = f"[Translated from {request.from_language} to {request.to_language}] {text}"
            confidence = 0.7

        logger.debug("glossary_translation", length=len(text), confidence=confidence)
        return TranslationResponse(
            translated_text=translated,
            original_text=text,
            from_language=request.from_language,
            to_language=request.to_language,
            confidence=confidence,
        )

    @staticmethod
    def _chinese_to_english(text: str) -> str:
        if text in KNOWN_TITLES:
            return KNOWN_TITLES[text]

        translated = text
        for chinese, english in ZH_EN_GLOSSARY.items():
            translated = translated.replace(chinese, english)

        if translated == text:
            return f"[English translation] {text}"
        return translated

    @staticmethod
    def _english_to_chinese(text: str) -> str:
        translated = text
        for english, chinese in EN_ZH_GLOSSARY.items():
            translated = re.sub(re.escape(english), chinese, translated, flags=re.IGNORECASE)

        if translated == text:
            return f"[中文翻译] {text}"
        return translated
