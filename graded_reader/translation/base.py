"""Translation request/response models and the translator interface."""

import re
from abc import ABC, abstractmethod
from typing import Dict, List

from pydantic import BaseModel, Field

_CHINESE = re.compile(r"[\u4e00-\u9fff]")
_LATIN = re.compile(r"[a-zA-Z]")

# Translations for the sample feed's headlines
KNOWN_TITLES: Dict[str, str] = {
    "ChatGPT推出新功能：支持实时语音对话": "ChatGPT Launches New Feature: Real-time Voice Conversation Support",
    "苹果发布iOS 18：AI功能全面升级": "Apple Releases iOS 18: Comprehensive AI Feature Upgrades",
    "特斯拉机器人Optimus最新进展：已能完成复杂任务": "Tesla Robot Optimus Latest Progress: Now Capable of Complex Tasks",
    "微软Azure AI服务新突破：多模态理解能力大幅提升": "Microsoft Azure AI Service Breakthrough: Significant Improvement in Multimodal Understanding",
    "字节跳动发布AI绘画工具：挑战Midjourney和DALL-E": "ByteDance Releases AI Drawing Tool: Challenging Midjourney and DALL-E",
}


class TranslationRequest(BaseModel):
    """Text to translate and the language pair."""

    text: str
    from_language: str = "zh"
    to_language: str = "en"


class TranslationResponse(BaseModel):
    """A translated text with the translator's confidence."""

    translated_text: str
    original_text: str
    from_language: str
    to_language: str
    confidence: float = Field(..., ge=0.0, le=1.0)


class Translator(ABC):
    """Translates text between Chinese and English."""

    name = "translator"

    @abstractmethod
    def translate(self, request: TranslationRequest) -> TranslationResponse:
        """Translate one request.

        Raises:
            TranslationError: If the backend fails
        """
        raise NotImplementedError

    def batch_translate(self, requests: List[TranslationRequest]) -> List[TranslationResponse]:
        """Translate requests one after another, preserving order."""
        return [self.translate(request) for request in requests]


def detect_language(text: str) -> str:
    """Return "zh" or "en" when text uses only one script, else "unknown"."""
    has_chinese = bool(_CHINESE.search(text))
    has_latin = bool(_LATIN.search(text))
    if has_chinese and not has_latin:
        return "zh"
    if has_latin and not has_chinese:
        return "en"
    return "unknown"


def placeholder_translation(title: str) -> str:
    """Deterministic stand-in used when translation fails during ingestion."""
    return KNOWN_TITLES.get(title, f"English translation of: {title}")
