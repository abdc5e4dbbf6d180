"""Character and sentence counting for Chinese text, plus feed text cleanup."""

import math
import re

# CJK Unified Ideographs
SCRIPT_CHARACTER = re.compile(r"[\u4e00-\u9fff]")
SENTENCE_DELIMITERS = "。！？；"
_SENTENCE_SPLIT = re.compile(f"[{SENTENCE_DELIMITERS}]")

_HTML_TAG = re.compile(r"<[^>]*>")
_HTML_ENTITY = re.compile(r"&[a-zA-Z0-9#]+;")
_SCRIPT_BLOCK = re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE)
_STYLE_BLOCK = re.compile(r"<style[^>]*>[\s\S]*?</style>", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_INLINE_WHITESPACE = re.compile(r"[^\S\n]+")
_BLANK_LINES = re.compile(r"\n\s*\n+")

CHARACTERS_PER_MINUTE = 250


def count_script_characters(text: str) -> int:
    """Count Chinese characters, ignoring Latin letters, digits, punctuation and spaces."""
    if not text:
        return 0
    return len(SCRIPT_CHARACTER.findall(text))


def count_sentences(text: str) -> int:
    """Count sentences delimited by 。！？；.

    Text that contains none of the delimiters counts as zero sentences,
    even when it is not empty.
    """
    if not text or not _SENTENCE_SPLIT.search(text):
        return 0
    return len([fragment for fragment in _SENTENCE_SPLIT.split(text) if fragment.strip()])


def reading_time_minutes(character_count: int) -> int:
    """Estimate reading time at 250 characters per minute, at least one minute.

    Halves round up, so 125 characters is one minute and 375 is two.
    """
    return max(1, math.floor(character_count / CHARACTERS_PER_MINUTE + 0.5))


def clean_text(text: str) -> str:
    """Strip HTML tags and entities and collapse whitespace."""
    if not text:
        return ""
    text = _HTML_TAG.sub("", text)
    text = _HTML_ENTITY.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def clean_content(text: str, max_length: int = 2000) -> str:
    """Clean an HTML article body, dropping script and style blocks."""
    if not text:
        return ""
    text = _SCRIPT_BLOCK.sub("", text)
    text = _STYLE_BLOCK.sub("", text)
    text = _HTML_TAG.sub(" ", text)
    text = _HTML_ENTITY.sub(" ", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()[:max_length]


def process_content(text: str, max_length: int = 1500) -> str:
    """Normalize feed text before analysis and storage.

    Runs of spaces collapse to one, blank lines collapse to a single
    newline, and the result is truncated to max_length characters.
    """
    if not text:
        return ""
    text = _INLINE_WHITESPACE.sub(" ", text)
    text = _BLANK_LINES.sub("\n", text)
    return text.strip()[:max_length]
