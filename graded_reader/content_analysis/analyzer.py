"""Heuristic analysis of Chinese article text."""

from dataclasses import dataclass, field
from typing import List, Sequence

import structlog

from graded_reader.text_metrics import (
    count_script_characters,
    count_sentences,
    reading_time_minutes,
)

from .difficulty import Difficulty, classify
from .tables import (
    COMMON_WORDS,
    COMPLEX_WORDS,
    DEFAULT_TAG,
    GRAMMAR_PATTERNS,
    MAX_TAGS,
    TAG_RULES,
    GrammarPattern,
    TagRule,
)

logger = structlog.get_logger(__name__)

MIN_COMPLEXITY = 1.0
MAX_COMPLEXITY = 10.0


@dataclass
class ArticleAnalysis:
    """Signals derived from an article's source text."""

    difficulty: Difficulty
    reading_time: int
    word_count: int
    character_count: int
    sentences: int
    avg_sentence_length: float
    vocabulary_complexity: float
    grammar_complexity: float
    tags: List[str] = field(default_factory=list)


class ContentAnalyzer:
    """Derives classifier inputs, reading time and tags from raw text.

    The word lists and pattern tables default to the ones in
    ``graded_reader.content_analysis.tables`` and can be swapped per instance.
    """

    def __init__(
        self,
        common_words: Sequence[str] = COMMON_WORDS,
        complex_words: Sequence[str] = COMPLEX_WORDS,
        grammar_patterns: Sequence[GrammarPattern] = GRAMMAR_PATTERNS,
        tag_rules: Sequence[TagRule] = TAG_RULES,
    ):
        self.common_words = tuple(common_words)
        self.complex_words = tuple(complex_words)
        self.grammar_patterns = tuple(grammar_patterns)
        self.tag_rules = tuple(tag_rules)

    def analyze(self, text: str) -> ArticleAnalysis:
        """Run every heuristic over text and classify it."""
        character_count = count_script_characters(text)
        sentences = count_sentences(text)
        avg_sentence_length = character_count / max(1, sentences)
        vocabulary_complexity = self.vocabulary_complexity(text)
        grammar_complexity = self.grammar_complexity(text)

        difficulty = classify(
            vocabulary_complexity, avg_sentence_length, grammar_complexity, character_count
        )
        analysis = ArticleAnalysis(
            difficulty=difficulty,
            reading_time=reading_time_minutes(character_count),
            word_count=character_count,
            character_count=character_count,
            sentences=sentences,
            avg_sentence_length=avg_sentence_length,
            vocabulary_complexity=vocabulary_complexity,
            grammar_complexity=grammar_complexity,
            tags=self.extract_tags(text),
        )
        logger.debug(
            "content_analyzed",
            difficulty=difficulty.value,
            characters=character_count,
            sentences=sentences,
            vocabulary=round(vocabulary_complexity, 2),
            grammar=grammar_complexity,
        )
        return analysis

    def vocabulary_complexity(self, text: str) -> float:
        """Score 1-10 from the share of technical and everyday tokens.

        Tokens are whitespace separated, so unspaced Chinese text is a single
        token. A token containing a technical term counts as complex; otherwise
        one containing an everyday word counts as common.
        """
        tokens = text.split() or [text]
        complex_count = 0
        common_count = 0
        for token in tokens:
            if any(word in token for word in self.complex_words):
                complex_count += 1
            elif any(word in token for word in self.common_words):
                common_count += 1

        complex_ratio = complex_count / len(tokens)
        common_ratio = common_count / len(tokens)
        score = complex_ratio * 10 + (1 - common_ratio) * 3
        return min(MAX_COMPLEXITY, max(MIN_COMPLEXITY, score))

    def grammar_complexity(self, text: str) -> float:
        """Score 1-10, adding each pattern's weight per match."""
        complexity = MIN_COMPLEXITY
        for rule in self.grammar_patterns:
            matches = rule.pattern.findall(text)
            if matches:
                complexity += len(matches) * rule.weight
        return min(MAX_COMPLEXITY, complexity)

    def extract_tags(self, text: str) -> List[str]:
        """Suggest up to five tags, always starting with the default tag.

        Rules are applied in table order, so earlier rules win when more
        tags match than fit.
        """
        tags = [DEFAULT_TAG]
        for rule in self.tag_rules:
            if rule.tag not in tags and rule.pattern.search(text):
                tags.append(rule.tag)
        return tags[:MAX_TAGS]
