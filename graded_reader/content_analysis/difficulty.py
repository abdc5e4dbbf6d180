"""Difficulty levels and the composite-score classifier."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

EASY_MAX_SCORE = 3.5
MEDIUM_MAX_SCORE = 6.5
MAX_SCORE = 10.0


class Difficulty(str, Enum):
    """Reading difficulty buckets, from easiest to hardest."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


DIFFICULTY_ORDER: List[Difficulty] = [Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD]


@dataclass(frozen=True)
class DifficultyCriteria:
    """Typical signal values for articles at a level."""

    vocabulary_complexity: float
    sentence_length: float
    grammar_complexity: float
    character_count: int


@dataclass(frozen=True)
class DifficultyInfo:
    """Display metadata for a difficulty level."""

    level: Difficulty
    name: str
    description: str
    color: str
    criteria: DifficultyCriteria


DIFFICULTY_INFO: Dict[Difficulty, DifficultyInfo] = {
    Difficulty.EASY: DifficultyInfo(
        level=Difficulty.EASY,
        name="简单",
        description="适合中文初学者，使用常用词汇和简单句式",
        color="green",
        criteria=DifficultyCriteria(3, 15, 2, 500),
    ),
    Difficulty.MEDIUM: DifficultyInfo(
        level=Difficulty.MEDIUM,
        name="中等",
        description="适合有一定中文基础的学习者，包含成语和复合句",
        color="yellow",
        criteria=DifficultyCriteria(6, 25, 5, 800),
    ),
    Difficulty.HARD: DifficultyInfo(
        level=Difficulty.HARD,
        name="困难",
        description="适合高级学习者，包含专业术语和复杂语法结构",
        color="red",
        criteria=DifficultyCriteria(9, 35, 8, 1200),
    ),
}


def difficulty_order(level: Difficulty) -> int:
    """Return the sort position of a level, 0 being the easiest."""
    return DIFFICULTY_ORDER.index(Difficulty(level))


def _clamp(value: float) -> float:
    return max(0.0, min(float(value), MAX_SCORE))


def composite_score(
    vocabulary_complexity: float,
    avg_sentence_length: float,
    grammar_complexity: float,
    character_count: float,
) -> float:
    """Average the four signals after normalizing each to 0-10.

    Sentence length is scaled by 1/5 and character count by 1/200.
    """
    vocabulary_score = _clamp(vocabulary_complexity)
    length_score = _clamp(avg_sentence_length / 5)
    grammar_score = _clamp(grammar_complexity)
    size_score = _clamp(character_count / 200)
    return (vocabulary_score + length_score + grammar_score + size_score) / 4


def classify(
    vocabulary_complexity: float,
    avg_sentence_length: float,
    grammar_complexity: float,
    character_count: float,
) -> Difficulty:
    """Bucket an article by its composite score.

    Scores up to 3.5 are easy, up to 6.5 medium, anything above hard.
    """
    score = composite_score(
        vocabulary_complexity, avg_sentence_length, grammar_complexity, character_count
    )
    if score <= EASY_MAX_SCORE:
        return Difficulty.EASY
    if score <= MEDIUM_MAX_SCORE:
        return Difficulty.MEDIUM
    return Difficulty.HARD
