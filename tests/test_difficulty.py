"""Tests for the difficulty classifier."""
import pytest

from graded_reader.content_analysis import (
    DIFFICULTY_INFO,
    DIFFICULTY_ORDER,
    Difficulty,
    classify,
    composite_score,
    difficulty_order,
)


class TestCompositeScore:
    def test_mean_of_normalized_signals(self):
        assert composite_score(4, 20, 2, 400) == pytest.approx((4 + 4 + 2 + 2) / 4)

    def test_signals_clamped_to_ten(self):
        assert composite_score(20, 0, 0, 0) == 2.5
        assert composite_score(100, 1000, 100, 100000) == 10

    def test_signals_clamped_to_zero(self):
        assert composite_score(-5, -10, -5, -200) == 0


class TestClassify:
    def test_easy_boundary_inclusive(self):
        assert composite_score(3.5, 17.5, 3.5, 700) == 3.5
        assert classify(3.5, 17.5, 3.5, 700) == Difficulty.EASY

    def test_just_above_easy_is_medium(self):
        assert classify(3.6, 17.5, 3.5, 700) == Difficulty.MEDIUM

    def test_medium_boundary_inclusive(self):
        assert composite_score(6.5, 32.5, 6.5, 1300) == 6.5
        assert classify(6.5, 32.5, 6.5, 1300) == Difficulty.MEDIUM

    def test_just_above_medium_is_hard(self):
        assert classify(6.6, 32.5, 6.5, 1300) == Difficulty.HARD

    def test_extremes(self):
        assert classify(0, 0, 0, 0) == Difficulty.EASY
        assert classify(10, 100, 10, 5000) == Difficulty.HARD

    def test_pure(self):
        results = {classify(5.2, 22.0, 4.5, 820) for _ in range(10)}
        assert len(results) == 1


def test_difficulty_order():
    assert DIFFICULTY_ORDER == [Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD]
    assert difficulty_order(Difficulty.EASY) == 0
    assert difficulty_order("hard") == 2


def test_difficulty_info_covers_every_level():
    assert set(DIFFICULTY_INFO) == set(Difficulty)
    assert DIFFICULTY_INFO[Difficulty.EASY].name == "简单"
    assert DIFFICULTY_INFO[Difficulty.HARD].color == "red"


def test_difficulty_values():
    assert Difficulty("easy") is Difficulty.EASY
    assert Difficulty.MEDIUM.value == "medium"
