"""Tests for core/difficulty_recommender.py"""

import sys
sys.path.append(".")

import pytest

from core.difficulty_recommender import DifficultyRecommender, percentage
from core.errors import ValidationError
from core.skills import DifficultyTier


def test_recommendation_bands():
    recommender = DifficultyRecommender()

    assert recommender.recommend(9, 10) == DifficultyTier.ADVANCED
    assert recommender.recommend(10, 10) == DifficultyTier.ADVANCED
    assert recommender.recommend(7, 10) == DifficultyTier.INTERMEDIATE
    assert recommender.recommend(6, 10) == DifficultyTier.BEGINNER
    assert recommender.recommend(0, 5) == DifficultyTier.BEGINNER


def test_percentage_rounds_halves_up():
    # 13/20 = 65%, 2/3 = 66.67% -> 67, 1/8 = 12.5% -> 13
    assert percentage(13, 20) == 65
    assert percentage(2, 3) == 67
    assert percentage(1, 8) == 13


def test_rounding_applies_before_thresholds():
    # 8/9 = 88.9% -> 89, still intermediate; 62/69 = 89.86% -> 90, advanced
    recommender = DifficultyRecommender()

    assert recommender.recommend(8, 9) == DifficultyTier.INTERMEDIATE
    assert recommender.recommend(62, 69) == DifficultyTier.ADVANCED


def test_zero_total_is_rejected():
    with pytest.raises(ValidationError):
        DifficultyRecommender().recommend(0, 0)


def test_score_above_total_is_rejected():
    with pytest.raises(ValidationError):
        DifficultyRecommender().recommend(4, 3)


def test_thresholds_are_overridable():
    recommender = DifficultyRecommender(advanced_threshold=80, intermediate_threshold=50)

    assert recommender.recommend(8, 10) == DifficultyTier.ADVANCED
    assert recommender.recommend(5, 10) == DifficultyTier.INTERMEDIATE
    assert recommender.recommend(4, 10) == DifficultyTier.BEGINNER
