"""
Difficulty Recommender - Suggested tier for the next passage.

    pct = round(100 * correct / total)
    pct >= 90 -> advanced
    pct >= 70 -> intermediate
    otherwise -> beginner
"""

import math
from typing import Optional

from .errors import ValidationError
from .skills import DifficultyTier


def percentage(correct: int, total: int) -> int:
    """Whole-number percentage, halves rounded up."""
    return int(math.floor(100.0 * correct / total + 0.5))


class DifficultyRecommender:

    ADVANCED_THRESHOLD = 90
    INTERMEDIATE_THRESHOLD = 70

    def __init__(self, advanced_threshold: Optional[int] = None,
                 intermediate_threshold: Optional[int] = None):
        if advanced_threshold is not None:
            self.ADVANCED_THRESHOLD = advanced_threshold
        if intermediate_threshold is not None:
            self.INTERMEDIATE_THRESHOLD = intermediate_threshold

    def recommend(self, correct_count: int, total_count: int) -> DifficultyTier:
        """
        Recommend a tier from first-attempt performance.

        Raises ValidationError when total_count is zero; the caller then
        falls back to its own default tier.
        """
        if total_count <= 0:
            raise ValidationError("Cannot recommend a difficulty with no completed sections")
        if correct_count < 0 or correct_count > total_count:
            raise ValidationError(f"Invalid score {correct_count}/{total_count}")

        pct = percentage(correct_count, total_count)
        if pct >= self.ADVANCED_THRESHOLD:
            return DifficultyTier.ADVANCED
        if pct >= self.INTERMEDIATE_THRESHOLD:
            return DifficultyTier.INTERMEDIATE
        return DifficultyTier.BEGINNER
