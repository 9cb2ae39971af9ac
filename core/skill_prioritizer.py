"""
Skill Prioritizer - Which skills the next question should favour.

Policy:
    1. Nothing answered yet -> [] (no preference, generator chooses freely)
    2. Untested skills first
    3. Then tested skills below WEAKNESS_THRESHOLD
Both groups keep declaration order. The result is advisory.
"""

from typing import List, Optional

from .skill_statistics import SkillStatistics
from .skills import ComprehensionSkill


class SkillPrioritizer:
    """Orders skills for the question generator from current statistics."""

    WEAKNESS_THRESHOLD = 0.70

    def __init__(self, weakness_threshold: Optional[float] = None):
        if weakness_threshold is not None:
            self.WEAKNESS_THRESHOLD = weakness_threshold

    def prioritize(self, stats: SkillStatistics) -> List[ComprehensionSkill]:
        if stats.total_tested == 0:
            return []

        priorities: List[ComprehensionSkill] = []
        for skill in stats.untested() + stats.weak(self.WEAKNESS_THRESHOLD):
            if skill not in priorities:
                priorities.append(skill)
        return priorities
