"""
Skill Statistics - Tested/correct tallies per comprehension skill.

Always recomputed from the answered-question log, never stored on its own.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .models import AnsweredQuestion
from .skills import ComprehensionSkill


@dataclass(frozen=True)
class SkillTally:
    tested: int = 0
    correct: int = 0

    @property
    def accuracy(self) -> float:
        """Fraction correct; 0.0 for an untested skill."""
        if self.tested == 0:
            return 0.0
        return self.correct / self.tested


class SkillStatistics:
    """
    Per-skill tallies over a log of AnsweredQuestion records.

    All three skills are always present. The fold is order-independent.
    """

    def __init__(self, tallies: Optional[Dict[ComprehensionSkill, SkillTally]] = None):
        tallies = tallies or {}
        self._tallies: Dict[ComprehensionSkill, SkillTally] = {
            skill: tallies.get(skill, SkillTally()) for skill in ComprehensionSkill
        }

    @classmethod
    def compute(cls, log: Iterable[AnsweredQuestion]) -> "SkillStatistics":
        counts = {skill: [0, 0] for skill in ComprehensionSkill}
        for record in log:
            counts[record.skill][0] += 1
            if record.correct_on_first_attempt:
                counts[record.skill][1] += 1
        return cls({skill: SkillTally(tested, correct) for skill, (tested, correct) in counts.items()})

    @classmethod
    def from_dict(cls, data: dict) -> "SkillStatistics":
        """Build from {"Understanding": {"tested": 2, "correct": 1}, ...}."""
        tallies = {}
        for key, value in (data or {}).items():
            skill = ComprehensionSkill.parse(key)
            tallies[skill] = SkillTally(
                tested=int(value.get("tested", 0)),
                correct=int(value.get("correct", 0)),
            )
        return cls(tallies)

    def __getitem__(self, skill: ComprehensionSkill) -> SkillTally:
        return self._tallies[skill]

    def __iter__(self):
        return iter(self._tallies.items())

    def __eq__(self, other) -> bool:
        if not isinstance(other, SkillStatistics):
            return NotImplemented
        return self._tallies == other._tallies

    def __repr__(self) -> str:
        inner = ", ".join(f"{s.value}={t.correct}/{t.tested}" for s, t in self._tallies.items())
        return f"SkillStatistics({inner})"

    @property
    def total_tested(self) -> int:
        return sum(t.tested for t in self._tallies.values())

    @property
    def total_correct(self) -> int:
        return sum(t.correct for t in self._tallies.values())

    def untested(self) -> List[ComprehensionSkill]:
        """Skills with no answered question, in declaration order."""
        return [s for s, t in self._tallies.items() if t.tested == 0]

    def weak(self, threshold: float) -> List[ComprehensionSkill]:
        """Tested skills whose accuracy is below threshold, in declaration order."""
        return [s for s, t in self._tallies.items() if t.tested > 0 and t.accuracy < threshold]

    def to_dict(self) -> dict:
        return {
            skill.value: {"tested": tally.tested, "correct": tally.correct}
            for skill, tally in self._tallies.items()
        }
