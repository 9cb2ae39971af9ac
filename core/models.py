"""
Records exchanged between the engine and its collaborators.

    - GeneratedQuestion: question text + skill + soft prompt label
    - GradingOutcome: correct flag + explanation
    - AnsweredQuestion: immutable first-grading record, one per section
    - CachedQuestion / CachedAnswer: per-section cache entries
    - RequestTicket: tag for an outstanding generation or grading request
"""

from dataclasses import dataclass
from typing import Optional

from .skills import ComprehensionSkill, SKILL_SOFT_PROMPTS


@dataclass(frozen=True)
class GeneratedQuestion:
    question: str
    skill: ComprehensionSkill
    soft_prompt: Optional[str] = None

    @property
    def label(self) -> str:
        return self.soft_prompt or SKILL_SOFT_PROMPTS[self.skill]

    def to_dict(self) -> dict:
        return {"question": self.question, "skill": self.skill.value, "soft_prompt": self.label}


@dataclass(frozen=True)
class GradingOutcome:
    correct: bool
    explanation: str

    def to_dict(self) -> dict:
        return {"correct": self.correct, "explanation": self.explanation}


@dataclass(frozen=True)
class AnsweredQuestion:
    """Created once per section, on its first grading outcome."""
    section_index: int
    answer_text: str
    skill: ComprehensionSkill
    correct_on_first_attempt: bool

    def to_dict(self) -> dict:
        return {
            "section_index": self.section_index,
            "answer": self.answer_text,
            "skill": self.skill.value,
            "correct": self.correct_on_first_attempt,
        }


@dataclass(frozen=True)
class CachedQuestion:
    question: str
    skill: ComprehensionSkill


@dataclass(frozen=True)
class CachedAnswer:
    """Most recent submission for a section (overwritten on retry)."""
    answer_text: str
    outcome: GradingOutcome
    skill: ComprehensionSkill


@dataclass(frozen=True)
class RequestTicket:
    """
    Tag for one outstanding external request.

    A response is applied only while its ticket is still the latest one
    issued for that purpose; anything else is stale and discarded.
    """
    passage_id: str
    section_index: int
    sequence: int
