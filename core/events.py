"""
Section events - Typed notifications from a SectionFlowController.

    - QuestionGenerated: a freshly generated question was delivered
    - SectionScored: the section's first grading outcome (emitted once)
    - AnswerGraded: a later grading outcome for a retried section
"""

from dataclasses import dataclass
from typing import Callable, Union

from .models import GradingOutcome
from .skills import ComprehensionSkill


@dataclass(frozen=True)
class QuestionGenerated:
    section_index: int
    question: str
    skill: ComprehensionSkill


@dataclass(frozen=True)
class SectionScored:
    section_index: int
    correct_on_first_attempt: bool
    answer_text: str
    outcome: GradingOutcome
    skill: ComprehensionSkill


@dataclass(frozen=True)
class AnswerGraded:
    section_index: int
    answer_text: str
    outcome: GradingOutcome
    skill: ComprehensionSkill
    attempt: int


SectionEvent = Union[QuestionGenerated, SectionScored, AnswerGraded]
EventHandler = Callable[[SectionEvent], None]
