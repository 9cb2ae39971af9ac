"""
Core module - Session progression and adaptive scheduling.

Components:
    - skills: comprehension skills and difficulty tiers
    - skill_statistics: per-skill tested/correct tallies
    - skill_prioritizer: untested-then-weak skill ordering
    - difficulty_recommender: score -> next passage tier
    - section_flow: per-section question state machine
    - session_controller: passage-wide orchestration, caches and scoring
"""

from .errors import QuizError, GenerationError, GradingError, ValidationError
from .skills import ComprehensionSkill, DifficultyTier
from .models import AnsweredQuestion, GeneratedQuestion, GradingOutcome, RequestTicket
from .passage import Passage, DEFAULT_PASSAGE
from .skill_statistics import SkillStatistics, SkillTally
from .skill_prioritizer import SkillPrioritizer
from .difficulty_recommender import DifficultyRecommender
from .section_flow import SectionFlowController, SectionState
from .session_controller import SessionController

__all__ = [
    "QuizError",
    "GenerationError",
    "GradingError",
    "ValidationError",
    "ComprehensionSkill",
    "DifficultyTier",
    "AnsweredQuestion",
    "GeneratedQuestion",
    "GradingOutcome",
    "RequestTicket",
    "Passage",
    "DEFAULT_PASSAGE",
    "SkillStatistics",
    "SkillTally",
    "SkillPrioritizer",
    "DifficultyRecommender",
    "SectionFlowController",
    "SectionState",
    "SessionController",
]
