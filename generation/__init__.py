"""
Generation module - LLM-backed collaborators of the session engine.

Components:
    - question_generator: one skill-classified question per section
    - answer_evaluator: grades answers against the passage
    - passage_generator: new passages at a difficulty tier
    - prompts: prompt builders shared by the above
"""

from .question_generator import QuestionGenerator
from .answer_evaluator import AnswerEvaluator
from .passage_generator import PassageGenerator

__all__ = [
    "QuestionGenerator",
    "AnswerEvaluator",
    "PassageGenerator",
]
