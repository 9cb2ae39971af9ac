"""
Answer Evaluator - Grades a learner's answer against the passage.

A reply lacking either `correct` (bool) or `explanation` (str) is a
GradingError, never a partial success.
"""

from langchain_core.messages import HumanMessage, SystemMessage

import config
from core.errors import GradingError
from core.models import GradingOutcome

from .llm import build_llm, clip, invoke_json
from .prompts import EVALUATION_SYSTEM_PROMPT, evaluation_user_prompt


class AnswerEvaluator:

    def __init__(self, llm=None, temperature: float = None):
        self.llm = llm or build_llm(
            temperature=config.EVALUATION_TEMPERATURE if temperature is None else temperature,
            max_tokens=config.EVALUATION_MAX_TOKENS,
        )

    def evaluate(self, question: str, answer: str, paragraph: str,
                 full_passage: str = "") -> GradingOutcome:
        question = clip(question, config.MAX_QUESTION_LENGTH)
        answer = clip(answer, config.MAX_ANSWER_LENGTH)
        paragraph = clip(paragraph, config.MAX_PARAGRAPH_LENGTH)
        if not question or not answer or not paragraph:
            raise GradingError("Missing required fields")

        messages = [
            SystemMessage(content=EVALUATION_SYSTEM_PROMPT),
            HumanMessage(content=evaluation_user_prompt(
                question=question,
                answer=answer,
                paragraph=paragraph,
                full_passage=clip(full_passage, config.MAX_PASSAGE_LENGTH),
            )),
        ]
        data = invoke_json(self.llm, messages, GradingError)

        correct = data.get("correct")
        explanation = data.get("explanation")
        if not isinstance(correct, bool) or not isinstance(explanation, str):
            raise GradingError("Invalid evaluation format")

        return GradingOutcome(correct=correct, explanation=explanation.strip())
