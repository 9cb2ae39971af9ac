"""
Question Generator - One comprehension question per passage section.

Features:
    - Skill-classified questions (Understanding / Reasoning / Application)
    - Adaptive focus on the session's prioritized skills
    - Input trimmed to configured limits before the LLM is called
"""

from typing import List, Optional

from langchain_core.messages import HumanMessage, SystemMessage

import config
from core.errors import GenerationError
from core.models import GeneratedQuestion
from core.skills import ComprehensionSkill, SKILL_SOFT_PROMPTS

from .llm import build_llm, clip, invoke_json
from .prompts import question_system_prompt, question_user_prompt


class QuestionGenerator:
    """Generates and classifies a question for one section."""

    def __init__(self, llm=None, temperature: float = None):
        self.llm = llm or build_llm(
            temperature=config.QUESTION_TEMPERATURE if temperature is None else temperature,
            max_tokens=config.QUESTION_MAX_TOKENS,
        )

    def generate(self, paragraph: str, full_passage: str = "", passage_title: str = "",
                 prioritized_skills: Optional[List[ComprehensionSkill]] = None) -> GeneratedQuestion:
        """
        Generate a question for `paragraph`.

        Raises GenerationError for a missing paragraph, a failed call, or a
        reply without a question or a known skill.
        """
        paragraph = clip(paragraph, config.MAX_PARAGRAPH_LENGTH)
        if not paragraph:
            raise GenerationError("Invalid paragraph provided")

        messages = [
            SystemMessage(content=question_system_prompt(prioritized_skills or [])),
            HumanMessage(content=question_user_prompt(
                paragraph=paragraph,
                full_passage=clip(full_passage, config.MAX_PASSAGE_LENGTH),
                passage_title=clip(passage_title, config.MAX_TITLE_LENGTH),
            )),
        ]
        data = invoke_json(self.llm, messages, GenerationError)

        question = data.get("question")
        if not isinstance(question, str) or not question.strip():
            raise GenerationError("LLM response is missing the question")

        try:
            skill = ComprehensionSkill.parse(data.get("skill", ""))
        except ValueError as exc:
            raise GenerationError(f"LLM response has an invalid skill: {data.get('skill')!r}") from exc

        return GeneratedQuestion(
            question=question.strip(),
            skill=skill,
            soft_prompt=SKILL_SOFT_PROMPTS[skill],
        )
