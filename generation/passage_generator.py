"""
Passage Generator - New reading passages at a requested difficulty.

Features:
    - Tier-specific vocabulary, sentence and concept guidelines
    - Length matched to a reference passage (reference_length / 5 words)
    - Adaptive guidance from the previous session's skill statistics
"""

from typing import Optional

from langchain_core.messages import HumanMessage, SystemMessage

import config
from core.errors import GenerationError
from core.passage import Passage
from core.skill_prioritizer import SkillPrioritizer
from core.skill_statistics import SkillStatistics
from core.skills import DifficultyTier

from .llm import build_llm, invoke_json
from .prompts import adaptive_guidance, passage_system_prompt


class PassageGenerator:

    def __init__(self, llm=None, temperature: float = None,
                 weakness_threshold: float = SkillPrioritizer.WEAKNESS_THRESHOLD):
        self.llm = llm or build_llm(
            temperature=config.PASSAGE_TEMPERATURE if temperature is None else temperature,
            max_tokens=config.PASSAGE_MAX_TOKENS,
        )
        self.weakness_threshold = weakness_threshold

    def generate(self, difficulty, reference_length: Optional[int] = None,
                 skill_stats: Optional[SkillStatistics] = None) -> Passage:
        """
        Write a passage. Raises GenerationError on an unknown tier, a failed
        call, a reply without title/content, or content with no paragraphs.
        """
        try:
            tier = difficulty if isinstance(difficulty, DifficultyTier) else DifficultyTier.parse(difficulty)
        except ValueError as exc:
            raise GenerationError("Invalid difficulty level") from exc

        length = reference_length if reference_length and reference_length > 0 else config.DEFAULT_REFERENCE_LENGTH
        guidance = adaptive_guidance(skill_stats, self.weakness_threshold)

        messages = [
            SystemMessage(content=passage_system_prompt(tier, length, guidance)),
            HumanMessage(content=f"Generate a {tier.value} reading comprehension passage."),
        ]
        data = invoke_json(self.llm, messages, GenerationError)

        title = data.get("title")
        content = data.get("content")
        if not isinstance(title, str) or not title.strip() or not isinstance(content, str) or not content.strip():
            raise GenerationError("Invalid response format from LLM")

        passage = Passage(title=title.strip(), content=content.strip(), difficulty=tier)
        if not passage.sections:
            raise GenerationError("Generated passage has no paragraphs")
        return passage
