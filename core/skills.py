"""
Skills & Difficulty - The fixed vocabulary the engine reasons about.

Components:
    - ComprehensionSkill: Understanding / Reasoning / Application
    - DifficultyTier: beginner / intermediate / advanced
    - Per-skill descriptions (for prompts) and soft prompts (for display)
    - Per-tier metadata and passage-writing guidelines
"""

from enum import Enum
from typing import Dict


class ComprehensionSkill(str, Enum):
    """Closed set of comprehension skills. Declaration order is priority order."""
    UNDERSTANDING = "Understanding"
    REASONING = "Reasoning"
    APPLICATION = "Application"

    @classmethod
    def parse(cls, value: str) -> "ComprehensionSkill":
        """Case-insensitive lookup by value ("reasoning" -> REASONING)."""
        for skill in cls:
            if skill.value.lower() == str(value).strip().lower():
                return skill
        raise ValueError(f"Unknown comprehension skill: {value!r}")


class DifficultyTier(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @classmethod
    def parse(cls, value: str) -> "DifficultyTier":
        for tier in cls:
            if tier.value == str(value).strip().lower():
                return tier
        raise ValueError(f"Unknown difficulty tier: {value!r}")


# ==================== Skill Metadata ====================

SKILL_DESCRIPTIONS: Dict[ComprehensionSkill, str] = {
    ComprehensionSkill.UNDERSTANDING: "literal comprehension of facts and details directly stated in the text",
    ComprehensionSkill.REASONING: "inferential thinking about implicit meanings, relationships, and conclusions",
    ComprehensionSkill.APPLICATION: "applying concepts from the text to new situations or real-world scenarios",
}

SKILL_SOFT_PROMPTS: Dict[ComprehensionSkill, str] = {
    ComprehensionSkill.UNDERSTANDING: "Show what you remember from the passage.",
    ComprehensionSkill.REASONING: "Think deeply about what the passage suggests.",
    ComprehensionSkill.APPLICATION: "How might you use this information?",
}


# ==================== Difficulty Metadata ====================

DIFFICULTY_METADATA: Dict[DifficultyTier, Dict[str, str]] = {
    DifficultyTier.BEGINNER: {
        "label": "Beginner",
        "description": "Simple vocabulary and straightforward concepts",
        "reading_level": "Grades 3-5",
    },
    DifficultyTier.INTERMEDIATE: {
        "label": "Intermediate",
        "description": "Moderate complexity with some abstract ideas",
        "reading_level": "Grades 6-8",
    },
    DifficultyTier.ADVANCED: {
        "label": "Advanced",
        "description": "Complex vocabulary and sophisticated concepts",
        "reading_level": "Grades 9+",
    },
}

DIFFICULTY_GUIDELINES: Dict[DifficultyTier, Dict[str, str]] = {
    DifficultyTier.BEGINNER: {
        "vocabulary": "Use simple, common vocabulary suitable for ages 8-10. Avoid complex or technical terms.",
        "sentences": "Use shorter sentences (10-15 words average) with simple structure.",
        "concepts": "Focus on concrete, familiar concepts with straightforward explanations.",
        "grade_level": "4th-5th grade reading level",
    },
    DifficultyTier.INTERMEDIATE: {
        "vocabulary": "Use age-appropriate vocabulary for ages 10-12. Include some challenging words with context clues.",
        "sentences": "Use varied sentence structures with moderate complexity (15-20 words average).",
        "concepts": "Include both concrete and some abstract concepts with clear explanations.",
        "grade_level": "6th-7th grade reading level",
    },
    DifficultyTier.ADVANCED: {
        "vocabulary": "Use advanced vocabulary suitable for ages 12-14. Include technical or domain-specific terms.",
        "sentences": "Use complex sentences with varied structures (20+ words average).",
        "concepts": "Explore abstract concepts, cause-and-effect relationships, and nuanced ideas.",
        "grade_level": "8th-9th grade reading level",
    },
}
