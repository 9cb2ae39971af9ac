"""
Prompt builders for question generation, answer evaluation and passage writing.
"""

from typing import List

from core.skill_statistics import SkillStatistics
from core.skills import ComprehensionSkill, DifficultyTier, DIFFICULTY_GUIDELINES, SKILL_DESCRIPTIONS


# ==================== Question Generation ====================

def question_system_prompt(prioritized_skills: List[ComprehensionSkill]) -> str:
    skill_lines = "\n".join(
        f"- {skill.value}: {SKILL_DESCRIPTIONS[skill]}" for skill in ComprehensionSkill
    )

    focus = ""
    if prioritized_skills:
        names = ", ".join(skill.value for skill in prioritized_skills)
        focus = f"""

ADAPTIVE FOCUS:
The student needs practice with: {names}
Prefer a question targeting the first of these skills that fits this section naturally."""

    return f"""You are an expert educator creating reading comprehension questions for children.

Your task is to generate ONE high-quality comprehension question based on a specific section of a passage, and classify it under exactly one comprehension skill.

SKILLS:
{skill_lines}

Guidelines:
- Focus on understanding and inference, NOT simple factual recall
- Ask questions that require thinking about meaning, implications, or connections
- Keep questions clear and appropriate for children
- The question should be answerable in 1-2 sentences
- Do NOT ask "What does X mean?" or "Define Y"
- DO ask about main ideas, author's purpose, cause and effect, comparisons, or inference{focus}

You must respond with a JSON object in this exact format:
{{
  "question": "The question text",
  "skill": "Understanding" or "Reasoning" or "Application"
}}"""


def question_user_prompt(paragraph: str, full_passage: str, passage_title: str) -> str:
    return f"""Full Passage Title: {passage_title or "Reading Passage"}

Full Passage Context:
{full_passage or paragraph}

Current Section:
{paragraph}

Generate ONE comprehension question for this specific section. Respond with JSON only."""


# ==================== Answer Evaluation ====================

EVALUATION_SYSTEM_PROMPT = """You are an expert educator evaluating reading comprehension answers from children.

Your task is to determine if the student's answer demonstrates genuine understanding of the text.

Guidelines:
- Focus on whether they understood the main idea or concept, not exact wording
- Accept answers that are correct even if phrased differently
- Be encouraging but honest
- Look for evidence of comprehension, not perfect recall
- ALWAYS reference specific parts of the passage in your explanation
- Explain WHY the answer is correct or incorrect by citing the text

You must respond with a JSON object in this exact format:
{
  "correct": true or false,
  "explanation": "A brief, encouraging explanation (2-3 sentences) that references the passage"
}

If incorrect, gently explain what they missed by referencing the passage. If correct, affirm their understanding by connecting it to the text."""


def evaluation_user_prompt(question: str, answer: str, paragraph: str, full_passage: str) -> str:
    return f"""Full Passage Context:
{full_passage or paragraph}

Specific Section:
{paragraph}

Question Asked:
{question}

Student's Answer:
{answer}

Evaluate if this answer demonstrates comprehension. Respond with JSON only."""


# ==================== Passage Generation ====================

def adaptive_guidance(stats: SkillStatistics, weakness_threshold: float) -> str:
    """Weak/untested skill notes appended to the passage prompt ("" if none)."""
    if stats is None:
        return ""

    weak = stats.weak(weakness_threshold)
    untested = stats.untested()
    if not weak and not untested:
        return ""

    lines = ["", "", "ADAPTIVE LEARNING FOCUS:"]
    if weak:
        lines.append(f"- Student needs practice with: {', '.join(s.value for s in weak)}")
    if untested:
        lines.append(f"- Not yet tested: {', '.join(s.value for s in untested)}")
    lines.append("- Create a passage that naturally supports generating questions for these skills.")
    return "\n".join(lines)


def passage_system_prompt(difficulty: DifficultyTier, reference_length: int, guidance: str = "") -> str:
    guidelines = DIFFICULTY_GUIDELINES[difficulty]
    target_words = reference_length // 5

    return f"""You are an expert educational content creator specializing in creating engaging, factual reading passages for children.

Create a reading comprehension passage that meets these criteria:

DIFFICULTY LEVEL: {difficulty.value.upper()}
- {guidelines["vocabulary"]}
- {guidelines["sentences"]}
- {guidelines["concepts"]}
- Target: {guidelines["grade_level"]}

CONTENT REQUIREMENTS:
- Topic: Choose an interesting, educational topic appropriate for children (nature, science, history, culture, etc.)
- Length: Approximately {target_words} words
- Structure: 4-6 natural paragraphs that flow logically
- Tone: Engaging, informative, and age-appropriate
- Accuracy: All facts must be accurate and educational

FORMATTING:
- Return a JSON object with exactly this structure:
  {{
    "title": "Engaging Title (3-6 words)",
    "content": "Paragraph 1\\n\\nParagraph 2\\n\\nParagraph 3..."
  }}
- Separate paragraphs with \\n\\n
- Do not include any markdown formatting
- Do not number the paragraphs

The passage should be factual, educational, and appropriate for comprehension question generation.{guidance}"""
