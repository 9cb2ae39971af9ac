"""Tests for the generation/ collaborators (LLM replaced by FakeLLM)."""

import sys
sys.path.append(".")

import pytest

import config
from conftest import FakeLLM
from core.errors import GenerationError, GradingError
from core.skill_statistics import SkillStatistics, SkillTally
from core.skills import ComprehensionSkill, DifficultyTier
from generation import AnswerEvaluator, PassageGenerator, QuestionGenerator
from generation.prompts import adaptive_guidance


# ==================== Question Generator ====================

def test_question_is_parsed_with_skill_and_soft_prompt():
    llm = FakeLLM({"question": " Why is the queen important? ", "skill": "reasoning"})

    generated = QuestionGenerator(llm=llm).generate(
        paragraph="At the center of the hive is the queen bee.",
        full_passage="Full text.",
        passage_title="Bees",
    )

    assert generated.question == "Why is the queen important?"
    assert generated.skill == ComprehensionSkill.REASONING
    assert generated.soft_prompt == "Think deeply about what the passage suggests."
    assert llm.calls[0]["kwargs"] == {"response_format": {"type": "json_object"}}


def test_prioritized_skills_reach_the_prompt():
    llm = FakeLLM({"question": "Q?", "skill": "Application"})

    QuestionGenerator(llm=llm).generate(
        paragraph="Bees dance.",
        prioritized_skills=[ComprehensionSkill.APPLICATION, ComprehensionSkill.REASONING],
    )

    system_prompt = llm.calls[0]["messages"][0].content
    assert "The student needs practice with: Application, Reasoning" in system_prompt


def test_no_priorities_means_no_focus_section():
    llm = FakeLLM({"question": "Q?", "skill": "Understanding"})

    QuestionGenerator(llm=llm).generate(paragraph="Bees dance.")

    assert "ADAPTIVE FOCUS" not in llm.calls[0]["messages"][0].content


def test_oversized_paragraph_is_trimmed():
    llm = FakeLLM({"question": "Q?", "skill": "Understanding"})

    QuestionGenerator(llm=llm).generate(paragraph="x" * (config.MAX_PARAGRAPH_LENGTH + 500))

    user_prompt = llm.calls[0]["messages"][1].content
    assert "x" * config.MAX_PARAGRAPH_LENGTH in user_prompt
    assert "x" * (config.MAX_PARAGRAPH_LENGTH + 1) not in user_prompt


def test_missing_paragraph_is_rejected_before_llm_call():
    llm = FakeLLM()

    with pytest.raises(GenerationError):
        QuestionGenerator(llm=llm).generate(paragraph="   ")
    assert llm.calls == []


@pytest.mark.parametrize("reply", [
    "",
    "not json",
    "[1, 2]",
    {"skill": "Reasoning"},
    {"question": "Q?", "skill": "Memory"},
    {"question": "  ", "skill": "Reasoning"},
])
def test_unusable_question_replies_raise(reply):
    with pytest.raises(GenerationError):
        QuestionGenerator(llm=FakeLLM(reply)).generate(paragraph="Bees dance.")


def test_llm_exception_becomes_generation_error():
    with pytest.raises(GenerationError):
        QuestionGenerator(llm=FakeLLM(RuntimeError("rate limited"))).generate(paragraph="Bees dance.")


# ==================== Answer Evaluator ====================

def test_evaluation_is_parsed():
    llm = FakeLLM({"correct": True, "explanation": "The passage says so. "})

    outcome = AnswerEvaluator(llm=llm).evaluate(
        question="Why do bees dance?", answer="To share food locations.", paragraph="Bees dance.",
    )

    assert outcome.correct is True
    assert outcome.explanation == "The passage says so."


@pytest.mark.parametrize("reply", [
    {"correct": True},
    {"explanation": "Missing flag"},
    {"correct": "yes", "explanation": "Wrong type"},
    "garbage",
])
def test_incomplete_evaluations_raise(reply):
    with pytest.raises(GradingError):
        AnswerEvaluator(llm=FakeLLM(reply)).evaluate(question="Q?", answer="A.", paragraph="P.")


def test_missing_answer_is_rejected_before_llm_call():
    llm = FakeLLM()

    with pytest.raises(GradingError):
        AnswerEvaluator(llm=llm).evaluate(question="Q?", answer="  ", paragraph="P.")
    assert llm.calls == []


# ==================== Passage Generator ====================

def test_passage_is_built_from_reply():
    llm = FakeLLM({"title": " Ocean Tides ", "content": "First.\n\nSecond.\n\nThird."})

    passage = PassageGenerator(llm=llm).generate(DifficultyTier.ADVANCED, reference_length=1500)

    assert passage.title == "Ocean Tides"
    assert passage.difficulty == DifficultyTier.ADVANCED
    assert passage.sections == ["First.", "Second.", "Third."]
    system_prompt = llm.calls[0]["messages"][0].content
    assert "DIFFICULTY LEVEL: ADVANCED" in system_prompt
    assert "Approximately 300 words" in system_prompt


def test_passage_prompt_carries_adaptive_guidance():
    llm = FakeLLM({"title": "T", "content": "Body."})
    stats = SkillStatistics({
        ComprehensionSkill.UNDERSTANDING: SkillTally(3, 3),
        ComprehensionSkill.REASONING: SkillTally(2, 0),
    })

    PassageGenerator(llm=llm).generate("beginner", skill_stats=stats)

    system_prompt = llm.calls[0]["messages"][0].content
    assert "Student needs practice with: Reasoning" in system_prompt
    assert "Not yet tested: Application" in system_prompt


def test_adaptive_guidance_empty_when_all_strong():
    stats = SkillStatistics({skill: SkillTally(2, 2) for skill in ComprehensionSkill})

    assert adaptive_guidance(stats, 0.7) == ""
    assert adaptive_guidance(None, 0.7) == ""


def test_invalid_tier_and_incomplete_passages_raise():
    with pytest.raises(GenerationError):
        PassageGenerator(llm=FakeLLM()).generate("extreme")
    with pytest.raises(GenerationError):
        PassageGenerator(llm=FakeLLM({"title": "Only a title"})).generate("beginner")
    with pytest.raises(GenerationError):
        PassageGenerator(llm=FakeLLM({"title": "T", "content": "\n\n"})).generate("beginner")
