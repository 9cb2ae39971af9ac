"""Tests for core/skill_prioritizer.py"""

import sys
sys.path.append(".")

from core.skill_prioritizer import SkillPrioritizer
from core.skill_statistics import SkillStatistics, SkillTally
from core.skills import ComprehensionSkill

U = ComprehensionSkill.UNDERSTANDING
R = ComprehensionSkill.REASONING
A = ComprehensionSkill.APPLICATION


def stats(**tallies):
    return SkillStatistics({ComprehensionSkill.parse(k): SkillTally(*v) for k, v in tallies.items()})


def test_no_answers_means_no_preference():
    assert SkillPrioritizer().prioritize(SkillStatistics()) == []


def test_untested_first_then_weak():
    result = SkillPrioritizer().prioritize(
        stats(understanding=(0, 0), reasoning=(3, 3), application=(2, 0))
    )

    assert result == [U, A]


def test_strong_skills_are_omitted():
    result = SkillPrioritizer().prioritize(
        stats(understanding=(10, 7), reasoning=(4, 3), application=(5, 5))
    )

    assert result == []


def test_weak_skills_keep_declaration_order():
    result = SkillPrioritizer().prioritize(
        stats(understanding=(3, 1), reasoning=(5, 5), application=(2, 1))
    )

    assert result == [U, A]


def test_multiple_untested_skills():
    result = SkillPrioritizer().prioritize(stats(reasoning=(1, 0)))

    assert result == [U, A, R]
    assert len(result) == len(set(result))


def test_threshold_is_overridable():
    reasoning_half = stats(understanding=(2, 2), reasoning=(2, 1), application=(2, 2))

    assert SkillPrioritizer().prioritize(reasoning_half) == [R]
    assert SkillPrioritizer(weakness_threshold=0.5).prioritize(reasoning_half) == []
    assert SkillPrioritizer.WEAKNESS_THRESHOLD == 0.70
