"""Shared fakes for LLMs, collaborators and scheduling."""

import sys
sys.path.append(".")

import json
from types import SimpleNamespace

import pytest

from core.errors import GenerationError
from core.models import GeneratedQuestion, GradingOutcome
from core.passage import Passage
from core.skills import ComprehensionSkill


class FakeLLM:
    """Stands in for ChatOpenAI: returns queued replies, records calls."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def invoke(self, messages, **kwargs):
        self.calls.append({"messages": messages, "kwargs": kwargs})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            reply = json.dumps(reply)
        return SimpleNamespace(content=reply)


class FakeQuestionGenerator:
    """Cycles through skills; raises `error` while `failures` > 0."""

    def __init__(self, skills=None, failures=0, error=None):
        self.skills = list(skills or [ComprehensionSkill.UNDERSTANDING])
        self.failures = failures
        self.error = error or GenerationError("upstream unavailable")
        self.calls = []

    def generate(self, paragraph, full_passage="", passage_title="", prioritized_skills=None):
        self.calls.append({
            "paragraph": paragraph,
            "passage_title": passage_title,
            "prioritized_skills": list(prioritized_skills or []),
        })
        if self.failures > 0:
            self.failures -= 1
            raise self.error
        skill = self.skills[(len(self.calls) - 1) % len(self.skills)]
        return GeneratedQuestion(question=f"Question {len(self.calls)}?", skill=skill)


class FakeEvaluator:
    """Returns queued outcomes (True/False) or raises queued exceptions."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def evaluate(self, question, answer, paragraph, full_passage=""):
        self.calls.append({"question": question, "answer": answer, "paragraph": paragraph})
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return GradingOutcome(correct=result, explanation="Correct!" if result else "Not quite.")


class FakePassageGenerator:

    def __init__(self, passage=None, error=None):
        self.passage = passage
        self.error = error
        self.calls = []

    def generate(self, difficulty, reference_length=None, skill_stats=None):
        self.calls.append({
            "difficulty": difficulty,
            "reference_length": reference_length,
            "skill_stats": skill_stats,
        })
        if self.error:
            raise self.error
        return self.passage or Passage(
            title="Ocean Tides",
            content="The moon pulls on the sea.\n\nTides rise and fall twice a day.",
            difficulty=difficulty,
        )


def immediate_scheduler(delay, callback):
    callback()


class DeferredScheduler:
    """Holds scheduled callbacks until `run()` is called."""

    def __init__(self):
        self.pending = []

    def __call__(self, delay, callback):
        self.pending.append((delay, callback))

    def run(self):
        pending, self.pending = self.pending, []
        for _, callback in pending:
            callback()


FIVE_SECTIONS = Passage(
    id="passage-test",
    title="Test Passage",
    content="\n\n".join(f"Paragraph {i}." for i in range(1, 6)),
)


@pytest.fixture
def five_sections():
    return FIVE_SECTIONS
