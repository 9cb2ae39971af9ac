"""
Section Flow - Per-section question lifecycle.

States:
    AWAITING_QUESTION -> READY -> SUBMITTING -> EVALUATED
    ERRORED: generation failed; a new generation request may be issued

Transitions:
    AWAITING_QUESTION -> READY        question delivered (fresh or cached)
    AWAITING_QUESTION -> EVALUATED    cached question + cached answer restored
    AWAITING_QUESTION -> ERRORED      generation failed
    ERRORED -> AWAITING_QUESTION      generation retried
    READY -> SUBMITTING               non-empty answer submitted
    SUBMITTING -> EVALUATED           grading succeeded
    SUBMITTING -> READY               grading failed (answer text kept)
    EVALUATED -> READY                try again, only after an incorrect outcome

The first SUBMITTING -> EVALUATED transition emits SectionScored; later ones
emit AnswerGraded. Only the first attempt affects the running score.
"""

import itertools
import logging
from enum import Enum
from typing import List, Optional

from .errors import GradingError, ValidationError
from .events import AnswerGraded, EventHandler, QuestionGenerated, SectionEvent, SectionScored
from .models import CachedAnswer, CachedQuestion, GeneratedQuestion, GradingOutcome, RequestTicket
from .skills import ComprehensionSkill, SKILL_SOFT_PROMPTS

logger = logging.getLogger(__name__)

QUESTION_GENERATION_ERROR = "Unable to generate question. Please try again."
ANSWER_EVALUATION_ERROR = "Unable to evaluate answer. Please try again."


class SectionState(str, Enum):
    AWAITING_QUESTION = "awaiting_question"
    ERRORED = "errored"
    READY = "ready"
    SUBMITTING = "submitting"
    EVALUATED = "evaluated"


class SectionFlowController:
    """
    State machine for the one question attached to a section.

    External calls are split into begin/deliver/fail steps so a host can run
    them asynchronously; each begin returns a RequestTicket and a delivery
    whose ticket is no longer pending is discarded. `submit` runs the whole
    grading round-trip synchronously against an answer evaluator.
    """

    def __init__(self, section_index: int, paragraph: str, passage_id: str = ""):
        self.section_index = section_index
        self.paragraph = paragraph
        self.passage_id = passage_id

        self.state = SectionState.AWAITING_QUESTION
        self.question: Optional[str] = None
        self.skill: Optional[ComprehensionSkill] = None
        self.soft_prompt: Optional[str] = None
        self.answer_text = ""
        self.outcome: Optional[GradingOutcome] = None
        self.error: Optional[str] = None
        self.error_detail: Optional[str] = None
        self.attempts = 0

        self._first_attempt_consumed = False
        self._pending_question: Optional[RequestTicket] = None
        self._pending_grade: Optional[RequestTicket] = None
        self._sequence = itertools.count(1)
        self._handlers: List[EventHandler] = []

    # ==================== Events ====================

    def subscribe(self, handler: EventHandler):
        self._handlers.append(handler)

    def _emit(self, event: SectionEvent):
        for handler in self._handlers:
            handler(event)

    # ==================== Question Delivery ====================

    def begin_question_request(self, sequence: Optional[int] = None) -> RequestTicket:
        """Start a generation request. Allowed while awaiting or after a failure."""
        if self.state not in (SectionState.AWAITING_QUESTION, SectionState.ERRORED):
            raise ValidationError(f"Section {self.section_index} already has a question")

        ticket = RequestTicket(
            passage_id=self.passage_id,
            section_index=self.section_index,
            sequence=sequence if sequence is not None else next(self._sequence),
        )
        self._pending_question = ticket
        self.state = SectionState.AWAITING_QUESTION
        self._clear_error()
        return ticket

    def deliver_question(self, ticket: RequestTicket, generated: GeneratedQuestion) -> bool:
        """Apply a generated question. Returns False for a stale ticket."""
        if ticket != self._pending_question:
            logger.info("Discarding stale question for section %d (ticket %s)",
                        self.section_index, ticket.sequence)
            return False

        self._pending_question = None
        self.question = generated.question
        self.skill = generated.skill
        self.soft_prompt = generated.label
        self.answer_text = ""
        self.outcome = None
        self.state = SectionState.READY
        self._clear_error()

        self._emit(QuestionGenerated(
            section_index=self.section_index,
            question=generated.question,
            skill=generated.skill,
        ))
        return True

    def fail_question(self, ticket: RequestTicket, error: Exception) -> bool:
        """Record a generation failure. Returns False for a stale ticket."""
        if ticket != self._pending_question:
            logger.info("Discarding stale generation failure for section %d", self.section_index)
            return False

        self._pending_question = None
        self.state = SectionState.ERRORED
        self.error = QUESTION_GENERATION_ERROR
        self.error_detail = str(error)
        logger.warning("Question generation failed for section %d: %s", self.section_index, error)
        return True

    def restore(self, cached_question: CachedQuestion, cached_answer: Optional[CachedAnswer] = None):
        """
        Deliver a previously generated question from the session cache.

        With a cached answer the section goes straight to EVALUATED and its
        first attempt counts as already consumed.
        """
        if self.state not in (SectionState.AWAITING_QUESTION, SectionState.ERRORED):
            raise ValidationError(f"Section {self.section_index} already has a question")

        self._pending_question = None
        self.question = cached_question.question
        self.skill = cached_question.skill
        self.soft_prompt = SKILL_SOFT_PROMPTS[cached_question.skill]
        self._clear_error()

        if cached_answer is not None:
            self.answer_text = cached_answer.answer_text
            self.outcome = cached_answer.outcome
            self.attempts = max(self.attempts, 1)
            self._first_attempt_consumed = True
            self.state = SectionState.EVALUATED
        else:
            self.answer_text = ""
            self.outcome = None
            self.state = SectionState.READY

    # ==================== Answer Submission ====================

    def begin_submission(self, answer_text: str) -> RequestTicket:
        """
        Validate and accept an answer for grading.

        Raises ValidationError (no state change) when there is no question
        to answer, the section is not accepting input, or the text is blank.
        """
        if self.state != SectionState.READY or not self.question:
            raise ValidationError(
                f"Section {self.section_index} is not accepting answers (state: {self.state.value})"
            )
        text = (answer_text or "").strip()
        if not text:
            raise ValidationError("Answer cannot be empty")

        ticket = RequestTicket(
            passage_id=self.passage_id,
            section_index=self.section_index,
            sequence=next(self._sequence),
        )
        self._pending_grade = ticket
        self.answer_text = text
        self.state = SectionState.SUBMITTING
        self._clear_error()
        return ticket

    def deliver_grade(self, ticket: RequestTicket, outcome: GradingOutcome) -> bool:
        """Apply a grading outcome. Returns False for a stale ticket."""
        if ticket != self._pending_grade:
            logger.info("Discarding stale grade for section %d", self.section_index)
            return False

        self._pending_grade = None
        self.outcome = outcome
        self.attempts += 1
        self.state = SectionState.EVALUATED

        if not self._first_attempt_consumed:
            self._first_attempt_consumed = True
            self._emit(SectionScored(
                section_index=self.section_index,
                correct_on_first_attempt=outcome.correct,
                answer_text=self.answer_text,
                outcome=outcome,
                skill=self.skill,
            ))
        else:
            self._emit(AnswerGraded(
                section_index=self.section_index,
                answer_text=self.answer_text,
                outcome=outcome,
                skill=self.skill,
                attempt=self.attempts,
            ))
        return True

    def fail_grade(self, ticket: RequestTicket, error: Exception) -> bool:
        """Return to READY keeping the answer text. Returns False for a stale ticket."""
        if ticket != self._pending_grade:
            logger.info("Discarding stale grading failure for section %d", self.section_index)
            return False

        self._pending_grade = None
        self.state = SectionState.READY
        self.error = ANSWER_EVALUATION_ERROR
        self.error_detail = str(error)
        logger.warning("Answer evaluation failed for section %d: %s", self.section_index, error)
        return True

    def submit(self, answer_text: str, evaluator, full_passage: str = "") -> Optional[GradingOutcome]:
        """
        Grade an answer synchronously.

        Returns the outcome, or None when grading failed (the error is
        surfaced on `self.error`). Unexpected evaluator errors are re-raised
        after the section is returned to READY.
        """
        ticket = self.begin_submission(answer_text)
        try:
            outcome = evaluator.evaluate(
                question=self.question,
                answer=self.answer_text,
                paragraph=self.paragraph,
                full_passage=full_passage,
            )
        except GradingError as exc:
            self.fail_grade(ticket, exc)
            return None
        except Exception as exc:
            self.fail_grade(ticket, exc)
            raise

        self.deliver_grade(ticket, outcome)
        return outcome

    # ==================== Retry ====================

    @property
    def can_retry(self) -> bool:
        return (self.state == SectionState.EVALUATED
                and self.outcome is not None
                and not self.outcome.correct)

    def try_again(self):
        """EVALUATED -> READY, only after an incorrect outcome."""
        if not self.can_retry:
            raise ValidationError(f"Section {self.section_index} cannot be retried")
        self.answer_text = ""
        self.outcome = None
        self.state = SectionState.READY
        self._clear_error()

    # ==================== State ====================

    @property
    def is_first_attempt(self) -> bool:
        return not self._first_attempt_consumed

    def _clear_error(self):
        self.error = None
        self.error_detail = None

    def to_dict(self) -> dict:
        return {
            "section_index": self.section_index,
            "paragraph": self.paragraph,
            "state": self.state.value,
            "question": self.question,
            "skill": self.skill.value if self.skill else None,
            "soft_prompt": self.soft_prompt,
            "answer": self.answer_text,
            "evaluation": self.outcome.to_dict() if self.outcome else None,
            "error": self.error,
            "attempts": self.attempts,
            "can_retry": self.can_retry,
        }
