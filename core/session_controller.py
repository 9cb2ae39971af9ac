"""
Session Controller - One learner working through one passage.

Features:
    - One SectionFlowController per section, reset wholesale on every passage
    - Question/answer caches so revisited sections are never regenerated
    - First-attempt scoring and the answered-question log
    - Skill statistics -> prioritized skills for the next question
    - Score -> recommended difficulty for the next passage
    - Delayed "session complete" transition once the last section is correct

Invariant: correct_answers <= len(completed_sections) <= total_sections
"""

import itertools
import logging
import threading
from typing import Callable, Dict, List, Optional, Set

import config
from .difficulty_recommender import DifficultyRecommender, percentage
from .errors import GenerationError, ValidationError
from .events import AnswerGraded, QuestionGenerated, SectionEvent, SectionScored
from .models import AnsweredQuestion, CachedAnswer, CachedQuestion, GeneratedQuestion, GradingOutcome, RequestTicket
from .passage import DEFAULT_PASSAGE, Passage
from .section_flow import SectionFlowController, SectionState
from .skill_prioritizer import SkillPrioritizer
from .skill_statistics import SkillStatistics
from .skills import ComprehensionSkill, DifficultyTier

logger = logging.getLogger(__name__)

Scheduler = Callable[[float, Callable[[], None]], object]


def timer_scheduler(delay: float, callback: Callable[[], None]) -> threading.Timer:
    """Run callback on a daemon timer thread after delay seconds."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


def completion_message(pct: int) -> str:
    """Encouraging message for a final percentage."""
    if pct == 100:
        return "Perfect score! You have excellent comprehension skills!"
    elif pct >= 80:
        return "Great work! You understood the passage very well!"
    elif pct >= 60:
        return "Good job! Keep practicing to improve further!"
    return "Nice effort! Try reading more carefully next time!"


class SessionController:
    """
    Orchestrates the section controllers of the current passage.

    Collaborators are duck-typed:
        question_generator.generate(paragraph, full_passage, passage_title, prioritized_skills)
            -> GeneratedQuestion
        answer_evaluator.evaluate(question, answer, paragraph, full_passage)
            -> GradingOutcome
        passage_generator.generate(difficulty, reference_length, skill_stats)
            -> Passage
    """

    def __init__(self, question_generator=None, answer_evaluator=None, passage_generator=None,
                 prioritizer: Optional[SkillPrioritizer] = None,
                 recommender: Optional[DifficultyRecommender] = None,
                 scheduler: Optional[Scheduler] = None,
                 completion_delay: Optional[float] = None,
                 default_difficulty: Optional[str] = None,
                 passage: Optional[Passage] = None):
        self.question_generator = question_generator
        self.answer_evaluator = answer_evaluator
        self.passage_generator = passage_generator
        self.prioritizer = prioritizer or SkillPrioritizer()
        self.recommender = recommender or DifficultyRecommender()
        self._scheduler = scheduler or timer_scheduler
        self.completion_delay = (config.COMPLETION_DELAY_SECONDS
                                 if completion_delay is None else completion_delay)
        self.default_difficulty = DifficultyTier.parse(default_difficulty or config.DEFAULT_DIFFICULTY)

        # Shared across passages so tickets never collide
        self._sequence = itertools.count(1)
        self._epoch = 0

        self.load_passage(passage or DEFAULT_PASSAGE)

    # ==================== Passage Lifecycle ====================

    def load_passage(self, passage: Passage):
        """Full reset onto a passage: fresh section controllers, empty caches and score."""
        paragraphs = passage.sections
        if not paragraphs:
            raise ValidationError("Passage has no sections")

        self._epoch += 1
        self.passage = passage
        self.sections: List[SectionFlowController] = []
        for index, paragraph in enumerate(paragraphs):
            controller = SectionFlowController(index, paragraph, passage_id=passage.id)
            controller.subscribe(self._handle_event)
            self.sections.append(controller)

        self._answered: List[AnsweredQuestion] = []
        self._cached_questions: Dict[int, CachedQuestion] = {}
        self._cached_answers: Dict[int, CachedAnswer] = {}
        self._completed: Set[int] = set()
        self._section_correctness: Dict[int, bool] = {}
        self.correct_answers = 0
        self.session_complete = False
        self._completion_scheduled = False
        self._latest_question_request: Optional[RequestTicket] = None
        self.current_section = 0

        logger.info("Loaded passage %s (%r, %d sections)", passage.id, passage.title, len(paragraphs))

    def restart(self):
        """Start the current passage over."""
        self.load_passage(self.passage)

    def request_new_passage(self, difficulty=None, reference_length: Optional[int] = None) -> Passage:
        """
        Generate a new passage and reset onto it.

        Without an explicit difficulty the recommended tier is used, falling
        back to the default tier when nothing has been answered. A
        GenerationError leaves the current passage untouched.
        """
        if self.passage_generator is None:
            raise ValidationError("No passage generator configured")

        if difficulty is None:
            tier = self.recommended_difficulty(fallback=True)
        else:
            tier = self._parse_tier(difficulty)

        length = reference_length or len(self.passage.content) or config.DEFAULT_REFERENCE_LENGTH
        stats = self.skill_statistics()

        try:
            passage = self.passage_generator.generate(
                difficulty=tier,
                reference_length=length,
                skill_stats=stats,
            )
        except GenerationError as exc:
            logger.warning("Passage generation failed (%s): %s", tier.value, exc)
            raise

        self.load_passage(passage)
        return passage

    @staticmethod
    def _parse_tier(value) -> DifficultyTier:
        if isinstance(value, DifficultyTier):
            return value
        try:
            return DifficultyTier.parse(value)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

    # ==================== Navigation ====================

    @property
    def total_sections(self) -> int:
        return len(self.sections)

    def section(self, index: int) -> SectionFlowController:
        if not 0 <= index < len(self.sections):
            raise ValidationError(f"Section {index} is out of range (0-{len(self.sections) - 1})")
        return self.sections[index]

    def navigate_to(self, index: int) -> SectionFlowController:
        controller = self.section(index)
        self.current_section = index
        return controller

    def next_section(self) -> SectionFlowController:
        return self.navigate_to(min(self.current_section + 1, self.total_sections - 1))

    def previous_section(self) -> SectionFlowController:
        return self.navigate_to(max(self.current_section - 1, 0))

    def open_section(self, index: int) -> SectionFlowController:
        """Navigate to a section, restoring its cached question and answer if it has none."""
        controller = self.navigate_to(index)
        cached = self._cached_questions.get(index)
        if cached and controller.state in (SectionState.AWAITING_QUESTION, SectionState.ERRORED):
            controller.restore(cached, self._cached_answers.get(index))
        return controller

    # ==================== Question Generation ====================

    def begin_question_request(self, index: int) -> RequestTicket:
        """Issue a generation request; it supersedes any earlier outstanding one."""
        ticket = self.section(index).begin_question_request(next(self._sequence))
        self._latest_question_request = ticket
        return ticket

    def _is_latest(self, ticket: RequestTicket) -> bool:
        return ticket == self._latest_question_request

    def deliver_question(self, ticket: RequestTicket, generated: GeneratedQuestion) -> bool:
        if not self._is_latest(ticket):
            logger.info("Discarding question for section %d: request %d superseded",
                        ticket.section_index, ticket.sequence)
            return False
        self._latest_question_request = None
        return self.sections[ticket.section_index].deliver_question(ticket, generated)

    def fail_question(self, ticket: RequestTicket, error: Exception) -> bool:
        if not self._is_latest(ticket):
            logger.info("Discarding generation failure for section %d: request %d superseded",
                        ticket.section_index, ticket.sequence)
            return False
        self._latest_question_request = None
        return self.sections[ticket.section_index].fail_question(ticket, error)

    def ensure_question(self, index: int) -> SectionFlowController:
        """
        Make sure a section has a question: cached, restored, or generated.

        Generation failures are surfaced on the section (ERRORED), not raised.
        Unexpected generator errors also leave the section ERRORED, then propagate.
        """
        controller = self.open_section(index)
        if controller.state not in (SectionState.AWAITING_QUESTION, SectionState.ERRORED):
            return controller
        if self.question_generator is None:
            raise ValidationError("No question generator configured")

        ticket = self.begin_question_request(index)
        try:
            generated = self.question_generator.generate(
                paragraph=controller.paragraph,
                full_passage=self.passage.content,
                passage_title=self.passage.title,
                prioritized_skills=self.prioritized_skills(),
            )
        except GenerationError as exc:
            self.fail_question(ticket, exc)
            return controller
        except Exception as exc:
            self.fail_question(ticket, exc)
            raise

        self.deliver_question(ticket, generated)
        return controller

    # ==================== Answering ====================

    def submit_answer(self, index: int, answer_text: str) -> SectionFlowController:
        controller = self.section(index)
        if self.answer_evaluator is None:
            raise ValidationError("No answer evaluator configured")
        controller.submit(answer_text, self.answer_evaluator, full_passage=self.passage.content)
        return controller

    def try_again(self, index: int) -> SectionFlowController:
        controller = self.section(index)
        controller.try_again()
        return controller

    # ==================== Event Handling ====================

    def _handle_event(self, event: SectionEvent):
        if isinstance(event, QuestionGenerated):
            self.on_question_generated(event.section_index, event.question, event.skill)
        elif isinstance(event, SectionScored):
            self.on_section_scored(event.section_index, event.correct_on_first_attempt,
                                   event.answer_text, event.outcome, event.skill)
        elif isinstance(event, AnswerGraded):
            self.on_answer_graded(event.section_index, event.answer_text, event.outcome, event.skill)

    def on_question_generated(self, index: int, question: str, skill: ComprehensionSkill):
        self._cached_questions[index] = CachedQuestion(question=question, skill=skill)

    def on_section_scored(self, index: int, correct_on_first_attempt: bool, answer_text: str,
                          outcome: GradingOutcome, skill: ComprehensionSkill):
        """First grading of a section: log it, mark it completed, score it."""
        if index not in self._completed:
            self._answered.append(AnsweredQuestion(
                section_index=index,
                answer_text=answer_text,
                skill=skill,
                correct_on_first_attempt=correct_on_first_attempt,
            ))
            self._completed.add(index)
            self._section_correctness[index] = correct_on_first_attempt
            if correct_on_first_attempt:
                self.correct_answers += 1

        self._cached_answers[index] = CachedAnswer(answer_text=answer_text, outcome=outcome, skill=skill)
        self._check_completion()

    def on_answer_graded(self, index: int, answer_text: str, outcome: GradingOutcome,
                         skill: ComprehensionSkill):
        """Retry grading: refresh the cached answer only."""
        self._cached_answers[index] = CachedAnswer(answer_text=answer_text, outcome=outcome, skill=skill)
        self._check_completion()

    # ==================== Completion ====================

    def _check_completion(self):
        """Schedule completion once every section is graded and the last one is correct."""
        if self.session_complete or self._completion_scheduled:
            return
        last = self._cached_answers.get(self.total_sections - 1)
        if last is None or not last.outcome.correct:
            return
        if len(self._completed) < self.total_sections:
            logger.info("Last section correct, %d section(s) still unanswered",
                        self.total_sections - len(self._completed))
            return

        self._completion_scheduled = True
        epoch = self._epoch
        self._scheduler(self.completion_delay, lambda: self._mark_complete(epoch))

    def _mark_complete(self, epoch: int):
        if epoch != self._epoch:
            logger.info("Ignoring completion for a passage that is no longer loaded")
            return
        self.session_complete = True
        logger.info("Session complete: %d/%d correct on first attempt",
                    self.correct_answers, self.total_sections)

    # ==================== Adaptive Policy ====================

    def skill_statistics(self) -> SkillStatistics:
        return SkillStatistics.compute(self._answered)

    def prioritized_skills(self) -> List[ComprehensionSkill]:
        return self.prioritizer.prioritize(self.skill_statistics())

    def recommended_difficulty(self, fallback: bool = False) -> DifficultyTier:
        """
        Tier suggested by first-attempt performance so far.

        With no completed sections this raises ValidationError, unless
        fallback is set, in which case the default tier is returned.
        """
        try:
            return self.recommender.recommend(self.correct_answers, len(self._completed))
        except ValidationError:
            if fallback:
                return self.default_difficulty
            raise

    # ==================== Read-only Views ====================

    @property
    def answered_questions(self) -> List[AnsweredQuestion]:
        return list(self._answered)

    @property
    def completed_sections(self) -> Set[int]:
        return set(self._completed)

    @property
    def section_correctness(self) -> Dict[int, bool]:
        return dict(self._section_correctness)

    def cached_question(self, index: int) -> Optional[CachedQuestion]:
        return self._cached_questions.get(index)

    def cached_answer(self, index: int) -> Optional[CachedAnswer]:
        return self._cached_answers.get(index)

    def summary(self) -> dict:
        """Score, message, skill breakdown and next-passage recommendation."""
        pct = percentage(self.correct_answers, self.total_sections)
        return {
            "correct_answers": self.correct_answers,
            "total_questions": self.total_sections,
            "percentage": pct,
            "message": completion_message(pct),
            "skill_stats": self.skill_statistics().to_dict(),
            "answered_questions": [q.to_dict() for q in self._answered],
            "recommended_difficulty": self.recommended_difficulty(fallback=True).value,
        }

    def to_dict(self) -> dict:
        return {
            "passage": self.passage.to_dict(),
            "current_section": self.current_section,
            "total_sections": self.total_sections,
            "correct_answers": self.correct_answers,
            "completed_sections": sorted(self._completed),
            "section_correctness": {str(k): v for k, v in sorted(self._section_correctness.items())},
            "session_complete": self.session_complete,
            "skill_stats": self.skill_statistics().to_dict(),
            "prioritized_skills": [s.value for s in self.prioritized_skills()],
        }
