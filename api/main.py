"""
FastAPI Backend - Adaptive reading comprehension quiz.

Collaborator endpoints (stateless):
    POST /generate-question     - One skill-classified question for a section
    POST /evaluate-answer       - Grade an answer against the passage
    POST /generate-passage      - New passage at a difficulty tier

Session endpoints (in-memory, one SessionController per session):
    POST   /start-session               - New session on the default passage
    GET    /session/{id}                - Session snapshot
    POST   /session/{id}/navigate       - Move to a section
    POST   /session/{id}/question       - Cached, restored or generated question
    POST   /session/{id}/answer         - Submit an answer
    POST   /session/{id}/try-again      - Retry an incorrect answer
    GET    /session/{id}/summary        - Score, skills, recommended tier
    POST   /session/{id}/new-passage    - Generate a passage and reset
    POST   /session/{id}/restart        - Start the passage over
    DELETE /session/{id}                - Drop the session
"""

import logging
import sys
import uuid
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.errors import GenerationError, GradingError, ValidationError
from core.session_controller import SessionController
from core.skill_statistics import SkillStatistics
from core.skills import ComprehensionSkill, DifficultyTier
from generation import AnswerEvaluator, PassageGenerator, QuestionGenerator

logger = logging.getLogger(__name__)

# ==================== Initialize ====================

app = FastAPI(
    title="Reading Comprehension API",
    description="Adaptive reading comprehension quiz",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Collaborators are built on first use so importing needs no API key
_question_generator: Optional[QuestionGenerator] = None
_answer_evaluator: Optional[AnswerEvaluator] = None
_passage_generator: Optional[PassageGenerator] = None

sessions: Dict[str, SessionController] = {}


def get_question_generator() -> QuestionGenerator:
    global _question_generator
    if _question_generator is None:
        _question_generator = QuestionGenerator()
    return _question_generator


def get_answer_evaluator() -> AnswerEvaluator:
    global _answer_evaluator
    if _answer_evaluator is None:
        _answer_evaluator = AnswerEvaluator()
    return _answer_evaluator


def get_passage_generator() -> PassageGenerator:
    global _passage_generator
    if _passage_generator is None:
        _passage_generator = PassageGenerator()
    return _passage_generator


def get_session(session_id: str) -> SessionController:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found. Start a new session first.")
    return session


# ==================== Error Handling ====================

@app.exception_handler(ValidationError)
def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# ==================== Request/Response Models ====================

class GenerateQuestionRequest(BaseModel):
    paragraph: str
    full_passage: Optional[str] = None
    passage_title: Optional[str] = None
    prioritize_skills: List[ComprehensionSkill] = Field(default_factory=list)


class GenerateQuestionResponse(BaseModel):
    question: str
    skill: ComprehensionSkill
    soft_prompt: str


class EvaluateAnswerRequest(BaseModel):
    question: str
    answer: str
    paragraph: str
    full_passage: Optional[str] = None


class EvaluateAnswerResponse(BaseModel):
    correct: bool
    explanation: str


class SkillTallyModel(BaseModel):
    tested: int = 0
    correct: int = 0


class GeneratePassageRequest(BaseModel):
    difficulty: DifficultyTier
    reference_length: Optional[int] = None
    skill_stats: Optional[Dict[ComprehensionSkill, SkillTallyModel]] = None


class GeneratePassageResponse(BaseModel):
    title: str
    content: str
    difficulty: DifficultyTier


class StartSessionRequest(BaseModel):
    session_id: Optional[str] = None


class SectionRequest(BaseModel):
    section_index: int


class AnswerRequest(BaseModel):
    section_index: int
    answer: str


class NewPassageRequest(BaseModel):
    difficulty: Optional[DifficultyTier] = None


# ==================== Helper Functions ====================

def section_view(session: SessionController, index: int) -> dict:
    """Section state plus the session-level score the UI shows alongside it."""
    view = session.section(index).to_dict()
    view.update({
        "correct_answers": session.correct_answers,
        "total_sections": session.total_sections,
        "completed_sections": sorted(session.completed_sections),
        "session_complete": session.session_complete,
        "is_last_section": index == session.total_sections - 1,
    })
    return view


def stats_from_request(raw: Optional[Dict[ComprehensionSkill, SkillTallyModel]]) -> Optional[SkillStatistics]:
    if raw is None:
        return None
    return SkillStatistics.from_dict({skill.value: tally.model_dump() for skill, tally in raw.items()})


# ==================== Collaborator Endpoints ====================

@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Reading Comprehension API is running"}


@app.post("/generate-question", response_model=GenerateQuestionResponse)
def generate_question(request: GenerateQuestionRequest):
    try:
        generated = get_question_generator().generate(
            paragraph=request.paragraph,
            full_passage=request.full_passage or "",
            passage_title=request.passage_title or "",
            prioritized_skills=request.prioritize_skills,
        )
    except GenerationError as e:
        logger.warning("Error generating question: %s", e)
        raise HTTPException(status_code=500, detail="Failed to generate question. Please try again.")

    return GenerateQuestionResponse(
        question=generated.question,
        skill=generated.skill,
        soft_prompt=generated.label,
    )


@app.post("/evaluate-answer", response_model=EvaluateAnswerResponse)
def evaluate_answer(request: EvaluateAnswerRequest):
    if not request.question.strip() or not request.answer.strip() or not request.paragraph.strip():
        raise HTTPException(status_code=400, detail="Missing required fields")

    try:
        outcome = get_answer_evaluator().evaluate(
            question=request.question,
            answer=request.answer,
            paragraph=request.paragraph,
            full_passage=request.full_passage or "",
        )
    except GradingError as e:
        logger.warning("Error evaluating answer: %s", e)
        raise HTTPException(status_code=500, detail="Failed to evaluate answer. Please try again.")

    return EvaluateAnswerResponse(correct=outcome.correct, explanation=outcome.explanation)


@app.post("/generate-passage", response_model=GeneratePassageResponse)
def generate_passage(request: GeneratePassageRequest):
    try:
        passage = get_passage_generator().generate(
            difficulty=request.difficulty,
            reference_length=request.reference_length,
            skill_stats=stats_from_request(request.skill_stats),
        )
    except GenerationError as e:
        logger.warning("Error generating passage: %s", e)
        raise HTTPException(status_code=500, detail="Failed to generate passage. Please try again.")

    return GeneratePassageResponse(title=passage.title, content=passage.content, difficulty=passage.difficulty)


# ==================== Session Endpoints ====================

@app.post("/start-session")
def start_session(request: StartSessionRequest):
    """Create (or replace) a session on the default passage."""
    session_id = request.session_id or str(uuid.uuid4())[:8]

    sessions[session_id] = SessionController(
        question_generator=get_question_generator(),
        answer_evaluator=get_answer_evaluator(),
        passage_generator=get_passage_generator(),
    )

    return {"session_id": session_id, **sessions[session_id].to_dict()}


@app.get("/session/{session_id}")
def get_session_state(session_id: str):
    session = get_session(session_id)
    return {"session_id": session_id, **session.to_dict()}


@app.post("/session/{session_id}/navigate")
def navigate(session_id: str, request: SectionRequest):
    session = get_session(session_id)
    session.navigate_to(request.section_index)
    return section_view(session, request.section_index)


@app.post("/session/{session_id}/question")
def ensure_question(session_id: str, request: SectionRequest):
    """
    Question for a section. Generation failures come back in the view's
    `error` field; posting again retries the generation.
    """
    session = get_session(session_id)
    session.ensure_question(request.section_index)
    return section_view(session, request.section_index)


@app.post("/session/{session_id}/answer")
def submit_answer(session_id: str, request: AnswerRequest):
    session = get_session(session_id)
    session.submit_answer(request.section_index, request.answer)
    return section_view(session, request.section_index)


@app.post("/session/{session_id}/try-again")
def try_again(session_id: str, request: SectionRequest):
    session = get_session(session_id)
    session.try_again(request.section_index)
    return section_view(session, request.section_index)


@app.get("/session/{session_id}/summary")
def get_summary(session_id: str):
    session = get_session(session_id)
    return {"session_id": session_id, **session.summary()}


@app.post("/session/{session_id}/new-passage")
def new_passage(session_id: str, request: NewPassageRequest):
    """Generate a passage (recommended tier unless one is given) and reset onto it."""
    session = get_session(session_id)
    try:
        session.request_new_passage(difficulty=request.difficulty)
    except GenerationError as e:
        logger.warning("Error generating passage for session %s: %s", session_id, e)
        raise HTTPException(status_code=502, detail="Unable to generate passage. Please try again.")
    return {"session_id": session_id, **session.to_dict()}


@app.post("/session/{session_id}/restart")
def restart(session_id: str):
    session = get_session(session_id)
    session.restart()
    return {"session_id": session_id, **session.to_dict()}


@app.delete("/session/{session_id}")
def delete_session(session_id: str):
    sessions.pop(session_id, None)
    return {"status": "deleted", "session_id": session_id}


# ==================== Run Server ====================

if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run("api.main:app", host="0.0.0.0", port=8000, reload=True)
