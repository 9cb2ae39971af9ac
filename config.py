"""
Configuration - Environment-driven settings.

Values come from the process environment, with `.env` loaded first.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()


# ==================== LLM ====================

OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

QUESTION_TEMPERATURE = float(os.getenv("QUESTION_TEMPERATURE", 0.7))
EVALUATION_TEMPERATURE = float(os.getenv("EVALUATION_TEMPERATURE", 0.3))
PASSAGE_TEMPERATURE = float(os.getenv("PASSAGE_TEMPERATURE", 0.8))

QUESTION_MAX_TOKENS = int(os.getenv("QUESTION_MAX_TOKENS", 200))
EVALUATION_MAX_TOKENS = int(os.getenv("EVALUATION_MAX_TOKENS", 200))
PASSAGE_MAX_TOKENS = int(os.getenv("PASSAGE_MAX_TOKENS", 1500))

# ==================== Input Limits (characters) ====================

MAX_PARAGRAPH_LENGTH = int(os.getenv("MAX_PARAGRAPH_LENGTH", 5000))
MAX_PASSAGE_LENGTH = int(os.getenv("MAX_PASSAGE_LENGTH", 10000))
MAX_TITLE_LENGTH = int(os.getenv("MAX_TITLE_LENGTH", 200))
MAX_QUESTION_LENGTH = int(os.getenv("MAX_QUESTION_LENGTH", 500))
MAX_ANSWER_LENGTH = int(os.getenv("MAX_ANSWER_LENGTH", 2000))

# ==================== Session ====================

COMPLETION_DELAY_SECONDS = float(os.getenv("COMPLETION_DELAY_SECONDS", 0.8))
DEFAULT_DIFFICULTY = os.getenv("DEFAULT_DIFFICULTY", "intermediate")
DEFAULT_REFERENCE_LENGTH = int(os.getenv("DEFAULT_REFERENCE_LENGTH", 1000))
