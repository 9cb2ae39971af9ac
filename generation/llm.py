"""
LLM plumbing shared by the generators.

    - build_llm: ChatOpenAI configured from config.py
    - invoke_json: one JSON-mode call, parsed into a dict
    - clip: trim + length-limit untrusted text
"""

import json
import logging
from typing import List, Optional, Type

from langchain_openai import ChatOpenAI

import config
from core.errors import QuizError

logger = logging.getLogger(__name__)


def build_llm(temperature: float, max_tokens: int, model: Optional[str] = None) -> ChatOpenAI:
    return ChatOpenAI(
        model=model or config.OPENAI_MODEL,
        temperature=temperature,
        max_tokens=max_tokens,
    )


def clip(text: Optional[str], limit: int) -> str:
    """Strip whitespace and cut to at most `limit` characters."""
    return (text or "").strip()[:limit]


def invoke_json(llm, messages: List, error_cls: Type[QuizError]) -> dict:
    """Invoke the model in JSON mode and parse the reply into a dict."""
    try:
        response = llm.invoke(messages, response_format={"type": "json_object"})
    except Exception as exc:
        logger.warning("LLM call failed: %s", exc)
        raise error_cls(f"LLM request failed: {exc}") from exc

    content = (getattr(response, "content", "") or "").strip()
    if not content:
        raise error_cls("LLM returned an empty response")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        logger.warning("Unparsable LLM response: %r", content[:200])
        raise error_cls("LLM response was not valid JSON") from exc

    if not isinstance(data, dict):
        raise error_cls("LLM response was not a JSON object")
    return data
