"""
AI analysis of transcript or translation text, with optional chat history.
"""

import logging

from ytscribe.core.constants import (
    ANALYSIS_SYSTEM_PROMPT, ANALYSIS_MAX_CHARS, ANALYSIS_FALLBACK,
)

logger = logging.getLogger(__name__)


def build_analysis_messages(text: str, prompt: str | None = None,
                            history: list[dict] | None = None) -> list[dict]:
    """
    System prompt, then prior user/assistant turns, then the current request.
    Only the first ANALYSIS_MAX_CHARS characters of ``text`` are sent.
    """
    messages = [{"role": "system", "content": ANALYSIS_SYSTEM_PROMPT}]

    for turn in history or []:
        role = turn.get('role')
        if role not in ("user", "assistant"):
            raise ValueError(f"History turns must be user or assistant, got {role!r}")
        messages.append({"role": role, "content": turn.get('content', '')})

    excerpt = text[:ANALYSIS_MAX_CHARS]
    if prompt:
        user_prompt = f"{prompt}\n\nText to analyze:\n{excerpt}"
    else:
        user_prompt = f"Please analyze the following text:\n\n{excerpt}"
    messages.append({"role": "user", "content": user_prompt})
    return messages


def analyze_text(llm, text: str, prompt: str | None = None,
                 history: list[dict] | None = None) -> str:
    if len(text) > ANALYSIS_MAX_CHARS:
        logger.info("Analysis input truncated from %d to %d chars",
                    len(text), ANALYSIS_MAX_CHARS)
    analysis = llm.complete(build_analysis_messages(text, prompt, history))
    return analysis or ANALYSIS_FALLBACK
