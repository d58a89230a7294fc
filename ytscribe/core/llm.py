"""
LLM collaborator: role-tagged messages in, one completion string out.
Wraps the OpenAI chat completions API.
"""

import logging
import os

from openai import OpenAI
from openai import APIError, APITimeoutError, RateLimitError, APIConnectionError

from ytscribe.core.constants import (
    ErrorCode, LLM_MODEL, LLM_TIMEOUT_SEC, OPENAI_API_KEY_ENV,
)
from ytscribe.core.error_codes import TranscriptError, DeadlineExceeded

logger = logging.getLogger(__name__)

VALID_ROLES = ("system", "user", "assistant")


class LLMClient:
    """Thin wrapper over ``client.chat.completions.create``."""

    def __init__(self, api_key: str | None = None, model: str = LLM_MODEL,
                 base_url: str | None = None, timeout: float = LLM_TIMEOUT_SEC,
                 client: OpenAI | None = None):
        self.model = model
        self.timeout = timeout
        self._client = client or OpenAI(
            api_key=api_key,
            base_url=base_url or None,
            timeout=timeout,
            max_retries=0,  # retry policy belongs to the caller
        )

    @classmethod
    def from_config(cls, config) -> "LLMClient":
        api_key = os.getenv(OPENAI_API_KEY_ENV, "")
        if not api_key:
            raise TranscriptError(
                ErrorCode.LLM_FAILED,
                f"{OPENAI_API_KEY_ENV} is required. Set it in your .env file or environment.",
            )
        return cls(
            api_key=api_key,
            model=config.get('llm_model', LLM_MODEL),
            base_url=config.get('llm_base_url'),
            timeout=config.get('llm_timeout_sec', LLM_TIMEOUT_SEC),
        )

    def complete(self, messages: list[dict], timeout: float | None = None) -> str:
        """
        Send ``[{"role": ..., "content": ...}, ...]`` and return the reply text.
        ``timeout`` overrides the client timeout for this call only; a
        timeout shorter than the client's surfaces as DeadlineExceeded.
        Raises TranscriptError (LLM_TRANSIENT for rate limits and connection
        problems, LLM_FAILED otherwise).
        """
        for msg in messages:
            if msg.get('role') not in VALID_ROLES:
                raise ValueError(f"Invalid message role: {msg.get('role')!r}")

        request_params = {"model": self.model, "messages": messages}
        if timeout is not None:
            timeout = min(self.timeout, timeout)
            request_params["timeout"] = timeout

        try:
            response = self._client.chat.completions.create(**request_params)
        except APITimeoutError as e:
            if timeout is not None and timeout < self.timeout:
                logger.warning("LLM call hit the caller deadline after %.1fs", timeout)
                raise DeadlineExceeded(f"LLM call hit the deadline after {timeout:.1f}s") from e
            logger.warning("LLM request timed out")
            raise TranscriptError(ErrorCode.LLM_TRANSIENT, "LLM request timed out") from e
        except RateLimitError as e:
            logger.warning("LLM rate limited: %s", e)
            raise TranscriptError(ErrorCode.LLM_TRANSIENT,
                                  "LLM rate limit exceeded") from e
        except APIConnectionError as e:
            logger.warning("LLM connection error: %s", type(e).__name__)
            raise TranscriptError(ErrorCode.LLM_TRANSIENT,
                                  "Could not reach the LLM service") from e
        except APIError as e:
            logger.error("LLM API error: %s", e)
            raise TranscriptError(ErrorCode.LLM_FAILED, f"LLM API error: {e}") from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
