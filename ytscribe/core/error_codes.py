"""
Standardised error handling for YTScribe.

Every failure carries a stable ``code`` from ``ErrorCode`` so callers can
log or branch on the kind without parsing messages.
"""

import time

from ytscribe.core.constants import (
    ErrorCode, RETRYABLE_ERRORS, CAPTION_ERROR_CODES,
    CAPTIONS_UNAVAILABLE_MESSAGE,
)


class TranscriptError(Exception):
    """Raised when an operation encounters a known error condition."""

    def __init__(self, code: str, message: str, retryable: bool | None = None):
        self.code = code
        self.message = message
        # auto-detect retryable from code if not explicitly set
        self.retryable = retryable if retryable is not None else is_retryable(code)
        super().__init__(f"[{code}] {message}")


class _KindError(TranscriptError):
    """Base for errors whose code is fixed by their class."""

    code: str

    def __init__(self, message: str = "", retryable: bool | None = None):
        super().__init__(type(self).code, message, retryable)


# ── Caption extraction kinds ──────────────────────────────────────────

class UpstreamUnavailable(_KindError):
    """Transport or HTTP failure talking to YouTube. Safe to retry later."""
    code = ErrorCode.UPSTREAM_UNAVAILABLE


class DeadlineExceeded(UpstreamUnavailable):
    code = ErrorCode.DEADLINE_EXCEEDED


class ProtocolChanged(_KindError):
    """Expected token or shape missing from the upstream page or JSON."""
    code = ErrorCode.PROTOCOL_CHANGED


class NoCaptionsAvailable(_KindError):
    """The video has no caption tracks."""
    code = ErrorCode.NO_CAPTIONS


class MalformedResponse(_KindError):
    """XML or JSON did not parse into the expected shape."""
    code = ErrorCode.MALFORMED_RESPONSE


# ── Caller-facing kinds ───────────────────────────────────────────────

class CaptionsUnavailable(_KindError):
    """
    Single user-facing failure for any caption extraction error.
    The underlying kind is kept on ``cause_code`` and as ``__cause__``.
    """
    code = ErrorCode.CAPTIONS_UNAVAILABLE

    def __init__(self, cause: TranscriptError):
        super().__init__(CAPTIONS_UNAVAILABLE_MESSAGE, retryable=cause.retryable)
        self.cause_code = cause.code


class InvalidInput(_KindError):
    code = ErrorCode.INVALID_INPUT


class NotFound(_KindError):
    code = ErrorCode.NOT_FOUND


class DuplicateTranslation(_KindError):
    """A translation for this (transcript, language) pair already exists."""
    code = ErrorCode.DUPLICATE_TRANSLATION


class TranscriptionFailed(_KindError):
    code = ErrorCode.TRANSCRIPTION_FAILED


def is_retryable(code: str) -> bool:
    return code in RETRYABLE_ERRORS


def is_caption_error(err: Exception) -> bool:
    return isinstance(err, TranscriptError) and err.code in CAPTION_ERROR_CODES


def time_remaining(deadline: float | None, what: str) -> float | None:
    """
    Seconds left before an absolute ``time.monotonic()`` deadline, or None
    when there is no deadline. Raises DeadlineExceeded once it has passed.
    """
    if deadline is None:
        return None
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise DeadlineExceeded(f"Deadline passed before {what}")
    return remaining
