"""
Shared constants for YTScribe.
Single source of truth: imported by every other module.
"""

import pathlib

# ── Application identity ──────────────────────────────────────────────
APP_NAME = "YTScribe"
APP_VERSION = "1.0.0"

# ── Filesystem paths ─────────────────────────────────────────────────
HOME = pathlib.Path.home()

APP_SUPPORT_DIR = HOME / ".local" / "share" / "ytscribe"
LOG_DIR = HOME / ".local" / "state" / "ytscribe"
DB_PATH = APP_SUPPORT_DIR / "ytscribe.db"
CONFIG_PATH = APP_SUPPORT_DIR / "config.json"

# ── Transcript source types ──────────────────────────────────────────
class SourceType:
    YOUTUBE = "youtube"
    UPLOAD = "upload"

# ── Error codes ───────────────────────────────────────────────────────
class ErrorCode:
    # Caption extraction
    UPSTREAM_UNAVAILABLE = "ERR_UPSTREAM_UNAVAILABLE"
    DEADLINE_EXCEEDED = "ERR_DEADLINE_EXCEEDED"
    PROTOCOL_CHANGED = "ERR_PROTOCOL_CHANGED"
    NO_CAPTIONS = "ERR_NO_CAPTIONS_AVAILABLE"
    MALFORMED_RESPONSE = "ERR_MALFORMED_RESPONSE"

    # Caller-facing
    CAPTIONS_UNAVAILABLE = "ERR_CAPTIONS_UNAVAILABLE"
    INVALID_INPUT = "ERR_INVALID_INPUT"
    NOT_FOUND = "ERR_NOT_FOUND"

    # Storage
    DUPLICATE_TRANSLATION = "ERR_DUPLICATE_TRANSLATION"

    # Collaborators
    LLM_FAILED = "ERR_LLM_FAILED"
    LLM_TRANSIENT = "ERR_LLM_TRANSIENT"
    TRANSCRIPTION_FAILED = "ERR_TRANSCRIPTION_FAILED"

RETRYABLE_ERRORS = {
    ErrorCode.UPSTREAM_UNAVAILABLE,
    ErrorCode.DEADLINE_EXCEEDED,
    ErrorCode.LLM_TRANSIENT,
}

CAPTION_ERROR_CODES = {
    ErrorCode.UPSTREAM_UNAVAILABLE,
    ErrorCode.DEADLINE_EXCEEDED,
    ErrorCode.PROTOCOL_CHANGED,
    ErrorCode.NO_CAPTIONS,
    ErrorCode.MALFORMED_RESPONSE,
}

CAPTIONS_UNAVAILABLE_MESSAGE = "Captions are not available for this video."

# ── YouTube Innertube endpoints ──────────────────────────────────────
YOUTUBE_BASE = "https://www.youtube.com"
WATCH_URL = YOUTUBE_BASE + "/watch?v={video_id}"
PLAYER_URL = YOUTUBE_BASE + "/youtubei/v1/player?key={api_key}"

INNERTUBE_API_KEY_RE = r'"INNERTUBE_API_KEY":"([^"]+)"'
CAPTION_FORMAT_SUFFIX_RE = r'&fmt=\w+$'

# Client identity known to expose caption tracks. No meaning beyond that.
INNERTUBE_CLIENT_NAME = "ANDROID"
INNERTUBE_CLIENT_VERSION = "20.10.38"

DEFAULT_CAPTION_LANGUAGE = "en"
HTTP_TIMEOUT_SEC = 30

# ── LLM collaborator ─────────────────────────────────────────────────
LLM_MODEL = "gpt-4o-mini"
LLM_TIMEOUT_SEC = 300
OPENAI_API_KEY_ENV = "OPENAI_API_KEY"

TRANSLATION_SYSTEM_PROMPT = (
    "You are a professional translator. Translate the following text to "
    "{language_name}. Preserve the meaning and tone. Return only the "
    "translated text without any additional commentary."
)

ANALYSIS_SYSTEM_PROMPT = (
    "You are an AI assistant helping to analyze video transcripts and "
    "translations. Provide insightful, accurate, and helpful analysis "
    "based on the text provided."
)
ANALYSIS_MAX_CHARS = 4000
ANALYSIS_FALLBACK = "No analysis available"

# ── Misc ──────────────────────────────────────────────────────────────
VIDEO_ID_RE = r'^[a-zA-Z0-9_-]{11}$'
YOUTUBE_URL_PATTERNS = [
    r'(?:https?://)?(?:www\.)?youtube\.com/watch\?(?:.*&)?v=([a-zA-Z0-9_-]{11})',
    r'(?:https?://)?youtu\.be/([a-zA-Z0-9_-]{11})',
    r'(?:https?://)?(?:www\.)?youtube\.com/embed/([a-zA-Z0-9_-]{11})',
    r'(?:https?://)?(?:www\.)?youtube\.com/v/([a-zA-Z0-9_-]{11})',
    r'(?:https?://)?(?:www\.)?youtube\.com/shorts/([a-zA-Z0-9_-]{11})',
    r'(?:https?://)?m\.youtube\.com/watch\?(?:.*&)?v=([a-zA-Z0-9_-]{11})',
]
