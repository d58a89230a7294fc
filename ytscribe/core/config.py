"""
Application configuration manager.
Stores settings in a JSON file under the app support directory.
Secrets (the OpenAI key) come from the environment / .env, never this file.
"""

import json
import logging
import re
from pathlib import Path

from dotenv import load_dotenv

from ytscribe.core.constants import (
    CONFIG_PATH, DB_PATH, DEFAULT_CAPTION_LANGUAGE,
    INNERTUBE_CLIENT_NAME, INNERTUBE_CLIENT_VERSION,
    HTTP_TIMEOUT_SEC, LLM_MODEL, LLM_TIMEOUT_SEC,
)

# Load environment variables from .env (don't override existing env vars)
load_dotenv(override=False)

# Validation bounds
_HTTP_TIMEOUT_MIN = 1
_HTTP_TIMEOUT_MAX = 300
_LLM_TIMEOUT_MIN = 10
_LLM_TIMEOUT_MAX = 1800
_LANGUAGE_CODE_RE = re.compile(r'^[A-Za-z]{2,3}(?:-[A-Za-z0-9]{2,8})*$')

logger = logging.getLogger(__name__)

_DEFAULTS = {
    'db_path': str(DB_PATH),
    'preferred_language': DEFAULT_CAPTION_LANGUAGE,
    'innertube_client_name': INNERTUBE_CLIENT_NAME,
    'innertube_client_version': INNERTUBE_CLIENT_VERSION,
    'http_timeout_sec': HTTP_TIMEOUT_SEC,
    'llm_model': LLM_MODEL,
    'llm_base_url': None,
    'llm_timeout_sec': LLM_TIMEOUT_SEC,
}


class AppConfig:
    """Manages application configuration stored as JSON."""

    def __init__(self, config_path: Path | None = None):
        self.path = config_path or CONFIG_PATH
        self._data: dict = {}
        self.load()

    def load(self):
        """Load config from disk, merging with defaults."""
        self._data = dict(_DEFAULTS)
        if self.path.exists():
            try:
                with open(self.path, 'r') as f:
                    saved = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Failed to load config: %s", e)
                return
            for key, value in saved.items():
                self._data[key] = self._validate(key, value)

    def save(self):
        """Persist config to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(self._data, f, indent=2)

    def get(self, key: str, default=None):
        return self._data.get(key, default)

    def set(self, key: str, value):
        value = self._validate(key, value)
        self._data[key] = value
        self.save()

    def _validate(self, key: str, value):
        """Validate and coerce config values to safe ranges."""
        if key == 'http_timeout_sec':
            try:
                value = float(value)
            except (TypeError, ValueError):
                logger.warning("Invalid http_timeout_sec %r, using default", value)
                return HTTP_TIMEOUT_SEC
            return max(_HTTP_TIMEOUT_MIN, min(_HTTP_TIMEOUT_MAX, value))

        if key == 'llm_timeout_sec':
            try:
                value = float(value)
            except (TypeError, ValueError):
                logger.warning("Invalid llm_timeout_sec %r, using default", value)
                return LLM_TIMEOUT_SEC
            return max(_LLM_TIMEOUT_MIN, min(_LLM_TIMEOUT_MAX, value))

        if key == 'preferred_language':
            if not isinstance(value, str) or not _LANGUAGE_CODE_RE.match(value):
                logger.warning("Invalid preferred_language %r, using %s",
                               value, DEFAULT_CAPTION_LANGUAGE)
                return DEFAULT_CAPTION_LANGUAGE

        if key in ('innertube_client_name', 'innertube_client_version'):
            if not isinstance(value, str) or not value.strip():
                return _DEFAULTS[key]
            return value.strip()

        return value

    def as_dict(self) -> dict:
        return dict(self._data)

    @property
    def db_path(self) -> Path:
        return Path(self._data.get('db_path', str(DB_PATH)))

    @property
    def preferred_language(self) -> str:
        return self._data.get('preferred_language', DEFAULT_CAPTION_LANGUAGE)
