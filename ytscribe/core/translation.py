"""
Translation cache-or-compute layer.

A translation is a pure function of (transcript, target language), so each
pair is computed at most once and stored forever. Concurrent first requests
for the same pair may each call the LLM, but the store's unique key lets only
one row in; losers re-read that row and return it.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from ytscribe.core.constants import TRANSLATION_SYSTEM_PROMPT
from ytscribe.core.error_codes import NotFound, DuplicateTranslation, time_remaining
from ytscribe.core.models_sqlite import Transcript, Translation

logger = logging.getLogger(__name__)


class TranscriptStore(Protocol):
    def get_transcript(self, transcript_id: int) -> Transcript | None: ...


class TranslationStore(Protocol):
    def get_translation(self, transcript_id: int,
                        target_language: str) -> Translation | None: ...

    def get_translations(self, transcript_id: int) -> list[Translation]: ...

    def create_translation(self, transcript_id: int, target_language: str,
                           translated_text: str) -> Translation: ...


class Completer(Protocol):
    def complete(self, messages: list[dict], timeout: float | None = None) -> str: ...


@dataclass(frozen=True)
class TranslationResult:
    text: str
    was_cached: bool


def build_translation_messages(text: str, language_name: str) -> list[dict]:
    return [
        {"role": "system",
         "content": TRANSLATION_SYSTEM_PROMPT.format(language_name=language_name)},
        {"role": "user", "content": text},
    ]


class TranslationCache:

    def __init__(self, transcripts: TranscriptStore,
                 translations: TranslationStore, llm: Completer):
        self.transcripts = transcripts
        self.translations = translations
        self.llm = llm

    def translate(self, transcript_id: int, target_language: str,
                  language_name: str,
                  deadline: float | None = None) -> TranslationResult:
        """
        Return the stored translation for the pair, or compute and store it.
        ``deadline`` is an absolute ``time.monotonic()`` value; the LLM call
        is given at most the time left before it.
        """
        time_remaining(deadline, "translation lookup")
        existing = self.translations.get_translation(transcript_id, target_language)
        if existing is not None:
            logger.debug("Translation cache hit: %s/%s", transcript_id, target_language)
            return TranslationResult(existing.translated_text, was_cached=True)

        transcript = self.transcripts.get_transcript(transcript_id)
        if transcript is None:
            raise NotFound(f"Transcript {transcript_id} not found")

        logger.info("Translating transcript %s to %s (%d chars)",
                    transcript_id, target_language, len(transcript.transcript_text))
        messages = build_translation_messages(transcript.transcript_text, language_name)
        remaining = time_remaining(deadline, "LLM call")
        # collaborator errors propagate as-is
        if remaining is None:
            translated = self.llm.complete(messages)
        else:
            translated = self.llm.complete(messages, timeout=remaining)

        try:
            self.translations.create_translation(transcript_id, target_language, translated)
        except DuplicateTranslation:
            # Another request stored this pair first; its row wins.
            stored = self.translations.get_translation(transcript_id, target_language)
            if stored is None:
                raise
            logger.info("Translation %s/%s written concurrently, using stored row",
                        transcript_id, target_language)
            return TranslationResult(stored.translated_text, was_cached=True)

        return TranslationResult(translated, was_cached=False)

    def list_translations(self, transcript_id: int) -> list[Translation]:
        if self.transcripts.get_transcript(transcript_id) is None:
            raise NotFound(f"Transcript {transcript_id} not found")
        return self.translations.get_translations(transcript_id)
