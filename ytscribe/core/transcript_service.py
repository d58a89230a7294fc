"""
Transcript acquisition: YouTube captions or an uploaded file → stored transcript.
"""

import logging
from typing import Callable

from ytscribe.core.captions_fetch import CaptionExtractor, InnertubeCaptionExtractor
from ytscribe.core.captions_parse import segments_to_text
from ytscribe.core.constants import SourceType, DEFAULT_CAPTION_LANGUAGE
from ytscribe.core.db_sqlite import Database
from ytscribe.core.error_codes import (
    TranscriptError, CaptionsUnavailable, NotFound, TranscriptionFailed,
    is_caption_error,
)
from ytscribe.core.models_sqlite import Transcript
from ytscribe.core.url_parse import validate_youtube_url

logger = logging.getLogger(__name__)

# file_url -> {"text": ..., "language": ...} or {"error": ...}
Transcriber = Callable[[str], dict]


class TranscriptService:

    def __init__(self, db: Database, extractor: CaptionExtractor | None = None):
        self.db = db
        self.extractor = extractor or InnertubeCaptionExtractor()

    def from_youtube(self, url: str,
                     preferred_language: str = DEFAULT_CAPTION_LANGUAGE,
                     deadline: float | None = None) -> Transcript:
        """
        Extract captions for a YouTube URL and store the joined text.
        Any extraction failure surfaces as CaptionsUnavailable; the
        specific kind is logged and kept as ``cause_code``.
        """
        video_id = validate_youtube_url(url)

        try:
            segments = self.extractor.extract(video_id, preferred_language, deadline=deadline)
        except TranscriptError as e:
            if not is_caption_error(e):
                raise
            logger.warning("Caption extraction failed for %s: %s", video_id, e)
            raise CaptionsUnavailable(e) from e

        text = segments_to_text(segments)
        transcript = self.db.create_transcript(
            text,
            source_type=SourceType.YOUTUBE,
            video_id=video_id,
            video_url=url,
        )
        logger.info("Saved transcript %s for %s (%d chars)",
                    transcript.id, video_id, len(text))
        return transcript

    def from_upload(self, file_url: str, file_name: str,
                    transcriber: Transcriber) -> Transcript:
        result = transcriber(file_url)
        if 'error' in result:
            logger.warning("Upload transcription failed for %s: %s",
                           file_name, result['error'])
            raise TranscriptionFailed(str(result['error']))

        return self.db.create_transcript(
            result.get('text', ''),
            source_type=SourceType.UPLOAD,
            video_title=file_name,
            original_language=result.get('language'),
            file_key=file_url,
        )

    def get(self, transcript_id: int) -> Transcript:
        transcript = self.db.get_transcript(transcript_id)
        if transcript is None:
            raise NotFound(f"Transcript {transcript_id} not found")
        return transcript

    def history(self) -> list[Transcript]:
        return self.db.get_all_transcripts()

    def delete(self, transcript_id: int):
        """Delete a transcript and its translations. Unknown ids are a no-op."""
        self.db.delete_transcript(transcript_id)
