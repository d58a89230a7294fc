"""
SQLite data models (plain dataclasses) for YTScribe.
"""

from dataclasses import dataclass
from typing import Optional

from ytscribe.core.constants import SourceType


@dataclass
class Transcript:
    id: int
    transcript_text: str
    source_type: str = SourceType.YOUTUBE
    video_id: Optional[str] = None
    video_title: Optional[str] = None
    video_url: Optional[str] = None
    original_language: Optional[str] = None
    file_key: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass(frozen=True)
class Translation:
    id: int
    transcript_id: int
    target_language: str
    translated_text: str
    created_at: Optional[str] = None
