"""
SQLite database layer for YTScribe.
Thread-safe via check_same_thread=False + explicit locking.
"""

import sqlite3
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path

from ytscribe.core.constants import DB_PATH, SourceType
from ytscribe.core.error_codes import DuplicateTranslation
from ytscribe.core.models_sqlite import Transcript, Translation

logger = logging.getLogger(__name__)

_SCHEMA_VERSION = 1

_CREATE_TABLES = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS transcripts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    video_id TEXT,
    video_title TEXT,
    video_url TEXT,
    source_type TEXT NOT NULL CHECK (source_type IN ('youtube', 'upload')),
    original_language TEXT,
    transcript_text TEXT NOT NULL,
    file_key TEXT,
    created_at TEXT,
    updated_at TEXT
);

CREATE INDEX IF NOT EXISTS idx_transcripts_created_at ON transcripts(created_at DESC);
CREATE INDEX IF NOT EXISTS idx_transcripts_video_id ON transcripts(video_id);

CREATE TABLE IF NOT EXISTS translations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    transcript_id INTEGER NOT NULL,
    target_language TEXT NOT NULL,
    translated_text TEXT NOT NULL,
    created_at TEXT,
    UNIQUE (transcript_id, target_language),
    FOREIGN KEY (transcript_id) REFERENCES transcripts(id) ON DELETE CASCADE
);
"""

_TRANSCRIPT_FIELDS = (
    'video_id', 'video_title', 'video_url', 'source_type',
    'original_language', 'transcript_text', 'file_key',
)


class Database:
    """SQLite database wrapper for YTScribe."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or DB_PATH
        self._lock = threading.Lock()
        self._ensure_dirs()
        self.conn = sqlite3.connect(
            str(self.db_path),
            check_same_thread=False,
        )
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.execute("PRAGMA foreign_keys=ON")
        self._migrate()

    def _ensure_dirs(self):
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _migrate(self):
        with self._lock:
            cur = self.conn.cursor()
            cur.executescript(_CREATE_TABLES)
            cur.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (_SCHEMA_VERSION,),
            )
            self.conn.commit()

    def close(self):
        if self.conn:
            self.conn.close()

    # ── Helpers ───────────────────────────────────────────────────────

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    @staticmethod
    def _row_to_transcript(row: sqlite3.Row) -> Transcript:
        return Transcript(**dict(row))

    @staticmethod
    def _row_to_translation(row: sqlite3.Row) -> Translation:
        return Translation(**dict(row))

    def _fetchone(self, sql: str, params: tuple):
        with self._lock:
            return self.conn.execute(sql, params).fetchone()

    def _fetchall(self, sql: str, params: tuple = ()):
        with self._lock:
            return self.conn.execute(sql, params).fetchall()

    # ── Transcript CRUD ───────────────────────────────────────────────

    def create_transcript(self, transcript_text: str,
                          source_type: str = SourceType.YOUTUBE,
                          **fields) -> Transcript:
        unknown = set(fields) - set(_TRANSCRIPT_FIELDS)
        if unknown:
            raise TypeError(f"Unknown transcript fields: {sorted(unknown)}")

        values = dict(fields, transcript_text=transcript_text, source_type=source_type)
        now = self._now()
        values['created_at'] = now
        values['updated_at'] = now

        cols = ', '.join(values)
        marks = ', '.join('?' for _ in values)
        with self._lock:
            cur = self.conn.execute(
                f"INSERT INTO transcripts ({cols}) VALUES ({marks})",
                tuple(values.values()),
            )
            self.conn.commit()
            transcript_id = cur.lastrowid
        return Transcript(id=transcript_id, **values)

    def get_transcript(self, transcript_id: int) -> Transcript | None:
        row = self._fetchone(
            "SELECT * FROM transcripts WHERE id = ?", (transcript_id,)
        )
        return self._row_to_transcript(row) if row else None

    def get_all_transcripts(self) -> list[Transcript]:
        rows = self._fetchall(
            "SELECT * FROM transcripts ORDER BY created_at DESC, id DESC"
        )
        return [self._row_to_transcript(r) for r in rows]

    def delete_transcript(self, transcript_id: int):
        # translations go with it via ON DELETE CASCADE
        with self._lock:
            self.conn.execute("DELETE FROM transcripts WHERE id = ?", (transcript_id,))
            self.conn.commit()

    # ── Translation CRUD ──────────────────────────────────────────────

    def create_translation(self, transcript_id: int, target_language: str,
                           translated_text: str) -> Translation:
        """
        Insert a translation. Raises DuplicateTranslation if one already
        exists for (transcript_id, target_language); the stored row is
        never overwritten.
        """
        now = self._now()
        with self._lock:
            try:
                cur = self.conn.execute(
                    """INSERT INTO translations
                       (transcript_id, target_language, translated_text, created_at)
                       VALUES (?, ?, ?, ?)""",
                    (transcript_id, target_language, translated_text, now),
                )
                self.conn.commit()
            except sqlite3.IntegrityError as e:
                self.conn.rollback()
                if 'UNIQUE' in str(e):
                    raise DuplicateTranslation(
                        f"Translation exists for transcript {transcript_id} "
                        f"({target_language})") from e
                raise
            translation_id = cur.lastrowid
        return Translation(
            id=translation_id,
            transcript_id=transcript_id,
            target_language=target_language,
            translated_text=translated_text,
            created_at=now,
        )

    def get_translation(self, transcript_id: int,
                        target_language: str) -> Translation | None:
        row = self._fetchone(
            """SELECT * FROM translations
               WHERE transcript_id = ? AND target_language = ? LIMIT 1""",
            (transcript_id, target_language),
        )
        return self._row_to_translation(row) if row else None

    def get_translations(self, transcript_id: int) -> list[Translation]:
        rows = self._fetchall(
            "SELECT * FROM translations WHERE transcript_id = ? ORDER BY id",
            (transcript_id,),
        )
        return [self._row_to_translation(r) for r in rows]
