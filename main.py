#!/usr/bin/env python3
"""
YTScribe v1.0.0: command-line entry point.
"""

import logging
import sys
import time
from datetime import datetime

import typer

from ytscribe.core.analysis import analyze_text
from ytscribe.core.captions_fetch import InnertubeCaptionExtractor
from ytscribe.core.config import AppConfig
from ytscribe.core.constants import APP_NAME, APP_VERSION, LOG_DIR
from ytscribe.core.db_sqlite import Database
from ytscribe.core.error_codes import TranscriptError, CaptionsUnavailable
from ytscribe.core.llm import LLMClient
from ytscribe.core.transcript_service import TranscriptService
from ytscribe.core.translation import TranslationCache

logger = logging.getLogger("ytscribe")

app = typer.Typer(
    name="ytscribe",
    help="YTScribe: YouTube captions, translation and analysis",
    no_args_is_help=True,
)


def setup_logging(verbose: bool = False):
    """Log to <LOG_DIR>/app.log, and to stderr with --verbose."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    handlers: list[logging.Handler] = [
        logging.FileHandler(LOG_DIR / "app.log", encoding="utf-8"),
    ]
    if verbose:
        handlers.append(logging.StreamHandler(sys.stderr))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )


@app.callback()
def _startup(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stderr")):
    setup_logging(verbose)
    logger.info("%s v%s starting at %s", APP_NAME, APP_VERSION, datetime.now().isoformat())


def _open() -> tuple[AppConfig, Database]:
    config = AppConfig()
    logger.debug("Config: %s", config.as_dict())
    return config, Database(config.db_path)


def _fail(err: TranscriptError):
    logger.error("Command failed: %s", err)
    typer.echo(err.message, err=True)
    raise typer.Exit(code=1)


@app.command()
def fetch(
    url: str = typer.Argument(..., help="YouTube URL or 11-character video id"),
    lang: str | None = typer.Option(None, "--lang", "-l", help="Preferred caption language"),
    timeout: float | None = typer.Option(None, "--timeout", help="Overall deadline in seconds"),
):
    """Extract captions and store them as a transcript."""
    config, db = _open()
    try:
        service = TranscriptService(db, InnertubeCaptionExtractor.from_config(config))
        deadline = time.monotonic() + timeout if timeout else None
        transcript = service.from_youtube(url, lang or config.preferred_language,
                                          deadline=deadline)
    except CaptionsUnavailable as e:
        logger.error("Captions unavailable (%s)", e.cause_code)
        _fail(e)
    except TranscriptError as e:
        _fail(e)
    finally:
        db.close()
    typer.echo(f"Saved transcript {transcript.id}")
    typer.echo(transcript.transcript_text)


@app.command()
def show(transcript_id: int):
    """Print a stored transcript."""
    _, db = _open()
    try:
        transcript = TranscriptService(db).get(transcript_id)
    except TranscriptError as e:
        _fail(e)
    finally:
        db.close()
    typer.echo(transcript.transcript_text)


@app.command()
def history():
    """List stored transcripts, newest first."""
    _, db = _open()
    try:
        for t in db.get_all_transcripts():
            label = t.video_title or t.video_id or t.file_key or ""
            typer.echo(f"{t.id}\t{t.source_type}\t{t.created_at}\t{label}")
    finally:
        db.close()


@app.command()
def delete(transcript_id: int):
    """Delete a transcript and all its translations."""
    _, db = _open()
    try:
        db.delete_transcript(transcript_id)
    finally:
        db.close()
    typer.echo(f"Deleted transcript {transcript_id}")


@app.command()
def translate(
    transcript_id: int,
    language_code: str = typer.Argument(..., help="Target language code, e.g. es"),
    language_name: str = typer.Argument(..., help="Target language name, e.g. Spanish"),
    timeout: float | None = typer.Option(None, "--timeout", help="Overall deadline in seconds"),
):
    """Translate a transcript (cached per transcript and language)."""
    config, db = _open()
    try:
        cache = TranslationCache(db, db, LLMClient.from_config(config))
        deadline = time.monotonic() + timeout if timeout else None
        result = cache.translate(transcript_id, language_code, language_name,
                                 deadline=deadline)
    except TranscriptError as e:
        _fail(e)
    finally:
        db.close()
    if result.was_cached:
        typer.echo("(cached)", err=True)
    typer.echo(result.text)


@app.command()
def translations(transcript_id: int):
    """List stored translations for a transcript."""
    _, db = _open()
    try:
        records = TranslationCache(db, db, llm=None).list_translations(transcript_id)
    except TranscriptError as e:
        _fail(e)
    finally:
        db.close()
    for r in records:
        typer.echo(f"{r.target_language}\t{r.created_at}\t{len(r.translated_text)} chars")


@app.command()
def analyze(
    transcript_id: int,
    prompt: str | None = typer.Option(None, "--prompt", "-p", help="Question to ask about the text"),
    language_code: str | None = typer.Option(None, "--translation", help="Analyze this translation instead"),
):
    """Analyze a transcript (or one of its translations) with the LLM."""
    config, db = _open()
    try:
        transcript = TranscriptService(db).get(transcript_id)
        text = transcript.transcript_text
        if language_code:
            record = db.get_translation(transcript_id, language_code)
            if record is None:
                typer.echo(f"No {language_code} translation for transcript {transcript_id}", err=True)
                raise typer.Exit(code=1)
            text = record.translated_text
        analysis = analyze_text(LLMClient.from_config(config), text, prompt)
    except TranscriptError as e:
        _fail(e)
    finally:
        db.close()
    typer.echo(analysis)


def main():
    try:
        app()
    except Exception as e:
        logger.critical("Fatal error: %s: %s", type(e).__name__, e, exc_info=True)
        raise


if __name__ == "__main__":
    main()
