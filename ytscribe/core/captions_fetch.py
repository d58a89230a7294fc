"""
Captions fetching via YouTube's internal Innertube API.

Five strictly sequential steps, no retries:
    1. GET the watch page
    2. scrape INNERTUBE_API_KEY from the HTML
    3. POST the player endpoint as a fixed client identity
    4. pick a caption track (exact language match, else first)
    5. GET the track's timedtext XML and parse it
Any failure aborts the whole extraction with that step's error kind.
"""

import abc
import json
import logging
import re
from dataclasses import dataclass

import requests

from ytscribe.core.captions_parse import CaptionSegment, parse_caption_xml
from ytscribe.core.constants import (
    WATCH_URL, PLAYER_URL, INNERTUBE_API_KEY_RE, CAPTION_FORMAT_SUFFIX_RE,
    INNERTUBE_CLIENT_NAME, INNERTUBE_CLIENT_VERSION,
    DEFAULT_CAPTION_LANGUAGE, HTTP_TIMEOUT_SEC,
)
from ytscribe.core.error_codes import (
    UpstreamUnavailable, DeadlineExceeded, ProtocolChanged,
    NoCaptionsAvailable, MalformedResponse, time_remaining,
)

logger = logging.getLogger(__name__)

_API_KEY_RE = re.compile(INNERTUBE_API_KEY_RE)
_FMT_SUFFIX_RE = re.compile(CAPTION_FORMAT_SUFFIX_RE)


@dataclass(frozen=True)
class CaptionTrack:
    language_code: str
    base_url: str


class CaptionExtractor(abc.ABC):
    """Given a video id, produce its caption segments."""

    @abc.abstractmethod
    def extract(self, video_id: str,
                preferred_language: str = DEFAULT_CAPTION_LANGUAGE,
                deadline: float | None = None) -> list[CaptionSegment]:
        """
        ``deadline`` is an absolute ``time.monotonic()`` value; calls that
        would start after it fail with DeadlineExceeded.
        """


def select_caption_track(tracks: list[CaptionTrack],
                         preferred_language: str) -> CaptionTrack:
    """Exact language-code match, otherwise the first track as listed upstream."""
    if not tracks:
        raise NoCaptionsAvailable("No caption tracks to select from")
    for track in tracks:
        if track.language_code == preferred_language:
            return track
    logger.info("Language '%s' not found, using first available: %s",
                preferred_language, tracks[0].language_code)
    return tracks[0]


def strip_format_override(base_url: str) -> str:
    """Drop a trailing &fmt=… so the default XML delivery is returned."""
    return _FMT_SUFFIX_RE.sub('', base_url)


def parse_caption_tracks(player_data: dict) -> list[CaptionTrack]:
    """Read captions.playerCaptionsTracklistRenderer.captionTracks."""
    if not isinstance(player_data, dict):
        raise MalformedResponse("Player response is not a JSON object")
    captions = player_data.get('captions') or {}
    if not isinstance(captions, dict):
        raise MalformedResponse(f"'captions' is {type(captions).__name__}, expected object")
    renderer = captions.get('playerCaptionsTracklistRenderer') or {}
    if not isinstance(renderer, dict):
        raise MalformedResponse(
            f"'playerCaptionsTracklistRenderer' is {type(renderer).__name__}, expected object")
    raw_tracks = renderer.get('captionTracks') or []
    if not isinstance(raw_tracks, list):
        raise MalformedResponse(f"'captionTracks' is {type(raw_tracks).__name__}, expected list")

    tracks = []
    for raw in raw_tracks:
        if not isinstance(raw, dict):
            raise MalformedResponse(f"Caption track is {type(raw).__name__}, expected object")
        language_code = raw.get('languageCode')
        base_url = raw.get('baseUrl')
        if not isinstance(language_code, str) or not isinstance(base_url, str):
            raise MalformedResponse("Caption track missing languageCode or baseUrl")
        tracks.append(CaptionTrack(language_code=language_code, base_url=base_url))
    return tracks


class InnertubeCaptionExtractor(CaptionExtractor):
    """
    Innertube-based extractor. Holds no per-request state, so one instance
    may serve many videos in parallel as long as the session is thread-safe
    for the caller's use (pass one session per thread otherwise).
    """

    def __init__(self, session: requests.Session | None = None,
                 client_name: str = INNERTUBE_CLIENT_NAME,
                 client_version: str = INNERTUBE_CLIENT_VERSION,
                 timeout: float = HTTP_TIMEOUT_SEC):
        self.session = session or requests.Session()
        self.client_name = client_name
        self.client_version = client_version
        self.timeout = timeout

    @classmethod
    def from_config(cls, config, session: requests.Session | None = None):
        return cls(
            session=session,
            client_name=config.get('innertube_client_name', INNERTUBE_CLIENT_NAME),
            client_version=config.get('innertube_client_version', INNERTUBE_CLIENT_VERSION),
            timeout=config.get('http_timeout_sec', HTTP_TIMEOUT_SEC),
        )

    def extract(self, video_id: str,
                preferred_language: str = DEFAULT_CAPTION_LANGUAGE,
                deadline: float | None = None) -> list[CaptionSegment]:
        logger.info("Fetching video page for API key (%s)", video_id)
        html = self._get(WATCH_URL.format(video_id=video_id), deadline).text

        api_key = self.extract_api_key(html)
        logger.info("API key extracted, calling player API")

        player_data = self._fetch_player(api_key, video_id, deadline)
        tracks = parse_caption_tracks(player_data)
        if not tracks:
            raise NoCaptionsAvailable(f"No captions found for video {video_id}")
        logger.info("Available caption tracks: %s",
                    ', '.join(t.language_code for t in tracks))

        track = select_caption_track(tracks, preferred_language)
        caption_url = strip_format_override(track.base_url)

        logger.info("Fetching captions XML (%s)", track.language_code)
        xml_text = self._get(caption_url, deadline).text
        segments = parse_caption_xml(xml_text)

        logger.info("Extracted %d caption segments for %s", len(segments), video_id)
        return segments

    @staticmethod
    def extract_api_key(html: str) -> str:
        m = _API_KEY_RE.search(html or '')
        if not m:
            raise ProtocolChanged("INNERTUBE_API_KEY not found in video page")
        return m.group(1)

    # ── HTTP helpers ──────────────────────────────────────────────────

    def _timeout_for(self, deadline: float | None) -> float:
        remaining = time_remaining(deadline, "request was sent")
        if remaining is None:
            return self.timeout
        return min(self.timeout, remaining)

    def _timeout_error(self, what: str, timeout: float,
                       deadline: float | None) -> UpstreamUnavailable:
        # the caller's deadline, not our own timeout, cut the request short
        if deadline is not None and timeout < self.timeout:
            return DeadlineExceeded(f"{what} hit the deadline after {timeout:.1f}s")
        return UpstreamUnavailable(f"{what} timed out after {timeout:.1f}s")

    def _get(self, url: str, deadline: float | None) -> requests.Response:
        timeout = self._timeout_for(deadline)
        try:
            resp = self.session.get(url, timeout=timeout)
            resp.raise_for_status()
        except requests.exceptions.Timeout:
            raise self._timeout_error("GET", timeout, deadline)
        except requests.exceptions.RequestException as e:
            raise UpstreamUnavailable(f"GET failed: {type(e).__name__}: {e}")
        return resp

    def _fetch_player(self, api_key: str, video_id: str,
                      deadline: float | None) -> dict:
        payload = {
            "context": {
                "client": {
                    "clientName": self.client_name,
                    "clientVersion": self.client_version,
                },
            },
            "videoId": video_id,
        }
        timeout = self._timeout_for(deadline)
        try:
            resp = self.session.post(
                PLAYER_URL.format(api_key=api_key),
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=timeout,
            )
            resp.raise_for_status()
        except requests.exceptions.Timeout:
            raise self._timeout_error("Player API", timeout, deadline)
        except requests.exceptions.RequestException as e:
            raise UpstreamUnavailable(f"Player API failed: {type(e).__name__}: {e}")

        try:
            return resp.json()
        except (json.JSONDecodeError, ValueError):
            raise MalformedResponse("Failed to parse player response JSON")
