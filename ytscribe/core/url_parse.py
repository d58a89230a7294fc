"""
YouTube URL parsing and validation.
"""

import re
from urllib.parse import urlparse, parse_qs

from ytscribe.core.constants import YOUTUBE_URL_PATTERNS, VIDEO_ID_RE
from ytscribe.core.error_codes import InvalidInput


def extract_video_id(url: str) -> str | None:
    """
    Extract the 11-character video_id from a YouTube URL or a bare id.
    Returns None if neither matches.
    """
    url = (url or '').strip()
    if not url:
        return None

    if re.match(VIDEO_ID_RE, url):
        return url

    for pattern in YOUTUBE_URL_PATTERNS:
        m = re.search(pattern, url)
        if m:
            return m.group(1)

    # Fallback: parse query string for 'v' parameter
    parsed = urlparse(url)
    if 'youtube.com' in parsed.netloc:
        v = parse_qs(parsed.query).get('v', [None])[0]
        if v and re.match(VIDEO_ID_RE, v):
            return v

    return None


def validate_youtube_url(url: str) -> str:
    """
    Validate a YouTube URL and return the video_id.
    Raises InvalidInput if invalid.
    """
    video_id = extract_video_id(url)
    if not video_id:
        raise InvalidInput(f"Not a valid YouTube URL: {url}")
    return video_id
