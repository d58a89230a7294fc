"""
Timedtext XML captions parsing → ordered caption segments.

Expected shape:
    <transcript><text start="1.2" dur="3.4">…</text>…</transcript>
"""

import logging
import math
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Iterable

from ytscribe.core.error_codes import MalformedResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaptionSegment:
    """One timed span of caption text, offsets in seconds."""
    text: str
    start_time: float
    end_time: float


def parse_caption_xml(xml_text: str) -> list[CaptionSegment]:
    """
    Parse a timedtext XML document into segments, in document order.
    Raises MalformedResponse if the document is not a transcript of text nodes.
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise MalformedResponse(f"Caption XML did not parse: {e}")

    nodes = root.findall('text') if root.tag == 'transcript' else []
    if not nodes:
        raise MalformedResponse(
            f"Invalid caption XML format (root <{root.tag}>, {len(nodes)} text nodes)")

    segments = []
    for node in nodes:
        try:
            start = float(node.attrib['start'])
            dur = float(node.attrib.get('dur', 0))
        except (KeyError, ValueError) as e:
            raise MalformedResponse(f"Bad timing attributes on caption node: {e}")
        if not (math.isfinite(start) and math.isfinite(dur)):
            raise MalformedResponse(f"Non-finite timing on caption node: start={start} dur={dur}")
        if start < 0 or dur < 0:
            raise MalformedResponse(f"Negative timing on caption node: start={start} dur={dur}")
        # itertext() keeps text nested inside inline markup
        text = ''.join(node.itertext())
        if not text:
            continue
        segments.append(CaptionSegment(text=text, start_time=start, end_time=start + dur))

    if not segments:
        raise MalformedResponse("Caption XML contained no non-empty text nodes")

    logger.debug("Parsed %d caption segments", len(segments))
    return segments


def segments_to_text(segments: Iterable[CaptionSegment]) -> str:
    """Join segment texts with single spaces. No other normalization."""
    return ' '.join(s.text for s in segments)
