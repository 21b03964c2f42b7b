"""Sentence-level timecodes from character alignment or word-rate estimation."""

import logging

from soundtrack_producer.constants import (
    WORDS_PER_MINUTE,
    ESTIMATE_PAUSE_SECONDS,
    ALIGNMENT_GAP_SECONDS,
    FALLBACK_SPAN_SECONDS,
)
from soundtrack_producer.models import AlignmentData, Sentence, Timecode
from soundtrack_producer.parser import count_words

logger = logging.getLogger(__name__)


def reconcile(alignment: AlignmentData, sentences: list[Sentence]) -> list[Timecode]:
    """Map character-level alignment onto sentences.

    Walks a cursor through the alignment arrays, stepping over whitespace
    between sentences and then over len(sentence.raw) characters. The step
    uses the raw length (punctuation included) because the alignment covers
    the raw script text.

    Alignment shorter than the script degrades to fixed-gap estimates:
    a sentence past the end starts ALIGNMENT_GAP_SECONDS after the previous
    end and lasts FALLBACK_SPAN_SECONDS.
    """
    chars = alignment.characters
    starts = alignment.starts
    ends = alignment.ends
    total = len(chars)

    timecodes = []
    cursor = 0

    for sentence in sentences:
        while cursor < total and chars[cursor].strip() == "":
            cursor += 1

        if cursor < total:
            start = starts[cursor]
        elif timecodes:
            start = timecodes[-1].end + ALIGNMENT_GAP_SECONDS
        else:
            start = 0.0

        # Never start inside the previous sentence
        if timecodes and start < timecodes[-1].end:
            start = timecodes[-1].end

        # Only count characters the alignment actually covers
        consumed = max(0, min(len(sentence.raw), total - cursor))

        if consumed:
            end_idx = min(cursor + consumed - 1, len(ends) - 1)
            end = ends[end_idx]
        else:
            end = start + FALLBACK_SPAN_SECONDS

        # Degenerate provider timings (zero-length or reversed spans)
        if end <= start:
            end = start + FALLBACK_SPAN_SECONDS

        timecodes.append(Timecode(start=start, end=end, text=sentence.text))
        cursor += consumed

    if cursor < total:
        logger.debug("Alignment has %d unconsumed characters", total - cursor)

    return timecodes


def estimate(sentences: list[Sentence]) -> list[Timecode]:
    """Estimate timecodes at WORDS_PER_MINUTE with a fixed pause between sentences."""
    words_per_second = WORDS_PER_MINUTE / 60
    timecodes = []
    current = 0.0

    for sentence in sentences:
        duration = count_words(sentence.text) / words_per_second
        timecodes.append(Timecode(start=current, end=current + duration, text=sentence.text))
        current += duration + ESTIMATE_PAUSE_SECONDS

    return timecodes
