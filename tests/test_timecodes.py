"""Tests for alignment reconciliation and word-rate estimation."""

import pytest

from soundtrack_producer.constants import (
    ALIGNMENT_GAP_SECONDS,
    ESTIMATE_PAUSE_SECONDS,
    FALLBACK_SPAN_SECONDS,
)
from soundtrack_producer.models import AlignmentData, Timecode
from soundtrack_producer.parser import parse_script
from soundtrack_producer.timecodes import estimate, reconcile

from conftest import uniform_alignment


def _assert_well_ordered(timecodes):
    for tc in timecodes:
        assert 0 <= tc.start < tc.end
    for prev, curr in zip(timecodes, timecodes[1:]):
        assert prev.end <= curr.start


# --- reconcile ---

def test_reconcile_two_sentences():
    """Uniform 0.05s/char alignment gives sentence spans from real char times."""
    script = "Hello world. This is a test!"
    timecodes = reconcile(uniform_alignment(script), parse_script(script))

    assert len(timecodes) == 2
    assert timecodes[0].text == "Hello world"
    assert timecodes[0].start == pytest.approx(0.0)
    assert timecodes[0].end == pytest.approx(0.6)
    assert timecodes[1].text == "This is a test"
    assert timecodes[1].start == pytest.approx(0.65)
    assert timecodes[1].end == pytest.approx(1.4)
    assert timecodes[0].end <= timecodes[1].start
    _assert_well_ordered(timecodes)


def test_reconcile_skips_leading_whitespace():
    script = "  \nHi there. Bye."
    timecodes = reconcile(uniform_alignment(script, 0.1), parse_script(script))
    # First meaningful character is at index 3
    assert timecodes[0].start == pytest.approx(0.3)
    _assert_well_ordered(timecodes)


def test_reconcile_truncated_alignment():
    """Alignment shorter than the script degrades to fixed-gap estimates."""
    script = "First one. Second one. Third one."
    alignment = uniform_alignment("First one.", 0.1)
    timecodes = reconcile(alignment, parse_script(script))

    assert len(timecodes) == 3
    assert timecodes[0].end == pytest.approx(1.0)
    # Cursor ran out: start = previous end + gap, span = fallback
    assert timecodes[1].start == pytest.approx(1.0 + ALIGNMENT_GAP_SECONDS)
    assert timecodes[1].end == pytest.approx(timecodes[1].start + FALLBACK_SPAN_SECONDS)
    assert timecodes[2].start == pytest.approx(timecodes[1].end + ALIGNMENT_GAP_SECONDS)
    _assert_well_ordered(timecodes)


def test_reconcile_partially_covered_sentence():
    """A sentence cut off mid-way ends at the last aligned character."""
    script = "Short. A much longer sentence here."
    alignment = uniform_alignment("Short. A much", 0.1)
    timecodes = reconcile(alignment, parse_script(script))
    assert timecodes[1].start == pytest.approx(0.7)
    assert timecodes[1].end == pytest.approx(1.3)
    _assert_well_ordered(timecodes)


def test_reconcile_empty_alignment():
    script = "One. Two."
    empty = AlignmentData(characters=[], starts=[], ends=[])
    timecodes = reconcile(empty, parse_script(script))
    assert timecodes[0].start == 0.0
    assert timecodes[0].end == pytest.approx(FALLBACK_SPAN_SECONDS)
    _assert_well_ordered(timecodes)


def test_reconcile_raw_length_includes_punctuation():
    """Cursor steps over the punctuation run, not just the stripped text."""
    script = "Go!!! Now."
    timecodes = reconcile(uniform_alignment(script, 0.1), parse_script(script))
    # "Go!!!" covers chars 0-4, so it ends at char 4's end time
    assert timecodes[0].end == pytest.approx(0.5)
    assert timecodes[1].start == pytest.approx(0.6)


def test_reconcile_zero_length_timings():
    """Degenerate provider timings still produce start < end without overlap."""
    script = "Hi. Yo."
    alignment = AlignmentData(
        characters=list(script),
        starts=[0.0] * len(script),
        ends=[0.0] * len(script),
    )
    timecodes = reconcile(alignment, parse_script(script))
    _assert_well_ordered(timecodes)
    assert timecodes[0] == Timecode(0.0, 1.0, "Hi")
    assert timecodes[1] == Timecode(1.0, 2.0, "Yo")


def test_reconcile_no_sentences():
    assert reconcile(uniform_alignment("abc"), []) == []


# --- estimate ---

def test_estimate_matches_segmenter():
    """Count and order match the segmenter output exactly."""
    script = "Welcome aboard. Today we learn something new! Ready?"
    sentences = parse_script(script)
    timecodes = estimate(sentences)
    assert [tc.text for tc in timecodes] == [s.text for s in sentences]


def test_estimate_durations_and_pauses():
    """150 wpm = 2.5 words/s, plus 0.5s between sentences."""
    timecodes = estimate(parse_script("One two three four five. Six seven."))
    assert timecodes[0].start == 0.0
    assert timecodes[0].end == pytest.approx(2.0)
    assert timecodes[1].start == pytest.approx(2.0 + ESTIMATE_PAUSE_SECONDS)
    assert timecodes[1].end == pytest.approx(2.5 + 0.8)


def test_estimate_total_elapsed():
    """Total = sum of sentence durations + 0.5 * (n - 1)."""
    sentences = parse_script("A b c. D e. F g h i. J.")
    timecodes = estimate(sentences)
    durations = [len(s.text.split()) / 2.5 for s in sentences]
    expected = sum(durations) + ESTIMATE_PAUSE_SECONDS * (len(sentences) - 1)
    assert timecodes[-1].end == pytest.approx(expected)
    _assert_well_ordered(timecodes)


def test_estimate_empty():
    assert estimate([]) == []
