"""Beat detection on generated music for timing visual transitions."""

import bisect
import logging
import math

import numpy as np
from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError

from soundtrack_producer.constants import (
    BEAT_HOP_SECONDS,
    BEAT_WINDOW_SECONDS,
    BEAT_THRESHOLD_WINDOW_SECONDS,
    BEAT_THRESHOLD_STD,
    MIN_BEAT_SPACING_SECONDS,
    PLACEHOLDER_BEAT_START,
    PLACEHOLDER_BEAT_STEP,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_WARNING = "Using placeholder beats (no music file for beat detection)"


def validate_duration(duration: float) -> None:
    """Reject negative or non-finite durations (caller error, not a runtime failure)."""
    if not math.isfinite(duration) or duration < 0:
        raise ValueError(f"duration must be a non-negative number of seconds, got {duration!r}")


def placeholder_beats(duration: float) -> list[float]:
    """Evenly spaced beats at 1.0, 2.2, 3.4, ... strictly below duration."""
    validate_duration(duration)
    beats = []
    i = 0
    while True:
        # Index-based so the cadence doesn't accumulate float drift
        t = round(PLACEHOLDER_BEAT_START + i * PLACEHOLDER_BEAT_STEP, 6)
        if t >= duration:
            break
        beats.append(t)
        i += 1
    return beats


def load_waveform(path: str) -> tuple[np.ndarray, int]:
    """Decode an audio file to mono float samples in [-1, 1].

    Returns (samples, frame_rate). Raises CouldntDecodeError or OSError
    if the file can't be read.
    """
    audio = AudioSegment.from_file(path)
    if audio.channels > 1:
        audio = audio.set_channels(1)

    samples = np.array(audio.get_array_of_samples(), dtype=np.float32)
    full_scale = float(1 << (8 * audio.sample_width - 1))
    return samples / full_scale, audio.frame_rate


def onset_envelope(samples: np.ndarray, frame_rate: int) -> tuple[np.ndarray, np.ndarray]:
    """Short-window energy rise per frame.

    Frame RMS over BEAT_WINDOW_SECONDS every BEAT_HOP_SECONDS; the onset
    strength is the half-wave rectified first difference of that energy.
    Returns (strength, frame_center_times).
    """
    hop = max(1, int(round(frame_rate * BEAT_HOP_SECONDS)))
    window = max(hop, int(round(frame_rate * BEAT_WINDOW_SECONDS)))
    if len(samples) < window:
        return np.zeros(0), np.zeros(0)

    n_frames = 1 + (len(samples) - window) // hop
    starts = np.arange(n_frames) * hop
    power = np.concatenate(([0.0], np.cumsum(np.square(samples, dtype=np.float64))))
    mean_power = (power[starts + window] - power[starts]) / window
    energy = np.sqrt(np.maximum(mean_power, 0.0))
    strength = np.maximum(np.diff(energy, prepend=energy[0]), 0.0)

    times = (starts + window / 2) / frame_rate
    return strength, times


def adaptive_threshold(strength: np.ndarray, frame_seconds: float) -> np.ndarray:
    """Rolling mean of the envelope plus a margin of BEAT_THRESHOLD_STD deviations."""
    size = max(1, int(round(BEAT_THRESHOLD_WINDOW_SECONDS / frame_seconds)))
    size = min(size, len(strength))
    rolling = np.convolve(strength, np.ones(size) / size, mode="same")
    return rolling + BEAT_THRESHOLD_STD * float(np.std(strength))


def pick_peaks(
    strength: np.ndarray,
    times: np.ndarray,
    threshold: np.ndarray,
    duration: float,
    min_spacing: float = MIN_BEAT_SPACING_SECONDS,
) -> list[float]:
    """Select local maxima above threshold, at least min_spacing apart.

    Candidates are accepted strongest first; a candidate within min_spacing
    of an accepted beat is dropped. Output is sorted and inside [0, duration).
    """
    if len(strength) == 0:
        return []

    padded = np.concatenate(([0.0], strength, [0.0]))
    left, mid, right = padded[:-2], padded[1:-1], padded[2:]
    is_peak = (mid > left) & (mid >= right) & (mid > threshold) & (mid > 0.0)

    candidates = np.flatnonzero(is_peak)
    order = candidates[np.argsort(-strength[candidates], kind="stable")]

    accepted = []
    for idx in order:
        t = round(float(times[idx]), 3)
        if t < 0 or t >= duration:
            continue
        pos = bisect.bisect_left(accepted, t)
        if pos > 0 and t - accepted[pos - 1] < min_spacing:
            continue
        if pos < len(accepted) and accepted[pos] - t < min_spacing:
            continue
        accepted.insert(pos, t)

    return accepted


def find_beats(samples: np.ndarray, frame_rate: int, duration: float) -> list[float]:
    """Beat timestamps for an already-decoded waveform. Silence yields []."""
    strength, times = onset_envelope(samples, frame_rate)
    if len(strength) == 0 or not np.any(strength > 0):
        return []
    threshold = adaptive_threshold(strength, BEAT_HOP_SECONDS)
    return pick_peaks(strength, times, threshold, duration)


def detect_beats(music_path: str | None, duration: float, warnings: list[str]) -> list[float]:
    """Beat timestamps for a music file, or placeholder beats without one.

    A file that can't be decoded also falls back to placeholders; the
    reason is appended to warnings rather than raised.
    """
    validate_duration(duration)

    if not music_path:
        warnings.append(PLACEHOLDER_WARNING)
        return placeholder_beats(duration)

    try:
        samples, frame_rate = load_waveform(music_path)
    except (CouldntDecodeError, OSError) as e:
        logger.warning("Could not decode %s for beat detection: %s", music_path, e)
        warnings.append(f"Beat detection could not decode music file: {e}")
        warnings.append(PLACEHOLDER_WARNING)
        return placeholder_beats(duration)

    beats = find_beats(samples, frame_rate, duration)
    logger.info("Detected %d beats in %s", len(beats), music_path)
    return beats
