"""Shared fixtures for soundtrack producer tests."""

import numpy as np
import pytest
from pydub import AudioSegment

from soundtrack_producer.models import AlignmentData

SAMPLE_RATE = 22050


def write_wav(path, samples: np.ndarray, sample_rate: int = SAMPLE_RATE) -> str:
    """Write float samples in [-1, 1] as a 16-bit mono WAV."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
    audio = AudioSegment(
        data=pcm.tobytes(),
        sample_width=2,
        frame_rate=sample_rate,
        channels=1,
    )
    audio.export(str(path), format="wav")
    return str(path)


def click_track(click_times: list[float], duration: float, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Silence with a short 1 kHz burst at each click time."""
    samples = np.zeros(int(duration * sample_rate), dtype=np.float32)
    burst_len = int(0.015 * sample_rate)
    t = np.arange(burst_len) / sample_rate
    burst = 0.8 * np.sin(2 * np.pi * 1000.0 * t) * np.linspace(1.0, 0.2, burst_len)
    for click in click_times:
        start = int(click * sample_rate)
        end = min(start + burst_len, len(samples))
        samples[start:end] = burst[: end - start]
    return samples


def uniform_alignment(text: str, seconds_per_char: float = 0.05) -> AlignmentData:
    """Alignment where every character lasts the same time."""
    n = len(text)
    return AlignmentData(
        characters=list(text),
        starts=[round(i * seconds_per_char, 6) for i in range(n)],
        ends=[round((i + 1) * seconds_per_char, 6) for i in range(n)],
    )


@pytest.fixture
def click_times():
    """Clicks every 0.5s (120 bpm), starting at 0.5s."""
    return [0.5 + 0.5 * i for i in range(9)]


@pytest.fixture
def click_wav(tmp_path, click_times):
    """5-second click track WAV."""
    return write_wav(tmp_path / "clicks.wav", click_track(click_times, 5.0))


@pytest.fixture
def silent_wav(tmp_path):
    """3 seconds of digital silence."""
    return write_wav(tmp_path / "silence.wav", np.zeros(3 * SAMPLE_RATE, dtype=np.float32))


@pytest.fixture
def fake_mp3():
    """Payload large enough to pass the non-audio size check."""
    return b"ID3" + bytes(4096)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real credentials and project paths out of unit tests."""
    for name in ("ELEVENLABS_API_KEY", "ELEVENLABS_VOICE_ID", "ELEVENLABS_BASE_URL", "REMOTION_PROJECT_PATH"):
        monkeypatch.delenv(name, raising=False)
