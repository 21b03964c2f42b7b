"""Audio asset pipeline: music + narration in parallel, then beat detection."""

import logging
from concurrent.futures import ThreadPoolExecutor

from soundtrack_producer.artifacts import get_project_path
from soundtrack_producer.beats import detect_beats, validate_duration
from soundtrack_producer.constants import DEFAULT_MUSIC_STYLE
from soundtrack_producer.elevenlabs import ElevenLabsClient, resolve_api_key
from soundtrack_producer.models import PipelineResult
from soundtrack_producer.music import generate_music
from soundtrack_producer.tts import generate_narration

logger = logging.getLogger(__name__)


def generate_audio(
    style: str | None,
    script: str,
    duration: float,
    project_path: str | None = None,
    *,
    api_key: str | None = None,
    voice_id: str | None = None,
    client: ElevenLabsClient | None = None,
) -> PipelineResult:
    """Generate music, narration with timecodes, and beats for one video.

    Music and narration are independent and run concurrently; beat
    detection waits for the music. Provider failures never raise: they
    show up as empty fields plus entries in result.warnings, merged in
    music, narration, beats order. Only a negative or non-finite duration
    raises (ValueError).

    client overrides the ElevenLabs client built from api_key / env.
    """
    validate_duration(duration)
    style = style or DEFAULT_MUSIC_STYLE
    project_path = get_project_path(project_path)

    logger.info("Generating audio: %s style, %gs", style, duration)

    owns_client = False
    if client is None:
        key = resolve_api_key(api_key)
        if key:
            client = ElevenLabsClient(key)
            owns_client = True

    music_warnings: list[str] = []
    narration_warnings: list[str] = []
    beat_warnings: list[str] = []

    try:
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="audio") as pool:
            music_future = pool.submit(
                generate_music, style, duration, music_warnings,
                client=client, project_path=project_path,
            )
            narration_future = pool.submit(
                generate_narration, script, narration_warnings,
                client=client, voice_id=voice_id, project_path=project_path,
            )
            music = music_future.result()
            narration = narration_future.result()
    finally:
        if owns_client:
            client.close()

    music_path = music.artifact.local_path if music.artifact else None
    beats = detect_beats(music_path, duration, beat_warnings)

    warnings = music_warnings + narration_warnings + beat_warnings
    logger.info("Generated audio: %d beats, %d warnings", len(beats), len(warnings))

    return PipelineResult(
        music=music,
        narration=narration,
        beats=beats,
        warnings=warnings,
    )
