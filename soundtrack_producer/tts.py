"""Narration synthesis via ElevenLabs with alignment-first fallback chain."""

import base64
import binascii
import logging
import os

from soundtrack_producer.artifacts import save_audio
from soundtrack_producer.constants import DEFAULT_VOICE_ID, ENV_VOICE_ID
from soundtrack_producer.elevenlabs import ElevenLabsClient, ProviderError, non_audio_reason
from soundtrack_producer.models import AlignmentData, NarrationResult, ProviderOutcome
from soundtrack_producer.parser import parse_script
from soundtrack_producer.timecodes import estimate, reconcile

logger = logging.getLogger(__name__)

NARRATION_SKIPPED = "Narration generation skipped — video will have no voiceover"
NO_API_KEY = "No ELEVENLABS_API_KEY configured. Set it in .env to enable narration."


def resolve_voice_id(explicit: str | None = None) -> str:
    """Explicit voice, else ELEVENLABS_VOICE_ID, else the built-in narrator."""
    return explicit or os.getenv(ENV_VOICE_ID) or DEFAULT_VOICE_ID


def _with_timestamps(client: ElevenLabsClient, script: str, voice_id: str) -> ProviderOutcome:
    """Alignment endpoint: base64 audio plus per-character timings."""
    try:
        data = client.text_to_speech_with_timestamps(script, voice_id)
    except ProviderError as e:
        return ProviderOutcome(reason=f"ElevenLabs /with-timestamps failed: {e.message}. Falling back to plain TTS.")

    encoded = data.get("audio_base64")
    if not encoded:
        return ProviderOutcome(reason="ElevenLabs /with-timestamps returned no audio data")
    if not isinstance(encoded, str):
        return ProviderOutcome(reason="ElevenLabs /with-timestamps returned undecodable audio data")
    try:
        audio = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        return ProviderOutcome(reason="ElevenLabs /with-timestamps returned undecodable audio data")

    rejected = non_audio_reason(audio, "ElevenLabs /with-timestamps")
    if rejected:
        return ProviderOutcome(reason=rejected)

    raw_alignment = data.get("alignment")
    if raw_alignment:
        try:
            alignment = AlignmentData.from_response(raw_alignment)
        except ValueError as e:
            logger.warning("Discarding alignment: %s", e)
        else:
            return ProviderOutcome(audio=audio, alignment=alignment)

    # Usable audio, but timecodes will have to be estimated
    return ProviderOutcome(
        audio=audio,
        reason="ElevenLabs returned audio but no alignment data — timecodes are estimated",
    )


def _plain(client: ElevenLabsClient, script: str, voice_id: str) -> ProviderOutcome:
    """Plain endpoint: raw audio bytes, no alignment."""
    try:
        audio = client.text_to_speech(script, voice_id)
    except ProviderError as e:
        return ProviderOutcome(reason=f"ElevenLabs narration failed: {e.message}")

    rejected = non_audio_reason(audio, "ElevenLabs TTS")
    if rejected:
        return ProviderOutcome(reason=rejected)
    return ProviderOutcome(audio=audio)


# Tried in order. A clean outcome (audio, no reason) ends the chain; audio
# that came with a reason is held in case every later attempt fails.
NARRATION_ATTEMPTS = (_with_timestamps, _plain)


def generate_narration(
    script: str,
    warnings: list[str],
    client: ElevenLabsClient | None = None,
    voice_id: str | None = None,
    project_path: str | None = None,
) -> NarrationResult:
    """Synthesize narration audio and derive sentence timecodes.

    Never raises for provider trouble: every failure is appended to warnings
    and degrades the result (estimated timecodes, or no narration at all).
    Pass client=None when no API key is configured.
    """
    logger.info("Generating narration...")

    sentences = parse_script(script)
    if not sentences:
        warnings.append("Narration script is empty — nothing to synthesize")
        warnings.append(NARRATION_SKIPPED)
        return NarrationResult()

    if client is None:
        warnings.append(NO_API_KEY)
        warnings.append(NARRATION_SKIPPED)
        return NarrationResult()

    voice = resolve_voice_id(voice_id)
    logger.info("Using ElevenLabs TTS with timestamps (voice: %s)...", voice)

    audio = None
    alignment = None
    for attempt in NARRATION_ATTEMPTS:
        outcome = attempt(client, script, voice)
        if outcome.reason:
            logger.warning("%s", outcome.reason)
            warnings.append(outcome.reason)
        if not outcome.ok:
            continue
        audio, alignment = outcome.audio, outcome.alignment
        if not outcome.reason:
            break

    if audio is None:
        warnings.append(NARRATION_SKIPPED)
        return NarrationResult()

    if alignment is not None:
        timecodes = reconcile(alignment, sentences)
        logger.info("Real timecodes derived from alignment (%d sentences)", len(timecodes))
    else:
        timecodes = estimate(sentences)
        logger.info("Estimated timecodes at fixed reading rate (%d sentences)", len(timecodes))

    try:
        artifact = save_audio(audio, "narration", project_path)
    except OSError as e:
        warnings.append(f"Could not save narration audio: {e}")
        warnings.append(NARRATION_SKIPPED)
        return NarrationResult()

    return NarrationResult(artifact=artifact, timecodes=timecodes)
