"""Background music generation via ElevenLabs Music."""

import logging
import re

from soundtrack_producer.artifacts import save_audio
from soundtrack_producer.constants import (
    DEFAULT_MUSIC_STYLE,
    MUSIC_PROMPT_SUFFIX,
    MUSIC_STYLE_PROMPTS,
)
from soundtrack_producer.elevenlabs import ElevenLabsClient, ProviderError, non_audio_reason
from soundtrack_producer.models import MusicResult

logger = logging.getLogger(__name__)

MUSIC_SKIPPED = "Music generation skipped — video will have narration only (no background music)"
NO_API_KEY = "No ELEVENLABS_API_KEY configured. Set it in .env to enable music and narration."

# Status codes and wording ElevenLabs uses when the account tier lacks music.
# 401 is a bad key, not a plan problem.
_PLAN_STATUS_CODES = {402, 403}
_PLAN_WORDING_RE = re.compile(r"\b(plan|subscription|tier|upgrade|limited_access)\b", re.IGNORECASE)


def resolve_style(style: str | None) -> str:
    """Normalize a style name; unknown or missing styles fall back to pop."""
    key = (style or "").strip().lower()
    return key if key in MUSIC_STYLE_PROMPTS else DEFAULT_MUSIC_STYLE


def create_music_prompt(style: str | None, duration: float) -> str:
    """Build the instrumental-only prompt for a style and target duration."""
    base = MUSIC_STYLE_PROMPTS[resolve_style(style)]
    return f"{base}, {MUSIC_PROMPT_SUFFIX}, {duration:g} seconds"


def is_plan_restriction(error: ProviderError) -> bool:
    if error.status_code in _PLAN_STATUS_CODES:
        return True
    return bool(_PLAN_WORDING_RE.search(error.message))


def generate_music(
    style: str | None,
    duration: float,
    warnings: list[str],
    client: ElevenLabsClient | None = None,
    project_path: str | None = None,
) -> MusicResult:
    """Generate an instrumental track of the given duration.

    Music needs a paid ElevenLabs plan, so failure is expected and never
    fatal: the result comes back without an artifact and the cause
    (not configured / plan restriction / request failed / non-audio
    response) is appended to warnings.
    """
    logger.info("Generating background music...")

    if client is None:
        warnings.append(NO_API_KEY)
        warnings.append(MUSIC_SKIPPED)
        return MusicResult(artifact=None, duration=duration)

    resolved = resolve_style(style)
    if style and resolved != style.strip().lower():
        logger.info("Unknown music style %r, using %s", style, resolved)

    prompt = create_music_prompt(resolved, duration)
    logger.info("Using ElevenLabs Music (%s, %gs)...", resolved, duration)

    try:
        audio = client.compose_music(prompt, int(round(duration * 1000)))
    except ProviderError as e:
        logger.warning("ElevenLabs music failed: %s", e.message)
        if is_plan_restriction(e):
            warnings.append(
                f"ElevenLabs music unavailable on this plan: {e.message}. "
                "Music generation requires a paid ElevenLabs plan."
            )
        else:
            warnings.append(f"ElevenLabs music request failed: {e.message}")
        warnings.append(MUSIC_SKIPPED)
        return MusicResult(artifact=None, duration=duration)

    rejected = non_audio_reason(audio, "ElevenLabs music")
    if rejected:
        logger.warning("%s", rejected)
        warnings.append(rejected)
        warnings.append(MUSIC_SKIPPED)
        return MusicResult(artifact=None, duration=duration)

    try:
        artifact = save_audio(audio, "music", project_path)
    except OSError as e:
        warnings.append(f"Could not save music audio: {e}")
        warnings.append(MUSIC_SKIPPED)
        return MusicResult(artifact=None, duration=duration)

    return MusicResult(artifact=artifact, duration=duration)
