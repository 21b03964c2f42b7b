"""ElevenLabs HTTP client for speech and music generation."""

import logging
import os

import httpx

from soundtrack_producer.constants import (
    ELEVENLABS_BASE_URL,
    ELEVENLABS_OUTPUT_FORMAT,
    TTS_MODEL_ID,
    MUSIC_MODEL_ID,
    VOICE_SETTINGS,
    NARRATION_TIMEOUT,
    MUSIC_TIMEOUT,
    ENV_API_KEY,
    ENV_BASE_URL,
    MIN_AUDIO_BYTES,
    ERROR_PREVIEW_CHARS,
)

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """A provider request failed: network error, timeout, or non-2xx response."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def resolve_api_key(explicit: str | None = None) -> str | None:
    """Explicit key, else ELEVENLABS_API_KEY, else None."""
    return explicit or os.getenv(ENV_API_KEY) or None


class ElevenLabsClient:
    """Thin wrapper over the ElevenLabs REST endpoints used by the pipeline.

    Every failure surfaces as ProviderError so callers handle one exception
    type. The underlying httpx.Client is safe to share between threads.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = (base_url or os.getenv(ENV_BASE_URL) or ELEVENLABS_BASE_URL).rstrip("/")
        self._http = httpx.Client(
            base_url=self.base_url,
            headers={
                "xi-api-key": api_key,
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _post(self, path: str, payload: dict, timeout: float) -> httpx.Response:
        try:
            response = self._http.post(
                path,
                params={"output_format": ELEVENLABS_OUTPUT_FORMAT},
                json=payload,
                timeout=timeout,
            )
        except httpx.TimeoutException as e:
            raise ProviderError(f"request timed out after {timeout:.0f}s ({type(e).__name__})") from e
        except httpx.HTTPError as e:
            raise ProviderError(f"request failed: {e}") from e

        if response.is_error:
            raise ProviderError(
                f"HTTP {response.status_code}: {_error_detail(response)}",
                status_code=response.status_code,
            )

        logger.debug("POST %s -> %d (%d bytes)", path, response.status_code, len(response.content))
        return response

    def text_to_speech_with_timestamps(self, text: str, voice_id: str) -> dict:
        """Synthesize speech with character alignment.

        Returns the decoded JSON body (audio_base64 plus alignment).
        """
        response = self._post(
            f"/v1/text-to-speech/{voice_id}/with-timestamps",
            _speech_payload(text),
            NARRATION_TIMEOUT,
        )
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(f"with-timestamps returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ProviderError("with-timestamps returned unexpected JSON")
        return data

    def text_to_speech(self, text: str, voice_id: str) -> bytes:
        """Synthesize speech; returns raw audio bytes."""
        response = self._post(
            f"/v1/text-to-speech/{voice_id}",
            _speech_payload(text),
            NARRATION_TIMEOUT,
        )
        return response.content

    def compose_music(self, prompt: str, duration_ms: int) -> bytes:
        """Generate an instrumental track; returns raw audio bytes."""
        response = self._post(
            "/v1/music",
            {
                "prompt": prompt,
                "model_id": MUSIC_MODEL_ID,
                "music_length_ms": duration_ms,
                "force_instrumental": True,
            },
            MUSIC_TIMEOUT,
        )
        return response.content


def _speech_payload(text: str) -> dict:
    return {
        "text": text,
        "model_id": TTS_MODEL_ID,
        "voice_settings": dict(VOICE_SETTINGS),
    }


def _error_detail(response: httpx.Response) -> str:
    """Pull the human-readable message out of an error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase

    detail = body.get("detail", body) if isinstance(body, dict) else body
    if isinstance(detail, dict):
        return str(detail.get("message") or detail.get("status") or detail)
    return str(detail)


def non_audio_reason(data: bytes, label: str) -> str | None:
    """Reason string if a payload is too small to be audio, else None.

    Providers sometimes answer 200 with a short JSON/text error body instead
    of audio; anything under MIN_AUDIO_BYTES is treated that way.
    """
    if len(data) >= MIN_AUDIO_BYTES:
        return None
    preview = data.decode("utf-8", errors="replace")[:ERROR_PREVIEW_CHARS]
    return f"{label} returned non-audio response ({len(data)} bytes): {preview}"
