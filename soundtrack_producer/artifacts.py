"""Project path resolution and audio/JSON artifact persistence."""

import json
import logging
import os
import tempfile
import time

from soundtrack_producer.constants import (
    AUDIO_EXTENSION,
    AUDIO_SUBDIR,
    DEFAULT_PROJECT_DIR,
    ENV_PROJECT_PATH,
    PUBLIC_DIR,
)
from soundtrack_producer.models import AudioArtifact

logger = logging.getLogger(__name__)


def get_project_path(explicit: str | None = None) -> str:
    """Resolve the video project directory.

    Priority:
    1. Explicit path argument
    2. REMOTION_PROJECT_PATH environment variable
    3. {cwd}/remotion
    """
    return (
        explicit
        or os.getenv(ENV_PROJECT_PATH)
        or os.path.join(os.getcwd(), DEFAULT_PROJECT_DIR)
    )


def get_public_dir(explicit: str | None = None) -> str:
    """Static asset root the renderer serves files from."""
    return os.path.join(get_project_path(explicit), PUBLIC_DIR)


def get_audio_dir(explicit: str | None = None) -> str:
    return os.path.join(get_public_dir(explicit), AUDIO_SUBDIR)


def save_audio(data: bytes, role: str, project_path: str | None = None) -> AudioArtifact:
    """Write an audio payload to public/audio/{role}-{timestamp}.mp3.

    The payload goes to a temp file in the same directory and is renamed
    into place, so the returned path never points at a partial file.
    """
    audio_dir = get_audio_dir(project_path)
    os.makedirs(audio_dir, exist_ok=True)

    filename = f"{role}-{int(time.time() * 1000)}.{AUDIO_EXTENSION}"
    local_path = os.path.join(audio_dir, filename)

    fd, tmp_path = tempfile.mkstemp(dir=audio_dir, prefix=f".{role}-", suffix=".part")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_path, local_path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise

    static_path = f"{AUDIO_SUBDIR}/{filename}"
    logger.info("Saved %s to %s (staticPath: %s, %d KB)", role, local_path, static_path, len(data) // 1024)

    return AudioArtifact(
        role=role,
        local_path=local_path,
        static_path=static_path,
        size=len(data),
    )


def write_artifact(path: str, data: dict) -> str:
    """Write a JSON artifact, creating parent directories. Returns the path."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
    return path
