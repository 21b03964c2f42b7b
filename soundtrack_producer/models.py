"""Data models for audio asset generation."""

from dataclasses import dataclass, field


@dataclass
class Sentence:
    index: int
    text: str          # trailing punctuation stripped
    raw: str           # trimmed substring as written, punctuation included


@dataclass
class Timecode:
    start: float
    end: float
    text: str

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end, "text": self.text}


@dataclass
class AlignmentData:
    """Per-character timing returned alongside synthesized speech."""

    characters: list[str]
    starts: list[float]
    ends: list[float]

    def __post_init__(self):
        if not (len(self.characters) == len(self.starts) == len(self.ends)):
            raise ValueError(
                f"Alignment arrays differ in length: {len(self.characters)} chars, "
                f"{len(self.starts)} starts, {len(self.ends)} ends"
            )

    @classmethod
    def from_response(cls, data: dict) -> "AlignmentData":
        """Build from the provider's alignment object.

        Raises ValueError when the arrays are missing or mismatched, or
        when characters are not strings.
        """
        try:
            characters = list(data["characters"])
            if not all(isinstance(c, str) for c in characters):
                raise ValueError("Malformed alignment data: characters must be strings")
            return cls(
                characters=characters,
                starts=[float(t) for t in data["character_start_times_seconds"]],
                ends=[float(t) for t in data["character_end_times_seconds"]],
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed alignment data: {e}") from e


@dataclass
class AudioArtifact:
    role: str          # "narration" or "music"
    local_path: str
    static_path: str   # relative to the project's public/ dir
    size: int
    url: str = ""


@dataclass
class ProviderOutcome:
    """Result of one provider attempt: audio on success, a reason otherwise."""

    audio: bytes | None = None
    alignment: AlignmentData | None = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.audio is not None


@dataclass
class MusicResult:
    artifact: AudioArtifact | None
    duration: float

    def to_dict(self) -> dict:
        data = _artifact_fields(self.artifact)
        data["duration"] = self.duration
        return data


@dataclass
class NarrationResult:
    artifact: AudioArtifact | None = None
    timecodes: list[Timecode] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = _artifact_fields(self.artifact)
        data["timecodes"] = [tc.to_dict() for tc in self.timecodes]
        return data


@dataclass
class PipelineResult:
    music: MusicResult
    narration: NarrationResult
    beats: list[float] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """JSON shape consumed by the video renderer."""
        return {
            "music": self.music.to_dict(),
            "narration": self.narration.to_dict(),
            "beats": list(self.beats),
            "warnings": list(self.warnings),
        }


def _artifact_fields(artifact: AudioArtifact | None) -> dict:
    if artifact is None:
        return {"url": "", "localPath": "", "staticPath": ""}
    return {
        "url": artifact.url,
        "localPath": artifact.local_path,
        "staticPath": artifact.static_path,
    }
