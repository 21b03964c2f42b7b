"""All magic numbers and configuration constants."""

from types import MappingProxyType

# Provider (ElevenLabs)
ELEVENLABS_BASE_URL = "https://api.elevenlabs.io"
ELEVENLABS_OUTPUT_FORMAT = "mp3_44100_128"
TTS_MODEL_ID = "eleven_multilingual_v2"
MUSIC_MODEL_ID = "music_v1"
DEFAULT_VOICE_ID = "jsCqWAovK2LkecY7zXl4"   # Freya - calm, confident narrator
VOICE_SETTINGS = MappingProxyType({
    "stability": 0.6,
    "similarity_boost": 0.75,
    "speed": 0.9,
})
NARRATION_TIMEOUT = 60.0            # seconds per TTS request
MUSIC_TIMEOUT = 120.0               # seconds — music generation is slower
MIN_AUDIO_BYTES = 1000              # smaller payloads are provider error bodies
ERROR_PREVIEW_CHARS = 100           # chars of a non-audio body quoted in warnings

# Environment variables
ENV_API_KEY = "ELEVENLABS_API_KEY"
ENV_VOICE_ID = "ELEVENLABS_VOICE_ID"
ENV_BASE_URL = "ELEVENLABS_BASE_URL"
ENV_PROJECT_PATH = "REMOTION_PROJECT_PATH"

# Project layout
DEFAULT_PROJECT_DIR = "remotion"    # relative to cwd
PUBLIC_DIR = "public"
AUDIO_SUBDIR = "audio"
AUDIO_EXTENSION = "mp3"

# Timecodes
WORDS_PER_MINUTE = 150
ESTIMATE_PAUSE_SECONDS = 0.5        # pause between estimated sentences
ALIGNMENT_GAP_SECONDS = 0.3         # gap used once alignment runs out
FALLBACK_SPAN_SECONDS = 1.0         # sentence span when alignment can't supply an end

# Music
DEFAULT_MUSIC_STYLE = "pop"
MUSIC_STYLE_PROMPTS = MappingProxyType({
    "pop": "upbeat pop instrumental background music, catchy melody, energetic",
    "hip-hop": "hip-hop instrumental beat, rhythmic drums, bass-heavy, modern",
    "rap": "rap instrumental beat, strong drums, urban vibe, no vocals",
    "jazz": "smooth jazz instrumental, piano and saxophone, sophisticated",
    "rock": "rock instrumental background, electric guitar driven, energetic",
})
MUSIC_PROMPT_SUFFIX = "instrumental only, no singing, no vocals, no lyrics"

# Beat detection
BEAT_HOP_SECONDS = 0.01             # envelope frame step
BEAT_WINDOW_SECONDS = 0.02          # envelope frame length
BEAT_THRESHOLD_WINDOW_SECONDS = 0.5  # rolling-mean window for the adaptive threshold
BEAT_THRESHOLD_STD = 1.0            # margin above rolling mean, in envelope std devs
MIN_BEAT_SPACING_SECONDS = 0.25     # tempo ceiling: 240 bpm
PLACEHOLDER_BEAT_START = 1.0
PLACEHOLDER_BEAT_STEP = 1.2

VERSION = "0.1.0"
