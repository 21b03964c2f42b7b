"""CLI interface for generating and inspecting video audio assets."""

import argparse
import json
import logging
import math
import os
import sys

from dotenv import load_dotenv

from soundtrack_producer.artifacts import write_artifact
from soundtrack_producer.beats import detect_beats
from soundtrack_producer.constants import (
    DEFAULT_MUSIC_STYLE,
    MUSIC_STYLE_PROMPTS,
    VERSION,
)
from soundtrack_producer.pipeline import generate_audio


def _fail(message: str):
    print(f"Error: {message}", file=sys.stderr)
    raise SystemExit(1)


def _read_script(args) -> str:
    """Script text from --script or --script-file."""
    if args.script_file:
        if not os.path.exists(args.script_file):
            _fail(f"File not found: {args.script_file}")
        with open(args.script_file, encoding="utf-8") as f:
            return f.read()
    return args.script or ""


def _check_duration(duration: float) -> None:
    if not math.isfinite(duration) or duration < 0:
        _fail(f"Duration must be a non-negative number of seconds, got {duration}")


def cmd_generate(args):
    """Generate music, narration, timecodes and beats."""
    script = _read_script(args)
    if not script.strip():
        _fail("Narration script is empty")
    _check_duration(args.duration)

    result = generate_audio(
        args.style,
        script,
        args.duration,
        args.project_path,
        voice_id=args.voice,
    )
    data = result.to_dict()

    if args.output:
        path = write_artifact(args.output, data)
        print(f"Wrote {path}")
    else:
        print(json.dumps(data, indent=2))

    for warning in result.warnings:
        print(f"Warning: {warning}", file=sys.stderr)


def cmd_beats(args):
    """Detect beats in an existing audio file."""
    if not os.path.exists(args.file):
        _fail(f"File not found: {args.file}")
    _check_duration(args.duration)

    warnings: list[str] = []
    beats = detect_beats(args.file, args.duration, warnings)
    print(json.dumps({"beats": beats, "warnings": warnings}, indent=2))


def cmd_styles(args):
    """List available music styles."""
    print("Music styles:")
    for name, prompt in MUSIC_STYLE_PROMPTS.items():
        marker = " (default)" if name == DEFAULT_MUSIC_STYLE else ""
        print(f"  {name:<8} {prompt}{marker}")


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="soundtrack-producer",
        description="Soundtrack Producer — narration, music and beat sync for generated videos",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # generate
    gen_parser = subparsers.add_parser("generate", help="Generate music, narration and beats")
    script_group = gen_parser.add_mutually_exclusive_group(required=True)
    script_group.add_argument("--script", help="Narration script text")
    script_group.add_argument("--script-file", help="Path to a narration script file")
    gen_parser.add_argument("--duration", type=float, required=True, help="Target duration in seconds")
    gen_parser.add_argument("--style", default=DEFAULT_MUSIC_STYLE, help="Music style (see 'styles')")
    gen_parser.add_argument("--project-path", help="Video project directory (default: $REMOTION_PROJECT_PATH or ./remotion)")
    gen_parser.add_argument("--voice", help="Voice id (default: $ELEVENLABS_VOICE_ID or built-in narrator)")
    gen_parser.add_argument("--output", help="Write result JSON to this file instead of stdout")
    gen_parser.set_defaults(func=cmd_generate)

    # beats
    beats_parser = subparsers.add_parser("beats", help="Detect beats in an audio file")
    beats_parser.add_argument("file", help="Path to the audio file")
    beats_parser.add_argument("--duration", type=float, required=True, help="Track duration in seconds")
    beats_parser.set_defaults(func=cmd_beats)

    # styles
    styles_parser = subparsers.add_parser("styles", help="List music styles")
    styles_parser.set_defaults(func=cmd_styles)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    load_dotenv()

    args.func(args)


if __name__ == "__main__":
    main()
