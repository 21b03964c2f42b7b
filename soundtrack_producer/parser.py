"""Split narration scripts into sentences."""

import re

from soundtrack_producer.models import Sentence

# A run of terminal punctuation; captured so the run can be re-attached
_TERMINAL_RE = re.compile(r"([.!?]+)")

_TRAILING_PUNCT_RE = re.compile(r"[.!?]+$")


def strip_terminal_punctuation(text: str) -> str:
    """Remove a trailing run of . ! ? and surrounding whitespace."""
    return _TRAILING_PUNCT_RE.sub("", text.strip()).strip()


def parse_script(script: str) -> list[Sentence]:
    """Parse a narration script into an ordered list of Sentences.

    Splits on runs of terminal punctuation and re-attaches each run to the
    clause before it. Whitespace-only clauses are dropped, so an empty script
    yields no sentences. Trailing text without punctuation still counts as a
    sentence.
    """
    if not script:
        return []

    parts = _TERMINAL_RE.split(script)
    sentences = []

    # parts alternates clause, punctuation, clause, punctuation, ...
    for i in range(0, len(parts), 2):
        clause = parts[i]
        if not clause.strip():
            continue
        punct = parts[i + 1] if i + 1 < len(parts) else ""
        raw = (clause + punct).strip()
        sentences.append(Sentence(
            index=len(sentences),
            text=strip_terminal_punctuation(raw),
            raw=raw,
        ))

    return sentences


def join_sentences(sentences: list[Sentence]) -> str:
    """Rejoin sentences with single spaces, punctuation intact.

    Matches the whitespace-normalized script except where it started with
    punctuation or had no space after a terminator ("Hello.World" comes
    back as "Hello. World").
    """
    return " ".join(s.raw for s in sentences)


def count_words(text: str) -> int:
    return len(text.split())
