"""Shared parsing utilities for model responses.

Model output is not guaranteed to contain only JSON: prose preambles, markdown
fences and trailing remarks are common. ``extract_json`` is the single entry
point every stage uses, so the heuristic can change without touching callers.
"""

import json
import re
import sys

from pma.errors import ExtractionError

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)
_DOCUMENT_OPENERS = ('"', "[", "{")


def strip_fences(text: str) -> str:
    """Strip markdown code fences from LLM output if present."""
    match = _FENCE_RE.search(text)
    return match.group(1).strip() if match else text.strip()


def _bracketed_regions(text: str) -> list[str]:
    """First '['..last ']' and first '{'..last '}', ordered by where they start."""
    regions = []
    for opener, closer in (("[", "]"), ("{", "}")):
        start = text.find(opener)
        end = text.rfind(closer)
        if start != -1 and end > start:
            regions.append((start, text[start:end + 1]))
    regions.sort(key=lambda region: region[0])
    return [region for _, region in regions]


def _candidates(text: str) -> list[str]:
    """Substrings worth handing to json.loads, most specific first."""
    candidates = []

    for match in _FENCE_RE.finditer(text):
        fenced = match.group(1).strip()
        candidates.append(fenced)
        candidates.extend(_bracketed_regions(fenced))

    # A complete document must win over the bracketed regions inside it
    stripped = text.strip()
    if stripped[:1] in _DOCUMENT_OPENERS:
        candidates.append(stripped)
    candidates.extend(_bracketed_regions(text))

    seen = set()
    unique = []
    for candidate in candidates:
        if candidate and candidate not in seen:
            seen.add(candidate)
            unique.append(candidate)
    return unique


def extract_json(raw_text: str):
    """Locate and parse the JSON payload embedded in raw model text.

    Tries, in order: the contents of each fenced code block, the whole text
    when it opens like a JSON document (string, array or object), the first
    bracketed region (array or object, whichever opens first), then the
    other bracketed region. The first candidate that parses wins. Bare
    scalars outside a fence are never accepted and malformed JSON is never
    repaired.

    Raises ExtractionError if no candidate parses.
    """
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise ExtractionError("Model returned no text to extract JSON from.", snippet=str(raw_text or ""))

    for candidate in _candidates(raw_text):
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue

    print(f"[PMA] Could not find JSON in model output: {raw_text[:200]!r}", file=sys.stderr)
    raise ExtractionError("No parseable JSON found in model output.", snippet=raw_text)
