"""Validation stage — decides whether the input is a product idea or just chit-chat.

Required model output schema:
{"isValid": true | false, "reasoning": "string", "response": "friendly reply or 'valid'"}

Failures fail open: when the model call or parsing fails the idea is treated
as valid so a flaky classifier never blocks a real request. Set
``validation_fail_open: false`` in config.yaml to propagate the error instead.
"""

import sys

from pma.config import get_config
from pma.errors import ExtractionError, UpstreamError
from pma.llm import invoke, model_settings
from pma.models import ValidationVerdict
from pma.utils.parsing import extract_json

SIMPLE_RESPONSES = {
    "test": (
        "Hi! I'm PM Assist, your product planning assistant. I help transform product ideas "
        "into comprehensive plans. Try describing a product or business idea you'd like to explore!"
    ),
    "hello": (
        "Hello! I'm here to help you turn product ideas into detailed plans. "
        "What product or business idea would you like to work on?"
    ),
    "hi": (
        "Hi there! Ready to help you develop your product ideas. "
        "Share an idea and I'll create a comprehensive plan for it!"
    ),
    "hey": "Hey! I'm PM Assist. Tell me about a product idea and I'll help you create a detailed plan.",
    "yes": "Great! Share a product idea and I'll help you develop a comprehensive plan for it.",
    "no": "No problem! When you're ready, share a product idea and I'll help you create a plan.",
    "ok": "Ready when you are! Describe a product idea and I'll help turn it into a detailed plan.",
    "okay": "Perfect! Share your product idea and I'll help create a comprehensive plan.",
}

DEFAULT_SIMPLE_RESPONSE = (
    "I'm here to help you turn product ideas into detailed plans. Share an idea to get started!"
)

PROMPT_TEMPLATE = """\
You must determine if this user input is a real product idea or just casual chat/testing.

INPUT: "{idea}"

STRICT RULES:
1. If input is 1-3 words AND doesn't describe a product/service -> NOT VALID
2. If input is: test, hello, hi, hey, yes, no, greetings -> NOT VALID
3. If input asks "what can you do?" or similar -> NOT VALID
4. If input describes ANY product, app, tool, service, platform -> VALID
5. If input describes a problem that needs a solution -> VALID

You MUST respond with ONLY this JSON (no other text):
{{"isValid": true, "reasoning": "your reason", "response": "friendly response or 'valid'"}}

Example 1 - Input: "test"
{{"isValid": false, "reasoning": "Single test word", "response": "Hi! I'm PM Assist. I help turn product ideas into detailed plans. Share a product idea to get started!"}}

Example 2 - Input: "a fitness app"
{{"isValid": true, "reasoning": "Product concept mentioned", "response": "valid"}}

NOW RESPOND FOR: "{idea}"
"""

FAIL_OPEN_VERDICT = ValidationVerdict(
    is_valid=True,
    reply="valid",
    reasoning="Validation error - proceeding with generation",
)


def _quick_verdict(idea: str) -> ValidationVerdict | None:
    """Return a canned verdict for single filler words, None otherwise."""
    trimmed = idea.strip()
    words = trimmed.split()
    lowered = trimmed.lower()
    if len(words) == 1 and lowered in SIMPLE_RESPONSES:
        return ValidationVerdict(
            is_valid=False,
            reply=SIMPLE_RESPONSES.get(lowered, DEFAULT_SIMPLE_RESPONSE),
            reasoning=f'Single word input: "{lowered}" - not a product idea',
        )
    return None


def _parse_verdict(text: str) -> ValidationVerdict:
    data = extract_json(text)
    if not isinstance(data, dict):
        raise ExtractionError("Validation response must be a JSON object.", snippet=text)
    return ValidationVerdict(
        is_valid=data.get("isValid") is True,
        reply=str(data.get("response") or "valid"),
        reasoning=str(data.get("reasoning") or "No reasoning provided"),
    )


async def validate_idea(idea: str) -> ValidationVerdict:
    """Classify an idea as a genuine product concept or conversational filler.

    Single filler words are answered without a model call. ConfigError is
    never swallowed: a missing credential is reported, not treated as valid.
    """
    print("[PMA] Stage 0: Validating input...", file=sys.stderr)

    quick = _quick_verdict(idea)
    if quick is not None:
        print(f"[PMA] {quick.reasoning}", file=sys.stderr)
        return quick

    model_id, temperature = model_settings("validate")
    try:
        text = await invoke(model_id, PROMPT_TEMPLATE.format(idea=idea), temperature)
        verdict = _parse_verdict(text)
    except (UpstreamError, ExtractionError) as exc:
        if not get_config().get("validation_fail_open", True):
            raise
        print(f"[PMA] Warning: validation failed ({exc}). Proceeding as valid.", file=sys.stderr)
        return FAIL_OPEN_VERDICT

    print(
        f"[PMA] Validation result: {'valid' if verdict.is_valid else 'not valid'} "
        f"({verdict.reasoning})",
        file=sys.stderr,
    )
    return verdict
