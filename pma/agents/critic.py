"""Critique stage — challenges the expanded idea."""

import sys

from pma.llm import invoke, model_settings

PROMPT_TEMPLATE = """\
You are a critical product analyst. You've been given an expanded product idea. Your job is to:

1. Challenge assumptions and identify gaps
2. Point out potential risks and edge cases
3. Ask tough questions that need answers
4. Identify what's unclear or underspecified
5. Suggest what's missing from the plan

Be constructive but critical. Your goal is to make this idea stronger by finding its weaknesses.

Here's the expanded idea:
{expanded_idea}

Provide a thorough critique with specific concerns, questions, and suggestions for improvement.
"""


async def critique_idea(expanded_idea: str) -> str:
    print("[PMA] Stage 2/3: Critiquing...", file=sys.stderr)

    model_id, temperature = model_settings("critique")
    text = await invoke(
        model_id, PROMPT_TEMPLATE.format(expanded_idea=expanded_idea), temperature
    )

    print("[PMA] Critique complete", file=sys.stderr)
    return text
