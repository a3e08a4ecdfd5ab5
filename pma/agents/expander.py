"""Expansion stage — turns a short idea into a fleshed-out problem/solution narrative."""

import sys

from pma.llm import invoke, model_settings

PROMPT_TEMPLATE = """\
You are a product thinking partner. A user has shared a rough product idea. Your job is to \
expand and flesh out this idea by exploring:

1. The core problem being solved
2. Who the target users are
3. What the key features might be
4. How this could be technically implemented
5. What the value proposition is

Here's the idea:
"{idea}"

Provide a detailed expansion of this idea. Think broadly and explore different angles. \
Be creative but grounded. Write in a clear, structured way.
"""


async def expand_idea(idea: str) -> str:
    """Return the expanded narrative for an idea."""
    print("[PMA] Stage 1/3: Expanding idea...", file=sys.stderr)

    model_id, temperature = model_settings("expand")
    text = await invoke(model_id, PROMPT_TEMPLATE.format(idea=idea), temperature)

    print("[PMA] Expansion complete", file=sys.stderr)
    return text
