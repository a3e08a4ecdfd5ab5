"""Refinement stage — synthesizes expansion + critique into a ProductPlan.

Required model output schema:
{
  "problemAndSolution": "string",
  "targetUser": "string",
  "coreFeatures": ["string"],
  "technicalConsiderations": "string",
  "risksAndEdgeCases": ["string"],
  "openQuestions": ["string"],
  "suggestedNextSteps": ["string"]
}
"""

import sys

from pma.errors import ExtractionError, PlanFormatError
from pma.llm import invoke, model_settings
from pma.models import ProductPlan
from pma.utils.parsing import extract_json

PROMPT_TEMPLATE = """\
You are a product strategist. You've been given an expanded product idea and a critique of it. \
Your job is to synthesize these into a clear, comprehensive product plan.

EXPANDED IDEA:
{expanded_idea}

CRITIQUE:
{critique}

Create a structured product plan with these sections:

1. **Problem & Solution**: Clear statement of the problem and proposed solution
2. **Target User**: Who this is for (be specific)
3. **Core Features (MVP)**: List of essential features for a first version
4. **Technical Considerations**: Key technical approaches, architecture decisions, or technologies
5. **Risks & Edge Cases**: Potential issues or challenges to watch for
6. **Open Questions**: Important questions that need answers before building
7. **Suggested Next Steps**: Concrete actions to move forward

IMPORTANT: You MUST respond with ONLY a valid JSON object. No markdown, no code blocks, just the raw JSON.

Format:
{{
  "problemAndSolution": "string",
  "targetUser": "string",
  "coreFeatures": ["string"],
  "technicalConsiderations": "string",
  "risksAndEdgeCases": ["string"],
  "openQuestions": ["string"],
  "suggestedNextSteps": ["string"]
}}

Be specific, actionable, and comprehensive. Integrate insights from the critique to strengthen the plan.
"""


async def refine_into_plan(expanded_idea: str, critique: str) -> ProductPlan:
    """Return the structured plan.

    Raises PlanFormatError when the output holds no usable plan.
    """
    print("[PMA] Stage 3/3: Refining into structured plan...", file=sys.stderr)

    model_id, temperature = model_settings("refine")
    prompt = PROMPT_TEMPLATE.format(expanded_idea=expanded_idea, critique=critique)
    text = await invoke(model_id, prompt, temperature)

    try:
        data = extract_json(text)
    except ExtractionError as exc:
        raise PlanFormatError("Refinement output did not contain a JSON plan.", snippet=text) from exc

    plan = ProductPlan.from_dict(data)

    print("[PMA] Refinement complete", file=sys.stderr)
    return plan
