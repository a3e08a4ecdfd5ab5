"""Generators feeding the guided session: tech-stack options, open questions, final plan.

Tech stacks and questions are extracted as JSON; the final plan is returned
as the model's markdown text.
"""

import sys

from pma.errors import ExtractionError, UpstreamError
from pma.llm import invoke, model_settings
from pma.models import QuestionAnswer, TechStackOption
from pma.utils.parsing import extract_json

TECH_STACK_PROMPT = """\
Based on this product idea: "{idea}"

Generate 3-4 different technology stack options that would be suitable for building this product.

For each stack, provide:
- Name (e.g., "Modern Web Stack", "Mobile-First Stack", "Rapid Prototype Stack")
- Brief description (1 sentence)
- Key technologies (4-6 items)
- 2-3 pros
- 2-3 cons

Consider different approaches: web vs mobile, simple vs scalable, rapid prototype vs production-ready, etc.

Respond ONLY with valid JSON array:
[
  {{
    "name": "Stack Name",
    "description": "Brief description",
    "technologies": ["Tech1", "Tech2", "Tech3"],
    "pros": ["Pro 1", "Pro 2"],
    "cons": ["Con 1", "Con 2"]
  }}
]
"""

QUESTIONS_PROMPT = """\
Product Idea: {idea}

Expanded Context: {expanded_idea}

Selected Tech Stack: {stack_name}
Technologies: {technologies}

Generate 4-6 critical open questions that need to be answered before building this product.
Focus on:
- Business/market questions
- User behavior/needs
- Technical decisions
- Risk mitigation
- Scope/priorities

Respond ONLY with a JSON array of question strings:
["Question 1?", "Question 2?", ...]
"""

FINAL_PLAN_PROMPT = """\
Create a comprehensive product plan based on this guided brainstorming session:

ORIGINAL IDEA:
{idea}

EXPANDED CONTEXT:
{expanded_idea}

SELECTED TECH STACK:
{stack_name} - {stack_description}
Technologies: {technologies}

QUESTIONS & ANSWERS:
{qa_text}

Generate a detailed product plan in markdown format with these sections:

# Product Plan

## Problem & Solution
[Clear problem statement and proposed solution]

## Target User
[Specific user personas based on the answers]

## Core Features (MVP)
[Essential features for first version, prioritized]

## Technical Architecture
[High-level architecture using the selected tech stack]

## Implementation Roadmap
[Break down into phases with specific milestones]

## Risks & Mitigation
[Key risks and how to address them based on Q&A]

## Next Steps
[Immediate actionable steps to start building]

Be specific and actionable based on the user's answers.
"""


def format_qa(pairs: list[QuestionAnswer]) -> str:
    """Render Q/A pairs as numbered Q1/A1 blocks."""
    return "\n\n".join(
        f"Q{i}: {qa.question}\nA{i}: {qa.answer}" for i, qa in enumerate(pairs, 1)
    )


async def generate_tech_stacks(idea: str) -> list[TechStackOption]:
    """Return 3-4 tech stack options. Raises ExtractionError on unusable output."""
    print("[PMA] Generating tech stack options...", file=sys.stderr)

    model_id, temperature = model_settings("tech_stacks")
    text = await invoke(model_id, TECH_STACK_PROMPT.format(idea=idea), temperature)

    data = extract_json(text)
    if not isinstance(data, list) or not data:
        raise ExtractionError("Expected a non-empty JSON array of tech stacks.", snippet=text)
    return [TechStackOption.from_dict(item) for item in data]


async def generate_open_questions(
    idea: str, expanded_idea: str, stack: TechStackOption
) -> list[str]:
    """Return the open questions for the chosen stack. Raises ExtractionError on unusable output."""
    print("[PMA] Generating open questions...", file=sys.stderr)

    model_id, temperature = model_settings("questions")
    prompt = QUESTIONS_PROMPT.format(
        idea=idea,
        expanded_idea=expanded_idea,
        stack_name=stack.name,
        technologies=", ".join(stack.technologies),
    )
    text = await invoke(model_id, prompt, temperature)

    data = extract_json(text)
    if not isinstance(data, list):
        raise ExtractionError("Expected a JSON array of question strings.", snippet=text)
    return [str(q).strip() for q in data if str(q).strip()]


async def generate_guided_plan(
    idea: str,
    expanded_idea: str,
    stack: TechStackOption,
    pairs: list[QuestionAnswer],
) -> str:
    print("[PMA] Generating final guided plan...", file=sys.stderr)

    model_id, temperature = model_settings("guided_plan")
    prompt = FINAL_PLAN_PROMPT.format(
        idea=idea,
        expanded_idea=expanded_idea,
        stack_name=stack.name,
        stack_description=stack.description,
        technologies=", ".join(stack.technologies),
        qa_text=format_qa(pairs),
    )
    text = await invoke(model_id, prompt, temperature)
    if not text.strip():
        raise UpstreamError(f"{model_id} returned an empty plan.")
    return text
