"""LangGraph StateGraph definition for the linear idea-to-plan pipeline.

validate -> expand -> critique -> refine, cut short by the verdict (simple
responses stop right after validation) and by the requested depth.
"""

import sys
from datetime import datetime

from langgraph.graph import END, StateGraph

from pma.agents.critic import critique_idea
from pma.agents.expander import expand_idea
from pma.agents.refiner import refine_into_plan
from pma.agents.validator import validate_idea
from pma.models import PipelineResult, ProductPlan
from pma.state import PipelineState
from pma.utils.validator import validate_input

VALID_DEPTHS = (1, 2, 3)


async def _validate_node(state: PipelineState) -> dict:
    return {"verdict": await validate_idea(state["idea"])}


async def _expand_node(state: PipelineState) -> dict:
    return {"expanded_idea": await expand_idea(state["idea"])}


async def _critique_node(state: PipelineState) -> dict:
    return {"critique": await critique_idea(state["expanded_idea"])}


async def _refine_node(state: PipelineState) -> dict:
    return {"plan": await refine_into_plan(state["expanded_idea"], state["critique"])}


def _route_after_validate(state: PipelineState) -> str:
    """Invalid input ends the run: no generation stage executes."""
    return "expand" if state["verdict"].is_valid else "end"


def _route_after_expand(state: PipelineState) -> str:
    return "critique" if state["depth"] >= 2 else "end"


def _route_after_critique(state: PipelineState) -> str:
    return "refine" if state["depth"] >= 3 else "end"


# --- Build the graph ---

workflow = StateGraph(PipelineState)

workflow.add_node("validate", _validate_node)
workflow.add_node("expand", _expand_node)
workflow.add_node("critique", _critique_node)
workflow.add_node("refine", _refine_node)

workflow.set_entry_point("validate")

workflow.add_conditional_edges(
    "validate", _route_after_validate, {"expand": "expand", "end": END}
)
workflow.add_conditional_edges(
    "expand", _route_after_expand, {"critique": "critique", "end": END}
)
workflow.add_conditional_edges(
    "critique", _route_after_critique, {"refine": "refine", "end": END}
)
workflow.add_edge("refine", END)

graph = workflow.compile()


def _package_result(state: PipelineState, timestamp: datetime) -> PipelineResult:
    """Turn the final graph state into the PipelineResult envelope.

    Depth 1 carries the expansion as problem_and_solution, depth 2 also
    folds the critique into technical_considerations. Both are intended
    degraded outputs, not errors.
    """
    verdict = state["verdict"]
    if not verdict.is_valid:
        return PipelineResult(
            original_idea=state["idea"],
            expanded_idea="",
            critique="",
            plan=ProductPlan.empty(),
            timestamp=timestamp,
            is_simple_response=True,
            simple_response=verdict.reply,
        )

    expanded = state.get("expanded_idea", "")
    critique = state.get("critique", "")
    plan = state.get("plan")
    if plan is None:
        plan = ProductPlan(problem_and_solution=expanded, technical_considerations=critique)

    return PipelineResult(
        original_idea=state["idea"],
        expanded_idea=expanded,
        critique=critique,
        plan=plan,
        timestamp=timestamp,
    )


async def run_pipeline(idea: str, depth: int = 3) -> PipelineResult:
    """Run validation and up to ``depth`` generation stages on an idea.

    Any stage failure propagates; no partial result is returned on error.
    """
    if depth not in VALID_DEPTHS:
        raise ValueError(f"depth must be one of {VALID_DEPTHS}, got {depth!r}.")
    idea = validate_input(idea)
    timestamp = datetime.now()

    preview = idea[:100] + ("..." if len(idea) > 100 else "")
    print(f"[PMA] Original idea: \"{preview}\" (depth {depth})", file=sys.stderr)

    state: PipelineState = {
        "idea": idea,
        "depth": depth,
        "verdict": None,
        "expanded_idea": "",
        "critique": "",
        "plan": None,
    }
    final_state = await graph.ainvoke(state)
    return _package_result(final_state, timestamp)
