"""Pipeline state — single source of truth passed through the graph."""

from typing import TypedDict

from pma.models import ProductPlan, ValidationVerdict


class PipelineState(TypedDict):
    idea: str  # Original user input. Immutable after init.
    depth: int  # Requested number of generation stages, 1-3.
    verdict: ValidationVerdict | None  # Set by the validate node.
    expanded_idea: str
    critique: str
    plan: ProductPlan | None  # Only set by the refine node (depth 3).
