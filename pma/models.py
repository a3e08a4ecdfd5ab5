"""Records produced by the stages and returned to callers.

JSON exchanged with the models uses camelCase keys; the Python side is snake_case.
"""

from dataclasses import dataclass
from datetime import datetime

from pma.errors import ExtractionError, PlanFormatError

PLAN_TEXT_FIELDS = {
    "problem_and_solution": "problemAndSolution",
    "target_user": "targetUser",
    "technical_considerations": "technicalConsiderations",
}
PLAN_LIST_FIELDS = {
    "core_features": "coreFeatures",
    "risks_and_edge_cases": "risksAndEdgeCases",
    "open_questions": "openQuestions",
    "suggested_next_steps": "suggestedNextSteps",
}


def _as_text(value) -> str:
    """Models sometimes answer a prose field with a list; fold it into bullets."""
    if isinstance(value, list):
        return "\n".join(f"- {item}" for item in value)
    if value is None:
        return ""
    return str(value)


def _as_string_list(value) -> list[str]:
    return [str(item).strip() for item in value if str(item).strip()]


@dataclass(frozen=True)
class ValidationVerdict:
    is_valid: bool
    reply: str  # Canned reply shown to the user when is_valid is False.
    reasoning: str


@dataclass(frozen=True)
class ProductPlan:
    problem_and_solution: str = ""
    target_user: str = ""
    core_features: tuple[str, ...] = ()
    technical_considerations: str = ""
    risks_and_edge_cases: tuple[str, ...] = ()
    open_questions: tuple[str, ...] = ()
    suggested_next_steps: tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> "ProductPlan":
        """Placeholder plan carried by simple responses."""
        return cls()

    @classmethod
    def from_dict(cls, data) -> "ProductPlan":
        """Build a plan from the refinement JSON.

        Every key must be present. Never fills in a missing section.
        """
        if not isinstance(data, dict):
            raise PlanFormatError(
                f"Plan must be a JSON object, got {type(data).__name__}.",
                snippet=str(data),
            )

        missing = [
            key for key in (*PLAN_TEXT_FIELDS.values(), *PLAN_LIST_FIELDS.values())
            if key not in data
        ]
        if missing:
            raise PlanFormatError(
                f"Plan is missing required fields: {', '.join(missing)}",
                snippet=str(data),
            )

        kwargs = {}
        for attr, key in PLAN_TEXT_FIELDS.items():
            kwargs[attr] = _as_text(data[key])
        for attr, key in PLAN_LIST_FIELDS.items():
            value = data[key]
            if not isinstance(value, list):
                raise PlanFormatError(
                    f"Plan field '{key}' must be a list, got {type(value).__name__}.",
                    snippet=str(value),
                )
            kwargs[attr] = tuple(_as_string_list(value))
        return cls(**kwargs)

    def to_dict(self) -> dict:
        data = {key: getattr(self, attr) for attr, key in PLAN_TEXT_FIELDS.items()}
        data.update({key: list(getattr(self, attr)) for attr, key in PLAN_LIST_FIELDS.items()})
        return data


@dataclass(frozen=True)
class PipelineResult:
    """Envelope returned by run_pipeline.

    When is_simple_response is True the plan is ProductPlan.empty() and nothing is persisted.
    """

    original_idea: str
    expanded_idea: str
    critique: str
    plan: ProductPlan
    timestamp: datetime
    is_simple_response: bool = False
    simple_response: str | None = None

    def to_dict(self) -> dict:
        return {
            "originalIdea": self.original_idea,
            "expandedIdea": self.expanded_idea,
            "critique": self.critique,
            "plan": self.plan.to_dict(),
            "timestamp": self.timestamp.isoformat(),
            "isSimpleResponse": self.is_simple_response,
            "simpleResponse": self.simple_response,
        }


@dataclass(frozen=True)
class TechStackOption:
    name: str
    description: str = ""
    technologies: tuple[str, ...] = ()
    pros: tuple[str, ...] = ()
    cons: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data) -> "TechStackOption":
        if not isinstance(data, dict) or not str(data.get("name", "")).strip():
            raise ExtractionError("Tech stack option must be an object with a name.", snippet=str(data))

        def _list(key: str) -> tuple[str, ...]:
            value = data.get(key) or []
            if isinstance(value, str):
                value = [value]
            return tuple(_as_string_list(value))

        return cls(
            name=str(data["name"]).strip(),
            description=_as_text(data.get("description")).strip(),
            technologies=_list("technologies"),
            pros=_list("pros"),
            cons=_list("cons"),
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "technologies": list(self.technologies),
            "pros": list(self.pros),
            "cons": list(self.cons),
        }


@dataclass(frozen=True)
class QuestionAnswer:
    question: str
    answer: str
