"""Output Formatter — renders plans as Markdown and manages the saved plan files."""

from datetime import datetime
from pathlib import Path

from pma.config import get_config, project_root
from pma.models import PipelineResult


def _bullets(items) -> str:
    return "\n".join(f"- {item}" for item in items)


def _numbered(items) -> str:
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, 1))


def render_markdown(result: PipelineResult) -> str:
    """Convert a pipeline result into the Markdown product plan document."""
    plan = result.plan
    lines = [
        "# Product Plan",
        "",
        f"> Generated on {result.timestamp.strftime('%Y-%m-%d %H:%M:%S')}",
        "",
        "## Problem & Solution",
        "",
        plan.problem_and_solution,
        "",
        "## Target User",
        "",
        plan.target_user,
        "",
        "## Core Features (MVP)",
        "",
        _bullets(plan.core_features),
        "",
        "## Technical Considerations",
        "",
        plan.technical_considerations,
        "",
        "## Risks & Edge Cases",
        "",
        _bullets(plan.risks_and_edge_cases),
        "",
        "## Open Questions",
        "",
        _bullets(plan.open_questions),
        "",
        "## Suggested Next Steps",
        "",
        _numbered(plan.suggested_next_steps),
        "",
        "---",
        "",
        "## Appendix: Pipeline Outputs",
        "",
        "### Original Idea",
        result.original_idea,
        "",
        "### Expanded Idea",
        result.expanded_idea,
        "",
        "### Critique",
        result.critique,
        "",
    ]
    return "\n".join(lines)


def output_dir() -> Path:
    """Directory plans are written to, resolved against the project root."""
    return project_root() / get_config().get("output_dir", "./output")


def plan_filename(timestamp: datetime) -> str:
    return f"product-plan-{timestamp.strftime('%Y-%m-%d-%H-%M-%S')}.md"


def _check_name(filename: str) -> None:
    """Reject anything that could escape the output directory."""
    if not filename or ".." in filename or "/" in filename or "\\" in filename:
        raise ValueError(f"Invalid filename: {filename!r}")


def _write(content: str, filename: str) -> Path:
    _check_name(filename)
    if not filename.endswith(".md"):
        filename += ".md"

    directory = output_dir()
    directory.mkdir(parents=True, exist_ok=True)

    # Find a non-conflicting filename
    stem = filename[:-3]
    path = directory / filename
    counter = 1
    while path.exists():
        counter += 1
        path = directory / f"{stem} ({counter}).md"

    path.write_text(content, encoding="utf-8")
    return path


def write_plan(result: PipelineResult, filename: str | None = None) -> Path | None:
    """Write a pipeline result as Markdown.

    Simple responses are never persisted: returns None without touching disk.
    Returns the Path to the written file otherwise.
    """
    if result.is_simple_response:
        return None
    return _write(render_markdown(result), filename or plan_filename(result.timestamp))


def write_guided_plan(plan_text: str, timestamp: datetime | None = None) -> Path:
    """Write a guided session's final plan text as-is."""
    return _write(plan_text, plan_filename(timestamp or datetime.now()))


def list_plans() -> list[str]:
    """Saved plan filenames, newest first (names embed the timestamp)."""
    directory = output_dir()
    if not directory.is_dir():
        return []
    return sorted((p.name for p in directory.glob("*.md") if p.is_file()), reverse=True)


def read_plan(filename: str) -> str:
    _check_name(filename)
    path = output_dir() / filename
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {filename}")
    return path.read_text(encoding="utf-8")


def delete_plan(filename: str) -> None:
    _check_name(filename)
    if not filename.endswith(".md"):
        raise ValueError("Can only delete markdown files.")
    path = output_dir() / filename
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {filename}")
    path.unlink()
