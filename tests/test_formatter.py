"""Tests for formatter: render_markdown, write_plan, saved plan management."""

from datetime import datetime

import pytest

from pma.models import PipelineResult, ProductPlan
from pma.utils.formatter import (
    delete_plan,
    list_plans,
    read_plan,
    render_markdown,
    write_guided_plan,
    write_plan,
)

TIMESTAMP = datetime(2026, 3, 14, 9, 26, 53)


@pytest.fixture
def result(valid_plan_response):
    return PipelineResult(
        original_idea="Dog walking buddies",
        expanded_idea="EXPANDED NARRATIVE",
        critique="CRITIQUE NARRATIVE",
        plan=ProductPlan.from_dict(valid_plan_response),
        timestamp=TIMESTAMP,
    )


@pytest.fixture
def simple_result():
    return PipelineResult(
        original_idea="hi",
        expanded_idea="",
        critique="",
        plan=ProductPlan.empty(),
        timestamp=TIMESTAMP,
        is_simple_response=True,
        simple_response="Hi there!",
    )


# --- render_markdown (pure function) ---

class TestRenderMarkdown:
    def test_sections_in_order(self, result):
        md = render_markdown(result)
        headings = [
            "## Problem & Solution",
            "## Target User",
            "## Core Features (MVP)",
            "## Technical Considerations",
            "## Risks & Edge Cases",
            "## Open Questions",
            "## Suggested Next Steps",
            "## Appendix: Pipeline Outputs",
        ]
        positions = [md.index(h) for h in headings]
        assert positions == sorted(positions)

    def test_lists_rendered(self, result):
        md = render_markdown(result)
        assert "- Route matching" in md
        assert "- Safety of meeting strangers" in md
        assert "1. Interview 20 dog owners" in md
        assert "2. Prototype matching" in md

    def test_appendix_verbatim(self, result):
        md = render_markdown(result)
        assert "### Original Idea\nDog walking buddies" in md
        assert "### Expanded Idea\nEXPANDED NARRATIVE" in md
        assert "### Critique\nCRITIQUE NARRATIVE" in md

    def test_generated_on_line(self, result):
        assert "> Generated on 2026-03-14 09:26:53" in render_markdown(result)


# --- write_plan (file I/O) ---

class TestWritePlan:
    def test_simple_response_not_persisted(self, mock_config, simple_result, tmp_path):
        assert write_plan(simple_result) is None
        assert not (tmp_path / "output").exists()

    def test_timestamped_filename(self, mock_config, result):
        path = write_plan(result)
        assert path.name == "product-plan-2026-03-14-09-26-53.md"
        assert path.read_text(encoding="utf-8").startswith("# Product Plan")

    def test_custom_filename_gets_extension(self, mock_config, result):
        assert write_plan(result, "dogs").name == "dogs.md"

    def test_does_not_overwrite(self, mock_config, result):
        first = write_plan(result)
        second = write_plan(result)
        assert first != second
        assert second.name == "product-plan-2026-03-14-09-26-53 (2).md"

    def test_rejects_traversal_in_custom_name(self, mock_config, result):
        with pytest.raises(ValueError):
            write_plan(result, "../escape.md")

    def test_guided_plan_written_as_is(self, mock_config):
        path = write_guided_plan("# Product Plan\n\nGuided.", TIMESTAMP)
        assert path.read_text(encoding="utf-8") == "# Product Plan\n\nGuided."


# --- saved plan management ---

class TestSavedPlans:
    def test_list_empty_when_no_directory(self, mock_config):
        assert list_plans() == []

    def test_list_newest_first(self, mock_config):
        write_guided_plan("old", datetime(2025, 1, 1, 8, 0, 0))
        write_guided_plan("new", datetime(2026, 1, 1, 8, 0, 0))
        assert list_plans() == [
            "product-plan-2026-01-01-08-00-00.md",
            "product-plan-2025-01-01-08-00-00.md",
        ]

    def test_read_plan(self, mock_config):
        path = write_guided_plan("content", TIMESTAMP)
        assert read_plan(path.name) == "content"

    def test_read_missing_raises(self, mock_config):
        with pytest.raises(FileNotFoundError):
            read_plan("nope.md")

    def test_delete_plan(self, mock_config):
        path = write_guided_plan("content", TIMESTAMP)
        delete_plan(path.name)
        assert not path.exists()
        assert list_plans() == []

    @pytest.mark.parametrize("name", ["../secrets.md", "a/b.md", "..", ""])
    def test_traversal_rejected(self, mock_config, name):
        with pytest.raises(ValueError):
            read_plan(name)
        with pytest.raises(ValueError):
            delete_plan(name)

    def test_delete_only_markdown(self, mock_config):
        with pytest.raises(ValueError, match="markdown"):
            delete_plan("notes.txt")
