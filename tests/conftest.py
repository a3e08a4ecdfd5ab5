"""Shared fixtures for the PM Assist test suite."""

from contextlib import ExitStack
from unittest.mock import AsyncMock, patch

import pytest

from pma.models import TechStackOption

# Every module that imports the Model Invoker directly
STAGE_MODULES = (
    "pma.agents.validator",
    "pma.agents.expander",
    "pma.agents.critic",
    "pma.agents.refiner",
    "pma.agents.guided",
)


@pytest.fixture
def mock_config(tmp_path):
    """Patch the config singleton with test-friendly values."""
    test_config = {
        "provider": "openrouter",
        "openrouter_base_url": "https://openrouter.ai/api/v1",
        "request_timeout": 30,
        "models": {
            "validate": {"model": "test/validate", "temperature": 0.1},
            "expand": {"model": "test/expand", "temperature": 0.8},
            "critique": {"model": "test/critique", "temperature": 0.7},
            "refine": {"model": "test/refine", "temperature": 0.5},
            "tech_stacks": {"model": "test/stacks", "temperature": 0.7},
            "questions": {"model": "test/questions", "temperature": 0.7},
            "guided_plan": {"model": "test/plan", "temperature": 0.7},
        },
        "default_depth": 3,
        "validation_fail_open": True,
        "output_dir": str(tmp_path / "output"),
    }
    with patch("pma.config._config", test_config):
        yield test_config


@pytest.fixture
def mock_invoke(mock_config):
    """One AsyncMock standing in for the Model Invoker in every stage module."""
    mock = AsyncMock()
    with ExitStack() as stack:
        for module in STAGE_MODULES:
            stack.enter_context(patch(f"{module}.invoke", mock))
        yield mock


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-test")
    return "sk-or-test"


@pytest.fixture
def valid_plan_response():
    """Complete refinement JSON payload."""
    return {
        "problemAndSolution": "Dog owners struggle to find walking partners; match them by route.",
        "targetUser": "Urban dog owners aged 25-45",
        "coreFeatures": ["Route matching", "Chat", "Walk scheduling"],
        "technicalConsiderations": "Geospatial queries on walk routes.",
        "risksAndEdgeCases": ["Safety of meeting strangers", "Low density in rural areas"],
        "openQuestions": ["How is trust established?"],
        "suggestedNextSteps": ["Interview 20 dog owners", "Prototype matching"],
    }


@pytest.fixture
def valid_verdict_response():
    return '{"isValid": true, "reasoning": "Product concept mentioned", "response": "valid"}'


@pytest.fixture
def tech_stacks_response():
    return """Here are the options:
[
  {"name": "Modern Web Stack", "description": "SPA plus API",
   "technologies": ["React", "FastAPI", "PostgreSQL"], "pros": ["Fast to ship"], "cons": ["No offline"]},
  {"name": "Mobile-First Stack", "description": "Native-feeling apps",
   "technologies": ["Flutter", "Firebase"], "pros": ["One codebase"], "cons": ["Vendor lock-in"]},
  {"name": "Rapid Prototype Stack", "description": "No-code first",
   "technologies": ["Bubble", "Airtable"], "pros": ["Cheapest"], "cons": ["Hard to scale"]}
]
Let me know which one you prefer."""


@pytest.fixture
def tech_stacks():
    return (
        TechStackOption(name="Modern Web Stack", description="SPA plus API",
                        technologies=("React", "FastAPI")),
        TechStackOption(name="Mobile-First Stack", description="Native-feeling apps",
                        technologies=("Flutter", "Firebase")),
        TechStackOption(name="Rapid Prototype Stack", description="No-code first",
                        technologies=("Bubble",)),
    )
