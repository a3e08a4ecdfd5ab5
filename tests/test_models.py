"""Tests for structured-data coercion in pma.models."""

import pytest

from pma.errors import ExtractionError, PlanFormatError
from pma.models import ProductPlan, TechStackOption


class TestProductPlanFromDict:
    def test_full_payload(self, valid_plan_response):
        plan = ProductPlan.from_dict(valid_plan_response)
        assert plan.problem_and_solution.startswith("Dog owners")
        assert plan.suggested_next_steps == ("Interview 20 dog owners", "Prototype matching")

    def test_to_dict_restores_camel_case(self, valid_plan_response):
        assert ProductPlan.from_dict(valid_plan_response).to_dict() == valid_plan_response

    def test_non_object_raises(self):
        with pytest.raises(PlanFormatError, match="JSON object"):
            ProductPlan.from_dict(["not", "a", "plan"])

    def test_missing_fields_listed(self, valid_plan_response):
        del valid_plan_response["targetUser"]
        del valid_plan_response["openQuestions"]
        with pytest.raises(PlanFormatError) as exc_info:
            ProductPlan.from_dict(valid_plan_response)
        assert "targetUser" in str(exc_info.value)
        assert "openQuestions" in str(exc_info.value)

    def test_list_field_must_be_list(self, valid_plan_response):
        valid_plan_response["coreFeatures"] = "Route matching"
        with pytest.raises(PlanFormatError, match="coreFeatures"):
            ProductPlan.from_dict(valid_plan_response)

    def test_prose_field_given_as_list_is_folded(self, valid_plan_response):
        valid_plan_response["technicalConsiderations"] = ["Use PostGIS", "Cache routes"]
        plan = ProductPlan.from_dict(valid_plan_response)
        assert plan.technical_considerations == "- Use PostGIS\n- Cache routes"

    def test_list_items_coerced_and_blank_dropped(self, valid_plan_response):
        valid_plan_response["suggestedNextSteps"] = ["Ship", 2, "  "]
        plan = ProductPlan.from_dict(valid_plan_response)
        assert plan.suggested_next_steps == ("Ship", "2")

    def test_empty_placeholder(self):
        plan = ProductPlan.empty()
        assert plan.problem_and_solution == ""
        assert plan.core_features == ()


class TestTechStackOption:
    def test_defaults_for_optional_fields(self):
        option = TechStackOption.from_dict({"name": "  Lean Stack  "})
        assert option.name == "Lean Stack"
        assert option.technologies == ()
        assert option.description == ""

    def test_single_string_list_field(self):
        option = TechStackOption.from_dict({"name": "X", "pros": "Cheap"})
        assert option.pros == ("Cheap",)

    def test_missing_name_raises(self):
        with pytest.raises(ExtractionError):
            TechStackOption.from_dict({"description": "no name"})

    def test_to_dict(self):
        option = TechStackOption(name="X", technologies=("A", "B"))
        assert option.to_dict()["technologies"] == ["A", "B"]
