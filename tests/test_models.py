import inspect

import pytest
from pydantic import ValidationError

from archiplan.catalog.operations import flat_field_names, flatten_action
from archiplan.models.enums import PlanStatus
from archiplan.models.execution_result import ActionOutcome, PlanExecutionResult
from archiplan.models.plan import (
    AddToView,
    ChangePlan,
    CreateElement,
    CreateRelationship,
    DeleteRelationship,
    PlanDecodeError,
    decode_action,
    decode_plan,
)
from archiplan.models.validation import ValidationResult


class TestPlanDecoding:
    def test_decode_flat_action_to_variant(self):
        raw = flatten_action(
            {
                "op": "create_relationship",
                "source_id": "e2",
                "target_id": "e1",
                "relationship_type": "Serving",
            }
        )
        action = decode_action(raw)

        assert isinstance(action, CreateRelationship)
        assert action.name is None
        assert not hasattr(action, "view_id")

    def test_decode_plan(self, make_plan):
        plan = decode_plan(
            make_plan(
                flatten_action({"op": "create_element", "type": "Node", "name": "N1"}),
                flatten_action({"op": "delete_relationship", "relationship_id": "r1"}),
                questions=None,
            )
        )
        assert plan.status == PlanStatus.READY
        assert plan.questions == []
        assert isinstance(plan.actions[0], CreateElement)
        assert isinstance(plan.actions[1], DeleteRelationship)

    def test_decode_passes_typed_plan_through(self):
        plan = ChangePlan(status="refusal", summary="No")
        assert decode_plan(plan) is plan

    @pytest.mark.parametrize(
        "raw",
        [
            {"op": "launch_rocket"},
            {"op": "rename_element", "element_id": "e1"},
            {"op": "delete_element", "element_id": "e1", "key": "stray"},
            "create_element",
        ],
    )
    def test_decode_action_errors(self, raw):
        with pytest.raises(PlanDecodeError):
            decode_action(raw)

    def test_decode_plan_errors(self):
        with pytest.raises(PlanDecodeError):
            decode_plan([])
        with pytest.raises(PlanDecodeError):
            decode_plan({"status": "ready"})

    def test_add_to_view_minimum_size(self):
        with pytest.raises(ValidationError):
            AddToView(view_id="v1", element_id="e1", width=5)
        assert AddToView(view_id="v1", element_id="e1", x=10.5).x == 10.5

    def test_to_wire_is_flat(self):
        plan = ChangePlan(
            status="ready",
            summary="Add",
            actions=[CreateElement(type="Node", name="N1", ref_id="n")],
        )
        wire = plan.to_wire()

        assert wire["status"] == "ready"
        assert wire["questions"] is None
        assert list(wire["actions"][0].keys()) == flat_field_names()
        assert wire["actions"][0]["ref_id"] == "n"
        assert wire["actions"][0]["view_id"] is None
        assert decode_plan(wire) == plan


class TestResultModels:
    def test_validation_result_ok(self):
        assert ValidationResult(schema_valid=True).ok
        assert not ValidationResult(schema_valid=True, semantic_valid=False).ok
        assert not ValidationResult(schema_valid=False).ok

    def test_execution_result_serializes_mode(self):
        result = PlanExecutionResult(mode="apply")
        assert result.model_dump()["mode"] == "apply"
        assert result.ok and result.results == []


def test_plan_models_are_documented():
    for model in (ChangePlan, ValidationResult, PlanExecutionResult, ActionOutcome):
        assert inspect.getdoc(model)
        for name, prop in model.model_json_schema().get("properties", {}).items():
            assert prop.get("description"), f"{model.__name__}.{name}"
