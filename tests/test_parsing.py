import json

import pytest

from archiplan.models.plan import PlanDecodeError, RenameElement
from archiplan.planning.parsing import extract_json_from_text, load_plan_text, prepare_plan


class TestExtractJson:
    def test_direct(self):
        assert extract_json_from_text('{"a": 1}') == {"a": 1}

    def test_surrounding_prose(self):
        text = 'Here is the plan: {"a": {"b": 2}} Let me know.'
        assert extract_json_from_text(text) == {"a": {"b": 2}}

    def test_code_fence(self):
        text = 'Plan {draft} below\n```json\n{"a": 1}\n```\n'
        assert extract_json_from_text(text) == {"a": 1}

    @pytest.mark.parametrize("text", ["", "   ", "no json here", "[1, 2]", "{broken", None, 42])
    def test_nothing_found(self, text):
        assert extract_json_from_text(text) is None


class TestLoadPlanText:
    def test_normalizes_stray_fields(self, make_plan):
        raw = make_plan({"op": "delete_element", "element_id": "e1", "type": "Node"})
        plan = load_plan_text(json.dumps(raw))
        assert plan["actions"][0]["type"] is None
        assert plan["actions"][0]["element_id"] == "e1"

    def test_no_json(self):
        with pytest.raises(PlanDecodeError, match="Failed to extract JSON"):
            load_plan_text("sorry, I cannot help")


class TestPreparePlan:
    def test_ok(self, store, oracle, make_plan):
        raw = make_plan({"op": "rename_element", "element_id": "e1", "new_name": "Bob"})
        prepared = prepare_plan(f"```json\n{json.dumps(raw)}\n```", store, oracle)

        assert prepared.ok
        assert prepared.error is None
        assert prepared.validation.ok
        assert prepared.change_plan.actions == [RenameElement(element_id="e1", new_name="Bob")]

    def test_unparseable(self, store, oracle):
        prepared = prepare_plan("nothing to see", store, oracle)
        assert not prepared.ok
        assert prepared.error == "Failed to extract JSON from response"
        assert prepared.validation is None

    def test_schema_failure(self, store, oracle, make_plan):
        prepared = prepare_plan(make_plan(status="maybe"), store, oracle)
        assert not prepared.ok
        assert prepared.error == (
            "Schema validation failed: "
            'status must be one of: ready, needs_clarification, refusal; got: "maybe"'
        )

    def test_semantic_failure_respects_scope(self, store, oracle, make_plan):
        raw = make_plan({"op": "rename_element", "element_id": "e2", "new_name": "X"})
        prepared = prepare_plan(raw, store, oracle, scope={"e1"})
        assert not prepared.ok
        assert prepared.error == 'Semantic validation failed: actions[0]: element "e2" not in scope'
        assert prepared.plan is raw

    def test_warnings_do_not_block(self, store, oracle, make_plan):
        raw = make_plan(
            {
                "op": "create_relationship",
                "source_id": "e3",
                "target_id": "e1",
                "relationship_type": "Serving",
            }
        )
        prepared = prepare_plan(raw, store, oracle)
        assert prepared.ok
        assert len(prepared.validation.warnings) == 1
