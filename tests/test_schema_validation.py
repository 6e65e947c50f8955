import pytest
from jsonschema import Draft202012Validator

from archiplan.catalog.operations import (
    build_action_schema,
    build_envelope_schema,
    flatten_action,
    get_op_def,
    get_valid_ops,
)
from archiplan.validation.schema import validate_action, validate_schema


class TestTopLevel:
    def test_valid_plan(self, make_plan):
        plan = make_plan(
            flatten_action({"op": "create_element", "type": "BusinessActor", "name": "Team"}),
            questions=None,
        )
        assert validate_schema(plan) == []

    def test_not_an_object(self):
        assert validate_schema(["nope"]) == ["Plan must be a JSON object"]

    def test_missing_and_unknown_fields(self):
        errors = validate_schema({"status": "ready", "actions": [], "extra": 1, "other": None})
        assert 'Missing required field "schema_version"' in errors
        assert 'Missing required field "summary"' in errors
        assert 'Unknown top-level field "extra"' in errors
        # null-valued unknown fields are tolerated
        assert 'Unknown top-level field "other"' not in errors

    def test_closed_sets(self, make_plan):
        errors = validate_schema(make_plan(schema_version="3.0", status="maybe"))
        assert errors == [
            'schema_version must be one of: 1.0, 2.0; got: "3.0"',
            'status must be one of: ready, needs_clarification, refusal; got: "maybe"',
        ]

    def test_version_one_accepted(self, make_plan):
        assert validate_schema(make_plan(schema_version="1.0")) == []

    def test_summary_bounds(self, make_plan):
        assert validate_schema(make_plan(summary="")) == ["summary must be a non-empty string"]
        assert validate_schema(make_plan(summary="x" * 2001)) == [
            "summary exceeds 2000 characters"
        ]

    def test_questions(self, make_plan):
        assert validate_schema(make_plan(questions="why?")) == ["questions must be an array"]
        assert validate_schema(make_plan(questions=["ok", "", 3])) == [
            "questions[1] must be a non-empty string",
            "questions[2] must be a non-empty string",
        ]

    def test_actions_bounds(self, make_plan):
        assert validate_schema(make_plan(actions={})) == ["actions must be an array"]

        too_many = [{"op": "delete_element", "element_id": f"e{i}"} for i in range(101)]
        assert validate_schema(make_plan(*too_many)) == [
            "actions exceeds maximum of 100 items"
        ]

    def test_all_errors_are_collected(self, make_plan):
        plan = make_plan(
            {"op": "explode"},
            {"op": "rename_element", "element_id": "e1"},
            status="maybe",
        )
        errors = validate_schema(plan)
        assert len(errors) == 3
        assert 'actions[0]: unknown op "explode"' in errors
        assert 'actions[1]: "new_name" must be a string' in errors


class TestActionContracts:
    def test_not_an_object(self):
        assert validate_action("x", 2) == ["actions[2]: must be an object"]

    @pytest.mark.parametrize("op", [None, 5])
    def test_missing_op(self, op):
        assert validate_action({"op": op}, 0) == ["actions[0]: missing or invalid 'op' field"]

    def test_stray_non_null_field(self):
        errors = validate_action(
            {"op": "delete_element", "element_id": "e1", "color": "red", "key": None}, 0
        )
        assert errors == ['actions[0]: unknown field "color"']

    def test_element_type_labels(self):
        ok = {"op": "create_element", "type": "Application Component", "name": "CRM"}
        assert validate_action(ok, 0) == []
        assert validate_action({**ok, "type": "ApplicationComponent"}, 0) == []
        assert validate_action({**ok, "type": "Dragon"}, 0) == [
            'actions[0]: "type" must be a valid ArchiMate element type; got: "Dragon"'
        ]
        assert validate_action({**ok, "type": None}, 0) == [
            'actions[0]: "type" must be a valid ArchiMate element type; got: null'
        ]

    def test_relationship_labels(self):
        action = {
            "op": "create_relationship",
            "source_id": "a",
            "target_id": "b",
            "relationship_type": "Likes",
        }
        [error] = validate_action(action, 1)
        assert error.startswith('actions[1]: "relationship_type" must be one of: Composition, ')
        assert error.endswith('; got: "Likes"')

    def test_string_bounds(self):
        action = {"op": "set_property", "element_id": "", "key": "", "value": ""}
        assert validate_action(action, 0) == [
            'actions[0]: "element_id" must be non-empty',
            'actions[0]: "key" must be non-empty',
        ]
        long_name = {"op": "create_view", "name": "x" * 1001}
        assert validate_action(long_name, 0) == ['actions[0]: "name" exceeds 1000 characters']

    def test_optional_ref_id_bounds(self):
        action = {"op": "create_view", "name": "V", "ref_id": ""}
        assert validate_action(action, 0) == ['actions[0]: "ref_id" must be non-empty']
        assert validate_action({**action, "ref_id": None}, 0) == []

    def test_numeric_fields(self):
        base = {"op": "add_to_view", "view_id": "v1", "element_id": "e1"}
        assert validate_action({**base, "x": 10, "y": 20.5, "width": 10}, 0) == []
        assert validate_action({**base, "x": "10", "y": True}, 0) == [
            'actions[0]: "x" must be a number',
            'actions[0]: "y" must be a number',
        ]
        assert validate_action({**base, "width": 9, "height": 0}, 0) == [
            'actions[0]: "width" must be at least 10',
            'actions[0]: "height" must be at least 10',
        ]

    def test_wrong_types(self):
        action = {"op": "set_documentation", "element_id": 7, "documentation": ["doc"]}
        assert validate_action(action, 0) == [
            'actions[0]: "element_id" must be a string',
            'actions[0]: "documentation" must be a string',
        ]

    def test_messages_quote_the_sent_label(self):
        action = {"op": "create_element", "type": "BusinessDragon", "name": "X"}
        assert validate_action(action, 0) == [
            'actions[0]: "type" must be a valid ArchiMate element type; got: "BusinessDragon"'
        ]

    def test_unknown_fields_come_before_field_errors(self):
        action = {"op": "add_to_view", "mood": "happy", "height": 3}
        assert validate_action(action, 4) == [
            'actions[4]: unknown field "mood"',
            'actions[4]: "view_id" must be a string',
            'actions[4]: "element_id" must be a string',
            'actions[4]: "height" must be at least 10',
        ]


class TestContractSchemas:
    @pytest.mark.parametrize("op", get_valid_ops())
    def test_action_schemas_are_valid(self, op):
        schema = build_action_schema(get_op_def(op))
        Draft202012Validator.check_schema(schema)
        assert schema["required"][0] == "op"
        assert schema["properties"]["op"] == {"const": op}

    def test_envelope_schema_is_valid(self):
        schema = build_envelope_schema()
        Draft202012Validator.check_schema(schema)
        assert schema["properties"]["actions"]["maxItems"] == 100

    def test_optional_fields_accept_null(self):
        schema = build_action_schema(get_op_def("create_relationship"))
        assert schema["properties"]["name"]["type"] == ["string", "null"]
        assert schema["properties"]["source_id"] == {"type": "string", "minLength": 1}
        assert None not in schema["properties"]["relationship_type"]["enum"]
