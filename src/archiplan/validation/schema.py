"""Schema phase of plan validation.

Structural checks only: required fields, closed value sets, types, lengths
and bounds. The model is never consulted. The envelope and every operation
contract are JSON Schemas built from the catalog; each jsonschema error is
collected and rendered as a wire message, so a producer can correct the whole
plan in one pass.
"""

import json
from typing import Any, Mapping

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from ..catalog import labels
from ..catalog.operations import (
    ACCEPTED_VERSIONS,
    MAX_ACTIONS,
    MAX_SUMMARY_LENGTH,
    OP_DEFS,
    OP_FIELD,
    TOP_LEVEL_REQUIRED,
    FieldSpec,
    OperationSpec,
    build_action_schema,
    build_envelope_schema,
    get_op_def,
)
from ..models.enums import FieldType, PlanStatus

VALID_STATUSES = [status.value for status in PlanStatus]

# Reporting order of the envelope fields.
ENVELOPE_ORDER = ["schema_version", "status", "summary", "questions", "actions"]

_ENVELOPE_VALIDATOR = Draft202012Validator(build_envelope_schema())
_ACTION_VALIDATORS = {
    op: Draft202012Validator(build_action_schema(spec)) for op, spec in OP_DEFS.items()
}


def _show(value: Any) -> str:
    return json.dumps(value, default=str)


def _missing(error: ValidationError) -> list[str]:
    return [name for name in error.validator_value if name not in error.instance]


def _collect(messages: list[tuple[tuple, str]]) -> list[str]:
    errors: list[str] = []
    for _, message in sorted(messages, key=lambda item: item[0]):
        if message not in errors:
            errors.append(message)
    return errors


def _envelope_message(plan: Mapping[str, Any], error: ValidationError) -> list[tuple[tuple, str]]:
    if error.validator == "required":
        return [
            ((0, TOP_LEVEL_REQUIRED.index(name), 0), f'Missing required field "{name}"')
            for name in _missing(error)
        ]

    field = error.path[0]
    if error.schema_path[0] == "additionalProperties":
        return [((1, list(plan).index(field), 0), f'Unknown top-level field "{field}"')]

    rank = (2, ENVELOPE_ORDER.index(field))
    if field == "schema_version":
        message = (
            f"schema_version must be one of: {', '.join(ACCEPTED_VERSIONS)}; "
            f"got: {_show(error.instance)}"
        )
    elif field == "status":
        message = f"status must be one of: {', '.join(VALID_STATUSES)}; got: {_show(error.instance)}"
    elif field == "summary":
        if error.validator == "maxLength":
            message = f"summary exceeds {MAX_SUMMARY_LENGTH} characters"
        else:
            message = "summary must be a non-empty string"
    elif field == "questions":
        if len(error.path) > 1:
            return [(rank + (error.path[1],), f"questions[{error.path[1]}] must be a non-empty string")]
        message = "questions must be an array"
    elif error.validator == "maxItems":
        message = f"actions exceeds maximum of {MAX_ACTIONS} items"
    else:
        message = "actions must be an array"
    return [(rank + (0,), message)]


def validate_schema(plan: Any) -> list[str]:
    """Validates the structure of a raw plan.

    Args:
        plan: The parsed plan, normally a mapping.

    Returns:
        A list of error messages; empty when the plan is structurally valid.
    """
    if not isinstance(plan, Mapping):
        return ["Plan must be a JSON object"]

    messages: list[tuple[tuple, str]] = []
    for error in _ENVELOPE_VALIDATOR.iter_errors(dict(plan)):
        messages.extend(_envelope_message(plan, error))
    errors = _collect(messages)

    actions = plan.get("actions")
    if not isinstance(actions, list):
        return errors

    for index, action in enumerate(actions):
        errors.extend(validate_action(action, index))

    return errors


def _label_message(name: str, spec: FieldSpec, value: Any) -> str:
    if spec.labels == "element":
        return f'"{name}" must be a valid ArchiMate element type; got: {_show(value)}'
    return f'"{name}" must be one of: {", ".join(labels.RELATIONSHIP_LABELS)}; got: {_show(value)}'


def _type_message(name: str, spec: FieldSpec) -> str:
    if spec.type == FieldType.NUMBER:
        return f'"{name}" must be a number'
    return f'"{name}" must be a string'


def _field_message(name: str, spec: FieldSpec, error: ValidationError, original: Any) -> str:
    if spec.labels:
        return _label_message(name, spec, original)
    if error.validator == "minLength":
        return f'"{name}" must be non-empty'
    if error.validator == "maxLength":
        return f'"{name}" exceeds {spec.max_length} characters'
    if error.validator == "minimum":
        return f'"{name}" must be at least {spec.minimum}'
    return _type_message(name, spec)


def _action_messages(
    action: Mapping[str, Any], op_spec: OperationSpec, error: ValidationError
) -> list[tuple[tuple, str]]:
    field_order = list(op_spec.fields)

    if error.validator == "required":
        return [
            (
                (1, field_order.index(name)),
                _label_message(name, op_spec.fields[name], None)
                if op_spec.fields[name].labels
                else _type_message(name, op_spec.fields[name]),
            )
            for name in _missing(error)
            if name != OP_FIELD
        ]

    name = error.path[0]
    if error.schema_path[0] == "additionalProperties":
        return [((0, list(action).index(name)), f'unknown field "{name}"')]

    field_spec = op_spec.fields[name]
    return [((1, field_order.index(name)), _field_message(name, field_spec, error, action[name]))]


def validate_action(action: Any, index: int) -> list[str]:
    """Validates one raw action against its operation contract.

    Label values are normalized ("BusinessActor" to "Business Actor") before
    the contract is checked; messages quote the value as it was sent.

    Args:
        action: The raw action object.
        index: Position of the action in the plan, used in messages.

    Returns:
        A list of error messages prefixed with "actions[<index>]: ".
    """
    prefix = f"actions[{index}]: "

    if not isinstance(action, Mapping):
        return [prefix + "must be an object"]

    op = action.get(OP_FIELD)
    if not isinstance(op, str):
        return [prefix + "missing or invalid 'op' field"]

    op_spec = get_op_def(op)
    if op_spec is None:
        return [prefix + f'unknown op "{op}"']

    candidate = dict(action)
    for name, field_spec in op_spec.fields.items():
        if field_spec.labels and isinstance(candidate.get(name), str):
            candidate[name] = labels.normalize_type_label(candidate[name])

    messages: list[tuple[tuple, str]] = []
    for error in _ACTION_VALIDATORS[op].iter_errors(candidate):
        messages.extend(_action_messages(action, op_spec, error))
    return [prefix + message for message in _collect(messages)]
