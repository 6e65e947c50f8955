"""Operation catalog for change plans.

This module is the single source of truth for the supported plan operations,
their field contracts, the wire limits, and the flattened output schema handed
to plan producers. The validator, the executor and the planning context all
read from here instead of hard-coding operation lists.
"""

from typing import Any, Literal, Mapping, MutableMapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.enums import FieldType, Operation, PlanStatus
from .labels import ELEMENT_TYPE_LABELS, RELATIONSHIP_LABELS

SCHEMA_VERSION = "2.0"
ACCEPTED_VERSIONS = ["1.0", "2.0"]

MAX_ACTIONS = 100
MAX_SUMMARY_LENGTH = 2000
MAX_NAME_LENGTH = 1000
MAX_KEY_LENGTH = 200
MAX_VALUE_LENGTH = 5000
MAX_REF_ID_LENGTH = 100
MAX_DOC_LENGTH = 10000
MAX_FOLDER_PATH_LENGTH = 500
MIN_VISUAL_SIZE = 10

OP_FIELD = "op"

TOP_LEVEL_REQUIRED = ["schema_version", "status", "summary", "actions"]
TOP_LEVEL_ALLOWED = ["schema_version", "status", "summary", "actions", "questions"]

LabelSet = Literal["element", "relationship"]


class FieldSpec(BaseModel):
    """
    Contract for a single field of a plan action.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: FieldType = Field(
        default=FieldType.STRING,
        description="Wire type of the field.",
    )
    nullable: bool = Field(
        default=False,
        description="Whether null is an acceptable value when the field is optional.",
    )
    labels: Optional[LabelSet] = Field(
        default=None,
        description="Label vocabulary the value must resolve against, if any.",
    )
    min_length: Optional[int] = Field(
        default=None,
        description="Minimum string length.",
    )
    max_length: Optional[int] = Field(
        default=None,
        description="Maximum string length.",
    )
    minimum: Optional[int] = Field(
        default=None,
        description="Minimum numeric value.",
    )
    description: str = Field(
        default="",
        description="Human-readable description forwarded to producers.",
    )


class OperationSpec(BaseModel):
    """
    Field contract of one operation kind.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: Operation = Field(..., description="Operation name.")
    required: tuple[str, ...] = Field(
        ..., description="Fields that must be present and non-null."
    )
    optional: tuple[str, ...] = Field(
        default=(), description="Fields that may be omitted or null."
    )
    fields: dict[str, FieldSpec] = Field(
        ..., description="Constraints per declared field, excluding 'op'."
    )

    @property
    def allowed_fields(self) -> list[str]:
        return [OP_FIELD, *self.fields.keys()]


def _id_field(description: str) -> FieldSpec:
    return FieldSpec(min_length=1, description=description)


def _ref_id_field(description: str) -> FieldSpec:
    return FieldSpec(
        nullable=True,
        min_length=1,
        max_length=MAX_REF_ID_LENGTH,
        description=description,
    )


def _coordinate_field(description: str, minimum: Optional[int] = None) -> FieldSpec:
    return FieldSpec(
        type=FieldType.NUMBER,
        nullable=True,
        minimum=minimum,
        description=description,
    )


OP_DEFS: dict[str, OperationSpec] = {
    spec.name.value: spec
    for spec in [
        OperationSpec(
            name=Operation.CREATE_ELEMENT,
            required=("type", "name"),
            optional=("ref_id",),
            fields={
                "type": FieldSpec(labels="element", description="ArchiMate element type"),
                "name": FieldSpec(min_length=1, max_length=MAX_NAME_LENGTH, description="Element name"),
                "ref_id": _ref_id_field("Reference ID for use by later actions"),
            },
        ),
        OperationSpec(
            name=Operation.RENAME_ELEMENT,
            required=("element_id", "new_name"),
            fields={
                "element_id": _id_field("ID of element/relationship to rename, or a ref_id"),
                "new_name": FieldSpec(min_length=1, max_length=MAX_NAME_LENGTH, description="New name"),
            },
        ),
        OperationSpec(
            name=Operation.SET_PROPERTY,
            required=("element_id", "key", "value"),
            fields={
                "element_id": _id_field("ID of element/relationship, or a ref_id"),
                "key": FieldSpec(min_length=1, max_length=MAX_KEY_LENGTH, description="Property key"),
                "value": FieldSpec(max_length=MAX_VALUE_LENGTH, description="Property value"),
            },
        ),
        OperationSpec(
            name=Operation.CREATE_RELATIONSHIP,
            required=("source_id", "target_id", "relationship_type"),
            optional=("name",),
            fields={
                "source_id": _id_field("Source element ID or ref_id"),
                "target_id": _id_field("Target element ID or ref_id"),
                "relationship_type": FieldSpec(labels="relationship", description="Relationship type label"),
                "name": FieldSpec(nullable=True, max_length=MAX_NAME_LENGTH, description="Optional relationship name"),
            },
        ),
        OperationSpec(
            name=Operation.SET_DOCUMENTATION,
            required=("element_id", "documentation"),
            fields={
                "element_id": _id_field("ID of element/relationship, or a ref_id"),
                "documentation": FieldSpec(max_length=MAX_DOC_LENGTH, description="Documentation text"),
            },
        ),
        OperationSpec(
            name=Operation.DELETE_ELEMENT,
            required=("element_id",),
            fields={
                "element_id": _id_field("ID of element to delete (cascades relationships)"),
            },
        ),
        OperationSpec(
            name=Operation.DELETE_RELATIONSHIP,
            required=("relationship_id",),
            fields={
                "relationship_id": _id_field("ID of relationship to delete"),
            },
        ),
        OperationSpec(
            name=Operation.REMOVE_PROPERTY,
            required=("element_id", "key"),
            fields={
                "element_id": _id_field("ID of element/relationship, or a ref_id"),
                "key": FieldSpec(min_length=1, max_length=MAX_KEY_LENGTH, description="Property key to remove"),
            },
        ),
        OperationSpec(
            name=Operation.CREATE_VIEW,
            required=("name",),
            optional=("ref_id",),
            fields={
                "name": FieldSpec(min_length=1, max_length=MAX_NAME_LENGTH, description="View name"),
                "ref_id": _ref_id_field("Reference ID for use by later add_to_view actions"),
            },
        ),
        OperationSpec(
            name=Operation.ADD_TO_VIEW,
            required=("view_id", "element_id"),
            optional=("x", "y", "width", "height"),
            fields={
                "view_id": _id_field("ID of view or ref_id from create_view"),
                "element_id": _id_field("ID of element or ref_id to place on view"),
                "x": _coordinate_field("X coordinate (auto-grid if omitted)"),
                "y": _coordinate_field("Y coordinate (auto-grid if omitted)"),
                "width": _coordinate_field("Width (default 120)", MIN_VISUAL_SIZE),
                "height": _coordinate_field("Height (default 55)", MIN_VISUAL_SIZE),
            },
        ),
        OperationSpec(
            name=Operation.MOVE_TO_FOLDER,
            required=("element_id", "folder_path"),
            fields={
                "element_id": _id_field("ID of element/relationship, or a ref_id"),
                "folder_path": FieldSpec(
                    min_length=1,
                    max_length=MAX_FOLDER_PATH_LENGTH,
                    description="Folder path separated by / (e.g. 'Business/Actors')",
                ),
            },
        ),
    ]
}


def get_valid_ops() -> list[str]:
    """Returns every supported operation name in catalog order."""
    return list(OP_DEFS.keys())


def get_op_def(op_name: object) -> Optional[OperationSpec]:
    """Returns the contract of an operation, or None if it is unknown."""
    if not isinstance(op_name, str):
        return None
    return OP_DEFS.get(op_name)


def _all_fields() -> dict[str, FieldSpec]:
    merged: dict[str, FieldSpec] = {}
    for spec in OP_DEFS.values():
        for name, field_spec in spec.fields.items():
            merged.setdefault(name, field_spec)
    return merged


def flat_field_names() -> list[str]:
    """Returns the union of all action fields, 'op' first."""
    return [OP_FIELD, *_all_fields().keys()]


def _label_enum(labels: LabelSet, nullable: bool = True) -> list[Optional[str]]:
    values: list[Optional[str]] = list(
        ELEMENT_TYPE_LABELS if labels == "element" else RELATIONSHIP_LABELS
    )
    if nullable:
        values.append(None)
    return values


def build_output_schema() -> dict[str, Any]:
    """Builds the flat nullable JSON Schema used for structured plan output.

    Structured output requires every action object to carry every field of
    every operation, with non-applicable fields set to null. All fields are
    therefore listed as required and every field except 'op' is nullable.

    Returns:
        A JSON Schema dictionary describing a whole change plan.
    """
    properties: dict[str, Any] = {
        OP_FIELD: {"type": "string", "enum": get_valid_ops()},
    }
    for name, field_spec in _all_fields().items():
        prop: dict[str, Any] = {"type": [field_spec.type.value, "null"]}
        if field_spec.labels:
            prop["enum"] = _label_enum(field_spec.labels)
        if field_spec.description:
            prop["description"] = field_spec.description
        properties[name] = prop

    return {
        "type": "object",
        "required": ["schema_version", "status", "summary", "actions", "questions"],
        "additionalProperties": False,
        "properties": {
            "schema_version": {"type": "string"},
            "status": {
                "type": "string",
                "enum": [status.value for status in PlanStatus],
            },
            "summary": {"type": "string"},
            "questions": {
                "type": ["array", "null"],
                "items": {"type": "string"},
            },
            "actions": {
                "type": "array",
                "items": {
                    "type": "object",
                    "required": list(properties.keys()),
                    "additionalProperties": False,
                    "properties": properties,
                },
            },
        },
    }


def _field_schema(field_spec: FieldSpec) -> dict[str, Any]:
    if field_spec.labels:
        return {"enum": _label_enum(field_spec.labels, field_spec.nullable)}

    schema: dict[str, Any] = {
        "type": [field_spec.type.value, "null"] if field_spec.nullable else field_spec.type.value
    }
    if field_spec.min_length:
        schema["minLength"] = field_spec.min_length
    if field_spec.max_length is not None:
        schema["maxLength"] = field_spec.max_length
    if field_spec.minimum is not None:
        schema["minimum"] = field_spec.minimum
    return schema


def build_action_schema(spec: OperationSpec) -> dict[str, Any]:
    """Builds the strict JSON Schema of one operation.

    Required fields must be present and non-null, optional fields may be null,
    and fields outside the contract are accepted only when null. Label fields
    enumerate the canonical spaced labels, so values should pass through
    `labels.normalize_type_label` before validation.
    """
    properties: dict[str, Any] = {OP_FIELD: {"const": spec.name.value}}
    for name, field_spec in spec.fields.items():
        properties[name] = _field_schema(field_spec)
    return {
        "type": "object",
        "required": [OP_FIELD, *spec.required],
        "properties": properties,
        "additionalProperties": {"type": "null"},
    }


def build_envelope_schema() -> dict[str, Any]:
    """Builds the JSON Schema of a plan's top-level fields.

    Actions are only checked to be a bounded array here; each action is
    validated against its own operation schema.
    """
    return {
        "type": "object",
        "required": list(TOP_LEVEL_REQUIRED),
        "properties": {
            "schema_version": {"enum": list(ACCEPTED_VERSIONS)},
            "status": {"enum": [status.value for status in PlanStatus]},
            "summary": {
                "type": "string",
                "minLength": 1,
                "maxLength": MAX_SUMMARY_LENGTH,
            },
            "questions": {
                "type": ["array", "null"],
                "items": {"type": "string", "minLength": 1},
            },
            "actions": {"type": "array", "maxItems": MAX_ACTIONS},
        },
        "additionalProperties": {"type": "null"},
    }


def normalize_action(action: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Nulls every non-null field that does not belong to the action's op.

    Actions with a missing or unknown op are left untouched so the validator
    can report them.
    """
    spec = get_op_def(action.get(OP_FIELD))
    if spec is None:
        return action
    allowed = spec.allowed_fields
    for key in list(action.keys()):
        if key not in allowed and action[key] is not None:
            action[key] = None
    return action


def normalize_actions(plan: Any) -> Any:
    """Normalizes plan actions produced in the flat structured output format.

    Producers sometimes fill fields that do not belong to an action's op
    (e.g. "type" on an add_to_view). Those stray values are set to null in
    place so the validator sees only the fields that matter for each op.

    Args:
        plan: The raw plan mapping. Anything else is returned unchanged.

    Returns:
        The same plan object.
    """
    if not isinstance(plan, Mapping) or not isinstance(plan.get("actions"), list):
        return plan
    for action in plan["actions"]:
        if isinstance(action, MutableMapping):
            normalize_action(action)
    return plan


def flatten_action(action: Mapping[str, Any]) -> dict[str, Any]:
    """Expands an action to the flat wire shape, filling absent fields with null."""
    return {name: action.get(name) for name in flat_field_names()}
