"""Data models for change plans.

A change plan arrives on the wire as a flat object per action, with every
field of every operation present and the irrelevant ones set to null. Inside
the engine each action is a proper tagged variant holding only its own fields;
`decode_plan` and `decode_action` are the boundary between the two shapes.
"""

from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import Field, TypeAdapter, ValidationError

from ..catalog.operations import (
    MAX_ACTIONS,
    MAX_DOC_LENGTH,
    MAX_FOLDER_PATH_LENGTH,
    MAX_KEY_LENGTH,
    MAX_NAME_LENGTH,
    MAX_REF_ID_LENGTH,
    MAX_SUMMARY_LENGTH,
    MAX_VALUE_LENGTH,
    MIN_VISUAL_SIZE,
    SCHEMA_VERSION,
    flatten_action,
)
from .base import EntityId, ModelBase, RefId
from .enums import PlanStatus

Number = Union[int, float]


class PlanDecodeError(ValueError):
    """Raised when raw plan data cannot be turned into typed models."""


class CreateElement(ModelBase):
    """Creates a new element, optionally registering a ref_id for it."""

    op: Literal["create_element"] = "create_element"
    type: str = Field(..., description="ArchiMate element type label.")
    name: str = Field(
        ..., min_length=1, max_length=MAX_NAME_LENGTH, description="Element name."
    )
    ref_id: Optional[RefId] = Field(
        default=None,
        min_length=1,
        max_length=MAX_REF_ID_LENGTH,
        description="Reference ID usable by later actions.",
    )


class RenameElement(ModelBase):
    op: Literal["rename_element"] = "rename_element"
    element_id: EntityId = Field(..., min_length=1, description="Target ID or ref_id.")
    new_name: str = Field(
        ..., min_length=1, max_length=MAX_NAME_LENGTH, description="New name."
    )


class SetProperty(ModelBase):
    op: Literal["set_property"] = "set_property"
    element_id: EntityId = Field(..., min_length=1, description="Target ID or ref_id.")
    key: str = Field(
        ..., min_length=1, max_length=MAX_KEY_LENGTH, description="Property key."
    )
    value: str = Field(
        ..., max_length=MAX_VALUE_LENGTH, description="Property value."
    )


class CreateRelationship(ModelBase):
    """Creates a relationship between two existing or plan-created elements."""

    op: Literal["create_relationship"] = "create_relationship"
    source_id: EntityId = Field(..., min_length=1, description="Source ID or ref_id.")
    target_id: EntityId = Field(..., min_length=1, description="Target ID or ref_id.")
    relationship_type: str = Field(..., description="Relationship type label.")
    name: Optional[str] = Field(
        default=None, max_length=MAX_NAME_LENGTH, description="Relationship name."
    )


class SetDocumentation(ModelBase):
    op: Literal["set_documentation"] = "set_documentation"
    element_id: EntityId = Field(..., min_length=1, description="Target ID or ref_id.")
    documentation: str = Field(
        ..., max_length=MAX_DOC_LENGTH, description="Documentation text."
    )


class DeleteElement(ModelBase):
    """Deletes an element together with every attached relationship."""

    op: Literal["delete_element"] = "delete_element"
    element_id: EntityId = Field(..., min_length=1, description="Target ID or ref_id.")


class DeleteRelationship(ModelBase):
    op: Literal["delete_relationship"] = "delete_relationship"
    relationship_id: EntityId = Field(
        ..., min_length=1, description="ID of an existing relationship."
    )


class RemoveProperty(ModelBase):
    op: Literal["remove_property"] = "remove_property"
    element_id: EntityId = Field(..., min_length=1, description="Target ID or ref_id.")
    key: str = Field(
        ..., min_length=1, max_length=MAX_KEY_LENGTH, description="Property key."
    )


class CreateView(ModelBase):
    op: Literal["create_view"] = "create_view"
    name: str = Field(
        ..., min_length=1, max_length=MAX_NAME_LENGTH, description="View name."
    )
    ref_id: Optional[RefId] = Field(
        default=None,
        min_length=1,
        max_length=MAX_REF_ID_LENGTH,
        description="Reference ID usable by later add_to_view actions.",
    )


class AddToView(ModelBase):
    """Places an element on a view at explicit or auto-grid coordinates."""

    op: Literal["add_to_view"] = "add_to_view"
    view_id: EntityId = Field(..., min_length=1, description="View ID or view ref_id.")
    element_id: EntityId = Field(..., min_length=1, description="Element ID or ref_id.")
    x: Optional[Number] = Field(default=None, description="X coordinate.")
    y: Optional[Number] = Field(default=None, description="Y coordinate.")
    width: Optional[Number] = Field(
        default=None, ge=MIN_VISUAL_SIZE, description="Width of the visual object."
    )
    height: Optional[Number] = Field(
        default=None, ge=MIN_VISUAL_SIZE, description="Height of the visual object."
    )


class MoveToFolder(ModelBase):
    op: Literal["move_to_folder"] = "move_to_folder"
    element_id: EntityId = Field(..., min_length=1, description="Target ID or ref_id.")
    folder_path: str = Field(
        ...,
        min_length=1,
        max_length=MAX_FOLDER_PATH_LENGTH,
        description="Slash-separated folder path, e.g. 'Business/Actors'.",
    )


PlanAction = Annotated[
    Union[
        CreateElement,
        RenameElement,
        SetProperty,
        CreateRelationship,
        SetDocumentation,
        DeleteElement,
        DeleteRelationship,
        RemoveProperty,
        CreateView,
        AddToView,
        MoveToFolder,
    ],
    Field(discriminator="op"),
]

_ACTION_ADAPTER = TypeAdapter(PlanAction)


class ChangePlan(ModelBase):
    """A batch of model mutations proposed by a plan producer.

    Attributes:
        schema_version: Wire schema version the plan was produced against.
        status: Whether the plan is ready, needs clarification, or was refused.
        summary: Human-readable summary of the plan.
        questions: Pending questions when clarification is needed.
        actions: Ordered actions; order is the only dependency mechanism.
    """

    schema_version: str = Field(
        default=SCHEMA_VERSION, description="Wire schema version."
    )
    status: PlanStatus = Field(..., description="Producer status for the plan.")
    summary: str = Field(
        ...,
        min_length=1,
        max_length=MAX_SUMMARY_LENGTH,
        description="Human-readable summary of the plan.",
    )
    questions: list[str] = Field(
        default_factory=list,
        description="Clarifying questions for the user.",
    )
    actions: list[PlanAction] = Field(
        default_factory=list,
        max_length=MAX_ACTIONS,
        description="Ordered list of actions.",
    )

    def to_wire(self) -> dict[str, Any]:
        """Serializes the plan to the flat structured-output shape."""
        return {
            "schema_version": self.schema_version,
            "status": self.status.value,
            "summary": self.summary,
            "questions": list(self.questions) or None,
            "actions": [flatten_action(action.model_dump()) for action in self.actions],
        }


def _strip_nulls(data: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def decode_action(raw: Any) -> PlanAction:
    """Decodes one flat wire action into its typed variant.

    Raises:
        PlanDecodeError: If the action is not a mapping or violates its contract.
    """
    if not isinstance(raw, Mapping):
        raise PlanDecodeError("action must be an object")
    try:
        return _ACTION_ADAPTER.validate_python(_strip_nulls(raw))
    except ValidationError as e:
        raise PlanDecodeError(str(e)) from e


def decode_plan(raw: Any) -> ChangePlan:
    """Decodes a raw (normalized) wire plan into a typed ChangePlan.

    Null-valued fields are dropped at every level before decoding, so the
    flattened shape never reaches the internal model.

    Raises:
        PlanDecodeError: If the plan is not a mapping or cannot be decoded.
    """
    if isinstance(raw, ChangePlan):
        return raw
    if not isinstance(raw, Mapping):
        raise PlanDecodeError("plan must be an object")
    data = _strip_nulls(raw)
    actions = data.get("actions")
    if isinstance(actions, list):
        data["actions"] = [
            _strip_nulls(a) if isinstance(a, Mapping) else a for a in actions
        ]
    try:
        return ChangePlan.model_validate(data)
    except ValidationError as e:
        raise PlanDecodeError(str(e)) from e
