"""Data models for the live architecture model.

These records are owned by a `ModelStore`; the engine only references them.
Stores hand out the records themselves, so a handle obtained from one action
stays valid for later actions in the same execution.
"""

from typing import Literal, Optional, Union

from pydantic import Field

from ..catalog.labels import VIEW_TYPE
from .base import EntityId, ModelBase


class Element(ModelBase):
    """An ArchiMate element such as a Business Actor or Application Component.

    Attributes:
        id: Model-unique identifier.
        type: Kebab-case element type (e.g. 'application-component').
        name: Display name.
        documentation: Free-form documentation text.
        properties: Key/value properties attached to the element.
    """

    kind: Literal["element"] = "element"
    id: EntityId = Field(..., description="Model-unique identifier.")
    type: str = Field(..., description="Kebab-case element type.")
    name: str = Field(default="", description="Display name.")
    documentation: str = Field(default="", description="Documentation text.")
    properties: dict[str, str] = Field(
        default_factory=dict, description="Key/value properties."
    )


class Relationship(ModelBase):
    """A typed, directed relationship between two model concepts."""

    kind: Literal["relationship"] = "relationship"
    id: EntityId = Field(..., description="Model-unique identifier.")
    type: str = Field(..., description="Relationship type, e.g. 'serving-relationship'.")
    name: str = Field(default="", description="Optional display name.")
    source_id: EntityId = Field(..., description="ID of the source concept.")
    target_id: EntityId = Field(..., description="ID of the target concept.")
    documentation: str = Field(default="", description="Documentation text.")
    properties: dict[str, str] = Field(
        default_factory=dict, description="Key/value properties."
    )


class DiagramObject(ModelBase):
    """A visual placement of an element on a view."""

    id: EntityId = Field(..., description="Identifier of the visual object.")
    element_id: EntityId = Field(..., description="ID of the placed element.")
    x: float = Field(..., description="Left coordinate.")
    y: float = Field(..., description="Top coordinate.")
    width: float = Field(..., description="Width in pixels.")
    height: float = Field(..., description="Height in pixels.")


class DiagramConnection(ModelBase):
    """A visual connection representing a relationship on a view."""

    id: EntityId = Field(..., description="Identifier of the visual connection.")
    relationship_id: EntityId = Field(..., description="ID of the drawn relationship.")
    source_object_id: EntityId = Field(..., description="Visual object at the source end.")
    target_object_id: EntityId = Field(..., description="Visual object at the target end.")


class View(ModelBase):
    """An ArchiMate diagram with its placed objects and connections."""

    kind: Literal["view"] = "view"
    id: EntityId = Field(..., description="Model-unique identifier.")
    type: str = Field(default=VIEW_TYPE, description="Always the diagram model type.")
    name: str = Field(default="", description="Display name.")
    documentation: str = Field(default="", description="Documentation text.")
    properties: dict[str, str] = Field(
        default_factory=dict, description="Key/value properties."
    )
    objects: list[DiagramObject] = Field(
        default_factory=list, description="Placed visual objects."
    )
    connections: list[DiagramConnection] = Field(
        default_factory=list, description="Visual connections."
    )


class Folder(ModelBase):
    """A model folder holding concepts and sub-folders.

    Attributes:
        id: Identifier of the folder.
        name: Folder name, one segment of a slash-separated path.
        parent_id: Parent folder ID, or None for a top-level folder.
        member_ids: IDs of the concepts directly inside the folder.
    """

    id: EntityId = Field(..., description="Identifier of the folder.")
    name: str = Field(..., description="Folder name.")
    parent_id: Optional[EntityId] = Field(
        default=None, description="Parent folder, None for top-level folders."
    )
    member_ids: list[EntityId] = Field(
        default_factory=list, description="Concepts directly inside the folder."
    )


Entity = Union[Element, Relationship, View]
