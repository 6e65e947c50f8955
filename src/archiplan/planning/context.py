"""Planning context handed to a plan producer.

The context is a compact JSON view of the model: the elements in scope, the
relationships between them, the views, the folder paths, and the operations
and relationship labels a plan may use.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from ..catalog.compatibility import CompatibilityOracle
from ..catalog.labels import RELATIONSHIP_LABELS, element_label, relationship_label
from ..catalog.operations import SCHEMA_VERSION, get_valid_ops
from ..models.graph import Element, Folder
from ..persistence.repository import ModelStore


class ContextScope(BaseModel):
    mode: Literal["selected", "all"] = Field(
        ..., description="Whether the elements were selected or are the whole model."
    )
    element_count: int = Field(..., ge=0)
    relationship_count: int = Field(..., ge=0)
    view_count: int = Field(..., ge=0)


class ContextElement(BaseModel):
    id: str = Field(..., description="Element ID usable in plan actions.")
    name: str = Field(..., description="Display name.")
    type: str = Field(..., description="Element type label, e.g. 'Business Actor'.")
    documentation: Optional[str] = Field(default=None)
    properties: Optional[dict[str, str]] = Field(default=None)


class ContextRelationship(BaseModel):
    id: str = Field(..., description="Relationship ID usable by delete_relationship.")
    type: str = Field(..., description="Relationship label, e.g. 'Serving'.")
    source_id: str
    target_id: str
    name: str = Field(default="")


class ContextView(BaseModel):
    id: str
    name: str


class PlanningContext(BaseModel):
    """The model context a plan producer plans against.

    Attributes:
        schema_version: Plan schema version the producer must emit.
        scope: Scope mode and counts.
        allowed_ops: Operations the producer may use.
        allowed_relationship_types: Relationship labels the producer may use.
        elements: Elements in scope.
        relationships: Relationships whose endpoints are both in scope.
        views: Every view of the model.
        folders: Slash-joined folder paths, parents before children.
    """

    schema_version: str = Field(default=SCHEMA_VERSION)
    scope: ContextScope
    allowed_ops: list[str] = Field(default_factory=list)
    allowed_relationship_types: list[str] = Field(default_factory=list)
    elements: list[ContextElement] = Field(default_factory=list)
    relationships: list[ContextRelationship] = Field(default_factory=list)
    views: list[ContextView] = Field(default_factory=list)
    folders: list[str] = Field(default_factory=list)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


def format_element_type(element_type: str) -> str:
    """Returns the label for an element type, title-casing unknown types."""
    if not element_type:
        return "Unknown"
    return element_label(element_type) or " ".join(
        word.capitalize() for word in element_type.split("-")
    )


def _folder_paths(store: ModelStore) -> list[str]:
    paths: list[str] = []

    def walk(folder: Folder, prefix: str):
        path = f"{prefix}/{folder.name}" if prefix else folder.name
        paths.append(path)
        for child in store.subfolders(folder):
            walk(child, path)

    for top in store.top_level_folders():
        walk(top, "")
    return paths


def build_planning_context(
    store: ModelStore,
    element_ids: Optional[list[str]] = None,
    include_relationships: bool = True,
    include_documentation: bool = False,
    include_properties: bool = False,
    max_elements: int = 200,
    allowed_ops: Optional[list[str]] = None,
) -> PlanningContext:
    """Builds the planning context for a model.

    Args:
        store: The model store.
        element_ids: Restricts the context to these elements ("selected"
            mode). Unknown ids and non-elements are ignored. Defaults to
            every element ("all" mode).
        include_relationships: Whether relationships between in-scope
            elements are listed.
        include_documentation: Whether element documentation is included.
        include_properties: Whether element properties are included.
        max_elements: Maximum number of elements listed.
        allowed_ops: Operations to advertise. Defaults to every operation.

    Returns:
        The planning context.
    """
    if element_ids is None:
        source: list[Element] = store.elements()
    else:
        source = [e for e in (store.get(i) for i in element_ids) if isinstance(e, Element)]

    elements: list[ContextElement] = []
    for element in source[:max_elements]:
        entry = ContextElement(
            id=element.id, name=element.name, type=format_element_type(element.type)
        )
        if include_documentation and element.documentation:
            entry.documentation = element.documentation
        if include_properties and element.properties:
            entry.properties = dict(element.properties)
        elements.append(entry)

    in_scope = {e.id for e in elements}
    relationships: list[ContextRelationship] = []
    if include_relationships:
        for r in store.relationships():
            if r.source_id in in_scope and r.target_id in in_scope:
                relationships.append(
                    ContextRelationship(
                        id=r.id,
                        type=relationship_label(r.type) or r.type,
                        source_id=r.source_id,
                        target_id=r.target_id,
                        name=r.name,
                    )
                )

    views = [ContextView(id=v.id, name=v.name) for v in store.views()]

    return PlanningContext(
        scope=ContextScope(
            mode="all" if element_ids is None else "selected",
            element_count=len(elements),
            relationship_count=len(relationships),
            view_count=len(views),
        ),
        allowed_ops=list(allowed_ops) if allowed_ops is not None else get_valid_ops(),
        allowed_relationship_types=list(RELATIONSHIP_LABELS),
        elements=elements,
        relationships=relationships,
        views=views,
        folders=_folder_paths(store),
    )


def build_relationship_guide(
    context: PlanningContext, oracle: CompatibilityOracle
) -> str:
    """Renders the allowed relationships between the element types in a context.

    Returns:
        A markdown reference, or an empty string if the context has no
        elements of a type the oracle knows.
    """
    type_labels = sorted({e.type for e in context.elements})
    known = [
        (label, oracle.element_label_to_type(label))
        for label in type_labels
        if oracle.is_known_type(oracle.element_label_to_type(label))
    ]
    if not known:
        return ""

    lines = [
        "## Allowed Relationships Reference",
        "Only create relationships listed below for each source -> target type combination.",
        "If a source -> target pair is not listed, no relationship can be created between them.",
        "",
    ]
    for source_label, source_type in known:
        entries = []
        for target_label, target_type in known:
            allowed = oracle.get_allowed(source_type, target_type)
            if not allowed:
                continue
            names = [oracle.relationship_type_to_label(t) or t for t in allowed]
            entries.append(f"  -> {target_label}: {', '.join(names)}")
        if entries:
            lines.append(f"{source_label}:")
            lines.extend(entries)
    return "\n".join(lines)
