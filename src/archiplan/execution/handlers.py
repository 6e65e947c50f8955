"""Apply handlers, one per plan operation.

Each handler mutates the model for a single action and returns the details
recorded on its outcome. A handler that cannot carry out its action raises
`ActionFailure`.
"""

from typing import Any, Callable

from ..models.graph import Element, Entity, Folder, Relationship
from ..models.plan import (
    AddToView,
    CreateElement,
    CreateRelationship,
    CreateView,
    DeleteElement,
    DeleteRelationship,
    MoveToFolder,
    PlanAction,
    RemoveProperty,
    RenameElement,
    SetDocumentation,
    SetProperty,
)
from ..persistence.repository import FolderStore
from .context import ExecutionContext
from .errors import ActionFailure, FolderNotFound
from .layout import place

ApplyHandler = Callable[[PlanAction, ExecutionContext], dict[str, Any]]


def _require(entity_id: str, ctx: ExecutionContext, what: str = "Element") -> Entity:
    entity = ctx.resolve(entity_id)
    if entity is None:
        raise ActionFailure(f'{what} "{entity_id}" not found')
    return entity


def find_folder(store: FolderStore, folder_path: str) -> Folder:
    """Walks a slash-separated path from a matching top-level folder.

    Empty segments are ignored, so "Business/Actors/" and "/Business/Actors"
    name the same folder.

    Raises:
        FolderNotFound: If a segment has no matching folder.
    """
    segments = [s.strip() for s in folder_path.split("/") if s.strip()]
    if not segments:
        raise FolderNotFound(folder_path, folder_path)

    candidates = store.top_level_folders()
    folder = None
    for segment in segments:
        folder = next((f for f in candidates if f.name == segment), None)
        if folder is None:
            raise FolderNotFound(folder_path, segment)
        candidates = store.subfolders(folder)
    return folder


def apply_create_element(action: CreateElement, ctx: ExecutionContext) -> dict[str, Any]:
    element_type = ctx.oracle.element_label_to_type(action.type)
    if element_type is None:
        raise ActionFailure(f'Unknown element type "{action.type}"')
    element = ctx.store.create_element(element_type, action.name)
    if action.ref_id:
        ctx.element_refs[action.ref_id] = element
    return {
        "element_id": element.id,
        "element_type": element_type,
        "element_name": action.name,
    }


def apply_rename_element(action: RenameElement, ctx: ExecutionContext) -> dict[str, Any]:
    entity = _require(action.element_id, ctx)
    old_name = entity.name
    ctx.store.rename(entity, action.new_name)
    return {"old_name": old_name, "new_name": action.new_name}


def apply_set_property(action: SetProperty, ctx: ExecutionContext) -> dict[str, Any]:
    entity = _require(action.element_id, ctx)
    old_value = ctx.store.get_property(entity, action.key)
    ctx.store.set_property(entity, action.key, action.value)
    return {"key": action.key, "old_value": old_value, "new_value": action.value}


def apply_create_relationship(
    action: CreateRelationship, ctx: ExecutionContext
) -> dict[str, Any]:
    source = _require(action.source_id, ctx, "Source element")
    target = _require(action.target_id, ctx, "Target element")
    relationship_type = ctx.oracle.relationship_label_to_type(action.relationship_type)
    if relationship_type is None:
        raise ActionFailure(f'Unknown relationship type "{action.relationship_type}"')
    relationship = ctx.store.create_relationship(
        relationship_type, action.name or "", source, target
    )
    return {
        "relationship_id": relationship.id,
        "relationship_type": relationship_type,
        "source_id": source.id,
        "target_id": target.id,
    }


def apply_set_documentation(
    action: SetDocumentation, ctx: ExecutionContext
) -> dict[str, Any]:
    entity = _require(action.element_id, ctx)
    old_documentation = entity.documentation
    ctx.store.set_documentation(entity, action.documentation)
    return {"old_documentation": old_documentation}


def apply_delete_element(action: DeleteElement, ctx: ExecutionContext) -> dict[str, Any]:
    entity = _require(action.element_id, ctx)
    if isinstance(entity, Relationship):
        raise ActionFailure(
            f'"{action.element_id}" is a relationship, use delete_relationship instead'
        )

    attached = ctx.store.relationships_of(entity)
    for relationship in attached:
        ctx.store.delete(relationship)
    ctx.store.delete(entity)
    ctx.forget(entity.id)
    return {
        "deleted_id": entity.id,
        "deleted_name": entity.name,
        "cascaded_relationships": len(attached),
    }


def apply_delete_relationship(
    action: DeleteRelationship, ctx: ExecutionContext
) -> dict[str, Any]:
    relationship = ctx.store.get(action.relationship_id)
    if relationship is None:
        raise ActionFailure(f'Relationship "{action.relationship_id}" not found')
    if not isinstance(relationship, Relationship):
        raise ActionFailure(
            f'"{action.relationship_id}" is not a relationship, use delete_element instead'
        )
    ctx.store.delete(relationship)
    return {"deleted_id": relationship.id}


def apply_remove_property(action: RemoveProperty, ctx: ExecutionContext) -> dict[str, Any]:
    entity = _require(action.element_id, ctx)
    old_value = ctx.store.remove_property(entity, action.key)
    return {"key": action.key, "old_value": old_value, "removed": old_value is not None}


def apply_create_view(action: CreateView, ctx: ExecutionContext) -> dict[str, Any]:
    view = ctx.store.create_view(action.name)
    if action.ref_id:
        ctx.view_refs[action.ref_id] = view
    return {"view_id": view.id, "view_name": view.name}


def apply_add_to_view(action: AddToView, ctx: ExecutionContext) -> dict[str, Any]:
    view = ctx.resolve_view(action.view_id)
    if view is None:
        raise ActionFailure(f'View "{action.view_id}" not found')
    element = _require(action.element_id, ctx)
    if not isinstance(element, Element):
        raise ActionFailure(
            f'"{action.element_id}" is not an element and cannot be placed on a view'
        )

    placement = place(action, view.id, ctx)
    obj = ctx.store.add_element(
        view, element, placement.x, placement.y, placement.width, placement.height
    )
    ctx.touch_view(view.id)
    return {
        "view_id": view.id,
        "object_id": obj.id,
        "x": placement.x,
        "y": placement.y,
        "width": placement.width,
        "height": placement.height,
        "auto_placed": placement.auto,
    }


def apply_move_to_folder(action: MoveToFolder, ctx: ExecutionContext) -> dict[str, Any]:
    entity = _require(action.element_id, ctx)
    folder = find_folder(ctx.store, action.folder_path)
    ctx.store.add_to_folder(folder, entity)
    return {"folder_id": folder.id, "folder_path": action.folder_path}

