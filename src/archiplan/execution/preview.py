"""One-line descriptions of plan actions for preview mode.

Describers never mutate the model. Elements and views declared by earlier
actions are registered as placeholder records so later actions can name them.
"""

from typing import Callable

from ..models.graph import Element, Relationship, View
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
from .context import ExecutionContext
from .layout import place

Describer = Callable[[PlanAction, ExecutionContext], str]


def _display_name(entity_id: str, ctx: ExecutionContext) -> str:
    entity = ctx.resolve(entity_id)
    if entity is None:
        return f"(ref: {entity_id})"
    return entity.name or entity_id


def _ref_note(ref_id) -> str:
    return f" (ref: {ref_id})" if ref_id else ""


def describe_create_element(action: CreateElement, ctx: ExecutionContext) -> str:
    if action.ref_id:
        element_type = ctx.oracle.element_label_to_type(action.type) or action.type
        ctx.element_refs[action.ref_id] = Element(
            id=action.ref_id, type=element_type, name=action.name
        )
    return f'Create {action.type} "{action.name}"{_ref_note(action.ref_id)}'


def describe_rename_element(action: RenameElement, ctx: ExecutionContext) -> str:
    return f'Rename "{_display_name(action.element_id, ctx)}" → "{action.new_name}"'


def describe_set_property(action: SetProperty, ctx: ExecutionContext) -> str:
    return (
        f'Set property "{action.key}" = "{action.value}" on '
        f'"{_display_name(action.element_id, ctx)}"'
    )


def describe_create_relationship(
    action: CreateRelationship, ctx: ExecutionContext
) -> str:
    name = f' "{action.name}"' if action.name else ""
    return (
        f"Create {action.relationship_type}{name}: "
        f'"{_display_name(action.source_id, ctx)}" → '
        f'"{_display_name(action.target_id, ctx)}"'
    )


def describe_set_documentation(action: SetDocumentation, ctx: ExecutionContext) -> str:
    return f'Set documentation on "{_display_name(action.element_id, ctx)}"'


def describe_delete_element(action: DeleteElement, ctx: ExecutionContext) -> str:
    entity = ctx.resolve(action.element_id)
    description = f'Delete "{_display_name(action.element_id, ctx)}"'
    if entity is not None and ctx.store.get(entity.id) is entity:
        cascaded = len(ctx.store.relationships_of(entity))
        if cascaded:
            description += f" and {cascaded} attached relationship(s)"
    return description


def describe_delete_relationship(
    action: DeleteRelationship, ctx: ExecutionContext
) -> str:
    relationship = ctx.store.get(action.relationship_id)
    if not isinstance(relationship, Relationship):
        return f'Delete relationship "{action.relationship_id}"'
    label = (
        ctx.oracle.relationship_type_to_label(relationship.type) or relationship.type
    )
    return (
        f"Delete {label} relationship: "
        f'"{_display_name(relationship.source_id, ctx)}" → '
        f'"{_display_name(relationship.target_id, ctx)}"'
    )


def describe_remove_property(action: RemoveProperty, ctx: ExecutionContext) -> str:
    return (
        f'Remove property "{action.key}" from '
        f'"{_display_name(action.element_id, ctx)}"'
    )


def describe_create_view(action: CreateView, ctx: ExecutionContext) -> str:
    if action.ref_id:
        ctx.view_refs[action.ref_id] = View(id=action.ref_id, name=action.name)
    return f'Create view "{action.name}"{_ref_note(action.ref_id)}'


def describe_add_to_view(action: AddToView, ctx: ExecutionContext) -> str:
    view = ctx.resolve_view(action.view_id)
    view_name = (view.name or view.id) if view is not None else f"(ref: {action.view_id})"
    placement = place(action, view.id if view is not None else action.view_id, ctx)
    return (
        f'Add "{_display_name(action.element_id, ctx)}" to view "{view_name}" '
        f"at ({placement.x:g}, {placement.y:g})"
    )


def describe_move_to_folder(action: MoveToFolder, ctx: ExecutionContext) -> str:
    return (
        f'Move "{_display_name(action.element_id, ctx)}" to folder '
        f'"{action.folder_path}"'
    )

