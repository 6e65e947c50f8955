"""Dispatch table pairing every plan operation with its two execution modes."""

from dataclasses import dataclass

from ..models.enums import Operation
from . import handlers, preview
from .handlers import ApplyHandler
from .preview import Describer


@dataclass(frozen=True)
class OperationHandlers:
    describe: Describer
    apply: ApplyHandler


OPERATION_HANDLERS: dict[str, OperationHandlers] = {
    Operation.CREATE_ELEMENT.value: OperationHandlers(
        preview.describe_create_element, handlers.apply_create_element
    ),
    Operation.RENAME_ELEMENT.value: OperationHandlers(
        preview.describe_rename_element, handlers.apply_rename_element
    ),
    Operation.SET_PROPERTY.value: OperationHandlers(
        preview.describe_set_property, handlers.apply_set_property
    ),
    Operation.CREATE_RELATIONSHIP.value: OperationHandlers(
        preview.describe_create_relationship, handlers.apply_create_relationship
    ),
    Operation.SET_DOCUMENTATION.value: OperationHandlers(
        preview.describe_set_documentation, handlers.apply_set_documentation
    ),
    Operation.DELETE_ELEMENT.value: OperationHandlers(
        preview.describe_delete_element, handlers.apply_delete_element
    ),
    Operation.DELETE_RELATIONSHIP.value: OperationHandlers(
        preview.describe_delete_relationship, handlers.apply_delete_relationship
    ),
    Operation.REMOVE_PROPERTY.value: OperationHandlers(
        preview.describe_remove_property, handlers.apply_remove_property
    ),
    Operation.CREATE_VIEW.value: OperationHandlers(
        preview.describe_create_view, handlers.apply_create_view
    ),
    Operation.ADD_TO_VIEW.value: OperationHandlers(
        preview.describe_add_to_view, handlers.apply_add_to_view
    ),
    Operation.MOVE_TO_FOLDER.value: OperationHandlers(
        preview.describe_move_to_folder, handlers.apply_move_to_folder
    ),
}
