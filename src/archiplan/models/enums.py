"""Enumeration definitions for archiplan.

This module contains the closed value sets shared by the catalog, the
validator and the executor.
"""

from enum import Enum


class PlanStatus(str, Enum):
    """Defines the status a plan producer assigns to a change plan.

    Attributes:
        READY: The plan is complete and may be executed.
        NEEDS_CLARIFICATION: The producer needs answers before planning.
        REFUSAL: The producer declined to produce a plan.
    """

    READY = "ready"
    NEEDS_CLARIFICATION = "needs_clarification"
    REFUSAL = "refusal"


class Operation(str, Enum):
    """Defines the supported change plan operations.

    The declaration order is the canonical catalog order.
    """

    CREATE_ELEMENT = "create_element"
    RENAME_ELEMENT = "rename_element"
    SET_PROPERTY = "set_property"
    CREATE_RELATIONSHIP = "create_relationship"
    SET_DOCUMENTATION = "set_documentation"
    DELETE_ELEMENT = "delete_element"
    DELETE_RELATIONSHIP = "delete_relationship"
    REMOVE_PROPERTY = "remove_property"
    CREATE_VIEW = "create_view"
    ADD_TO_VIEW = "add_to_view"
    MOVE_TO_FOLDER = "move_to_folder"


class ExecutionMode(str, Enum):
    """Defines how the executor treats a plan.

    Attributes:
        PREVIEW: Describe every action without touching the model.
        APPLY: Mutate the model action by action.
    """

    PREVIEW = "preview"
    APPLY = "apply"


class FieldType(str, Enum):
    """Wire-level type of a plan action field."""

    STRING = "string"
    NUMBER = "number"
