"""Semantic phase of plan validation.

Walks the actions in order against the live model, tracking the ref_ids
declared so far, the ids deleted so far, and repeated mutations. Every action
is evaluated so the caller gets one complete report.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..catalog.compatibility import CompatibilityOracle
from ..catalog.labels import is_relationship_type
from ..models.graph import Entity, Relationship, View
from ..models.plan import (
    AddToView,
    ChangePlan,
    CreateElement,
    CreateRelationship,
    CreateView,
    DeleteElement,
    DeleteRelationship,
    MoveToFolder,
    RemoveProperty,
    RenameElement,
    SetDocumentation,
    SetProperty,
)
from ..models.validation import SemanticReport
from ..persistence.repository import EntityStore


class SemanticContext(BaseModel):
    """
    Running tables threaded through the semantic walk of one plan.
    """

    model_config = ConfigDict(extra="forbid")

    scope: Optional[set[str]] = Field(
        default=None,
        description="If set, live ids outside this set are rejected.",
    )
    element_refs: dict[str, Optional[str]] = Field(
        default_factory=dict,
        description="Element ref_id -> resolved element type (None if unknown).",
    )
    view_refs: set[str] = Field(
        default_factory=set,
        description="View ref_ids declared by earlier create_view actions.",
    )
    deleted_ids: set[str] = Field(
        default_factory=set,
        description="Ids deleted by earlier actions.",
    )
    renamed_ids: set[str] = Field(
        default_factory=set,
        description="Targets already renamed by earlier actions.",
    )
    property_targets: set[tuple[str, str]] = Field(
        default_factory=set,
        description="(target, key) pairs already set by earlier actions.",
    )

    def is_declared(self, ref_id: str) -> bool:
        return ref_id in self.element_refs or ref_id in self.view_refs


class ResolvedTarget(BaseModel):
    """
    Outcome of resolving an id during semantic validation.
    """

    model_config = ConfigDict(extra="forbid")

    type: Optional[str] = Field(
        default=None, description="Entity type, None if it cannot be known yet."
    )
    entity: Optional[Entity] = Field(
        default=None, description="The live entity, None for ref_id targets."
    )


class SemanticValidator:
    """
    Checks a schema-valid plan against the live model and the compatibility oracle.
    """

    def __init__(self, store: EntityStore, oracle: CompatibilityOracle) -> None:
        self._store = store
        self._oracle = oracle

    def validate(
        self, plan: ChangePlan, scope: Optional[set[str]] = None
    ) -> SemanticReport:
        ctx = SemanticContext(scope=set(scope) if scope is not None else None)
        report = SemanticReport()
        for index, action in enumerate(plan.actions):
            self._check_action(action, f"actions[{index}]: ", ctx, report)
        return report

    def _check_action(self, action, prefix: str, ctx: SemanticContext, report: SemanticReport):
        errors = report.errors
        warnings = report.warnings

        match action:
            case CreateElement():
                resolved_type = self._oracle.element_label_to_type(action.type)
                if resolved_type is None:
                    errors.append(prefix + f'unknown element type "{action.type}"')
                self._declare(action.ref_id, prefix, ctx, errors, element_type=resolved_type)

            case CreateView():
                self._declare(action.ref_id, prefix, ctx, errors, view=True)

            case RenameElement():
                self.resolve(action.element_id, prefix, ctx, errors)
                if action.element_id in ctx.renamed_ids:
                    warnings.append(
                        prefix + f'element "{action.element_id}" renamed multiple times'
                    )
                ctx.renamed_ids.add(action.element_id)

            case SetProperty():
                self.resolve(action.element_id, prefix, ctx, errors)
                target_key = (action.element_id, action.key)
                if target_key in ctx.property_targets:
                    warnings.append(
                        prefix
                        + f'property "{action.key}" set multiple times on same element'
                    )
                ctx.property_targets.add(target_key)

            case SetDocumentation() | RemoveProperty() | MoveToFolder():
                self.resolve(action.element_id, prefix, ctx, errors)

            case CreateRelationship():
                self._check_relationship(action, prefix, ctx, report)

            case DeleteElement():
                self._check_delete_element(action, prefix, ctx, report)

            case DeleteRelationship():
                self._check_delete_relationship(action, prefix, ctx, errors)

            case AddToView():
                self.resolve_view(action.view_id, prefix, ctx, errors)
                self.resolve(action.element_id, prefix + "element: ", ctx, errors)

    def _declare(
        self,
        ref_id: Optional[str],
        prefix: str,
        ctx: SemanticContext,
        errors: list[str],
        element_type: Optional[str] = None,
        view: bool = False,
    ):
        if not ref_id:
            return
        if ctx.is_declared(ref_id):
            errors.append(prefix + f'duplicate ref_id "{ref_id}"')
            return
        if view:
            ctx.view_refs.add(ref_id)
        else:
            ctx.element_refs[ref_id] = element_type

    def resolve(
        self,
        entity_id: str,
        prefix: str,
        ctx: SemanticContext,
        errors: list[str],
    ) -> Optional[ResolvedTarget]:
        """Resolves an id: deleted ids fail, then ref_ids, then the live model.

        Args:
            entity_id: The id or ref_id named by an action.
            prefix: Message prefix identifying the action (and side).
            ctx: The running semantic context.
            errors: Error list to append to.

        Returns:
            The resolved target, or None if an error was recorded.
        """
        if entity_id in ctx.deleted_ids:
            errors.append(prefix + f'element "{entity_id}" was deleted by a prior action')
            return None

        if entity_id in ctx.element_refs:
            return ResolvedTarget(type=ctx.element_refs[entity_id])

        entity = self._store.get(entity_id)
        if entity is None:
            errors.append(
                prefix
                + f'element "{entity_id}" not found in model (and no matching ref_id)'
            )
            return None
        if ctx.scope is not None and entity_id not in ctx.scope:
            errors.append(prefix + f'element "{entity_id}" not in scope')
            return None
        return ResolvedTarget(type=entity.type, entity=entity)

    def resolve_view(
        self, view_id: str, prefix: str, ctx: SemanticContext, errors: list[str]
    ) -> bool:
        """Resolves a view id against view ref_ids, then live views only."""
        if view_id in ctx.deleted_ids:
            errors.append(prefix + f'view "{view_id}" was deleted by a prior action')
            return False
        if view_id in ctx.view_refs:
            return True
        view = self._store.get(view_id)
        if view is None:
            errors.append(
                prefix + f'view "{view_id}" not found in model (and no matching ref_id)'
            )
            return False
        if not isinstance(view, View):
            errors.append(prefix + f'"{view_id}" is not a view')
            return False
        return True

    def _check_relationship(
        self,
        action: CreateRelationship,
        prefix: str,
        ctx: SemanticContext,
        report: SemanticReport,
    ):
        source = self.resolve(action.source_id, prefix + "source: ", ctx, report.errors)
        target = self.resolve(action.target_id, prefix + "target: ", ctx, report.errors)
        if source is None or target is None:
            return
        if not (
            self._oracle.is_known_type(source.type)
            and self._oracle.is_known_type(target.type)
        ):
            return

        relationship_type = self._oracle.relationship_label_to_type(action.relationship_type)
        if relationship_type is None or self._oracle.is_allowed(
            source.type, target.type, relationship_type
        ):
            return

        allowed_labels = [
            label
            for label in (
                self._oracle.relationship_type_to_label(t)
                for t in self._oracle.get_allowed(source.type, target.type)
            )
            if label
        ]
        if allowed_labels:
            hint = ". Allowed: " + ", ".join(allowed_labels)
        else:
            hint = ". No relationships allowed between these types"
        report.warnings.append(
            prefix
            + f"{action.relationship_type} not allowed by ArchiMate spec between "
            f"{source.type} and {target.type}{hint}"
        )

    def _check_delete_element(
        self,
        action: DeleteElement,
        prefix: str,
        ctx: SemanticContext,
        report: SemanticReport,
    ):
        target = self.resolve(action.element_id, prefix, ctx, report.errors)
        if target is None:
            return

        if is_relationship_type(target.type):
            report.errors.append(
                prefix
                + f'"{action.element_id}" is a relationship, use delete_relationship instead'
            )
        elif target.entity is not None:
            attached = self._store.relationships_of(target.entity)
            if attached:
                report.warnings.append(
                    prefix
                    + f'deleting "{target.entity.name or action.element_id}" will '
                    f"cascade-delete {len(attached)} relationship(s)"
                )
            ctx.deleted_ids.update(r.id for r in attached)
        ctx.deleted_ids.add(action.element_id)

    def _check_delete_relationship(
        self,
        action: DeleteRelationship,
        prefix: str,
        ctx: SemanticContext,
        errors: list[str],
    ):
        # Relationships created earlier in the same plan cannot be targeted
        # here: only the live model is consulted, never ref_ids.
        relationship_id = action.relationship_id
        if relationship_id in ctx.deleted_ids:
            errors.append(
                prefix
                + f'relationship "{relationship_id}" was deleted by a prior action'
            )
            return

        relationship = self._store.get(relationship_id)
        if relationship is None:
            errors.append(prefix + f'relationship "{relationship_id}" not found in model')
        elif not isinstance(relationship, Relationship):
            errors.append(
                prefix
                + f'"{relationship_id}" is not a relationship, use delete_element instead'
            )
        ctx.deleted_ids.add(relationship_id)
