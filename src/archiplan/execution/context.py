from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..catalog.compatibility import CompatibilityOracle
from ..models.enums import ExecutionMode
from ..models.graph import Entity, View
from ..persistence.repository import ModelStore
from .config import ExecutorConfig


class ExecutionContext(BaseModel):
    """
    Per-execution tables shared by the handlers of one plan run.

    Ref maps hold the store's own records, so a handle registered by one
    action is the same object later actions mutate.
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    mode: ExecutionMode = Field(..., description="Preview or apply.")
    store: ModelStore = Field(..., description="The model the plan targets.")
    oracle: CompatibilityOracle = Field(..., description="Label conversions.")
    config: ExecutorConfig = Field(
        default_factory=ExecutorConfig, description="Executor configuration."
    )
    element_refs: dict[str, Entity] = Field(
        default_factory=dict,
        description="ref_id -> element created (or, in preview, described) earlier.",
    )
    view_refs: dict[str, View] = Field(
        default_factory=dict,
        description="ref_id -> view created (or, in preview, described) earlier.",
    )
    grid_counters: dict[str, int] = Field(
        default_factory=dict,
        description="Per-view count of auto-grid placements.",
    )
    touched_views: list[str] = Field(
        default_factory=list,
        description="IDs of views that received objects, in first-touch order.",
    )

    @property
    def is_preview(self) -> bool:
        return self.mode == ExecutionMode.PREVIEW

    def resolve(self, entity_id: str) -> Optional[Entity]:
        """Looks up an id, preferring ref_ids registered earlier in the plan."""
        if entity_id in self.element_refs:
            return self.element_refs[entity_id]
        return self.store.get(entity_id)

    def resolve_view(self, view_id: str) -> Optional[View]:
        if view_id in self.view_refs:
            return self.view_refs[view_id]
        view = self.store.get(view_id)
        return view if isinstance(view, View) else None

    def next_grid_slot(self, view_id: str) -> int:
        slot = self.grid_counters.get(view_id, 0)
        self.grid_counters[view_id] = slot + 1
        return slot

    def touch_view(self, view_id: str):
        if view_id not in self.touched_views:
            self.touched_views.append(view_id)

    def forget(self, entity_id: str):
        """Drops every ref_id pointing at a deleted entity."""
        for ref_id in [r for r, e in self.element_refs.items() if e.id == entity_id]:
            del self.element_refs[ref_id]
        for ref_id in [r for r, v in self.view_refs.items() if v.id == entity_id]:
            del self.view_refs[ref_id]
