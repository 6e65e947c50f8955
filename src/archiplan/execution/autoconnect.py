"""Post-pass that draws existing relationships on the views a plan touched."""

from typing import Iterable

from ..models.graph import DiagramObject, View
from ..persistence.repository import ModelStore


def connect_view(store: ModelStore, view: View) -> int:
    """Adds a connection for every relationship whose endpoints are both on the view.

    Relationships already drawn on the view are left alone, so running the
    pass twice adds nothing the second time.

    Returns:
        The number of connections added.
    """
    placed: dict[str, DiagramObject] = {}
    for obj in store.children(view):
        placed.setdefault(obj.element_id, obj)

    drawn = {c.relationship_id for c in store.connections(view)}
    added = 0
    for relationship in store.relationships():
        if relationship.id in drawn:
            continue
        source = placed.get(relationship.source_id)
        target = placed.get(relationship.target_id)
        if source is None or target is None:
            continue
        store.add_connection(view, relationship, source, target)
        drawn.add(relationship.id)
        added += 1
    return added


def auto_connect(store: ModelStore, view_ids: Iterable[str]) -> int:
    """Runs `connect_view` over the given views, skipping ids that are not views."""
    total = 0
    for view_id in view_ids:
        view = store.get(view_id)
        if isinstance(view, View):
            total += connect_view(store, view)
    return total
