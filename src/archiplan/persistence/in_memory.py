"""In-memory implementation of the ModelStore.

This module provides an ephemeral architecture model suitable for testing,
local development and file-based use through the CLI.
"""

from typing import Iterable, Optional

from ..catalog.labels import is_relationship_type
from ..models.graph import (
    DiagramConnection,
    DiagramObject,
    Element,
    Entity,
    Folder,
    Relationship,
    View,
)
from ..models.snapshot import ModelSnapshot
from ..utils import compute_checksum, new_id
from .repository import ModelStore

RELATIONS_FOLDER = "Relations"
VIEWS_FOLDER = "Views"
OTHER_FOLDER = "Other"

DEFAULT_FOLDERS = [
    "Strategy",
    "Business",
    "Application",
    "Technology & Physical",
    "Motivation",
    "Implementation & Migration",
    OTHER_FOLDER,
    RELATIONS_FOLDER,
    VIEWS_FOLDER,
]

_LAYER_FOLDERS = {
    "Strategy": {"resource", "capability", "course-of-action", "value-stream"},
    "Business": {"contract", "representation", "product"},
    "Application": {"data-object"},
    "Technology & Physical": {
        "node", "device", "system-software", "path", "communication-network",
        "artifact", "equipment", "facility", "distribution-network", "material",
    },
    "Motivation": {
        "stakeholder", "driver", "assessment", "goal", "outcome",
        "principle", "requirement", "constraint", "meaning", "value",
    },
    "Implementation & Migration": {
        "work-package", "deliverable", "implementation-event", "plateau", "gap",
    },
}

_PREFIX_FOLDERS = {
    "business-": "Business",
    "application-": "Application",
    "technology-": "Technology & Physical",
}


def default_folder_name(entity: Entity) -> str:
    """Returns the top-level folder a new concept is created in."""
    if isinstance(entity, View):
        return VIEWS_FOLDER
    if isinstance(entity, Relationship) or is_relationship_type(entity.type):
        return RELATIONS_FOLDER
    for folder_name, types in _LAYER_FOLDERS.items():
        if entity.type in types:
            return folder_name
    for prefix, folder_name in _PREFIX_FOLDERS.items():
        if entity.type.startswith(prefix):
            return folder_name
    return OTHER_FOLDER


class InMemoryModelStore(ModelStore):
    """In-memory implementation of the ModelStore.

    Entities are kept in insertion order, so listings are deterministic.
    Handles returned by the store are the stored records themselves.
    """

    def __init__(self, with_default_folders: bool = True):
        """Initializes an empty model.

        Args:
            with_default_folders: Whether to create the standard top-level
                folders (Strategy, Business, ... Views).
        """
        self._entities: dict[str, Entity] = {}
        self._folders: dict[str, Folder] = {}
        if with_default_folders:
            for name in DEFAULT_FOLDERS:
                self.create_folder(name)

    # -- Population -------------------------------------------------------

    def add(self, entity: Entity, folder: Optional[Folder] = None) -> Entity:
        """Inserts a pre-built entity, e.g. one with a known ID.

        Args:
            entity: The element, relationship or view to insert.
            folder: Target folder. Defaults to the folder for its layer.

        Returns:
            The inserted entity.

        Raises:
            ValueError: If the ID is already in use.
        """
        if entity.id in self._entities:
            raise ValueError(f"Duplicate entity id: {entity.id}")
        self._entities[entity.id] = entity
        target = folder if folder is not None else self._find_top_level(
            default_folder_name(entity)
        )
        if target is not None:
            target.member_ids.append(entity.id)
        return entity

    def create_folder(self, name: str, parent: Optional[Folder] = None) -> Folder:
        folder = Folder(
            id=new_id(), name=name, parent_id=parent.id if parent else None
        )
        self._folders[folder.id] = folder
        return folder

    def folder_of(self, entity: Entity) -> Optional[Folder]:
        for folder in self._folders.values():
            if entity.id in folder.member_ids:
                return folder
        return None

    def folder_path(self, folder: Folder) -> str:
        parts = [folder.name]
        current = folder
        while current.parent_id is not None:
            current = self._folders[current.parent_id]
            parts.append(current.name)
        return "/".join(reversed(parts))

    def _find_top_level(self, name: str) -> Optional[Folder]:
        for folder in self.top_level_folders():
            if folder.name == name:
                return folder
        return None

    def _of_kind(self, kind: type) -> list:
        return [e for e in self._entities.values() if isinstance(e, kind)]

    # -- EntityStore ------------------------------------------------------

    def get(self, entity_id: str) -> Optional[Entity]:
        return self._entities.get(entity_id)

    def elements(self) -> list[Element]:
        return self._of_kind(Element)

    def relationships(self) -> list[Relationship]:
        return self._of_kind(Relationship)

    def relationships_of(self, entity: Entity) -> list[Relationship]:
        return [
            r
            for r in self.relationships()
            if r.source_id == entity.id or r.target_id == entity.id
        ]

    def create_element(self, element_type: str, name: str) -> Element:
        return self.add(Element(id=new_id(), type=element_type, name=name))

    def create_relationship(
        self, relationship_type: str, name: str, source: Entity, target: Entity
    ) -> Relationship:
        return self.add(
            Relationship(
                id=new_id(),
                type=relationship_type,
                name=name,
                source_id=source.id,
                target_id=target.id,
            )
        )

    def rename(self, entity: Entity, name: str):
        entity.name = name

    def get_property(self, entity: Entity, key: str) -> Optional[str]:
        return entity.properties.get(key)

    def set_property(self, entity: Entity, key: str, value: str):
        entity.properties[key] = value

    def remove_property(self, entity: Entity, key: str) -> Optional[str]:
        return entity.properties.pop(key, None)

    def set_documentation(self, entity: Entity, documentation: str):
        entity.documentation = documentation

    def delete(self, entity: Entity):
        if self._entities.pop(entity.id, None) is None:
            raise KeyError(f"Entity not found: {entity.id}")
        for folder in self._folders.values():
            if entity.id in folder.member_ids:
                folder.member_ids.remove(entity.id)
        if not isinstance(entity, View):
            for view in self.views():
                self._detach_from_view(view, entity.id)

    def _detach_from_view(self, view: View, entity_id: str):
        removed = {o.id for o in view.objects if o.element_id == entity_id}
        view.objects = [o for o in view.objects if o.id not in removed]
        view.connections = [
            c
            for c in view.connections
            if c.relationship_id != entity_id
            and c.source_object_id not in removed
            and c.target_object_id not in removed
        ]

    # -- ViewStore --------------------------------------------------------

    def views(self) -> list[View]:
        return self._of_kind(View)

    def create_view(self, name: str) -> View:
        return self.add(View(id=new_id(), name=name))

    def add_element(
        self,
        view: View,
        element: Element,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> DiagramObject:
        obj = DiagramObject(
            id=new_id(),
            element_id=element.id,
            x=x,
            y=y,
            width=width,
            height=height,
        )
        view.objects.append(obj)
        return obj

    def add_connection(
        self,
        view: View,
        relationship: Relationship,
        source_object: DiagramObject,
        target_object: DiagramObject,
    ) -> DiagramConnection:
        connection = DiagramConnection(
            id=new_id(),
            relationship_id=relationship.id,
            source_object_id=source_object.id,
            target_object_id=target_object.id,
        )
        view.connections.append(connection)
        return connection

    def children(self, view: View) -> list[DiagramObject]:
        return list(view.objects)

    def connections(self, view: View) -> list[DiagramConnection]:
        return list(view.connections)

    def find(self, view: View, entity_id: str) -> Optional[DiagramObject]:
        for obj in view.objects:
            if obj.element_id == entity_id:
                return obj
        return None

    # -- FolderStore ------------------------------------------------------

    def top_level_folders(self) -> list[Folder]:
        return [f for f in self._folders.values() if f.parent_id is None]

    def subfolders(self, folder: Folder) -> list[Folder]:
        return [f for f in self._folders.values() if f.parent_id == folder.id]

    def add_to_folder(self, folder: Folder, entity: Entity):
        for current in self._folders.values():
            if entity.id in current.member_ids:
                current.member_ids.remove(entity.id)
        folder.member_ids.append(entity.id)

    # -- Snapshots --------------------------------------------------------

    def to_snapshot(self) -> ModelSnapshot:
        """Captures the whole model as a serializable snapshot."""
        snapshot = ModelSnapshot(
            elements=[e.model_copy(deep=True) for e in self.elements()],
            relationships=[r.model_copy(deep=True) for r in self.relationships()],
            views=[v.model_copy(deep=True) for v in self.views()],
            folders=[f.model_copy(deep=True) for f in self._folders.values()],
        )
        snapshot.checksum = compute_checksum(
            snapshot.model_dump(
                mode="json", exclude={"snapshot_id", "timestamp", "checksum"}
            )
        )
        return snapshot

    @classmethod
    def from_snapshot(cls, snapshot: ModelSnapshot) -> "InMemoryModelStore":
        """Builds a store from a snapshot.

        Snapshots without folders get the default folder tree, with every
        concept filed in the folder for its layer.
        """
        store = cls(with_default_folders=not snapshot.folders)
        for folder in snapshot.folders:
            store._folders[folder.id] = folder.model_copy(deep=True)

        filed = {m for f in snapshot.folders for m in f.member_ids}
        entities: Iterable[Entity] = [
            *snapshot.elements,
            *snapshot.relationships,
            *snapshot.views,
        ]
        for entity in entities:
            copy = entity.model_copy(deep=True)
            if copy.id in filed:
                store._entities[copy.id] = copy
            else:
                store.add(copy)
        return store
