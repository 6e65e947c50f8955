"""Model store interfaces.

The engine never reaches into a host model directly. It talks to three narrow
interfaces, each independently fakeable in tests: `EntityStore` for concepts
and their fields, `ViewStore` for diagrams, and `FolderStore` for the folder
tree. `ModelStore` combines them for hosts that implement all three.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..models.graph import (
    DiagramConnection,
    DiagramObject,
    Element,
    Entity,
    Folder,
    Relationship,
    View,
)


class EntityStore(ABC):
    """Interface for looking up and mutating model concepts."""

    @abstractmethod
    def get(self, entity_id: str) -> Optional[Entity]:
        """Retrieves an element, relationship or view by its ID.

        Args:
            entity_id: The model identifier.

        Returns:
            The entity if found, otherwise None.
        """
        pass  # pragma: no cover

    @abstractmethod
    def elements(self) -> list[Element]:
        """Lists all elements in model order."""
        pass  # pragma: no cover

    @abstractmethod
    def relationships(self) -> list[Relationship]:
        """Lists all relationships in model order."""
        pass  # pragma: no cover

    @abstractmethod
    def relationships_of(self, entity: Entity) -> list[Relationship]:
        """Lists the relationships that have the entity as source or target.

        Args:
            entity: The concept whose attached relationships are requested.

        Returns:
            Every relationship a cascade delete of the entity would remove.
        """
        pass  # pragma: no cover

    @abstractmethod
    def create_element(self, element_type: str, name: str) -> Element:
        """Creates a new element.

        Args:
            element_type: Kebab-case element type (e.g. 'business-actor').
            name: Display name.

        Returns:
            The created element.
        """
        pass  # pragma: no cover

    @abstractmethod
    def create_relationship(
        self, relationship_type: str, name: str, source: Entity, target: Entity
    ) -> Relationship:
        """Creates a relationship between two concepts.

        Args:
            relationship_type: Relationship type (e.g. 'serving-relationship').
            name: Display name, possibly empty.
            source: Source concept.
            target: Target concept.

        Returns:
            The created relationship.
        """
        pass  # pragma: no cover

    @abstractmethod
    def rename(self, entity: Entity, name: str):
        pass  # pragma: no cover

    @abstractmethod
    def get_property(self, entity: Entity, key: str) -> Optional[str]:
        pass  # pragma: no cover

    @abstractmethod
    def set_property(self, entity: Entity, key: str, value: str):
        pass  # pragma: no cover

    @abstractmethod
    def remove_property(self, entity: Entity, key: str) -> Optional[str]:
        """Removes a property and returns its previous value, or None."""
        pass  # pragma: no cover

    @abstractmethod
    def set_documentation(self, entity: Entity, documentation: str):
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, entity: Entity):
        """Deletes a single concept.

        Deleting does not cascade; callers delete attached relationships
        first. Visual references to the concept are removed from every view.
        """
        pass  # pragma: no cover


class ViewStore(ABC):
    """Interface for diagrams and their visual content."""

    @abstractmethod
    def views(self) -> list[View]:
        """Lists all views in model order."""
        pass  # pragma: no cover

    @abstractmethod
    def create_view(self, name: str) -> View:
        pass  # pragma: no cover

    @abstractmethod
    def add_element(
        self,
        view: View,
        element: Element,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> DiagramObject:
        """Places an element on a view.

        Returns:
            The created visual object.
        """
        pass  # pragma: no cover

    @abstractmethod
    def add_connection(
        self,
        view: View,
        relationship: Relationship,
        source_object: DiagramObject,
        target_object: DiagramObject,
    ) -> DiagramConnection:
        """Draws a relationship between two visual objects of a view."""
        pass  # pragma: no cover

    @abstractmethod
    def children(self, view: View) -> list[DiagramObject]:
        """Lists the visual objects placed on a view."""
        pass  # pragma: no cover

    @abstractmethod
    def connections(self, view: View) -> list[DiagramConnection]:
        """Lists the visual connections drawn on a view."""
        pass  # pragma: no cover

    @abstractmethod
    def find(self, view: View, entity_id: str) -> Optional[DiagramObject]:
        """Finds the first visual object referencing an element on a view."""
        pass  # pragma: no cover


class FolderStore(ABC):
    """Interface for the model folder tree."""

    @abstractmethod
    def top_level_folders(self) -> list[Folder]:
        pass  # pragma: no cover

    @abstractmethod
    def subfolders(self, folder: Folder) -> list[Folder]:
        pass  # pragma: no cover

    @abstractmethod
    def add_to_folder(self, folder: Folder, entity: Entity):
        """Moves a concept into a folder, removing it from its previous one."""
        pass  # pragma: no cover


class ModelStore(EntityStore, ViewStore, FolderStore):
    """A complete model store implementing all three interfaces."""
