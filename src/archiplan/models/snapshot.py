"""Data model for model snapshots.

This module defines the serializable form of a whole architecture model, used
to load a model from a file and to write it back after a plan is applied.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from .graph import Element, Folder, Relationship, View


def _default_snapshot_id() -> str:
    return f"snap_{datetime.now(timezone.utc).isoformat()}"


class ModelSnapshot(BaseModel):
    """Represents a snapshot of an architecture model.

    Attributes:
        snapshot_id: Unique identifier for this snapshot.
        timestamp: When the snapshot was created.
        elements: Every element of the model.
        relationships: Every relationship of the model.
        views: Every view, including placed objects and connections.
        folders: The folder tree, flattened with parent links.
        checksum: SHA-256 hash of the model content.
    """

    snapshot_id: str = Field(
        default_factory=_default_snapshot_id,
        description="Unique identifier for this snapshot.",
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the snapshot was created.",
    )
    elements: list[Element] = Field(
        default_factory=list, description="Every element of the model."
    )
    relationships: list[Relationship] = Field(
        default_factory=list, description="Every relationship of the model."
    )
    views: list[View] = Field(
        default_factory=list, description="Every view of the model."
    )
    folders: list[Folder] = Field(
        default_factory=list,
        description="Folder tree, flattened with parent links.",
    )
    checksum: Optional[str] = Field(
        default=None,
        description="SHA-256 hash of the model content for integrity verification.",
    )
