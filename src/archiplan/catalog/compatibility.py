"""Relationship compatibility oracle.

The oracle decides whether a relationship type is permitted between two
element types. `CompatibilityOracle` is the interface the validator consumes;
`MatrixCompatibilityOracle` is the default implementation backed by the
ArchiMate 3.1 allowed-relationship matrix shipped in `data/`.
"""

from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml

from . import labels

DEFAULT_MATRIX_PATH = Path(__file__).resolve().parent.parent / "data" / "relationship_matrix.yaml"


class CompatibilityOracle(ABC):
    """Interface answering relationship-compatibility questions.

    Label conversions are shared by every oracle; implementations only
    provide the compatibility lookups and their set of known element types.
    """

    @abstractmethod
    def is_allowed(self, source_type: str, target_type: str, relationship_type: str) -> bool:
        """Checks whether a relationship type is allowed between two element types.

        Args:
            source_type: Source element type, e.g. 'business-actor'.
            target_type: Target element type, e.g. 'business-process'.
            relationship_type: Relationship type, e.g. 'serving-relationship'.

        Returns:
            True if the combination is permitted.
        """
        pass  # pragma: no cover

    @abstractmethod
    def get_allowed(self, source_type: str, target_type: str) -> list[str]:
        """Lists the relationship types permitted between two element types."""
        pass  # pragma: no cover

    @abstractmethod
    def element_types(self) -> list[str]:
        """Returns the closed set of element types known to the oracle."""
        pass  # pragma: no cover

    def is_known_type(self, element_type: Optional[str]) -> bool:
        return bool(element_type) and element_type in self.element_types()

    def element_label_to_type(self, label: str) -> Optional[str]:
        return labels.resolve_element_type(label)

    def element_type_to_label(self, element_type: str) -> Optional[str]:
        return labels.element_label(element_type)

    def relationship_label_to_type(self, label: str) -> Optional[str]:
        return labels.resolve_relationship_type(label)

    def relationship_type_to_label(self, relationship_type: str) -> Optional[str]:
        return labels.relationship_label(relationship_type)


def _parse_cell(cell: str, codes: dict[str, str]) -> list[str]:
    if not cell or cell == "-":
        return []
    return [codes[code] for code in cell.split(",") if code in codes]


@lru_cache(maxsize=None)
def load_matrix(path: Path = DEFAULT_MATRIX_PATH) -> tuple[list[str], dict[tuple[str, str], list[str]]]:
    """Loads an allowed-relationship matrix from YAML.

    Args:
        path: Matrix file with 'codes', 'element_types' and 'matrix' keys.

    Returns:
        The element types in column order and a mapping from
        (source_type, target_type) to the allowed relationship types.
    """
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    codes: dict[str, str] = data["codes"]
    element_types: list[str] = data["element_types"]

    matrix: dict[tuple[str, str], list[str]] = {}
    for source_type, cells in data["matrix"].items():
        for target_type, cell in zip(element_types, cells):
            matrix[(source_type, target_type)] = _parse_cell(cell, codes)
    return element_types, matrix


class MatrixCompatibilityOracle(CompatibilityOracle):
    """Compatibility oracle backed by the ArchiMate 3.1 relationship matrix."""

    def __init__(self, path: Optional[Path] = None):
        self._element_types, self._matrix = load_matrix(path or DEFAULT_MATRIX_PATH)

    def is_allowed(self, source_type: str, target_type: str, relationship_type: str) -> bool:
        return relationship_type in self._matrix.get((source_type, target_type), [])

    def get_allowed(self, source_type: str, target_type: str) -> list[str]:
        return list(self._matrix.get((source_type, target_type), []))

    def element_types(self) -> list[str]:
        return list(self._element_types)
