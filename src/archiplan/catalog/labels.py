"""ArchiMate type vocabularies and label conversions.

Plans speak in human-readable labels ("Application Component", "Serving"),
while the model speaks in kebab-case types ("application-component",
"serving-relationship"). This module owns both vocabularies and the
conversions between them.
"""

import re
from typing import Optional

ELEMENT_TYPE_LABELS = [
    "Stakeholder", "Driver", "Assessment", "Goal", "Outcome",
    "Principle", "Requirement", "Constraint", "Meaning", "Value",
    "Resource", "Capability", "Course Of Action", "Value Stream",
    "Business Actor", "Business Role", "Business Collaboration",
    "Business Interface", "Business Process", "Business Function",
    "Business Interaction", "Business Event", "Business Service",
    "Business Object", "Contract", "Representation", "Product",
    "Application Component", "Application Collaboration",
    "Application Interface", "Application Function",
    "Application Process", "Application Interaction",
    "Application Event", "Application Service", "Data Object",
    "Node", "Device", "System Software", "Technology Collaboration",
    "Technology Interface", "Path", "Communication Network",
    "Technology Function", "Technology Process",
    "Technology Interaction", "Technology Event",
    "Technology Service", "Artifact", "Equipment", "Facility",
    "Distribution Network", "Material",
    "Work Package", "Deliverable", "Implementation Event",
    "Plateau", "Gap",
]

RELATIONSHIP_LABELS = [
    "Composition", "Aggregation", "Assignment", "Realization",
    "Serving", "Access", "Influence", "Triggering", "Flow",
    "Specialization", "Association",
]

RELATIONSHIP_SUFFIX = "-relationship"
VIEW_TYPE = "archimate-diagram-model"


def element_type_to_label(element_type: str) -> str:
    """Converts "application-component" to "Application Component"."""
    if not element_type:
        return ""
    return " ".join(word[:1].upper() + word[1:] for word in element_type.split("-"))


def relationship_type_to_label(relationship_type: str) -> str:
    """Converts "serving-relationship" to "Serving"."""
    return element_type_to_label(relationship_type.replace(RELATIONSHIP_SUFFIX, ""))


ELEMENT_TYPES = [label.lower().replace(" ", "-") for label in ELEMENT_TYPE_LABELS]
RELATIONSHIP_TYPES = [label.lower() + RELATIONSHIP_SUFFIX for label in RELATIONSHIP_LABELS]

_ELEMENT_LABEL_TO_TYPE = {element_type_to_label(t): t for t in ELEMENT_TYPES}
_ELEMENT_TYPE_TO_LABEL = {t: label for label, t in _ELEMENT_LABEL_TO_TYPE.items()}
_RELATIONSHIP_LABEL_TO_TYPE = {
    relationship_type_to_label(t): t for t in RELATIONSHIP_TYPES
}
_RELATIONSHIP_TYPE_TO_LABEL = {
    t: label for label, t in _RELATIONSHIP_LABEL_TO_TYPE.items()
}

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def normalize_type_label(label: str) -> str:
    """Inserts a space before internal capitals.

    "BusinessActor" becomes "Business Actor"; already-spaced labels are
    returned unchanged.
    """
    if not label:
        return label
    return _CAMEL_BOUNDARY.sub(r"\1 \2", label)


def _lookup_label(table: dict[str, str], label: object) -> Optional[str]:
    if not isinstance(label, str) or not label:
        return None
    if label in table:
        return table[label]
    return table.get(normalize_type_label(label))


def resolve_element_type(label: object) -> Optional[str]:
    """Resolves an element label, accepting "Business Actor" and "BusinessActor".

    Returns:
        The kebab-case element type, or None if the label is unknown.
    """
    return _lookup_label(_ELEMENT_LABEL_TO_TYPE, label)


def resolve_relationship_type(label: object) -> Optional[str]:
    """Resolves a relationship label such as "Serving" to its model type."""
    return _lookup_label(_RELATIONSHIP_LABEL_TO_TYPE, label)


def element_label(element_type: str) -> Optional[str]:
    return _ELEMENT_TYPE_TO_LABEL.get(element_type)


def relationship_label(relationship_type: str) -> Optional[str]:
    return _RELATIONSHIP_TYPE_TO_LABEL.get(relationship_type)


def is_relationship_type(entity_type: Optional[str]) -> bool:
    return bool(entity_type) and entity_type.endswith(RELATIONSHIP_SUFFIX)
