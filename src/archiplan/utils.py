"""Utility functions for archiplan.

This module provides shared helpers used across the package, such as
checksums, identifier generation and plan file loading.
"""

import hashlib
import json
import uuid
from pathlib import Path
from typing import Any

import yaml


def compute_checksum(data: Any) -> str:
    """Computes a deterministic SHA-256 hash of a JSON-serializable value.

    Args:
        data: The value to hash, typically a dumped model snapshot.

    Returns:
        A hex string representing the checksum.
    """
    # Use sort_keys=True for determinism
    dump = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(dump.encode("utf-8")).hexdigest()


def new_id(prefix: str = "id") -> str:
    """Generates a model identifier such as 'id-3f2a...'."""
    return f"{prefix}-{uuid.uuid4().hex}"


def load_structured_file(file_path: str | Path) -> Any:
    """Loads a JSON or YAML file.

    Files ending in .json are parsed as JSON; anything else is parsed as
    YAML, which also accepts JSON content.

    Args:
        file_path: Path to the file.

    Returns:
        The parsed document.
    """
    path = Path(file_path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def dump_structured_file(file_path: str | Path, data: Any):
    """Writes a document as JSON or YAML depending on the file extension."""
    path = Path(file_path)
    if path.suffix.lower() == ".json":
        text = json.dumps(data, indent=2)
    else:
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    path.write_text(text, encoding="utf-8")
