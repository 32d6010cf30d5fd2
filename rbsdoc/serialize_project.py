"""Conversion of the document model to JSON-compatible data."""

import dataclasses
from datetime import datetime
from enum import Enum
from typing import Any

from rbsdoc.document_model import ProjectDoc


def _plain(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def project_to_dict(project: ProjectDoc) -> dict[str, Any]:
    """Return ``project`` as nested dicts and lists safe for ``json.dumps``."""
    return _plain(project)
