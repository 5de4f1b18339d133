"""Project document codec: Project <-> camelCase JSON document."""

from typing import Any

from pydantic import ValidationError

from ..core.config import get_settings
from ..core.id import new_project_id
from ..core.json import (
    JSONParseError,
    decode_json,
    safe_json_dumps,
    validate_json_depth,
    validate_json_size,
)
from ..core.logging_config import get_logger
from ..hierarchy import find_violations, heal
from ..models import InvalidImport, Project
from ..models.factories import now_ms

logger = get_logger(__name__)


def is_valid_document(obj: Any) -> bool:
    """
    Structural check for a project document.

    Valid iff it is an object with a string `name`, an array `screens`, and
    a `gridConfig` that is an object when present.
    """
    return (
        isinstance(obj, dict)
        and isinstance(obj.get("screens"), list)
        and isinstance(obj.get("name"), str)
        and ("gridConfig" not in obj or isinstance(obj["gridConfig"], dict))
    )


def to_document(project: Project) -> dict[str, Any]:
    """Document form of a project; unset optional fields are omitted."""
    return project.model_dump(mode="json", by_alias=True, exclude_none=True)


def dump_project(project: Project, indent: int = 0) -> str:
    """Serialize a project with a deterministic key order."""
    return safe_json_dumps(to_document(project), sort_keys=True, indent=indent)


def from_document(obj: Any, source: str | None = None) -> Project:
    """
    Build a Project from a decoded document.

    Missing optional fields take their defaults; a missing id or timestamp
    is generated and an empty screen list is healed.

    Raises:
        InvalidImport: Structure or field types are invalid
    """
    if not is_valid_document(obj):
        raise InvalidImport("Invalid project document structure", source)

    document = dict(obj)
    if not isinstance(document.get("id"), str) or not document["id"]:
        document["id"] = new_project_id()
    timestamp = now_ms()
    document.setdefault("createdAt", timestamp)
    document.setdefault("lastModified", timestamp)

    try:
        project = Project.model_validate(document)
    except ValidationError as e:
        logger.warning("document_rejected", source=source, errors=e.error_count())
        raise InvalidImport(f"Invalid project document: {e}", source) from e

    project = heal(project)
    problems = find_violations(project)
    if problems:
        logger.warning("document_inconsistent", source=source, problems=problems)
    return project


def load_project(data: str | bytes, source: str | None = None) -> Project:
    """
    Parse a serialized project document.

    Raises:
        InvalidImport: Oversized, too deep, malformed JSON or invalid document
    """
    settings = get_settings()
    try:
        validate_json_size(data, settings.max_import_size, source or "document")
        obj = decode_json(data)
        validate_json_depth(obj, settings.max_json_depth)
    except JSONParseError as e:
        logger.warning("document_parse_failed", source=source, error=str(e))
        raise InvalidImport(str(e), source) from e

    return from_document(obj, source)
