"""
Project import.

A .json file is one candidate; a .zip archive yields one candidate per .json
member. Each candidate carries its own Result so a malformed document is
reported next to its siblings instead of aborting the whole import.
"""

import io
import zipfile
from dataclasses import dataclass

from returns.pipeline import is_successful
from returns.result import Failure, Result, Success

from ..core.id import generate_raw, new_project_id
from ..core.logging_config import get_logger
from ..models import InvalidImport, Project
from ..models.factories import now_ms
from .codec import load_project

logger = get_logger(__name__)


@dataclass(frozen=True)
class ImportCandidate:
    """One document found in an uploaded file."""

    id: str
    source: str  # file or archive member name
    result: Result[Project, InvalidImport]

    @property
    def is_valid(self) -> bool:
        return is_successful(self.result)

    @property
    def project(self) -> Project | None:
        return self.result.value_or(None)

    @property
    def error(self) -> InvalidImport | None:
        if self.is_valid:
            return None
        return self.result.failure()

    @property
    def suggested_name(self) -> str:
        project = self.project
        if project is not None and project.name:
            return project.name
        return self.source.rsplit("/", 1)[-1].removesuffix(".json")

    def accept(self, name: str | None = None) -> Project:
        """
        Turn a valid candidate into a new project with its own id.

        Raises:
            InvalidImport: The candidate is not valid
        """
        project = self.project
        if project is None:
            raise self.error or InvalidImport("Candidate has no project", self.source)
        return project.model_copy(
            update={
                "id": new_project_id(),
                "name": name or self.suggested_name,
                "last_modified": now_ms(),
            }
        )


def _candidate(source: str, data: bytes) -> ImportCandidate:
    try:
        result: Result[Project, InvalidImport] = Success(load_project(data, source))
    except InvalidImport as e:
        result = Failure(e)
    return ImportCandidate(generate_raw(), source, result)


def import_file(filename: str, data: bytes) -> list[ImportCandidate]:
    """
    Read import candidates from an uploaded file.

    Args:
        filename: Original file name; the extension selects the format
        data: File contents

    Returns:
        One candidate per document; an unreadable archive or an unsupported
        file type yields a single failed candidate
    """
    lowered = filename.lower()

    if lowered.endswith(".json"):
        candidates = [_candidate(filename, data)]

    elif lowered.endswith(".zip"):
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                candidates = [
                    _candidate(member, archive.read(member))
                    for member in archive.namelist()
                    if member.lower().endswith(".json") and not member.startswith("__MACOSX")
                ]
        except zipfile.BadZipFile as e:
            error = InvalidImport(f"Unreadable archive: {e}", filename)
            candidates = [ImportCandidate(generate_raw(), filename, Failure(error))]

    else:
        error = InvalidImport("Unsupported file type", filename)
        candidates = [ImportCandidate(generate_raw(), filename, Failure(error))]

    valid = sum(1 for c in candidates if c.is_valid)
    logger.info("import_scanned", filename=filename, valid=valid, invalid=len(candidates) - valid)
    return candidates


def accepted_projects(candidates: list[ImportCandidate]) -> list[Project]:
    """New projects for every valid candidate, in order."""
    return [c.accept() for c in candidates if c.is_valid]
