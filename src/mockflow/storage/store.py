"""
Project Store.

One JSON document per project plus an index of summaries, so projects can
be listed without loading them. The index is ordered most recently modified
first and holds each project once.
"""

import os
import re
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from ..core.cache import LRUCache
from ..core.config import Settings, get_settings
from ..core.hash import hash_string
from ..core.id import new_project_id
from ..core.json import JSONParseError, decode_json, safe_json_dumps
from ..core.logging_config import get_logger
from ..models import InvalidImport, Project, ProjectSummary
from ..models.factories import now_ms
from .codec import dump_project, load_project

logger = get_logger(__name__)

INDEX_FILE = "index.json"
SAFE_ID = re.compile(r"[A-Za-z0-9_-]+")

_summaries = TypeAdapter(list[ProjectSummary])


def summarize(project: Project) -> ProjectSummary:
    return ProjectSummary(id=project.id, name=project.name, last_modified=project.last_modified)


class ProjectStore:
    """File-backed keyed store of project documents."""

    def __init__(
        self,
        root_dir: Path | str | None = None,
        cache_size: int | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.root = Path(root_dir) if root_dir is not None else settings.storage_dir
        self.root.mkdir(parents=True, exist_ok=True)

        self._cache: LRUCache[Project] = LRUCache(cache_size or settings.store_cache_size)
        self._fingerprints: dict[str, str] = {}
        self._index: list[ProjectSummary] | None = None

    # ------------------------------------------------------------------
    # Paths and files
    # ------------------------------------------------------------------

    def _path(self, project_id: str) -> Path:
        # Imported ids are opaque; unsafe ones are hashed into a file name
        key = project_id if SAFE_ID.fullmatch(project_id) else hash_string(project_id, truncate=16)
        return self.root / f"project_{key}.json"

    def _write(self, path: Path, text: str) -> None:
        tmp = path.with_suffix(".tmp")
        tmp.write_text(text, encoding="utf-8")
        os.replace(tmp, path)

    # ------------------------------------------------------------------
    # Index
    # ------------------------------------------------------------------

    def _read_index(self) -> list[ProjectSummary]:
        if self._index is not None:
            return self._index

        path = self.root / INDEX_FILE
        if not path.exists():
            self._index = []
            return self._index

        try:
            self._index = _summaries.validate_python(decode_json(path.read_bytes()))
        except (JSONParseError, ValidationError) as e:
            logger.warning("index_unreadable", path=str(path), error=str(e))
            self._index = self._rebuild_index()
        return self._index

    def _rebuild_index(self) -> list[ProjectSummary]:
        summaries = []
        for path in self.root.glob("project_*.json"):
            try:
                summaries.append(summarize(load_project(path.read_bytes(), path.name)))
            except InvalidImport:
                logger.warning("document_skipped", path=str(path))
        self._write_index(summaries)
        return self._index

    def _write_index(self, summaries: list[ProjectSummary]) -> None:
        unique = {s.id: s for s in summaries}
        ordered = sorted(unique.values(), key=lambda s: s.last_modified, reverse=True)
        self._index = ordered
        payload = [s.model_dump(by_alias=True) for s in ordered]
        self._write(self.root / INDEX_FILE, safe_json_dumps(payload, indent=2))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def save(self, project: Project) -> bool:
        """
        Persist a project and refresh its index entry.

        Returns:
            True if the document was written, False if it was unchanged
        """
        document = dump_project(project)
        fingerprint = hash_string(document)
        self._cache.set(project.id, project)

        if self._fingerprints.get(project.id) == fingerprint:
            logger.debug("save_skipped", project_id=project.id)
            return False

        self._write(self._path(project.id), document)
        self._fingerprints[project.id] = fingerprint

        summaries = [s for s in self._read_index() if s.id != project.id]
        self._write_index([summarize(project), *summaries])

        logger.info("project_saved", project_id=project.id, size=len(document))
        return True

    def save_many(self, projects: list[Project]) -> int:
        """Save several projects; returns how many were written."""
        return sum(1 for project in projects if self.save(project))

    def load(self, project_id: str) -> Project | None:
        """
        Load a project by id.

        Raises:
            InvalidImport: The stored document is corrupt
        """
        cached = self._cache.get(project_id)
        if cached is not None:
            return cached

        path = self._path(project_id)
        if not path.exists():
            return None

        project = load_project(path.read_bytes(), path.name)
        self._cache.set(project_id, project)
        self._fingerprints[project_id] = hash_string(dump_project(project))
        return project

    def load_latest(self) -> Project | None:
        """The most recently modified project that can still be loaded."""
        for summary in self._read_index():
            try:
                project = self.load(summary.id)
            except InvalidImport:
                logger.warning("document_skipped", project_id=summary.id)
                continue
            if project is not None:
                return project
        return None

    def list_projects(self) -> list[ProjectSummary]:
        return list(self._read_index())

    def delete(self, project_id: str) -> bool:
        """Remove a project and its index entry; True if it existed."""
        path = self._path(project_id)
        existed = path.exists()
        if existed:
            path.unlink()

        self._cache.delete(project_id)
        self._fingerprints.pop(project_id, None)

        summaries = self._read_index()
        if any(s.id == project_id for s in summaries):
            self._write_index([s for s in summaries if s.id != project_id])
            existed = True

        if existed:
            logger.info("project_deleted", project_id=project_id)
        return existed

    def duplicate(self, project_id: str, name: str | None = None) -> Project | None:
        """Save a copy of a stored project under a new id."""
        original = self.load(project_id)
        if original is None:
            return None

        copy = original.model_copy(
            update={
                "id": new_project_id(),
                "name": name or f"{original.name} (Copy)",
                "last_modified": now_ms(),
            }
        )
        self.save(copy)
        return copy

    def __contains__(self, project_id: str) -> bool:
        return project_id in self._cache or self._path(project_id).exists()
