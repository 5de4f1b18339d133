"""Document codec, import and project store."""

from .codec import dump_project, from_document, is_valid_document, load_project, to_document
from .importer import ImportCandidate, accepted_projects, import_file
from .store import ProjectStore, summarize

__all__ = [
    "dump_project",
    "from_document",
    "is_valid_document",
    "load_project",
    "to_document",
    "ImportCandidate",
    "accepted_projects",
    "import_file",
    "ProjectStore",
    "summarize",
]
