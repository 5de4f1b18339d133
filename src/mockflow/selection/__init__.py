"""Selection resolution and bulk actions."""

from .resolver import (
    BulkAction,
    BulkActionResolver,
    ExportRequest,
    Outcome,
    PendingDelete,
    Resolution,
    Rule,
    RULES,
    Selection,
    Surface,
)

__all__ = [
    "BulkAction",
    "BulkActionResolver",
    "ExportRequest",
    "Outcome",
    "PendingDelete",
    "Resolution",
    "Rule",
    "RULES",
    "Selection",
    "Surface",
]
