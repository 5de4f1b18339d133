"""
Selection & Bulk-Action Resolver.

Decides which single action surface applies to a selection. Surfaces are
mutually exclusive and checked as a ranked rule list, first match wins:

    1. >= 2 elements          -> BULK_ELEMENTS
    2. exactly 1 element      -> ELEMENT
    3. >= 2 screens           -> BULK_SCREENS
    4. exactly 1 screen       -> SCREEN
    5. exactly 1 screen group -> SCREEN_GROUP
    6. context is "project"   -> PROJECT
    7. anything else          -> ACTIVE_SCREEN

Bulk deletes are irreversible, so they go through a two-phase flow:
request_delete() hands out a PendingDelete intent and confirm() executes it
exactly once.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from pydantic import BaseModel, ConfigDict, field_validator

from ..core.id import generate_raw
from ..core.logging_config import get_logger
from ..hierarchy import delete_elements, delete_screens, group_elements, move_to_root
from ..models import ConfirmationRequired, HierarchyViolation, NavigationContext, NodeKind, Project

logger = get_logger(__name__)

MAX_PENDING = 16


class Surface(str, Enum):
    """Action surface presented for a selection."""

    BULK_ELEMENTS = "bulk_elements"
    ELEMENT = "element"
    BULK_SCREENS = "bulk_screens"
    SCREEN = "screen"
    SCREEN_GROUP = "screen_group"
    PROJECT = "project"
    ACTIVE_SCREEN = "active_screen"


class BulkAction(str, Enum):
    """Operations applied uniformly to a multi-entity selection."""

    GROUP = "group"
    DELETE = "delete"
    EXPORT = "export"
    MOVE_TO_ROOT = "move_to_root"


class Selection(BaseModel):
    """Currently selected ids, per kind. Duplicates collapse, order is kept."""

    model_config = ConfigDict(frozen=True)

    element_ids: tuple[str, ...] = ()
    screen_ids: tuple[str, ...] = ()
    screen_group_ids: tuple[str, ...] = ()

    @field_validator("element_ids", "screen_ids", "screen_group_ids", mode="before")
    @classmethod
    def dedupe(cls, v):
        return tuple(dict.fromkeys(v or ()))

    @property
    def is_empty(self) -> bool:
        return not (self.element_ids or self.screen_ids or self.screen_group_ids)


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a selection."""

    surface: Surface
    target_ids: tuple[str, ...]
    actions: tuple[BulkAction, ...] = ()

    @property
    def kind(self) -> NodeKind | None:
        return _SURFACE_KINDS.get(self.surface)


@dataclass(frozen=True)
class ExportRequest:
    """Hand-off to the external exporter."""

    type: str  # "layer" | "screen"
    target_ids: tuple[str, ...]
    project_id: str


@dataclass(frozen=True)
class PendingDelete:
    """Confirmable description of an irreversible bulk delete."""

    token: str
    project_id: str
    kind: NodeKind
    target_ids: tuple[str, ...]
    # Elements whose parent disappears and that will move to the root
    promoted_ids: tuple[str, ...] = ()

    @property
    def summary(self) -> str:
        noun = "element" if self.kind == NodeKind.ELEMENT else "screen"
        plural = "" if len(self.target_ids) == 1 else "s"
        return f"Delete {len(self.target_ids)} {noun}{plural}"


@dataclass(frozen=True)
class Outcome:
    """Result of a bulk action: the next project and the selection that follows it."""

    project: Project
    selection: Selection
    export: ExportRequest | None = None


# ============================================================================
# Rules
# ============================================================================

Predicate = Callable[[Selection, NavigationContext], bool]
Targets = Callable[[Project, Selection], tuple[str, ...]]


@dataclass(frozen=True)
class Rule:
    surface: Surface
    matches: Predicate
    targets: Targets
    actions: tuple[BulkAction, ...] = field(default_factory=tuple)


ELEMENT_BULK_ACTIONS = (
    BulkAction.GROUP,
    BulkAction.DELETE,
    BulkAction.EXPORT,
    BulkAction.MOVE_TO_ROOT,
)
SCREEN_BULK_ACTIONS = (BulkAction.DELETE, BulkAction.EXPORT, BulkAction.MOVE_TO_ROOT)

RULES: tuple[Rule, ...] = (
    Rule(
        Surface.BULK_ELEMENTS,
        lambda s, c: len(s.element_ids) >= 2,
        lambda p, s: s.element_ids,
        ELEMENT_BULK_ACTIONS,
    ),
    Rule(Surface.ELEMENT, lambda s, c: len(s.element_ids) == 1, lambda p, s: s.element_ids),
    Rule(
        Surface.BULK_SCREENS,
        lambda s, c: len(s.screen_ids) >= 2,
        lambda p, s: s.screen_ids,
        SCREEN_BULK_ACTIONS,
    ),
    Rule(Surface.SCREEN, lambda s, c: len(s.screen_ids) == 1, lambda p, s: s.screen_ids),
    Rule(
        Surface.SCREEN_GROUP,
        lambda s, c: len(s.screen_group_ids) == 1,
        lambda p, s: s.screen_group_ids,
    ),
    Rule(Surface.PROJECT, lambda s, c: c == NavigationContext.PROJECT, lambda p, s: (p.id,)),
    Rule(Surface.ACTIVE_SCREEN, lambda s, c: True, lambda p, s: (p.active_screen_id,)),
)

_SURFACE_KINDS = {
    Surface.BULK_ELEMENTS: NodeKind.ELEMENT,
    Surface.ELEMENT: NodeKind.ELEMENT,
    Surface.BULK_SCREENS: NodeKind.SCREEN,
    Surface.SCREEN: NodeKind.SCREEN,
    Surface.ACTIVE_SCREEN: NodeKind.SCREEN,
    Surface.SCREEN_GROUP: NodeKind.SCREEN_GROUP,
}


# ============================================================================
# Resolver
# ============================================================================


class BulkActionResolver:
    """Resolves selections and applies bulk actions to them."""

    def __init__(self, rules: tuple[Rule, ...] = RULES) -> None:
        self.rules = rules
        self._pending: dict[str, PendingDelete] = {}

    def resolve(
        self,
        project: Project,
        selection: Selection,
        context: NavigationContext | str = NavigationContext.CANVAS,
    ) -> Resolution:
        context = NavigationContext(context)
        for rule in self.rules:
            if rule.matches(selection, context):
                return Resolution(rule.surface, rule.targets(project, selection), rule.actions)
        # The last rule always matches; only a custom rule list can get here
        raise LookupError("No selection rule matched")

    def _require(self, resolution: Resolution, action: BulkAction) -> None:
        if action not in resolution.actions:
            raise HierarchyViolation(
                f"{action.value} is not available for {resolution.surface.value}"
            )

    def apply(
        self, project: Project, resolution: Resolution, action: BulkAction | str
    ) -> Outcome:
        """
        Perform a non-destructive bulk action.

        Raises:
            ConfirmationRequired: For DELETE (use request_delete / confirm)
            HierarchyViolation: Action not offered by the surface, or rejected
        """
        action = BulkAction(action)
        self._require(resolution, action)
        ids = resolution.target_ids

        if action == BulkAction.DELETE:
            raise ConfirmationRequired("Bulk delete must be confirmed")

        if action == BulkAction.EXPORT:
            export_type = "layer" if resolution.kind == NodeKind.ELEMENT else "screen"
            request = ExportRequest(export_type, ids, project.id)
            logger.info("export_requested", type=export_type, count=len(ids))
            return Outcome(project, _selection_of(resolution.kind, ids), request)

        if action == BulkAction.GROUP:
            located = project.locate_element(ids[0])
            if located is None:
                raise HierarchyViolation(f"Unknown element {ids[0]}", ids[0])
            result, group_id = group_elements(project, located[0].id, ids)
            return Outcome(result, Selection(element_ids=(group_id,)))

        result = move_to_root(project, resolution.kind, ids)
        return Outcome(result, _selection_of(resolution.kind, ids))

    def request_delete(self, project: Project, resolution: Resolution) -> PendingDelete:
        """Describe a bulk delete and register it for confirmation."""
        self._require(resolution, BulkAction.DELETE)
        ids = resolution.target_ids
        promoted: tuple[str, ...] = ()

        if resolution.kind == NodeKind.ELEMENT:
            doomed = set(ids)
            children = []
            for element_id in ids:
                located = project.locate_element(element_id)
                if located is not None:
                    children.extend(
                        c.id for c in located[0].children(element_id) if c.id not in doomed
                    )
            promoted = tuple(dict.fromkeys(children))

        intent = PendingDelete(generate_raw(), project.id, resolution.kind, ids, promoted)
        self._pending[intent.token] = intent
        while len(self._pending) > MAX_PENDING:
            # Oldest intents expire first
            self._pending.pop(next(iter(self._pending)))
        logger.info("delete_requested", token=intent.token, kind=intent.kind.value, count=len(ids))
        return intent

    def confirm(self, project: Project, intent: PendingDelete) -> Outcome:
        """
        Execute a pending delete. Each intent can be confirmed once.

        Raises:
            ConfirmationRequired: Unknown, already used, or foreign intent
        """
        pending = self._pending.get(intent.token)
        if pending is None:
            raise ConfirmationRequired("Delete intent is unknown or was already used")
        if pending.project_id != project.id:
            raise ConfirmationRequired("Delete intent belongs to another project")
        del self._pending[intent.token]

        if pending.kind == NodeKind.ELEMENT:
            result = delete_elements(project, pending.target_ids)
        else:
            result = delete_screens(project, pending.target_ids)

        logger.info("delete_confirmed", token=pending.token, count=len(pending.target_ids))
        return Outcome(result, Selection())

    def cancel(self, intent: PendingDelete) -> bool:
        """Drop a pending delete; True if it was still pending."""
        return self._pending.pop(intent.token, None) is not None

    @property
    def pending(self) -> list[PendingDelete]:
        return list(self._pending.values())


def _selection_of(kind: NodeKind | None, ids: tuple[str, ...]) -> Selection:
    if kind == NodeKind.ELEMENT:
        return Selection(element_ids=ids)
    if kind == NodeKind.SCREEN:
        return Selection(screen_ids=ids)
    return Selection()


