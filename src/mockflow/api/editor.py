"""
Editor session.

Holds the current Project snapshot together with the selection and the
navigation context, applies mutations in invocation order, and publishes
every new snapshot to subscribers. Absorbed conditions are kept as inline
status entries instead of being raised.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from ..core.logging_config import get_logger, project_context
from ..hierarchy import engine
from ..models import LockedEntity, NavigationContext, Project
from ..selection import BulkAction, BulkActionResolver, Outcome, PendingDelete, Resolution, Selection
from .mutations import touch

if TYPE_CHECKING:
    from ..storage.store import ProjectStore

logger = get_logger(__name__)

Subscriber = Callable[[Project], None]

MAX_STATUSES = 50


@dataclass(frozen=True)
class Status:
    """Inline status entry for an absorbed condition."""

    mutation: str
    entity_id: str | None
    message: str


@dataclass
class Editor:
    """Single-writer session over one Project."""

    project: Project
    selection: Selection = field(default_factory=Selection)
    context: NavigationContext = NavigationContext.CANVAS
    resolver: BulkActionResolver = field(default_factory=BulkActionResolver)
    store: "ProjectStore | None" = None
    autosave: bool = False
    statuses: list[Status] = field(default_factory=list)
    _subscribers: list[Subscriber] = field(default_factory=list, repr=False)

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a snapshot listener; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, project: Project) -> Project:
        if project is self.project:
            return project

        self.project = project
        self._prune_selection()
        for callback in list(self._subscribers):
            callback(project)

        if self.autosave and self.store is not None:
            self.store.save(project)
        return project

    def _prune_selection(self) -> None:
        """Drop selected ids that no longer exist."""
        project = self.project
        current = self.selection
        selection = Selection(
            element_ids=[i for i in current.element_ids if project.locate_element(i) is not None],
            screen_ids=[i for i in current.screen_ids if project.screen(i) is not None],
            screen_group_ids=[
                i for i in current.screen_group_ids if project.screen_group(i) is not None
            ],
        )
        if selection != self.selection:
            self.selection = selection

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def dispatch(self, mutation: Callable[..., Any], *args: Any, **kwargs: Any) -> Project:
        """
        Apply a mutation to the current snapshot.

        Returns:
            The snapshot after the mutation (unchanged if it was absorbed)

        Raises:
            Structural violations from the mutation; the snapshot is kept
        """
        func = getattr(mutation, "__wrapped__", mutation)
        name = getattr(func, "__name__", repr(func))

        with project_context(self.project.id, mutation=name):
            try:
                result = func(self.project, *args, **kwargs)
            except LockedEntity as e:
                self.statuses.append(Status(name, e.entity_id, str(e)))
                del self.statuses[:-MAX_STATUSES]
                logger.info("mutation_absorbed", entity_id=e.entity_id)
                return self.project

        if isinstance(result, tuple):
            result = result[0]
        return self._publish(touch(self.project, result))

    def select(
        self,
        element_ids: tuple[str, ...] = (),
        screen_ids: tuple[str, ...] = (),
        screen_group_ids: tuple[str, ...] = (),
    ) -> Selection:
        self.selection = Selection(
            element_ids=element_ids, screen_ids=screen_ids, screen_group_ids=screen_group_ids
        )
        return self.selection

    def navigate_to(self, context: NavigationContext | str) -> None:
        self.context = NavigationContext(context)

    def group_selected_elements(self) -> str:
        """Group the selected elements; the new group becomes the selection."""
        ids = self.selection.element_ids
        located = self.project.locate_element(ids[0]) if ids else None
        screen_id = located[0].id if located else self.project.active_screen_id

        result, group_id = engine.group_elements(self.project, screen_id, ids)
        self._publish(touch(self.project, result))
        self.selection = Selection(element_ids=(group_id,))
        return group_id

    def duplicate_selected_element(self) -> str | None:
        """Duplicate the single selected element and select the copy."""
        if len(self.selection.element_ids) != 1:
            return None
        located = self.project.locate_element(self.selection.element_ids[0])
        if located is None:
            return None

        result, copy_id = engine.duplicate_element(self.project, located[0].id, located[1].id)
        self._publish(touch(self.project, result))
        self.selection = Selection(element_ids=(copy_id,))
        return copy_id

    # ------------------------------------------------------------------
    # Selection surface
    # ------------------------------------------------------------------

    def resolve(self) -> Resolution:
        return self.resolver.resolve(self.project, self.selection, self.context)

    def apply(self, action: BulkAction | str) -> Outcome:
        outcome = self.resolver.apply(self.project, self.resolve(), action)
        self._publish(touch(self.project, outcome.project))
        self.selection = outcome.selection
        return outcome

    def request_delete(self) -> PendingDelete:
        return self.resolver.request_delete(self.project, self.resolve())

    def confirm(self, intent: PendingDelete) -> Project:
        outcome = self.resolver.confirm(self.project, intent)
        self.selection = outcome.selection
        return self._publish(touch(self.project, outcome.project))

    def cancel(self, intent: PendingDelete) -> bool:
        return self.resolver.cancel(intent)
