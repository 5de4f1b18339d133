"""Document engine errors.

Structural violations are raised and abort the mutation. LockedEntity and
EmptyProjectGuard are raised internally and absorbed before they reach a
caller of the mutation API.
"""


class MockflowError(Exception):
    """Base class for document engine errors."""

    pass


class HierarchyViolation(MockflowError):
    """Reparent or grouping would break containment invariants."""

    def __init__(self, message: str, node_id: str | None = None) -> None:
        super().__init__(message)
        self.node_id = node_id


class DuplicateTrigger(MockflowError):
    """Element already has an interaction bound to this trigger."""

    def __init__(self, element_id: str, trigger: str) -> None:
        super().__init__(f"Element {element_id} already has an '{trigger}' interaction")
        self.element_id = element_id
        self.trigger = trigger


class InvalidInteraction(MockflowError):
    """Interaction field or payload is not valid for its action."""

    pass


class LockedEntity(MockflowError):
    """Edit attempted on a locked element or screen."""

    def __init__(self, entity_id: str) -> None:
        super().__init__(f"{entity_id} is locked")
        self.entity_id = entity_id


class InvalidImport(MockflowError):
    """Import candidate is not a valid project document."""

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class EmptyProjectGuard(MockflowError):
    """A deletion would leave the project without screens."""

    pass


class ConfirmationRequired(MockflowError):
    """Irreversible bulk delete attempted without a confirmed intent."""

    pass
