"""Trigger -> action -> payload bindings on canvas elements."""

from ..core.logging_config import get_logger
from ..models import (
    Action,
    CanvasElement,
    DuplicateTrigger,
    Interaction,
    InvalidInteraction,
    LockedEntity,
    Project,
    Screen,
    Trigger,
)
from ..models.factories import new_interaction

logger = get_logger(__name__)

INTERACTION_FIELDS = ("trigger", "action", "payload")


def default_navigate_target(project: Project, source_screen_id: str | None) -> str | None:
    """A screen other than the source when one exists, else the first screen."""
    for screen in project.screens:
        if screen.id != source_screen_id:
            return screen.id
    return project.screens[0].id if project.screens else None


def default_payload(project: Project, action: str, source_screen_id: str | None) -> str | None:
    """Payload a freshly chosen action starts with."""
    if action == Action.NAVIGATE:
        return default_navigate_target(project, source_screen_id)
    if action in (Action.ALERT, Action.URL):
        return ""
    return None


def ensure_editable(screen: Screen, element: CanvasElement) -> None:
    """
    Raises:
        LockedEntity: If the element or its screen is locked
    """
    if screen.locked:
        raise LockedEntity(screen.id)
    if element.locked:
        raise LockedEntity(element.id)


def _with_interactions(
    project: Project, screen: Screen, element: CanvasElement, interactions: list[Interaction]
) -> Project:
    updated = element.model_copy(update={"interactions": interactions})
    elements = [updated if e.id == element.id else e for e in screen.elements]
    return project.with_screen(screen.with_elements(elements))


def add_interaction(
    project: Project, element_id: str, trigger: str = Trigger.ON_CLICK
) -> Project:
    """
    Bind a new interaction to an element.

    The binding starts as a navigate action targeting another screen.

    Raises:
        InvalidInteraction: Unknown element or trigger
        DuplicateTrigger: The element already has a binding for the trigger
        LockedEntity: The element or its screen is locked
    """
    located = project.locate_element(element_id)
    if located is None:
        raise InvalidInteraction(f"Unknown element {element_id}")
    screen, element = located
    ensure_editable(screen, element)

    try:
        trigger = Trigger(trigger)
    except ValueError as e:
        raise InvalidInteraction(f"Unknown trigger {trigger!r}") from e

    if element.interaction_for(trigger) is not None:
        logger.info("duplicate_trigger_rejected", element_id=element_id, trigger=trigger.value)
        raise DuplicateTrigger(element_id, trigger.value)

    interaction = new_interaction(
        Action.NAVIGATE, default_navigate_target(project, screen.id), trigger
    )
    logger.debug("interaction_added", element_id=element_id, interaction_id=interaction.id)
    return _with_interactions(project, screen, element, [*element.interactions, interaction])


def update_interaction(project: Project, interaction_id: str, field: str, value: str | None) -> Project:
    """
    Change one field of an interaction.

    Changing the action resets the payload, since a payload's meaning does not
    carry across action kinds.

    Raises:
        InvalidInteraction: Unknown interaction, field, action or payload
        DuplicateTrigger: Trigger change collides with another binding
        LockedEntity: The element or its screen is locked
    """
    located = project.locate_interaction(interaction_id)
    if located is None:
        raise InvalidInteraction(f"Unknown interaction {interaction_id}")
    screen, element, interaction = located
    ensure_editable(screen, element)

    if field == "action":
        try:
            action = Action(value)
        except ValueError as e:
            raise InvalidInteraction(f"Unknown action {value!r}") from e
        if action == interaction.action:
            return project
        changes = {"action": action.value, "payload": default_payload(project, action, screen.id)}

    elif field == "payload":
        if interaction.action == Action.NAVIGATE:
            if value is not None and project.screen(value) is None:
                raise InvalidInteraction(f"Navigate target {value!r} is not a screen")
        elif interaction.action in (Action.BACK, Action.NONE):
            if value is not None:
                raise InvalidInteraction(f"{interaction.action} interactions take no payload")
        elif not isinstance(value, str):
            raise InvalidInteraction(f"{interaction.action} payload must be text")
        changes = {"payload": value}

    elif field == "trigger":
        try:
            trigger = Trigger(value)
        except ValueError as e:
            raise InvalidInteraction(f"Unknown trigger {value!r}") from e
        if trigger == interaction.trigger:
            return project
        if element.interaction_for(trigger) is not None:
            raise DuplicateTrigger(element.id, trigger.value)
        changes = {"trigger": trigger.value}

    else:
        raise InvalidInteraction(f"Unknown interaction field {field!r}")

    updated = interaction.model_copy(update=changes)
    interactions = [updated if i.id == interaction_id else i for i in element.interactions]
    return _with_interactions(project, screen, element, interactions)


def remove_interaction(project: Project, interaction_id: str) -> Project:
    """Remove an interaction; unknown ids are a no-op."""
    located = project.locate_interaction(interaction_id)
    if located is None:
        logger.debug("interaction_not_found", interaction_id=interaction_id)
        return project
    screen, element, _ = located
    ensure_editable(screen, element)

    interactions = [i for i in element.interactions if i.id != interaction_id]
    return _with_interactions(project, screen, element, interactions)


def clear_navigation_targets(project: Project, screen_ids: set[str]) -> Project:
    """
    Unset navigate payloads that point at any of the given screens.

    Called after screens are deleted so no interaction keeps a reference to a
    screen that no longer exists.
    """
    cleared = 0
    screens = []

    for screen in project.screens:
        elements = []
        changed = False
        for element in screen.elements:
            interactions = []
            for interaction in element.interactions:
                if interaction.action == Action.NAVIGATE and interaction.payload in screen_ids:
                    interaction = interaction.model_copy(update={"payload": None})
                    cleared += 1
                    changed = True
                interactions.append(interaction)
            if interactions != element.interactions:
                element = element.model_copy(update={"interactions": interactions})
            elements.append(element)
        screens.append(screen.with_elements(elements) if changed else screen)

    if not cleared:
        return project

    logger.info("navigation_targets_cleared", count=cleared, screens=sorted(screen_ids))
    return project.model_copy(update={"screens": screens})
