"""
Mutation API.

The single surface through which panels and menus read and change a
Project. Every mutation takes the current Project and returns the next one;
the input is never modified.

Conditions that are recoverable by design are absorbed here:
- LockedEntity: the edit is ignored and the prior Project is returned.

Structural violations (HierarchyViolation, DuplicateTrigger,
InvalidInteraction, pydantic.ValidationError for malformed patches) propagate
and the caller keeps its prior Project.
"""

import functools
from typing import Any, Callable, Iterable, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr
from pydantic.alias_generators import to_camel

from ..core.logging_config import get_logger
from ..hierarchy import engine, resolve_node
from ..interactions import graph
from ..models import (
    Action,
    AssetType,
    DuplicateTrigger,
    ElementStyle,
    GridConfig,
    Interaction,
    InvalidInteraction,
    LockedEntity,
    NodeKind,
    Project,
    ProjectType,
    Screen,
    validate_props,
)
from ..models.factories import new_asset, now_ms

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Project])

Number = Union[StrictInt, StrictFloat]

# Patches that only touch these keys are allowed on locked entities
LOCK_EXEMPT_FIELDS = frozenset({"locked", "hidden"})


# ============================================================================
# Patch models
# ============================================================================


class Patch(BaseModel):
    """Base for partial updates. Unknown keys are rejected."""

    model_config = ConfigDict(
        extra="forbid", frozen=True, populate_by_name=True, alias_generator=to_camel
    )

    @property
    def changes(self) -> dict[str, Any]:
        """Fields the caller actually set, by attribute name."""
        return {name: getattr(self, name) for name in self.model_fields_set}

    @property
    def lock_exempt(self) -> bool:
        return bool(self.model_fields_set) and self.model_fields_set <= LOCK_EXEMPT_FIELDS


class ElementPatch(Patch):
    name: StrictStr | None = None
    props: dict[str, Any] | None = None
    style: dict[str, Any] | None = None
    x: Number | None = None
    y: Number | None = None
    width: Number | None = Field(default=None, ge=0)
    height: Number | None = Field(default=None, ge=0)
    z_index: StrictInt | None = None
    hidden: StrictBool | None = None
    locked: StrictBool | None = None
    collapsed: StrictBool | None = None
    interactions: list[Any] | None = None


class ScreenPatch(Patch):
    name: StrictStr | None = None
    background_color: StrictStr | None = None
    viewport_width: StrictInt | None = Field(default=None, gt=0)
    viewport_height: StrictInt | None = Field(default=None, gt=0)
    grid_config: dict[str, Any] | None = None
    hidden: StrictBool | None = None
    locked: StrictBool | None = None


class ScreenGroupPatch(Patch):
    name: StrictStr | None = None
    hidden: StrictBool | None = None
    locked: StrictBool | None = None
    collapsed: StrictBool | None = None


class ProjectPatch(Patch):
    name: StrictStr | None = None
    description: StrictStr | None = None
    project_type: ProjectType | None = None
    tags: list[StrictStr] | None = None
    icon: StrictStr | None = None
    viewport_width: StrictInt | None = Field(default=None, gt=0)
    viewport_height: StrictInt | None = Field(default=None, gt=0)
    grid_config: dict[str, Any] | None = None


# ============================================================================
# Mutation wrapper
# ============================================================================


def touch(before: Project, after: Project) -> Project:
    """Stamp last_modified on a changed project."""
    if after is before or after == before:
        return before
    return after.model_copy(update={"last_modified": max(now_ms(), before.last_modified + 1)})


def mutation(func: F) -> F:
    """
    Mark a function as a Project -> Project mutation.

    Absorbs LockedEntity (returning the prior project) and stamps
    last_modified when the project changed. The undecorated function stays
    reachable as __wrapped__ for callers that report absorbed conditions
    themselves.
    """

    @functools.wraps(func)
    def wrapper(project: Project, *args: Any, **kwargs: Any) -> Project:
        try:
            result = func(project, *args, **kwargs)
        except LockedEntity as e:
            logger.info("locked_entity_ignored", mutation=func.__name__, entity_id=e.entity_id)
            return project
        return touch(project, result)

    return wrapper  # type: ignore[return-value]


def _first(result: Union[Project, tuple]) -> Project:
    return result[0] if isinstance(result, tuple) else result


# ============================================================================
# Reads
# ============================================================================


def get_active_screen(project: Project) -> Screen | None:
    """The screen currently shown in the editor."""
    return project.active_screen


# ============================================================================
# Property edits
# ============================================================================


def _merge_grid(current: GridConfig | None, changes: dict[str, Any]) -> GridConfig:
    base = current.model_dump() if current is not None else {}
    overrides = GridConfig.model_validate(changes).model_dump(exclude_unset=True)
    return GridConfig.model_validate({**base, **overrides})


def _validated_interactions(project: Project, element_id: str, raw: list[Any]) -> list[Interaction]:
    """
    Raises:
        DuplicateTrigger: Two bindings share a trigger
        InvalidInteraction: A navigate binding targets an unknown screen
    """
    interactions = [Interaction.model_validate(i) for i in raw]
    seen: set[str] = set()
    for interaction in interactions:
        if interaction.trigger in seen:
            raise DuplicateTrigger(element_id, interaction.trigger)
        seen.add(interaction.trigger)
        if (
            interaction.action == Action.NAVIGATE
            and interaction.payload is not None
            and project.screen(interaction.payload) is None
        ):
            raise InvalidInteraction(f"Navigate target {interaction.payload!r} is not a screen")
    return interactions


@mutation
def update_element(
    project: Project, screen_id: str, element_id: str, patch: ElementPatch | dict[str, Any]
) -> Project:
    """
    Patch an element. props and style merge shallowly into the current maps.

    Ignored when the element or its screen is locked, unless the patch only
    changes locked/hidden.
    """
    patch = ElementPatch.model_validate(patch)
    screen = project.screen(screen_id)
    element = screen.element(element_id) if screen is not None else None
    if element is None:
        logger.debug("element_not_found", screen_id=screen_id, element_id=element_id)
        return project

    if not patch.lock_exempt:
        graph.ensure_editable(screen, element)

    changes = patch.changes
    if "props" in changes:
        props = {**element.props, **(changes["props"] or {})}
        changes["props"] = validate_props(element.type, props)
    if "style" in changes:
        overrides = ElementStyle.model_validate(changes["style"] or {})
        update = {**overrides.model_dump(exclude_unset=True), **(overrides.model_extra or {})}
        changes["style"] = element.style.model_copy(update=update)
    if "interactions" in changes:
        changes["interactions"] = _validated_interactions(
            project, element_id, changes["interactions"] or []
        )
    for key in ("x", "y", "width", "height"):
        if changes.get(key) is not None:
            changes[key] = float(changes[key])

    changes = {k: v for k, v in changes.items() if v is not None}
    updated = element.model_copy(update=changes)
    elements = [updated if e.id == element_id else e for e in screen.elements]
    return project.with_screen(screen.with_elements(elements))


@mutation
def update_screen(project: Project, screen_id: str, patch: ScreenPatch | dict[str, Any]) -> Project:
    """Patch a screen. Ignored on a locked screen unless only locked/hidden change."""
    patch = ScreenPatch.model_validate(patch)
    screen = project.screen(screen_id)
    if screen is None:
        logger.debug("screen_not_found", screen_id=screen_id)
        return project
    if screen.locked and not patch.lock_exempt:
        raise LockedEntity(screen.id)

    changes = patch.changes
    if changes.get("grid_config") is not None:
        changes["grid_config"] = _merge_grid(screen.grid_config, changes["grid_config"])
    # Explicit None on viewport/grid resets the screen to the project default
    for key in ("name", "background_color", "hidden", "locked"):
        if key in changes and changes[key] is None:
            del changes[key]
    return project.with_screen(screen.model_copy(update=changes))


@mutation
def update_screen_group(
    project: Project, group_id: str, patch: ScreenGroupPatch | dict[str, Any]
) -> Project:
    patch = ScreenGroupPatch.model_validate(patch)
    group = project.screen_group(group_id)
    if group is None:
        logger.debug("screen_group_not_found", group_id=group_id)
        return project

    changes = {k: v for k, v in patch.changes.items() if v is not None}
    groups = [g.model_copy(update=changes) if g.id == group_id else g for g in project.screen_groups]
    return project.model_copy(update={"screen_groups": groups})


@mutation
def update_project(project: Project, patch: ProjectPatch | dict[str, Any]) -> Project:
    """Patch project-level settings."""
    patch = ProjectPatch.model_validate(patch)
    changes = patch.changes
    if changes.get("grid_config") is not None:
        changes["grid_config"] = _merge_grid(project.grid_config, changes["grid_config"])
    if changes.get("project_type") is not None:
        changes["project_type"] = ProjectType(changes["project_type"]).value

    nullable = ("project_type", "icon")
    changes = {k: v for k, v in changes.items() if v is not None or k in nullable}
    return project.model_copy(update=changes)


# ============================================================================
# Structure
# ============================================================================


@mutation
def group_elements(project: Project, screen_id: str, element_ids: Iterable[str]) -> Project:
    """Wrap at least two elements of one screen in a new group."""
    return _first(engine.group_elements(project, screen_id, element_ids))


@mutation
def group_screens(project: Project, screen_ids: Iterable[str]) -> Project:
    """Put at least two screens in a new screen group."""
    return _first(engine.group_screens(project, screen_ids))


@mutation
def delete_elements(project: Project, element_ids: Iterable[str]) -> Project:
    return engine.delete_elements(project, element_ids)


@mutation
def delete_screens(project: Project, screen_ids: Iterable[str]) -> Project:
    return engine.delete_screens(project, screen_ids)


@mutation
def delete_screen_group(project: Project, group_ids: Iterable[str]) -> Project:
    """Delete screen groups, detaching their children to the group's parent."""
    return engine.delete_screen_groups(project, group_ids)


@mutation
def move_to_root(project: Project, kind: NodeKind | str, ids: Iterable[str]) -> Project:
    return engine.move_to_root(project, kind, ids)


def _ensure_movable(project: Project, node_id: str) -> None:
    """
    Raises:
        LockedEntity: The node is locked, or it is an element on a locked screen
    """
    located = resolve_node(project, node_id)
    if located is None:
        return
    kind, screen = located
    if kind == NodeKind.ELEMENT:
        graph.ensure_editable(screen, screen.element(node_id))
        return
    node = project.screen(node_id) if kind == NodeKind.SCREEN else project.screen_group(node_id)
    if node.locked:
        raise LockedEntity(node_id)


@mutation
def reparent(project: Project, node_id: str, new_parent_id: str | None) -> Project:
    """Move a node under a new parent; locked nodes stay where they are."""
    _ensure_movable(project, node_id)
    return engine.reparent(project, node_id, new_parent_id)


@mutation
def move_element(
    project: Project, screen_id: str, element_id: str, target_id: str | None = None
) -> Project:
    _ensure_movable(project, element_id)
    return engine.move_element(project, screen_id, element_id, target_id)


ungroup_elements = mutation(engine.ungroup_elements)
ungroup_screen_groups = mutation(engine.ungroup_screen_groups)
toggle_locked = mutation(engine.toggle_locked)
toggle_hidden = mutation(engine.toggle_hidden)
set_active_screen = mutation(engine.set_active_screen)


@mutation
def add_screen(project: Project, name: str | None = None, group_id: str | None = None) -> Project:
    return _first(engine.add_screen(project, name, group_id))


@mutation
def add_screen_group(project: Project, name: str = "New Group", parent_id: str | None = None) -> Project:
    return _first(engine.add_screen_group(project, name, parent_id))


@mutation
def add_element(
    project: Project, screen_id: str, tool: str, parent_id: str | None = None
) -> Project:
    """Place a new element; ignored on a locked screen."""
    screen = project.screen(screen_id)
    if screen is not None and screen.locked:
        raise LockedEntity(screen_id)
    return _first(engine.add_element(project, screen_id, tool, parent_id))


@mutation
def duplicate_element(project: Project, screen_id: str, element_id: str) -> Project:
    return _first(engine.duplicate_element(project, screen_id, element_id))


@mutation
def duplicate_screens(project: Project, screen_ids: Iterable[str]) -> Project:
    return _first(engine.duplicate_screens(project, screen_ids))


# ============================================================================
# Interactions
# ============================================================================

add_interaction = mutation(graph.add_interaction)
update_interaction = mutation(graph.update_interaction)
remove_interaction = mutation(graph.remove_interaction)


# ============================================================================
# Assets
# ============================================================================


@mutation
def add_asset(project: Project, name: str, asset_type: AssetType | str, src: str) -> Project:
    asset = new_asset(name, AssetType(asset_type), src)
    return project.model_copy(update={"assets": [*project.assets, asset]})


@mutation
def remove_asset(project: Project, asset_id: str) -> Project:
    assets = [a for a in project.assets if a.id != asset_id]
    if len(assets) == len(project.assets):
        return project
    return project.model_copy(update={"assets": assets})
