"""Hierarchy Engine - containment-preserving mutations.

Every function takes a Project and returns the next Project. Validation runs
before anything is copied, so a rejected mutation raises HierarchyViolation
and the caller keeps the Project it passed in.

Policies:
- Deleting an element promotes its surviving children to the screen root.
- Deleting or ungrouping a container hands its children to the container's
  own parent (one level removed).
- Deleting screens never empties a project; a "Home" screen is synthesized.
- Navigate interactions aimed at a deleted screen have their payload unset.
"""

from typing import Iterable

from ..core.id import new_element_id, new_interaction_id, new_screen_id
from ..core.logging_config import get_logger
from ..interactions.graph import clear_navigation_targets
from ..models import (
    CanvasElement,
    EmptyProjectGuard,
    HierarchyViolation,
    NodeKind,
    Project,
    Screen,
    ScreenGroup,
)
from ..models.factories import home_screen, new_element, new_group_element, new_screen, new_screen_group
from .tree import element_ancestors, element_descendants, group_ancestors, resolve_node

logger = get_logger(__name__)


def _unique(ids: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(ids))


def _require_screen(project: Project, screen_id: str) -> Screen:
    screen = project.screen(screen_id)
    if screen is None:
        raise HierarchyViolation(f"Unknown screen {screen_id}", screen_id)
    return screen


def _require_element(screen: Screen, element_id: str) -> CanvasElement:
    element = screen.element(element_id)
    if element is None:
        raise HierarchyViolation(
            f"Element {element_id} is not on screen {screen.id}", element_id
        )
    return element


def _require_group(project: Project, group_id: str) -> ScreenGroup:
    group = project.screen_group(group_id)
    if group is None:
        raise HierarchyViolation(f"Unknown screen group {group_id}", group_id)
    return group


def _renumber(elements: list[CanvasElement]) -> list[CanvasElement]:
    """Assign z-indexes 1..n in list order."""
    return [
        e if e.z_index == index else e.model_copy(update={"z_index": index})
        for index, e in enumerate(elements, start=1)
    ]


# ============================================================================
# Reparent
# ============================================================================


def _check_element_parent(screen: Screen, element_id: str, parent_id: str | None) -> None:
    if parent_id is None:
        return
    if parent_id == element_id:
        raise HierarchyViolation(f"Element {element_id} cannot contain itself", element_id)
    if screen.element(parent_id) is None:
        raise HierarchyViolation(
            f"Parent {parent_id} is not an element on screen {screen.id}", element_id
        )
    if element_id in element_ancestors(screen, parent_id):
        raise HierarchyViolation(
            f"Moving {element_id} under {parent_id} would create a cycle", element_id
        )


def _check_group_parent(project: Project, group_id: str, parent_id: str | None) -> None:
    if parent_id is None:
        return
    if parent_id == group_id:
        raise HierarchyViolation(f"Group {group_id} cannot contain itself", group_id)
    if project.screen_group(parent_id) is None:
        raise HierarchyViolation(f"Parent {parent_id} is not a screen group", group_id)
    if group_id in group_ancestors(project, parent_id):
        raise HierarchyViolation(
            f"Moving {group_id} under {parent_id} would create a cycle", group_id
        )


def reparent(project: Project, node_id: str, new_parent_id: str | None) -> Project:
    """
    Move an element, screen or screen group under a new parent (None = root).

    Elements reparent within their own screen; screens and groups reparent
    to screen groups of the same project. z-index and position are kept.

    Raises:
        HierarchyViolation: Unknown node, cross-scope parent, self-parent or cycle
    """
    located = resolve_node(project, node_id)
    if located is None:
        raise HierarchyViolation(f"Unknown node {node_id}", node_id)
    kind, screen = located

    if kind == NodeKind.ELEMENT:
        _check_element_parent(screen, node_id, new_parent_id)
        elements = [
            e.model_copy(update={"parent_id": new_parent_id}) if e.id == node_id else e
            for e in screen.elements
        ]
        result = project.with_screen(screen.with_elements(elements))

    elif kind == NodeKind.SCREEN:
        if new_parent_id is not None and project.screen_group(new_parent_id) is None:
            raise HierarchyViolation(
                f"Screen {node_id} can only be placed in a screen group", node_id
            )
        screens = [
            s.model_copy(update={"group_id": new_parent_id}) if s.id == node_id else s
            for s in project.screens
        ]
        result = project.model_copy(update={"screens": screens})

    else:
        _check_group_parent(project, node_id, new_parent_id)
        groups = [
            g.model_copy(update={"parent_id": new_parent_id}) if g.id == node_id else g
            for g in project.screen_groups
        ]
        result = project.model_copy(update={"screen_groups": groups})

    logger.debug("node_reparented", node_id=node_id, kind=kind.value, parent_id=new_parent_id)
    return result


def move_element(
    project: Project, screen_id: str, element_id: str, target_id: str | None = None
) -> Project:
    """
    Layer-panel drop: move an element relative to a target.

    - no target: to the root, on top of the stack
    - container target: into the container, on top of the stack
    - other target: next to the target (same parent), just below it

    z-indexes of the screen are renumbered in list order afterwards.
    """
    screen = _require_screen(project, screen_id)
    element = _require_element(screen, element_id)
    if target_id == element_id:
        return project

    rest = [e for e in screen.elements if e.id != element_id]

    if target_id is None:
        moved = element.model_copy(update={"parent_id": None})
        elements = [*rest, moved]
    else:
        target = _require_element(screen, target_id)
        parent_id = target.id if target.is_container else target.parent_id
        _check_element_parent(screen, element_id, parent_id)
        moved = element.model_copy(update={"parent_id": parent_id})

        if target.is_container:
            rest = [
                e.model_copy(update={"collapsed": False}) if e.id == target.id else e
                for e in rest
            ]
            elements = [*rest, moved]
        else:
            index = next(i for i, e in enumerate(rest) if e.id == target_id)
            elements = [*rest[:index], moved, *rest[index:]]

    return project.with_screen(screen.with_elements(_renumber(elements)))


# ============================================================================
# Group / Ungroup / Move to root
# ============================================================================


def group_elements(
    project: Project, screen_id: str, element_ids: Iterable[str], name: str = "Group"
) -> tuple[Project, str]:
    """
    Wrap elements of one screen in a new group element.

    The group covers the members' bounding box, stacks one above the highest
    member, and sits under the members' common parent (root if they differ).

    Returns:
        (next project, id of the new group)

    Raises:
        HierarchyViolation: Fewer than two ids, foreign ids, or nested selection
    """
    ids = _unique(element_ids)
    if len(ids) < 2:
        raise HierarchyViolation("Grouping requires at least two elements")

    screen = _require_screen(project, screen_id)
    members = [_require_element(screen, element_id) for element_id in ids]

    selected = set(ids)
    for member in members:
        if selected.intersection(element_ancestors(screen, member.id)):
            raise HierarchyViolation(
                f"Element {member.id} is nested inside another selected element", member.id
            )

    left = min(m.x for m in members)
    top = min(m.y for m in members)
    right = max(m.x + m.width for m in members)
    bottom = max(m.y + m.height for m in members)

    parents = {m.parent_id for m in members}
    common_parent = parents.pop() if len(parents) == 1 else None

    group = new_group_element(
        left,
        top,
        right - left,
        bottom - top,
        z_index=max(m.z_index for m in members) + 1,
        parent_id=common_parent,
        name=name,
    )

    elements = [
        e.model_copy(update={"parent_id": group.id}) if e.id in selected else e
        for e in screen.elements
    ]
    elements.append(group)

    logger.info("elements_grouped", screen_id=screen_id, group_id=group.id, count=len(ids))
    return project.with_screen(screen.with_elements(elements)), group.id


def group_screens(
    project: Project, screen_ids: Iterable[str], name: str = "Group"
) -> tuple[Project, str]:
    """
    Put screens in a new screen group.

    The group is created under the screens' common group (root if they differ).

    Returns:
        (next project, id of the new screen group)
    """
    ids = _unique(screen_ids)
    if len(ids) < 2:
        raise HierarchyViolation("Grouping requires at least two screens")

    members = [_require_screen(project, screen_id) for screen_id in ids]
    parents = {s.group_id for s in members}
    common_parent = parents.pop() if len(parents) == 1 else None

    group = new_screen_group(name, parent_id=common_parent)
    selected = set(ids)
    screens = [
        s.model_copy(update={"group_id": group.id}) if s.id in selected else s
        for s in project.screens
    ]

    logger.info("screens_grouped", group_id=group.id, count=len(ids))
    return (
        project.model_copy(
            update={"screens": screens, "screen_groups": [*project.screen_groups, group]}
        ),
        group.id,
    )


def move_to_root(project: Project, kind: NodeKind | str, ids: Iterable[str]) -> Project:
    """
    Clear the parent of each node, promoting it to the root of its scope.

    Raises:
        HierarchyViolation: An id is unknown for the given kind
    """
    kind = NodeKind(kind)
    ids = set(_unique(ids))

    if kind == NodeKind.ELEMENT:
        for element_id in ids:
            if project.locate_element(element_id) is None:
                raise HierarchyViolation(f"Unknown element {element_id}", element_id)
        screens = []
        for screen in project.screens:
            if any(e.id in ids for e in screen.elements):
                screen = screen.with_elements(
                    [
                        e.model_copy(update={"parent_id": None}) if e.id in ids else e
                        for e in screen.elements
                    ]
                )
            screens.append(screen)
        result = project.model_copy(update={"screens": screens})

    elif kind == NodeKind.SCREEN:
        for screen_id in ids:
            _require_screen(project, screen_id)
        screens = [
            s.model_copy(update={"group_id": None}) if s.id in ids else s
            for s in project.screens
        ]
        result = project.model_copy(update={"screens": screens})

    else:
        for group_id in ids:
            _require_group(project, group_id)
        groups = [
            g.model_copy(update={"parent_id": None}) if g.id in ids else g
            for g in project.screen_groups
        ]
        result = project.model_copy(update={"screen_groups": groups})

    logger.debug("moved_to_root", kind=kind.value, count=len(ids))
    return result


def ungroup_elements(project: Project, screen_id: str, group_ids: Iterable[str]) -> Project:
    """
    Dissolve group elements; their children move up to the group's parent.

    Raises:
        HierarchyViolation: An id is not a container element on the screen
    """
    screen = _require_screen(project, screen_id)
    ids = _unique(group_ids)
    for group_id in ids:
        if not _require_element(screen, group_id).is_container:
            raise HierarchyViolation(f"Element {group_id} is not a group", group_id)

    elements = list(screen.elements)
    for group_id in ids:
        group = next(e for e in elements if e.id == group_id)
        elements = [
            e.model_copy(update={"parent_id": group.parent_id}) if e.parent_id == group_id else e
            for e in elements
            if e.id != group_id
        ]

    logger.info("elements_ungrouped", screen_id=screen_id, count=len(ids))
    return project.with_screen(screen.with_elements(elements))


def _dissolve_groups(project: Project, group_ids: list[str]) -> Project:
    """Remove screen groups, handing their children to each group's parent."""
    screens = list(project.screens)
    groups = list(project.screen_groups)

    for group_id in group_ids:
        group = next((g for g in groups if g.id == group_id), None)
        if group is None:
            continue
        parent_id = group.parent_id
        screens = [
            s.model_copy(update={"group_id": parent_id}) if s.group_id == group_id else s
            for s in screens
        ]
        groups = [
            g.model_copy(update={"parent_id": parent_id}) if g.parent_id == group_id else g
            for g in groups
            if g.id != group_id
        ]

    return project.model_copy(update={"screens": screens, "screen_groups": groups})


def ungroup_screen_groups(project: Project, group_ids: Iterable[str]) -> Project:
    """
    Dissolve screen groups; child screens and groups move up one level.

    Raises:
        HierarchyViolation: An id is not a screen group
    """
    ids = _unique(group_ids)
    for group_id in ids:
        _require_group(project, group_id)

    logger.info("screen_groups_ungrouped", count=len(ids))
    return _dissolve_groups(project, ids)


# ============================================================================
# Delete
# ============================================================================


def delete_elements(project: Project, element_ids: Iterable[str]) -> Project:
    """
    Delete elements from whichever screens hold them.

    Children of a deleted element that survive are promoted to the root.
    Unknown ids are ignored.
    """
    ids = set(element_ids)
    removed = 0
    screens = []

    for screen in project.screens:
        if not any(e.id in ids for e in screen.elements):
            screens.append(screen)
            continue
        survivors = []
        for element in screen.elements:
            if element.id in ids:
                removed += 1
                continue
            if element.parent_id in ids:
                element = element.model_copy(update={"parent_id": None})
            survivors.append(element)
        screens.append(screen.with_elements(survivors))

    if not removed:
        return project

    logger.info("elements_deleted", count=removed)
    return project.model_copy(update={"screens": screens})


def _drop_screens(project: Project, ids: set[str]) -> list[Screen]:
    """
    Raises:
        EmptyProjectGuard: If no screen would remain
    """
    remaining = [s for s in project.screens if s.id not in ids]
    if not remaining:
        raise EmptyProjectGuard("Project must keep at least one screen")
    return remaining


def delete_screens(project: Project, screen_ids: Iterable[str]) -> Project:
    """
    Delete screens.

    If none would remain an empty "Home" screen takes their place. The active
    screen is repointed to the first survivor when it was deleted, and
    navigate interactions aimed at deleted screens lose their target.
    """
    ids = set(screen_ids).intersection(project.screen_ids)
    if not ids:
        return project

    try:
        remaining = _drop_screens(project, ids)
    except EmptyProjectGuard:
        remaining = [home_screen()]
        logger.info("empty_project_guard", synthesized_screen_id=remaining[0].id)

    active_id = project.active_screen_id
    if active_id not in {s.id for s in remaining}:
        active_id = remaining[0].id

    result = project.model_copy(update={"screens": remaining, "active_screen_id": active_id})
    logger.info("screens_deleted", count=len(ids), active_screen_id=active_id)
    return clear_navigation_targets(result, ids)


def delete_screen_groups(project: Project, group_ids: Iterable[str]) -> Project:
    """
    Delete screen groups without deleting anything inside them.

    Child screens and groups are detached to the deleted group's own parent.
    Unknown ids are ignored.
    """
    ids = [g for g in _unique(group_ids) if project.screen_group(g) is not None]
    if not ids:
        return project

    logger.info("screen_groups_deleted", count=len(ids))
    return _dissolve_groups(project, ids)


# ============================================================================
# Create / Duplicate
# ============================================================================


def add_screen(
    project: Project,
    name: str | None = None,
    group_id: str | None = None,
    background_color: str = "#ffffff",
) -> tuple[Project, str]:
    """Append a screen (optionally inside a group) and make it active."""
    if group_id is not None:
        _require_group(project, group_id)

    screen = new_screen(
        name or f"Screen {len(project.screens) + 1}",
        background_color=background_color,
        group_id=group_id,
    )
    result = project.model_copy(
        update={"screens": [*project.screens, screen], "active_screen_id": screen.id}
    )
    return result, screen.id


def add_screen_group(
    project: Project, name: str = "New Group", parent_id: str | None = None
) -> tuple[Project, str]:
    if parent_id is not None:
        _require_group(project, parent_id)

    group = new_screen_group(name, parent_id=parent_id)
    result = project.model_copy(update={"screen_groups": [*project.screen_groups, group]})
    return result, group.id


def add_element(
    project: Project,
    screen_id: str,
    tool: str | CanvasElement,
    parent_id: str | None = None,
) -> tuple[Project, str]:
    """
    Place a new element on a screen.

    Args:
        tool: Drawing tool / element type name, or a ready-made element
        parent_id: Optional containing element on the same screen

    Raises:
        HierarchyViolation: Unknown screen or tool, or invalid parent
    """
    screen = _require_screen(project, screen_id)

    if isinstance(tool, CanvasElement):
        element = tool
    else:
        element = new_element(
            tool,
            screen,
            screen.viewport_width or project.viewport_width,
            screen.viewport_height or project.viewport_height,
        )
        if element is None:
            raise HierarchyViolation(f"Unknown element tool {tool!r}")

    if screen.element(element.id) is not None:
        raise HierarchyViolation(f"Element {element.id} already exists", element.id)
    _check_element_parent(screen.with_elements([*screen.elements, element]), element.id, parent_id)

    element = element.model_copy(update={"parent_id": parent_id})
    return project.with_screen(screen.with_elements([*screen.elements, element])), element.id


def _fresh_copy(element: CanvasElement, **changes) -> CanvasElement:
    interactions = [i.model_copy(update={"id": new_interaction_id()}) for i in element.interactions]
    return element.model_copy(
        update={"id": new_element_id(), "interactions": interactions, **changes}, deep=True
    )


def duplicate_element(project: Project, screen_id: str, element_id: str) -> tuple[Project, str]:
    """
    Copy an element and everything inside it.

    The copy is offset by 10px, named "<name> Copy", stacked above the
    existing elements, and placed next to the original (same parent).

    Returns:
        (next project, id of the copied root element)
    """
    screen = _require_screen(project, screen_id)
    original = _require_element(screen, element_id)
    descendant_ids = element_descendants(screen, element_id)

    id_map: dict[str, str] = {}
    root = _fresh_copy(original, name=f"{original.name} Copy", x=original.x + 10, y=original.y + 10)
    id_map[original.id] = root.id

    copies = [root]
    for descendant_id in descendant_ids:
        descendant = screen.element(descendant_id)
        copy = _fresh_copy(descendant)
        id_map[descendant_id] = copy.id
        copies.append(copy)

    base_z = screen.max_z_index
    copies = [
        c.model_copy(
            update={
                "parent_id": id_map.get(c.parent_id, c.parent_id) if c is not root else c.parent_id,
                "z_index": base_z + index,
            }
        )
        for index, c in enumerate(copies, start=1)
    ]

    logger.debug("element_duplicated", element_id=element_id, copy_id=root.id, count=len(copies))
    return project.with_screen(screen.with_elements([*screen.elements, *copies])), root.id


def _copy_screen(screen: Screen) -> Screen:
    id_map = {e.id: new_element_id() for e in screen.elements}
    elements = []
    for element in screen.elements:
        interactions = [
            i.model_copy(update={"id": new_interaction_id()}) for i in element.interactions
        ]
        elements.append(
            element.model_copy(
                update={
                    "id": id_map[element.id],
                    "parent_id": id_map.get(element.parent_id, element.parent_id),
                    "interactions": interactions,
                },
                deep=True,
            )
        )
    return screen.model_copy(
        update={"id": new_screen_id(), "name": f"{screen.name} Copy", "elements": elements}
    )


def duplicate_screens(project: Project, screen_ids: Iterable[str]) -> tuple[Project, list[str]]:
    """
    Copy screens with fresh element and interaction ids.

    Returns:
        (next project, ids of the copies in request order)
    """
    copies = [_copy_screen(_require_screen(project, sid)) for sid in _unique(screen_ids)]
    result = project.model_copy(update={"screens": [*project.screens, *copies]})
    return result, [c.id for c in copies]


# ============================================================================
# Lock / Hide / Activate
# ============================================================================


def _toggle(project: Project, kind: NodeKind | str, ids: Iterable[str], flag: str) -> Project:
    kind = NodeKind(kind)
    ids = set(ids)

    def flip(node):
        return node.model_copy(update={flag: not getattr(node, flag)})

    if kind == NodeKind.ELEMENT:
        screens = [
            s.with_elements([flip(e) if e.id in ids else e for e in s.elements])
            if any(e.id in ids for e in s.elements)
            else s
            for s in project.screens
        ]
        return project.model_copy(update={"screens": screens})
    if kind == NodeKind.SCREEN:
        screens = [flip(s) if s.id in ids else s for s in project.screens]
        return project.model_copy(update={"screens": screens})

    groups = [flip(g) if g.id in ids else g for g in project.screen_groups]
    return project.model_copy(update={"screen_groups": groups})


def toggle_locked(project: Project, kind: NodeKind | str, ids: Iterable[str]) -> Project:
    """Flip the locked flag of each node."""
    return _toggle(project, kind, ids, "locked")


def toggle_hidden(project: Project, kind: NodeKind | str, ids: Iterable[str]) -> Project:
    """Flip the hidden flag of each node."""
    return _toggle(project, kind, ids, "hidden")


def set_active_screen(project: Project, screen_id: str) -> Project:
    _require_screen(project, screen_id)
    if project.active_screen_id == screen_id:
        return project
    return project.model_copy(update={"active_screen_id": screen_id})


def heal(project: Project) -> Project:
    """
    Restore the project-level invariants of a document from outside.

    Ensures at least one screen exists and the active screen id is valid.
    """
    screens = project.screens or [home_screen()]
    active_id = project.active_screen_id
    if active_id not in {s.id for s in screens}:
        active_id = screens[0].id
    if screens is project.screens and active_id == project.active_screen_id:
        return project
    logger.info("project_healed", project_id=project.id, active_screen_id=active_id)
    return project.model_copy(update={"screens": screens, "active_screen_id": active_id})
