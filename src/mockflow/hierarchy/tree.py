"""Read-only queries over the three containment relations."""

from ..models import NodeKind, Project, Screen


def element_ancestors(screen: Screen, element_id: str) -> list[str]:
    """
    Parent chain of an element, nearest first.

    The walk stops at a missing parent or at an id already visited, so it
    terminates even on a corrupted document.
    """
    chain: list[str] = []
    seen = {element_id}
    element = screen.element(element_id)
    parent_id = element.parent_id if element else None

    while parent_id is not None and parent_id not in seen:
        chain.append(parent_id)
        seen.add(parent_id)
        parent = screen.element(parent_id)
        parent_id = parent.parent_id if parent else None

    return chain


def element_descendants(screen: Screen, element_id: str) -> list[str]:
    """All elements below an element, breadth first, in list order."""
    result: list[str] = []
    seen = {element_id}
    frontier = [element_id]

    while frontier:
        next_frontier = []
        for parent_id in frontier:
            for child in screen.children(parent_id):
                if child.id not in seen:
                    seen.add(child.id)
                    result.append(child.id)
                    next_frontier.append(child.id)
        frontier = next_frontier

    return result


def group_ancestors(project: Project, group_id: str) -> list[str]:
    """Parent chain of a screen group, nearest first."""
    chain: list[str] = []
    seen = {group_id}
    group = project.screen_group(group_id)
    parent_id = group.parent_id if group else None

    while parent_id is not None and parent_id not in seen:
        chain.append(parent_id)
        seen.add(parent_id)
        parent = project.screen_group(parent_id)
        parent_id = parent.parent_id if parent else None

    return chain


def group_descendants(project: Project, group_id: str) -> list[str]:
    """Nested screen groups below a group, breadth first."""
    result: list[str] = []
    seen = {group_id}
    frontier = [group_id]

    while frontier:
        next_frontier = []
        for parent_id in frontier:
            for group in project.screen_groups:
                if group.parent_id == parent_id and group.id not in seen:
                    seen.add(group.id)
                    result.append(group.id)
                    next_frontier.append(group.id)
        frontier = next_frontier

    return result


def screens_in_group(project: Project, group_id: str, recursive: bool = False) -> list[str]:
    """Screens directly (or transitively) inside a group."""
    group_ids = {group_id}
    if recursive:
        group_ids.update(group_descendants(project, group_id))
    return [s.id for s in project.screens if s.group_id in group_ids]


def resolve_node(project: Project, node_id: str) -> tuple[NodeKind, Screen | None] | None:
    """
    Work out what kind of node an id names.

    Returns:
        (kind, owning screen for elements) or None if the id is unknown
    """
    if project.screen(node_id) is not None:
        return NodeKind.SCREEN, None
    if project.screen_group(node_id) is not None:
        return NodeKind.SCREEN_GROUP, None
    located = project.locate_element(node_id)
    if located is not None:
        return NodeKind.ELEMENT, located[0]
    return None
