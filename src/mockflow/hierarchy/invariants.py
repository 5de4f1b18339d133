"""Structural checks over a whole Project."""

from ..models import Action, Project
from .tree import element_ancestors, group_ancestors


def find_violations(project: Project) -> list[str]:
    """
    List every broken structural invariant of a project.

    An empty list means the project is consistent. Documents loaded from
    outside are checked with it and any problems are logged.
    """
    problems: list[str] = []
    screen_ids = set(project.screen_ids)

    if not project.screens:
        problems.append("project has no screens")
    elif project.active_screen_id not in screen_ids:
        problems.append(f"active screen {project.active_screen_id!r} does not exist")

    if len(screen_ids) != len(project.screens):
        problems.append("duplicate screen ids")

    for group in project.screen_groups:
        if group.parent_id is not None:
            if project.screen_group(group.parent_id) is None:
                problems.append(f"group {group.id} has unknown parent {group.parent_id}")
            elif group.id in group_ancestors(project, group.parent_id) or group.parent_id == group.id:
                problems.append(f"group {group.id} is part of a cycle")

    for screen in project.screens:
        if screen.group_id is not None and project.screen_group(screen.group_id) is None:
            problems.append(f"screen {screen.id} has unknown group {screen.group_id}")

        for element in screen.elements:
            if element.parent_id is not None:
                if screen.element(element.parent_id) is None:
                    problems.append(
                        f"element {element.id} has parent {element.parent_id} outside screen {screen.id}"
                    )
                elif element.parent_id == element.id or element.id in element_ancestors(
                    screen, element.parent_id
                ):
                    problems.append(f"element {element.id} is part of a cycle")

            triggers = [i.trigger for i in element.interactions]
            if len(triggers) != len(set(triggers)):
                problems.append(f"element {element.id} has more than one binding per trigger")

            for interaction in element.interactions:
                if (
                    interaction.action == Action.NAVIGATE
                    and interaction.payload is not None
                    and interaction.payload not in screen_ids
                ):
                    problems.append(
                        f"interaction {interaction.id} navigates to unknown screen {interaction.payload}"
                    )

    return problems


def is_consistent(project: Project) -> bool:
    return not find_violations(project)
