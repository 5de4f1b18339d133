"""Mutation API and editor session."""

from .mutations import (
    ElementPatch,
    ProjectPatch,
    ScreenGroupPatch,
    ScreenPatch,
    add_asset,
    add_element,
    add_interaction,
    add_screen,
    add_screen_group,
    delete_elements,
    delete_screen_group,
    delete_screens,
    duplicate_element,
    duplicate_screens,
    get_active_screen,
    group_elements,
    group_screens,
    move_element,
    move_to_root,
    mutation,
    remove_asset,
    remove_interaction,
    reparent,
    set_active_screen,
    toggle_hidden,
    toggle_locked,
    touch,
    ungroup_elements,
    ungroup_screen_groups,
    update_element,
    update_interaction,
    update_project,
    update_screen,
    update_screen_group,
)
from .editor import Editor, Status

__all__ = [
    # Patches
    "ElementPatch",
    "ProjectPatch",
    "ScreenGroupPatch",
    "ScreenPatch",
    # Mutations
    "add_asset",
    "add_element",
    "add_interaction",
    "add_screen",
    "add_screen_group",
    "delete_elements",
    "delete_screen_group",
    "delete_screens",
    "duplicate_element",
    "duplicate_screens",
    "get_active_screen",
    "group_elements",
    "group_screens",
    "move_element",
    "move_to_root",
    "mutation",
    "remove_asset",
    "remove_interaction",
    "reparent",
    "set_active_screen",
    "toggle_hidden",
    "toggle_locked",
    "touch",
    "ungroup_elements",
    "ungroup_screen_groups",
    "update_element",
    "update_interaction",
    "update_project",
    "update_screen",
    "update_screen_group",
    # Session
    "Editor",
    "Status",
]
