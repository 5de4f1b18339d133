"""
Hierarchy engine: keeps the three containment relations consistent.

- element in element, within one screen (parent_id)
- screen in screen group (group_id)
- screen group in screen group (parent_id)
"""

from .engine import (
    add_element,
    add_screen,
    add_screen_group,
    delete_elements,
    delete_screen_groups,
    delete_screens,
    duplicate_element,
    duplicate_screens,
    group_elements,
    group_screens,
    heal,
    move_element,
    move_to_root,
    reparent,
    set_active_screen,
    toggle_hidden,
    toggle_locked,
    ungroup_elements,
    ungroup_screen_groups,
)
from .invariants import find_violations, is_consistent
from .tree import (
    element_ancestors,
    element_descendants,
    group_ancestors,
    group_descendants,
    resolve_node,
    screens_in_group,
)

__all__ = [
    # Mutations
    "add_element",
    "add_screen",
    "add_screen_group",
    "delete_elements",
    "delete_screen_groups",
    "delete_screens",
    "duplicate_element",
    "duplicate_screens",
    "group_elements",
    "group_screens",
    "heal",
    "move_element",
    "move_to_root",
    "reparent",
    "set_active_screen",
    "toggle_hidden",
    "toggle_locked",
    "ungroup_elements",
    "ungroup_screen_groups",
    # Checks
    "find_violations",
    "is_consistent",
    # Queries
    "element_ancestors",
    "element_descendants",
    "group_ancestors",
    "group_descendants",
    "resolve_node",
    "screens_in_group",
]
