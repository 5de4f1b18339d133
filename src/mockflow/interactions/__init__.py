"""Interaction bindings and the navigation graph they form."""

from .graph import (
    add_interaction,
    update_interaction,
    remove_interaction,
    clear_navigation_targets,
    default_navigate_target,
    default_payload,
    ensure_editable,
)
from .navigation import Effect, NavigationGraph, Transition, build_navigation_graph

__all__ = [
    "add_interaction",
    "update_interaction",
    "remove_interaction",
    "clear_navigation_targets",
    "default_navigate_target",
    "default_payload",
    "ensure_editable",
    "Effect",
    "NavigationGraph",
    "Transition",
    "build_navigation_graph",
]
