"""
Screen navigation automaton derived from element interactions.

States are screens, the initial state is the project's active screen, and
every navigate interaction is a transition taken by selecting its element.
The automaton is descriptive: executing it is the previewer's job.
"""

from collections import deque
from dataclasses import dataclass, field

from ..models import Action, Project


@dataclass(frozen=True)
class Transition:
    """Navigate arc: selecting `element_id` on `source` shows `target`."""

    source: str
    element_id: str
    interaction_id: str
    target: str


@dataclass(frozen=True)
class Effect:
    """Non-navigating arc (back, alert, url, none) or a navigate arc with no valid target."""

    source: str
    element_id: str
    interaction_id: str
    action: str
    payload: str | None = None


@dataclass(frozen=True)
class NavigationGraph:
    """Navigation automaton of a project."""

    states: tuple[str, ...]
    initial: str
    transitions: tuple[Transition, ...] = field(default_factory=tuple)
    effects: tuple[Effect, ...] = field(default_factory=tuple)
    unresolved: tuple[Effect, ...] = field(default_factory=tuple)

    def outgoing(self, state: str) -> list[Transition]:
        return [t for t in self.transitions if t.source == state]

    def step(self, state: str, element_id: str) -> str | None:
        """Target screen reached by selecting an element, if it navigates."""
        for transition in self.transitions:
            if transition.source == state and transition.element_id == element_id:
                return transition.target
        return None

    def reachable(self, start: str | None = None) -> set[str]:
        """Screens reachable from `start` (default: the initial state)."""
        origin = start if start is not None else self.initial
        if origin not in self.states:
            return set()

        seen = {origin}
        queue = deque([origin])
        while queue:
            state = queue.popleft()
            for transition in self.outgoing(state):
                if transition.target not in seen:
                    seen.add(transition.target)
                    queue.append(transition.target)
        return seen

    def unreachable(self) -> set[str]:
        return set(self.states) - self.reachable()


def build_navigation_graph(project: Project) -> NavigationGraph:
    """Derive the navigation automaton from the project's interactions."""
    screen_ids = set(project.screen_ids)
    transitions: list[Transition] = []
    effects: list[Effect] = []
    unresolved: list[Effect] = []

    for screen in project.screens:
        for element in screen.elements:
            for interaction in element.interactions:
                if interaction.action == Action.NAVIGATE:
                    if interaction.payload in screen_ids:
                        transitions.append(
                            Transition(screen.id, element.id, interaction.id, interaction.payload)
                        )
                    else:
                        unresolved.append(
                            Effect(
                                screen.id,
                                element.id,
                                interaction.id,
                                interaction.action,
                                interaction.payload,
                            )
                        )
                else:
                    effects.append(
                        Effect(
                            screen.id,
                            element.id,
                            interaction.id,
                            interaction.action,
                            interaction.payload,
                        )
                    )

    return NavigationGraph(
        states=tuple(project.screen_ids),
        initial=project.active_screen_id,
        transitions=tuple(transitions),
        effects=tuple(effects),
        unresolved=tuple(unresolved),
    )
