"""Tests for interaction bindings and the navigation graph."""

import pytest

from mockflow.hierarchy import delete_screens, toggle_locked
from mockflow.interactions import (
    add_interaction,
    build_navigation_graph,
    remove_interaction,
    update_interaction,
)
from mockflow.models import (
    Action,
    DuplicateTrigger,
    InvalidInteraction,
    LockedEntity,
    NodeKind,
    Trigger,
)


def _interactions(project, element_id):
    return project.locate_element(element_id)[1].interactions


class TestAddInteraction:
    """Binding creation."""

    def test_defaults_to_other_screen(self, sample_project):
        result = add_interaction(sample_project, "el_free")
        (interaction,) = _interactions(result, "el_free")

        assert interaction.trigger == Trigger.ON_CLICK
        assert interaction.action == Action.NAVIGATE
        assert interaction.payload == "scr_b"

    def test_single_screen_targets_itself(self, sample_project):
        project = delete_screens(sample_project, ["scr_b", "scr_c"])
        result = add_interaction(project, "el_free")

        assert _interactions(result, "el_free")[0].payload == "scr_a"

    def test_duplicate_trigger(self, sample_project):
        project = add_interaction(sample_project, "el_free")

        with pytest.raises(DuplicateTrigger):
            add_interaction(project, "el_free", "onClick")

        assert len(_interactions(project, "el_free")) == 1

    def test_unknown_element(self, sample_project):
        with pytest.raises(InvalidInteraction):
            add_interaction(sample_project, "el_missing")

    def test_unknown_trigger(self, sample_project):
        with pytest.raises(InvalidInteraction):
            add_interaction(sample_project, "el_free", "onHover")

    def test_locked_element(self, sample_project):
        project = toggle_locked(sample_project, NodeKind.ELEMENT, ["el_free"])
        with pytest.raises(LockedEntity):
            add_interaction(project, "el_free")


class TestUpdateInteraction:
    """Field updates."""

    def test_action_change_resets_payload(self, sample_project):
        alert = update_interaction(sample_project, "int_go", "action", "alert")
        assert _interactions(alert, "el_button")[0].payload == ""

        back = update_interaction(sample_project, "int_go", "action", "back")
        assert _interactions(back, "el_button")[0].payload is None

        navigate = update_interaction(back, "int_go", "action", "navigate")
        assert _interactions(navigate, "el_button")[0].payload == "scr_b"

    def test_same_action_keeps_payload(self, sample_project):
        result = update_interaction(sample_project, "int_go", "action", "navigate")
        assert result is sample_project

    def test_navigate_payload_must_be_screen(self, sample_project):
        result = update_interaction(sample_project, "int_go", "payload", "scr_c")
        assert _interactions(result, "el_button")[0].payload == "scr_c"

        with pytest.raises(InvalidInteraction):
            update_interaction(sample_project, "int_go", "payload", "scr_missing")

    def test_text_payload(self, sample_project):
        project = update_interaction(sample_project, "int_go", "action", "url")
        result = update_interaction(project, "int_go", "payload", "https://example.com")

        assert _interactions(result, "el_button")[0].payload == "https://example.com"

    def test_back_takes_no_payload(self, sample_project):
        with pytest.raises(InvalidInteraction):
            update_interaction(sample_project, "int_back", "payload", "scr_a")

    def test_none_action(self, sample_project):
        result = update_interaction(sample_project, "int_go", "action", "none")
        (interaction,) = _interactions(result, "el_button")

        assert interaction.action == Action.NONE
        assert interaction.payload is None
        with pytest.raises(InvalidInteraction):
            update_interaction(result, "int_go", "payload", "scr_b")

    def test_unknown_field_or_action(self, sample_project):
        with pytest.raises(InvalidInteraction):
            update_interaction(sample_project, "int_go", "color", "red")
        with pytest.raises(InvalidInteraction):
            update_interaction(sample_project, "int_go", "action", "teleport")
        with pytest.raises(InvalidInteraction):
            update_interaction(sample_project, "int_missing", "action", "back")


class TestRemoveInteraction:
    """Removal."""

    def test_remove(self, sample_project):
        result = remove_interaction(sample_project, "int_go")
        assert _interactions(result, "el_button") == []

    def test_remove_unknown_is_noop(self, sample_project):
        assert remove_interaction(sample_project, "int_missing") is sample_project


class TestDanglingTargets:
    """Navigate payloads after a screen is deleted."""

    def test_payload_cleared_not_dangling(self, sample_project):
        result = delete_screens(sample_project, ["scr_b"])
        interaction = _interactions(result, "el_button")[0]

        assert interaction.payload is None
        assert interaction.payload not in result.screen_ids

    def test_other_payloads_untouched(self, sample_project):
        project = update_interaction(sample_project, "int_go", "payload", "scr_c")
        result = delete_screens(project, ["scr_b"])

        assert _interactions(result, "el_button")[0].payload == "scr_c"


class TestNavigationGraph:
    """Derived navigation automaton."""

    def test_states_and_transitions(self, sample_project):
        graph = build_navigation_graph(sample_project)

        assert graph.states == ("scr_a", "scr_b", "scr_c")
        assert graph.initial == "scr_a"
        assert len(graph.transitions) == 1
        assert graph.step("scr_a", "el_button") == "scr_b"
        assert graph.step("scr_a", "el_free") is None
        assert [e.action for e in graph.effects] == ["back"]

    def test_reachability(self, sample_project):
        graph = build_navigation_graph(sample_project)

        assert graph.reachable() == {"scr_a", "scr_b"}
        assert graph.unreachable() == {"scr_c"}
        assert graph.reachable("scr_b") == {"scr_b"}
        assert graph.reachable("scr_missing") == set()

    def test_unset_navigate_is_unresolved(self, sample_project):
        graph = build_navigation_graph(delete_screens(sample_project, ["scr_b"]))

        assert graph.transitions == ()
        assert len(graph.unresolved) == 1
        assert graph.unresolved[0].interaction_id == "int_go"

    def test_none_action_is_effect(self, sample_project):
        project = update_interaction(sample_project, "int_go", "action", "none")
        graph = build_navigation_graph(project)

        assert graph.transitions == ()
        assert graph.unresolved == ()
        assert sorted(e.action for e in graph.effects) == ["back", "none"]
