"""Tests for the selection resolver and bulk actions."""

import pytest
from hypothesis import given, strategies as st

from mockflow.models import (
    ConfirmationRequired,
    HierarchyViolation,
    NavigationContext,
    NodeKind,
    Project,
    Screen,
)
from mockflow.selection import BulkAction, BulkActionResolver, Selection, Surface
from mockflow.selection.resolver import MAX_PENDING

ids = st.lists(st.sampled_from(["a", "b", "c"]), max_size=3)


@pytest.fixture
def resolver():
    return BulkActionResolver()


class TestPrecedence:
    """Ranked rule order."""

    @pytest.mark.unit
    def test_elements_outrank_screens(self, resolver, sample_project):
        selection = Selection(element_ids=("el_title", "el_free"), screen_ids=("scr_b",))
        resolution = resolver.resolve(sample_project, selection)

        assert resolution.surface == Surface.BULK_ELEMENTS
        assert resolution.target_ids == ("el_title", "el_free")
        assert BulkAction.GROUP in resolution.actions

    @pytest.mark.unit
    def test_single_element(self, resolver, sample_project):
        selection = Selection(element_ids=("el_free",), screen_ids=("scr_a", "scr_b"))
        assert resolver.resolve(sample_project, selection).surface == Surface.ELEMENT

    @pytest.mark.unit
    def test_bulk_screens_cannot_group(self, resolver, sample_project):
        resolution = resolver.resolve(sample_project, Selection(screen_ids=("scr_a", "scr_b")))

        assert resolution.surface == Surface.BULK_SCREENS
        assert BulkAction.GROUP not in resolution.actions

    @pytest.mark.unit
    def test_screen_outranks_group(self, resolver, sample_project):
        selection = Selection(screen_ids=("scr_a",), screen_group_ids=("sgr_root",))
        assert resolver.resolve(sample_project, selection).surface == Surface.SCREEN

    @pytest.mark.unit
    def test_single_group(self, resolver, sample_project):
        selection = Selection(screen_group_ids=("sgr_root",))
        assert resolver.resolve(sample_project, selection).surface == Surface.SCREEN_GROUP

    @pytest.mark.unit
    def test_project_context(self, resolver, sample_project):
        resolution = resolver.resolve(sample_project, Selection(), NavigationContext.PROJECT)

        assert resolution.surface == Surface.PROJECT
        assert resolution.target_ids == ("prj_sample",)

    @pytest.mark.unit
    def test_fallback_to_active_screen(self, resolver, sample_project):
        # Two groups match no rule of their own
        selection = Selection(screen_group_ids=("sgr_root", "sgr_child"))
        resolution = resolver.resolve(sample_project, selection, "layers")

        assert resolution.surface == Surface.ACTIVE_SCREEN
        assert resolution.target_ids == ("scr_a",)

    @pytest.mark.unit
    def test_duplicate_ids_collapse(self, resolver, sample_project):
        selection = Selection(element_ids=["el_free", "el_free"])
        assert resolver.resolve(sample_project, selection).surface == Surface.ELEMENT

    @given(
        elements=ids,
        screens=ids,
        groups=ids,
        context=st.sampled_from(list(NavigationContext)),
    )
    def test_resolution_is_total_and_ranked(self, elements, screens, groups, context):
        project = Project(
            id="prj_t", name="T", screens=[Screen(id="s", name="S")], active_screen_id="s"
        )
        selection = Selection(element_ids=elements, screen_ids=screens, screen_group_ids=groups)
        surface = BulkActionResolver().resolve(project, selection, context).surface

        n_elements = len(set(elements))
        n_screens = len(set(screens))
        if n_elements >= 2:
            assert surface == Surface.BULK_ELEMENTS
        elif n_elements == 1:
            assert surface == Surface.ELEMENT
        elif n_screens >= 2:
            assert surface == Surface.BULK_SCREENS
        elif n_screens == 1:
            assert surface == Surface.SCREEN
        elif len(set(groups)) == 1:
            assert surface == Surface.SCREEN_GROUP
        elif context == NavigationContext.PROJECT:
            assert surface == Surface.PROJECT
        else:
            assert surface == Surface.ACTIVE_SCREEN


class TestBulkActions:
    """Applying bulk actions."""

    @pytest.mark.unit
    def test_group_selects_new_container(self, resolver, sample_project):
        resolution = resolver.resolve(
            sample_project, Selection(element_ids=("el_title", "el_button"))
        )
        outcome = resolver.apply(sample_project, resolution, BulkAction.GROUP)

        (group_id,) = outcome.selection.element_ids
        assert outcome.project.locate_element(group_id)[1].type == "group"

    @pytest.mark.unit
    def test_export_request(self, resolver, sample_project):
        resolution = resolver.resolve(sample_project, Selection(screen_ids=("scr_a", "scr_b")))
        outcome = resolver.apply(sample_project, resolution, "export")

        assert outcome.project is sample_project
        assert outcome.export.type == "screen"
        assert outcome.export.target_ids == ("scr_a", "scr_b")

    @pytest.mark.unit
    def test_move_to_root(self, resolver, sample_project):
        resolution = resolver.resolve(
            sample_project, Selection(element_ids=("el_title", "el_button"))
        )
        outcome = resolver.apply(sample_project, resolution, BulkAction.MOVE_TO_ROOT)

        assert outcome.project.locate_element("el_title")[1].parent_id is None

    @pytest.mark.unit
    def test_action_not_on_surface(self, resolver, sample_project):
        resolution = resolver.resolve(sample_project, Selection(element_ids=("el_free",)))
        with pytest.raises(HierarchyViolation):
            resolver.apply(sample_project, resolution, BulkAction.GROUP)


class TestDeleteConfirmation:
    """Two-phase bulk delete."""

    @pytest.mark.unit
    def test_apply_delete_requires_confirmation(self, resolver, sample_project):
        resolution = resolver.resolve(sample_project, Selection(screen_ids=("scr_a", "scr_b")))
        with pytest.raises(ConfirmationRequired):
            resolver.apply(sample_project, resolution, BulkAction.DELETE)

    @pytest.mark.unit
    def test_request_then_confirm(self, resolver, sample_project):
        resolution = resolver.resolve(
            sample_project, Selection(element_ids=("el_frame", "el_free"))
        )
        intent = resolver.request_delete(sample_project, resolution)

        assert intent.kind == NodeKind.ELEMENT
        assert intent.promoted_ids == ("el_title", "el_button")
        assert intent.summary == "Delete 2 elements"
        # Nothing is deleted before confirmation
        assert sample_project.locate_element("el_frame") is not None

        outcome = resolver.confirm(sample_project, intent)
        assert outcome.project.locate_element("el_frame") is None
        assert outcome.project.locate_element("el_title")[1].parent_id is None
        assert outcome.selection.is_empty

    @pytest.mark.unit
    def test_intent_is_single_use(self, resolver, sample_project):
        resolution = resolver.resolve(sample_project, Selection(screen_ids=("scr_a", "scr_b")))
        intent = resolver.request_delete(sample_project, resolution)
        resolver.confirm(sample_project, intent)

        with pytest.raises(ConfirmationRequired):
            resolver.confirm(sample_project, intent)

    @pytest.mark.unit
    def test_cancelled_intent_cannot_confirm(self, resolver, sample_project):
        resolution = resolver.resolve(sample_project, Selection(screen_ids=("scr_a", "scr_b")))
        intent = resolver.request_delete(sample_project, resolution)

        assert resolver.cancel(intent) is True
        assert resolver.pending == []
        with pytest.raises(ConfirmationRequired):
            resolver.confirm(sample_project, intent)

    @pytest.mark.unit
    def test_intent_bound_to_project(self, resolver, sample_project):
        resolution = resolver.resolve(sample_project, Selection(screen_ids=("scr_a", "scr_b")))
        intent = resolver.request_delete(sample_project, resolution)
        other = sample_project.model_copy(update={"id": "prj_other"})

        with pytest.raises(ConfirmationRequired):
            resolver.confirm(other, intent)

    @pytest.mark.unit
    def test_foreign_confirm_keeps_intent(self, resolver, sample_project):
        resolution = resolver.resolve(sample_project, Selection(screen_ids=("scr_a", "scr_b")))
        intent = resolver.request_delete(sample_project, resolution)
        other = sample_project.model_copy(update={"id": "prj_other"})

        with pytest.raises(ConfirmationRequired):
            resolver.confirm(other, intent)

        outcome = resolver.confirm(sample_project, intent)
        assert outcome.project.screen_ids == ["scr_c"]

    @pytest.mark.unit
    def test_oldest_intents_expire(self, resolver, sample_project):
        resolution = resolver.resolve(sample_project, Selection(screen_ids=("scr_a", "scr_b")))
        intents = [
            resolver.request_delete(sample_project, resolution) for _ in range(MAX_PENDING + 2)
        ]

        assert len(resolver.pending) == MAX_PENDING
        with pytest.raises(ConfirmationRequired):
            resolver.confirm(sample_project, intents[0])
        resolver.confirm(sample_project, intents[-1])
