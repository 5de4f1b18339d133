"""Tests for the editor session."""

import pytest

from mockflow import api
from mockflow.api import Editor
from mockflow.api.editor import MAX_STATUSES
from mockflow.models import ConfirmationRequired, HierarchyViolation, NodeKind
from mockflow.selection import Surface


@pytest.fixture
def editor(sample_project):
    return Editor(sample_project)


@pytest.mark.unit
class TestDispatch:
    """Applying mutations through the session."""

    def test_dispatch_replaces_snapshot(self, editor, sample_project):
        published = []
        editor.subscribe(published.append)

        result = editor.dispatch(api.update_element, "scr_a", "el_free", {"name": "Free"})

        assert editor.project is result
        assert published == [result]
        assert result.last_modified > sample_project.last_modified
        assert sample_project.locate_element("el_free")[1].name == "el_free"

    def test_unsubscribe(self, editor):
        published = []
        unsubscribe = editor.subscribe(published.append)
        unsubscribe()

        editor.dispatch(api.add_screen)
        assert published == []

    def test_locked_edit_recorded_as_status(self, editor):
        editor.dispatch(api.toggle_locked, NodeKind.ELEMENT, ["el_free"])
        before = editor.project

        result = editor.dispatch(api.update_element, "scr_a", "el_free", {"x": 99})

        assert result is before
        assert len(editor.statuses) == 1
        assert editor.statuses[0].entity_id == "el_free"
        assert editor.statuses[0].mutation == "update_element"

    def test_locked_move_recorded_as_status(self, editor):
        editor.dispatch(api.toggle_locked, NodeKind.ELEMENT, ["el_free"])
        before = editor.project

        assert editor.dispatch(api.reparent, "el_free", "el_frame") is before
        assert editor.statuses[-1].mutation == "reparent"
        assert editor.statuses[-1].entity_id == "el_free"

    def test_statuses_are_bounded(self, editor):
        editor.dispatch(api.toggle_locked, NodeKind.ELEMENT, ["el_free"])
        for x in range(MAX_STATUSES + 10):
            editor.dispatch(api.update_element, "scr_a", "el_free", {"x": x})

        assert len(editor.statuses) == MAX_STATUSES

    def test_violation_keeps_snapshot(self, editor, sample_project):
        with pytest.raises(HierarchyViolation):
            editor.dispatch(api.reparent, "el_frame", "el_title")

        assert editor.project is sample_project

    def test_engine_functions_accepted(self, editor):
        from mockflow.hierarchy import add_screen

        editor.dispatch(add_screen, "Settings")
        assert editor.project.active_screen.name == "Settings"


@pytest.mark.unit
class TestSelection:
    """Selection handling."""

    def test_group_selects_container(self, editor):
        editor.select(element_ids=("el_title", "el_button"))
        group_id = editor.group_selected_elements()

        assert editor.selection.element_ids == (group_id,)
        assert editor.resolve().surface == Surface.ELEMENT

    def test_duplicate_selects_copy(self, editor):
        editor.select(element_ids=("el_free",))
        copy_id = editor.duplicate_selected_element()

        assert copy_id is not None
        assert editor.selection.element_ids == (copy_id,)

    def test_deleted_ids_leave_selection(self, editor):
        editor.select(element_ids=("el_free", "el_title"), screen_ids=("scr_b",))
        editor.dispatch(api.delete_elements, ["el_free"])

        assert editor.selection.element_ids == ("el_title",)
        assert editor.selection.screen_ids == ("scr_b",)

    def test_bulk_delete_flow(self, editor):
        editor.select(screen_ids=("scr_a", "scr_b"))

        with pytest.raises(ConfirmationRequired):
            editor.apply("delete")

        intent = editor.request_delete()
        project = editor.confirm(intent)

        assert project.screen_ids == ["scr_c"]
        assert project.active_screen_id == "scr_c"
        assert editor.selection.is_empty

    def test_project_context(self, editor):
        editor.navigate_to("project")
        assert editor.resolve().surface == Surface.PROJECT


@pytest.mark.integration
def test_autosave(store, sample_project):
    editor = Editor(sample_project, store=store, autosave=True)
    editor.dispatch(api.update_project, {"name": "Saved"})

    assert store.load(sample_project.id).name == "Saved"
