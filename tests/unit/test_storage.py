"""Tests for the document codec, importer and project store."""

import io
import zipfile

import orjson
import pytest

from mockflow.hierarchy import find_violations
from mockflow.models import ElementStyle, InvalidImport, Project
from mockflow.storage import (
    ProjectStore,
    accepted_projects,
    dump_project,
    import_file,
    is_valid_document,
    load_project,
    to_document,
)


def _zip(members: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, data in members.items():
            archive.writestr(name, data)
    return buffer.getvalue()


# ============================================================================
# Codec
# ============================================================================

@pytest.mark.unit
class TestCodec:
    """Document encoding."""

    def test_round_trip(self, sample_project):
        assert load_project(dump_project(sample_project)) == sample_project

    def test_camel_case_fields(self, sample_project):
        document = to_document(sample_project)

        assert document["activeScreenId"] == "scr_a"
        assert "screenGroups" in document
        element = document["screens"][0]["elements"][1]
        assert element["parentId"] == "el_frame"
        assert element["zIndex"] == 2

    def test_unset_fields_omitted(self, sample_project):
        element = to_document(sample_project)["screens"][0]["elements"][0]
        assert "parentId" not in element

    def test_deterministic(self, sample_project):
        assert dump_project(sample_project) == dump_project(sample_project.model_copy())

    def test_missing_optional_fields_defaulted(self):
        project = load_project(b'{"name": "Bare", "screens": [{"id": "s1", "name": "One"}]}')

        assert project.name == "Bare"
        assert project.id
        assert project.active_screen_id == "s1"
        assert project.grid_config.size == 20

    def test_empty_screens_healed(self):
        project = load_project('{"name": "Empty", "screens": []}')

        assert len(project.screens) == 1
        assert project.screens[0].name == "Home"

    @pytest.mark.parametrize(
        "document",
        [
            {"screens": []},
            {"name": 5, "screens": []},
            {"name": "X", "screens": {}},
            {"name": "X", "screens": [], "gridConfig": "dense"},
            [],
            "project",
        ],
    )
    def test_invalid_documents(self, document):
        assert not is_valid_document(document)
        with pytest.raises(InvalidImport):
            load_project(orjson.dumps(document))

    def test_malformed_json(self):
        with pytest.raises(InvalidImport):
            load_project(b'{"name": "broken"')

    def test_bad_field_type(self):
        with pytest.raises(InvalidImport):
            load_project(b'{"name": "X", "screens": [{"id": "s1"}]}')

    def test_null_style_extra_round_trip(self, sample_project):
        screen, element = sample_project.locate_element("el_free")
        style = ElementStyle.model_validate({"boxShadow": None, "color": "#111111"})
        project = sample_project.with_screen(
            screen.with_elements(
                [element.model_copy(update={"style": style}) if e.id == "el_free" else e
                 for e in screen.elements]
            )
        )
        back = load_project(dump_project(project))

        assert back.locate_element("el_free")[1].style.model_extra == {"boxShadow": None}
        assert back == project

    def test_inconsistent_document_still_loads(self, sample_project):
        document = to_document(sample_project)
        elements = document["screens"][0]["elements"]
        elements[0]["parentId"] = "el_title"  # el_frame <-> el_title cycle

        project = load_project(orjson.dumps(document))
        assert find_violations(project)



# ============================================================================
# Import
# ============================================================================

@pytest.mark.unit
class TestImport:
    """Import candidates."""

    def test_json_file(self, sample_project):
        (candidate,) = import_file("sample.json", dump_project(sample_project).encode())

        assert candidate.is_valid
        assert candidate.project == sample_project
        assert candidate.error is None
        assert candidate.suggested_name == "Sample"

    def test_zip_mixed_members(self, sample_project):
        data = _zip(
            {
                "good.json": dump_project(sample_project).encode(),
                "bad.json": b'{"name": 1}',
                "notes.txt": b"ignored",
                "__MACOSX/good.json": b"junk",
            }
        )
        candidates = import_file("bundle.zip", data)

        assert [c.source for c in candidates] == ["good.json", "bad.json"]
        assert [c.is_valid for c in candidates] == [True, False]
        assert isinstance(candidates[1].error, InvalidImport)
        assert candidates[1].suggested_name == "bad"

    def test_unreadable_archive(self):
        (candidate,) = import_file("bundle.zip", b"not a zip")

        assert not candidate.is_valid
        assert candidate.project is None

    def test_unsupported_type(self):
        (candidate,) = import_file("picture.png", b"\x89PNG")
        assert not candidate.is_valid

    def test_accept_assigns_new_id(self, sample_project):
        (candidate,) = import_file("sample.json", dump_project(sample_project).encode())
        project = candidate.accept("Imported")

        assert project.id != sample_project.id
        assert project.name == "Imported"
        assert project.screens == sample_project.screens

    def test_accept_invalid_raises(self):
        (candidate,) = import_file("bad.json", b"{}")
        with pytest.raises(InvalidImport):
            candidate.accept()

    def test_none_action_imports(self, sample_project):
        document = to_document(sample_project)
        document["screens"][0]["elements"][2]["interactions"][0]["action"] = "none"
        (candidate,) = import_file("tool.json", orjson.dumps(document))

        assert candidate.is_valid
        (interaction,) = candidate.project.locate_element("el_button")[1].interactions
        assert interaction.action == "none"

    def test_accepted_projects_skips_invalid(self, sample_project):
        data = _zip({"a.json": dump_project(sample_project).encode(), "b.json": b"[]"})
        projects = accepted_projects(import_file("bundle.zip", data))

        assert len(projects) == 1
        assert isinstance(projects[0], Project)


# ============================================================================
# Store
# ============================================================================

@pytest.mark.integration
class TestProjectStore:
    """File-backed store."""

    def test_save_and_load(self, store, sample_project, tmp_path):
        assert store.save(sample_project) is True

        fresh = ProjectStore(tmp_path / "projects")
        assert fresh.load(sample_project.id) == sample_project

    def test_unchanged_save_skipped(self, store, sample_project):
        assert store.save(sample_project) is True
        assert store.save(sample_project) is False

    def test_index_most_recent_first(self, store, sample_project):
        older = sample_project.model_copy(update={"id": "prj_old", "last_modified": 10})
        newer = sample_project.model_copy(update={"id": "prj_new", "last_modified": 20})
        store.save_many([newer, older])

        assert [s.id for s in store.list_projects()] == ["prj_new", "prj_old"]
        assert store.load_latest().id == "prj_new"

    def test_index_holds_each_project_once(self, store, sample_project):
        store.save(sample_project)
        store.save(sample_project.model_copy(update={"name": "Renamed", "last_modified": 5_000}))

        summaries = store.list_projects()
        assert len(summaries) == 1
        assert summaries[0].name == "Renamed"

    def test_index_survives_restart(self, store, sample_project, tmp_path):
        store.save(sample_project)

        fresh = ProjectStore(tmp_path / "projects")
        assert [s.id for s in fresh.list_projects()] == [sample_project.id]

    def test_corrupt_index_rebuilt(self, store, sample_project, tmp_path):
        store.save(sample_project)
        (tmp_path / "projects" / "index.json").write_text("{oops")

        fresh = ProjectStore(tmp_path / "projects")
        assert [s.id for s in fresh.list_projects()] == [sample_project.id]

    def test_delete(self, store, sample_project):
        store.save(sample_project)

        assert store.delete(sample_project.id) is True
        assert store.load(sample_project.id) is None
        assert store.list_projects() == []
        assert store.delete(sample_project.id) is False

    def test_duplicate(self, store, sample_project):
        store.save(sample_project)
        copy = store.duplicate(sample_project.id)

        assert copy.name == "Sample (Copy)"
        assert copy.id != sample_project.id
        assert {s.id for s in store.list_projects()} == {sample_project.id, copy.id}

    def test_unsafe_id_stays_inside_root(self, store, sample_project, tmp_path):
        project = sample_project.model_copy(update={"id": "../escape"})
        store.save(project)

        assert not (tmp_path / "escape.json").exists()
        assert ProjectStore(tmp_path / "projects").load("../escape") == project

    def test_load_missing(self, store):
        assert store.load("prj_missing") is None
        assert store.load_latest() is None

    def test_load_latest_skips_corrupt(self, store, sample_project, tmp_path):
        older = sample_project.model_copy(update={"id": "prj_old", "name": "Old", "last_modified": 1})
        newer = sample_project.model_copy(update={"id": "prj_new", "name": "New", "last_modified": 2})
        store.save_many([older, newer])
        (tmp_path / "projects" / "project_prj_new.json").write_text("{not json")

        fresh = ProjectStore(tmp_path / "projects")
        assert fresh.load_latest().name == "Old"
