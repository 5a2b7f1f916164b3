"""
Tests for local project persistence.
"""

import json

import pytest

from sketch2site.io.project_store import ProjectStore


@pytest.fixture
def store(tmp_path):
    return ProjectStore(tmp_path / "projects")


def test_save_and_load(store):
    """Saved payloads come back unchanged with id and timestamps added."""
    vision = {"layoutType": "grid", "custom": {"nested": [1, 2]}}

    project_id = store.save_project({"name": "Landing", "visionAnalysis": vision, "html": "<p></p>"})
    project = store.load_project(project_id)

    assert project_id.startswith("project-")
    assert project["visionAnalysis"] == vision
    assert project["html"] == "<p></p>"
    assert project["createdAt"] == project["updatedAt"]


def test_load_unknown_project(store):
    assert store.load_project("project-missing") is None


def test_invalid_project_id(store):
    """Ids cannot escape the store directory."""
    with pytest.raises(ValueError):
        store.load_project("../secrets")


def test_update_keeps_identity(store):
    """Updates cannot change the id or creation time."""
    project_id = store.save_project({"name": "Draft"})
    created = store.load_project(project_id)["createdAt"]

    updated = store.update_project(project_id, {"name": "Final", "id": "other", "createdAt": "never"})

    assert updated["id"] == project_id
    assert updated["createdAt"] == created
    assert updated["name"] == "Final"
    assert store.list_projects()[0]["name"] == "Final"


def test_update_unknown_project(store):
    with pytest.raises(KeyError):
        store.update_project("project-missing", {"name": "x"})


def test_list_newest_first(store):
    """Listing is ordered by last update and holds metadata only."""
    first = store.save_project({"name": "First", "html": "<p>big</p>"})
    second = store.save_project({"name": "Second"})
    store.update_project(first, {"css": "p {}"})

    projects = store.list_projects()

    assert [project["id"] for project in projects] == [first, second]
    assert "html" not in projects[0]


def test_delete(store):
    project_id = store.save_project({"name": "Temp"})

    assert store.delete_project(project_id) is True
    assert store.load_project(project_id) is None
    assert store.list_projects() == []
    assert store.delete_project(project_id) is False


def test_auto_save_slot(store):
    """The auto-save slot is overwritten and can be cleared."""
    assert store.load_auto_save() is None

    store.auto_save({"html": "<p>1</p>"})
    store.auto_save({"html": "<p>2</p>"})

    assert store.load_auto_save()["html"] == "<p>2</p>"
    assert "updatedAt" in store.load_auto_save()

    store.clear_auto_save()
    assert store.load_auto_save() is None


def test_storage_info(store):
    store.save_project({"name": "One"})
    store.save_project({"name": "Two"})

    info = store.storage_info()

    assert info["projectCount"] == 2
    assert info["used"] > 0
    assert info["available"] is True


def test_export_and_import(store, tmp_path):
    """Imported projects get a fresh id and timestamps."""
    project_id = store.save_project({"name": "My Site!", "components": [{"type": "hero"}]})

    exported = store.export_project(project_id, tmp_path)
    imported_id = store.import_project(exported)

    assert exported.name == f"My-Site--{project_id}.json"
    assert imported_id != project_id
    assert store.load_project(imported_id)["components"] == [{"type": "hero"}]
    assert len(store.list_projects()) == 2


def test_import_requires_name(store, tmp_path):
    source = tmp_path / "broken.json"
    source.write_text(json.dumps({"html": "<p></p>"}), encoding="utf-8")

    with pytest.raises(ValueError):
        store.import_project(source)


def test_import_rejects_invalid_json(store, tmp_path):
    source = tmp_path / "broken.json"
    source.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError):
        store.import_project(source)
