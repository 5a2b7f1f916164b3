"""
Local project persistence.

A project is one JSON document per file under the store directory, plus an
index of metadata (id, name, thumbnail, timestamps) used for listing. Payloads
produced by the pipelines (vision/layout analysis, suggestions, components,
generated code) are stored as given and handed back unchanged.
"""

import json
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


INDEX_FILE = "projects.json"
AUTO_SAVE_FILE = "auto-save.json"
METADATA_KEYS = ("id", "name", "thumbnail", "createdAt", "updatedAt")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_project_id() -> str:
    return f"project-{int(datetime.now(timezone.utc).timestamp() * 1000)}-{uuid.uuid4().hex[:9]}"


def _metadata(project: Dict[str, Any]) -> Dict[str, Any]:
    return {key: project[key] for key in METADATA_KEYS if project.get(key) is not None}


class ProjectStore:
    """Saves, lists and restores project snapshots as JSON files."""

    def __init__(self, root: Union[str, Path] = ".sketch2site/projects"):
        """
        Initialize the store.

        Args:
            root: Directory holding the project files (created if missing).
        """
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _project_path(self, project_id: str) -> Path:
        if not re.fullmatch(r"[A-Za-z0-9_-]+", project_id):
            raise ValueError(f"Invalid project id: {project_id}")
        return self.root / f"{project_id}.json"

    def _read_json(self, path: Path) -> Optional[Any]:
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except ValueError:
            print(f"⚠️  Ignoring unreadable file: {path}")
            return None

    def _write_json(self, path: Path, data: Any):
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    def _read_index(self) -> List[Dict[str, Any]]:
        index = self._read_json(self.root / INDEX_FILE)
        return index if isinstance(index, list) else []

    def _write_index(self, index: List[Dict[str, Any]]):
        self._write_json(self.root / INDEX_FILE, index)

    def list_projects(self) -> List[Dict[str, Any]]:
        """Project metadata, most recently updated first."""
        return sorted(self._read_index(), key=lambda entry: entry.get("updatedAt", ""), reverse=True)

    def save_project(self, project: Dict[str, Any]) -> str:
        """
        Save a new project.

        Args:
            project: Project fields (``name`` plus any payloads). Existing
                ``id``/``createdAt``/``updatedAt`` values are replaced.

        Returns:
            The new project id.
        """
        now = _now()
        project_id = _new_project_id()
        record = {**project, "id": project_id, "createdAt": now, "updatedAt": now}

        self._write_json(self._project_path(project_id), record)
        index = self._read_index()
        index.append(_metadata(record))
        self._write_index(index)
        return project_id

    def update_project(self, project_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge ``updates`` into a saved project.

        The id and creation time never change; ``updatedAt`` is refreshed.

        Raises:
            KeyError: If the project does not exist.
        """
        project = self.load_project(project_id)
        if project is None:
            raise KeyError(f"Project not found: {project_id}")

        record = {
            **project,
            **updates,
            "id": project_id,
            "createdAt": project["createdAt"],
            "updatedAt": _now(),
        }
        self._write_json(self._project_path(project_id), record)

        index = [
            _metadata(record) if entry.get("id") == project_id else entry
            for entry in self._read_index()
        ]
        self._write_index(index)
        return record

    def load_project(self, project_id: str) -> Optional[Dict[str, Any]]:
        project = self._read_json(self._project_path(project_id))
        return project if isinstance(project, dict) else None

    def delete_project(self, project_id: str) -> bool:
        """Remove a project; returns False if it did not exist."""
        path = self._project_path(project_id)
        existed = path.exists()
        if existed:
            path.unlink()
        self._write_index([entry for entry in self._read_index() if entry.get("id") != project_id])
        return existed

    def auto_save(self, data: Dict[str, Any]):
        """Overwrite the single auto-save slot."""
        self._write_json(self.root / AUTO_SAVE_FILE, {**data, "updatedAt": _now()})

    def load_auto_save(self) -> Optional[Dict[str, Any]]:
        data = self._read_json(self.root / AUTO_SAVE_FILE)
        return data if isinstance(data, dict) else None

    def clear_auto_save(self):
        path = self.root / AUTO_SAVE_FILE
        if path.exists():
            path.unlink()

    def storage_info(self) -> Dict[str, Any]:
        """Bytes used by the store and the number of saved projects."""
        used = sum(path.stat().st_size for path in self.root.glob("*.json"))
        return {"used": used, "available": True, "projectCount": len(self._read_index())}

    def export_project(self, project_id: str, destination: Union[str, Path]) -> Path:
        """
        Write a project to a standalone JSON file.

        Args:
            project_id: Project to export.
            destination: Directory or file path.

        Returns:
            Path of the written file.
        """
        project = self.load_project(project_id)
        if project is None:
            raise KeyError(f"Project not found: {project_id}")

        destination = Path(destination)
        if destination.is_dir():
            safe_name = re.sub(r"[^a-z0-9]", "-", str(project.get("name", "project")), flags=re.IGNORECASE)
            destination = destination / f"{safe_name}-{project_id}.json"
        self._write_json(destination, project)
        return destination

    def import_project(self, source: Union[str, Path]) -> str:
        """
        Import a project exported with export_project().

        A fresh id and timestamps are assigned.

        Raises:
            ValueError: If the file is not a project document or has no name.
        """
        try:
            project = json.loads(Path(source).read_text(encoding="utf-8"))
        except ValueError as e:
            raise ValueError(f"Invalid project file: {e}") from e
        if not isinstance(project, dict) or not project.get("name"):
            raise ValueError("Invalid project file: missing name")

        data = {key: value for key, value in project.items() if key not in ("id", "createdAt", "updatedAt")}
        return self.save_project(data)
