from __future__ import annotations

import logging
import os
from datetime import UTC, datetime
from typing import Any, Dict, List, Optional, Protocol
from pathlib import Path
import json
from threading import RLock
from ..domain.models import Project, ProjectCreate, ProjectStatus


logger = logging.getLogger("briefdesk.repository")


class ProjectRepository(Protocol):
    def list(self, designer_email: Optional[str] = None) -> List[Project]: ...
    def get(self, project_id: str) -> Optional[Project]: ...
    def create(self, payload: ProjectCreate, designer_email: str) -> Project: ...
    def update(self, project_id: str, changes: Dict[str, Any]) -> Optional[Project]: ...
    def update_status(self, project_id: str, new_status: str) -> Optional[Project]: ...
    def delete(self, project_id: str) -> bool: ...


def _new_project(pid: str, payload: ProjectCreate, designer_email: str) -> Project:
    now = datetime.now(UTC)
    return Project(
        project_id=pid,
        designer_email=designer_email.lower(),
        client_name=payload.client_name,
        client_email=str(payload.client_email).lower(),
        project_type=payload.project_type.value if payload.project_type else None,
        description=payload.description,
        status=ProjectStatus.DRAFT.value,
        created_at=now,
        updated_at=now,
    )


def _apply_changes(proj: Project, changes: Dict[str, Any]) -> Project:
    for key, value in changes.items():
        if hasattr(value, "value"):
            value = value.value
        setattr(proj, key, value)
    proj.updated_at = datetime.now(UTC)
    return proj


def _apply_status(proj: Project, new_status: str) -> Project:
    changes: Dict[str, Any] = {"status": new_status}
    if new_status == ProjectStatus.COMPLETED.value:
        changes["completed_at"] = datetime.now(UTC)
    return _apply_changes(proj, changes)


class InMemoryProjectRepository:
    """Process-local project repository used by default and in tests."""

    def __init__(self) -> None:
        self._projects: Dict[str, Project] = {}
        self._counter: int = 0
        self._lock = RLock()

    def _generate_project_id(self) -> str:
        self._counter += 1
        year = datetime.now(UTC).year
        return f"PRJ-{year}-{self._counter:04d}"

    def list(self, designer_email: Optional[str] = None) -> List[Project]:
        with self._lock:
            items = list(self._projects.values())
        if designer_email:
            items = [p for p in items if p.designer_email == designer_email.lower()]
        return items

    def get(self, project_id: str) -> Optional[Project]:
        with self._lock:
            return self._projects.get(project_id)

    def create(self, payload: ProjectCreate, designer_email: str) -> Project:
        with self._lock:
            project = _new_project(self._generate_project_id(), payload, designer_email)
            self._projects[project.project_id] = project
            return project

    def update(self, project_id: str, changes: Dict[str, Any]) -> Optional[Project]:
        with self._lock:
            proj = self._projects.get(project_id)
            if not proj:
                return None
            return _apply_changes(proj, changes)

    def update_status(self, project_id: str, new_status: str) -> Optional[Project]:
        with self._lock:
            proj = self._projects.get(project_id)
            if not proj:
                return None
            return _apply_status(proj, new_status)

    def delete(self, project_id: str) -> bool:
        """Delete a project by id. Returns True if removed."""
        with self._lock:
            return self._projects.pop(project_id, None) is not None


class FileProjectRepository:
    """Simple JSON file-backed repository for development persistence.

    Structure: a single JSON object mapping project_id -> project dict.
    Thread-safe with a coarse RLock; suitable for dev/test, not high concurrency.
    """

    def __init__(self, file_path: Optional[str] = None) -> None:
        self._lock = RLock()
        # Default to run/projects.json at repo root
        root = Path(__file__).resolve().parents[3]
        default_path = root / "run" / "projects.json"
        self._path = Path(file_path or os.getenv("BRIEFDESK_PROJECTS_FILE", str(default_path)))
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._projects: Dict[str, Project] = {}
        self._counter: int = 0
        self._load()

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            # Unreadable file: start clean (dev-friendly)
            logger.warning("Could not read %s; starting with an empty project store", self._path)
            return
        max_seq = 0
        for pid, p in (data or {}).items():
            try:
                proj = Project(**p)
            except ValueError:
                logger.warning("Skipping malformed project record %s", pid)
                continue
            self._projects[pid] = proj
            # track numeric suffix for counter continuity: PRJ-YYYY-####
            parts = str(pid).split("-")
            if len(parts) == 3 and parts[2].isdigit():
                max_seq = max(max_seq, int(parts[2]))
        self._counter = max_seq

    def _save(self) -> None:
        obj = {pid: proj.model_dump(mode="json") for pid, proj in self._projects.items()}
        try:
            self._path.write_text(json.dumps(obj, indent=2), encoding="utf-8")
        except OSError:
            # Best-effort save; in dev we avoid crashing the app
            logger.exception("Failed to persist projects to %s", self._path)

    def _generate_project_id(self) -> str:
        self._counter += 1
        year = datetime.now(UTC).year
        return f"PRJ-{year}-{self._counter:04d}"

    def list(self, designer_email: Optional[str] = None) -> List[Project]:
        with self._lock:
            items = list(self._projects.values())
        if designer_email:
            items = [p for p in items if p.designer_email == designer_email.lower()]
        return items

    def get(self, project_id: str) -> Optional[Project]:
        with self._lock:
            return self._projects.get(project_id)

    def create(self, payload: ProjectCreate, designer_email: str) -> Project:
        with self._lock:
            project = _new_project(self._generate_project_id(), payload, designer_email)
            self._projects[project.project_id] = project
            self._save()
            return project

    def update(self, project_id: str, changes: Dict[str, Any]) -> Optional[Project]:
        with self._lock:
            proj = self._projects.get(project_id)
            if not proj:
                return None
            _apply_changes(proj, changes)
            self._save()
            return proj

    def update_status(self, project_id: str, new_status: str) -> Optional[Project]:
        with self._lock:
            proj = self._projects.get(project_id)
            if not proj:
                return None
            _apply_status(proj, new_status)
            self._save()
            return proj

    def delete(self, project_id: str) -> bool:
        with self._lock:
            ok = self._projects.pop(project_id, None) is not None
            if ok:
                self._save()
            return ok


_repo: ProjectRepository = InMemoryProjectRepository()
_file_repo: ProjectRepository | None = None


def get_repo() -> ProjectRepository:
    global _file_repo
    impl = os.getenv("BRIEFDESK_REPO_IMPL", "memory").lower()
    if impl == "file":
        if _file_repo is None:
            _file_repo = FileProjectRepository()
        return _file_repo
    return _repo
