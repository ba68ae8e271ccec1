from __future__ import annotations

from datetime import UTC, datetime
from threading import RLock
from typing import Dict, List, Optional, Protocol
import uuid

from ..domain.review_models import RevisionCreate, RevisionRequest, RevisionStatus


class RevisionStore(Protocol):
    def create(self, project_id: str, designer_email: str, payload: RevisionCreate) -> RevisionRequest: ...

    def list(self, project_id: str) -> List[RevisionRequest]: ...

    def get(self, project_id: str, revision_id: str) -> Optional[RevisionRequest]: ...

    def respond(self, project_id: str, revision_id: str, response: str) -> Optional[RevisionRequest]: ...

    def delete_project(self, project_id: str) -> int: ...


class InMemoryRevisionStore:
    def __init__(self) -> None:
        self._by_project: Dict[str, Dict[str, RevisionRequest]] = {}
        self._lock = RLock()

    def create(self, project_id: str, designer_email: str, payload: RevisionCreate) -> RevisionRequest:
        with self._lock:
            rev = RevisionRequest(
                revision_id=str(uuid.uuid4()),
                project_id=project_id,
                designer_email=designer_email.lower(),
                step_key=payload.step_key,
                field_key=payload.field_key,
                message=payload.message,
                status=RevisionStatus.PENDING,
                created_at=datetime.now(UTC),
            )
            self._by_project.setdefault(project_id, {})[rev.revision_id] = rev
            return rev

    def list(self, project_id: str) -> List[RevisionRequest]:
        with self._lock:
            items = list(self._by_project.get(project_id, {}).values())
        # Newest first
        return sorted(items, key=lambda r: r.created_at, reverse=True)

    def get(self, project_id: str, revision_id: str) -> Optional[RevisionRequest]:
        with self._lock:
            return self._by_project.get(project_id, {}).get(revision_id)

    def respond(self, project_id: str, revision_id: str, response: str) -> Optional[RevisionRequest]:
        with self._lock:
            rev = self._by_project.get(project_id, {}).get(revision_id)
            if rev is None:
                return None
            rev.response = response
            rev.status = RevisionStatus.RESPONDED
            rev.responded_at = datetime.now(UTC)
            return rev

    def delete_project(self, project_id: str) -> int:
        with self._lock:
            return len(self._by_project.pop(project_id, {}))


_store: Optional[RevisionStore] = None


def get_revision_store() -> RevisionStore:
    global _store
    if _store is None:
        _store = InMemoryRevisionStore()
    return _store
