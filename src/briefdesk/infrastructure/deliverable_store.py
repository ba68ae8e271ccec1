from __future__ import annotations

from datetime import UTC, datetime
from threading import RLock
from typing import Any, Dict, List, Optional, Protocol
import uuid

from ..domain.review_models import Deliverable, DeliverableCreate, DeliverableStatus


class DeliverableStore(Protocol):
    def create(self, project_id: str, payload: DeliverableCreate) -> Deliverable: ...

    def list(self, project_id: str, shared_only: bool = False) -> List[Deliverable]: ...

    def get(self, project_id: str, deliverable_id: str) -> Optional[Deliverable]: ...

    def update(self, project_id: str, deliverable_id: str, changes: Dict[str, Any]) -> Optional[Deliverable]: ...

    def delete(self, project_id: str, deliverable_id: str) -> bool: ...

    def delete_project(self, project_id: str) -> int: ...


class InMemoryDeliverableStore:
    def __init__(self) -> None:
        self._by_project: Dict[str, Dict[str, Deliverable]] = {}
        self._lock = RLock()

    def create(self, project_id: str, payload: DeliverableCreate) -> Deliverable:
        with self._lock:
            now = datetime.now(UTC)
            item = Deliverable(
                deliverable_id=uuid.uuid4().hex,
                project_id=project_id,
                title=payload.title,
                description=payload.description,
                file_url=payload.file_url,
                file_type=payload.file_type,
                version=payload.version,
                round_number=payload.round_number,
                status=DeliverableStatus.DRAFT,
                shared_with_client=False,
                created_at=now,
                updated_at=now,
            )
            self._by_project.setdefault(project_id, {})[item.deliverable_id] = item
            return item

    def list(self, project_id: str, shared_only: bool = False) -> List[Deliverable]:
        with self._lock:
            items = list(self._by_project.get(project_id, {}).values())
        if shared_only:
            items = [d for d in items if d.shared_with_client]
        return sorted(items, key=lambda d: (d.round_number, d.created_at))

    def get(self, project_id: str, deliverable_id: str) -> Optional[Deliverable]:
        with self._lock:
            return self._by_project.get(project_id, {}).get(deliverable_id)

    def update(self, project_id: str, deliverable_id: str, changes: Dict[str, Any]) -> Optional[Deliverable]:
        with self._lock:
            item = self._by_project.get(project_id, {}).get(deliverable_id)
            if item is None:
                return None
            for key, value in changes.items():
                setattr(item, key, value)
            item.updated_at = datetime.now(UTC)
            return item

    def delete(self, project_id: str, deliverable_id: str) -> bool:
        with self._lock:
            return self._by_project.get(project_id, {}).pop(deliverable_id, None) is not None

    def delete_project(self, project_id: str) -> int:
        with self._lock:
            return len(self._by_project.pop(project_id, {}))


_store: Optional[DeliverableStore] = None


def get_deliverable_store() -> DeliverableStore:
    global _store
    if _store is None:
        _store = InMemoryDeliverableStore()
    return _store
