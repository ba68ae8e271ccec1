from __future__ import annotations

"""Questionnaire answers and the briefs generated from them.

Answers are upserted per ``(project_id, step_key)`` while the client works
through the questionnaire. Every submission stores a new brief version; the
latest one is what designers and clients see.
"""

from datetime import UTC, datetime
from threading import RLock
from typing import Any, Dict, List, Optional, Protocol

from ..domain.brief_models import QuestionnaireResponse, StructuredBrief


class ResponseStore(Protocol):
    def upsert(self, project_id: str, step_key: str, answers: Dict[str, Any]) -> QuestionnaireResponse: ...

    def list(self, project_id: str) -> List[QuestionnaireResponse]: ...

    def answers_by_step(self, project_id: str) -> Dict[str, Dict[str, Any]]: ...

    def next_brief_version(self, project_id: str) -> int: ...

    def save_brief(self, brief: StructuredBrief) -> StructuredBrief: ...

    def latest_brief(self, project_id: str) -> Optional[StructuredBrief]: ...

    def delete_project(self, project_id: str) -> int: ...


class InMemoryResponseStore:
    def __init__(self) -> None:
        self._responses: Dict[str, Dict[str, QuestionnaireResponse]] = {}
        self._briefs: Dict[str, List[StructuredBrief]] = {}
        self._lock = RLock()

    def upsert(self, project_id: str, step_key: str, answers: Dict[str, Any]) -> QuestionnaireResponse:
        with self._lock:
            now = datetime.now(UTC)
            steps = self._responses.setdefault(project_id, {})
            existing = steps.get(step_key)
            item = QuestionnaireResponse(
                project_id=project_id,
                step_key=step_key,
                answers=dict(answers),
                created_at=existing.created_at if existing else now,
                updated_at=now,
            )
            steps[step_key] = item
            return item

    def list(self, project_id: str) -> List[QuestionnaireResponse]:
        with self._lock:
            items = list(self._responses.get(project_id, {}).values())
        return sorted(items, key=lambda r: r.created_at)

    def answers_by_step(self, project_id: str) -> Dict[str, Dict[str, Any]]:
        return {r.step_key: r.answers for r in self.list(project_id)}

    def next_brief_version(self, project_id: str) -> int:
        with self._lock:
            return len(self._briefs.get(project_id, [])) + 1

    def save_brief(self, brief: StructuredBrief) -> StructuredBrief:
        with self._lock:
            self._briefs.setdefault(brief.project_id, []).append(brief)
            return brief

    def latest_brief(self, project_id: str) -> Optional[StructuredBrief]:
        with self._lock:
            versions = self._briefs.get(project_id) or []
            return versions[-1] if versions else None

    def delete_project(self, project_id: str) -> int:
        """Drop answers and briefs; returns the number of answered steps removed."""
        with self._lock:
            self._briefs.pop(project_id, None)
            return len(self._responses.pop(project_id, {}))


_store: Optional[ResponseStore] = None


def get_response_store() -> ResponseStore:
    global _store
    if _store is None:
        _store = InMemoryResponseStore()
    return _store
