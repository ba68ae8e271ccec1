from __future__ import annotations

from typing import Any, Dict, Iterable

from fastapi.testclient import TestClient

from src.briefdesk.security.auth import create_access_token


DESIGNER_EMAIL = "designer@briefdesk.dev"
ADMIN_EMAIL = "admin@briefdesk.dev"
VIEWER_EMAIL = "assistant@briefdesk.dev"


def bearer(email: str, roles: Iterable[str], name: str = "") -> Dict[str, str]:
    """Auth headers carrying a token shaped like the identity provider's."""
    return {"Authorization": f"Bearer {create_access_token(email, roles, name=name)}"}


def designer_headers(client: TestClient, email: str = DESIGNER_EMAIL) -> Dict[str, str]:
    return bearer(email, ["designer"], name="Dana Designer")


def admin_headers(client: TestClient) -> Dict[str, str]:
    return bearer(ADMIN_EMAIL, ["admin"], name="Studio Admin")


def viewer_headers(client: TestClient) -> Dict[str, str]:
    return bearer(VIEWER_EMAIL, ["viewer"], name="Studio Assistant")

def create_project(client: TestClient, headers: Dict[str, str], **overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "client_name": "Acme Bakery",
        "client_email": "Owner@Acme.example",
        "project_type": "branding",
    }
    payload.update(overrides)
    res = client.post("/projects", json=payload, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()


def send_project(client: TestClient, headers: Dict[str, str], project_id: str) -> str:
    """Send the magic link and return the client token."""
    res = client.post(f"/projects/{project_id}/send", headers=headers)
    assert res.status_code == 200, res.text
    token = res.json()["project"]["magic_link_token"]
    assert token
    return token


def phase_of(client: TestClient, headers: Dict[str, str], project_id: str) -> str:
    res = client.get(f"/projects/{project_id}/progress", headers=headers)
    assert res.status_code == 200, res.text
    return res.json()["phase"]
