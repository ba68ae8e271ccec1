"""
Headless lifecycle walk-through for BriefDesk.

Drives one project through the full client-onboarding flow against the
in-process API and prints the derived progress phase after every step:
create -> send magic link -> client answers -> client submits -> designer
requests a revision -> client replies -> designer shares and delivers.

Run:
  python scripts/simulate_lifecycle.py
"""
from __future__ import annotations

from pathlib import Path
import sys

# Ensure repository root is on sys.path so 'src' package can be imported when
# executing this script from the scripts/ directory.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient

from src.briefdesk.api.main import app
from src.briefdesk.security.auth import create_access_token


DESIGNER = "designer@briefdesk.dev"


def _sign_in() -> dict:
    token = create_access_token(DESIGNER, ["designer"], name="Dana Designer")
    return {"Authorization": f"Bearer {token}"}


def _show(client: TestClient, headers: dict, pid: str, step: str) -> None:
    progress = client.get(f"/projects/{pid}/progress", headers=headers).json()
    marks = " ".join(
        {"completed": "[x]", "current": "[>]", "upcoming": "[ ]"}[s["state"]] + s["key"]
        for s in progress["steps"]
    )
    print(f"{step:<28} status={progress['status']:<12} phase={progress['phase']:<10} {marks}")


def main() -> int:
    client = TestClient(app)
    headers = _sign_in()

    proj = client.post(
        "/projects",
        json={"client_name": "Acme Bakery", "client_email": "owner@acme.example", "project_type": "branding"},
        headers=headers,
    ).json()
    pid = proj["project_id"]
    _show(client, headers, pid, "created")

    sent = client.post(f"/projects/{pid}/send", headers=headers).json()
    token = sent["magic_link_url"].rsplit("/", 1)[-1]
    _show(client, headers, pid, "magic link sent")

    client.post(
        f"/client/projects/{pid}/responses",
        headers={"x-magic-token": token},
        json={"step_key": "business_info", "answers": {"company_name": "Acme Bakery", "industry": "Food"}},
    )
    _show(client, headers, pid, "client answered a step")

    brief = client.post(f"/client/projects/{pid}/submit", headers={"x-magic-token": token}).json()
    _show(client, headers, pid, "brief submitted")
    print(f"  brief v{brief['version']} ({brief['confidence_score']}): {brief['summary']}")

    rev = client.post(
        f"/projects/{pid}/revisions",
        json={"step_key": "style_direction", "message": "Could you pick two reference brands?"},
        headers=headers,
    ).json()
    _show(client, headers, pid, "revision requested")

    client.patch(
        f"/client/projects/{pid}/revisions",
        params={"token": token},
        json={"revision_id": rev["revision_id"], "response": "Aesop and Le Labo."},
    )
    _show(client, headers, pid, "client replied")

    deliverable = client.post(
        f"/projects/{pid}/deliverables",
        json={"title": "Logo concepts", "file_type": "application/pdf"},
        headers=headers,
    ).json()
    client.post(
        f"/projects/{pid}/deliver",
        json={"deliverable_ids": [deliverable["deliverable_id"]], "notes": "Print-ready files included."},
        headers=headers,
    )
    _show(client, headers, pid, "delivered")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
