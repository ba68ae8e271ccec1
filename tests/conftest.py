import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep public mode, events and rate limits deterministic across tests."""
    from src.briefdesk.security.rate_limit import reset_rate_limits

    for name in ("REDIS_URL", "BRIEFDESK_PUBLIC_MODE", "BRIEFDESK_STRICT_PHASES", "BRIEFDESK_DEBUG", "BRIEFDESK_REPO_IMPL",
                 "BRIEFDESK_RATE_LIMIT_DISABLED", "JWT_AUDIENCE"):
        monkeypatch.delenv(name, raising=False)
    reset_rate_limits()
    yield
    reset_rate_limits()
