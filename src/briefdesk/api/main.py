from __future__ import annotations

from datetime import UTC, datetime
import os
from dotenv import load_dotenv
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

from .routers.projects import router as projects_router
from .routers.revisions import router as revisions_router
from .routers.deliverables import router as deliverables_router
from .routers.client import router as client_router
from .routers.phases import router as phases_router
from .routers.auth import router as auth_router
from ..observability.metrics import metrics_middleware_factory

load_dotenv()  # Load environment variables from .env if present (JWT_SECRET, REDIS_URL, etc.)

API_NAME = "BriefDesk API"
API_VERSION = "0.1.0"

app = FastAPI(title=API_NAME, version=API_VERSION)

# Observability: request latency histogram
app.middleware("http")(metrics_middleware_factory())

_routers = (
    projects_router,
    revisions_router,
    deliverables_router,
    client_router,
    phases_router,
    auth_router,
)
for _router in _routers:
    app.include_router(_router)
    # Also expose the same routers under /api
    app.include_router(_router, prefix="/api")

# CORS (for the web frontend dev server)
_origins = os.getenv("BRIEFDESK_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in _origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _health_payload() -> dict:
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        "components": {
            "api": "ok",
            "repo": os.getenv("BRIEFDESK_REPO_IMPL", "memory").lower(),
            "events": "redis" if os.getenv("REDIS_URL") else "disabled",
        },
    }


@app.get("/")
def root():
    return {"name": API_NAME, "version": API_VERSION}


@app.get("/health")
def health():
    return _health_payload()


@app.get("/metrics")
def metrics() -> Response:
    # Expose Prometheus metrics
    data = generate_latest(REGISTRY)
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


# API-prefixed convenience routes (kept alongside non-prefixed routes)
@app.get("/api")
def api_root():
    return {"name": API_NAME, "version": API_VERSION}


@app.get("/api/health")
def api_health():
    return _health_payload()


@app.get("/api/metrics")
def api_metrics() -> Response:
    data = generate_latest(REGISTRY)
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
