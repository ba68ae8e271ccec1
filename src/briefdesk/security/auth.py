from __future__ import annotations

"""Designer identity from bearer tokens.

Sign-in itself happens in the identity provider in front of BriefDesk; this
module only verifies the HS256 JWT it hands out and turns its claims into a
``User``. Roles come from the ``roles`` claim and unknown roles are dropped.

Env vars:
- JWT_SECRET (required in prod; dev default otherwise)
- JWT_AUDIENCE (optional; checked when set)
- JWT_EXPIRES_MIN (lifetime of tokens minted by ``create_access_token``)
- BRIEFDESK_PUBLIC_MODE (anonymous callers act as a guest designer)
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

import logging
import os
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, EmailStr


logger = logging.getLogger("briefdesk.auth")
bearer_scheme = HTTPBearer(auto_error=False)

KNOWN_ROLES = ("viewer", "designer", "admin")
GUEST = {"email": "guest@example.com", "name": "Guest", "roles": ["designer"]}
_DEV_SECRET = "dev-secret-change-me-before-deploying-briefdesk"


@dataclass(frozen=True)
class JwtConfig:
    secret: str
    audience: Optional[str] = None
    expires_min: int = 60
    algorithm: str = "HS256"

    @classmethod
    def from_env(cls) -> "JwtConfig":
        return cls(
            secret=os.getenv("JWT_SECRET") or _DEV_SECRET,
            audience=os.getenv("JWT_AUDIENCE") or None,
            expires_min=int(os.getenv("JWT_EXPIRES_MIN", "60")),
        )


class User(BaseModel):
    email: EmailStr
    name: str = ""
    roles: List[str]


def normalize_roles(raw: Any) -> List[str]:
    if isinstance(raw, str):
        raw = raw.split()
    if not isinstance(raw, Iterable):
        return []
    return [r for r in (str(x).strip().lower() for x in raw) if r in KNOWN_ROLES]


def create_access_token(email: str, roles: Iterable[str], name: str = "", cfg: Optional[JwtConfig] = None) -> str:
    """Mint a token in the identity provider's format (dev tooling and tests)."""
    cfg = cfg or JwtConfig.from_env()
    now = datetime.now(UTC)
    claims: Dict[str, Any] = {
        "sub": email.lower(),
        "name": name,
        "roles": list(roles),
        "iat": now,
        "exp": now + timedelta(minutes=cfg.expires_min),
    }
    if cfg.audience:
        claims["aud"] = cfg.audience
    return jwt.encode(claims, cfg.secret, algorithm=cfg.algorithm)


def decode_token(token: str, cfg: Optional[JwtConfig] = None) -> User:
    cfg = cfg or JwtConfig.from_env()
    try:
        claims = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.algorithm],
            audience=cfg.audience,
            options={"require": ["sub", "exp"], "verify_aud": cfg.audience is not None},
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    roles = normalize_roles(claims.get("roles"))
    if not roles:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Token carries no BriefDesk role")
    try:
        return User(email=str(claims["sub"]).lower(), name=str(claims.get("name") or ""), roles=roles)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject")


def _public_mode() -> bool:
    return os.getenv("BRIEFDESK_PUBLIC_MODE", "").lower() in ("1", "true", "yes")


def get_current_user(creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> User:
    """Resolve the calling designer; public mode lets anonymous callers in as a guest."""
    if creds is None:
        if _public_mode():
            return User(**GUEST)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return decode_token(creds.credentials)
