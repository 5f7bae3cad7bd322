"""
Session lookup and role checks for the report endpoints.

Sessions are issued elsewhere; this module only resolves the bearer token
of a request through the ``SessionProvider`` stored on ``app.state`` and
enforces roles.
"""

from __future__ import annotations

from typing import Annotated, Callable, Dict, Iterable, Optional, Protocol

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

security = HTTPBearer(auto_error=False)

AIP_REPORT_ROLES = ("TREASURER", "CAPTAIN", "SUPER_ADMIN")


class SessionUser(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: str


class SessionProvider(Protocol):
    def resolve(self, token: str) -> Optional[SessionUser]:
        """Return the session for ``token`` or None when it is unknown or expired."""


class StaticSessionProvider:
    """Fixed token -> session table, for tests and local runs."""

    def __init__(self, sessions: Optional[Dict[str, SessionUser]] = None) -> None:
        self.sessions: Dict[str, SessionUser] = dict(sessions or {})

    def add(self, token: str, user: SessionUser) -> None:
        self.sessions[token] = user

    def resolve(self, token: str) -> Optional[SessionUser]:
        return self.sessions.get(token)


def get_optional_session(
    request: Request,
    creds: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> Optional[SessionUser]:
    if not creds or not creds.credentials:
        return None
    provider: Optional[SessionProvider] = getattr(request.app.state, "session_provider", None)
    if provider is None:
        return None
    return provider.resolve(creds.credentials)


def require_auth(
    session: Annotated[Optional[SessionUser], Depends(get_optional_session)],
) -> SessionUser:
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return session


def _check_role(role: Optional[str], allowed: Iterable[str]) -> None:
    if not role or role.upper() not in allowed:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


def require_roles(*roles: str) -> Callable[[SessionUser], SessionUser]:
    """Dependency factory: authenticated session whose role is one of ``roles``."""
    allowed = tuple(role.upper() for role in roles)

    def dependency(session: Annotated[SessionUser, Depends(require_auth)]) -> SessionUser:
        _check_role(session.role, allowed)
        return session

    return dependency
