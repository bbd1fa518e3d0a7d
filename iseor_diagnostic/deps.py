"""Reusable FastAPI dependencies: caller identity and ownership checks.

Authentication happens upstream; the gateway forwards the caller as
``X-Consultant-Id`` and ``X-Consultant-Role`` headers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any

from fastapi import Depends, Header, HTTPException, status

from iseor_diagnostic.enums import CallerRole
from iseor_diagnostic.store import data_store


@dataclass(frozen=True)
class Caller:
    id: str
    role: CallerRole

    @property
    def is_admin(self) -> bool:
        return self.role is CallerRole.ADMIN


async def get_caller(
    x_consultant_id: Annotated[str | None, Header()] = None,
    x_consultant_role: Annotated[str | None, Header()] = None,
) -> Caller:
    """Identify the caller (any role)."""
    if not x_consultant_id or not x_consultant_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing caller identity",
        )
    try:
        role = CallerRole(x_consultant_role or CallerRole.CONSULTANT.value)
    except ValueError:
        raise HTTPException(status_code=403, detail=f"Unknown role '{x_consultant_role}'")
    return Caller(id=x_consultant_id.strip(), role=role)


async def get_admin(caller: Annotated[Caller, Depends(get_caller)]) -> Caller:
    """Require the admin role."""
    if not caller.is_admin:
        raise HTTPException(status_code=403, detail="Administrator access required")
    return caller


def load_owned_session(session_id: str, caller: Caller) -> dict[str, Any]:
    """Fetch a session the caller may access.

    A session owned by someone else is reported exactly like a missing one.
    """
    session = data_store.get_session(session_id)
    if session is None or not (caller.is_admin or session.get("consultant_id") == caller.id):
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return session


CallerDep = Annotated[Caller, Depends(get_caller)]
AdminDep = Annotated[Caller, Depends(get_admin)]
