"""Diagnostic session API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, Request

from iseor_diagnostic.deps import CallerDep, load_owned_session
from iseor_diagnostic.enums import SessionStatus
from iseor_diagnostic.schemas.dysfunction import DysfunctionResponse
from iseor_diagnostic.schemas.session import (
    RecomputeResponse,
    SessionCreate,
    SessionDeleteResponse,
    SessionDetailResponse,
    SessionListItem,
    SessionListResponse,
    SessionResponse,
    SessionUpdate,
)
from iseor_diagnostic.schemas.statistics import SessionStatisticsResponse
from iseor_diagnostic.services.recompute import recompute_session_costs, update_session
from iseor_diagnostic.services.session_statistics import compute_session_statistics
from iseor_diagnostic.services.sessions import (
    create_session,
    delete_session,
    duplicate_session,
    filter_sessions,
    paginate,
    session_totals,
)
from iseor_diagnostic.store import data_store

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _newest_first(dysfunctions: list[dict]) -> list[dict]:
    return sorted(dysfunctions, key=lambda d: d["created_at"], reverse=True)


@router.get("", response_model=SessionListResponse)
async def list_sessions(
    request: Request,
    caller: CallerDep,
    status: SessionStatus | None = None,
    company: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1, le=100),
) -> SessionListResponse:
    """List the caller's sessions (all sessions for admins), newest interview first."""
    owner = None if caller.is_admin else caller.id
    sessions = filter_sessions(
        data_store.list_sessions(consultant_id=owner),
        status=status.value if status else None,
        company=company,
    )
    page_size = limit or request.app.state.settings.default_page_size
    page_records, pagination = paginate(sessions, page, page_size)

    items = []
    for session in page_records:
        count, total = session_totals(data_store, session["id"])
        items.append(SessionListItem(**session, dysfunction_count=count, total_annual_cost=total))

    return SessionListResponse(sessions=items, pagination=pagination)


@router.post("", response_model=SessionResponse, status_code=201)
async def create_new_session(request: Request, body: SessionCreate, caller: CallerDep) -> SessionResponse:
    """Create a session. The hourly rate is derived when all economic inputs are present."""
    settings = request.app.state.settings
    session = create_session(
        data_store,
        body.model_dump(),
        consultant_id=caller.id,
        reference_version=settings.reference_version,
    )
    return SessionResponse(**session)


@router.get("/{session_id}", response_model=SessionDetailResponse)
async def get_session_detail(session_id: str, caller: CallerDep) -> SessionDetailResponse:
    """Get a session with its dysfunctions (newest first) and statistics."""
    session = load_owned_session(session_id, caller)
    dysfunctions = data_store.get_dysfunctions(session_id)
    return SessionDetailResponse(
        **session,
        dysfunctions=[DysfunctionResponse(**d) for d in _newest_first(dysfunctions)],
        statistics=compute_session_statistics(session, dysfunctions),
    )


@router.put("/{session_id}", response_model=SessionResponse)
async def update_existing_session(session_id: str, body: SessionUpdate, caller: CallerDep) -> SessionResponse:
    """Partially update a session.

    Changing scope revenue, gross margin or hours worked recomputes every
    dysfunction of the session in the same unit of work.
    """
    load_owned_session(session_id, caller)
    session = update_session(data_store, session_id, body.changes())
    return SessionResponse(**session)


@router.delete("/{session_id}", response_model=SessionDeleteResponse)
async def delete_existing_session(session_id: str, caller: CallerDep) -> SessionDeleteResponse:
    """Delete a session and all of its dysfunctions."""
    load_owned_session(session_id, caller)
    removed = delete_session(data_store, session_id)
    return SessionDeleteResponse(message="Session deleted", deleted_dysfunctions=removed)


@router.post("/{session_id}/duplicate", response_model=SessionResponse, status_code=201)
async def duplicate_existing_session(session_id: str, caller: CallerDep) -> SessionResponse:
    """Copy a session with its dysfunctions into a fresh session owned by the caller."""
    session = load_owned_session(session_id, caller)
    copied = duplicate_session(data_store, session, consultant_id=caller.id)
    return SessionResponse(**copied)


@router.post("/{session_id}/recompute", response_model=RecomputeResponse)
async def recompute_costs(session_id: str, caller: CallerDep) -> RecomputeResponse:
    """Recompute the costs of every dysfunction from the session's current rate."""
    session = load_owned_session(session_id, caller)
    count = recompute_session_costs(data_store, session_id)
    return RecomputeResponse(
        session_id=session_id,
        hourly_rate=session.get("hourly_rate"),
        recomputed_count=count,
    )


@router.get("/{session_id}/statistics", response_model=SessionStatisticsResponse)
async def get_session_statistics(session_id: str, caller: CallerDep) -> SessionStatisticsResponse:
    """Get totals and distributions for a session."""
    session = load_owned_session(session_id, caller)
    stats = compute_session_statistics(session, data_store.get_dysfunctions(session_id))
    return SessionStatisticsResponse(**stats)
