"""Dysfunction API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from iseor_diagnostic.deps import Caller, CallerDep, load_owned_session
from iseor_diagnostic.schemas.common import MessageResponse
from iseor_diagnostic.schemas.dysfunction import (
    BulkCreateRequest,
    BulkCreateResponse,
    ClassifyRequest,
    DysfunctionCreate,
    DysfunctionListResponse,
    DysfunctionResponse,
    DysfunctionUpdate,
)
from iseor_diagnostic.schemas.statistics import SessionStatisticsResponse
from iseor_diagnostic.services.dysfunctions import (
    ReferenceItemsNotFoundError,
    bulk_create_from_reference,
    classify_dysfunction,
    create_dysfunction,
    delete_dysfunction,
    update_dysfunction,
)
from iseor_diagnostic.services.session_statistics import compute_session_statistics
from iseor_diagnostic.store import data_store

router = APIRouter(prefix="/dysfunctions", tags=["dysfunctions"])


def _load_owned_dysfunction(dysfunction_id: str, caller: Caller) -> dict:
    """Fetch a dysfunction whose session the caller may access."""
    dysfunction = data_store.get_dysfunction(dysfunction_id)
    if dysfunction is None:
        raise HTTPException(status_code=404, detail=f"Dysfunction '{dysfunction_id}' not found")
    try:
        load_owned_session(dysfunction["session_id"], caller)
    except HTTPException:
        raise HTTPException(status_code=404, detail=f"Dysfunction '{dysfunction_id}' not found")
    return dysfunction


@router.get("/session/{session_id}", response_model=DysfunctionListResponse)
async def list_session_dysfunctions(session_id: str, caller: CallerDep) -> DysfunctionListResponse:
    """List a session's dysfunctions, newest first."""
    load_owned_session(session_id, caller)
    dysfunctions = sorted(
        data_store.get_dysfunctions(session_id),
        key=lambda d: d["created_at"],
        reverse=True,
    )
    return DysfunctionListResponse(
        session_id=session_id,
        count=len(dysfunctions),
        dysfunctions=[DysfunctionResponse(**d) for d in dysfunctions],
    )


@router.get("/session/{session_id}/statistics", response_model=SessionStatisticsResponse)
async def get_session_dysfunction_statistics(session_id: str, caller: CallerDep) -> SessionStatisticsResponse:
    """Same statistics object as ``GET /api/sessions/{id}/statistics``."""
    session = load_owned_session(session_id, caller)
    stats = compute_session_statistics(session, data_store.get_dysfunctions(session_id))
    return SessionStatisticsResponse(**stats)


@router.post("", response_model=DysfunctionResponse, status_code=201)
async def create_new_dysfunction(body: DysfunctionCreate, caller: CallerDep) -> DysfunctionResponse:
    """Record a dysfunction. Costs are derived from the session's hourly rate."""
    session = load_owned_session(body.session_id, caller)
    if body.reference_item_id and data_store.get_reference_item(body.reference_item_id) is None:
        raise HTTPException(status_code=404, detail=f"Reference item '{body.reference_item_id}' not found")

    data = body.model_dump(exclude={"session_id"})
    return DysfunctionResponse(**create_dysfunction(data_store, session, data))


@router.post("/bulk-create", response_model=BulkCreateResponse, status_code=201)
async def bulk_create_dysfunctions(body: BulkCreateRequest, caller: CallerDep) -> BulkCreateResponse:
    """Create one placeholder dysfunction per reference catalog item."""
    session = load_owned_session(body.session_id, caller)
    try:
        created, skipped = bulk_create_from_reference(data_store, session, body.reference_item_ids)
    except ReferenceItemsNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    return BulkCreateResponse(
        session_id=session["id"],
        created_count=len(created),
        dysfunctions=[DysfunctionResponse(**d) for d in created],
        skipped_ids=skipped,
    )


@router.get("/{dysfunction_id}", response_model=DysfunctionResponse)
async def get_dysfunction(dysfunction_id: str, caller: CallerDep) -> DysfunctionResponse:
    return DysfunctionResponse(**_load_owned_dysfunction(dysfunction_id, caller))


@router.put("/{dysfunction_id}", response_model=DysfunctionResponse)
async def update_existing_dysfunction(
    dysfunction_id: str,
    body: DysfunctionUpdate,
    caller: CallerDep,
) -> DysfunctionResponse:
    """Partially update a dysfunction; costs are re-derived."""
    _load_owned_dysfunction(dysfunction_id, caller)
    changes = body.changes()
    if changes.get("reference_item_id") and data_store.get_reference_item(changes["reference_item_id"]) is None:
        raise HTTPException(status_code=404, detail=f"Reference item '{changes['reference_item_id']}' not found")

    return DysfunctionResponse(**update_dysfunction(data_store, dysfunction_id, changes))


@router.delete("/{dysfunction_id}", response_model=MessageResponse)
async def delete_existing_dysfunction(dysfunction_id: str, caller: CallerDep) -> MessageResponse:
    _load_owned_dysfunction(dysfunction_id, caller)
    delete_dysfunction(data_store, dysfunction_id)
    return MessageResponse(message="Dysfunction deleted")


@router.post("/{dysfunction_id}/classify", response_model=DysfunctionResponse)
async def classify_existing_dysfunction(
    dysfunction_id: str,
    body: ClassifyRequest,
    caller: CallerDep,
) -> DysfunctionResponse:
    """Set indicator and component flags from lists and/or assign a domain."""
    _load_owned_dysfunction(dysfunction_id, caller)
    record = classify_dysfunction(
        data_store,
        dysfunction_id,
        indicators=body.indicators,
        components=body.components,
        domain=body.domain,
    )
    return DysfunctionResponse(**record)
