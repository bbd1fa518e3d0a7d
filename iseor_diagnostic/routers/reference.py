"""Reference catalog API endpoints (read-only, plus an admin reseed)."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request

from iseor_diagnostic.deps import AdminDep, CallerDep
from iseor_diagnostic.schemas.reference import (
    ReferenceCatalogResponse,
    ReferenceInitResponse,
    ReferenceItemResponse,
    ReferenceListResponse,
)
from iseor_diagnostic.services.reference_catalog import (
    MIN_SEARCH_LENGTH,
    group_by_domain,
    load_reference_catalog,
    search_items,
)
from iseor_diagnostic.store import data_store

router = APIRouter(prefix="/reference", tags=["reference"])


def _check_domain(domain: int) -> None:
    if not 1 <= domain <= 6:
        raise HTTPException(status_code=400, detail="Domain must be between 1 and 6")


@router.get("", response_model=ReferenceCatalogResponse)
async def get_catalog(
    caller: CallerDep,
    domain: int | None = Query(default=None),
    search: str | None = Query(default=None),
) -> ReferenceCatalogResponse:
    """Get the active catalog grouped by domain, optionally filtered."""
    items = data_store.get_reference_items()
    if domain is not None:
        _check_domain(domain)
        items = [i for i in items if i["domain"] == domain]
    if search and search.strip():
        items = search_items(items, search, include_code=False)

    return ReferenceCatalogResponse(total=len(items), domains=group_by_domain(items))


@router.get("/domain/{domain}", response_model=ReferenceListResponse)
async def get_domain_items(domain: int, caller: CallerDep) -> ReferenceListResponse:
    _check_domain(domain)
    items = [i for i in data_store.get_reference_items() if i["domain"] == domain]
    return ReferenceListResponse(count=len(items), items=items)


@router.get("/search/{query}", response_model=ReferenceListResponse)
async def search_catalog(query: str, caller: CallerDep) -> ReferenceListResponse:
    """Search active items by code, title or description."""
    if len(query.strip()) < MIN_SEARCH_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Search query must be at least {MIN_SEARCH_LENGTH} characters",
        )
    items = search_items(data_store.get_reference_items(), query)
    return ReferenceListResponse(count=len(items), items=items)


@router.get("/{item_id}", response_model=ReferenceItemResponse)
async def get_reference_item(item_id: str, caller: CallerDep) -> ReferenceItemResponse:
    item = data_store.get_reference_item(item_id)
    if item is None or not item.get("active", True):
        raise HTTPException(status_code=404, detail=f"Reference item '{item_id}' not found")
    return ReferenceItemResponse(**item)


@router.post("/init", response_model=ReferenceInitResponse)
async def init_catalog(request: Request, admin: AdminDep) -> ReferenceInitResponse:
    """Reseed the catalog with the official ISEOR items (admin only)."""
    version = request.app.state.settings.reference_version
    count = load_reference_catalog(data_store, version)
    return ReferenceInitResponse(
        message="Reference catalog initialised",
        item_count=count,
        version=version,
    )
