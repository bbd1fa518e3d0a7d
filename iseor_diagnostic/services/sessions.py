"""Session creation, duplication and listing."""

from __future__ import annotations

import copy
import math
from typing import Any

import structlog

from iseor_diagnostic.enums import SessionStatus
from iseor_diagnostic.models.base import new_id, utcnow
from iseor_diagnostic.services.cost_engine import ZERO, apply_dysfunction_costs, derive_session_rate, to_decimal
from iseor_diagnostic.store import DataStore

logger = structlog.get_logger()

COPY_SUFFIX = " (Copy)"


def create_session(
    store: DataStore,
    data: dict[str, Any],
    consultant_id: str,
    reference_version: str = "1.0",
) -> dict[str, Any]:
    """Store a new session owned by ``consultant_id`` with its rate derived."""
    now = utcnow()
    record = {
        "sector": None,
        "participants": [],
        "preparation_notes": None,
        "conclusion_notes": None,
        "scope_revenue": None,
        "gross_margin_percent": None,
        "hours_worked_per_year": None,
        "headcount": None,
        **data,
        "id": new_id(),
        "consultant_id": consultant_id,
        "reference_version": reference_version,
        "created_at": now,
        "updated_at": now,
    }
    if record.get("interview_date") is None:
        record["interview_date"] = now
    record["hourly_rate"] = derive_session_rate(record)

    store.add_session(record)
    logger.info(
        "session_created",
        session_id=record["id"],
        consultant_id=consultant_id,
        rate_defined=record["hourly_rate"] is not None,
    )
    return record


def duplicate_session(store: DataStore, session: dict[str, Any], consultant_id: str) -> dict[str, Any]:
    """Copy a session and all its dysfunctions.

    The copy starts over in preparation with no conclusion, and every copied
    dysfunction needs validating again.
    """
    now = utcnow()
    copy_id = new_id()
    with store.transaction(copy_id):
        copied = copy.deepcopy(session)
        copied.update({
            "id": copy_id,
            "consultant_id": consultant_id,
            "title": f"{session['title']}{COPY_SUFFIX}",
            "status": SessionStatus.PREPARATION.value,
            "conclusion_notes": None,
            "created_at": now,
            "updated_at": now,
        })
        copied["hourly_rate"] = derive_session_rate(copied)
        store.add_session(copied)

        dysfunctions = store.get_dysfunctions(session["id"])
        for dysfunction in dysfunctions:
            clone = copy.deepcopy(dysfunction)
            clone.update({
                "id": new_id(),
                "session_id": copied["id"],
                "validated": False,
                "created_at": now,
                "updated_at": now,
            })
            apply_dysfunction_costs(clone, copied["hourly_rate"])
            store.add_dysfunction(clone)

    logger.info(
        "session_duplicated",
        source_session_id=session["id"],
        session_id=copied["id"],
        dysfunction_count=len(dysfunctions),
    )
    return copied


def delete_session(store: DataStore, session_id: str) -> int:
    """Delete a session with its dysfunctions; returns how many were removed."""
    removed = store.delete_session(session_id)
    logger.info("session_deleted", session_id=session_id, deleted_dysfunctions=removed)
    return removed


def session_totals(store: DataStore, session_id: str) -> tuple[int, Any]:
    """Return ``(dysfunction_count, total_annual_cost)`` for list views."""
    dysfunctions = store.get_dysfunctions(session_id)
    total = sum((to_decimal(d.get("annual_cost")) or ZERO for d in dysfunctions), ZERO)
    return len(dysfunctions), total


def filter_sessions(
    sessions: list[dict[str, Any]],
    status: str | None = None,
    company: str | None = None,
) -> list[dict[str, Any]]:
    """Filter by exact status and case-insensitive company substring, newest interview first."""
    if status:
        sessions = [s for s in sessions if s.get("status") == status]
    if company:
        needle = company.strip().lower()
        sessions = [s for s in sessions if needle in (s.get("company") or "").lower()]
    return sorted(sessions, key=lambda s: s["interview_date"], reverse=True)


def paginate(records: list[Any], page: int, limit: int) -> tuple[list[Any], dict[str, int]]:
    """Slice one page out of ``records``; pages are numbered from 1."""
    total = len(records)
    start = (page - 1) * limit
    return records[start:start + limit], {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if total else 0,
    }
