"""Dysfunction write operations.

Every write re-derives the dysfunction's costs from its owning session's
current hourly rate before the record becomes visible.
"""

from __future__ import annotations

from typing import Any

import structlog

from iseor_diagnostic.enums import COMPONENT_FIELDS, INDICATOR_FIELDS, Component, EntryMode, Indicator, Priority
from iseor_diagnostic.models.base import new_id, utcnow
from iseor_diagnostic.services.cost_engine import ZERO, apply_dysfunction_costs
from iseor_diagnostic.services.reference_catalog import build_dysfunction_from_item
from iseor_diagnostic.store import DataStore

logger = structlog.get_logger()

DYSFUNCTION_DEFAULTS: dict[str, Any] = {
    "reference_item_id": None,
    "direct_cost": ZERO,
    "domain": None,
    "entry_mode": EntryMode.FREE.value,
    "priority": Priority.MEDIUM.value,
    "validated": False,
    "comments": None,
    "unit_cost": None,
    "annual_cost": None,
    **{field: False for field in INDICATOR_FIELDS + COMPONENT_FIELDS},
}


class DysfunctionNotFoundError(LookupError):
    """Raised when a write targets a dysfunction that does not exist."""


class ReferenceItemsNotFoundError(LookupError):
    """Raised when none of the requested catalog items exist."""


def _get_or_raise(store: DataStore, dysfunction_id: str) -> dict[str, Any]:
    record = store.get_dysfunction(dysfunction_id)
    if record is None:
        raise DysfunctionNotFoundError(f"Dysfunction '{dysfunction_id}' not found")
    return record


def create_dysfunction(store: DataStore, session: dict[str, Any], data: dict[str, Any]) -> dict[str, Any]:
    """Store a new dysfunction for ``session`` with its costs derived."""
    now = utcnow()
    record = {
        **DYSFUNCTION_DEFAULTS,
        **data,
        "id": new_id(),
        "session_id": session["id"],
        "created_at": now,
        "updated_at": now,
    }
    with store.transaction(session["id"]):
        apply_dysfunction_costs(record, session.get("hourly_rate"))
        store.add_dysfunction(record)

    logger.info(
        "dysfunction_created",
        dysfunction_id=record["id"],
        session_id=session["id"],
        costed=record["annual_cost"] is not None,
    )
    return record


def update_dysfunction(store: DataStore, dysfunction_id: str, changes: dict[str, Any]) -> dict[str, Any]:
    """Apply field changes and re-derive costs in one unit of work."""
    record = _get_or_raise(store, dysfunction_id)
    with store.transaction(record["session_id"]):
        record.update(changes)
        session = store.get_session(record["session_id"])
        apply_dysfunction_costs(record, session.get("hourly_rate") if session else None)
        record["updated_at"] = utcnow()

    logger.info("dysfunction_updated", dysfunction_id=dysfunction_id, fields=sorted(changes))
    return record


def classify_dysfunction(
    store: DataStore,
    dysfunction_id: str,
    indicators: list[str] | None = None,
    components: list[str] | None = None,
    domain: int | None = None,
) -> dict[str, Any]:
    """Set a dysfunction's classification.

    A given list switches on exactly the listed flags of its kind and
    switches the others off; None leaves that kind untouched.
    """
    record = _get_or_raise(store, dysfunction_id)
    with store.transaction(record["session_id"]):
        if indicators is not None:
            selected = {Indicator(i) for i in indicators}
            for indicator in Indicator:
                record[indicator.field] = indicator in selected
        if components is not None:
            selected_components = {Component(c) for c in components}
            for component in Component:
                record[component.field] = component in selected_components
        if domain is not None:
            record["domain"] = domain
        record["updated_at"] = utcnow()

    logger.info("dysfunction_classified", dysfunction_id=dysfunction_id, domain=record["domain"])
    return record


def delete_dysfunction(store: DataStore, dysfunction_id: str) -> None:
    if not store.delete_dysfunction(dysfunction_id):
        raise DysfunctionNotFoundError(f"Dysfunction '{dysfunction_id}' not found")
    logger.info("dysfunction_deleted", dysfunction_id=dysfunction_id)


def bulk_create_from_reference(
    store: DataStore,
    session: dict[str, Any],
    item_ids: list[str],
) -> tuple[list[dict[str, Any]], list[str]]:
    """Create one dysfunction per active catalog item.

    Unknown or inactive ids are skipped. Returns ``(created, skipped_ids)``.

    Raises:
        ReferenceItemsNotFoundError: if no id matched an active item.
    """
    items = []
    skipped = []
    for item_id in item_ids:
        item = store.get_reference_item(item_id)
        if item is None or not item.get("active", True):
            skipped.append(item_id)
        else:
            items.append(item)

    if not items:
        raise ReferenceItemsNotFoundError("No matching reference items found")

    now = utcnow()
    created = []
    with store.transaction(session["id"]):
        for item in items:
            record = {
                **DYSFUNCTION_DEFAULTS,
                **build_dysfunction_from_item(item, session["id"]),
                "id": new_id(),
                "created_at": now,
                "updated_at": now,
            }
            apply_dysfunction_costs(record, session.get("hourly_rate"))
            store.add_dysfunction(record)
            created.append(record)

    logger.info(
        "dysfunctions_bulk_created",
        session_id=session["id"],
        created_count=len(created),
        skipped_count=len(skipped),
    )
    return created, skipped
