"""Session rate changes and the dysfunction cost fan-out they trigger.

A session's hourly rate feeds the cost of every dysfunction it owns. Editing
any of the three rate inputs emits an :class:`EconomicInputsChanged` event,
and handling it recomputes the session's whole dysfunction set inside the
same store transaction, so no reader sees a mix of old and new costs.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import structlog

from iseor_diagnostic.models.base import utcnow
from iseor_diagnostic.services.cost_engine import (
    RATE_INPUT_FIELDS,
    apply_dysfunction_costs,
    derive_session_rate,
)
from iseor_diagnostic.store import DataStore

logger = structlog.get_logger()


class SessionNotFoundError(LookupError):
    """Raised when a recompute targets a session that does not exist."""


@dataclass(frozen=True)
class EconomicInputsChanged:
    """Emitted when a session's revenue, margin or hours worked were edited."""

    session_id: str
    previous_rate: Decimal | None
    hourly_rate: Decimal | None

    @property
    def rate_changed(self) -> bool:
        return self.previous_rate != self.hourly_rate


def apply_session_changes(
    session: dict[str, Any],
    changes: dict[str, Any],
) -> EconomicInputsChanged | None:
    """Write field changes onto a session record and re-derive its rate.

    Returns an event when any rate input was part of the changes, else None.
    """
    previous_rate = session.get("hourly_rate")
    session.update(changes)
    session["updated_at"] = utcnow()

    if not any(field in changes for field in RATE_INPUT_FIELDS):
        return None

    session["hourly_rate"] = derive_session_rate(session)
    return EconomicInputsChanged(
        session_id=session["id"],
        previous_rate=previous_rate,
        hourly_rate=session["hourly_rate"],
    )


def recompute_session_costs(store: DataStore, session_id: str) -> int:
    """Recompute unit and annual cost for every dysfunction of a session.

    Runs in its own transaction (joined if one is already open). Returns the
    number of dysfunctions recomputed.
    """
    with store.transaction(session_id):
        session = store.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session '{session_id}' not found")

        hourly_rate = session.get("hourly_rate")
        dysfunctions = store.get_dysfunctions(session_id)
        for dysfunction in dysfunctions:
            apply_dysfunction_costs(dysfunction, hourly_rate)
            dysfunction["updated_at"] = utcnow()

    logger.info(
        "session_costs_recomputed",
        session_id=session_id,
        dysfunction_count=len(dysfunctions),
        rate_defined=hourly_rate is not None,
    )
    return len(dysfunctions)


def handle_economic_inputs_changed(store: DataStore, event: EconomicInputsChanged) -> int:
    """React to a rate-input edit by recomputing the session's dysfunctions."""
    logger.info(
        "session_economic_inputs_changed",
        session_id=event.session_id,
        rate_changed=event.rate_changed,
        rate_defined=event.hourly_rate is not None,
    )
    return recompute_session_costs(store, event.session_id)


def update_session(
    store: DataStore,
    session_id: str,
    changes: dict[str, Any],
) -> dict[str, Any]:
    """Apply changes to a session and fan out cost recomputation atomically.

    The session edit and the dysfunction recompute form one unit of work: if
    either fails, neither is kept.
    """
    with store.transaction(session_id):
        session = store.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session '{session_id}' not found")

        event = apply_session_changes(session, changes)
        if event is not None:
            handle_economic_inputs_changed(store, event)

        return store.get_session(session_id)
