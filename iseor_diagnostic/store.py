"""In-memory data store for the ISEOR diagnostic service.

Provides a simple record store used during development and testing.
In production, this would be backed by PostgreSQL.
"""

from __future__ import annotations

import copy
import threading
from contextlib import contextmanager
from typing import Any, Iterator

import structlog

logger = structlog.get_logger()


class DataStore:
    """Thread-safe in-memory record store keyed by record id."""

    def __init__(self) -> None:
        self.sessions: dict[str, dict[str, Any]] = {}
        self.dysfunctions: dict[str, dict[str, Any]] = {}
        self.reference_items: dict[str, dict[str, Any]] = {}
        self._lock = threading.RLock()

    def reset(self) -> None:
        """Clear all data — used in tests."""
        with self._lock:
            self.sessions = {}
            self.dysfunctions = {}
            self.reference_items = {}

    @contextmanager
    def transaction(self, session_id: str | None = None) -> Iterator[DataStore]:
        """Run a unit of work that either fully applies or leaves no trace.

        Writers are serialised. If the block raises, the records it covers are
        restored to their state on entry and the exception propagates.

        Args:
            session_id: Limit the snapshot to this session and its
                dysfunctions. The block must not write other sessions' records.
                Without it the whole store is snapshotted.
        """
        with self._lock:
            snapshot = self._snapshot(session_id)
            try:
                yield self
            except Exception:
                self._restore(session_id, snapshot)
                logger.warning("store_transaction_rolled_back", session_id=session_id)
                raise

    def _owned_dysfunctions(self, session_id: str) -> dict[str, dict[str, Any]]:
        return {d_id: d for d_id, d in self.dysfunctions.items() if d.get("session_id") == session_id}

    def _snapshot(self, session_id: str | None) -> tuple[Any, dict[str, dict[str, Any]]]:
        if session_id is None:
            return copy.deepcopy(self.sessions), copy.deepcopy(self.dysfunctions)
        return (
            copy.deepcopy(self.sessions.get(session_id)),
            copy.deepcopy(self._owned_dysfunctions(session_id)),
        )

    def _restore(self, session_id: str | None, snapshot: tuple[Any, dict[str, dict[str, Any]]]) -> None:
        sessions, dysfunctions = snapshot
        if session_id is None:
            self.sessions, self.dysfunctions = sessions, dysfunctions
            return

        if sessions is None:
            self.sessions.pop(session_id, None)
        else:
            self.sessions[session_id] = sessions
        for d_id in self._owned_dysfunctions(session_id):
            del self.dysfunctions[d_id]
        self.dysfunctions.update(dysfunctions)

    # ── Sessions ────────────────────────────────────────────────────────

    def add_session(self, session: dict[str, Any]) -> None:
        """Add or replace a session."""
        with self._lock:
            self.sessions[session["id"]] = session

    def get_session(self, session_id: str) -> dict[str, Any] | None:
        return self.sessions.get(session_id)

    def list_sessions(self, consultant_id: str | None = None) -> list[dict[str, Any]]:
        """List sessions, optionally only those owned by one consultant."""
        return [
            s for s in self.sessions.values()
            if consultant_id is None or s.get("consultant_id") == consultant_id
        ]

    def delete_session(self, session_id: str) -> int:
        """Delete a session and its dysfunctions; return how many dysfunctions went with it."""
        with self._lock:
            owned = [d_id for d_id, d in self.dysfunctions.items() if d.get("session_id") == session_id]
            for d_id in owned:
                del self.dysfunctions[d_id]
            self.sessions.pop(session_id, None)
            return len(owned)

    # ── Dysfunctions ────────────────────────────────────────────────────

    def add_dysfunction(self, dysfunction: dict[str, Any]) -> None:
        """Add or replace a dysfunction."""
        with self._lock:
            self.dysfunctions[dysfunction["id"]] = dysfunction

    def get_dysfunction(self, dysfunction_id: str) -> dict[str, Any] | None:
        return self.dysfunctions.get(dysfunction_id)

    def get_dysfunctions(self, session_id: str) -> list[dict[str, Any]]:
        """Get every dysfunction owned by a session."""
        with self._lock:
            return [d for d in self.dysfunctions.values() if d.get("session_id") == session_id]

    def delete_dysfunction(self, dysfunction_id: str) -> bool:
        with self._lock:
            return self.dysfunctions.pop(dysfunction_id, None) is not None

    # ── Reference catalog ───────────────────────────────────────────────

    def load_reference_items(self, items: list[dict[str, Any]]) -> None:
        """Replace the reference catalog."""
        with self._lock:
            self.reference_items = {item["id"]: item for item in items}

    def get_reference_item(self, item_id: str) -> dict[str, Any] | None:
        return self.reference_items.get(item_id)

    def get_reference_items(self, active_only: bool = True) -> list[dict[str, Any]]:
        """Get catalog items ordered by domain, display order and code."""
        items = [
            i for i in self.reference_items.values()
            if not active_only or i.get("active", True)
        ]
        return sorted(items, key=lambda i: (i["domain"], i.get("display_order") or 0, i["code"]))


# Global singleton, reset between tests
data_store = DataStore()
