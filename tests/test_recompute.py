"""Session fan-out recompute and store transaction tests.

Covers: EconomicInputsChanged emission, cost fan-out on economic edits,
clearing costs when the rate becomes undefined, all-or-nothing rollback,
cascade delete and the dysfunction write services.
"""

from __future__ import annotations

import copy
from decimal import Decimal

import pytest

from iseor_diagnostic.services.cost_engine import CostComputationError
from iseor_diagnostic.services.dysfunctions import (
    DysfunctionNotFoundError,
    ReferenceItemsNotFoundError,
    bulk_create_from_reference,
    classify_dysfunction,
    update_dysfunction,
)
from iseor_diagnostic.services.recompute import (
    EconomicInputsChanged,
    SessionNotFoundError,
    apply_session_changes,
    recompute_session_costs,
    update_session,
)
from iseor_diagnostic.services.sessions import duplicate_session
from iseor_diagnostic.store import DataStore, data_store


# ─── Event emission ────────────────────────────────────────────────────────

class TestApplySessionChanges:
    """Tests for detecting economic-input edits."""

    def test_non_economic_change_emits_nothing(self, sample_session):
        """Editing metadata does not touch the rate."""
        event = apply_session_changes(sample_session, {"title": "Renamed session"})
        assert event is None
        assert sample_session["hourly_rate"] == Decimal("156.25")

    def test_economic_change_emits_event(self, sample_session):
        """Changing the margin re-derives the rate and reports both values."""
        event = apply_session_changes(sample_session, {"gross_margin_percent": Decimal("50")})
        assert isinstance(event, EconomicInputsChanged)
        assert event.previous_rate == Decimal("156.25")
        assert event.hourly_rate == Decimal("312.5")
        assert event.rate_changed
        assert sample_session["hourly_rate"] == Decimal("312.5")

    def test_unchanged_value_still_emits(self, sample_session):
        """Re-sending the same revenue still emits an event, with no rate change."""
        event = apply_session_changes(sample_session, {"scope_revenue": Decimal("1000000")})
        assert event is not None
        assert not event.rate_changed

    def test_clearing_input_undefines_rate(self, sample_session):
        event = apply_session_changes(sample_session, {"hours_worked_per_year": None})
        assert event.hourly_rate is None
        assert sample_session["hourly_rate"] is None


# ─── Fan-out ───────────────────────────────────────────────────────────────

class TestSessionFanOut:
    """Tests for recomputing every dysfunction when the rate changes."""

    def test_rate_change_recomputes_all(self, sample_session, sample_dysfunction, sample_dysfunctions):
        """Doubling the margin doubles the time-based part of every cost."""
        update_session(data_store, sample_session["id"], {"gross_margin_percent": Decimal("50")})
        record = data_store.get_dysfunction(sample_dysfunction["id"])
        assert record["unit_cost"] == Decimal("5500")
        assert record["annual_cost"] == Decimal("286000")
        for other in sample_dysfunctions:
            assert data_store.get_dysfunction(other["id"])["annual_cost"] is not None

    def test_hours_cleared_clears_all_costs(self, sample_session, sample_dysfunction, sample_dysfunctions):
        """Nulling hours worked leaves every dysfunction uncosted."""
        update_session(data_store, sample_session["id"], {"hours_worked_per_year": None})
        session = data_store.get_session(sample_session["id"])
        assert session["hourly_rate"] is None
        for record in data_store.get_dysfunctions(sample_session["id"]):
            assert record["unit_cost"] is None
            assert record["annual_cost"] is None

    def test_rate_restored_recomputes(self, sample_session, sample_dysfunction):
        """Providing the missing input again brings the costs back."""
        update_session(data_store, sample_session["id"], {"hours_worked_per_year": None})
        update_session(data_store, sample_session["id"], {"hours_worked_per_year": 1600})
        assert data_store.get_dysfunction(sample_dysfunction["id"])["annual_cost"] == Decimal("156000")

    def test_metadata_change_keeps_costs(self, sample_session, sample_dysfunction):
        update_session(data_store, sample_session["id"], {"status": "completed"})
        assert data_store.get_dysfunction(sample_dysfunction["id"])["annual_cost"] == Decimal("156000")

    def test_other_sessions_untouched(self, sample_session, sample_dysfunction, rateless_session):
        """Only the edited session's dysfunctions are recomputed."""
        from iseor_diagnostic.services.dysfunctions import create_dysfunction

        other = create_dysfunction(data_store, rateless_session, {
            "description": "Waiting for approvals",
            "frequency": "weekly",
            "minutes_per_occurrence": 30,
            "people_affected": 2,
        })
        update_session(data_store, sample_session["id"], {"gross_margin_percent": Decimal("50")})
        assert data_store.get_dysfunction(other["id"])["annual_cost"] is None

    def test_recompute_is_idempotent(self, sample_session, sample_dysfunction):
        """Recomputing twice with unchanged inputs changes nothing."""
        recompute_session_costs(data_store, sample_session["id"])
        first = data_store.get_dysfunction(sample_dysfunction["id"])["annual_cost"]
        count = recompute_session_costs(data_store, sample_session["id"])
        assert count == 1
        assert data_store.get_dysfunction(sample_dysfunction["id"])["annual_cost"] == first

    def test_recompute_unknown_session(self):
        with pytest.raises(SessionNotFoundError):
            recompute_session_costs(data_store, "missing")

    def test_update_unknown_session(self):
        with pytest.raises(SessionNotFoundError):
            update_session(data_store, "missing", {"title": "Nope"})


# ─── Transactions ──────────────────────────────────────────────────────────

class TestTransactions:
    """Tests for all-or-nothing units of work."""

    def test_failed_recompute_rolls_back_session_edit(self, sample_session, sample_dysfunction):
        """A dysfunction that cannot be costed aborts the whole session edit."""
        data_store.get_dysfunction(sample_dysfunction["id"])["frequency"] = "fortnightly"

        with pytest.raises(CostComputationError):
            update_session(data_store, sample_session["id"], {"gross_margin_percent": Decimal("50")})

        session = data_store.get_session(sample_session["id"])
        assert session["gross_margin_percent"] == Decimal("25")
        assert session["hourly_rate"] == Decimal("156.25")
        assert data_store.get_dysfunction(sample_dysfunction["id"])["annual_cost"] == Decimal("156000")

    def test_partial_fan_out_is_rolled_back(self, sample_session, sample_dysfunctions):
        """Dysfunctions recomputed before the failure revert too."""
        first, second, third = sample_dysfunctions
        data_store.get_dysfunction(third["id"])["minutes_per_occurrence"] = None
        before = data_store.get_dysfunction(first["id"])["annual_cost"]

        with pytest.raises(CostComputationError):
            update_session(data_store, sample_session["id"], {"scope_revenue": Decimal("2000000")})

        assert data_store.get_dysfunction(first["id"])["annual_cost"] == before

    def test_transaction_commits_on_success(self):
        store = DataStore()
        with store.transaction():
            store.add_session({"id": "s1"})
        assert store.get_session("s1") == {"id": "s1"}

    def test_transaction_restores_snapshot(self):
        store = DataStore()
        store.add_session({"id": "s1", "title": "Before"})
        with pytest.raises(RuntimeError):
            with store.transaction():
                store.get_session("s1")["title"] = "After"
                store.add_session({"id": "s2"})
                raise RuntimeError("boom")
        assert store.get_session("s1")["title"] == "Before"
        assert store.get_session("s2") is None

    def test_scoped_snapshot_copies_only_that_session(self, monkeypatch):
        """A session-scoped unit of work never copies other sessions' records."""
        store = DataStore()
        store.add_session({"id": "s1"})
        store.add_session({"id": "s2"})
        store.add_dysfunction({"id": "d1", "session_id": "s1"})
        store.add_dysfunction({"id": "d2", "session_id": "s2"})

        copied = []
        original = copy.deepcopy
        monkeypatch.setattr(copy, "deepcopy", lambda obj, *args: copied.append(obj) or original(obj, *args))
        with store.transaction("s1"):
            pass

        assert {"id": "s1"} in copied
        assert {"d1": {"id": "d1", "session_id": "s1"}} in copied
        assert not any("s2" in repr(obj) or "d2" in repr(obj) for obj in copied)

    def test_scoped_rollback(self):
        """Rollback restores the session and its dysfunctions, and drops new ones."""
        store = DataStore()
        store.add_session({"id": "s1", "title": "Before"})
        store.add_session({"id": "s2", "title": "Other"})
        store.add_dysfunction({"id": "d1", "session_id": "s1", "annual_cost": Decimal("10")})
        store.add_dysfunction({"id": "d2", "session_id": "s2"})

        with pytest.raises(RuntimeError):
            with store.transaction("s1"):
                store.get_session("s1")["title"] = "After"
                store.get_dysfunction("d1")["annual_cost"] = None
                store.add_dysfunction({"id": "d3", "session_id": "s1"})
                store.delete_dysfunction("d1")
                raise RuntimeError("boom")

        assert store.get_session("s1")["title"] == "Before"
        assert store.get_dysfunction("d1")["annual_cost"] == Decimal("10")
        assert store.get_dysfunction("d3") is None
        assert store.get_dysfunction("d2") == {"id": "d2", "session_id": "s2"}
        assert store.get_session("s2")["title"] == "Other"

    def test_scoped_rollback_of_new_session(self):
        """A session created inside a failed unit of work disappears with its dysfunctions."""
        store = DataStore()
        with pytest.raises(RuntimeError):
            with store.transaction("new"):
                store.add_session({"id": "new"})
                store.add_dysfunction({"id": "d1", "session_id": "new"})
                raise RuntimeError("boom")
        assert store.get_session("new") is None
        assert store.get_dysfunction("d1") is None

    def test_failed_dysfunction_update_rolls_back(self, sample_dysfunction):
        """A write that cannot be costed leaves the record as it was."""
        with pytest.raises(CostComputationError):
            update_dysfunction(data_store, sample_dysfunction["id"], {"frequency": "fortnightly"})
        record = data_store.get_dysfunction(sample_dysfunction["id"])
        assert record["frequency"] == "weekly"
        assert record["annual_cost"] == Decimal("156000")

    def test_nested_transactions(self):
        """An inner transaction joins the outer one's lock."""
        store = DataStore()
        with store.transaction():
            with store.transaction():
                store.add_session({"id": "inner"})
        assert store.get_session("inner") is not None


# ─── Store ─────────────────────────────────────────────────────────────────

class TestDataStore:
    """Tests for the in-memory record store."""

    def test_delete_session_cascades(self, sample_session, sample_dysfunctions):
        removed = data_store.delete_session(sample_session["id"])
        assert removed == 3
        assert data_store.get_session(sample_session["id"]) is None
        assert data_store.get_dysfunctions(sample_session["id"]) == []

    def test_list_sessions_by_owner(self, sample_session, rateless_session):
        assert len(data_store.list_sessions("consultant-alice")) == 2
        assert data_store.list_sessions("someone-else") == []
        assert len(data_store.list_sessions()) == 2

    def test_reference_items_sorted(self):
        codes = [i["code"] for i in data_store.get_reference_items()]
        assert codes == sorted(codes, key=lambda c: (int(c[0]), c))

    def test_reset(self, sample_session):
        data_store.reset()
        assert data_store.sessions == {}
        assert data_store.reference_items == {}


# ─── Dysfunction write services ────────────────────────────────────────────

class TestDysfunctionServices:
    """Tests for dysfunction updates, classification, duplication and bulk creation."""

    def test_update_rederives_costs(self, sample_dysfunction):
        record = update_dysfunction(data_store, sample_dysfunction["id"], {"frequency": "monthly"})
        assert record["annual_cost"] == Decimal("36000")

    def test_update_direct_cost(self, sample_dysfunction):
        record = update_dysfunction(data_store, sample_dysfunction["id"], {"direct_cost": Decimal("0")})
        assert record["unit_cost"] == Decimal("2500")

    def test_update_missing(self):
        with pytest.raises(DysfunctionNotFoundError):
            update_dysfunction(data_store, "missing", {"frequency": "daily"})

    def test_classify_replaces_flags(self, sample_dysfunction):
        """Listed flags are set; every other flag of that kind is cleared."""
        record = classify_dysfunction(
            data_store, sample_dysfunction["id"],
            indicators=["accidents", "turnover"], components=["non_production"], domain=5,
        )
        assert record["indicator_accidents"] and record["indicator_turnover"]
        assert not record["indicator_productivity_gaps"]
        assert record["component_non_production"]
        assert not record["component_excess_time"]
        assert record["domain"] == 5

    def test_classify_without_lists_keeps_flags(self, sample_dysfunction):
        record = classify_dysfunction(data_store, sample_dysfunction["id"], domain=1)
        assert record["indicator_productivity_gaps"]
        assert record["component_excess_time"]
        assert record["domain"] == 1

    def test_classify_does_not_change_costs(self, sample_dysfunction):
        record = classify_dysfunction(data_store, sample_dysfunction["id"], indicators=[])
        assert record["annual_cost"] == Decimal("156000")

    def test_duplicate_session(self, sample_session, sample_dysfunction):
        """The copy is reset to preparation with unvalidated dysfunctions."""
        data_store.get_dysfunction(sample_dysfunction["id"])["validated"] = True
        data_store.get_session(sample_session["id"])["conclusion_notes"] = "Done"

        copied = duplicate_session(data_store, data_store.get_session(sample_session["id"]), "consultant-alice")
        assert copied["id"] != sample_session["id"]
        assert copied["title"] == "Logistics department diagnostic (Copy)"
        assert copied["status"] == "preparation"
        assert copied["conclusion_notes"] is None
        assert copied["hourly_rate"] == Decimal("156.25")

        clones = data_store.get_dysfunctions(copied["id"])
        assert len(clones) == 1
        assert clones[0]["id"] != sample_dysfunction["id"]
        assert clones[0]["validated"] is False
        assert clones[0]["annual_cost"] == Decimal("156000")
        assert data_store.get_dysfunction(sample_dysfunction["id"])["validated"] is True

    def test_bulk_create_uses_placeholders(self, sample_session):
        """Catalog items become monthly, 30-minute, single-person dysfunctions."""
        item = next(i for i in data_store.get_reference_items() if i["code"] == "201")
        created, skipped = bulk_create_from_reference(data_store, sample_session, [item["id"], "unknown"])
        assert skipped == ["unknown"]
        assert len(created) == 1
        record = created[0]
        assert record["frequency"] == "monthly"
        assert record["minutes_per_occurrence"] == 30
        assert record["people_affected"] == 1
        assert record["entry_mode"] == "reference"
        assert record["domain"] == 2
        assert record["reference_item_id"] == item["id"]
        assert record["indicator_productivity_gaps"] and record["indicator_turnover"]
        assert record["component_excess_time"] and record["component_non_production"]
        assert not record["indicator_accidents"]
        # 0.5 h x 156.25 x 1 = 78.125 per occurrence, 12 per year
        assert record["unit_cost"] == Decimal("78.125")
        assert record["annual_cost"] == Decimal("937.5")

    def test_bulk_create_nothing_found(self, sample_session):
        with pytest.raises(ReferenceItemsNotFoundError):
            bulk_create_from_reference(data_store, sample_session, ["nope", "still-nope"])
        assert data_store.get_dysfunctions(sample_session["id"]) == []
