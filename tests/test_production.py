"""Production readiness tests — health probes, configuration, middleware,
database models and request schema normalisation.
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from iseor_diagnostic.app import create_app
from iseor_diagnostic.config import Settings, get_settings
from iseor_diagnostic.models import Base, DiagnosticSession, Dysfunction, ReferenceItem
from iseor_diagnostic.schemas.dysfunction import ClassifyRequest, DysfunctionCreate, DysfunctionUpdate
from iseor_diagnostic.schemas.session import SessionCreate, SessionUpdate
from iseor_diagnostic.store import data_store


# ─── Health ────────────────────────────────────────────────────────────────

class TestHealthEndpoints:
    """Tests for the health probes."""

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["app_name"] == "ISEOR Diagnostic"
        assert data["reference_version"] == "1.0"
        assert data["checks"][0]["name"] == "store"

    def test_ready_with_catalog(self, client):
        data = client.get("/health/ready").json()
        assert data["status"] == "healthy"
        assert {c["name"] for c in data["checks"]} == {"store", "reference_catalog"}

    def test_not_ready_without_catalog(self, client):
        """An empty catalog makes the service unready."""
        data_store.load_reference_items([])
        data = client.get("/health/ready").json()
        assert data["status"] == "unhealthy"
        catalog = next(c for c in data["checks"] if c["name"] == "reference_catalog")
        assert catalog["status"] == "unhealthy"
        assert "empty" in catalog["details"]

    def test_live(self, client):
        assert client.get("/health/live").json() == {"status": "alive"}

    def test_health_needs_no_identity(self, client):
        """Probes are open; only the API requires a caller."""
        assert client.get("/health").status_code == 200


# ─── Configuration ─────────────────────────────────────────────────────────

class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        settings = Settings()
        assert settings.api_prefix == "/api"
        assert settings.default_page_size == 10
        assert settings.seed_reference_on_startup is True

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("ISEOR_DEFAULT_PAGE_SIZE", "25")
        monkeypatch.setenv("ISEOR_ENVIRONMENT", "staging")
        settings = get_settings()
        assert settings.default_page_size == 25
        assert settings.environment == "staging"

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(environment="qa")

    def test_page_size_bounds(self):
        with pytest.raises(ValidationError):
            Settings(default_page_size=0)

    def test_allowed_origins_list(self):
        settings = Settings(allowed_origins="http://a.test, http://b.test")
        assert settings.allowed_origins_list == ["http://a.test", "http://b.test"]

    def test_custom_api_prefix(self):
        """Routers mount under the configured prefix."""
        app = create_app(Settings(api_prefix="/v1"))
        client = TestClient(app)
        headers = {"X-Consultant-Id": "someone"}
        assert client.get("/v1/sessions", headers=headers).status_code == 200
        assert client.get("/api/sessions", headers=headers).status_code == 404


# ─── Middleware & lifespan ─────────────────────────────────────────────────

class TestMiddleware:
    """Tests for CORS, rate limiting and lifespan."""

    def test_cors_preflight(self, client):
        resp = client.options(
            "/api/sessions",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert resp.headers.get("access-control-allow-origin") == "http://localhost:3000"

    def test_limiter_on_state(self, app):
        assert app.state.limiter is not None

    def test_lifespan_seeds_catalog(self, settings):
        """Starting the app loads the reference catalog."""
        data_store.reset()
        with TestClient(create_app(settings)) as client:
            assert len(data_store.get_reference_items()) == 41
            assert client.get("/health/ready").json()["status"] == "healthy"

    def test_lifespan_seed_disabled(self):
        data_store.reset()
        settings = Settings(seed_reference_on_startup=False, log_format="console")
        with TestClient(create_app(settings)):
            assert data_store.get_reference_items() == []


# ─── Database models ───────────────────────────────────────────────────────

class TestModels:
    """Tests for the SQLAlchemy table definitions."""

    def test_tables_registered(self):
        assert {"sessions", "dysfunctions", "reference_items"} <= set(Base.metadata.tables)

    def test_money_columns_are_numeric(self):
        from sqlalchemy import Numeric

        for column in ("scope_revenue", "gross_margin_percent", "hourly_rate"):
            assert isinstance(DiagnosticSession.__table__.c[column].type, Numeric)
        for column in ("direct_cost", "unit_cost", "annual_cost"):
            assert isinstance(Dysfunction.__table__.c[column].type, Numeric)

    def test_dysfunction_cascades_with_session(self):
        fk = next(iter(Dysfunction.__table__.c["session_id"].foreign_keys))
        assert fk.column.table.name == "sessions"
        assert fk.ondelete == "CASCADE"

    def test_flag_columns(self):
        columns = set(Dysfunction.__table__.c.keys())
        assert {"indicator_absenteeism", "indicator_productivity_gaps", "component_non_production"} <= columns

    def test_reference_code_unique(self):
        assert ReferenceItem.__table__.c["code"].unique

    def test_base_columns(self):
        for table in ("sessions", "dysfunctions", "reference_items"):
            assert {"id", "created_at", "updated_at"} <= set(Base.metadata.tables[table].c.keys())


# ─── Request schemas ───────────────────────────────────────────────────────

class TestRequestSchemas:
    """Tests for boundary validation and input normalisation."""

    def test_blank_strings_dropped(self):
        body = SessionCreate(title="Audit", company="Acme", sector="", scope_revenue=" ")
        assert body.sector is None
        assert body.scope_revenue is None

    def test_update_tracks_sent_fields(self):
        update = SessionUpdate(scope_revenue=None, title="New title", company="")
        assert update.changes() == {"scope_revenue": None, "title": "New title"}

    def test_update_null_required_field(self):
        with pytest.raises(ValidationError):
            SessionUpdate(status=None)

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            SessionCreate(title="Audit", company="Acme", hourly_rate=Decimal("1"))

    def test_enum_values_stored_as_strings(self):
        body = DysfunctionCreate(
            session_id="s", description="d", frequency="daily",
            minutes_per_occurrence=5, people_affected=1,
        )
        assert body.model_dump()["frequency"] == "daily"
        assert body.direct_cost == 0

    def test_dysfunction_update_null_direct_cost(self):
        assert DysfunctionUpdate(direct_cost=None).changes() == {"direct_cost": Decimal("0")}

    def test_dysfunction_update_null_people(self):
        with pytest.raises(ValidationError):
            DysfunctionUpdate(people_affected=None)

    def test_naive_interview_date_is_utc(self):
        body = SessionCreate(title="Audit", company="Acme", interview_date="2025-03-01T10:00:00")
        assert body.interview_date.tzinfo is not None

    def test_classify_lists(self):
        body = ClassifyRequest(indicators=["defects"], components=[])
        assert body.indicators == ["defects"]
        assert body.components == []
        with pytest.raises(ValidationError):
            ClassifyRequest(components=["waste"])
