"""Shared test fixtures for the ISEOR diagnostic test suite."""

from __future__ import annotations

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from iseor_diagnostic.app import create_app
from iseor_diagnostic.config import Settings
from iseor_diagnostic.services.dysfunctions import create_dysfunction
from iseor_diagnostic.services.reference_catalog import load_reference_catalog
from iseor_diagnostic.services.sessions import create_session
from iseor_diagnostic.store import data_store

CONSULTANT_ID = "consultant-alice"
OTHER_CONSULTANT_ID = "consultant-bob"
ADMIN_ID = "admin-carol"


def _test_settings() -> Settings:
    """Return settings suitable for testing."""
    return Settings(
        environment="development",
        debug=True,
        log_format="console",
        rate_limit_default="1000/minute",
        allowed_origins="http://localhost:3000,http://localhost:5015",
    )


@pytest.fixture
def settings():
    """Test settings."""
    return _test_settings()


@pytest.fixture
def app(settings):
    """Create a fresh FastAPI app for testing."""
    return create_app(settings)


@pytest.fixture
def client(app):
    """HTTP test client."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_store():
    """Reset the global data store and reseed the catalog before each test."""
    data_store.reset()
    load_reference_catalog(data_store)
    yield
    data_store.reset()


@pytest.fixture
def consultant_headers():
    return {"X-Consultant-Id": CONSULTANT_ID, "X-Consultant-Role": "consultant"}


@pytest.fixture
def other_consultant_headers():
    return {"X-Consultant-Id": OTHER_CONSULTANT_ID, "X-Consultant-Role": "consultant"}


@pytest.fixture
def admin_headers():
    return {"X-Consultant-Id": ADMIN_ID, "X-Consultant-Role": "admin"}


@pytest.fixture
def sample_session():
    """A session owned by the default consultant with an hourly rate of 156.25.

    1,000,000 revenue at 25% margin over 1,600 hours.
    """
    return create_session(
        data_store,
        {
            "title": "Logistics department diagnostic",
            "company": "ACME Industries",
            "sector": "manufacturing",
            "status": "in_progress",
            "mode": "guided",
            "participants": ["Head of logistics", "Shift supervisor"],
            "scope_revenue": Decimal("1000000"),
            "gross_margin_percent": Decimal("25"),
            "hours_worked_per_year": 1600,
            "headcount": 12,
        },
        consultant_id=CONSULTANT_ID,
    )


@pytest.fixture
def rateless_session():
    """A session without economic inputs, so no hourly rate."""
    return create_session(
        data_store,
        {"title": "Early interview", "company": "Beta Services"},
        consultant_id=CONSULTANT_ID,
    )


@pytest.fixture
def sample_dysfunction(sample_session):
    """Weekly, 120 minutes, 8 people, 500 direct cost: unit 3,000 and annual 156,000."""
    return create_dysfunction(
        data_store,
        sample_session,
        {
            "description": "Weekly coordination meeting overruns",
            "frequency": "weekly",
            "minutes_per_occurrence": 120,
            "people_affected": 8,
            "direct_cost": Decimal("500"),
            "domain": 3,
            "indicator_productivity_gaps": True,
            "component_excess_time": True,
        },
    )


@pytest.fixture
def sample_dysfunctions(sample_session):
    """Three dysfunctions across two domains plus one unclassified."""
    records = [
        {
            "description": "Daily search for missing tools",
            "frequency": "daily",
            "minutes_per_occurrence": 15,
            "people_affected": 4,
            "domain": 1,
            "indicator_defects": True,
            "component_excess_time": True,
            "component_non_production": True,
        },
        {
            "description": "Monthly rework of inventory reports",
            "frequency": "monthly",
            "minutes_per_occurrence": 240,
            "people_affected": 2,
            "direct_cost": Decimal("150"),
            "domain": 2,
            "indicator_defects": True,
            "indicator_productivity_gaps": True,
            "component_overproduction": True,
        },
        {
            "description": "Unplanned equipment outage",
            "frequency": "yearly",
            "minutes_per_occurrence": 480,
            "people_affected": 10,
        },
    ]
    return [create_dysfunction(data_store, sample_session, r) for r in records]
