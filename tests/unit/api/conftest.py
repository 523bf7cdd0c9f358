"""Fixtures for API unit tests: in-memory stores wired through dependency overrides, AsyncClient."""

import pytest
from httpx import ASGITransport, AsyncClient

from elgar.main import app
from elgar.security.tokens import create_access_token


@pytest.fixture
def app_with_overrides(report_store, user_store, assignments, audit_logger, notifier):
    """App with store repositories, audit logger and notifier replaced by in-memory fakes."""
    from elgar.api import dependencies

    app.dependency_overrides[dependencies.get_report_repository] = lambda: report_store
    app.dependency_overrides[dependencies.get_user_repository] = lambda: user_store
    app.dependency_overrides[dependencies.get_assignment_repository] = lambda: assignments
    app.dependency_overrides[dependencies.get_audit_logger] = lambda: audit_logger
    app.dependency_overrides[dependencies.get_notifier] = lambda: notifier
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app_with_overrides):
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers


@pytest.fixture
def report_body():
    return {
        "event_id": "evt-1",
        "full_report": "Patrol on the north road, no incidents.",
        "digital_signature": True,
    }
