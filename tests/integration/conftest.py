"""
Integration test fixtures. Overrides get_db, get_settings and get_llm_gateway
so API tests run against an in-memory DB and a fake LLM gateway.
"""
import httpx
import pytest


@pytest.fixture
def override_get_db(session_factory):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    return _get_db


@pytest.fixture
def gateway_handler():
    """Mutable holder for the fake gateway's behaviour; tests replace .handler."""

    class _Holder:
        handler = staticmethod(
            lambda request: httpx.Response(200, json={"success": True, "assistantResponse": "Try 3/6 + 2/6."})
        )

    return _Holder()


@pytest.fixture
def api_client(override_get_db, settings, gateway_handler, make_gateway):
    """FastAPI TestClient with in-memory DB, fixed settings and a fake LLM gateway."""
    from fastapi.testclient import TestClient
    from hero_api.api import app
    from hero_api.config import get_db, get_settings
    from hero_api.routes.llm_routes import get_llm_gateway

    gateway, transport = make_gateway(lambda request: gateway_handler.handler(request))

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_llm_gateway] = lambda: gateway
    with TestClient(app) as client:
        client.transport_log = transport
        yield client
    app.dependency_overrides.clear()
