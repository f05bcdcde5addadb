"""HTTP tests for the /auth endpoints using an in-process ASGI client."""

import httpx
import pytest

from bearer_auth.authenticators import AbstractAuthenticatorStore
from bearer_auth.dependencies import get_authenticator_service
from bearer_auth.main import create_app
from bearer_auth.settings import settings

from conftest import make_service

HOST_SECRET = "test-host-secret"


@pytest.fixture
def web_service(store, clock, id_generator):
    return make_service(store, clock=clock, id_generator=id_generator)


@pytest.fixture
def app(web_service, monkeypatch):
    monkeypatch.setattr(settings, "host_app_registration_secret", HOST_SECRET)
    app = create_app()
    app.dependency_overrides[get_authenticator_service] = lambda: web_service
    return app


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


async def issue(client, provider_key: str = "alice@example.com") -> str:
    response = await client.post(
        "/auth/tokens",
        json={"provider_id": "credentials", "provider_key": provider_key},
        headers={"X-Host-App-Secret": HOST_SECRET},
    )
    assert response.status_code == 201
    return response.headers["X-Auth-Token"]


class TestIssueToken:
    async def test_issue_returns_token_in_header_and_body(self, client):
        response = await client.post(
            "/auth/tokens",
            json={"provider_id": "credentials", "provider_key": "alice@example.com"},
            headers={"X-Host-App-Secret": HOST_SECRET},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["token"] == "token-0001"
        assert response.headers["X-Auth-Token"] == "token-0001"
        assert body["expires_at"].startswith("2024-01-02T00:00:00")

    async def test_issue_without_secret_header(self, client):
        response = await client.post("/auth/tokens", json={"provider_id": "p", "provider_key": "k"})
        assert response.status_code == 401

    async def test_issue_with_wrong_secret(self, client):
        response = await client.post(
            "/auth/tokens",
            json={"provider_id": "p", "provider_key": "k"},
            headers={"X-Host-App-Secret": "wrong"},
        )
        assert response.status_code == 403

    async def test_issue_when_secret_not_configured(self, client, monkeypatch):
        monkeypatch.setattr(settings, "host_app_registration_secret", None)
        response = await client.post(
            "/auth/tokens",
            json={"provider_id": "p", "provider_key": "k"},
            headers={"X-Host-App-Secret": HOST_SECRET},
        )
        assert response.status_code == 503


class TestAuthenticatedRequests:
    async def test_me_describes_authenticator(self, client):
        token = await issue(client)

        response = await client.get("/auth/me", headers={"X-Auth-Token": token})

        assert response.status_code == 200
        body = response.json()
        assert body["provider_id"] == "credentials"
        assert body["provider_key"] == "alice@example.com"
        assert body["idle_timeout_seconds"] == 30 * 60
        assert token not in response.text

    async def test_missing_token_is_unauthorized(self, client):
        response = await client.get("/auth/me")

        assert response.status_code == 401
        assert response.json()["detail"]["message_id"] == "bearer_auth.not.authenticated"
        assert response.headers["WWW-Authenticate"].startswith("Bearer")

    async def test_unknown_token_is_unauthorized(self, client):
        response = await client.get("/auth/me", headers={"X-Auth-Token": "forged"})
        assert response.status_code == 401

    async def test_request_touches_authenticator(self, client, clock, store):
        token = await issue(client)
        clock.advance(1000)

        response = await client.get("/auth/me", headers={"X-Auth-Token": token})

        assert response.status_code == 200
        assert (await store.find(token)).last_used_date == clock.now()

    async def test_idle_token_is_rejected(self, client, clock):
        token = await issue(client)
        clock.advance(1801)

        response = await client.get("/auth/me", headers={"X-Auth-Token": token})

        assert response.status_code == 401

    async def test_regular_use_keeps_token_alive(self, client, clock):
        token = await issue(client)
        for _ in range(4):
            clock.advance(1500)
            response = await client.get("/auth/me", headers={"X-Auth-Token": token})
            assert response.status_code == 200


class TestRenewAndDiscard:
    async def test_renew_issues_new_token_and_revokes_old(self, client):
        old_token = await issue(client)

        response = await client.post("/auth/tokens/renew", headers={"X-Auth-Token": old_token})

        assert response.status_code == 200
        new_token = response.headers["X-Auth-Token"]
        assert new_token != old_token
        assert response.json()["header"] == "X-Auth-Token"
        assert (await client.get("/auth/me", headers={"X-Auth-Token": old_token})).status_code == 401
        assert (await client.get("/auth/me", headers={"X-Auth-Token": new_token})).status_code == 200

    async def test_discard_revokes_token(self, client):
        token = await issue(client)

        response = await client.delete("/auth/tokens", headers={"X-Auth-Token": token})

        assert response.status_code == 204
        assert (await client.get("/auth/me", headers={"X-Auth-Token": token})).status_code == 401


class TestErrorHandling:
    async def test_store_failure_maps_to_server_error(self, app, clock, id_generator):
        class BrokenStore(AbstractAuthenticatorStore):
            async def find(self, authenticator_id):
                raise ConnectionError("store down")

            async def add(self, authenticator):
                raise ConnectionError("store down")

            async def update(self, authenticator):
                raise ConnectionError("store down")

            async def remove(self, authenticator_id):
                raise ConnectionError("store down")

            async def initialize(self):
                pass

            async def teardown(self):
                pass

        broken = make_service(BrokenStore(), clock=clock, id_generator=id_generator)
        app.dependency_overrides[get_authenticator_service] = lambda: broken
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            response = await client.get("/auth/me", headers={"X-Auth-Token": "some-token"})

        assert response.status_code == 500
        assert response.json()["detail"] == "[bearer-token-authenticator] Could not retrieve authenticator"

    async def test_health(self, client):
        response = await client.get("/health")
        assert response.json() == {"status": "healthy"}

