"""
Tests for complement providers: local, remote (with retries), and the full
admission -> complement -> admission round trip over in-process transports.
"""

import json

import httpx
import pytest
from httpx import ASGITransport

from admissions.api.deps import get_complement
from admissions.api.routes.complement import get_hospital_name_client
from admissions.complement_main import app as complement_app
from admissions.core.config import get_settings
from admissions.core.exceptions import ExternalServiceError, UpstreamRejectedError
from admissions.core.security import create_access_token
from admissions.main import app as admission_app
from admissions.services.complement_factory import get_complement_provider
from admissions.services.hospital_name_client import HospitalNameClient
from admissions.services.interfaces.complement import complement_of
from admissions.services.local_complement import LocalComplementProvider
from admissions.services.remote_complement import RemoteComplementProvider

UNIVERSE = {"Atascadero", "Coalinga", "Metropolitan", "Napa", "Patton"}


def remote_provider(handler, max_attempts=3) -> RemoteComplementProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RemoteComplementProvider(
        client,
        "http://complement",
        token_provider=lambda: "service-token",
        max_attempts=max_attempts,
        backoff_initial=0,
        backoff_max=0,
    )


def test_complement_of():
    assert complement_of({"Napa"}, UNIVERSE) == UNIVERSE - {"Napa"}
    assert complement_of(set(), UNIVERSE) == UNIVERSE
    assert complement_of(UNIVERSE, UNIVERSE) == set()
    # Names outside the universe are ignored
    assert complement_of({"Nowhere", "Napa"}, UNIVERSE) == UNIVERSE - {"Napa"}
    # Exact, case-sensitive difference
    assert complement_of({"napa"}, UNIVERSE) == UNIVERSE


@pytest.mark.asyncio
async def test_local_provider(hospital_repo, hospitals):
    provider = LocalComplementProvider(hospital_repo)

    assert await provider.compute_complement(set()) == UNIVERSE
    assert await provider.compute_complement({"Atascadero", "Coalinga"}) == {
        "Metropolitan",
        "Napa",
        "Patton",
    }
    assert await provider.compute_complement(UNIVERSE) == set()


@pytest.mark.asyncio
async def test_local_provider_sees_new_hospitals(hospital_repo, add_hospitals):
    await add_hospitals(["Atascadero"])
    provider = LocalComplementProvider(hospital_repo)
    assert await provider.compute_complement(set()) == {"Atascadero"}

    await add_hospitals(["Napa"])
    assert await provider.compute_complement({"Atascadero"}) == {"Napa"}


@pytest.mark.asyncio
async def test_factory_selects_local(db_session):
    assert isinstance(get_complement_provider(db_session), LocalComplementProvider)


@pytest.mark.asyncio
async def test_factory_selects_remote(db_session, monkeypatch):
    settings = get_settings()
    monkeypatch.setattr(settings, "COMPLEMENT_PROVIDER", "remote")
    monkeypatch.setattr(settings, "COMPLEMENT_SERVICE_URL", "http://complement:8081/")

    provider = get_complement_provider(db_session)

    assert isinstance(provider, RemoteComplementProvider)
    assert provider.url == "http://complement:8081/complement"
    assert provider.max_attempts == settings.COMPLEMENT_MAX_ATTEMPTS


@pytest.mark.asyncio
async def test_factory_rejects_unknown_provider(db_session, monkeypatch):
    monkeypatch.setattr(get_settings(), "COMPLEMENT_PROVIDER", "carrier-pigeon")
    with pytest.raises(ValueError):
        get_complement_provider(db_session)


@pytest.mark.asyncio
async def test_remote_provider_success():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"hospitalNames": ["Napa", "Patton"]})

    provider = remote_provider(handler)
    result = await provider.compute_complement({"Coalinga", "Atascadero"})

    assert result == {"Napa", "Patton"}
    [request] = seen
    assert request.method == "POST"
    assert request.url.path == "/complement"
    assert request.headers["Authorization"] == "Bearer service-token"
    assert json.loads(request.content) == {"hospitalNames": ["Atascadero", "Coalinga"]}


@pytest.mark.asyncio
async def test_remote_provider_retries_server_errors():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(503, text="busy")
        return httpx.Response(200, json={"hospitalNames": ["Napa"]})

    provider = remote_provider(handler)
    assert await provider.compute_complement(set()) == {"Napa"}
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_remote_provider_gives_up_after_max_attempts():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    provider = remote_provider(handler, max_attempts=4)
    with pytest.raises(ExternalServiceError, match=r"Max attempts \(4\) exceeded"):
        await provider.compute_complement({"Napa"})
    assert len(calls) == 4


@pytest.mark.asyncio
async def test_remote_provider_does_not_retry_client_errors():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(401, json={"detail": "Could not validate credentials"})

    provider = remote_provider(handler)
    with pytest.raises(ExternalServiceError, match="401"):
        await provider.compute_complement({"Napa"})
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_remote_provider_rejects_malformed_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"hospitalNames": "Napa"})

    provider = remote_provider(handler)
    with pytest.raises(ExternalServiceError, match="Malformed"):
        await provider.compute_complement(set())


@pytest.mark.asyncio
async def test_remote_provider_through_both_services(client, auth_headers):
    """
    Admission service -> complement service -> admission service, all
    in-process: the complement app fetches hospital names from the admission
    app, and the admission app's matcher uses the complement app.
    """
    admission_http = httpx.AsyncClient(transport=ASGITransport(app=admission_app))
    complement_app.dependency_overrides[get_hospital_name_client] = lambda: HospitalNameClient(
        admission_http, "http://admission"
    )

    complement_http = httpx.AsyncClient(transport=ASGITransport(app=complement_app))
    provider = RemoteComplementProvider(
        complement_http,
        "http://complement",
        backoff_initial=0,
        backoff_max=0,
    )
    admission_app.dependency_overrides[get_complement] = lambda: provider

    try:
        response = await client.post(
            "/api/v1/waitlist",
            json={"name": "Ada", "disallowAdmissionTo": ["Atascadero", "Coalinga"]},
            headers=auth_headers,
        )
        assert response.status_code == 201

        response = await client.post("/api/v1/hospitals/admit-from-waitlist", headers=auth_headers)
        assert response.status_code == 200
        [admitted] = response.json()
        assert admitted["name"] == "Ada"
        assert admitted["admittedTo"] == "Metropolitan"
    finally:
        complement_app.dependency_overrides.clear()
        await admission_http.aclose()
        await complement_http.aclose()


@pytest.mark.asyncio
async def test_complement_endpoint_requires_token():
    async with httpx.AsyncClient(
        transport=ASGITransport(app=complement_app), base_url="http://complement"
    ) as ac:
        response = await ac.post("/complement", json={"hospitalNames": []})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_complement_endpoint_forwards_request_id():
    upstream = []

    def handler(request: httpx.Request) -> httpx.Response:
        upstream.append(request)
        return httpx.Response(200, json={"hospitalNames": ["Napa", "Patton"]})

    admission_http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    complement_app.dependency_overrides[get_hospital_name_client] = lambda: HospitalNameClient(
        admission_http, "http://admission", token_provider=lambda: "service-token"
    )
    headers = {
        "Authorization": f"Bearer {create_access_token({'sub': 'service:admission'})}",
        "X-Request-ID": "abc123",
    }

    try:
        async with httpx.AsyncClient(
            transport=ASGITransport(app=complement_app), base_url="http://complement"
        ) as ac:
            response = await ac.request(
                "GET", "/complement", json={"hospitalNames": ["Patton"]}, headers=headers
            )
    finally:
        complement_app.dependency_overrides.clear()
        await admission_http.aclose()

    assert response.status_code == 200
    assert response.json() == {"hospitalNames": ["Napa"]}
    assert response.headers["X-Request-ID"] == "abc123"
    [request] = upstream
    assert request.url.path == "/api/v1/hospital-names"
    assert request.headers["X-Request-ID"] == "abc123"
    assert request.headers["Authorization"] == "Bearer service-token"


@pytest.mark.asyncio
async def test_complement_endpoint_reports_upstream_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="database down")

    admission_http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    complement_app.dependency_overrides[get_hospital_name_client] = lambda: HospitalNameClient(
        admission_http, "http://admission", token_provider=lambda: "service-token"
    )
    headers = {"Authorization": f"Bearer {create_access_token({'sub': 'service:admission'})}"}

    try:
        async with httpx.AsyncClient(
            transport=ASGITransport(app=complement_app), base_url="http://complement"
        ) as ac:
            response = await ac.post("/complement", json={"hospitalNames": []}, headers=headers)
    finally:
        complement_app.dependency_overrides.clear()
        await admission_http.aclose()

    assert response.status_code == 502
    assert "Could not fetch hospital names" in response.json()["detail"]


@pytest.mark.asyncio
async def test_complement_endpoint_reports_rejected_credentials_as_424():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"detail": "Could not validate credentials"})

    admission_http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    complement_app.dependency_overrides[get_hospital_name_client] = lambda: HospitalNameClient(
        admission_http, "http://admission", token_provider=lambda: "stale-token"
    )
    headers = {"Authorization": f"Bearer {create_access_token({'sub': 'service:admission'})}"}

    try:
        async with httpx.AsyncClient(
            transport=ASGITransport(app=complement_app), base_url="http://complement"
        ) as ac:
            response = await ac.post("/complement", json={"hospitalNames": []}, headers=headers)
    finally:
        complement_app.dependency_overrides.clear()
        await admission_http.aclose()

    assert response.status_code == 424
    assert "rejected the request (401)" in response.json()["detail"]


@pytest.mark.asyncio
async def test_hospital_name_client_raises_rejected_error_on_4xx():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, text="forbidden")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        names = HospitalNameClient(http, "http://admission", token_provider=lambda: "t")
        with pytest.raises(UpstreamRejectedError, match="403"):
            await names.get_all_hospital_names()


@pytest.mark.asyncio
async def test_remote_provider_does_not_retry_when_upstream_rejects_credentials():
    """A 401 two hops away surfaces as one 424 and is not retried."""
    upstream = []

    def handler(request: httpx.Request) -> httpx.Response:
        upstream.append(request)
        return httpx.Response(401, json={"detail": "Could not validate credentials"})

    admission_http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    complement_app.dependency_overrides[get_hospital_name_client] = lambda: HospitalNameClient(
        admission_http, "http://admission", token_provider=lambda: "stale-token"
    )
    complement_http = httpx.AsyncClient(transport=ASGITransport(app=complement_app))
    provider = RemoteComplementProvider(
        complement_http,
        "http://complement",
        max_attempts=3,
        backoff_initial=0,
        backoff_max=0,
    )

    try:
        with pytest.raises(ExternalServiceError, match="424"):
            await provider.compute_complement({"Napa"})
    finally:
        complement_app.dependency_overrides.clear()
        await admission_http.aclose()
        await complement_http.aclose()

    assert len(upstream) == 1
