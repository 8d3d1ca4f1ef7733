from __future__ import annotations

import asyncio

import httpx
import pytest

from pos_client.http.errors import ApiError, SessionExpiredError, UnauthorizedError
from tests.helpers_fake_backend import (
    BASE_URL,
    REFRESH_PATH,
    ExpiryRecorder,
    api_client,
    bearer,
    body_of,
    store_with,
)


def test_expired_access_token_is_refreshed_and_request_replayed() -> None:
    seen: list[tuple[str, str, str | None]] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, bearer(request)))
        if request.url.path == REFRESH_PATH:
            assert body_of(request) == {"refresh": "r1"}
            return httpx.Response(200, json={"access": "new123"})
        if bearer(request) == "Bearer new123":
            return httpx.Response(200, json=[{"product_id": 1, "name": "Soap"}])
        return httpx.Response(401, json={"detail": "Given token not valid for any token type"})

    store = store_with(access="old", refresh="r1")
    expired = ExpiryRecorder()

    async def _run() -> object:
        async with httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(_handler)) as http:
            return await api_client(http, store, expired).get("/api/inventory/products/")

    products = asyncio.run(_run())

    assert products == [{"product_id": 1, "name": "Soap"}]
    assert seen == [
        ("GET", "/api/inventory/products/", "Bearer old"),
        ("POST", REFRESH_PATH, None),
        ("GET", "/api/inventory/products/", "Bearer new123"),
    ]
    assert store.load().access_token == "new123"
    assert store.load().refresh_token == "r1"
    assert expired.calls == 0


def test_rotated_refresh_token_is_stored() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == REFRESH_PATH:
            return httpx.Response(200, json={"access": "a2", "refresh": "r2"})
        if bearer(request) == "Bearer a2":
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(401)

    store = store_with(access="a1", refresh="r1")

    async def _run() -> None:
        async with httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(_handler)) as http:
            assert await api_client(http, store).get("/api/hr/staff/") == {"ok": True}

    asyncio.run(_run())
    creds = store.load()
    assert (creds.access_token, creds.refresh_token) == ("a2", "r2")


def test_success_path_makes_exactly_one_call() -> None:
    calls: list[httpx.Request] = []
    payload = {"bill_id": 9, "items": [{"product": 1, "quantity": 2}], "grand_total": "118.00"}

    def _handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=payload)

    async def _run() -> object:
        async with httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(_handler)) as http:
            return await api_client(http, store_with(access="tok")).get("/api/sales/bills/9/")

    assert asyncio.run(_run()) == payload
    assert len(calls) == 1
    assert bearer(calls[0]) == "Bearer tok"


def test_second_401_after_refresh_is_terminal() -> None:
    counts = {"domain": 0, "refresh": 0}

    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == REFRESH_PATH:
            counts["refresh"] += 1
            return httpx.Response(200, json={"access": "new123"})
        counts["domain"] += 1
        return httpx.Response(401, json={"detail": "User is inactive"})

    store = store_with()
    expired = ExpiryRecorder()

    async def _run() -> None:
        async with httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(_handler)) as http:
            with pytest.raises(UnauthorizedError) as excinfo:
                await api_client(http, store, expired).get("/api/inventory/products/")
            assert excinfo.value.message == "User is inactive"
            assert excinfo.value.status_code == 401
            assert not isinstance(excinfo.value, SessionExpiredError)

    asyncio.run(_run())
    assert counts == {"domain": 2, "refresh": 1}
    assert store.load() is None
    assert expired.calls == 1


def test_missing_refresh_token_short_circuits_without_network_call() -> None:
    paths: list[str] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(401, json={"detail": "Token expired"})

    store = store_with(access="old", refresh=None)
    expired = ExpiryRecorder()

    async def _run() -> None:
        async with httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(_handler)) as http:
            with pytest.raises(SessionExpiredError) as excinfo:
                await api_client(http, store, expired).delete("/api/inventory/products/3/")
            assert excinfo.value.message == "Token expired"

    asyncio.run(_run())
    assert paths == ["/api/inventory/products/3/"]
    assert store.load() is None
    assert expired.calls == 1


def test_refresh_rejection_clears_session_and_redirects_once_for_all_waiters() -> None:
    counts = {"refresh": 0}

    async def _handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0)
        if request.url.path == REFRESH_PATH:
            counts["refresh"] += 1
            await asyncio.sleep(0.01)
            return httpx.Response(401, json={"detail": "Token is blacklisted"})
        return httpx.Response(401, json={"detail": "Token expired"})

    store = store_with()
    expired = ExpiryRecorder()

    async def _run() -> list[object]:
        async with httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(_handler)) as http:
            client = api_client(http, store, expired)
            return await asyncio.gather(
                *(client.get(f"/api/suppliers/suppliers/{i}/") for i in range(3)),
                return_exceptions=True,
            )

    results = asyncio.run(_run())

    assert all(isinstance(r, SessionExpiredError) for r in results)
    assert counts["refresh"] == 1
    assert store.load() is None
    assert expired.calls == 1


def test_refresh_transport_failure_expires_session() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == REFRESH_PATH:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(401)

    store = store_with()
    expired = ExpiryRecorder()

    async def _run() -> None:
        async with httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(_handler)) as http:
            with pytest.raises(SessionExpiredError) as excinfo:
                await api_client(http, store, expired).get("/api/hr/attendance/")
            assert excinfo.value.message == "HTTP error, status 401"

    asyncio.run(_run())
    assert store.load() is None
    assert expired.calls == 1


def test_transport_error_on_request_propagates_untouched() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow backend", request=request)

    async def _run() -> None:
        async with httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(_handler)) as http:
            with pytest.raises(httpx.ReadTimeout):
                await api_client(http, store_with()).get("/api/inventory/products/")

    asyncio.run(_run())


def test_unauthenticated_route_does_not_refresh_on_401() -> None:
    paths: list[str] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        assert bearer(request) is None
        return httpx.Response(401, json={"detail": "No active account found with the given credentials"})

    store = store_with()

    async def _run() -> None:
        async with httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(_handler)) as http:
            client = api_client(http, store)
            with pytest.raises(ApiError) as excinfo:
                await client.post("/api/token/", {"email": "a@b.c", "password": "x"}, authenticated=False)
            assert not isinstance(excinfo.value, UnauthorizedError)
            assert excinfo.value.message == "No active account found with the given credentials"

    asyncio.run(_run())
    assert paths == ["/api/token/"]
    assert store.load() is not None
