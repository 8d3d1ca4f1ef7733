from __future__ import annotations

import json as json_module
import logging
import time
import uuid
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from pos_core.logging import current_request_id, request_id_context
from pos_core.settings import Settings

from .errors import ApiError, SessionExpiredError, UnauthorizedError, fallback_message, json_or_none
from .refresh import RefreshCoordinator
from .session_store import InMemorySessionStore, SessionStore, build_session_store

log = logging.getLogger(__name__)

_EMPTY_BODY_STATUS = {204, 205}

SessionExpiredHook = Callable[[], None]


class ApiClient:
    """Backend client that authorizes with the stored bearer token.

    A 401 triggers one shared token refresh (see ``RefreshCoordinator``) and a
    single replay of the request with the new token. Any other non-2xx answer
    raises ``ApiError``.
    """

    def __init__(
        self,
        *,
        base_url: str,
        session_store: SessionStore | None = None,
        on_session_expired: SessionExpiredHook | None = None,
        refresh_path: str = "/api/token/refresh/",
        client: httpx.AsyncClient | None = None,
        timeout: httpx.Timeout | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session_store = session_store if session_store is not None else InMemorySessionStore()
        self.on_session_expired = on_session_expired
        self.refresh_path = refresh_path
        self.timeout = timeout or httpx.Timeout(connect=5.0, read=30.0, write=30.0, pool=30.0)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        self.refresh_coordinator = RefreshCoordinator(self._refresh_access_token)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        on_session_expired: SessionExpiredHook | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> ApiClient:
        read = settings.POS_HTTP_READ_TIMEOUT
        return cls(
            base_url=settings.POS_API_BASE_URL,
            session_store=build_session_store(settings.POS_SESSION_FILE),
            on_session_expired=on_session_expired,
            refresh_path=settings.POS_TOKEN_REFRESH_PATH,
            client=client,
            timeout=httpx.Timeout(connect=settings.POS_HTTP_CONNECT_TIMEOUT, read=read, write=read, pool=read),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ---- verbs ----

    async def get(self, path: str, *, params: Mapping[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, data: Any = None, *, authenticated: bool = True) -> Any:
        return await self.request("POST", path, json=data, authenticated=authenticated)

    async def put(self, path: str, data: Any = None) -> Any:
        return await self.request("PUT", path, json=data)

    async def patch(self, path: str, data: Any = None) -> Any:
        return await self.request("PATCH", path, json=data)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def get_blob(self, path: str, *, params: Mapping[str, Any] | None = None) -> bytes:
        return await self.request("GET", path, params=params, raw=True)

    async def post_form(
        self,
        path: str,
        data: Mapping[str, Any] | None = None,
        files: Mapping[str, Any] | None = None,
    ) -> Any:
        # no Content-Type here: httpx writes the multipart boundary itself
        return await self.request("POST", path, data=data, files=files)

    # ---- dispatch ----

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        data: Mapping[str, Any] | None = None,
        files: Mapping[str, Any] | None = None,
        authenticated: bool = True,
        raw: bool = False,
    ) -> Any:
        endpoint = path if path.startswith("/") else f"/{path}"
        request_id = current_request_id() or uuid.uuid4().hex[:12]
        with request_id_context(request_id):
            send_kwargs = {"params": params, "json": json, "data": data, "files": files}
            token = self._access_token() if authenticated else None
            resp = await self._send(method, endpoint, token, attempt=1, **send_kwargs)

            if resp.status_code == 401 and authenticated:
                first_failure = ApiError.from_response(resp)
                stored = self._access_token()
                if stored and stored != token:
                    # another request refreshed while this one was in flight
                    new_token = stored
                else:
                    new_token = await self.refresh_coordinator.wait_for_token()
                if new_token is None:
                    raise SessionExpiredError(
                        first_failure.message, status_code=401, payload=first_failure.payload
                    )
                resp = await self._send(method, endpoint, new_token, attempt=2, **send_kwargs)
                if resp.status_code == 401:
                    failure = ApiError.from_response(resp)
                    log.warning("still unauthorized after token refresh", extra={"path": endpoint})
                    self._expire_session()
                    raise UnauthorizedError(failure.message, status_code=401, payload=failure.payload)

            return self._decode(resp, raw=raw)

    async def _send(
        self,
        method: str,
        endpoint: str,
        token: str | None,
        *,
        attempt: int,
        params: Mapping[str, Any] | None,
        json: Any,
        data: Mapping[str, Any] | None,
        files: Mapping[str, Any] | None,
    ) -> httpx.Response:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        started = time.perf_counter()
        resp = await self._client.request(
            method,
            self._url(endpoint),
            params=params,
            json=json,
            data=data,
            files=files,
            headers=headers,
        )
        log.debug(
            "%s %s -> %s",
            method,
            endpoint,
            resp.status_code,
            extra={
                "method": method,
                "path": endpoint,
                "status": resp.status_code,
                "attempt": attempt,
                "latency_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        return resp

    def _decode(self, resp: httpx.Response, *, raw: bool) -> Any:
        if not resp.is_success:
            raise ApiError.from_response(resp)
        if resp.status_code in _EMPTY_BODY_STATUS:
            return b"" if raw else {}
        if raw:
            return resp.content
        if not resp.content:
            return {}
        try:
            return resp.json()
        except (json_module.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ApiError(fallback_message(resp.status_code), status_code=resp.status_code) from exc

    def _url(self, endpoint: str) -> str:
        # relative to the injected client's base_url when it has one
        if self._client.base_url.host:
            return endpoint
        return f"{self.base_url}{endpoint}"

    # ---- tokens ----

    def _access_token(self) -> str | None:
        credentials = self.session_store.load()
        return credentials.access_token if credentials else None

    async def _refresh_access_token(self) -> str | None:
        credentials = self.session_store.load()
        refresh_token = credentials.refresh_token if credentials else None
        if not refresh_token:
            log.warning("no refresh token stored; cannot refresh access token")
            self._expire_session()
            return None

        try:
            resp = await self._send(
                "POST",
                self.refresh_path,
                None,
                attempt=1,
                params=None,
                json={"refresh": refresh_token},
                data=None,
                files=None,
            )
        except httpx.HTTPError as exc:
            log.warning("token refresh transport failure: %s", type(exc).__name__)
            self._expire_session()
            return None

        body = json_or_none(resp) if resp.is_success else None
        access = body.get("access") if isinstance(body, dict) else None
        if not access:
            log.warning(
                "token refresh rejected",
                extra={"path": self.refresh_path, "status": resp.status_code},
            )
            self._expire_session()
            return None

        self.session_store.update_tokens(str(access), body.get("refresh") or None)
        log.info("access token refreshed", extra={"waiters": self.refresh_coordinator.pending})
        return str(access)

    def _expire_session(self) -> None:
        had_session = self.session_store.load() is not None
        self.session_store.clear()
        if not had_session:
            # already signed out, so already at the login entry point
            return
        log.info("session expired; signing out")
        if self.on_session_expired is not None:
            self.on_session_expired()
