from __future__ import annotations

import datetime as dt
import json
from typing import Any

import httpx
import jwt

from pos_client.http.client import ApiClient
from pos_client.http.session_store import InMemorySessionStore, SessionCredentials

BASE_URL = "https://pos.test"
REFRESH_PATH = "/api/token/refresh/"
_SIGNING_KEY = "test-signing-key-0123456789abcdef-0123456789"


def make_jwt(user_id: int = 7, *, expires_in: int = 3600, **claims: Any) -> str:
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "token_type": "access",
        "user_id": user_id,
        "iat": int(now.timestamp()),
        "exp": int((now + dt.timedelta(seconds=expires_in)).timestamp()),
        "jti": f"jti-{user_id}",
    }
    payload.update(claims)
    return jwt.encode(payload, _SIGNING_KEY, algorithm="HS256")


def bearer(request: httpx.Request) -> str | None:
    return request.headers.get("Authorization")


def body_of(request: httpx.Request) -> Any:
    return json.loads(request.content) if request.content else None


def store_with(access: str | None = "old", refresh: str | None = "r1") -> InMemorySessionStore:
    return InMemorySessionStore(SessionCredentials(access_token=access, refresh_token=refresh))


class ExpiryRecorder:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


def api_client(
    http_client: httpx.AsyncClient,
    store: InMemorySessionStore | None = None,
    on_expired: ExpiryRecorder | None = None,
) -> ApiClient:
    return ApiClient(
        base_url=BASE_URL,
        session_store=store if store is not None else InMemorySessionStore(),
        on_session_expired=on_expired,
        refresh_path=REFRESH_PATH,
        client=http_client,
    )
