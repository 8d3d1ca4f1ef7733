"""Login, logout and stored-session inspection on top of ``ApiClient``."""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass

import httpx
import jwt
from pydantic import ValidationError

from pos_client.http.client import ApiClient
from pos_client.http.errors import ApiError
from pos_client.http.session_store import SessionCredentials
from pos_client.models import TokenPair, TokenPayload, UserInfo

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    tokens: TokenPair
    user: UserInfo


class AuthService:
    def __init__(
        self,
        client: ApiClient,
        *,
        token_path: str = "/api/token/",
        logout_path: str = "/api/auth/logout/",
    ) -> None:
        self.client = client
        self.token_path = token_path
        self.logout_path = logout_path

    @property
    def store(self):
        return self.client.session_store

    async def login(self, email: str, password: str) -> LoginResult:
        body = await self.client.post(
            self.token_path, {"email": email, "password": password}, authenticated=False
        )
        tokens = TokenPair.model_validate(body)
        payload = decode_token(tokens.access)
        user = UserInfo(
            user_id=payload.user_id,
            tenant_id=payload.tenant_id,
            role=payload.role,
            email=email,
        )
        self.store.save(
            SessionCredentials(access_token=tokens.access, refresh_token=tokens.refresh, user=user)
        )
        log.info("signed in", extra={"user_id": user.user_id})
        return LoginResult(tokens=tokens, user=user)

    async def logout(self) -> None:
        """Blacklist the refresh token remotely, then always drop the local session."""
        refresh = self.refresh_token()
        if refresh:
            try:
                await self.client.post(self.logout_path, {"refresh": refresh})
            except (ApiError, httpx.HTTPError) as exc:
                # the local session is cleared regardless
                log.warning("remote logout failed: %s", exc)
        self.store.clear()

    def current_user(self) -> UserInfo | None:
        credentials = self.store.load()
        return credentials.user if credentials else None

    def access_token(self) -> str | None:
        credentials = self.store.load()
        return credentials.access_token if credentials else None

    def refresh_token(self) -> str | None:
        credentials = self.store.load()
        return credentials.refresh_token if credentials else None

    def is_authenticated(self, now: dt.datetime | None = None) -> bool:
        token = self.access_token()
        if not token:
            return False
        try:
            payload = decode_token(token)
        except ValueError:
            return False
        now = now or dt.datetime.now(dt.timezone.utc)
        return payload.exp > int(now.timestamp())

    def restore_session(self) -> UserInfo | None:
        if self.is_authenticated():
            return self.current_user()
        self.store.clear()
        return None


def decode_token(token: str) -> TokenPayload:
    """Read the JWT claims without verifying them; the backend does that."""
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
        return TokenPayload.model_validate(claims)
    except (jwt.PyJWTError, ValidationError) as exc:
        raise ValueError("Failed to decode token") from exc
