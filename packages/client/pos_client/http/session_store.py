from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ValidationError

from pos_client.models import UserInfo

log = logging.getLogger(__name__)


class SessionCredentials(BaseModel):
    access_token: str | None = None
    refresh_token: str | None = None
    user: UserInfo | None = None

    def is_empty(self) -> bool:
        return not (self.access_token or self.refresh_token or self.user)


class SessionStore(Protocol):
    def load(self) -> SessionCredentials | None: ...

    def save(self, credentials: SessionCredentials) -> None: ...

    def update_tokens(self, access_token: str, refresh_token: str | None = None) -> None: ...

    def clear(self) -> None: ...


class InMemorySessionStore:
    def __init__(self, credentials: SessionCredentials | None = None) -> None:
        self._credentials = credentials if credentials and not credentials.is_empty() else None

    def load(self) -> SessionCredentials | None:
        return self._credentials

    def save(self, credentials: SessionCredentials) -> None:
        self._credentials = None if credentials.is_empty() else credentials.model_copy()

    def update_tokens(self, access_token: str, refresh_token: str | None = None) -> None:
        current = self._credentials or SessionCredentials()
        self._credentials = current.model_copy(
            update={
                "access_token": access_token,
                "refresh_token": refresh_token or current.refresh_token,
            }
        )

    def clear(self) -> None:
        self._credentials = None


class JsonFileSessionStore:
    """Credentials persisted as one JSON document, rewritten whole on every change."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> SessionCredentials | None:
        if not self.path.exists():
            return None
        try:
            credentials = SessionCredentials.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (ValidationError, UnicodeDecodeError, OSError):
            log.warning("discarding unreadable session file %s", self.path)
            self.clear()
            return None
        return None if credentials.is_empty() else credentials

    def save(self, credentials: SessionCredentials) -> None:
        if credentials.is_empty():
            self.clear()
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(credentials.model_dump_json(), encoding="utf-8")
        os.replace(tmp, self.path)

    def update_tokens(self, access_token: str, refresh_token: str | None = None) -> None:
        current = self.load() or SessionCredentials()
        self.save(
            current.model_copy(
                update={
                    "access_token": access_token,
                    "refresh_token": refresh_token or current.refresh_token,
                }
            )
        )

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


def build_session_store(session_file: str = "") -> SessionStore:
    if session_file.strip():
        return JsonFileSessionStore(session_file.strip())
    return InMemorySessionStore()
