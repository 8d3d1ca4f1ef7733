from __future__ import annotations

import json
from typing import Any

import httpx


class ApiError(RuntimeError):
    """Non-2xx response from the backend, with the best message it offered."""

    def __init__(self, message: str, *, status_code: int, payload: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @classmethod
    def from_response(cls, response: httpx.Response) -> ApiError:
        payload = json_or_none(response)
        return cls(
            extract_error_message(payload, response.status_code),
            status_code=response.status_code,
            payload=payload,
        )


class UnauthorizedError(ApiError):
    """401 that survived a token refresh."""


class SessionExpiredError(UnauthorizedError):
    """The access token could not be refreshed; the stored session is gone."""


def fallback_message(status_code: int) -> str:
    return f"HTTP error, status {status_code}"


def extract_error_message(payload: Any, status_code: int) -> str:
    # priority: detail, error, first message of the first field, generic
    if isinstance(payload, dict):
        detail = payload.get("detail")
        if detail:
            return str(detail)
        error = payload.get("error")
        if error:
            return str(error)
        if payload:
            first = next(iter(payload.values()))
            if isinstance(first, list) and first:
                return str(first[0])
    return fallback_message(status_code)


def json_or_none(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
