from pos_client.http.client import ApiClient
from pos_client.http.errors import ApiError, SessionExpiredError, UnauthorizedError, extract_error_message
from pos_client.http.refresh import RefreshCoordinator
from pos_client.http.session_store import (
    InMemorySessionStore,
    JsonFileSessionStore,
    SessionCredentials,
    SessionStore,
    build_session_store,
)

__all__ = [
    "ApiClient",
    "ApiError",
    "UnauthorizedError",
    "SessionExpiredError",
    "extract_error_message",
    "RefreshCoordinator",
    "SessionCredentials",
    "SessionStore",
    "InMemorySessionStore",
    "JsonFileSessionStore",
    "build_session_store",
]
