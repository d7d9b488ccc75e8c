from __future__ import annotations

import enum
import logging
import threading
from typing import Any, Mapping, Optional

import requests

from .auth import AccessToken, Authenticator, TokenStore
from .exceptions import AuthenticationError, TransportError, UpstreamError
from .rest import SalesforceRestClient
from .transport import build_headers

_logger = logging.getLogger(__name__)

INVALID_SESSION_CODE = "INVALID_SESSION_ID"


class SessionState(enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    REAUTHENTICATING = "reauthenticating"
    FAILED = "failed"


def is_auth_failure(response: requests.Response) -> bool:
    """True for a 401, or an error body carrying ``INVALID_SESSION_ID``."""
    if response.status_code == 401:
        return True
    if response.status_code < 400:
        return False
    try:
        body = response.json()
    except ValueError:
        return False
    errors = body if isinstance(body, list) else [body]
    return any(isinstance(e, dict) and e.get("errorCode") == INVALID_SESSION_CODE for e in errors)


class OAuthRestClient:
    """Attach a bearer token to every request and recover once from a rejected session.

    The session moves through :class:`SessionState`::

        UNAUTHENTICATED -> AUTHENTICATED -> REAUTHENTICATING -> AUTHENTICATED
                                                             \\-> FAILED

    A request that comes back as an authentication failure triggers exactly
    one re-authentication and exactly one retry.  If the retry is rejected as
    well, :class:`~restforce.exceptions.AuthenticationError` is raised.  Every
    other response is returned unchanged (or raised as
    :class:`~restforce.exceptions.UpstreamError` when ``raise_for_status`` is
    set).  Transport failures propagate untouched and are never retried.
    """

    def __init__(
        self,
        rest_client: SalesforceRestClient,
        authenticator: Authenticator,
        token_store: Optional[TokenStore] = None,
        *,
        raise_for_status: bool = False,
    ) -> None:
        self.rest_client = rest_client
        self.authenticator = authenticator
        self.token_store = token_store or TokenStore()
        self.raise_for_status = raise_for_status
        self._lock = threading.RLock()
        self._rejected = False
        self._state = (
            SessionState.UNAUTHENTICATED if self.token_store.empty else SessionState.AUTHENTICATED
        )

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def access_token(self) -> Optional[AccessToken]:
        return self.token_store.get()

    # --------------------------- Verbs -------------------------------

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> requests.Response:
        return self.request("GET", path, params=params)

    def post_json(self, path: str, data: Any = None) -> requests.Response:
        return self.request("POST", path, json=data)

    def patch_json(self, path: str, data: Any = None) -> requests.Response:
        return self.request("PATCH", path, json=data)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
    ) -> requests.Response:
        token = self._ensure_token()
        r = self._send(method, path, token, params=params, json=json)

        if is_auth_failure(r):
            _logger.warning("Session rejected (HTTP %s) for %s %s; re-authenticating", r.status_code, method, path)
            token = self._reauthenticate(token)
            r = self._send(method, path, token, params=params, json=json)
            if is_auth_failure(r):
                with self._lock:
                    # Leave a token another caller refreshed in the meantime alone.
                    if self.token_store.get() == token:
                        self._state = SessionState.FAILED
                        self.token_store.clear()
                raise AuthenticationError(
                    "Session rejected after re-authentication",
                    status_code=r.status_code,
                    body=r.text,
                )

        if self.raise_for_status and not 200 <= r.status_code < 300:
            raise UpstreamError(r)
        return r

    def close(self) -> None:
        self.rest_client.close()
        self.authenticator.transport.close()

    # --------------------------- Internal helpers --------------------

    def _send(
        self,
        method: str,
        path: str,
        token: AccessToken,
        *,
        params: Optional[Mapping[str, Any]],
        json: Any,
    ) -> requests.Response:
        return self.rest_client.request(
            method,
            path,
            params=params,
            json=json,
            headers=build_headers(token.authorization),
        )

    def _ensure_token(self) -> AccessToken:
        with self._lock:
            token = self.token_store.get()
            if token is not None:
                return token
            # A token that was rejected before cannot be handed out again.
            acquire = self.authenticator.reauthenticate if self._rejected else self.authenticator.authenticate
            return self._acquire(acquire)

    def _reauthenticate(self, rejected: AccessToken) -> AccessToken:
        with self._lock:
            current = self.token_store.get()
            if current is not None and current != rejected:
                _logger.debug("Session already refreshed by another caller")
                return current
            self._state = SessionState.REAUTHENTICATING
            self._rejected = True
            self.token_store.clear()
            return self._acquire(self.authenticator.reauthenticate)

    def _acquire(self, acquire) -> AccessToken:
        try:
            token = acquire()
        except (AuthenticationError, TransportError):
            self._state = SessionState.FAILED
            raise
        self.token_store.set(token)
        self._state = SessionState.AUTHENTICATED
        return token
