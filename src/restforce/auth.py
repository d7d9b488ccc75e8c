"""OAuth2 credentials, tokens and the password-grant exchange.

Two ways of authenticating are supported and resolved once, when the
:class:`Authenticator` is created:

* :class:`PresuppliedToken` - the caller already holds an access token.  It is
  used as-is until Salesforce rejects it; a username/password pair, when also
  given, is kept as the fallback for re-authentication.
* :class:`PasswordGrant` - the token is obtained by POSTing the resource
  owner's credentials to ``/services/oauth2/token``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from .exceptions import AuthenticationError, ConfigurationError
from .transport import RequestsTransport

_logger = logging.getLogger(__name__)

TOKEN_PATH = "/services/oauth2/token"
USER_INFO_PATH = "/services/oauth2/userinfo"


def mask_token(token: str) -> str:
    """Short preview of a secret suitable for log output."""
    if len(token) <= 16:
        return "***"
    return f"{token[:10]}...{token[-6:]}"


# ----------------------------------------------------------------------
# Tokens
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class AccessToken:
    """An issued OAuth2 access token. Never mutated; refreshed by replacement."""

    access_token: str
    instance_url: Optional[str] = None
    issued_at: Optional[str] = None
    token_type: str = "Bearer"
    id: Optional[str] = None
    signature: Optional[str] = None

    @classmethod
    def from_response(cls, payload: Dict[str, Any]) -> AccessToken:
        return cls(
            access_token=payload["access_token"],
            instance_url=payload.get("instance_url"),
            issued_at=payload.get("issued_at"),
            token_type=payload.get("token_type") or "Bearer",
            id=payload.get("id"),
            signature=payload.get("signature"),
        )

    @property
    def authorization(self) -> str:
        return f"{self.token_type} {self.access_token}"

    def __repr__(self) -> str:
        return f"AccessToken({mask_token(self.access_token)!r}, instance_url={self.instance_url!r})"


class TokenStore:
    """Holds the current access token for one client."""

    def __init__(self, token: Optional[AccessToken] = None) -> None:
        self._token = token

    def get(self) -> Optional[AccessToken]:
        return self._token

    def set(self, token: AccessToken) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None

    @property
    def empty(self) -> bool:
        return self._token is None


# ----------------------------------------------------------------------
# Authentication modes
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class PasswordGrant:
    username: str
    password: str

    def __repr__(self) -> str:
        return f"PasswordGrant(username={self.username!r})"


@dataclass(frozen=True)
class PresuppliedToken:
    token: AccessToken
    fallback: Optional[PasswordGrant] = None


AuthenticationMode = Union[PresuppliedToken, PasswordGrant]


def resolve_mode(
    access_token: Union[AccessToken, str, None],
    username: Optional[str],
    password: Optional[str],
) -> AuthenticationMode:
    """Pick the authentication mode, failing when no path to a token exists."""
    grant = None
    if username is not None and password is not None:
        grant = PasswordGrant(username, password)

    # An empty token string counts as no token.
    if isinstance(access_token, str):
        access_token = AccessToken(access_token) if access_token else None
    if access_token is not None:
        return PresuppliedToken(access_token, fallback=grant)
    if grant is None:
        raise ConfigurationError.minimum_required_fields_not_met()
    return grant


# ----------------------------------------------------------------------
# Authenticator
# ----------------------------------------------------------------------
class Authenticator:
    """Produce access tokens for one set of client credentials."""

    def __init__(
        self,
        transport: RequestsTransport,
        client_id: str,
        client_secret: str,
        mode: AuthenticationMode,
    ) -> None:
        self.transport = transport
        self.client_id = client_id
        self.client_secret = client_secret
        self.mode = mode

    @property
    def user_info_url(self) -> str:
        return self.transport.resolve(USER_INFO_PATH)

    def authenticate(self) -> AccessToken:
        """Return the initial token: the supplied one, or a fresh password grant."""
        if isinstance(self.mode, PresuppliedToken):
            _logger.debug("Using supplied access token %s", mask_token(self.mode.token.access_token))
            return self.mode.token
        return self.password_grant(self.mode)

    def reauthenticate(self) -> AccessToken:
        """Return a new token after the previous one was rejected."""
        if isinstance(self.mode, PresuppliedToken):
            if self.mode.fallback is None:
                raise AuthenticationError(
                    "Supplied access token was rejected and no username/password is available"
                )
            return self.password_grant(self.mode.fallback)
        return self.password_grant(self.mode)

    def password_grant(self, grant: PasswordGrant) -> AccessToken:
        """POST the resource owner's credentials to the token endpoint."""
        data = {
            "grant_type": "password",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "username": grant.username,
            "password": grant.password,
        }
        _logger.debug("Requesting access token from %s", self.transport.resolve(TOKEN_PATH))
        r = self.transport.request("POST", TOKEN_PATH, data=data, headers={"Accept": "application/json"})

        if not 200 <= r.status_code < 300:
            _logger.error("Token request failed with HTTP %s", r.status_code)
            raise AuthenticationError("Token request failed", status_code=r.status_code, body=r.text)

        try:
            payload = r.json()
        except ValueError:
            raise AuthenticationError(
                "Token response is not valid JSON", status_code=r.status_code, body=r.text
            ) from None

        if not isinstance(payload, dict) or not payload.get("access_token"):
            raise AuthenticationError(
                "Token response did not contain an access_token",
                status_code=r.status_code,
                body=r.text,
            )

        token = AccessToken.from_response(payload)
        _logger.info("Obtained access token for %s (instance=%s)", grant.username, token.instance_url)
        return token
