from __future__ import annotations

from typing import Any, Optional


class RestforceError(RuntimeError):
    """Base class for all restforce errors."""


class ConfigurationError(RestforceError):
    """Raised when a client is constructed without a usable way to authenticate."""

    @classmethod
    def minimum_required_fields_not_met(cls) -> ConfigurationError:
        return cls("An access token, or both a username and a password, must be provided.")


class AuthenticationError(RestforceError):
    """Raised when a token exchange fails or a refreshed session is rejected again."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        self.status_code = status_code
        self.body = body
        detail = message
        if status_code is not None:
            detail = f"{message} (HTTP {status_code}): {body}"
        super().__init__(detail)


class TransportError(RestforceError):
    """Raised when the HTTP request itself fails (connection error, timeout)."""


class UpstreamError(RestforceError):
    """Raised for non-2xx responses when a client is created with raise_for_status=True."""

    def __init__(self, response: Any):
        self.response = response
        self.status_code = response.status_code
        super().__init__(f"HTTP {response.status_code} error for {response.url}: {response.text}")
