"""Plain HTTP transport bound to a single base URL.

This is the lowest layer of the client stack.  It knows nothing about
Salesforce, API versions or OAuth; it only resolves a path against its base
URL and sends the request through a shared :class:`requests.Session`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import requests

from .exceptions import TransportError

_logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def is_absolute_url(url: str) -> bool:
    return url.startswith("http://") or url.startswith("https://")


class RequestsTransport:
    """Send requests against ``base_url`` using :mod:`requests`.

    Relative paths are appended to ``base_url``; absolute URLs are sent
    verbatim.  Connection failures and timeouts are raised as
    :class:`~restforce.exceptions.TransportError` and are never retried here.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        # Sessions passed in by the caller are theirs to close.
        self.owns_session = session is None
        self.session = requests.Session() if session is None else session

    def resolve(self, url: str) -> str:
        if is_absolute_url(url):
            return url
        return f"{self.base_url}/{url.lstrip('/')}"

    def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        data: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> requests.Response:
        full_url = self.resolve(url)
        _logger.debug("%s %s", method, full_url)
        try:
            return self.session.request(
                method,
                full_url,
                params=params or None,
                json=json,
                data=data,
                headers=dict(headers or {}),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            _logger.warning("Request error for %s %s: %s", method, full_url, e)
            raise TransportError(f"{method} {full_url} failed: {e}") from e

    def close(self) -> None:
        if self.owns_session:
            self.session.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.base_url!r})"


def build_headers(token_header: Optional[str] = None) -> Dict[str, str]:
    """Default JSON headers, with an ``Authorization`` value when given."""
    headers = {"Accept": "application/json"}
    if token_header:
        headers["Authorization"] = token_header
    return headers
