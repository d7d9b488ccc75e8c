from __future__ import annotations

from typing import Any, Mapping, Optional

import requests

from .transport import RequestsTransport, is_absolute_url

DEFAULT_API_VERSION = "v38.0"
DATA_ROOT = "/services/"


class SalesforceRestClient:
    """Prefix logical resource paths with ``/services/data/{api_version}/``.

    ``"sobjects/Account"`` and ``"/limits"`` become
    ``/services/data/v38.0/sobjects/Account`` and ``/services/data/v38.0/limits``.
    Absolute URLs and paths already rooted at ``/services/`` (such as a
    query's ``nextRecordsUrl``) are handed to the transport untouched.
    """

    def __init__(self, transport: RequestsTransport, api_version: str = DEFAULT_API_VERSION) -> None:
        self.transport = transport
        self.api_version = api_version

    @property
    def base_path(self) -> str:
        return f"/services/data/{self.api_version}/"

    def build_path(self, path: str) -> str:
        if is_absolute_url(path) or path.startswith(DATA_ROOT):
            return path
        return self.base_path + path.lstrip("/")

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> requests.Response:
        return self.transport.request(
            method,
            self.build_path(path),
            params=params,
            json=json,
            headers=headers,
        )

    def close(self) -> None:
        self.transport.close()
