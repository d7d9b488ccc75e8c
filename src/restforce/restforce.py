from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Iterator, Optional, Sequence, Union

import requests

from .auth import AccessToken, Authenticator, resolve_mode
from .config import DEFAULT_API_URL, DEFAULT_APEX_ENDPOINT, RestforceConfig
from .oauth import OAuthRestClient
from .rest import DEFAULT_API_VERSION, SalesforceRestClient
from .transport import DEFAULT_TIMEOUT, RequestsTransport

_logger = logging.getLogger(__name__)


class Restforce:
    """Salesforce REST API client.

    Authentication happens lazily on the first call, either with the supplied
    ``access_token`` or through the OAuth2 password grant with ``username``
    and ``password``.  One OAuth session is kept per instance.

    Every operation returns the :class:`requests.Response` as received from
    Salesforce; decoding the body is left to the caller.

    .. code-block:: python

        sf = Restforce("client-id", "secret", "https://login.salesforce.com",
                       username="me@example.com", password="pw+securitytoken")
        sf.create("Contact", {"LastName": "Smith"})
        contacts = sf.query("SELECT Id, Name FROM Contact").json()["records"]
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        oauth_url: str,
        access_token: Union[AccessToken, str, None] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        api_version: Optional[str] = None,
        apex_endpoint: str = DEFAULT_APEX_ENDPOINT,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        raise_for_status: bool = False,
        session: Optional[requests.Session] = None,
    ) -> None:
        # Raises ConfigurationError before anything else is stored.
        self._auth_mode = resolve_mode(access_token, username, password)

        self.client_id = client_id
        self.client_secret = client_secret
        self.oauth_url = oauth_url.rstrip("/")
        self.api_url = api_url
        self.api_version = api_version or DEFAULT_API_VERSION
        self.apex_endpoint = apex_endpoint
        self.timeout = timeout
        self.raise_for_status = raise_for_status
        self._session = session

        self._oauth_rest_client: Optional[OAuthRestClient] = None
        self._client_lock = threading.Lock()

    @classmethod
    def from_config(cls, cfg: RestforceConfig, **kwargs: Any) -> Restforce:
        return cls(
            cfg.client_id,
            cfg.client_secret,
            cfg.login_url,
            access_token=cfg.access_token,
            username=cfg.username,
            password=cfg.password,
            api_version=cfg.api_version,
            apex_endpoint=cfg.apex_endpoint,
            api_url=cfg.api_url,
            timeout=cfg.timeout,
            **kwargs,
        )

    # --------------------------- sObjects ----------------------------

    def create(self, sobject_type: str, data: Dict[str, Any]) -> requests.Response:
        return self.client.post_json(f"sobjects/{sobject_type}", data)

    def update(self, sobject_type: str, sobject_id: str, data: Dict[str, Any]) -> requests.Response:
        return self.client.patch_json(f"sobjects/{sobject_type}/{sobject_id}", data)

    def describe(self, sobject_type: str) -> requests.Response:
        return self.client.get(f"sobjects/{sobject_type}/describe")

    def find(
        self,
        sobject_type: str,
        sobject_id: str,
        fields: Optional[Sequence[str]] = None,
    ) -> requests.Response:
        """Fetch one record, optionally restricted to ``fields``."""
        params = {"fields": ",".join(fields)} if fields else {}
        return self.client.get(f"sobjects/{sobject_type}/{sobject_id}", params)

    # --------------------------- Query & org -------------------------

    def limits(self) -> requests.Response:
        return self.client.get("/limits")

    def query(self, soql: str) -> requests.Response:
        return self.client.get("query", {"q": soql})

    def get_next(self, url: str) -> requests.Response:
        """Follow a ``nextRecordsUrl`` returned by :meth:`query`."""
        return self.client.get(url)

    def query_all_iter(self, soql: str) -> Iterator[Dict[str, Any]]:
        """Yield records across pages via nextRecordsUrl."""
        res = self.query(soql).json()
        yield from res.get("records", [])
        next_url = res.get("nextRecordsUrl")
        while next_url:
            res = self.get_next(next_url).json()
            yield from res.get("records", [])
            next_url = res.get("nextRecordsUrl")

    def user_info(self) -> requests.Response:
        """Return identity information for the authenticated user."""
        client = self.client
        return client.get(client.authenticator.user_info_url)

    # --------------------------- Apex REST ---------------------------

    def find_apex_object(self, sobject_type: str, sobject_id: str) -> requests.Response:
        return self.client.get(self._apex_url(f"{sobject_type}/{sobject_id}"))

    def create_apex_object(self, sobject_type: str, data: Dict[str, Any]) -> requests.Response:
        return self.client.post_json(self._apex_url(f"{sobject_type}/"), data)

    def update_apex_object(self, sobject_type: str, data: Dict[str, Any]) -> requests.Response:
        return self.client.patch_json(self._apex_url(f"{sobject_type}/"), data)

    def _apex_url(self, path: str) -> str:
        return f"{self.oauth_url}{self.apex_endpoint}{path}"

    # --------------------------- Client plumbing ---------------------

    @property
    def client(self) -> OAuthRestClient:
        """The authenticated REST client, built on first use."""
        with self._client_lock:
            if self._oauth_rest_client is None:
                _logger.debug(
                    "Building OAuth REST client for api=%s version=%s oauth=%s",
                    self.api_url,
                    self.api_version,
                    self.oauth_url,
                )
                self._oauth_rest_client = OAuthRestClient(
                    SalesforceRestClient(
                        RequestsTransport(self.api_url, timeout=self.timeout, session=self._session),
                        self.api_version,
                    ),
                    Authenticator(
                        RequestsTransport(self.oauth_url, timeout=self.timeout, session=self._session),
                        self.client_id,
                        self.client_secret,
                        self._auth_mode,
                    ),
                    raise_for_status=self.raise_for_status,
                )
            return self._oauth_rest_client

    def close(self) -> None:
        if self._oauth_rest_client is not None:
            self._oauth_rest_client.close()

    def __enter__(self) -> Restforce:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
