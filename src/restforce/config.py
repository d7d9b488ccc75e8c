from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .env_loader import load_env_files
from .exceptions import ConfigurationError
from .rest import DEFAULT_API_VERSION
from .transport import DEFAULT_TIMEOUT

DEFAULT_LOGIN_URL = "https://login.salesforce.com"
DEFAULT_API_URL = "https://na1.salesforce.com"
DEFAULT_APEX_ENDPOINT = "/services/apexrest/api/"


# ----------------------------------------------------------------------
# Configuration dataclass
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class RestforceConfig:
    """Connection settings for a :class:`~restforce.Restforce` client."""

    client_id: str
    client_secret: str

    # OAuth host; Apex REST calls are sent here as well
    login_url: str = DEFAULT_LOGIN_URL

    # Either a pre-issued token, or a username/password for the password grant
    access_token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    api_version: str = DEFAULT_API_VERSION
    api_url: str = DEFAULT_API_URL
    apex_endpoint: str = DEFAULT_APEX_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, env_files: Optional[Iterable[Path]] = None) -> RestforceConfig:
        """Load configuration from ``SF_*`` environment variables (and a .env file)."""
        load_env_files(env_files, quiet=True)

        missing = [k for k in ("SF_CLIENT_ID", "SF_CLIENT_SECRET") if not os.getenv(k)]
        if missing:
            raise ConfigurationError("Missing required environment variables: " + ", ".join(missing))

        timeout = os.getenv("SF_TIMEOUT")
        try:
            timeout_value = float(timeout) if timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigurationError(f"SF_TIMEOUT must be a number, got {timeout!r}") from None

        return cls(
            client_id=os.environ["SF_CLIENT_ID"],
            client_secret=os.environ["SF_CLIENT_SECRET"],
            login_url=os.getenv("SF_LOGIN_URL", DEFAULT_LOGIN_URL),
            access_token=os.getenv("SF_ACCESS_TOKEN") or None,
            username=os.getenv("SF_USERNAME") or None,
            password=os.getenv("SF_PASSWORD") or None,
            api_version=os.getenv("SF_API_VERSION") or DEFAULT_API_VERSION,
            api_url=os.getenv("SF_API_URL") or DEFAULT_API_URL,
            apex_endpoint=os.getenv("SF_APEX_ENDPOINT") or DEFAULT_APEX_ENDPOINT,
            timeout=timeout_value,
        )
