"""Authenticated client for the Salesforce REST API."""

from importlib.metadata import PackageNotFoundError, version  # pragma: no cover

try:
    dist_name = "restforce"
    __version__ = version(dist_name)
except PackageNotFoundError:  # pragma: no cover
    __version__ = "unknown"
finally:
    del version, PackageNotFoundError

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .auth import AccessToken
from .config import RestforceConfig
from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    RestforceError,
    TransportError,
    UpstreamError,
)
from .logging_config import configure_logging
from .oauth import SessionState
from .rest import DEFAULT_API_VERSION
from .restforce import Restforce

__all__ = [
    "AccessToken",
    "AuthenticationError",
    "ConfigurationError",
    "DEFAULT_API_VERSION",
    "Restforce",
    "RestforceConfig",
    "RestforceError",
    "SessionState",
    "TransportError",
    "UpstreamError",
    "configure_logging",
]
