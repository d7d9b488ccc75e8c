"""Tests for restforce.transport."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from restforce.exceptions import TransportError
from restforce.transport import RequestsTransport, build_headers, is_absolute_url


def test_is_absolute_url():
    assert is_absolute_url("https://na1.salesforce.com/x")
    assert is_absolute_url("http://localhost:8080")
    assert not is_absolute_url("/services/data")


def test_resolve_joins_base_url():
    transport = RequestsTransport("https://na1.salesforce.com/", session=MagicMock())

    assert transport.resolve("/services/data/v38.0/limits") == "https://na1.salesforce.com/services/data/v38.0/limits"
    assert transport.resolve("query") == "https://na1.salesforce.com/query"
    assert transport.resolve("https://other.example.com/a") == "https://other.example.com/a"


def test_request_passes_timeout_and_drops_empty_params():
    session = MagicMock()
    transport = RequestsTransport("https://na1.salesforce.com", timeout=7.5, session=session)

    transport.request("GET", "/x", params={}, headers={"Accept": "application/json"})

    session.request.assert_called_once_with(
        "GET",
        "https://na1.salesforce.com/x",
        params=None,
        json=None,
        data=None,
        headers={"Accept": "application/json"},
        timeout=7.5,
    )


def test_request_wraps_requests_errors():
    session = MagicMock()
    session.request.side_effect = requests.ConnectionError("Connection refused")
    transport = RequestsTransport("https://na1.salesforce.com", session=session)

    with pytest.raises(TransportError, match="Connection refused") as excinfo:
        transport.request("GET", "/x")

    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_close_leaves_caller_session_open():
    session = MagicMock()
    transport = RequestsTransport("https://na1.salesforce.com", session=session)

    transport.close()

    assert not transport.owns_session
    session.close.assert_not_called()


def test_close_closes_own_session():
    transport = RequestsTransport("https://na1.salesforce.com")

    with patch.object(transport.session, "close") as mock_close:
        transport.close()

    assert transport.owns_session
    mock_close.assert_called_once_with()


def test_build_headers():
    assert build_headers() == {"Accept": "application/json"}
    assert build_headers("Bearer abc")["Authorization"] == "Bearer abc"
