import json as jsonlib
from types import SimpleNamespace

import pytest

from restforce import Restforce

OAUTH_URL = "https://login.salesforce.com"
API_URL = "https://na1.salesforce.com"
TOKEN_URL = OAUTH_URL + "/services/oauth2/token"


class FakeResponse:
    """Just enough of requests.Response for the client stack."""

    def __init__(self, status_code=200, json_data=None, *, text=None, url=""):
        self.status_code = status_code
        self._json_data = json_data
        self.text = text if text is not None else jsonlib.dumps(json_data)
        self.url = url

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._json_data is None:
            raise ValueError("No JSON object could be decoded")
        return self._json_data


def session_expired(url=""):
    return FakeResponse(
        401,
        [{"message": "Session expired or invalid", "errorCode": "INVALID_SESSION_ID"}],
        url=url,
    )


class FakeSession:
    """
    Stand-in for requests.Session that records every call.

    Token endpoint calls are answered from ``token_responses`` (or with a fresh
    numbered token); everything else from ``api_responses`` (or a 200 ``{}``).
    A queued exception is raised instead of returned.
    """

    def __init__(self):
        self.calls = []
        self.token_responses = []
        self.api_responses = []
        self.tokens_issued = 0
        self.closed = False

    def request(self, method, url, params=None, json=None, data=None, headers=None, timeout=None):
        call = SimpleNamespace(
            method=method,
            url=url,
            params=params,
            json=json,
            data=data,
            headers=headers or {},
            timeout=timeout,
        )
        self.calls.append(call)

        if url == TOKEN_URL:
            if self.token_responses:
                return self._answer(self.token_responses.pop(0))
            self.tokens_issued += 1
            return FakeResponse(
                200,
                {
                    "access_token": f"00DTOKEN-{self.tokens_issued}-abcdefghijklmnop",
                    "instance_url": "https://example.my.salesforce.com",
                    "token_type": "Bearer",
                    "issued_at": "1700000000000",
                },
                url=url,
            )

        if self.api_responses:
            return self._answer(self.api_responses.pop(0))
        return FakeResponse(200, {}, url=url)

    @staticmethod
    def _answer(queued):
        if isinstance(queued, Exception):
            raise queued
        return queued

    def close(self):
        self.closed = True

    @property
    def token_calls(self):
        return [c for c in self.calls if c.url == TOKEN_URL]

    @property
    def api_calls(self):
        return [c for c in self.calls if c.url != TOKEN_URL]


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def password_client(fake_session):
    """Restforce client that authenticates with the password grant."""
    return Restforce(
        "CLIENT_ID",
        "CLIENT_SECRET",
        OAUTH_URL,
        username="user@example.com",
        password="hunter2",
        session=fake_session,
    )


@pytest.fixture
def token_client(fake_session):
    """Restforce client with a pre-issued access token and no fallback."""
    return Restforce(
        "CLIENT_ID",
        "CLIENT_SECRET",
        OAUTH_URL,
        access_token="00DSUPPLIED-TOKEN-abcdefghijkl",
        session=fake_session,
    )


@pytest.fixture
def make_response():
    return FakeResponse


@pytest.fixture
def expired_response():
    return session_expired
