import pytest

from base.api_client import TOKEN_SESSION_KEY, USER_SESSION_KEY

API_BASE_URL = "http://api.test/api"


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class FakeApi:
    """Stands in for ``requests.Session``; answers from a table of routes.

    Unknown routes answer ``{"success": true, "data": []}``.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, path, payload=None, status=200):
        self.routes[(method.upper(), path)] = (status, payload if payload is not None else {"success": True})

    def request(self, method, url, **kwargs):
        path = url[len(API_BASE_URL):]
        self.calls.append({"method": method.upper(), "path": path, **kwargs})
        status, payload = self.routes.get((method.upper(), path), (200, {"success": True, "data": []}))
        if isinstance(payload, Exception):
            raise payload
        return FakeResponse(status, payload)

    def calls_to(self, method, path):
        return [call for call in self.calls if call["method"] == method.upper() and call["path"] == path]


@pytest.fixture(autouse=True)
def api_settings(settings):
    settings.API_BASE_URL = API_BASE_URL
    settings.SESSION_ENGINE = "django.contrib.sessions.backends.cache"
    settings.CURRENCY_SYMBOL = "Rs."
    settings.DEFAULT_PAGE_SIZE = 10


@pytest.fixture
def api(monkeypatch):
    fake = FakeApi()
    monkeypatch.setattr("base.api_client.requests.Session", lambda: fake)
    return fake


@pytest.fixture
def admin_user():
    return {"_id": "u1", "name": "Asha Admin", "role": "super_admin", "permissions": []}


@pytest.fixture
def login(client):
    def sign_in(user):
        session = client.session
        session[TOKEN_SESSION_KEY] = "token-123"
        session[USER_SESSION_KEY] = user
        session.save()
        return client

    return sign_in


@pytest.fixture
def admin_client(login, admin_user):
    return login(admin_user)
