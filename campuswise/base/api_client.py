"""Client for the CampusWise REST API."""

import logging
import math

import requests
from django.conf import settings

from .exceptions import ApiError

logger = logging.getLogger(__name__)

TOKEN_SESSION_KEY = "auth_token"
USER_SESSION_KEY = "auth_user"


class ListResult:
    """A page of records returned by a list endpoint."""

    def __init__(self, items, total=None, pages=None, page=1, limit=None, extra=None):
        self.items = items or []
        self.total = len(self.items) if total is None else total
        if pages is None:
            pages = math.ceil(self.total / limit) if limit else 1
        self.pages = max(pages, 1)
        self.page = page
        self.limit = limit
        self.extra = extra or {}

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    def __bool__(self):
        return bool(self.items)

    @classmethod
    def from_envelope(cls, envelope, params=None):
        params = params or {}
        data = envelope.get("data")
        extra = {}
        if isinstance(data, dict):
            # Some reports nest the rows next to summaries, e.g. {"dues": [...], "summary": {...}}
            rows_key = next((k for k, v in data.items() if isinstance(v, list)), None)
            rows = data.get(rows_key) or []
            extra = {k: v for k, v in data.items() if k != rows_key}
        else:
            rows = data or []
        pagination = envelope.get("pagination") or {}
        nested = extra.pop("pagination", None)
        if not pagination and isinstance(nested, dict):
            # Accounting reports: {"transactions": [...], "pagination": {"currentPage", "totalPages", ...}}
            pagination = {
                "page": nested.get("currentPage"),
                "pages": nested.get("totalPages"),
                "total": nested.get("totalItems"),
                "limit": nested.get("itemsPerPage"),
            }
            pagination = {k: v for k, v in pagination.items() if v is not None}
        return cls(
            rows,
            total=pagination.get("total"),
            pages=pagination.get("pages"),
            page=pagination.get("page", params.get("page", 1)),
            limit=pagination.get("limit", params.get("limit")),
            extra=extra,
        )


class Resource:
    """CRUD helpers for one REST collection, e.g. ``/students``."""

    def __init__(self, client, path):
        self.client = client
        self.path = "/" + path.strip("/")

    def _item_path(self, pk, *parts):
        return "/".join([self.path, str(pk), *parts])

    def list(self, **params):
        params = {k: v for k, v in params.items() if v not in (None, "")}
        envelope = self.client.get(self.path, params=params)
        return ListResult.from_envelope(envelope, params)

    def all(self, **params):
        """Records for dropdowns; fetches a single large page."""
        params.setdefault("limit", 1000)
        return self.list(**params).items

    def get(self, pk):
        return self.client.get(self._item_path(pk)).get("data")

    def create(self, data):
        return self.client.post(self.path, data=data)

    def update(self, pk, data):
        return self.client.put(self._item_path(pk), data=data)

    def delete(self, pk):
        return self.client.delete(self._item_path(pk))

    def stats(self, **params):
        return self.client.get(f"{self.path}/stats/overview", params=params).get("data") or {}

    def action(self, pk, name, data=None, method="put"):
        """Call a sub-action such as ``PUT /textbook-indents/<id>/issue``."""
        return self.client.request(method, self._item_path(pk, name), data=data)


class ApiClient:
    def __init__(self, base_url=None, token=None, timeout=None, session=None):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.token = token
        self.timeout = timeout or settings.API_TIMEOUT
        self.session = session or requests.Session()

    def __getattr__(self, name):
        # client.students -> Resource("/students"); client.fee_structures -> "/fee-structures"
        if name.startswith("_"):
            raise AttributeError(name)
        return self.resource(name.replace("_", "-"))

    def resource(self, path):
        return Resource(self, path)

    def _headers(self, json_body=True):
        headers = {"Accept": "application/json"}
        if json_body:
            headers["Content-Type"] = "application/json"
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method, path, params=None, data=None, files=None):
        method = method.upper()
        url = f"{self.base_url}/{path.lstrip('/')}"
        kwargs = {"params": params, "timeout": self.timeout}
        if files is not None:
            kwargs.update(headers=self._headers(json_body=False), data=data, files=files)
        else:
            kwargs.update(headers=self._headers())
            if data is not None:
                kwargs["json"] = data

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.Timeout as exc:
            logger.warning("API timeout: %s %s", method, path)
            raise ApiError("The server took too long to respond") from exc
        except requests.RequestException as exc:
            logger.warning("API unreachable: %s %s (%s)", method, path, exc)
            raise ApiError("Unable to reach the server") from exc

        logger.debug("API %s %s -> %s", method, path, response.status_code)

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if not response.ok:
            logger.warning("API error: %s %s -> %s", method, path, response.status_code)
            raise ApiError.from_payload(payload, status=response.status_code)
        if isinstance(payload, dict) and payload.get("success") is False:
            raise ApiError.from_payload(payload, status=response.status_code)
        return payload

    def get(self, path, params=None):
        return self.request("get", path, params=params)

    def post(self, path, data=None):
        return self.request("post", path, data=data)

    def put(self, path, data=None):
        return self.request("put", path, data=data)

    def delete(self, path):
        return self.request("delete", path)

    def upload(self, path, files, data=None):
        return self.request("post", path, data=data, files=files)


def client_for(request):
    """API client authenticated as the user signed in to ``request``."""
    return ApiClient(token=request.session.get(TOKEN_SESSION_KEY))
