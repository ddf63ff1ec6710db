import pytest
import requests

from base.api_client import ApiClient, ListResult
from base.exceptions import ApiError, AuthenticationError


@pytest.fixture
def client(api):
    return ApiClient(token="abc")


def test_requests_carry_the_bearer_token(api, client):
    api.add("GET", "/students", {"success": True, "data": [], "pagination": {"total": 0, "pages": 0}})
    client.students.list(page=1, limit=10, search="")
    call = api.calls[0]
    assert call["headers"]["Authorization"] == "Bearer abc"
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["params"] == {"page": 1, "limit": 10}


def test_list_envelope_becomes_list_result(api, client):
    api.add(
        "GET",
        "/fee-structures",
        {"success": True, "data": [{"_id": "a"}, {"_id": "b"}], "pagination": {"page": 2, "limit": 2, "total": 7, "pages": 4}},
    )
    result = client.fee_structures.list(page=2, limit=2)
    assert isinstance(result, ListResult)
    assert [r["_id"] for r in result] == ["a", "b"]
    assert (result.total, result.pages, result.page) == (7, 4, 2)


def test_nested_report_rows_keep_their_summaries():
    envelope = {
        "success": True,
        "data": {
            "transactions": [{"amount": 10}],
            "pagination": {"currentPage": 1, "totalPages": 3, "totalItems": 25, "itemsPerPage": 10},
            "summary": {"totalIncome": 10},
        },
    }
    result = ListResult.from_envelope(envelope)
    assert result.items == [{"amount": 10}]
    assert (result.total, result.pages) == (25, 3)
    assert result.extra == {"summary": {"totalIncome": 10}}


def test_error_envelope_raises_with_server_message(api, client):
    api.add("POST", "/classes", {"success": False, "message": "Class already exists", "error": "duplicate key"}, status=400)
    with pytest.raises(ApiError) as excinfo:
        client.classes.create({"name": "Grade 1"})
    assert str(excinfo.value) == "Class already exists: duplicate key"
    assert excinfo.value.status == 400


def test_success_false_with_ok_status_is_an_error(api, client):
    api.add("PUT", "/textbook-indents/i1/issue", {"success": False, "message": "Not enough stock"})
    with pytest.raises(ApiError, match="Not enough stock"):
        client.textbook_indents.action("i1", "issue")


def test_unauthorized_raises_authentication_error(api, client):
    api.add("GET", "/users", {"success": False, "message": "Token expired"}, status=401)
    with pytest.raises(AuthenticationError):
        client.users.list()


def test_error_without_message_uses_the_fallback(api, client):
    api.add("DELETE", "/staff/s1", None, status=500)
    with pytest.raises(ApiError) as excinfo:
        client.staff.delete("s1")
    assert excinfo.value.describe("Failed to delete staff") == "Failed to delete staff"


def test_network_failures_become_api_errors(api, client):
    api.add("GET", "/branches", requests.ConnectionError("refused"))
    with pytest.raises(ApiError, match="Unable to reach the server"):
        client.branches.all()
    api.add("GET", "/branches", requests.Timeout("slow"))
    with pytest.raises(ApiError, match="too long"):
        client.branches.all()


def test_upload_sends_multipart_without_json_content_type(api, client):
    api.add("POST", "/upload/logo", {"success": True, "data": {"logoPath": "/uploads/logo.png"}})
    response = client.upload("/upload/logo", files={"logo": ("logo.png", b"png", "image/png")})
    call = api.calls[0]
    assert "Content-Type" not in call["headers"]
    assert call["files"]["logo"][0] == "logo.png"
    assert response["data"]["logoPath"] == "/uploads/logo.png"
