from django.contrib.messages import get_messages
from django.urls import reverse

from base.api_client import TOKEN_SESSION_KEY, USER_SESSION_KEY

STUDENT = {
    "_id": "s1",
    "name": "Ravi Kumar",
    "admissionNo": "ADM001",
    "class": "Grade 5",
    "classId": "c5",
    "isStaffChild": True,
}
STRUCTURES = [
    {"_id": "f1", "title": "Tuition", "feeType": "tuition", "amount": 1000, "staffDiscountPercent": 10},
    {"_id": "f2", "title": "Exam", "feeType": "exam", "amount": 200},
]


def toasts(response):
    return [str(message) for message in get_messages(response.wsgi_request)]


def test_anonymous_users_are_sent_to_login(client):
    response = client.get(reverse("students:student_list"))
    assert response.status_code == 302
    assert response.url.startswith(reverse("base:login"))
    assert "next=" in response.url


def test_users_without_the_module_permission_are_denied(api, login):
    client = login({"role": "teacher", "permissions": [{"module": "Students", "actions": ["read"]}]})
    assert client.get(reverse("fees:payment_list")).status_code == 403
    assert client.get(reverse("organization:branch_list")).status_code == 403


def test_login_stores_token_and_user(api, client):
    api.add(
        "POST",
        "/auth/login",
        {"success": True, "data": {"token": "jwt", "user": {"name": "Asha", "role": "branch_admin"}}},
    )
    response = client.post(reverse("base:login"), {"mobile": "9999999999", "pin": "1234"})
    assert response.status_code == 302
    assert response.url == reverse("dashboard:dashboard")
    assert client.session[TOKEN_SESSION_KEY] == "jwt"
    assert client.session[USER_SESSION_KEY]["role"] == "branch_admin"
    assert api.calls_to("POST", "/auth/login")[0]["json"] == {"mobile": "9999999999", "pin": "1234"}


def test_rejected_login_shows_the_server_message(api, client):
    api.add("POST", "/auth/login", {"success": False, "message": "Invalid credentials"}, status=401)
    response = client.post(reverse("base:login"), {"mobile": "9999999999", "pin": "0000"})
    assert response.status_code == 200
    assert "Invalid credentials" in toasts(response)
    assert TOKEN_SESSION_KEY not in client.session


def test_logout_clears_the_session(api, admin_client):
    response = admin_client.post(reverse("base:logout"))
    assert response.url == reverse("base:login")
    assert TOKEN_SESSION_KEY not in admin_client.session
    assert api.calls_to("POST", "/auth/logout")


def test_student_list_renders_items(api, admin_client):
    api.add(
        "GET",
        "/students",
        {"success": True, "data": [STUDENT, dict(STUDENT, _id="s2", name="Meera Nair")], "pagination": {"total": 2, "pages": 1}},
    )
    api.add("GET", "/students/stats/overview", {"success": True, "data": {"total": 2, "active": 2, "inactive": 0}})
    response = admin_client.get(reverse("students:student_list"), {"search": "r", "gender": "male"})
    content = response.content.decode()
    assert response.status_code == 200
    assert "Ravi Kumar" in content and "Meera Nair" in content
    params = api.calls_to("GET", "/students")[0]["params"]
    assert params["search"] == "r"
    assert params["gender"] == "male"


def test_list_shows_an_error_panel_when_the_api_fails(api, admin_client):
    api.add("GET", "/classes", {"success": False, "message": "Database offline"}, status=500)
    response = admin_client.get(reverse("organization:class_list"))
    assert response.status_code == 200
    assert "Database offline" in response.content.decode()


def test_create_posts_payload_and_toasts_success(api, admin_client):
    api.add("POST", "/classes", {"success": True, "message": "Class created successfully", "data": {"_id": "c9"}})
    response = admin_client.post(
        reverse("organization:class_create"),
        {"name": "Grade 9", "academicYear": "2024-2025", "description": "", "status": "active"},
    )
    assert response.status_code == 302
    assert response.url == reverse("organization:class_list")
    assert api.calls_to("POST", "/classes")[0]["json"] == {
        "name": "Grade 9",
        "academicYear": "2024-2025",
        "status": "active",
    }
    assert "Class created successfully" in toasts(response)


def test_create_toasts_the_api_error(api, admin_client):
    api.add("POST", "/classes", {"success": False, "message": "Class already exists"}, status=400)
    response = admin_client.post(
        reverse("organization:class_create"),
        {"name": "Grade 9", "academicYear": "2024-2025", "status": "active"},
    )
    assert response.status_code == 200
    assert "Class already exists" in toasts(response)


def test_update_without_message_uses_default_toast(api, admin_client):
    api.add("GET", "/departments/d1", {"success": True, "data": {"_id": "d1", "name": "Science", "status": "active"}})
    api.add("PUT", "/departments/d1", {"success": True})
    response = admin_client.post(
        reverse("organization:department_edit", args=["d1"]),
        {"name": "Sciences", "status": "active"},
    )
    assert response.status_code == 302
    assert "Department updated successfully" in toasts(response)


def test_expired_token_signs_the_user_out(api, admin_client):
    api.add("GET", "/classes", {"success": False, "message": "Token expired"}, status=401)
    response = admin_client.get(reverse("organization:class_list"))
    assert response.status_code == 302
    assert response.url == reverse("base:login")
    assert TOKEN_SESSION_KEY not in admin_client.session


def test_delete_confirms_then_deletes(api, admin_client):
    api.add("GET", "/branches/b1", {"success": True, "data": {"_id": "b1", "name": "North Campus"}})
    api.add("DELETE", "/branches/b1", {"success": True, "message": "Branch deleted"})
    url = reverse("organization:branch_delete", args=["b1"])
    assert "North Campus" in admin_client.get(url).content.decode()
    response = admin_client.post(url)
    assert response.url == reverse("organization:branch_list")
    assert "Branch deleted" in toasts(response)


def test_missing_record_is_a_404(api, admin_client):
    api.add("GET", "/staff/x", {"success": False, "message": "Staff not found"}, status=404)
    assert admin_client.get(reverse("staff:staff_edit", args=["x"])).status_code == 404


def _collect_fee_api(api):
    api.add("GET", "/students", {"success": True, "data": [STUDENT]})
    api.add("GET", "/fee-structures", {"success": True, "data": STRUCTURES})


def test_collect_fee_with_empty_selection_makes_no_call(api, admin_client):
    _collect_fee_api(api)
    response = admin_client.post(
        reverse("fees:collect_fee") + "?student=s1",
        {"student": "s1", "paymentMethod": "cash"},
    )
    assert response.status_code == 200
    assert "Please select at least one fee item" in toasts(response)
    assert not api.calls_to("POST", "/fees")


def test_collect_fee_preview_shows_total(api, admin_client):
    _collect_fee_api(api)
    response = admin_client.post(
        reverse("fees:collect_fee"),
        {"student": "s1", "fee_structures": ["f1", "f2"], "paymentMethod": "cash", "preview": "1"},
    )
    assert response.context["preview"]["total"] == 1100
    assert not api.calls_to("POST", "/fees")


def test_collect_fee_posts_fee_items(api, admin_client):
    _collect_fee_api(api)
    api.add("POST", "/fees", {"success": True, "data": {"receiptNo": "RCP-1"}})
    response = admin_client.post(
        reverse("fees:collect_fee"),
        {"student": "s1", "fee_structures": ["f1", "f2"], "paymentMethod": "bank"},
    )
    assert response.status_code == 302
    payload = api.calls_to("POST", "/fees")[0]["json"]
    assert payload["studentId"] == "s1"
    assert payload["paymentMethod"] == "bank"
    assert [item["amount"] for item in payload["feeItems"]] == [900, 200]
    assert "Fee collected successfully. Receipt No: RCP-1" in toasts(response)
    assert api.calls_to("GET", "/fee-structures")[0]["params"]["classId"] == "c5"


def test_promote_requires_selected_students(api, admin_client):
    response = admin_client.post(
        reverse("students:promote_students"),
        {"targetClassId": "c6", "targetDivisionId": "d1", "academicYear": "2025"},
    )
    assert response.status_code == 302
    assert "Please select students to promote" in toasts(response)
    assert not api.calls_to("POST", "/students/promote")


def test_payroll_list_ignores_an_unparseable_month(api, admin_client):
    response = admin_client.get(reverse("payroll:payroll_list"), {"payrollMonth": "March 2024"})
    assert response.status_code == 200
    params = api.calls_to("GET", "/payroll")[0]["params"]
    assert "month" not in params and "year" not in params


def test_editing_a_fee_structure_clears_emptied_fields(api, admin_client):
    api.add("GET", "/classes", {"success": True, "data": [{"_id": "c1", "name": "Grade 1"}]})
    api.add(
        "GET",
        "/fee-structures/f9",
        {
            "success": True,
            "data": {
                "_id": "f9",
                "title": "Bus",
                "feeType": "transport",
                "classId": "c1",
                "amount": 500,
                "transportDistanceGroup": "group1",
                "distanceRange": "0-5 KM",
                "academicYear": "2024-2025",
            },
        },
    )
    api.add("PUT", "/fee-structures/f9", {"success": True, "message": "Fee structure updated"})
    response = admin_client.post(
        reverse("fees:structure_edit", args=["f9"]),
        {"title": "Bus", "feeType": "tuition", "classId": "c1", "amount": "500", "academicYear": "2024-2025"},
    )
    assert response.status_code == 302
    payload = api.calls_to("PUT", "/fee-structures/f9")[0]["json"]
    assert payload["feeType"] == "tuition"
    assert payload["transportDistanceGroup"] is None
    assert payload["distanceRange"] is None
    assert payload["staffDiscountPercent"] == 0
