import pytest

from base.access import (
    matrix_from_permissions,
    normalize_module,
    permissions_from_matrix,
    user_has_access,
    user_has_module_permission,
    user_has_role_access,
)

TEACHER = {
    "role": "teacher",
    "permissions": [
        {"module": "Students", "actions": ["read"]},
        {"module": "ActivityLog", "actions": ["read"]},
        {"module": "text_books", "actions": ["read", "update"]},
    ],
}


@pytest.mark.parametrize(
    "name, expected",
    [
        ("ActivityLog", "activity_logs"),
        ("activity-log", "activity_logs"),
        ("TextBooks", "textbooks"),
        ("Fee Structures", "fees"),
        ("income_categories", "fees"),
        ("expense-categories", "expenses"),
        ("Students", "students"),
        ("", ""),
    ],
)
def test_normalize_module(name, expected):
    assert normalize_module(name) == expected


def test_admins_bypass_module_checks():
    assert user_has_module_permission({"role": "branch_admin", "permissions": []}, "Payroll", "delete")
    assert user_has_module_permission({"role": "super_admin"}, "Anything", "create")


def test_module_permission_matches_action():
    assert user_has_module_permission(TEACHER, "students", "read")
    assert not user_has_module_permission(TEACHER, "Students", "delete")
    assert user_has_module_permission(TEACHER, "activity_log", "read")
    assert user_has_module_permission(TEACHER, "TextBooks", "update")
    assert not user_has_module_permission(TEACHER, "Payroll", "read")


def test_no_module_means_any_signed_in_user():
    assert user_has_module_permission(TEACHER, None)
    assert not user_has_module_permission(None, "Students")


def test_role_access():
    assert user_has_role_access(None, None)
    assert not user_has_role_access(None, ("super_admin",))
    assert user_has_role_access(TEACHER, ("teacher", "staff"))
    assert not user_has_role_access(TEACHER, ("super_admin",))


def test_user_has_access_needs_a_user_and_both_checks():
    assert not user_has_access(None)
    assert user_has_access(TEACHER, module="Students")
    assert not user_has_access(TEACHER, module="Students", roles=("super_admin",))


def test_permission_matrix_conversion():
    permissions = permissions_from_matrix(["Staff:read", "Students:update", "Students:create", "Bogus:read", "Staff:fly"])
    assert permissions == [
        {"module": "Students", "actions": ["create", "update"]},
        {"module": "Staff", "actions": ["read"]},
    ]
    assert sorted(matrix_from_permissions(permissions)) == ["Staff:read", "Students:create", "Students:update"]
