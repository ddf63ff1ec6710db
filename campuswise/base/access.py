"""
Role and module-permission checks for the signed-in API user.

The user is the dict returned by the API at login
(``{"role": ..., "permissions": [{"module": ..., "actions": [...]}]}``).
"""

import re

SUPER_ADMIN = "super_admin"
BRANCH_ADMIN = "branch_admin"
ACCOUNTANT = "accountant"
TEACHER = "teacher"
STAFF = "staff"

ROLE_CHOICES = [
    (SUPER_ADMIN, "Super Admin"),
    (BRANCH_ADMIN, "Branch Admin"),
    (ACCOUNTANT, "Accountant"),
    (TEACHER, "Teacher"),
    (STAFF, "Staff"),
]

ADMIN_ROLES = (SUPER_ADMIN, BRANCH_ADMIN)

ACTIONS = ("create", "read", "update", "delete")

PERMISSION_MODULES = [
    "Students",
    "Staff",
    "Fees",
    "Payroll",
    "Expenses",
    "TextBooks",
    "Reports",
    "Classes",
    "Divisions",
    "Departments",
    "ActivityLog",
]

MODULE_ALIASES = {
    "activity_log": "activity_logs",
    "activitylog": "activity_logs",
    "activity_logs": "activity_logs",
    "text_books": "textbooks",
    "textbook": "textbooks",
    "textbooks": "textbooks",
    "fee": "fees",
    "fee_management": "fees",
    "fee_structures": "fees",
    "income_categories": "fees",
    "expense_categories": "expenses",
}


def normalize_module(module_name):
    if not module_name:
        return ""
    normalized = module_name.strip()
    normalized = re.sub(r"([a-z])([A-Z])", r"\1_\2", normalized)
    normalized = re.sub(r"\s+", "_", normalized)
    normalized = re.sub(r"-+", "_", normalized)
    normalized = normalized.lower()
    return MODULE_ALIASES.get(normalized, normalized)


def user_has_role_access(user, roles=None):
    if not roles:
        return True
    if not user:
        return False
    return user.get("role") in roles


def user_has_module_permission(user, module_name=None, action="read"):
    if not module_name:
        return True
    if not user:
        return False
    if user.get("role") in ADMIN_ROLES:
        return True
    target = normalize_module(module_name)
    return any(
        normalize_module(permission.get("module")) == target
        and action in (permission.get("actions") or [])
        for permission in user.get("permissions") or []
    )


def user_has_access(user, module=None, action="read", roles=None):
    if not user:
        return False
    if not user_has_role_access(user, roles):
        return False
    return user_has_module_permission(user, module, action or "read")


def permissions_from_matrix(selected):
    """Turn checked ``"<module>:<action>"`` boxes into the API permission list.

    Modules keep the order of ``PERMISSION_MODULES``; modules with no checked
    action are left out.
    """
    chosen = {}
    for value in selected:
        module, _, action = value.partition(":")
        if module in PERMISSION_MODULES and action in ACTIONS:
            chosen.setdefault(module, set()).add(action)
    return [
        {"module": module, "actions": [a for a in ACTIONS if a in chosen[module]]}
        for module in PERMISSION_MODULES
        if module in chosen
    ]


def matrix_from_permissions(permissions):
    return [
        f"{permission['module']}:{action}"
        for permission in permissions or []
        for action in permission.get("actions") or []
    ]
