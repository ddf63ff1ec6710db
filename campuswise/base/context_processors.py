from django.conf import settings
from django.urls import reverse

from .access import SUPER_ADMIN, ADMIN_ROLES, user_has_access
from .decorators import get_current_user

# (label, url name, module, roles)
NAVIGATION = [
    ("Dashboard", "dashboard:dashboard", None, None),
    ("Students", "students:student_list", "Students", None),
    ("Staff", "staff:staff_list", "Staff", None),
    ("Fees", "fees:payment_list", "Fees", None),
    ("Fee Structures", "fees:structure_list", "Fees", None),
    ("Fee Dues", "dashboard:fee_dues", "Reports", None),
    ("Payroll", "payroll:payroll_list", "Payroll", None),
    ("Expenses", "expenses:expense_list", "Expenses", None),
    ("Expense Categories", "expenses:expense_category_list", "Expenses", None),
    ("Income Categories", "expenses:income_category_list", "Fees", None),
    ("Text Books", "textbooks:textbook_list", "TextBooks", None),
    ("Textbook Indents", "textbooks:indent_list", "TextBooks", None),
    ("Classes", "organization:class_list", "Classes", None),
    ("Divisions", "organization:division_list", "Divisions", None),
    ("Departments", "organization:department_list", "Departments", None),
    ("Designations", "organization:designation_list", "Departments", None),
    ("Transport Routes", "organization:route_list", "Students", None),
    ("Reports", "dashboard:reports", "Reports", None),
    ("Transport Report", "dashboard:transport_report", "Reports", None),
    ("Day Book", "dashboard:day_book", "Reports", None),
    ("Ledger", "dashboard:ledger", "Reports", None),
    ("Fee Details", "dashboard:fee_details", "Reports", None),
    ("Balance Sheet", "dashboard:balance_sheet", "Reports", None),
    ("Annual Report", "dashboard:annual_report", "Reports", None),
    ("Activity Log", "accounts:activity_log", "ActivityLog", None),
    ("User Access", "accounts:user_list", None, ADMIN_ROLES),
    ("Receipt Settings", "receipts:receipt_config", None, ADMIN_ROLES),
    ("Branches", "organization:branch_list", None, (SUPER_ADMIN,)),
]


def current_user(request):
    """Add the signed-in API user to all templates"""
    return {"current_user": get_current_user(request)}


def navigation(request):
    user = get_current_user(request)
    if not user:
        return {}
    items = [
        {"name": label, "url": reverse(url_name)}
        for label, url_name, module, roles in NAVIGATION
        if user_has_access(user, module=module, roles=roles)
    ]
    return {"navigation": items}


def school_name(request):
    return {
        "school_name": settings.SCHOOL_NAME,
        "currency_symbol": settings.CURRENCY_SYMBOL,
    }
