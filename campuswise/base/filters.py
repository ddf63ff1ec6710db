"""Mapping of list-page filter values onto API query parameters."""

from datetime import datetime


def create_api_filters(current_page, items_per_page, search, filter_values, mapping):
    """Build the query parameters for a list endpoint.

    ``mapping`` maps a page filter key either to an API parameter name or to a
    callable returning several parameters. Empty values and unknown keys are
    ignored.
    """
    params = {
        "page": current_page,
        "limit": items_per_page,
        "search": search,
    }
    for key, value in (filter_values or {}).items():
        if not value or key not in mapping:
            continue
        target = mapping[key]
        if callable(target):
            params.update(target(value))
        else:
            params[target] = value
    return params


def month_and_year(value):
    """``"2024-03"`` -> ``{"month": 3, "year": 2024}``; anything else drops the filter."""
    try:
        parsed = datetime.strptime(value[:7], "%Y-%m")
    except ValueError:
        return {}
    return {"month": parsed.month, "year": parsed.year}


def has_active_filters(filter_values):
    return any(value not in ("", None) for value in (filter_values or {}).values())


FILTER_MAPPINGS = {
    "students": {
        "class": "classId",
        "gender": "gender",
        "transport": "transport",
        "status": "status",
        "dateOfBirth_from": "dateOfBirthFrom",
        "dateOfBirth_to": "dateOfBirthTo",
    },
    "staff": {
        "designation": "designation",
        "department": "department",
        "status": "status",
        "dateOfJoining_from": "dateOfJoiningFrom",
        "dateOfJoining_to": "dateOfJoiningTo",
        "salary": "minSalary",
    },
    "expenses": {
        "category": "category",
        "paymentMethod": "paymentMethod",
        "date_from": "startDate",
        "date_to": "endDate",
        "amount": "minAmount",
    },
    "fees": {
        "feeType": "feeType",
        "paymentMethod": "paymentMethod",
        "status": "status",
        "paymentDate_from": "startDate",
        "paymentDate_to": "endDate",
        "amount": "minAmount",
    },
    "feeStructures": {
        "class": "classId",
        "feeType": "feeType",
        "academicYear": "academicYear",
    },
    "payroll": {
        "department": "department",
        "designation": "designation",
        "status": "status",
        "paymentMethod": "paymentMethod",
        "payrollMonth": month_and_year,
        "salary": "minNetSalary",
    },
    "textbooks": {
        "class": "classId",
        "subject": "subject",
        "publisher": "publisher",
        "price": "minPrice",
    },
    "textbookIndents": {
        "status": "status",
        "paymentStatus": "paymentStatus",
        "class": "classId",
        "issueDate_from": "dateFrom",
        "issueDate_to": "dateTo",
        "paymentMethod": "paymentMethod",
        "amount": "minAmount",
    },
    "divisions": {
        "class": "classId",
        "classTeacher": "classTeacherId",
        "capacity": "minCapacity",
    },
    "departments": {
        "status": "status",
        "createdAt_from": "createdAtFrom",
        "createdAt_to": "createdAtTo",
    },
    "designations": {
        "department": "department",
        "status": "status",
    },
    "classes": {
        "status": "status",
        "academicYear": "academicYear",
    },
    "branches": {
        "status": "status",
    },
    "transportRoutes": {
        "status": "status",
    },
    "expenseCategories": {
        "status": "status",
    },
    "incomeCategories": {
        "status": "status",
    },
    "userAccess": {
        "role": "role",
        "status": "status",
        "lastLogin_from": "lastLoginFrom",
        "lastLogin_to": "lastLoginTo",
    },
    "activityLogs": {
        "module": "module",
        "action": "action",
        "userId": "userId",
        "date_from": "startDate",
        "date_to": "endDate",
    },
    "feeDues": {
        "class": "classId",
        "division": "divisionId",
    },
    "transportReport": {
        "transportType": "transportType",
    },
    "dayBook": {
        "transactionType": "transactionType",
        "date_from": "startDate",
        "date_to": "endDate",
    },
    "feeDetails": {
        "date_from": "startDate",
        "date_to": "endDate",
    },
    "ledger": {
        "accountType": "accountType",
        "date_from": "startDate",
        "date_to": "endDate",
    },
}
