import logging
from datetime import date

from django.conf import settings
from django.http import HttpRequest
from django.shortcuts import render

from base.api_client import client_for
from base.crud import filter_fields, list_page, load_options
from base.decorators import login_required, module_permission_required
from base.exceptions import ApiError, AuthenticationError
from base.filters import FILTER_MAPPINGS, create_api_filters
from base.forms import api_choices
from base.pagination import Pagination, read_filters
from base.templatetags.base_tags import money

from .reports import (
    ACCOUNT_TYPE_CHOICES,
    AGING_BUCKET_CHOICES,
    TRANSACTION_TYPE_CHOICES,
    TRANSPORT_TYPE_CHOICES,
    filter_dues,
    fiscal_year,
    month_start,
    summarize_dues,
)

logger = logging.getLogger(__name__)

FEE_DETAIL_TOTALS = [
    ("Tuition", "totalTuitionFee"),
    ("Transport", "totalTransportFee"),
    ("Co-curricular", "totalCocurricularFee"),
    ("Maintenance", "totalMaintenanceFee"),
    ("Exam", "totalExamFee"),
    ("Textbook", "totalTextbookFee"),
]


def load_report(request, path, params=None):
    """``(envelope, error)`` for a report endpoint; the page renders either way."""
    try:
        return client_for(request).get(path, params={k: v for k, v in (params or {}).items() if v}), None
    except AuthenticationError:
        raise
    except ApiError as exc:
        logger.warning("Report %s failed: %s", path, exc)
        return {}, exc.describe("Failed to load report")


def _date_param(request, name, default):
    value = request.GET.get(name, "").strip()
    try:
        return date.fromisoformat(value).isoformat()
    except ValueError:
        return default.isoformat()


@login_required
def dashboard(request: HttpRequest):
    envelope, error = load_report(request, "/reports/dashboard")
    data = envelope.get("data") or {}
    students = data.get("students") or {}
    staff = data.get("staff") or {}
    fees = data.get("fees") or {}
    expenses = data.get("expenses") or {}
    textbooks = data.get("textbooks") or {}
    context = {
        "title": "Dashboard",
        "error": error,
        "stats_cards": [
            {"label": "Students", "value": students.get("total", 0)},
            {"label": "Active Students", "value": students.get("active", 0)},
            {"label": "Staff", "value": staff.get("total", 0)},
            {"label": "Monthly Salary", "value": money(staff.get("totalSalary"))},
            {"label": "Fees This Month", "value": money(fees.get("monthlyCollection"))},
            {"label": "Fees This Year", "value": money(fees.get("yearlyCollection"))},
            {"label": "Expenses This Month", "value": money(expenses.get("monthlyExpenses"))},
            {"label": "Text Books Available", "value": textbooks.get("availableBooks", 0)},
        ]
        if data
        else [],
        "recent_activities": data.get("recentActivities") or [],
    }
    return render(request, "dashboard/index.html", context)


@module_permission_required("Reports")
def reports(request: HttpRequest):
    today = date.today()
    start_date = _date_param(request, "startDate", month_start(today))
    end_date = _date_param(request, "endDate", today)
    envelope, error = load_report(
        request,
        "/reports/financial",
        {"startDate": start_date, "endDate": end_date, "includeBreakdown": "true"},
    )
    data = envelope.get("data") or {}
    summary = data.get("summary") or {}
    income = data.get("income") or {}
    expenses = data.get("expenses") or {}
    context = {
        "title": "Financial Report",
        "error": error,
        "start_date": start_date,
        "end_date": end_date,
        "summary": summary,
        "stats_cards": [
            {"label": "Total Income", "value": money(summary.get("totalIncome"))},
            {"label": "Total Expenses", "value": money(summary.get("totalExpenses"))},
            {"label": "Net Profit", "value": money(summary.get("netProfit"))},
            {"label": "Profit Margin", "value": f"{summary.get('profitMargin', 0)}%"},
        ]
        if summary
        else [],
        "fee_collection": income.get("feeCollection") or {},
        "income_breakdown": income.get("breakdown") or [],
        "general_expenses": expenses.get("generalExpenses") or {},
        "payroll_expenses": expenses.get("payrollExpenses") or {},
        "expense_breakdown": expenses.get("breakdown") or [],
    }
    return render(request, "dashboard/financial.html", context)


@module_permission_required("Reports")
def transport_report(request: HttpRequest):
    key = "transportReport"
    definitions = [{"name": "transportType", "label": "Transport", "choices": TRANSPORT_TYPE_CHOICES}]
    filter_values = read_filters(request, ["transportType"])
    pagination = Pagination.from_request(request, key, 50)
    params = create_api_filters(
        pagination.current_page, pagination.items_per_page, "", filter_values, FILTER_MAPPINGS[key]
    )
    envelope, error = load_report(request, "/reports/transport", params)
    page = envelope.get("pagination") or {}
    pagination.update(page.get("total", 0), page.get("pages", 1))

    data = envelope.get("data") or {}
    statistics = data.get("statistics") or {}
    students = data.get("students") or {}
    context = {
        "title": "Transport Report",
        "error": error,
        "filters": filter_fields(definitions, filter_values),
        "filters_active": any(filter_values.values()),
        "pagination": pagination,
        "page_size_options": settings.PAGE_SIZE_OPTIONS,
        "stats_cards": [
            {"label": "Active Students", "value": statistics.get("total", 0)},
            {"label": "School Transport", "value": statistics.get("schoolTransport", 0)},
            {"label": "Own Transport", "value": statistics.get("ownTransport", 0)},
            {"label": "No Transport", "value": statistics.get("noTransport", 0)},
        ]
        if statistics
        else [],
        "route_breakdown": data.get("routeWiseBreakdown") or [],
        "class_breakdown": data.get("classWiseBreakdown") or [],
        "school_transport": students.get("schoolTransport") or [],
        "own_transport": students.get("ownTransport") or [],
    }
    return render(request, "dashboard/transport_report.html", context)


@module_permission_required("Reports")
def fee_dues(request: HttpRequest):
    client = client_for(request)
    classes = load_options(client.classes)
    filters = [
        {"name": "class", "label": "Class", "choices": api_choices(classes, blank=None)},
        {"name": "bucket", "label": "Aging", "choices": AGING_BUCKET_CHOICES},
    ]
    context = list_page(
        request,
        client.resource("reports/fee-dues"),
        "feeDues",
        filters=filters,
        mapping=FILTER_MAPPINGS["feeDues"],
        per_page=20,
    )
    # Search and aging apply to the rows of the current page only.
    rows = filter_dues(context["items"], context["search"], context["filter_values"].get("bucket"))
    server_summary = context["result"].extra.get("summary") or {}
    context.update(
        {
            "title": "Fee Dues",
            "items": rows,
            "summary": summarize_dues(rows),
            "stats_cards": [
                {"label": "Total Due", "value": money(server_summary.get("totalDueAmount"))},
                {"label": "Overdue", "value": money(server_summary.get("overdueAmount"))},
                {"label": "Students", "value": server_summary.get("totalStudents", 0)},
                {"label": "Overdue Records", "value": server_summary.get("overdueRecords", 0)},
            ]
            if server_summary
            else [],
        }
    )
    return render(request, "dashboard/fee_dues.html", context)


@module_permission_required("Reports")
def day_book(request: HttpRequest):
    client = client_for(request)
    filters = [
        {"name": "transactionType", "label": "Type", "choices": TRANSACTION_TYPE_CHOICES},
        {"name": "date_from", "label": "From", "type": "date"},
        {"name": "date_to", "label": "To", "type": "date"},
    ]
    context = list_page(
        request,
        client.resource("accounting/daybook"),
        "dayBook",
        filters=filters,
        mapping=FILTER_MAPPINGS["dayBook"],
    )
    summary = context["result"].extra.get("summary") or {}
    context.update(
        {
            "title": "Day Book",
            "stats_cards": [
                {"label": "Income", "value": money(summary.get("totalIncome"))},
                {"label": "Expense", "value": money(summary.get("totalExpense"))},
                {"label": "Net Balance", "value": money(summary.get("netBalance"))},
            ]
            if summary
            else [],
            "columns": [
                {"label": "Date", "key": "date", "kind": "date"},
                {"label": "Type", "key": "type", "kind": "label"},
                {"label": "Category", "key": "category"},
                {"label": "Description", "key": "description"},
                {"label": "Reference", "key": "referenceNumber"},
                {"label": "Method", "key": "paymentMethod", "kind": "label"},
                {"label": "Amount", "key": "amount", "kind": "money"},
            ],
            "empty_message": "No transactions in this period",
        }
    )
    return render(request, "base/list.html", context)


@module_permission_required("Reports")
def ledger(request: HttpRequest):
    client = client_for(request)
    filters = [
        {"name": "accountType", "label": "Account", "choices": ACCOUNT_TYPE_CHOICES},
        {"name": "date_from", "label": "From", "type": "date"},
        {"name": "date_to", "label": "To", "type": "date"},
    ]
    context = list_page(
        request,
        client.resource("accounting/ledger"),
        "ledger",
        filters=filters,
        mapping=FILTER_MAPPINGS["ledger"],
    )
    trial_balance = context["result"].extra.get("trialBalance") or {}
    context.update(
        {
            "title": "Ledger",
            "stats_cards": [
                {"label": "Total Debit", "value": money(trial_balance.get("totalDebit"))},
                {"label": "Total Credit", "value": money(trial_balance.get("totalCredit"))},
                {"label": "Difference", "value": money(trial_balance.get("difference"))},
            ]
            if trial_balance
            else [],
            "columns": [
                {"label": "Account", "key": "accountName"},
                {"label": "Type", "key": "accountType", "kind": "label"},
                {"label": "Transactions", "key": "transactionCount"},
                {"label": "Balance", "key": "balance", "kind": "money"},
            ],
        }
    )
    return render(request, "base/list.html", context)


@module_permission_required("Reports")
def fee_details(request: HttpRequest):
    """Fee payments with their per fee type amounts over a date range"""
    client = client_for(request)
    filters = [
        {"name": "date_from", "label": "From", "type": "date"},
        {"name": "date_to", "label": "To", "type": "date"},
    ]
    context = list_page(
        request,
        client.resource("accounting/fee-details"),
        "feeDetails",
        filters=filters,
        mapping=FILTER_MAPPINGS["feeDetails"],
    )
    breakdown = context["result"].extra.get("breakdown") or {}
    context.update(
        {
            "title": "Fee Details",
            "stats_cards": [
                {"label": "Total Collected", "value": money(breakdown.get("totalPaid"))},
                {"label": "Paid Payments", "value": breakdown.get("paidCount", 0)},
                {"label": "Pending Payments", "value": breakdown.get("pendingCount", 0)},
                {"label": "Partial Payments", "value": breakdown.get("partialCount", 0)},
            ]
            if breakdown
            else [],
            "fee_type_totals": [
                (name, breakdown.get(key))
                for name, key in FEE_DETAIL_TOTALS
                if breakdown.get(key)
            ],
            "method_breakdown": context["result"].extra.get("paymentMethodBreakdown") or [],
            "columns": [
                {"label": "Receipt No.", "key": "receiptNumber"},
                {"label": "Student", "key": "studentId.name"},
                {"label": "Roll No.", "key": "studentId.rollNumber"},
                {"label": "Class", "key": "classId.name"},
                {"label": "Date", "key": "paymentDate", "kind": "date"},
                {"label": "Tuition", "key": "tuitionFee", "kind": "money"},
                {"label": "Transport", "key": "transportFee", "kind": "money"},
                {"label": "Co-curricular", "key": "cocurricularFee", "kind": "money"},
                {"label": "Maintenance", "key": "maintenanceFee", "kind": "money"},
                {"label": "Exam", "key": "examFee", "kind": "money"},
                {"label": "Textbook", "key": "textbookFee", "kind": "money"},
                {"label": "Total", "key": "totalAmount", "kind": "money"},
                {"label": "Method", "key": "paymentMethod", "kind": "label"},
                {"label": "Status", "key": "status", "kind": "label"},
            ],
            "empty_message": "No fee payments in this period",
        }
    )
    return render(request, "dashboard/fee_details.html", context)


@module_permission_required("Reports")
def balance_sheet(request: HttpRequest):
    as_of = _date_param(request, "asOfDate", date.today())
    envelope, error = load_report(request, "/accounting/balance-sheet", {"asOfDate": as_of})
    data = envelope.get("data") or {}
    context = {
        "title": "Balance Sheet",
        "error": error,
        "as_of": as_of,
        "assets": data.get("assets") or {},
        "liabilities": data.get("liabilities") or {},
        "equity": data.get("equity") or {},
        "total_liabilities_and_equity": data.get("totalLiabilitiesAndEquity"),
        "is_balanced": data.get("isBalanced"),
        "has_data": bool(data),
    }
    return render(request, "dashboard/balance_sheet.html", context)


@module_permission_required("Reports")
def annual_report(request: HttpRequest):
    try:
        year = int(request.GET.get("year") or fiscal_year())
    except ValueError:
        year = fiscal_year()
    envelope, error = load_report(request, "/accounting/annual-report", {"year": year})
    data = envelope.get("data") or {}
    summary = data.get("summary") or {}
    current = fiscal_year()
    context = {
        "title": "Annual Report",
        "error": error,
        "year": year,
        "years": range(current, current - 6, -1),
        "fiscal_year": data.get("fiscalYear") or f"{year}-{year + 1}",
        "monthly_summary": data.get("monthlySummary") or [],
        "expense_by_category": data.get("expenseByCategory") or [],
        "stats_cards": [
            {"label": "Total Income", "value": money(summary.get("totalIncome"))},
            {"label": "Total Expenses", "value": money(summary.get("totalExpenses"))},
            {"label": "Net Profit", "value": money(summary.get("netProfit"))},
            {"label": "Profit Margin", "value": f"{summary.get('profitMargin', 0)}%"},
        ]
        if summary
        else [],
    }
    return render(request, "dashboard/annual_report.html", context)
