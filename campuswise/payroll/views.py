from django.http import HttpRequest
from django.shortcuts import render
from django.urls import reverse

from base.api_client import client_for
from base.crud import delete_view, form_view, list_page, load_options, load_stats
from base.decorators import module_permission_required
from base.filters import FILTER_MAPPINGS
from base.templatetags.base_tags import money

from .forms import PAYROLL_PAYMENT_METHOD_CHOICES, PAYROLL_STATUS_CHOICES, PayrollForm

PAYROLL_FILTERS = [
    {"name": "payrollMonth", "label": "Month", "type": "month"},
    {"name": "status", "label": "Status", "choices": PAYROLL_STATUS_CHOICES},
    {"name": "paymentMethod", "label": "Method", "choices": PAYROLL_PAYMENT_METHOD_CHOICES},
]


@module_permission_required("Payroll")
def payroll_list(request: HttpRequest):
    client = client_for(request)
    context = list_page(
        request,
        client.payroll,
        "payroll",
        filters=PAYROLL_FILTERS,
        mapping=FILTER_MAPPINGS["payroll"],
    )
    stats = load_stats(client.payroll)
    if stats:
        current = stats.get("currentMonthStats") or {}
        context["stats_cards"] = [
            {"label": "Payroll Entries", "value": stats.get("totalEntries", 0)},
            {"label": "Total Paid", "value": money(stats.get("totalAmountPaid"))},
            {"label": "This Month", "value": money(current.get("total"))},
            {"label": "Average Salary", "value": money(current.get("avgSalary"))},
        ]
    context.update(
        {
            "title": "Payroll",
            "create_url": reverse("payroll:payroll_create"),
            "create_label": "Process Payroll",
            "columns": [
                {"label": "Staff", "key": "staffName"},
                {"label": "Month", "key": "month"},
                {"label": "Year", "key": "year"},
                {"label": "Basic", "key": "basicSalary", "kind": "money"},
                {"label": "Allowances", "key": "allowances", "kind": "money"},
                {"label": "Deductions", "key": "deductions", "kind": "money"},
                {"label": "Net Salary", "key": "netSalary", "kind": "money"},
                {"label": "Method", "key": "paymentMethod", "kind": "label"},
                {"label": "Status", "key": "status", "kind": "label"},
            ],
            "row_actions": [{"label": "Edit", "url_name": "payroll:payroll_edit"}],
            "delete_url_name": "payroll:payroll_delete",
        }
    )
    return render(request, "base/list.html", context)


def _payroll_form(request, pk=None):
    client = client_for(request)
    return form_view(
        request,
        PayrollForm,
        client.payroll,
        "Payroll entry",
        reverse("payroll:payroll_list"),
        pk=pk,
        form_kwargs={"staff": load_options(client.staff, status="active")},
        template="payroll/payroll_form.html",
    )


@module_permission_required("Payroll", action="create")
def payroll_create(request: HttpRequest):
    return _payroll_form(request)


@module_permission_required("Payroll", action="update")
def payroll_edit(request: HttpRequest, pk):
    return _payroll_form(request, pk)


@module_permission_required("Payroll", action="delete")
def payroll_delete(request: HttpRequest, pk):
    return delete_view(
        request,
        client_for(request).payroll,
        pk,
        "Payroll entry",
        reverse("payroll:payroll_list"),
        name_key="staffName",
    )
