from django.contrib import messages
from django.http import HttpRequest
from django.shortcuts import redirect, render
from django.urls import reverse

from base.api_client import client_for
from base.crud import delete_view, form_view, list_page, load_options, load_stats
from base.decorators import module_permission_required
from base.exceptions import ApiError, AuthenticationError
from base.filters import FILTER_MAPPINGS
from base.forms import STATUS_CHOICES
from base.templatetags.base_tags import money
from receipts.pdf_utils import pdf_response
from receipts.views import current_receipt_config

from .forms import EXPENSE_PAYMENT_METHOD_CHOICES, CategoryForm, ExpenseForm
from .pdf_utils import generate_expense_voucher_pdf


def _categories(client):
    return load_options(client.expense_categories, status="active")


@module_permission_required("Expenses")
def expense_list(request: HttpRequest):
    client = client_for(request)
    categories = _categories(client)
    filters = [
        {"name": "category", "label": "Category", "choices": [(c.get("name"), c.get("name")) for c in categories]},
        {"name": "paymentMethod", "label": "Method", "choices": EXPENSE_PAYMENT_METHOD_CHOICES},
        {"name": "date_from", "label": "From", "type": "date"},
        {"name": "date_to", "label": "To", "type": "date"},
    ]
    context = list_page(
        request,
        client.expenses,
        "expenses",
        filters=filters,
        mapping=FILTER_MAPPINGS["expenses"],
    )
    stats = load_stats(client.expenses)
    if stats:
        context["stats_cards"] = [
            {"label": "Total Expenses", "value": money((stats.get("totalExpenses") or {}).get("total"))},
            {"label": "This Month", "value": money((stats.get("monthlyExpenses") or {}).get("total"))},
            {"label": "This Year", "value": money((stats.get("yearlyExpenses") or {}).get("total"))},
            {"label": "Entries", "value": (stats.get("totalExpenses") or {}).get("count", 0)},
        ]
    context.update(
        {
            "title": "Expenses",
            "create_url": reverse("expenses:expense_create"),
            "create_label": "Add Expense",
            "columns": [
                {"label": "Voucher No", "key": "voucherNo"},
                {"label": "Date", "key": "date", "kind": "date"},
                {"label": "Category", "key": "category"},
                {"label": "Description", "key": "description"},
                {"label": "Amount", "key": "amount", "kind": "money"},
                {"label": "Method", "key": "paymentMethod", "kind": "label"},
                {"label": "Approved By", "key": "approvedBy"},
            ],
            "row_actions": [
                {"label": "Voucher", "url_name": "expenses:expense_voucher"},
                {"label": "Edit", "url_name": "expenses:expense_edit"},
            ],
            "delete_url_name": "expenses:expense_delete",
        }
    )
    return render(request, "base/list.html", context)


@module_permission_required("Expenses", action="create")
def expense_create(request: HttpRequest):
    client = client_for(request)
    return form_view(
        request,
        ExpenseForm,
        client.expenses,
        "Expense",
        reverse("expenses:expense_list"),
        form_kwargs={"categories": _categories(client)},
    )


@module_permission_required("Expenses", action="update")
def expense_edit(request: HttpRequest, pk):
    client = client_for(request)
    return form_view(
        request,
        ExpenseForm,
        client.expenses,
        "Expense",
        reverse("expenses:expense_list"),
        pk=pk,
        form_kwargs={"categories": _categories(client)},
    )


@module_permission_required("Expenses", action="delete")
def expense_delete(request: HttpRequest, pk):
    return delete_view(
        request,
        client_for(request).expenses,
        pk,
        "Expense",
        reverse("expenses:expense_list"),
        name_key="description",
    )


@module_permission_required("Expenses")
def expense_voucher(request: HttpRequest, pk):
    """Download an expense voucher as PDF"""
    client = client_for(request)
    try:
        expense = client.expenses.get(pk) or {}
    except AuthenticationError:
        raise
    except ApiError as exc:
        messages.error(request, exc.describe("Failed to generate voucher"))
        return redirect("expenses:expense_list")

    buffer = generate_expense_voucher_pdf(expense, current_receipt_config(client))
    return pdf_response(buffer, f"voucher_{expense.get('voucherNo') or pk}.pdf")


# Expense and income categories

CATEGORY_KINDS = {
    "expense": {
        "resource": "expense-categories",
        "noun": "Expense category",
        "title": "Expense Categories",
        "filter_key": "expenseCategories",
    },
    "income": {
        "resource": "income-categories",
        "noun": "Income category",
        "title": "Income Categories",
        "filter_key": "incomeCategories",
    },
}


def _category_list(request, kind):
    options = CATEGORY_KINDS[kind]
    context = list_page(
        request,
        client_for(request).resource(options["resource"]),
        options["filter_key"],
        filters=[{"name": "status", "label": "Status", "choices": STATUS_CHOICES}],
        mapping=FILTER_MAPPINGS[options["filter_key"]],
    )
    context.update(
        {
            "title": options["title"],
            "create_url": reverse(f"expenses:{kind}_category_create"),
            "columns": [
                {"label": "Name", "key": "name"},
                {"label": "Code", "key": "code"},
                {"label": "Description", "key": "description"},
                {"label": "Status", "key": "status", "kind": "label"},
                {"label": "Created", "key": "createdAt", "kind": "date"},
            ],
            "row_actions": [{"label": "Edit", "url_name": f"expenses:{kind}_category_edit"}],
            "delete_url_name": f"expenses:{kind}_category_delete",
        }
    )
    return render(request, "base/list.html", context)


def _category_form(request, kind, pk=None):
    options = CATEGORY_KINDS[kind]
    return form_view(
        request,
        CategoryForm,
        client_for(request).resource(options["resource"]),
        options["noun"],
        reverse(f"expenses:{kind}_category_list"),
        pk=pk,
    )


def _category_delete(request, kind, pk):
    options = CATEGORY_KINDS[kind]
    return delete_view(
        request,
        client_for(request).resource(options["resource"]),
        pk,
        options["noun"],
        reverse(f"expenses:{kind}_category_list"),
    )


@module_permission_required("Expenses")
def expense_category_list(request: HttpRequest):
    return _category_list(request, "expense")


@module_permission_required("Expenses", action="create")
def expense_category_create(request: HttpRequest):
    return _category_form(request, "expense")


@module_permission_required("Expenses", action="update")
def expense_category_edit(request: HttpRequest, pk):
    return _category_form(request, "expense", pk)


@module_permission_required("Expenses", action="delete")
def expense_category_delete(request: HttpRequest, pk):
    return _category_delete(request, "expense", pk)


@module_permission_required("Fees")
def income_category_list(request: HttpRequest):
    return _category_list(request, "income")


@module_permission_required("Fees", action="create")
def income_category_create(request: HttpRequest):
    return _category_form(request, "income")


@module_permission_required("Fees", action="update")
def income_category_edit(request: HttpRequest, pk):
    return _category_form(request, "income", pk)


@module_permission_required("Fees", action="delete")
def income_category_delete(request: HttpRequest, pk):
    return _category_delete(request, "income", pk)
