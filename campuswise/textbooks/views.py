import logging

from django.contrib import messages
from django.http import HttpRequest
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from base.api_client import client_for
from base.crud import (
    form_view,
    delete_view,
    list_page,
    load_options,
    load_record,
    load_stats,
    run_action,
    submit_form,
)
from base.decorators import module_permission_required
from base.exceptions import ApiError, AuthenticationError
from base.filters import FILTER_MAPPINGS
from base.forms import api_choices
from base.templatetags.base_tags import money
from receipts.pdf_utils import pdf_response
from receipts.views import current_receipt_config

from .forms import (
    INDENT_PAYMENT_METHOD_CHOICES,
    INDENT_STATUS_CHOICES,
    PAYMENT_STATUS_CHOICES,
    CancelIndentForm,
    IndentForm,
    ReturnTextbooksForm,
    StockAdjustmentForm,
    TextBookForm,
)
from .pdf_utils import generate_textbook_receipt_pdf

logger = logging.getLogger(__name__)


@module_permission_required("TextBooks")
def textbook_list(request: HttpRequest):
    client = client_for(request)
    classes = load_options(client.classes)
    filters = [
        {"name": "class", "label": "Class", "choices": api_choices(classes, blank=None)},
        {"name": "subject", "label": "Subject"},
        {"name": "publisher", "label": "Publisher"},
    ]
    context = list_page(
        request,
        client.textbooks,
        "textbooks",
        filters=filters,
        mapping=FILTER_MAPPINGS["textbooks"],
    )
    stats = load_stats(client.textbooks)
    if stats:
        context["stats_cards"] = [
            {"label": "Titles", "value": stats.get("totalTitles", 0)},
            {"label": "Total Copies", "value": stats.get("totalBooks", 0)},
            {"label": "Available", "value": stats.get("availableBooks", 0)},
            {"label": "Low Stock", "value": stats.get("lowStockBooks", 0)},
        ]
    context.update(
        {
            "title": "Text Books",
            "create_url": reverse("textbooks:textbook_create"),
            "create_label": "Add Textbook",
            "columns": [
                {"label": "Code", "key": "bookCode"},
                {"label": "Title", "key": "title"},
                {"label": "Subject", "key": "subject"},
                {"label": "Class", "key": "class"},
                {"label": "Publisher", "key": "publisher"},
                {"label": "Price", "key": "price", "kind": "money"},
                {"label": "Quantity", "key": "quantity"},
                {"label": "Available", "key": "available"},
            ],
            "row_actions": [
                {"label": "Stock", "url_name": "textbooks:textbook_stock"},
                {"label": "Edit", "url_name": "textbooks:textbook_edit"},
            ],
            "delete_url_name": "textbooks:textbook_delete",
        }
    )
    return render(request, "base/list.html", context)


@module_permission_required("TextBooks", action="create")
def textbook_create(request: HttpRequest):
    client = client_for(request)
    return form_view(
        request,
        TextBookForm,
        client.textbooks,
        "Textbook",
        reverse("textbooks:textbook_list"),
        form_kwargs={"classes": load_options(client.classes)},
    )


@module_permission_required("TextBooks", action="update")
def textbook_edit(request: HttpRequest, pk):
    client = client_for(request)
    return form_view(
        request,
        TextBookForm,
        client.textbooks,
        "Textbook",
        reverse("textbooks:textbook_list"),
        pk=pk,
        form_kwargs={"classes": load_options(client.classes)},
    )


@module_permission_required("TextBooks", action="delete")
def textbook_delete(request: HttpRequest, pk):
    return delete_view(
        request,
        client_for(request).textbooks,
        pk,
        "Textbook",
        reverse("textbooks:textbook_list"),
        name_key="title",
    )


@module_permission_required("TextBooks", action="update")
def textbook_stock(request: HttpRequest, pk):
    """Add or remove copies of a textbook"""
    client = client_for(request)
    textbook = load_record(client.textbooks, pk)
    form = StockAdjustmentForm(request.POST or None, textbook=textbook)
    if request.method == "POST" and form.is_valid():
        if run_action(
            request,
            client.textbooks,
            pk,
            "stock",
            data=form.cleaned_data,
            success="Stock updated successfully",
            failure="Failed to update stock",
        ):
            return redirect("textbooks:textbook_list")

    context = {
        "form": form,
        "title": f"Update Stock - {textbook.get('title', '')}",
        "back_url": reverse("textbooks:textbook_list"),
        "submit_label": "Update Stock",
    }
    return render(request, "base/form.html", context)


# Textbook indents

INDENT_FILTERS = [
    {"name": "status", "label": "Status", "choices": INDENT_STATUS_CHOICES},
    {"name": "paymentStatus", "label": "Payment", "choices": PAYMENT_STATUS_CHOICES},
    {"name": "paymentMethod", "label": "Method", "choices": INDENT_PAYMENT_METHOD_CHOICES},
    {"name": "issueDate_from", "label": "From", "type": "date"},
    {"name": "issueDate_to", "label": "To", "type": "date"},
]


@module_permission_required("TextBooks")
def indent_list(request: HttpRequest):
    client = client_for(request)
    classes = load_options(client.classes)
    filters = [{"name": "class", "label": "Class", "choices": api_choices(classes, blank=None)}]
    context = list_page(
        request,
        client.textbook_indents,
        "textbookIndents",
        filters=filters + INDENT_FILTERS,
        mapping=FILTER_MAPPINGS["textbookIndents"],
    )
    stats = load_stats(client.textbook_indents)
    if stats:
        context["stats_cards"] = [
            {"label": "Indents", "value": stats.get("totalIndents", 0)},
            {"label": "Issued", "value": stats.get("issuedIndents", 0)},
            {"label": "Overdue", "value": stats.get("overdueIndents", 0)},
            {"label": "Total Value", "value": money(stats.get("totalValue"))},
        ]
    context.update(
        {
            "title": "Textbook Indents",
            "create_url": reverse("textbooks:indent_create"),
            "create_label": "New Indent",
            "columns": [
                {"label": "Indent No", "key": "indentNo"},
                {"label": "Student", "key": "studentName"},
                {"label": "Class", "key": "class"},
                {"label": "Issue Date", "key": "issueDate", "kind": "date"},
                {"label": "Total", "key": "totalAmount", "kind": "money"},
                {"label": "Paid", "key": "paidAmount", "kind": "money"},
                {"label": "Balance", "key": "balanceAmount", "kind": "money"},
                {"label": "Payment", "key": "paymentStatus", "kind": "label"},
                {"label": "Status", "key": "status", "kind": "label"},
            ],
            "row_actions": [{"label": "Open", "url_name": "textbooks:indent_detail"}],
        }
    )
    return render(request, "base/list.html", context)


@module_permission_required("TextBooks", action="create")
def indent_create(request: HttpRequest):
    """Create an indent for a student; ``?class=<id>`` narrows the books offered"""
    client = client_for(request)
    class_id = request.GET.get("class", "")
    textbooks = [
        book
        for book in load_options(client.textbooks, classId=class_id)
        if (book.get("available") or 0) > 0
    ]
    students = load_options(client.students, status="active", classId=class_id)
    form = IndentForm(request.POST or None, students=students, textbooks=textbooks)

    if request.method == "POST" and form.is_valid():
        if "preview" not in request.POST:
            response = submit_form(request, client.textbook_indents, form.to_payload(), noun="Textbook indent")
            if response:
                return redirect("textbooks:indent_list")

    total, balance = form.totals() if form.is_bound and form.is_valid() else (None, None)
    context = {
        "form": form,
        "title": "New Textbook Indent",
        "back_url": reverse("textbooks:indent_list"),
        "submit_label": "Create Indent",
        "classes": load_options(client.classes),
        "class_id": class_id,
        "total": total,
        "balance": balance,
    }
    return render(request, "textbooks/indent_form.html", context)


@module_permission_required("TextBooks")
def indent_detail(request: HttpRequest, pk):
    client = client_for(request)
    indent = load_record(client.textbook_indents, pk)
    status = indent.get("status")
    context = {
        "title": f"Indent {indent.get('indentNo', '')}",
        "indent": indent,
        "can_issue": status == "pending",
        "can_return": status in ("issued", "partially_returned"),
        "can_cancel": status in ("pending", "issued"),
        "can_print": status in ("issued", "partially_returned", "returned"),
        "cancel_form": CancelIndentForm(),
    }
    return render(request, "textbooks/indent_detail.html", context)


@require_POST
@module_permission_required("TextBooks", action="update")
def indent_issue(request: HttpRequest, pk):
    run_action(
        request,
        client_for(request).textbook_indents,
        pk,
        "issue",
        success="Textbooks issued successfully",
        failure="Failed to issue textbooks",
    )
    return redirect("textbooks:indent_detail", pk=pk)


@require_POST
@module_permission_required("TextBooks", action="update")
def indent_cancel(request: HttpRequest, pk):
    form = CancelIndentForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Please enter a reason for cancellation")
    else:
        run_action(
            request,
            client_for(request).textbook_indents,
            pk,
            "cancel",
            data=form.cleaned_data,
            success="Indent cancelled successfully",
            failure="Failed to cancel indent",
        )
    return redirect("textbooks:indent_detail", pk=pk)


@module_permission_required("TextBooks", action="update")
def indent_return(request: HttpRequest, pk):
    """Record books returned against an indent"""
    client = client_for(request)
    indent = load_record(client.textbook_indents, pk)
    form = ReturnTextbooksForm(request.POST or None, indent=indent)
    if request.method == "POST" and form.is_valid():
        if run_action(
            request,
            client.textbook_indents,
            pk,
            "return",
            data={"items": form.items()},
            success="Textbooks returned successfully",
            failure="Failed to return textbooks",
        ):
            return redirect("textbooks:indent_detail", pk=pk)

    context = {
        "form": form,
        "title": f"Return Textbooks - {indent.get('indentNo', '')}",
        "back_url": reverse("textbooks:indent_detail", args=[pk]),
        "submit_label": "Record Return",
    }
    return render(request, "base/form.html", context)


@module_permission_required("TextBooks")
def indent_receipt(request: HttpRequest, pk):
    """Download the receipt of an issued or returned indent as PDF"""
    client = client_for(request)
    try:
        response = client.textbook_indents.action(pk, "receipt", method="post")
    except AuthenticationError:
        raise
    except ApiError as exc:
        messages.error(request, exc.describe("Failed to generate receipt"))
        return redirect("textbooks:indent_detail", pk=pk)

    receipt = response.get("data") or {}
    buffer = generate_textbook_receipt_pdf(receipt, current_receipt_config(client))
    return pdf_response(buffer, f"textbook_receipt_{receipt.get('indentNo') or pk}.pdf")
