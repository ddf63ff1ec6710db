import logging

from django.contrib import messages
from django.http import HttpRequest
from django.shortcuts import redirect, render
from django.urls import reverse

from base.api_client import client_for
from base.crud import (
    delete_view,
    form_view,
    list_page,
    load_options,
    load_record,
    load_stats,
)
from base.decorators import module_permission_required
from base.exceptions import ApiError, AuthenticationError
from base.filters import FILTER_MAPPINGS
from base.forms import PAYMENT_METHOD_CHOICES, api_choices, as_id, record_id
from base.templatetags.base_tags import money
from receipts.pdf_utils import pdf_response

from .calculator import (
    FEE_TYPE_CHOICES,
    FeeSelectionError,
    build_fee_items,
    fee_payment_payload,
    total,
)
from .forms import FEE_STATUS_CHOICES, CollectFeeForm, FeeStructureForm, StudentPickForm
from .pdf_utils import generate_fee_receipt_pdf

logger = logging.getLogger(__name__)

PAYMENT_FILTERS = [
    {"name": "feeType", "label": "Fee Type", "choices": FEE_TYPE_CHOICES},
    {"name": "paymentMethod", "label": "Method", "choices": PAYMENT_METHOD_CHOICES},
    {"name": "status", "label": "Status", "choices": FEE_STATUS_CHOICES},
    {"name": "paymentDate_from", "label": "From", "type": "date"},
    {"name": "paymentDate_to", "label": "To", "type": "date"},
]


@module_permission_required("Fees")
def payment_list(request: HttpRequest):
    """Fee payments with collection totals"""
    client = client_for(request)
    context = list_page(
        request,
        client.fees,
        "fees",
        filters=PAYMENT_FILTERS,
        mapping=FILTER_MAPPINGS["fees"],
    )
    stats = load_stats(client.fees)
    if stats:
        context["stats_cards"] = [
            {"label": "Total Collection", "value": money((stats.get("totalCollection") or {}).get("total"))},
            {"label": "This Month", "value": money((stats.get("monthlyCollection") or {}).get("total"))},
            {"label": "Today", "value": money((stats.get("dailyCollection") or {}).get("total"))},
            {"label": "Payments", "value": (stats.get("totalCollection") or {}).get("count", 0)},
        ]
    context["title"] = "Fee Payments"
    return render(request, "fees/payment_list.html", context)


@module_permission_required("Fees", action="create")
def collect_fee(request: HttpRequest):
    """Collect fees from one student.

    The student is picked first (``?student=<id>``); the class's active fee
    structures then become the selectable fee items.
    """
    client = client_for(request)
    students = load_options(client.students, status="active")
    student_id = request.POST.get("student") or request.GET.get("student", "")
    pick_form = StudentPickForm(initial={"student": student_id}, students=students)

    student = next((s for s in students if record_id(s) == student_id), None)
    if student_id and student is None:
        student = load_record(client.students, student_id)

    structures = []
    if student:
        structures = load_options(
            client.fee_structures,
            classId=as_id(student.get("classId")),
            isActive="true",
        )

    form = None
    preview = None
    if student:
        form = CollectFeeForm(request.POST or None, student=student, structures=structures)
        if request.method == "POST" and form.is_valid():
            try:
                items = build_fee_items(
                    student,
                    structures,
                    selected_ids=form.cleaned_data["fee_structures"],
                    include_transport=form.cleaned_data.get("include_transport", False),
                    distance_group=form.cleaned_data.get("distance_group"),
                )
            except FeeSelectionError as e:
                messages.error(request, str(e))
            else:
                if "preview" in request.POST:
                    preview = {"items": items, "total": total(items)}
                else:
                    payload = fee_payment_payload(
                        student,
                        items,
                        form.cleaned_data["paymentMethod"],
                        form.cleaned_data.get("remarks", ""),
                    )
                    try:
                        response = client.fees.create(payload)
                    except AuthenticationError:
                        raise
                    except ApiError as exc:
                        messages.error(request, exc.describe("Failed to collect fee"))
                    else:
                        payment = response.get("data") or {}
                        logger.info("Collected %s from student %s", total(items), student_id)
                        messages.success(
                            request,
                            response.get("message")
                            or f"Fee collected successfully. Receipt No: {payment.get('receiptNo', '')}",
                        )
                        return redirect("fees:payment_list")

    context = {
        "title": "Collect Fee",
        "pick_form": pick_form,
        "student": student,
        "form": form,
        "structures": structures,
        "preview": preview,
    }
    return render(request, "fees/collect_fee.html", context)


@module_permission_required("Fees")
def fee_receipt(request: HttpRequest, pk):
    """Download the receipt of one fee payment as PDF"""
    client = client_for(request)
    try:
        receipt = client.get(f"/fees/{pk}/receipt-data").get("data") or {}
    except AuthenticationError:
        raise
    except ApiError as exc:
        messages.error(request, exc.describe("Failed to generate receipt"))
        return redirect("fees:payment_list")

    buffer = generate_fee_receipt_pdf(receipt)
    return pdf_response(buffer, f"receipt_{receipt.get('receiptNo') or pk}.pdf")


@module_permission_required("Fees", action="delete")
def delete_payment(request: HttpRequest, pk):
    return delete_view(
        request,
        client_for(request).fees,
        pk,
        "Fee payment",
        reverse("fees:payment_list"),
        name_key="receiptNo",
    )


# Fee structures

STRUCTURE_FILTERS = [
    {"name": "feeType", "label": "Fee Type", "choices": FEE_TYPE_CHOICES},
    {"name": "academicYear", "label": "Academic Year"},
]


@module_permission_required("Fees")
def structure_list(request: HttpRequest):
    client = client_for(request)
    classes = load_options(client.classes)
    filters = [{"name": "class", "label": "Class", "choices": api_choices(classes, blank=None)}]
    context = list_page(
        request,
        client.fee_structures,
        "feeStructures",
        filters=filters + STRUCTURE_FILTERS,
        mapping=FILTER_MAPPINGS["feeStructures"],
    )
    context.update(
        {
            "title": "Fee Structures",
            "create_url": reverse("fees:structure_create"),
            "columns": [
                {"label": "Title", "key": "title"},
                {"label": "Class", "key": "className"},
                {"label": "Fee Type", "key": "feeType", "kind": "label"},
                {"label": "Amount", "key": "amount", "kind": "money"},
                {"label": "Staff Discount %", "key": "staffDiscountPercent"},
                {"label": "Distance Group", "key": "transportDistanceGroup", "kind": "label"},
                {"label": "Academic Year", "key": "academicYear"},
                {"label": "Active", "key": "isActive", "kind": "bool"},
            ],
            "row_actions": [{"label": "Edit", "url_name": "fees:structure_edit"}],
            "delete_url_name": "fees:structure_delete",
        }
    )
    return render(request, "base/list.html", context)


@module_permission_required("Fees", action="create")
def structure_create(request: HttpRequest):
    client = client_for(request)
    return form_view(
        request,
        FeeStructureForm,
        client.fee_structures,
        "Fee structure",
        reverse("fees:structure_list"),
        form_kwargs={"classes": load_options(client.classes)},
    )


@module_permission_required("Fees", action="update")
def structure_edit(request: HttpRequest, pk):
    client = client_for(request)
    return form_view(
        request,
        FeeStructureForm,
        client.fee_structures,
        "Fee structure",
        reverse("fees:structure_list"),
        pk=pk,
        form_kwargs={"classes": load_options(client.classes)},
    )


@module_permission_required("Fees", action="delete")
def structure_delete(request: HttpRequest, pk):
    return delete_view(
        request,
        client_for(request).fee_structures,
        pk,
        "Fee structure",
        reverse("fees:structure_list"),
        name_key="title",
    )
