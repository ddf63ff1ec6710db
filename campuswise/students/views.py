import logging

from django.contrib import messages
from django.http import HttpRequest
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_POST

from base.api_client import client_for
from base.crud import delete_view, form_view, list_page, load_options, load_record, load_stats
from base.decorators import module_permission_required
from base.exceptions import ApiError, AuthenticationError
from base.filters import FILTER_MAPPINGS
from base.forms import STATUS_CHOICES, api_choices
from receipts.views import current_receipt_config
from receipts.pdf_utils import pdf_response

from .forms import (
    GENDER_CHOICES,
    TRANSPORT_CHOICES,
    PromoteStudentsForm,
    StudentForm,
    TransferCertificateForm,
)
from .pdf_utils import generate_transfer_certificate_pdf

logger = logging.getLogger(__name__)

STUDENT_FILTERS = [
    {"name": "gender", "label": "Gender", "choices": GENDER_CHOICES},
    {"name": "transport", "label": "Transport", "choices": TRANSPORT_CHOICES},
    {"name": "status", "label": "Status", "choices": STATUS_CHOICES},
]


def _form_options(client):
    return {
        "classes": load_options(client.classes),
        "divisions": load_options(client.divisions),
        "routes": load_options(client.transport_routes, status="active"),
    }


@module_permission_required("Students")
def student_list(request: HttpRequest):
    """Students with search, filters and the promote panel"""
    client = client_for(request)
    classes = load_options(client.classes)
    divisions = load_options(client.divisions)
    filters = [{"name": "class", "label": "Class", "choices": api_choices(classes, blank=None)}]

    context = list_page(
        request,
        client.students,
        "students",
        filters=filters + STUDENT_FILTERS,
        mapping=FILTER_MAPPINGS["students"],
    )
    stats = load_stats(client.students)
    if stats:
        context["stats_cards"] = [
            {"label": "Total Students", "value": stats.get("total", 0)},
            {"label": "Active", "value": stats.get("active", 0)},
            {"label": "Inactive", "value": stats.get("inactive", 0)},
        ]
    context.update(
        {
            "title": "Students",
            "create_url": reverse("students:student_create"),
            "create_label": "Add Student",
            "promote_form": PromoteStudentsForm(
                classes=classes,
                divisions=divisions,
                initial={"academicYear": str(timezone.localdate().year)},
            ),
        }
    )
    return render(request, "students/student_list.html", context)


@module_permission_required("Students", action="create")
def student_create(request: HttpRequest):
    client = client_for(request)
    return form_view(
        request,
        StudentForm,
        client.students,
        "Student",
        reverse("students:student_list"),
        form_kwargs=_form_options(client),
    )


@module_permission_required("Students", action="update")
def student_edit(request: HttpRequest, pk):
    client = client_for(request)
    return form_view(
        request,
        StudentForm,
        client.students,
        "Student",
        reverse("students:student_list"),
        pk=pk,
        form_kwargs=_form_options(client),
    )


@module_permission_required("Students", action="delete")
def student_delete(request: HttpRequest, pk):
    return delete_view(
        request,
        client_for(request).students,
        pk,
        "Student",
        reverse("students:student_list"),
    )


@require_POST
@module_permission_required("Students", action="update")
def promote_students(request: HttpRequest):
    """Move the students ticked on the list page to another class and division"""
    client = client_for(request)
    student_ids = request.POST.getlist("studentIds")
    form = PromoteStudentsForm(
        request.POST,
        classes=load_options(client.classes),
        divisions=load_options(client.divisions),
    )

    if not student_ids:
        messages.error(request, "Please select students to promote")
    elif not form.is_valid():
        messages.error(request, "Please select target class and division")
    else:
        payload = dict(form.cleaned_data, studentIds=student_ids)
        try:
            response = client.post("/students/promote", data=payload)
        except AuthenticationError:
            raise
        except ApiError as exc:
            messages.error(request, exc.describe("Failed to promote students"))
        else:
            logger.info("Promoted %d students", len(student_ids))
            messages.success(
                request,
                response.get("message") or f"{len(student_ids)} students promoted successfully",
            )
    return redirect("students:student_list")


@module_permission_required("Students", action="update")
def transfer_certificate(request: HttpRequest, pk):
    """Issue a transfer certificate and download it as PDF"""
    client = client_for(request)
    student = load_record(client.students, pk)
    form = TransferCertificateForm(
        request.POST or None,
        initial={"transferDate": timezone.localdate()},
    )

    if request.method == "POST" and form.is_valid():
        try:
            response = client.post(f"/students/{pk}/transfer", data=form.to_payload())
        except AuthenticationError:
            raise
        except ApiError as exc:
            messages.error(request, exc.describe("Failed to generate transfer certificate"))
        else:
            certificate = (response.get("data") or {}).get("transferCertificate") or {}
            buffer = generate_transfer_certificate_pdf(certificate, current_receipt_config(client))
            return pdf_response(buffer, f"transfer_certificate_{student.get('admissionNo') or pk}.pdf")

    context = {
        "form": form,
        "student": student,
        "title": f"Transfer Certificate - {student.get('name', '')}",
        "back_url": reverse("students:student_list"),
        "submit_label": "Generate Certificate",
    }
    return render(request, "base/form.html", context)
