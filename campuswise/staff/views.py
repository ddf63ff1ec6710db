from django.http import HttpRequest
from django.shortcuts import render
from django.urls import reverse

from base.api_client import client_for
from base.crud import delete_view, form_view, list_page, load_options, load_stats
from base.decorators import module_permission_required
from base.filters import FILTER_MAPPINGS
from base.forms import STATUS_CHOICES
from base.templatetags.base_tags import money

from .forms import StaffForm, name_choices


def _form_options(client):
    return {
        "designations": load_options(client.designations, status="active"),
        "departments": load_options(client.departments, status="active"),
    }


@module_permission_required("Staff")
def staff_list(request: HttpRequest):
    client = client_for(request)
    options = _form_options(client)
    filters = [
        {"name": "designation", "label": "Designation", "choices": name_choices(options["designations"])[1:]},
        {"name": "department", "label": "Department", "choices": name_choices(options["departments"])[1:]},
        {"name": "status", "label": "Status", "choices": STATUS_CHOICES},
    ]
    context = list_page(
        request,
        client.staff,
        "staff",
        filters=filters,
        mapping=FILTER_MAPPINGS["staff"],
    )
    stats = load_stats(client.staff)
    if stats:
        salary = stats.get("salaryStats") or {}
        context["stats_cards"] = [
            {"label": "Total Staff", "value": stats.get("total", 0)},
            {"label": "Active", "value": stats.get("active", 0)},
            {"label": "Monthly Salaries", "value": money(salary.get("totalSalary"))},
            {"label": "Average Salary", "value": money(salary.get("avgSalary"))},
        ]
    context.update(
        {
            "title": "Staff",
            "create_url": reverse("staff:staff_create"),
            "create_label": "Add Staff",
            "columns": [
                {"label": "Employee ID", "key": "employeeId"},
                {"label": "Name", "key": "name"},
                {"label": "Designation", "key": "designation"},
                {"label": "Department", "key": "department"},
                {"label": "Phone", "key": "phone"},
                {"label": "Joined", "key": "dateOfJoining", "kind": "date"},
                {"label": "Salary", "key": "salary", "kind": "money"},
                {"label": "Status", "key": "status", "kind": "label"},
            ],
            "row_actions": [{"label": "Edit", "url_name": "staff:staff_edit"}],
            "delete_url_name": "staff:staff_delete",
        }
    )
    return render(request, "base/list.html", context)


@module_permission_required("Staff", action="create")
def staff_create(request: HttpRequest):
    client = client_for(request)
    return form_view(
        request,
        StaffForm,
        client.staff,
        "Staff member",
        reverse("staff:staff_list"),
        form_kwargs=_form_options(client),
    )


@module_permission_required("Staff", action="update")
def staff_edit(request: HttpRequest, pk):
    client = client_for(request)
    return form_view(
        request,
        StaffForm,
        client.staff,
        "Staff member",
        reverse("staff:staff_list"),
        pk=pk,
        form_kwargs=_form_options(client),
    )


@module_permission_required("Staff", action="delete")
def staff_delete(request: HttpRequest, pk):
    return delete_view(request, client_for(request).staff, pk, "Staff member", reverse("staff:staff_list"))
