from django.http import HttpRequest
from django.shortcuts import redirect, render
from django.urls import reverse

from base.access import SUPER_ADMIN
from base.api_client import client_for
from base.crud import delete_view, form_view, list_page, load_options, load_record, submit_form
from base.decorators import module_permission_required
from base.filters import FILTER_MAPPINGS
from base.forms import STATUS_CHOICES, api_choices

from .forms import (
    BranchForm,
    ClassForm,
    DepartmentForm,
    DesignationForm,
    DivisionForm,
    TransportRouteForm,
    VehicleFormSet,
)

STATUS_FILTER = {"name": "status", "label": "Status", "choices": STATUS_CHOICES}

# name -> resource path, noun, list title, filter mapping key, columns
ENTITIES = {
    "branch": {
        "path": "branches",
        "noun": "Branch",
        "title": "Branch Management",
        "filter_key": "branches",
        "columns": [
            {"label": "Code", "key": "code"},
            {"label": "Name", "key": "name"},
            {"label": "Principal", "key": "principalName"},
            {"label": "Phone", "key": "phone"},
            {"label": "Email", "key": "email"},
            {"label": "Status", "key": "status", "kind": "label"},
        ],
    },
    "department": {
        "path": "departments",
        "noun": "Department",
        "title": "Departments",
        "filter_key": "departments",
        "columns": [
            {"label": "Code", "key": "code"},
            {"label": "Name", "key": "name"},
            {"label": "Head", "key": "headOfDepartment"},
            {"label": "Description", "key": "description"},
            {"label": "Status", "key": "status", "kind": "label"},
        ],
    },
    "designation": {
        "path": "designations",
        "noun": "Designation",
        "title": "Designations",
        "filter_key": "designations",
        "columns": [
            {"label": "Name", "key": "name"},
            {"label": "Department", "key": "department"},
            {"label": "Description", "key": "description"},
            {"label": "Status", "key": "status", "kind": "label"},
        ],
    },
    "class": {
        "path": "classes",
        "noun": "Class",
        "title": "Classes",
        "filter_key": "classes",
        "columns": [
            {"label": "Name", "key": "name"},
            {"label": "Academic Year", "key": "academicYear"},
            {"label": "Description", "key": "description"},
            {"label": "Status", "key": "status", "kind": "label"},
        ],
    },
    "division": {
        "path": "divisions",
        "noun": "Division",
        "title": "Divisions",
        "filter_key": "divisions",
        "columns": [
            {"label": "Class", "key": "className"},
            {"label": "Division", "key": "name"},
            {"label": "Capacity", "key": "capacity"},
            {"label": "Class Teacher", "key": "classTeacherName"},
            {"label": "Status", "key": "status", "kind": "label"},
        ],
    },
    "route": {
        "path": "transport-routes",
        "noun": "Transport route",
        "title": "Transport Routes",
        "filter_key": "transportRoutes",
        "columns": [
            {"label": "Code", "key": "routeCode"},
            {"label": "Route", "key": "routeName"},
            {"label": "Description", "key": "description"},
            {"label": "Distance Groups", "key": "useDistanceGroups", "kind": "bool"},
            {"label": "Status", "key": "status", "kind": "label"},
        ],
    },
}


def _resource(request, entity):
    return client_for(request).resource(ENTITIES[entity]["path"])


def _list(request, entity, filters=(STATUS_FILTER,)):
    options = ENTITIES[entity]
    context = list_page(
        request,
        _resource(request, entity),
        options["filter_key"],
        filters=list(filters),
        mapping=FILTER_MAPPINGS[options["filter_key"]],
    )
    context.update(
        {
            "title": options["title"],
            "create_url": reverse(f"organization:{entity}_create"),
            "columns": options["columns"],
            "row_actions": [{"label": "Edit", "url_name": f"organization:{entity}_edit"}],
            "delete_url_name": f"organization:{entity}_delete",
        }
    )
    return render(request, "base/list.html", context)


def _form(request, entity, form_class, pk=None, form_kwargs=None):
    options = ENTITIES[entity]
    return form_view(
        request,
        form_class,
        _resource(request, entity),
        options["noun"],
        reverse(f"organization:{entity}_list"),
        pk=pk,
        form_kwargs=form_kwargs,
    )


def _delete(request, entity, pk, name_key="name"):
    options = ENTITIES[entity]
    return delete_view(
        request,
        _resource(request, entity),
        pk,
        options["noun"],
        reverse(f"organization:{entity}_list"),
        name_key=name_key,
    )


# Branches (super admin only)


@module_permission_required(roles=(SUPER_ADMIN,))
def branch_list(request: HttpRequest):
    return _list(request, "branch")


@module_permission_required(roles=(SUPER_ADMIN,))
def branch_create(request: HttpRequest):
    return _form(request, "branch", BranchForm)


@module_permission_required(roles=(SUPER_ADMIN,))
def branch_edit(request: HttpRequest, pk):
    return _form(request, "branch", BranchForm, pk)


@module_permission_required(roles=(SUPER_ADMIN,))
def branch_delete(request: HttpRequest, pk):
    return _delete(request, "branch", pk)


# Departments and designations


@module_permission_required("Departments")
def department_list(request: HttpRequest):
    return _list(request, "department")


@module_permission_required("Departments", action="create")
def department_create(request: HttpRequest):
    return _form(request, "department", DepartmentForm)


@module_permission_required("Departments", action="update")
def department_edit(request: HttpRequest, pk):
    return _form(request, "department", DepartmentForm, pk)


@module_permission_required("Departments", action="delete")
def department_delete(request: HttpRequest, pk):
    return _delete(request, "department", pk)


def _departments(request):
    return load_options(client_for(request).departments, status="active")


@module_permission_required("Departments")
def designation_list(request: HttpRequest):
    departments = _departments(request)
    filters = [
        {"name": "department", "label": "Department", "choices": [(d.get("name"), d.get("name")) for d in departments]},
        STATUS_FILTER,
    ]
    return _list(request, "designation", filters)


@module_permission_required("Departments", action="create")
def designation_create(request: HttpRequest):
    return _form(request, "designation", DesignationForm, form_kwargs={"departments": _departments(request)})


@module_permission_required("Departments", action="update")
def designation_edit(request: HttpRequest, pk):
    return _form(request, "designation", DesignationForm, pk, form_kwargs={"departments": _departments(request)})


@module_permission_required("Departments", action="delete")
def designation_delete(request: HttpRequest, pk):
    return _delete(request, "designation", pk)


# Classes and divisions


@module_permission_required("Classes")
def class_list(request: HttpRequest):
    filters = [STATUS_FILTER, {"name": "academicYear", "label": "Academic Year"}]
    return _list(request, "class", filters)


@module_permission_required("Classes", action="create")
def class_create(request: HttpRequest):
    return _form(request, "class", ClassForm)


@module_permission_required("Classes", action="update")
def class_edit(request: HttpRequest, pk):
    return _form(request, "class", ClassForm, pk)


@module_permission_required("Classes", action="delete")
def class_delete(request: HttpRequest, pk):
    return _delete(request, "class", pk)


def _division_options(request):
    client = client_for(request)
    return {
        "classes": load_options(client.classes),
        "teachers": load_options(client.staff, status="active"),
    }


@module_permission_required("Divisions")
def division_list(request: HttpRequest):
    options = _division_options(request)
    filters = [
        {"name": "class", "label": "Class", "choices": api_choices(options["classes"], blank=None)},
        {"name": "classTeacher", "label": "Class Teacher", "choices": api_choices(options["teachers"], blank=None)},
    ]
    return _list(request, "division", filters)


@module_permission_required("Divisions", action="create")
def division_create(request: HttpRequest):
    return _form(request, "division", DivisionForm, form_kwargs=_division_options(request))


@module_permission_required("Divisions", action="update")
def division_edit(request: HttpRequest, pk):
    return _form(request, "division", DivisionForm, pk, form_kwargs=_division_options(request))


@module_permission_required("Divisions", action="delete")
def division_delete(request: HttpRequest, pk):
    return _delete(request, "division", pk)


# Transport routes


@module_permission_required("Students")
def route_list(request: HttpRequest):
    return _list(request, "route")


def _route_form(request, pk=None):
    client = client_for(request)
    resource = client.transport_routes
    classes = load_options(client.classes)
    record = load_record(resource, pk) if pk else None
    noun = ENTITIES["route"]["noun"]

    if request.method == "POST":
        form = TransportRouteForm(request.POST, classes=classes)
        vehicles = VehicleFormSet(request.POST, prefix="vehicles")
        if form.is_valid() and vehicles.is_valid():
            payload = form.to_payload()
            payload["vehicles"] = [v.cleaned_data for v in vehicles if v.cleaned_data.get("vehicleNumber")]
            if submit_form(request, resource, payload, pk=pk, noun=noun):
                return redirect("organization:route_list")
    elif record:
        form = TransportRouteForm.from_record(record, classes=classes)
        vehicles = VehicleFormSet(initial=record.get("vehicles") or [], prefix="vehicles")
    else:
        form = TransportRouteForm(classes=classes)
        vehicles = VehicleFormSet(prefix="vehicles")

    context = {
        "form": form,
        "vehicles": vehicles,
        "classes": classes,
        "title": f"Edit {noun}" if pk else f"Add {noun}",
        "back_url": reverse("organization:route_list"),
        "submit_label": "Save Route",
    }
    return render(request, "organization/route_form.html", context)


@module_permission_required("Students", action="create")
def route_create(request: HttpRequest):
    return _route_form(request)


@module_permission_required("Students", action="update")
def route_edit(request: HttpRequest, pk):
    return _route_form(request, pk)


@module_permission_required("Students", action="delete")
def route_delete(request: HttpRequest, pk):
    return _delete(request, "route", pk, name_key="routeName")
