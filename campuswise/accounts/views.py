from django.http import HttpRequest
from django.shortcuts import render
from django.urls import reverse

from base.access import ADMIN_ROLES, PERMISSION_MODULES, ROLE_CHOICES
from base.api_client import client_for
from base.crud import delete_view, form_view, list_page, load_options, load_stats
from base.decorators import get_current_user, module_permission_required
from base.filters import FILTER_MAPPINGS
from base.forms import STATUS_CHOICES, api_choices

from .forms import ACTIVITY_ACTION_CHOICES, UserForm


@module_permission_required(roles=ADMIN_ROLES)
def user_list(request: HttpRequest):
    client = client_for(request)
    filters = [
        {"name": "role", "label": "Role", "choices": ROLE_CHOICES},
        {"name": "status", "label": "Status", "choices": STATUS_CHOICES},
    ]
    context = list_page(request, client.users, "userAccess", filters=filters, mapping=FILTER_MAPPINGS["userAccess"])
    context.update(
        {
            "title": "User Access",
            "create_url": reverse("accounts:user_create"),
            "create_label": "Add User",
            "columns": [
                {"label": "Name", "key": "name"},
                {"label": "Mobile", "key": "mobile"},
                {"label": "Email", "key": "email"},
                {"label": "Role", "key": "role", "kind": "label"},
                {"label": "Status", "key": "status", "kind": "label"},
                {"label": "Last Login", "key": "lastLogin", "kind": "date"},
            ],
            "row_actions": [{"label": "Edit", "url_name": "accounts:user_edit"}],
            "delete_url_name": "accounts:user_delete",
        }
    )
    return render(request, "base/list.html", context)


def _user_form(request, pk=None):
    client = client_for(request)
    form_kwargs = {
        "current_user": get_current_user(request),
        "branches": load_options(client.branches, status="active"),
        "editing": bool(pk),
    }
    return form_view(
        request,
        UserForm,
        client.users,
        "User",
        reverse("accounts:user_list"),
        pk=pk,
        form_kwargs=form_kwargs,
        template="accounts/user_form.html",
    )


@module_permission_required(roles=ADMIN_ROLES)
def user_create(request: HttpRequest):
    return _user_form(request)


@module_permission_required(roles=ADMIN_ROLES)
def user_edit(request: HttpRequest, pk):
    return _user_form(request, pk)


@module_permission_required(roles=ADMIN_ROLES)
def user_delete(request: HttpRequest, pk):
    client = client_for(request)
    return delete_view(request, client.users, pk, "User", reverse("accounts:user_list"))


@module_permission_required("ActivityLog")
def activity_log(request: HttpRequest):
    client = client_for(request)
    users = load_options(client.users)
    filters = [
        {"name": "module", "label": "Module", "choices": [(m, m) for m in PERMISSION_MODULES]},
        {"name": "action", "label": "Action", "choices": ACTIVITY_ACTION_CHOICES},
        {"name": "userId", "label": "User", "choices": api_choices(users, blank=None)},
        {"name": "date_from", "label": "From", "type": "date"},
        {"name": "date_to", "label": "To", "type": "date"},
    ]
    context = list_page(
        request,
        client.activity_logs,
        "activityLogs",
        filters=filters,
        mapping=FILTER_MAPPINGS["activityLogs"],
    )
    stats = load_stats(client.activity_logs)
    if stats:
        context["stats_cards"] = [
            {"label": "Total Activities", "value": stats.get("totalLogs", 0)},
            {"label": "Today", "value": stats.get("todayLogs", 0)},
            {"label": "This Week", "value": stats.get("weekLogs", 0)},
            {"label": "This Month", "value": stats.get("monthLogs", 0)},
        ]
    context.update(
        {
            "title": "Activity Log",
            "columns": [
                {"label": "Time", "key": "timestamp", "kind": "date"},
                {"label": "User", "key": "userName"},
                {"label": "Role", "key": "userRole", "kind": "label"},
                {"label": "Module", "key": "module"},
                {"label": "Action", "key": "action", "kind": "label"},
                {"label": "Details", "key": "details"},
            ],
            "empty_message": "No activity recorded",
        }
    )
    return render(request, "base/list.html", context)
