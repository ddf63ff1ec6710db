import logging

from django.conf import settings
from django.contrib import messages
from django.http import Http404
from django.shortcuts import redirect, render

from .api_client import ListResult
from .exceptions import ApiError, AuthenticationError
from .filters import has_active_filters
from .pagination import Pagination, fetch_list, read_filters

logger = logging.getLogger(__name__)


def load_record(resource, pk):
    """Fetch one record or raise 404."""
    try:
        record = resource.get(pk)
    except AuthenticationError:
        raise
    except ApiError as exc:
        if exc.status == 404:
            raise Http404(exc.describe("Record not found")) from exc
        raise
    if not record:
        raise Http404("Record not found")
    return record


def load_options(resource, **params):
    """Records for a dropdown; an unreachable API yields an empty list."""
    try:
        return resource.all(**params)
    except AuthenticationError:
        raise
    except ApiError:
        return []


def submit_form(request, resource, payload, pk=None, noun="Record"):
    """Create (or update when ``pk`` is given) a record from ``payload``.

    Returns the API response on success and ``None`` on failure.
    """
    verb = "update" if pk else "create"
    try:
        if pk:
            response = resource.update(pk, payload)
        else:
            response = resource.create(payload)
    except AuthenticationError:
        raise
    except ApiError as exc:
        messages.error(request, exc.describe(f"Failed to {verb} {noun.lower()}"))
        return None
    messages.success(request, response.get("message") or f"{noun} {verb}d successfully")
    return response


def delete_record(request, resource, pk, noun="Record"):
    try:
        response = resource.delete(pk)
    except AuthenticationError:
        raise
    except ApiError as exc:
        messages.error(request, exc.describe(f"Failed to delete {noun.lower()}"))
        return False
    messages.success(request, response.get("message") or f"{noun} deleted successfully")
    return True


def run_action(request, resource, pk, action, data=None, success="Done", failure="Request failed"):
    """Call a record sub-action (issue, cancel, return ...) and report the outcome."""
    try:
        response = resource.action(pk, action, data=data)
    except AuthenticationError:
        raise
    except ApiError as exc:
        messages.error(request, exc.describe(failure))
        return None
    messages.success(request, response.get("message") or success)
    return response


def filter_fields(definitions, filter_values):
    """Filter bar fields for ``partials/filters.html`` with their current values."""
    return [dict(definition, value=filter_values.get(definition["name"], "")) for definition in definitions]


def list_page(request, resource, key, filters=(), mapping=None, extra=None, per_page=None):
    """Fetch a list page and build the context shared by every list template.

    An API failure is rendered as an error panel instead of the table.
    """
    filter_keys = [definition["name"] for definition in filters]
    error = None
    try:
        result, pagination, search, filter_values = fetch_list(
            resource,
            request,
            key,
            mapping=mapping,
            filter_keys=filter_keys,
            extra=extra,
            per_page=per_page,
        )
    except AuthenticationError:
        raise
    except ApiError as exc:
        logger.warning("Failed to load %s: %s", key, exc)
        error = exc.describe("Failed to load data")
        result = ListResult([])
        pagination = Pagination.from_request(request, key, per_page)
        search = request.GET.get("search", "").strip()
        filter_values = read_filters(request, filter_keys)

    return {
        "items": result.items,
        "result": result,
        "pagination": pagination,
        "page_size_options": settings.PAGE_SIZE_OPTIONS,
        "search": search,
        "filters": filter_fields(filters, filter_values),
        "filter_values": filter_values,
        "filters_active": has_active_filters(filter_values),
        "error": error,
    }


def form_view(
    request,
    form_class,
    resource,
    noun,
    success_url,
    pk=None,
    form_kwargs=None,
    template="base/form.html",
    context=None,
):
    """Create/edit page for a record whose form maps 1:1 onto the API payload."""
    form_kwargs = dict(form_kwargs or {}, editing=bool(pk))
    record = load_record(resource, pk) if pk else None

    if request.method == "POST":
        form = form_class(request.POST, request.FILES, **form_kwargs)
        if form.is_valid():
            if submit_form(request, resource, form.to_payload(), pk=pk, noun=noun):
                return redirect(success_url)
    elif record:
        form = form_class.from_record(record, **form_kwargs)
    else:
        form = form_class(**form_kwargs)

    page = {
        "form": form,
        "record": record,
        "title": f"Edit {noun}" if pk else f"Add {noun}",
        "back_url": success_url,
        "submit_label": f"Update {noun}" if pk else f"Create {noun}",
    }
    page.update(context or {})
    return render(request, template, page)


def delete_view(request, resource, pk, noun, success_url, name_key="name"):
    """Confirmation page on GET, delete on POST."""
    if request.method == "POST":
        delete_record(request, resource, pk, noun=noun)
        return redirect(success_url)
    record = load_record(resource, pk)
    name = record.get(name_key) if isinstance(record, dict) else None
    return render(
        request,
        "base/confirm_delete.html",
        {"noun": noun, "name": name or noun, "back_url": success_url, "title": f"Delete {noun}"},
    )


def load_stats(resource, **params):
    """Stats header data; the list still renders when stats are unavailable."""
    try:
        return resource.stats(**params)
    except AuthenticationError:
        raise
    except ApiError as exc:
        logger.info("Stats unavailable for %s: %s", resource.path, exc)
        return {}
