import logging

from django.contrib import messages
from django.http import HttpRequest
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme

from .api_client import TOKEN_SESSION_KEY, USER_SESSION_KEY, ApiClient, client_for
from .decorators import login_required
from .exceptions import ApiError
from .forms import LoginForm

logger = logging.getLogger(__name__)


def _safe_next(request, default="dashboard:dashboard"):
    next_url = request.POST.get("next") or request.GET.get("next")
    if next_url and url_has_allowed_host_and_scheme(
        next_url, allowed_hosts={request.get_host()}
    ):
        return next_url
    return default


def login_view(request: HttpRequest):
    if request.session.get(TOKEN_SESSION_KEY):
        return redirect("dashboard:dashboard")

    form = LoginForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        try:
            response = ApiClient().post("/auth/login", data=form.cleaned_data)
        except ApiError as exc:
            messages.error(request, exc.describe("Login failed"))
        else:
            data = response.get("data") or {}
            request.session.cycle_key()
            request.session[TOKEN_SESSION_KEY] = data.get("token")
            request.session[USER_SESSION_KEY] = data.get("user") or {}
            user = data.get("user") or {}
            logger.info("User %s signed in", user.get("mobile") or user.get("name"))
            messages.success(request, f"Welcome back, {user.get('name', '')}".strip(", "))
            return redirect(_safe_next(request))

    return render(
        request,
        "base/login.html",
        {"form": form, "next": request.GET.get("next", "")},
    )


@login_required
def logout_view(request: HttpRequest):
    if request.method != "POST":
        return redirect("dashboard:dashboard")
    try:
        client_for(request).post("/auth/logout")
    except ApiError as exc:
        # The local session is dropped either way.
        logger.info("Logout call failed: %s", exc)
    request.session.flush()
    messages.success(request, "You have been signed out")
    return redirect("base:login")
