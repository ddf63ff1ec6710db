from functools import wraps
from urllib.parse import urlencode

from django.http import HttpResponse
from django.shortcuts import redirect
from django.urls import reverse

from .access import user_has_access
from .api_client import TOKEN_SESSION_KEY, USER_SESSION_KEY


def get_current_user(request):
    return request.session.get(USER_SESSION_KEY)


def login_required(view_func):
    """Send anonymous visitors to the login page, keeping where they were going."""

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.session.get(TOKEN_SESSION_KEY):
            query = urlencode({"next": request.get_full_path()})
            return redirect(f"{reverse('base:login')}?{query}")
        return view_func(request, *args, **kwargs)

    return wrapper


def module_permission_required(module=None, action="read", roles=None):
    """Require a signed-in user allowed to ``action`` on ``module``.

    ``roles`` further limits the page to the listed roles.
    """

    def decorator(view_func):
        @wraps(view_func)
        @login_required
        def wrapper(request, *args, **kwargs):
            user = get_current_user(request)
            if not user_has_access(user, module=module, action=action, roles=roles):
                return HttpResponse("Access denied", status=403)
            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator
