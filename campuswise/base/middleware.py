import logging

from django.contrib import messages
from django.shortcuts import redirect

from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class ApiAuthenticationMiddleware:
    """Sign the user out when the API rejects their token."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not isinstance(exception, AuthenticationError):
            return None
        logger.info("API rejected session token for %s", request.path)
        request.session.flush()
        messages.error(request, "Authentication error: your session has expired, please sign in again.")
        return redirect("base:login")
