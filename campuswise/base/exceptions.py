class ApiError(Exception):
    """Raised when the CampusWise API rejects a request or cannot be reached."""

    def __init__(self, message=None, status=None, details=None):
        super().__init__(message or "")
        self.message = message
        self.status = status
        self.details = details

    def __str__(self):
        return self.message or ""

    def describe(self, fallback):
        """The server's message, or ``fallback`` when it sent none."""
        return self.message or fallback

    @classmethod
    def from_payload(cls, payload, status=None, default=None):
        """Build an error from an API error envelope.

        The envelope's ``message`` is shown verbatim; an ``error`` field, when
        present, is appended after a colon.
        """
        payload = payload if isinstance(payload, dict) else {}
        message = payload.get("message") or default
        details = payload.get("error")
        if message and details and isinstance(details, str):
            message = f"{message}: {details}"
        error_class = AuthenticationError if status == 401 else cls
        return error_class(message, status=status, details=payload.get("errors"))


class AuthenticationError(ApiError):
    """The API token is missing, expired or was rejected (HTTP 401)."""


class FormSubmissionError(ValueError):
    """A form cannot be submitted; nothing was sent to the API."""
