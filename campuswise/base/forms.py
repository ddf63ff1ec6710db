from datetime import date, datetime
from decimal import Decimal

from django import forms

STATUS_CHOICES = [
    ("active", "Active"),
    ("inactive", "Inactive"),
]

PAYMENT_METHOD_CHOICES = [
    ("cash", "Cash"),
    ("bank", "Bank Transfer"),
    ("online", "Online Payment"),
]


class LoginForm(forms.Form):
    mobile = forms.CharField(
        max_length=20,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "Mobile number"}),
    )
    pin = forms.CharField(
        min_length=4,
        max_length=20,
        widget=forms.PasswordInput(attrs={"class": "form-control", "placeholder": "PIN"}),
    )


def record_id(record):
    """API records come back with either ``_id`` or ``id``."""
    if not record:
        return ""
    return str(record.get("_id") or record.get("id") or "")


def as_id(value):
    """Id of a reference that may be populated (a dict) or a bare id."""
    if isinstance(value, dict):
        return record_id(value)
    return str(value or "")


def api_choices(records, label="name", blank="---------"):
    """Select options from a list of API records."""
    choices = [("", blank)] if blank is not None else []
    for record in records or []:
        text = label(record) if callable(label) else record.get(label, "")
        choices.append((record_id(record), text))
    return choices


def to_payload(cleaned_data, exclude=(), clear_blank=False):
    """JSON-safe request body from a form's cleaned data.

    Dates become ISO strings and decimals become numbers. Empty optional values
    are left out, or sent as ``None`` when ``clear_blank`` is set so an update
    clears them on the stored record.
    """
    payload = {}
    for key, value in cleaned_data.items():
        if key in exclude:
            continue
        if value is None or value == "":
            if clear_blank:
                payload[key] = None
            continue
        if isinstance(value, (date, datetime)):
            value = value.isoformat()
        elif isinstance(value, Decimal):
            value = int(value) if value == value.to_integral_value() else float(value)
        payload[key] = value
    return payload


def initial_from_record(record, fields):
    """Form initial data from an API record; ISO timestamps are cut to dates."""
    initial = {}
    for name in fields:
        value = (record or {}).get(name)
        if isinstance(value, str) and len(value) > 10 and value[4:5] == "-" and "T" in value:
            value = value[:10]
        if isinstance(value, dict):
            value = record_id(value)
        initial[name] = value
    return initial


class ApiForm(forms.Form):
    """Form whose field names match the API's camelCase record fields.

    ``editing`` marks a form that updates an existing record: blank optional
    fields are then sent as ``None`` instead of being left out.
    """

    exclude_from_payload = ()

    def __init__(self, *args, editing=False, **kwargs):
        super().__init__(*args, **kwargs)
        self.editing = editing

    def to_payload(self):
        return to_payload(self.cleaned_data, exclude=self.exclude_from_payload, clear_blank=self.editing)

    @classmethod
    def from_record(cls, record, *args, **kwargs):
        kwargs["initial"] = initial_from_record(record, cls.base_fields)
        kwargs.setdefault("editing", True)
        return cls(*args, **kwargs)
