from django import forms

from base.access import (
    ACTIONS,
    PERMISSION_MODULES,
    ROLE_CHOICES,
    SUPER_ADMIN,
    matrix_from_permissions,
    permissions_from_matrix,
)
from base.forms import STATUS_CHOICES, ApiForm, api_choices, as_id, initial_from_record

PERMISSION_CHOICES = [(f"{module}:{action}", f"{module} {action}") for module in PERMISSION_MODULES for action in ACTIONS]

ACTIVITY_ACTION_CHOICES = [
    ("CREATE", "Create"),
    ("UPDATE", "Update"),
    ("DELETE", "Delete"),
    ("LOGIN", "Login"),
    ("LOGOUT", "Logout"),
    ("VIEW", "View"),
]


class UserForm(ApiForm):
    """User account with its role and module permission matrix.

    Only a super admin may create super admins or place a user in a branch;
    for everyone else the API assigns the creator's branch.
    """

    name = forms.CharField(max_length=100, widget=forms.TextInput(attrs={"class": "form-control"}))
    email = forms.EmailField(widget=forms.EmailInput(attrs={"class": "form-control"}))
    mobile = forms.CharField(max_length=20, widget=forms.TextInput(attrs={"class": "form-control"}))
    pin = forms.RegexField(
        regex=r"^\d{4}$",
        label="4-digit PIN",
        required=False,
        error_messages={"invalid": "PIN must be 4 digits"},
        widget=forms.PasswordInput(attrs={"class": "form-control", "inputmode": "numeric"}, render_value=False),
    )
    role = forms.ChoiceField(choices=ROLE_CHOICES, widget=forms.Select(attrs={"class": "form-select"}))
    branchId = forms.ChoiceField(label="Branch", required=False, widget=forms.Select(attrs={"class": "form-select"}))
    status = forms.ChoiceField(
        choices=STATUS_CHOICES,
        initial="active",
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    permissions = forms.MultipleChoiceField(
        choices=PERMISSION_CHOICES,
        required=False,
        widget=forms.CheckboxSelectMultiple,
    )

    def __init__(self, *args, current_user=None, branches=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.is_super_admin = (current_user or {}).get("role") == SUPER_ADMIN
        if self.is_super_admin:
            self.fields["branchId"].choices = api_choices(branches)
        else:
            del self.fields["branchId"]
            self.fields["role"].choices = [c for c in ROLE_CHOICES if c[0] != SUPER_ADMIN]
        if self.editing:
            self.fields["pin"].help_text = "Leave blank to keep the current PIN"

    def clean(self):
        cleaned_data = super().clean()
        if not self.editing and not cleaned_data.get("pin") and "pin" not in self.errors:
            self.add_error("pin", "PIN is required")
        if self.is_super_admin and cleaned_data.get("role") not in (None, SUPER_ADMIN) and not cleaned_data.get("branchId"):
            self.add_error("branchId", "Please select a branch for this user")
        return cleaned_data

    def to_payload(self):
        payload = super().to_payload()
        payload["permissions"] = permissions_from_matrix(self.cleaned_data.get("permissions") or [])
        if not payload.get("pin"):
            payload.pop("pin", None)
        if payload.get("role") == SUPER_ADMIN:
            payload.pop("branchId", None)
        return payload

    def permission_rows(self):
        """One row per module with the checkbox state of each action."""
        selected = set(self["permissions"].value() or [])
        return [
            {
                "module": module,
                "actions": [
                    {"value": f"{module}:{action}", "label": action, "checked": f"{module}:{action}" in selected}
                    for action in ACTIONS
                ],
            }
            for module in PERMISSION_MODULES
        ]

    @classmethod
    def from_record(cls, record, *args, **kwargs):
        initial = initial_from_record(record, ("name", "email", "mobile", "role", "status"))
        initial["branchId"] = as_id(record.get("branchId"))
        initial["permissions"] = matrix_from_permissions(record.get("permissions"))
        kwargs["initial"] = initial
        kwargs.setdefault("editing", True)
        return cls(*args, **kwargs)
