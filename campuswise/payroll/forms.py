import calendar
from decimal import Decimal

from django import forms
from django.utils import timezone

from base.forms import ApiForm, api_choices, record_id

MONTH_CHOICES = [(name, name) for name in calendar.month_name[1:]]

PAYROLL_PAYMENT_METHOD_CHOICES = [
    ("bank", "Bank Transfer"),
    ("cash", "Cash"),
]

PAYROLL_STATUS_CHOICES = [
    ("pending", "Pending"),
    ("paid", "Paid"),
]


def net_salary(basic_salary, allowances=0, deductions=0):
    """Basic salary plus allowances less deductions."""
    return (
        Decimal(str(basic_salary or 0))
        + Decimal(str(allowances or 0))
        - Decimal(str(deductions or 0))
    )


class PayrollForm(ApiForm):
    staffId = forms.ChoiceField(label="Staff member", widget=forms.Select(attrs={"class": "form-select"}))
    month = forms.ChoiceField(choices=MONTH_CHOICES, widget=forms.Select(attrs={"class": "form-select"}))
    year = forms.IntegerField(
        min_value=2000,
        max_value=2100,
        widget=forms.NumberInput(attrs={"class": "form-control"}),
    )
    allowances = forms.DecimalField(
        min_value=0,
        decimal_places=2,
        required=False,
        initial=0,
        widget=forms.NumberInput(attrs={"class": "form-control"}),
    )
    deductions = forms.DecimalField(
        min_value=0,
        decimal_places=2,
        required=False,
        initial=0,
        widget=forms.NumberInput(attrs={"class": "form-control"}),
    )
    paymentMethod = forms.ChoiceField(
        label="Payment method",
        choices=PAYROLL_PAYMENT_METHOD_CHOICES,
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    status = forms.ChoiceField(
        choices=PAYROLL_STATUS_CHOICES,
        initial="pending",
        widget=forms.Select(attrs={"class": "form-select"}),
    )

    def __init__(self, *args, staff=(), **kwargs):
        kwargs.setdefault("initial", {})
        kwargs["initial"].setdefault("year", timezone.localdate().year)
        kwargs["initial"].setdefault("month", calendar.month_name[timezone.localdate().month])
        super().__init__(*args, **kwargs)
        self.staff = {record_id(s): s for s in staff}
        self.fields["staffId"].choices = api_choices(
            staff, label=lambda s: f"{s.get('name', '')} ({s.get('employeeId', '')})"
        )

    def basic_salary(self):
        staff_id = self.data.get("staffId") if self.is_bound else self.initial.get("staffId")
        return (self.staff.get(staff_id) or {}).get("salary") or 0

    def net_salary(self):
        """Net salary preview; the API computes the stored value the same way."""
        if self.is_bound:
            values = self.cleaned_data if hasattr(self, "cleaned_data") else self.data
        else:
            values = self.initial
        try:
            return net_salary(self.basic_salary(), values.get("allowances"), values.get("deductions"))
        except ArithmeticError:
            return None

    def to_payload(self):
        payload = super().to_payload()
        payload["allowances"] = payload.get("allowances") or 0
        payload["deductions"] = payload.get("deductions") or 0
        return payload
