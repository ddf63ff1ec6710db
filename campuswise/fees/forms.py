from django import forms

from base.forms import PAYMENT_METHOD_CHOICES, ApiForm, api_choices, record_id

from .calculator import DISTANCE_GROUP_CHOICES, FEE_TYPE_CHOICES, TRANSPORT, structure_amount


class FeeStructureForm(ApiForm):
    """Form for creating and editing a class fee structure"""

    title = forms.CharField(
        max_length=200,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "e.g. Term 1 Tuition"}),
    )
    feeType = forms.ChoiceField(
        label="Fee type",
        choices=FEE_TYPE_CHOICES,
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    classId = forms.ChoiceField(label="Class", widget=forms.Select(attrs={"class": "form-select"}))
    amount = forms.DecimalField(
        min_value=0,
        decimal_places=2,
        widget=forms.NumberInput(attrs={"class": "form-control", "step": "1"}),
    )
    staffDiscountPercent = forms.DecimalField(
        label="Staff discount (%)",
        min_value=0,
        max_value=100,
        required=False,
        initial=0,
        widget=forms.NumberInput(attrs={"class": "form-control"}),
    )
    transportDistanceGroup = forms.ChoiceField(
        label="Distance group",
        choices=[("", "---------")] + DISTANCE_GROUP_CHOICES,
        required=False,
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    distanceRange = forms.CharField(
        label="Distance range",
        max_length=50,
        required=False,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "e.g. 0-5 KM"}),
    )
    academicYear = forms.CharField(
        label="Academic year",
        max_length=20,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "2024-2025"}),
    )
    isActive = forms.BooleanField(label="Active", required=False, initial=True)

    def __init__(self, *args, classes=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["classId"].choices = api_choices(classes)
        self._class_names = {record_id(c): c.get("name", "") for c in classes}

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get("feeType") == TRANSPORT:
            if not cleaned_data.get("transportDistanceGroup"):
                self.add_error("transportDistanceGroup", "Transport fees need a distance group")
        else:
            cleaned_data["transportDistanceGroup"] = ""
            cleaned_data["distanceRange"] = ""
        return cleaned_data

    def to_payload(self):
        payload = super().to_payload()
        payload["className"] = self._class_names.get(payload.get("classId"), "")
        payload["staffDiscountPercent"] = payload.get("staffDiscountPercent") or 0
        return payload


class StudentPickForm(forms.Form):
    student = forms.ChoiceField(widget=forms.Select(attrs={"class": "form-select", "onchange": "this.form.submit()"}))

    def __init__(self, *args, students=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["student"].choices = api_choices(
            students,
            label=lambda s: f"{s.get('name', '')} ({s.get('admissionNo', '')}) - {s.get('class', '')}",
            blank="Select a student",
        )


class CollectFeeForm(forms.Form):
    """Fee items to collect from one student; amounts come from the calculator."""

    fee_structures = forms.MultipleChoiceField(
        label="Fee items",
        required=False,
        widget=forms.CheckboxSelectMultiple,
    )
    include_transport = forms.BooleanField(label="Collect transport fee", required=False)
    distance_group = forms.ChoiceField(
        label="Distance group",
        required=False,
        widget=forms.RadioSelect,
    )
    paymentMethod = forms.ChoiceField(
        label="Payment method",
        choices=PAYMENT_METHOD_CHOICES,
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    remarks = forms.CharField(
        required=False,
        max_length=500,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}),
    )

    def __init__(self, *args, student=None, structures=(), **kwargs):
        super().__init__(*args, **kwargs)
        is_staff_child = bool((student or {}).get("isStaffChild"))
        self.fields["fee_structures"].choices = [
            (record_id(s), f"{s.get('title')} ({s.get('feeType', '').title()}) - {structure_amount(s, is_staff_child)}")
            for s in structures
            if s.get("feeType") != TRANSPORT
        ]
        labels = dict(DISTANCE_GROUP_CHOICES)
        self.fields["distance_group"].choices = [
            (
                s["transportDistanceGroup"],
                f"{labels.get(s['transportDistanceGroup'], s['transportDistanceGroup'])}"
                f"{' (' + s['distanceRange'] + ')' if s.get('distanceRange') else ''}"
                f" - {structure_amount(s, is_staff_child)}",
            )
            for s in structures
            if s.get("feeType") == TRANSPORT and s.get("transportDistanceGroup")
        ]
        if not self.fields["distance_group"].choices:
            del self.fields["include_transport"]
            del self.fields["distance_group"]


FEE_STATUS_CHOICES = [
    ("paid", "Paid"),
    ("partial", "Partial"),
    ("pending", "Pending"),
]
