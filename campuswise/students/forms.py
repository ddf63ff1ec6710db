from django import forms

from base.forms import STATUS_CHOICES, ApiForm, api_choices, as_id, initial_from_record, record_id

GENDER_CHOICES = [
    ("male", "Male"),
    ("female", "Female"),
]

TRANSPORT_CHOICES = [
    ("none", "None"),
    ("school", "School Transport"),
    ("own", "Own Transport"),
]


class StudentForm(ApiForm):
    """Form for student admission details"""

    admissionNo = forms.CharField(
        label="Admission number",
        max_length=50,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    name = forms.CharField(
        max_length=200,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "Enter student's full name"}),
    )
    class_ = forms.ChoiceField(label="Class", widget=forms.Select(attrs={"class": "form-select"}))
    section = forms.ChoiceField(label="Division/Section", widget=forms.Select(attrs={"class": "form-select"}))
    gender = forms.ChoiceField(choices=GENDER_CHOICES, widget=forms.Select(attrs={"class": "form-select"}))
    dateOfBirth = forms.DateField(
        label="Date of birth",
        widget=forms.DateInput(attrs={"class": "form-control", "type": "date"}),
    )
    dateOfAdmission = forms.DateField(
        label="Date of admission",
        required=False,
        widget=forms.DateInput(attrs={"class": "form-control", "type": "date"}),
    )
    guardianName = forms.CharField(
        label="Guardian name",
        max_length=200,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    guardianPhone = forms.CharField(
        label="Guardian phone",
        max_length=20,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    guardianEmail = forms.EmailField(
        label="Guardian email",
        required=False,
        widget=forms.EmailInput(attrs={"class": "form-control"}),
    )
    address = forms.CharField(widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}))
    transport = forms.ChoiceField(
        choices=TRANSPORT_CHOICES,
        initial="none",
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    transportRoute = forms.ChoiceField(
        label="Transport route",
        required=False,
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    status = forms.ChoiceField(
        choices=STATUS_CHOICES,
        initial="active",
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    isStaffChild = forms.BooleanField(label="Child of a staff member", required=False)

    def __init__(self, *args, classes=(), divisions=(), routes=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.divisions = divisions
        self.fields["class_"].choices = api_choices(classes)
        self.fields["section"].choices = [("", "---------")] + sorted(
            {(d.get("name"), d.get("name")) for d in divisions if d.get("name")}
        )
        self.fields["transportRoute"].choices = api_choices(
            routes, label=lambda r: f"{r.get('routeName', '')} ({r.get('routeCode', '')})"
        )

    def clean(self):
        cleaned_data = super().clean()
        class_id = cleaned_data.get("class_")
        section = cleaned_data.get("section")
        if class_id and section and self.divisions:
            valid = {d.get("name") for d in self.divisions if as_id(d.get("classId")) == class_id}
            if section not in valid:
                self.add_error("section", "Select a division of the chosen class")
        if cleaned_data.get("transport") == "school" and not cleaned_data.get("transportRoute"):
            self.add_error("transportRoute", "Select the route for school transport")
        if cleaned_data.get("transport") != "school":
            cleaned_data["transportRoute"] = ""
        return cleaned_data

    def to_payload(self):
        payload = super().to_payload()
        payload["class"] = payload.pop("class_")
        return payload

    @classmethod
    def from_record(cls, record, *args, **kwargs):
        initial = initial_from_record(record, cls.base_fields)
        initial["class_"] = as_id(record.get("classId")) or record.get("class")
        kwargs["initial"] = initial
        return cls(*args, **kwargs)


class PromoteStudentsForm(forms.Form):
    targetClassId = forms.ChoiceField(label="Target class", widget=forms.Select(attrs={"class": "form-select"}))
    targetDivisionId = forms.ChoiceField(
        label="Target division",
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    academicYear = forms.CharField(
        label="Academic year",
        max_length=20,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )

    def __init__(self, *args, classes=(), divisions=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.divisions = divisions
        self.fields["targetClassId"].choices = api_choices(classes, blank="Select class")
        self.fields["targetDivisionId"].choices = api_choices(
            divisions,
            label=lambda d: f"{d.get('className', '')} - {d.get('name', '')}",
            blank="Select division",
        )

    def clean(self):
        cleaned_data = super().clean()
        class_id = cleaned_data.get("targetClassId")
        division_id = cleaned_data.get("targetDivisionId")
        if class_id and division_id:
            division = next((d for d in self.divisions if record_id(d) == division_id), None)
            if division is not None and as_id(division.get("classId")) != class_id:
                self.add_error("targetDivisionId", "Select a division of the target class")
        return cleaned_data


class TransferCertificateForm(ApiForm):
    transferSchoolName = forms.CharField(
        label="Transferring to (school)",
        max_length=200,
        required=False,
        help_text="Leave blank to issue the certificate without a destination school",
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    transferDate = forms.DateField(
        label="Transfer date",
        widget=forms.DateInput(attrs={"class": "form-control", "type": "date"}),
    )
    reason = forms.CharField(
        max_length=300,
        required=False,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    remarks = forms.CharField(
        max_length=500,
        required=False,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}),
    )
