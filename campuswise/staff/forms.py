from django import forms

from base.forms import STATUS_CHOICES, ApiForm


def name_choices(records):
    return [("", "---------")] + [(r.get("name"), r.get("name")) for r in records if r.get("name")]


class StaffForm(ApiForm):
    employeeId = forms.CharField(
        label="Employee ID",
        max_length=50,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    name = forms.CharField(max_length=200, widget=forms.TextInput(attrs={"class": "form-control"}))
    designation = forms.ChoiceField(widget=forms.Select(attrs={"class": "form-select"}))
    department = forms.ChoiceField(widget=forms.Select(attrs={"class": "form-select"}))
    dateOfJoining = forms.DateField(
        label="Date of joining",
        widget=forms.DateInput(attrs={"class": "form-control", "type": "date"}),
    )
    phone = forms.CharField(max_length=20, widget=forms.TextInput(attrs={"class": "form-control"}))
    email = forms.EmailField(widget=forms.EmailInput(attrs={"class": "form-control"}))
    address = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}),
    )
    salary = forms.DecimalField(
        min_value=0,
        decimal_places=2,
        widget=forms.NumberInput(attrs={"class": "form-control"}),
    )
    status = forms.ChoiceField(
        choices=STATUS_CHOICES,
        initial="active",
        widget=forms.Select(attrs={"class": "form-select"}),
    )

    def __init__(self, *args, designations=(), departments=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["designation"].choices = name_choices(designations)
        self.fields["department"].choices = name_choices(departments)
