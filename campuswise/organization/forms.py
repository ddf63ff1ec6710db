from django import forms
from django.forms import formset_factory

from base.forms import STATUS_CHOICES, ApiForm, api_choices, as_id, initial_from_record, record_id
from fees.calculator import DISTANCE_GROUP_CHOICES


def _status_field():
    return forms.ChoiceField(
        choices=STATUS_CHOICES,
        initial="active",
        widget=forms.Select(attrs={"class": "form-select"}),
    )


def _text(max_length=200, required=True, **attrs):
    return forms.CharField(
        max_length=max_length,
        required=required,
        widget=forms.TextInput(attrs={"class": "form-control", **attrs}),
    )


def _description():
    return forms.CharField(
        max_length=500,
        required=False,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}),
    )


class BranchForm(ApiForm):
    name = _text()
    code = _text(max_length=20, style="text-transform: uppercase")
    address = forms.CharField(widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}))
    phone = _text(max_length=20)
    email = forms.EmailField(widget=forms.EmailInput(attrs={"class": "form-control"}))
    principalName = _text(required=False)
    establishedDate = forms.DateField(
        label="Established",
        required=False,
        widget=forms.DateInput(attrs={"class": "form-control", "type": "date"}),
    )
    status = _status_field()

    def clean_code(self):
        return self.cleaned_data["code"].strip().upper()


class DepartmentForm(ApiForm):
    name = _text()
    code = _text(max_length=20, required=False, style="text-transform: uppercase")
    description = _description()
    headOfDepartment = _text(required=False)
    status = _status_field()


class DesignationForm(ApiForm):
    name = _text()
    department = forms.ChoiceField(required=False, widget=forms.Select(attrs={"class": "form-select"}))
    description = _description()
    status = _status_field()

    def __init__(self, *args, departments=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["department"].choices = [("", "---------")] + [
            (d.get("name"), d.get("name")) for d in departments if d.get("name")
        ]


class ClassForm(ApiForm):
    name = _text(max_length=50, placeholder="e.g. Grade 5")
    description = _description()
    academicYear = _text(max_length=20, placeholder="2024-2025")
    status = _status_field()


class DivisionForm(ApiForm):
    classId = forms.ChoiceField(label="Class", widget=forms.Select(attrs={"class": "form-select"}))
    name = _text(max_length=20, placeholder="e.g. A")
    capacity = forms.IntegerField(min_value=1, initial=40, widget=forms.NumberInput(attrs={"class": "form-control"}))
    classTeacherId = forms.ChoiceField(
        label="Class teacher",
        required=False,
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    status = _status_field()

    def __init__(self, *args, classes=(), teachers=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["classId"].choices = api_choices(classes)
        self.fields["classTeacherId"].choices = api_choices(teachers)
        self._class_names = {record_id(c): c.get("name", "") for c in classes}
        self._teacher_names = {record_id(t): t.get("name", "") for t in teachers}

    def to_payload(self):
        payload = super().to_payload()
        payload["className"] = self._class_names.get(payload.get("classId"), "")
        if payload.get("classTeacherId"):
            payload["classTeacherName"] = self._teacher_names.get(payload["classTeacherId"], "")
        elif self.editing:
            payload["classTeacherName"] = None
        return payload

    @classmethod
    def from_record(cls, record, *args, **kwargs):
        initial = initial_from_record(record, cls.base_fields)
        initial["classId"] = as_id(record.get("classId"))
        initial["classTeacherId"] = as_id(record.get("classTeacherId"))
        kwargs["initial"] = initial
        return cls(*args, **kwargs)


class VehicleForm(forms.Form):
    vehicleNumber = _text(max_length=20, required=False, placeholder="Vehicle number")
    driverName = _text(required=False, placeholder="Driver name")
    driverPhone = _text(max_length=20, required=False, placeholder="Driver phone")

    def clean(self):
        cleaned_data = super().clean()
        if (cleaned_data.get("driverName") or cleaned_data.get("driverPhone")) and not cleaned_data.get(
            "vehicleNumber"
        ):
            self.add_error("vehicleNumber", "Enter the vehicle number")
        return cleaned_data


VehicleFormSet = formset_factory(VehicleForm, extra=1)


class TransportRouteForm(ApiForm):
    """Route details plus one fee row per class.

    Each class row has a flat amount and staff discount and, when distance
    groups are used, an amount per group. Group distance ranges are shared by
    all classes on the route.
    """

    routeName = _text()
    routeCode = _text(max_length=20, style="text-transform: uppercase")
    description = _description()
    useDistanceGroups = forms.BooleanField(label="Charge by distance group", required=False)
    status = _status_field()

    def __init__(self, *args, classes=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.classes = classes
        for value, label in DISTANCE_GROUP_CHOICES:
            self.fields[f"range_{value}"] = _text(max_length=50, required=False, placeholder="e.g. 0-5 KM")
            self.fields[f"range_{value}"].label = f"{label} distance"
        for cls in classes:
            pk = record_id(cls)
            name = cls.get("name", "")
            self.fields[f"amount_{pk}"] = forms.DecimalField(
                label=f"{name} fee",
                min_value=0,
                decimal_places=2,
                required=False,
                widget=forms.NumberInput(attrs={"class": "form-control form-control-sm"}),
            )
            self.fields[f"discount_{pk}"] = forms.DecimalField(
                label=f"{name} staff discount (%)",
                min_value=0,
                max_value=100,
                required=False,
                widget=forms.NumberInput(attrs={"class": "form-control form-control-sm"}),
            )
            for value, label in DISTANCE_GROUP_CHOICES:
                self.fields[f"{value}_{pk}"] = forms.DecimalField(
                    label=f"{name} {label}",
                    min_value=0,
                    decimal_places=2,
                    required=False,
                    widget=forms.NumberInput(attrs={"class": "form-control form-control-sm"}),
                )

    def clean_routeCode(self):
        return self.cleaned_data["routeCode"].strip().upper()

    def class_fees(self):
        data = self.cleaned_data
        use_groups = data.get("useDistanceGroups")
        fees = []
        for cls in self.classes:
            pk = record_id(cls)
            amount = data.get(f"amount_{pk}")
            group_fees = []
            if use_groups:
                for value, _ in DISTANCE_GROUP_CHOICES:
                    group_amount = data.get(f"{value}_{pk}")
                    if group_amount is not None:
                        group_fees.append(
                            {
                                "groupName": value,
                                "distanceRange": data.get(f"range_{value}") or "",
                                "amount": float(group_amount),
                            }
                        )
            if amount is None and not group_fees:
                continue
            entry = {
                "classId": pk,
                "className": cls.get("name", ""),
                "amount": float(amount or 0),
                "staffDiscount": float(data.get(f"discount_{pk}") or 0),
            }
            if group_fees:
                entry["distanceGroupFees"] = group_fees
            fees.append(entry)
        return fees

    def clean(self):
        cleaned_data = super().clean()
        if not self.errors and not self.class_fees():
            raise forms.ValidationError("Enter the fee for at least one class")
        return cleaned_data

    def to_payload(self):
        data = self.cleaned_data
        return {
            "routeName": data["routeName"],
            "routeCode": data["routeCode"],
            "description": data.get("description", ""),
            "useDistanceGroups": bool(data.get("useDistanceGroups")),
            "status": data["status"],
            "classFees": self.class_fees(),
        }

    @classmethod
    def from_record(cls, record, *args, **kwargs):
        initial = initial_from_record(record, ("routeName", "routeCode", "description", "useDistanceGroups", "status"))
        for fee in record.get("classFees") or []:
            pk = as_id(fee.get("classId"))
            initial[f"amount_{pk}"] = fee.get("amount")
            initial[f"discount_{pk}"] = fee.get("staffDiscount")
            for group in fee.get("distanceGroupFees") or []:
                initial[f"{group.get('groupName')}_{pk}"] = group.get("amount")
                if group.get("distanceRange"):
                    initial[f"range_{group.get('groupName')}"] = group["distanceRange"]
        kwargs["initial"] = initial
        return cls(*args, **kwargs)

    def route_fields(self):
        return [self[name] for name in ("routeName", "routeCode", "description", "status", "useDistanceGroups")]

    def range_fields(self):
        return [self[f"range_{value}"] for value, _ in DISTANCE_GROUP_CHOICES]

    def class_rows(self):
        """Bound fields per class for the fee table."""
        rows = []
        for cls in self.classes:
            pk = record_id(cls)
            rows.append(
                {
                    "name": cls.get("name", ""),
                    "amount": self[f"amount_{pk}"],
                    "discount": self[f"discount_{pk}"],
                    "groups": [self[f"{value}_{pk}"] for value, _ in DISTANCE_GROUP_CHOICES],
                }
            )
        return rows
