from decimal import Decimal

from django import forms

from base.forms import ApiForm, api_choices, as_id, initial_from_record, record_id

INDENT_PAYMENT_METHOD_CHOICES = [
    ("cash", "Cash"),
    ("bank", "Bank Transfer"),
    ("online", "Online Payment"),
    ("adjustment", "Adjustment"),
]

INDENT_STATUS_CHOICES = [
    ("pending", "Pending"),
    ("issued", "Issued"),
    ("partially_returned", "Partially Returned"),
    ("returned", "Returned"),
    ("cancelled", "Cancelled"),
]

PAYMENT_STATUS_CHOICES = [
    ("pending", "Pending"),
    ("partial", "Partial"),
    ("paid", "Paid"),
]

CONDITION_CHOICES = [
    ("good", "Good"),
    ("fair", "Fair"),
    ("poor", "Poor"),
    ("damaged", "Damaged"),
    ("lost", "Lost"),
]


def indent_totals(textbooks, quantities, paid_amount=0):
    """``(total, balance)`` for the chosen book quantities.

    ``quantities`` maps textbook id to the number of copies.
    """
    prices = {record_id(book): Decimal(str(book.get("price") or 0)) for book in textbooks}
    total = sum(
        (prices.get(book_id, Decimal(0)) * int(quantity or 0) for book_id, quantity in quantities.items()),
        Decimal(0),
    )
    return total, total - Decimal(str(paid_amount or 0))


class TextBookForm(ApiForm):
    bookCode = forms.CharField(
        label="Book code",
        max_length=50,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    title = forms.CharField(max_length=200, widget=forms.TextInput(attrs={"class": "form-control"}))
    subject = forms.CharField(max_length=100, widget=forms.TextInput(attrs={"class": "form-control"}))
    classId = forms.ChoiceField(label="Class", widget=forms.Select(attrs={"class": "form-select"}))
    publisher = forms.CharField(max_length=200, widget=forms.TextInput(attrs={"class": "form-control"}))
    price = forms.DecimalField(
        min_value=0,
        decimal_places=2,
        widget=forms.NumberInput(attrs={"class": "form-control"}),
    )
    quantity = forms.IntegerField(min_value=0, widget=forms.NumberInput(attrs={"class": "form-control"}))
    academicYear = forms.CharField(
        label="Academic year",
        max_length=20,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "2024-2025"}),
    )

    def __init__(self, *args, classes=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["classId"].choices = api_choices(classes)
        self._class_names = {record_id(c): c.get("name", "") for c in classes}

    def to_payload(self):
        payload = super().to_payload()
        payload["class"] = self._class_names.get(payload.get("classId"), "")
        return payload

    @classmethod
    def from_record(cls, record, *args, **kwargs):
        initial = initial_from_record(record, cls.base_fields)
        initial["classId"] = as_id(record.get("classId"))
        kwargs["initial"] = initial
        return cls(*args, **kwargs)


class StockAdjustmentForm(forms.Form):
    adjustment = forms.IntegerField(
        help_text="Positive to add copies, negative to remove",
        widget=forms.NumberInput(attrs={"class": "form-control"}),
    )
    reason = forms.CharField(max_length=200, widget=forms.TextInput(attrs={"class": "form-control"}))

    def __init__(self, *args, textbook=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.textbook = textbook or {}

    def clean_adjustment(self):
        adjustment = self.cleaned_data["adjustment"]
        if adjustment == 0:
            raise forms.ValidationError("Enter a non-zero adjustment")
        available = self.textbook.get("available")
        if available is not None and adjustment < 0 and -adjustment > available:
            raise forms.ValidationError(f"Only {available} copies are available to remove")
        return adjustment


class IndentForm(forms.Form):
    """Issue textbooks to a student; one quantity field per available book"""

    studentId = forms.ChoiceField(label="Student", widget=forms.Select(attrs={"class": "form-select"}))
    paymentMethod = forms.ChoiceField(
        label="Payment method",
        choices=INDENT_PAYMENT_METHOD_CHOICES,
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    paidAmount = forms.DecimalField(
        label="Paid amount",
        min_value=0,
        decimal_places=2,
        required=False,
        initial=0,
        widget=forms.NumberInput(attrs={"class": "form-control"}),
    )
    expectedReturnDate = forms.DateField(
        label="Expected return date",
        required=False,
        widget=forms.DateInput(attrs={"class": "form-control", "type": "date"}),
    )
    remarks = forms.CharField(
        max_length=500,
        required=False,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}),
    )

    def __init__(self, *args, students=(), textbooks=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.textbooks = textbooks
        self.fields["studentId"].choices = api_choices(
            students, label=lambda s: f"{s.get('name', '')} ({s.get('admissionNo', '')})"
        )
        for book in textbooks:
            self.fields[self.quantity_field(book)] = forms.IntegerField(
                label=f"{book.get('title', '')} ({book.get('bookCode', '')}) - {book.get('available', 0)} available",
                min_value=0,
                max_value=book.get("available") or 0,
                required=False,
                initial=0,
                widget=forms.NumberInput(attrs={"class": "form-control form-control-sm"}),
            )

    @staticmethod
    def quantity_field(book):
        return f"qty_{record_id(book)}"

    def quantities(self):
        data = self.cleaned_data if hasattr(self, "cleaned_data") else {}
        return {
            record_id(book): data.get(self.quantity_field(book)) or 0
            for book in self.textbooks
            if data.get(self.quantity_field(book))
        }

    def totals(self):
        paid = (self.cleaned_data if hasattr(self, "cleaned_data") else {}).get("paidAmount") or 0
        return indent_totals(self.textbooks, self.quantities(), paid)

    def clean(self):
        cleaned_data = super().clean()
        if not self.quantities():
            raise forms.ValidationError("Select at least one textbook")
        _, balance = self.totals()
        if balance < 0:
            self.add_error("paidAmount", "Paid amount cannot exceed the total")
        return cleaned_data

    def to_payload(self):
        data = self.cleaned_data
        payload = {
            "studentId": data["studentId"],
            "items": [{"textbookId": pk, "quantity": qty} for pk, qty in self.quantities().items()],
            "paymentMethod": data["paymentMethod"],
            "paidAmount": float(data.get("paidAmount") or 0),
        }
        if data.get("expectedReturnDate"):
            payload["expectedReturnDate"] = data["expectedReturnDate"].isoformat()
        if data.get("remarks"):
            payload["remarks"] = data["remarks"]
        return payload


class CancelIndentForm(forms.Form):
    reason = forms.CharField(max_length=300, widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}))


class ReturnTextbooksForm(forms.Form):
    """Returned quantity and condition for each outstanding item of an indent"""

    def __init__(self, *args, indent=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.outstanding = []
        for item in (indent or {}).get("items") or []:
            remaining = (item.get("quantity") or 0) - (item.get("returnedQuantity") or 0)
            if remaining <= 0:
                continue
            pk = record_id(item)
            self.outstanding.append(item)
            self.fields[f"returned_{pk}"] = forms.IntegerField(
                label=f"{item.get('title', '')} ({remaining} outstanding)",
                min_value=0,
                max_value=remaining,
                required=False,
                initial=0,
                widget=forms.NumberInput(attrs={"class": "form-control form-control-sm"}),
            )
            self.fields[f"condition_{pk}"] = forms.ChoiceField(
                label="Condition",
                choices=CONDITION_CHOICES,
                initial="good",
                widget=forms.Select(attrs={"class": "form-select form-select-sm"}),
            )
            self.fields[f"remarks_{pk}"] = forms.CharField(
                label="Remarks",
                max_length=200,
                required=False,
                widget=forms.TextInput(attrs={"class": "form-control form-control-sm"}),
            )

    def clean(self):
        cleaned_data = super().clean()
        if not self.items():
            raise forms.ValidationError("Enter a returned quantity for at least one book")
        return cleaned_data

    def items(self):
        data = getattr(self, "cleaned_data", {})
        items = []
        for item in self.outstanding:
            pk = record_id(item)
            returned = data.get(f"returned_{pk}") or 0
            if returned <= 0:
                continue
            entry = {
                "itemId": pk,
                "returnedQuantity": returned,
                "condition": data.get(f"condition_{pk}") or "good",
            }
            if data.get(f"remarks_{pk}"):
                entry["remarks"] = data[f"remarks_{pk}"]
            items.append(entry)
        return items
