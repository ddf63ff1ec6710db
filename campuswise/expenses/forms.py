from django import forms

from base.forms import STATUS_CHOICES, ApiForm

EXPENSE_PAYMENT_METHOD_CHOICES = [
    ("cash", "Cash"),
    ("bank", "Bank Transfer"),
]


class ExpenseForm(ApiForm):
    date = forms.DateField(widget=forms.DateInput(attrs={"class": "form-control", "type": "date"}))
    category = forms.ChoiceField(widget=forms.Select(attrs={"class": "form-select"}))
    description = forms.CharField(
        max_length=500,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}),
    )
    amount = forms.DecimalField(
        min_value=0,
        decimal_places=2,
        widget=forms.NumberInput(attrs={"class": "form-control"}),
    )
    paymentMethod = forms.ChoiceField(
        label="Payment method",
        choices=EXPENSE_PAYMENT_METHOD_CHOICES,
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    approvedBy = forms.CharField(
        label="Approved by",
        max_length=200,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    remarks = forms.CharField(
        max_length=500,
        required=False,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}),
    )

    def __init__(self, *args, categories=(), **kwargs):
        super().__init__(*args, **kwargs)
        names = [c.get("name") for c in categories if c.get("name")]
        current = self.initial.get("category")
        if current and current not in names:
            names.append(current)
        self.fields["category"].choices = [("", "---------")] + [(name, name) for name in names]


class CategoryForm(ApiForm):
    """Expense and income categories share the same fields"""

    name = forms.CharField(max_length=100, widget=forms.TextInput(attrs={"class": "form-control"}))
    code = forms.CharField(
        max_length=20,
        required=False,
        widget=forms.TextInput(attrs={"class": "form-control", "style": "text-transform: uppercase"}),
    )
    description = forms.CharField(
        max_length=300,
        required=False,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}),
    )
    status = forms.ChoiceField(
        choices=STATUS_CHOICES,
        initial="active",
        widget=forms.Select(attrs={"class": "form-select"}),
    )

    def clean_code(self):
        return self.cleaned_data["code"].strip().upper()
