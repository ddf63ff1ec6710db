from django import forms

from base.forms import ApiForm


class ReceiptConfigForm(ApiForm):
    """Letterhead printed on receipts, vouchers and certificates"""

    schoolName = forms.CharField(
        label="School name",
        max_length=200,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    address = forms.CharField(widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}))
    phone = forms.CharField(max_length=20, widget=forms.TextInput(attrs={"class": "form-control"}))
    email = forms.EmailField(widget=forms.EmailInput(attrs={"class": "form-control"}))
    website = forms.URLField(required=False, widget=forms.URLInput(attrs={"class": "form-control"}))
    principalName = forms.CharField(
        label="Principal name",
        max_length=200,
        required=False,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    taxNumber = forms.CharField(
        label="Tax number",
        max_length=50,
        required=False,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    registrationNumber = forms.CharField(
        label="Registration number",
        max_length=50,
        required=False,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    footerText = forms.CharField(
        label="Footer text",
        max_length=300,
        required=False,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}),
    )
    isActive = forms.BooleanField(label="Active", required=False, initial=True)


class LogoUploadForm(forms.Form):
    logo = forms.ImageField(widget=forms.ClearableFileInput(attrs={"class": "form-control", "accept": "image/*"}))

    def clean_logo(self):
        logo = self.cleaned_data["logo"]
        if logo.size > 5 * 1024 * 1024:
            raise forms.ValidationError("Logo must be smaller than 5 MB")
        return logo
