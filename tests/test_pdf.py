from unittest import mock

import pytest
from django.urls import reverse

from fees.pdf_utils import generate_fee_receipt_pdf, receipt_items, receipt_total
from receipts.pdf_utils import logo_url, receipt_header

RECEIPT = {
    "receiptNo": "RCP-42",
    "paymentDate": "2024-06-01T10:00:00.000Z",
    "studentName": "Ravi Kumar",
    "class": "Grade 5",
    "paymentMethod": "cash",
    "feeItems": [
        {"title": "Tuition", "feeType": "tuition", "amount": 900},
        {"title": "Exam", "feeType": "exam", "amount": 200},
    ],
}


@pytest.fixture
def no_wkhtmltopdf():
    with mock.patch("receipts.pdf_utils.pdfkit.from_string", side_effect=OSError("No wkhtmltopdf executable found")):
        yield


def test_receipt_items_fall_back_to_single_fee():
    assert receipt_items({"feeType": "exam", "amount": 300}) == [{"title": "Exam", "feeType": "exam", "amount": 300}]
    assert receipt_total(RECEIPT) == 1100
    assert receipt_total(dict(RECEIPT, totalAmount=1000)) == 1000


def test_header_defaults_to_school_name(settings):
    settings.SCHOOL_NAME = "Green Valley School"
    assert receipt_header(None)["schoolName"] == "Green Valley School"
    assert receipt_header({"schoolName": "Hill Top"})["schoolName"] == "Hill Top"


def test_logo_url_is_made_absolute(settings):
    settings.API_BASE_URL = "http://api.test/api"
    assert logo_url("/uploads/logo.png") == "http://api.test/uploads/logo.png"
    assert logo_url("https://cdn.test/logo.png") == "https://cdn.test/logo.png"


def test_reportlab_fallback_when_wkhtmltopdf_is_missing(no_wkhtmltopdf):
    buffer = generate_fee_receipt_pdf(RECEIPT)
    assert buffer.getvalue().startswith(b"%PDF")


def test_pdfkit_output_is_used_when_available():
    with mock.patch("receipts.pdf_utils.pdfkit.from_string", return_value=b"%PDF-1.4 html") as from_string:
        buffer = generate_fee_receipt_pdf(RECEIPT)
    assert buffer.getvalue() == b"%PDF-1.4 html"
    html = from_string.call_args[0][0]
    assert "RCP-42" in html


def test_fee_receipt_view_downloads_pdf(api, admin_client, no_wkhtmltopdf):
    api.add("GET", "/fees/p1/receipt-data", {"success": True, "data": RECEIPT})
    response = admin_client.get(reverse("fees:fee_receipt", args=["p1"]))
    assert response["Content-Type"] == "application/pdf"
    assert response["Content-Disposition"] == 'attachment; filename="receipt_RCP-42.pdf"'
