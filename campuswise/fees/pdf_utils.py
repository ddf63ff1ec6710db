from base.templatetags.base_tags import api_date, label
from receipts.pdf_utils import build_document, html_to_pdf, money, receipt_header


def receipt_items(receipt):
    """Fee lines of a receipt; older payments carry a single feeType/amount."""
    items = receipt.get("feeItems") or []
    if not items and receipt.get("amount") is not None:
        items = [
            {
                "title": label(receipt.get("feeType")),
                "feeType": receipt.get("feeType"),
                "amount": receipt.get("amount"),
            }
        ]
    return items


def receipt_total(receipt):
    if receipt.get("totalAmount") is not None:
        return receipt["totalAmount"]
    return sum(item.get("amount") or 0 for item in receipt_items(receipt))


def generate_fee_receipt_pdf(receipt):
    """
    Generate a fee receipt PDF from ``GET /fees/<id>/receipt-data``.

    Returns:
        BytesIO buffer containing the PDF
    """
    header = receipt_header(receipt.get("config"))
    items = receipt_items(receipt)
    total = receipt_total(receipt)

    def fallback():
        return build_document(
            header,
            "FEE RECEIPT",
            details=[
                ("Receipt No", receipt.get("receiptNo")),
                ("Date", api_date(receipt.get("paymentDate"))),
                ("Student", receipt.get("studentName")),
                ("Admission No", receipt.get("admissionNo") or "N/A"),
                ("Class", receipt.get("class")),
                ("Payment Method", label(receipt.get("paymentMethod"))),
            ],
            table=(
                ["#", "Particulars", "Fee Type", "Amount"],
                [
                    [i, item.get("title", ""), label(item.get("feeType")), money(item.get("amount"))]
                    for i, item in enumerate(items, start=1)
                ],
            ),
            totals=[("Total Paid", money(total))],
            notes=[f"Remarks: {receipt['remarks']}" if receipt.get("remarks") else ""],
            signatures=["Parent / Guardian", "Authorised Signatory"],
        )

    return html_to_pdf(
        "pdf/fee_receipt.html",
        {"header": header, "receipt": receipt, "items": items, "total": total},
        fallback,
    )
