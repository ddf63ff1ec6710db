from base.templatetags.base_tags import api_date, label
from receipts.pdf_utils import build_document, html_to_pdf, money, receipt_header


def generate_textbook_receipt_pdf(receipt, config=None):
    """
    Generate a textbook indent receipt PDF from ``POST /textbook-indents/<id>/receipt``.

    Returns:
        BytesIO buffer containing the PDF
    """
    header = receipt_header(config)

    def fallback():
        class_name = receipt.get("class") or ""
        if receipt.get("division"):
            class_name = f"{class_name} - {receipt['division']}"
        return build_document(
            header,
            "TEXTBOOK RECEIPT",
            details=[
                ("Indent No", receipt.get("indentNo")),
                ("Issue Date", api_date(receipt.get("issueDate"))),
                ("Student", receipt.get("studentName")),
                ("Admission No", receipt.get("admissionNo")),
                ("Class", class_name),
                ("Status", label(receipt.get("status"))),
            ],
            table=(
                ["Code", "Title", "Qty", "Returned", "Price", "Total"],
                [
                    [
                        item.get("bookCode", ""),
                        item.get("title", ""),
                        item.get("quantity", 0),
                        item.get("returnedQuantity") or 0,
                        money(item.get("price")),
                        money(item.get("total")),
                    ]
                    for item in receipt.get("items") or []
                ],
            ),
            totals=[
                ("Total", money(receipt.get("totalAmount"))),
                (f"Paid ({label(receipt.get('paymentMethod'))})", money(receipt.get("paidAmount"))),
                ("Balance", money(receipt.get("balanceAmount"))),
            ],
            notes=[
                f"Remarks: {receipt['remarks']}" if receipt.get("remarks") else "",
                f"Issued by {receipt.get('issuedBy') or '-'}",
            ],
        )

    return html_to_pdf(
        "pdf/textbook_receipt.html",
        {"header": header, "receipt": receipt},
        fallback,
    )
