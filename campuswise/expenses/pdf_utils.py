from base.templatetags.base_tags import api_date, label
from receipts.pdf_utils import build_document, html_to_pdf, money, receipt_header


def generate_expense_voucher_pdf(expense, config=None):
    """
    Generate an expense voucher PDF.

    Args:
        expense: expense record from the API
        config: current receipt configuration, used for the letterhead

    Returns:
        BytesIO buffer containing the PDF
    """
    header = receipt_header(config)
    category = expense.get("category")
    if isinstance(category, dict):
        category = category.get("name")
    voucher_no = expense.get("voucherNo") or str(expense.get("_id") or expense.get("id") or "")[-8:].upper()

    def fallback():
        return build_document(
            header,
            "EXPENSE VOUCHER",
            details=[
                ("Voucher No", voucher_no),
                ("Date", api_date(expense.get("date"))),
                ("Category", category),
                ("Payment Method", label(expense.get("paymentMethod"))),
                ("Approved By", expense.get("approvedBy")),
            ],
            table=(["Description", "Amount"], [[expense.get("description", ""), money(expense.get("amount"))]]),
            totals=[("Total", money(expense.get("amount")))],
            notes=[f"Remarks: {expense['remarks']}" if expense.get("remarks") else ""],
            signatures=["Prepared By", "Approved By", "Received By"],
        )

    return html_to_pdf(
        "pdf/expense_voucher.html",
        {"header": header, "expense": expense, "category": category, "voucher_no": voucher_no},
        fallback,
    )
