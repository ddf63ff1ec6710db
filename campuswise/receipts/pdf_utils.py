"""
Shared PDF pipeline for printable documents.

Documents are rendered from a Django template to HTML and converted with
pdfkit (wkhtmltopdf). When wkhtmltopdf is missing or fails, the same content is
laid out with ReportLab instead, so a download always succeeds.
"""

import logging
from io import BytesIO
from xml.sax.saxutils import escape

import pdfkit
from django.conf import settings
from django.http import HttpResponse
from django.template.loader import render_to_string
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

logger = logging.getLogger(__name__)

PRIMARY_COLOR = colors.HexColor("#8F403C")
SECONDARY_COLOR = colors.HexColor("#F4F9FA")
DARK_TEXT = colors.HexColor("#333333")
LIGHT_TEXT = colors.HexColor("#6B7280")
BORDER_COLOR = colors.HexColor("#E5E7EB")

PDF_OPTIONS = {
    "page-size": "A4",
    "margin-top": "0.5in",
    "margin-right": "0.5in",
    "margin-bottom": "0.5in",
    "margin-left": "0.5in",
    "encoding": "UTF-8",
}

HEADER_FIELDS = (
    "schoolName",
    "address",
    "phone",
    "email",
    "website",
    "logo",
    "principalName",
    "taxNumber",
    "registrationNumber",
    "footerText",
)


def logo_url(path):
    """Absolute URL for a logo path returned by the upload endpoint."""
    if not path or not path.startswith("/"):
        return path
    origin = settings.API_BASE_URL.rstrip("/")
    if origin.endswith("/api"):
        origin = origin[: -len("/api")]
    return origin + path


def receipt_header(config=None):
    """Letterhead for a document; falls back to ``SCHOOL_NAME`` when unconfigured."""
    config = config or {}
    header = {field: config.get(field) or "" for field in HEADER_FIELDS}
    header["schoolName"] = header["schoolName"] or settings.SCHOOL_NAME
    header["logo"] = logo_url(header["logo"])
    return header


def _pdfkit_configuration():
    if settings.WKHTMLTOPDF_CMD:
        return pdfkit.configuration(wkhtmltopdf=settings.WKHTMLTOPDF_CMD)
    return None


def html_to_pdf(template_name, context, fallback):
    """PDF bytes buffer for ``template_name``.

    ``fallback`` is a zero-argument callable returning a ReportLab buffer; it is
    used when wkhtmltopdf is unavailable.
    """
    context = dict(context, currency_symbol=settings.CURRENCY_SYMBOL)
    html_content = render_to_string(template_name, context)
    try:
        pdf_data = pdfkit.from_string(
            html_content, False, options=PDF_OPTIONS, configuration=_pdfkit_configuration()
        )
    except OSError as e:
        logger.warning("PDFKit failed for %s: %s, using ReportLab fallback", template_name, e)
        return fallback()
    buffer = BytesIO(pdf_data)
    buffer.seek(0)
    return buffer


def pdf_response(buffer, filename):
    response = HttpResponse(buffer, content_type="application/pdf")
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


def money(value):
    try:
        amount = float(value or 0)
    except (TypeError, ValueError):
        amount = 0.0
    # Helvetica has no rupee glyph.
    return f"Rs. {amount:,.2f}"


def build_document(header, title, details=(), table=None, totals=(), notes=(), signatures=()):
    """
    Lay out a printable document with ReportLab.

    Args:
        header: letterhead dict from ``receipt_header``
        title: document title, e.g. "FEE RECEIPT"
        details: (label, value) pairs shown in two columns under the title
        table: optional (column headers, rows) for line items
        totals: (label, value) pairs right-aligned below the table
        notes: paragraphs of free text (remarks, footer)
        signatures: captions for signature lines

    Returns:
        BytesIO buffer containing the PDF
    """
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        topMargin=0.5 * inch,
        bottomMargin=0.5 * inch,
        leftMargin=0.6 * inch,
        rightMargin=0.6 * inch,
    )
    styles = getSampleStyleSheet()
    width = A4[0] - 1.2 * inch
    story = []

    school_title_style = ParagraphStyle(
        "SchoolTitle",
        parent=styles["Heading1"],
        fontSize=20,
        alignment=1,
        textColor=PRIMARY_COLOR,
        fontName="Helvetica-Bold",
        spaceAfter=4,
        leading=24,
    )
    subtitle_style = ParagraphStyle(
        "SchoolSubtitle",
        parent=styles["Normal"],
        fontSize=9,
        alignment=1,
        textColor=LIGHT_TEXT,
        leading=12,
    )
    title_style = ParagraphStyle(
        "DocumentTitle",
        parent=styles["Heading2"],
        fontSize=14,
        alignment=1,
        textColor=DARK_TEXT,
        fontName="Helvetica-Bold",
        spaceBefore=10,
        spaceAfter=10,
    )
    body_style = ParagraphStyle(
        "Body",
        parent=styles["Normal"],
        fontSize=9,
        textColor=DARK_TEXT,
        leading=13,
    )

    # --- Letterhead ---
    story.append(Paragraph(escape(header["schoolName"]), school_title_style))
    if header.get("address"):
        story.append(Paragraph(escape(header["address"]), subtitle_style))
    contact = " | ".join(
        part
        for part in (
            f"Phone: {header['phone']}" if header.get("phone") else "",
            f"Email: {header['email']}" if header.get("email") else "",
            header.get("website", ""),
        )
        if part
    )
    if contact:
        story.append(Paragraph(escape(contact), subtitle_style))
    numbers = " | ".join(
        part
        for part in (
            f"Reg. No: {header['registrationNumber']}" if header.get("registrationNumber") else "",
            f"Tax No: {header['taxNumber']}" if header.get("taxNumber") else "",
        )
        if part
    )
    if numbers:
        story.append(Paragraph(numbers, subtitle_style))

    divider = Table([[""]], colWidths=[width])
    divider.setStyle(TableStyle([("LINEABOVE", (0, 0), (-1, -1), 2, PRIMARY_COLOR)]))
    story.append(Spacer(1, 6))
    story.append(divider)
    story.append(Paragraph(title, title_style))

    # --- Details, two pairs per row ---
    if details:
        rows = []
        pairs = list(details)
        for i in range(0, len(pairs), 2):
            row = []
            for label, value in pairs[i : i + 2]:
                row += [Paragraph(f"<b>{label}:</b>", body_style), Paragraph(escape(str(value or "-")), body_style)]
            while len(row) < 4:
                row.append("")
            rows.append(row)
        details_table = Table(rows, colWidths=[width * 0.18, width * 0.32] * 2)
        details_table.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        story.append(details_table)
        story.append(Spacer(1, 10))

    # --- Line items ---
    if table:
        headers, rows = table
        data = [headers] + [[str(cell) for cell in row] for row in rows]
        items_table = Table(data, colWidths=[width / len(headers)] * len(headers), repeatRows=1)
        items_table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), PRIMARY_COLOR),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("GRID", (0, 0), (-1, -1), 0.5, BORDER_COLOR),
                    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, SECONDARY_COLOR]),
                    ("ALIGN", (-1, 0), (-1, -1), "RIGHT"),
                ]
            )
        )
        story.append(items_table)

    if totals:
        totals_table = Table(
            [[label, str(value)] for label, value in totals],
            colWidths=[width * 0.75, width * 0.25],
        )
        totals_table.setStyle(
            TableStyle(
                [
                    ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
                    ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                    ("LINEABOVE", (0, 0), (-1, 0), 1, BORDER_COLOR),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                ]
            )
        )
        story.append(totals_table)

    for note in notes:
        if note:
            story.append(Spacer(1, 8))
            story.append(Paragraph(escape(note), body_style))

    if signatures:
        story.append(Spacer(1, 0.6 * inch))
        sign_table = Table(
            [["_" * 24] * len(signatures), list(signatures)],
            colWidths=[width / len(signatures)] * len(signatures),
        )
        sign_table.setStyle(TableStyle([("ALIGN", (0, 0), (-1, -1), "CENTER"), ("FONTSIZE", (0, 0), (-1, -1), 9)]))
        story.append(sign_table)

    if header.get("footerText"):
        story.append(Spacer(1, 12))
        story.append(Paragraph(escape(header["footerText"]), subtitle_style))

    doc.build(story)
    buffer.seek(0)
    return buffer
