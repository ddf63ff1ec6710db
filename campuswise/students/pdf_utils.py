from base.templatetags.base_tags import api_date
from receipts.pdf_utils import build_document, html_to_pdf, receipt_header


def generate_transfer_certificate_pdf(certificate, config=None):
    """
    Generate a transfer certificate PDF.

    Args:
        certificate: ``transferCertificate`` returned by ``POST /students/<id>/transfer``
        config: current receipt configuration, used for the letterhead

    Returns:
        BytesIO buffer containing the PDF
    """
    header = receipt_header(config)
    if not config and (certificate.get("currentSchool") or {}).get("name"):
        header["schoolName"] = certificate["currentSchool"]["name"]
        header["address"] = certificate["currentSchool"].get("address") or ""

    def fallback():
        class_name = certificate.get("class") or ""
        if certificate.get("division"):
            class_name = f"{class_name} - {certificate['division']}"
        statement = f"This is to certify that {certificate.get('studentName', '')} was a bonafide student of {header['schoolName']}"
        if certificate.get("transferSchoolName"):
            statement += f" and is transferring to {certificate['transferSchoolName']}"
        return build_document(
            header,
            "TRANSFER CERTIFICATE",
            details=[
                ("Student Name", certificate.get("studentName")),
                ("Admission No", certificate.get("admissionNo")),
                ("Guardian", certificate.get("guardianName")),
                ("Date of Birth", api_date(certificate.get("dateOfBirth"))),
                ("Class", class_name),
                ("Admission Date", api_date(certificate.get("admissionDate"))),
                ("Transfer Date", api_date(certificate.get("transferDate"))),
                ("Issued On", api_date(certificate.get("generatedDate"))),
            ],
            notes=[
                statement + ".",
                f"Reason: {certificate['reason']}" if certificate.get("reason") else "",
                f"Remarks: {certificate['remarks']}" if certificate.get("remarks") else "",
            ],
            signatures=["Class Teacher", "Principal"],
        )

    return html_to_pdf(
        "pdf/transfer_certificate.html",
        {"header": header, "certificate": certificate},
        fallback,
    )
