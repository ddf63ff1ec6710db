import logging

from django.contrib import messages
from django.http import HttpRequest
from django.shortcuts import redirect, render

from base.access import ADMIN_ROLES
from base.api_client import client_for
from base.crud import submit_form
from base.decorators import module_permission_required
from base.exceptions import ApiError, AuthenticationError
from base.forms import record_id

from .forms import LogoUploadForm, ReceiptConfigForm
from .pdf_utils import logo_url

logger = logging.getLogger(__name__)


def current_receipt_config(client):
    """Receipt configuration of the user's branch, or ``None`` when none is set up."""
    try:
        return client.get("/receipt-configs/current").get("data")
    except AuthenticationError:
        raise
    except ApiError as exc:
        logger.info("No receipt configuration: %s", exc)
        return None


@module_permission_required(roles=ADMIN_ROLES)
def receipt_config(request: HttpRequest):
    """View and edit the letterhead used on printable documents"""
    client = client_for(request)
    config = current_receipt_config(client)
    resource = client.receipt_configs

    if request.method == "POST":
        form = ReceiptConfigForm(request.POST, editing=bool(config))
        if form.is_valid():
            payload = form.to_payload()
            if config and config.get("logo"):
                payload["logo"] = config["logo"]
            if submit_form(request, resource, payload, pk=record_id(config), noun="Receipt configuration"):
                return redirect("receipts:receipt_config")
    elif config:
        form = ReceiptConfigForm.from_record(config)
    else:
        form = ReceiptConfigForm()

    context = {
        "title": "Receipt Settings",
        "form": form,
        "config": config,
        "logo_form": LogoUploadForm(),
        "logo": logo_url((config or {}).get("logo")),
        "submit_label": "Update Settings" if config else "Create Settings",
    }
    return render(request, "receipts/receipt_config.html", context)


@module_permission_required(roles=ADMIN_ROLES)
def upload_logo(request: HttpRequest):
    """Upload a logo and attach it to the current receipt configuration"""
    if request.method != "POST":
        return redirect("receipts:receipt_config")

    client = client_for(request)
    form = LogoUploadForm(request.POST, request.FILES)
    if not form.is_valid():
        for error in form.errors.get("logo", []):
            messages.error(request, error)
        return redirect("receipts:receipt_config")

    config = current_receipt_config(client)
    if not config:
        messages.error(request, "Save the receipt settings before uploading a logo")
        return redirect("receipts:receipt_config")

    logo = form.cleaned_data["logo"]
    try:
        response = client.upload(
            "/upload/logo",
            files={"logo": (logo.name, logo.read(), logo.content_type)},
        )
        logo_path = (response.get("data") or {}).get("logoPath")
        client.receipt_configs.update(record_id(config), {"logo": logo_path})
    except AuthenticationError:
        raise
    except ApiError as exc:
        messages.error(request, exc.describe("Failed to upload logo"))
    else:
        messages.success(request, "Logo uploaded successfully")
    return redirect("receipts:receipt_config")
