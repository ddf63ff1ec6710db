"""
Fee collection calculator.

Turns the fee structures selected on the collect-fee screen into the
``feeItems`` sent to ``POST /fees``. Staff children get each structure's
``staffDiscountPercent`` off; transport is charged from the structure of the
chosen distance group. Amounts are whole currency units, halves rounded up.
"""

from decimal import ROUND_HALF_UP, Decimal

from base.exceptions import FormSubmissionError
from base.forms import record_id

TRANSPORT = "transport"

FEE_TYPE_CHOICES = [
    ("tuition", "Tuition Fee"),
    ("transport", "Transport Fee"),
    ("cocurricular", "Co-curricular Fee"),
    ("maintenance", "Maintenance Fee"),
    ("exam", "Exam Fee"),
    ("textbook", "Textbook Fee"),
    ("other", "Other"),
]

DISTANCE_GROUP_CHOICES = [
    ("group1", "Group 1"),
    ("group2", "Group 2"),
    ("group3", "Group 3"),
    ("group4", "Group 4"),
]


class FeeSelectionError(FormSubmissionError):
    """The selected fees cannot be collected as they are."""


def _decimal(value):
    return Decimal(str(value if value not in (None, "") else 0))


def round_amount(value):
    return _decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def discounted_amount(amount, percent):
    """``amount`` less ``percent`` %, rounded to a whole unit."""
    amount = _decimal(amount)
    return round_amount(amount - amount * _decimal(percent) / 100)


def structure_amount(structure, is_staff_child):
    percent = _decimal(structure.get("staffDiscountPercent"))
    if is_staff_child and percent > 0:
        return discounted_amount(structure.get("amount"), percent)
    return round_amount(structure.get("amount"))


def transport_structure(structures, distance_group):
    """The transport fee structure for ``distance_group``."""
    for structure in structures:
        if (
            structure.get("feeType") == TRANSPORT
            and structure.get("transportDistanceGroup") == distance_group
        ):
            return structure
    return None


def fee_item(structure, amount):
    item = {
        "feeStructureId": record_id(structure),
        "title": structure.get("title") or structure.get("feeType", "").title(),
        "feeType": structure.get("feeType"),
        "amount": int(amount),
    }
    if structure.get("transportDistanceGroup"):
        item["transportDistanceGroup"] = structure["transportDistanceGroup"]
    return item


def build_fee_items(student, structures, selected_ids=(), include_transport=False, distance_group=None):
    """``feeItems`` for the selected structures.

    Raises ``FeeSelectionError`` when nothing is selected or when transport is
    selected without a distance group that has a fee structure.
    """
    is_staff_child = bool((student or {}).get("isStaffChild"))
    selected_ids = {str(pk) for pk in selected_ids or ()}
    items = []

    for structure in structures:
        if structure.get("feeType") == TRANSPORT:
            continue
        if record_id(structure) in selected_ids:
            items.append(fee_item(structure, structure_amount(structure, is_staff_child)))

    if include_transport:
        if not distance_group:
            raise FeeSelectionError("Please select a transport distance group")
        structure = transport_structure(structures, distance_group)
        if structure is None:
            raise FeeSelectionError(
                f"No transport fee is configured for {dict(DISTANCE_GROUP_CHOICES).get(distance_group, distance_group)}"
            )
        items.append(fee_item(structure, structure_amount(structure, is_staff_child)))

    if not items:
        raise FeeSelectionError("Please select at least one fee item")
    return items


def total(items):
    return sum(int(item["amount"]) for item in items)


def fee_payment_payload(student, items, payment_method, remarks=""):
    payload = {
        "studentId": record_id(student),
        "feeItems": items,
        "paymentMethod": payment_method,
    }
    if remarks:
        payload["remarks"] = remarks
    return payload
