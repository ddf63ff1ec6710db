from decimal import Decimal

import pytest

from fees.calculator import (
    FeeSelectionError,
    build_fee_items,
    discounted_amount,
    fee_payment_payload,
    round_amount,
    total,
)

TUITION = {"_id": "f1", "title": "Tuition", "feeType": "tuition", "amount": 1000, "staffDiscountPercent": 10}
EXAM = {"_id": "f2", "title": "Exam", "feeType": "exam", "amount": 200}
BUS_NEAR = {
    "_id": "t1",
    "title": "Bus",
    "feeType": "transport",
    "amount": 500,
    "transportDistanceGroup": "group1",
    "staffDiscountPercent": 50,
}
BUS_FAR = {"_id": "t2", "title": "Bus", "feeType": "transport", "amount": 800, "transportDistanceGroup": "group3"}
STRUCTURES = [TUITION, EXAM, BUS_NEAR, BUS_FAR]


def test_staff_child_gets_discount_on_discounted_structures_only():
    items = build_fee_items({"_id": "s1", "isStaffChild": True}, STRUCTURES, selected_ids=["f1", "f2"])
    assert [item["amount"] for item in items] == [900, 200]
    assert total(items) == 1100


def test_other_students_pay_the_full_amount():
    items = build_fee_items({"_id": "s1", "isStaffChild": False}, STRUCTURES, selected_ids=["f1", "f2"])
    assert total(items) == 1200


@pytest.mark.parametrize(
    "amount, percent, expected",
    [
        (1000, 10, Decimal("900")),
        (105, 10, Decimal("95")),  # 94.5 rounds up
        (333, 33, Decimal("223")),  # 223.11
        (999, 0, Decimal("999")),
    ],
)
def test_discounted_amount_rounds_half_up_to_whole_units(amount, percent, expected):
    assert discounted_amount(amount, percent) == expected


def test_round_amount_handles_strings_and_blanks():
    assert round_amount("12.5") == Decimal("13")
    assert round_amount(None) == Decimal("0")


def test_transport_uses_the_chosen_distance_group():
    items = build_fee_items({"isStaffChild": False}, STRUCTURES, include_transport=True, distance_group="group3")
    assert items == [
        {
            "feeStructureId": "t2",
            "title": "Bus",
            "feeType": "transport",
            "amount": 800,
            "transportDistanceGroup": "group3",
        }
    ]


def test_transport_discount_applies_to_staff_children():
    items = build_fee_items({"isStaffChild": True}, STRUCTURES, include_transport=True, distance_group="group1")
    assert items[0]["amount"] == 250


def test_transport_structures_are_never_selected_as_plain_items():
    items = build_fee_items({}, STRUCTURES, selected_ids=["f2", "t1"])
    assert [item["feeStructureId"] for item in items] == ["f2"]


def test_transport_requires_a_distance_group():
    with pytest.raises(FeeSelectionError, match="distance group"):
        build_fee_items({}, STRUCTURES, include_transport=True)


def test_transport_group_without_a_structure_is_rejected():
    with pytest.raises(FeeSelectionError, match="Group 2"):
        build_fee_items({}, STRUCTURES, include_transport=True, distance_group="group2")


def test_empty_selection_is_rejected():
    with pytest.raises(FeeSelectionError, match="at least one fee item"):
        build_fee_items({"_id": "s1"}, STRUCTURES, selected_ids=[])


def test_payment_payload():
    items = build_fee_items({"_id": "s1"}, STRUCTURES, selected_ids=["f2"])
    assert fee_payment_payload({"_id": "s1"}, items, "cash") == {
        "studentId": "s1",
        "feeItems": items,
        "paymentMethod": "cash",
    }
    assert fee_payment_payload({"_id": "s1"}, items, "bank", "June")["remarks"] == "June"
