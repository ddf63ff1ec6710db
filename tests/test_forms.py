from decimal import Decimal

from accounts.forms import UserForm
from fees.forms import FeeStructureForm
from organization.forms import DivisionForm, TransportRouteForm
from payroll.forms import net_salary
from textbooks.forms import IndentForm, indent_totals

CLASSES = [{"_id": "c1", "name": "Grade 1"}, {"_id": "c2", "name": "Grade 2"}]
SUPER_ADMIN = {"role": "super_admin"}
BRANCH_ADMIN = {"role": "branch_admin"}


def structure_data(**overrides):
    data = {
        "title": "Term 1 Tuition",
        "feeType": "tuition",
        "classId": "c1",
        "amount": "1500",
        "staffDiscountPercent": "10",
        "academicYear": "2024-2025",
        "isActive": "on",
    }
    data.update(overrides)
    return data


def test_fee_structure_payload_names_the_class():
    form = FeeStructureForm(structure_data(), classes=CLASSES)
    assert form.is_valid(), form.errors
    payload = form.to_payload()
    assert payload["className"] == "Grade 1"
    assert payload["amount"] == 1500
    assert payload["isActive"] is True
    assert "transportDistanceGroup" not in payload


def test_transport_structure_needs_a_distance_group():
    form = FeeStructureForm(structure_data(feeType="transport"), classes=CLASSES)
    assert not form.is_valid()
    assert "transportDistanceGroup" in form.errors


def test_staff_discount_is_limited_to_100_percent():
    form = FeeStructureForm(structure_data(staffDiscountPercent="120"), classes=CLASSES)
    assert not form.is_valid()
    assert "staffDiscountPercent" in form.errors


def test_division_capacity_must_be_positive_and_payload_has_names():
    teachers = [{"_id": "t1", "name": "Anita"}]
    data = {"classId": "c2", "name": "A", "capacity": "0", "classTeacherId": "t1", "status": "active"}
    assert "capacity" in DivisionForm(data, classes=CLASSES, teachers=teachers).errors

    form = DivisionForm(dict(data, capacity="35"), classes=CLASSES, teachers=teachers)
    assert form.is_valid(), form.errors
    assert form.to_payload() == {
        "classId": "c2",
        "className": "Grade 2",
        "name": "A",
        "capacity": 35,
        "classTeacherId": "t1",
        "classTeacherName": "Anita",
        "status": "active",
    }


def test_removing_a_class_teacher_on_edit_clears_both_fields():
    data = {"classId": "c2", "name": "A", "capacity": "35", "classTeacherId": "", "status": "active"}

    created = DivisionForm(data, classes=CLASSES)
    assert created.is_valid(), created.errors
    assert "classTeacherId" not in created.to_payload()

    edited = DivisionForm(data, classes=CLASSES, editing=True)
    assert edited.is_valid(), edited.errors
    payload = edited.to_payload()
    assert payload["classTeacherId"] is None
    assert payload["classTeacherName"] is None


def test_route_form_collects_class_fees_and_distance_groups():
    data = {
        "routeName": "North Loop",
        "routeCode": "nl-1",
        "status": "active",
        "useDistanceGroups": "on",
        "range_group1": "0-5 KM",
        "amount_c1": "600",
        "discount_c1": "25",
        "group1_c1": "400",
    }
    form = TransportRouteForm(data, classes=CLASSES)
    assert form.is_valid(), form.errors
    payload = form.to_payload()
    assert payload["routeCode"] == "NL-1"
    assert payload["useDistanceGroups"] is True
    assert payload["classFees"] == [
        {
            "classId": "c1",
            "className": "Grade 1",
            "amount": 600.0,
            "staffDiscount": 25.0,
            "distanceGroupFees": [{"groupName": "group1", "distanceRange": "0-5 KM", "amount": 400.0}],
        }
    ]


def test_route_form_needs_one_class_fee():
    form = TransportRouteForm({"routeName": "X", "routeCode": "X", "status": "active"}, classes=CLASSES)
    assert not form.is_valid()
    assert form.non_field_errors() == ["Enter the fee for at least one class"]


def test_route_form_initial_from_record():
    record = {
        "routeName": "North Loop",
        "routeCode": "NL-1",
        "classFees": [
            {
                "classId": {"_id": "c2", "name": "Grade 2"},
                "amount": 700,
                "staffDiscount": 10,
                "distanceGroupFees": [{"groupName": "group2", "distanceRange": "5-10 KM", "amount": 550}],
            }
        ],
    }
    form = TransportRouteForm.from_record(record, classes=CLASSES)
    assert form.initial["amount_c2"] == 700
    assert form.initial["group2_c2"] == 550
    assert form.initial["range_group2"] == "5-10 KM"


def user_data(**overrides):
    data = {"name": "Kiran", "email": "kiran@example.com", "mobile": "9876543210", "pin": "1234", "role": "teacher", "status": "active"}
    data.update(overrides)
    return data


def test_new_user_needs_a_pin_and_gets_permissions():
    form = UserForm(user_data(pin="", permissions=["Students:read"]), current_user=BRANCH_ADMIN)
    assert "pin" in form.errors

    form = UserForm(user_data(permissions=["Students:read", "Students:update"]), current_user=BRANCH_ADMIN)
    assert form.is_valid(), form.errors
    payload = form.to_payload()
    assert payload["permissions"] == [{"module": "Students", "actions": ["read", "update"]}]
    assert "branchId" not in payload


def test_editing_a_user_keeps_the_pin_when_blank():
    form = UserForm(user_data(pin=""), current_user=BRANCH_ADMIN, editing=True)
    assert form.is_valid(), form.errors
    assert "pin" not in form.to_payload()


def test_only_super_admins_can_create_super_admins():
    form = UserForm(user_data(role="super_admin"), current_user=BRANCH_ADMIN)
    assert not form.is_valid()
    assert "role" in form.errors


def test_super_admin_must_pick_a_branch_for_branch_users():
    branches = [{"_id": "b1", "name": "North"}]
    form = UserForm(user_data(), current_user=SUPER_ADMIN, branches=branches)
    assert "branchId" in form.errors
    form = UserForm(user_data(branchId="b1"), current_user=SUPER_ADMIN, branches=branches)
    assert form.is_valid(), form.errors
    assert form.to_payload()["branchId"] == "b1"


def test_user_form_shows_existing_permissions():
    record = {"name": "Kiran", "role": "teacher", "permissions": [{"module": "Fees", "actions": ["read"]}]}
    form = UserForm.from_record(record, current_user=BRANCH_ADMIN)
    fees_row = next(row for row in form.permission_rows() if row["module"] == "Fees")
    assert [box["checked"] for box in fees_row["actions"]] == [False, True, False, False]


def test_net_salary():
    assert net_salary(30000, 2500, 1200) == Decimal("31300")
    assert net_salary(None) == Decimal("0")


BOOKS = [
    {"_id": "b1", "title": "Maths", "price": 250, "available": 10},
    {"_id": "b2", "title": "Science", "price": 300, "available": 2},
]


def test_indent_totals():
    assert indent_totals(BOOKS, {"b1": 2, "b2": 1}, paid_amount=500) == (Decimal("800"), Decimal("300"))


def test_indent_form_rejects_overpayment_and_empty_selection():
    students = [{"_id": "s1", "name": "Ravi"}]
    empty = IndentForm({"studentId": "s1", "paymentMethod": "cash"}, students=students, textbooks=BOOKS)
    assert not empty.is_valid()
    assert "Select at least one textbook" in empty.non_field_errors()

    overpaid = IndentForm(
        {"studentId": "s1", "paymentMethod": "cash", "paidAmount": "900", "qty_b1": "2"},
        students=students,
        textbooks=BOOKS,
    )
    assert not overpaid.is_valid()
    assert "paidAmount" in overpaid.errors

    form = IndentForm(
        {"studentId": "s1", "paymentMethod": "cash", "paidAmount": "500", "qty_b1": "2"},
        students=students,
        textbooks=BOOKS,
    )
    assert form.is_valid(), form.errors
    assert form.to_payload()["items"] == [{"textbookId": "b1", "quantity": 2}]
