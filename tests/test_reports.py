from datetime import date

import pytest
from django.urls import reverse

from dashboard.reports import aging_bucket, filter_dues, fiscal_year, summarize_dues

DUES = [
    {
        "student": {"_id": "s1", "name": "Ravi Kumar", "admissionNo": "ADM001"},
        "class": {"name": "Grade 5"},
        "amount": 1000,
        "daysDue": 12,
        "agingBucket": "1-30 Days",
    },
    {
        "student": {"_id": "s1", "name": "Ravi Kumar", "admissionNo": "ADM001"},
        "class": {"name": "Grade 5"},
        "amount": 500,
        "daysDue": 95,
        "agingBucket": "90+ Days",
    },
    {
        "student": {"_id": "s2", "name": "Meera Nair", "admissionNo": "ADM002"},
        "className": "Grade 6",
        "amount": 250,
        "daysDue": 0,
    },
]


@pytest.mark.parametrize(
    "days, bucket",
    [(0, "Not Due Yet"), (-3, "Not Due Yet"), (1, "1-30 Days"), (30, "1-30 Days"), (31, "31-60 Days"), (90, "61-90 Days"), (91, "90+ Days")],
)
def test_aging_bucket(days, bucket):
    assert aging_bucket(days) == bucket


def test_filter_dues_by_name_admission_no_and_bucket():
    assert len(filter_dues(DUES, search="ravi")) == 2
    assert len(filter_dues(DUES, search="adm002")) == 1
    assert len(filter_dues(DUES, bucket="Not Due Yet")) == 1
    assert filter_dues(DUES, search="ravi", bucket="90+ Days")[0]["amount"] == 500


def test_summarize_dues():
    summary = summarize_dues(DUES)
    assert summary["total_amount"] == 1750
    assert summary["overdue_amount"] == 1500
    assert summary["records"] == 3
    assert summary["students"] == 2
    buckets = {row["bucket"]: (row["count"], row["amount"]) for row in summary["by_bucket"]}
    assert buckets["1-30 Days"] == (1, 1000)
    assert buckets["31-60 Days"] == (0, 0)
    assert buckets["Not Due Yet"] == (1, 250)
    assert summary["by_class"] == [
        {"class": "Grade 5", "count": 2, "amount": 1500.0},
        {"class": "Grade 6", "count": 1, "amount": 250.0},
    ]


def test_summarize_no_dues():
    summary = summarize_dues([])
    assert summary["total_amount"] == 0
    assert summary["students"] == 0
    assert [row["count"] for row in summary["by_bucket"]] == [0, 0, 0, 0, 0]
    assert summary["by_class"] == []


def test_fiscal_year_starts_in_april():
    assert fiscal_year(date(2024, 3, 31)) == 2023
    assert fiscal_year(date(2024, 4, 1)) == 2024


def test_fee_dues_page_filters_rows(api, admin_client):
    api.add(
        "GET",
        "/reports/fee-dues",
        {
            "success": True,
            "data": {"dues": DUES, "summary": {"totalDueAmount": 1750, "totalStudents": 2}},
            "pagination": {"total": 3, "pages": 1},
        },
    )
    response = admin_client.get(reverse("dashboard:fee_dues"), {"search": "meera", "class": "c6"})
    assert response.status_code == 200
    assert [due["student"]["name"] for due in response.context["items"]] == ["Meera Nair"]
    assert response.context["summary"]["total_amount"] == 250
    assert api.calls_to("GET", "/reports/fee-dues")[0]["params"]["classId"] == "c6"


def test_day_book_reads_nested_pagination(api, admin_client):
    api.add(
        "GET",
        "/accounting/daybook",
        {
            "success": True,
            "data": {
                "transactions": [{"date": "2024-06-01", "type": "income", "description": "Fee payment", "amount": 900}],
                "pagination": {"currentPage": 1, "totalPages": 1, "totalItems": 1, "itemsPerPage": 10},
                "summary": {"totalIncome": 900, "totalExpense": 0, "netBalance": 900},
            },
        },
    )
    response = admin_client.get(reverse("dashboard:day_book"), {"transactionType": "income"})
    assert "Fee payment" in response.content.decode()
    assert response.context["pagination"].total_items == 1
    assert api.calls_to("GET", "/accounting/daybook")[0]["params"]["transactionType"] == "income"


def test_dashboard_survives_api_errors(api, admin_client):
    api.add("GET", "/reports/dashboard", {"success": False, "message": "Report service down"}, status=503)
    response = admin_client.get(reverse("dashboard:dashboard"))
    assert response.status_code == 200
    assert "Report service down" in response.content.decode()


def test_fee_details_lists_payments_with_breakdowns(api, admin_client):
    api.add(
        "GET",
        "/accounting/fee-details",
        {
            "success": True,
            "data": {
                "feePayments": [
                    {
                        "_id": "p1",
                        "receiptNumber": "RCP-0042",
                        "studentId": {"name": "Ravi Kumar", "rollNumber": "12"},
                        "classId": {"name": "Grade 5"},
                        "paymentDate": "2024-06-03T00:00:00.000Z",
                        "tuitionFee": 1000,
                        "transportFee": 150,
                        "totalAmount": 1150,
                        "paymentMethod": "cash",
                        "status": "paid",
                    }
                ],
                "pagination": {"currentPage": 1, "totalPages": 1, "totalItems": 1, "itemsPerPage": 10},
                "breakdown": {"totalPaid": 1150, "totalTuitionFee": 1000, "totalTransportFee": 150, "paidCount": 1},
                "paymentMethodBreakdown": [{"_id": "cash", "count": 1, "totalAmount": 1150}],
            },
        },
    )
    response = admin_client.get(
        reverse("dashboard:fee_details"), {"date_from": "2024-06-01", "date_to": "2024-06-30", "search": "RCP"}
    )
    content = response.content.decode()
    assert response.status_code == 200
    assert "RCP-0042" in content and "Ravi Kumar" in content
    assert response.context["fee_type_totals"] == [("Tuition", 1000), ("Transport", 150)]
    assert response.context["method_breakdown"][0]["count"] == 1
    assert response.context["stats_cards"][1] == {"label": "Paid Payments", "value": 1}
    params = api.calls_to("GET", "/accounting/fee-details")[0]["params"]
    assert params["startDate"] == "2024-06-01"
    assert params["endDate"] == "2024-06-30"
    assert params["search"] == "RCP"
