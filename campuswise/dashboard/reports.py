"""
Shaping of report data returned by the API for display.

Fee dues rows are filtered and summarised here with pandas; every other report
is rendered as the API returns it.
"""

from datetime import date

import pandas as pd

NOT_DUE = "Not Due Yet"
AGING_BUCKETS = [NOT_DUE, "1-30 Days", "31-60 Days", "61-90 Days", "90+ Days"]
AGING_BUCKET_CHOICES = [(bucket, bucket) for bucket in AGING_BUCKETS]

TRANSPORT_TYPE_CHOICES = [
    ("school", "School Transport"),
    ("own", "Own Transport"),
    ("none", "No Transport"),
]

ACCOUNT_TYPE_CHOICES = [
    ("income", "Income"),
    ("expense", "Expense"),
    ("payroll", "Payroll"),
]

TRANSACTION_TYPE_CHOICES = [
    ("income", "Income"),
    ("expense", "Expense"),
]


def aging_bucket(days_due):
    if days_due is None or days_due <= 0:
        return NOT_DUE
    if days_due <= 30:
        return "1-30 Days"
    if days_due <= 60:
        return "31-60 Days"
    if days_due <= 90:
        return "61-90 Days"
    return "90+ Days"


def due_student(due):
    student = due.get("student")
    return student if isinstance(student, dict) else {}


def due_class_name(due):
    cls = due.get("class")
    if isinstance(cls, dict) and cls.get("name"):
        return cls["name"]
    return due.get("className") or due_student(due).get("class") or "Unknown"


def filter_dues(dues, search="", bucket=""):
    """Rows matching ``search`` (student name or admission number) and ``bucket``."""
    search = (search or "").strip().lower()
    rows = []
    for due in dues:
        student = due_student(due)
        if search and not (
            search in (student.get("name") or "").lower() or search in (student.get("admissionNo") or "").lower()
        ):
            continue
        if bucket and (due.get("agingBucket") or aging_bucket(due.get("daysDue"))) != bucket:
            continue
        rows.append(due)
    return rows


def summarize_dues(dues):
    """Count and amount of ``dues`` per aging bucket and per class."""
    frame = pd.DataFrame(
        [
            {
                "bucket": due.get("agingBucket") or aging_bucket(due.get("daysDue")),
                "class": due_class_name(due),
                "student": due_student(due).get("_id") or due_student(due).get("admissionNo"),
                "amount": float(due.get("amount") or 0),
            }
            for due in dues
        ],
        columns=["bucket", "class", "student", "amount"],
    )

    by_bucket = frame.groupby("bucket")["amount"].agg(["count", "sum"]).reindex(AGING_BUCKETS, fill_value=0)
    by_class = frame.groupby("class")["amount"].agg(["count", "sum"]).sort_index()
    overdue = frame[frame["bucket"] != NOT_DUE]

    return {
        "total_amount": float(frame["amount"].sum()),
        "overdue_amount": float(overdue["amount"].sum()),
        "records": len(frame),
        "students": int(frame["student"].nunique()),
        "by_bucket": [
            {"bucket": bucket, "count": int(row["count"]), "amount": float(row["sum"])}
            for bucket, row in by_bucket.iterrows()
        ],
        "by_class": [
            {"class": name, "count": int(row["count"]), "amount": float(row["sum"])}
            for name, row in by_class.iterrows()
        ],
    }


def month_start(today=None):
    today = today or date.today()
    return today.replace(day=1)


def fiscal_year(today=None):
    """Year in which the April-March fiscal year containing ``today`` starts."""
    today = today or date.today()
    return today.year if today.month >= 4 else today.year - 1
