from django.urls import path

from . import views

app_name = "dashboard"

urlpatterns = [
    path("", views.dashboard, name="dashboard"),
    path("reports/", views.reports, name="reports"),
    path("reports/transport/", views.transport_report, name="transport_report"),
    path("reports/fee-dues/", views.fee_dues, name="fee_dues"),
    path("accounting/day-book/", views.day_book, name="day_book"),
    path("accounting/ledger/", views.ledger, name="ledger"),
    path("accounting/fee-details/", views.fee_details, name="fee_details"),
    path("accounting/balance-sheet/", views.balance_sheet, name="balance_sheet"),
    path("accounting/annual-report/", views.annual_report, name="annual_report"),
]
