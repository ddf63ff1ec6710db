from django.conf import settings
from django.urls import include, path
from django.views.generic import RedirectView

urlpatterns = [
    path("", RedirectView.as_view(pattern_name="dashboard:dashboard", permanent=False)),
    path("", include("base.urls")),
    path("dashboard/", include("dashboard.urls")),
    path("students/", include("students.urls")),
    path("staff/", include("staff.urls")),
    path("fees/", include("fees.urls")),
    path("payroll/", include("payroll.urls")),
    path("expenses/", include("expenses.urls")),
    path("textbooks/", include("textbooks.urls")),
    path("organization/", include("organization.urls")),
    path("accounts/", include("accounts.urls")),
    path("receipts/", include("receipts.urls")),
]

if settings.DEBUG:
    urlpatterns.append(path("__reload__/", include("django_browser_reload.urls")))
