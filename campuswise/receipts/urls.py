from django.urls import path
from . import views

app_name = "receipts"

urlpatterns = [
    path("settings/", views.receipt_config, name="receipt_config"),
    path("settings/logo/", views.upload_logo, name="upload_logo"),
]
