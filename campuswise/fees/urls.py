from django.urls import path
from . import views

app_name = "fees"

urlpatterns = [
    path("", views.payment_list, name="payment_list"),
    path("collect/", views.collect_fee, name="collect_fee"),
    path("<str:pk>/receipt/", views.fee_receipt, name="fee_receipt"),
    path("<str:pk>/delete/", views.delete_payment, name="payment_delete"),
    # Fee structures
    path("structures/", views.structure_list, name="structure_list"),
    path("structures/add/", views.structure_create, name="structure_create"),
    path("structures/<str:pk>/edit/", views.structure_edit, name="structure_edit"),
    path("structures/<str:pk>/delete/", views.structure_delete, name="structure_delete"),
]
