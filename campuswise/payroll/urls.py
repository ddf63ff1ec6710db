from django.urls import path
from . import views

app_name = "payroll"

urlpatterns = [
    path("", views.payroll_list, name="payroll_list"),
    path("add/", views.payroll_create, name="payroll_create"),
    path("<str:pk>/edit/", views.payroll_edit, name="payroll_edit"),
    path("<str:pk>/delete/", views.payroll_delete, name="payroll_delete"),
]
