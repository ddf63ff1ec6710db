from django.urls import path
from . import views

app_name = "expenses"

urlpatterns = [
    path("", views.expense_list, name="expense_list"),
    path("add/", views.expense_create, name="expense_create"),
    path("<str:pk>/edit/", views.expense_edit, name="expense_edit"),
    path("<str:pk>/delete/", views.expense_delete, name="expense_delete"),
    path("<str:pk>/voucher/", views.expense_voucher, name="expense_voucher"),
    # Categories
    path("categories/", views.expense_category_list, name="expense_category_list"),
    path("categories/add/", views.expense_category_create, name="expense_category_create"),
    path("categories/<str:pk>/edit/", views.expense_category_edit, name="expense_category_edit"),
    path("categories/<str:pk>/delete/", views.expense_category_delete, name="expense_category_delete"),
    path("income-categories/", views.income_category_list, name="income_category_list"),
    path("income-categories/add/", views.income_category_create, name="income_category_create"),
    path("income-categories/<str:pk>/edit/", views.income_category_edit, name="income_category_edit"),
    path("income-categories/<str:pk>/delete/", views.income_category_delete, name="income_category_delete"),
]
