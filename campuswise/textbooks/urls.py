from django.urls import path
from . import views

app_name = "textbooks"

urlpatterns = [
    path("", views.textbook_list, name="textbook_list"),
    path("add/", views.textbook_create, name="textbook_create"),
    path("<str:pk>/edit/", views.textbook_edit, name="textbook_edit"),
    path("<str:pk>/delete/", views.textbook_delete, name="textbook_delete"),
    path("<str:pk>/stock/", views.textbook_stock, name="textbook_stock"),
    # Indents
    path("indents/", views.indent_list, name="indent_list"),
    path("indents/add/", views.indent_create, name="indent_create"),
    path("indents/<str:pk>/", views.indent_detail, name="indent_detail"),
    path("indents/<str:pk>/issue/", views.indent_issue, name="indent_issue"),
    path("indents/<str:pk>/cancel/", views.indent_cancel, name="indent_cancel"),
    path("indents/<str:pk>/return/", views.indent_return, name="indent_return"),
    path("indents/<str:pk>/receipt/", views.indent_receipt, name="indent_receipt"),
]
