from django.urls import path
from . import views

app_name = "students"

urlpatterns = [
    path("", views.student_list, name="student_list"),
    path("add/", views.student_create, name="student_create"),
    path("promote/", views.promote_students, name="promote_students"),
    path("<str:pk>/edit/", views.student_edit, name="student_edit"),
    path("<str:pk>/delete/", views.student_delete, name="student_delete"),
    path("<str:pk>/transfer/", views.transfer_certificate, name="transfer_certificate"),
]
