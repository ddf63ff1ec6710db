from django.urls import path
from . import views

app_name = "organization"

urlpatterns = [
    path("branches/", views.branch_list, name="branch_list"),
    path("branches/add/", views.branch_create, name="branch_create"),
    path("branches/<str:pk>/edit/", views.branch_edit, name="branch_edit"),
    path("branches/<str:pk>/delete/", views.branch_delete, name="branch_delete"),
    path("departments/", views.department_list, name="department_list"),
    path("departments/add/", views.department_create, name="department_create"),
    path("departments/<str:pk>/edit/", views.department_edit, name="department_edit"),
    path("departments/<str:pk>/delete/", views.department_delete, name="department_delete"),
    path("designations/", views.designation_list, name="designation_list"),
    path("designations/add/", views.designation_create, name="designation_create"),
    path("designations/<str:pk>/edit/", views.designation_edit, name="designation_edit"),
    path("designations/<str:pk>/delete/", views.designation_delete, name="designation_delete"),
    path("classes/", views.class_list, name="class_list"),
    path("classes/add/", views.class_create, name="class_create"),
    path("classes/<str:pk>/edit/", views.class_edit, name="class_edit"),
    path("classes/<str:pk>/delete/", views.class_delete, name="class_delete"),
    path("divisions/", views.division_list, name="division_list"),
    path("divisions/add/", views.division_create, name="division_create"),
    path("divisions/<str:pk>/edit/", views.division_edit, name="division_edit"),
    path("divisions/<str:pk>/delete/", views.division_delete, name="division_delete"),
    path("routes/", views.route_list, name="route_list"),
    path("routes/add/", views.route_create, name="route_create"),
    path("routes/<str:pk>/edit/", views.route_edit, name="route_edit"),
    path("routes/<str:pk>/delete/", views.route_delete, name="route_delete"),
]
