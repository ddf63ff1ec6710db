from django.urls import path

from . import views

app_name = "accounts"

urlpatterns = [
    path("users/", views.user_list, name="user_list"),
    path("users/add/", views.user_create, name="user_create"),
    path("users/<str:pk>/edit/", views.user_edit, name="user_edit"),
    path("users/<str:pk>/delete/", views.user_delete, name="user_delete"),
    path("activity/", views.activity_log, name="activity_log"),
]
