from django.urls import path

from . import views


app_name = "dashboard"

urlpatterns = [
    path("stats", views.stats, name="stats"),
    path("users", views.list_users, name="list_users"),
    path("users/<int:user_id>", views.user_detail, name="user_detail"),
    path("users/<int:user_id>/role", views.user_role, name="user_role"),
]
