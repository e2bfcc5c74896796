from django.urls import path

from . import views


app_name = "accounts"

urlpatterns = [
    path("register", views.register, name="register"),
    path("login", views.login_view, name="login"),
    path("logout", views.logout_view, name="logout"),
    path("user", views.current_user, name="current_user"),
    path("user/upgrade", views.upgrade, name="upgrade"),
    path("users", views.list_users, name="list_users"),
    path("invite-codes", views.invite_codes, name="invite_codes"),
]
