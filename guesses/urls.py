from django.urls import path

from . import views


app_name = "guesses"

urlpatterns = [
    path("identity-guesses", views.create_guess, name="create_guess"),
    path("identity-guesses/<int:post_id>", views.list_guesses, name="list_guesses"),
]
