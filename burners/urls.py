from django.urls import path

from . import views


app_name = "burners"

urlpatterns = [
    path("burner-profiles", views.burner_profiles, name="burner_profiles"),
    path(
        "burner-profiles/<int:profile_id>",
        views.deactivate_profile,
        name="deactivate_profile",
    ),
    path("posts", views.posts, name="posts"),
]
