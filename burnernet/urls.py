from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("accounts.urls")),
    path("api/", include("burners.urls")),
    path("api/", include("guesses.urls")),
    path("api/admin/", include("dashboard.urls")),
    path("api/admin/archive/", include("archive.urls")),
]
