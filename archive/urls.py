from django.urls import path

from . import views


app_name = "archive"

urlpatterns = [
    path("tweets/<str:username>", views.archive_tweets, name="tweets"),
    path("preview", views.preview, name="preview"),
    path("create-burner", views.create_burner, name="create_burner"),
    path("import", views.import_messages, name="import"),
    path("ingest", views.ingest, name="ingest"),
]
