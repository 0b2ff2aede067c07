from django.urls import path

from importer import views

urlpatterns = [
    path("", views.trigger_import, name="trigger-import"),
    path("all/", views.import_all_feeds, name="import-all-feeds"),
    path("history/", views.import_history, name="import-history"),
]
