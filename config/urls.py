from django.urls import include, path

urlpatterns = [
    path("", include("apps.health.urls")),
    path("api/v1/", include("apps.api.urls")),
]
