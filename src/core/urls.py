"""Root URL configuration for the Tenant Publishing API."""
from django.http import JsonResponse
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView


def health(request):
    return JsonResponse({"data": {"status": "ok"}, "errors": []})


urlpatterns = [
    path("health/", health, name="health"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("auth/", include("authentication.urls")),
    path("organizations/", include("organizations.urls")),
    path("", include("articles.urls")),
]
