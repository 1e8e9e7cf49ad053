"""URL patterns for authentication endpoints."""

from django.urls import path

from .views import JoinOrganizationView, LoginView, LogoutView, MeView, RefreshView, RegisterView

urlpatterns = [
    path("register/", RegisterView.as_view(), name="auth-register"),
    path("login/", LoginView.as_view(), name="auth-login"),
    path("refresh/", RefreshView.as_view(), name="auth-refresh"),
    path("logout/", LogoutView.as_view(), name="auth-logout"),
    path("me/", MeView.as_view(), name="auth-me"),
    path("organizations/<str:organization_id>/join/", JoinOrganizationView.as_view(), name="auth-join-organization"),
]
