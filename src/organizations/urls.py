"""URL patterns for organization endpoints."""

from django.urls import path

from .views import CurrentOrganizationView, OrganizationListCreateView, OrganizationMembersView

urlpatterns = [
    path("", OrganizationListCreateView.as_view(), name="organization-list"),
    path("current/", CurrentOrganizationView.as_view(), name="organization-current"),
    path("current/members/", OrganizationMembersView.as_view(), name="organization-members"),
]
