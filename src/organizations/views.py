"""Organization endpoints: global listing/creation and the current tenant."""

import logging
from typing import Any

from rest_framework import status
from rest_framework.response import Response

from access_control.mixins import TenantScopedMixin
from access_control.permissions import IsPrincipal, IsTenantAdmin
from core.response import BaseAPIView, api_response
from .models import Organization
from .serializers import MemberSerializer, OrganizationSerializer

logger = logging.getLogger(__name__)


class OrganizationListCreateView(BaseAPIView):
    """List every organization or create a new one.

    Neither operation is tenant-scoped. When the creator is authenticated they
    become the first member of the new organization.
    """

    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        return api_response(OrganizationSerializer(Organization.objects.all(), many=True).data)

    # noinspection PyMethodMayBeStatic
    def post(self, request):
        serializer = OrganizationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        organization = serializer.save()
        if request.user.is_authenticated:
            organization.members.add(request.user)
        logger.info("Organization %s created", organization.pk)
        return api_response(OrganizationSerializer(organization).data, status=status.HTTP_201_CREATED)


class CurrentOrganizationView(TenantScopedMixin, BaseAPIView):
    """The organization named by the tenant header; only admins may change it."""

    permission_classes = [IsPrincipal, IsTenantAdmin]

    def get(self, request):
        return api_response(OrganizationSerializer(self.tenant).data)

    def patch(self, request):
        serializer = OrganizationSerializer(self.tenant, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return api_response(serializer.data)

    def delete(self, request):
        logger.info("User %s deleted organization %s", request.user.pk, self.tenant.pk)
        self.tenant.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class OrganizationMembersView(TenantScopedMixin, BaseAPIView):
    permission_classes = [IsPrincipal]

    def get(self, request):
        return api_response(MemberSerializer(self.tenant.members.all(), many=True).data)


__all__ = ["CurrentOrganizationView", "OrganizationListCreateView", "OrganizationMembersView"]
