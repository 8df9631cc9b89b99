"""
Administrative privilege catalogue and grant views.
"""
from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.views import APIView

from apps.common.utils import success_response, paginated_response
from ..serializers import (
    PrivilegeSerializer, PrivilegeWriteSerializer, PrivilegeGrantSerializer, RevokeGrantSerializer
)
from ..services import PrivilegeService


class AdminPrivilegeListView(APIView):
    """List with ?is_active= and ?search= filters, or create"""
    permission_classes = [IsAdminUser]

    def get(self, request):
        is_active = request.query_params.get('is_active')
        if is_active is not None:
            is_active = is_active.lower() in ('1', 'true', 'yes')
        privileges = PrivilegeService.list_privileges(
            is_active=is_active,
            search=request.query_params.get('search'),
        )
        return paginated_response(privileges, PrivilegeSerializer, request)

    def post(self, request):
        serializer = PrivilegeWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        privilege = PrivilegeService.create_privilege(**serializer.validated_data)
        return success_response(
            PrivilegeSerializer(privilege).data,
            message='Privilege created successfully',
            status_code=status.HTTP_201_CREATED,
        )


class AdminPrivilegeDetailView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request, privilege_id):
        privilege = PrivilegeService.get_privilege_by_id(privilege_id)
        return success_response(PrivilegeSerializer(privilege).data)

    def patch(self, request, privilege_id):
        serializer = PrivilegeWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        privilege = PrivilegeService.update_privilege(privilege_id, **serializer.validated_data)
        return success_response(PrivilegeSerializer(privilege).data, message='Privilege updated successfully')

    def delete(self, request, privilege_id):
        PrivilegeService.delete_privilege(privilege_id)
        return success_response(message='Privilege deleted successfully')


class AdminPrivilegeActivationView(APIView):
    """POST .../activate/ or .../deactivate/"""
    permission_classes = [IsAdminUser]
    activate = True

    def post(self, request, privilege_id):
        if self.activate:
            privilege = PrivilegeService.activate_privilege(privilege_id)
        else:
            privilege = PrivilegeService.deactivate_privilege(privilege_id)
        return success_response(PrivilegeSerializer(privilege).data)


class AdminMemberPrivilegesView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request, member_id):
        grants = PrivilegeService.get_member_privileges(member_id)
        return success_response(PrivilegeGrantSerializer(grants, many=True).data)


class AdminRevokeGrantView(APIView):
    permission_classes = [IsAdminUser]

    def post(self, request, grant_id):
        serializer = RevokeGrantSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        grant = PrivilegeService.revoke_grant(
            grant_id,
            reason=serializer.validated_data['reason'],
            actor_id=request.user.id,
        )
        return success_response(PrivilegeGrantSerializer(grant).data, message='Privilege grant revoked')
