"""
Member-facing privilege views.
"""
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from apps.common.utils import success_response, paginated_response
from ..serializers import PrivilegeSerializer, PrivilegeGrantSerializer
from ..services import PrivilegeService, ExchangeService


class PrivilegeListView(APIView):
    """Privileges currently offered for exchange"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return paginated_response(PrivilegeService.list_available(), PrivilegeSerializer, request)


class MyPrivilegesView(APIView):
    """The requesting member's grants; ?active_only=true hides expired and used ones"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        active_only = request.query_params.get('active_only', '').lower() in ('1', 'true', 'yes')
        grants = PrivilegeService.get_member_privileges(request.user.id, active_only=active_only)
        return success_response(PrivilegeGrantSerializer(grants, many=True).data)


class ExchangePrivilegeView(APIView):
    """Spend points on a privilege"""
    permission_classes = [IsAuthenticated]

    def post(self, request, privilege_id):
        result = ExchangeService.exchange(request.user.id, privilege_id)
        return success_response(result.to_dict(), message='Privilege exchanged successfully')


class UseGrantView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, grant_id):
        grant = PrivilegeService.use_grant(grant_id, member_id=request.user.id)
        return success_response(PrivilegeGrantSerializer(grant).data, message='Privilege used')
