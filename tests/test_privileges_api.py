"""
API tests for privilege exchange, catalogue administration and job triggers.
"""
import pytest
from rest_framework import status

from apps.jobs.models import JobExecution
from apps.privileges.models import Privilege, PrivilegeGrant
from tests.factories import PointBatchFactory, PrivilegeFactory, PrivilegeGrantFactory


@pytest.mark.django_db
class TestMemberPrivilegesApi:

    def test_list_shows_only_active(self, member_client):
        PrivilegeFactory(name='Lounge', point_cost=300)
        PrivilegeFactory(name='Retired', is_active=False)

        response = member_client.get('/api/privileges/')

        assert response.status_code == status.HTTP_200_OK
        assert [item['name'] for item in response.data['data']['list']] == ['Lounge']

    def test_exchange_then_already_owned(self, member, member_client):
        PointBatchFactory(member=member, amount=1000)
        privilege = PrivilegeFactory(point_cost=300)

        first = member_client.post(f'/api/privileges/{privilege.id}/exchange/')
        second = member_client.post(f'/api/privileges/{privilege.id}/exchange/')

        assert first.status_code == status.HTTP_200_OK
        assert first.data['data']['balance_after'] == 700
        assert second.status_code == status.HTTP_409_CONFLICT
        assert second.data['error'] == 'ALREADY_OWNED'

    def test_exchange_insufficient(self, member, member_client):
        PointBatchFactory(member=member, amount=100)
        privilege = PrivilegeFactory(name='Spa day', point_cost=300)

        response = member_client.post(f'/api/privileges/{privilege.id}/exchange/')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'INSUFFICIENT_BALANCE'
        assert response.data['msg'] == "Insufficient points for privilege 'Spa day'. Required: 300, Available: 100"

    def test_exchange_unknown_privilege(self, member_client):
        response = member_client.post('/api/privileges/424242/exchange/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'PRIVILEGE_NOT_FOUND'

    def test_my_privileges_and_use(self, member, member_client):
        grant = PrivilegeGrantFactory(member=member)

        listing = member_client.get('/api/privileges/mine/', {'active_only': 'true'})
        used = member_client.post(f'/api/privileges/grants/{grant.id}/use/')

        assert [item['id'] for item in listing.data['data']] == [grant.id]
        assert listing.data['data'][0]['is_active'] is True
        assert used.status_code == status.HTTP_200_OK
        assert used.data['data']['status'] == PrivilegeGrant.STATUS_USED


@pytest.mark.django_db
class TestAdminPrivilegesApi:

    def test_create_and_duplicate(self, admin_client):
        payload = {'name': 'Late checkout', 'description': 'Until 2pm', 'point_cost': 200, 'validity_days': 60}

        created = admin_client.post('/api/admin/privileges/', payload, format='json')
        duplicate = admin_client.post('/api/admin/privileges/', payload, format='json')

        assert created.status_code == status.HTTP_201_CREATED
        assert created.data['data']['name'] == 'Late checkout'
        assert duplicate.status_code == status.HTTP_409_CONFLICT
        assert duplicate.data['error'] == 'DUPLICATE_PRIVILEGE'

    def test_create_rejects_bad_validity(self, admin_client):
        response = admin_client.post('/api/admin/privileges/', {
            'name': 'Forever-ish', 'description': 'Too long', 'point_cost': 10, 'validity_days': 5000,
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not Privilege.objects.exists()

    def test_non_staff_cannot_create(self, member_client):
        response = member_client.post('/api/admin/privileges/', {
            'name': 'Sneaky', 'description': 'Nope', 'point_cost': 0,
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_patch_and_deactivate(self, admin_client):
        privilege = PrivilegeFactory(point_cost=100)

        patched = admin_client.patch(f'/api/admin/privileges/{privilege.id}/', {'point_cost': 150}, format='json')
        deactivated = admin_client.post(f'/api/admin/privileges/{privilege.id}/deactivate/')

        assert patched.data['data']['point_cost'] == 150
        assert deactivated.data['data']['is_active'] is False

    def test_delete_in_use(self, admin_client):
        grant = PrivilegeGrantFactory()

        response = admin_client.delete(f'/api/admin/privileges/{grant.privilege_id}/')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error'] == 'PRIVILEGE_IN_USE'

    def test_revoke_grant(self, admin_client):
        grant = PrivilegeGrantFactory()

        response = admin_client.post(
            f'/api/admin/privileges/grants/{grant.id}/revoke/', {'reason': 'Chargeback'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        grant.refresh_from_db()
        assert grant.status == PrivilegeGrant.STATUS_EXPIRED


@pytest.mark.django_db
class TestJobsApi:

    def test_trigger_job(self, admin_client):
        response = admin_client.post('/api/admin/jobs/point-expiration/trigger/', {}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['msg'] == "Job 'point-expiration' completed"
        assert JobExecution.objects.get().trigger == 'manual'

    def test_job_status(self, admin_client):
        admin_client.post('/api/admin/jobs/point-expiration/trigger/', {}, format='json')

        response = admin_client.get('/api/admin/jobs/point-expiration/')

        assert response.data['data']['monitoring']['total_executions'] == 1
        assert len(response.data['data']['recent_executions']) == 1

    def test_unknown_job(self, admin_client):
        response = admin_client.post('/api/admin/jobs/no-such-job/trigger/', {}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error'] == 'UNKNOWN_JOB'
