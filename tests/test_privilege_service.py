"""
Tests for privilege catalogue management and grant lifecycle.
"""
from datetime import timedelta

import pytest
from django.utils import timezone

from apps.audit.models import TransactionHistory
from apps.common.exceptions import (
    DuplicatePrivilege, GrantNotActive, GrantNotFound, InvalidAmount, InvalidExpiration,
    PrivilegeInUse, PrivilegeNotFound, ValidationFailed,
)
from apps.privileges.models import Privilege, PrivilegeGrant
from apps.privileges.services import PrivilegeService
from tests.factories import MemberFactory, PrivilegeFactory, PrivilegeGrantFactory


@pytest.mark.django_db
class TestPrivilegeCatalogue:

    def test_create_privilege(self):
        privilege = PrivilegeService.create_privilege('  Free parking ', 'Two hours', 150, validity_days=90)

        assert privilege.name == 'Free parking'
        assert privilege.point_cost == 150
        assert privilege.validity_days == 90
        assert privilege.is_active

    def test_duplicate_name_is_case_insensitive(self):
        PrivilegeService.create_privilege('Free parking', 'Two hours', 150)

        with pytest.raises(DuplicatePrivilege):
            PrivilegeService.create_privilege('FREE PARKING', 'Again', 10)

    @pytest.mark.parametrize('days', [0, -1, 3651])
    def test_validity_out_of_range(self, days):
        with pytest.raises(InvalidExpiration):
            PrivilegeService.create_privilege('Valet', 'Valet parking', 100, validity_days=days)
        assert not Privilege.objects.exists()

    def test_negative_cost(self):
        with pytest.raises(InvalidAmount):
            PrivilegeService.create_privilege('Valet', 'Valet parking', -1)

    def test_blank_name(self):
        with pytest.raises(ValidationFailed):
            PrivilegeService.create_privilege('   ', 'Nameless', 100)

    def test_update_and_deactivate(self):
        privilege = PrivilegeFactory(point_cost=100)

        PrivilegeService.update_privilege(privilege.id, point_cost=250, description='Updated')
        PrivilegeService.deactivate_privilege(privilege.id)

        privilege.refresh_from_db()
        assert privilege.point_cost == 250
        assert privilege.description == 'Updated'
        assert not privilege.is_active
        assert privilege not in PrivilegeService.list_available()

        PrivilegeService.activate_privilege(privilege.id)
        assert privilege in PrivilegeService.list_available()

    def test_update_rejects_unknown_fields(self):
        privilege = PrivilegeFactory()
        with pytest.raises(ValidationFailed):
            PrivilegeService.update_privilege(privilege.id, created_at=timezone.now())

    def test_rename_to_existing_name(self):
        PrivilegeFactory(name='Lounge')
        other = PrivilegeFactory(name='Parking')
        with pytest.raises(DuplicatePrivilege):
            PrivilegeService.update_privilege(other.id, name='lounge')

    def test_delete_unused_privilege(self):
        privilege = PrivilegeFactory()
        PrivilegeService.delete_privilege(privilege.id)
        with pytest.raises(PrivilegeNotFound):
            PrivilegeService.get_privilege_by_id(privilege.id)

    def test_delete_privilege_in_use(self):
        grant = PrivilegeGrantFactory()
        with pytest.raises(PrivilegeInUse):
            PrivilegeService.delete_privilege(grant.privilege_id)

    def test_list_privileges_filters(self):
        PrivilegeFactory(name='Gold lounge', point_cost=500)
        PrivilegeFactory(name='Silver lounge', point_cost=200, is_active=False)
        PrivilegeFactory(name='Parking', point_cost=100)

        assert [p.name for p in PrivilegeService.list_privileges(search='lounge')] == [
            'Silver lounge', 'Gold lounge',
        ]
        assert [p.name for p in PrivilegeService.list_privileges(is_active=True)] == ['Parking', 'Gold lounge']


@pytest.mark.django_db
class TestGrantLifecycle:

    def test_days_remaining_rounds_up(self):
        now = timezone.now()
        grant = PrivilegeGrantFactory(granted_at=now, expires_at=now + timedelta(days=2, hours=1))

        assert grant.days_remaining == 3

    def test_days_remaining_without_expiry(self):
        grant = PrivilegeGrantFactory(expires_at=None)

        assert grant.days_remaining is None
        assert not grant.is_expired

    def test_use_grant(self):
        grant = PrivilegeGrantFactory()

        used = PrivilegeService.use_grant(grant.id, member_id=grant.member_id)

        assert used.status == PrivilegeGrant.STATUS_USED
        assert used.used_at is not None
        assert TransactionHistory.objects.get().transaction_type == 'PRIVILEGE_USED'

        with pytest.raises(GrantNotActive):
            PrivilegeService.use_grant(grant.id, member_id=grant.member_id)

    def test_use_grant_of_someone_else(self):
        grant = PrivilegeGrantFactory()
        stranger = MemberFactory()

        with pytest.raises(GrantNotFound):
            PrivilegeService.use_grant(grant.id, member_id=stranger.id)

    def test_use_lapsed_grant(self):
        now = timezone.now()
        grant = PrivilegeGrantFactory(granted_at=now - timedelta(days=31), expires_at=now - timedelta(days=1))

        with pytest.raises(GrantNotActive) as excinfo:
            PrivilegeService.use_grant(grant.id, now=now)

        assert excinfo.value.details['status'] == PrivilegeGrant.STATUS_EXPIRED

    def test_revoke_grant(self):
        grant = PrivilegeGrantFactory()

        revoked = PrivilegeService.revoke_grant(grant.id, reason='Fraud check', actor_id=1)

        assert revoked.status == PrivilegeGrant.STATUS_EXPIRED
        history = TransactionHistory.objects.get()
        assert history.transaction_type == 'PRIVILEGE_REVOKED'
        assert history.metadata['reason'] == 'Fraud check'

        with pytest.raises(GrantNotActive):
            PrivilegeService.revoke_grant(grant.id)

    def test_process_expired_grants(self):
        now = timezone.now()
        lapsed = [
            PrivilegeGrantFactory(granted_at=now - timedelta(days=40), expires_at=now - timedelta(days=days))
            for days in (1, 2)
        ]
        current = PrivilegeGrantFactory(granted_at=now, expires_at=now + timedelta(days=5))
        PrivilegeGrantFactory(expires_at=None)

        first = PrivilegeService.process_expired_grants(now)
        second = PrivilegeService.process_expired_grants(now)

        assert first == {'processed': 2, 'errors': []}
        assert second == {'processed': 0, 'errors': []}
        for grant in lapsed:
            grant.refresh_from_db()
            assert grant.status == PrivilegeGrant.STATUS_EXPIRED
        current.refresh_from_db()
        assert current.status == PrivilegeGrant.STATUS_ACTIVE
        assert TransactionHistory.objects.filter(transaction_type='PRIVILEGE_EXPIRED').count() == 2

    def test_member_privileges_active_only(self):
        member = MemberFactory()
        now = timezone.now()
        active = PrivilegeGrantFactory(member=member, granted_at=now)
        PrivilegeGrantFactory(member=member, status=PrivilegeGrant.STATUS_USED)
        PrivilegeGrantFactory(member=member, granted_at=now - timedelta(days=40), expires_at=now - timedelta(days=1))

        assert list(PrivilegeService.get_member_privileges(member.id, active_only=True, now=now)) == [active]
        assert PrivilegeService.get_member_privileges(member.id).count() == 3
