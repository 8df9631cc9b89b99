"""
Privilege catalogue management and grant lifecycle.
"""
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.audit.services import AuditService
from apps.common.exceptions import (
    DuplicatePrivilege, GrantNotActive, GrantNotFound, InvalidAmount, InvalidExpiration,
    PrivilegeInUse, PrivilegeNotFound, ValidationFailed,
)
from apps.members.services import MemberService
from ..models import MAX_VALIDITY_DAYS, Privilege, PrivilegeGrant

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'description', 'point_cost', 'validity_days', 'is_active')


class PrivilegeService:
    """Service class for privilege operations"""

    @staticmethod
    def _clean(fields):
        cleaned = dict(fields)
        if 'name' in cleaned:
            name = (cleaned['name'] or '').strip()
            if not name:
                raise ValidationFailed('name', 'Privilege name is required')
            if len(name) > 200:
                raise ValidationFailed('name', 'Privilege name cannot exceed 200 characters')
            cleaned['name'] = name
        if 'description' in cleaned:
            description = (cleaned['description'] or '').strip()
            if not description:
                raise ValidationFailed('description', 'Privilege description is required')
            if len(description) > 1000:
                raise ValidationFailed('description', 'Privilege description cannot exceed 1000 characters')
            cleaned['description'] = description
        if 'point_cost' in cleaned:
            cost = cleaned['point_cost']
            if isinstance(cost, bool) or not isinstance(cost, int) or cost < 0:
                raise InvalidAmount(cost, 'Point cost must be a non-negative integer')
        if cleaned.get('validity_days') is not None:
            days = cleaned['validity_days']
            if isinstance(days, bool) or not isinstance(days, int) or not 1 <= days <= MAX_VALIDITY_DAYS:
                raise InvalidExpiration(
                    days, f'Validity days must be between 1 and {MAX_VALIDITY_DAYS}'
                )
        return cleaned

    @staticmethod
    def _ensure_unique_name(name, exclude_id=None):
        queryset = Privilege.objects.filter(name__iexact=name)
        if exclude_id is not None:
            queryset = queryset.exclude(pk=exclude_id)
        if queryset.exists():
            raise DuplicatePrivilege(name)

    @staticmethod
    def create_privilege(name, description, point_cost, validity_days=None, is_active=True):
        cleaned = PrivilegeService._clean({
            'name': name,
            'description': description,
            'point_cost': point_cost,
            'validity_days': validity_days,
            'is_active': is_active,
        })
        PrivilegeService._ensure_unique_name(cleaned['name'])
        try:
            with transaction.atomic():
                privilege = Privilege.objects.create(**cleaned)
        except IntegrityError:
            raise DuplicatePrivilege(cleaned['name'])
        logger.info(f"Created privilege {privilege.id} '{privilege.name}' costing {privilege.point_cost}")
        return privilege

    @staticmethod
    def update_privilege(privilege_id, **fields):
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationFailed(sorted(unknown)[0], f"Field '{sorted(unknown)[0]}' cannot be updated")
        privilege = PrivilegeService.get_privilege_by_id(privilege_id)
        cleaned = PrivilegeService._clean(fields)
        if 'name' in cleaned:
            PrivilegeService._ensure_unique_name(cleaned['name'], exclude_id=privilege.id)

        for field, value in cleaned.items():
            setattr(privilege, field, value)
        try:
            with transaction.atomic():
                privilege.save()
        except IntegrityError:
            raise DuplicatePrivilege(cleaned.get('name', privilege.name))
        logger.info(f"Updated privilege {privilege.id}: {', '.join(sorted(cleaned))}")
        return privilege

    @staticmethod
    def activate_privilege(privilege_id):
        return PrivilegeService.update_privilege(privilege_id, is_active=True)

    @staticmethod
    def deactivate_privilege(privilege_id):
        return PrivilegeService.update_privilege(privilege_id, is_active=False)

    @staticmethod
    def delete_privilege(privilege_id):
        """Delete a catalogue entry nobody has ever exchanged"""
        privilege = PrivilegeService.get_privilege_by_id(privilege_id)
        grant_count = privilege.grants.count()
        if grant_count:
            raise PrivilegeInUse(privilege_id, grant_count)
        privilege.delete()
        logger.info(f"Deleted privilege {privilege_id}")

    @staticmethod
    def get_privilege_by_id(privilege_id):
        try:
            return Privilege.objects.get(pk=privilege_id)
        except (Privilege.DoesNotExist, ValueError, TypeError):
            raise PrivilegeNotFound(privilege_id)

    @staticmethod
    def list_available():
        """Active privileges, cheapest first"""
        return Privilege.objects.filter(is_active=True).order_by('point_cost', 'name')

    @staticmethod
    def list_privileges(is_active=None, search=None):
        queryset = Privilege.objects.all().order_by('point_cost', 'name')
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active)
        if search:
            queryset = queryset.filter(name__icontains=search)
        return queryset

    @staticmethod
    def get_member_privileges(member_id, active_only=False, now=None):
        MemberService.get_member_by_id(member_id)
        now = now or timezone.now()
        queryset = (
            PrivilegeGrant.objects.filter(member_id=member_id)
            .select_related('privilege')
            .order_by('-granted_at', '-id')
        )
        if active_only:
            queryset = queryset.filter(status=PrivilegeGrant.STATUS_ACTIVE).exclude(expires_at__lte=now)
        return queryset

    @staticmethod
    def get_grant(grant_id, member_id=None):
        queryset = PrivilegeGrant.objects.select_related('privilege')
        if member_id is not None:
            queryset = queryset.filter(member_id=member_id)
        try:
            return queryset.get(pk=grant_id)
        except (PrivilegeGrant.DoesNotExist, ValueError, TypeError):
            raise GrantNotFound(grant_id)

    @staticmethod
    def use_grant(grant_id, member_id=None, now=None):
        """Redeem an active grant; used is terminal"""
        now = now or timezone.now()
        with transaction.atomic():
            grant = PrivilegeService.get_grant(grant_id, member_id)
            grant = PrivilegeGrant.objects.select_for_update().select_related('privilege').get(pk=grant.pk)
            if grant.status == PrivilegeGrant.STATUS_ACTIVE and grant.is_past_expiry(now):
                raise GrantNotActive(grant.id, PrivilegeGrant.STATUS_EXPIRED)
            if grant.status != PrivilegeGrant.STATUS_ACTIVE:
                raise GrantNotActive(grant.id, grant.status)
            grant.status = PrivilegeGrant.STATUS_USED
            grant.used_at = now
            grant.save(update_fields=['status', 'used_at', 'updated_at'])

        logger.info(f"Member {grant.member_id} used privilege grant {grant.id}")
        AuditService.log_privilege_transaction(
            member_id=grant.member_id,
            privilege_id=grant.privilege_id,
            privilege_name=grant.privilege.name,
            transaction_type='PRIVILEGE_USED',
            grant_id=grant.id,
            actor_type='MEMBER',
            actor_id=grant.member_id,
        )
        return grant

    @staticmethod
    def revoke_grant(grant_id, reason='', actor_id=None):
        """Admin deactivation of an active grant"""
        with transaction.atomic():
            grant = PrivilegeService.get_grant(grant_id)
            updated = PrivilegeGrant.objects.filter(
                pk=grant.pk, status=PrivilegeGrant.STATUS_ACTIVE
            ).update(status=PrivilegeGrant.STATUS_EXPIRED, updated_at=timezone.now())
            if not updated:
                raise GrantNotActive(grant.id, grant.status)
            grant.refresh_from_db()

        logger.info(f"Revoked privilege grant {grant.id} for member {grant.member_id}: {reason}")
        AuditService.log_privilege_transaction(
            member_id=grant.member_id,
            privilege_id=grant.privilege_id,
            privilege_name=grant.privilege.name,
            transaction_type='PRIVILEGE_REVOKED',
            grant_id=grant.id,
            actor_type='ADMIN',
            actor_id=actor_id,
            metadata={'reason': reason},
        )
        return grant

    @staticmethod
    def process_expired_grants(now=None):
        """
        Flip active grants past their expiry to expired.

        Each grant is its own unit; failures are collected and the pass
        continues. Returns {'processed': n, 'errors': [...]}.
        """
        now = now or timezone.now()
        due = list(
            PrivilegeGrant.objects.filter(
                status=PrivilegeGrant.STATUS_ACTIVE,
                expires_at__isnull=False,
                expires_at__lte=now,
            ).select_related('privilege').order_by('expires_at', 'id')
        )
        logger.info(f"Processing {len(due)} expired privilege grant(s) as of {now.isoformat()}")

        processed = 0
        errors = []
        for grant in due:
            try:
                with transaction.atomic():
                    updated = PrivilegeGrant.objects.filter(
                        pk=grant.pk, status=PrivilegeGrant.STATUS_ACTIVE
                    ).update(status=PrivilegeGrant.STATUS_EXPIRED, updated_at=now)
            except Exception as exc:
                logger.error(f"Failed to expire privilege grant {grant.id}: {exc}", exc_info=True)
                errors.append({'grant_id': grant.id, 'member_id': grant.member_id, 'error': str(exc)})
                continue
            if not updated:
                continue
            processed += 1
            AuditService.log_privilege_transaction(
                member_id=grant.member_id,
                privilege_id=grant.privilege_id,
                privilege_name=grant.privilege.name,
                transaction_type='PRIVILEGE_EXPIRED',
                grant_id=grant.id,
                metadata={'expired_at': grant.expires_at.isoformat()},
            )

        logger.info(f"Privilege grant expiry finished: {processed} processed, {len(errors)} error(s)")
        return {'processed': processed, 'errors': errors}
