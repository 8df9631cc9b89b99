"""
Privilege exchange: spend points and receive the grant as one atomic unit.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from django.utils import timezone

from apps.audit.services import AuditService
from apps.common.db import ledger_transaction
from apps.common.exceptions import (
    AlreadyOwned, InsufficientBalance, PrivilegeInactive, PrivilegeNotFound,
)
from apps.members.services import MemberService
from apps.points.models import PointBatch
from apps.points.services import BalanceCalculator, ConsumptionEngine
from ..models import Privilege, PrivilegeGrant

logger = logging.getLogger(__name__)


@dataclass
class ExchangeResult:
    grant_id: int
    privilege_id: int
    privilege_name: str
    points_deducted: int
    expires_at: Optional[datetime]
    exchanged_at: datetime
    balance_after: int

    def to_dict(self):
        return {
            'grant_id': self.grant_id,
            'privilege_id': self.privilege_id,
            'privilege_name': self.privilege_name,
            'points_deducted': self.points_deducted,
            'expires_at': self.expires_at,
            'exchanged_at': self.exchanged_at,
            'balance_after': self.balance_after,
        }


class ExchangeService:
    """Composes FIFO consumption with privilege eligibility rules"""

    @staticmethod
    def _check_exchangeable(privilege):
        if not privilege.can_be_exchanged():
            raise PrivilegeInactive(privilege.id, privilege.name)

    @staticmethod
    def _expire_stale_grants(member_id, privilege_id, now):
        """Active grants already past expiry no longer count as owned"""
        return PrivilegeGrant.objects.filter(
            member_id=member_id,
            privilege_id=privilege_id,
            status=PrivilegeGrant.STATUS_ACTIVE,
            expires_at__isnull=False,
            expires_at__lte=now,
        ).update(status=PrivilegeGrant.STATUS_EXPIRED, updated_at=now)

    @staticmethod
    def exchange(member_id, privilege_id, now=None) -> ExchangeResult:
        """
        Exchange points for a privilege.

        Preconditions fail fast in order: privilege exists and is active,
        member holds no active grant of it, balance covers the cost. The
        consumption and the grant commit together or not at all.
        """
        MemberService.get_member_by_id(member_id)
        try:
            privilege = Privilege.objects.get(pk=privilege_id)
        except (Privilege.DoesNotExist, ValueError, TypeError):
            raise PrivilegeNotFound(privilege_id)
        ExchangeService._check_exchangeable(privilege)

        now = now or timezone.now()
        stale = 0
        with ledger_transaction('exchange', member_id):
            MemberService.lock_member(member_id)

            # Re-read under the member lock; the catalogue may have changed
            privilege = Privilege.objects.filter(pk=privilege.pk).first()
            if privilege is None:
                raise PrivilegeNotFound(privilege_id)
            ExchangeService._check_exchangeable(privilege)

            stale = ExchangeService._expire_stale_grants(member_id, privilege.id, now)
            owned = PrivilegeGrant.objects.filter(
                member_id=member_id,
                privilege_id=privilege.id,
                status=PrivilegeGrant.STATUS_ACTIVE,
            ).first()
            if owned is not None:
                logger.warning(f"Member {member_id} already holds privilege {privilege.id} (grant {owned.id})")
                raise AlreadyOwned(privilege.id, owned.id, privilege.name)

            debit_id = None
            balance_before = BalanceCalculator.available_balance(member_id, now)
            balance_after = balance_before
            if privilege.point_cost > 0:
                if balance_before < privilege.point_cost:
                    logger.warning(
                        f"Member {member_id} cannot afford privilege {privilege.id}: "
                        f"required {privilege.point_cost}, available {balance_before}"
                    )
                    raise InsufficientBalance(
                        required=privilege.point_cost,
                        available=balance_before,
                        privilege_name=privilege.name,
                    )
                consumption = ConsumptionEngine.consume_locked(
                    member_id,
                    privilege.point_cost,
                    privilege.name,
                    kind=PointBatch.KIND_EXCHANGED,
                    now=now,
                )
                debit_id = consumption.debit_id
                balance_after = consumption.balance_after

            grant = PrivilegeGrant.objects.create(
                member_id=member_id,
                privilege=privilege,
                status=PrivilegeGrant.STATUS_ACTIVE,
                granted_at=now,
                expires_at=privilege.calculate_expiration_date(now),
                points_spent=privilege.point_cost,
                debit_id=debit_id,
            )

        logger.info(
            f"Member {member_id} exchanged {privilege.point_cost} points for privilege "
            f"{privilege.id} '{privilege.name}' (grant {grant.id})"
        )
        if stale:
            logger.info(f"Marked {stale} stale grant(s) of privilege {privilege.id} expired for member {member_id}")

        if debit_id is not None:
            AuditService.log_point_transaction(
                member_id=member_id,
                amount=-privilege.point_cost,
                description=privilege.name,
                balance_before=balance_before,
                balance_after=balance_after,
                kind=PointBatch.KIND_EXCHANGED,
                batch_id=debit_id,
                actor_type='MEMBER',
                actor_id=member_id,
                metadata={
                    'privilege_id': privilege.id,
                    'privilege_name': privilege.name,
                    'grant_id': grant.id,
                    'expires_at': grant.expires_at.isoformat() if grant.expires_at else None,
                },
            )
        else:
            AuditService.log_privilege_transaction(
                member_id=member_id,
                privilege_id=privilege.id,
                privilege_name=privilege.name,
                transaction_type='PRIVILEGE_GRANTED',
                point_cost=privilege.point_cost,
                grant_id=grant.id,
                actor_type='MEMBER',
                actor_id=member_id,
                metadata={'expires_at': grant.expires_at.isoformat() if grant.expires_at else None},
            )

        return ExchangeResult(
            grant_id=grant.id,
            privilege_id=privilege.id,
            privilege_name=privilege.name,
            points_deducted=privilege.point_cost,
            expires_at=grant.expires_at,
            exchanged_at=now,
            balance_after=balance_after,
        )
