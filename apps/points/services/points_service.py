"""
Points service for handling points operations.
"""
import logging
from datetime import timedelta

from django.utils import timezone

from apps.audit.services import AuditService
from apps.common.conf import loyalty_setting
from apps.common.db import ledger_transaction
from apps.common.exceptions import InvalidAmount, InvalidExpiration, ValidationFailed
from apps.members.services import MemberService
from ..models import PointBatch
from .balance_calculator import BalanceCalculator
from .consumption_engine import ConsumptionEngine
from .expiration_sweeper import ExpirationSweeper

logger = logging.getLogger(__name__)

ADMIN_ADJUSTMENT_PREFIX = 'Admin adjustment: '


class PointsService:
    """Service for handling points operations"""

    @staticmethod
    def validate_transaction_amount(amount):
        """Amount must be an integer inside the configured per-transaction limits"""
        ConsumptionEngine.validate_amount(amount)
        minimum = loyalty_setting('MIN_POINTS_PER_TRANSACTION')
        maximum = loyalty_setting('MAX_POINTS_PER_TRANSACTION')
        if amount < minimum:
            raise InvalidAmount(amount, f'Points amount must be at least {minimum}')
        if amount > maximum:
            raise InvalidAmount(amount, f'Points amount cannot exceed {maximum}')

    @staticmethod
    def validate_description(description):
        if not description or not str(description).strip():
            raise ValidationFailed('description', 'Description is required')
        if len(description) > 500:
            raise ValidationFailed('description', 'Description cannot exceed 500 characters')
        return str(description).strip()

    @staticmethod
    def add_points(member_id, amount, description, expiration_days=None, now=None,
                   actor_type='SYSTEM', actor_id=None):
        """Credit a new EARNED batch; returns the created PointBatch"""
        PointsService.validate_transaction_amount(amount)
        description = PointsService.validate_description(description)
        if expiration_days is None:
            expiration_days = loyalty_setting('DEFAULT_POINT_EXPIRATION_DAYS')
        elif isinstance(expiration_days, bool) or not isinstance(expiration_days, int) or expiration_days <= 0:
            raise InvalidExpiration(expiration_days, 'Expiration days must be a positive integer')
        MemberService.get_member_by_id(member_id)

        now = now or timezone.now()
        expires_at = now + timedelta(days=expiration_days) if expiration_days else None

        with ledger_transaction('add_points', member_id):
            MemberService.lock_member(member_id)
            balance_before = BalanceCalculator.available_balance(member_id, now)
            batch = PointBatch.objects.create(
                member_id=member_id,
                amount=amount,
                remaining=amount,
                kind=PointBatch.KIND_EARNED,
                description=description,
                expires_at=expires_at,
                created_at=now,
            )

        logger.info(
            f"Added {amount} points for member {member_id}"
            f"{f' expiring {expires_at.isoformat()}' if expires_at else ''}: {description}"
        )
        AuditService.log_point_transaction(
            member_id=member_id,
            amount=amount,
            description=description,
            balance_before=balance_before,
            balance_after=balance_before + amount,
            kind=PointBatch.KIND_EARNED,
            batch_id=batch.id,
            actor_type=actor_type,
            actor_id=actor_id,
            metadata={'expires_at': expires_at.isoformat() if expires_at else None},
        )
        return batch

    @staticmethod
    def deduct_points(member_id, amount, description, now=None, actor_type='SYSTEM', actor_id=None):
        """FIFO deduction; returns ConsumptionResult"""
        PointsService.validate_transaction_amount(amount)
        description = PointsService.validate_description(description)
        return ConsumptionEngine.consume(
            member_id,
            amount,
            description,
            kind=PointBatch.KIND_DEDUCTED,
            now=now,
            actor_type=actor_type,
            actor_id=actor_id,
        )

    @staticmethod
    def adjust_points(member_id, delta, reason, expiration_days=None, now=None,
                      actor_type='ADMIN', actor_id=None):
        """
        Administrative adjustment: positive deltas credit a batch, negative
        deltas go through FIFO consumption.
        """
        if isinstance(delta, bool) or not isinstance(delta, int) or delta == 0:
            raise InvalidAmount(delta, 'Adjustment must be a non-zero integer')
        reason = PointsService.validate_description(reason)
        description = PointsService.validate_description(f"{ADMIN_ADJUSTMENT_PREFIX}{reason}")

        if delta > 0:
            return PointsService.add_points(
                member_id, delta, description,
                expiration_days=expiration_days, now=now,
                actor_type=actor_type, actor_id=actor_id,
            )
        return PointsService.deduct_points(
            member_id, -delta, description,
            now=now, actor_type=actor_type, actor_id=actor_id,
        )

    @staticmethod
    def get_available_balance(member_id, at=None):
        MemberService.get_member_by_id(member_id)
        return BalanceCalculator.available_balance(member_id, at)

    @staticmethod
    def get_point_balance(member_id, at=None):
        MemberService.get_member_by_id(member_id)
        return BalanceCalculator.breakdown(member_id, at)

    @staticmethod
    def validate_sufficient_points(member_id, required, at=None):
        return BalanceCalculator.available_balance(member_id, at) >= required

    @staticmethod
    def get_point_history(member_id, kind=None):
        """All movements for a member, newest first"""
        MemberService.get_member_by_id(member_id)
        queryset = PointBatch.objects.for_member(member_id).order_by('-created_at', '-id')
        if kind:
            queryset = queryset.filter(kind=kind)
        return queryset

    @staticmethod
    def get_expiring_points(member_id=None, days=None, now=None):
        if member_id is not None:
            MemberService.get_member_by_id(member_id)
        return ExpirationSweeper.check_expiring_within(days, member_id=member_id, now=now)
