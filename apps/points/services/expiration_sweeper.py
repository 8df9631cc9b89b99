"""
Expiration sweep over overdue point batches.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import List

from django.utils import timezone

from apps.audit.services import AuditService
from apps.common.conf import loyalty_setting
from apps.common.db import ledger_transaction
from apps.members.services import MemberService
from ..models import PointAllocation, PointBatch
from .balance_calculator import BalanceCalculator

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    total_points_expired: int = 0
    members_affected: int = 0
    batch_ids: List[int] = field(default_factory=list)
    errors: List[dict] = field(default_factory=list)

    @property
    def batches_expired(self):
        return len(self.batch_ids)

    def to_dict(self):
        return {
            'total_points_expired': self.total_points_expired,
            'members_affected': self.members_affected,
            'batches_expired': self.batches_expired,
            'batch_ids': list(self.batch_ids),
            'errors': list(self.errors),
        }


@dataclass
class _ExpiredBatch:
    batch_id: int
    member_id: int
    points_lost: int
    debit_id: int
    balance_before: int
    balance_after: int
    description: str


class ExpirationSweeper:
    """Marks overdue batches expired, one independent unit per batch"""

    @staticmethod
    def sweep(as_of=None, member_id=None) -> SweepResult:
        """
        Expire every batch with expires_at <= as_of that is not yet flagged.

        Each batch commits on its own; a failing batch is reported in
        ``errors`` and the sweep moves on. Running it again with the same
        ``as_of`` finds nothing left to do.
        """
        as_of = as_of or timezone.now()
        candidates = PointBatch.objects.due_for_expiry(as_of)
        if member_id is not None:
            candidates = candidates.for_member(member_id)
        due = list(candidates.order_by('expires_at', 'id').values_list('id', 'member_id'))

        logger.info(f"Starting point expiration sweep as of {as_of.isoformat()}: {len(due)} batch(es) due")

        result = SweepResult()
        affected = defaultdict(int)
        for batch_id, batch_member_id in due:
            try:
                expired = ExpirationSweeper._expire_batch(batch_id, batch_member_id, as_of)
            except Exception as exc:
                # One bad batch must not stop the rest of the sweep
                logger.error(f"Failed to expire point batch {batch_id}: {exc}", exc_info=True)
                result.errors.append({
                    'batch_id': batch_id,
                    'member_id': batch_member_id,
                    'error': str(exc),
                })
                continue

            if expired is None:
                continue

            result.batch_ids.append(batch_id)
            result.total_points_expired += expired.points_lost
            affected[batch_member_id] += expired.points_lost

            if expired.points_lost > 0:
                AuditService.log_point_transaction(
                    member_id=expired.member_id,
                    amount=-expired.points_lost,
                    description=expired.description,
                    balance_before=expired.balance_before,
                    balance_after=expired.balance_after,
                    kind=PointBatch.KIND_EXPIRED,
                    batch_id=expired.debit_id,
                    metadata={'expired_batch_id': batch_id, 'as_of': as_of.isoformat()},
                )

        result.members_affected = len(affected)
        logger.info(
            f"Point expiration sweep finished: {result.total_points_expired} points in "
            f"{result.batches_expired} batch(es) across {result.members_affected} member(s), "
            f"{len(result.errors)} error(s)"
        )
        return result

    @staticmethod
    def _expire_batch(batch_id, member_id, as_of):
        """Expire one batch; returns None when another sweep got there first"""
        with ledger_transaction('expire_batch', member_id):
            MemberService.lock_member(member_id, active_only=False)
            batch = PointBatch.objects.filter(
                pk=batch_id,
                kind=PointBatch.KIND_EARNED,
                is_expired=False,
            ).first()
            if batch is None:
                return None

            balance_before = BalanceCalculator.booked_balance(member_id)
            points_lost = batch.remaining

            updated = PointBatch.objects.filter(pk=batch_id, is_expired=False).update(
                is_expired=True,
                remaining=0,
            )
            if updated != 1:
                return None

            description = (
                f"Automatic expiration of points earned on {batch.created_at.date().isoformat()}"
            )
            debit_id = None
            if points_lost > 0:
                debit = PointBatch.objects.create(
                    member_id=member_id,
                    amount=-points_lost,
                    remaining=0,
                    kind=PointBatch.KIND_EXPIRED,
                    description=description,
                    created_at=as_of,
                )
                PointAllocation.objects.create(debit=debit, batch=batch, amount=points_lost)
                debit_id = debit.id

        logger.info(f"Expired point batch {batch_id} for member {member_id}: {points_lost} points lost")
        return _ExpiredBatch(
            batch_id=batch_id,
            member_id=member_id,
            points_lost=points_lost,
            debit_id=debit_id,
            balance_before=balance_before,
            balance_after=balance_before - points_lost,
            description=description,
        )

    @staticmethod
    def check_expiring_within(days=None, member_id=None, now=None):
        """Batches expiring in (now, now + days], soonest first. Read-only."""
        days = loyalty_setting('EXPIRING_SOON_DAYS') if days is None else days
        queryset = PointBatch.objects.expiring_within(days, now=now)
        if member_id is not None:
            queryset = queryset.for_member(member_id)
        return queryset.order_by('expires_at', 'id')

    @staticmethod
    def summarize_expiring(days=None, now=None):
        """Per-member totals of points about to expire, for notifications"""
        summary = defaultdict(lambda: {'points': 0, 'batches': 0, 'earliest_expiry': None})
        for batch in ExpirationSweeper.check_expiring_within(days, now=now):
            entry = summary[batch.member_id]
            entry['points'] += batch.remaining
            entry['batches'] += 1
            if entry['earliest_expiry'] is None:
                entry['earliest_expiry'] = batch.expires_at
        return dict(summary)
