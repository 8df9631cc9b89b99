"""
Read-only balance queries over the point batch store.
"""
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional

from django.db.models import Max, Sum
from django.utils import timezone

from ..models import PointBatch


@dataclass
class PointBalance:
    """Balance breakdown by movement kind; debit totals are reported unsigned"""
    member_id: int
    total_earned: int
    total_deducted: int
    total_expired: int
    total_exchanged: int
    available_balance: int
    last_updated: Optional[datetime]

    def to_dict(self):
        return asdict(self)


class BalanceCalculator:
    """Derives balances from PointBatch rows without mutating anything"""

    @staticmethod
    def available_balance(member_id, at=None) -> int:
        """Points the member can spend at ``at`` (defaults to now)"""
        at = at or timezone.now()
        total = (
            PointBatch.objects.for_member(member_id)
            .available(at)
            .aggregate(total=Sum('remaining'))['total']
        )
        return max(total or 0, 0)

    @staticmethod
    def booked_balance(member_id) -> int:
        """
        Remaining points on batches not yet flagged expired, ignoring expires_at.

        This is the balance the ledger still carries on its books; the sweeper
        reports before/after against it since an overdue batch has already
        dropped out of the available balance.
        """
        total = (
            PointBatch.objects.for_member(member_id)
            .earned()
            .filter(is_expired=False)
            .aggregate(total=Sum('remaining'))['total']
        )
        return total or 0

    @staticmethod
    def breakdown(member_id, at=None) -> PointBalance:
        totals = {
            row['kind']: row['total'] or 0
            for row in (
                PointBatch.objects.for_member(member_id)
                .order_by()
                .values('kind')
                .annotate(total=Sum('amount'))
            )
        }
        last_updated = (
            PointBatch.objects.for_member(member_id)
            .aggregate(last=Max('created_at'))['last']
        )
        return PointBalance(
            member_id=member_id,
            total_earned=totals.get(PointBatch.KIND_EARNED, 0),
            total_deducted=-totals.get(PointBatch.KIND_DEDUCTED, 0),
            total_expired=-totals.get(PointBatch.KIND_EXPIRED, 0),
            total_exchanged=-totals.get(PointBatch.KIND_EXCHANGED, 0),
            available_balance=BalanceCalculator.available_balance(member_id, at),
            last_updated=last_updated,
        )
