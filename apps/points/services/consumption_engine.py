"""
FIFO consumption of earned point batches.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, NamedTuple

from django.db.models import F
from django.utils import timezone

from apps.audit.services import AuditService
from apps.common.db import ledger_transaction
from apps.common.exceptions import ConcurrencyConflict, InsufficientBalance, InvalidAmount
from apps.members.services import MemberService
from ..models import PointAllocation, PointBatch

logger = logging.getLogger(__name__)


class BatchAllocation(NamedTuple):
    batch_id: int
    amount: int


@dataclass
class ConsumptionResult:
    member_id: int
    debit_id: int
    kind: str
    amount: int
    reason: str
    balance_before: int
    balance_after: int
    consumed_at: datetime
    allocations: List[BatchAllocation] = field(default_factory=list)

    def to_dict(self):
        return {
            'member_id': self.member_id,
            'transaction_id': self.debit_id,
            'kind': self.kind,
            'amount': self.amount,
            'reason': self.reason,
            'balance_before': self.balance_before,
            'balance_after': self.balance_after,
            'consumed_at': self.consumed_at,
            'allocations': [allocation._asdict() for allocation in self.allocations],
        }


def plan_allocations(batches, amount):
    """
    Walk batches oldest first, taking min(remaining, still needed) from each.

    ``batches`` must already be in FIFO order. Returns the allocation list, or
    None when the batches cannot cover ``amount``.
    """
    if sum(batch.remaining for batch in batches) < amount:
        return None

    allocations = []
    needed = amount
    for batch in batches:
        if needed == 0:
            break
        take = min(batch.remaining, needed)
        if take > 0:
            allocations.append(BatchAllocation(batch.id, take))
            needed -= take
    return allocations


class ConsumptionEngine:
    """Deducts points from a member's oldest eligible batches first"""

    @staticmethod
    def validate_amount(amount):
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidAmount(amount, 'Points amount must be a positive integer')

    @staticmethod
    def consume(member_id, amount, reason, kind=PointBatch.KIND_DEDUCTED, now=None,
                actor_type='SYSTEM', actor_id=None):
        """
        Consume ``amount`` points FIFO in its own transaction and audit it.

        All-or-nothing: an InsufficientBalance leaves every batch untouched.
        """
        ConsumptionEngine.validate_amount(amount)
        MemberService.get_member_by_id(member_id)

        with ledger_transaction('consume', member_id):
            result = ConsumptionEngine.consume_locked(member_id, amount, reason, kind=kind, now=now)

        AuditService.log_point_transaction(
            member_id=member_id,
            amount=-result.amount,
            description=reason,
            balance_before=result.balance_before,
            balance_after=result.balance_after,
            kind=kind,
            batch_id=result.debit_id,
            actor_type=actor_type,
            actor_id=actor_id,
            metadata={'allocations': [allocation._asdict() for allocation in result.allocations]},
        )
        return result

    @staticmethod
    def consume_locked(member_id, amount, reason, kind=PointBatch.KIND_DEDUCTED, now=None):
        """
        Consume inside the caller's transaction.

        Takes the member lock itself, so eligibility is evaluated against the
        committed state other writers left behind. Emits no audit event; the
        caller owns the transaction and reports once it has committed.
        """
        ConsumptionEngine.validate_amount(amount)
        if kind not in PointBatch.DEBIT_KINDS or kind == PointBatch.KIND_EXPIRED:
            raise ValueError(f"Cannot consume points as {kind}")

        now = now or timezone.now()
        MemberService.lock_member(member_id)

        batches = list(PointBatch.objects.for_member(member_id).available(now).fifo())
        balance_before = sum(batch.remaining for batch in batches)

        allocations = plan_allocations(batches, amount)
        if allocations is None:
            logger.warning(
                f"Insufficient points for member {member_id}: "
                f"required {amount}, available {balance_before}"
            )
            raise InsufficientBalance(required=amount, available=balance_before)

        for allocation in allocations:
            updated = PointBatch.objects.filter(
                pk=allocation.batch_id,
                is_expired=False,
                remaining__gte=allocation.amount,
            ).update(remaining=F('remaining') - allocation.amount)
            if updated != 1:
                # Batch changed under us despite the member lock; abort the whole unit
                raise ConcurrencyConflict(
                    'Point batch changed during consumption, please retry',
                    batch_id=allocation.batch_id,
                )

        debit = PointBatch.objects.create(
            member_id=member_id,
            amount=-amount,
            remaining=0,
            kind=kind,
            description=reason,
            created_at=now,
        )
        PointAllocation.objects.bulk_create([
            PointAllocation(debit=debit, batch_id=allocation.batch_id, amount=allocation.amount)
            for allocation in allocations
        ])

        logger.info(
            f"Consumed {amount} points ({kind}) for member {member_id} "
            f"from {len(allocations)} batch(es): {reason}"
        )
        return ConsumptionResult(
            member_id=member_id,
            debit_id=debit.id,
            kind=kind,
            amount=amount,
            reason=reason,
            balance_before=balance_before,
            balance_after=balance_before - amount,
            consumed_at=now,
            allocations=allocations,
        )
