"""
Tests for the point expiration sweep.
"""
from datetime import timedelta
from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase
from django.utils import timezone

from apps.audit.models import AuditLog, TransactionHistory
from apps.points.models import PointAllocation, PointBatch
from apps.points.services import BalanceCalculator, ConsumptionEngine, ExpirationSweeper
from tests.factories import MemberFactory, PointBatchFactory


class ExpirationSweeperTests(TestCase):

    def setUp(self):
        self.member = MemberFactory()
        self.now = timezone.now()
        self.yesterday = self.now - timedelta(days=1)

    def test_only_overdue_batch_is_expired(self):
        a = PointBatchFactory(
            member=self.member, amount=100, expires_at=self.yesterday,
            created_at=self.now - timedelta(days=30),
        )
        b = PointBatchFactory(member=self.member, amount=50, created_at=self.now - timedelta(days=20))

        result = ExpirationSweeper.sweep(self.now)

        self.assertEqual(result.batch_ids, [a.id])
        self.assertEqual(result.total_points_expired, 100)
        self.assertEqual(result.members_affected, 1)
        self.assertEqual(result.errors, [])
        a.refresh_from_db()
        b.refresh_from_db()
        self.assertTrue(a.is_expired)
        self.assertEqual(a.remaining, 0)
        self.assertFalse(b.is_expired)
        self.assertEqual(BalanceCalculator.available_balance(self.member.id, self.now), 50)

    def test_expired_history_row_reflects_lost_remainder(self):
        earned_at = self.now - timedelta(days=400)
        batch = PointBatchFactory(
            member=self.member, amount=100, created_at=earned_at, expires_at=self.yesterday,
        )
        ConsumptionEngine.consume(self.member.id, 30, 'Partial spend', now=earned_at + timedelta(days=1))

        result = ExpirationSweeper.sweep(self.now)

        self.assertEqual(result.total_points_expired, 70)
        expired = PointBatch.objects.get(kind=PointBatch.KIND_EXPIRED)
        self.assertEqual(expired.amount, -70)
        self.assertEqual(
            expired.description,
            f'Automatic expiration of points earned on {earned_at.date().isoformat()}',
        )
        allocation = PointAllocation.objects.get(debit=expired)
        self.assertEqual((allocation.batch_id, allocation.amount), (batch.id, 70))

    def test_sweep_is_idempotent(self):
        PointBatchFactory(member=self.member, amount=100, expires_at=self.yesterday)

        first = ExpirationSweeper.sweep(self.now)
        second = ExpirationSweeper.sweep(self.now)

        self.assertEqual(first.batches_expired, 1)
        self.assertEqual(second.batches_expired, 0)
        self.assertEqual(second.total_points_expired, 0)
        self.assertEqual(PointBatch.objects.filter(kind=PointBatch.KIND_EXPIRED).count(), 1)

    def test_fully_spent_batch_is_flagged_without_history_row(self):
        PointBatchFactory(member=self.member, amount=100, remaining=0, expires_at=self.yesterday)

        result = ExpirationSweeper.sweep(self.now)

        self.assertEqual(result.batches_expired, 1)
        self.assertEqual(result.total_points_expired, 0)
        self.assertFalse(PointBatch.objects.filter(kind=PointBatch.KIND_EXPIRED).exists())
        self.assertFalse(AuditLog.objects.exists())

    def test_future_and_non_expiring_batches_are_untouched(self):
        PointBatchFactory(member=self.member, amount=100, expires_at=self.now + timedelta(minutes=1))
        PointBatchFactory(member=self.member, amount=100)

        result = ExpirationSweeper.sweep(self.now)

        self.assertEqual(result.batch_ids, [])
        self.assertEqual(PointBatch.objects.filter(is_expired=True).count(), 0)

    def test_expiry_exactly_at_as_of_is_due(self):
        batch = PointBatchFactory(member=self.member, amount=10, expires_at=self.now)

        result = ExpirationSweeper.sweep(self.now)

        self.assertEqual(result.batch_ids, [batch.id])

    def test_counts_points_and_members(self):
        other = MemberFactory()
        PointBatchFactory(member=self.member, amount=100, expires_at=self.yesterday)
        PointBatchFactory(member=self.member, amount=20, expires_at=self.yesterday)
        PointBatchFactory(member=other, amount=5, expires_at=self.yesterday)

        result = ExpirationSweeper.sweep(self.now)

        self.assertEqual(result.total_points_expired, 125)
        self.assertEqual(result.members_affected, 2)
        self.assertEqual(result.batches_expired, 3)

    def test_member_filter(self):
        other = MemberFactory()
        mine = PointBatchFactory(member=self.member, amount=100, expires_at=self.yesterday)
        theirs = PointBatchFactory(member=other, amount=100, expires_at=self.yesterday)

        result = ExpirationSweeper.sweep(self.now, member_id=self.member.id)

        self.assertEqual(result.batch_ids, [mine.id])
        theirs.refresh_from_db()
        self.assertFalse(theirs.is_expired)

    def test_deactivated_member_batches_still_expire(self):
        batch = PointBatchFactory(member=self.member, amount=100, expires_at=self.yesterday)
        self.member.is_active = False
        self.member.save(update_fields=['is_active'])

        result = ExpirationSweeper.sweep(self.now)

        self.assertEqual(result.errors, [])
        self.assertEqual(result.batch_ids, [batch.id])
        batch.refresh_from_db()
        self.assertTrue(batch.is_expired)
        self.assertEqual(batch.remaining, 0)

    def test_failing_batch_does_not_stop_the_sweep(self):
        bad = PointBatchFactory(member=self.member, amount=100, expires_at=self.yesterday - timedelta(days=1))
        good = PointBatchFactory(member=self.member, amount=40, expires_at=self.yesterday)
        original = ExpirationSweeper._expire_batch

        def flaky(batch_id, member_id, as_of):
            if batch_id == bad.id:
                raise DatabaseError('disk full')
            return original(batch_id, member_id, as_of)

        with patch.object(ExpirationSweeper, '_expire_batch', side_effect=flaky):
            result = ExpirationSweeper.sweep(self.now)

        self.assertEqual(result.batch_ids, [good.id])
        self.assertEqual(result.total_points_expired, 40)
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.errors[0]['batch_id'], bad.id)
        self.assertIn('disk full', result.errors[0]['error'])
        bad.refresh_from_db()
        self.assertFalse(bad.is_expired)

        retry = ExpirationSweeper.sweep(self.now)
        self.assertEqual(retry.batch_ids, [bad.id])

    def test_audit_records_booked_balance(self):
        PointBatchFactory(member=self.member, amount=100, expires_at=self.yesterday)
        PointBatchFactory(member=self.member, amount=50)

        ExpirationSweeper.sweep(self.now)

        history = TransactionHistory.objects.get(transaction_type='POINT_EXPIRED')
        self.assertEqual(history.amount, -100)
        self.assertEqual(history.balance_before, 150)
        self.assertEqual(history.balance_after, 50)
        self.assertEqual(AuditLog.objects.get().action, 'POINT_EXPIRE')

    def test_to_dict(self):
        batch = PointBatchFactory(member=self.member, amount=10, expires_at=self.yesterday)

        data = ExpirationSweeper.sweep(self.now).to_dict()

        self.assertEqual(data, {
            'total_points_expired': 10,
            'members_affected': 1,
            'batches_expired': 1,
            'batch_ids': [batch.id],
            'errors': [],
        })


class CheckExpiringWithinTests(TestCase):

    def setUp(self):
        self.member = MemberFactory()
        self.now = timezone.now()

    def test_window_selection(self):
        soon = PointBatchFactory(member=self.member, amount=10, expires_at=self.now + timedelta(days=3))
        PointBatchFactory(member=self.member, amount=10, expires_at=self.now + timedelta(days=10))
        PointBatchFactory(member=self.member, amount=10, expires_at=self.now - timedelta(days=1))
        PointBatchFactory(member=self.member, amount=10)
        PointBatchFactory(member=self.member, amount=10, remaining=0, expires_at=self.now + timedelta(days=1))

        batches = list(ExpirationSweeper.check_expiring_within(7, now=self.now))

        self.assertEqual(batches, [soon])

    def test_is_read_only(self):
        PointBatchFactory(member=self.member, amount=10, expires_at=self.now - timedelta(days=1))
        PointBatchFactory(member=self.member, amount=10, expires_at=self.now + timedelta(days=1))

        list(ExpirationSweeper.check_expiring_within(7, now=self.now))

        self.assertFalse(PointBatch.objects.filter(is_expired=True).exists())
        self.assertEqual(PointBatch.objects.count(), 2)

    def test_summary_per_member(self):
        other = MemberFactory()
        PointBatchFactory(member=self.member, amount=10, expires_at=self.now + timedelta(days=2))
        PointBatchFactory(member=self.member, amount=15, expires_at=self.now + timedelta(days=1))
        PointBatchFactory(member=other, amount=7, expires_at=self.now + timedelta(days=5))

        summary = ExpirationSweeper.summarize_expiring(7, now=self.now)

        self.assertEqual(summary[self.member.id]['points'], 25)
        self.assertEqual(summary[self.member.id]['batches'], 2)
        self.assertEqual(summary[self.member.id]['earliest_expiry'], self.now + timedelta(days=1))
        self.assertEqual(summary[other.id]['points'], 7)
