"""
Tests for balance queries.
"""
from datetime import timedelta

import pytest
from django.utils import timezone

from apps.points.models import PointBatch
from apps.points.services import BalanceCalculator, ExpirationSweeper, PointsService
from tests.factories import MemberFactory, PointBatchFactory


@pytest.mark.django_db
def test_balance_of_member_without_batches_is_zero(member):
    assert BalanceCalculator.available_balance(member.id) == 0


@pytest.mark.django_db
def test_balance_sums_remaining_of_live_batches(member):
    PointBatchFactory(member=member, amount=100)
    PointBatchFactory(member=member, amount=250, remaining=50)
    PointBatchFactory(member=member, amount=70, expires_at=timezone.now() + timedelta(days=3))

    assert BalanceCalculator.available_balance(member.id) == 220


@pytest.mark.django_db
def test_expired_flag_wins_over_future_expiry(member):
    PointBatchFactory(
        member=member, amount=100, remaining=100, is_expired=True,
        expires_at=timezone.now() + timedelta(days=30),
    )
    assert BalanceCalculator.available_balance(member.id) == 0


@pytest.mark.django_db
def test_overdue_batch_drops_out_before_sweep(member):
    now = timezone.now()
    PointBatchFactory(member=member, amount=100, expires_at=now - timedelta(seconds=1))
    PointBatchFactory(member=member, amount=30)

    assert BalanceCalculator.available_balance(member.id, at=now) == 30
    # Still on the books until the sweeper flags it
    assert BalanceCalculator.booked_balance(member.id) == 130


@pytest.mark.django_db
def test_balance_at_point_in_time(member):
    now = timezone.now()
    PointBatchFactory(member=member, amount=100, expires_at=now + timedelta(days=2))

    assert BalanceCalculator.available_balance(member.id, at=now + timedelta(days=1)) == 100
    assert BalanceCalculator.available_balance(member.id, at=now + timedelta(days=2)) == 0


@pytest.mark.django_db
def test_debit_rows_do_not_count(member):
    PointBatchFactory(member=member, amount=100)
    PointBatch.objects.create(
        member=member, amount=-40, remaining=0,
        kind=PointBatch.KIND_DEDUCTED, description='history only',
    )
    assert BalanceCalculator.available_balance(member.id) == 100


@pytest.mark.django_db
def test_breakdown_totals_by_kind(member):
    now = timezone.now() - timedelta(days=5)
    PointsService.add_points(member.id, 500, 'Welcome bonus', now=now)
    PointsService.add_points(member.id, 50, 'Short lived', expiration_days=1, now=now)
    PointsService.deduct_points(member.id, 100, 'Voucher', now=now + timedelta(hours=1))
    ExpirationSweeper.sweep(as_of=now + timedelta(days=2))

    balance = BalanceCalculator.breakdown(member.id)

    assert balance.total_earned == 550
    assert balance.total_deducted == 100
    assert balance.total_expired == 50
    assert balance.total_exchanged == 0
    assert balance.available_balance == 400
    assert balance.last_updated == now + timedelta(days=2)


@pytest.mark.django_db
def test_breakdown_is_per_member():
    first = MemberFactory()
    second = MemberFactory()
    PointBatchFactory(member=first, amount=10)
    PointBatchFactory(member=second, amount=999)

    assert BalanceCalculator.breakdown(first.id).total_earned == 10
    assert BalanceCalculator.breakdown(first.id).to_dict()['available_balance'] == 10
