from datetime import timedelta

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from apps.common.conf import loyalty_setting


class PointBatchQuerySet(models.QuerySet):

    def for_member(self, member_id):
        return self.filter(member_id=member_id)

    def earned(self):
        return self.filter(kind=PointBatch.KIND_EARNED)

    def fifo(self):
        """Oldest first; id breaks createdAt ties"""
        return self.order_by('created_at', 'id')

    def available(self, at=None):
        """Earned batches that still count towards the balance at ``at``"""
        at = at or timezone.now()
        return self.earned().filter(
            Q(expires_at__isnull=True) | Q(expires_at__gt=at),
            is_expired=False,
            remaining__gt=0,
        )

    def due_for_expiry(self, as_of=None):
        """Batches the sweeper still has to expire"""
        as_of = as_of or timezone.now()
        return self.earned().filter(
            is_expired=False,
            expires_at__isnull=False,
            expires_at__lte=as_of,
        )

    def expiring_within(self, days, now=None):
        """Unexpired batches with points left whose expiry falls in (now, now + days]"""
        now = now or timezone.now()
        return self.earned().filter(
            is_expired=False,
            remaining__gt=0,
            expires_at__gt=now,
            expires_at__lte=now + timedelta(days=days),
        )


class PointBatch(models.Model):
    """
    One unit of point movement for a member.

    EARNED rows are the spendable batches: ``amount`` is what was granted and
    ``remaining`` shrinks as FIFO consumption or expiry takes from it. Every
    deduction, exchange and expiration is recorded as its own negative-amount
    row, linked to the batches it drew from through PointAllocation.
    """
    KIND_EARNED = 'EARNED'
    KIND_DEDUCTED = 'DEDUCTED'
    KIND_EXPIRED = 'EXPIRED'
    KIND_EXCHANGED = 'EXCHANGED'

    KIND_CHOICES = [
        (KIND_EARNED, 'Earned'),
        (KIND_DEDUCTED, 'Deducted'),
        (KIND_EXPIRED, 'Expired'),
        (KIND_EXCHANGED, 'Exchanged'),
    ]

    DEBIT_KINDS = (KIND_DEDUCTED, KIND_EXPIRED, KIND_EXCHANGED)

    member = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='point_batches'
    )
    amount = models.IntegerField()  # Signed: positive for EARNED, negative for debits
    remaining = models.IntegerField(default=0)
    kind = models.CharField(max_length=10, choices=KIND_CHOICES)
    description = models.CharField(max_length=500)
    expires_at = models.DateTimeField(null=True, blank=True)
    is_expired = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    objects = PointBatchQuerySet.as_manager()

    class Meta:
        db_table = 'point_batches'
        ordering = ['-created_at', '-id']
        verbose_name = 'Point Batch'
        verbose_name_plural = 'Point Batches'
        indexes = [
            models.Index(fields=['member', 'kind', 'is_expired', 'created_at', 'id'], name='batch_member_fifo_idx'),
            models.Index(fields=['is_expired', 'expires_at'], name='batch_expiry_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(remaining__gte=0),
                name='point_batch_remaining_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(kind='EARNED', amount__gt=0, remaining__lte=models.F('amount'))
                | (~Q(kind='EARNED') & Q(amount__lt=0, remaining=0)),
                name='point_batch_amount_sign_matches_kind',
            ),
        ]

    def __str__(self):
        return f"{self.member_id} {self.kind} {self.amount} (remaining {self.remaining})"

    @property
    def points(self):
        """Unsigned size of the movement"""
        return abs(self.amount)

    @property
    def is_expiring_soon(self):
        """Check if the unspent remainder expires within the notice window"""
        if self.expires_at is None or self.is_expired or self.remaining <= 0:
            return False
        return self.expires_at - timezone.now() <= timedelta(days=loyalty_setting('EXPIRING_SOON_DAYS'))
