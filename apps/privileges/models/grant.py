import math

from django.conf import settings
from django.db import models
from django.utils import timezone


class PrivilegeGrant(models.Model):
    """
    A member's ownership of an exchanged privilege.

    MySQL ignores the conditional unique constraint below (Django check
    W036), so there the member row lock taken by ExchangeService is what
    keeps a member from owning two active grants of one privilege.
    """

    STATUS_ACTIVE = 'active'
    STATUS_EXPIRED = 'expired'
    STATUS_USED = 'used'

    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_EXPIRED, 'Expired'),
        (STATUS_USED, 'Used'),
    ]

    member = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='privilege_grants'
    )
    privilege = models.ForeignKey('Privilege', on_delete=models.PROTECT, related_name='grants')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    granted_at = models.DateTimeField(default=timezone.now)
    expires_at = models.DateTimeField(null=True, blank=True)
    used_at = models.DateTimeField(null=True, blank=True)
    points_spent = models.PositiveIntegerField(default=0)
    debit = models.OneToOneField(
        'points.PointBatch',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='privilege_grant'
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'privilege_grants'
        ordering = ['-granted_at', '-id']
        indexes = [
            models.Index(fields=['member', 'status'], name='grant_member_status_idx'),
            models.Index(fields=['status', 'expires_at'], name='grant_status_expiry_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['member', 'privilege'],
                condition=models.Q(status='active'),
                name='unique_active_privilege_grant',
            ),
        ]

    def __str__(self):
        return f"{self.member_id} - {self.privilege_id} ({self.status})"

    def is_past_expiry(self, now=None):
        now = now or timezone.now()
        return self.expires_at is not None and self.expires_at <= now

    def is_currently_active(self, now=None):
        return self.status == self.STATUS_ACTIVE and not self.is_past_expiry(now)

    @property
    def is_expired(self):
        return self.status == self.STATUS_EXPIRED or (
            self.status == self.STATUS_ACTIVE and self.is_past_expiry()
        )

    @property
    def days_remaining(self):
        """Whole days left, rounded up; None when the grant never expires"""
        if self.expires_at is None:
            return None
        if not self.is_currently_active():
            return 0
        seconds = (self.expires_at - timezone.now()).total_seconds()
        return max(math.ceil(seconds / 86400), 0)
