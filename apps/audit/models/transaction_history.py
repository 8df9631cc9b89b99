from django.conf import settings
from django.db import models


class TransactionHistory(models.Model):
    """Member-facing history line with the balance before and after the change"""

    TRANSACTION_TYPES = [
        ('POINT_EARNED', 'Point Earned'),
        ('POINT_DEDUCTED', 'Point Deducted'),
        ('POINT_EXPIRED', 'Point Expired'),
        ('POINT_EXCHANGED', 'Point Exchanged'),
        ('PRIVILEGE_GRANTED', 'Privilege Granted'),
        ('PRIVILEGE_EXPIRED', 'Privilege Expired'),
        ('PRIVILEGE_REVOKED', 'Privilege Revoked'),
        ('PRIVILEGE_USED', 'Privilege Used'),
    ]

    member = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='transaction_history'
    )
    transaction_type = models.CharField(max_length=20, choices=TRANSACTION_TYPES)
    entity_type = models.CharField(max_length=20)
    entity_id = models.CharField(max_length=64, null=True, blank=True)
    amount = models.IntegerField(null=True, blank=True)
    description = models.CharField(max_length=500)
    balance_before = models.IntegerField(null=True, blank=True)
    balance_after = models.IntegerField(null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'transaction_history'
        ordering = ['-created_at', '-id']
        verbose_name_plural = 'Transaction history'
        indexes = [
            models.Index(fields=['member', 'created_at'], name='txn_member_created_idx'),
            models.Index(fields=['transaction_type', 'created_at'], name='txn_type_created_idx'),
        ]

    def __str__(self):
        return f"{self.member_id} {self.transaction_type} {self.amount}"
