from django.db import models


class PointAllocation(models.Model):
    """How much a debit row took from one earned batch"""
    debit = models.ForeignKey('PointBatch', on_delete=models.PROTECT, related_name='allocations')
    batch = models.ForeignKey('PointBatch', on_delete=models.PROTECT, related_name='consumptions')
    amount = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'point_allocations'
        ordering = ['debit_id', 'id']
        constraints = [
            models.CheckConstraint(condition=models.Q(amount__gt=0), name='point_allocation_amount_positive'),
        ]

    def __str__(self):
        return f"{self.debit_id} <- {self.batch_id}: {self.amount}"
