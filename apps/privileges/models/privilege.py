from datetime import timedelta

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

MAX_VALIDITY_DAYS = 3650


class Privilege(models.Model):
    """A benefit members can exchange points for"""
    name = models.CharField(max_length=200, unique=True)
    description = models.TextField(max_length=1000)
    point_cost = models.PositiveIntegerField()
    is_active = models.BooleanField(default=True)
    validity_days = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(MAX_VALIDITY_DAYS)],
        help_text="Days a grant stays active after exchange; empty means no expiry",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'privileges'
        ordering = ['point_cost', 'name']
        indexes = [
            models.Index(fields=['is_active', 'point_cost'], name='privilege_active_cost_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.point_cost} points)"

    def can_be_exchanged(self):
        return self.is_active

    def calculate_expiration_date(self, granted_at):
        if not self.validity_days:
            return None
        return granted_at + timedelta(days=self.validity_days)
