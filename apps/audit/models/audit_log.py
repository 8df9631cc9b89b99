from django.db import models


class AuditLog(models.Model):
    """Compliance record of one balance-affecting or privilege event"""

    ENTITY_CHOICES = [
        ('POINT', 'Point'),
        ('PRIVILEGE', 'Privilege'),
        ('MEMBER_PRIVILEGE', 'Member Privilege'),
    ]

    ACTION_CHOICES = [
        ('POINT_ADD', 'Point Add'),
        ('POINT_DEDUCT', 'Point Deduct'),
        ('POINT_EXPIRE', 'Point Expire'),
        ('PRIVILEGE_EXCHANGE', 'Privilege Exchange'),
        ('PRIVILEGE_GRANT', 'Privilege Grant'),
        ('PRIVILEGE_EXPIRE', 'Privilege Expire'),
        ('PRIVILEGE_REVOKE', 'Privilege Revoke'),
        ('PRIVILEGE_USE', 'Privilege Use'),
    ]

    ACTOR_CHOICES = [
        ('ADMIN', 'Admin'),
        ('MEMBER', 'Member'),
        ('SYSTEM', 'System'),
    ]

    entity_type = models.CharField(max_length=20, choices=ENTITY_CHOICES)
    entity_id = models.CharField(max_length=64, null=True, blank=True)
    action = models.CharField(max_length=30, choices=ACTION_CHOICES)
    actor_type = models.CharField(max_length=10, choices=ACTOR_CHOICES, default='SYSTEM')
    actor_id = models.BigIntegerField(null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    trace_id = models.CharField(max_length=64, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['entity_type', 'entity_id'], name='audit_entity_idx'),
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['actor_type', 'actor_id'], name='audit_actor_idx'),
        ]

    def __str__(self):
        return f"{self.action} {self.entity_type}:{self.entity_id} by {self.actor_type}"
