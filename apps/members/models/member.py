from django.contrib.auth.models import AbstractUser
from django.db import models


class Member(AbstractUser):
    """Loyalty programme member; also the API's authentication user"""
    phone = models.CharField(max_length=20, unique=True, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'members'
        verbose_name = 'Member'
        verbose_name_plural = 'Members'

    def __str__(self):
        return self.username or self.phone or f"Member {self.id}"
