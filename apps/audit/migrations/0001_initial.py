import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('entity_type', models.CharField(choices=[('POINT', 'Point'), ('PRIVILEGE', 'Privilege'), ('MEMBER_PRIVILEGE', 'Member Privilege')], max_length=20)),
                ('entity_id', models.CharField(blank=True, max_length=64, null=True)),
                ('action', models.CharField(choices=[('POINT_ADD', 'Point Add'), ('POINT_DEDUCT', 'Point Deduct'), ('POINT_EXPIRE', 'Point Expire'), ('PRIVILEGE_EXCHANGE', 'Privilege Exchange'), ('PRIVILEGE_GRANT', 'Privilege Grant'), ('PRIVILEGE_EXPIRE', 'Privilege Expire'), ('PRIVILEGE_REVOKE', 'Privilege Revoke'), ('PRIVILEGE_USE', 'Privilege Use')], max_length=30)),
                ('actor_type', models.CharField(choices=[('ADMIN', 'Admin'), ('MEMBER', 'Member'), ('SYSTEM', 'System')], default='SYSTEM', max_length=10)),
                ('actor_id', models.BigIntegerField(blank=True, null=True)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('trace_id', models.CharField(blank=True, max_length=64, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'audit_logs',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['entity_type', 'entity_id'], name='audit_entity_idx'),
                    models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
                    models.Index(fields=['actor_type', 'actor_id'], name='audit_actor_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TransactionHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('transaction_type', models.CharField(choices=[('POINT_EARNED', 'Point Earned'), ('POINT_DEDUCTED', 'Point Deducted'), ('POINT_EXPIRED', 'Point Expired'), ('POINT_EXCHANGED', 'Point Exchanged'), ('PRIVILEGE_GRANTED', 'Privilege Granted'), ('PRIVILEGE_EXPIRED', 'Privilege Expired'), ('PRIVILEGE_REVOKED', 'Privilege Revoked'), ('PRIVILEGE_USED', 'Privilege Used')], max_length=20)),
                ('entity_type', models.CharField(max_length=20)),
                ('entity_id', models.CharField(blank=True, max_length=64, null=True)),
                ('amount', models.IntegerField(blank=True, null=True)),
                ('description', models.CharField(max_length=500)),
                ('balance_before', models.IntegerField(blank=True, null=True)),
                ('balance_after', models.IntegerField(blank=True, null=True)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('member', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='transaction_history', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name_plural': 'Transaction history',
                'db_table': 'transaction_history',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['member', 'created_at'], name='txn_member_created_idx'),
                    models.Index(fields=['transaction_type', 'created_at'], name='txn_type_created_idx'),
                ],
            },
        ),
    ]
