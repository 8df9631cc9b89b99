import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('points', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Privilege',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, unique=True)),
                ('description', models.TextField(max_length=1000)),
                ('point_cost', models.PositiveIntegerField()),
                ('is_active', models.BooleanField(default=True)),
                ('validity_days', models.PositiveIntegerField(blank=True, help_text='Days a grant stays active after exchange; empty means no expiry', null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(3650)])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'privileges',
                'ordering': ['point_cost', 'name'],
                'indexes': [
                    models.Index(fields=['is_active', 'point_cost'], name='privilege_active_cost_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PrivilegeGrant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('active', 'Active'), ('expired', 'Expired'), ('used', 'Used')], default='active', max_length=10)),
                ('granted_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('expires_at', models.DateTimeField(blank=True, null=True)),
                ('used_at', models.DateTimeField(blank=True, null=True)),
                ('points_spent', models.PositiveIntegerField(default=0)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('debit', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='privilege_grant', to='points.pointbatch')),
                ('member', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='privilege_grants', to=settings.AUTH_USER_MODEL)),
                ('privilege', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='grants', to='privileges.privilege')),
            ],
            options={
                'db_table': 'privilege_grants',
                'ordering': ['-granted_at', '-id'],
                'indexes': [
                    models.Index(fields=['member', 'status'], name='grant_member_status_idx'),
                    models.Index(fields=['status', 'expires_at'], name='grant_status_expiry_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status', 'active')), fields=('member', 'privilege'), name='unique_active_privilege_grant'),
                ],
            },
        ),
    ]
