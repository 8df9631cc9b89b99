import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PointBatch',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount', models.IntegerField()),
                ('remaining', models.IntegerField(default=0)),
                ('kind', models.CharField(choices=[('EARNED', 'Earned'), ('DEDUCTED', 'Deducted'), ('EXPIRED', 'Expired'), ('EXCHANGED', 'Exchanged')], max_length=10)),
                ('description', models.CharField(max_length=500)),
                ('expires_at', models.DateTimeField(blank=True, null=True)),
                ('is_expired', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('member', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='point_batches', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Point Batch',
                'verbose_name_plural': 'Point Batches',
                'db_table': 'point_batches',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['member', 'kind', 'is_expired', 'created_at', 'id'], name='batch_member_fifo_idx'),
                    models.Index(fields=['is_expired', 'expires_at'], name='batch_expiry_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('remaining__gte', 0)), name='point_batch_remaining_non_negative'),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(('kind', 'EARNED'), ('amount__gt', 0), ('remaining__lte', models.F('amount'))),
                            models.Q(models.Q(('kind', 'EARNED'), _negated=True), ('amount__lt', 0), ('remaining', 0)),
                            _connector='OR',
                        ),
                        name='point_batch_amount_sign_matches_kind',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='PointAllocation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount', models.PositiveIntegerField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='consumptions', to='points.pointbatch')),
                ('debit', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='allocations', to='points.pointbatch')),
            ],
            options={
                'db_table': 'point_allocations',
                'ordering': ['debit_id', 'id'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('amount__gt', 0)), name='point_allocation_amount_positive'),
                ],
            },
        ),
    ]
