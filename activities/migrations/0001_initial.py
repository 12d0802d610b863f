import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('houses', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Activity',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('num', models.PositiveIntegerField(unique=True)),
                ('phase', models.CharField(max_length=255)),
                ('sub_phase', models.CharField(max_length=255)),
                ('activity', models.CharField(max_length=500)),
                ('dependance', models.JSONField(blank=True, null=True)),
                ('description', models.TextField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
            ],
            options={
                'verbose_name': 'Activity template',
                'verbose_name_plural': 'Activity templates',
                'ordering': ['num'],
                'indexes': [
                    models.Index(fields=['phase', 'sub_phase'], name='activity_phase_idx'),
                    models.Index(fields=['is_active'], name='activity_is_active_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='HouseActivity',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('num', models.PositiveIntegerField()),
                ('phase', models.CharField(max_length=255)),
                ('sub_phase', models.CharField(max_length=255)),
                ('activity', models.CharField(max_length=500)),
                ('dependance', models.JSONField(blank=True, null=True)),
                ('description', models.TextField(blank=True, null=True)),
                ('open_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('start_date', models.DateTimeField(blank=True, null=True)),
                ('completion_date', models.DateTimeField(blank=True, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('in_progress', 'In Progress'), ('review', 'Review'), ('completed', 'Completed'), ('blocked', 'Blocked'), ('rejected', 'Rejected')], default='pending', max_length=20)),
                ('approved_at', models.DateTimeField(blank=True, null=True)),
                ('remarks', models.TextField(blank=True, null=True)),
                ('rejected_remarks', models.TextField(blank=True, null=True)),
                ('is_blocked', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('last_updated_at', models.DateTimeField(auto_now=True)),
                ('app_user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assigned_activities', to=settings.AUTH_USER_MODEL)),
                ('approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='approved_activities', to=settings.AUTH_USER_MODEL)),
                ('house', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='activities', to='houses.house')),
                ('template', models.ForeignKey(db_column='activity_id', on_delete=django.db.models.deletion.PROTECT, related_name='house_activities', to='activities.activity')),
            ],
            options={
                'verbose_name_plural': 'House activities',
                'ordering': ['num'],
                'indexes': [
                    models.Index(fields=['status'], name='house_activity_status_idx'),
                ],
            },
        ),
    ]
