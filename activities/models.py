import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone

from workflow.status import ActivityStatus


class Activity(models.Model):
    """Master checklist row. Copied onto every house created while it is active."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    num = models.PositiveIntegerField(unique=True)
    phase = models.CharField(max_length=255)
    sub_phase = models.CharField(max_length=255)
    activity = models.CharField(max_length=500)
    dependance = models.JSONField(blank=True, null=True)
    description = models.TextField(blank=True, null=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ['num']
        verbose_name = 'Activity template'
        verbose_name_plural = 'Activity templates'
        indexes = [
            models.Index(fields=['phase', 'sub_phase'], name='activity_phase_idx'),
            models.Index(fields=['is_active'], name='activity_is_active_idx'),
        ]

    def __str__(self):
        return f"{self.num}. {self.activity}"


class HouseActivity(models.Model):
    """One checklist item of one house, carrying the review workflow state."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    house = models.ForeignKey('houses.House', on_delete=models.CASCADE, related_name='activities')
    template = models.ForeignKey(
        Activity,
        on_delete=models.PROTECT,
        related_name='house_activities',
        db_column='activity_id',
    )

    # Copied from the template when the house is created
    num = models.PositiveIntegerField()
    phase = models.CharField(max_length=255)
    sub_phase = models.CharField(max_length=255)
    activity = models.CharField(max_length=500)
    dependance = models.JSONField(blank=True, null=True)
    description = models.TextField(blank=True, null=True)

    open_date = models.DateTimeField(default=timezone.now)
    start_date = models.DateTimeField(blank=True, null=True)
    completion_date = models.DateTimeField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=ActivityStatus.choices, default=ActivityStatus.PENDING)

    app_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name='assigned_activities',
        null=True,
        blank=True,
    )
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name='approved_activities',
        null=True,
        blank=True,
    )
    approved_at = models.DateTimeField(blank=True, null=True)
    remarks = models.TextField(blank=True, null=True)
    rejected_remarks = models.TextField(blank=True, null=True)
    is_blocked = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    last_updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['num']
        verbose_name_plural = 'House activities'
        indexes = [
            models.Index(fields=['status'], name='house_activity_status_idx'),
        ]

    def __str__(self):
        return f"{self.house} - {self.num}. {self.activity}"

    def workflow_state(self):
        """Stored values that drive status derivation."""
        return {
            'is_blocked': self.is_blocked,
            'rejected_remarks': self.rejected_remarks,
            'completion_date': self.completion_date,
            'approved_by_id': self.approved_by_id,
            'start_date': self.start_date,
        }
