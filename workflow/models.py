import uuid

from django.conf import settings
from django.db import models

from .status import ActivityStatus


class ActivityStatusHistory(models.Model):
    history_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    house_activity = models.ForeignKey(
        'activities.HouseActivity',
        on_delete=models.CASCADE,
        related_name='status_history',
    )
    previous_status = models.CharField(max_length=20, choices=ActivityStatus.choices, blank=True, null=True)
    new_status = models.CharField(max_length=20, choices=ActivityStatus.choices)
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="activity_status_changes",
        null=True,
        blank=True,
    )
    # True when a reviewer supplied the status instead of letting it be derived
    overridden = models.BooleanField(default=False)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-timestamp']
        verbose_name_plural = 'Activity status history'

    def __str__(self):
        return f"{self.house_activity}: {self.previous_status} -> {self.new_status}"
