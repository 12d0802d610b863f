import uuid

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from workflow.status import HouseStatus


class House(models.Model):
    """
    A house under construction.

    ``completed_activities``, ``total_activities`` and ``progress`` are
    maintained by the workflow services whenever an activity enters or
    leaves the completed state.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(
        'projects.Project',
        on_delete=models.SET_NULL,
        related_name='houses',
        null=True,
        blank=True,
    )
    coto = models.CharField(max_length=100, blank=True, null=True)
    name = models.CharField(max_length=255)
    model = models.CharField(max_length=100, blank=True, null=True)
    status = models.CharField(max_length=20, choices=HouseStatus.choices, default=HouseStatus.IN_PROGRESS)
    progress = models.FloatField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    description = models.TextField(blank=True, null=True)
    house_image = models.TextField(blank=True, null=True)
    m2const = models.FloatField(blank=True, null=True)
    completed_activities = models.PositiveIntegerField(default=0)
    total_activities = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='house_status_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.coto})" if self.coto else self.name
