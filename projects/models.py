import uuid

from django.db import models


class Project(models.Model):
    """A development (fraccionamiento) grouping the houses being built."""

    STATUS_ACTIVE = 'active'
    STATUS_COMPLETED = 'completed'
    STATUS_NOT_STARTED = 'not_started'
    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_NOT_STARTED, 'Not Started'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    houses_completed = models.PositiveIntegerField(default=0)
    total_houses = models.PositiveIntegerField(default=0)
    project_image = models.TextField(blank=True, null=True)
    description = models.TextField(blank=True, null=True)
    start_date = models.DateField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_NOT_STARTED)
    created_at = models.DateTimeField(auto_now_add=True)
    last_updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='project_status_idx'),
            models.Index(fields=['title'], name='project_title_idx'),
        ]

    def __str__(self):
        return self.title
