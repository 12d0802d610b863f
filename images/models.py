import uuid

from django.conf import settings
from django.db import models


class Image(models.Model):
    """Photo evidence attached to a house activity."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    house_activity = models.ForeignKey(
        'activities.HouseActivity',
        on_delete=models.CASCADE,
        related_name='images',
    )
    app_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name='images',
        null=True,
        blank=True,
    )
    url = models.TextField()
    caption = models.TextField(blank=True, null=True)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-uploaded_at']

    def __str__(self):
        return self.caption or self.url
