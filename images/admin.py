from django.contrib import admin

from .models import Image


@admin.register(Image)
class ImageAdmin(admin.ModelAdmin):
    list_display = ['house_activity', 'app_user', 'caption', 'uploaded_at']
    search_fields = ['caption', 'url']
    raw_id_fields = ['house_activity', 'app_user']
