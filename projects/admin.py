from django.contrib import admin

from .models import Project


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ['title', 'status', 'houses_completed', 'total_houses', 'start_date', 'last_updated_at']
    list_filter = ['status']
    search_fields = ['title']
    readonly_fields = ['created_at', 'last_updated_at']
