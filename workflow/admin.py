from django.contrib import admin

from .models import ActivityStatusHistory


@admin.register(ActivityStatusHistory)
class ActivityStatusHistoryAdmin(admin.ModelAdmin):
    list_display = ['house_activity', 'previous_status', 'new_status', 'changed_by', 'overridden', 'timestamp']
    list_filter = ['new_status', 'overridden']
    readonly_fields = [f.name for f in ActivityStatusHistory._meta.fields]
