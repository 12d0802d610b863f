from django.contrib import admin

from .models import Activity, HouseActivity


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    list_display = ['num', 'phase', 'sub_phase', 'activity', 'is_active']
    list_filter = ['is_active', 'phase']
    search_fields = ['activity', 'phase', 'sub_phase']
    ordering = ['num']


@admin.register(HouseActivity)
class HouseActivityAdmin(admin.ModelAdmin):
    list_display = ['house', 'num', 'activity', 'status', 'app_user', 'approved_by', 'is_blocked']
    list_filter = ['status', 'is_blocked']
    search_fields = ['activity', 'house__name', 'house__coto']
    # Status and counters are owned by the workflow services
    readonly_fields = ['status', 'approved_at', 'open_date', 'created_at', 'last_updated_at']
    raw_id_fields = ['house', 'template', 'app_user', 'approved_by']
