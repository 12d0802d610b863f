from django.contrib import admin

from activities.models import HouseActivity

from .models import House


class HouseActivityInline(admin.TabularInline):
    model = HouseActivity
    extra = 0
    fields = ['num', 'activity', 'status', 'app_user', 'start_date', 'completion_date', 'is_blocked']
    readonly_fields = ['num', 'activity', 'status']
    show_change_link = True


@admin.register(House)
class HouseAdmin(admin.ModelAdmin):
    list_display = ['name', 'coto', 'project', 'status', 'progress', 'completed_activities', 'total_activities']
    list_filter = ['status', 'project']
    search_fields = ['name', 'coto', 'model']
    readonly_fields = ['progress', 'completed_activities', 'total_activities', 'created_at', 'updated_at']
    inlines = [HouseActivityInline]
