from django.contrib import admin
from .models import PageView


@admin.register(PageView)
class PageViewAdmin(admin.ModelAdmin):
    list_display = ('page_path', 'page_type', 'device_type', 'dwell_time', 'is_bounce', 'created_at')
    search_fields = ('page_path', 'session_id', 'visitor_id', 'reference_name')
    list_filter = ('page_type', 'device_type', 'is_bounce', 'created_at')
    readonly_fields = ('entered_at', 'exited_at', 'created_at')
