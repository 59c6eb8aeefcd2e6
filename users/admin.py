from django.contrib import admin
from .models import Address, AdminNotification, MilestoneTracker


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ('user', 'label', 'full_name', 'city', 'pincode', 'is_default', 'created_at')
    list_filter = ('is_default', 'state')
    search_fields = ('user__email', 'full_name', 'mobile', 'city', 'pincode')
    readonly_fields = ('created_at', 'updated_at')
    fieldsets = (
        ('Owner', {
            'fields': ('user', 'label', 'is_default')
        }),
        ('Contact', {
            'fields': ('full_name', 'mobile')
        }),
        ('Address', {
            'fields': ('address_line1', 'address_line2', 'landmark', 'city', 'state', 'pincode', 'country')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(AdminNotification)
class AdminNotificationAdmin(admin.ModelAdmin):
    list_display = ('title', 'type', 'priority', 'is_read', 'created_at')
    list_filter = ('type', 'priority', 'is_read', 'created_at')
    search_fields = ('title', 'message', 'entity_id')
    readonly_fields = ('created_at', 'read_at')
    actions = ['mark_as_read', 'mark_as_unread']

    @admin.action(description='Mark selected notifications as read')
    def mark_as_read(self, request, queryset):
        updated = queryset.filter(is_read=False).count()
        for notification in queryset:
            notification.mark_as_read()
        self.message_user(request, f'{updated} notifications marked as read')

    @admin.action(description='Mark selected notifications as unread')
    def mark_as_unread(self, request, queryset):
        updated = queryset.update(is_read=False, read_at=None)
        self.message_user(request, f'{updated} notifications marked as unread')


@admin.register(MilestoneTracker)
class MilestoneTrackerAdmin(admin.ModelAdmin):
    list_display = ('type', 'period', 'current_value', 'last_milestone', 'updated_at')
    list_filter = ('period',)
