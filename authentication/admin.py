from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import CustomUser, AdminAuditLog


class CustomUserAdmin(UserAdmin):
    model = CustomUser

    list_display = ('email', 'full_name', 'role', 'status', 'is_active', 'is_verified', 'created_at')
    list_filter = ('role', 'status', 'is_staff', 'is_active', 'is_verified')
    search_fields = ('email', 'full_name', 'phone_number')

    readonly_fields = ('uuid', 'last_login', 'created_at', 'updated_at')

    fieldsets = (
        (None, {'fields': ('uuid', 'email', 'password')}),

        ('Personal Info', {
            'fields': ('full_name', 'phone_number', 'profile_picture')
        }),

        ('Account', {
            'fields': ('role', 'status', 'is_verified', 'is_phone_verified', 'is_active', 'is_staff', 'is_superuser')
        }),

        ('Important Dates', {
            'fields': ('last_login', 'created_at', 'updated_at')
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'full_name', 'password1', 'password2', 'role', 'is_staff', 'is_superuser'),
        }),
    )

    ordering = ('-created_at',)
    actions = ['block_customers', 'unblock_customers']

    @admin.action(description="Block selected customers")
    def block_customers(self, request, queryset):
        updated = queryset.filter(role=CustomUser.Role.CUSTOMER).update(status=CustomUser.Status.BLOCKED)
        self.message_user(request, f"{updated} customer(s) blocked.")

    @admin.action(description="Unblock selected customers")
    def unblock_customers(self, request, queryset):
        updated = queryset.update(status=CustomUser.Status.ACTIVE)
        self.message_user(request, f"{updated} customer(s) unblocked.")


@admin.register(AdminAuditLog)
class AdminAuditLogAdmin(admin.ModelAdmin):
    list_display = ('action', 'target_entity', 'target_id', 'admin', 'created_at')
    list_filter = ('action', 'target_entity')
    search_fields = ('target_id', 'admin__email')
    readonly_fields = ('admin', 'action', 'target_entity', 'target_id', 'reason', 'details', 'created_at')


admin.site.register(CustomUser, CustomUserAdmin)
