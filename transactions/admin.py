from django.contrib import admin
from .models import Coupon, Order, OrderItem, OrderTimeline


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ('name', 'sku', 'variation_name', 'price', 'quantity', 'total')


class OrderTimelineInline(admin.TabularInline):
    model = OrderTimeline
    extra = 0
    readonly_fields = ('created_at',)


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('order_number', 'user', 'status', 'payment_method', 'payment_status', 'total', 'created_at')
    search_fields = ('order_number', 'user__email', 'guest_email', 'shipping_name', 'shipping_mobile')
    list_filter = ('status', 'payment_status', 'payment_method', 'created_at')
    readonly_fields = ('order_number', 'razorpay_order_id', 'razorpay_payment_id', 'created_at', 'updated_at')
    inlines = [OrderItemInline, OrderTimelineInline]


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = ('code', 'discount_type', 'discount_value', 'usage_count', 'usage_limit', 'is_active', 'end_date')
    search_fields = ('code', 'description')
    list_filter = ('discount_type', 'apply_on', 'is_active')
    readonly_fields = ('usage_count', 'created_at', 'updated_at')
