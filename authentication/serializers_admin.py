"""
Admin serializers for customer management and the audit trail.
"""

from rest_framework import serializers
from django.contrib.auth import get_user_model
from authentication.models import AdminAuditLog

CustomUser = get_user_model()


# =====================================================
# CUSTOMER MANAGEMENT SERIALIZERS
# =====================================================

class AdminCustomerListSerializer(serializers.ModelSerializer):
    """Customer row with order/review aggregates annotated by the view"""
    order_count = serializers.IntegerField(read_only=True)
    review_count = serializers.IntegerField(read_only=True)
    total_spent = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CustomUser
        fields = [
            'uuid', 'email', 'full_name', 'phone_number', 'status', 'is_verified',
            'created_at', 'last_login', 'order_count', 'review_count', 'total_spent'
        ]
        read_only_fields = fields


class AdminCustomerDetailSerializer(serializers.ModelSerializer):
    order_count = serializers.IntegerField(read_only=True)
    review_count = serializers.IntegerField(read_only=True)
    total_spent = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    addresses = serializers.SerializerMethodField()
    recent_orders = serializers.SerializerMethodField()
    reviews = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = [
            'uuid', 'email', 'full_name', 'phone_number', 'status', 'role',
            'is_verified', 'is_phone_verified', 'created_at', 'updated_at', 'last_login',
            'order_count', 'review_count', 'total_spent',
            'addresses', 'recent_orders', 'reviews',
        ]
        read_only_fields = fields

    def get_addresses(self, obj):
        from users.serializers import AddressSerializer
        return AddressSerializer(obj.addresses.all(), many=True).data

    def get_recent_orders(self, obj):
        return [
            {
                'id': order.id,
                'order_number': order.order_number,
                'status': order.status,
                'payment_status': order.payment_status,
                'total': str(order.total),
                'item_count': order.items.count(),
                'created_at': order.created_at,
            }
            for order in obj.orders.order_by('-created_at')[:10]
        ]

    def get_reviews(self, obj):
        return [
            {
                'id': review.id,
                'rating': review.rating,
                'title': review.title,
                'is_approved': review.is_approved,
                'product': review.product.name if review.product_id else None,
                'prebuilt_pc': review.prebuilt_pc.name if review.prebuilt_pc_id else None,
                'created_at': review.created_at,
            }
            for review in obj.reviews.select_related('product', 'prebuilt_pc').order_by('-created_at')[:10]
        ]


class AdminCustomerUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = ['full_name', 'email', 'phone_number', 'status']
        extra_kwargs = {
            'full_name': {'required': False},
            'email': {'required': False},
            'phone_number': {'required': False},
            'status': {'required': False},
        }

    def validate_email(self, value):
        value = value.strip().lower()
        qs = CustomUser.objects.filter(email=value).exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError('Email already in use by another account')
        return value


class AdminAuditLogSerializer(serializers.ModelSerializer):
    admin_email = serializers.CharField(source='admin.email', read_only=True, default=None)

    class Meta:
        model = AdminAuditLog
        fields = ['id', 'admin_email', 'action', 'target_entity', 'target_id', 'reason', 'details', 'created_at']
