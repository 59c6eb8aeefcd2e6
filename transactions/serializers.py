from rest_framework import serializers

from users.serializers import AddressSerializer
from .models import Coupon, Order, OrderItem, OrderTimeline


# =====================================================
# CHECKOUT INPUT
# =====================================================
class CheckoutItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(required=False, allow_null=True)
    prebuilt_pc_id = serializers.IntegerField(required=False, allow_null=True)
    variation_id = serializers.IntegerField(required=False, allow_null=True)
    quantity = serializers.IntegerField(min_value=1, default=1)

    def validate(self, attrs):
        if not attrs.get('product_id') and not attrs.get('prebuilt_pc_id'):
            raise serializers.ValidationError("Product ID or Prebuilt PC ID is required")
        return attrs


class CheckoutSerializer(serializers.Serializer):
    items = CheckoutItemSerializer(many=True, required=False)
    shipping_address = AddressSerializer(required=False, allow_null=True)
    billing_address = AddressSerializer(required=False, allow_null=True)
    payment_method = serializers.ChoiceField(
        choices=Order.PaymentMethod.choices, required=False, allow_null=True,
        error_messages={'invalid_choice': 'Invalid payment method'},
    )
    coupon_code = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    customer_notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    guest_email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    guest_name = serializers.CharField(max_length=150, required=False, allow_blank=True, allow_null=True)
    guest_phone = serializers.CharField(max_length=15, required=False, allow_blank=True, allow_null=True)


class VerifyPaymentSerializer(serializers.Serializer):
    razorpay_order_id = serializers.CharField()
    razorpay_payment_id = serializers.CharField()
    razorpay_signature = serializers.CharField()
    order_id = serializers.IntegerField()


class CouponValidateSerializer(serializers.Serializer):
    code = serializers.CharField(required=False, allow_blank=True)
    cart_total = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)


class ShippingQuoteSerializer(serializers.Serializer):
    pincode = serializers.CharField(required=False, allow_blank=True)
    weight = serializers.DecimalField(max_digits=8, decimal_places=2, required=False, default=2)
    cod = serializers.BooleanField(required=False, default=False)
    cart_total = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)


# =====================================================
# ORDERS
# =====================================================
class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = [
            'id', 'product', 'prebuilt_pc', 'variation', 'name', 'sku', 'image',
            'variation_name', 'price', 'quantity', 'total',
        ]


class OrderTimelineSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderTimeline
        fields = ['id', 'status', 'title', 'description', 'location', 'created_at']


class CustomerOrderListSerializer(serializers.ModelSerializer):
    """Order row for the customer's order history"""
    item_count = serializers.SerializerMethodField()
    items = OrderItemSerializer(many=True, read_only=True)
    latest_update = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'status', 'payment_status', 'payment_method', 'total',
            'item_count', 'items', 'latest_update', 'shipping_city', 'awb_number', 'tracking_url',
            'created_at',
        ]

    def get_item_count(self, obj):
        return sum(item.quantity for item in obj.items.all())

    def get_latest_update(self, obj):
        entries = list(obj.timeline.all())
        return OrderTimelineSerializer(entries[-1]).data if entries else None


class CustomerOrderDetailSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    timeline = OrderTimelineSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'status', 'payment_status', 'payment_method',
            'subtotal', 'discount', 'coupon_code', 'shipping_charge', 'tax', 'total',
            'shipping_name', 'shipping_mobile', 'shipping_address1', 'shipping_address2',
            'shipping_landmark', 'shipping_city', 'shipping_state', 'shipping_pincode', 'shipping_country',
            'awb_number', 'courier_name', 'tracking_url', 'customer_notes',
            'items', 'timeline', 'paid_at', 'shipped_at', 'delivered_at', 'cancelled_at', 'created_at',
        ]


class AdminOrderListSerializer(serializers.ModelSerializer):
    customer = serializers.SerializerMethodField()
    items = serializers.SerializerMethodField()
    items_list = OrderItemSerializer(source='items', many=True, read_only=True)
    shipping_address = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'customer', 'items', 'items_list',
            'subtotal', 'discount', 'shipping_charge', 'tax', 'total',
            'payment_method', 'payment_status', 'status', 'shipping_address',
            'awb_number', 'courier_name', 'created_at', 'updated_at',
        ]

    def get_customer(self, obj):
        return {
            'id': str(obj.user.uuid) if obj.user_id else None,
            'name': obj.customer_name,
            'email': obj.customer_email,
            'phone': obj.shipping_mobile,
        }

    def get_items(self, obj):
        return len(obj.items.all())

    def get_shipping_address(self, obj):
        return {
            'name': obj.shipping_name,
            'phone': obj.shipping_mobile,
            'address1': obj.shipping_address1,
            'address2': obj.shipping_address2,
            'city': obj.shipping_city,
            'state': obj.shipping_state,
            'pincode': obj.shipping_pincode,
        }


class AdminOrderDetailSerializer(serializers.ModelSerializer):
    """Order grouped into the sections shown on the admin order page"""

    class Meta:
        model = Order
        fields = ['id']

    def to_representation(self, obj):
        user = obj.user if obj.user_id else None
        return {
            'id': obj.id,
            'order_number': obj.order_number,
            'status': obj.status,
            'customer': {
                'id': str(user.uuid) if user else None,
                'name': obj.customer_name,
                'email': obj.customer_email,
                'phone': (user.phone_number if user else None) or obj.guest_phone or obj.shipping_mobile,
                'is_guest': user is None,
            },
            'shipping_address': {
                'name': obj.shipping_name,
                'mobile': obj.shipping_mobile,
                'address1': obj.shipping_address1,
                'address2': obj.shipping_address2,
                'landmark': obj.shipping_landmark,
                'city': obj.shipping_city,
                'state': obj.shipping_state,
                'pincode': obj.shipping_pincode,
                'country': obj.shipping_country,
            },
            'billing_address': {
                'name': obj.billing_name,
                'mobile': obj.billing_mobile,
                'address1': obj.billing_address1,
                'address2': obj.billing_address2,
                'city': obj.billing_city,
                'state': obj.billing_state,
                'pincode': obj.billing_pincode,
            } if obj.billing_address1 else None,
            'items': OrderItemSerializer(obj.items.all(), many=True).data,
            'pricing': {
                'subtotal': str(obj.subtotal),
                'discount': str(obj.discount),
                'coupon_code': obj.coupon_code,
                'coupon_discount': str(obj.coupon_discount),
                'shipping_charge': str(obj.shipping_charge),
                'tax': str(obj.tax),
                'total': str(obj.total),
            },
            'payment': {
                'method': obj.payment_method,
                'status': obj.payment_status,
                'razorpay_order_id': obj.razorpay_order_id,
                'razorpay_payment_id': obj.razorpay_payment_id,
                'paid_at': obj.paid_at,
            },
            'shipping': {
                'awb_number': obj.awb_number,
                'courier_name': obj.courier_name,
                'tracking_url': obj.tracking_url,
                'shipped_at': obj.shipped_at,
                'delivered_at': obj.delivered_at,
            },
            'timeline': OrderTimelineSerializer(obj.timeline.all(), many=True).data,
            'notes': {
                'customer': obj.customer_notes,
                'admin': obj.admin_notes,
            },
            'dates': {
                'created_at': obj.created_at,
                'updated_at': obj.updated_at,
                'paid_at': obj.paid_at,
                'shipped_at': obj.shipped_at,
                'delivered_at': obj.delivered_at,
                'cancelled_at': obj.cancelled_at,
            },
        }


class TimelineUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class AdminOrderUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices, required=False)
    payment_status = serializers.ChoiceField(choices=Order.PaymentStatus.choices, required=False)
    awb_number = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    courier_name = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    tracking_url = serializers.URLField(max_length=500, required=False, allow_blank=True, allow_null=True)
    admin_notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    timeline_update = TimelineUpdateSerializer(required=False, allow_null=True)


# =====================================================
# COUPONS
# =====================================================
class CouponSerializer(serializers.ModelSerializer):
    status = serializers.SerializerMethodField()

    class Meta:
        model = Coupon
        fields = [
            'id', 'code', 'description', 'discount_type', 'discount_value', 'max_discount',
            'min_order_amount', 'usage_limit', 'usage_count', 'per_user_limit',
            'start_date', 'end_date', 'is_active', 'apply_on', 'status', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'usage_count', 'status', 'created_at', 'updated_at']
        extra_kwargs = {'code': {'validators': []}}

    def get_status(self, obj):
        if obj.is_expired:
            return 'expired'
        return 'active' if obj.is_active else 'inactive'

    def validate_code(self, value):
        code = value.strip().upper()
        if not code:
            raise serializers.ValidationError("Coupon code is required")
        clash = Coupon.objects.filter(code=code)
        if self.instance is not None:
            clash = clash.exclude(pk=self.instance.pk)
        if clash.exists():
            raise serializers.ValidationError("Coupon code already exists")
        return code

    def validate_discount_value(self, value):
        if value <= 0:
            raise serializers.ValidationError("Discount value must be greater than 0")
        return value

    def validate(self, attrs):
        discount_type = attrs.get('discount_type', getattr(self.instance, 'discount_type', None))
        value = attrs.get('discount_value', getattr(self.instance, 'discount_value', None))
        if discount_type == Coupon.DiscountType.PERCENTAGE and value is not None and value > 100:
            raise serializers.ValidationError("Percentage discount cannot exceed 100")
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError("End date must be after start date")
        return attrs
