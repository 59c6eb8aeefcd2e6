import secrets
import time
from decimal import Decimal

from django.db import models
from django.utils import timezone

from authentication.models import CustomUser

BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(number):
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


# ========================
# COUPONS
# ========================
class Coupon(models.Model):
    class DiscountType(models.TextChoices):
        PERCENTAGE = 'PERCENTAGE', 'Percentage'
        FIXED = 'FIXED', 'Fixed'

    class ApplyOn(models.TextChoices):
        ALL = 'ALL', 'All products'
        PRODUCTS = 'PRODUCTS', 'Products only'
        PREBUILT_PCS = 'PREBUILT_PCS', 'Prebuilt PCs only'

    code = models.CharField(max_length=50, unique=True)
    description = models.TextField(blank=True)
    discount_type = models.CharField(max_length=20, choices=DiscountType.choices, default=DiscountType.PERCENTAGE)
    discount_value = models.DecimalField(max_digits=10, decimal_places=2)
    max_discount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    min_order_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    usage_limit = models.PositiveIntegerField(null=True, blank=True)
    usage_count = models.PositiveIntegerField(default=0)
    per_user_limit = models.PositiveIntegerField(null=True, blank=True)
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    apply_on = models.CharField(max_length=20, choices=ApplyOn.choices, default=ApplyOn.ALL)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def save(self, *args, **kwargs):
        self.code = (self.code or '').strip().upper()
        super().save(*args, **kwargs)

    @property
    def is_expired(self):
        return bool(self.end_date and self.end_date < timezone.now())

    def calculate_discount(self, amount):
        """Discount for ``amount``: percentage capped at ``max_discount``, or the fixed value."""
        amount = Decimal(amount)
        if self.discount_type == self.DiscountType.PERCENTAGE:
            discount = (amount * self.discount_value / Decimal('100')).quantize(Decimal('0.01'))
            if self.max_discount is not None:
                discount = min(discount, self.max_discount)
        else:
            discount = self.discount_value
        return discount

    def __str__(self):
        return self.code


# ========================
# ORDER SYSTEM
# ========================
class Order(models.Model):
    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        CONFIRMED = 'CONFIRMED', 'Confirmed'
        PROCESSING = 'PROCESSING', 'Processing'
        SHIPPED = 'SHIPPED', 'Shipped'
        DELIVERED = 'DELIVERED', 'Delivered'
        CANCELLED = 'CANCELLED', 'Cancelled'
        REFUNDED = 'REFUNDED', 'Refunded'

    class PaymentStatus(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        PAID = 'PAID', 'Paid'
        FAILED = 'FAILED', 'Failed'
        COD_PENDING = 'COD_PENDING', 'COD Pending'
        REFUNDED = 'REFUNDED', 'Refunded'

    class PaymentMethod(models.TextChoices):
        COD = 'COD', 'Cash on Delivery'
        RAZORPAY = 'RAZORPAY', 'Razorpay'

    # Orders counted as revenue in customer and dashboard totals
    REVENUE_PAYMENT_STATUSES = [PaymentStatus.PAID, PaymentStatus.COD_PENDING]

    STATUS_TITLES = {
        Status.PENDING: "Order Placed",
        Status.CONFIRMED: "Order Confirmed",
        Status.PROCESSING: "Order Processing",
        Status.SHIPPED: "Order Shipped",
        Status.DELIVERED: "Order Delivered",
        Status.CANCELLED: "Order Cancelled",
        Status.REFUNDED: "Order Refunded",
    }

    order_number = models.CharField(max_length=30, unique=True, editable=False)
    user = models.ForeignKey(CustomUser, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders')

    # Guest checkout contact
    guest_email = models.EmailField(blank=True, null=True)
    guest_name = models.CharField(max_length=150, blank=True, null=True)
    guest_phone = models.CharField(max_length=15, blank=True, null=True)

    # Pricing
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    coupon_code = models.CharField(max_length=50, blank=True, null=True)
    coupon_discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    shipping_charge = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))

    # Shipping address
    shipping_name = models.CharField(max_length=100)
    shipping_mobile = models.CharField(max_length=15)
    shipping_address1 = models.CharField(max_length=200)
    shipping_address2 = models.CharField(max_length=200, blank=True, null=True)
    shipping_landmark = models.CharField(max_length=100, blank=True, null=True)
    shipping_city = models.CharField(max_length=100)
    shipping_state = models.CharField(max_length=100)
    shipping_pincode = models.CharField(max_length=6)
    shipping_country = models.CharField(max_length=100, default='India')

    # Billing address (optional, defaults to shipping)
    billing_name = models.CharField(max_length=100, blank=True, null=True)
    billing_mobile = models.CharField(max_length=15, blank=True, null=True)
    billing_address1 = models.CharField(max_length=200, blank=True, null=True)
    billing_address2 = models.CharField(max_length=200, blank=True, null=True)
    billing_city = models.CharField(max_length=100, blank=True, null=True)
    billing_state = models.CharField(max_length=100, blank=True, null=True)
    billing_pincode = models.CharField(max_length=6, blank=True, null=True)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    payment_status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.PENDING, db_index=True
    )

    # Razorpay
    razorpay_order_id = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    razorpay_payment_id = models.CharField(max_length=100, blank=True, null=True)
    razorpay_signature = models.CharField(max_length=255, blank=True, null=True)

    # Shipment
    awb_number = models.CharField(max_length=100, blank=True, null=True)
    courier_name = models.CharField(max_length=100, blank=True, null=True)
    tracking_url = models.URLField(max_length=500, blank=True, null=True)

    customer_notes = models.TextField(blank=True, null=True)
    admin_notes = models.TextField(blank=True, null=True)

    paid_at = models.DateTimeField(null=True, blank=True)
    shipped_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', '-created_at']),
            models.Index(fields=['status', 'payment_status']),
        ]

    @staticmethod
    def generate_order_number():
        """``SCB`` + base36 millisecond timestamp + 4 random base36 characters, uppercase."""
        stamp = to_base36(int(time.time() * 1000))
        suffix = "".join(secrets.choice(BASE36_DIGITS) for _ in range(4))
        return f"SCB{stamp}{suffix}".upper()

    def save(self, *args, **kwargs):
        if not self.order_number:
            order_number = self.generate_order_number()
            while Order.objects.filter(order_number=order_number).exists():
                order_number = self.generate_order_number()
            self.order_number = order_number
        super().save(*args, **kwargs)

    @property
    def customer_name(self):
        if self.user_id and self.user.full_name:
            return self.user.full_name
        return self.guest_name or self.shipping_name

    @property
    def customer_email(self):
        return self.user.email if self.user_id else self.guest_email

    def status_title(self, status=None):
        return self.STATUS_TITLES.get(status or self.status, "Order Updated")

    def add_timeline(self, status, title, description=None, location=None):
        return OrderTimeline.objects.create(
            order=self, status=status, title=title, description=description, location=location,
        )

    def stamp_status_dates(self):
        """Set the first-time timestamp matching the current status and payment state."""
        now = timezone.now()
        changed = []
        stamps = (
            ('shipped_at', self.status == self.Status.SHIPPED),
            ('delivered_at', self.status == self.Status.DELIVERED),
            ('cancelled_at', self.status == self.Status.CANCELLED),
            ('paid_at', self.payment_status == self.PaymentStatus.PAID),
        )
        for field, applies in stamps:
            if applies and getattr(self, field) is None:
                setattr(self, field, now)
                changed.append(field)
        return changed

    def __str__(self):
        return f"Order {self.order_number} ({self.customer_email or self.shipping_name})"


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey('store.Product', on_delete=models.SET_NULL, null=True, blank=True, related_name='order_items')
    variation = models.ForeignKey('store.ProductVariation', on_delete=models.SET_NULL, null=True, blank=True)
    prebuilt_pc = models.ForeignKey('store.PrebuiltPC', on_delete=models.SET_NULL, null=True, blank=True, related_name='order_items')

    # Snapshot at purchase time
    name = models.CharField(max_length=255)
    sku = models.CharField(max_length=255, blank=True)
    image = models.URLField(max_length=500, blank=True, null=True)
    variation_name = models.CharField(max_length=255, blank=True, null=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField()
    total = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.name} x {self.quantity}"


class OrderTimeline(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='timeline')
    status = models.CharField(max_length=20, choices=Order.Status.choices)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    location = models.CharField(max_length=255, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.order.order_number}: {self.title}"
