import logging
from decimal import Decimal, ROUND_HALF_UP

import requests
from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from authentication.core.exceptions import OutOfStockException
from authentication.core.task_dispatch import dispatch_task
from store.cart_service import CartService
from store.models import Product, ProductVariation, PrebuiltPC
from .models import Coupon, Order, OrderItem
from .razorpay import Razorpay
from .shiprocket import Shiprocket, ShiprocketError
from .signals import order_placed
from configuration.services import SettingsService

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')


def money(value):
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def shipping_charge_for(subtotal):
    if Decimal(subtotal) >= Decimal(settings.FREE_SHIPPING_THRESHOLD):
        return Decimal('0')
    return Decimal(settings.DEFAULT_SHIPPING_CHARGE)


def tax_for(taxable_amount):
    return money(Decimal(taxable_amount) * Decimal(settings.GST_RATE))


# =====================================================
# COUPONS
# =====================================================
class CouponService:

    @staticmethod
    def user_usage_count(coupon, user):
        return Order.objects.filter(user=user, coupon_code=coupon.code).exclude(
            status__in=[Order.Status.CANCELLED, Order.Status.REFUNDED]
        ).count()

    @staticmethod
    def validate(code, cart_total, user=None):
        """Check a coupon against the cart in a fixed order and report the first failure"""
        if not code or not code.strip():
            return False, {"success": False, "error": "Coupon code is required"}, 400

        coupon = Coupon.objects.filter(code=code.strip().upper()).first()
        if coupon is None:
            return False, {"success": False, "error": "Invalid coupon code"}, 400
        if not coupon.is_active:
            return False, {"success": False, "error": "This coupon is no longer active"}, 400

        now = timezone.now()
        if coupon.start_date and coupon.start_date > now:
            return False, {"success": False, "error": "This coupon is not yet active"}, 400
        if coupon.end_date and coupon.end_date < now:
            return False, {"success": False, "error": "This coupon has expired"}, 400
        if coupon.usage_limit and coupon.usage_count >= coupon.usage_limit:
            return False, {"success": False, "error": "This coupon has reached its usage limit"}, 400

        cart_total = Decimal(cart_total or 0)
        if coupon.min_order_amount and cart_total < coupon.min_order_amount:
            return False, {
                "success": False,
                "error": f"Minimum order amount of ₹{coupon.min_order_amount:,.0f} required",
                "data": {"min_amount": coupon.min_order_amount},
            }, 400

        if user is not None and user.is_authenticated and coupon.per_user_limit:
            if CouponService.user_usage_count(coupon, user) >= coupon.per_user_limit:
                return False, {"success": False, "error": "You have already used this coupon"}, 400

        discount = min(coupon.calculate_discount(cart_total), cart_total)
        return True, {
            "success": True,
            "message": f"Coupon applied! You save ₹{discount:,.0f}",
            "data": {
                "valid": True,
                "coupon": {
                    "id": coupon.id,
                    "code": coupon.code,
                    "description": coupon.description,
                    "discount_type": coupon.discount_type,
                    "discount_value": coupon.discount_value,
                    "max_discount": coupon.max_discount,
                },
                "discount": discount,
            },
        }, 200

    @staticmethod
    def checkout_discount(code, subtotal):
        """Discount applied at checkout. Invalid coupons are ignored."""
        if not code:
            return None, Decimal('0')
        coupon = Coupon.objects.filter(code=code.strip().upper(), is_active=True).first()
        if coupon is None:
            return None, Decimal('0')

        now = timezone.now()
        usable = (
            (not coupon.start_date or coupon.start_date <= now)
            and (not coupon.end_date or coupon.end_date >= now)
            and (not coupon.usage_limit or coupon.usage_count < coupon.usage_limit)
            and (not coupon.min_order_amount or subtotal >= coupon.min_order_amount)
        )
        if not usable:
            return None, Decimal('0')
        return coupon, min(coupon.calculate_discount(subtotal), subtotal)


# =====================================================
# CHECKOUT
# =====================================================
class CheckoutService:

    @staticmethod
    def items_from_cart(user=None, session_id=None):
        cart, _ = CartService.get_cart(user=user, session_id=session_id, create=False)
        if cart is None:
            return []
        return [
            {
                'product_id': item.product_id,
                'prebuilt_pc_id': item.prebuilt_pc_id,
                'variation_id': item.variation_id,
                'quantity': item.quantity,
            }
            for item in cart.items.all()
        ]

    @staticmethod
    def price_items(items):
        """
        Re-price each requested line from the catalogue.

        Returns ``(lines, error_payload)``; ``error_payload`` is None on success.
        """
        lines = []
        for item in items:
            quantity = item.get('quantity') or 1
            if item.get('product_id'):
                product = Product.objects.prefetch_related('images').filter(pk=item['product_id']).first()
                if product is None:
                    return None, {"success": False, "error": f"Product not found: {item['product_id']}"}
                variation = None
                if item.get('variation_id'):
                    variation = ProductVariation.objects.filter(
                        pk=item['variation_id'], product=product, is_active=True
                    ).first()
                    if variation is None:
                        return None, {"success": False, "error": "Variation not found"}
                    if variation.stock_quantity < quantity:
                        return None, {"success": False, "error": f"{product.name} ({variation.name}) is out of stock"}
                if not product.can_fulfil(quantity):
                    return None, {"success": False, "error": f"{product.name} is out of stock"}
                image = product.primary_image
                price = variation.effective_price if variation else product.price
                lines.append({
                    'product': product,
                    'variation': variation,
                    'prebuilt_pc': None,
                    'name': product.name,
                    'sku': (variation.sku if variation and variation.sku else product.sku) or '',
                    'image': image.url if image else None,
                    'variation_name': variation.name if variation else None,
                    'price': price,
                    'quantity': quantity,
                    'total': price * quantity,
                })
            elif item.get('prebuilt_pc_id'):
                pc = PrebuiltPC.objects.filter(pk=item['prebuilt_pc_id']).first()
                if pc is None:
                    return None, {"success": False, "error": f"Prebuilt PC not found: {item['prebuilt_pc_id']}"}
                if not pc.is_in_stock:
                    return None, {"success": False, "error": f"{pc.name} is out of stock"}
                lines.append({
                    'product': None,
                    'variation': None,
                    'prebuilt_pc': pc,
                    'name': pc.name,
                    'sku': pc.slug,
                    'image': pc.primary_image or None,
                    'variation_name': None,
                    'price': pc.selling_price,
                    'quantity': quantity,
                    'total': pc.selling_price * quantity,
                })
        return lines, None

    @staticmethod
    def decrement_stock(order):
        """Take ordered units out of stock. Raises ``OutOfStockException`` on a race."""
        for item in order.items.select_related('product', 'variation'):
            if item.product_id is None:
                continue
            product = Product.objects.select_for_update().get(pk=item.product_id)
            if product.stock_quantity < item.quantity:
                raise OutOfStockException(f"{product.name} is out of stock")
            product.stock_quantity -= item.quantity
            if product.stock_quantity == 0:
                product.is_in_stock = False
            product.save(update_fields=['stock_quantity', 'is_in_stock', 'updated_at'])

            if item.variation_id:
                updated = ProductVariation.objects.filter(
                    pk=item.variation_id, stock_quantity__gte=item.quantity
                ).update(stock_quantity=F('stock_quantity') - item.quantity)
                if not updated:
                    raise OutOfStockException(f"{product.name} ({item.variation_name}) is out of stock")

    @staticmethod
    def place_order(user, data, session_id=None):
        """
        Create an order from the checkout payload.

        COD orders are confirmed immediately and stock is taken. Razorpay
        orders stay PENDING until the payment is verified.
        """
        items = data.get('items') or CheckoutService.items_from_cart(user, session_id)
        if not items:
            return False, {"success": False, "error": "Cart is empty"}, 400
        shipping = data.get('shipping_address')
        if not shipping:
            return False, {"success": False, "error": "Shipping address is required"}, 400
        payment_method = data.get('payment_method')
        if not payment_method:
            return False, {"success": False, "error": "Payment method is required"}, 400

        lines, error = CheckoutService.price_items(items)
        if error:
            return False, error, 400

        subtotal = money(sum((line['total'] for line in lines), Decimal('0')))
        coupon, discount = CouponService.checkout_discount(data.get('coupon_code'), subtotal)
        discount = money(discount)
        shipping_charge = shipping_charge_for(subtotal)
        tax = tax_for(subtotal - discount)
        total = money(subtotal - discount + shipping_charge + tax)

        is_cod = payment_method == Order.PaymentMethod.COD
        billing = data.get('billing_address') or {}
        signed_in = user is not None and user.is_authenticated

        with transaction.atomic():
            order = Order.objects.create(
                user=user if signed_in else None,
                guest_email=None if signed_in else data.get('guest_email') or None,
                guest_name=None if signed_in else data.get('guest_name') or shipping.get('full_name'),
                guest_phone=None if signed_in else data.get('guest_phone') or shipping.get('mobile'),
                status=Order.Status.PENDING,
                payment_method=payment_method,
                payment_status=Order.PaymentStatus.COD_PENDING if is_cod else Order.PaymentStatus.PENDING,
                subtotal=subtotal,
                discount=discount,
                coupon_code=coupon.code if coupon else None,
                coupon_discount=discount,
                shipping_charge=shipping_charge,
                tax=tax,
                total=total,
                shipping_name=shipping['full_name'],
                shipping_mobile=shipping['mobile'],
                shipping_address1=shipping['address_line1'],
                shipping_address2=shipping.get('address_line2'),
                shipping_landmark=shipping.get('landmark'),
                shipping_city=shipping['city'],
                shipping_state=shipping['state'],
                shipping_pincode=shipping['pincode'],
                shipping_country=shipping.get('country') or 'India',
                billing_name=billing.get('full_name'),
                billing_mobile=billing.get('mobile'),
                billing_address1=billing.get('address_line1'),
                billing_address2=billing.get('address_line2'),
                billing_city=billing.get('city'),
                billing_state=billing.get('state'),
                billing_pincode=billing.get('pincode'),
                customer_notes=data.get('customer_notes') or None,
            )
            OrderItem.objects.bulk_create([
                OrderItem(
                    order=order,
                    product=line['product'],
                    variation=line['variation'],
                    prebuilt_pc=line['prebuilt_pc'],
                    name=line['name'],
                    sku=line['sku'],
                    image=line['image'],
                    variation_name=line['variation_name'],
                    price=line['price'],
                    quantity=line['quantity'],
                    total=line['total'],
                )
                for line in lines
            ])
            order.add_timeline(Order.Status.PENDING, "Order Placed", "Your order has been placed successfully")

            if is_cod:
                order.status = Order.Status.CONFIRMED
                order.save(update_fields=['status', 'updated_at'])
                order.add_timeline(Order.Status.CONFIRMED, "Order Confirmed", "Your COD order has been confirmed")
                CheckoutService.decrement_stock(order)

        payment = None
        if not is_cod:
            try:
                payment = PaymentService.create_gateway_order(order)
            except requests.RequestException as e:
                logger.error(f"Razorpay order creation failed for {order.order_number}: {str(e)}")
                order.delete()
                return False, {"success": False, "error": "Failed to create payment order"}, 500

        CartService.clear_for(user=user if signed_in else None, session_id=None if signed_in else session_id)
        if coupon and discount > 0:
            Coupon.objects.filter(pk=coupon.pk).update(usage_count=F('usage_count') + 1)

        order_placed.send(sender=Order, order=order)
        if is_cod:
            OrderEmailService.queue_confirmation(order)

        logger.info(f"Order {order.order_number} placed ({payment_method}) total={total}")
        response_data = {
            'order': {
                'id': order.id,
                'order_number': order.order_number,
                'total': order.total,
                'payment_method': order.payment_method,
                'status': order.status,
            },
        }
        if payment:
            response_data['razorpay'] = payment
        return True, {"success": True, "message": "Order placed successfully", "data": response_data}, 201


# =====================================================
# PAYMENT
# =====================================================
class PaymentService:

    @staticmethod
    def create_gateway_order(order):
        client = Razorpay()
        gateway_order = client.create_order(
            amount=order.total,
            receipt=order.order_number,
            notes={
                'order_id': str(order.id),
                'order_number': order.order_number,
            },
        )
        order.razorpay_order_id = gateway_order['id']
        order.save(update_fields=['razorpay_order_id', 'updated_at'])
        return {
            'order_id': gateway_order['id'],
            'amount': gateway_order['amount'],
            'currency': gateway_order['currency'],
            'key_id': client.key_id,
        }

    @staticmethod
    def verify(razorpay_order_id, razorpay_payment_id, razorpay_signature, order_id, user=None, session_id=None):
        order = Order.objects.filter(pk=order_id).first()
        if order is None:
            return False, {"success": False, "error": "Order not found"}, 404

        if order.payment_status == Order.PaymentStatus.PAID:
            return PaymentService._already_verified(order)

        if not order.razorpay_order_id or razorpay_order_id != order.razorpay_order_id:
            logger.warning(f"Gateway order id mismatch for order {order.order_number}")
            return False, {"success": False, "error": "Payment does not match this order"}, 400

        if not Razorpay().verify_signature(order.razorpay_order_id, razorpay_payment_id, razorpay_signature):
            if order.payment_status == Order.PaymentStatus.PENDING:
                order.payment_status = Order.PaymentStatus.FAILED
                order.save(update_fields=['payment_status', 'updated_at'])
                order.add_timeline(Order.Status.PENDING, "Payment Failed", "Payment verification failed")
            logger.warning(f"Invalid Razorpay signature for order {order.order_number}")
            return False, {"success": False, "error": "Payment verification failed"}, 400

        with transaction.atomic():
            order = Order.objects.select_for_update().get(pk=order.pk)
            if order.payment_status == Order.PaymentStatus.PAID:
                return PaymentService._already_verified(order)
            order.razorpay_payment_id = razorpay_payment_id
            order.razorpay_signature = razorpay_signature
            order.payment_status = Order.PaymentStatus.PAID
            order.status = Order.Status.CONFIRMED
            order.paid_at = timezone.now()
            order.save()
            order.add_timeline(
                Order.Status.CONFIRMED, "Payment Successful",
                f"Payment received via Razorpay ({razorpay_payment_id})",
            )
            CheckoutService.decrement_stock(order)

        CartService.clear_for(user=order.user, session_id=None if order.user_id else session_id)
        OrderEmailService.queue_confirmation(order)
        logger.info(f"Payment verified for order {order.order_number}")
        return True, {
            "success": True,
            "message": "Payment verified successfully",
            "data": {'order_number': order.order_number},
        }, 200

    @staticmethod
    def _already_verified(order):
        return True, {
            "success": True,
            "message": "Payment already verified",
            "data": {'order_number': order.order_number},
        }, 200


# =====================================================
# SHIPPING
# =====================================================
class ShippingService:

    @staticmethod
    def default_quote(cart_total, cod=False):
        charge = shipping_charge_for(cart_total)
        return {
            'charge': charge,
            'cod_charges': Decimal(settings.COD_CHARGE) if cod else Decimal('0'),
            'estimated_days': "5-7",
            'courier_name': "Standard Delivery",
            'is_free_shipping': charge == 0,
        }

    @staticmethod
    def quote(pincode, cart_total=0, weight=2, cod=False):
        if not pincode or len(pincode) != 6:
            return False, {"success": False, "error": "Valid pincode is required"}, 400

        cart_total = Decimal(cart_total or 0)
        config = SettingsService.get_shiprocket_config()
        if not config['enabled']:
            return True, {
                "success": True,
                "data": {'serviceable': True, 'shipping': ShippingService.default_quote(cart_total, cod)},
            }, 200

        client = Shiprocket(config)
        try:
            details = client.check_pincode(pincode)
            if details is None:
                return True, {
                    "success": True,
                    "data": {'serviceable': False, 'error': "Delivery not available for this pincode"},
                }, 200
            cheapest, fastest = client.rate_options(pincode, weight, cod)
        except (requests.RequestException, ShiprocketError) as e:
            logger.error(f"Shipping calculation error for {pincode}: {str(e)}")
            return True, {
                "success": True,
                "data": {
                    'serviceable': True,
                    'shipping': {
                        'charge': Decimal(settings.DEFAULT_SHIPPING_CHARGE),
                        'cod_charges': Decimal(settings.COD_CHARGE),
                        'estimated_days': "5-7",
                        'courier_name': "Standard Delivery",
                        'is_free_shipping': False,
                    },
                },
            }, 200

        if cheapest is None:
            return True, {
                "success": True,
                "data": {'serviceable': True, 'shipping': ShippingService.default_quote(cart_total, cod)},
            }, 200

        threshold = Decimal(settings.FREE_SHIPPING_THRESHOLD)
        is_free = cart_total >= threshold
        return True, {
            "success": True,
            "data": {
                'serviceable': True,
                'shipping': {
                    'charge': 0 if is_free else cheapest['charge'] or settings.DEFAULT_SHIPPING_CHARGE,
                    'cod_charges': cheapest['cod_charges'],
                    'estimated_days': cheapest['estimated_days'] or "5-7",
                    'courier_name': cheapest['courier_name'] or "Standard Delivery",
                    'is_free_shipping': is_free,
                    'free_shipping_threshold': threshold,
                },
                'express_option': {
                    'charge': 0 if is_free else fastest['charge'],
                    'estimated_days': fastest['estimated_days'],
                    'courier_name': fastest['courier_name'],
                },
                'pincode_details': details,
            },
        }, 200

    @staticmethod
    def check_pincode(pincode):
        if not pincode or len(pincode) != 6:
            return False, {"success": False, "error": "Valid pincode is required"}, 400

        config = SettingsService.get_shiprocket_config()
        if not config['enabled']:
            return True, {"success": True, "data": {'serviceable': True, 'details': None}}, 200
        try:
            details = Shiprocket(config).check_pincode(pincode)
        except (requests.RequestException, ShiprocketError) as e:
            logger.error(f"Pincode check error for {pincode}: {str(e)}")
            return True, {"success": True, "data": {'serviceable': True, 'details': None}}, 200
        return True, {"success": True, "data": {'serviceable': details is not None, 'details': details}}, 200


# =====================================================
# ADMIN ORDER UPDATES
# =====================================================
class OrderUpdateService:

    @staticmethod
    @transaction.atomic
    def apply(order, data):
        """
        Apply an admin edit. Returns ``(order, old_status)``.

        A timeline entry is added when the status changes or an explicit
        timeline update is sent.
        """
        order = Order.objects.select_for_update().get(pk=order.pk)
        old_status = order.status

        for field in ('status', 'payment_status', 'awb_number', 'courier_name', 'tracking_url', 'admin_notes'):
            if field in data:
                setattr(order, field, data[field] if data[field] != '' else None)
        order.stamp_status_dates()
        order.save()

        timeline_update = data.get('timeline_update') or {}
        status_changed = order.status != old_status
        if status_changed or timeline_update.get('title') or timeline_update.get('description'):
            order.add_timeline(
                order.status,
                timeline_update.get('title') or order.status_title(),
                timeline_update.get('description') or None,
                timeline_update.get('location') or None,
            )
        return order, old_status


# =====================================================
# EMAIL
# =====================================================
class OrderEmailService:

    @staticmethod
    def queue_confirmation(order):
        from .tasks import send_order_confirmation_email
        if not order.customer_email:
            return False
        return dispatch_task(send_order_confirmation_email, order.id)

    @staticmethod
    def queue_status_update(order, old_status):
        from .tasks import send_order_status_email
        if not order.customer_email:
            return False
        return dispatch_task(send_order_status_email, order.id, old_status)
