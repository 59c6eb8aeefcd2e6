import hashlib
import hmac
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import requests
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.db import transaction
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from authentication.core.exceptions import OutOfStockException
from authentication.models import AdminAuditLog
from store.models import Cart, CartItem, Category, Product, ProductVariation, PublishStatus
from transactions.models import Coupon, Order, OrderTimeline
from transactions.razorpay import Razorpay, to_paise
from transactions.services import CheckoutService
from users.notification_models import AdminNotification

SHIPPING_ADDRESS = {
    "full_name": "Ravi Kumar",
    "mobile": "9876543210",
    "address_line1": "12 MG Road, Shivaji Nagar",
    "city": "Pune",
    "state": "Maharashtra",
    "pincode": "411001",
}


def make_product(name="Ryzen 5 7600", price="5000.00", stock=10, sku=None):
    category, _ = Category.objects.get_or_create(slug="processors", defaults={"name": "Processors"})
    return Product.objects.create(
        name=name,
        sku=sku or name.upper().replace(" ", "-"),
        price=Decimal(price),
        stock_quantity=stock,
        primary_category=category,
        status=PublishStatus.PUBLISHED,
    )


def make_order(user=None, **kwargs):
    fields = {
        "user": user,
        "payment_method": Order.PaymentMethod.COD,
        "payment_status": Order.PaymentStatus.COD_PENDING,
        "status": Order.Status.CONFIRMED,
        "subtotal": Decimal("1000.00"),
        "total": Decimal("1279.00"),
        "shipping_name": "Ravi Kumar",
        "shipping_mobile": "9876543210",
        "shipping_address1": "12 MG Road, Shivaji Nagar",
        "shipping_city": "Pune",
        "shipping_state": "Maharashtra",
        "shipping_pincode": "411001",
    }
    fields.update(kwargs)
    return Order.objects.create(**fields)


def sign(order_id, payment_id, secret="rzp_test_secret"):
    return hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()


@patch("transactions.signals.dispatch_task")
@patch("transactions.services.dispatch_task")
class CheckoutTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.user = get_user_model().objects.create_user(email="customer@test.com", password="pass12345")
        self.client.force_authenticate(user=self.user)
        self.product = make_product()

    def checkout(self, **overrides):
        payload = {
            "items": [{"product_id": self.product.id, "quantity": 1}],
            "shipping_address": SHIPPING_ADDRESS,
            "payment_method": "COD",
        }
        payload.update(overrides)
        payload = {key: value for key, value in payload.items() if value is not None}
        return self.client.post("/api/checkout/", payload, format="json")

    def test_cod_order_is_confirmed_and_takes_stock(self, mock_dispatch, mock_signal_dispatch):
        response = self.checkout()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()["message"], "Order placed successfully")
        order = Order.objects.get()
        self.assertTrue(order.order_number.startswith("SCB"))
        self.assertEqual(order.order_number, order.order_number.upper())
        self.assertEqual(order.status, Order.Status.CONFIRMED)
        self.assertEqual(order.payment_status, Order.PaymentStatus.COD_PENDING)
        self.assertEqual(order.subtotal, Decimal("5000.00"))
        self.assertEqual(order.shipping_charge, Decimal("99.00"))
        self.assertEqual(order.tax, Decimal("900.00"))
        self.assertEqual(order.total, Decimal("5999.00"))
        self.assertEqual(
            list(order.timeline.values_list("title", flat=True)),
            ["Order Placed", "Order Confirmed"],
        )
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 9)
        self.assertTrue(AdminNotification.objects.filter(type=AdminNotification.Type.NEW_ORDER).exists())
        self.assertTrue(mock_dispatch.called)

    def test_free_shipping_at_threshold(self, mock_dispatch, mock_signal_dispatch):
        response = self.checkout(items=[{"product_id": self.product.id, "quantity": 2}])

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order = Order.objects.get()
        self.assertEqual(order.shipping_charge, Decimal("0.00"))
        self.assertEqual(order.tax, Decimal("1800.00"))
        self.assertEqual(order.total, Decimal("11800.00"))

    def test_coupon_discount_is_capped_and_counted(self, mock_dispatch, mock_signal_dispatch):
        coupon = Coupon.objects.create(
            code="save10", discount_type=Coupon.DiscountType.PERCENTAGE,
            discount_value=Decimal("10"), max_discount=Decimal("300"),
        )
        response = self.checkout(coupon_code="SAVE10")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order = Order.objects.get()
        self.assertEqual(order.coupon_code, "SAVE10")
        self.assertEqual(order.discount, Decimal("300.00"))
        self.assertEqual(order.tax, Decimal("846.00"))
        self.assertEqual(order.total, Decimal("5645.00"))
        coupon.refresh_from_db()
        self.assertEqual(coupon.usage_count, 1)

    def test_server_side_cart_used_when_no_items_sent(self, mock_dispatch, mock_signal_dispatch):
        cart = Cart.objects.create(user=self.user)
        CartItem.objects.create(cart=cart, product=self.product, quantity=3)

        response = self.checkout(items=None)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Order.objects.get().items.get().quantity, 3)
        self.assertFalse(cart.items.exists())

    def test_validation_messages(self, mock_dispatch, mock_signal_dispatch):
        response = self.checkout(items=None)
        self.assertEqual(response.json()["error"], "Cart is empty")

        response = self.checkout(shipping_address=None)
        self.assertEqual(response.json()["error"], "Shipping address is required")

        response = self.checkout(payment_method=None)
        self.assertEqual(response.json()["error"], "Payment method is required")

        response = self.checkout(items=[{"product_id": 999999, "quantity": 1}])
        self.assertEqual(response.json()["error"], "Product not found: 999999")
        self.assertFalse(Order.objects.exists())

    def test_out_of_stock_product_rejected(self, mock_dispatch, mock_signal_dispatch):
        response = self.checkout(items=[{"product_id": self.product.id, "quantity": 11}])

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["error"], "Ryzen 5 7600 is out of stock")

    def test_unknown_variation_rejected(self, mock_dispatch, mock_signal_dispatch):
        other = make_product(name="Core i5 14400")
        foreign = ProductVariation.objects.create(product=other, type="Cooler", name="Boxed", stock_quantity=5)

        for variation_id in (999999, foreign.id):
            response = self.checkout(
                items=[{"product_id": self.product.id, "variation_id": variation_id, "quantity": 1}]
            )
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertEqual(response.json()["error"], "Variation not found")
        self.assertFalse(Order.objects.exists())

    def test_variation_stock_is_checked_and_taken(self, mock_dispatch, mock_signal_dispatch):
        variation = ProductVariation.objects.create(
            product=self.product, type="Cooler", name="Wraith Stealth", stock_quantity=1
        )
        items = [{"product_id": self.product.id, "variation_id": variation.id, "quantity": 2}]

        response = self.checkout(items=items)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["error"], "Ryzen 5 7600 (Wraith Stealth) is out of stock")

        items[0]["quantity"] = 1
        response = self.checkout(items=items)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        variation.refresh_from_db()
        self.assertEqual(variation.stock_quantity, 0)
        self.assertEqual(Order.objects.get().items.get().variation_name, "Wraith Stealth")

    def test_variation_race_raises_out_of_stock(self, mock_dispatch, mock_signal_dispatch):
        variation = ProductVariation.objects.create(
            product=self.product, type="Cooler", name="Wraith Stealth", stock_quantity=1
        )
        order = make_order(user=self.user)
        order.items.create(
            product=self.product, variation=variation, variation_name="Wraith Stealth",
            name=self.product.name, quantity=1, price=Decimal("5000.00"), total=Decimal("5000.00"),
        )
        ProductVariation.objects.filter(pk=variation.pk).update(stock_quantity=0)

        with self.assertRaises(OutOfStockException):
            with transaction.atomic():
                CheckoutService.decrement_stock(order)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 10)

    def test_blocked_customer_cannot_order(self, mock_dispatch, mock_signal_dispatch):
        self.user.block()
        response = self.checkout()

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.json()["error"], "Your account has been blocked")

    def test_guest_checkout(self, mock_dispatch, mock_signal_dispatch):
        self.client.force_authenticate(user=None)
        response = self.checkout(guest_email="guest@test.com", guest_name="Guest Buyer")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order = Order.objects.get()
        self.assertIsNone(order.user)
        self.assertEqual(order.customer_email, "guest@test.com")

    @patch("transactions.services.Razorpay.create_order")
    def test_razorpay_order_stays_pending(self, mock_create, mock_dispatch, mock_signal_dispatch):
        mock_create.return_value = {"id": "order_RZP1", "amount": 599900, "currency": "INR"}

        with self.settings(RAZORPAY_KEY_ID="rzp_test_key", RAZORPAY_KEY_SECRET="rzp_test_secret"):
            response = self.checkout(payment_method="RAZORPAY")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.json()["data"]
        self.assertEqual(data["razorpay"]["order_id"], "order_RZP1")
        self.assertEqual(data["razorpay"]["key_id"], "rzp_test_key")
        order = Order.objects.get()
        self.assertEqual(order.status, Order.Status.PENDING)
        self.assertEqual(order.razorpay_order_id, "order_RZP1")
        self.assertEqual(mock_create.call_args.kwargs["receipt"], order.order_number)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 10)

    @patch("transactions.services.Razorpay.create_order")
    def test_gateway_failure_deletes_order(self, mock_create, mock_dispatch, mock_signal_dispatch):
        mock_create.side_effect = requests.ConnectionError("gateway down")

        response = self.checkout(payment_method="RAZORPAY")

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.json()["error"], "Failed to create payment order")
        self.assertFalse(Order.objects.exists())
        self.assertFalse(AdminNotification.objects.filter(type=AdminNotification.Type.NEW_ORDER).exists())


@patch("transactions.services.dispatch_task")
class VerifyPaymentTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.product = make_product(stock=5)
        self.order = make_order(
            payment_method=Order.PaymentMethod.RAZORPAY,
            payment_status=Order.PaymentStatus.PENDING,
            status=Order.Status.PENDING,
            razorpay_order_id="order_RZP1",
            guest_email="guest@test.com",
        )
        self.order.items.create(product=self.product, name=self.product.name, price=Decimal("5000"),
                                quantity=2, total=Decimal("10000"))

    def verify(self, signature, razorpay_order_id="order_RZP1"):
        payload = {
            "razorpay_order_id": razorpay_order_id,
            "razorpay_payment_id": "pay_1",
            "razorpay_signature": signature,
            "order_id": self.order.id,
        }
        with self.settings(RAZORPAY_KEY_SECRET="rzp_test_secret"):
            return self.client.post("/api/checkout/verify-payment/", payload, format="json")

    def test_valid_signature_confirms_order(self, mock_dispatch):
        response = self.verify(sign("order_RZP1", "pay_1"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["message"], "Payment verified successfully")
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PaymentStatus.PAID)
        self.assertEqual(self.order.status, Order.Status.CONFIRMED)
        self.assertIsNotNone(self.order.paid_at)
        self.assertEqual(self.order.razorpay_payment_id, "pay_1")
        self.assertTrue(self.order.timeline.filter(title="Payment Successful").exists())
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 3)
        self.assertTrue(mock_dispatch.called)

    def test_invalid_signature_marks_payment_failed(self, mock_dispatch):
        response = self.verify("forged")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["error"], "Payment verification failed")
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PaymentStatus.FAILED)
        self.assertTrue(self.order.timeline.filter(title="Payment Failed").exists())
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 5)

    def test_second_verification_is_idempotent(self, mock_dispatch):
        signature = sign("order_RZP1", "pay_1")
        self.verify(signature)
        response = self.verify(signature)

        self.assertEqual(response.json()["message"], "Payment already verified")
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 3)

    def test_signature_for_another_gateway_order_is_rejected(self, mock_dispatch):
        cheap = make_order(
            payment_method=Order.PaymentMethod.RAZORPAY,
            payment_status=Order.PaymentStatus.PENDING,
            status=Order.Status.PENDING,
            razorpay_order_id="order_CHEAP",
            total=Decimal("99.00"),
        )
        response = self.verify(sign("order_CHEAP", "pay_1"), razorpay_order_id="order_CHEAP")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["error"], "Payment does not match this order")
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PaymentStatus.PENDING)
        self.assertEqual(self.order.razorpay_order_id, "order_RZP1")
        cheap.refresh_from_db()
        self.assertEqual(cheap.payment_status, Order.PaymentStatus.PENDING)

    def test_forged_signature_leaves_paid_order_alone(self, mock_dispatch):
        self.verify(sign("order_RZP1", "pay_1"))
        response = self.verify("forged")

        self.assertEqual(response.json()["message"], "Payment already verified")
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PaymentStatus.PAID)
        self.assertEqual(self.order.status, Order.Status.CONFIRMED)
        self.assertFalse(self.order.timeline.filter(title="Payment Failed").exists())

    def test_missing_fields(self, mock_dispatch):
        response = self.client.post("/api/checkout/verify-payment/", {"order_id": self.order.id}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["error"], "Missing required fields")


class RazorpayClientTests(TestCase):
    def setUp(self):
        cache.clear()

    def test_amount_converted_to_paise(self):
        self.assertEqual(to_paise(Decimal("5999.00")), 599900)
        self.assertEqual(to_paise("10.005"), 1001)

    @patch("transactions.razorpay.requests.post")
    def test_create_order_payload(self, mock_post):
        mock_post.return_value.json.return_value = {"id": "order_X"}
        with self.settings(RAZORPAY_KEY_ID="rzp_test_key", RAZORPAY_KEY_SECRET="rzp_test_secret"):
            Razorpay().create_order(Decimal("1299.50"), receipt="SCB123")

        payload = mock_post.call_args.kwargs["json"]
        self.assertEqual(payload["amount"], 129950)
        self.assertEqual(payload["currency"], "INR")
        self.assertEqual(payload["receipt"], "SCB123")
        self.assertEqual(mock_post.call_args.kwargs["auth"], ("rzp_test_key", "rzp_test_secret"))

    def test_signature_check(self):
        with self.settings(RAZORPAY_KEY_SECRET="rzp_test_secret"):
            client = Razorpay()
        self.assertTrue(client.verify_signature("order_1", "pay_1", sign("order_1", "pay_1")))
        self.assertFalse(client.verify_signature("order_1", "pay_2", sign("order_1", "pay_1")))

    @patch("transactions.razorpay.requests.get")
    def test_fetch_payment(self, mock_get):
        mock_get.return_value.json.return_value = {"id": "pay_1", "status": "captured"}
        self.assertEqual(Razorpay().fetch_payment("pay_1")["status"], "captured")
        self.assertTrue(mock_get.call_args.args[0].endswith("/payments/pay_1"))

    @patch("transactions.razorpay.requests.post")
    def test_partial_refund_in_paise(self, mock_post):
        mock_post.return_value.json.return_value = {"id": "rfnd_1"}
        Razorpay().refund("pay_1", amount=Decimal("250.00"))
        self.assertTrue(mock_post.call_args.args[0].endswith("/payments/pay_1/refund"))
        self.assertEqual(mock_post.call_args.kwargs["json"]["amount"], 25000)

        Razorpay().refund("pay_1")
        self.assertNotIn("amount", mock_post.call_args.kwargs["json"])


class CouponValidateTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = get_user_model().objects.create_user(email="customer@test.com", password="pass12345")

    def validate(self, code, cart_total):
        return self.client.post("/api/checkout/coupon/", {"code": code, "cart_total": cart_total}, format="json")

    def test_fixed_coupon_applied(self):
        Coupon.objects.create(code="FLAT500", discount_type=Coupon.DiscountType.FIXED, discount_value=Decimal("500"))
        response = self.validate("flat500", "2000")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body["message"], "Coupon applied! You save ₹500")
        self.assertTrue(body["data"]["valid"])

    def test_discount_never_exceeds_cart_total(self):
        Coupon.objects.create(code="FLAT500", discount_type=Coupon.DiscountType.FIXED, discount_value=Decimal("500"))
        response = self.validate("FLAT500", "300")
        self.assertEqual(Decimal(str(response.json()["data"]["discount"])), Decimal("300"))

    def test_failure_messages(self):
        now = timezone.now()
        Coupon.objects.create(code="OFF", discount_value=Decimal("10"), is_active=False)
        Coupon.objects.create(code="SOON", discount_value=Decimal("10"), start_date=now + timedelta(days=2))
        Coupon.objects.create(code="OLD", discount_value=Decimal("10"), end_date=now - timedelta(days=1))
        Coupon.objects.create(code="USEDUP", discount_value=Decimal("10"), usage_limit=5, usage_count=5)
        Coupon.objects.create(code="BIGCART", discount_value=Decimal("10"), min_order_amount=Decimal("5000"))

        cases = [
            ("", "Coupon code is required"),
            ("NOPE", "Invalid coupon code"),
            ("OFF", "This coupon is no longer active"),
            ("SOON", "This coupon is not yet active"),
            ("OLD", "This coupon has expired"),
            ("USEDUP", "This coupon has reached its usage limit"),
            ("BIGCART", "Minimum order amount of ₹5,000 required"),
        ]
        for code, message in cases:
            with self.subTest(code=code):
                response = self.validate(code, "1000")
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertEqual(response.json()["error"], message)

    def test_per_user_limit(self):
        Coupon.objects.create(code="ONCE", discount_value=Decimal("10"), per_user_limit=1)
        make_order(user=self.user, coupon_code="ONCE")
        self.client.force_authenticate(user=self.user)

        response = self.validate("ONCE", "1000")
        self.assertEqual(response.json()["error"], "You have already used this coupon")

    def test_cancelled_orders_do_not_count_towards_limit(self):
        Coupon.objects.create(code="ONCE", discount_value=Decimal("10"), per_user_limit=1)
        make_order(user=self.user, coupon_code="ONCE", status=Order.Status.CANCELLED)
        self.client.force_authenticate(user=self.user)

        self.assertEqual(self.validate("ONCE", "1000").status_code, status.HTTP_200_OK)


class ShippingQuoteTests(TestCase):
    url = "/api/checkout/shipping/"

    def setUp(self):
        cache.clear()
        self.client = APIClient()

    def test_invalid_pincode(self):
        response = self.client.post(self.url, {"pincode": "4110"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["error"], "Valid pincode is required")

    def test_default_rule_without_shiprocket(self):
        with self.settings(SHIPROCKET_EMAIL="", SHIPROCKET_PASSWORD=""):
            paid = self.client.post(self.url, {"pincode": "411001", "cart_total": "2500", "cod": True}, format="json")
            free = self.client.post(self.url, {"pincode": "411001", "cart_total": "12000"}, format="json")

        shipping = paid.json()["data"]["shipping"]
        self.assertEqual(shipping["charge"], 99)
        self.assertEqual(shipping["cod_charges"], 50)
        self.assertFalse(shipping["is_free_shipping"])
        self.assertTrue(free.json()["data"]["shipping"]["is_free_shipping"])
        self.assertEqual(free.json()["data"]["shipping"]["charge"], 0)

    @patch("transactions.services.Shiprocket.rate_options")
    @patch("transactions.services.Shiprocket.check_pincode")
    def test_courier_rates_when_enabled(self, mock_pincode, mock_rates):
        mock_pincode.return_value = {"city": "Pune", "state": "Maharashtra"}
        mock_rates.return_value = (
            {"courier_id": 1, "courier_name": "Delhivery", "charge": 85, "cod_charges": 40, "estimated_days": "4"},
            {"courier_id": 2, "courier_name": "Bluedart", "charge": 160, "cod_charges": 40, "estimated_days": "2"},
        )
        with self.settings(SHIPROCKET_EMAIL="ops@test.com", SHIPROCKET_PASSWORD="secret"):
            response = self.client.post(self.url, {"pincode": "411001", "cart_total": "2500"}, format="json")

        data = response.json()["data"]
        self.assertTrue(data["serviceable"])
        self.assertEqual(data["shipping"]["courier_name"], "Delhivery")
        self.assertEqual(data["shipping"]["charge"], 85)
        self.assertEqual(data["express_option"]["courier_name"], "Bluedart")
        self.assertEqual(data["pincode_details"]["city"], "Pune")

    @patch("transactions.services.Shiprocket.check_pincode", return_value=None)
    def test_unserviceable_pincode(self, mock_pincode):
        with self.settings(SHIPROCKET_EMAIL="ops@test.com", SHIPROCKET_PASSWORD="secret"):
            response = self.client.post(self.url, {"pincode": "999999"}, format="json")

        data = response.json()["data"]
        self.assertFalse(data["serviceable"])
        self.assertEqual(data["error"], "Delivery not available for this pincode")

    @patch("transactions.services.Shiprocket.check_pincode", side_effect=requests.Timeout("slow"))
    def test_gateway_error_falls_back_to_flat_rate(self, mock_pincode):
        with self.settings(SHIPROCKET_EMAIL="ops@test.com", SHIPROCKET_PASSWORD="secret"):
            response = self.client.post(self.url, {"pincode": "411001", "cart_total": "50000"}, format="json")

        shipping = response.json()["data"]["shipping"]
        self.assertEqual(shipping["charge"], 99)
        self.assertEqual(shipping["courier_name"], "Standard Delivery")


class CustomerOrderTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        User = get_user_model()
        self.user = User.objects.create_user(email="customer@test.com", password="pass12345")
        self.other = User.objects.create_user(email="other@test.com", password="pass12345")
        self.order = make_order(user=self.user)
        self.order.add_timeline(Order.Status.PENDING, "Order Placed")
        self.order.add_timeline(Order.Status.CONFIRMED, "Order Confirmed")
        self.delivered = make_order(user=self.user, status=Order.Status.DELIVERED)
        self.foreign = make_order(user=self.other)

    def test_login_required(self):
        response = self.client.get("/api/orders/")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.json()["error"], "Please login to view orders")

    def test_lists_only_own_orders(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.get("/api/orders/")

        data = response.json()["data"]
        self.assertEqual(data["pagination"]["total"], 2)
        self.assertEqual(data["pagination"]["limit"], 10)
        numbers = {row["order_number"] for row in data["orders"]}
        self.assertNotIn(self.foreign.order_number, numbers)
        row = next(r for r in data["orders"] if r["order_number"] == self.order.order_number)
        self.assertEqual(row["latest_update"]["title"], "Order Confirmed")
        self.assertEqual(row["shipping_city"], "Pune")

    def test_status_filter(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.get("/api/orders/", {"status": "delivered"})

        orders = response.json()["data"]["orders"]
        self.assertEqual([o["order_number"] for o in orders], [self.delivered.order_number])

    def test_detail_limited_to_owner(self):
        self.client.force_authenticate(user=self.user)
        own = self.client.get(f"/api/orders/{self.order.order_number}/")
        foreign = self.client.get(f"/api/orders/{self.foreign.order_number}/")

        self.assertEqual(own.status_code, status.HTTP_200_OK)
        self.assertEqual(len(own.json()["data"]["order"]["timeline"]), 2)
        self.assertEqual(foreign.status_code, status.HTTP_404_NOT_FOUND)


@patch("transactions.services.dispatch_task")
class AdminOrderTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        User = get_user_model()
        self.admin = User.objects.create_superuser(email="admin@test.com", password="pass12345")
        self.customer = User.objects.create_user(email="customer@test.com", password="pass12345",
                                                 full_name="Ravi Kumar")
        self.client.force_authenticate(user=self.admin)
        self.paid = make_order(
            user=self.customer, payment_method=Order.PaymentMethod.RAZORPAY,
            payment_status=Order.PaymentStatus.PAID, total=Decimal("2500.00"),
        )
        self.cod = make_order(guest_email="guest@test.com", shipping_name="Anita Shah", shipping_mobile="9123456780",
                              status=Order.Status.PENDING)

    def test_list_with_stats(self, mock_dispatch):
        response = self.client.get("/api/admin/orders/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()["data"]
        self.assertEqual(data["pagination"]["total"], 2)
        self.assertEqual(data["stats"]["total"], 2)
        self.assertEqual(data["stats"]["pending"], 1)
        self.assertEqual(Decimal(str(data["stats"]["total_revenue"])), Decimal("2500"))
        self.assertEqual(data["stats"]["today_orders"], 2)

    def test_search_and_filters(self, mock_dispatch):
        by_mobile = self.client.get("/api/admin/orders/", {"search": "9123456780"}).json()["data"]["orders"]
        self.assertEqual([o["order_number"] for o in by_mobile], [self.cod.order_number])

        by_email = self.client.get("/api/admin/orders/", {"search": "customer@test"}).json()["data"]["orders"]
        self.assertEqual([o["order_number"] for o in by_email], [self.paid.order_number])

        paid = self.client.get("/api/admin/orders/", {"payment_status": "PAID"}).json()["data"]["orders"]
        self.assertEqual(len(paid), 1)

        tomorrow = (timezone.localdate() + timedelta(days=1)).isoformat()
        future = self.client.get("/api/admin/orders/", {"start_date": tomorrow}).json()["data"]["orders"]
        self.assertEqual(future, [])

    def test_detail_by_id_or_number(self, mock_dispatch):
        by_id = self.client.get(f"/api/admin/orders/{self.paid.id}/")
        by_number = self.client.get(f"/api/admin/orders/{self.paid.order_number.lower()}/")

        self.assertEqual(by_id.json()["data"]["order_number"], self.paid.order_number)
        self.assertEqual(by_number.json()["data"]["id"], self.paid.id)
        self.assertEqual(by_id.json()["data"]["customer"]["name"], "Ravi Kumar")
        self.assertIn("pricing", by_id.json()["data"])
        self.assertEqual(self.client.get("/api/admin/orders/SCBMISSING/").status_code, status.HTTP_404_NOT_FOUND)

    def test_status_change_stamps_and_notifies(self, mock_dispatch):
        response = self.client.put(
            f"/api/admin/orders/{self.cod.id}/",
            {"status": "SHIPPED", "awb_number": "AWB123", "courier_name": "Delhivery"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["message"], "Order updated successfully")
        self.cod.refresh_from_db()
        self.assertEqual(self.cod.status, Order.Status.SHIPPED)
        self.assertIsNotNone(self.cod.shipped_at)
        self.assertEqual(self.cod.timeline.get().title, "Order Shipped")
        self.assertTrue(AdminNotification.objects.filter(type=AdminNotification.Type.ORDER_STATUS).exists())
        self.assertTrue(AdminAuditLog.objects.filter(action=AdminAuditLog.Action.ORDER_UPDATED).exists())
        self.assertTrue(mock_dispatch.called)

        first_shipped_at = self.cod.shipped_at
        self.client.put(f"/api/admin/orders/{self.cod.id}/", {"status": "SHIPPED"}, format="json")
        self.cod.refresh_from_db()
        self.assertEqual(self.cod.shipped_at, first_shipped_at)

    def test_explicit_timeline_update(self, mock_dispatch):
        self.client.patch(
            f"/api/admin/orders/{self.paid.id}/",
            {"timeline_update": {"title": "Reached hub", "location": "Mumbai"}},
            format="json",
        )

        entry = OrderTimeline.objects.get(order=self.paid)
        self.assertEqual(entry.title, "Reached hub")
        self.assertEqual(entry.location, "Mumbai")
        self.assertFalse(mock_dispatch.called)

    def test_customers_are_rejected(self, mock_dispatch):
        self.client.force_authenticate(user=self.customer)
        self.assertEqual(self.client.get("/api/admin/orders/").status_code, status.HTTP_403_FORBIDDEN)


class AdminCouponTests(TestCase):
    url = "/api/admin/coupons/"

    def setUp(self):
        self.client = APIClient()
        self.admin = get_user_model().objects.create_superuser(email="admin@test.com", password="pass12345")
        self.client.force_authenticate(user=self.admin)

    def test_create_uppercases_code(self):
        response = self.client.post(self.url, {
            "code": "diwali20", "discount_type": "PERCENTAGE", "discount_value": "20", "max_discount": "2000",
        }, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(Coupon.objects.filter(code="DIWALI20").exists())

    def test_duplicate_and_invalid_values(self):
        Coupon.objects.create(code="DIWALI20", discount_value=Decimal("20"))

        duplicate = self.client.post(self.url, {"code": "Diwali20", "discount_value": "10"}, format="json")
        self.assertEqual(duplicate.json()["error"], "Coupon code already exists")

        too_big = self.client.post(self.url, {
            "code": "HUGE", "discount_type": "PERCENTAGE", "discount_value": "150",
        }, format="json")
        self.assertEqual(too_big.json()["error"], "Percentage discount cannot exceed 100")

    def test_list_filters_and_stats(self):
        Coupon.objects.create(code="LIVE", discount_value=Decimal("10"))
        Coupon.objects.create(code="PAUSED", discount_value=Decimal("10"), is_active=False)
        Coupon.objects.create(code="GONE", discount_value=Decimal("10"), end_date=timezone.now() - timedelta(days=1))

        response = self.client.get(self.url, {"status": "expired"})
        data = response.json()["data"]
        self.assertEqual([c["code"] for c in data["coupons"]], ["GONE"])
        self.assertEqual(data["coupons"][0]["status"], "expired")
        self.assertEqual(data["stats"], {"total": 3, "active": 1, "expired": 1})

    def test_update_and_delete(self):
        coupon = Coupon.objects.create(code="LIVE", discount_value=Decimal("10"))

        response = self.client.put(f"{self.url}{coupon.id}/", {"is_active": False}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        coupon.refresh_from_db()
        self.assertFalse(coupon.is_active)

        response = self.client.delete(f"{self.url}{coupon.id}/")
        self.assertEqual(response.json()["message"], "Coupon deleted successfully")
        self.assertFalse(Coupon.objects.exists())
