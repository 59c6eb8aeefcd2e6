"""
Checkout, payment, coupon, shipping and customer order views
"""
import logging

from django.conf import settings
from django.db.models import Prefetch
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample

from authentication.core.base_view import BaseAPIView
from authentication.core.pagination import StandardPagination
from authentication.core.permissions import IsNotBlocked
from authentication.core.response import standardized_response, first_error_message
from .models import Order, OrderTimeline
from .serializers import (
    CheckoutSerializer, VerifyPaymentSerializer, CouponValidateSerializer, ShippingQuoteSerializer,
    CustomerOrderListSerializer, CustomerOrderDetailSerializer,
)
from .services import CheckoutService, CouponService, PaymentService, ShippingService

logger = logging.getLogger(__name__)


def _service_response(result):
    _, payload, status_code = result
    return Response(payload, status=status_code)


class OrderPagination(StandardPagination):
    page_size = 10
    max_page_size = 50


# ----------------------
# Checkout
# ----------------------
class CheckoutView(BaseAPIView):
    """
    Place an order for a signed-in customer or a guest.

    Lines are re-priced from the catalogue; when ``items`` is omitted the
    caller's cart is used. Blocked accounts cannot order.
    """
    permission_classes = [AllowAny, IsNotBlocked]

    @extend_schema(
        request=CheckoutSerializer,
        examples=[
            OpenApiExample(
                'COD checkout',
                value={
                    'items': [{'product_id': 1, 'quantity': 1}],
                    'shipping_address': {
                        'full_name': 'Ravi Kumar', 'mobile': '9876543210',
                        'address_line1': '12 MG Road, Shivaji Nagar', 'city': 'Pune',
                        'state': 'Maharashtra', 'pincode': '411001',
                    },
                    'payment_method': 'COD',
                },
                request_only=True,
            )
        ],
    )
    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                standardized_response(success=False, error=first_error_message(serializer.errors)),
                status=status.HTTP_400_BAD_REQUEST
            )
        result = CheckoutService.place_order(
            request.user,
            serializer.validated_data,
            session_id=request.COOKIES.get(settings.CART_COOKIE_NAME),
        )
        return _service_response(result)


class VerifyPaymentView(BaseAPIView):
    permission_classes = [AllowAny]

    @extend_schema(request=VerifyPaymentSerializer, description="Verify a Razorpay checkout signature and confirm the order")
    def post(self, request):
        serializer = VerifyPaymentSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                standardized_response(success=False, error="Missing required fields"),
                status=status.HTTP_400_BAD_REQUEST
            )
        data = serializer.validated_data
        result = PaymentService.verify(
            data['razorpay_order_id'],
            data['razorpay_payment_id'],
            data['razorpay_signature'],
            data['order_id'],
            user=request.user,
            session_id=request.COOKIES.get(settings.CART_COOKIE_NAME),
        )
        return _service_response(result)


class CouponValidateView(BaseAPIView):
    permission_classes = [AllowAny]

    @extend_schema(request=CouponValidateSerializer, description="Check a coupon against the cart total")
    def post(self, request):
        serializer = CouponValidateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                standardized_response(success=False, error=first_error_message(serializer.errors)),
                status=status.HTTP_400_BAD_REQUEST
            )
        result = CouponService.validate(
            serializer.validated_data.get('code'),
            serializer.validated_data.get('cart_total'),
            user=request.user,
        )
        return _service_response(result)


class ShippingQuoteView(BaseAPIView):
    permission_classes = [AllowAny]

    @extend_schema(request=ShippingQuoteSerializer, description="Shipping charge and courier estimate for a pincode")
    def post(self, request):
        serializer = ShippingQuoteSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                standardized_response(success=False, error=first_error_message(serializer.errors)),
                status=status.HTTP_400_BAD_REQUEST
            )
        data = serializer.validated_data
        result = ShippingService.quote(
            (data.get('pincode') or '').strip(),
            cart_total=data['cart_total'],
            weight=data['weight'],
            cod=data['cod'],
        )
        return _service_response(result)

    @extend_schema(parameters=[OpenApiParameter(name='pincode', required=True, type=str)])
    def get(self, request):
        return _service_response(ShippingService.check_pincode((request.query_params.get('pincode') or '').strip()))


# ----------------------
# Customer orders
# ----------------------
def _customer_orders(user):
    return Order.objects.filter(user=user).prefetch_related(
        'items',
        Prefetch('timeline', queryset=OrderTimeline.objects.order_by('created_at', 'id')),
    )


class CustomerOrderListView(BaseAPIView):
    permission_classes = [AllowAny]
    pagination_class = OrderPagination

    @extend_schema(
        parameters=[
            OpenApiParameter(name='status', required=False, type=str),
            OpenApiParameter(name='page', required=False, type=int),
            OpenApiParameter(name='limit', required=False, type=int),
        ],
        responses={200: CustomerOrderListSerializer(many=True)},
    )
    def get(self, request):
        if not request.user.is_authenticated:
            return Response(
                standardized_response(success=False, error="Please login to view orders"),
                status=status.HTTP_401_UNAUTHORIZED
            )

        orders = _customer_orders(request.user).order_by('-created_at')
        status_filter = request.query_params.get('status')
        if status_filter:
            orders = orders.filter(status=status_filter.upper())

        rows = self.paginate_queryset(orders)
        return self.get_paginated_response(CustomerOrderListSerializer(rows, many=True).data, key='orders')


class CustomerOrderDetailView(BaseAPIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: CustomerOrderDetailSerializer})
    def get(self, request, order_number):
        if not request.user.is_authenticated:
            return Response(
                standardized_response(success=False, error="Please login to view orders"),
                status=status.HTTP_401_UNAUTHORIZED
            )
        order = _customer_orders(request.user).filter(order_number=order_number.upper()).first()
        if order is None:
            return Response(
                standardized_response(success=False, error="Order not found"),
                status=status.HTTP_404_NOT_FOUND
            )
        return Response(standardized_response(data={'order': CustomerOrderDetailSerializer(order).data}))
