"""
Admin order and coupon management API views

All endpoints require ADMIN role authentication.
"""
import logging
from datetime import datetime, time, timedelta

from django.db.models import Q, Sum, DecimalField, Value
from django.db.models.functions import Coalesce
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from authentication.core.base_view import BaseAPIView
from authentication.core.permissions import IsAdmin
from authentication.core.response import standardized_response, first_error_message
from authentication.models import AdminAuditLog
from authentication.views_admin import log_admin_action
from .models import Coupon, Order
from .serializers import (
    AdminOrderListSerializer, AdminOrderDetailSerializer, AdminOrderUpdateSerializer, CouponSerializer,
)
from .services import OrderUpdateService
from .signals import order_status_changed

logger = logging.getLogger(__name__)


def _validation_failed(serializer):
    return Response(
        standardized_response(success=False, error=first_error_message(serializer.errors)),
        status=status.HTTP_400_BAD_REQUEST
    )


def _revenue(queryset):
    return queryset.aggregate(
        total=Coalesce(Sum('total'), Value(0), output_field=DecimalField(max_digits=12, decimal_places=2))
    )['total']


def _day_bounds(day):
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.combine(day, time.min), tz)
    return start, start + timedelta(days=1)


# =====================================================
# ORDERS
# =====================================================

class AdminOrderListView(BaseAPIView):
    """
    Query Parameters:
    - search: order number, customer name/email or mobile
    - status, payment_status
    - start_date, end_date: YYYY-MM-DD, inclusive
    - page, limit
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('search', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=Order.Status.values),
            openapi.Parameter('payment_status', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                              enum=Order.PaymentStatus.values),
            openapi.Parameter('start_date', openapi.IN_QUERY, type=openapi.TYPE_STRING, format=openapi.FORMAT_DATE),
            openapi.Parameter('end_date', openapi.IN_QUERY, type=openapi.TYPE_STRING, format=openapi.FORMAT_DATE),
            openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
        ]
    )
    def get(self, request):
        params = request.query_params
        queryset = Order.objects.select_related('user').prefetch_related('items')

        search = (params.get('search') or '').strip()
        if search:
            queryset = queryset.filter(
                Q(order_number__icontains=search)
                | Q(shipping_name__icontains=search)
                | Q(shipping_mobile__icontains=search)
                | Q(guest_email__icontains=search)
                | Q(guest_name__icontains=search)
                | Q(user__email__icontains=search)
                | Q(user__full_name__icontains=search)
            )

        status_param = (params.get('status') or '').upper()
        if status_param in Order.Status.values:
            queryset = queryset.filter(status=status_param)
        payment_status = (params.get('payment_status') or '').upper()
        if payment_status in Order.PaymentStatus.values:
            queryset = queryset.filter(payment_status=payment_status)

        start_date = parse_date(params.get('start_date') or '')
        if start_date:
            queryset = queryset.filter(created_at__gte=_day_bounds(start_date)[0])
        end_date = parse_date(params.get('end_date') or '')
        if end_date:
            queryset = queryset.filter(created_at__lt=_day_bounds(end_date)[1])

        rows = self.paginate_queryset(queryset.order_by('-created_at'))
        return self.get_paginated_response(
            AdminOrderListSerializer(rows, many=True).data, key='orders', stats=self.stats()
        )

    @staticmethod
    def stats():
        orders = Order.objects.all()
        today_start, today_end = _day_bounds(timezone.localdate())
        today = orders.filter(created_at__gte=today_start, created_at__lt=today_end)
        return {
            'total': orders.count(),
            'pending': orders.filter(status=Order.Status.PENDING).count(),
            'confirmed': orders.filter(status=Order.Status.CONFIRMED).count(),
            'processing': orders.filter(status=Order.Status.PROCESSING).count(),
            'shipped': orders.filter(status=Order.Status.SHIPPED).count(),
            'delivered': orders.filter(status=Order.Status.DELIVERED).count(),
            'cancelled': orders.filter(status=Order.Status.CANCELLED).count(),
            'total_revenue': _revenue(orders.filter(payment_status=Order.PaymentStatus.PAID)),
            'today_orders': today.count(),
            'today_revenue': _revenue(today.filter(payment_status=Order.PaymentStatus.PAID)),
        }


class AdminOrderDetailView(BaseAPIView):
    """Fetch or update one order, addressed by database id or order number."""
    permission_classes = [IsAuthenticated, IsAdmin]

    @staticmethod
    def get_order(ref):
        queryset = Order.objects.select_related('user').prefetch_related('items', 'timeline')
        lookup = Q(order_number=str(ref).upper())
        if str(ref).isdigit():
            lookup |= Q(pk=int(ref))
        return queryset.filter(lookup).first()

    def _not_found(self):
        return Response(
            standardized_response(success=False, error="Order not found"),
            status=status.HTTP_404_NOT_FOUND
        )

    def get(self, request, ref):
        order = self.get_order(ref)
        if order is None:
            return self._not_found()
        return Response(standardized_response(data=AdminOrderDetailSerializer(order).data))

    @swagger_auto_schema(request_body=AdminOrderUpdateSerializer)
    def put(self, request, ref):
        order = self.get_order(ref)
        if order is None:
            return self._not_found()

        serializer = AdminOrderUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return _validation_failed(serializer)

        order, old_status = OrderUpdateService.apply(order, serializer.validated_data)
        if order.status != old_status:
            order_status_changed.send(sender=Order, order=order, old_status=old_status)

        log_admin_action(
            request.user, AdminAuditLog.Action.ORDER_UPDATED, 'order', order.id,
            details={
                'order_number': order.order_number,
                'changes': {k: v for k, v in request.data.items() if k != 'timeline_update'},
                'previous_status': old_status,
            }
        )
        order = self.get_order(order.id)
        return Response(standardized_response(
            message="Order updated successfully", data=AdminOrderDetailSerializer(order).data
        ))

    @swagger_auto_schema(request_body=AdminOrderUpdateSerializer)
    def patch(self, request, ref):
        return self.put(request, ref)


# =====================================================
# COUPONS
# =====================================================

class AdminCouponListCreateView(BaseAPIView):
    """
    Query Parameters:
    - status: active | inactive | expired
    - discount_type: PERCENTAGE | FIXED
    - apply_on: ALL | PRODUCTS | PREBUILT_PCS
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                              enum=['active', 'inactive', 'expired']),
            openapi.Parameter('discount_type', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                              enum=Coupon.DiscountType.values),
            openapi.Parameter('apply_on', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=Coupon.ApplyOn.values),
        ]
    )
    def get(self, request):
        params = request.query_params
        now = timezone.now()
        queryset = Coupon.objects.all()

        status_param = params.get('status')
        if status_param == 'active':
            queryset = queryset.filter(is_active=True).filter(Q(end_date__isnull=True) | Q(end_date__gte=now))
        elif status_param == 'inactive':
            queryset = queryset.filter(is_active=False)
        elif status_param == 'expired':
            queryset = queryset.filter(end_date__lt=now)

        discount_type = (params.get('discount_type') or '').upper()
        if discount_type in Coupon.DiscountType.values:
            queryset = queryset.filter(discount_type=discount_type)
        apply_on = (params.get('apply_on') or '').upper()
        if apply_on in Coupon.ApplyOn.values:
            queryset = queryset.filter(apply_on=apply_on)

        all_coupons = Coupon.objects.all()
        stats = {
            'total': all_coupons.count(),
            'active': all_coupons.filter(is_active=True).filter(
                Q(end_date__isnull=True) | Q(end_date__gte=now)
            ).count(),
            'expired': all_coupons.filter(end_date__lt=now).count(),
        }
        return Response(standardized_response(data={
            'coupons': CouponSerializer(queryset.order_by('-created_at'), many=True).data,
            'stats': stats,
        }))

    @swagger_auto_schema(request_body=CouponSerializer)
    def post(self, request):
        serializer = CouponSerializer(data=request.data)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        coupon = serializer.save()
        logger.info(f"Coupon {coupon.code} created by {request.user.email}")
        return Response(
            standardized_response(message="Coupon created successfully", data=CouponSerializer(coupon).data),
            status=status.HTTP_201_CREATED
        )


class AdminCouponDetailView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request, pk):
        coupon = get_object_or_404(Coupon, pk=pk)
        return Response(standardized_response(data=CouponSerializer(coupon).data))

    @swagger_auto_schema(request_body=CouponSerializer)
    def put(self, request, pk):
        coupon = get_object_or_404(Coupon, pk=pk)
        serializer = CouponSerializer(coupon, data=request.data, partial=True)
        if not serializer.is_valid():
            return _validation_failed(serializer)
        coupon = serializer.save()
        return Response(standardized_response(
            message="Coupon updated successfully", data=CouponSerializer(coupon).data
        ))

    @swagger_auto_schema(request_body=CouponSerializer)
    def patch(self, request, pk):
        return self.put(request, pk)

    def delete(self, request, pk):
        coupon = get_object_or_404(Coupon, pk=pk)
        coupon.delete()
        return Response(standardized_response(message="Coupon deleted successfully"))
