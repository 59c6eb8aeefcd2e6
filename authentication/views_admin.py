"""
Admin customer management API views

All endpoints require ADMIN role authentication.
Status changes and profile edits are written to the audit log.
"""

from decimal import Decimal

from rest_framework import status
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.contrib.auth import get_user_model
from django.db.models import Q, Sum, Count, OuterRef, Subquery, Value, DecimalField, IntegerField
from django.db.models.functions import Coalesce
from django.utils import timezone
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from authentication.core.base_view import BaseAPIView
from authentication.core.pagination import StandardPagination
from authentication.core.jwt_utils import TokenManager
from authentication.core.permissions import IsAdmin
from authentication.core.response import standardized_response, first_error_message
from authentication.models import AdminAuditLog
from authentication.serializers_admin import (
    AdminCustomerListSerializer,
    AdminCustomerDetailSerializer,
    AdminCustomerUpdateSerializer,
    AdminAuditLogSerializer,
)

CustomUser = get_user_model()


# =====================================================
# HELPER FUNCTIONS
# =====================================================

def log_admin_action(admin, action, target_entity, target_id, reason=None, details=None):
    """Create audit log entry for admin action"""
    AdminAuditLog.objects.create(
        admin=admin,
        action=action,
        target_entity=target_entity,
        target_id=str(target_id),
        reason=reason,
        details=details or {}
    )


def annotate_customer_stats(queryset):
    """Attach order_count, review_count and total_spent without join fan-out"""
    from transactions.models import Order
    from store.models import Review

    orders = Order.objects.filter(user=OuterRef('pk'))
    order_count = orders.order_by().values('user').annotate(c=Count('id')).values('c')
    total_spent = (
        orders.filter(payment_status__in=Order.REVENUE_PAYMENT_STATUSES)
        .order_by().values('user').annotate(s=Sum('total')).values('s')
    )
    review_count = (
        Review.objects.filter(user=OuterRef('pk'))
        .order_by().values('user').annotate(c=Count('id')).values('c')
    )
    money = DecimalField(max_digits=12, decimal_places=2)
    return queryset.annotate(
        order_count=Coalesce(Subquery(order_count, output_field=IntegerField()), Value(0)),
        review_count=Coalesce(Subquery(review_count, output_field=IntegerField()), Value(0)),
        total_spent=Coalesce(Subquery(total_spent, output_field=money), Value(Decimal('0')), output_field=money),
    )


# =====================================================
# CUSTOMER MANAGEMENT VIEWS
# =====================================================

class AdminCustomerListView(BaseAPIView):
    """
    List customers with order and review aggregates.

    Query Parameters:
    - search: name, email or mobile
    - status: active | blocked
    - page, limit
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('search', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=['active', 'blocked']),
            openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
        ]
    )
    def get(self, request):
        queryset = CustomUser.objects.filter(role=CustomUser.Role.CUSTOMER)

        search = request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(full_name__icontains=search) | Q(email__icontains=search) | Q(phone_number__icontains=search)
            )

        status_param = (request.query_params.get('status') or '').upper()
        if status_param in CustomUser.Status.values:
            queryset = queryset.filter(status=status_param)

        rows = self.paginate_queryset(annotate_customer_stats(queryset).order_by('-created_at'))
        return self.get_paginated_response(AdminCustomerListSerializer(rows, many=True).data, key='customers')


class AdminCustomerStatsView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request):
        from transactions.models import Order

        customers = CustomUser.objects.filter(role=CustomUser.Role.CUSTOMER)
        month_start = timezone.now().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        revenue = Order.objects.filter(
            payment_status__in=Order.REVENUE_PAYMENT_STATUSES
        ).aggregate(total=Sum('total'))['total'] or Decimal('0')

        return Response(standardized_response(data={
            'total': customers.count(),
            'active': customers.filter(status=CustomUser.Status.ACTIVE).count(),
            'blocked': customers.filter(status=CustomUser.Status.BLOCKED).count(),
            'new_this_month': customers.filter(created_at__gte=month_start).count(),
            'total_orders': Order.objects.filter(user__role=CustomUser.Role.CUSTOMER).count(),
            'total_revenue': str(revenue),
        }))


class AdminCustomerDetailView(BaseAPIView):
    """Retrieve or update a single customer"""
    permission_classes = [IsAuthenticated, IsAdmin]

    def get_object(self, uuid):
        return get_object_or_404(
            annotate_customer_stats(CustomUser.objects.filter(role=CustomUser.Role.CUSTOMER)),
            uuid=uuid,
        )

    def get(self, request, uuid):
        customer = self.get_object(uuid)
        return Response(standardized_response(data=AdminCustomerDetailSerializer(customer).data))

    @swagger_auto_schema(request_body=AdminCustomerUpdateSerializer)
    def put(self, request, uuid):
        customer = self.get_object(uuid)
        previous_status = customer.status

        serializer = AdminCustomerUpdateSerializer(customer, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(
                standardized_response(success=False, error=first_error_message(serializer.errors)),
                status=status.HTTP_400_BAD_REQUEST
            )
        customer = serializer.save()

        if customer.status != previous_status:
            _record_status_change(request.user, customer, request.data.get('reason'))
        else:
            log_admin_action(
                request.user, AdminAuditLog.Action.CUSTOMER_UPDATED, 'CustomUser', customer.uuid,
                details={'fields': list(serializer.validated_data.keys())}
            )

        customer = self.get_object(uuid)
        return Response(standardized_response(
            message="Customer updated successfully",
            data=AdminCustomerDetailSerializer(customer).data,
        ))

    def patch(self, request, uuid):
        return self.put(request, uuid)


class AdminCustomerBlockView(BaseAPIView):
    """
    Block or unblock a customer.

    POST /api/admin/customers/{uuid}/block/
    {
        "action": "block",  # or "unblock"
        "reason": "Chargeback abuse"
    }
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            properties={
                'action': openapi.Schema(type=openapi.TYPE_STRING, enum=['block', 'unblock']),
                'reason': openapi.Schema(type=openapi.TYPE_STRING),
            }
        )
    )
    def post(self, request, uuid):
        customer = get_object_or_404(CustomUser, uuid=uuid, role=CustomUser.Role.CUSTOMER)
        action = (request.data.get('action') or 'block').lower()
        if action not in ('block', 'unblock'):
            return Response(
                standardized_response(success=False, error="Action must be 'block' or 'unblock'"),
                status=status.HTTP_400_BAD_REQUEST
            )

        if action == 'block':
            customer.block()
        else:
            customer.unblock()
        _record_status_change(request.user, customer, request.data.get('reason'))

        return Response(standardized_response(
            message=f"Customer {'blocked' if action == 'block' else 'unblocked'} successfully",
            data={'uuid': str(customer.uuid), 'status': customer.status},
        ))


def _record_status_change(admin, customer, reason=None):
    if customer.is_blocked:
        TokenManager.blacklist_all_user_tokens(str(customer.uuid))
        action = AdminAuditLog.Action.CUSTOMER_BLOCKED
    else:
        action = AdminAuditLog.Action.CUSTOMER_UNBLOCKED
    log_admin_action(admin, action, 'CustomUser', customer.uuid, reason=reason)


class AuditLogPagination(StandardPagination):
    page_size = 50


class AdminAuditLogView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    pagination_class = AuditLogPagination

    def get(self, request):
        queryset = AdminAuditLog.objects.select_related('admin')
        target_entity = request.query_params.get('target_entity')
        if target_entity:
            queryset = queryset.filter(target_entity=target_entity)
        rows = self.paginate_queryset(queryset)
        return self.get_paginated_response(AdminAuditLogSerializer(rows, many=True).data, key='logs')
