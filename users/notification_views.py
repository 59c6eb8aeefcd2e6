"""
Admin Notification API Views

Endpoints:
- GET    /api/admin/notifications/                     list (page, limit, type, unread)
- GET    /api/admin/notifications/unread_count/        unread count
- POST   /api/admin/notifications/mark_as_read/        {notification_id}
- POST   /api/admin/notifications/mark_as_unread/      {notification_id}
- POST   /api/admin/notifications/mark_all_as_read/
- DELETE /api/admin/notifications/{id}/                delete one
- POST   /api/admin/notifications/delete_all/
- POST   /api/admin/notifications/delete_read/
"""

import logging

from rest_framework import viewsets, status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from authentication.core.base_view import BaseAPIView
from authentication.core.permissions import IsAdmin
from authentication.core.response import standardized_response
from .notification_models import AdminNotification
from .notification_serializers import AdminNotificationSerializer, NotificationIdsSerializer
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


class AdminNotificationViewSet(viewsets.ViewSetMixin, BaseAPIView):
    permission_classes = [permissions.IsAuthenticated, IsAdmin]
    lookup_value_regex = r"\d+"

    def _require_id(self, request):
        serializer = NotificationIdsSerializer(data=request.data)
        if not serializer.is_valid():
            return None
        return serializer.validated_data['notification_id']

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('type', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=AdminNotification.Type.values),
            openapi.Parameter('unread', openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN),
            openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
        ]
    )
    def list(self, request):
        queryset = AdminNotification.objects.all()
        notification_type = request.query_params.get('type')
        if notification_type in AdminNotification.Type.values:
            queryset = queryset.filter(type=notification_type)
        if request.query_params.get('unread', '').lower() == 'true':
            queryset = queryset.filter(is_read=False)

        rows = self.paginate_queryset(queryset.order_by('-created_at'))
        return self.get_paginated_response(
            AdminNotificationSerializer(rows, many=True).data,
            key='notifications',
            unread_count=NotificationService.get_unread_count(),
        )

    def destroy(self, request, pk=None):
        if not NotificationService.delete_notification(pk):
            return Response(
                standardized_response(success=False, error="Notification not found"),
                status=status.HTTP_404_NOT_FOUND
            )
        return Response(standardized_response(message="Notification deleted"))

    @action(detail=False, methods=['get'])
    def unread_count(self, request):
        return Response(standardized_response(data={'unread_count': NotificationService.get_unread_count()}))

    @swagger_auto_schema(request_body=NotificationIdsSerializer)
    @action(detail=False, methods=['post'])
    def mark_as_read(self, request):
        notification_id = self._require_id(request)
        if notification_id is None:
            return Response(
                standardized_response(success=False, error="notification_id is required"),
                status=status.HTTP_400_BAD_REQUEST
            )
        if not NotificationService.mark_as_read(notification_id):
            return Response(
                standardized_response(success=False, error="Notification not found"),
                status=status.HTTP_404_NOT_FOUND
            )
        return Response(standardized_response(message="Notification marked as read"))

    @swagger_auto_schema(request_body=NotificationIdsSerializer)
    @action(detail=False, methods=['post'])
    def mark_as_unread(self, request):
        notification_id = self._require_id(request)
        if notification_id is None:
            return Response(
                standardized_response(success=False, error="notification_id is required"),
                status=status.HTTP_400_BAD_REQUEST
            )
        if not NotificationService.mark_as_unread(notification_id):
            return Response(
                standardized_response(success=False, error="Notification not found"),
                status=status.HTTP_404_NOT_FOUND
            )
        return Response(standardized_response(message="Notification marked as unread"))

    @action(detail=False, methods=['post'])
    def mark_all_as_read(self, request):
        count = NotificationService.mark_all_as_read()
        return Response(standardized_response(
            message=f"{count} notifications marked as read", data={'count': count}
        ))

    @action(detail=False, methods=['post'])
    def delete_all(self, request):
        count = NotificationService.delete_all()
        return Response(standardized_response(message=f"{count} notifications deleted", data={'count': count}))

    @action(detail=False, methods=['post'])
    def delete_read(self, request):
        count = NotificationService.delete_all(read_only=True)
        return Response(standardized_response(
            message=f"{count} read notifications deleted", data={'count': count}
        ))
