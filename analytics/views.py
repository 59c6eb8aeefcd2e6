"""
Public page-view tracking
"""
import logging

from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiExample

from authentication.core.base_view import BaseAPIView
from authentication.core.response import standardized_response, first_error_message
from authentication.core.task_dispatch import dispatch_task
from authentication.core.throttles import IPBasedThrottle
from users.notification_tasks import check_visit_milestones_task
from .models import PageView
from .serializers import PageViewCreateSerializer, PageViewEngagementSerializer
from .services import referrer_domain

logger = logging.getLogger(__name__)


class TrackPageView(BaseAPIView):
    """
    POST records a view and returns its id; PUT updates that view with
    dwell time, scroll depth and exit information.
    """
    permission_classes = [AllowAny]
    throttle_classes = [IPBasedThrottle]

    @extend_schema(
        request=PageViewCreateSerializer,
        examples=[
            OpenApiExample(
                'Product page',
                value={
                    'session_id': 's_1710000000_ab12', 'visitor_id': 'v_9f8e7d',
                    'page_path': '/products/ryzen-5-7600', 'page_type': 'product',
                    'reference_id': '42', 'reference_name': 'Ryzen 5 7600',
                    'referrer': 'https://www.google.com/', 'device_type': 'mobile',
                },
                request_only=True,
            )
        ],
    )
    def post(self, request):
        if not all(request.data.get(field) for field in ('session_id', 'page_path', 'page_type')):
            return Response(
                standardized_response(success=False, error="session_id, page_path and page_type are required"),
                status=status.HTTP_400_BAD_REQUEST
            )
        serializer = PageViewCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                standardized_response(success=False, error=first_error_message(serializer.errors)),
                status=status.HTTP_400_BAD_REQUEST
            )

        view = serializer.save(
            user=request.user if request.user.is_authenticated else None,
            referrer_domain=referrer_domain(serializer.validated_data.get('referrer')),
        )
        dispatch_task(check_visit_milestones_task)
        return Response(standardized_response(data={'view_id': view.id}))

    @extend_schema(request=PageViewEngagementSerializer)
    def put(self, request):
        serializer = PageViewEngagementSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                standardized_response(success=False, error=first_error_message(serializer.errors)),
                status=status.HTTP_400_BAD_REQUEST
            )
        data = dict(serializer.validated_data)
        view = PageView.objects.filter(pk=data.pop('view_id')).first()
        if view is None:
            return Response(
                standardized_response(success=False, error="Page view not found"),
                status=status.HTTP_404_NOT_FOUND
            )

        for field, value in data.items():
            setattr(view, field, value)
        if data.get('is_exit'):
            view.exited_at = timezone.now()
        view.save()
        return Response(standardized_response())
