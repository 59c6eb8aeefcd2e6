"""
Admin reporting API views

Traffic analytics, the dashboard summary and the SEO health report.
All endpoints require ADMIN role authentication.
"""
import logging

from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from authentication.core.base_view import BaseAPIView
from authentication.core.permissions import IsAdmin
from authentication.core.response import standardized_response
from .services import AnalyticsService, DashboardService, SEOAnalyticsService, DATE_FILTERS

logger = logging.getLogger(__name__)


class AdminAnalyticsView(BaseAPIView):
    """
    Query Parameters:
    - filter: today | yesterday | this_week | last_week | this_month |
      last_month | this_year | last_year | lifetime (default today)
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('filter', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=list(DATE_FILTERS)),
        ]
    )
    def get(self, request):
        filter_name = request.query_params.get('filter') or 'today'
        return Response(standardized_response(data=AnalyticsService.report(filter_name)))


class AdminDashboardView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request):
        return Response(standardized_response(data=DashboardService.summary()))


class AdminSEOAnalyticsView(BaseAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request):
        return Response(standardized_response(data=SEOAnalyticsService.report()))
