"""
Admin notification URLs configuration
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .notification_views import AdminNotificationViewSet

router = DefaultRouter()
router.register(r'', AdminNotificationViewSet, basename='admin-notification')

urlpatterns = [
    path('', include(router.urls)),
]
