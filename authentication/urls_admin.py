"""
Admin customer management URLs

All routes require ADMIN authentication.
"""

from django.urls import path
from authentication.views_admin import (
    AdminCustomerListView,
    AdminCustomerStatsView,
    AdminCustomerDetailView,
    AdminCustomerBlockView,
    AdminAuditLogView,
)

urlpatterns = [
    path('customers/', AdminCustomerListView.as_view(), name='admin-customer-list'),
    path('customers/stats/', AdminCustomerStatsView.as_view(), name='admin-customer-stats'),
    path('customers/<uuid:uuid>/', AdminCustomerDetailView.as_view(), name='admin-customer-detail'),
    path('customers/<uuid:uuid>/block/', AdminCustomerBlockView.as_view(), name='admin-customer-block'),
    path('audit-logs/', AdminAuditLogView.as_view(), name='admin-audit-logs'),
]
