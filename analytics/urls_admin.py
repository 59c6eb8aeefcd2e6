from django.urls import path
from .views_admin import AdminAnalyticsView, AdminDashboardView, AdminSEOAnalyticsView

urlpatterns = [
    path('analytics/', AdminAnalyticsView.as_view(), name='admin-analytics'),
    path('dashboard/', AdminDashboardView.as_view(), name='admin-dashboard'),
    path('seo-analytics/', AdminSEOAnalyticsView.as_view(), name='admin-seo-analytics'),
]
