from django.urls import path
from .views import AdminSettingsView, AdminUploadView, AdminPageSEOView

urlpatterns = [
    path('settings/', AdminSettingsView.as_view(), name='admin-settings'),
    path('upload/', AdminUploadView.as_view(), name='admin-upload'),
    path('page-seo/', AdminPageSEOView.as_view(), name='admin-page-seo'),
]
