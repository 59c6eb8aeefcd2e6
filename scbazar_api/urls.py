from django.contrib import admin
from django.urls import path, re_path, include
from django.conf import settings
from django.conf.urls.static import static

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi
from drf_spectacular.views import SpectacularAPIView

schema_view = get_schema_view(
    openapi.Info(
        title="Sai Computer Bazar API",
        default_version='v1',
        description="Storefront and admin console API for Sai Computer Bazar",
        contact=openapi.Contact(email="support@saicomputerbazar.com"),
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)


urlpatterns = [
    # Django admin (hidden path)
    path('scb-console/', admin.site.urls),

    # Storefront
    path('api/auth/', include('authentication.urls')),
    path('api/store/', include('store.urls')),
    path('api/account/', include('users.urls')),
    path('api/analytics/', include('analytics.urls')),
    path('api/', include('transactions.urls')),
    path('api/', include('content.urls')),
    path('api/', include('configuration.urls')),

    # Admin console
    path('api/admin/notifications/', include('users.notification_urls')),
    path('api/admin/', include('authentication.urls_admin')),
    path('api/admin/', include('store.urls_admin')),
    path('api/admin/', include('transactions.urls_admin')),
    path('api/admin/', include('content.urls_admin')),
    path('api/admin/', include('analytics.urls_admin')),
    path('api/admin/', include('configuration.urls_admin')),

    # API docs
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    re_path(r'^swagger(?P<format>\.json|\.yaml)$', schema_view.without_ui(cache_timeout=0), name='schema-json'),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
] + static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
