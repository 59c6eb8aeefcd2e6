from django.urls import re_path

from .consumer import AdminNotificationConsumer

websocket_urlpatterns = [
    re_path(r'^ws/notifications/$', AdminNotificationConsumer.as_asgi()),
]
