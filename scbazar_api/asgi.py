import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "scbazar_api.settings")

from django.core.asgi import get_asgi_application

# Initialize Django first
django_asgi_app = get_asgi_application()

from channels.routing import ProtocolTypeRouter, URLRouter
from channels.security.websocket import AllowedHostsOriginValidator
import logging

from users.notification_auth import JwtAuthMiddleware
from users.routing import websocket_urlpatterns

logger = logging.getLogger(__name__)


class TokenAwareOriginValidator:
    """
    WebSocket validator that lets token-authenticated clients skip origin checks.

    Browser connections without a token still go through
    ``AllowedHostsOriginValidator``; the JWT middleware validates the token.
    """

    def __init__(self, inner):
        self.inner = inner

    async def __call__(self, scope, receive, send):
        if scope['type'] != 'websocket':
            return await self.inner(scope, receive, send)

        query_string = scope.get('query_string', b'').decode()
        headers = dict(scope.get('headers', []))
        auth_header = headers.get(b'authorization', b'').decode()

        if 'token=' in query_string or auth_header.startswith('Bearer '):
            logger.debug(f"Token detected in WebSocket connection from {scope.get('client')}, skipping origin validation")
            return await self.inner(scope, receive, send)

        if headers.get(b'origin'):
            return await AllowedHostsOriginValidator(self.inner)(scope, receive, send)

        return await self.inner(scope, receive, send)


application = ProtocolTypeRouter({
    "http": django_asgi_app,
    "websocket": TokenAwareOriginValidator(
        JwtAuthMiddleware(
            URLRouter(websocket_urlpatterns)
        )
    )
})
