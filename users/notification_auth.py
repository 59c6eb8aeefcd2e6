"""
JWT authentication for websocket connections
"""

import logging
from http.cookies import SimpleCookie
from typing import Optional
from urllib.parse import parse_qs

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.db import close_old_connections
from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from rest_framework_simplejwt.tokens import AccessToken
from rest_framework_simplejwt.exceptions import TokenError

from authentication.core.jwt_utils import TokenManager

logger = logging.getLogger(__name__)


@database_sync_to_async
def get_user(token: str):
    """Resolve the user behind an access token, or None"""
    User = get_user_model()
    try:
        access_token = AccessToken(token)
    except TokenError as e:
        logger.warning(f"Websocket token validation failed: {str(e)}")
        return None

    if TokenManager.is_token_blacklisted(access_token.get('jti')):
        return None
    return User.objects.filter(uuid=access_token.get('user_uuid')).first()


def extract_token(scope) -> Optional[str]:
    """Token from ``?token=``, an ``Authorization: Bearer`` header or the auth cookie"""
    query = parse_qs(scope.get('query_string', b'').decode())
    if query.get('token'):
        return query['token'][0]

    headers = dict(scope.get('headers', []))
    auth_header = headers.get(b'authorization', b'').decode()
    if auth_header.startswith('Bearer '):
        return auth_header[7:]

    cookie_header = headers.get(b'cookie', b'').decode()
    if cookie_header:
        cookies = SimpleCookie()
        cookies.load(cookie_header)
        morsel = cookies.get(settings.AUTH_COOKIE_NAME)
        if morsel:
            return morsel.value
    return None


class JwtAuthMiddleware(BaseMiddleware):
    """Populate ``scope['user']`` from a JWT before the consumer runs"""

    async def __call__(self, scope, receive, send):
        await database_sync_to_async(close_old_connections)()

        token = extract_token(scope)
        user = await get_user(token) if token else None
        scope['user'] = user or AnonymousUser()
        if token and user is None:
            logger.info(f"Rejected websocket token from {scope.get('client')}")

        return await super().__call__(scope, receive, send)
