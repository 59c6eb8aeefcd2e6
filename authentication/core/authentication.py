import logging

from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken

from .jwt_utils import TokenManager

logger = logging.getLogger(__name__)


class CookieJWTAuthentication(JWTAuthentication):
    """
    JWT authentication that accepts either an ``Authorization: Bearer`` header
    or the httponly auth cookie set at login.

    A stale or tampered cookie is treated as anonymous so public storefront
    endpoints keep working; a bad header token is still rejected.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is not None:
            raw_token = self.get_raw_token(header)
            if raw_token is None:
                return None
            validated_token = self.get_validated_token(raw_token)
        else:
            raw_token = request.COOKIES.get(settings.AUTH_COOKIE_NAME)
            if not raw_token:
                return None
            try:
                validated_token = self.get_validated_token(raw_token)
            except InvalidToken:
                logger.debug("Ignoring invalid auth cookie")
                return None

        if TokenManager.is_token_blacklisted(validated_token.get('jti')):
            logger.warning("Rejected blacklisted access token")
            if header is None:
                return None
            raise AuthenticationFailed('Token has been revoked')

        return self.get_user(validated_token), validated_token
